from sqlmodel import Field, SQLModel

__all__ = [
    "MovieBase",
    "MovieCreate",
    "Movie",
]


# Shared properties
class MovieBase(SQLModel):
    title: str
    director: str | None = None
    cast: str | None = None
    description: str | None = None
    runtime_minutes: int | None = None


# Properties to receive on movie creation (used by the seeding script)
class MovieCreate(MovieBase):
    id: int


# Database model, database table inferred from class name
class Movie(MovieBase, table=True):
    id: int = Field(primary_key=True)
