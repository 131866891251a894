from sqlmodel import Field, SQLModel

__all__ = [
    "HallBase",
    "HallCreate",
    "Hall",
]


class HallBase(SQLModel):
    name: str = Field(description="Name of the hall")


class HallCreate(HallBase):
    id: int


class Hall(HallBase, table=True):
    id: int = Field(primary_key=True)
