import datetime as dt

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

__all__ = [
    "ScreeningBase",
    "Screening",
]


# Shared properties
class ScreeningBase(SQLModel):
    # Naive UTC, offsets are folded in by inputs.screening
    showtime: dt.datetime = Field(sa_type=DateTime(timezone=False), index=True)
    movie_id: int = Field(foreign_key="movie.id")
    hall_id: int = Field(foreign_key="hall.id")


class Screening(ScreeningBase, table=True):
    # Assigned by the database on POST, by the client on PUT
    id: int | None = Field(default=None, primary_key=True)
