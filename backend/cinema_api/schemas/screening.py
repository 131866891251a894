import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "ScreeningView",
    "ScreeningWrite",
    "SCREENING_SORT_FIELDS",
]


class ScreeningView(BaseModel):
    """A screening joined with its movie and hall, as returned to clients."""

    id: int
    showtime: dt.datetime
    hall_name: str
    movie_title: str
    director: str | None = None
    cast: str | None = None
    description: str | None = None
    runtime_minutes: int | None = None


# Fields of ScreeningView that the list endpoint may be sorted by
SCREENING_SORT_FIELDS = frozenset(
    {
        "id",
        "showtime",
        "hall_name",
        "movie_title",
        "director",
        "runtime_minutes",
    }
)


# Body of POST and PUT, only built once the raw body has been validated
class ScreeningWrite(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    showtime: dt.datetime
    movie_id: int = Field(alias="movieId")
    hall_id: int = Field(alias="hallId")
