from .hall import upsert_hall
from .movie import upsert_movie
from .screening import (
    DeleteOutcome,
    create_screening,
    delete_screening,
    get_screening,
    list_screenings,
    upsert_screening,
)

__all__ = [
    "DeleteOutcome",
    "create_screening",
    "delete_screening",
    "get_screening",
    "list_screenings",
    "upsert_hall",
    "upsert_movie",
    "upsert_screening",
]
