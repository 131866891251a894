import datetime as dt
import re
from dataclasses import dataclass
from typing import Any

from fastapi import status

from cinema_api.schemas.screening import ScreeningWrite

__all__ = [
    "InvalidArgument",
    "validate_id",
    "validate_screening_body",
]

# Range of the INTEGER id column
ID_MIN = -(2**31)
ID_MAX = 2**31 - 1

# ASCII digits only, no underscores or other Unicode digits
_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class InvalidArgument:
    """A rejected request parameter, carrying the status the client should get."""

    message: str
    status_code: int = status.HTTP_400_BAD_REQUEST


def validate_id(raw: str) -> int | InvalidArgument:
    raw = raw.strip()
    if _ID_PATTERN.fullmatch(raw) is None:
        return InvalidArgument("id must be an integer")
    screening_id = int(raw)
    if not ID_MIN <= screening_id <= ID_MAX:
        return InvalidArgument("id must be an integer")
    return screening_id


def _is_id(value: Any) -> bool:
    # bool is a subclass of int, but true/false are not valid ids
    if not isinstance(value, int) or isinstance(value, bool):
        return False
    return ID_MIN <= value <= ID_MAX


def _parse_showtime(value: Any) -> dt.datetime | None:
    if not isinstance(value, str):
        return None
    try:
        showtime = dt.datetime.fromisoformat(value)
    except ValueError:
        return None
    # Showtimes are stored without a zone, offsets are folded into UTC
    if showtime.tzinfo is not None:
        showtime = showtime.astimezone(dt.timezone.utc).replace(tzinfo=None)
    return showtime


def validate_screening_body(body: Any) -> ScreeningWrite | InvalidArgument:
    """
    Check a decoded POST/PUT body and build the ScreeningWrite it describes.

    Fields are checked in the order showtime, movieId, hallId and the first
    problem found is returned.
    """
    if not isinstance(body, dict):
        return InvalidArgument("body must be a JSON object")

    if body.get("showtime") is None:
        return InvalidArgument("showtime is required")
    showtime = _parse_showtime(body["showtime"])
    if showtime is None:
        return InvalidArgument("showtime must be a datetime string")

    for field in ("movieId", "hallId"):
        if body.get(field) is None:
            return InvalidArgument(f"{field} is required")
        if not _is_id(body[field]):
            return InvalidArgument(f"{field} must be an integer")

    return ScreeningWrite(
        showtime=showtime,
        movie_id=body["movieId"],
        hall_id=body["hallId"],
    )
