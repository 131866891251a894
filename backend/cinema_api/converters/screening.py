from typing import Any

from sqlalchemy.engine import Row

from cinema_api.schemas.screening import ScreeningView


def to_view(row: Row[Any]) -> ScreeningView:
    """
    Convert a row of the screening/movie/hall join to a ScreeningView.

    Raises:
        ValidationError: If the row does not match the ScreeningView schema.
    """
    return ScreeningView.model_validate(row._asdict())
