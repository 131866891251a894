import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from cinema_api.core.config import settings
from cinema_api.crud import screening as screenings_crud
from cinema_api.exceptions.base import AppError
from cinema_api.exceptions.screening_exceptions import (
    InvalidScreeningInputError,
    ScreeningNotFoundError,
    ScreeningReferenceError,
    StoreError,
)
from cinema_api.exceptions.store import ReferenceViolation, StoreFailure
from cinema_api.inputs.screening import (
    InvalidArgument,
    validate_id,
    validate_screening_body,
)
from cinema_api.inputs.sort import parse_sort
from cinema_api.schemas.screening import (
    SCREENING_SORT_FIELDS,
    ScreeningView,
    ScreeningWrite,
)


@asynccontextmanager
async def _store_scope(
    session: AsyncSession,
    operation: str,
    screening: ScreeningWrite | None = None,
) -> AsyncIterator[None]:
    """
    Run the enclosed database work under the per-request deadline. On any
    failure the session is rolled back and the error is turned into an AppError.
    """
    try:
        async with asyncio.timeout(settings.STORE_TIMEOUT_SECONDS):
            yield
    except AppError:
        await session.rollback()
        raise
    except ReferenceViolation as e:
        await session.rollback()
        assert screening is not None
        raise ScreeningReferenceError(screening.movie_id, screening.hall_id) from e
    except TimeoutError as e:
        # The connection is stuck, drop it instead of waiting on a rollback
        await session.invalidate()
        logger.error(
            f"Gave up trying to {operation} after {settings.STORE_TIMEOUT_SECONDS}s"
        )
        raise StoreError from e
    except (StoreFailure, SQLAlchemyError) as e:
        await session.rollback()
        logger.exception(f"Store failure while trying to {operation}: {e}")
        raise StoreError from e


def _screening_id(raw_id: str) -> int:
    result = validate_id(raw_id)
    if isinstance(result, InvalidArgument):
        raise InvalidScreeningInputError(result.message, result.status_code)
    return result


def _screening_write(body: Any) -> ScreeningWrite:
    result = validate_screening_body(body)
    if isinstance(result, InvalidArgument):
        raise InvalidScreeningInputError(result.message, result.status_code)
    return result


async def list_screenings(
    *,
    session: AsyncSession,
    sort: str | None = None,
) -> list[ScreeningView]:
    """
    Get all screenings, ordered by the fields named in the sort query.

    Parameters:
        session (AsyncSession): Database session.
        sort (str | None): Comma separated field names, ``-`` prefix for
            descending. Names that are not sortable are ignored.
    Returns:
        list[ScreeningView]: All screenings, possibly empty.
    Raises:
        StoreError: If the database fails or does not answer in time.
    """
    order_by = parse_sort(sort, SCREENING_SORT_FIELDS)
    logger.debug(f"Listing screenings with sort={sort!r} -> {order_by!r}")
    async with _store_scope(session, "list screenings"):
        return await screenings_crud.list_screenings(session=session, order_by=order_by)


async def get_screening(*, session: AsyncSession, raw_id: str) -> ScreeningView:
    """
    Get a screening by its ID.

    Raises:
        InvalidScreeningInputError: If the ID is not an integer.
        ScreeningNotFoundError: If there is no screening with that ID.
        StoreError: If the database fails or does not answer in time.
    """
    screening_id = _screening_id(raw_id)
    async with _store_scope(session, f"get screening {screening_id}"):
        screening = await screenings_crud.get_screening(
            session=session,
            screening_id=screening_id,
        )
    if screening is None:
        raise ScreeningNotFoundError(screening_id)
    return screening


async def create_screening(*, session: AsyncSession, body: Any) -> ScreeningView:
    """
    Create a screening from a decoded request body. The database assigns the ID.

    Raises:
        InvalidScreeningInputError: If a body field is missing or has the wrong type.
        ScreeningReferenceError: If the movie or hall does not exist.
        StoreError: If the database fails or does not answer in time.
    """
    screening_write = _screening_write(body)
    async with _store_scope(session, "create screening", screening_write):
        screening = await screenings_crud.create_screening(
            session=session,
            screening=screening_write,
        )
        if screening is None:
            raise ScreeningReferenceError(
                screening_write.movie_id, screening_write.hall_id
            )
        await session.commit()
    logger.info(f"Created screening {screening.id}")
    return screening


async def upsert_screening(
    *,
    session: AsyncSession,
    raw_id: str,
    body: Any,
) -> ScreeningView:
    """
    Store a screening under the given ID, creating it if it does not exist yet.

    Raises:
        InvalidScreeningInputError: If the ID or a body field is invalid.
        ScreeningReferenceError: If the movie or hall does not exist.
        StoreError: If the database fails or does not answer in time.
    """
    screening_id = _screening_id(raw_id)
    screening_write = _screening_write(body)
    async with _store_scope(
        session, f"upsert screening {screening_id}", screening_write
    ):
        screening = await screenings_crud.upsert_screening(
            session=session,
            screening_id=screening_id,
            screening=screening_write,
        )
        if screening is None:
            raise ScreeningReferenceError(
                screening_write.movie_id, screening_write.hall_id
            )
        await session.commit()
    logger.info(f"Stored screening {screening_id}")
    return screening


async def delete_screening(*, session: AsyncSession, raw_id: str) -> None:
    """
    Delete a screening by its ID.

    Raises:
        InvalidScreeningInputError: If the ID is not an integer.
        ScreeningNotFoundError: If there is no screening with that ID.
        StoreError: If the database fails or does not answer in time.
    """
    screening_id = _screening_id(raw_id)
    async with _store_scope(session, f"delete screening {screening_id}"):
        outcome = await screenings_crud.delete_screening(
            session=session,
            screening_id=screening_id,
        )
        await session.commit()
    if outcome is screenings_crud.DeleteOutcome.NOT_FOUND:
        raise ScreeningNotFoundError(screening_id)
    logger.info(f"Deleted screening {screening_id}")
