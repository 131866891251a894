from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any

from psycopg.errors import ForeignKeyViolation
from sqlalchemy import delete, text
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import (
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from cinema_api.converters import screening as screening_converters
from cinema_api.exceptions.store import QueryFailed, ReferenceViolation, StoreUnavailable
from cinema_api.models.hall import Hall
from cinema_api.models.movie import Movie
from cinema_api.models.screening import Screening
from cinema_api.schemas.screening import ScreeningView, ScreeningWrite

# Move the serial sequence up to a client chosen ID so later inserts do not
# collide with it. The sequence only ever moves forward.
_ADVANCE_ID_SEQUENCE = text(
    "SELECT setval(CAST(seq AS regclass), CAST(:screening_id AS bigint)) "
    "FROM (SELECT pg_get_serial_sequence('screening', 'id') AS seq) AS s "
    "WHERE CAST(:screening_id AS bigint) > "
    "COALESCE(pg_sequence_last_value(CAST(seq AS regclass)), 0)"
)

# Dialects with a native INSERT ... ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class DeleteOutcome(str, Enum):
    DELETED = "deleted"
    NOT_FOUND = "not_found"


@asynccontextmanager
async def _store_errors(operation: str) -> AsyncIterator[None]:
    try:
        yield
    except IntegrityError as e:
        if isinstance(e.orig, ForeignKeyViolation):
            raise ReferenceViolation(f"Could not {operation}: {e.orig}") from e
        raise QueryFailed(f"Could not {operation}: {e.orig}") from e
    except (
        OperationalError,
        InterfaceError,
        DisconnectionError,
        PoolTimeoutError,
        OSError,
    ) as e:
        raise StoreUnavailable(f"Could not {operation}: {e}") from e
    except SQLAlchemyError as e:
        raise QueryFailed(f"Could not {operation}: {e}") from e


def _screening_view_stmt():
    return (
        select(
            col(Screening.id).label("id"),
            col(Screening.showtime).label("showtime"),
            col(Hall.name).label("hall_name"),
            col(Movie.title).label("movie_title"),
            col(Movie.director).label("director"),
            col(Movie.cast).label("cast"),
            col(Movie.description).label("description"),
            col(Movie.runtime_minutes).label("runtime_minutes"),
        )
        .select_from(Screening)
        .join(Movie, col(Movie.id) == Screening.movie_id)
        .join(Hall, col(Hall.id) == Screening.hall_id)
    )


async def list_screenings(
    *,
    session: AsyncSession,
    order_by: str = "",
) -> list[ScreeningView]:
    """
    Get all screenings joined with their movie and hall.

    Parameters:
        session (AsyncSession): The session to use.
        order_by (str): An ORDER BY clause built by inputs.sort.parse_sort, or
            an empty string to keep the order the database returns.
    Returns:
        list[ScreeningView]: Every screening whose movie and hall exist.
    Raises:
        StoreUnavailable: If the database cannot be reached.
        QueryFailed: If the database rejects the query.
    """
    stmt = _screening_view_stmt()
    if order_by:
        stmt = stmt.order_by(text(order_by.removeprefix("ORDER BY ")))

    async with _store_errors("list screenings"):
        result = await session.exec(stmt)
        rows = result.all()
    return [screening_converters.to_view(row) for row in rows]


async def get_screening(
    *,
    session: AsyncSession,
    screening_id: int,
) -> ScreeningView | None:
    """
    Get a single screening joined with its movie and hall.

    Returns:
        ScreeningView | None: The screening, or None if there is no screening
        with that ID (or its movie or hall is missing).
    """
    stmt = _screening_view_stmt().where(col(Screening.id) == screening_id)

    async with _store_errors(f"get screening {screening_id}"):
        result = await session.exec(stmt)
        row = result.one_or_none()
    if row is None:
        return None
    return screening_converters.to_view(row)


async def create_screening(
    *,
    session: AsyncSession,
    screening: ScreeningWrite,
) -> ScreeningView | None:
    """
    Insert a new screening, letting the database assign its ID, and return
    it as seen through the join. The session is flushed, not committed.

    Returns:
        ScreeningView | None: The new screening, or None if the join drops it
        because its movie or hall does not exist.
    Raises:
        ReferenceViolation: If the database enforces the foreign keys and the
            movie or hall does not exist.
    """
    db_obj = Screening(
        showtime=screening.showtime,
        movie_id=screening.movie_id,
        hall_id=screening.hall_id,
    )
    async with _store_errors("create screening"):
        session.add(db_obj)
        await session.flush()
    assert db_obj.id is not None
    return await get_screening(session=session, screening_id=db_obj.id)


async def upsert_screening(
    *,
    session: AsyncSession,
    screening_id: int,
    screening: ScreeningWrite,
) -> ScreeningView | None:
    """
    Store the screening under the given ID, overwriting an existing one, with
    a single INSERT ... ON CONFLICT (id) DO UPDATE statement. Running it twice
    with the same arguments leaves the same row behind.

    Returns:
        ScreeningView | None: The stored screening, or None if the join drops
        it because its movie or hall does not exist.
    """
    dialect = session.get_bind().dialect.name
    insert_factory = _UPSERT_INSERTS.get(dialect)
    if insert_factory is None:
        raise QueryFailed(f"Upserting screenings is not supported on {dialect}")

    values: dict[str, Any] = {
        "id": screening_id,
        "showtime": screening.showtime,
        "movie_id": screening.movie_id,
        "hall_id": screening.hall_id,
    }
    stmt = insert_factory(Screening.__table__).values(**values)  # type: ignore[attr-defined]
    stmt = stmt.on_conflict_do_update(
        index_elements=["id"],
        set_={
            "showtime": stmt.excluded.showtime,
            "movie_id": stmt.excluded.movie_id,
            "hall_id": stmt.excluded.hall_id,
        },
    )

    async with _store_errors(f"upsert screening {screening_id}"):
        await session.exec(stmt)
        if dialect == "postgresql":
            await session.exec(
                _ADVANCE_ID_SEQUENCE.bindparams(screening_id=screening_id)
            )
    return await get_screening(session=session, screening_id=screening_id)


async def delete_screening(
    *,
    session: AsyncSession,
    screening_id: int,
) -> DeleteOutcome:
    """
    Delete a screening by its ID. The session is flushed, not committed.

    Returns:
        DeleteOutcome: DELETED if a row was removed, NOT_FOUND otherwise.
    """
    stmt = delete(Screening).where(col(Screening.id) == screening_id)

    async with _store_errors(f"delete screening {screening_id}"):
        result = await session.exec(stmt)
    if result.rowcount == 0:
        return DeleteOutcome.NOT_FOUND
    return DeleteOutcome.DELETED
