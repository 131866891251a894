import datetime as dt

import pytest
from pytest_mock import MockerFixture
from sqlalchemy import DateTime
from sqlalchemy.exc import OperationalError, ProgrammingError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from cinema_api.crud import screening as screening_crud
from cinema_api.exceptions.store import QueryFailed, StoreUnavailable
from cinema_api.models.hall import Hall
from cinema_api.models.movie import Movie
from cinema_api.models.screening import Screening
from cinema_api.schemas.screening import ScreeningView, ScreeningWrite


async def test_list_screenings_empty(*, db_session: AsyncSession):
    assert await screening_crud.list_screenings(session=db_session) == []


async def test_list_screenings_joins_movie_and_hall(
    *,
    db_session: AsyncSession,
    movie_factory,
    hall_factory,
    screening_factory,
):
    movie: Movie = await movie_factory()
    hall: Hall = await hall_factory()
    screening: Screening = await screening_factory(movie_id=movie.id, hall_id=hall.id)

    screenings = await screening_crud.list_screenings(session=db_session)

    assert screenings == [
        ScreeningView(
            id=screening.id,
            showtime=screening.showtime,
            hall_name=hall.name,
            movie_title=movie.title,
            director=movie.director,
            cast=movie.cast,
            description=movie.description,
            runtime_minutes=movie.runtime_minutes,
        )
    ]


async def test_list_screenings_applies_order_by(
    *,
    db_session: AsyncSession,
    screening_factory,
):
    early = await screening_factory(showtime=dt.datetime(2024, 1, 1, 12, 0))
    late = await screening_factory(showtime=dt.datetime(2024, 1, 2, 12, 0))
    middle = await screening_factory(showtime=dt.datetime(2024, 1, 1, 18, 0))

    screenings = await screening_crud.list_screenings(
        session=db_session,
        order_by="ORDER BY showtime DESC",
    )

    assert [s.id for s in screenings] == [late.id, middle.id, early.id]


async def test_list_screenings_orders_by_joined_fields(
    *,
    db_session: AsyncSession,
    movie_factory,
    screening_factory,
):
    movie_b = await movie_factory(title="B")
    movie_a = await movie_factory(title="A")
    await screening_factory(movie_id=movie_b.id)
    await screening_factory(movie_id=movie_a.id)

    screenings = await screening_crud.list_screenings(
        session=db_session,
        order_by="ORDER BY movie_title",
    )

    assert [s.movie_title for s in screenings] == ["A", "B"]


async def test_list_screenings_skips_screenings_without_hall(
    *,
    db_session: AsyncSession,
    movie_factory,
    screening_factory,
):
    kept = await screening_factory()
    movie = await movie_factory()
    # SQLite does not enforce the foreign key, the join drops the row
    await screening_factory(movie_id=movie.id, hall_id=9999)

    screenings = await screening_crud.list_screenings(session=db_session)

    assert [s.id for s in screenings] == [kept.id]


async def test_get_screening_success(
    *,
    db_session: AsyncSession,
    screening_factory,
):
    screening: Screening = await screening_factory()
    assert screening.id is not None

    view = await screening_crud.get_screening(
        session=db_session,
        screening_id=screening.id,
    )

    assert view is not None
    assert view.id == screening.id
    assert view.showtime == screening.showtime


async def test_get_screening_not_found(*, db_session: AsyncSession):
    view = await screening_crud.get_screening(session=db_session, screening_id=1)

    assert view is None


async def test_create_screening_round_trip(
    *,
    db_session: AsyncSession,
    movie_factory,
    hall_factory,
):
    movie: Movie = await movie_factory()
    hall: Hall = await hall_factory()
    screening_write = ScreeningWrite(
        showtime=dt.datetime(2024, 1, 1, 20, 0),
        movie_id=movie.id,
        hall_id=hall.id,
    )

    created = await screening_crud.create_screening(
        session=db_session,
        screening=screening_write,
    )

    assert created is not None
    fetched = await screening_crud.get_screening(
        session=db_session,
        screening_id=created.id,
    )
    assert fetched == created
    assert fetched.showtime == screening_write.showtime
    assert fetched.movie_title == movie.title
    assert fetched.director == movie.director
    assert fetched.hall_name == hall.name


async def test_create_screening_with_missing_movie(
    *,
    db_session: AsyncSession,
    hall_factory,
    screening_write_factory,
):
    hall: Hall = await hall_factory()
    screening_write = screening_write_factory(movie_id=4242, hall_id=hall.id)

    created = await screening_crud.create_screening(
        session=db_session,
        screening=screening_write,
    )

    assert created is None


async def test_upsert_screening_creates_with_given_id(
    *,
    db_session: AsyncSession,
    movie_factory,
    hall_factory,
    screening_write_factory,
):
    movie: Movie = await movie_factory()
    hall: Hall = await hall_factory()
    screening_write = screening_write_factory(movie_id=movie.id, hall_id=hall.id)

    stored = await screening_crud.upsert_screening(
        session=db_session,
        screening_id=77,
        screening=screening_write,
    )

    assert stored is not None
    assert stored.id == 77
    assert stored.showtime == screening_write.showtime
    assert stored.movie_title == movie.title


async def test_upsert_screening_is_idempotent(
    *,
    db_session: AsyncSession,
    movie_factory,
    hall_factory,
    screening_write_factory,
):
    movie: Movie = await movie_factory()
    hall: Hall = await hall_factory()
    screening_write = screening_write_factory(movie_id=movie.id, hall_id=hall.id)

    first = await screening_crud.upsert_screening(
        session=db_session,
        screening_id=5,
        screening=screening_write,
    )
    second = await screening_crud.upsert_screening(
        session=db_session,
        screening_id=5,
        screening=screening_write,
    )

    assert first == second
    rows = (await db_session.exec(select(Screening))).all()
    assert len(rows) == 1


async def test_upsert_screening_updates_existing(
    *,
    db_session: AsyncSession,
    movie_factory,
    hall_factory,
    screening_factory,
):
    screening: Screening = await screening_factory()
    assert screening.id is not None
    new_movie: Movie = await movie_factory()
    new_hall: Hall = await hall_factory()
    new_showtime = dt.datetime(2025, 6, 1, 21, 15)

    stored = await screening_crud.upsert_screening(
        session=db_session,
        screening_id=screening.id,
        screening=ScreeningWrite(
            showtime=new_showtime,
            movie_id=new_movie.id,
            hall_id=new_hall.id,
        ),
    )

    assert stored is not None
    assert stored.id == screening.id
    assert stored.showtime == new_showtime
    assert stored.movie_title == new_movie.title
    assert stored.hall_name == new_hall.name


async def test_delete_screening_then_not_found(
    *,
    db_session: AsyncSession,
    screening_factory,
):
    screening: Screening = await screening_factory()
    assert screening.id is not None

    first = await screening_crud.delete_screening(
        session=db_session,
        screening_id=screening.id,
    )
    second = await screening_crud.delete_screening(
        session=db_session,
        screening_id=screening.id,
    )

    assert first is screening_crud.DeleteOutcome.DELETED
    assert second is screening_crud.DeleteOutcome.NOT_FOUND
    assert await screening_crud.get_screening(
        session=db_session,
        screening_id=screening.id,
    ) is None


async def test_list_screenings_connection_failure(mocker: MockerFixture):
    session = mocker.AsyncMock()
    session.exec.side_effect = OperationalError(
        "SELECT", {}, Exception("connection refused")
    )

    with pytest.raises(StoreUnavailable):
        await screening_crud.list_screenings(session=session)


async def test_get_screening_rejected_statement(mocker: MockerFixture):
    session = mocker.AsyncMock()
    session.exec.side_effect = ProgrammingError("SELECT", {}, Exception("syntax"))

    with pytest.raises(QueryFailed):
        await screening_crud.get_screening(session=session, screening_id=1)


def test_showtime_column_is_stored_without_zone():
    showtime_type = Screening.__table__.c.showtime.type  # type: ignore[attr-defined]

    assert isinstance(showtime_type, DateTime)
    assert showtime_type.timezone is False


async def test_upsert_screening_advances_postgres_id_sequence(mocker: MockerFixture):
    session = mocker.AsyncMock()
    session.get_bind = mocker.Mock()
    session.get_bind.return_value.dialect.name = "postgresql"
    mocker.patch.object(screening_crud, "get_screening", return_value=None)

    await screening_crud.upsert_screening(
        session=session,
        screening_id=7,
        screening=ScreeningWrite(
            showtime=dt.datetime(2024, 1, 1, 20, 0),
            movie_id=1,
            hall_id=2,
        ),
    )

    assert session.exec.await_count == 2
    sequence_stmt = session.exec.await_args_list[1].args[0]
    sql = str(sequence_stmt)
    assert "setval" in sql
    assert "pg_sequence_last_value" in sql
    assert "MAX(id)" not in sql
    assert sequence_stmt.compile().params == {"screening_id": 7}


async def test_upsert_screening_leaves_sqlite_sequence_alone(
    *,
    db_session: AsyncSession,
    mocker: MockerFixture,
    movie_factory,
    hall_factory,
):
    movie: Movie = await movie_factory()
    hall: Hall = await hall_factory()
    exec_spy = mocker.spy(db_session, "exec")

    await screening_crud.upsert_screening(
        session=db_session,
        screening_id=40,
        screening=ScreeningWrite(
            showtime=dt.datetime(2024, 1, 1, 20, 0),
            movie_id=movie.id,
            hall_id=hall.id,
        ),
    )

    executed = [str(call.args[0]) for call in exec_spy.call_args_list]
    assert not any("setval" in sql for sql in executed)
