from sqlmodel.ext.asyncio.session import AsyncSession

from cinema_api import crud
from cinema_api.models.hall import Hall, HallCreate
from cinema_api.models.movie import Movie, MovieCreate


async def test_upsert_movie_inserts_new_movie(*, db_session: AsyncSession):
    movie_create = MovieCreate(id=10, title="Hytti nro 6", runtime_minutes=107)

    movie = await crud.upsert_movie(session=db_session, movie=movie_create)

    assert movie.id == 10
    inserted = await db_session.get(Movie, 10)
    assert inserted is not None
    assert inserted.title == "Hytti nro 6"


async def test_upsert_movie_updates_movie(*, db_session: AsyncSession, movie_factory):
    movie: Movie = await movie_factory(title="Old title")

    updated = await crud.upsert_movie(
        session=db_session,
        movie=MovieCreate(id=movie.id, title="New title", director="Someone"),
    )

    assert updated is movie
    assert movie.title == "New title"
    assert movie.director == "Someone"


async def test_upsert_hall_renames_hall(*, db_session: AsyncSession, hall_factory):
    hall: Hall = await hall_factory(name="Sali 1")

    updated = await crud.upsert_hall(
        session=db_session,
        hall=HallCreate(id=hall.id, name="Iso sali"),
    )

    assert updated is hall
    assert hall.name == "Iso sali"


async def test_upsert_hall_inserts_new_hall(*, db_session: AsyncSession):
    hall = await crud.upsert_hall(session=db_session, hall=HallCreate(id=3, name="Studio"))

    assert hall.id == 3
    assert (await db_session.get(Hall, 3)) is not None
