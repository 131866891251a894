from sqlmodel.ext.asyncio.session import AsyncSession

from cinema_api.models.movie import Movie, MovieCreate


async def upsert_movie(*, session: AsyncSession, movie: MovieCreate) -> Movie:
    """
    Insert a movie, or overwrite the stored one with the same ID, and flush
    the session.

    Parameters:
        session (AsyncSession): The session to use for the operation.
        movie (MovieCreate): The movie data, including its ID.
    Returns:
        Movie: The Movie object that was either updated or created.
    """
    existing_movie = await session.get(Movie, movie.id)

    if existing_movie:
        for field, value in movie.model_dump().items():
            setattr(existing_movie, field, value)
        await session.flush()
        return existing_movie

    db_item = Movie(**movie.model_dump())
    session.add(db_item)
    await session.flush()
    return db_item
