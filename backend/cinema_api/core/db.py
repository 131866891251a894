from typing import Any

from loguru import logger
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from cinema_api.core.config import settings

# Import the table models so they are registered on SQLModel.metadata
from cinema_api.models import Hall, Movie, Screening  # noqa: F401


def build_engine(url: str) -> AsyncEngine:
    kwargs: dict[str, Any] = {"pool_pre_ping": True, "echo": settings.DEBUG}
    if make_url(url).get_backend_name() != "sqlite":
        kwargs.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
        )
    return create_async_engine(url, **kwargs)


engine = build_engine(settings.SQLALCHEMY_DATABASE_URI)

SessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    expire_on_commit=False,
)


async def init_db(db_engine: AsyncEngine = engine) -> None:
    """
    Create all tables that do not exist yet. Reference data (movies, halls)
    is loaded separately with scripts/seed-movies-and-halls.py.
    """
    async with db_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database schema is up to date")
