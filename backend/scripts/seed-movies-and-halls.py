import asyncio
from pathlib import Path

import yaml
from loguru import logger

from cinema_api import crud
from cinema_api.api.deps import get_db_context
from cinema_api.core.db import init_db
from cinema_api.models import HallCreate, MovieCreate

script_dir = Path(__file__).resolve().parent
data_dir = script_dir.parent / "data"

movies_yaml_path = data_dir / "movies.yaml"
halls_yaml_path = data_dir / "halls.yaml"


def load_yaml_data(file_path: Path) -> list[dict]:
    with open(file_path, encoding="utf-8") as file:
        return yaml.safe_load(file)


async def seed_movies_and_halls() -> None:
    await init_db()

    async with get_db_context() as session:
        for hall in load_yaml_data(halls_yaml_path):
            hall_create = HallCreate.model_validate(hall)
            logger.info(f"Seeding hall: {hall_create.name}")
            await crud.upsert_hall(session=session, hall=hall_create)

        for movie in load_yaml_data(movies_yaml_path):
            movie_create = MovieCreate.model_validate(movie)
            logger.info(f"Seeding movie: {movie_create.title}")
            await crud.upsert_movie(session=session, movie=movie_create)

        await session.commit()


if __name__ == "__main__":
    asyncio.run(seed_movies_and_halls())
