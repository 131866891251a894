from sqlmodel.ext.asyncio.session import AsyncSession

from cinema_api.models.hall import Hall, HallCreate


async def upsert_hall(*, session: AsyncSession, hall: HallCreate) -> Hall:
    """
    Insert a hall, or rename the stored one with the same ID, and flush the
    session.
    """
    existing_hall = await session.get(Hall, hall.id)

    if existing_hall:
        existing_hall.name = hall.name
        await session.flush()
        return existing_hall

    db_item = Hall(**hall.model_dump())
    session.add(db_item)
    await session.flush()
    return db_item
