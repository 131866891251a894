from fastapi import APIRouter
from sqlalchemy import text

from cinema_api.api.deps import SessionDep

router = APIRouter(prefix="/utils", tags=["utils"])


@router.get("/health-check/")
async def health_check(session: SessionDep) -> bool:
    await session.exec(text("SELECT 1"))
    return True
