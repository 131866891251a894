from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cinema_api.api.main import api_router
from cinema_api.core.config import settings
from cinema_api.core.db import engine, init_db
from cinema_api.exceptions.handlers import register_exception_handlers
from cinema_api.logging_.logger import setup_logger

logger = setup_logger("api")


class UTF8JSONResponse(JSONResponse):
    media_type = "application/json; charset=utf-8"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    if settings.CREATE_SCHEMA_ON_STARTUP:
        await init_db()
    logger.info(f"{settings.PROJECT_NAME} started ({settings.ENVIRONMENT})")
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        default_response_class=UTF8JSONResponse,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.API_V1_STR)
    return app


app = create_app()
