from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Annotated, Any

from fastapi import Depends, Header, Request
from sqlmodel.ext.asyncio.session import AsyncSession

from cinema_api.core.db import SessionLocal
from cinema_api.exceptions.http_exceptions import (
    MalformedBodyError,
    NotAcceptableError,
    UnsupportedMediaTypeError,
)

JSON_MEDIA_RANGES = {"application/json", "application/*", "*/*"}


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        yield session


@asynccontextmanager
async def get_db_context() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        yield session


SessionDep = Annotated[AsyncSession, Depends(get_db)]


def accepts_json(accept: str) -> bool:
    """Whether an Accept header admits an application/json response."""
    for media_range in accept.split(","):
        media_type, *params = [part.strip() for part in media_range.split(";")]
        quality = 1.0
        for param in params:
            name, _, value = param.partition("=")
            if name.strip().lower() == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0
        if quality > 0 and media_type.lower() in JSON_MEDIA_RANGES:
            return True
    return False


async def check_accept(accept: Annotated[str | None, Header()] = None) -> None:
    # A missing Accept header means the client takes anything
    if accept and not accepts_json(accept):
        raise NotAcceptableError()


async def check_content(
    content_type: Annotated[str | None, Header()] = None,
) -> None:
    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    if media_type != "application/json":
        raise UnsupportedMediaTypeError()


async def get_json_body(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError as e:
        raise MalformedBodyError() from e


JsonBody = Annotated[Any, Depends(get_json_body)]
