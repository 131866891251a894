from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from loguru import logger

from .base import AppError


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        logger.warning(
            f"{exc.status_code} Error on {request.method} {request.url.path}: {exc.detail}"
        )
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.opt(exception=exc).error(
            f"Unhandled error on {request.method} {request.url.path}"
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "An unexpected error occurred."},
        )
