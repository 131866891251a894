from fastapi import APIRouter

from cinema_api.api.routes import screenings, utils

api_router = APIRouter()
api_router.include_router(screenings.router)
api_router.include_router(utils.router)
