from fastapi import APIRouter

from app.api.v1.endpoints import calendar, locations, map_config, tasks

api_router = APIRouter()

api_router.include_router(locations.router)
api_router.include_router(tasks.router)
api_router.include_router(calendar.router)
api_router.include_router(map_config.router)
