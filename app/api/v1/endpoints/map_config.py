from fastapi import APIRouter

from app.core.config import settings
from app.schemas.location import MapConfigRead

router = APIRouter(prefix="/map", tags=["map"])


@router.get("/config", response_model=MapConfigRead)
async def get_map_config():
    return MapConfigRead(
        center=(settings.MAP_CENTER_LON, settings.MAP_CENTER_LAT),
        zoom=settings.MAP_DEFAULT_ZOOM,
        min_zoom=settings.MAP_MIN_ZOOM,
        max_zoom=settings.MAP_MAX_ZOOM,
    )
