from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from app.schemas.task import TaskRead, as_utc


def _non_blank(name: str) -> str:
    name = name.strip()
    if not name:
        raise ValueError("name must not be blank")
    return name


class LocationCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    coordinates: tuple[float, float]  # (lon, lat)
    info: str = ""

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _non_blank(v)

    @field_validator("coordinates")
    @classmethod
    def check_range(cls, v: tuple[float, float]) -> tuple[float, float]:
        lon, lat = v
        if not -180 <= lon <= 180:
            raise ValueError("longitude must be within [-180, 180]")
        if not -90 <= lat <= 90:
            raise ValueError("latitude must be within [-90, 90]")
        return v


class LocationUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    info: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _non_blank(v)


class LocationRead(BaseModel):
    id: int
    name: str
    coordinates: tuple[float, float]
    info: str
    created_at: Optional[datetime] = None
    tasks: list[TaskRead] = []

    model_config = {"from_attributes": True}

    @model_validator(mode="before")
    @classmethod
    def pack_coordinates(cls, data):
        """Convert ORM object → dict, packing longitude/latitude into a coordinates pair."""
        if hasattr(data, "longitude"):
            return {
                "id": data.id,
                "name": data.name,
                "coordinates": (data.longitude, data.latitude),
                "info": data.info or "",
                "created_at": data.created_at,
                "tasks": [TaskRead.model_validate(t) for t in data.tasks],
            }
        return data

    @field_validator("created_at")
    @classmethod
    def normalize_tz(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)


class MarkerRead(BaseModel):
    id: int
    name: str
    coordinates: tuple[float, float]
    has_active_tasks: bool


class MapConfigRead(BaseModel):
    center: tuple[float, float]
    zoom: float
    min_zoom: float
    max_zoom: float
