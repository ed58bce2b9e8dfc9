from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class SeasonBoundaryRead(BaseModel):
    season: str
    starts_at: datetime
    days_until: int


class SeasonRead(BaseModel):
    now: datetime
    season: str
    upcoming: list[SeasonBoundaryRead]


class DateOptionRead(BaseModel):
    label: str
    relative_days: Optional[int]
    period: str
    duration: Optional[str] = None
