from fastapi import APIRouter

from app.core.deps import Now
from app.schemas.calendar import DateOptionRead, SeasonBoundaryRead, SeasonRead
from app.services.date_options import (
    DateOption,
    build_followup_options,
    build_slider_options,
    default_duration_for_label,
    duration_for_period,
)
from app.services.seasons import current_season, days_until, next_occurrence, seasons_after

router = APIRouter(prefix="/calendar", tags=["calendar"])


def _option_read(option: DateOption, duration) -> DateOptionRead:
    return DateOptionRead(
        label=option.label,
        relative_days=option.relative_days,
        period=option.period.value if option.period else "now",
        duration=duration.value if duration else None,
    )


@router.get("/season", response_model=SeasonRead)
async def get_season(now: Now):
    season = current_season(now)
    return SeasonRead(
        now=now,
        season=season.value,
        upcoming=[
            SeasonBoundaryRead(
                season=s.value, starts_at=next_occurrence(s, now), days_until=days_until(s, now)
            )
            for s in seasons_after(season)
        ],
    )


@router.get("/slider-options", response_model=list[DateOptionRead])
async def get_slider_options(now: Now):
    """Viewed-date slider entries; `duration` is the default for tasks created under that label."""
    return [_option_read(o, default_duration_for_label(o.label)) for o in build_slider_options(now)]


@router.get("/followup-options", response_model=list[DateOptionRead])
async def get_followup_options(now: Now):
    return [_option_read(o, duration_for_period(o.period)) for o in build_followup_options(now)]
