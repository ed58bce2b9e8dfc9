"""
Relative-date menus and the task duration policy.

Two menus share the same layout: four fixed short-term choices followed by
the four seasons, starting with the season after the current one.

  slider menu    Now / Next Week / 2 Weeks / Next Month / Next <Season> x4
                 each option carries a day offset from `now`
  follow-up menu Never / Next Week / 2 Weeks / Next Month / Next <Season> x4
                 each option carries a period token resolved by resolve_period()
"""
import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from app.services.seasons import Season, current_season, days_until, next_occurrence, seasons_after


class FollowUpPeriod(str, Enum):
    NEVER = "never"
    NEXT_WEEK = "next-week"
    NEXT_2_WEEKS = "next-2-weeks"
    NEXT_MONTH = "next-month"
    NEXT_SPRING = "next-spring"
    NEXT_SUMMER = "next-summer"
    NEXT_AUTUMN = "next-autumn"
    NEXT_WINTER = "next-winter"

    @property
    def season(self) -> Optional[Season]:
        _, _, name = self.value.partition("-")
        for season in Season:
            if season.value == name:
                return season
        return None


class TaskDuration(str, Enum):
    WEEK = "week"
    MONTH = "month"
    SEASON = "season"


@dataclass(frozen=True)
class DateOption:
    label: str
    relative_days: Optional[int]
    period: Optional[FollowUpPeriod]


LABEL_NOW = "Now"
LABEL_NEVER = "Never"
LABEL_NEXT_WEEK = "Next Week"
LABEL_TWO_WEEKS = "2 Weeks"
LABEL_NEXT_MONTH = "Next Month"

SEASON_LENGTH = timedelta(days=90)

_DURATION_BY_LABEL = {
    LABEL_NOW: TaskDuration.WEEK,
    LABEL_NEXT_WEEK: TaskDuration.WEEK,
    LABEL_TWO_WEEKS: TaskDuration.MONTH,
    LABEL_NEXT_MONTH: TaskDuration.MONTH,
}

_DURATION_BY_PERIOD = {
    FollowUpPeriod.NEXT_WEEK: TaskDuration.WEEK,
    FollowUpPeriod.NEXT_2_WEEKS: TaskDuration.MONTH,
    FollowUpPeriod.NEXT_MONTH: TaskDuration.MONTH,
}


def season_label(season: Season) -> str:
    return f"Next {season.label}"


def season_period(season: Season) -> FollowUpPeriod:
    return FollowUpPeriod(f"next-{season.value}")


def add_months(dt: datetime, months: int) -> datetime:
    """Calendar-month addition; the day is clamped to the end of a shorter month."""
    index = dt.month - 1 + months
    year, month = dt.year + index // 12, index % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


# ── Menus ─────────────────────────────────────────────────────────────────────

def _seasonal_options(now: datetime) -> list[DateOption]:
    return [
        DateOption(season_label(s), days_until(s, now), season_period(s))
        for s in seasons_after(current_season(now))
    ]


def build_slider_options(now: datetime) -> list[DateOption]:
    """Options for the viewed-date slider: day offsets from `now`."""
    month_days = (add_months(now, 1) - now).days
    return [
        DateOption(LABEL_NOW, 0, None),
        DateOption(LABEL_NEXT_WEEK, 7, FollowUpPeriod.NEXT_WEEK),
        DateOption(LABEL_TWO_WEEKS, 14, FollowUpPeriod.NEXT_2_WEEKS),
        DateOption(LABEL_NEXT_MONTH, month_days, FollowUpPeriod.NEXT_MONTH),
    ] + _seasonal_options(now)


def build_followup_options(now: datetime) -> list[DateOption]:
    """Options offered after completing, postponing or canceling a task."""
    return [
        DateOption(LABEL_NEVER, None, FollowUpPeriod.NEVER),
        DateOption(LABEL_NEXT_WEEK, 7, FollowUpPeriod.NEXT_WEEK),
        DateOption(LABEL_TWO_WEEKS, 14, FollowUpPeriod.NEXT_2_WEEKS),
        DateOption(LABEL_NEXT_MONTH, (add_months(now, 1) - now).days, FollowUpPeriod.NEXT_MONTH),
    ] + _seasonal_options(now)


def resolve_period(period: FollowUpPeriod, now: datetime) -> Optional[datetime]:
    """Turn a follow-up token into a concrete start date. `never` resolves to None."""
    period = FollowUpPeriod(period)
    if period is FollowUpPeriod.NEVER:
        return None
    if period is FollowUpPeriod.NEXT_WEEK:
        return now + timedelta(days=7)
    if period is FollowUpPeriod.NEXT_2_WEEKS:
        return now + timedelta(days=14)
    if period is FollowUpPeriod.NEXT_MONTH:
        return add_months(now, 1)
    return next_occurrence(period.season, now)


# ── Duration policy ───────────────────────────────────────────────────────────

def calculate_completion_date(duration: TaskDuration, start: datetime) -> datetime:
    duration = TaskDuration(duration)
    if duration is TaskDuration.WEEK:
        return start + timedelta(days=7)
    if duration is TaskDuration.MONTH:
        return add_months(start, 1)
    return start + SEASON_LENGTH


def default_duration_for_label(label: str) -> TaskDuration:
    """Default duration for a task created while the slider shows `label`."""
    if label in _DURATION_BY_LABEL:
        return _DURATION_BY_LABEL[label]
    if label in {season_label(s) for s in Season}:
        return TaskDuration.SEASON
    raise ValueError(f"Unknown date option label: {label!r}")


def duration_for_period(period: FollowUpPeriod) -> Optional[TaskDuration]:
    period = FollowUpPeriod(period)
    if period is FollowUpPeriod.NEVER:
        return None
    if period.season is not None:
        return TaskDuration.SEASON
    return _DURATION_BY_PERIOD[period]
