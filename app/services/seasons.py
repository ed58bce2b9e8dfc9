"""
Astronomical season calendar.

Seasons start on fixed, year-agnostic boundaries (northern hemisphere):
spring Mar 20, summer Jun 21, autumn Sep 22, winter Dec 21. Winter wraps
the year end (Dec 21 – Mar 19). All functions are pure and keep the
timezone of the `now` they are given.
"""
import math
from datetime import datetime, timedelta, tzinfo
from enum import Enum
from typing import Optional


class Season(str, Enum):
    SPRING = "spring"
    SUMMER = "summer"
    AUTUMN = "autumn"
    WINTER = "winter"

    @property
    def label(self) -> str:
        return self.value.capitalize()


# ── Boundary table ────────────────────────────────────────────────────────────

SEASON_ORDER: list[Season] = [Season.SPRING, Season.SUMMER, Season.AUTUMN, Season.WINTER]

SEASON_BOUNDARIES: dict[Season, tuple[int, int]] = {
    Season.SPRING: (3, 20),
    Season.SUMMER: (6, 21),
    Season.AUTUMN: (9, 22),
    Season.WINTER: (12, 21),
}

ONE_DAY = timedelta(days=1)


# ── Calendar functions ────────────────────────────────────────────────────────

def current_season(now: datetime) -> Season:
    """Return the season whose [boundary, next boundary) interval contains `now`."""
    month_day = (now.month, now.day)
    # Walk the table backwards: the last boundary already passed this year wins
    for season in reversed(SEASON_ORDER):
        if month_day >= SEASON_BOUNDARIES[season]:
            return season
    # Before Mar 20: still in the winter that began last December
    return Season.WINTER


def next_season(season: Season) -> Season:
    return SEASON_ORDER[(SEASON_ORDER.index(season) + 1) % len(SEASON_ORDER)]


def seasons_after(season: Season) -> list[Season]:
    """All four seasons in calendar order, starting with the one after `season`."""
    start = SEASON_ORDER.index(season)
    return [SEASON_ORDER[(start + i) % len(SEASON_ORDER)] for i in range(1, len(SEASON_ORDER) + 1)]


def season_start_date(season: Season, year: int, tz: Optional[tzinfo] = None) -> datetime:
    month, day = SEASON_BOUNDARIES[Season(season)]
    return datetime(year, month, day, tzinfo=tz)


def next_occurrence(season: Season, now: datetime) -> datetime:
    """
    Start of the next `season` strictly after `now`.

    If this year's boundary has been reached (or is exactly `now`), the
    boundary of the following year is returned.
    """
    target = season_start_date(season, now.year, now.tzinfo)
    if target <= now:
        target = season_start_date(season, now.year + 1, now.tzinfo)
    return target


def days_until(season: Season, now: datetime) -> int:
    return math.ceil((next_occurrence(season, now) - now) / ONE_DAY)
