#!/usr/bin/env python3
"""
Print the task tabs of every location for a viewed date.
Locations marked with * have active tasks, as the map would highlight them.

Usage:
    python scripts/run_agenda.py                        # as of now
    python scripts/run_agenda.py --label "Next Spring"  # as the date slider would show it
    python scripts/run_agenda.py --date 2025-03-20
"""
import argparse
import asyncio
import logging
import sys
from datetime import datetime, timedelta, timezone

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s: %(message)s",
    stream=sys.stdout,
)

from app.db.session import AsyncSessionLocal
from app.schemas.task import as_utc
from app.services.date_options import build_slider_options
from app.services.location_service import SqlLocationStore
from app.services.map_sync import format_coordinates, sync_markers
from app.services.task_scheduler import derive_state, partition_tasks

parser = argparse.ArgumentParser(description="Garden task agenda")
group = parser.add_mutually_exclusive_group()
group.add_argument("--label", help="Date slider label, e.g. 'Next Week' or 'Next Autumn'")
group.add_argument("--date", help="ISO date or datetime to view")


class AgendaMap:
    """MapView that remembers markers so the agenda can print them."""

    def __init__(self):
        self.markers: dict[int, tuple[float, float]] = {}
        self.active: dict[int, bool] = {}

    def place_marker(self, location_id, coords):
        self.markers[location_id] = coords

    def remove_marker(self, location_id):
        self.markers.pop(location_id, None)
        self.active.pop(location_id, None)

    def on_click(self, handler):
        pass

    def highlight_active(self, location_id, active):
        self.active[location_id] = active


def _viewed_date(args: argparse.Namespace) -> datetime:
    now = datetime.now(timezone.utc)
    if args.date:
        return as_utc(datetime.fromisoformat(args.date))
    if args.label:
        for option in build_slider_options(now):
            if option.label.lower() == args.label.lower():
                return now + timedelta(days=option.relative_days)
        parser.error(f"unknown label {args.label!r}")
    return now


async def main() -> None:
    args = parser.parse_args()
    viewed = _viewed_date(args)
    print(f"Agenda for {viewed:%Y-%m-%d}\n")

    async with AsyncSessionLocal() as db:
        locations = await SqlLocationStore(db).list()

    view = AgendaMap()
    sync_markers(view, locations, viewed)

    for location in locations:
        tabs = partition_tasks(location.tasks, viewed)
        flag = "*" if view.active[location.id] else " "
        print(f"{flag} {location.name}  {format_coordinates(view.markers[location.id])}")
        for tab_name in ("active", "upcoming", "history"):
            for task in getattr(tabs, tab_name):
                tries = f"  ({task.tries} tries)" if task.tries else ""
                state = derive_state(task, viewed).value
                print(f"  {tab_name:<9} {state:<10} {task.date_to_start:%Y-%m-%d}  {task.title}{tries}")
        print()


if __name__ == "__main__":
    asyncio.run(main())
