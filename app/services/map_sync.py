"""
Keeps a MapView in step with stored locations.

LocationPicker runs the "add location" flow: enter picking mode, take the
next map click as the new pin's coordinates, submit name/info to the store.
sync_markers places one marker per location and highlights the ones that
have active tasks on the viewed date.

Map clients implement MapView and drive these; scripts/run_agenda.py does the
same with a text-only view.
"""
import logging
from datetime import datetime
from typing import Iterable, Optional

from app.schemas.location import LocationCreate, LocationRead
from app.services.stores import Coordinates, LocationStore, MapView
from app.services.task_scheduler import has_active_tasks

logger = logging.getLogger(__name__)


def format_coordinates(coords: Coordinates) -> str:
    lon, lat = coords
    return f"[{lon:.6f}, {lat:.6f}]"


class LocationPicker:
    def __init__(self, view: MapView):
        self.view = view
        self.picking = False
        self.picked: Optional[Coordinates] = None

    def start(self) -> None:
        self.picking = True
        self.picked = None
        self.view.on_click(self._handle_click)

    def cancel(self) -> None:
        self.picking = False
        self.picked = None
        self.view.on_click(None)

    def _handle_click(self, coords: Coordinates) -> None:
        if not self.picking:
            return
        self.picked = (float(coords[0]), float(coords[1]))
        logger.debug("Picked coordinates %s", format_coordinates(self.picked))

    async def submit(self, store: LocationStore, name: str, info: str = "") -> Optional[LocationRead]:
        """Create the location at the picked coordinates and pin it. None if nothing was picked or the store refused."""
        if self.picked is None:
            return None
        location = await store.create(LocationCreate(name=name, coordinates=self.picked, info=info))
        if location is None:
            return None
        self.view.place_marker(location.id, location.coordinates)
        self.cancel()
        return location


def sync_markers(
    view: MapView,
    locations: Iterable[LocationRead],
    viewed_date: datetime,
    known_ids: Iterable[int] = (),
) -> set[int]:
    """Place and highlight a marker per location, drop markers for ids that disappeared. Returns the ids now shown."""
    shown = set()
    for location in locations:
        view.place_marker(location.id, location.coordinates)
        view.highlight_active(location.id, has_active_tasks(location.tasks, viewed_date))
        shown.add(location.id)
    for stale in set(known_ids) - shown:
        view.remove_marker(stale)
    return shown
