"""
Collaborator contracts for the scheduling core.

The core never talks to a database or a map widget directly; it works
against these protocols. SQLAlchemy-backed stores live in
app.services.location_service, map clients implement MapView.

Writes never raise for expected failures: a rejected write comes back as
None / False and is logged by the implementation. Reads return None or []
only when there is nothing to find; a rejected read raises StoreError so the
caller can tell "missing" from "failed".
"""
from datetime import datetime
from typing import Callable, Optional, Protocol

from app.schemas.location import LocationCreate, LocationRead, LocationUpdate
from app.schemas.task import CompletionStatus, TaskDraft, TaskRead

Coordinates = tuple[float, float]  # (lon, lat)
ClickHandler = Callable[[Coordinates], None]


class StoreError(Exception):
    """The backing store rejected a read."""


class LocationStore(Protocol):
    async def list(self) -> list[LocationRead]: ...

    async def get(self, location_id: int) -> Optional[LocationRead]: ...

    async def create(self, data: LocationCreate) -> Optional[LocationRead]: ...

    async def update(self, location_id: int, fields: LocationUpdate) -> bool: ...


class TaskStore(Protocol):
    async def create(self, location_id: int, task: TaskDraft) -> Optional[TaskRead]: ...

    async def get_task(self, task_id: int) -> Optional[TaskRead]: ...

    async def mark_terminal(
        self, task_id: int, status: CompletionStatus, completed_at: datetime
    ) -> bool: ...

    async def insert_successor(self, task: TaskDraft) -> bool: ...

    async def set_completion(
        self, task_id: int, completed_at: Optional[datetime], tries: int
    ) -> bool: ...

    async def get(self, location_id: int) -> list[TaskRead]: ...


class MapView(Protocol):
    def place_marker(self, location_id: int, coords: Coordinates) -> None: ...

    def remove_marker(self, location_id: int) -> None: ...

    def on_click(self, handler: Optional[ClickHandler]) -> None: ...

    def highlight_active(self, location_id: int, active: bool) -> None: ...
