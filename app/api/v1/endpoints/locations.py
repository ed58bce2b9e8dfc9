from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from app.core.deps import Locations, Tasks, ViewedDate
from app.schemas.location import LocationCreate, LocationRead, LocationUpdate, MarkerRead
from app.schemas.task import TaskCreate, TaskRead, TaskTab, TaskTabsRead, TaskView
from app.services.task_lifecycle import InvariantViolation, new_task_draft
from app.services.task_scheduler import describe_task, has_active_tasks, partition_tasks

router = APIRouter(prefix="/locations", tags=["locations"])


# ── Helpers ────────────────────────────────────────────────────────────────────


async def _get_location_or_404(locations: Locations, location_id: int) -> LocationRead:
    location = await locations.get(location_id)
    if not location:
        raise HTTPException(status_code=404, detail="Location not found")
    return location


# ── Locations ──────────────────────────────────────────────────────────────────


@router.get("", response_model=list[LocationRead])
async def list_locations(locations: Locations):
    return await locations.list()


@router.post("", response_model=LocationRead, status_code=status.HTTP_201_CREATED)
async def create_location(data: LocationCreate, locations: Locations):
    location = await locations.create(data)
    if location is None:
        raise HTTPException(status_code=503, detail="Could not save location")
    return location


@router.get("/markers", response_model=list[MarkerRead])
async def list_markers(locations: Locations, viewed_date: ViewedDate):
    return [
        MarkerRead(
            id=loc.id,
            name=loc.name,
            coordinates=loc.coordinates,
            has_active_tasks=has_active_tasks(loc.tasks, viewed_date),
        )
        for loc in await locations.list()
    ]


@router.get("/{location_id}", response_model=LocationRead)
async def get_location(location_id: int, locations: Locations):
    return await _get_location_or_404(locations, location_id)


@router.patch("/{location_id}", response_model=LocationRead)
async def update_location(location_id: int, data: LocationUpdate, locations: Locations):
    await _get_location_or_404(locations, location_id)
    if not await locations.update(location_id, data):
        raise HTTPException(status_code=503, detail="Could not update location")
    return await _get_location_or_404(locations, location_id)


# ── Tasks per location ─────────────────────────────────────────────────────────


@router.get("/{location_id}/tasks", response_model=list[TaskView])
async def list_location_tasks(
    location_id: int,
    locations: Locations,
    tasks: Tasks,
    viewed_date: ViewedDate,
    tab: Optional[TaskTab] = Query(None, description="Only tasks in this tab, in tab order"),
):
    await _get_location_or_404(locations, location_id)
    rows = await tasks.get(location_id)
    if tab is not None:
        rows = getattr(partition_tasks(rows, viewed_date), tab.value)
    return [describe_task(t, viewed_date) for t in rows]


@router.get("/{location_id}/tabs", response_model=TaskTabsRead)
async def get_location_tabs(
    location_id: int, locations: Locations, tasks: Tasks, viewed_date: ViewedDate
):
    await _get_location_or_404(locations, location_id)
    tabs = partition_tasks(await tasks.get(location_id), viewed_date)
    return TaskTabsRead(
        viewed_date=viewed_date,
        active=[describe_task(t, viewed_date) for t in tabs.active],
        upcoming=[describe_task(t, viewed_date) for t in tabs.upcoming],
        history=[describe_task(t, viewed_date) for t in tabs.history],
    )


@router.post("/{location_id}/tasks", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_task(location_id: int, data: TaskCreate, locations: Locations, tasks: Tasks):
    await _get_location_or_404(locations, location_id)
    try:
        draft = new_task_draft(location_id, data)
    except InvariantViolation as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    task = await tasks.create(location_id, draft)
    if task is None:
        raise HTTPException(status_code=503, detail="Could not save task")
    return task
