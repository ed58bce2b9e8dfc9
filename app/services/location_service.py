"""
SQLAlchemy-backed location and task stores.

Both stores wrap a single AsyncSession. Database errors are logged and the
session is rolled back. Failed writes return None / False, failed reads raise
StoreError.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.location import Location, Task
from app.schemas.location import LocationCreate, LocationRead, LocationUpdate
from app.schemas.task import CompletionStatus, TaskDraft, TaskRead
from app.services.stores import StoreError

logger = logging.getLogger(__name__)


class SqlLocationStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _fetch(self, location_id: int) -> Optional[Location]:
        return await self.db.scalar(
            select(Location)
            .options(selectinload(Location.tasks))
            .where(Location.id == location_id)
            .execution_options(populate_existing=True)
        )

    async def get(self, location_id: int) -> Optional[LocationRead]:
        try:
            location = await self._fetch(location_id)
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("Error fetching location %d: %s", location_id, exc)
            raise StoreError(f"Could not load location {location_id}") from exc
        return LocationRead.model_validate(location) if location else None

    async def create(self, data: LocationCreate) -> Optional[LocationRead]:
        lon, lat = data.coordinates
        location = Location(name=data.name, longitude=lon, latitude=lat, info=data.info)
        try:
            self.db.add(location)
            await self.db.commit()
            created = await self._fetch(location.id)
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("Error adding location %r: %s", data.name, exc)
            return None
        logger.info("Location %d created at [%f, %f]", created.id, lon, lat)
        return LocationRead.model_validate(created)

    async def update(self, location_id: int, fields: LocationUpdate) -> bool:
        values = fields.model_dump(exclude_unset=True, exclude_none=True)
        try:
            location = await self.db.scalar(select(Location).where(Location.id == location_id))
            if location is None:
                return False
            for field, value in values.items():
                setattr(location, field, value)
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("Error updating location %d: %s", location_id, exc)
            return False
        return True

    async def list(self) -> list[LocationRead]:
        try:
            result = await self.db.execute(
                select(Location)
                .options(selectinload(Location.tasks))
                .order_by(Location.id)
                .execution_options(populate_existing=True)
            )
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("Error fetching locations: %s", exc)
            raise StoreError("Could not load locations") from exc
        return [LocationRead.model_validate(loc) for loc in result.scalars().all()]


class SqlTaskStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _insert(self, task: TaskDraft) -> Task:
        row = Task(
            location_id=task.location_id,
            info=task.info,
            date_to_start=task.date_to_start,
            date_to_complete=task.date_to_complete,
            tries=task.tries,
        )
        self.db.add(row)
        await self.db.commit()
        await self.db.refresh(row)
        return row

    async def create(self, location_id: int, task: TaskDraft) -> Optional[TaskRead]:
        task = task.model_copy(update={"location_id": location_id})
        try:
            exists = await self.db.scalar(select(Location.id).where(Location.id == location_id))
            if exists is None:
                logger.info("Cannot add task: location %d not found", location_id)
                return None
            row = await self._insert(task)
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("Error adding task to location %d: %s", location_id, exc)
            return None
        return TaskRead.model_validate(row)

    async def get_task(self, task_id: int) -> Optional[TaskRead]:
        try:
            row = await self.db.scalar(
                select(Task).where(Task.id == task_id).execution_options(populate_existing=True)
            )
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("Error fetching task %d: %s", task_id, exc)
            raise StoreError(f"Could not load task {task_id}") from exc
        return TaskRead.model_validate(row) if row else None

    async def mark_terminal(
        self, task_id: int, status: CompletionStatus, completed_at: datetime
    ) -> bool:
        # Only pending rows are touched: a completion status is never overwritten
        stmt = (
            update(Task)
            .where(Task.id == task_id, Task.completion_status.is_(None))
            .values(completion_status=CompletionStatus(status).value, date_completed=completed_at)
        )
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("Error marking task %d as %s: %s", task_id, status, exc)
            return False
        return result.rowcount == 1

    async def insert_successor(self, task: TaskDraft) -> bool:
        try:
            row = await self._insert(task)
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("Error adding successor task to location %d: %s", task.location_id, exc)
            return False
        logger.debug("Successor task %d created (tries=%d)", row.id, row.tries)
        return True

    async def set_completion(
        self, task_id: int, completed_at: Optional[datetime], tries: int
    ) -> bool:
        stmt = (
            update(Task)
            .where(Task.id == task_id)
            .values(date_completed=completed_at, tries=tries)
        )
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("Error updating task %d: %s", task_id, exc)
            return False
        return result.rowcount == 1

    async def get(self, location_id: int) -> list[TaskRead]:
        try:
            result = await self.db.execute(
                select(Task)
                .where(Task.location_id == location_id)
                .order_by(Task.id)
                .execution_options(populate_existing=True)
            )
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("Error fetching tasks for location %d: %s", location_id, exc)
            raise StoreError(f"Could not load tasks for location {location_id}") from exc
        return [TaskRead.model_validate(t) for t in result.scalars().all()]
