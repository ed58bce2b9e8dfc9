import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.location import Task
from app.schemas.location import LocationCreate
from app.schemas.task import TaskDraft
from app.services.date_options import FollowUpPeriod
from app.services.location_service import SqlLocationStore, SqlTaskStore
from app.services.stores import StoreError
from app.services.task_lifecycle import LifecycleOutcome, TaskAction, apply_action
from tests.fakes import utc


async def _drop_tasks_table(engine, db: AsyncSession):
    await db.commit()
    async with engine.begin() as conn:
        await conn.run_sync(Task.__table__.drop)


async def test_missing_rows_read_as_none(db: AsyncSession):
    assert await SqlTaskStore(db).get_task(1) is None
    assert await SqlLocationStore(db).get(1) is None
    assert await SqlTaskStore(db).get(1) == []


async def test_stored_task_round_trip(db: AsyncSession):
    location = await SqlLocationStore(db).create(LocationCreate(name="Pond", coordinates=(13.0, 57.0)))
    draft = TaskDraft(
        location_id=location.id,
        title="Skim leaves",
        description="Before the first frost",
        date_to_start=utc(2024, 10, 1),
    )
    task = await SqlTaskStore(db).create(location.id, draft)

    loaded = await SqlTaskStore(db).get_task(task.id)
    assert loaded.title == "Skim leaves"
    assert loaded.description == "Before the first frost"
    assert loaded.date_to_start == utc(2024, 10, 1)


async def test_failed_reads_raise_and_roll_back(engine, db: AsyncSession):
    location = await SqlLocationStore(db).create(LocationCreate(name="Pond", coordinates=(13.0, 57.0)))
    await _drop_tasks_table(engine, db)

    with pytest.raises(StoreError):
        await SqlTaskStore(db).get_task(1)
    assert not db.in_transaction()

    with pytest.raises(StoreError):
        await SqlTaskStore(db).get(location.id)
    with pytest.raises(StoreError):
        await SqlLocationStore(db).get(location.id)
    with pytest.raises(StoreError):
        await SqlLocationStore(db).list()
    assert not db.in_transaction()


async def test_lifecycle_reports_unreadable_store_as_persistence_failure(engine, db: AsyncSession):
    await _drop_tasks_table(engine, db)

    result = await apply_action(SqlTaskStore(db), 1, TaskAction.COMPLETE, FollowUpPeriod.NEXT_WEEK)

    assert result.outcome is LifecycleOutcome.PERSISTENCE_FAILURE
    assert not result.antecedent_marked
