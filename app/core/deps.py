from datetime import datetime, timezone
from typing import Annotated, Optional

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.schemas.task import as_utc
from app.services.location_service import SqlLocationStore, SqlTaskStore


async def get_viewed_date(
    viewed_date: Optional[datetime] = Query(
        None, description="Date cursor the task states are computed for (defaults to now)"
    ),
) -> datetime:
    return as_utc(viewed_date) or datetime.now(timezone.utc)


async def get_now(
    now: Optional[datetime] = Query(None, description="Reference instant (defaults to now)"),
) -> datetime:
    return as_utc(now) or datetime.now(timezone.utc)


async def get_location_store(db: AsyncSession = Depends(get_db)) -> SqlLocationStore:
    return SqlLocationStore(db)


async def get_task_store(db: AsyncSession = Depends(get_db)) -> SqlTaskStore:
    return SqlTaskStore(db)


ViewedDate = Annotated[datetime, Depends(get_viewed_date)]
Now = Annotated[datetime, Depends(get_now)]
Locations = Annotated[SqlLocationStore, Depends(get_location_store)]
Tasks = Annotated[SqlTaskStore, Depends(get_task_store)]
