from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator

from app.services.date_options import FollowUpPeriod, TaskDuration


class CompletionStatus(str, Enum):
    DONE = "done"
    POSTPONED = "postponed"
    CANCELED = "canceled"


class TaskState(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PREVIOUS = "previous"
    COMPLETED = "completed"
    POSTPONED = "postponed"
    CANCELED = "canceled"


class TaskTab(str, Enum):
    ACTIVE = "active"
    UPCOMING = "upcoming"
    HISTORY = "history"


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive timestamps (SQLite and bare query strings drop the offset)."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def split_info(info: str) -> tuple[str, str]:
    title, _, description = (info or "").partition("\n")
    return title, description


def join_info(title: str, description: str) -> str:
    return f"{title}\n{description}"


class TaskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=500)
    description: str = ""
    date_to_start: Optional[datetime] = None
    date_to_complete: Optional[datetime] = None
    # Either an explicit duration or the date-slider label it is derived from
    duration: Optional[TaskDuration] = None
    slider_label: Optional[str] = None

    @field_validator("title")
    @classmethod
    def single_line_title(cls, v: str) -> str:
        if "\n" in v:
            raise ValueError("title must be a single line")
        return v

    @field_validator("date_to_start", "date_to_complete")
    @classmethod
    def normalize_tz(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)

    @model_validator(mode="after")
    def check_dates(self) -> "TaskCreate":
        if (
            self.date_to_start is not None
            and self.date_to_complete is not None
            and self.date_to_complete < self.date_to_start
        ):
            raise ValueError("date_to_complete must not be earlier than date_to_start")
        if self.date_to_complete is not None and (self.duration or self.slider_label):
            raise ValueError("Give either date_to_complete or a duration, not both")
        return self


class TaskDraft(BaseModel):
    """A fully resolved task ready to be inserted by a task store."""

    location_id: int
    title: str
    description: str = ""
    date_to_start: datetime
    date_to_complete: Optional[datetime] = None
    tries: int = Field(default=0, ge=0)

    @property
    def info(self) -> str:
        return join_info(self.title, self.description)


class TaskRead(BaseModel):
    id: int
    location_id: int
    title: str
    description: str
    date_added: Optional[datetime] = None
    date_to_start: datetime
    date_to_complete: Optional[datetime] = None
    date_completed: Optional[datetime] = None
    completion_status: Optional[CompletionStatus] = None
    tries: int = 0

    model_config = {"from_attributes": True}

    @model_validator(mode="before")
    @classmethod
    def split_stored_info(cls, data):
        """Convert ORM object → dict, splitting the stored info column into title/description."""
        if hasattr(data, "info") and hasattr(data, "location_id"):
            title, description = split_info(data.info)
            return {
                "id": data.id,
                "location_id": data.location_id,
                "title": title,
                "description": description,
                "date_added": data.date_added,
                "date_to_start": data.date_to_start,
                "date_to_complete": data.date_to_complete,
                "date_completed": data.date_completed,
                "completion_status": data.completion_status,
                "tries": data.tries or 0,
            }
        return data

    @field_validator("date_added", "date_to_start", "date_to_complete", "date_completed")
    @classmethod
    def normalize_tz(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)

    @property
    def is_terminal(self) -> bool:
        return self.completion_status is not None

    @computed_field
    @property
    def completed(self) -> bool:
        return self.date_completed is not None


class TaskView(TaskRead):
    state: TaskState
    tab: TaskTab


class TaskTabsRead(BaseModel):
    viewed_date: datetime
    active: list[TaskView]
    upcoming: list[TaskView]
    history: list[TaskView]


class TaskActionRequest(BaseModel):
    period: FollowUpPeriod


class LifecycleResultRead(BaseModel):
    outcome: str
    success: bool
    antecedent_marked: bool
    antecedent: Optional[TaskRead] = None
    successor: Optional[TaskDraft] = None
    detail: Optional[str] = None
