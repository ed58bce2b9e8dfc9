"""
Task state derivation and tab filtering for a viewed date.

The state of a task is a pure function of the stored record and the date the
user is looking at. Precedence, highest first:

  done -> completed, postponed -> postponed, canceled -> canceled
  pending and past its completion date -> previous (overdue, outcome unknown)
  pending and started by the viewed date -> active
  anything else -> inactive (not startable yet)

`previous` is never stored; it stays "unknown" until someone acts on the task.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from app.schemas.task import CompletionStatus, TaskRead, TaskState, TaskTab, TaskView, as_utc

_TERMINAL_STATES = {
    CompletionStatus.DONE: TaskState.COMPLETED,
    CompletionStatus.POSTPONED: TaskState.POSTPONED,
    CompletionStatus.CANCELED: TaskState.CANCELED,
}

_TAB_BY_STATE = {
    TaskState.ACTIVE: TaskTab.ACTIVE,
    TaskState.INACTIVE: TaskTab.UPCOMING,
    TaskState.PREVIOUS: TaskTab.HISTORY,
    TaskState.COMPLETED: TaskTab.HISTORY,
    TaskState.POSTPONED: TaskTab.HISTORY,
    TaskState.CANCELED: TaskTab.HISTORY,
}


@dataclass
class TaskTabs:
    active: list[TaskRead] = field(default_factory=list)
    upcoming: list[TaskRead] = field(default_factory=list)
    history: list[TaskRead] = field(default_factory=list)


def derive_state(task: TaskRead, viewed_date: datetime) -> TaskState:
    viewed_date = as_utc(viewed_date)
    if task.completion_status is not None:
        return _TERMINAL_STATES[CompletionStatus(task.completion_status)]
    if task.date_to_complete is not None and task.date_to_complete < viewed_date:
        return TaskState.PREVIOUS
    if task.date_to_start <= viewed_date:
        return TaskState.ACTIVE
    return TaskState.INACTIVE


def tab_for_state(state: TaskState) -> TaskTab:
    return _TAB_BY_STATE[state]


def describe_task(task: TaskRead, viewed_date: datetime) -> TaskView:
    state = derive_state(task, viewed_date)
    return TaskView(**task.model_dump(), state=state, tab=tab_for_state(state))


# ── Sorting ───────────────────────────────────────────────────────────────────

def _history_time(task: TaskRead) -> datetime:
    return task.date_completed or task.date_to_complete or task.date_to_start


def _by_id(tasks: Iterable[TaskRead]) -> list[TaskRead]:
    return sorted(tasks, key=lambda t: t.id)


def sort_upcoming(tasks: Iterable[TaskRead]) -> list[TaskRead]:
    """Earliest start first; equal starts keep id order."""
    return sorted(_by_id(tasks), key=lambda t: t.date_to_start)


def sort_history(tasks: Iterable[TaskRead]) -> list[TaskRead]:
    """Most recent outcome first; equal timestamps keep id order (reverse sort is stable)."""
    return sorted(_by_id(tasks), key=_history_time, reverse=True)


# ── Tabs ──────────────────────────────────────────────────────────────────────

def partition_tasks(tasks: Iterable[TaskRead], viewed_date: datetime) -> TaskTabs:
    """Split tasks into the three tabs; every task lands in exactly one."""
    viewed_date = as_utc(viewed_date)
    buckets: dict[TaskTab, list[TaskRead]] = {tab: [] for tab in TaskTab}
    for task in tasks:
        buckets[tab_for_state(derive_state(task, viewed_date))].append(task)
    return TaskTabs(
        active=_by_id(buckets[TaskTab.ACTIVE]),
        upcoming=sort_upcoming(buckets[TaskTab.UPCOMING]),
        history=sort_history(buckets[TaskTab.HISTORY]),
    )


def active_tasks(tasks: Iterable[TaskRead], viewed_date: datetime) -> list[TaskRead]:
    return partition_tasks(tasks, viewed_date).active


def upcoming_tasks(tasks: Iterable[TaskRead], viewed_date: datetime) -> list[TaskRead]:
    return partition_tasks(tasks, viewed_date).upcoming


def history_tasks(tasks: Iterable[TaskRead], viewed_date: datetime) -> list[TaskRead]:
    return partition_tasks(tasks, viewed_date).history


def has_active_tasks(tasks: Iterable[TaskRead], viewed_date: datetime) -> bool:
    """Drives marker highlighting on the map."""
    return any(derive_state(t, viewed_date) is TaskState.ACTIVE for t in tasks)
