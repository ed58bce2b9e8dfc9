"""
Task lifecycle: complete / postpone / cancel with an optional follow-up task.

A transition is a two-step saga against the task store, awaited in order:

  1. mark the antecedent terminal (status + date_completed)
  2. unless the follow-up period is `never`, insert a successor carrying the
     same title/description, a new start date and the next `tries` count

Expected failures never raise. Every call returns a LifecycleResult (a store
that cannot even load the task is a persistence failure, not "not found"); when
step 2 fails after step 1 succeeded the result says so (antecedent_marked)
so the caller can repair or report the broken lineage.

The legacy toggle (flip date_completed, count tries) is kept for tasks that
predate completion statuses.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from app.schemas.task import CompletionStatus, TaskCreate, TaskDraft, TaskRead
from app.services.date_options import (
    FollowUpPeriod,
    calculate_completion_date,
    default_duration_for_label,
    duration_for_period,
    resolve_period,
)
from app.services.stores import StoreError, TaskStore

logger = logging.getLogger(__name__)


class TaskAction(str, Enum):
    COMPLETE = "complete"
    POSTPONE = "postpone"
    CANCEL = "cancel"


class LifecycleOutcome(str, Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    INVARIANT_VIOLATION = "invariant_violation"
    PERSISTENCE_FAILURE = "persistence_failure"


class InvariantViolation(ValueError):
    """A task would break its own date invariants (completion before start)."""


@dataclass
class LifecycleResult:
    outcome: LifecycleOutcome
    antecedent: Optional[TaskRead] = None
    successor: Optional[TaskDraft] = None
    antecedent_marked: bool = False
    detail: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.outcome is LifecycleOutcome.OK


def status_for_action(action: TaskAction, period: FollowUpPeriod) -> CompletionStatus:
    action = TaskAction(action)
    if action is TaskAction.COMPLETE:
        return CompletionStatus.DONE
    if action is TaskAction.POSTPONE:
        # Postponing to "never" is a cancellation
        if FollowUpPeriod(period) is FollowUpPeriod.NEVER:
            return CompletionStatus.CANCELED
        return CompletionStatus.POSTPONED
    return CompletionStatus.CANCELED


def successor_tries(antecedent: TaskRead, status: CompletionStatus) -> int:
    if status is CompletionStatus.DONE:
        return 0
    return antecedent.tries + 1


def build_successor(
    antecedent: TaskRead, status: CompletionStatus, period: FollowUpPeriod, now: datetime
) -> Optional[TaskDraft]:
    """The follow-up task for `period`, or None when the lineage ends."""
    start = resolve_period(period, now)
    if start is None:
        return None
    return TaskDraft(
        location_id=antecedent.location_id,
        title=antecedent.title,
        description=antecedent.description,
        date_to_start=start,
        date_to_complete=calculate_completion_date(duration_for_period(period), start),
        tries=successor_tries(antecedent, status),
    )


async def apply_action(
    store: TaskStore,
    task_id: int,
    action: TaskAction,
    period: FollowUpPeriod,
    now: Optional[datetime] = None,
) -> LifecycleResult:
    now = now or datetime.now(timezone.utc)
    action, period = TaskAction(action), FollowUpPeriod(period)

    try:
        task = await store.get_task(task_id)
    except StoreError as exc:
        logger.warning("%s: could not load task %d: %s", action.value, task_id, exc)
        return LifecycleResult(LifecycleOutcome.PERSISTENCE_FAILURE, detail="Could not load task")
    if task is None:
        logger.info("%s: task %d not found", action.value, task_id)
        return LifecycleResult(LifecycleOutcome.NOT_FOUND, detail="Task not found")
    if task.is_terminal:
        logger.info(
            "%s: task %d already %s", action.value, task_id, task.completion_status.value
        )
        return LifecycleResult(
            LifecycleOutcome.INVARIANT_VIOLATION,
            antecedent=task,
            detail=f"Task is already {task.completion_status.value}",
        )

    status = status_for_action(action, period)
    if not await store.mark_terminal(task_id, status, now):
        logger.warning("%s: could not mark task %d as %s", action.value, task_id, status.value)
        return LifecycleResult(
            LifecycleOutcome.PERSISTENCE_FAILURE,
            antecedent=task,
            detail="Could not update task",
        )

    marked = task.model_copy(update={"completion_status": status, "date_completed": now})
    successor = build_successor(task, status, period, now)
    if successor is None:
        logger.info("%s: task %d marked %s, lineage ends", action.value, task_id, status.value)
        return LifecycleResult(LifecycleOutcome.OK, antecedent=marked, antecedent_marked=True)

    if not await store.insert_successor(successor):
        logger.error(
            "%s: task %d marked %s but successor insert failed; lineage broken",
            action.value, task_id, status.value,
        )
        return LifecycleResult(
            LifecycleOutcome.PERSISTENCE_FAILURE,
            antecedent=marked,
            successor=successor,
            antecedent_marked=True,
            detail="Task was updated but the follow-up task could not be created",
        )

    logger.info(
        "%s: task %d marked %s, successor starts %s (tries=%d)",
        action.value, task_id, status.value, successor.date_to_start.isoformat(), successor.tries,
    )
    return LifecycleResult(
        LifecycleOutcome.OK, antecedent=marked, successor=successor, antecedent_marked=True
    )


async def complete_task(
    store: TaskStore, task_id: int, period: FollowUpPeriod, now: Optional[datetime] = None
) -> LifecycleResult:
    return await apply_action(store, task_id, TaskAction.COMPLETE, period, now)


async def postpone_task(
    store: TaskStore, task_id: int, period: FollowUpPeriod, now: Optional[datetime] = None
) -> LifecycleResult:
    return await apply_action(store, task_id, TaskAction.POSTPONE, period, now)


async def cancel_task(
    store: TaskStore, task_id: int, period: FollowUpPeriod, now: Optional[datetime] = None
) -> LifecycleResult:
    return await apply_action(store, task_id, TaskAction.CANCEL, period, now)


# ── Legacy toggle ─────────────────────────────────────────────────────────────

async def toggle_completion(
    store: TaskStore, task_id: int, now: Optional[datetime] = None
) -> LifecycleResult:
    """Flip date_completed between None and `now`; tries grows only when completing."""
    now = now or datetime.now(timezone.utc)

    try:
        task = await store.get_task(task_id)
    except StoreError as exc:
        logger.warning("toggle: could not load task %d: %s", task_id, exc)
        return LifecycleResult(LifecycleOutcome.PERSISTENCE_FAILURE, detail="Could not load task")
    if task is None:
        return LifecycleResult(LifecycleOutcome.NOT_FOUND, detail="Task not found")
    if task.is_terminal:
        return LifecycleResult(
            LifecycleOutcome.INVARIANT_VIOLATION,
            antecedent=task,
            detail="Tasks with a completion status cannot be toggled",
        )

    if task.completed:
        completed_at, tries = None, task.tries
    else:
        completed_at, tries = now, task.tries + 1

    if not await store.set_completion(task_id, completed_at, tries):
        logger.warning("toggle: could not update task %d", task_id)
        return LifecycleResult(
            LifecycleOutcome.PERSISTENCE_FAILURE, antecedent=task, detail="Could not update task"
        )

    updated = task.model_copy(update={"date_completed": completed_at, "tries": tries})
    return LifecycleResult(LifecycleOutcome.OK, antecedent=updated, antecedent_marked=True)


# ── Creation ──────────────────────────────────────────────────────────────────

def new_task_draft(location_id: int, data: TaskCreate, now: Optional[datetime] = None) -> TaskDraft:
    """
    Resolve a create request into a storable task.

    The start date defaults to `now`. The completion date is taken as given,
    or computed from `duration`, or from the duration implied by the slider
    label the user was looking at. Raises InvariantViolation when the result
    would complete before it starts, ValueError for an unknown slider label.
    """
    start = data.date_to_start or now or datetime.now(timezone.utc)
    complete = data.date_to_complete
    if complete is None:
        duration = data.duration
        if duration is None and data.slider_label:
            duration = default_duration_for_label(data.slider_label)
        if duration is not None:
            complete = calculate_completion_date(duration, start)
    if complete is not None and complete < start:
        raise InvariantViolation("date_to_complete must not be earlier than date_to_start")
    return TaskDraft(
        location_id=location_id,
        title=data.title,
        description=data.description,
        date_to_start=start,
        date_to_complete=complete,
        tries=0,
    )
