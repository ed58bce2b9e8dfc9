from datetime import timedelta

import pytest

from app.schemas.task import CompletionStatus, TaskCreate
from app.services.date_options import FollowUpPeriod, TaskDuration
from app.services.task_lifecycle import (
    InvariantViolation,
    LifecycleOutcome,
    TaskAction,
    apply_action,
    cancel_task,
    complete_task,
    new_task_draft,
    postpone_task,
    status_for_action,
    toggle_completion,
)
from tests.fakes import FakeTaskStore, make_task, utc

NOW = utc(2024, 10, 17, 9)


@pytest.fixture
def store():
    return FakeTaskStore([make_task(1, start=utc(2024, 10, 1), complete=utc(2024, 10, 8), tries=3)])


def test_status_for_action():
    assert status_for_action(TaskAction.COMPLETE, FollowUpPeriod.NEVER) is CompletionStatus.DONE
    assert status_for_action(TaskAction.POSTPONE, FollowUpPeriod.NEXT_WEEK) is CompletionStatus.POSTPONED
    assert status_for_action(TaskAction.POSTPONE, FollowUpPeriod.NEVER) is CompletionStatus.CANCELED
    assert status_for_action(TaskAction.CANCEL, FollowUpPeriod.NEXT_MONTH) is CompletionStatus.CANCELED


async def test_complete_spawns_successor_with_reset_tries(store):
    result = await complete_task(store, 1, FollowUpPeriod.NEXT_WEEK, now=NOW)

    assert result.success
    assert store.calls == ["get_task", "mark_terminal", "insert_successor"]
    assert store.tasks[1].completion_status is CompletionStatus.DONE
    assert store.tasks[1].date_completed == NOW
    assert result.antecedent.completion_status is CompletionStatus.DONE

    successor = result.successor
    assert successor.title == "Prune roses"
    assert successor.description == "Cut back to outward-facing buds"
    assert successor.date_to_start == NOW + timedelta(days=7)
    assert successor.date_to_complete == NOW + timedelta(days=14)
    assert successor.tries == 0
    assert store.tasks[2].tries == 0


async def test_postpone_increments_tries(store):
    result = await postpone_task(store, 1, FollowUpPeriod.NEXT_MONTH, now=NOW)

    assert result.success
    assert store.tasks[1].completion_status is CompletionStatus.POSTPONED
    assert result.successor.date_to_start == utc(2024, 11, 17, 9)
    assert result.successor.date_to_complete == utc(2024, 12, 17, 9)
    assert result.successor.tries == 4


async def test_postpone_to_never_cancels_without_successor(store):
    result = await postpone_task(store, 1, FollowUpPeriod.NEVER, now=NOW)

    assert result.success
    assert result.successor is None
    assert store.tasks[1].completion_status is CompletionStatus.CANCELED
    assert "insert_successor" not in store.calls
    assert list(store.tasks) == [1]


async def test_cancel_with_seasonal_followup(store):
    result = await cancel_task(store, 1, FollowUpPeriod.NEXT_SPRING, now=NOW)

    assert result.success
    assert store.tasks[1].completion_status is CompletionStatus.CANCELED
    assert result.successor.date_to_start == utc(2025, 3, 20)
    assert result.successor.date_to_complete == utc(2025, 3, 20) + timedelta(days=90)
    assert result.successor.tries == 4


async def test_missing_task_is_not_found(store):
    result = await apply_action(store, 99, TaskAction.COMPLETE, FollowUpPeriod.NEXT_WEEK, now=NOW)

    assert result.outcome is LifecycleOutcome.NOT_FOUND
    assert not result.success
    assert store.calls == ["get_task"]


async def test_failed_read_is_persistence_failure_not_missing(store):
    store.fail_read = True
    result = await complete_task(store, 1, FollowUpPeriod.NEXT_WEEK, now=NOW)

    assert result.outcome is LifecycleOutcome.PERSISTENCE_FAILURE
    assert not result.antecedent_marked
    assert store.calls == ["get_task"]
    assert store.tasks[1].completion_status is None

    toggled = await toggle_completion(store, 1, now=NOW)
    assert toggled.outcome is LifecycleOutcome.PERSISTENCE_FAILURE
    assert "set_completion" not in store.calls


async def test_terminal_task_is_rejected_before_any_write():
    store = FakeTaskStore([make_task(1, status=CompletionStatus.DONE, completed_at=utc(2024, 1, 2))])
    result = await postpone_task(store, 1, FollowUpPeriod.NEXT_WEEK, now=NOW)

    assert result.outcome is LifecycleOutcome.INVARIANT_VIOLATION
    assert store.calls == ["get_task"]
    assert store.tasks[1].completion_status is CompletionStatus.DONE


async def test_failed_mark_leaves_task_untouched(store):
    store.fail_mark = True
    original = store.tasks[1]
    result = await complete_task(store, 1, FollowUpPeriod.NEXT_WEEK, now=NOW)

    assert result.outcome is LifecycleOutcome.PERSISTENCE_FAILURE
    assert not result.antecedent_marked
    assert result.antecedent == original
    assert store.tasks[1].completion_status is None
    assert "insert_successor" not in store.calls


async def test_failed_successor_insert_reports_broken_lineage(store):
    store.fail_insert = True
    result = await postpone_task(store, 1, FollowUpPeriod.NEXT_WEEK, now=NOW)

    assert result.outcome is LifecycleOutcome.PERSISTENCE_FAILURE
    assert result.antecedent_marked
    assert result.successor is not None
    assert result.successor.tries == 4
    assert store.inserted == []


async def test_input_task_is_not_mutated(store):
    before = store.tasks[1]
    await complete_task(store, 1, FollowUpPeriod.NEXT_WEEK, now=NOW)
    assert before.completion_status is None
    assert before.date_completed is None


async def test_toggle_flips_completion_and_counts_tries(store):
    done = await toggle_completion(store, 1, now=NOW)
    assert done.success
    assert store.tasks[1].date_completed == NOW
    assert store.tasks[1].tries == 4
    assert done.antecedent.completed

    reopened = await toggle_completion(store, 1, now=NOW)
    assert reopened.success
    assert store.tasks[1].date_completed is None
    assert store.tasks[1].tries == 4


async def test_toggle_refuses_tasks_with_completion_status():
    store = FakeTaskStore([make_task(1, status=CompletionStatus.POSTPONED, completed_at=NOW)])
    result = await toggle_completion(store, 1, now=NOW)
    assert result.outcome is LifecycleOutcome.INVARIANT_VIOLATION
    assert "set_completion" not in store.calls


async def test_toggle_persistence_failure(store):
    store.fail_update = True
    result = await toggle_completion(store, 1, now=NOW)
    assert result.outcome is LifecycleOutcome.PERSISTENCE_FAILURE
    assert store.tasks[1].date_completed is None


def test_new_task_draft_defaults_to_now():
    draft = new_task_draft(4, TaskCreate(title="Water beds"), now=NOW)
    assert draft.location_id == 4
    assert draft.date_to_start == NOW
    assert draft.date_to_complete is None
    assert draft.tries == 0
    assert draft.info == "Water beds\n"


def test_new_task_draft_duration_from_slider_label():
    draft = new_task_draft(1, TaskCreate(title="Mulch", slider_label="Next Spring"), now=NOW)
    assert draft.date_to_complete == NOW + timedelta(days=90)

    draft = new_task_draft(1, TaskCreate(title="Mulch", duration=TaskDuration.WEEK), now=NOW)
    assert draft.date_to_complete == NOW + timedelta(days=7)


def test_new_task_draft_rejects_completion_before_start():
    data = TaskCreate(title="Mulch", date_to_complete=utc(2024, 1, 1))
    with pytest.raises(InvariantViolation):
        new_task_draft(1, data, now=NOW)


def test_new_task_draft_rejects_unknown_label():
    with pytest.raises(ValueError, match="Unknown date option label"):
        new_task_draft(1, TaskCreate(title="Mulch", slider_label="Someday"), now=NOW)
