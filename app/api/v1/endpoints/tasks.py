from fastapi import APIRouter, HTTPException

from app.core.deps import Tasks
from app.schemas.task import LifecycleResultRead, TaskActionRequest, TaskRead
from app.services.task_lifecycle import (
    LifecycleOutcome,
    LifecycleResult,
    TaskAction,
    apply_action,
    toggle_completion,
)

router = APIRouter(prefix="/tasks", tags=["tasks"])

_STATUS_BY_OUTCOME = {
    LifecycleOutcome.NOT_FOUND: 404,
    LifecycleOutcome.INVARIANT_VIOLATION: 409,
    LifecycleOutcome.PERSISTENCE_FAILURE: 503,
}


def _to_response(result: LifecycleResult) -> LifecycleResultRead:
    if not result.success:
        detail = LifecycleResultRead(
            outcome=result.outcome.value,
            success=False,
            antecedent_marked=result.antecedent_marked,
            antecedent=result.antecedent,
            successor=result.successor,
            detail=result.detail,
        )
        raise HTTPException(
            status_code=_STATUS_BY_OUTCOME[result.outcome],
            detail=detail.model_dump(mode="json"),
        )
    return LifecycleResultRead(
        outcome=result.outcome.value,
        success=True,
        antecedent_marked=result.antecedent_marked,
        antecedent=result.antecedent,
        successor=result.successor,
    )


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(task_id: int, tasks: Tasks):
    task = await tasks.get_task(task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.post("/{task_id}/complete", response_model=LifecycleResultRead)
async def complete_task(task_id: int, data: TaskActionRequest, tasks: Tasks):
    return _to_response(await apply_action(tasks, task_id, TaskAction.COMPLETE, data.period))


@router.post("/{task_id}/postpone", response_model=LifecycleResultRead)
async def postpone_task(task_id: int, data: TaskActionRequest, tasks: Tasks):
    return _to_response(await apply_action(tasks, task_id, TaskAction.POSTPONE, data.period))


@router.post("/{task_id}/cancel", response_model=LifecycleResultRead)
async def cancel_task(task_id: int, data: TaskActionRequest, tasks: Tasks):
    return _to_response(await apply_action(tasks, task_id, TaskAction.CANCEL, data.period))


@router.post("/{task_id}/toggle", response_model=LifecycleResultRead)
async def toggle_task(task_id: int, tasks: Tasks):
    """Legacy completion toggle for tasks without a completion status."""
    return _to_response(await toggle_completion(tasks, task_id))
