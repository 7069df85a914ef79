"""Task operations as callers see them: authorization, then status policy, then the store."""

import logging

from src.core.logging import log_with_user_context, span
from src.domain.create_models import TaskCreate
from src.domain.task import TaskStatus, TaskWithUsers
from src.domain.update_models import TaskUpdate
from src.domain.user import Actor
from src.modules.tasks import state_machine, store
from src.services.authorization import Action, authorize, can, require_authenticated


logger = logging.getLogger(__name__)


async def create_task(actor: Actor | None, data: TaskCreate) -> int:
    """Create a task as a manager or admin.

    Returns:
        ID of the new task

    Raises:
        UnauthenticatedError: If nobody is signed in
        ForbiddenError: If the caller is a developer
        ValidationError: If the assignee is not an existing developer
    """
    actor = authorize(actor, Action.CREATE_TASK)
    return await store.create_task(data, creator_id=actor.user_id)


async def list_tasks(actor: Actor | None) -> list[TaskWithUsers]:
    """List the tasks the caller may see.

    Managers and admins get every task; developers get the tasks assigned to them.
    """
    actor = require_authenticated(actor)
    if can(actor, Action.VIEW_ALL_TASKS):
        return await store.get_all_tasks()
    return await store.get_tasks_for_user(actor.user_id)


async def list_claimable_tasks(actor: Actor | None) -> list[TaskWithUsers]:
    """List tasks open for self-assignment."""
    authorize(actor, Action.VIEW_CLAIMABLE_TASKS)
    return await store.get_claimable_tasks()


async def get_task(actor: Actor | None, task_id: int) -> TaskWithUsers:
    """Fetch one task; developers may only view their own.

    Raises:
        NotFoundError: If the task does not exist
        ForbiddenError: If a developer asks for someone else's task
    """
    require_authenticated(actor)
    task = await store.get_task(task_id)
    authorize(actor, Action.VIEW_TASK, task=task)
    return task


async def update_task(actor: Actor | None, task_id: int, data: TaskUpdate) -> None:
    """Replace a task's editable fields (manager/admin only).

    Raises:
        ForbiddenError: If the caller is a developer
        NotFoundError: If the task does not exist
    """
    authorize(actor, Action.EDIT_TASK)
    await store.update_task(task_id, data)


async def advance_task_status(actor: Actor | None, task_id: int) -> TaskStatus:
    """Move a task one step along the status cycle.

    Returns:
        The new status

    Raises:
        NotFoundError: If the task does not exist
        ForbiddenError: If a developer is not the task's assignee
    """
    with span("task_service.advance_task_status"):
        require_authenticated(actor)
        task = await store.get_task(task_id)
        actor = authorize(actor, Action.ADVANCE_STATUS, task=task)

        new_status = state_machine.next_status(task.status)
        await store.set_task_status(task_id, new_status)

        log_with_user_context(
            logger,
            "info",
            "Advanced task status",
            user_id=str(actor.user_id),
            task_id=task_id,
            from_status=task.status.value,
            to_status=new_status.value,
        )
        return new_status


async def claim_task(actor: Actor | None, task_id: int) -> None:
    """Claim an open task for the caller.

    Raises:
        ClaimConflictError: If the task is missing, not claimable, or already assigned
    """
    actor = authorize(actor, Action.CLAIM_TASK)
    await store.claim_task(task_id, actor.user_id)


async def delete_task(actor: Actor | None, task_id: int) -> None:
    """Delete a task (admin only).

    Raises:
        ForbiddenError: If the caller is not an admin
        NotFoundError: If the task does not exist
    """
    authorize(actor, Action.DELETE_TASK)
    await store.delete_task(task_id)
