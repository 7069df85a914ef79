"""Task store: persistence, the atomic claim, and post-commit events."""

import logging
from typing import Any

from src.core import db_client
from src.core.errors import ClaimConflictError, NotFoundError, ValidationError
from src.core.events import TaskEvent, publish_event
from src.core.logging import span
from src.domain.create_models import TaskCreate
from src.domain.task import TaskStatus, TaskWithUsers
from src.domain.update_models import TaskUpdate
from src.domain.user import UserRole


logger = logging.getLogger(__name__)

CLAIM_CONFLICT_MESSAGE = "Task not available or already claimed"

_SELECT_WITH_USERS = """
    SELECT t.*,
           u1.username AS assigned_username,
           u2.username AS created_username
    FROM tasks t
    LEFT JOIN users u1 ON t.assigned_to = u1.id
    LEFT JOIN users u2 ON t.created_by = u2.id
"""

_NEWEST_FIRST = "ORDER BY t.created_at DESC, t.id DESC"


def _to_tasks(rows: list[dict[str, Any]]) -> list[TaskWithUsers]:
    return [TaskWithUsers.model_validate(row) for row in rows]


async def _require_developer(user_id: int) -> None:
    """Reject assignment to anyone who is not an existing developer."""
    user = await db_client.fetch_one("SELECT id, role FROM users WHERE id = ?", (user_id,))
    if user is None:
        raise ValidationError(f"Assignee {user_id} does not exist")
    if user["role"] != UserRole.DEVELOPER:
        raise ValidationError(f"Assignee {user_id} is not a developer")


async def create_task(data: TaskCreate, *, creator_id: int) -> int:
    """Insert a task and return its ID.

    The claimable path stores no assignee; the assigned path stores ``claimable = 0``.

    Raises:
        ValidationError: If the assignee is not an existing developer
    """
    with span("task_store.create_task"):
        assignment = data.assignment
        if assignment.assigned_to is not None:
            await _require_developer(assignment.assigned_to)

        now = db_client.utc_now()
        record = await db_client.create_record(
            collection="tasks",
            data={
                "title": data.title,
                "description": data.description,
                "status": data.status,
                "priority": data.priority,
                "assigned_to": assignment.assigned_to,
                "created_by": creator_id,
                "due_date": data.due_date,
                "game": data.game,
                "claimable": assignment.is_claimable,
                "created_at": now,
                "updated_at": now,
            },
        )
        task_id = int(record["id"])
        logger.info(
            "Created task %s '%s' (%s)",
            task_id,
            data.title,
            assignment.kind.value,
        )

    publish_event(
        TaskEvent.TASK_CREATED,
        {
            "id": task_id,
            "title": data.title,
            "assigned_to": assignment.assigned_to,
            "claimable": assignment.is_claimable,
        },
    )
    return task_id


async def get_all_tasks() -> list[TaskWithUsers]:
    """All tasks with assignee/creator usernames, newest first."""
    with span("task_store.get_all_tasks"):
        rows = await db_client.fetch_all(f"{_SELECT_WITH_USERS} {_NEWEST_FIRST}")
        return _to_tasks(rows)


async def get_claimable_tasks() -> list[TaskWithUsers]:
    """Tasks open for self-assignment, newest first."""
    with span("task_store.get_claimable_tasks"):
        rows = await db_client.fetch_all(
            f"{_SELECT_WITH_USERS} WHERE t.claimable = 1 AND t.assigned_to IS NULL {_NEWEST_FIRST}"
        )
        logger.debug("Found %d claimable tasks", len(rows))
        return _to_tasks(rows)


async def get_tasks_for_user(user_id: int) -> list[TaskWithUsers]:
    """Tasks assigned to one user, newest first."""
    with span("task_store.get_tasks_for_user"):
        rows = await db_client.fetch_all(f"{_SELECT_WITH_USERS} WHERE t.assigned_to = ? {_NEWEST_FIRST}", (user_id,))
        return _to_tasks(rows)


async def get_task(task_id: int) -> TaskWithUsers:
    """Fetch a single task.

    Raises:
        NotFoundError: If no task has this ID
    """
    row = await db_client.fetch_one(f"{_SELECT_WITH_USERS} WHERE t.id = ?", (task_id,))
    if row is None:
        raise NotFoundError("Task not found")
    return TaskWithUsers.model_validate(row)


async def update_task(task_id: int, data: TaskUpdate) -> None:
    """Replace the editable columns of a task.

    Setting an assignee clears ``claimable`` in the same statement, so the
    claimable/assignee pairing holds on this write path too.

    Raises:
        ValidationError: If the assignee is not an existing developer
        NotFoundError: If no row matched
    """
    with span("task_store.update_task"):
        if data.assigned_to is not None:
            await _require_developer(data.assigned_to)

        changed = await db_client.execute(
            """
            UPDATE tasks
            SET title = ?, description = ?, status = ?, priority = ?,
                assigned_to = ?, due_date = ?, game = ?,
                claimable = CASE WHEN ? IS NULL THEN claimable ELSE 0 END,
                updated_at = ?
            WHERE id = ?
            """,
            (
                data.title,
                data.description,
                data.status,
                data.priority,
                data.assigned_to,
                data.due_date,
                data.game,
                data.assigned_to,
                db_client.utc_now(),
                task_id,
            ),
            collection="tasks",
        )
        if changed == 0:
            raise NotFoundError("Task not found")
        logger.info("Updated task %s", task_id)

    publish_event(TaskEvent.TASK_UPDATED, {"id": task_id, "status": data.status.value})


async def set_task_status(task_id: int, status: TaskStatus) -> None:
    """Write only the status column.

    Raises:
        NotFoundError: If no row matched
    """
    with span("task_store.set_task_status"):
        changed = await db_client.update_record(
            collection="tasks",
            record_id=task_id,
            data={"status": status, "updated_at": db_client.utc_now()},
        )
        if changed == 0:
            raise NotFoundError("Task not found")
        logger.info("Task %s status -> %s", task_id, status.value)

    publish_event(TaskEvent.TASK_UPDATED, {"id": task_id, "status": status.value})


async def delete_task(task_id: int) -> None:
    """Remove a task.

    Raises:
        NotFoundError: If no row matched
    """
    with span("task_store.delete_task"):
        removed = await db_client.delete_record(collection="tasks", record_id=task_id)
        if removed == 0:
            raise NotFoundError("Task not found")
        logger.info("Deleted task %s", task_id)

    publish_event(TaskEvent.TASK_DELETED, {"id": task_id})


async def claim_task(task_id: int, claimant_id: int) -> None:
    """Assign an open task to the claimant.

    One conditional UPDATE does the check and the write, so concurrent claimants
    cannot both succeed. The affected-row count is the only success signal.

    Raises:
        ClaimConflictError: If the task is missing, not claimable, or already assigned
    """
    with span("task_store.claim_task"):
        changed = await db_client.execute(
            """
            UPDATE tasks
            SET assigned_to = ?, claimable = 0, updated_at = ?
            WHERE id = ? AND claimable = 1 AND assigned_to IS NULL
            """,
            (claimant_id, db_client.utc_now(), task_id),
            collection="tasks",
        )
        if changed == 0:
            await _log_claim_failure(task_id, claimant_id)
            raise ClaimConflictError(CLAIM_CONFLICT_MESSAGE)
        logger.info("Task %s claimed by user %s", task_id, claimant_id)

    publish_event(TaskEvent.TASK_CLAIMED, {"taskId": task_id, "userId": claimant_id})


async def _log_claim_failure(task_id: int, claimant_id: int) -> None:
    """Record why a claim failed; the caller only ever sees the collapsed error."""
    row = await db_client.fetch_one("SELECT claimable, assigned_to FROM tasks WHERE id = ?", (task_id,))
    if row is None:
        reason = "missing"
    elif row["assigned_to"] is not None:
        reason = "already_assigned"
    else:
        reason = "not_claimable"
    logger.info(
        "Claim rejected",
        extra={"task_id": task_id, "user_id": claimant_id, "reason": reason},
    )
