"""Dashboard aggregates over tasks and developers.

Key concepts:
- Completed: tasks whose status is ``done``.
- Overdue: tasks with a due date before today that are not ``done``.
- Per-developer counts only consider tasks currently assigned to that developer.
"""

import logging
from datetime import date

from src.core import db_client
from src.core.logging import span
from src.domain.task import TaskStatus
from src.domain.user import Actor, UserRole
from src.models.service_models import DashboardStats, DeveloperSummary, DeveloperTaskCounts
from src.services.authorization import Action, authorize


logger = logging.getLogger(__name__)


async def _count(where: str = "", params: tuple = ()) -> int:
    clause = f"WHERE {where}" if where else ""
    row = await db_client.fetch_one(f"SELECT COUNT(*) AS count FROM tasks {clause}", params)  # noqa: S608
    return int(row["count"]) if row else 0


async def get_dashboard_stats(actor: Actor | None, *, today: date | None = None) -> DashboardStats:
    """Aggregate completion statistics for managers and admins.

    Args:
        actor: Authenticated caller
        today: Reference date for overdue detection (defaults to today)

    Raises:
        ForbiddenError: If the caller is a developer
    """
    authorize(actor, Action.VIEW_DASHBOARD)
    reference = (today or date.today()).isoformat()

    with span("analytics.get_dashboard_stats"):
        total = await _count()
        completed = await _count("status = ?", (TaskStatus.DONE,))
        in_progress = await _count("status = ?", (TaskStatus.IN_PROGRESS,))
        overdue = await _count(
            "due_date IS NOT NULL AND due_date < ? AND status != ?",
            (reference, TaskStatus.DONE),
        )

        rows = await db_client.fetch_all(
            """
            SELECT u.id AS user_id, u.username, u.profile_picture,
                   COUNT(t.id) AS total_tasks,
                   COUNT(CASE WHEN t.status = ? THEN 1 END) AS completed_tasks
            FROM users u
            LEFT JOIN tasks t ON u.id = t.assigned_to
            WHERE u.role = ?
            GROUP BY u.id, u.username
            ORDER BY u.id
            """,
            (TaskStatus.DONE, UserRole.DEVELOPER),
        )

        stats = DashboardStats(
            total_tasks=total,
            completed_tasks=completed,
            in_progress_tasks=in_progress,
            overdue_tasks=overdue,
            tasks_by_developer=[DeveloperTaskCounts.model_validate(row) for row in rows],
        )
        logger.debug("Dashboard stats: %s", stats.model_dump(exclude={"tasks_by_developer"}))
        return stats


async def list_developers(actor: Actor | None) -> list[DeveloperSummary]:
    """Developers with their assigned and completed task counts, newest first."""
    authorize(actor, Action.VIEW_DASHBOARD)

    rows = await db_client.fetch_all(
        """
        SELECT u.id, u.username, u.email, u.profile_picture, u.created_at,
               COUNT(t.id) AS task_count,
               COUNT(CASE WHEN t.status = ? THEN 1 END) AS completed_count
        FROM users u
        LEFT JOIN tasks t ON u.id = t.assigned_to
        WHERE u.role = ?
        GROUP BY u.id
        ORDER BY u.created_at DESC, u.id DESC
        """,
        (TaskStatus.DONE, UserRole.DEVELOPER),
    )
    return [DeveloperSummary.model_validate(row) for row in rows]
