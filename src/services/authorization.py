"""Role capability table and the checks run before every task mutation."""

import logging
from enum import StrEnum

from src.core.errors import ForbiddenError, UnauthenticatedError
from src.domain.task import Task
from src.domain.user import Actor, UserRole


logger = logging.getLogger(__name__)


class Action(StrEnum):
    """Operations gated by role."""

    VIEW_ALL_TASKS = "view_all_tasks"
    VIEW_TASK = "view_task"
    VIEW_CLAIMABLE_TASKS = "view_claimable_tasks"
    CLAIM_TASK = "claim_task"
    CREATE_TASK = "create_task"
    EDIT_TASK = "edit_task"
    ADVANCE_STATUS = "advance_status"
    DELETE_TASK = "delete_task"
    VIEW_DASHBOARD = "view_dashboard"
    PROVISION_DEVELOPER = "provision_developer"
    GENERATE_DEVELOPER_LINK = "generate_developer_link"
    SEND_NOTIFICATION = "send_notification"


_EVERYONE = frozenset(UserRole)
_MANAGERS = frozenset({UserRole.COMMUNITY_MANAGER, UserRole.ADMIN})
_ADMINS = frozenset({UserRole.ADMIN})

CAPABILITIES: dict[Action, frozenset[UserRole]] = {
    Action.VIEW_ALL_TASKS: _MANAGERS,
    Action.VIEW_TASK: _EVERYONE,
    Action.VIEW_CLAIMABLE_TASKS: _EVERYONE,
    Action.CLAIM_TASK: _EVERYONE,
    Action.CREATE_TASK: _MANAGERS,
    Action.EDIT_TASK: _MANAGERS,
    Action.ADVANCE_STATUS: _EVERYONE,
    Action.DELETE_TASK: _ADMINS,
    Action.VIEW_DASHBOARD: _MANAGERS,
    Action.PROVISION_DEVELOPER: _MANAGERS,
    Action.GENERATE_DEVELOPER_LINK: _MANAGERS,
    Action.SEND_NOTIFICATION: _MANAGERS,
}

# Actions a developer may only take on tasks assigned to them
ASSIGNEE_ONLY_FOR_DEVELOPERS: frozenset[Action] = frozenset({Action.VIEW_TASK, Action.ADVANCE_STATUS})


def require_authenticated(actor: Actor | None) -> Actor:
    """Return the actor, or raise if nobody is signed in."""
    if actor is None:
        raise UnauthenticatedError("Authentication required")
    return actor


def _denial_reason(actor: Actor, action: Action, task: Task | None) -> str | None:
    if actor.role == UserRole.ADMIN:
        return None

    if actor.role not in CAPABILITIES[action]:
        return "Insufficient permissions"

    if action in ASSIGNEE_ONLY_FOR_DEVELOPERS and actor.role == UserRole.DEVELOPER:
        if task is None or task.assigned_to != actor.user_id:
            return "Task is not assigned to you"

    return None


def can(actor: Actor | None, action: Action, task: Task | None = None) -> bool:
    """Return True if the actor may perform the action."""
    return actor is not None and _denial_reason(actor, action, task) is None


def authorize(actor: Actor | None, action: Action, *, task: Task | None = None) -> Actor:
    """Check the capability table for this actor and action.

    Args:
        actor: Authenticated caller, or None
        action: Operation being attempted
        task: Target task for ownership-scoped actions

    Returns:
        The authenticated actor

    Raises:
        UnauthenticatedError: If there is no caller
        ForbiddenError: If the role, or the caller's relationship to the task, is insufficient
    """
    actor = require_authenticated(actor)
    reason = _denial_reason(actor, action, task)
    if reason is not None:
        logger.info(
            "Authorization denied",
            extra={
                "user_id": actor.user_id,
                "role": actor.role.value,
                "action": action.value,
                "task_id": task.id if task else None,
            },
        )
        raise ForbiddenError(reason)
    return actor
