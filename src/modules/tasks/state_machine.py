"""Pure status transition functions for task lifecycle management."""

import logging

from src.core.errors import ValidationError
from src.domain.task import TaskPriority, TaskStatus


logger = logging.getLogger(__name__)


# Advance order: not-started -> in-progress -> done -> not-started
STATUS_CYCLE: dict[TaskStatus, TaskStatus] = {
    TaskStatus.NOT_STARTED: TaskStatus.IN_PROGRESS,
    TaskStatus.IN_PROGRESS: TaskStatus.DONE,
    TaskStatus.DONE: TaskStatus.NOT_STARTED,
}


def next_status(current: str | TaskStatus | None) -> TaskStatus:
    """Return the status one step along the cycle.

    Unrecognised input maps to ``in-progress``.
    """
    try:
        return STATUS_CYCLE[TaskStatus(current)]
    except ValueError:
        logger.debug("Unknown status %r, defaulting to in-progress", current)
        return TaskStatus.IN_PROGRESS


def parse_status(value: object) -> TaskStatus:
    """Validate a status string against the closed enum.

    Raises:
        ValidationError: If the value is not one of the three statuses
    """
    try:
        return TaskStatus(value)
    except ValueError as e:
        allowed = ", ".join(s.value for s in TaskStatus)
        raise ValidationError(f"Invalid status {value!r}; expected one of: {allowed}") from e


def parse_priority(value: object) -> TaskPriority:
    """Validate a priority string against the closed enum.

    Raises:
        ValidationError: If the value is not one of the three priorities
    """
    try:
        return TaskPriority(value)
    except ValueError as e:
        allowed = ", ".join(p.value for p in TaskPriority)
        raise ValidationError(f"Invalid priority {value!r}; expected one of: {allowed}") from e
