"""Domain models and DTOs."""

from src.domain.notification import Notification
from src.domain.task import AssignmentKind, Task, TaskAssignment, TaskPriority, TaskStatus, TaskWithUsers
from src.domain.user import Actor, User, UserRole


__all__ = [
    "Actor",
    "AssignmentKind",
    "Notification",
    "Task",
    "TaskAssignment",
    "TaskPriority",
    "TaskStatus",
    "TaskWithUsers",
    "User",
    "UserRole",
]
