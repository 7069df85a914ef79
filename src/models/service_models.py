"""Pydantic models for service layer return types.

These models provide type safety at service boundaries, converting database
dictionaries into typed objects with validation.
"""

from pydantic import BaseModel


class DeveloperTaskCounts(BaseModel):
    """Per-developer task totals for the dashboard."""

    user_id: int
    username: str
    profile_picture: str | None = None
    total_tasks: int
    completed_tasks: int


class DashboardStats(BaseModel):
    """Board-wide completion statistics."""

    total_tasks: int
    completed_tasks: int
    in_progress_tasks: int
    overdue_tasks: int
    tasks_by_developer: list[DeveloperTaskCounts]


class DeveloperSummary(BaseModel):
    """Developer listing entry with task counts."""

    id: int
    username: str
    email: str
    profile_picture: str | None = None
    created_at: str
    task_count: int
    completed_count: int


class ProvisionedDeveloper(BaseModel):
    """Result of provisioning a developer account."""

    user_id: int
    custom_link: str
    developer_code: str


class TaskCreated(BaseModel):
    """Result of creating a task."""

    task_id: int
