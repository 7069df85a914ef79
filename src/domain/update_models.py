"""Update models for database operations."""

from datetime import date

from pydantic import BaseModel, field_validator

from src.core.errors import ValidationError
from src.domain.task import TaskPriority, TaskStatus
from src.modules.tasks.state_machine import parse_priority, parse_status


class TaskUpdate(BaseModel):
    """Full-row replacement payload for a task edit."""

    title: str
    description: str = ""
    status: TaskStatus
    priority: TaskPriority
    assigned_to: int | None = None
    due_date: date | None = None
    game: str | None = None

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v: object) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValidationError("Task title is required")
        return v.strip()

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, v: object) -> object:
        return v or ""

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: object) -> TaskStatus:
        return parse_status(v)

    @field_validator("priority", mode="before")
    @classmethod
    def validate_priority(cls, v: object) -> TaskPriority:
        return parse_priority(v)


class PasswordReset(BaseModel):
    """Payload for replacing a temporary password."""

    new_password: str


class SecurityCheck(BaseModel):
    """Payload carrying a developer verification code."""

    developer_code: str
