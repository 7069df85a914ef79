"""Pydantic models for creating records in database."""

from datetime import date

from pydantic import BaseModel, Field, field_validator

from src.core.config import Constants
from src.core.errors import ValidationError
from src.domain.task import TaskAssignment, TaskPriority, TaskStatus
from src.modules.tasks.state_machine import parse_priority, parse_status


def _require_text(value: object, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


class TaskCreate(BaseModel):
    """Pydantic model for creating a task record.

    ``is_claimable`` wins over ``assigned_to``: a claimable task never starts with an assignee.
    """

    title: str = Field(..., description="Task title, trimmed")
    description: str = Field(default="", description="Detailed task description")
    status: TaskStatus = Field(default=TaskStatus.NOT_STARTED, description="Initial status")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="Priority")
    assigned_to: int | None = Field(default=None, description="Developer to assign the task to")
    due_date: date | None = Field(default=None, description="Optional due date")
    game: str | None = Field(default=None, description="Optional game or category label")
    is_claimable: bool = Field(default=False, description="Open the task for self-assignment")

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v: object) -> str:
        """Trim the title and reject empty titles."""
        return _require_text(v, "Task title")

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

    @field_validator("game", mode="before")
    @classmethod
    def blank_game_is_none(cls, v: object) -> object:
        return v or None

    @property
    def assignment(self) -> TaskAssignment:
        """Normalized assignment choice."""
        if self.is_claimable:
            return TaskAssignment.claimable()
        if self.assigned_to is not None:
            return TaskAssignment.to(self.assigned_to)
        return TaskAssignment.unassigned()


class UserCreate(BaseModel):
    """Pydantic model for self-registration and developer provisioning."""

    username: str = Field(..., description="Unique login name")
    email: str = Field(..., description="Unique email address")
    password: str = Field(..., description="Plain-text password, hashed before storage")

    @field_validator("username", "email", mode="before")
    @classmethod
    def validate_identity(cls, v: object) -> str:
        return _require_text(v, "Username and email")

    @field_validator("email")
    @classmethod
    def validate_email_shape(cls, v: str) -> str:
        """Require a minimal local@domain shape."""
        local, _, domain = v.partition("@")
        if not local or "." not in domain:
            raise ValidationError("Email address is invalid")
        return v.lower()

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, v: object) -> str:
        if not isinstance(v, str) or not v:
            raise ValidationError("Password is required")
        if len(v) < Constants.MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {Constants.MIN_PASSWORD_LENGTH} characters")
        return v


class NotificationCreate(BaseModel):
    """Pydantic model for sending a notification to a user."""

    user_id: int = Field(..., description="Recipient user ID")
    title: str = Field(..., description="Notification title")
    message: str = Field(..., description="Notification body")

    @field_validator("title", "message", mode="before")
    @classmethod
    def validate_text(cls, v: object) -> str:
        return _require_text(v, "Notification title and message")
