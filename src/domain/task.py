"""Task domain models and enums."""

from enum import StrEnum

from pydantic import BaseModel, Field


class TaskStatus(StrEnum):
    """Task lifecycle status (a three-state cycle)."""

    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    DONE = "done"


class TaskPriority(StrEnum):
    """Task priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AssignmentKind(StrEnum):
    """How a new task is handed out."""

    UNASSIGNED = "unassigned"
    ASSIGNED = "assigned"
    CLAIMABLE = "claimable"


class TaskAssignment(BaseModel):
    """Assignment choice made when a task is created."""

    kind: AssignmentKind = AssignmentKind.UNASSIGNED
    user_id: int | None = None

    @classmethod
    def unassigned(cls) -> "TaskAssignment":
        return cls(kind=AssignmentKind.UNASSIGNED)

    @classmethod
    def to(cls, user_id: int) -> "TaskAssignment":
        return cls(kind=AssignmentKind.ASSIGNED, user_id=user_id)

    @classmethod
    def claimable(cls) -> "TaskAssignment":
        return cls(kind=AssignmentKind.CLAIMABLE)

    @property
    def assigned_to(self) -> int | None:
        """Assignee column value implied by this choice."""
        return self.user_id if self.kind == AssignmentKind.ASSIGNED else None

    @property
    def is_claimable(self) -> bool:
        """Claimable column value implied by this choice."""
        return self.kind == AssignmentKind.CLAIMABLE


class Task(BaseModel):
    """Task data transfer object."""

    id: int = Field(..., description="Unique task ID from database")
    title: str = Field(..., description="Task title (never empty)")
    description: str = Field(default="", description="Detailed task description")
    status: TaskStatus = Field(default=TaskStatus.NOT_STARTED, description="Current status")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="Priority")
    assigned_to: int | None = Field(default=None, description="Assignee user ID")
    created_by: int | None = Field(default=None, description="Creator user ID")
    due_date: str | None = Field(default=None, description="Due date (ISO date)")
    game: str | None = Field(default=None, description="Game or category label")
    claimable: bool = Field(default=False, description="Open for self-assignment")
    created_at: str = Field(..., description="Creation timestamp (ISO format)")
    updated_at: str = Field(..., description="Last update timestamp (ISO format)")

    @property
    def is_open_for_claim(self) -> bool:
        return self.claimable and self.assigned_to is None


class TaskWithUsers(Task):
    """Task enriched with assignee and creator usernames."""

    assigned_username: str | None = Field(default=None, description="Assignee username")
    created_username: str | None = Field(default=None, description="Creator username")
