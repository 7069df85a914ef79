"""User domain models and enums."""

from enum import StrEnum

from pydantic import BaseModel, Field


class UserRole(StrEnum):
    """Role assigned to an account at creation time."""

    DEVELOPER = "developer"
    COMMUNITY_MANAGER = "community_manager"
    ADMIN = "admin"


class User(BaseModel):
    """User data transfer object (never carries the password hash)."""

    id: int = Field(..., description="Unique user ID from database")
    username: str = Field(..., description="Unique login name")
    email: str = Field(..., description="Unique email address")
    role: UserRole = Field(default=UserRole.DEVELOPER, description="Account role")
    profile_picture: str | None = Field(default=None, description="Profile picture reference")
    custom_link: str | None = Field(default=None, description="Unique slug for link-based developer access")
    developer_code: str | None = Field(default=None, description="Developer verification code")
    last_security_check: str | None = Field(default=None, description="Last successful code verification (ISO)")
    temp_password: bool = Field(default=False, description="Whether the password must be reset at next login")
    created_at: str = Field(..., description="Creation timestamp (ISO format)")


class Actor(BaseModel):
    """The authenticated caller of an operation."""

    user_id: int
    username: str = ""
    role: UserRole

    @classmethod
    def from_user(cls, user: User) -> "Actor":
        """Build an actor from a stored user."""
        return cls(user_id=user.id, username=user.username, role=user.role)
