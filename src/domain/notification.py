"""Notification domain model."""

from pydantic import BaseModel, Field


class Notification(BaseModel):
    """Stored notification addressed to a single user."""

    id: int = Field(..., description="Unique notification ID from database")
    user_id: int = Field(..., description="Recipient user ID")
    title: str = Field(..., description="Notification title")
    message: str = Field(..., description="Notification body")
    read: bool = Field(default=False, description="Whether the recipient has read it")
    created_at: str = Field(..., description="Creation timestamp (ISO format)")
