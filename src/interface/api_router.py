"""JSON API for the task board."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from src.domain.create_models import NotificationCreate, TaskCreate, UserCreate
from src.domain.notification import Notification
from src.domain.task import TaskWithUsers
from src.domain.update_models import PasswordReset, SecurityCheck, TaskUpdate
from src.domain.user import Actor, User
from src.interface.session import end_session, get_current_actor, start_session
from src.models.service_models import DashboardStats, DeveloperSummary, ProvisionedDeveloper, TaskCreated
from src.modules.tasks import analytics
from src.modules.tasks import service as task_service
from src.services import notification_service, user_service
from src.services.authorization import require_authenticated


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["api"])
link_router = APIRouter(tags=["access-links"])

CurrentActor = Depends(get_current_actor)


class LoginRequest(BaseModel):
    """Username/password login payload."""

    username: str
    password: str


# Auth


@router.post("/login")
async def login(body: LoginRequest, response: Response) -> dict[str, Any]:
    """Authenticate and start a session."""
    user = await user_service.authenticate(username=body.username, password=body.password)
    start_session(response, user)
    logger.info("login_success", extra={"user_id": user.id})
    return {"success": True, "temp_password": user.temp_password, "user": user.model_dump(exclude={"developer_code"})}


@router.post("/register")
async def register(body: UserCreate) -> dict[str, Any]:
    """Self-register a developer account."""
    user = await user_service.register_user(body)
    return {"success": True, "user_id": user.id}


@router.post("/logout")
async def logout(response: Response) -> dict[str, Any]:
    """End the session."""
    end_session(response)
    return {"success": True, "redirect": "/login.html"}


@router.post("/reset-password")
async def reset_password(body: PasswordReset, actor: Actor | None = CurrentActor) -> dict[str, bool]:
    """Replace the caller's password."""
    await user_service.reset_password(actor, body.new_password)
    return {"success": True}


@router.post("/security-check")
async def security_check(body: SecurityCheck, actor: Actor | None = CurrentActor) -> dict[str, bool]:
    """Verify the caller's developer code."""
    await user_service.verify_developer_code(actor, body.developer_code)
    return {"success": True}


# Users


@router.get("/me")
async def get_me(actor: Actor | None = CurrentActor) -> User:
    """The signed-in user."""
    actor = require_authenticated(actor)
    return await user_service.get_user_by_id(user_id=actor.user_id)


@router.get("/users")
async def get_users(actor: Actor | None = CurrentActor) -> list[dict[str, Any]]:
    """All users (public fields only)."""
    users = await user_service.list_users(actor)
    return [
        user.model_dump(include={"id", "username", "email", "role", "profile_picture", "created_at"})
        for user in users
    ]


# Tasks


@router.get("/tasks")
async def get_tasks(actor: Actor | None = CurrentActor) -> list[TaskWithUsers]:
    """Tasks visible to the caller, newest first."""
    return await task_service.list_tasks(actor)


@router.post("/tasks")
async def create_task(body: TaskCreate, actor: Actor | None = CurrentActor) -> TaskCreated:
    """Create a task."""
    task_id = await task_service.create_task(actor, body)
    return TaskCreated(task_id=task_id)


@router.get("/tasks/claimable")
async def get_claimable_tasks(actor: Actor | None = CurrentActor) -> list[TaskWithUsers]:
    """Tasks open for self-assignment."""
    return await task_service.list_claimable_tasks(actor)


@router.get("/tasks/{task_id}")
async def get_task(task_id: int, actor: Actor | None = CurrentActor) -> TaskWithUsers:
    """One task."""
    return await task_service.get_task(actor, task_id)


@router.put("/tasks/{task_id}")
async def update_task(task_id: int, body: TaskUpdate, actor: Actor | None = CurrentActor) -> dict[str, bool]:
    """Replace a task's editable fields."""
    await task_service.update_task(actor, task_id, body)
    return {"success": True}


@router.post("/tasks/{task_id}/advance")
async def advance_task(task_id: int, actor: Actor | None = CurrentActor) -> dict[str, Any]:
    """Move a task one step along the status cycle."""
    new_status = await task_service.advance_task_status(actor, task_id)
    return {"success": True, "status": new_status.value}


@router.post("/tasks/{task_id}/claim")
async def claim_task(task_id: int, actor: Actor | None = CurrentActor) -> dict[str, bool]:
    """Claim an open task for the caller."""
    await task_service.claim_task(actor, task_id)
    return {"success": True}


@router.delete("/tasks/{task_id}")
async def delete_task(task_id: int, actor: Actor | None = CurrentActor) -> dict[str, bool]:
    """Delete a task (admin only)."""
    await task_service.delete_task(actor, task_id)
    return {"success": True}


# Dashboard and developers


@router.get("/dashboard/stats")
async def get_dashboard_stats(actor: Actor | None = CurrentActor) -> DashboardStats:
    """Board-wide completion statistics."""
    return await analytics.get_dashboard_stats(actor)


@router.get("/developers")
async def get_developers(actor: Actor | None = CurrentActor) -> list[DeveloperSummary]:
    """Developers with task counts."""
    return await analytics.list_developers(actor)


@router.post("/developers")
async def create_developer(body: UserCreate, actor: Actor | None = CurrentActor) -> ProvisionedDeveloper:
    """Provision a developer account."""
    return await user_service.provision_developer(actor, body)


@router.post("/developers/{developer_id}/link")
async def regenerate_developer_link(developer_id: int, actor: Actor | None = CurrentActor) -> dict[str, Any]:
    """Issue a new access link for a developer."""
    link = await user_service.regenerate_custom_link(actor, developer_id)
    return {"success": True, "link": link}


# Notifications


@router.post("/notifications")
async def send_notification(body: NotificationCreate, actor: Actor | None = CurrentActor) -> Notification:
    """Send a notification to a user."""
    return await notification_service.send_notification(actor, body)


@router.get("/notifications")
async def get_notifications(actor: Actor | None = CurrentActor) -> list[Notification]:
    """The caller's notifications."""
    return await notification_service.list_notifications(actor)


@router.put("/notifications/{notification_id}/read")
async def mark_notification_read(notification_id: int, actor: Actor | None = CurrentActor) -> dict[str, bool]:
    """Mark one of the caller's notifications as read."""
    await notification_service.mark_read(actor, notification_id)
    return {"success": True}


# Link-based access


@link_router.get("/dev/{link}")
async def access_by_link(link: str) -> Response:
    """Sign a developer in through their access link."""
    user = await user_service.get_user_by_custom_link(link)
    response = RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    start_session(response, user, custom_access=True)
    logger.info("link_access_success", extra={"user_id": user.id})
    return response
