"""Notification service: manager-to-user messages stored per recipient."""

import logging

from src.core import db_client
from src.core.errors import NotFoundError
from src.core.events import TaskEvent, publish_event
from src.core.logging import span
from src.domain.create_models import NotificationCreate
from src.domain.notification import Notification
from src.domain.user import Actor
from src.services.authorization import Action, authorize, require_authenticated


logger = logging.getLogger(__name__)


async def send_notification(actor: Actor | None, data: NotificationCreate) -> Notification:
    """Store a notification for a user and push it to the event sink.

    Raises:
        ForbiddenError: If the caller is a developer
        NotFoundError: If the recipient does not exist
    """
    actor = authorize(actor, Action.SEND_NOTIFICATION)
    with span("notification_service.send_notification"):
        recipient = await db_client.fetch_one("SELECT id FROM users WHERE id = ?", (data.user_id,))
        if recipient is None:
            raise NotFoundError("Recipient not found")

        record = await db_client.create_record(
            collection="notifications",
            data={
                "user_id": data.user_id,
                "title": data.title,
                "message": data.message,
                "read": False,
                "created_at": db_client.utc_now(),
            },
        )
        notification = Notification.model_validate(record)
        logger.info("Notification %s sent to user %s by user %s", notification.id, data.user_id, actor.user_id)

    publish_event(
        TaskEvent.NOTIFICATION,
        {
            "id": notification.id,
            "user_id": notification.user_id,
            "title": notification.title,
            "message": notification.message,
        },
    )
    return notification


async def list_notifications(actor: Actor | None) -> list[Notification]:
    """The caller's notifications, newest first."""
    actor = require_authenticated(actor)
    records = await db_client.list_records(
        collection="notifications",
        where="user_id = ?",
        params=(actor.user_id,),
        sort="created_at DESC, id DESC",
    )
    return [Notification.model_validate(record) for record in records]


async def mark_read(actor: Actor | None, notification_id: int) -> None:
    """Mark one of the caller's notifications as read.

    Raises:
        NotFoundError: If the notification does not exist or belongs to someone else
    """
    actor = require_authenticated(actor)
    changed = await db_client.execute(
        "UPDATE notifications SET read = 1 WHERE id = ? AND user_id = ?",
        (notification_id, actor.user_id),
        collection="notifications",
    )
    if changed == 0:
        raise NotFoundError("Notification not found")
