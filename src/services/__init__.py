from src.services import (
    authorization,
    notification_service,
    user_service,
)


__all__ = [
    "authorization",
    "notification_service",
    "user_service",
]
