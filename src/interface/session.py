"""Signed session cookies carrying the authenticated actor."""

import logging

from fastapi import Request, Response
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from src.core.config import Constants, settings
from src.domain.user import Actor, User, UserRole


logger = logging.getLogger(__name__)

serializer = URLSafeTimedSerializer(str(settings.secret_key), salt=Constants.SESSION_SALT)


def start_session(response: Response, user: User, *, custom_access: bool = False) -> None:
    """Set the session cookie for a signed-in user."""
    token = serializer.dumps(
        {
            "user_id": user.id,
            "username": user.username,
            "role": user.role.value,
            "custom_access": custom_access,
        }
    )
    response.set_cookie(
        key=Constants.SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=settings.session_max_age_seconds,
    )


def end_session(response: Response) -> None:
    """Clear the session cookie."""
    response.delete_cookie(key=Constants.SESSION_COOKIE_NAME, httponly=True, samesite="lax")


async def get_current_actor(request: Request) -> Actor | None:
    """Resolve the caller from the session cookie, or None when signed out."""
    token = request.cookies.get(Constants.SESSION_COOKIE_NAME)
    if not token:
        return None

    try:
        data = serializer.loads(token, max_age=settings.session_max_age_seconds)
        return Actor(user_id=int(data["user_id"]), username=data.get("username", ""), role=UserRole(data["role"]))
    except (BadSignature, SignatureExpired):
        logger.warning("session_tampered_or_expired", extra={"path": request.url.path})
        return None
    except (KeyError, TypeError, ValueError):
        logger.warning("session_malformed", extra={"path": request.url.path})
        return None
