"""User service for accounts, developer provisioning, and link-based access."""

import logging
import secrets
import string
from typing import Any

import bcrypt

from src.core import db_client
from src.core.config import Constants, settings
from src.core.errors import NotFoundError, UnauthenticatedError, ValidationError
from src.core.logging import span
from src.domain.create_models import UserCreate
from src.domain.user import Actor, User, UserRole
from src.models.service_models import ProvisionedDeveloper
from src.services.authorization import Action, authorize, require_authenticated


logger = logging.getLogger(__name__)

_CODE_ALPHABET = string.ascii_uppercase + string.digits


def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""
    encoded = password.encode("utf-8")
    if len(encoded) > Constants.MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {Constants.MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=settings.bcrypt_rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash."""
    encoded = password.encode("utf-8")
    if len(encoded) > Constants.MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))


def generate_custom_link() -> str:
    """Random URL-safe slug for link-based developer access."""
    return secrets.token_urlsafe(Constants.CUSTOM_LINK_BYTES)


def generate_developer_code() -> str:
    """Random uppercase alphanumeric verification code."""
    return "".join(secrets.choice(_CODE_ALPHABET) for _ in range(Constants.DEVELOPER_CODE_LENGTH))


def _to_user(record: dict[str, Any]) -> User:
    return User.model_validate({k: v for k, v in record.items() if k != "password"})


async def _create_user(
    data: UserCreate,
    *,
    role: UserRole,
    custom_link: str | None = None,
    developer_code: str | None = None,
) -> User:
    record = await db_client.create_record(
        collection="users",
        data={
            "username": data.username,
            "email": data.email,
            "password": hash_password(data.password),
            "temp_password": False,
            "role": role,
            "custom_link": custom_link,
            "developer_code": developer_code,
            "created_at": db_client.utc_now(),
        },
    )
    return _to_user(record)


async def register_user(data: UserCreate) -> User:
    """Self-register a developer account.

    Raises:
        ConflictError: If the username or email is already taken
    """
    with span("user_service.register_user"):
        user = await _create_user(data, role=UserRole.DEVELOPER)
        logger.info("Registered user %s (%s)", user.username, user.id)
        return user


async def authenticate(*, username: str, password: str) -> User:
    """Verify a username/password pair.

    Raises:
        UnauthenticatedError: If the user is unknown or the password does not match
    """
    with span("user_service.authenticate"):
        record = await db_client.fetch_one("SELECT * FROM users WHERE username = ?", (username,))
        if record is None or not verify_password(password, record["password"]):
            logger.info("Failed login for username=%s", username)
            raise UnauthenticatedError("Invalid credentials")
        return _to_user(record)


async def reset_password(actor: Actor | None, new_password: str) -> None:
    """Replace the caller's password and clear the temporary-password flag."""
    actor = require_authenticated(actor)
    if len(new_password) < Constants.MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {Constants.MIN_PASSWORD_LENGTH} characters")

    await db_client.update_record(
        collection="users",
        record_id=actor.user_id,
        data={"password": hash_password(new_password), "temp_password": False},
    )
    logger.info("Password reset for user %s", actor.user_id)


async def provision_developer(actor: Actor | None, data: UserCreate) -> ProvisionedDeveloper:
    """Create a developer account with an access link and verification code.

    Raises:
        ForbiddenError: If the caller is a developer
        ConflictError: If the username or email is already taken
    """
    actor = authorize(actor, Action.PROVISION_DEVELOPER)
    with span("user_service.provision_developer"):
        custom_link = generate_custom_link()
        developer_code = generate_developer_code()
        user = await _create_user(
            data,
            role=UserRole.DEVELOPER,
            custom_link=custom_link,
            developer_code=developer_code,
        )
        logger.info("Provisioned developer %s by user %s", user.id, actor.user_id)
        return ProvisionedDeveloper(
            user_id=user.id,
            custom_link=f"{Constants.CUSTOM_LINK_PATH_PREFIX}{custom_link}",
            developer_code=developer_code,
        )


async def regenerate_custom_link(actor: Actor | None, developer_id: int) -> str:
    """Issue a new access link for a developer and return its full URL.

    Raises:
        ForbiddenError: If the caller is a developer
        NotFoundError: If the ID does not belong to a developer
    """
    actor = authorize(actor, Action.GENERATE_DEVELOPER_LINK)
    custom_link = generate_custom_link()
    changed = await db_client.execute(
        "UPDATE users SET custom_link = ? WHERE id = ? AND role = ?",
        (custom_link, developer_id, UserRole.DEVELOPER),
        collection="users",
    )
    if changed == 0:
        raise NotFoundError("Developer not found")

    logger.info("Regenerated access link for developer %s by user %s", developer_id, actor.user_id)
    return f"{settings.public_base_url.rstrip('/')}{Constants.CUSTOM_LINK_PATH_PREFIX}{custom_link}"


async def get_user_by_custom_link(link: str) -> User:
    """Resolve an access link slug to its user.

    Raises:
        NotFoundError: If no user holds this link
    """
    record = await db_client.fetch_one("SELECT * FROM users WHERE custom_link = ?", (link,))
    if record is None:
        raise NotFoundError("Invalid link")
    return _to_user(record)


async def verify_developer_code(actor: Actor | None, developer_code: str) -> None:
    """Check the caller's verification code and stamp the check time.

    Raises:
        UnauthenticatedError: If the code does not match
    """
    actor = require_authenticated(actor)
    record = await db_client.fetch_one("SELECT developer_code FROM users WHERE id = ?", (actor.user_id,))
    expected = record["developer_code"] if record else None
    # compare_digest only accepts ASCII str, so compare the encoded bytes
    if not expected or not secrets.compare_digest(expected.encode("utf-8"), developer_code.encode("utf-8")):
        logger.info("Developer code rejected for user %s", actor.user_id)
        raise UnauthenticatedError("Invalid developer code")

    await db_client.update_record(
        collection="users",
        record_id=actor.user_id,
        data={"last_security_check": db_client.utc_now()},
    )


async def get_user_by_id(*, user_id: int) -> User:
    """Get user by ID.

    Raises:
        NotFoundError: If user not found
    """
    record = await db_client.get_record(collection="users", record_id=user_id)
    return _to_user(record)


async def list_users(actor: Actor | None) -> list[User]:
    """All users, oldest first."""
    require_authenticated(actor)
    records = await db_client.list_records(collection="users", sort="id ASC")
    return [_to_user(record) for record in records]


async def ensure_admin_user() -> None:
    """Create the bootstrap admin account from settings if it does not exist."""
    if not settings.admin_password:
        logger.warning("ADMIN_PASSWORD not set; skipping bootstrap admin account")
        return

    existing = await db_client.fetch_one("SELECT id FROM users WHERE username = ?", (settings.admin_username,))
    if existing:
        return

    admin = await _create_user(
        UserCreate(
            username=settings.admin_username,
            email=settings.admin_email,
            password=settings.admin_password,
        ),
        role=UserRole.ADMIN,
    )
    logger.info("Bootstrap admin account created: %s", admin.username)
