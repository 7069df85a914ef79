"""Configuration management for devboard."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Session signing key used when SECRET_KEY is unset; refused in production
DEV_SECRET_KEY = "devboard-dev-secret-key"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database Configuration
    sqlite_db_path: str = Field(default="./database/devboard.db", description="SQLite database file path")

    # Session Configuration
    secret_key: str = Field(default=DEV_SECRET_KEY, description="Secret used to sign session cookies")
    is_production: bool = Field(default=False, description="Send cookies with the Secure flag when True")
    session_max_age_seconds: int = Field(default=24 * 60 * 60, description="Session cookie lifetime in seconds")

    # Password hashing
    bcrypt_rounds: int = Field(default=12, ge=4, le=31, description="bcrypt cost factor for password hashes")

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")

    # Bootstrap admin account
    admin_username: str = Field(default="admin", description="Username of the bootstrap admin account")
    admin_email: str = Field(default="admin@devboard.local", description="Email of the bootstrap admin account")
    admin_password: str | None = Field(default=None, description="Password of the bootstrap admin account")

    # Public URL used when building developer access links
    public_base_url: str = Field(default="http://127.0.0.1:8000", description="Externally visible base URL")

    def require_credential(self, field_name: str, service_name: str) -> str:
        """Validate that a required credential is set, raising a clear error if missing.

        Args:
            field_name: Name of the field to check
            service_name: Human-readable service name for error message

        Returns:
            The credential value

        Raises:
            ValueError: If the credential is None or empty
        """
        value = getattr(self, field_name)
        if not value:
            raise ValueError(
                f"{service_name} credential not configured. "
                f"Set {field_name.upper()} environment variable or add to .env file."
            )
        return value


# Application Constants
class Constants:
    """Application-wide constants."""

    # HTTP Status Codes
    HTTP_OK: int = 200
    HTTP_BAD_REQUEST: int = 400
    HTTP_UNAUTHORIZED: int = 401
    HTTP_FORBIDDEN: int = 403
    HTTP_NOT_FOUND: int = 404
    HTTP_CONFLICT: int = 409
    HTTP_SERVER_ERROR: int = 500

    # Session cookie
    SESSION_COOKIE_NAME: str = "devboard_session"
    SESSION_SALT: str = "devboard-session"

    # Developer access links and verification codes
    CUSTOM_LINK_BYTES: int = 12
    CUSTOM_LINK_PATH_PREFIX: str = "/dev/"
    DEVELOPER_CODE_LENGTH: int = 8

    # Passwords (bcrypt only reads the first 72 bytes)
    MIN_PASSWORD_LENGTH: int = 6
    MAX_PASSWORD_BYTES: int = 72

    # Paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent.parent


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
