"""Unit tests for the user service."""

import pytest

from src.core import db_client
from src.core.config import Constants, settings
from src.core.errors import ConflictError, ForbiddenError, NotFoundError, UnauthenticatedError, ValidationError
from src.domain.create_models import UserCreate
from src.domain.user import Actor, UserRole
from src.services import user_service


def _new_user(username: str = "newdev", password: str = "secret123") -> UserCreate:
    return UserCreate(username=username, email=f"{username}@Example.com", password=password)


@pytest.mark.unit
class TestPasswordHashing:
    """Tests for bcrypt helpers."""

    def test_hash_and_verify(self, fast_hashing):
        """Test a hashed password verifies and a wrong one does not."""
        hashed = user_service.hash_password("secret123")

        assert hashed != "secret123"
        assert user_service.verify_password("secret123", hashed)
        assert not user_service.verify_password("wrong", hashed)

    def test_rejects_password_over_bcrypt_limit(self, fast_hashing):
        """Test passwords longer than bcrypt reads are refused."""
        with pytest.raises(ValidationError):
            user_service.hash_password("x" * (Constants.MAX_PASSWORD_BYTES + 1))

    def test_developer_code_shape(self):
        """Test developer codes are uppercase alphanumerics of fixed length."""
        code = user_service.generate_developer_code()
        assert len(code) == Constants.DEVELOPER_CODE_LENGTH
        assert code.isalnum()
        assert code.upper() == code


@pytest.mark.unit
class TestUserCreateModel:
    """Tests for registration payload validation."""

    def test_email_lowercased(self):
        """Test emails are stored lowercase."""
        assert _new_user().email == "newdev@example.com"

    def test_short_password_rejected(self):
        """Test passwords below the minimum length are rejected."""
        with pytest.raises(ValidationError, match="at least"):
            UserCreate(username="a", email="a@example.com", password="123")

    def test_blank_username_rejected(self):
        """Test a whitespace-only username is rejected."""
        with pytest.raises(ValidationError):
            UserCreate(username="  ", email="a@example.com", password="secret123")

    def test_malformed_email_rejected(self):
        """Test an email without a domain is rejected."""
        with pytest.raises(ValidationError, match="invalid"):
            UserCreate(username="a", email="not-an-email", password="secret123")


@pytest.mark.unit
class TestRegisterAndAuthenticate:
    """Tests for registration and login."""

    async def test_register_creates_developer(self, test_db):
        """Test self-registration always creates a developer."""
        user = await user_service.register_user(_new_user())

        assert user.role == UserRole.DEVELOPER
        assert user.username == "newdev"

    async def test_duplicate_username_conflicts(self, test_db):
        """Test registering a taken username raises ConflictError."""
        await user_service.register_user(_new_user())

        with pytest.raises(ConflictError):
            await user_service.register_user(_new_user())

    async def test_authenticate(self, test_db):
        """Test correct credentials return the user."""
        await user_service.register_user(_new_user())

        user = await user_service.authenticate(username="newdev", password="secret123")
        assert user.username == "newdev"

    async def test_wrong_password(self, test_db):
        """Test a wrong password is reported as invalid credentials."""
        await user_service.register_user(_new_user())

        with pytest.raises(UnauthenticatedError, match="Invalid credentials"):
            await user_service.authenticate(username="newdev", password="wrong-password")

    async def test_unknown_user(self, test_db):
        """Test an unknown username gives the same error as a wrong password."""
        with pytest.raises(UnauthenticatedError, match="Invalid credentials"):
            await user_service.authenticate(username="ghost", password="secret123")

    async def test_reset_password(self, developer):
        """Test the new password works and the temporary flag is cleared."""
        await user_service.reset_password(developer, "brand-new-pass")

        user = await user_service.authenticate(username="dev1", password="brand-new-pass")
        assert user.temp_password is False

    async def test_reset_password_too_short(self, developer):
        """Test a short replacement password is rejected."""
        with pytest.raises(ValidationError):
            await user_service.reset_password(developer, "123")


@pytest.mark.unit
class TestDeveloperAccess:
    """Tests for provisioning, access links, and developer codes."""

    async def test_provision_developer(self, manager):
        """Test provisioning returns a working access link and the stored code."""
        result = await user_service.provision_developer(manager, _new_user())

        assert result.custom_link.startswith(Constants.CUSTOM_LINK_PATH_PREFIX)
        slug = result.custom_link.removeprefix(Constants.CUSTOM_LINK_PATH_PREFIX)
        user = await user_service.get_user_by_custom_link(slug)
        assert user.id == result.user_id
        assert user.developer_code == result.developer_code

    async def test_developer_cannot_provision(self, developer):
        """Test developers may not provision accounts."""
        with pytest.raises(ForbiddenError):
            await user_service.provision_developer(developer, _new_user())

    async def test_regenerate_link_replaces_old_one(self, manager, monkeypatch):
        """Test a regenerated link uses the public URL and retires the old slug."""
        monkeypatch.setattr(settings, "public_base_url", "https://board.example.com/")
        result = await user_service.provision_developer(manager, _new_user())
        old_slug = result.custom_link.removeprefix(Constants.CUSTOM_LINK_PATH_PREFIX)

        link = await user_service.regenerate_custom_link(manager, result.user_id)

        assert link.startswith("https://board.example.com/dev/")
        with pytest.raises(NotFoundError, match="Invalid link"):
            await user_service.get_user_by_custom_link(old_slug)
        new_slug = link.rsplit("/", 1)[-1]
        assert (await user_service.get_user_by_custom_link(new_slug)).id == result.user_id

    async def test_regenerate_link_for_non_developer(self, manager):
        """Test links can only be regenerated for developer accounts."""
        with pytest.raises(NotFoundError, match="Developer not found"):
            await user_service.regenerate_custom_link(manager, manager.user_id)

    async def test_verify_developer_code(self, manager):
        """Test the correct code stamps the last security check."""
        result = await user_service.provision_developer(manager, _new_user())
        dev = await user_service.get_user_by_id(user_id=result.user_id)
        actor = Actor.from_user(dev)
        await user_service.verify_developer_code(actor, result.developer_code)

        assert (await user_service.get_user_by_id(user_id=dev.id)).last_security_check is not None

    async def test_wrong_developer_code(self, developer):
        """Test a wrong code is rejected as unauthenticated."""
        with pytest.raises(UnauthenticatedError):
            await user_service.verify_developer_code(developer, "WRONG123")

    @pytest.mark.parametrize("code", ["ÄBCDEFGH", "código", "✓✓✓✓"])
    async def test_non_ascii_developer_code_is_rejected(self, manager, code):
        """Test non-ASCII codes are rejected instead of crashing the comparison."""
        result = await user_service.provision_developer(manager, _new_user())
        actor = Actor.from_user(await user_service.get_user_by_id(user_id=result.user_id))

        with pytest.raises(UnauthenticatedError, match="Invalid developer code"):
            await user_service.verify_developer_code(actor, code)

    async def test_code_check_without_stored_code(self, developer):
        """Test an account that was never given a code cannot pass the check."""
        with pytest.raises(UnauthenticatedError):
            await user_service.verify_developer_code(developer, "")


@pytest.mark.unit
class TestLookupsAndBootstrap:
    """Tests for user lookups and the bootstrap admin."""

    async def test_get_user_by_id_missing(self, test_db):
        """Test an unknown user ID raises NotFoundError."""
        with pytest.raises(NotFoundError):
            await user_service.get_user_by_id(user_id=404)

    async def test_list_users_requires_auth(self, test_db):
        """Test listing users needs a signed-in caller."""
        with pytest.raises(UnauthenticatedError):
            await user_service.list_users(None)

    async def test_list_users_hides_password(self, developer):
        """Test listed users never carry the password hash."""
        users = await user_service.list_users(developer)

        assert [user.username for user in users] == ["dev1"]
        assert "password" not in users[0].model_dump()

    async def test_ensure_admin_user_skipped_without_password(self, test_db, monkeypatch):
        """Test no admin is created when ADMIN_PASSWORD is unset."""
        monkeypatch.setattr(settings, "admin_password", None)

        await user_service.ensure_admin_user()

        assert await db_client.fetch_all("SELECT id FROM users") == []

    async def test_ensure_admin_user_is_idempotent(self, test_db, monkeypatch):
        """Test repeated startups create the admin only once."""
        monkeypatch.setattr(settings, "admin_password", "adminpass")

        await user_service.ensure_admin_user()
        await user_service.ensure_admin_user()

        rows = await db_client.fetch_all("SELECT role FROM users")
        assert rows == [{"role": "admin"}]
