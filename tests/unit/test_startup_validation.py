"""Tests for startup validation."""

import pytest

from src.core.config import DEV_SECRET_KEY, settings
from src.main import validate_startup_configuration


@pytest.mark.unit
class TestValidateStartupConfiguration:
    """Tests for validate_startup_configuration."""

    def test_development_accepts_default_secret(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the default signing key is allowed outside production."""
        monkeypatch.setattr(settings, "is_production", False)
        monkeypatch.setattr(settings, "secret_key", DEV_SECRET_KEY)

        validate_startup_configuration()

    def test_production_rejects_default_secret(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test production startup exits when SECRET_KEY is the development default."""
        monkeypatch.setattr(settings, "is_production", True)
        monkeypatch.setattr(settings, "secret_key", DEV_SECRET_KEY)

        with pytest.raises(SystemExit) as exc_info:
            validate_startup_configuration()

        assert exc_info.value.code == 1
        assert "SECRET_KEY" in capsys.readouterr().err

    def test_production_rejects_empty_secret(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test production startup exits when SECRET_KEY is empty."""
        monkeypatch.setattr(settings, "is_production", True)
        monkeypatch.setattr(settings, "secret_key", "")

        with pytest.raises(SystemExit):
            validate_startup_configuration()

    def test_production_accepts_custom_secret(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test production startup passes with a real signing key."""
        monkeypatch.setattr(settings, "is_production", True)
        monkeypatch.setattr(settings, "secret_key", "a-long-random-production-secret")

        validate_startup_configuration()
