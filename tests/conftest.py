"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncIterator, Iterator

import pytest

from src.core import db_client
from src.core.config import settings
from src.core.events import get_event_sink, set_event_sink
from tests.unit.mocks import RecordingSink


@pytest.fixture(autouse=True)
def event_sink() -> Iterator[RecordingSink]:
    """Capture emitted events instead of broadcasting them."""
    sink = RecordingSink()
    previous = get_event_sink()
    set_event_sink(sink)
    yield sink
    set_event_sink(previous)


@pytest.fixture
def fast_hashing(monkeypatch: pytest.MonkeyPatch) -> None:
    """Use the minimum bcrypt cost so tests stay quick."""
    monkeypatch.setattr(settings, "bcrypt_rounds", 4)


@pytest.fixture
def db_path(tmp_path, monkeypatch: pytest.MonkeyPatch) -> str:
    """Point the database at a fresh file for this test."""
    path = str(tmp_path / "devboard.db")
    monkeypatch.setattr(settings, "sqlite_db_path", path)
    return path


@pytest.fixture
async def test_db(db_path: str, fast_hashing: None) -> AsyncIterator[str]:
    """Initialized SQLite database, closed after the test."""
    await db_client.init_db()
    yield db_path
    await db_client.close_connection()
