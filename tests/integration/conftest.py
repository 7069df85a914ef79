"""Pytest configuration and fixtures for integration tests."""

from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.core.config import settings
from src.core.db_client import close_connection, init_db
from src.interface.api_router import link_router, router as api_router
from src.interface.error_handlers import register_exception_handlers
from src.services.user_service import ensure_admin_user
from tests.integration.helpers import ADMIN_PASSWORD


@asynccontextmanager
async def _lifespan(_app: FastAPI) -> AsyncIterator[None]:
    await init_db()
    await ensure_admin_user()
    yield
    await close_connection()


@pytest.fixture
def client(db_path: str, fast_hashing: None, monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    """Test client over the API routers with a fresh database and a bootstrap admin."""
    monkeypatch.setattr(settings, "admin_password", ADMIN_PASSWORD)
    test_app = FastAPI(lifespan=_lifespan)
    test_app.include_router(api_router)
    test_app.include_router(link_router)
    register_exception_handlers(test_app)
    with TestClient(test_app) as test_client:
        yield test_client


@asynccontextmanager
async def _unmigrated_lifespan(_app: FastAPI) -> AsyncIterator[None]:
    try:
        yield
    finally:
        await close_connection()


@pytest.fixture
def unmigrated_client(db_path: str) -> Iterator[TestClient]:
    """Test client whose database file has no schema, so every query fails."""
    test_app = FastAPI(lifespan=_unmigrated_lifespan)
    test_app.include_router(api_router)
    register_exception_handlers(test_app)
    with TestClient(test_app) as test_client:
        yield test_client
