"""Pytest configuration and fixtures for unit tests."""

import pytest

from src.domain.user import Actor, UserRole
from tests.unit.mocks import create_user


@pytest.fixture
async def admin(test_db) -> Actor:
    return await create_user("admin", UserRole.ADMIN)


@pytest.fixture
async def manager(test_db) -> Actor:
    return await create_user("manager", UserRole.COMMUNITY_MANAGER)


@pytest.fixture
async def developer(test_db) -> Actor:
    return await create_user("dev1")


@pytest.fixture
async def other_developer(test_db) -> Actor:
    return await create_user("dev2")
