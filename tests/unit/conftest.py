"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest


class FakeUnitOfWork:
    """Fake Unit of Work with a user repository mock for unit testing."""

    def __init__(self) -> None:
        self.users = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def keycloak_id() -> str:
    """A random identity-provider subject."""
    return str(uuid4())


@pytest.fixture
def other_keycloak_id() -> str:
    """A random subject distinct from keycloak_id."""
    return str(uuid4())
