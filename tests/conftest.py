"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any
from uuid import uuid4

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import delete
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base, UserModel


# Compile JSONB as JSON for SQLite (used in tests)
@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(type_: Any, compiler: Any, **kw: Any) -> str:
    return "JSON"


# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Fixed test user ID for consistency
TEST_USER_ID = str(uuid4())


class FakeObjectStorage:
    """In-memory stand-in for the profile image bucket."""

    def __init__(self) -> None:
        self.presigned: list[tuple[str, str, int]] = []
        self.deleted: list[str] = []

    async def presign_upload(self, key: str, content_type: str, expires_in: int) -> str:
        self.presigned.append((key, content_type, expires_in))
        return f"https://images.test/{key}?X-Amz-Expires={expires_in}"

    async def delete(self, key: str) -> None:
        self.deleted.append(key)


@pytest.fixture(scope="session")
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    await engine.dispose()


@pytest.fixture(scope="session")
async def setup_database(engine: AsyncEngine) -> AsyncGenerator[None, None]:
    """Create all tables once per session."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(scope="session")
async def session_factory(
    engine: AsyncEngine, setup_database: None
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Create session factory."""
    factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    yield factory


@pytest.fixture
async def clean_users(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[None, None]:
    """Empty the users table before and after a test."""
    async with session_factory() as session:
        await session.execute(delete(UserModel))
        await session.commit()
    yield
    async with session_factory() as session:
        await session.execute(delete(UserModel))
        await session.commit()


@pytest.fixture
def test_user() -> TokenUser:
    """Create a test user with fixed ID."""
    return TokenUser(
        id=TEST_USER_ID,
        email="test@example.com",
        display_name="Test User",
    )


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def auth_token(auth_provider: JWTAuthProvider, test_user: TokenUser) -> str:
    """Create auth token for test user."""
    return str(auth_provider.create_token(test_user))


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def object_storage() -> FakeObjectStorage:
    return FakeObjectStorage()


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def authenticated_client(
    session_factory: async_sessionmaker[AsyncSession],
    clean_users: None,
    test_user: TokenUser,
    auth_provider: JWTAuthProvider,
    object_storage: FakeObjectStorage,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create authenticated test client with proper database and auth overrides.

    This client:
    - Uses an in-memory SQLite database, emptied for every test
    - Overrides auth dependency to return the test user
    - Overrides the user service to use the test session and a fake bucket
    """
    from api.dependencies.auth import get_auth_provider, get_current_user
    from api.v1.dependencies import get_user_service
    from domain.services.user_service import UserService
    from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
    from main import create_app

    app = create_app()

    # Override auth to return test user directly
    async def override_get_user() -> TokenUser:
        return test_user

    def override_get_auth_provider() -> JWTAuthProvider:
        return auth_provider

    # Create a UoW factory that uses test session
    def test_uow_factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    def override_get_user_service() -> UserService:
        return UserService(test_uow_factory, object_storage=object_storage)

    app.dependency_overrides[get_current_user] = override_get_user
    app.dependency_overrides[get_auth_provider] = override_get_auth_provider
    app.dependency_overrides[get_user_service] = override_get_user_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
