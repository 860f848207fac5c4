"""
Test Configuration
==================

Pytest fixtures for Warden tests.
"""

import os
from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment before any warden import builds settings
os.environ["ENVIRONMENT"] = "testing"
os.environ["STORE_BACKEND"] = "memory"
os.environ["ARGON2_MEMORY_COST"] = "1024"
os.environ["ARGON2_TIME_COST"] = "1"
os.environ["JWT_ACCESS_SECRET"] = "test-access-secret"
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret"

from tests.helpers import login, register  # noqa: E402
from warden.auth.password import PasswordHasher  # noqa: E402
from warden.auth.tokens import TokenService  # noqa: E402
from warden.config import Argon2Settings, JWTSettings, Settings  # noqa: E402
from warden.models.account import Role  # noqa: E402
from warden.store.memory import MemoryCredentialStore  # noqa: E402


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return "asyncio"


@pytest.fixture
def jwt_settings() -> JWTSettings:
    return JWTSettings(
        access_secret="test-access-secret",
        refresh_secret="test-refresh-secret",
        access_token_expire_minutes=60,
        refresh_token_expire_days=7,
    )


@pytest.fixture
def argon2_settings() -> Argon2Settings:
    """Cheap hashing parameters so tests stay fast."""
    return Argon2Settings(memory_cost=1024, time_cost=1, parallelism=1)


@pytest.fixture
def test_settings(jwt_settings: JWTSettings, argon2_settings: Argon2Settings) -> Settings:
    return Settings(
        environment="testing",
        store_backend="memory",
        jwt=jwt_settings,
        argon2=argon2_settings,
    )


@pytest.fixture
def store() -> MemoryCredentialStore:
    return MemoryCredentialStore()


@pytest.fixture
def hasher(argon2_settings: Argon2Settings) -> PasswordHasher:
    return PasswordHasher(argon2_settings)


@pytest.fixture
def tokens(jwt_settings: JWTSettings) -> TokenService:
    return TokenService(jwt_settings)


@pytest.fixture
def app(test_settings: Settings, store: MemoryCredentialStore) -> Any:
    from services.accounts.main import create_app

    return create_app(test_settings, store=store)


@pytest_asyncio.fixture
async def client(app: Any) -> AsyncGenerator[AsyncClient, None]:
    """Create test client for the Accounts Service."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest_asyncio.fixture
async def seeded(
    client: AsyncClient,
    store: MemoryCredentialStore,
) -> dict[str, dict[str, str]]:
    """
    Create an admin (``admin``/``admin123``) and a user
    (``testuser``/``password123``) and return their session cookies.
    """
    await register(client, "admin", "admin@test.com", "admin123")
    admin = await store.get_by_username("admin")
    assert admin is not None
    await store.update(admin.id, {"role": Role.ADMIN})

    await register(client, "testuser", "test@test.com", "password123")

    return {
        "admin": await login(client, "admin", "admin123"),
        "user": await login(client, "testuser", "password123"),
    }
