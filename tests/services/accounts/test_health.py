"""
Tests for Accounts Service Health and Error Shapes
==================================================

Version: 0.1.0
"""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from services.accounts.main import create_app
from tests.helpers import API
from warden import __version__
from warden.config import Environment, Settings
from warden.store.memory import MemoryCredentialStore


class TestHealth:
    """Tests for GET /health."""

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient) -> None:
        response = await client.get(f"{API}/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "OK"
        assert body["database"] == "connected"
        assert body["uptime"] >= 0
        assert body["version"] == __version__
        assert "timestamp" in body
        assert "max_rss_bytes" in body["memory"]

    @pytest.mark.asyncio
    async def test_health_store_down(
        self,
        client: AsyncClient,
        store: MemoryCredentialStore,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        async def down() -> bool:
            return False

        monkeypatch.setattr(store, "ping", down)

        response = await client.get(f"{API}/health")

        assert response.status_code == 200
        assert response.json()["database"] == "disconnected"


class TestErrorShapes:
    """Every failure body carries exactly one ``error`` field."""

    @pytest.mark.asyncio
    async def test_unknown_route(self, client: AsyncClient) -> None:
        response = await client.get(f"{API}/nope")

        assert response.status_code == 404
        assert response.json() == {"error": "Not found"}

    @pytest.mark.asyncio
    async def test_security_headers(self, client: AsyncClient) -> None:
        response = await client.get(f"{API}/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["Cache-Control"] == "no-store"
        assert "Strict-Transport-Security" not in response.headers

    @pytest.mark.asyncio
    async def test_store_failure_is_internal_error(
        self,
        app: FastAPI,
        store: MemoryCredentialStore,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        async def broken(*args: object, **kwargs: object) -> None:
            raise RuntimeError("disk on fire")

        monkeypatch.setattr(store, "create", broken)

        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post(
                f"{API}/users",
                json={"username": "alice", "email": "alice@example.com", "password": "secret1"},
            )

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}

    def test_error_bodies_documented(self, app: FastAPI) -> None:
        """Test that failure responses are published with the error schema."""
        schema = app.openapi()
        error_ref = "#/components/schemas/ErrorResponse"

        put = schema["paths"]["/api/users/{username}"]["put"]["responses"]
        for code in ("400", "401", "403", "404"):
            assert put[code]["content"]["application/json"]["schema"]["$ref"] == error_ref

        login = schema["paths"]["/api/login"]["post"]["responses"]
        assert login["401"]["content"]["application/json"]["schema"]["$ref"] == error_ref
        assert schema["components"]["schemas"]["ErrorResponse"]["required"] == ["error"]

    @pytest.mark.parametrize(
        ("environment", "debug", "docs_url"),
        [
            (Environment.DEVELOPMENT, True, "/docs"),
            (Environment.DEVELOPMENT, False, None),
            (Environment.TESTING, True, None),
        ],
    )
    def test_docs_only_in_development_debug(
        self,
        test_settings: Settings,
        store: MemoryCredentialStore,
        environment: Environment,
        debug: bool,
        docs_url: str | None,
    ) -> None:
        settings = test_settings.model_copy(update={"environment": environment, "debug": debug})

        app = create_app(settings, store=store)

        assert app.docs_url == docs_url
