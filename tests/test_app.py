"""
Synapse API — Application Wiring Tests
========================================

What:  Health check, request IDs, error envelope, rate limiting, bootstrap
       admin seeding and configuration validation.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from synapse.config import DEFAULT_JWT_SECRET, Settings, settings
from synapse.main import seed_bootstrap_admin
from synapse.middleware.rate_limit import RateLimitMiddleware
from synapse.models.user import User, UserRole


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["version"]
        assert body["uptime_seconds"] >= 0

    @pytest.mark.asyncio
    async def test_database_down(self, test_client):
        with patch("synapse.routes.health.check_database", AsyncMock(return_value=False)):
            response = await test_client.get("/health")
        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"
        assert response.json()["database"] == "disconnected"


class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated_when_missing(self, test_client):
        response = await test_client.get("/api/auth/me")
        request_id = response.headers["x-request-id"]
        assert request_id
        assert response.json()["request_id"] == request_id

    @pytest.mark.asyncio
    async def test_client_value_is_reused(self, test_client):
        response = await test_client.get("/health", headers={"X-Request-ID": "trace-123"})
        assert response.headers["x-request-id"] == "trace-123"

    @pytest.mark.asyncio
    async def test_client_value_is_trimmed(self, test_client):
        response = await test_client.get("/health", headers={"X-Request-ID": "x" * 200})
        assert len(response.headers["x-request-id"]) == 64


class TestErrorEnvelope:

    @pytest.mark.asyncio
    async def test_unknown_route(self, test_client):
        response = await test_client.get("/api/nothing-here")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_schema_error_shape(self, test_client):
        response = await test_client.post("/api/applications", json={"name": "x"})
        assert response.status_code == 400
        body = response.json()
        assert set(body) == {"error", "message", "details", "request_id"}
        assert body["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_database_failure_is_generic(self, test_client, admin_user, auth_headers):
        failing = AsyncMock(side_effect=OperationalError("SELECT users", {}, Exception("connection reset")))
        with patch("synapse.routes.users.user_service.list_users", failing):
            response = await test_client.get("/api/users", headers=auth_headers(admin_user))

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert "SELECT" not in body["message"]


def _throttled_app(max_requests: int) -> FastAPI:
    app = FastAPI()
    app.add_middleware(RateLimitMiddleware, max_requests=max_requests, window_seconds=60)

    @app.get("/ping")
    async def ping():
        return {"ok": True}

    @app.get("/health")
    async def health():
        return {"ok": True}

    return app


class TestRateLimit:

    @pytest.mark.asyncio
    async def test_rejects_after_limit(self):
        transport = ASGITransport(app=_throttled_app(2))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            assert (await client.get("/ping")).status_code == 200
            assert (await client.get("/ping")).status_code == 200
            blocked = await client.get("/ping")

        assert blocked.status_code == 429
        assert blocked.json()["error"] == "rate_limit_exceeded"
        assert int(blocked.headers["retry-after"]) >= 1

    @pytest.mark.asyncio
    async def test_health_is_never_throttled(self):
        transport = ASGITransport(app=_throttled_app(1))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            for _ in range(5):
                assert (await client.get("/health")).status_code == 200


class TestBootstrapAdmin:

    @pytest.mark.asyncio
    async def test_seeds_once(self, db_session, monkeypatch):
        monkeypatch.setattr(settings, "admin_email", "root@example.com")
        monkeypatch.setattr(settings, "admin_password", "R00t@Admin")

        await seed_bootstrap_admin()
        await seed_bootstrap_admin()

        result = await db_session.execute(select(User).where(User.email == "root@example.com"))
        admins = result.scalars().all()
        assert len(admins) == 1
        assert admins[0].role == UserRole.ADMIN

    @pytest.mark.asyncio
    async def test_noop_without_credentials(self, db_session, monkeypatch):
        monkeypatch.setattr(settings, "admin_email", None)
        monkeypatch.setattr(settings, "admin_password", None)

        await seed_bootstrap_admin()

        result = await db_session.execute(select(User))
        assert result.scalars().all() == []

    @pytest.mark.asyncio
    async def test_seeded_admin_can_log_in(self, test_client, monkeypatch):
        monkeypatch.setattr(settings, "admin_email", "root@example.com")
        monkeypatch.setattr(settings, "admin_password", "R00t@Admin")
        await seed_bootstrap_admin()

        response = await test_client.post(
            "/api/auth/login", json={"email": "root@example.com", "password": "R00t@Admin"}
        )
        assert response.status_code == 200


class TestSettings:

    def test_default_secret_is_flagged(self):
        config = Settings(jwt_secret=DEFAULT_JWT_SECRET, _env_file=None)
        with pytest.raises(ValueError, match="JWT_SECRET"):
            config.validate_required_for_production()

    def test_admin_credentials_must_come_together(self):
        config = Settings(jwt_secret="a-real-secret", admin_email="root@example.com", admin_password=None, _env_file=None)
        with pytest.raises(ValueError, match="ADMIN_EMAIL"):
            config.validate_required_for_production()

    def test_valid_configuration(self):
        config = Settings(jwt_secret="a-real-secret", admin_email=None, admin_password=None, _env_file=None)
        config.validate_required_for_production()

    def test_log_level_is_normalised(self):
        assert Settings(log_level="debug", _env_file=None).log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValueError):
            Settings(log_level="LOUD", _env_file=None)

    def test_cors_origins_list(self):
        config = Settings(cors_origins="http://a.test, http://b.test", _env_file=None)
        assert config.cors_origins_list == ["http://a.test", "http://b.test"]
