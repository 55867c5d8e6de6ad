"""
Synapse API — Authentication Endpoint Tests
=============================================

What:  /api/auth/login, /api/auth/refresh-token, /api/auth/me and the
       bearer-token guard shared by every protected route.
How:   Real requests through the ASGI app against a fresh SQLite schema.
"""

from datetime import timedelta

import pytest

from synapse.models.user import UserStatus
from synapse.security import ACCESS_TOKEN, _create_token, create_refresh_token

PASSWORD = "Str0ng@Pass"


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_returns_token_pair(self, test_client, member_user):
        response = await test_client.post(
            "/api/auth/login",
            json={"email": member_user.email, "password": PASSWORD},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["accessToken"]
        assert body["refreshToken"]

    @pytest.mark.asyncio
    async def test_wrong_password(self, test_client, member_user):
        response = await test_client.post(
            "/api/auth/login",
            json={"email": member_user.email, "password": "Wr0ng@Pass"},
        )
        assert response.status_code == 401
        body = response.json()
        assert body["error"] == "unauthorized"
        assert body["message"] == "Invalid credentials"
        assert response.headers["www-authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_unknown_email_gets_same_message(self, test_client, database):
        response = await test_client.post(
            "/api/auth/login",
            json={"email": "nobody@example.com", "password": PASSWORD},
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_inactive_user_cannot_log_in(self, test_client, make_user):
        user = await make_user(status=UserStatus.INACTIVE)
        response = await test_client.post(
            "/api/auth/login",
            json={"email": user.email, "password": PASSWORD},
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_malformed_body_is_400(self, test_client, database):
        response = await test_client.post(
            "/api/auth/login",
            json={"email": "not-an-email", "password": "short"},
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["details"]["errors"]


class TestRefresh:

    @pytest.mark.asyncio
    async def test_refresh_issues_new_pair(self, test_client, member_user):
        refresh = create_refresh_token(str(member_user.id), member_user.email)
        response = await test_client.post("/api/auth/refresh-token", json={"refreshToken": refresh})
        assert response.status_code == 200
        body = response.json()
        assert body["accessToken"]
        assert body["refreshToken"]

        me = await test_client.get(
            "/api/auth/me", headers={"Authorization": f"Bearer {body['accessToken']}"}
        )
        assert me.status_code == 200

    @pytest.mark.asyncio
    async def test_access_token_is_not_accepted(self, test_client, member_user, auth_headers):
        access = auth_headers(member_user)["Authorization"].split()[1]
        response = await test_client.post("/api/auth/refresh-token", json={"refreshToken": access})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid refresh token"

    @pytest.mark.asyncio
    async def test_garbage_token(self, test_client, database):
        response = await test_client.post("/api/auth/refresh-token", json={"refreshToken": "garbage"})
        assert response.status_code == 401


class TestCurrentUser:

    @pytest.mark.asyncio
    async def test_me(self, test_client, member_user, auth_headers):
        response = await test_client.get("/api/auth/me", headers=auth_headers(member_user))
        assert response.status_code == 200
        body = response.json()
        assert body["id"] == str(member_user.id)
        assert body["email"] == member_user.email
        assert body["role"] == "MEMBER"
        assert "passwordHash" not in body
        assert "password_hash" not in body

    @pytest.mark.asyncio
    async def test_missing_header(self, test_client, database):
        response = await test_client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json()["message"] == "Missing or invalid authorization header"

    @pytest.mark.asyncio
    async def test_wrong_scheme(self, test_client, member_user):
        response = await test_client.get("/api/auth/me", headers={"Authorization": "Basic abc"})
        assert response.status_code == 401
        assert response.json()["message"] == "Missing or invalid authorization header"

    @pytest.mark.asyncio
    async def test_expired_token(self, test_client, member_user):
        token = _create_token(str(member_user.id), member_user.email, ACCESS_TOKEN, timedelta(seconds=-1))
        response = await test_client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid or expired token"

    @pytest.mark.asyncio
    async def test_refresh_token_cannot_authenticate(self, test_client, member_user):
        token = create_refresh_token(str(member_user.id), member_user.email)
        response = await test_client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_deleted_user_token_rejected(self, test_client, admin_user, member_user, auth_headers):
        headers = auth_headers(member_user)
        deleted = await test_client.delete(f"/api/users/{member_user.id}", headers=auth_headers(admin_user))
        assert deleted.status_code == 200

        response = await test_client.get("/api/auth/me", headers=headers)
        assert response.status_code == 401
