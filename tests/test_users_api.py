"""
Synapse API — User Endpoint Tests
===================================

What:  /api/users CRUD, search, permissions and bulk email lookup.
"""

import uuid

import pytest

from synapse.models.user import User

NEW_MEMBER = {
    "name": "Jane Doe",
    "email": "jane@example.com",
    "company": "Acme",
    "password": "Str0ng@Pass",
}


class TestCreateUser:

    @pytest.mark.asyncio
    async def test_admin_creates_member(self, test_client, admin_user, auth_headers):
        response = await test_client.post("/api/users", json=NEW_MEMBER, headers=auth_headers(admin_user))
        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "jane@example.com"
        assert body["role"] == "MEMBER"
        assert body["status"] == "ACTIVE"
        assert "password" not in body

        login = await test_client.post(
            "/api/auth/login", json={"email": "jane@example.com", "password": "Str0ng@Pass"}
        )
        assert login.status_code == 200

    @pytest.mark.asyncio
    async def test_member_cannot_create(self, test_client, member_user, auth_headers):
        response = await test_client.post("/api/users", json=NEW_MEMBER, headers=auth_headers(member_user))
        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    @pytest.mark.asyncio
    async def test_duplicate_email(self, test_client, admin_user, auth_headers):
        headers = auth_headers(admin_user)
        first = await test_client.post("/api/users", json=NEW_MEMBER, headers=headers)
        assert first.status_code == 201

        second = await test_client.post("/api/users", json=NEW_MEMBER, headers=headers)
        assert second.status_code == 409
        assert second.json()["message"] == "Email already in use"

    @pytest.mark.asyncio
    async def test_weak_password(self, test_client, admin_user, auth_headers):
        payload = {**NEW_MEMBER, "password": "weakpassword"}
        response = await test_client.post("/api/users", json=payload, headers=auth_headers(admin_user))
        assert response.status_code == 400
        assert response.json()["message"].startswith("password:")


class TestListUsers:

    @pytest.mark.asyncio
    async def test_pagination_envelope(self, test_client, admin_user, make_user, auth_headers):
        for i in range(4):
            await make_user(name=f"Member {i}")

        response = await test_client.get("/api/users?page=2&size=2", headers=auth_headers(admin_user))
        assert response.status_code == 200
        body = response.json()
        assert body["page"] == 2
        assert body["size"] == 2
        assert body["total"] == 5
        assert body["totalPages"] == 3
        assert len(body["data"]) == 2

    @pytest.mark.asyncio
    async def test_page_past_the_end(self, test_client, admin_user, auth_headers):
        response = await test_client.get("/api/users?page=5&size=10", headers=auth_headers(admin_user))
        body = response.json()
        assert body["total"] == 1
        assert body["data"] == []

    @pytest.mark.asyncio
    async def test_search_by_name_or_email(self, test_client, admin_user, make_user, auth_headers):
        await make_user(name="Alice Walker", email="alice@example.com")
        await make_user(name="Bob Stone", email="bob@wonderland.io")

        headers = auth_headers(admin_user)
        by_name = (await test_client.get("/api/users?search=alice", headers=headers)).json()
        assert [u["email"] for u in by_name["data"]] == ["alice@example.com"]

        by_email = (await test_client.get("/api/users?search=WONDER", headers=headers)).json()
        assert [u["name"] for u in by_email["data"]] == ["Bob Stone"]

    @pytest.mark.asyncio
    async def test_search_wildcards_match_literally(self, test_client, admin_user, make_user, auth_headers):
        await make_user(name="Under_score Person", email="under_score@example.com")
        await make_user(name="Plain Person", email="plain@example.com")
        headers = auth_headers(admin_user)

        percent = (await test_client.get("/api/users", params={"search": "%"}, headers=headers)).json()
        assert percent["total"] == 0

        underscore = (await test_client.get("/api/users", params={"search": "_"}, headers=headers)).json()
        assert [u["name"] for u in underscore["data"]] == ["Under_score Person"]

    @pytest.mark.asyncio
    async def test_invalid_page_size(self, test_client, admin_user, auth_headers):
        response = await test_client.get("/api/users?size=0", headers=auth_headers(admin_user))
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_requires_token(self, test_client, database):
        response = await test_client.get("/api/users")
        assert response.status_code == 401


class TestGetUpdateDelete:

    @pytest.mark.asyncio
    async def test_get_missing_user(self, test_client, member_user, auth_headers):
        missing = uuid.uuid4()
        response = await test_client.get(f"/api/users/{missing}", headers=auth_headers(member_user))
        assert response.status_code == 404
        assert response.json()["message"] == f"User with id {missing} not found"

    @pytest.mark.asyncio
    async def test_malformed_id(self, test_client, member_user, auth_headers):
        response = await test_client.get("/api/users/not-a-uuid", headers=auth_headers(member_user))
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_member_updates_own_profile(self, test_client, member_user, auth_headers):
        response = await test_client.patch(
            f"/api/users/{member_user.id}",
            json={"name": "Renamed Member", "company": "Globex"},
            headers=auth_headers(member_user),
        )
        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Renamed Member"
        assert body["company"] == "Globex"
        assert body["email"] == member_user.email

    @pytest.mark.asyncio
    async def test_member_cannot_update_others(self, test_client, member_user, make_user, auth_headers):
        other = await make_user(email="other@example.com")
        response = await test_client.patch(
            f"/api/users/{other.id}", json={"name": "Hijacked"}, headers=auth_headers(member_user)
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_member_cannot_promote_self(self, test_client, member_user, auth_headers):
        response = await test_client.patch(
            f"/api/users/{member_user.id}", json={"role": "ADMIN"}, headers=auth_headers(member_user)
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_deactivates_member(self, test_client, admin_user, member_user, auth_headers):
        response = await test_client.patch(
            f"/api/users/{member_user.id}", json={"status": "INACTIVE"}, headers=auth_headers(admin_user)
        )
        assert response.status_code == 200
        assert response.json()["status"] == "INACTIVE"

        login = await test_client.post(
            "/api/auth/login", json={"email": member_user.email, "password": "Str0ng@Pass"}
        )
        assert login.status_code == 401

    @pytest.mark.asyncio
    async def test_email_taken_by_another_user(self, test_client, admin_user, member_user, auth_headers):
        response = await test_client.patch(
            f"/api/users/{member_user.id}",
            json={"email": admin_user.email},
            headers=auth_headers(member_user),
        )
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_password_change(self, test_client, member_user, auth_headers):
        response = await test_client.patch(
            f"/api/users/{member_user.id}",
            json={"password": "N3w@Password"},
            headers=auth_headers(member_user),
        )
        assert response.status_code == 200

        old = await test_client.post(
            "/api/auth/login", json={"email": member_user.email, "password": "Str0ng@Pass"}
        )
        new = await test_client.post(
            "/api/auth/login", json={"email": member_user.email, "password": "N3w@Password"}
        )
        assert old.status_code == 401
        assert new.status_code == 200

    @pytest.mark.asyncio
    async def test_soft_delete(self, test_client, db_session, admin_user, member_user, auth_headers):
        headers = auth_headers(admin_user)
        response = await test_client.delete(f"/api/users/{member_user.id}", headers=headers)
        assert response.status_code == 200
        assert response.json() == {
            "message": f"User {member_user.id} deleted successfully",
            "id": str(member_user.id),
        }

        assert (await test_client.get(f"/api/users/{member_user.id}", headers=headers)).status_code == 404
        listing = (await test_client.get("/api/users", headers=headers)).json()
        assert str(member_user.id) not in [u["id"] for u in listing["data"]]

        row = await db_session.get(User, member_user.id, populate_existing=True)
        assert row is not None
        assert row.deleted_at is not None

    @pytest.mark.asyncio
    async def test_member_cannot_delete(self, test_client, admin_user, member_user, auth_headers):
        response = await test_client.delete(f"/api/users/{admin_user.id}", headers=auth_headers(member_user))
        assert response.status_code == 403


class TestUserEmails:

    @pytest.mark.asyncio
    async def test_emails_in_request_order(self, test_client, admin_user, member_user, auth_headers):
        response = await test_client.post(
            "/api/users/emails",
            json=[str(member_user.id), str(admin_user.id)],
            headers=auth_headers(member_user),
        )
        assert response.status_code == 200
        assert response.json() == {
            "emails": [member_user.email, admin_user.email],
            "count": 2,
        }

    @pytest.mark.asyncio
    async def test_empty_list(self, test_client, member_user, auth_headers):
        response = await test_client.post("/api/users/emails", json=[], headers=auth_headers(member_user))
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_id(self, test_client, member_user, auth_headers):
        response = await test_client.post(
            "/api/users/emails",
            json=[str(member_user.id), str(uuid.uuid4())],
            headers=auth_headers(member_user),
        )
        assert response.status_code == 404
        assert response.json()["message"] == "One or more users not found"
