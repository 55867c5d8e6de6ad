"""
Synapse API — Member Activity Endpoint Tests
==============================================

What:  Announcements, one-on-one meetings, referrals and thank-yous.
How:   Each resource is created by the authenticated caller, who becomes
       its author / organizer / sender.
"""

import uuid

import pytest

ANNOUNCEMENT = {"title": "Welcome aboard", "content": "Say hello to our new members this week."}


class TestAnnouncements:

    @pytest.mark.asyncio
    async def test_author_is_the_caller(self, test_client, admin_user, auth_headers):
        response = await test_client.post("/api/announcements", json=ANNOUNCEMENT, headers=auth_headers(admin_user))
        assert response.status_code == 201
        body = response.json()
        assert body["authorId"] == str(admin_user.id)
        assert body["author"]["name"] == admin_user.name

    @pytest.mark.asyncio
    async def test_short_title(self, test_client, admin_user, auth_headers):
        response = await test_client.post(
            "/api/announcements", json={**ANNOUNCEMENT, "title": "Hey"}, headers=auth_headers(admin_user)
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_list_and_filter_by_author(self, test_client, admin_user, member_user, auth_headers):
        await test_client.post("/api/announcements", json=ANNOUNCEMENT, headers=auth_headers(admin_user))
        await test_client.post(
            "/api/announcements",
            json={"title": "Lost and found", "content": "Someone left an umbrella at breakfast."},
            headers=auth_headers(member_user),
        )
        headers = auth_headers(member_user)

        listing = (await test_client.get("/api/announcements", headers=headers)).json()
        assert listing["total"] == 2

        mine = (await test_client.get(f"/api/announcements/author/{member_user.id}", headers=headers)).json()
        assert [a["title"] for a in mine] == ["Lost and found"]

        filtered = (
            await test_client.get("/api/announcements", params={"authorId": str(admin_user.id)}, headers=headers)
        ).json()
        assert [a["title"] for a in filtered["data"]] == ["Welcome aboard"]

        searched = (await test_client.get("/api/announcements", params={"search": "umbrella"}, headers=headers)).json()
        assert searched["total"] == 1

    @pytest.mark.asyncio
    async def test_update_and_delete(self, test_client, admin_user, auth_headers):
        headers = auth_headers(admin_user)
        created = (await test_client.post("/api/announcements", json=ANNOUNCEMENT, headers=headers)).json()
        url = f"/api/announcements/{created['id']}"

        updated = await test_client.patch(url, json={"title": "Welcome, everyone"}, headers=headers)
        assert updated.status_code == 200
        assert updated.json()["title"] == "Welcome, everyone"
        assert updated.json()["content"] == ANNOUNCEMENT["content"]

        assert (await test_client.delete(url, headers=headers)).status_code == 204
        missing = await test_client.get(url, headers=headers)
        assert missing.status_code == 404
        assert missing.json()["message"] == "Announcement not found"


class TestOneOnOneMeetings:

    @pytest.mark.asyncio
    async def test_schedule(self, test_client, admin_user, member_user, auth_headers):
        response = await test_client.post(
            "/api/one-on-one-meetings",
            json={"member2Id": str(admin_user.id), "date": "2025-04-01T12:00:00Z", "notes": "Coffee"},
            headers=auth_headers(member_user),
        )
        assert response.status_code == 201
        body = response.json()
        assert body["member1Id"] == str(member_user.id)
        assert body["member2"]["email"] == admin_user.email
        assert body["notes"] == "Coffee"

    @pytest.mark.asyncio
    async def test_cannot_meet_yourself(self, test_client, member_user, auth_headers):
        response = await test_client.post(
            "/api/one-on-one-meetings",
            json={"member2Id": str(member_user.id), "date": "2025-04-01T12:00:00Z"},
            headers=auth_headers(member_user),
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Cannot schedule a one-on-one meeting with yourself"

    @pytest.mark.asyncio
    async def test_unknown_counterpart(self, test_client, member_user, auth_headers):
        response = await test_client.post(
            "/api/one-on-one-meetings",
            json={"member2Id": str(uuid.uuid4()), "date": "2025-04-01T12:00:00Z"},
            headers=auth_headers(member_user),
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_member_sees_both_sides(self, test_client, admin_user, member_user, make_user, auth_headers):
        third = await make_user(email="third@example.com")
        await test_client.post(
            "/api/one-on-one-meetings",
            json={"member2Id": str(admin_user.id), "date": "2025-04-01T12:00:00Z"},
            headers=auth_headers(member_user),
        )
        await test_client.post(
            "/api/one-on-one-meetings",
            json={"member2Id": str(member_user.id), "date": "2025-05-01T12:00:00Z"},
            headers=auth_headers(third),
        )
        headers = auth_headers(member_user)

        mine = (await test_client.get(f"/api/one-on-one-meetings/member/{member_user.id}", headers=headers)).json()
        assert len(mine) == 2
        assert mine[0]["member1Id"] == str(third.id)

        admins = (
            await test_client.get("/api/one-on-one-meetings", params={"memberId": str(admin_user.id)}, headers=headers)
        ).json()
        assert admins["total"] == 1

    @pytest.mark.asyncio
    async def test_update_notes_and_delete(self, test_client, admin_user, member_user, auth_headers):
        headers = auth_headers(member_user)
        created = (
            await test_client.post(
                "/api/one-on-one-meetings",
                json={"member2Id": str(admin_user.id), "date": "2025-04-01T12:00:00Z"},
                headers=headers,
            )
        ).json()
        url = f"/api/one-on-one-meetings/{created['id']}"

        updated = await test_client.patch(url, json={"notes": "Talked about hiring"}, headers=headers)
        assert updated.status_code == 200
        assert updated.json()["notes"] == "Talked about hiring"

        assert (await test_client.delete(url, headers=headers)).status_code == 204
        assert (await test_client.get(url, headers=headers)).status_code == 404


REFERRAL = {
    "contactName": "Linus Pauling",
    "contactEmail": "linus@example.com",
    "company": "Caltech",
    "description": "Looking for a lab equipment supplier",
}


async def _refer(client, sender_headers, to_member_id):
    response = await client.post(
        "/api/referrals", json={**REFERRAL, "toMemberId": str(to_member_id)}, headers=sender_headers
    )
    assert response.status_code == 201
    return response.json()


class TestReferrals:

    @pytest.mark.asyncio
    async def test_create(self, test_client, admin_user, member_user, auth_headers):
        body = await _refer(test_client, auth_headers(member_user), admin_user.id)
        assert body["status"] == "SENT"
        assert body["fromMemberId"] == str(member_user.id)
        assert body["toMember"]["email"] == admin_user.email

    @pytest.mark.asyncio
    async def test_unknown_recipient(self, test_client, member_user, auth_headers):
        response = await test_client.post(
            "/api/referrals",
            json={**REFERRAL, "toMemberId": str(uuid.uuid4())},
            headers=auth_headers(member_user),
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_status_workflow(self, test_client, admin_user, member_user, auth_headers):
        headers = auth_headers(admin_user)
        referral = await _refer(test_client, auth_headers(member_user), admin_user.id)

        response = await test_client.patch(
            f"/api/referrals/{referral['id']}", json={"status": "NEGOTIATING"}, headers=headers
        )
        assert response.status_code == 200
        assert response.json()["status"] == "NEGOTIATING"

        by_status = (await test_client.get("/api/referrals/status/NEGOTIATING", headers=headers)).json()
        assert [r["id"] for r in by_status] == [referral["id"]]
        assert (await test_client.get("/api/referrals/status/SENT", headers=headers)).json() == []

        filtered = (await test_client.get("/api/referrals", params={"status": "NEGOTIATING"}, headers=headers)).json()
        assert filtered["total"] == 1

    @pytest.mark.asyncio
    async def test_invalid_status(self, test_client, admin_user, member_user, auth_headers):
        referral = await _refer(test_client, auth_headers(member_user), admin_user.id)
        response = await test_client.patch(
            f"/api/referrals/{referral['id']}", json={"status": "WON"}, headers=auth_headers(admin_user)
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_list_by_member_covers_both_directions(self, test_client, admin_user, member_user, auth_headers):
        await _refer(test_client, auth_headers(member_user), admin_user.id)
        await _refer(test_client, auth_headers(admin_user), member_user.id)

        response = await test_client.get(f"/api/referrals/member/{member_user.id}", headers=auth_headers(member_user))
        assert len(response.json()) == 2

    @pytest.mark.asyncio
    async def test_delete(self, test_client, admin_user, member_user, auth_headers):
        headers = auth_headers(member_user)
        referral = await _refer(test_client, headers, admin_user.id)
        url = f"/api/referrals/{referral['id']}"

        assert (await test_client.delete(url, headers=headers)).status_code == 204
        missing = await test_client.get(url, headers=headers)
        assert missing.status_code == 404
        assert missing.json()["message"] == "Referral not found"


class TestThankYous:

    @pytest.mark.asyncio
    async def test_create_with_referral(self, test_client, admin_user, member_user, auth_headers):
        referral = await _refer(test_client, auth_headers(admin_user), member_user.id)

        response = await test_client.post(
            "/api/thank-you",
            json={
                "toMemberId": str(admin_user.id),
                "description": "Thanks for the Caltech intro",
                "amount": 150.5,
                "referralId": referral["id"],
            },
            headers=auth_headers(member_user),
        )
        assert response.status_code == 201
        body = response.json()
        assert body["amount"] == 150.5
        assert body["fromMemberId"] == str(member_user.id)
        assert body["referral"]["contactName"] == "Linus Pauling"

    @pytest.mark.asyncio
    async def test_amount_is_optional(self, test_client, admin_user, member_user, auth_headers):
        response = await test_client.post(
            "/api/thank-you",
            json={"toMemberId": str(admin_user.id), "description": "Thanks for the advice"},
            headers=auth_headers(member_user),
        )
        assert response.status_code == 201
        assert response.json()["amount"] is None
        assert response.json()["referral"] is None

    @pytest.mark.asyncio
    async def test_unknown_referral(self, test_client, admin_user, member_user, auth_headers):
        response = await test_client.post(
            "/api/thank-you",
            json={
                "toMemberId": str(admin_user.id),
                "description": "Thanks for the Caltech intro",
                "referralId": str(uuid.uuid4()),
            },
            headers=auth_headers(member_user),
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Referral not found"

    @pytest.mark.asyncio
    async def test_negative_amount(self, test_client, admin_user, member_user, auth_headers):
        response = await test_client.post(
            "/api/thank-you",
            json={"toMemberId": str(admin_user.id), "description": "Thanks for the advice", "amount": -5},
            headers=auth_headers(member_user),
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_list_delete(self, test_client, admin_user, member_user, auth_headers):
        headers = auth_headers(member_user)
        created = (
            await test_client.post(
                "/api/thank-you",
                json={"toMemberId": str(admin_user.id), "description": "Thanks for the advice", "amount": 10},
                headers=headers,
            )
        ).json()
        url = f"/api/thank-you/{created['id']}"

        updated = await test_client.patch(url, json={"amount": 25.75}, headers=headers)
        assert updated.status_code == 200
        assert updated.json()["amount"] == 25.75
        assert updated.json()["description"] == "Thanks for the advice"

        received = (await test_client.get(f"/api/thank-you/member/{admin_user.id}", headers=headers)).json()
        assert [t["id"] for t in received] == [created["id"]]

        listing = (await test_client.get("/api/thank-you", params={"memberId": str(member_user.id)}, headers=headers)).json()
        assert listing["total"] == 1

        assert (await test_client.delete(url, headers=headers)).status_code == 204
        missing = await test_client.get(url, headers=headers)
        assert missing.status_code == 404
        assert missing.json()["message"] == "Thank you not found"
