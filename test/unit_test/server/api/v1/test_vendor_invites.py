"""
Unit tests for the vendor invitation endpoints.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from vira.core.database import utc_now
from vira.core.database.entities.vendor_onboarding import VendorInvite

pytestmark = pytest.mark.asyncio

BASE = "/api/v1/vendor-invites"


@pytest.fixture
async def admin(make_user, login):
    user = await make_user("admin")
    login(user)
    return user


@pytest.fixture
def make_invite(repos):
    async def _make(email: str = "vendor@studio.test", token: str = "tok-1", **fields) -> VendorInvite:
        values = {"expires_at": utc_now() + timedelta(days=7)}
        values.update(fields)
        return await repos.invites.create(VendorInvite(email=email, invite_token=token, **values))

    return _make


class TestSendInvite:
    async def test_sends_email_with_application_link(self, client: AsyncClient, admin, mailgun):
        response = await client.post(f"{BASE}/send", json={"email": "studio@vendor.test", "notes": "Loved your work"})
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["invited_by"] == admin.id

        assert mailgun.recipients() == ["studio@vendor.test"]
        assert mailgun.tags() == ["vendor_invite"]
        html = mailgun.messages[0]["html"][0]
        assert f"/vendor/apply/{data['invite_token']}" in html
        assert "Loved your work" in html

    async def test_duplicate_pending_invite(self, client: AsyncClient, admin, make_invite):
        await make_invite(email="studio@vendor.test")
        response = await client.post(f"{BASE}/send", json={"email": "STUDIO@vendor.test"})
        assert response.status_code == 400

    async def test_email_failure_keeps_invite(self, client: AsyncClient, admin, mailgun, repos):
        mailgun.fail_with = 500
        response = await client.post(f"{BASE}/send", json={"email": "studio@vendor.test"})
        assert response.status_code == 502
        assert await repos.invites.get_pending_by_email("studio@vendor.test") is not None

    async def test_team_members_cannot_invite(self, client: AsyncClient, make_user, login):
        login(await make_user("team"))
        assert (await client.post(f"{BASE}/send", json={"email": "studio@vendor.test"})).status_code == 403


async def test_list_by_status(client: AsyncClient, admin, make_invite):
    await make_invite(email="a@vendor.test", token="a")
    await make_invite(email="b@vendor.test", token="b", status="cancelled")
    response = await client.get(BASE, params={"status": "cancelled"})
    assert [i["email"] for i in response.json()] == ["b@vendor.test"]


class TestResendAndCancel:
    async def test_resend_extends_expiry(self, client: AsyncClient, admin, make_invite, mailgun):
        invite = await make_invite(status="expired", expires_at=utc_now() - timedelta(days=1))
        response = await client.post(f"{BASE}/resend", json={"invite_id": invite.invite_id})
        assert response.status_code == 200
        assert response.json()["status"] == "pending"
        assert (await client.get(f"{BASE}/validate", params={"token": "tok-1"})).status_code == 200
        assert mailgun.recipients() == ["vendor@studio.test"]

    async def test_cannot_resend_accepted(self, client: AsyncClient, admin, make_invite):
        invite = await make_invite(status="accepted")
        assert (await client.post(f"{BASE}/resend", json={"invite_id": invite.invite_id})).status_code == 400

    async def test_cancel(self, client: AsyncClient, admin, make_invite):
        invite = await make_invite()
        response = await client.post(f"{BASE}/cancel", json={"invite_id": invite.invite_id})
        assert response.json()["status"] == "cancelled"
        again = await client.post(f"{BASE}/cancel", json={"invite_id": invite.invite_id})
        assert again.status_code == 400

    async def test_unknown_invite(self, client: AsyncClient, admin):
        assert (await client.post(f"{BASE}/cancel", json={"invite_id": 99})).status_code == 404


class TestValidate:
    async def test_valid_token_is_public(self, client: AsyncClient, make_invite):
        await make_invite()
        response = await client.get(f"{BASE}/validate", params={"token": "tok-1"})
        assert response.status_code == 200
        assert response.json()["valid"] is True
        assert response.json()["email"] == "vendor@studio.test"

    async def test_unknown_token(self, client: AsyncClient):
        response = await client.get(f"{BASE}/validate", params={"token": "nope"})
        assert response.status_code == 404
        assert response.json()["detail"] == "Invalid invitation token"

    async def test_cancelled_token(self, client: AsyncClient, make_invite):
        await make_invite(status="cancelled")
        assert (await client.get(f"{BASE}/validate", params={"token": "tok-1"})).status_code == 400

    async def test_expired_token_is_marked_expired(self, client: AsyncClient, make_invite, repos):
        invite = await make_invite(expires_at=utc_now() - timedelta(minutes=1))
        response = await client.get(f"{BASE}/validate", params={"token": "tok-1"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Invitation has expired"
        assert (await repos.invites.get_by_id(invite.invite_id)).status == "expired"
