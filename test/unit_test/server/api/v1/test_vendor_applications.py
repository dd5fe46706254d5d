"""
Unit tests for the vendor application endpoints.

Tests cover:
- Public submission through an invitation token
- Approval creating vendor, account, profile and link
- Compensation when the identity provider fails
- Rejection
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from vira.core.database import utc_now
from vira.core.database.entities.vendor_onboarding import VendorApplication, VendorInvite

pytestmark = pytest.mark.asyncio

BASE = "/api/v1/vendor-applications"


@pytest.fixture
async def invite(repos) -> VendorInvite:
    return await repos.invites.create(
        VendorInvite(email="hello@pixel.test", invite_token="tok-apply", expires_at=utc_now() + timedelta(days=7))
    )


@pytest.fixture
async def application(repos, invite) -> VendorApplication:
    return await repos.applications.create(
        VendorApplication(
            invite_id=invite.invite_id,
            email=invite.email,
            vendor_name="Pixel Studio",
            primary_contact="Dana Lee",
            service_category="Design",
            skills="branding, web design",
        )
    )


@pytest.fixture
async def admin(make_user, login):
    user = await make_user("admin")
    login(user)
    return user


class TestSubmit:
    async def test_submit_uses_invite_email(self, client: AsyncClient, invite, repos):
        response = await client.post(
            f"{BASE}/submit",
            json={"token": "tok-apply", "vendor_name": "  Pixel Studio ", "email": "ignored@x.test", "skills": "ux"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "hello@pixel.test"
        assert data["vendor_name"] == "Pixel Studio"
        assert data["status"] == "pending"

        stored = await repos.invites.get_by_id(invite.invite_id)
        assert stored.status == "accepted"
        assert stored.accepted_at is not None

    async def test_token_cannot_be_reused(self, client: AsyncClient, invite):
        first = await client.post(f"{BASE}/submit", json={"token": "tok-apply", "vendor_name": "Pixel"})
        assert first.status_code == 201
        second = await client.post(f"{BASE}/submit", json={"token": "tok-apply", "vendor_name": "Pixel"})
        assert second.status_code == 400

    async def test_vendor_name_required(self, client: AsyncClient, invite):
        response = await client.post(f"{BASE}/submit", json={"token": "tok-apply", "vendor_name": "   "})
        assert response.status_code == 400
        assert response.json()["detail"] == "Vendor name is required"

    async def test_unknown_token(self, client: AsyncClient):
        response = await client.post(f"{BASE}/submit", json={"token": "missing", "vendor_name": "Pixel"})
        assert response.status_code == 404


async def test_list_requires_admin(client: AsyncClient, make_user, login, application):
    login(await make_user("team"))
    assert (await client.get(BASE)).status_code == 403


async def test_list_applications(client: AsyncClient, admin, application):
    response = await client.get(BASE, params={"status": "pending"})
    assert [a["vendor_name"] for a in response.json()] == ["Pixel Studio"]


class TestApprove:
    async def test_approve_creates_vendor_and_login(
        self, client: AsyncClient, admin, application, repos, identity_stub, mailgun
    ):
        response = await client.post(f"{BASE}/approve", json={"application_id": application.application_id})
        assert response.status_code == 200
        data = response.json()
        assert data["vendor_code"] == "VEN-001"
        assert data["email_sent"] is True
        assert data["application"]["status"] == "approved"
        assert data["application"]["created_vendor_id"] == data["vendor_id"]
        assert data["application"]["reviewed_by"] == admin.id

        vendor = await repos.vendors.get_by_id(data["vendor_id"])
        assert vendor.vendor_name == "Pixel Studio"
        assert vendor.service_categories == ["Design"]

        profile = await repos.users.get_by_email("hello@pixel.test")
        assert profile.role == "vendor"
        assert profile.auth_user_id == "user_1"
        assert identity_stub.created == ["user_1"]

        link = await repos.vendor_users.get_active_link(profile.id)
        assert link.vendor_id == vendor.vendor_id
        assert mailgun.tags() == ["welcome"]

    async def test_vendor_code_follows_highest_existing(
        self, client: AsyncClient, admin, application, make_vendor
    ):
        await make_vendor("Old Vendor", vendor_code="VEN-041")
        response = await client.post(f"{BASE}/approve", json={"application_id": application.application_id})
        assert response.json()["vendor_code"] == "VEN-042"

    async def test_identity_failure_removes_vendor(self, client: AsyncClient, admin, application, repos, identity_stub):
        identity_stub.fail_with = 500
        response = await client.post(f"{BASE}/approve", json={"application_id": application.application_id})
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to create user account"
        assert await repos.vendors.count() == 0
        assert (await repos.applications.get_by_id(application.application_id)).status == "pending"

    async def test_email_failure_still_approves(self, client: AsyncClient, admin, application, mailgun):
        mailgun.fail_with = 503
        response = await client.post(f"{BASE}/approve", json={"application_id": application.application_id})
        assert response.status_code == 200
        assert response.json()["email_sent"] is False

    async def test_existing_user_email_conflicts(self, client: AsyncClient, admin, application, make_user):
        await make_user("team", email="hello@pixel.test")
        response = await client.post(f"{BASE}/approve", json={"application_id": application.application_id})
        assert response.status_code == 409

    async def test_already_processed(self, client: AsyncClient, admin, application):
        await client.post(f"{BASE}/reject", json={"application_id": application.application_id})
        response = await client.post(f"{BASE}/approve", json={"application_id": application.application_id})
        assert response.status_code == 400
        assert response.json()["detail"] == "Application already processed"


class TestReject:
    async def test_default_reason(self, client: AsyncClient, admin, application):
        response = await client.post(f"{BASE}/reject", json={"application_id": application.application_id})
        assert response.status_code == 200
        assert response.json()["status"] == "rejected"
        assert response.json()["rejection_reason"] == "Application rejected by admin"

    async def test_custom_reason(self, client: AsyncClient, admin, application):
        response = await client.post(
            f"{BASE}/reject",
            json={"application_id": application.application_id, "rejection_reason": "Outside our regions"},
        )
        assert response.json()["rejection_reason"] == "Outside our regions"

    async def test_unknown_application(self, client: AsyncClient, admin):
        assert (await client.post(f"{BASE}/reject", json={"application_id": 9})).status_code == 404
