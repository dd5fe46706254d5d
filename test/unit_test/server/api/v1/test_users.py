"""
Unit tests for the user administration endpoints.

Tests cover:
- Reading the signed-in profile
- Creating users at the identity provider with a welcome email
- Compensation when the profile cannot be stored
- Role and activation changes guarded against losing the last admin
- Password resets
"""

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import SQLAlchemyError

from vira.core.database.repositories.users import UserProfileRepository

pytestmark = pytest.mark.asyncio

BASE = "/api/v1/users"


@pytest.fixture
async def admin(make_user, login):
    user = await make_user("admin", email="admin@vira.test")
    login(user)
    return user


async def test_read_me(client: AsyncClient, make_user, login):
    user = await make_user("vendor", email="me@vendor.test")
    login(user)
    response = await client.get(f"{BASE}/me")
    assert response.status_code == 200
    assert response.json()["email"] == "me@vendor.test"
    assert response.json()["role"] == "vendor"


async def test_inactive_user_is_refused(client: AsyncClient, make_user, login):
    login(await make_user("team", is_active=False))
    assert (await client.get(f"{BASE}/me")).status_code == 403


async def test_list_users_admin_only(client: AsyncClient, make_user, login):
    login(await make_user("team"))
    assert (await client.get(BASE)).status_code == 403


class TestCreateUser:
    async def test_creates_account_profile_and_sends_welcome(
        self, client: AsyncClient, admin, identity_stub, mailgun
    ):
        response = await client.post(BASE, json={"email": "new@vira.test", "full_name": "New Person", "role": "team"})
        assert response.status_code == 201
        data = response.json()
        assert data["email_sent"] is True
        assert data["user"]["auth_user_id"] == "user_1"
        assert data["user"]["role"] == "team"

        sent = identity_stub.requests[0]
        assert sent.method == "POST"
        assert sent.headers["Authorization"] == "Bearer sk_test"
        assert mailgun.recipients() == ["new@vira.test"]
        assert mailgun.tags() == ["welcome"]

    async def test_duplicate_email(self, client: AsyncClient, admin, identity_stub):
        response = await client.post(BASE, json={"email": "admin@vira.test"})
        assert response.status_code == 409
        assert identity_stub.requests == []

    async def test_provider_failure_is_a_bad_gateway(self, client: AsyncClient, admin, identity_stub):
        identity_stub.fail_with = 422
        response = await client.post(BASE, json={"email": "new@vira.test"})
        assert response.status_code == 502

    async def test_email_failure_is_reported(self, client: AsyncClient, admin, mailgun):
        mailgun.fail_with = 503
        response = await client.post(BASE, json={"email": "new@vira.test"})
        assert response.status_code == 201
        assert response.json()["email_sent"] is False

    async def test_profile_failure_deletes_provider_account(
        self, client: AsyncClient, admin, identity_stub, repos, monkeypatch
    ):
        async def broken_create(self, profile):
            raise SQLAlchemyError("insert failed")

        monkeypatch.setattr(UserProfileRepository, "create", broken_create)
        response = await client.post(BASE, json={"email": "new@vira.test"})
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to create user profile"
        assert identity_stub.created == ["user_1"]
        assert identity_stub.deleted == ["user_1"]


class TestUpdateUser:
    async def test_deactivate_user(self, client: AsyncClient, admin, make_user):
        member = await make_user("team")
        response = await client.patch(f"{BASE}/{member.id}", json={"is_active": False})
        assert response.status_code == 200
        assert response.json()["is_active"] is False

    async def test_change_role(self, client: AsyncClient, admin, make_user):
        member = await make_user("team")
        response = await client.patch(f"{BASE}/{member.id}", json={"role": "admin"})
        assert response.json()["role"] == "admin"

    async def test_last_admin_cannot_be_demoted(self, client: AsyncClient, admin):
        response = await client.patch(f"{BASE}/{admin.id}", json={"role": "team"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot remove the last active admin"

    async def test_last_admin_cannot_be_deactivated(self, client: AsyncClient, admin):
        response = await client.patch(f"{BASE}/{admin.id}", json={"is_active": False})
        assert response.status_code == 400

    async def test_admin_can_step_down_when_another_admin_exists(self, client: AsyncClient, admin, make_user):
        await make_user("admin")
        response = await client.patch(f"{BASE}/{admin.id}", json={"role": "team"})
        assert response.status_code == 200

    async def test_unknown_user(self, client: AsyncClient, admin):
        assert (await client.patch(f"{BASE}/999", json={"is_active": False})).status_code == 404


async def test_reset_password(client: AsyncClient, admin, make_user, identity_stub, mailgun):
    member = await make_user("team", auth_user_id="user_42")
    response = await client.put(f"{BASE}/{member.id}/reset-password")
    assert response.status_code == 200
    assert response.json() == {"message": "Password reset", "email_sent": True}

    patch_request = identity_stub.requests[0]
    assert patch_request.method == "PATCH"
    assert patch_request.url.path.endswith("/users/user_42")
    assert mailgun.recipients() == [member.email]
