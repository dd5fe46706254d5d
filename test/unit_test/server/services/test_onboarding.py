"""
Unit tests for application approval and its compensating writes.
"""

from datetime import timedelta

import pytest
from sqlalchemy.exc import SQLAlchemyError

from vira.core.database import utc_now
from vira.core.database.entities.vendor_onboarding import VendorApplication, VendorInvite
from vira.core.database.repositories.users import UserProfileRepository, VendorUserRepository
from vira.core.database.repositories.vendor_onboarding import VendorApplicationRepository
from vira.core.errors import TransactionRollbackError
from vira.server.services.identity import IdentityProviderClient, IdentityProviderError
from vira.server.services.onboarding import ApplicationReviewer, invite_url, new_invite_token

pytestmark = pytest.mark.asyncio


@pytest.fixture
async def application(repos) -> VendorApplication:
    invite = await repos.invites.create(
        VendorInvite(email="hello@pixel.test", invite_token="tok", expires_at=utc_now() + timedelta(days=7))
    )
    return await repos.applications.create(
        VendorApplication(invite_id=invite.invite_id, email=invite.email, vendor_name="Pixel Studio")
    )


@pytest.fixture
def reviewer(repos, identity_client, email_service) -> ApplicationReviewer:
    return ApplicationReviewer(repos, identity_client, email_service, app_url="http://app.test")


async def test_profile_failure_removes_vendor_and_account(repos, reviewer, application, identity_stub, monkeypatch):
    application_id = application.application_id

    async def broken_create(self, profile):
        raise SQLAlchemyError("insert failed")

    monkeypatch.setattr(UserProfileRepository, "create", broken_create)
    with pytest.raises(TransactionRollbackError, match="Failed to create user profile"):
        await reviewer.approve(application_id, reviewer_id=1)

    assert identity_stub.created == ["user_1"]
    assert identity_stub.deleted == ["user_1"]
    assert await repos.vendors.count() == 0
    assert (await repos.applications.get_by_id(application_id)).status == "pending"


async def test_failed_account_cleanup_is_logged_not_raised(repos, reviewer, application, identity_stub, monkeypatch):
    application_id = application.application_id

    async def broken_create(self, profile):
        raise SQLAlchemyError("insert failed")

    async def broken_delete(self, user_id):
        raise IdentityProviderError("delete failed")

    monkeypatch.setattr(UserProfileRepository, "create", broken_create)
    monkeypatch.setattr(IdentityProviderClient, "delete_user", broken_delete)

    with pytest.raises(TransactionRollbackError):
        await reviewer.approve(application_id, reviewer_id=1)
    assert await repos.vendors.count() == 0


async def test_link_failure_removes_profile_vendor_and_account(
    repos, reviewer, application, identity_stub, monkeypatch
):
    application_id = application.application_id

    async def broken_link(self, link):
        raise SQLAlchemyError("insert failed")

    with monkeypatch.context() as patched:
        patched.setattr(VendorUserRepository, "create", broken_link)
        with pytest.raises(TransactionRollbackError, match="Failed to link vendor account"):
            await reviewer.approve(application_id, reviewer_id=1)

    assert identity_stub.deleted == ["user_1"]
    assert await repos.vendors.count() == 0
    assert await repos.users.get_by_email("hello@pixel.test") is None
    assert (await repos.applications.get_by_id(application_id)).status == "pending"

    outcome = await reviewer.approve(application_id, reviewer_id=1)
    assert outcome.application.status == "approved"
    assert identity_stub.created == ["user_1", "user_2"]


async def test_status_update_failure_also_removes_link(repos, reviewer, application, identity_stub, monkeypatch):
    application_id = application.application_id

    async def broken_update(self, entity):
        raise SQLAlchemyError("update failed")

    monkeypatch.setattr(VendorApplicationRepository, "update", broken_update)

    with pytest.raises(TransactionRollbackError):
        await reviewer.approve(application_id, reviewer_id=1)

    assert identity_stub.deleted == ["user_1"]
    assert await repos.vendors.count() == 0
    assert await repos.users.get_by_email("hello@pixel.test") is None
    assert (await repos.applications.get_by_id(application_id)).status == "pending"


async def test_welcome_email_has_temporary_password(reviewer, application, mailgun):
    outcome = await reviewer.approve(application.application_id, reviewer_id=1)
    assert outcome.email_sent is True
    assert outcome.profile.full_name == "Pixel Studio"
    assert "Temporary password" in mailgun.messages[0]["html"][0]


def test_invite_links():
    token = new_invite_token()
    assert len(token) >= 40
    assert invite_url("http://app.test/", token) == f"http://app.test/vendor/apply/{token}"
