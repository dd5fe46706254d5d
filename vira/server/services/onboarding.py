"""
Vendor onboarding: invitations, applications and approval.

An admin invites a vendor by email. The vendor follows the tokenized link,
submits an application, and an admin approves or rejects it. Approval
creates the vendor, an identity-provider account, a ``vendor`` profile and
the link between them. Each of those is a separate write, so a failure part
way through undoes the earlier steps with compensating writes.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import timedelta
from typing import Awaitable, Callable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from vira.core.database import utc_now
from vira.core.database.entities.users import UserProfile, UserRole, VendorUser
from vira.core.database.entities.vendor_onboarding import (
    ApplicationStatus,
    InviteStatus,
    VendorApplication,
    VendorInvite,
)
from vira.core.database.entities.vendors import Vendor
from vira.core.database.repositories import RepositoryBundle
from vira.core.errors import ConflictError, NotFoundError, TransactionRollbackError, ValidationFailedError
from vira.core.logging_config import get_logger
from vira.core.models.io.vendor_onboarding import ApplicationSubmit, InviteValidation
from vira.server.core import constant

from .email_service import EmailDeliveryError, EmailService, vendor_invite_email, welcome_email
from .identity import IdentityProviderClient, IdentityProviderError, generate_temporary_password

logger = get_logger(__name__)

DEFAULT_REJECTION_REASON = "Application rejected by admin"

# Application fields copied onto the new vendor row
_VENDOR_FIELDS = (
    "vendor_name",
    "email",
    "primary_contact",
    "phone",
    "website",
    "industry",
    "skills",
    "pricing_structure",
    "rate_cost",
    "availability",
    "available_from",
    "availability_notes",
    "portfolio_url",
    "sample_work_urls",
)


def invite_url(app_url: str, token: str) -> str:
    return f"{app_url.rstrip('/')}/vendor/apply/{token}"


def new_invite_token() -> str:
    return secrets.token_urlsafe(32)


class InviteService:
    """Sends, resends, cancels and validates vendor invitations."""

    def __init__(self, repos: RepositoryBundle, email: EmailService, *, app_url: str) -> None:
        self._repos = repos
        self._email = email
        self._app_url = app_url

    async def send(self, email_address: str, *, notes: Optional[str], invited_by: Optional[int]) -> VendorInvite:
        """Create a pending invite and email its link.

        Raises:
            ValidationFailedError: a pending invite already exists for the email
            EmailDeliveryError: the invite was stored but the email failed
        """
        address = email_address.strip()
        if await self._repos.invites.get_pending_by_email(address):
            raise ValidationFailedError("A pending invitation already exists for this email")

        invite = await self._repos.invites.create(
            VendorInvite(
                email=address,
                invite_token=new_invite_token(),
                invited_by=invited_by,
                notes=notes,
                expires_at=utc_now() + timedelta(days=constant.INVITE_EXPIRY_DAYS),
            )
        )
        logger.info(f"Vendor invite {invite.invite_id} created for {address}")
        await self._deliver(invite)
        return invite

    async def resend(self, invite_id: int) -> VendorInvite:
        invite = await self._get(invite_id)
        if invite.status in (InviteStatus.accepted.value, InviteStatus.cancelled.value):
            raise ValidationFailedError(f"Cannot resend an invitation that is {invite.status}")

        invite.status = InviteStatus.pending.value
        invite.expires_at = utc_now() + timedelta(days=constant.INVITE_EXPIRY_DAYS)
        invite = await self._repos.invites.update(invite)
        await self._deliver(invite)
        return invite

    async def cancel(self, invite_id: int) -> VendorInvite:
        invite = await self._get(invite_id)
        if invite.status in (InviteStatus.accepted.value, InviteStatus.cancelled.value):
            raise ValidationFailedError(f"Cannot cancel an invitation that is {invite.status}")
        invite.status = InviteStatus.cancelled.value
        return await self._repos.invites.update(invite)

    async def _get(self, invite_id: int) -> VendorInvite:
        invite = await self._repos.invites.get_by_id(invite_id)
        if invite is None:
            raise NotFoundError("Invitation not found")
        return invite

    async def _deliver(self, invite: VendorInvite) -> None:
        message = vendor_invite_email(
            invite_url=invite_url(self._app_url, invite.invite_token),
            expires_at=invite.expires_at,
            notes=invite.notes,
        )
        try:
            await self._email.send_message(invite.email, message)
        except EmailDeliveryError as e:
            logger.error(f"Invite email for invite {invite.invite_id} failed: {e}", exc_info=True)
            raise


async def check_invite_token(repos: RepositoryBundle, token: str) -> VendorInvite:
    """Return the invite for ``token`` if an application may still be submitted with it.

    An expired pending invite is marked ``expired`` on the way out.
    """
    invite = await repos.invites.get_by_token(token) if token else None
    if invite is None:
        raise NotFoundError("Invalid invitation token")
    if invite.status != InviteStatus.pending.value:
        raise ValidationFailedError(f"Invitation is {invite.status}")
    if invite.expires_at < utc_now():
        invite.status = InviteStatus.expired.value
        await repos.invites.update(invite)
        raise ValidationFailedError("Invitation has expired")
    if await repos.applications.get_by_invite(invite.invite_id):
        raise ValidationFailedError("An application has already been submitted for this invitation")
    return invite


async def validate_invite(repos: RepositoryBundle, token: str) -> InviteValidation:
    invite = await check_invite_token(repos, token)
    return InviteValidation(valid=True, email=invite.email, expires_at=invite.expires_at)


async def submit_application(repos: RepositoryBundle, submission: ApplicationSubmit) -> VendorApplication:
    invite = await check_invite_token(repos, submission.token)
    if not submission.vendor_name or not submission.vendor_name.strip():
        raise ValidationFailedError("Vendor name is required")

    values = submission.model_dump(exclude={"token"}, exclude_none=True)
    values["vendor_name"] = submission.vendor_name.strip()
    application = await repos.applications.create(
        VendorApplication(invite_id=invite.invite_id, email=invite.email, **values)
    )

    invite.status = InviteStatus.accepted.value
    invite.accepted_at = utc_now()
    await repos.invites.update(invite)
    logger.info(f"Vendor application {application.application_id} submitted for invite {invite.invite_id}")
    return application


async def pending_application(repos: RepositoryBundle, application_id: int) -> VendorApplication:
    application = await repos.applications.get_by_id(application_id)
    if application is None:
        raise NotFoundError("Application not found")
    if application.status != ApplicationStatus.pending.value:
        raise ValidationFailedError("Application already processed")
    return application


async def reject_application(
    repos: RepositoryBundle, application_id: int, *, reviewer_id: int, reason: Optional[str] = None
) -> VendorApplication:
    application = await pending_application(repos, application_id)
    application.status = ApplicationStatus.rejected.value
    application.reviewed_by = reviewer_id
    application.reviewed_at = utc_now()
    application.rejection_reason = reason or DEFAULT_REJECTION_REASON
    application = await repos.applications.update(application)
    logger.info(f"Application {application_id} rejected")
    return application


@dataclass
class ApprovalOutcome:
    application: VendorApplication
    vendor: Vendor
    profile: UserProfile
    email_sent: bool


class ApplicationReviewer:
    """Turns a pending application into a vendor with a login."""

    def __init__(
        self,
        repos: RepositoryBundle,
        identity: IdentityProviderClient,
        email: EmailService,
        *,
        app_url: str,
    ) -> None:
        self._repos = repos
        self._identity = identity
        self._email = email
        self._app_url = app_url

    async def approve(self, application_id: int, *, reviewer_id: int) -> ApprovalOutcome:
        """Create vendor, account, profile and link for a pending application.

        Raises:
            NotFoundError: unknown application
            ValidationFailedError: the application is not pending
            ConflictError: a profile already uses the application email
            TransactionRollbackError: a step failed and earlier steps were undone
        """
        application = await pending_application(self._repos, application_id)
        email_address = application.email
        contact_name = application.primary_contact or application.vendor_name
        if await self._repos.users.get_by_email(email_address):
            raise ConflictError("A user with this email already exists")

        vendor_code = await self._repos.vendors.next_vendor_code()
        vendor = Vendor(
            vendor_code=vendor_code,
            service_categories=[application.service_category] if application.service_category else [],
            availability_status=application.availability_status or "Available",
            onboarding_date=utc_now().date(),
            **{name: getattr(application, name) for name in _VENDOR_FIELDS},
        )
        try:
            vendor = await self._repos.vendors.create(vendor)
        except SQLAlchemyError as e:
            await self._repos.session.rollback()
            logger.error(f"Vendor creation for application {application_id} failed: {e}", exc_info=True)
            raise TransactionRollbackError("Failed to create vendor") from e
        vendor_id = vendor.vendor_id

        password = generate_temporary_password()
        try:
            auth_user_id = await self._identity.create_user(email_address, password, contact_name)
        except IdentityProviderError as e:
            logger.error(f"Account creation for application {application_id} failed: {e}", exc_info=True)
            await self._undo(f"delete vendor {vendor_id}", lambda: self._repos.vendors.delete(vendor_id))
            raise TransactionRollbackError("Failed to create user account", details=e.details) from e

        try:
            profile = await self._repos.users.create(
                UserProfile(
                    auth_user_id=auth_user_id,
                    email=email_address,
                    full_name=contact_name,
                    role=UserRole.vendor.value,
                )
            )
        except SQLAlchemyError as e:
            await self._repos.session.rollback()
            logger.error(f"Profile creation for application {application_id} failed: {e}", exc_info=True)
            await self._undo(f"delete vendor {vendor_id}", lambda: self._repos.vendors.delete(vendor_id))
            await self._undo(f"delete account {auth_user_id}", lambda: self._identity.delete_user(auth_user_id))
            raise TransactionRollbackError("Failed to create user profile") from e

        profile_id = profile.id
        try:
            await self._repos.vendor_users.create(VendorUser(vendor_id=vendor_id, user_id=profile_id))
            application = await self._repos.applications.get_by_id(application_id)
            application.status = ApplicationStatus.approved.value
            application.reviewed_by = reviewer_id
            application.reviewed_at = utc_now()
            application.created_vendor_id = vendor_id
            application = await self._repos.applications.update(application)
        except SQLAlchemyError as e:
            await self._repos.session.rollback()
            logger.error(f"Linking vendor {vendor_id} for application {application_id} failed: {e}", exc_info=True)
            await self._undo(f"unlink profile {profile_id}", lambda: self._repos.vendor_users.delete_for_user(profile_id))
            await self._undo(f"delete profile {profile_id}", lambda: self._repos.users.delete(profile_id))
            await self._undo(f"delete vendor {vendor_id}", lambda: self._repos.vendors.delete(vendor_id))
            await self._undo(f"delete account {auth_user_id}", lambda: self._identity.delete_user(auth_user_id))
            raise TransactionRollbackError("Failed to link vendor account") from e

        email_sent = True
        try:
            await self._email.send_message(
                email_address,
                welcome_email(
                    full_name=contact_name,
                    email=email_address,
                    temporary_password=password,
                    app_url=self._app_url,
                ),
            )
        except EmailDeliveryError as e:
            logger.error(f"Welcome email for vendor {vendor_id} failed: {e}", exc_info=True)
            email_sent = False

        logger.info(f"Application {application_id} approved as vendor {vendor_code}")
        return ApprovalOutcome(application=application, vendor=vendor, profile=profile, email_sent=email_sent)

    @staticmethod
    async def _undo(description: str, action: Callable[[], Awaitable[object]]) -> None:
        try:
            await action()
        except (SQLAlchemyError, IdentityProviderError) as e:
            logger.error(f"Compensating write failed ({description}): {e}", exc_info=True)


async def list_invites(repos: RepositoryBundle, status: Optional[str] = None) -> List[VendorInvite]:
    return await repos.invites.list(filters={"status": status})


async def list_applications(repos: RepositoryBundle, status: Optional[str] = None) -> List[VendorApplication]:
    return await repos.applications.list(filters={"status": status})
