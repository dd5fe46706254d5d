"""
API endpoints for vendor invitations.

Admins send, resend and cancel invitations. ``/validate`` is public: the
application form calls it with the token from the emailed link.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, status

from vira.core.models.io.vendor_onboarding import InviteAction, InviteRead, InviteSend, InviteValidation
from vira.server.core.config import settings
from vira.server.services import onboarding
from vira.server.services.auth import AdminDep
from vira.server.services.deps import EmailDep, ReposDep

router = APIRouter(tags=["vendor-invites"])


@router.post(
    "/send",
    response_model=InviteRead,
    status_code=status.HTTP_201_CREATED,
    summary="Send Invitation",
    description="Invite a vendor by email. The link expires after seven days.",
    response_description="The stored invitation.",
    responses={
        201: {"description": "Invitation sent"},
        400: {"description": "A pending invitation already exists for this email"},
        502: {"description": "The invitation was stored but the email failed"},
    },
)
async def send_invite(payload: InviteSend, repos: ReposDep, email: EmailDep, admin: AdminDep) -> InviteRead:
    """
    Send an invitation.

    - **email**: Where to send the invitation.
    - **notes**: Optional message included in the email.
    """
    service = onboarding.InviteService(repos, email, app_url=settings.app.url)
    invite = await service.send(payload.email, notes=payload.notes, invited_by=admin.id)
    return InviteRead.model_validate(invite)


@router.get(
    "",
    response_model=List[InviteRead],
    summary="List Invitations",
    description="List invitations, newest first, optionally by status.",
    response_description="Invitations.",
    responses={200: {"description": "Invitations retrieved"}},
)
async def list_invites(
    repos: ReposDep, _admin: AdminDep, status_filter: Optional[str] = Query(default=None, alias="status")
) -> List[InviteRead]:
    return [InviteRead.model_validate(i) for i in await onboarding.list_invites(repos, status_filter)]


@router.post(
    "/resend",
    response_model=InviteRead,
    summary="Resend Invitation",
    description="Reset the expiry to seven days from now and send the email again.",
    response_description="The refreshed invitation.",
    responses={
        200: {"description": "Invitation resent"},
        400: {"description": "The invitation was accepted or cancelled"},
        404: {"description": "Invitation not found"},
    },
)
async def resend_invite(payload: InviteAction, repos: ReposDep, email: EmailDep, _admin: AdminDep) -> InviteRead:
    service = onboarding.InviteService(repos, email, app_url=settings.app.url)
    return InviteRead.model_validate(await service.resend(payload.invite_id))


@router.post(
    "/cancel",
    response_model=InviteRead,
    summary="Cancel Invitation",
    description="Cancel an invitation that has not been accepted.",
    response_description="The cancelled invitation.",
    responses={
        200: {"description": "Invitation cancelled"},
        400: {"description": "The invitation was accepted or already cancelled"},
        404: {"description": "Invitation not found"},
    },
)
async def cancel_invite(payload: InviteAction, repos: ReposDep, email: EmailDep, _admin: AdminDep) -> InviteRead:
    service = onboarding.InviteService(repos, email, app_url=settings.app.url)
    return InviteRead.model_validate(await service.cancel(payload.invite_id))


@router.get(
    "/validate",
    response_model=InviteValidation,
    summary="Validate Invitation Token",
    description="Check that an invitation token can still be used to apply. Public.",
    response_description="The invited email and the expiry.",
    responses={
        200: {"description": "Token is valid"},
        400: {"description": "Invitation expired, used or cancelled"},
        404: {"description": "Unknown token"},
    },
)
async def validate_invite(repos: ReposDep, token: str = Query(min_length=1)) -> InviteValidation:
    return await onboarding.validate_invite(repos, token)
