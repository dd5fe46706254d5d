"""
API endpoints for vendor applications.

Applicants submit through the public ``/submit`` endpoint with their
invitation token; admins approve or reject.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, status

from vira.core.models.io.vendor_onboarding import (
    ApplicationApprovalResult,
    ApplicationApprove,
    ApplicationRead,
    ApplicationReject,
    ApplicationSubmit,
)
from vira.server.core.config import settings
from vira.server.services import onboarding
from vira.server.services.auth import AdminDep
from vira.server.services.deps import EmailDep, IdentityDep, ReposDep

router = APIRouter(tags=["vendor-applications"])


@router.post(
    "/submit",
    response_model=ApplicationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Application",
    description="Submit a vendor application with an invitation token. Public.",
    response_description="The stored application.",
    responses={
        201: {"description": "Application submitted"},
        400: {"description": "Invitation not usable or vendor name missing"},
        404: {"description": "Unknown token"},
    },
)
async def submit_application(payload: ApplicationSubmit, repos: ReposDep) -> ApplicationRead:
    """
    Submit an application.

    - **token**: Token from the invitation link.
    - **vendor_name**: Required.
    - Contact, offer and availability fields are optional. The email comes from the invitation.
    """
    return ApplicationRead.model_validate(await onboarding.submit_application(repos, payload))


@router.get(
    "",
    response_model=List[ApplicationRead],
    summary="List Applications",
    description="List applications, optionally by status. Admin only.",
    response_description="Applications.",
    responses={200: {"description": "Applications retrieved"}},
)
async def list_applications(
    repos: ReposDep, _admin: AdminDep, status_filter: Optional[str] = Query(default=None, alias="status")
) -> List[ApplicationRead]:
    return [ApplicationRead.model_validate(a) for a in await onboarding.list_applications(repos, status_filter)]


@router.post(
    "/approve",
    response_model=ApplicationApprovalResult,
    summary="Approve Application",
    description="Create the vendor, its login and vendor profile from a pending application.",
    response_description="The approved application with the new vendor and user IDs.",
    responses={
        200: {"description": "Application approved"},
        400: {"description": "Application already processed"},
        404: {"description": "Application not found"},
        409: {"description": "A user with the application email already exists"},
        500: {"description": "A step failed and earlier steps were undone"},
    },
)
async def approve_application(
    payload: ApplicationApprove,
    repos: ReposDep,
    identity: IdentityDep,
    email: EmailDep,
    admin: AdminDep,
) -> ApplicationApprovalResult:
    reviewer = onboarding.ApplicationReviewer(repos, identity, email, app_url=settings.app.url)
    outcome = await reviewer.approve(payload.application_id, reviewer_id=admin.id)
    return ApplicationApprovalResult(
        application=ApplicationRead.model_validate(outcome.application),
        vendor_id=outcome.vendor.vendor_id,
        vendor_code=outcome.vendor.vendor_code,
        user_id=outcome.profile.id,
        email_sent=outcome.email_sent,
    )


@router.post(
    "/reject",
    response_model=ApplicationRead,
    summary="Reject Application",
    description="Reject a pending application.",
    response_description="The rejected application.",
    responses={
        200: {"description": "Application rejected"},
        400: {"description": "Application already processed"},
        404: {"description": "Application not found"},
    },
)
async def reject_application(payload: ApplicationReject, repos: ReposDep, admin: AdminDep) -> ApplicationRead:
    application = await onboarding.reject_application(
        repos, payload.application_id, reviewer_id=admin.id, reason=payload.rejection_reason
    )
    return ApplicationRead.model_validate(application)
