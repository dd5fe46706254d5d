"""
API endpoints for the vendor portal.

Vendor users manage the profile of the vendor they are linked to and read
their own ratings. Only an allow-list of profile fields can be changed here.
"""

from __future__ import annotations

from fastapi import APIRouter

from vira.core.models.io.vendor_portal import PortalRatings
from vira.core.models.io.vendors import VendorProfileUpdate, VendorRead
from vira.server.services import vendor_portal
from vira.server.services.auth import VendorUserDep
from vira.server.services.deps import ReposDep

router = APIRouter(tags=["vendor-portal"])


@router.get(
    "/profile",
    response_model=VendorRead,
    summary="Own Vendor Profile",
    description="The vendor record linked to the signed-in vendor user.",
    response_description="The vendor profile.",
    responses={
        200: {"description": "Profile returned"},
        404: {"description": "No vendor is linked to this account"},
    },
)
async def get_profile(repos: ReposDep, user: VendorUserDep) -> VendorRead:
    return VendorRead.model_validate(await vendor_portal.linked_vendor(repos, user))


@router.put(
    "/profile",
    response_model=VendorRead,
    summary="Update Own Vendor Profile",
    description="Update contact, availability, portfolio and skills of the linked vendor.",
    response_description="The updated vendor profile.",
    responses={
        200: {"description": "Profile updated"},
        404: {"description": "No vendor is linked to this account"},
    },
)
async def update_profile(payload: VendorProfileUpdate, repos: ReposDep, user: VendorUserDep) -> VendorRead:
    """
    Update the linked vendor.

    - **vendor_name**, **primary_contact**, **email**, **phone**, **website**
    - **availability**, **availability_status**, **available_from**, **availability_notes**
    - **portfolio_url**, **sample_work_urls**, **skills**
    """
    return VendorRead.model_validate(await vendor_portal.update_own_profile(repos, user, payload))


@router.get(
    "/ratings",
    response_model=PortalRatings,
    summary="Own Ratings",
    description="Rating totals, averages per category and recent feedback for the linked vendor.",
    response_description="Rating overview.",
    responses={
        200: {"description": "Ratings returned"},
        404: {"description": "No vendor is linked to this account"},
    },
)
async def get_ratings(repos: ReposDep, user: VendorUserDep) -> PortalRatings:
    return await vendor_portal.own_ratings(repos, user)
