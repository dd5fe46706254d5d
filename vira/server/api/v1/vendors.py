"""
API endpoints for vendors.

Staff browse and maintain the vendor directory here. Deleting a vendor is
reserved to admins. The rating summary is also open to a vendor user looking
at its own vendor.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status

from vira.core.logging_config import get_logger
from vira.core.models.io.vendors import VendorCreate, VendorRatingSummary, VendorRead, VendorUpdate
from vira.server.services import catalog
from vira.server.services.auth import AdminDep, CurrentUserDep, StaffDep, can_view_vendor_ratings
from vira.server.services.deps import ReposDep
from vira.server.services.ratings import linked_vendor_id, vendor_rating_summary

logger = get_logger(__name__)

router = APIRouter(tags=["vendors"])


@router.get(
    "",
    response_model=List[VendorRead],
    summary="List Vendors",
    description="List vendors ordered by name, optionally filtered by a search term, status or service category.",
    response_description="A page of vendor records.",
    responses={
        200: {"description": "Vendors retrieved successfully"},
        403: {"description": "Staff access required"},
    },
)
async def list_vendors(
    repos: ReposDep,
    _user: StaffDep,
    search: Optional[str] = None,
    status_filter: Optional[str] = Query(default=None, alias="status"),
    service_category: Optional[str] = None,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
) -> List[VendorRead]:
    """
    List vendors.

    - **search**: Case-insensitive match on name, skills and specialties.
    - **status**: `active` or `inactive`.
    - **service_category**: Only vendors offering this category.
    - **limit** / **offset**: Pagination.
    """
    vendors = await repos.vendors.list(
        limit=limit,
        offset=offset,
        filters={"search": search, "status": status_filter, "service_category": service_category},
    )
    return [VendorRead.model_validate(v) for v in vendors]


@router.get(
    "/{vendor_id}",
    response_model=VendorRead,
    summary="Get Vendor",
    description="Retrieve a single vendor by its ID.",
    response_description="The vendor record.",
    responses={
        200: {"description": "Vendor found"},
        404: {"description": "Vendor not found"},
    },
)
async def get_vendor(vendor_id: int, repos: ReposDep, _user: StaffDep) -> VendorRead:
    vendor = await repos.vendors.get_by_id(vendor_id)
    if vendor is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Vendor {vendor_id} not found")
    return VendorRead.model_validate(vendor)


@router.post(
    "",
    response_model=VendorRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Vendor",
    description="Create a vendor. A vendor code is assigned when none is given.",
    response_description="The created vendor.",
    responses={
        201: {"description": "Vendor created"},
        400: {"description": "Vendor name missing"},
        409: {"description": "A vendor with this name already exists"},
    },
)
async def create_vendor(payload: VendorCreate, repos: ReposDep, _user: StaffDep) -> VendorRead:
    """
    Create a vendor.

    - **vendor_name**: Required, unique ignoring case.
    - **vendor_code**: Optional; defaults to the next free `VEN-###` code.
    """
    vendor = await catalog.create_vendor(repos, payload)
    return VendorRead.model_validate(vendor)


@router.patch(
    "/{vendor_id}",
    response_model=VendorRead,
    summary="Update Vendor",
    description="Partially update a vendor. Only the fields sent are changed.",
    response_description="The updated vendor.",
    responses={
        200: {"description": "Vendor updated"},
        404: {"description": "Vendor not found"},
        409: {"description": "Another vendor already has this name"},
    },
)
async def update_vendor(vendor_id: int, payload: VendorUpdate, repos: ReposDep, _user: StaffDep) -> VendorRead:
    vendor = await catalog.update_vendor(repos, vendor_id, payload)
    return VendorRead.model_validate(vendor)


@router.delete(
    "/{vendor_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Vendor",
    description="Delete a vendor. Admin only.",
    responses={
        204: {"description": "Vendor deleted"},
        404: {"description": "Vendor not found"},
    },
)
async def delete_vendor(vendor_id: int, repos: ReposDep, _user: AdminDep) -> None:
    if not await repos.vendors.delete(vendor_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Vendor {vendor_id} not found")
    logger.info(f"Deleted vendor {vendor_id}")


@router.get(
    "/{vendor_id}/ratings",
    response_model=VendorRatingSummary,
    summary="Vendor Rating Summary",
    description="Aggregate rating figures for a vendor together with its most recent ratings.",
    response_description="Totals, averages, rates and recent ratings.",
    responses={
        200: {"description": "Summary computed"},
        403: {"description": "Not allowed to view this vendor's ratings"},
        404: {"description": "Vendor not found"},
    },
)
async def get_vendor_ratings(vendor_id: int, repos: ReposDep, current_user: CurrentUserDep) -> VendorRatingSummary:
    """
    Summarize a vendor's ratings.

    - **totalRatings**: Number of ratings.
    - **averageRating**: Mean overall rating, one decimal.
    - **recommendationRate** / **onTimeRate** / **onBudgetRate**: Rounded percentages.
    - **recentRatings**: The five latest ratings.
    """
    linked = await linked_vendor_id(repos, current_user)
    if not can_view_vendor_ratings(current_user, vendor_id, linked):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
    return await vendor_rating_summary(repos, vendor_id)
