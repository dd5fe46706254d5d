"""Self-service views for vendor users: their own profile and ratings."""

from __future__ import annotations

from typing import Optional, Sequence

from vira.core.database.entities.users import UserProfile
from vira.core.database.entities.vendors import Vendor
from vira.core.database.repositories import RepositoryBundle
from vira.core.errors import NotFoundError
from vira.core.models.io.vendor_portal import PortalCategoryAverages, PortalFeedback, PortalRatings
from vira.core.models.io.vendors import VendorProfileUpdate

from .catalog import update_vendor

RECENT_FEEDBACK = 5


def _average(values: Sequence[Optional[int]]) -> Optional[float]:
    present = [v for v in values if v is not None]
    return round(sum(present) / len(present), 1) if present else None


async def linked_vendor(repos: RepositoryBundle, user: UserProfile) -> Vendor:
    link = await repos.vendor_users.get_active_link(user.id)
    vendor = await repos.vendors.get_by_id(link.vendor_id) if link else None
    if vendor is None:
        raise NotFoundError("No vendor is linked to this account")
    return vendor


async def update_own_profile(repos: RepositoryBundle, user: UserProfile, request: VendorProfileUpdate) -> Vendor:
    vendor = await linked_vendor(repos, user)
    return await update_vendor(repos, vendor.vendor_id, request)


async def own_ratings(repos: RepositoryBundle, user: UserProfile) -> PortalRatings:
    vendor = await linked_vendor(repos, user)
    ratings = await repos.ratings.list_by_vendor(vendor.vendor_id)

    feedback = []
    for rating in ratings[:RECENT_FEEDBACK]:
        project = await repos.projects.get_by_id(rating.project_id)
        feedback.append(
            PortalFeedback(
                project_title=project.project_title if project else None,
                vendor_overall_rating=rating.vendor_overall_rating,
                what_went_well=rating.what_went_well,
                areas_for_improvement=rating.areas_for_improvement,
                rating_date=rating.rating_date,
            )
        )

    return PortalRatings(
        total_projects=len(ratings),
        average_rating=_average([r.vendor_overall_rating for r in ratings]),
        category_averages=PortalCategoryAverages(
            quality=_average([r.quality_rating for r in ratings]),
            communication=_average([r.communication_rating for r in ratings]),
            success=_average([r.project_success_rating for r in ratings]),
        ),
        recent_feedback=feedback,
    )
