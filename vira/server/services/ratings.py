"""
Project ratings.

Rating a project is the end of its life cycle: the rating is stored, the
project is archived and any open review assignment for it is completed.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from vira.core.database import utc_now
from vira.core.database.entities.projects import ProjectStatus
from vira.core.database.entities.ratings import Rating
from vira.core.database.entities.users import UserProfile
from vira.core.database.repositories import RepositoryBundle
from vira.core.errors import ConflictError, NotFoundError
from vira.core.logging_config import get_logger
from vira.core.models.io.ratings import RatingCreate, RatingRead, RatingUpdate
from vira.core.models.io.vendors import VendorRatingSummary, VendorRead

from .auth import can_view_all_ratings

logger = get_logger(__name__)

RECENT_RATINGS = 5


def _percent(count: int, total: int) -> int:
    return round(count / total * 100) if total else 0


async def rate_project(repos: RepositoryBundle, request: RatingCreate) -> Rating:
    """Store the rating, archive the project and complete its review assignments.

    Raises:
        NotFoundError: the project does not exist
        ConflictError: the project already has a rating
    """
    project = await repos.projects.get_by_id(request.project_id)
    if project is None:
        raise NotFoundError("Project not found")
    if await repos.ratings.get_by_project(request.project_id):
        raise ConflictError("This project has already been rated")

    rating = await repos.ratings.create(Rating(client_id=project.client_id, **request.model_dump()))

    project.status = ProjectStatus.archived.value
    project.updated_at = utc_now()
    await repos.projects.update(project)
    completed = await repos.assignments.complete_for_project(request.project_id)

    logger.info(
        f"Project {request.project_id} rated {rating.vendor_overall_rating}/10 and archived; "
        f"{completed} review assignment(s) completed"
    )
    return rating


async def update_project_rating(repos: RepositoryBundle, project_id: int, request: RatingUpdate) -> Rating:
    rating = await repos.ratings.get_by_project(project_id)
    if rating is None:
        raise NotFoundError("Rating not found for this project")
    for key, value in request.model_dump(exclude_unset=True).items():
        setattr(rating, key, value)
    rating.updated_at = utc_now()
    return await repos.ratings.update(rating)


async def linked_vendor_id(repos: RepositoryBundle, user: UserProfile) -> Optional[int]:
    link = await repos.vendor_users.get_active_link(user.id)
    return link.vendor_id if link else None


async def visible_ratings(
    repos: RepositoryBundle,
    user: UserProfile,
    *,
    vendor_id: Optional[int] = None,
    project_id: Optional[int] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> List[Rating]:
    """Staff see every rating; vendor users only their own vendor's."""
    if not can_view_all_ratings(user):
        own = await linked_vendor_id(repos, user)
        if own is None:
            return []
        if vendor_id is not None and vendor_id != own:
            return []
        vendor_id = own
    return await repos.ratings.list(
        limit=limit, offset=offset, filters={"vendor_id": vendor_id, "project_id": project_id}
    )


def summarize_ratings(ratings: Sequence[Rating]) -> dict:
    total = len(ratings)
    overall = [r.vendor_overall_rating for r in ratings if r.vendor_overall_rating is not None]
    return {
        "total_ratings": total,
        "average_rating": round(sum(overall) / len(overall), 1) if overall else None,
        "recommendation_rate": _percent(sum(1 for r in ratings if r.recommend_again is True), total),
        "on_time_rate": _percent(sum(1 for r in ratings if r.project_on_time), total),
        "on_budget_rate": _percent(sum(1 for r in ratings if r.project_on_budget), total),
    }


async def vendor_rating_summary(repos: RepositoryBundle, vendor_id: int) -> VendorRatingSummary:
    vendor = await repos.vendors.get_by_id(vendor_id)
    if vendor is None:
        raise NotFoundError("Vendor not found")
    ratings = await repos.ratings.list_by_vendor(vendor_id)
    return VendorRatingSummary(
        vendor=VendorRead.model_validate(vendor),
        recent_ratings=[RatingRead.model_validate(r) for r in ratings[:RECENT_RATINGS]],
        **summarize_ratings(ratings),
    )
