"""Numbers for the staff dashboard."""

from __future__ import annotations

from vira.core.database.repositories import RepositoryBundle
from vira.core.models.io.dashboard import (
    DashboardCounts,
    DashboardRead,
    DashboardReviewStats,
    DashboardTopVendor,
    RecentlyRatedProject,
)

from .reviews import review_stats

TOP_VENDORS = 5
RECENT_RATINGS = 5


async def build_dashboard(repos: RepositoryBundle) -> DashboardRead:
    top_vendors = []
    for vendor_id, average, total in await repos.ratings.top_vendors(limit=TOP_VENDORS):
        vendor = await repos.vendors.get_by_id(vendor_id)
        if vendor is None:
            continue
        top_vendors.append(
            DashboardTopVendor(
                vendor_id=vendor_id,
                vendor_name=vendor.vendor_name,
                average_rating=round(average, 1),
                total_ratings=total,
            )
        )

    recent = []
    for rating in await repos.ratings.recent(limit=RECENT_RATINGS):
        project = await repos.projects.get_by_id(rating.project_id)
        vendor = await repos.vendors.get_by_id(rating.vendor_id)
        recent.append(
            RecentlyRatedProject(
                project_id=rating.project_id,
                project_title=project.project_title if project else None,
                vendor_name=vendor.vendor_name if vendor else None,
                vendor_overall_rating=rating.vendor_overall_rating,
                rating_date=rating.rating_date,
            )
        )

    stats = await review_stats(repos)
    return DashboardRead(
        counts=DashboardCounts(
            vendors=await repos.vendors.count(),
            clients=await repos.clients.count(),
            projects=await repos.projects.count(),
            ratings=await repos.ratings.count(),
        ),
        top_vendors=top_vendors,
        review_stats=DashboardReviewStats(
            total=stats.total,
            completed=stats.completed,
            pending=stats.total - stats.completed,
            overdue=stats.overdue,
            completion_rate=stats.completion_rate,
        ),
        recent_ratings=recent,
    )
