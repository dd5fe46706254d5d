"""
Dashboard I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class DashboardCounts(BaseModel):
    vendors: int
    clients: int
    projects: int
    ratings: int


class DashboardTopVendor(BaseModel):
    vendor_id: int
    vendor_name: str
    average_rating: float
    total_ratings: int


class DashboardReviewStats(BaseModel):
    total: int
    completed: int
    pending: int
    overdue: int
    completion_rate: float


class RecentlyRatedProject(BaseModel):
    project_id: int
    project_title: Optional[str] = None
    vendor_name: Optional[str] = None
    vendor_overall_rating: int
    rating_date: datetime


class DashboardRead(BaseModel):
    counts: DashboardCounts
    top_vendors: List[DashboardTopVendor]
    review_stats: DashboardReviewStats
    recent_ratings: List[RecentlyRatedProject]
