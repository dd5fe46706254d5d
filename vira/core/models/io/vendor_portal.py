"""
Vendor portal I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class PortalFeedback(BaseModel):
    project_title: Optional[str] = None
    vendor_overall_rating: int
    what_went_well: Optional[str] = None
    areas_for_improvement: Optional[str] = None
    rating_date: datetime


class PortalCategoryAverages(BaseModel):
    quality: Optional[float] = None
    communication: Optional[float] = None
    success: Optional[float] = None


class PortalRatings(BaseModel):
    """A vendor's own rating overview."""

    total_projects: int
    average_rating: Optional[float] = None
    category_averages: PortalCategoryAverages
    recent_feedback: List[PortalFeedback]
