"""
Rating entity models.

A rating is the structured feedback captured when a project closes. There is
at most one rating per project.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base
from ..utils import utc_now


class RatingBase(Base):
    """Base fields for ratings."""

    project_id: int = Field(foreign_key="projects.project_id", unique=True, index=True)
    vendor_id: int = Field(foreign_key="vendors.vendor_id", index=True)
    client_id: Optional[int] = Field(default=None, foreign_key="clients.client_id")
    rater_email: str = Field(description="Who submitted the rating")

    project_success_rating: int = Field(ge=1, le=10)
    quality_rating: Optional[int] = Field(default=None, ge=1, le=10)
    communication_rating: Optional[int] = Field(default=None, ge=1, le=10)
    vendor_overall_rating: int = Field(default=5, ge=1, le=10)

    project_on_time: bool = Field(default=False)
    project_on_budget: bool = Field(default=False)
    recommend_again: Optional[bool] = Field(default=None)
    recommendation_scope: Optional[str] = Field(default=None, description="general or client-specific")

    what_went_well: Optional[str] = Field(default=None)
    areas_for_improvement: Optional[str] = Field(default=None)


class Rating(RatingBase, table=True):
    """Persistent rating record.

    Table: ratings
    """

    __tablename__ = "ratings"
    __table_args__ = ({"extend_existing": True},)

    rating_id: Optional[int] = Field(default=None, primary_key=True)

    rating_date: datetime = Field(default_factory=utc_now)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})
