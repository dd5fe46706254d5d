"""
Rating I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RatingRead(BaseModel):
    """Schema for reading a project rating."""

    model_config = ConfigDict(from_attributes=True)

    rating_id: int
    project_id: int
    vendor_id: int
    client_id: Optional[int] = None
    rater_email: str
    project_success_rating: int
    quality_rating: Optional[int] = None
    communication_rating: Optional[int] = None
    vendor_overall_rating: int
    project_on_time: bool
    project_on_budget: bool
    recommend_again: Optional[bool] = None
    recommendation_scope: Optional[str] = None
    what_went_well: Optional[str] = None
    areas_for_improvement: Optional[str] = None
    rating_date: datetime


class RatingCreate(BaseModel):
    """Schema for rating a project."""

    project_id: int
    vendor_id: int
    rater_email: str = Field(min_length=3)
    project_success_rating: int = Field(ge=1, le=10)
    quality_rating: int = Field(ge=1, le=10)
    communication_rating: int = Field(ge=1, le=10)
    vendor_overall_rating: int = Field(default=5, ge=1, le=10)
    project_on_time: bool = False
    project_on_budget: bool = False
    recommend_again: Optional[bool] = None
    recommendation_scope: Optional[str] = Field(default=None, pattern="^(general|client-specific)$")
    what_went_well: Optional[str] = None
    areas_for_improvement: Optional[str] = None


class RatingUpdate(BaseModel):
    """Schema for partially updating a project's rating."""

    project_success_rating: Optional[int] = Field(default=None, ge=1, le=10)
    quality_rating: Optional[int] = Field(default=None, ge=1, le=10)
    communication_rating: Optional[int] = Field(default=None, ge=1, le=10)
    vendor_overall_rating: Optional[int] = Field(default=None, ge=1, le=10)
    project_on_time: Optional[bool] = None
    project_on_budget: Optional[bool] = None
    recommend_again: Optional[bool] = None
    recommendation_scope: Optional[str] = Field(default=None, pattern="^(general|client-specific)$")
    what_went_well: Optional[str] = None
    areas_for_improvement: Optional[str] = None
