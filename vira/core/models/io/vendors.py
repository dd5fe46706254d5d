"""
Vendor I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .ratings import RatingRead


class VendorRead(BaseModel):
    """Schema for reading a vendor from the API."""

    model_config = ConfigDict(from_attributes=True)

    vendor_id: int
    vendor_code: Optional[str] = None
    vendor_name: str
    vendor_type: Optional[str] = None
    email: Optional[str] = None
    primary_contact: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    time_zone: Optional[str] = None
    industry: Optional[str] = None
    service_categories: List[str] = Field(default_factory=list)
    specialties: Optional[str] = None
    skills: Optional[str] = None
    pricing_structure: Optional[str] = None
    rate_cost: Optional[str] = None
    pricing_notes: Optional[str] = None
    availability: Optional[str] = None
    availability_status: str = "Available"
    available_from: Optional[date] = None
    availability_notes: Optional[str] = None
    portfolio_url: Optional[str] = None
    sample_work_urls: Optional[str] = None
    status: str = "active"
    onboarding_date: Optional[date] = None
    vendor_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class VendorCreate(BaseModel):
    """Schema for creating a vendor via the API."""

    vendor_name: str = Field(min_length=1, description="Vendor company name")
    vendor_code: Optional[str] = Field(default=None, description="Assigned automatically when omitted")
    vendor_type: Optional[str] = None
    email: Optional[str] = None
    primary_contact: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    time_zone: Optional[str] = None
    industry: Optional[str] = None
    service_categories: List[str] = Field(default_factory=list)
    specialties: Optional[str] = None
    skills: Optional[str] = None
    pricing_structure: Optional[str] = None
    rate_cost: Optional[str] = None
    pricing_notes: Optional[str] = None
    availability: Optional[str] = None
    availability_status: str = "Available"
    available_from: Optional[date] = None
    availability_notes: Optional[str] = None
    portfolio_url: Optional[str] = None
    sample_work_urls: Optional[str] = None
    status: str = "active"
    onboarding_date: Optional[date] = None
    vendor_notes: Optional[str] = None


class VendorUpdate(BaseModel):
    """Schema for partially updating a vendor."""

    vendor_name: Optional[str] = Field(default=None, min_length=1)
    vendor_code: Optional[str] = None
    vendor_type: Optional[str] = None
    email: Optional[str] = None
    primary_contact: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    time_zone: Optional[str] = None
    industry: Optional[str] = None
    service_categories: Optional[List[str]] = None
    specialties: Optional[str] = None
    skills: Optional[str] = None
    pricing_structure: Optional[str] = None
    rate_cost: Optional[str] = None
    pricing_notes: Optional[str] = None
    availability: Optional[str] = None
    availability_status: Optional[str] = None
    available_from: Optional[date] = None
    availability_notes: Optional[str] = None
    portfolio_url: Optional[str] = None
    sample_work_urls: Optional[str] = None
    status: Optional[str] = None
    onboarding_date: Optional[date] = None
    vendor_notes: Optional[str] = None


class VendorProfileUpdate(BaseModel):
    """Fields a vendor may change on its own profile through the portal."""

    vendor_name: Optional[str] = Field(default=None, min_length=1)
    primary_contact: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    availability: Optional[str] = None
    availability_status: Optional[str] = None
    available_from: Optional[date] = None
    availability_notes: Optional[str] = None
    portfolio_url: Optional[str] = None
    sample_work_urls: Optional[str] = None
    skills: Optional[str] = None


class VendorRatingSummary(BaseModel):
    """Aggregated rating view of one vendor."""

    model_config = ConfigDict(populate_by_name=True)

    vendor: VendorRead
    total_ratings: int = Field(alias="totalRatings")
    average_rating: Optional[float] = Field(default=None, alias="averageRating")
    recommendation_rate: int = Field(alias="recommendationRate")
    on_time_rate: int = Field(alias="onTimeRate")
    on_budget_rate: int = Field(alias="onBudgetRate")
    recent_ratings: List[RatingRead] = Field(default_factory=list, alias="recentRatings")


class NextVendorCodeRead(BaseModel):
    next_vendor_code: str
