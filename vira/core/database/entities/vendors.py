"""
Vendor entity models.

Vendors are the service providers ViRA tracks, rates and recommends. Besides
contact and commercial details a vendor carries an optional embedding of its
services and skills, used for similarity search.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field

from ..base import Base, EmbeddingType
from ..utils import utc_now


class VendorBase(Base):
    """Base fields for vendors."""

    vendor_code: Optional[str] = Field(default=None, max_length=16, unique=True, description="Human-facing code (VEN-001)")
    vendor_name: str = Field(max_length=255, index=True, description="Vendor company name")
    vendor_type: Optional[str] = Field(default=None, description="Free-text vendor type (legacy category)")

    # Contact
    email: Optional[str] = Field(default=None, description="Primary contact email")
    primary_contact: Optional[str] = Field(default=None, description="Primary contact person")
    phone: Optional[str] = Field(default=None)
    website: Optional[str] = Field(default=None)
    location: Optional[str] = Field(default=None)
    time_zone: Optional[str] = Field(default=None)
    industry: Optional[str] = Field(default=None)

    # Offer
    specialties: Optional[str] = Field(default=None)
    skills: Optional[str] = Field(default=None)
    pricing_structure: Optional[str] = Field(default=None)
    rate_cost: Optional[str] = Field(default=None)
    pricing_notes: Optional[str] = Field(default=None)

    # Availability
    availability: Optional[str] = Field(default=None)
    availability_status: str = Field(default="Available")
    available_from: Optional[date] = Field(default=None)
    availability_notes: Optional[str] = Field(default=None)

    portfolio_url: Optional[str] = Field(default=None)
    sample_work_urls: Optional[str] = Field(default=None)

    status: str = Field(default="active", index=True, description="active or inactive")
    onboarding_date: Optional[date] = Field(default=None)
    vendor_notes: Optional[str] = Field(default=None)


class Vendor(VendorBase, table=True):
    """Persistent vendor record.

    Table: vendors
    """

    __tablename__ = "vendors"
    __table_args__ = ({"extend_existing": True},)

    vendor_id: Optional[int] = Field(default=None, primary_key=True)

    service_categories: List[str] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False), description="Service categories offered"
    )

    embedding: Optional[List[float]] = Field(default=None, sa_column=Column(EmbeddingType, nullable=True))

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def embedding_text(self) -> str:
        """Text used to embed the vendor: its services and skills. Empty when it has neither."""
        services = ", ".join(c for c in (self.service_categories or []) if c and c.strip())
        skills = (self.skills or "").strip()
        if not services and not skills:
            return ""
        return f"Services: {services}\n\nSkills: {skills}".strip()

    def __repr__(self) -> str:
        return f"Vendor(id={self.vendor_id}, code={self.vendor_code}, name={self.vendor_name})"
