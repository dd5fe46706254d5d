"""
Vendor onboarding entity models.

Onboarding runs invite -> application -> approval. An admin invites an email
address, the invitee submits one application through the tokenized link, and
approving the application creates the vendor and its user account.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Optional

from sqlmodel import Field

from ..base import Base
from ..utils import utc_now


class InviteStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    expired = "expired"
    cancelled = "cancelled"


class ApplicationStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class VendorInvite(Base, table=True):
    """Invitation for a prospective vendor.

    Table: vendor_invites
    """

    __tablename__ = "vendor_invites"
    __table_args__ = ({"extend_existing": True},)

    invite_id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(max_length=255, index=True)
    invite_token: str = Field(max_length=128, unique=True, index=True)
    invited_by: Optional[int] = Field(default=None, foreign_key="user_profiles.id")
    notes: Optional[str] = Field(default=None)
    status: str = Field(default=InviteStatus.pending.value, index=True)
    expires_at: datetime = Field()
    accepted_at: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class VendorApplicationBase(Base):
    """Fields a prospective vendor fills in."""

    vendor_name: str = Field(max_length=255)
    primary_contact: Optional[str] = Field(default=None)
    email: str = Field(max_length=255)
    phone: Optional[str] = Field(default=None)
    website: Optional[str] = Field(default=None)
    industry: Optional[str] = Field(default=None)
    service_category: Optional[str] = Field(default=None)
    skills: Optional[str] = Field(default=None)
    pricing_structure: Optional[str] = Field(default=None)
    rate_cost: Optional[str] = Field(default=None)
    availability: Optional[str] = Field(default=None)
    availability_status: str = Field(default="Available")
    available_from: Optional[date] = Field(default=None)
    availability_notes: Optional[str] = Field(default=None)
    portfolio_url: Optional[str] = Field(default=None)
    sample_work_urls: Optional[str] = Field(default=None)
    notes: Optional[str] = Field(default=None)


class VendorApplication(VendorApplicationBase, table=True):
    """Submitted vendor application.

    Table: vendor_applications
    """

    __tablename__ = "vendor_applications"
    __table_args__ = ({"extend_existing": True},)

    application_id: Optional[int] = Field(default=None, primary_key=True)
    invite_id: int = Field(foreign_key="vendor_invites.invite_id", unique=True, index=True)
    status: str = Field(default=ApplicationStatus.pending.value, index=True)
    reviewed_by: Optional[int] = Field(default=None, foreign_key="user_profiles.id")
    reviewed_at: Optional[datetime] = Field(default=None)
    rejection_reason: Optional[str] = Field(default=None)
    created_vendor_id: Optional[int] = Field(default=None, foreign_key="vendors.vendor_id")
    submitted_at: datetime = Field(default_factory=utc_now)
