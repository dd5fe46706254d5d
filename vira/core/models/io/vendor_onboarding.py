"""
Vendor invite and application I/O models.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class InviteSend(BaseModel):
    email: str = Field(min_length=3)
    notes: Optional[str] = None


class InviteAction(BaseModel):
    invite_id: int


class InviteRead(BaseModel):
    """Schema for reading a vendor invite."""

    model_config = ConfigDict(from_attributes=True)

    invite_id: int
    email: str
    invite_token: str
    invited_by: Optional[int] = None
    notes: Optional[str] = None
    status: str
    expires_at: datetime
    accepted_at: Optional[datetime] = None
    created_at: datetime


class InviteValidation(BaseModel):
    valid: bool = True
    email: str
    expires_at: datetime


class ApplicationSubmit(BaseModel):
    """Public application form. The email comes from the invite."""

    token: str
    vendor_name: Optional[str] = None
    primary_contact: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    industry: Optional[str] = None
    service_category: Optional[str] = None
    skills: Optional[str] = None
    pricing_structure: Optional[str] = None
    rate_cost: Optional[str] = None
    availability: Optional[str] = None
    availability_status: Optional[str] = None
    available_from: Optional[date] = None
    availability_notes: Optional[str] = None
    portfolio_url: Optional[str] = None
    sample_work_urls: Optional[str] = None
    notes: Optional[str] = None


class ApplicationRead(BaseModel):
    """Schema for reading a vendor application."""

    model_config = ConfigDict(from_attributes=True)

    application_id: int
    invite_id: int
    vendor_name: str
    primary_contact: Optional[str] = None
    email: str
    phone: Optional[str] = None
    website: Optional[str] = None
    industry: Optional[str] = None
    service_category: Optional[str] = None
    skills: Optional[str] = None
    pricing_structure: Optional[str] = None
    rate_cost: Optional[str] = None
    availability: Optional[str] = None
    availability_status: str
    available_from: Optional[date] = None
    availability_notes: Optional[str] = None
    portfolio_url: Optional[str] = None
    sample_work_urls: Optional[str] = None
    notes: Optional[str] = None
    status: str
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_vendor_id: Optional[int] = None
    submitted_at: datetime


class ApplicationApprove(BaseModel):
    application_id: int


class ApplicationReject(BaseModel):
    application_id: int
    rejection_reason: Optional[str] = None


class ApplicationApprovalResult(BaseModel):
    application: ApplicationRead
    vendor_id: int
    vendor_code: str
    user_id: int
    email_sent: bool = False
