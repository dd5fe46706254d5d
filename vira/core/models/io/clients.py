"""
Client I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ClientRead(BaseModel):
    """Schema for reading a client."""

    model_config = ConfigDict(from_attributes=True)

    client_id: int
    client_name: str
    industry: Optional[str] = None
    time_zone: Optional[str] = None
    preferred_contact: Optional[str] = None
    client_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ClientDetailRead(ClientRead):
    total_projects: int = 0


class ClientCreate(BaseModel):
    client_name: str = Field(min_length=1, description="Client company name")
    industry: Optional[str] = None
    time_zone: Optional[str] = None
    preferred_contact: Optional[str] = None
    client_notes: Optional[str] = None


class ClientUpdate(BaseModel):
    client_name: Optional[str] = Field(default=None, min_length=1)
    industry: Optional[str] = None
    time_zone: Optional[str] = None
    preferred_contact: Optional[str] = None
    client_notes: Optional[str] = None
