"""
Client entity models.

Clients are the companies projects are delivered for.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base
from ..utils import utc_now


class ClientBase(Base):
    """Base fields for clients."""

    client_name: str = Field(max_length=255, unique=True, index=True, description="Client company name")
    industry: Optional[str] = Field(default=None)
    time_zone: Optional[str] = Field(default=None)
    preferred_contact: Optional[str] = Field(default=None)
    client_notes: Optional[str] = Field(default=None)


class Client(ClientBase, table=True):
    """Persistent client record.

    Table: clients
    """

    __tablename__ = "clients"
    __table_args__ = ({"extend_existing": True},)

    client_id: Optional[int] = Field(default=None, primary_key=True)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})
