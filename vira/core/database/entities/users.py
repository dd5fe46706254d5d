"""
User profile entity models.

Authentication itself happens at the external identity provider; ViRA keeps a
profile per provider user holding the role used for authorization, and a link
table tying vendor-role users to the vendor they represent.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import Field

from ..base import Base
from ..utils import utc_now


class UserRole(str, Enum):
    admin = "admin"
    team = "team"
    vendor = "vendor"


STAFF_ROLES = (UserRole.admin.value, UserRole.team.value)


class UserProfileBase(Base):
    """Base fields for user profiles."""

    auth_user_id: str = Field(max_length=128, unique=True, index=True, description="Identity provider user id")
    email: str = Field(max_length=255, unique=True, index=True)
    full_name: Optional[str] = Field(default=None)
    role: str = Field(default=UserRole.team.value, description="admin, team or vendor")
    is_active: bool = Field(default=True)


class UserProfile(UserProfileBase, table=True):
    """Persistent user profile.

    Table: user_profiles
    """

    __tablename__ = "user_profiles"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)

    last_login: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"UserProfile(id={self.id}, email={self.email}, role={self.role})"


class VendorUser(Base, table=True):
    """Link between a vendor-role user and its vendor.

    Table: vendor_users
    """

    __tablename__ = "vendor_users"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    vendor_id: int = Field(foreign_key="vendors.vendor_id", index=True)
    user_id: int = Field(foreign_key="user_profiles.id", index=True)
    status: str = Field(default="active")
    created_at: datetime = Field(default_factory=utc_now)
