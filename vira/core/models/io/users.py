"""
User management I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from vira.core.database.entities.users import UserRole


class UserProfileRead(BaseModel):
    """Schema for reading a user profile."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    auth_user_id: str
    email: str
    full_name: Optional[str] = None
    role: str
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime


class UserCreate(BaseModel):
    """Schema for inviting a staff or vendor user."""

    email: str = Field(min_length=3)
    full_name: Optional[str] = None
    role: UserRole = UserRole.team


class UserUpdate(BaseModel):
    is_active: Optional[bool] = None
    role: Optional[UserRole] = None


class UserCreateResult(BaseModel):
    user: UserProfileRead
    email_sent: bool


class PasswordResetResult(BaseModel):
    message: str
    email_sent: bool
