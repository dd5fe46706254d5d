"""
Notification I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class NotificationRead(BaseModel):
    """Schema for reading a notification."""

    model_config = ConfigDict(from_attributes=True)

    notification_id: int
    user_id: int
    type: str
    title: str
    message: str
    data: Dict[str, Any] = Field(default_factory=dict)
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime


class NotificationList(BaseModel):
    notifications: List[NotificationRead]
    unread_count: int


class NotificationMarkRead(BaseModel):
    """Either explicit ids or ``mark_all_read``."""

    notification_ids: Optional[List[int]] = None
    mark_all_read: bool = False


class NotificationMarkResult(BaseModel):
    updated: int
