"""
In-app notification entity.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field

from ..base import Base
from ..utils import utc_now


class NotificationBase(Base):
    """Base fields for notifications."""

    user_id: int = Field(foreign_key="user_profiles.id", index=True)
    type: str = Field(max_length=64, description="review_assigned, review_reminder, ...")
    title: str = Field(max_length=255)
    message: str = Field()
    is_read: bool = Field(default=False, index=True)
    read_at: Optional[datetime] = Field(default=None)


class Notification(NotificationBase, table=True):
    """Persistent notification.

    Table: notifications
    """

    __tablename__ = "notifications"
    __table_args__ = ({"extend_existing": True},)

    notification_id: Optional[int] = Field(default=None, primary_key=True)
    data: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=utc_now)
