"""
Notification repository.

In-app notifications addressed to a single user profile.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.notifications import Notification
from ..utils import utc_now
from .base import BaseRepository, QueryBuilder


class NotificationRepository(BaseRepository[Notification]):
    """Repository for notification data access operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Notification)

    async def create(self, notification: Notification) -> Notification:
        return await self._save(notification)

    async def get_by_id(self, notification_id: int) -> Optional[Notification]:
        stmt = select(Notification).where(Notification.notification_id == notification_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, notification: Notification) -> Notification:
        return await self._save(notification)

    async def delete(self, notification_id: int) -> bool:
        return await self._delete_entity(await self.get_by_id(notification_id))

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[Notification]:
        stmt = select(Notification).order_by(Notification.created_at.desc(), Notification.notification_id.desc())
        if filters:
            stmt = QueryBuilder.apply_filters(stmt, Notification, filters)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_user(self, user_id: int, *, limit: int = 50, unread_only: bool = False) -> List[Notification]:
        filters: Dict[str, Any] = {"user_id": user_id}
        if unread_only:
            filters["is_read"] = False
        return await self.list(limit=limit, filters=filters)

    async def count_unread(self, user_id: int) -> int:
        stmt = (
            select(func.count())
            .select_from(Notification)
            .where(Notification.user_id == user_id)
            .where(Notification.is_read.is_(False))
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def mark_read(self, user_id: int, notification_ids: List[int]) -> int:
        """Mark the user's notifications with the given ids as read."""
        if not notification_ids:
            return 0
        stmt = (
            update(Notification)
            .where(Notification.user_id == user_id)
            .where(Notification.notification_id.in_(notification_ids))
            .values(is_read=True, read_at=utc_now())
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return int(result.rowcount or 0)

    async def mark_all_read(self, user_id: int) -> int:
        stmt = (
            update(Notification)
            .where(Notification.user_id == user_id)
            .where(Notification.is_read.is_(False))
            .values(is_read=True, read_at=utc_now())
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return int(result.rowcount or 0)
