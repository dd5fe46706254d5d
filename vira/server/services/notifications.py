"""In-app notifications for ViRA users."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from vira.core.database.entities.notifications import Notification
from vira.core.database.repositories import RepositoryBundle
from vira.core.errors import ValidationFailedError
from vira.core.logging_config import get_logger
from vira.core.models.io.notifications import NotificationList, NotificationMarkRead, NotificationRead

logger = get_logger(__name__)


async def create_notification(
    repos: RepositoryBundle,
    user_id: int,
    type: str,
    title: str,
    message: str,
    data: Optional[Dict[str, Any]] = None,
) -> Notification:
    notification = await repos.notifications.create(
        Notification(user_id=user_id, type=type, title=title, message=message, data=data or {})
    )
    logger.debug(f"Notification {notification.notification_id} ({type}) created for user {user_id}")
    return notification


async def list_notifications(
    repos: RepositoryBundle, user_id: int, *, limit: int = 50, unread_only: bool = False
) -> NotificationList:
    rows = await repos.notifications.list_for_user(user_id, limit=limit, unread_only=unread_only)
    return NotificationList(
        notifications=[NotificationRead.model_validate(row) for row in rows],
        unread_count=await repos.notifications.count_unread(user_id),
    )


async def mark_notifications_read(repos: RepositoryBundle, user_id: int, request: NotificationMarkRead) -> int:
    """Mark the listed notifications (or all of them) read; returns how many changed."""
    if request.mark_all_read:
        return await repos.notifications.mark_all_read(user_id)
    if request.notification_ids:
        ids: List[int] = list(dict.fromkeys(request.notification_ids))
        return await repos.notifications.mark_read(user_id, ids)
    raise ValidationFailedError("Provide notification_ids or mark_all_read")
