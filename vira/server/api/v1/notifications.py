"""API endpoints for the signed-in user's notifications."""

from __future__ import annotations

from fastapi import APIRouter, Query

from vira.core.models.io.notifications import NotificationList, NotificationMarkRead, NotificationMarkResult
from vira.server.services.auth import CurrentUserDep
from vira.server.services.deps import ReposDep
from vira.server.services.notifications import list_notifications, mark_notifications_read

router = APIRouter(tags=["notifications"])


@router.get(
    "",
    response_model=NotificationList,
    summary="List Notifications",
    description="The caller's notifications, newest first, with the number still unread.",
    response_description="Notifications and unread count.",
    responses={200: {"description": "Notifications retrieved"}},
)
async def get_notifications(
    repos: ReposDep,
    current_user: CurrentUserDep,
    limit: int = Query(default=50, ge=1, le=200),
    unread_only: bool = False,
) -> NotificationList:
    """
    List notifications.

    - **limit**: Maximum notifications returned (default 50).
    - **unread_only**: Only unread notifications.
    """
    return await list_notifications(repos, current_user.id, limit=limit, unread_only=unread_only)


@router.put(
    "",
    response_model=NotificationMarkResult,
    summary="Mark Notifications Read",
    description="Mark the listed notifications, or all of them, as read.",
    response_description="How many notifications changed.",
    responses={
        200: {"description": "Notifications marked read"},
        400: {"description": "Neither notification_ids nor mark_all_read given"},
    },
)
async def mark_read(payload: NotificationMarkRead, repos: ReposDep, current_user: CurrentUserDep) -> NotificationMarkResult:
    """
    Mark notifications read.

    - **notification_ids**: IDs to mark.
    - **mark_all_read**: Mark every unread notification instead.
    """
    updated = await mark_notifications_read(repos, current_user.id, payload)
    return NotificationMarkResult(updated=updated)
