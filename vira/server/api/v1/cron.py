"""
Scheduled job endpoints.

Called by the platform scheduler with ``Authorization: Bearer <CRON_SECRET>``.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from vira.core.models.io.reviews import ReminderRunResult
from vira.server.core.config import settings
from vira.server.services.auth import verify_cron_secret
from vira.server.services.deps import EmailDep, ReposDep
from vira.server.services.reviews import ReminderSweep

router = APIRouter(tags=["cron"], dependencies=[Depends(verify_cron_secret)])


@router.post(
    "/send-reminders",
    response_model=ReminderRunResult,
    summary="Send Review Reminders",
    description="Email reviewers whose assignments are coming due. Each reminder type goes out once per assignment.",
    response_description="Reminders sent per type, errors and assignments processed.",
    responses={
        200: {"description": "Sweep finished"},
        401: {"description": "Missing or wrong cron secret"},
    },
)
async def send_reminders(repos: ReposDep, email: EmailDep) -> ReminderRunResult:
    return await ReminderSweep(repos, email, app_url=settings.app.url).run()
