"""
Review assignments, their statistics and the reminder sweep.

Admins route a project to a reviewer; the reviewer is notified in-app and by
email. A scheduled sweep (``ReminderSweep``) nudges reviewers as the due
date approaches, sending each reminder type at most once per assignment.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from vira.core.database import utc_now
from vira.core.database.entities.reviews import AssignmentStatus, ReminderType, ReviewAssignment, ReviewReminder
from vira.core.database.repositories import RepositoryBundle
from vira.core.errors import NotFoundError
from vira.core.logging_config import get_logger
from vira.core.models.io.reviews import (
    OverdueAssignment,
    ReminderRunResult,
    ReviewAssignmentCreate,
    ReviewAssignmentRead,
    ReviewAssignmentResult,
    ReviewStats,
)
from vira.server.core import constant

from .email_service import EmailDeliveryError, EmailService, review_assignment_email, review_reminder_email
from .notifications import create_notification

logger = get_logger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def days_until(due_date: datetime, now: datetime) -> int:
    """Whole days until ``due_date``, rounded up; zero or negative once due."""
    return math.ceil((to_naive_utc(due_date) - now).total_seconds() / SECONDS_PER_DAY)


def reminder_type_for(days_until_due: int, has_prior_reminders: bool) -> Optional[ReminderType]:
    if days_until_due <= 1:
        return ReminderType.final
    if days_until_due <= 3:
        return ReminderType.second
    if days_until_due <= 5:
        return ReminderType.first
    if days_until_due <= 7 and not has_prior_reminders:
        return ReminderType.initial
    return None


@dataclass
class AssignmentOutcome:
    created: bool
    assignment: ReviewAssignment
    email_sent: bool = False


async def assign_reviewer(
    repos: RepositoryBundle,
    request: ReviewAssignmentCreate,
    *,
    assigned_by: Optional[int],
    email: EmailService,
    app_url: str,
) -> AssignmentOutcome:
    """Create a pending assignment, notify the reviewer and email them.

    Raises:
        NotFoundError: when the project or the reviewer does not exist
    """
    project = await repos.projects.get_by_id(request.project_id)
    if project is None:
        raise NotFoundError("Project not found")
    reviewer = await repos.users.get_by_id(request.reviewer_id)
    if reviewer is None:
        raise NotFoundError("Reviewer not found")

    existing = await repos.assignments.find(request.project_id, request.reviewer_id)
    if existing is not None:
        return AssignmentOutcome(created=False, assignment=existing)

    due_date = (
        to_naive_utc(request.due_date)
        if request.due_date
        else utc_now() + timedelta(days=constant.DEFAULT_REVIEW_DUE_DAYS)
    )
    assignment = await repos.assignments.create(
        ReviewAssignment(
            project_id=project.project_id,
            reviewer_id=reviewer.id,
            assigned_by=assigned_by,
            due_date=due_date,
            notes=request.notes,
        )
    )
    await create_notification(
        repos,
        reviewer.id,
        "review_assigned",
        "New Review Assignment",
        f'You have been assigned to review "{project.project_title}"',
        {"project_id": project.project_id, "assignment_id": assignment.assignment_id},
    )

    message = review_assignment_email(
        reviewer_name=reviewer.full_name or reviewer.email,
        project_title=project.project_title,
        due_date=due_date,
        app_url=app_url,
        notes=request.notes,
    )
    email_sent = True
    try:
        await email.send_message(reviewer.email, message)
    except EmailDeliveryError as e:
        logger.error(f"Review assignment email to {reviewer.email} failed: {e}", exc_info=True)
        email_sent = False

    logger.info(f"Assigned reviewer {reviewer.id} to project {project.project_id}")
    return AssignmentOutcome(created=True, assignment=assignment, email_sent=email_sent)


def assignment_result(outcome: AssignmentOutcome) -> ReviewAssignmentResult:
    return ReviewAssignmentResult(
        message="Reviewer assigned" if outcome.created else "Reviewer already assigned",
        assignment=ReviewAssignmentRead.model_validate(outcome.assignment),
        email_sent=outcome.email_sent,
    )


async def review_stats(repos: RepositoryBundle, now: Optional[datetime] = None) -> ReviewStats:
    now = now or utc_now()
    assignments = await repos.assignments.list()
    total = len(assignments)
    by_status = {s.value: 0 for s in AssignmentStatus}
    for assignment in assignments:
        by_status[assignment.status] = by_status.get(assignment.status, 0) + 1

    overdue: List[OverdueAssignment] = []
    completion_days: List[float] = []
    for assignment in assignments:
        if assignment.status == AssignmentStatus.completed.value:
            if assignment.completed_at is not None:
                delta = assignment.completed_at - assignment.created_at
                completion_days.append(delta.total_seconds() / SECONDS_PER_DAY)
            continue
        due = to_naive_utc(assignment.due_date)
        if due < now:
            overdue.append(
                OverdueAssignment(
                    assignment_id=assignment.assignment_id,
                    project_id=assignment.project_id,
                    reviewer_id=assignment.reviewer_id,
                    due_date=due,
                    days_overdue=math.ceil((now - due).total_seconds() / SECONDS_PER_DAY),
                )
            )
    overdue.sort(key=lambda item: item.days_overdue, reverse=True)

    completed = by_status[AssignmentStatus.completed.value]
    return ReviewStats(
        total=total,
        pending=by_status[AssignmentStatus.pending.value],
        in_progress=by_status[AssignmentStatus.in_progress.value],
        completed=completed,
        overdue=len(overdue),
        completion_rate=round(completed / total * 100, 1) if total else 0.0,
        average_completion_days=round(sum(completion_days) / len(completion_days), 1) if completion_days else 0.0,
        overdue_assignments=overdue,
    )


def _reminder_message(project_title: str, days_until_due: int) -> str:
    if days_until_due <= 0:
        return f'Reminder: Your review for "{project_title}" is due now'
    plural = "s" if days_until_due > 1 else ""
    return f'Reminder: Your review for "{project_title}" is due in {days_until_due} day{plural}'


class ReminderSweep:
    """One pass over the open assignments."""

    def __init__(self, repos: RepositoryBundle, email: EmailService, *, app_url: str) -> None:
        self._repos = repos
        self._email = email
        self._app_url = app_url

    async def run(self, now: Optional[datetime] = None) -> ReminderRunResult:
        now = now or utc_now()
        result = ReminderRunResult()
        assignments = await self._repos.assignments.list_open()
        logger.info(f"Reminder sweep started for {len(assignments)} open assignments")

        for assignment in assignments:
            result.processed += 1
            decision = await self._decide(assignment, now)
            if decision is None:
                continue
            reminder_type, days = decision
            if await self._send(assignment, reminder_type, days):
                setattr(result, reminder_type.value, getattr(result, reminder_type.value) + 1)
            else:
                result.errors += 1

        logger.info(f"Reminder sweep finished: {result.model_dump()}")
        return result

    async def _decide(self, assignment: ReviewAssignment, now: datetime) -> Optional[Tuple[ReminderType, int]]:
        sent = await self._repos.reminders.sent_types(assignment.assignment_id)
        days = days_until(assignment.due_date, now)
        reminder_type = reminder_type_for(days, bool(sent))
        if reminder_type is None or reminder_type.value in sent:
            return None
        return reminder_type, days

    async def _send(self, assignment: ReviewAssignment, reminder_type: ReminderType, days: int) -> bool:
        reviewer = await self._repos.users.get_by_id(assignment.reviewer_id)
        project = await self._repos.projects.get_by_id(assignment.project_id)
        if reviewer is None or project is None:
            logger.error(f"Assignment {assignment.assignment_id} references a missing reviewer or project")
            return False

        message = review_reminder_email(
            reviewer_name=reviewer.full_name or reviewer.email,
            project_title=project.project_title,
            due_date=assignment.due_date,
            days_until_due=days,
            app_url=self._app_url,
        )
        try:
            await self._email.send_message(reviewer.email, message)
        except EmailDeliveryError as e:
            logger.error(f"Reminder for assignment {assignment.assignment_id} failed: {e}", exc_info=True)
            return False

        await self._repos.reminders.create(
            ReviewReminder(assignment_id=assignment.assignment_id, reminder_type=reminder_type.value, email_sent=True)
        )
        await create_notification(
            self._repos,
            reviewer.id,
            "review_reminder",
            "Review Reminder",
            _reminder_message(project.project_title, days),
            {"project_id": project.project_id, "assignment_id": assignment.assignment_id, "reminder_type": reminder_type.value},
        )
        return True
