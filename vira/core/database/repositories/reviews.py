"""
Review assignment and reminder repositories.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Set

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.reviews import AssignmentStatus, ReviewAssignment, ReviewReminder
from ..utils import utc_now
from .base import BaseRepository, QueryBuilder

OPEN_STATUSES = (AssignmentStatus.pending.value, AssignmentStatus.in_progress.value)


class ReviewAssignmentRepository(BaseRepository[ReviewAssignment]):
    """Repository for review assignments."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ReviewAssignment)

    async def create(self, assignment: ReviewAssignment) -> ReviewAssignment:
        return await self._save(assignment)

    async def get_by_id(self, assignment_id: int) -> Optional[ReviewAssignment]:
        stmt = select(ReviewAssignment).where(ReviewAssignment.assignment_id == assignment_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, assignment: ReviewAssignment) -> ReviewAssignment:
        assignment.updated_at = utc_now()
        return await self._save(assignment)

    async def delete(self, assignment_id: int) -> bool:
        return await self._delete_entity(await self.get_by_id(assignment_id))

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[ReviewAssignment]:
        stmt = select(ReviewAssignment).order_by(
            ReviewAssignment.created_at.desc(), ReviewAssignment.assignment_id.desc()
        )
        if filters:
            stmt = QueryBuilder.apply_filters(stmt, ReviewAssignment, filters)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find(self, project_id: int, reviewer_id: int) -> Optional[ReviewAssignment]:
        stmt = (
            select(ReviewAssignment)
            .where(ReviewAssignment.project_id == project_id)
            .where(ReviewAssignment.reviewer_id == reviewer_id)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_open(self) -> List[ReviewAssignment]:
        """Pending and in-progress assignments, earliest due first."""
        stmt = (
            select(ReviewAssignment)
            .where(ReviewAssignment.status.in_(OPEN_STATUSES))
            .order_by(ReviewAssignment.due_date)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def complete_for_project(self, project_id: int) -> int:
        """Complete every open assignment of a project; returns how many changed."""
        stmt = (
            select(ReviewAssignment)
            .where(ReviewAssignment.project_id == project_id)
            .where(ReviewAssignment.status.in_(OPEN_STATUSES))
        )
        result = await self.session.execute(stmt)
        assignments = list(result.scalars().all())
        now = utc_now()
        for assignment in assignments:
            assignment.status = AssignmentStatus.completed.value
            assignment.completed_at = now
            assignment.updated_at = now
            self.session.add(assignment)
        if assignments:
            await self.session.commit()
        return len(assignments)


class ReviewReminderRepository:
    """Repository for sent review reminders."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, reminder: ReviewReminder) -> ReviewReminder:
        self.session.add(reminder)
        await self.session.commit()
        await self.session.refresh(reminder)
        return reminder

    async def sent_types(self, assignment_id: int) -> Set[str]:
        """Reminder types already recorded for an assignment."""
        stmt = select(ReviewReminder.reminder_type).where(ReviewReminder.assignment_id == assignment_id)
        result = await self.session.execute(stmt)
        return set(result.scalars().all())
