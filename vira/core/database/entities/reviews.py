"""
Review assignment entity models.

A review assignment routes a project to an internal reviewer who must submit
its rating before the due date. Every reminder sent for an assignment is
recorded so that each reminder type goes out at most once.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import Field

from ..base import Base
from ..utils import utc_now


class AssignmentStatus(str, Enum):
    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"


class ReminderType(str, Enum):
    initial = "initial"
    first = "first"
    second = "second"
    final = "final"


class ReviewAssignmentBase(Base):
    """Base fields for review assignments."""

    project_id: int = Field(foreign_key="projects.project_id", index=True)
    reviewer_id: int = Field(foreign_key="user_profiles.id", index=True)
    assigned_by: Optional[int] = Field(default=None, foreign_key="user_profiles.id")
    status: str = Field(default=AssignmentStatus.pending.value, index=True)
    due_date: datetime = Field()
    completed_at: Optional[datetime] = Field(default=None)
    notes: Optional[str] = Field(default=None)


class ReviewAssignment(ReviewAssignmentBase, table=True):
    """Persistent review assignment.

    Table: review_assignments
    """

    __tablename__ = "review_assignments"
    __table_args__ = ({"extend_existing": True},)

    assignment_id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class ReviewReminder(Base, table=True):
    """A reminder sent for a review assignment.

    Table: review_reminders
    """

    __tablename__ = "review_reminders"
    __table_args__ = ({"extend_existing": True},)

    reminder_id: Optional[int] = Field(default=None, primary_key=True)
    assignment_id: int = Field(foreign_key="review_assignments.assignment_id", index=True)
    reminder_type: str = Field(max_length=16)
    email_sent: bool = Field(default=False)
    sent_at: datetime = Field(default_factory=utc_now)
