"""
Review assignment I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class ReviewAssignmentCreate(BaseModel):
    project_id: int
    reviewer_id: int
    due_date: Optional[datetime] = None
    notes: Optional[str] = None


class ReviewAssignmentRead(BaseModel):
    """Schema for reading a review assignment."""

    model_config = ConfigDict(from_attributes=True)

    assignment_id: int
    project_id: int
    reviewer_id: int
    assigned_by: Optional[int] = None
    status: str
    due_date: datetime
    completed_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: datetime


class ReviewAssignmentResult(BaseModel):
    message: str
    assignment: ReviewAssignmentRead
    email_sent: bool = False


class OverdueAssignment(BaseModel):
    assignment_id: int
    project_id: int
    reviewer_id: int
    due_date: datetime
    days_overdue: int


class ReviewStats(BaseModel):
    """Completion statistics over all review assignments."""

    total: int
    pending: int
    in_progress: int
    completed: int
    overdue: int
    completion_rate: float
    average_completion_days: float
    overdue_assignments: List[OverdueAssignment]


class ReminderRunResult(BaseModel):
    """Outcome of one reminder sweep."""

    initial: int = 0
    first: int = 0
    second: int = 0
    final: int = 0
    errors: int = 0
    processed: int = 0
