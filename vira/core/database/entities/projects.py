"""
Project entity models.

A project is a unit of work assigned to a vendor on behalf of a client. Its
status moves forward only: ``active`` -> ``completed`` -> ``archived``.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from sqlalchemy import Column
from sqlmodel import Field

from ..base import Base, EmbeddingType
from ..utils import utc_now


class ProjectStatus(str, Enum):
    active = "active"
    completed = "completed"
    archived = "archived"


# Allowed status moves; archiving an archived project is a no-op
PROJECT_STATUS_TRANSITIONS = {
    ProjectStatus.active: {ProjectStatus.completed},
    ProjectStatus.completed: {ProjectStatus.archived},
    ProjectStatus.archived: {ProjectStatus.archived},
}


class ProjectBase(Base):
    """Base fields for projects."""

    project_title: str = Field(max_length=500, description="Project title")
    project_description: Optional[str] = Field(default=None)
    project_type: Optional[str] = Field(default=None)

    client_id: Optional[int] = Field(default=None, foreign_key="clients.client_id", index=True)
    vendor_id: Optional[int] = Field(default=None, foreign_key="vendors.vendor_id", index=True)

    submitted_by: Optional[str] = Field(default=None, description="Who submitted the ticket")
    team_member: Optional[str] = Field(default=None)
    expected_deadline: Optional[date] = Field(default=None)
    key_skills_required: Optional[str] = Field(default=None)
    industry_experience: Optional[str] = Field(default=None)

    status: str = Field(default=ProjectStatus.active.value, index=True)


class Project(ProjectBase, table=True):
    """Persistent project record.

    Table: projects
    """

    __tablename__ = "projects"
    __table_args__ = ({"extend_existing": True},)

    project_id: Optional[int] = Field(default=None, primary_key=True)

    embedding: Optional[List[float]] = Field(default=None, sa_column=Column(EmbeddingType, nullable=True))

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def embedding_text(self) -> str:
        return f"{self.project_title}\n\n{self.project_description or ''}".strip()
