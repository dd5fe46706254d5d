"""
Project I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from vira.core.database.entities.projects import ProjectStatus


class ProjectRead(BaseModel):
    """Schema for reading a project."""

    model_config = ConfigDict(from_attributes=True)

    project_id: int
    project_title: str
    project_description: Optional[str] = None
    project_type: Optional[str] = None
    client_id: Optional[int] = None
    vendor_id: Optional[int] = None
    submitted_by: Optional[str] = None
    team_member: Optional[str] = None
    expected_deadline: Optional[date] = None
    key_skills_required: Optional[str] = None
    industry_experience: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime


class ProjectCreate(BaseModel):
    """Schema for creating a project."""

    project_title: str = Field(min_length=1)
    project_description: Optional[str] = None
    project_type: Optional[str] = None
    client_id: Optional[int] = None
    vendor_id: Optional[int] = None
    submitted_by: Optional[str] = None
    team_member: Optional[str] = None
    expected_deadline: Optional[date] = None
    key_skills_required: Optional[str] = None
    industry_experience: Optional[str] = None
    status: ProjectStatus = ProjectStatus.active


class ProjectUpdate(BaseModel):
    """Schema for partially updating a project. Status changes go through the status endpoint."""

    project_title: Optional[str] = Field(default=None, min_length=1)
    project_description: Optional[str] = None
    project_type: Optional[str] = None
    client_id: Optional[int] = None
    vendor_id: Optional[int] = None
    submitted_by: Optional[str] = None
    team_member: Optional[str] = None
    expected_deadline: Optional[date] = None
    key_skills_required: Optional[str] = None
    industry_experience: Optional[str] = None


class ProjectStatusUpdate(BaseModel):
    status: ProjectStatus
