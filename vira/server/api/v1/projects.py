"""
API endpoints for projects.

A project moves forward only: active, then completed, then archived. Rating
a project archives it (see the ratings endpoints); ``pending-reviews`` lists
the projects still waiting for their rating.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, status

from vira.core.models.io.projects import ProjectCreate, ProjectRead, ProjectStatusUpdate, ProjectUpdate
from vira.server.services import catalog
from vira.server.services.auth import StaffDep
from vira.server.services.deps import ReposDep

router = APIRouter(tags=["projects"])


@router.get(
    "",
    response_model=List[ProjectRead],
    summary="List Projects",
    description="List projects, newest first, filtered by status, vendor or client.",
    response_description="A page of project records.",
    responses={200: {"description": "Projects retrieved successfully"}},
)
async def list_projects(
    repos: ReposDep,
    _user: StaffDep,
    status_filter: Optional[str] = Query(default=None, alias="status"),
    vendor_id: Optional[int] = None,
    client_id: Optional[int] = None,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
) -> List[ProjectRead]:
    """
    List projects.

    - **status**: `active`, `completed` or `archived`.
    - **vendor_id** / **client_id**: Restrict to one vendor or client.
    - **limit** / **offset**: Pagination.
    """
    projects = await repos.projects.list(
        limit=limit,
        offset=offset,
        filters={"status": status_filter, "vendor_id": vendor_id, "client_id": client_id},
    )
    return [ProjectRead.model_validate(p) for p in projects]


@router.get(
    "/pending-reviews",
    response_model=List[ProjectRead],
    summary="Projects Awaiting a Rating",
    description="Completed or active projects that have no rating yet, newest first.",
    response_description="Projects without a rating.",
    responses={200: {"description": "Pending projects retrieved"}},
)
async def pending_reviews(
    repos: ReposDep,
    _user: StaffDep,
    limit: Optional[int] = Query(default=None, ge=1),
) -> List[ProjectRead]:
    return [ProjectRead.model_validate(p) for p in await repos.projects.list_unrated(limit)]


@router.get(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Get Project",
    description="Retrieve a single project by its ID.",
    response_description="The project record.",
    responses={
        200: {"description": "Project found"},
        404: {"description": "Project not found"},
    },
)
async def get_project(project_id: int, repos: ReposDep, _user: StaffDep) -> ProjectRead:
    return ProjectRead.model_validate(await catalog.get_project(repos, project_id))


@router.post(
    "",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Project",
    description="Create a project. Referenced vendor and client must exist.",
    response_description="The created project.",
    responses={
        201: {"description": "Project created"},
        400: {"description": "Unknown vendor or client"},
    },
)
async def create_project(payload: ProjectCreate, repos: ReposDep, _user: StaffDep) -> ProjectRead:
    """
    Create a project.

    - **project_title**: Required.
    - **vendor_id** / **client_id**: Optional references; must exist when given.
    - **status**: Initial status, `active` by default.
    """
    return ProjectRead.model_validate(await catalog.create_project(repos, payload))


@router.patch(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Update Project",
    description="Partially update a project. Status changes go through the status endpoint.",
    response_description="The updated project.",
    responses={
        200: {"description": "Project updated"},
        400: {"description": "Unknown vendor or client"},
        404: {"description": "Project not found"},
    },
)
async def update_project(project_id: int, payload: ProjectUpdate, repos: ReposDep, _user: StaffDep) -> ProjectRead:
    return ProjectRead.model_validate(await catalog.update_project(repos, project_id, payload))


@router.put(
    "/{project_id}/status",
    response_model=ProjectRead,
    summary="Change Project Status",
    description="Move a project along active -> completed -> archived.",
    response_description="The project with its new status.",
    responses={
        200: {"description": "Status changed"},
        400: {"description": "Invalid status transition"},
        404: {"description": "Project not found"},
    },
)
async def change_status(
    project_id: int, payload: ProjectStatusUpdate, repos: ReposDep, _user: StaffDep
) -> ProjectRead:
    project = await catalog.change_project_status(repos, project_id, payload.status)
    return ProjectRead.model_validate(project)
