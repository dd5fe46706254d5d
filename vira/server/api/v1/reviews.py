"""
API endpoints for review assignments.

Admins assign reviewers to projects and follow completion through the
stats endpoint. Reminders are sent by the cron endpoint.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import JSONResponse

from vira.core.models.io.reviews import ReviewAssignmentCreate, ReviewAssignmentRead, ReviewAssignmentResult, ReviewStats
from vira.server.core.config import settings
from vira.server.services.auth import AdminDep, StaffDep
from vira.server.services.deps import EmailDep, ReposDep
from vira.server.services.reviews import assign_reviewer, assignment_result, review_stats

router = APIRouter(tags=["reviews"])


@router.post(
    "/assignments",
    response_model=ReviewAssignmentResult,
    status_code=status.HTTP_201_CREATED,
    summary="Assign Reviewer",
    description="Ask a user to review a project. The reviewer gets a notification and an email.",
    response_description="The assignment and whether the email was sent.",
    responses={
        200: {"description": "Reviewer already assigned to this project"},
        201: {"description": "Assignment created"},
        404: {"description": "Project or reviewer not found"},
    },
)
async def create_assignment(
    payload: ReviewAssignmentCreate,
    repos: ReposDep,
    email: EmailDep,
    admin: AdminDep,
):
    """
    Assign a reviewer.

    - **project_id**: Project to review.
    - **reviewer_id**: Profile ID of the reviewer.
    - **due_date**: Optional; seven days from now by default.
    - **notes**: Optional instructions included in the email.
    """
    outcome = await assign_reviewer(repos, payload, assigned_by=admin.id, email=email, app_url=settings.app.url)
    result = assignment_result(outcome)
    if not outcome.created:
        return JSONResponse(status_code=status.HTTP_200_OK, content=result.model_dump(mode="json"))
    return result


@router.get(
    "/assignments",
    response_model=List[ReviewAssignmentRead],
    summary="List Assignments",
    description="List review assignments, newest first, optionally for one project.",
    response_description="Review assignments.",
    responses={200: {"description": "Assignments retrieved"}},
)
async def list_assignments(
    repos: ReposDep, _user: StaffDep, project_id: Optional[int] = None
) -> List[ReviewAssignmentRead]:
    assignments = await repos.assignments.list(filters={"project_id": project_id})
    return [ReviewAssignmentRead.model_validate(a) for a in assignments]


@router.delete(
    "/assignments/{assignment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove Assignment",
    description="Delete a review assignment. Admin only.",
    responses={
        204: {"description": "Assignment deleted"},
        404: {"description": "Assignment not found"},
    },
)
async def delete_assignment(assignment_id: int, repos: ReposDep, _admin: AdminDep) -> None:
    if not await repos.assignments.delete(assignment_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Assignment {assignment_id} not found")


@router.get(
    "/stats",
    response_model=ReviewStats,
    summary="Review Statistics",
    description="Counts per status, completion rate, average completion time and overdue assignments.",
    response_description="Review completion statistics.",
    responses={200: {"description": "Statistics computed"}},
)
async def get_review_stats(repos: ReposDep, _admin: AdminDep) -> ReviewStats:
    return await review_stats(repos)
