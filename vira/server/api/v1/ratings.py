"""
API endpoints for project ratings.

Submitting a rating archives the project and completes its review
assignments. Staff see every rating; vendor users only see those of the
vendor they are linked to.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, status

from vira.core.models.io.ratings import RatingCreate, RatingRead, RatingUpdate
from vira.server.services import ratings as rating_service
from vira.server.services.auth import CurrentUserDep, StaffDep
from vira.server.services.deps import ReposDep

router = APIRouter(tags=["ratings"])


@router.post(
    "",
    response_model=RatingRead,
    status_code=status.HTTP_201_CREATED,
    summary="Rate Project",
    description="Submit the rating of a project. The project is archived and its open review assignments completed.",
    response_description="The stored rating.",
    responses={
        201: {"description": "Rating stored and project archived"},
        404: {"description": "Project not found"},
        409: {"description": "The project already has a rating"},
        400: {"description": "Missing field or score outside 1-10"},
    },
)
async def rate_project(payload: RatingCreate, repos: ReposDep, _user: StaffDep) -> RatingRead:
    """
    Rate a project.

    - **project_id**, **vendor_id**, **rater_email**: Required.
    - **project_success_rating**, **quality_rating**, **communication_rating**: Required, 1-10.
    - **vendor_overall_rating**: 1-10, defaults to 5.
    - **recommend_again** / **recommendation_scope**: `general` or `client-specific`.
    """
    rating = await rating_service.rate_project(repos, payload)
    return RatingRead.model_validate(rating)


@router.put(
    "/project/{project_id}",
    response_model=RatingRead,
    summary="Update Project Rating",
    description="Partially update the rating of a project.",
    response_description="The updated rating.",
    responses={
        200: {"description": "Rating updated"},
        404: {"description": "The project has no rating"},
    },
)
async def update_project_rating(
    project_id: int, payload: RatingUpdate, repos: ReposDep, _user: StaffDep
) -> RatingRead:
    rating = await rating_service.update_project_rating(repos, project_id, payload)
    return RatingRead.model_validate(rating)


@router.get(
    "",
    response_model=List[RatingRead],
    summary="List Ratings",
    description="List ratings, newest first. Vendor users only receive their own vendor's ratings.",
    response_description="A page of ratings.",
    responses={200: {"description": "Ratings retrieved"}},
)
async def list_ratings(
    repos: ReposDep,
    current_user: CurrentUserDep,
    vendor_id: Optional[int] = None,
    project_id: Optional[int] = None,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
) -> List[RatingRead]:
    ratings = await rating_service.visible_ratings(
        repos, current_user, vendor_id=vendor_id, project_id=project_id, limit=limit, offset=offset
    )
    return [RatingRead.model_validate(r) for r in ratings]
