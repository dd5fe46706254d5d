"""
API endpoints for user administration.

Admins create team, admin and vendor accounts, change roles and reset
passwords. Every signed-in user can read their own profile at ``/me``.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, status

from vira.core.models.io.users import (
    PasswordResetResult,
    UserCreate,
    UserCreateResult,
    UserProfileRead,
    UserUpdate,
)
from vira.server.core.config import settings
from vira.server.services.auth import AdminDep, CurrentUserDep
from vira.server.services.deps import EmailDep, IdentityDep, ReposDep
from vira.server.services.users import UserAdminService

router = APIRouter(tags=["users"])


@router.get(
    "/me",
    response_model=UserProfileRead,
    summary="Current User",
    description="Return the profile of the signed-in user.",
    response_description="The caller's profile.",
    responses={
        200: {"description": "Profile returned"},
        401: {"description": "Not authenticated"},
    },
)
async def read_me(current_user: CurrentUserDep) -> UserProfileRead:
    return UserProfileRead.model_validate(current_user)


@router.get(
    "",
    response_model=List[UserProfileRead],
    summary="List Users",
    description="List every user profile. Admin only.",
    response_description="All user profiles.",
    responses={200: {"description": "Users retrieved"}},
)
async def list_users(repos: ReposDep, _admin: AdminDep) -> List[UserProfileRead]:
    return [UserProfileRead.model_validate(u) for u in await repos.users.list()]


@router.post(
    "",
    response_model=UserCreateResult,
    status_code=status.HTTP_201_CREATED,
    summary="Create User",
    description="Create an identity-provider account and its profile, then email a temporary password.",
    response_description="The new profile and whether the welcome email was sent.",
    responses={
        201: {"description": "User created"},
        409: {"description": "A user with this email already exists"},
        500: {"description": "Profile creation failed; the account was removed again"},
        502: {"description": "The identity provider refused the account"},
    },
)
async def create_user(
    payload: UserCreate,
    repos: ReposDep,
    identity: IdentityDep,
    email: EmailDep,
    _admin: AdminDep,
) -> UserCreateResult:
    """
    Create a user.

    - **email**: Required and unique.
    - **full_name**: Optional display name.
    - **role**: `admin`, `team` (default) or `vendor`.
    """
    service = UserAdminService(repos, identity, email, app_url=settings.app.url)
    outcome = await service.create(payload)
    return UserCreateResult(user=UserProfileRead.model_validate(outcome.profile), email_sent=outcome.email_sent)


@router.patch(
    "/{user_id}",
    response_model=UserProfileRead,
    summary="Update User",
    description="Activate, deactivate or change the role of a user. The last active admin cannot be removed.",
    response_description="The updated profile.",
    responses={
        200: {"description": "User updated"},
        400: {"description": "Cannot remove the last active admin"},
        404: {"description": "User not found"},
    },
)
async def update_user(
    user_id: int,
    payload: UserUpdate,
    repos: ReposDep,
    identity: IdentityDep,
    email: EmailDep,
    _admin: AdminDep,
) -> UserProfileRead:
    service = UserAdminService(repos, identity, email, app_url=settings.app.url)
    return UserProfileRead.model_validate(await service.update(user_id, payload))


@router.put(
    "/{user_id}/reset-password",
    response_model=PasswordResetResult,
    summary="Reset Password",
    description="Set a new temporary password at the identity provider and email it to the user.",
    response_description="Outcome of the reset.",
    responses={
        200: {"description": "Password reset"},
        404: {"description": "User not found"},
        502: {"description": "The identity provider refused the change"},
    },
)
async def reset_password(
    user_id: int,
    repos: ReposDep,
    identity: IdentityDep,
    email: EmailDep,
    _admin: AdminDep,
) -> PasswordResetResult:
    service = UserAdminService(repos, identity, email, app_url=settings.app.url)
    email_sent = await service.reset_password(user_id)
    return PasswordResetResult(message="Password reset", email_sent=email_sent)
