"""
User administration.

Accounts live at the identity provider; ``user_profiles`` carries the ViRA
side (role, active flag). Creating a user writes to both, deleting the
provider account again if the profile cannot be stored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from vira.core.database.entities.users import UserProfile, UserRole
from vira.core.database.repositories import RepositoryBundle
from vira.core.errors import ConflictError, NotFoundError, TransactionRollbackError, ValidationFailedError
from vira.core.logging_config import get_logger
from vira.core.models.io.users import UserCreate, UserUpdate

from .email_service import EmailDeliveryError, EmailService, welcome_email
from .identity import IdentityProviderClient, IdentityProviderError, generate_temporary_password

logger = get_logger(__name__)


@dataclass
class UserCreateOutcome:
    profile: UserProfile
    email_sent: bool


class UserAdminService:
    def __init__(
        self,
        repos: RepositoryBundle,
        identity: IdentityProviderClient,
        email: EmailService,
        *,
        app_url: str,
    ) -> None:
        self._repos = repos
        self._identity = identity
        self._email = email
        self._app_url = app_url

    async def create(self, request: UserCreate) -> UserCreateOutcome:
        """Create the provider account and the profile, then send the welcome email.

        Raises:
            ConflictError: a profile with the email exists
            IdentityProviderError: the provider refused the account
            TransactionRollbackError: the profile failed and the account was deleted again
        """
        email_address = request.email.strip()
        if await self._repos.users.get_by_email(email_address):
            raise ConflictError("A user with this email already exists")

        password = generate_temporary_password()
        auth_user_id = await self._identity.create_user(email_address, password, request.full_name)

        try:
            profile = await self._repos.users.create(
                UserProfile(
                    auth_user_id=auth_user_id,
                    email=email_address,
                    full_name=request.full_name,
                    role=request.role.value,
                )
            )
        except SQLAlchemyError as e:
            await self._repos.session.rollback()
            logger.error(f"Profile creation for {email_address} failed: {e}", exc_info=True)
            try:
                await self._identity.delete_user(auth_user_id)
            except IdentityProviderError as cleanup_error:
                logger.error(f"Could not delete provider user {auth_user_id}: {cleanup_error}", exc_info=True)
            raise TransactionRollbackError("Failed to create user profile") from e

        email_sent = await self._send_welcome(profile, password)
        logger.info(f"Created user {profile.id} ({profile.role})")
        return UserCreateOutcome(profile=profile, email_sent=email_sent)

    async def update(self, user_id: int, request: UserUpdate) -> UserProfile:
        profile = await self._get(user_id)
        changes = request.model_dump(exclude_unset=True, exclude_none=True)

        removes_admin = profile.role == UserRole.admin.value and profile.is_active and (
            changes.get("is_active") is False
            or ("role" in changes and changes["role"] != UserRole.admin)
        )
        if removes_admin and await self._repos.users.count_active_admins() <= 1:
            raise ValidationFailedError("Cannot remove the last active admin")

        if "is_active" in changes:
            profile.is_active = changes["is_active"]
        if "role" in changes:
            profile.role = UserRole(changes["role"]).value
        return await self._repos.users.update(profile)

    async def reset_password(self, user_id: int) -> bool:
        """Set a new temporary password and mail it; returns whether the email went out."""
        profile = await self._get(user_id)
        password = generate_temporary_password()
        await self._identity.set_password(profile.auth_user_id, password)
        return await self._send_welcome(profile, password)

    async def _get(self, user_id: int) -> UserProfile:
        profile = await self._repos.users.get_by_id(user_id)
        if profile is None:
            raise NotFoundError("User not found")
        return profile

    async def _send_welcome(self, profile: UserProfile, password: str) -> bool:
        message = welcome_email(
            full_name=profile.full_name,
            email=profile.email,
            temporary_password=password,
            app_url=self._app_url,
        )
        try:
            await self._email.send_message(profile.email, message)
        except EmailDeliveryError as e:
            logger.error(f"Welcome email to {profile.email} failed: {e}", exc_info=True)
            return False
        return True
