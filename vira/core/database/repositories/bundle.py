"""
Repository bundle for dependency injection.

Services receive one ``RepositoryBundle`` bound to the request's session
instead of constructing repositories themselves.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from .clients import ClientRepository
from .notifications import NotificationRepository
from .projects import ProjectRepository
from .ratings import RatingRepository
from .reviews import ReviewAssignmentRepository, ReviewReminderRepository
from .users import UserProfileRepository, VendorUserRepository
from .vendor_onboarding import VendorApplicationRepository, VendorInviteRepository
from .vendors import VendorRepository


@dataclass(frozen=True)
class RepositoryBundle:
    """All ViRA repositories sharing one session."""

    session: AsyncSession
    vendors: VendorRepository
    clients: ClientRepository
    projects: ProjectRepository
    ratings: RatingRepository
    users: UserProfileRepository
    vendor_users: VendorUserRepository
    notifications: NotificationRepository
    assignments: ReviewAssignmentRepository
    reminders: ReviewReminderRepository
    invites: VendorInviteRepository
    applications: VendorApplicationRepository


def build_repositories(session: AsyncSession) -> RepositoryBundle:
    """Build a RepositoryBundle from an existing session.

    Args:
        session: Existing async session

    Returns:
        Bundle containing all repository instances
    """
    return RepositoryBundle(
        session=session,
        vendors=VendorRepository(session),
        clients=ClientRepository(session),
        projects=ProjectRepository(session),
        ratings=RatingRepository(session),
        users=UserProfileRepository(session),
        vendor_users=VendorUserRepository(session),
        notifications=NotificationRepository(session),
        assignments=ReviewAssignmentRepository(session),
        reminders=ReviewReminderRepository(session),
        invites=VendorInviteRepository(session),
        applications=VendorApplicationRepository(session),
    )
