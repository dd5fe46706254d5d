"""
Database entity models.

Each module holds the table models of one business area:

- vendors: Vendor directory
- clients: Client companies
- projects: Projects and their status lifecycle
- ratings: Project ratings
- users: User profiles, roles and vendor links
- notifications: In-app notifications
- reviews: Review assignments and reminders
- vendor_onboarding: Vendor invites and applications
"""

from . import (
    clients,
    notifications,
    projects,
    ratings,
    reviews,
    users,
    vendor_onboarding,
    vendors,
)

__all__ = [
    "clients",
    "notifications",
    "projects",
    "ratings",
    "reviews",
    "users",
    "vendor_onboarding",
    "vendors",
]
