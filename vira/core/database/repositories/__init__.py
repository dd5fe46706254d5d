"""
Database repository layer.

Each module provides async data access for one business area, built on
``BaseRepository`` and ``QueryBuilder`` from ``base``:

- vendors: vendors, vendor codes and embedding search
- clients: clients and their project counts
- projects: projects, duplicate detection and the unrated queue
- ratings: project ratings
- users: user profiles and vendor-user links
- notifications: in-app notifications
- reviews: review assignments and sent reminders
- vendor_onboarding: vendor invites and applications
- bundle: RepositoryBundle for dependency injection
"""

from .bundle import RepositoryBundle, build_repositories

__all__ = ["RepositoryBundle", "build_repositories"]
