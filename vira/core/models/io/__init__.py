"""
I/O models for API requests and responses.

These pydantic schemas define the contract between the API and its
clients, separate from the database entities so both can evolve
independently.

Modules:
- vendors, clients, projects, ratings: core CRUD schemas
- users, notifications, reviews: account and review workflow schemas
- vendor_onboarding, vendor_portal: vendor self-service schemas
- csv_import, merge: admin data tooling schemas
- matching: ViRA Match, similarity search and assistant schemas
- dashboard: dashboard aggregates
"""

from .clients import ClientCreate, ClientDetailRead, ClientRead, ClientUpdate
from .projects import ProjectCreate, ProjectRead, ProjectStatusUpdate, ProjectUpdate
from .ratings import RatingCreate, RatingRead, RatingUpdate
from .vendors import VendorCreate, VendorRatingSummary, VendorRead, VendorUpdate

__all__ = [
    "ClientCreate",
    "ClientDetailRead",
    "ClientRead",
    "ClientUpdate",
    "ProjectCreate",
    "ProjectRead",
    "ProjectStatusUpdate",
    "ProjectUpdate",
    "RatingCreate",
    "RatingRead",
    "RatingUpdate",
    "VendorCreate",
    "VendorRatingSummary",
    "VendorRead",
    "VendorUpdate",
]
