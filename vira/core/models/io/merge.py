"""
Vendor merge I/O models.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel

from .projects import ProjectRead
from .ratings import RatingRead
from .vendors import VendorRead


class MergeRequest(BaseModel):
    """Merge the vendor created by a CSV import into the vendor projects were filed under."""

    csv_vendor_id: Optional[int] = None
    project_vendor_id: Optional[int] = None
    keep_name: Optional[str] = None
    mode: Literal["preview", "merge"] = "preview"


class MergePreview(BaseModel):
    mode: Literal["preview"] = "preview"
    csv_vendor: VendorRead
    project_vendor: VendorRead
    keep_name: str
    affected_projects: List[ProjectRead]
    affected_ratings: List[RatingRead]


class MergeResult(BaseModel):
    mode: Literal["merge"] = "merge"
    success: bool
    vendor_id: int
    vendor_name: str
    projects_moved: int
    ratings_moved: int
    deleted_vendor_id: int
