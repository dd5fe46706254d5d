"""
CSV import I/O models.

Preview and import results keep the camelCase keys the admin import page
reads; the Python attributes stay snake_case.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CsvRowError(BaseModel):
    """A validation problem with a single CSV cell or row."""

    row: int
    field: str
    value: Optional[Any] = None
    error: str


class ParsedProjectRow(BaseModel):
    """One ticket row of an import, after header mapping and parsing."""

    row: int
    vendor_name: str = ""
    project_title: str = ""
    client_company: str = ""
    submitted_by: Optional[str] = None
    status: str = "closed"
    project_success_rating: Optional[int] = None
    quality_rating: Optional[int] = None
    communication_rating: Optional[int] = None
    what_went_well: Optional[str] = None
    areas_for_improvement: Optional[str] = None
    recommend_again: Optional[bool] = None
    recommendation_scope: Optional[str] = None

    @property
    def has_ratings(self) -> bool:
        return None not in (self.project_success_rating, self.quality_rating, self.communication_rating)


class CsvPreview(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    headers: List[str]
    rows: List[ParsedProjectRow]
    total_rows: int = Field(alias="totalRows")
    has_ratings: bool = Field(alias="hasRatings")
    new_vendors: List[str] = Field(alias="newVendors")
    existing_vendors: List[str] = Field(alias="existingVendors")
    with_ratings: int = Field(alias="withRatings")
    without_ratings: int = Field(alias="withoutRatings")
    errors: List[CsvRowError]


class CsvImportSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    new_vendors: List[str] = Field(default_factory=list, alias="newVendors")
    updated_vendors: List[str] = Field(default_factory=list, alias="updatedVendors")
    projects_with_ratings: int = Field(default=0, alias="projectsWithRatings")
    projects_without_ratings: int = Field(default=0, alias="projectsWithoutRatings")


class CsvImportResult(BaseModel):
    success: bool
    total_rows: int
    imported: int
    skipped: int
    errors: List[CsvRowError]
    summary: CsvImportSummary
    processing_time_ms: int


class TopPerformer(BaseModel):
    vendor_id: int
    vendor_name: str
    average_rating: float
    total_ratings: int


class CsvImportStatistics(BaseModel):
    total_projects: int
    total_vendors: int
    rated_projects: int
    average_rating: Optional[float] = None
    top_performers: List[TopPerformer]


class TableData(BaseModel):
    table: str
    rows: List[Dict[str, Any]]
    total: int
