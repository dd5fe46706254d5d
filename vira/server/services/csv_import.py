"""CSV import of ticket exports into projects and ratings.

Parsing
-------
``parse_csv`` reads the ticket export with the standard quoted-field rules
(``""`` escapes a quote), trims every cell, skips blank rows and maps the
known headers onto ``ParsedProjectRow``. Rating columns are only read when
the header row contains at least one of them. Rows missing a vendor, title
or client are reported as ``CsvRowError`` and left out.

Import
------
``import_rows`` works in batches. A batch is imported only when every
vendor it names already exists; otherwise the whole batch is skipped with
an error listing fuzzy suggestions for each unknown name. Clients are found
or created by name, duplicate rows (same title, vendor and client, either
already stored or repeated in the file) are skipped, and a rating is
created for every row that carries all three scores.
"""

from __future__ import annotations

import csv
import io
import re
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Tuple

from rapidfuzz.distance import Levenshtein
from sqlalchemy.exc import SQLAlchemyError

from vira.core.database.entities.projects import Project, ProjectStatus
from vira.core.database.entities.ratings import Rating
from vira.core.database.repositories import RepositoryBundle
from vira.core.logging_config import get_logger
from vira.core.models.io.csv_import import (
    CsvImportResult,
    CsvImportStatistics,
    CsvImportSummary,
    CsvPreview,
    CsvRowError,
    ParsedProjectRow,
    TopPerformer,
)
from vira.core.monitoring import log_import_run

logger = get_logger(__name__)

PREVIEW_ROWS = 5
SUGGESTION_THRESHOLD = 0.6
MAX_SUGGESTIONS = 3

RATING_COLUMN_PATTERNS = (
    re.compile(r"project.success.*\(1-10\)", re.IGNORECASE),
    re.compile(r"quality.*\(1-10\)", re.IGNORECASE),
    re.compile(r"communication.*\(1-10\)", re.IGNORECASE),
    re.compile(r"what.*went.*well", re.IGNORECASE),
    re.compile(r"rec+om+end.*vendor", re.IGNORECASE),
)

BASE_HEADERS = {
    "Ticket Assignee": "vendor_name",
    "Ticket Submitted By": "submitted_by",
    "Ticket Title": "project_title",
    "Ticket Company Name": "client_company",
    "Ticket Status": "status",
}

RATING_HEADERS = {
    "Project Success Rating (1-10)": "project_success_rating",
    "Project Success (1-10)": "project_success_rating",
    "Quality Rating (1-10)": "quality_rating",
    "Quality (1-10)": "quality_rating",
    "Communication Rating (1-10)": "communication_rating",
    "Communication (1-10)": "communication_rating",
    "What went well? (Optional) (1-10)": "what_went_well",
    "What went well?": "what_went_well",
    "Areas for improvement? (Optional)": "areas_for_improvement",
    "Areas for improvement?": "areas_for_improvement",
    "Would you reccomend this vendor again?": "recommendation",
    "Would you recommend this vendor again?": "recommendation",
}

REQUIRED_FIELDS = (
    ("vendor_name", "Vendor name is required (Ticket Assignee column)"),
    ("project_title", "Project title is required (Ticket Title column)"),
    ("client_company", "Client company is required (Ticket Company Name column)"),
)

_LEADING_INT = re.compile(r"^[+-]?\d+")


@dataclass
class ParsedCsv:
    headers: List[str]
    has_ratings: bool
    records: List[ParsedProjectRow] = field(default_factory=list)
    errors: List[CsvRowError] = field(default_factory=list)


def parse_rating(value: Optional[str]) -> Optional[int]:
    """Leading integer of ``value`` when it lies in 1..10, else None."""
    if not value or not value.strip():
        return None
    match = _LEADING_INT.match(value.strip())
    if not match:
        return None
    rating = int(match.group(0))
    return rating if 1 <= rating <= 10 else None


def parse_recommendation(value: Optional[str]) -> Tuple[Optional[bool], Optional[str]]:
    """``yes`` is a general recommendation; ``yes, for X only`` is client-specific."""
    if not value or not value.strip():
        return None, None
    cleaned = value.strip().lower()
    if cleaned == "yes":
        return True, "general"
    if "yes" in cleaned and ("for" in cleaned or "only" in cleaned):
        return True, "client-specific"
    return None, None


def detect_rating_columns(headers: Sequence[str]) -> bool:
    return any(pattern.search(header) for pattern in RATING_COLUMN_PATTERNS for header in headers)


def map_project_status(value: Optional[str]) -> str:
    """Ticket status onto project status: closed tickets are completed projects."""
    cleaned = (value or "").strip().lower()
    if cleaned in ("closed", "completed", "complete", "done", "resolved"):
        return ProjectStatus.completed.value
    if cleaned == "archived":
        return ProjectStatus.archived.value
    return ProjectStatus.active.value


def _row_to_record(headers: Sequence[str], cells: Sequence[str], row_number: int, has_ratings: bool) -> ParsedProjectRow:
    values: Dict[str, object] = {"row": row_number}
    for header, value in zip(headers, cells):
        target = BASE_HEADERS.get(header)
        if target == "status":
            values["status"] = value or "closed"
        elif target == "submitted_by":
            values["submitted_by"] = value or None
        elif target:
            values[target] = value

        if not has_ratings:
            continue
        rating_target = RATING_HEADERS.get(header)
        if rating_target in ("project_success_rating", "quality_rating", "communication_rating"):
            values[rating_target] = parse_rating(value)
        elif rating_target in ("what_went_well", "areas_for_improvement"):
            values[rating_target] = value or None
        elif rating_target == "recommendation":
            values["recommend_again"], values["recommendation_scope"] = parse_recommendation(value)
    return ParsedProjectRow(**values)


def _validate(record: ParsedProjectRow) -> List[CsvRowError]:
    return [
        CsvRowError(row=record.row, field=name, value=getattr(record, name), error=message)
        for name, message in REQUIRED_FIELDS
        if not getattr(record, name)
    ]


def parse_csv(content: str) -> ParsedCsv:
    """Parse a ticket export into project rows and validation errors."""
    text = content.lstrip("\ufeff").strip()
    if not text:
        return ParsedCsv(
            headers=[],
            has_ratings=False,
            errors=[CsvRowError(row=0, field="file", value=None, error="CSV file is empty")],
        )

    reader = csv.reader(io.StringIO(text))
    headers = [cell.strip() for cell in next(reader)]
    parsed = ParsedCsv(headers=headers, has_ratings=detect_rating_columns(headers))

    for index, raw in enumerate(reader, start=2):
        cells = [cell.strip() for cell in raw]
        if not any(cells):
            continue
        record = _row_to_record(headers, cells, index, parsed.has_ratings)
        row_errors = _validate(record)
        if row_errors:
            parsed.errors.extend(row_errors)
        else:
            parsed.records.append(record)
    return parsed


def levenshtein_similarity(left: str, right: str) -> float:
    """1 - edit distance / longer length; identical strings score 1.0."""
    return Levenshtein.normalized_similarity(left, right)


def suggest_vendor_names(missing: str, known: Sequence[str]) -> List[str]:
    scored = [
        (name, levenshtein_similarity(missing.lower(), name.lower()))
        for name in known
    ]
    matches = [pair for pair in scored if pair[1] > SUGGESTION_THRESHOLD]
    matches.sort(key=lambda pair: pair[1], reverse=True)
    return [name for name, _ in matches[:MAX_SUGGESTIONS]]


def missing_vendor_message(missing: Sequence[str], known: Sequence[str]) -> str:
    lines = [
        f"Missing vendors found: {', '.join(missing)}",
        "",
        "These vendors do not exist in the database. Please either:",
        "1. Add these vendors to the database first, or",
        "2. Check for typos and use exact vendor names",
        "",
    ]
    for name in missing:
        suggestions = suggest_vendor_names(name, known)
        if suggestions:
            lines.append(f'"{name}" - Did you mean: {", ".join(suggestions)}')
        else:
            lines.append(f'"{name}" - No similar vendors found')
    return "\n".join(lines).strip()


def _unique_names(records: Sequence[ParsedProjectRow]) -> List[str]:
    seen: Dict[str, str] = {}
    for record in records:
        seen.setdefault(record.vendor_name.lower(), record.vendor_name)
    return list(seen.values())


async def preview_import(repos: RepositoryBundle, parsed: ParsedCsv) -> CsvPreview:
    """Summarize what an import would do, without writing anything."""
    started = time.perf_counter()
    names = _unique_names(parsed.records)
    existing = await repos.vendors.find_by_names(names)
    with_ratings = sum(1 for record in parsed.records if record.has_ratings)

    preview = CsvPreview(
        headers=parsed.headers,
        rows=parsed.records[:PREVIEW_ROWS],
        total_rows=len(parsed.records),
        has_ratings=parsed.has_ratings,
        new_vendors=[name for name in names if name.lower() not in existing],
        existing_vendors=[name for name in names if name.lower() in existing],
        with_ratings=with_ratings,
        without_ratings=len(parsed.records) - with_ratings,
        errors=parsed.errors,
    )
    log_import_run("preview", len(parsed.records), len(parsed.records), 0, (time.perf_counter() - started) * 1000)
    return preview


class CsvImporter:
    """Writes parsed rows in batches."""

    def __init__(self, repos: RepositoryBundle, *, rater_email: str, batch_size: int = 50) -> None:
        self._repos = repos
        self._rater_email = rater_email
        self._batch_size = max(1, batch_size)
        self._client_ids: Dict[str, int] = {}
        self._seen: Set[Tuple[str, int, int]] = set()

    async def run(self, parsed: ParsedCsv) -> CsvImportResult:
        started = time.perf_counter()
        imported = 0
        skipped = 0
        errors: List[CsvRowError] = list(parsed.errors)
        summary = CsvImportSummary()
        known_names = await self._repos.vendors.list_names()

        records = parsed.records
        for start in range(0, len(records), self._batch_size):
            batch = records[start : start + self._batch_size]
            batch_imported, batch_skipped = await self._import_batch(batch, known_names, errors, summary)
            imported += batch_imported
            skipped += batch_skipped

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        log_import_run("import", len(records), imported, skipped, elapsed_ms)
        logger.info(f"CSV import finished: imported={imported}, skipped={skipped}, errors={len(errors)}")
        return CsvImportResult(
            success=not errors,
            total_rows=len(records),
            imported=imported,
            skipped=skipped,
            errors=errors,
            summary=summary,
            processing_time_ms=elapsed_ms,
        )

    async def _import_batch(
        self,
        batch: Sequence[ParsedProjectRow],
        known_names: Sequence[str],
        errors: List[CsvRowError],
        summary: CsvImportSummary,
    ) -> Tuple[int, int]:
        names = _unique_names(batch)
        found = await self._repos.vendors.find_by_names(names)
        # Plain values; a rollback below expires the ORM instances
        vendors = {key: (vendor.vendor_id, vendor.vendor_name) for key, vendor in found.items()}
        missing = [name for name in names if name.lower() not in vendors]
        if missing:
            errors.append(
                CsvRowError(
                    row=0,
                    field="vendor_pre_existence",
                    value=missing,
                    error=missing_vendor_message(missing, known_names),
                )
            )
            return 0, len(batch)

        imported = 0
        skipped = 0
        for record in batch:
            vendor_id, vendor_name = vendors[record.vendor_name.lower()]
            try:
                created = await self._import_record(record, vendor_id)
            except SQLAlchemyError as e:
                await self._repos.session.rollback()
                logger.error(f"CSV row {record.row} failed: {e}", exc_info=True)
                errors.append(CsvRowError(row=record.row, field="database", value=None, error=f"Insert failed: {e}"))
                skipped += 1
                continue
            if not created:
                skipped += 1
                continue
            imported += 1
            if vendor_name not in summary.updated_vendors:
                summary.updated_vendors.append(vendor_name)
            if record.has_ratings:
                summary.projects_with_ratings += 1
            else:
                summary.projects_without_ratings += 1
        return imported, skipped

    async def _client_id(self, name: str) -> int:
        key = name.strip().lower()
        if key not in self._client_ids:
            client = await self._repos.clients.get_or_create(name)
            self._client_ids[key] = client.client_id
        return self._client_ids[key]

    async def _import_record(self, record: ParsedProjectRow, vendor_id: int) -> bool:
        """Create the project (and rating); False when the row is a duplicate."""
        client_id = await self._client_id(record.client_company)
        key = (record.project_title.strip().lower(), vendor_id, client_id)
        if key in self._seen:
            return False
        self._seen.add(key)
        if await self._repos.projects.find_existing(record.project_title, vendor_id, client_id):
            return False

        project = await self._repos.projects.create(
            Project(
                project_title=record.project_title,
                client_id=client_id,
                vendor_id=vendor_id,
                submitted_by=record.submitted_by,
                status=map_project_status(record.status),
            )
        )
        if record.has_ratings:
            project_id = project.project_id
            try:
                await self._repos.ratings.create(self._rating(record, project_id, vendor_id, client_id))
            except SQLAlchemyError:
                await self._repos.session.rollback()
                await self._remove_project(project_id)
                self._seen.discard(key)
                raise
        return True

    def _rating(self, record: ParsedProjectRow, project_id: int, vendor_id: int, client_id: int) -> Rating:
        scores = (record.project_success_rating, record.quality_rating, record.communication_rating)
        return Rating(
            project_id=project_id,
            vendor_id=vendor_id,
            client_id=client_id,
            rater_email=record.submitted_by or self._rater_email,
            project_success_rating=record.project_success_rating,
            quality_rating=record.quality_rating,
            communication_rating=record.communication_rating,
            vendor_overall_rating=int(sum(scores) / 3 + 0.5),
            recommend_again=record.recommend_again,
            recommendation_scope=record.recommendation_scope,
            what_went_well=record.what_went_well,
            areas_for_improvement=record.areas_for_improvement,
        )

    async def _remove_project(self, project_id: int) -> None:
        """Delete a project whose rating could not be stored, so a later import can retry the row."""
        try:
            await self._repos.projects.delete(project_id)
        except SQLAlchemyError as e:
            await self._repos.session.rollback()
            logger.error(f"Removing unrated project {project_id} failed: {e}", exc_info=True)


async def import_statistics(repos: RepositoryBundle) -> CsvImportStatistics:
    average = await repos.ratings.average_overall()
    top = await repos.ratings.top_vendors(limit=5)
    performers = []
    for vendor_id, avg, total in top:
        vendor = await repos.vendors.get_by_id(vendor_id)
        performers.append(
            TopPerformer(
                vendor_id=vendor_id,
                vendor_name=vendor.vendor_name if vendor else f"#{vendor_id}",
                average_rating=round(avg, 2),
                total_ratings=total,
            )
        )
    return CsvImportStatistics(
        total_projects=await repos.projects.count(),
        total_vendors=await repos.vendors.count(),
        rated_projects=await repos.ratings.count(),
        average_rating=round(average, 2) if average is not None else None,
        top_performers=performers,
    )
