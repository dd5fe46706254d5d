"""CSV templates and table exports for the admin area."""

from __future__ import annotations

import csv
import io
from datetime import date, datetime
from typing import Any, Dict, List, Sequence, Tuple, Type

from pydantic import BaseModel

from vira.core.database.repositories import RepositoryBundle
from vira.core.errors import NotFoundError, ValidationFailedError
from vira.core.logging_config import get_logger
from vira.core.models.io.clients import ClientRead
from vira.core.models.io.projects import ProjectRead
from vira.core.models.io.ratings import RatingRead
from vira.core.models.io.vendors import VendorRead

logger = get_logger(__name__)

CSV_TEMPLATES: Dict[str, List[str]] = {
    "vendors": [
        "vendor_name",
        "vendor_type",
        "email",
        "primary_contact",
        "phone",
        "website",
        "location",
        "time_zone",
        "industry",
        "service_categories",
        "specialties",
        "skills",
        "pricing_structure",
        "rate_cost",
        "availability_status",
    ],
    "projects": [
        "Ticket Assignee",
        "Ticket Submitted By",
        "Ticket Title",
        "Ticket Company Name",
        "Ticket Status",
    ],
    "ratings": [
        "Ticket Assignee",
        "Ticket Submitted By",
        "Ticket Title",
        "Ticket Company Name",
        "Ticket Status",
        "Project Success Rating (1-10)",
        "Quality Rating (1-10)",
        "Communication Rating (1-10)",
        "What went well?",
        "Areas for improvement?",
        "Would you recommend this vendor again?",
    ],
}

# Table name -> (repository attribute, row schema)
EXPORT_TABLES: Dict[str, Tuple[str, Type[BaseModel]]] = {
    "vendors": ("vendors", VendorRead),
    "clients": ("clients", ClientRead),
    "projects": ("projects", ProjectRead),
    "ratings": ("ratings", RatingRead),
}


def template_csv(kind: str) -> str:
    headers = CSV_TEMPLATES.get(kind)
    if headers is None:
        raise NotFoundError(f"Unknown template: {kind}")
    return render_csv(headers, [])


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def render_csv(headers: Sequence[str], rows: Sequence[Dict[str, Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow([_cell(row.get(header)) for header in headers])
    return buffer.getvalue()


async def table_rows(repos: RepositoryBundle, table: str) -> List[Dict[str, Any]]:
    """All rows of an exportable table as plain dicts, in each repository's list order."""
    if table not in EXPORT_TABLES:
        raise ValidationFailedError(f"Invalid table: {table}", details={"allowed": sorted(EXPORT_TABLES)})
    attribute, schema = EXPORT_TABLES[table]
    rows = await getattr(repos, attribute).list()
    return [schema.model_validate(row).model_dump(mode="json") for row in rows]


async def export_table(repos: RepositoryBundle, table: str) -> str:
    rows = await table_rows(repos, table)
    _, schema = EXPORT_TABLES[table]
    logger.info(f"Exporting {len(rows)} {table} rows")
    return render_csv(list(schema.model_fields), rows)
