"""
Admin-only data management endpoints.

CSV import (preview and import), templates and exports, duplicate vendor
merging, embedding generation and raw table access for the admin console.
"""

from __future__ import annotations

from typing import Literal, Union

from fastapi import APIRouter, File, Form, HTTPException, Response, UploadFile, status

from vira.core.logging_config import get_logger
from vira.core.models.io.csv_import import CsvImportResult, CsvImportStatistics, CsvPreview, TableData
from vira.core.models.io.matching import EmbeddingRunResult, EmbeddingStatus
from vira.core.models.io.merge import MergePreview, MergeRequest, MergeResult
from vira.core.models.io.vendors import NextVendorCodeRead
from vira.server.core import constant
from vira.server.services import csv_export
from vira.server.services.auth import AdminDep
from vira.server.services.csv_import import CsvImporter, import_statistics, parse_csv, preview_import
from vira.server.services.deps import EmbeddingDep, ReposDep
from vira.server.services.embeddings import embedding_status, generate_missing_embeddings
from vira.server.services.vendor_merge import VendorMerger

logger = get_logger(__name__)

router = APIRouter(tags=["admin"])


@router.post(
    "/csv-import",
    response_model=Union[CsvPreview, CsvImportResult],
    summary="Import Ticket CSV",
    description=(
        "Upload a ticket export. `preview` parses the file and reports what would be imported; "
        "`import` creates projects and ratings in batches. Every vendor named in a batch must already exist."
    ),
    response_description="A preview or the import result.",
    responses={
        200: {"description": "File processed"},
        400: {"description": "Not a CSV file, empty file or file too large"},
    },
)
async def csv_import(
    repos: ReposDep,
    admin: AdminDep,
    file: UploadFile = File(...),
    mode: Literal["preview", "import"] = Form("preview"),
    batch_size: int = Form(constant.CSV_DEFAULT_BATCH_SIZE, ge=1, le=1000),
):
    """
    Import a ticket CSV.

    - **file**: `.csv` file, at most 10MB.
    - **mode**: `preview` (default) or `import`.
    - **batch_size**: Rows per batch (default 50).
    """
    if not file.filename or not file.filename.lower().endswith(".csv"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only .csv files are accepted")
    raw = await file.read()
    if len(raw) > constant.CSV_MAX_FILE_SIZE:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File exceeds the 10MB limit")
    if not raw.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File is empty")
    try:
        content = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File must be UTF-8 encoded")

    parsed = parse_csv(content)
    logger.info(f"CSV {mode} of '{file.filename}': {len(parsed.records)} rows, {len(parsed.errors)} parse errors")
    if mode == "preview":
        return await preview_import(repos, parsed)
    importer = CsvImporter(repos, rater_email=admin.email, batch_size=batch_size)
    return await importer.run(parsed)


@router.get(
    "/csv-import/statistics",
    response_model=CsvImportStatistics,
    summary="Import Statistics",
    description="Totals of projects, vendors and rated projects, the average rating and the top performers.",
    response_description="Import statistics.",
    responses={200: {"description": "Statistics computed"}},
)
async def csv_import_statistics(repos: ReposDep, _admin: AdminDep) -> CsvImportStatistics:
    return await import_statistics(repos)


@router.get(
    "/csv-templates/{kind}",
    summary="Download CSV Template",
    description="Header-only CSV template for `vendors`, `projects` or `ratings`.",
    response_description="A CSV file.",
    responses={
        200: {"description": "Template returned", "content": {"text/csv": {}}},
        404: {"description": "Unknown template"},
    },
)
async def csv_template(kind: str, _admin: AdminDep) -> Response:
    body = csv_export.template_csv(kind)
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{kind}_template.csv"'},
    )


@router.get(
    "/csv-export/{table}",
    summary="Export Table as CSV",
    description="Export `vendors`, `clients`, `projects` or `ratings` as CSV.",
    response_description="A CSV file.",
    responses={
        200: {"description": "Export returned", "content": {"text/csv": {}}},
        400: {"description": "Table cannot be exported"},
    },
)
async def csv_export_table(table: str, repos: ReposDep, _admin: AdminDep) -> Response:
    body = await csv_export.export_table(repos, table)
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{table}.csv"'},
    )


@router.post(
    "/merge-vendors",
    response_model=Union[MergePreview, MergeResult],
    summary="Merge Duplicate Vendors",
    description=(
        "Fold the csv vendor into the project vendor under `keep_name`. "
        "`preview` lists the affected projects and ratings; `merge` performs it."
    ),
    response_description="A merge preview or result.",
    responses={
        200: {"description": "Preview or merge completed"},
        400: {"description": "Missing parameters, same vendor twice, unknown vendor or name taken"},
        500: {"description": "Transaction failed with rollback attempted"},
    },
)
async def merge_vendors(payload: MergeRequest, repos: ReposDep, _admin: AdminDep):
    """
    Merge two vendors.

    - **csv_vendor_id**: Vendor to remove.
    - **project_vendor_id**: Vendor to keep.
    - **keep_name**: Name the kept vendor ends up with.
    - **mode**: `preview` (default) or `merge`.
    """
    merger = VendorMerger(repos)
    if payload.mode == "merge":
        return await merger.merge(payload)
    return await merger.preview(payload)


@router.post(
    "/embeddings/generate",
    response_model=EmbeddingRunResult,
    summary="Generate Embeddings",
    description="Embed every project and vendor that has no embedding yet.",
    response_description="How many rows were embedded and the errors met.",
    responses={
        200: {"description": "Run finished"},
        502: {"description": "The embeddings provider failed"},
    },
)
async def generate_embeddings(repos: ReposDep, client: EmbeddingDep, _admin: AdminDep) -> EmbeddingRunResult:
    return await generate_missing_embeddings(repos, client)


@router.get(
    "/embeddings/status",
    response_model=EmbeddingStatus,
    summary="Embedding Coverage",
    description="Projects and vendors with and without embeddings.",
    response_description="Embedding counts.",
    responses={200: {"description": "Counts computed"}},
)
async def get_embedding_status(repos: ReposDep, _admin: AdminDep) -> EmbeddingStatus:
    return await embedding_status(repos)


@router.get(
    "/table-data/{table}",
    response_model=TableData,
    summary="Table Data",
    description="All rows of `vendors`, `clients`, `projects` or `ratings`.",
    response_description="The rows and their count.",
    responses={
        200: {"description": "Rows returned"},
        400: {"description": "Unknown table"},
    },
)
async def table_data(table: str, repos: ReposDep, _admin: AdminDep) -> TableData:
    rows = await csv_export.table_rows(repos, table)
    return TableData(table=table, rows=rows, total=len(rows))


@router.get(
    "/next-vendor-code",
    response_model=NextVendorCodeRead,
    summary="Next Vendor Code",
    description="The code the next vendor will receive (`VEN-###`).",
    response_description="The next vendor code.",
    responses={200: {"description": "Code computed"}},
)
async def next_vendor_code(repos: ReposDep, _admin: AdminDep) -> NextVendorCodeRead:
    return NextVendorCodeRead(next_vendor_code=await repos.vendors.next_vendor_code())
