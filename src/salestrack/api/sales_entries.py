# File: src/salestrack/api/sales_entries.py
"""Sales entry API endpoints: CRUD, spreadsheet import and export."""

import uuid
from datetime import date as date_type
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status
from starlette.concurrency import run_in_threadpool

from salestrack.api.dependencies import get_import_state, get_sales_store
from salestrack.api.utils import xlsx_response
from salestrack.core.batch_import import BatchImporter, ImportState
from salestrack.core.categories import get_category_extractor
from salestrack.core.errors import ImportInProgressError, NotFoundError
from salestrack.core.logging import get_logger
from salestrack.core.sales_export import create_import_template, create_sales_workbook
from salestrack.core.sales_import import parse_sales_workbook
from salestrack.core.spreadsheet import ensure_within_size_limit
from salestrack.core.store import SalesStore
from salestrack.core.validators import validate_month
from salestrack.models.sales_entry_schemas import (
    ImportStatusRead,
    MonthlyTotalRead,
    SalesEntryCreate,
    SalesEntryRecord,
    SalesImportResponse,
)
from salestrack.utils.datetime import month_key, now_utc, today_local

logger = get_logger(__name__)

router = APIRouter(prefix="/api/sales-entries", tags=["sales-entries"])


@router.get("", response_model=list[SalesEntryRecord])
async def list_sales_entries(
    month: str | None = Query(None, description="Filter by month (YYYY-MM)"),
    store: SalesStore = Depends(get_sales_store),
):
    """List the owner's entries, newest date first."""
    return await store.select_all(validate_month(month))


@router.get("/monthly-total", response_model=MonthlyTotalRead)
async def get_monthly_total(
    month: str | None = Query(None, description="Month (YYYY-MM), default current month"),
    store: SalesStore = Depends(get_sales_store),
):
    """Sum of amounts for one month."""
    month_start = validate_month(month) or today_local().replace(day=1)
    total, count = await store.month_total(month_start)
    return MonthlyTotalRead(month=month_key(month_start), total_amount=total, entry_count=count)


@router.post("", response_model=SalesEntryRecord, status_code=status.HTTP_201_CREATED)
async def create_sales_entry(
    entry: SalesEntryCreate,
    store: SalesStore = Depends(get_sales_store),
):
    """Add one entry by hand. Category is derived from the name when left blank."""
    record = SalesEntryRecord(
        id=uuid.uuid4(),
        created_at=now_utc(),
        **entry.model_dump(exclude={"category"}),
        category=entry.category or get_category_extractor()(entry.name),
    )
    stored = await store.insert_many([record])
    logger.info(
        "sales_entry.created",
        entry_id=str(record.id),
        branch=record.branch,
        amount=str(record.amount),
    )
    return stored[0]


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_sales_entry(
    entry_id: UUID,
    store: SalesStore = Depends(get_sales_store),
):
    """Delete one entry of the owner."""
    deleted = await store.delete_many([entry_id])
    if not deleted:
        raise NotFoundError("SalesEntry", str(entry_id))
    logger.info("sales_entry.deleted", entry_id=str(entry_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("")
async def clear_sales_entries(
    store: SalesStore = Depends(get_sales_store),
    state: ImportState = Depends(get_import_state),
):
    """Delete every entry of the owner. Refused while an import is running."""
    if state.importing:
        raise ImportInProgressError(progress=state.progress)
    deleted = await store.delete_many()
    logger.info("sales_entry.cleared", deleted_count=deleted)
    return {"deleted": deleted}


@router.post("/import", response_model=SalesImportResponse)
async def import_sales_entries(
    file: UploadFile = File(...),
    base_date: date_type | None = Form(None),
    store: SalesStore = Depends(get_sales_store),
    state: ImportState = Depends(get_import_state),
):
    """
    Import a .xlsx/.xls workbook.

    Bare day numbers in the Date column resolve against the month of
    ``base_date`` (default: today). Nothing is committed unless at least
    one row is valid; valid rows are committed in batches.
    """
    if file.size is not None:
        ensure_within_size_limit(file.size)
    content = await file.read()
    ensure_within_size_limit(len(content))

    logger.info("sales_import.received", filename=file.filename, size=len(content))
    result = await run_in_threadpool(parse_sales_workbook, content, base_date)

    if not result.success:
        logger.warning(
            "sales_import.rejected",
            filename=file.filename,
            total_errors=result.total_errors,
        )
        return SalesImportResponse(
            success=False,
            imported=0,
            errors=result.errors,
            total_errors=result.total_errors,
        )

    stored = await BatchImporter(store, state=state).import_entries(result.data)

    logger.info(
        "sales_import.completed",
        filename=file.filename,
        imported=len(stored),
        total_errors=result.total_errors,
    )
    return SalesImportResponse(
        success=True,
        imported=len(stored),
        errors=result.errors,
        total_errors=result.total_errors,
    )


@router.get("/import/status", response_model=ImportStatusRead)
async def get_import_status(state: ImportState = Depends(get_import_state)):
    """Whether an import is running and how far it got."""
    return ImportStatusRead(importing=state.importing, progress=state.progress)


@router.get("/export")
async def export_sales_entries(
    month: str | None = Query(None, description="Only export this month (YYYY-MM)"),
    store: SalesStore = Depends(get_sales_store),
):
    """Download the owner's entries as .xlsx."""
    entries = await store.select_all(validate_month(month))
    content = create_sales_workbook(entries)

    logger.info("export.sales_entries", entry_count=len(entries), month=month)
    return xlsx_response(content, f"sales-data-{today_local().isoformat()}.xlsx")


@router.get("/template")
async def download_import_template():
    """Download an empty workbook with the headers the importer reads."""
    return xlsx_response(create_import_template(), "sales-import-template.xlsx")
