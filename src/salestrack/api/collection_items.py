# File: src/salestrack/api/collection_items.py
"""Collection item (product master list) API endpoints."""

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from salestrack.api.dependencies import get_owner_id
from salestrack.api.utils import xlsx_response
from salestrack.core.collection_import import (
    create_collection_workbook,
    map_collection_rows,
    save_collection_items,
)
from salestrack.core.db import get_db
from salestrack.core.errors import NotFoundError
from salestrack.core.logging import get_logger
from salestrack.core.spreadsheet import ensure_within_size_limit, read_first_sheet
from salestrack.models import CollectionItem
from salestrack.models.collection_item_schemas import (
    CollectionImportResponse,
    CollectionItemRead,
)
from salestrack.utils.datetime import today_local

logger = get_logger(__name__)

router = APIRouter(prefix="/api/collection-items", tags=["collection-items"])


async def _owner_items(db: AsyncSession, owner_id: str) -> list[CollectionItem]:
    stmt = (
        select(CollectionItem)
        .where(CollectionItem.owner_id == owner_id)
        .order_by(CollectionItem.name)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


@router.get("", response_model=list[CollectionItemRead])
async def list_collection_items(
    owner_id: str = Depends(get_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """List the owner's catalog, by name."""
    return await _owner_items(db, owner_id)


@router.get("/by-upc/{upc}", response_model=CollectionItemRead)
async def get_collection_item_by_upc(
    upc: str,
    owner_id: str = Depends(get_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """Look up a product by UPC, used to prefill manual sales entries."""
    stmt = select(CollectionItem).where(
        CollectionItem.owner_id == owner_id,
        CollectionItem.upc == upc.strip(),
    )
    result = await db.execute(stmt)
    item = result.scalar_one_or_none()
    if item is None:
        raise NotFoundError("CollectionItem", upc)
    return item


@router.post("/import", response_model=CollectionImportResponse)
async def import_collection_items(
    file: UploadFile = File(...),
    owner_id: str = Depends(get_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """Import a catalog workbook. Rows upsert by UPC."""
    if file.size is not None:
        ensure_within_size_limit(file.size)
    content = await file.read()
    ensure_within_size_limit(len(content))

    rows = await run_in_threadpool(read_first_sheet, content)
    result = map_collection_rows(rows)

    if not result.success:
        logger.warning(
            "collection_import.rejected",
            filename=file.filename,
            total_errors=result.total_errors,
        )
        return CollectionImportResponse(
            success=False,
            created=0,
            updated=0,
            errors=result.errors,
            total_errors=result.total_errors,
        )

    created, updated = await save_collection_items(db, owner_id, result.data)
    return CollectionImportResponse(
        success=True,
        created=created,
        updated=updated,
        errors=result.errors,
        total_errors=result.total_errors,
    )


@router.get("/export")
async def export_collection_items(
    owner_id: str = Depends(get_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """Download the owner's catalog as .xlsx."""
    items = await _owner_items(db, owner_id)
    content = create_collection_workbook(items)

    logger.info("export.collection_items", item_count=len(items))
    return xlsx_response(content, f"collection-items-{today_local().isoformat()}.xlsx")
