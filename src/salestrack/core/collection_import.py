# File: src/salestrack/core/collection_import.py
"""Collection item (product master) import and export."""

from decimal import Decimal
from typing import Sequence

from openpyxl import Workbook
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from salestrack.core.logging import get_logger
from salestrack.core.parsing import finite_or, fits_money, parse_loose_number, round2
from salestrack.core.sales_export import workbook_to_bytes, write_header_row
from salestrack.core.sales_import import FIRST_DATA_ROW, MAX_REPORTED_ERRORS, lookup_field
from salestrack.core.spreadsheet import RawRow
from salestrack.models.collection_item import CollectionItem
from salestrack.models.collection_item_schemas import CollectionImportResult, CollectionItemBase

logger = get_logger(__name__)

COLLECTION_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "name": ("Name", "name", "NAME"),
    "upc": ("UPC", "upc", "Upc"),
    "description": ("Description", "description", "DESCRIPTION"),
    "category": ("Category", "category", "CATEGORY"),
    "price": ("Price", "price", "PRICE"),
}

COLLECTION_EXPORT_COLUMNS: list[tuple[str, int]] = [
    ("Name", 30),
    ("UPC", 15),
    ("Description", 25),
    ("Category", 12),
    ("Price", 10),
]


def _cell_text(row: RawRow, field: str) -> str:
    value = lookup_field(row, field, COLLECTION_FIELD_ALIASES)
    return str(value).strip()


def map_collection_rows(
    rows: Sequence[RawRow], max_errors: int = MAX_REPORTED_ERRORS
) -> CollectionImportResult:
    """Validate collection rows: name and UPC are required, price defaults to 0."""
    items: list[CollectionItemBase] = []
    errors: list[str] = []

    for index, row in enumerate(rows):
        row_num = index + FIRST_DATA_ROW
        name = _cell_text(row, "name")
        upc = _cell_text(row, "upc")

        if not name:
            errors.append(f"Row {row_num}: Missing name")
        if not upc:
            errors.append(f"Row {row_num}: Missing UPC")
        if not name or not upc:
            continue

        price_cell = lookup_field(row, "price", COLLECTION_FIELD_ALIASES)
        price = finite_or(parse_loose_number(price_cell), 0)
        if price > 0 and not fits_money(price):
            shown = str(price_cell).strip()
            errors.append(f'Row {row_num}: Invalid Price value "{shown}" (skipped)')
            continue
        items.append(
            CollectionItemBase(
                name=name,
                upc=upc,
                description=_cell_text(row, "description"),
                category=_cell_text(row, "category"),
                price=round2(price) if price > 0 else Decimal("0.00"),
            )
        )

    return CollectionImportResult(
        success=len(items) > 0,
        data=items,
        errors=errors[:max_errors],
        total_errors=len(errors),
    )


async def save_collection_items(
    db: AsyncSession, owner_id: str, items: Sequence[CollectionItemBase]
) -> tuple[int, int]:
    """
    Upsert items by UPC for one owner.

    A UPC repeated within the same file keeps its last row.

    Returns:
        (created count, updated count)
    """
    by_upc = {item.upc: item for item in items}
    if not by_upc:
        return 0, 0

    result = await db.execute(
        select(CollectionItem).where(
            CollectionItem.owner_id == owner_id,
            CollectionItem.upc.in_(list(by_upc)),
        )
    )
    existing = {row.upc: row for row in result.scalars().all()}

    created = updated = 0
    for upc, item in by_upc.items():
        row = existing.get(upc)
        if row is None:
            db.add(CollectionItem(owner_id=owner_id, **item.model_dump()))
            created += 1
            continue
        for key, value in item.model_dump(exclude={"upc"}).items():
            setattr(row, key, value)
        updated += 1

    await db.commit()
    logger.info("collection_import.saved", created=created, updated=updated)
    return created, updated


def create_collection_workbook(items: Sequence[CollectionItem]) -> bytes:
    """Generate an .xlsx of the collection items."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Collection Items"
    write_header_row(ws, COLLECTION_EXPORT_COLUMNS)

    for row_idx, item in enumerate(items, start=2):
        values = [item.name, item.upc, item.description, item.category, float(item.price)]
        for col_idx, value in enumerate(values, start=1):
            cell = ws.cell(row=row_idx, column=col_idx, value=value)
            if col_idx == 5:
                cell.number_format = "#,##0.00"

    return workbook_to_bytes(wb)
