"""Factories and fakes for creating test objects."""

import io
import uuid
from datetime import date as date_type, datetime, timezone
from decimal import Decimal
from typing import Any, Optional, Sequence
from uuid import UUID

from openpyxl import Workbook
from sqlalchemy.ext.asyncio import AsyncSession

from salestrack.core.store import month_bounds
from salestrack.models.collection_item import CollectionItem
from salestrack.models.sales_entry_schemas import SalesEntryRecord, compute_amount

SALES_HEADERS = ["Name", "Product", "Branch", "QTY", "Price", "Discount", "Amount", "Date"]


def make_workbook(
    rows: Sequence[dict[str, Any]],
    headers: Optional[Sequence[str]] = None,
    sheet_title: str = "Sheet1",
) -> bytes:
    """Build .xlsx bytes with a header row and one sheet row per mapping."""
    if headers is None:
        headers = list(rows[0].keys()) if rows else SALES_HEADERS

    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title
    ws.append(list(headers))
    for row in rows:
        ws.append([row.get(header) for header in headers])

    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()


def make_record(**overrides: Any) -> SalesEntryRecord:
    """Create a valid SalesEntryRecord; any field can be overridden."""
    price = Decimal(str(overrides.pop("price", "100.00")))
    qty = overrides.pop("qty", 1)
    discount = Decimal(str(overrides.pop("discount_percent", "0")))
    fields = {
        "id": uuid.uuid4(),
        "date": date_type(2024, 3, 5),
        "upc": "",
        "name": "MHB-1042",
        "description": "Canvas tote bag",
        "qty": qty,
        "category": "MHB",
        "price": price,
        "discount_percent": discount,
        "amount": compute_amount(price, qty, discount),
        "branch": "MAIN",
        "created_at": datetime(2024, 3, 5, 8, 0, tzinfo=timezone.utc),
    }
    fields.update(overrides)
    return SalesEntryRecord(**fields)


class InMemorySalesStore:
    """SalesStore fake that records every insert_many call.

    ``fail_on_call`` makes the n-th insert_many call (1-based) raise
    without storing anything from that call.
    """

    def __init__(self, fail_on_call: Optional[int] = None):
        self.entries: list[SalesEntryRecord] = []
        self.insert_calls: list[int] = []
        self.fail_on_call = fail_on_call

    async def insert_many(self, records: Sequence[SalesEntryRecord]) -> list[SalesEntryRecord]:
        self.insert_calls.append(len(records))
        if len(self.insert_calls) == self.fail_on_call:
            raise RuntimeError("connection reset during commit")
        self.entries.extend(records)
        return list(records)

    async def delete_many(self, entry_ids: Optional[Sequence[UUID]] = None) -> int:
        before = len(self.entries)
        if entry_ids is None:
            self.entries = []
        else:
            ids = set(entry_ids)
            self.entries = [e for e in self.entries if e.id not in ids]
        return before - len(self.entries)

    async def select_all(self, month: Optional[date_type] = None) -> list[SalesEntryRecord]:
        entries = self.entries
        if month is not None:
            start, end = month_bounds(month)
            entries = [e for e in entries if start <= e.date < end]
        return sorted(entries, key=lambda e: (e.date, e.created_at), reverse=True)

    async def month_total(self, month: date_type) -> tuple[Decimal, int]:
        entries = await self.select_all(month)
        return sum((e.amount for e in entries), Decimal("0.00")), len(entries)


class CollectionItemFactory:
    """Factory for creating CollectionItem rows."""

    @staticmethod
    async def create(
        session: AsyncSession,
        owner_id: str = "test-owner",
        name: str = "Canvas tote bag",
        upc: str = "480000000001",
        description: str = "",
        category: str = "MHB",
        price: Decimal = Decimal("599.00"),
        **kwargs,
    ) -> CollectionItem:
        """Create a collection item."""
        item = CollectionItem(
            id=kwargs.get("id", uuid.uuid4()),
            owner_id=owner_id,
            name=name,
            upc=upc,
            description=description,
            category=category,
            price=price,
        )

        session.add(item)
        await session.commit()
        await session.refresh(item)

        return item
