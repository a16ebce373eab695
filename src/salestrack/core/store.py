# File: src/salestrack/core/store.py
"""Owner-scoped record store for sales entries."""

from datetime import date
from decimal import Decimal
from typing import Protocol, Sequence
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from salestrack.core.errors import DatabaseError
from salestrack.core.logging import get_logger
from salestrack.models.sales_entry import SalesEntry
from salestrack.models.sales_entry_schemas import SalesEntryRecord

logger = get_logger(__name__)


def month_bounds(month: date) -> tuple[date, date]:
    """First day of ``month`` and first day of the following month."""
    start = month.replace(day=1)
    if start.month == 12:
        return start, date(start.year + 1, 1, 1)
    return start, date(start.year, start.month + 1, 1)


class SalesStore(Protocol):
    """CRUD surface the import pipeline and API depend on."""

    async def insert_many(self, records: Sequence[SalesEntryRecord]) -> list[SalesEntryRecord]:
        """Persist records in order and return them as stored. Raises on failure."""
        ...

    async def delete_many(self, entry_ids: Sequence[UUID] | None = None) -> int:
        """Delete the given entries, or every entry of the owner when None."""
        ...

    async def select_all(self, month: date | None = None) -> list[SalesEntryRecord]:
        """All of the owner's entries, newest date first."""
        ...

    async def month_total(self, month: date) -> tuple[Decimal, int]:
        """Sum of amounts and number of entries dated in ``month``."""
        ...


class SqlSalesStore:
    """
    SQLAlchemy-backed store bound to one owner.

    Every statement filters on owner_id. ``insert_many`` commits per call, so
    when it is driven batch by batch, earlier batches stay persisted if a
    later one fails.
    """

    def __init__(self, db: AsyncSession, owner_id: str):
        if not owner_id:
            raise ValueError("owner_id is required")
        self.db = db
        self.owner_id = owner_id

    async def insert_many(self, records: Sequence[SalesEntryRecord]) -> list[SalesEntryRecord]:
        rows = [SalesEntry(owner_id=self.owner_id, **record.model_dump()) for record in records]
        self.db.add_all(rows)
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        return [SalesEntryRecord.model_validate(row) for row in rows]

    async def delete_many(self, entry_ids: Sequence[UUID] | None = None) -> int:
        stmt = delete(SalesEntry).where(SalesEntry.owner_id == self.owner_id)
        if entry_ids is not None:
            stmt = stmt.where(SalesEntry.id.in_(list(entry_ids)))
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("sales_store.delete_failed", error=type(exc).__name__)
            raise DatabaseError("Failed to delete sales entries") from exc
        return result.rowcount or 0

    async def select_all(self, month: date | None = None) -> list[SalesEntryRecord]:
        stmt = select(SalesEntry).where(SalesEntry.owner_id == self.owner_id)
        if month is not None:
            start, end = month_bounds(month)
            stmt = stmt.where(SalesEntry.date >= start, SalesEntry.date < end)
        stmt = stmt.order_by(SalesEntry.date.desc(), SalesEntry.created_at.desc())

        result = await self.db.execute(stmt)
        return [SalesEntryRecord.model_validate(row) for row in result.scalars().all()]

    async def month_total(self, month: date) -> tuple[Decimal, int]:
        start, end = month_bounds(month)
        stmt = select(
            func.coalesce(func.sum(SalesEntry.amount), 0),
            func.count(SalesEntry.id),
        ).where(
            SalesEntry.owner_id == self.owner_id,
            SalesEntry.date >= start,
            SalesEntry.date < end,
        )
        result = await self.db.execute(stmt)
        total, count = result.one()
        return Decimal(total).quantize(Decimal("0.01")), int(count)
