# File: src/salestrack/models/sales_entry.py
"""Sales entry model: one validated sales transaction line."""

import uuid
from datetime import date as date_type, datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, DateTime, Index, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from salestrack.core.db import Base
from salestrack.utils.datetime import now_utc


class SalesEntry(Base):
    """
    A single item sale reported by a branch.

    Rows are scoped by owner_id; every store query filters on it so one
    account never sees another's entries. Entries are only ever added or
    deleted, never updated in place by imports.
    """

    __tablename__ = "sales_entries"
    __table_args__ = (
        CheckConstraint("qty >= 1", name="sales_entry_qty_positive"),
        CheckConstraint("price >= 0", name="sales_entry_price_non_negative"),
        CheckConstraint(
            "discount_percent >= 0 AND discount_percent <= 100",
            name="sales_entry_discount_range",
        ),
        Index("ix_sales_entries_owner_date", "owner_id", "date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    owner_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
    )

    date: Mapped[date_type] = mapped_column(
        Date,
        nullable=False,
    )

    upc: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )

    name: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )

    qty: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
    )

    category: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default="",
    )

    price: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0.00"),
    )

    discount_percent: Mapped[Decimal] = mapped_column(
        Numeric(5, 2),
        nullable=False,
        default=Decimal("0.00"),
    )

    amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0.00"),
    )

    branch: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=now_utc,
    )

    def __repr__(self) -> str:
        return f"<SalesEntry {self.date} {self.branch} {self.name} x{self.qty}>"
