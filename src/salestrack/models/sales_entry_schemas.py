# File: src/salestrack/models/sales_entry_schemas.py
"""Pydantic schemas for sales entries and spreadsheet imports."""

from datetime import date as date_type, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from salestrack.core.parsing import MAX_MONEY, MAX_QTY, round2
from salestrack.core.validators import sanitize_text


def compute_amount(price: Decimal, qty: int, discount_percent: Decimal) -> Decimal:
    """amount = round2(price * qty * (1 - discount/100))."""
    return round2(price * qty * (1 - discount_percent / Decimal(100)))


class SalesEntryBase(BaseModel):
    """Fields shared by every representation of a sales entry."""

    date: date_type
    upc: str = ""
    name: str = Field(..., min_length=1)
    description: str = ""
    qty: int = Field(1, ge=1)
    category: str = Field("", max_length=16)
    price: Decimal = Field(Decimal("0.00"), ge=0)
    discount_percent: Decimal = Field(Decimal("0.00"), ge=0, le=100)
    amount: Decimal
    branch: str = Field(..., min_length=1)


class SalesEntryCreate(BaseModel):
    """Schema for adding a single entry by hand. Amount is computed when omitted."""

    date: date_type
    upc: str = Field("", max_length=64)
    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    qty: int = Field(1, ge=1, lt=MAX_QTY)
    category: str = Field("", max_length=16)
    price: Decimal = Field(Decimal("0.00"), ge=0, le=MAX_MONEY, decimal_places=2)
    discount_percent: Decimal = Field(Decimal("0.00"), ge=0, le=100, decimal_places=2)
    amount: Decimal | None = Field(None, ge=-MAX_MONEY, le=MAX_MONEY, decimal_places=2)
    branch: str = Field(..., min_length=1, max_length=50)

    @field_validator("name", "branch", "upc", "description", "category")
    @classmethod
    def strip_text(cls, v: str) -> str:
        """Sanitize free-text fields."""
        return sanitize_text(v)

    @field_validator("name", "branch")
    @classmethod
    def require_text(cls, v: str) -> str:
        if not v:
            raise ValueError("cannot be empty")
        return v

    @model_validator(mode="after")
    def fill_amount(self) -> "SalesEntryCreate":
        """Explicit non-zero amount wins; otherwise derive it."""
        if not self.amount:
            self.amount = compute_amount(self.price, self.qty, self.discount_percent)
        if abs(self.amount) > MAX_MONEY:
            raise ValueError(f"Amount exceeds maximum allowed: {MAX_MONEY}")
        return self


class SalesEntryRecord(SalesEntryBase):
    """A sales entry with identity: freshly imported or read back from the store."""

    id: UUID
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ImportResult(BaseModel):
    """Outcome of mapping spreadsheet rows into sales entries.

    ``errors`` holds at most the first few messages for display;
    ``total_errors`` is the untruncated count.
    """

    success: bool
    data: list[SalesEntryRecord] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    total_errors: int = 0


class SalesImportResponse(BaseModel):
    """Response body for a committed spreadsheet import."""

    success: bool
    imported: int
    errors: list[str]
    total_errors: int


class ImportStatusRead(BaseModel):
    """Observable state of the owner's batch import."""

    importing: bool
    progress: int = Field(..., ge=0, le=100)


class MonthlyTotalRead(BaseModel):
    """Total sales amount and entry count for one month."""

    month: str
    total_amount: Decimal
    entry_count: int
