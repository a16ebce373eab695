# File: src/salestrack/models/collection_item_schemas.py
"""Pydantic schemas for collection items."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from salestrack.core.parsing import MAX_MONEY


class CollectionItemBase(BaseModel):
    """Catalog fields as they appear in the collection workbook."""

    name: str = Field(..., min_length=1)
    upc: str = Field(..., min_length=1, max_length=64)
    description: str = ""
    category: str = ""
    price: Decimal = Field(Decimal("0.00"), ge=0, le=MAX_MONEY)


class CollectionItemRead(CollectionItemBase):
    """Schema for reading a collection item from the database."""

    id: UUID
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CollectionImportResult(BaseModel):
    """Outcome of mapping collection workbook rows."""

    success: bool
    data: list[CollectionItemBase] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    total_errors: int = 0


class CollectionImportResponse(BaseModel):
    """Response body for a committed collection import."""

    success: bool
    created: int
    updated: int
    errors: list[str]
    total_errors: int
