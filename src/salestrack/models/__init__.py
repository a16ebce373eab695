"""Domain models package."""

from salestrack.models.collection_item import CollectionItem
from salestrack.models.collection_item_schemas import CollectionItemBase, CollectionItemRead
from salestrack.models.enums import Category
from salestrack.models.sales_entry import SalesEntry
from salestrack.models.sales_entry_schemas import (
    ImportResult,
    SalesEntryCreate,
    SalesEntryRecord,
)

__all__ = [
    "Category",
    "CollectionItem",
    "CollectionItemBase",
    "CollectionItemRead",
    "ImportResult",
    "SalesEntry",
    "SalesEntryCreate",
    "SalesEntryRecord",
]
