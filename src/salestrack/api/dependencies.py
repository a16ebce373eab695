# File: src/salestrack/api/dependencies.py
"""Shared FastAPI dependencies: owner scope, store and import state."""

import os

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from salestrack.core.batch_import import ImportState
from salestrack.core.db import get_db
from salestrack.core.errors import ValidationError
from salestrack.core.store import SalesStore, SqlSalesStore

DEFAULT_OWNER_ID = os.getenv("DEFAULT_OWNER_ID", "default")
MAX_OWNER_ID_LENGTH = 64


async def get_owner_id(x_owner_id: str | None = Header(None)) -> str:
    """Owner scope of the request; falls back to DEFAULT_OWNER_ID."""
    owner_id = (x_owner_id or "").strip() or DEFAULT_OWNER_ID
    if len(owner_id) > MAX_OWNER_ID_LENGTH:
        raise ValidationError(
            f"X-Owner-ID must be at most {MAX_OWNER_ID_LENGTH} characters",
            details={"length": len(owner_id)},
        )
    return owner_id


async def get_sales_store(
    owner_id: str = Depends(get_owner_id),
    db: AsyncSession = Depends(get_db),
) -> SalesStore:
    return SqlSalesStore(db, owner_id)


async def get_import_state(request: Request, owner_id: str = Depends(get_owner_id)) -> ImportState:
    """The owner's import state, shared by every request in this process."""
    states: dict[str, ImportState] = request.app.state.import_states
    return states.setdefault(owner_id, ImportState())
