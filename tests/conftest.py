# File: tests/conftest.py
"""Pytest configuration and fixtures."""

import os

import asyncpg
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from salestrack.api.dependencies import get_sales_store
from salestrack.core.db import Base, get_db
from salestrack.main import create_app

# Import all models so create_all sees them
from salestrack.models.collection_item import CollectionItem  # noqa: F401
from salestrack.models.sales_entry import SalesEntry  # noqa: F401
from tests.factories import InMemorySalesStore

DB_HOST = os.getenv("TEST_DB_HOST", "db")
DB_PORT = int(os.getenv("TEST_DB_PORT", "5432"))
DB_USER = "salestrack"
DB_PASSWORD = "dev_password_change_in_prod"
DB_NAME = "salestrack_test"

TEST_DATABASE_URL = (
    f"postgresql+asyncpg://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
)

TEST_OWNER_ID = "test-owner"


async def _ensure_test_database() -> None:
    """Create the test database using a raw asyncpg connection."""
    conn = await asyncpg.connect(
        host=DB_HOST,
        port=DB_PORT,
        user=DB_USER,
        password=DB_PASSWORD,
        database="postgres",
        timeout=3,
    )
    try:
        await conn.execute(f"CREATE DATABASE {DB_NAME}")
    except asyncpg.DuplicateDatabaseError:
        pass
    finally:
        await conn.close()


@pytest_asyncio.fixture(scope="function")
async def db_session():
    """Fresh DB session per test; skips when PostgreSQL is unreachable."""
    try:
        await _ensure_test_database()
    except (OSError, asyncpg.PostgresError) as exc:
        pytest.skip(f"PostgreSQL not available: {exc}")

    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async_session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except (OSError, SQLAlchemyError) as exc:
        await engine.dispose()
        pytest.skip(f"PostgreSQL not available: {exc}")

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def sales_store() -> InMemorySalesStore:
    return InMemorySalesStore()


@pytest_asyncio.fixture
async def client(sales_store: InMemorySalesStore):
    """Test client whose sales routes use the in-memory store."""
    app = create_app()

    async def override_get_sales_store():
        return sales_store

    app.dependency_overrides[get_sales_store] = override_get_sales_store

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"X-Owner-ID": TEST_OWNER_ID},
    ) as ac:
        ac.app = app
        ac.sales_store = sales_store
        yield ac


@pytest_asyncio.fixture
async def db_client(db_session: AsyncSession):
    """Test client backed by the PostgreSQL test session."""
    app = create_app()

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"X-Owner-ID": TEST_OWNER_ID},
    ) as ac:
        ac.db_session = db_session
        yield ac
