"""Async engine, session factory and the request-scoped session dependency."""

import os
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from salestrack.core.logging import get_logger

logger = get_logger(__name__)

ASYNC_SCHEME = "postgresql+asyncpg://"
_PLAIN_SCHEMES = ("postgres://", "postgresql://")


def local_database_url() -> str:
    """Compose the development DSN from the POSTGRES_* variables."""
    user = os.getenv("POSTGRES_USER", "salestrack")
    password = os.getenv("POSTGRES_PASSWORD", "dev_password_change_in_prod")
    host = os.getenv("POSTGRES_HOST", "db")
    port = os.getenv("POSTGRES_PORT", "5432")
    name = os.getenv("POSTGRES_DB", "salestrack_dev")
    return f"{ASYNC_SCHEME}{user}:{password}@{host}:{port}/{name}"


def resolve_database_url(url: str | None) -> str:
    """
    Turn a configured URL into one the asyncpg driver accepts.

    Examples:
        "postgres://u:p@h/db"   -> "postgresql+asyncpg://u:p@h/db"
        "postgresql://u:p@h/db" -> "postgresql+asyncpg://u:p@h/db"
        ""                      -> local_database_url()

    Any other scheme is returned as given.
    """
    url = (url or "").strip()
    if not url:
        return local_database_url()
    for scheme in _PLAIN_SCHEMES:
        if url.startswith(scheme):
            return ASYNC_SCHEME + url[len(scheme) :]
    return url


DATABASE_URL = resolve_database_url(os.getenv("DATABASE_URL"))
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "5"))
DB_ECHO = os.getenv("DB_ECHO", "").strip().lower() in ("1", "true", "yes")

engine = create_async_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    pool_size=DB_POOL_SIZE,
    echo=DB_ECHO,
)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield one session per request.

    Commits when the handler returns and rolls back when it raises. Batch
    imports commit on their own between batches; this final commit is then
    a no-op.
    """
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            logger.warning("db.session_rolled_back")
            raise
