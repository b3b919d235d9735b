# folder_share/db/base.py
# Async engine + session plumbing for the share metadata table

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import MetaData
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from folder_share import config

ASYNC_DRIVER = "postgresql+asyncpg"


def _to_asyncpg_url(url: str) -> str:
    """Rewrite any postgres URL (postgres://, postgresql+psycopg2://, ...) to the asyncpg driver."""
    parsed = make_url(url)
    if parsed.drivername == ASYNC_DRIVER:
        return url
    return parsed.set(drivername=ASYNC_DRIVER).render_as_string(hide_password=False)


# Single MetaData shared by the table definitions and Alembic.
metadata: MetaData = MetaData()

ASYNC_DATABASE_URL: str = _to_asyncpg_url(config.DATABASE_URL)

# Nothing connects until the first query; echo follows DEBUG.
async_engine: AsyncEngine = create_async_engine(
    ASYNC_DATABASE_URL,
    echo=config.DEBUG,
    pool_pre_ping=True,
    pool_size=5,
    max_overflow=5,
)

AsyncSessionFactory = async_sessionmaker(
    bind=async_engine,
    expire_on_commit=False,
    autoflush=False,
)


@asynccontextmanager
async def get_session() -> AsyncIterator[AsyncSession]:
    """One unit of work; uncommitted changes are rolled back on error."""
    async with AsyncSessionFactory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
