"""Async SQLAlchemy engine and session factory for the work-order DB."""

from __future__ import annotations

from pathlib import Path
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from fieldservice.config import get_settings

_settings = get_settings()


def _ensure_sqlite_dir(url: str) -> None:
    if url.startswith("sqlite") and ":memory:" not in url:
        Path(url.split(":///", 1)[-1]).parent.mkdir(parents=True, exist_ok=True)


_ensure_sqlite_dir(_settings.database_url)

engine = create_async_engine(_settings.database_url, echo=False)
async_session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db():
    """FastAPI dependency that yields an async session to the work-order DB."""
    async with async_session_factory() as session:
        yield session


async def create_schema():
    from fieldservice.models.base import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
