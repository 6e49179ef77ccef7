"""Technician directory DB engine and session factory."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from fieldservice.config import get_settings
from fieldservice.db.engine import _ensure_sqlite_dir

_settings = get_settings()

_ensure_sqlite_dir(_settings.technician_database_url)

technician_engine = create_async_engine(_settings.technician_database_url, echo=False)
technician_session_factory = async_sessionmaker(
    technician_engine, class_=AsyncSession, expire_on_commit=False
)


async def get_technician_db():
    """FastAPI dependency that yields an async session to the technician DB."""
    async with technician_session_factory() as session:
        yield session


async def create_technician_schema():
    from fieldservice.models.base import TechnicianBase

    async with technician_engine.begin() as conn:
        await conn.run_sync(TechnicianBase.metadata.create_all)
