"""CRUD operations for the technician directory DB."""

from __future__ import annotations

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fieldservice.db.crud import commit_or_conflict
from fieldservice.models import Technician, TechnicianStatus
from fieldservice.services.errors import DuplicateTechnician


async def _commit_unique_email(db: AsyncSession, tech: Technician) -> None:
    """Commit, reporting a unique-email violation as DuplicateTechnician."""
    email = tech.email
    try:
        await commit_or_conflict(db, f"Technician {tech.id}")
    except IntegrityError:
        await db.rollback()
        raise DuplicateTechnician(email)


async def create_technician(db: AsyncSession, **fields) -> Technician:
    tech = Technician(**fields)
    db.add(tech)
    await _commit_unique_email(db, tech)
    await db.refresh(tech)
    return tech


async def get_technician(db: AsyncSession, technician_id: str) -> Technician | None:
    return await db.get(Technician, technician_id)


async def get_technician_by_email(db: AsyncSession, email: str) -> Technician | None:
    result = await db.execute(select(Technician).where(Technician.email == email))
    return result.scalars().first()


async def list_technicians(db: AsyncSession) -> list[Technician]:
    result = await db.execute(select(Technician).order_by(Technician.created_at))
    return list(result.scalars().all())


async def list_technicians_by_status(db: AsyncSession, status: TechnicianStatus) -> list[Technician]:
    result = await db.execute(
        select(Technician)
        .where(Technician.status == status)
        .order_by(Technician.created_at)
    )
    return list(result.scalars().all())


async def list_available_technicians(db: AsyncSession) -> list[Technician]:
    return await list_technicians_by_status(db, TechnicianStatus.AVAILABLE)


async def list_technicians_by_skill(
    db: AsyncSession, skill: str, available_only: bool = False
) -> list[Technician]:
    # Skills are a JSON list; filter in Python rather than per-dialect JSON SQL.
    if available_only:
        techs = await list_available_technicians(db)
    else:
        techs = await list_technicians(db)
    return [t for t in techs if skill in (t.skills or [])]


async def list_technicians_by_location(db: AsyncSession, location: str) -> list[Technician]:
    result = await db.execute(
        select(Technician)
        .where(Technician.current_location == location)
        .order_by(Technician.created_at)
    )
    return list(result.scalars().all())


async def update_technician(db: AsyncSession, tech: Technician, **kwargs) -> Technician:
    for k, v in kwargs.items():
        if v is not None:
            setattr(tech, k, v)
    await _commit_unique_email(db, tech)
    await db.refresh(tech)
    return tech


async def delete_technician(db: AsyncSession, tech: Technician) -> None:
    await db.delete(tech)
    await commit_or_conflict(db, f"Technician {tech.id}")


async def count_technicians_by_status(db: AsyncSession, status: TechnicianStatus) -> int:
    result = await db.execute(
        select(func.count()).select_from(Technician).where(Technician.status == status)
    )
    return result.scalar_one()
