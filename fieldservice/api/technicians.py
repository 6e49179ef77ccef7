"""Technician directory API."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from fieldservice.db import technician_crud as crud
from fieldservice.db.technician_engine import get_technician_db
from fieldservice.models import Technician, TechnicianStatus
from fieldservice.schemas import (
    FindBestRequest, TechnicianCreate, TechnicianLocationUpdate,
    TechnicianRead, TechnicianStatusUpdate, TechnicianUpdate,
)
from fieldservice.services.errors import DuplicateTechnician, NotFound, TechnicianNotFound
from fieldservice.services.matching import find_best_technician

router = APIRouter(prefix="/api/technicians", tags=["technicians"])


async def _get_or_404(db: AsyncSession, tech_id: str) -> Technician:
    tech = await crud.get_technician(db, tech_id)
    if not tech:
        raise TechnicianNotFound(tech_id)
    return tech


@router.get("", response_model=list[TechnicianRead])
async def list_technicians(db: AsyncSession = Depends(get_technician_db)):
    return await crud.list_technicians(db)


@router.post("", status_code=201, response_model=TechnicianRead)
async def create_technician(body: TechnicianCreate, db: AsyncSession = Depends(get_technician_db)):
    if await crud.get_technician_by_email(db, body.email):
        raise DuplicateTechnician(body.email)
    return await crud.create_technician(db, **body.model_dump())


@router.get("/available", response_model=list[TechnicianRead])
async def list_available(db: AsyncSession = Depends(get_technician_db)):
    return await crud.list_available_technicians(db)


@router.get("/available/skill/{skill}", response_model=list[TechnicianRead])
async def list_available_by_skill(skill: str, db: AsyncSession = Depends(get_technician_db)):
    return await crud.list_technicians_by_skill(db, skill, available_only=True)


@router.get("/status/{status}", response_model=list[TechnicianRead])
async def list_by_status(status: TechnicianStatus, db: AsyncSession = Depends(get_technician_db)):
    return await crud.list_technicians_by_status(db, status)


@router.get("/skill/{skill}", response_model=list[TechnicianRead])
async def list_by_skill(skill: str, db: AsyncSession = Depends(get_technician_db)):
    return await crud.list_technicians_by_skill(db, skill)


@router.get("/location/{location}", response_model=list[TechnicianRead])
async def list_by_location(location: str, db: AsyncSession = Depends(get_technician_db)):
    return await crud.list_technicians_by_location(db, location)


@router.get("/stats/count-by-status/{status}")
async def count_by_status(status: TechnicianStatus, db: AsyncSession = Depends(get_technician_db)):
    return {"status": status, "count": await crud.count_technicians_by_status(db, status)}


@router.post("/find-best", response_model=TechnicianRead)
async def find_best(body: FindBestRequest, db: AsyncSession = Depends(get_technician_db)):
    """Best available technician holding every required skill, 404 if none."""
    available = await crud.list_available_technicians(db)
    best = find_best_technician(available, body.required_skills)
    if best is None:
        raise NotFound("No available technician has all required skills")
    return best


@router.get("/{tech_id}", response_model=TechnicianRead)
async def get_technician(tech_id: str, db: AsyncSession = Depends(get_technician_db)):
    return await _get_or_404(db, tech_id)


@router.put("/{tech_id}", response_model=TechnicianRead)
async def update_technician(
    tech_id: str,
    body: TechnicianUpdate,
    db: AsyncSession = Depends(get_technician_db),
):
    tech = await _get_or_404(db, tech_id)
    updates = body.model_dump(exclude_unset=True)
    if updates.get("email") and updates["email"] != tech.email:
        if await crud.get_technician_by_email(db, updates["email"]):
            raise DuplicateTechnician(updates["email"])
    return await crud.update_technician(db, tech, **updates)


@router.patch("/{tech_id}/status", response_model=TechnicianRead)
async def update_status(
    tech_id: str,
    body: TechnicianStatusUpdate,
    db: AsyncSession = Depends(get_technician_db),
):
    tech = await _get_or_404(db, tech_id)
    return await crud.update_technician(db, tech, status=body.status)


@router.patch("/{tech_id}/location", response_model=TechnicianRead)
async def update_location(
    tech_id: str,
    body: TechnicianLocationUpdate,
    db: AsyncSession = Depends(get_technician_db),
):
    tech = await _get_or_404(db, tech_id)
    return await crud.update_technician(db, tech, current_location=body.location)


@router.delete("/{tech_id}", status_code=204)
async def delete_technician(tech_id: str, db: AsyncSession = Depends(get_technician_db)):
    tech = await _get_or_404(db, tech_id)
    await crud.delete_technician(db, tech)
    return Response(status_code=204)
