"""Work order API: CRUD, status changes and technician assignment."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from fieldservice.db.engine import get_db
from fieldservice.dependencies import get_coordinator
from fieldservice.models import WorkOrderPriority, WorkOrderStatus
from fieldservice.schemas import (
    AssignRequest, StatusUpdate, WorkOrderCreate, WorkOrderRead, WorkOrderUpdate,
)
from fieldservice.services.coordinator import AssignmentCoordinator

router = APIRouter(prefix="/api/work-orders", tags=["work_orders"])


@router.get("", response_model=list[WorkOrderRead])
async def list_work_orders(
    db: AsyncSession = Depends(get_db),
    coordinator: AssignmentCoordinator = Depends(get_coordinator),
):
    return await coordinator.list_work_orders(db)


@router.post("", status_code=201, response_model=WorkOrderRead)
async def create_work_order(
    body: WorkOrderCreate,
    db: AsyncSession = Depends(get_db),
    coordinator: AssignmentCoordinator = Depends(get_coordinator),
):
    return await coordinator.create_work_order(db, body)


@router.get("/number/{work_order_number}", response_model=WorkOrderRead)
async def get_work_order_by_number(
    work_order_number: str,
    db: AsyncSession = Depends(get_db),
    coordinator: AssignmentCoordinator = Depends(get_coordinator),
):
    return await coordinator.get_by_number(db, work_order_number)


@router.get("/priority/{priority}", response_model=list[WorkOrderRead])
async def list_work_orders_by_priority(
    priority: WorkOrderPriority,
    db: AsyncSession = Depends(get_db),
    coordinator: AssignmentCoordinator = Depends(get_coordinator),
):
    return await coordinator.list_by_priority(db, priority)


@router.get("/overdue", response_model=list[WorkOrderRead])
async def list_overdue_work_orders(
    db: AsyncSession = Depends(get_db),
    coordinator: AssignmentCoordinator = Depends(get_coordinator),
):
    """Open work orders scheduled before now."""
    return await coordinator.list_overdue(db)


@router.get("/status/{status}", response_model=list[WorkOrderRead])
async def list_work_orders_by_status(
    status: WorkOrderStatus,
    db: AsyncSession = Depends(get_db),
    coordinator: AssignmentCoordinator = Depends(get_coordinator),
):
    return await coordinator.list_by_status(db, status)


@router.get("/technician/{technician_id}", response_model=list[WorkOrderRead])
async def list_work_orders_by_technician(
    technician_id: str,
    db: AsyncSession = Depends(get_db),
    coordinator: AssignmentCoordinator = Depends(get_coordinator),
):
    return await coordinator.list_by_technician(db, technician_id)


@router.get("/date-range", response_model=list[WorkOrderRead])
async def list_work_orders_by_date_range(
    start: datetime,
    end: datetime,
    db: AsyncSession = Depends(get_db),
    coordinator: AssignmentCoordinator = Depends(get_coordinator),
):
    return await coordinator.list_by_date_range(db, start, end)


@router.get("/stats/count-by-status/{status}")
async def count_by_status(
    status: WorkOrderStatus,
    db: AsyncSession = Depends(get_db),
    coordinator: AssignmentCoordinator = Depends(get_coordinator),
):
    return {"status": status, "count": await coordinator.count_by_status(db, status)}


@router.get("/stats/count-by-technician/{technician_id}")
async def count_by_technician(
    technician_id: str,
    db: AsyncSession = Depends(get_db),
    coordinator: AssignmentCoordinator = Depends(get_coordinator),
):
    count = await coordinator.count_by_technician(db, technician_id)
    return {"technicianId": technician_id, "count": count}


@router.get("/{wo_id}", response_model=WorkOrderRead)
async def get_work_order(
    wo_id: str,
    db: AsyncSession = Depends(get_db),
    coordinator: AssignmentCoordinator = Depends(get_coordinator),
):
    return await coordinator.get_work_order(db, wo_id)


@router.put("/{wo_id}", response_model=WorkOrderRead)
async def update_work_order(
    wo_id: str,
    body: WorkOrderUpdate,
    db: AsyncSession = Depends(get_db),
    coordinator: AssignmentCoordinator = Depends(get_coordinator),
):
    return await coordinator.update_work_order(db, wo_id, body)


@router.patch("/{wo_id}/assign", response_model=WorkOrderRead)
async def assign_technician(
    wo_id: str,
    body: AssignRequest,
    db: AsyncSession = Depends(get_db),
    coordinator: AssignmentCoordinator = Depends(get_coordinator),
):
    return await coordinator.assign(db, wo_id, body.technician_id)


@router.patch("/{wo_id}/unassign", response_model=WorkOrderRead)
async def unassign_technician(
    wo_id: str,
    db: AsyncSession = Depends(get_db),
    coordinator: AssignmentCoordinator = Depends(get_coordinator),
):
    return await coordinator.unassign(db, wo_id)


@router.patch("/{wo_id}/status", response_model=WorkOrderRead)
async def update_status(
    wo_id: str,
    body: StatusUpdate,
    db: AsyncSession = Depends(get_db),
    coordinator: AssignmentCoordinator = Depends(get_coordinator),
):
    return await coordinator.set_status(db, wo_id, body.status)


@router.delete("/{wo_id}", status_code=204)
async def delete_work_order(
    wo_id: str,
    db: AsyncSession = Depends(get_db),
    coordinator: AssignmentCoordinator = Depends(get_coordinator),
):
    await coordinator.delete_work_order(db, wo_id)
    return Response(status_code=204)
