"""CRUD operations for the work-order DB."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from fieldservice.models import WorkOrder, WorkOrderItem, WorkOrderPriority, WorkOrderStatus
from fieldservice.models.base import utcnow
from fieldservice.models.work_order import generate_work_order_number
from fieldservice.services.errors import ConcurrencyConflict
from fieldservice.services.state_machine import TERMINAL_STATUSES


async def commit_or_conflict(db: AsyncSession, what: str) -> None:
    """Commit, turning an optimistic-lock failure into ConcurrencyConflict."""
    try:
        await db.commit()
    except StaleDataError:
        await db.rollback()
        raise ConcurrencyConflict(f"{what} was modified concurrently; reload and retry")


# ── WorkOrder ────────────────────────────────────────────

async def create_work_order(db: AsyncSession, items: list[dict] | None = None, **fields) -> WorkOrder:
    wo = WorkOrder(
        work_order_number=generate_work_order_number(),
        status=WorkOrderStatus.PENDING,
        **fields,
    )
    for item_fields in items or []:
        item = WorkOrderItem(**item_fields)
        item.recalculate_total()
        wo.items.append(item)
    db.add(wo)
    await db.commit()
    await db.refresh(wo)
    return wo


async def get_work_order(db: AsyncSession, work_order_id: str) -> WorkOrder | None:
    return await db.get(WorkOrder, work_order_id)


async def list_work_orders(db: AsyncSession) -> list[WorkOrder]:
    result = await db.execute(select(WorkOrder).order_by(WorkOrder.created_at))
    return list(result.scalars().all())


async def get_work_order_by_number(db: AsyncSession, work_order_number: str) -> WorkOrder | None:
    result = await db.execute(
        select(WorkOrder).where(WorkOrder.work_order_number == work_order_number)
    )
    return result.scalars().first()


async def list_work_orders_by_status(db: AsyncSession, status: WorkOrderStatus) -> list[WorkOrder]:
    result = await db.execute(
        select(WorkOrder)
        .where(WorkOrder.status == status)
        .order_by(WorkOrder.created_at)
    )
    return list(result.scalars().all())


async def list_work_orders_by_priority(
    db: AsyncSession, priority: WorkOrderPriority
) -> list[WorkOrder]:
    result = await db.execute(
        select(WorkOrder)
        .where(WorkOrder.priority == priority)
        .order_by(WorkOrder.created_at)
    )
    return list(result.scalars().all())


async def list_work_orders_by_technician(db: AsyncSession, technician_id: str) -> list[WorkOrder]:
    result = await db.execute(
        select(WorkOrder)
        .where(WorkOrder.assigned_technician_id == technician_id)
        .order_by(WorkOrder.created_at)
    )
    return list(result.scalars().all())


async def list_work_orders_by_date_range(
    db: AsyncSession, start: datetime, end: datetime
) -> list[WorkOrder]:
    result = await db.execute(
        select(WorkOrder)
        .where(WorkOrder.scheduled_date.between(start, end))
        .order_by(WorkOrder.scheduled_date)
    )
    return list(result.scalars().all())


async def list_overdue_work_orders(db: AsyncSession, now: datetime | None = None) -> list[WorkOrder]:
    """Open work orders whose scheduled date has already passed."""
    result = await db.execute(
        select(WorkOrder)
        .where(
            WorkOrder.scheduled_date < (now or utcnow()),
            WorkOrder.status.not_in(TERMINAL_STATUSES),
        )
        .order_by(WorkOrder.scheduled_date)
    )
    return list(result.scalars().all())


async def save_work_order(db: AsyncSession, wo: WorkOrder) -> WorkOrder:
    """Persist in-memory changes to ``wo`` (bumps its version)."""
    await commit_or_conflict(db, f"Work order {wo.id}")
    await db.refresh(wo)
    return wo


async def delete_work_order(db: AsyncSession, wo: WorkOrder) -> None:
    await db.delete(wo)
    await commit_or_conflict(db, f"Work order {wo.id}")


async def count_work_orders_by_status(db: AsyncSession, status: WorkOrderStatus) -> int:
    result = await db.execute(
        select(func.count()).select_from(WorkOrder).where(WorkOrder.status == status)
    )
    return result.scalar_one()


async def count_work_orders_by_technician(db: AsyncSession, technician_id: str) -> int:
    result = await db.execute(
        select(func.count())
        .select_from(WorkOrder)
        .where(WorkOrder.assigned_technician_id == technician_id)
    )
    return result.scalar_one()
