"""Assignment coordinator: work-order lifecycle plus technician assignment.

Local work-order writes are authoritative. Telling the technician directory
about a technician's new status is best-effort: a failed call is logged and
dropped, never retried, and never undoes or fails the local change. The two
services can therefore drift out of sync for a while; that is accepted so
work orders stay writable while the technician service is down.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from fieldservice.db import crud
from fieldservice.models import WorkOrder, WorkOrderPriority, WorkOrderStatus, TechnicianStatus
from fieldservice.schemas.work_order import WorkOrderCreate, WorkOrderRead, WorkOrderUpdate
from fieldservice.services import state_machine
from fieldservice.services.errors import InvalidTransition, RemoteResult, ValidationFailure, WorkOrderNotFound
from fieldservice.services.notifier import ChangeNotifier, Topics
from fieldservice.services.technician_client import TechnicianDirectory

logger = logging.getLogger(__name__)

# Fields an update may explicitly clear with null.
_NULLABLE_FIELDS = frozenset({"estimated_duration", "estimated_cost", "actual_cost", "scheduled_date"})


def to_read(wo: WorkOrder, technician_name: str | None = None) -> WorkOrderRead:
    read = WorkOrderRead.model_validate(wo)
    if technician_name and wo.assigned_technician_id:
        read.assigned_technician_name = technician_name
    return read


class AssignmentCoordinator:
    def __init__(self, technicians: TechnicianDirectory, notifier: ChangeNotifier):
        self._technicians = technicians
        self._notifier = notifier

    # ── helpers ──────────────────────────────────────────

    async def _load(self, db: AsyncSession, work_order_id: str) -> WorkOrder:
        wo = await crud.get_work_order(db, work_order_id)
        if wo is None:
            raise WorkOrderNotFound(work_order_id)
        return wo

    def _publish(self, topic: str, data) -> None:
        if isinstance(data, WorkOrderRead):
            data = data.model_dump(mode="json", by_alias=True)
        self._notifier.publish(topic, data)

    async def _set_technician_status(self, technician_id: str, status: TechnicianStatus) -> RemoteResult:
        result = await self._technicians.update_status(technician_id, status)
        if result.ok:
            logger.info("Technician %s marked %s", technician_id, status.value)
        else:
            logger.warning(
                "Technician %s status update to %s not applied, continuing: %s",
                technician_id, status.value, result.error,
            )
        return result

    async def _technician_name(self, technician_id: str) -> str | None:
        result = await self._technicians.get_technician_name(technician_id)
        if not result.ok:
            logger.warning("Technician name unavailable: %s", result.error)
            return None
        return result.value

    async def _enrich(self, work_orders: list[WorkOrder]) -> list[WorkOrderRead]:
        names = await self._technicians.get_technician_names(
            wo.assigned_technician_id for wo in work_orders if wo.assigned_technician_id
        )
        return [to_read(wo, names.get(wo.assigned_technician_id)) for wo in work_orders]

    async def _release(self, technician_id: str, read: WorkOrderRead) -> None:
        await self._set_technician_status(technician_id, TechnicianStatus.AVAILABLE)
        self._publish(Topics.technician_unassigned(technician_id), read)

    def _change_status(self, wo: WorkOrder, requested: WorkOrderStatus) -> tuple[bool, str | None]:
        """Apply a status change requested through the status/update paths.

        Returns (changed, released_technician_id).
        """
        requested = WorkOrderStatus(requested)
        state_machine.check_transition(wo.status, requested)
        if requested in state_machine.ASSIGNED_STATUSES and not wo.assigned_technician_id:
            raise InvalidTransition(wo.status, requested, "assign a technician first")

        released = None
        leaving_active = requested != wo.status and requested not in state_machine.ASSIGNED_STATUSES
        if leaving_active and wo.assigned_technician_id:
            released = wo.assigned_technician_id
            wo.assigned_technician_id = None
        changed = state_machine.apply_transition(wo, requested)
        return changed, released

    # ── queries ──────────────────────────────────────────

    async def get_work_order(self, db: AsyncSession, work_order_id: str) -> WorkOrderRead:
        wo = await self._load(db, work_order_id)
        return (await self._enrich([wo]))[0]

    async def get_by_number(self, db: AsyncSession, work_order_number: str) -> WorkOrderRead:
        wo = await crud.get_work_order_by_number(db, work_order_number)
        if wo is None:
            raise WorkOrderNotFound(work_order_number)
        return (await self._enrich([wo]))[0]

    async def list_work_orders(self, db: AsyncSession) -> list[WorkOrderRead]:
        return await self._enrich(await crud.list_work_orders(db))

    async def list_by_status(self, db: AsyncSession, status: WorkOrderStatus) -> list[WorkOrderRead]:
        return await self._enrich(await crud.list_work_orders_by_status(db, status))

    async def list_by_priority(self, db: AsyncSession, priority: WorkOrderPriority) -> list[WorkOrderRead]:
        return await self._enrich(await crud.list_work_orders_by_priority(db, priority))

    async def list_overdue(self, db: AsyncSession, now: datetime | None = None) -> list[WorkOrderRead]:
        return await self._enrich(await crud.list_overdue_work_orders(db, now))

    async def list_by_technician(self, db: AsyncSession, technician_id: str) -> list[WorkOrderRead]:
        return await self._enrich(await crud.list_work_orders_by_technician(db, technician_id))

    async def list_by_date_range(
        self, db: AsyncSession, start: datetime, end: datetime
    ) -> list[WorkOrderRead]:
        if start > end:
            raise ValidationFailure("start must not be after end")
        return await self._enrich(await crud.list_work_orders_by_date_range(db, start, end))

    async def count_by_status(self, db: AsyncSession, status: WorkOrderStatus) -> int:
        return await crud.count_work_orders_by_status(db, status)

    async def count_by_technician(self, db: AsyncSession, technician_id: str) -> int:
        return await crud.count_work_orders_by_technician(db, technician_id)

    # ── lifecycle ────────────────────────────────────────

    async def create_work_order(self, db: AsyncSession, data: WorkOrderCreate) -> WorkOrderRead:
        fields = data.model_dump(exclude={"items"})
        items = [item.model_dump() for item in data.items]
        wo = await crud.create_work_order(db, items=items, **fields)
        logger.info("Created work order %s (%s)", wo.id, wo.work_order_number)

        read = to_read(wo)
        self._publish(Topics.WORK_ORDER_CREATED, read)
        return read

    async def update_work_order(
        self, db: AsyncSession, work_order_id: str, data: WorkOrderUpdate
    ) -> WorkOrderRead:
        wo = await self._load(db, work_order_id)
        updates = data.model_dump(exclude_unset=True, exclude={"status"})
        for k, v in updates.items():
            if v is None and k not in _NULLABLE_FIELDS:
                continue
            setattr(wo, k, v)

        released = None
        if data.status is not None:
            _, released = self._change_status(wo, data.status)

        wo = await crud.save_work_order(db, wo)
        logger.info("Updated work order %s", wo.id)

        read = (await self._enrich([wo]))[0]
        if released:
            await self._release(released, read)
        self._publish(Topics.WORK_ORDER_UPDATED, read)
        return read

    async def set_status(
        self, db: AsyncSession, work_order_id: str, status: WorkOrderStatus
    ) -> WorkOrderRead:
        wo = await self._load(db, work_order_id)
        previous = wo.status
        changed, released = self._change_status(wo, status)
        if not changed and not db.is_modified(wo):
            return (await self._enrich([wo]))[0]

        wo = await crud.save_work_order(db, wo)
        logger.info("Work order %s status %s -> %s", wo.id, previous.value, wo.status.value)

        read = (await self._enrich([wo]))[0]
        if released:
            await self._release(released, read)
        self._publish(Topics.WORK_ORDER_STATUS, read)
        return read

    async def delete_work_order(self, db: AsyncSession, work_order_id: str) -> None:
        wo = await self._load(db, work_order_id)
        held = wo.assigned_technician_id if wo.status in state_machine.ASSIGNED_STATUSES else None
        await crud.delete_work_order(db, wo)
        logger.info("Deleted work order %s", work_order_id)

        if held:
            await self._set_technician_status(held, TechnicianStatus.AVAILABLE)
        self._publish(Topics.WORK_ORDER_DELETED, {"id": work_order_id})

    # ── assignment ───────────────────────────────────────

    async def assign(self, db: AsyncSession, work_order_id: str, technician_id: str) -> WorkOrderRead:
        """Assign ``technician_id`` and move the order to ASSIGNED.

        The directory is then told the technician is BUSY. That call, and the
        name lookup for the response, may fail without affecting the result.
        """
        wo = await self._load(db, work_order_id)
        if state_machine.is_terminal(wo.status):
            raise InvalidTransition(
                wo.status, WorkOrderStatus.ASSIGNED, "cannot assign a closed work order"
            )

        previous_technician = wo.assigned_technician_id
        wo.assigned_technician_id = technician_id
        state_machine.apply_transition(wo, WorkOrderStatus.ASSIGNED)
        wo = await crud.save_work_order(db, wo)
        logger.info("Assigned work order %s to technician %s", wo.id, technician_id)

        await self._set_technician_status(technician_id, TechnicianStatus.BUSY)
        read = to_read(wo, await self._technician_name(technician_id))

        if previous_technician and previous_technician != technician_id:
            await self._release(previous_technician, read)
        self._publish(Topics.WORK_ORDER_ASSIGNED, read)
        self._publish(Topics.technician_assignments(technician_id), read)
        return read

    async def unassign(self, db: AsyncSession, work_order_id: str) -> WorkOrderRead:
        """Clear the assignment and send the order back to PENDING."""
        wo = await self._load(db, work_order_id)
        if state_machine.is_terminal(wo.status):
            raise InvalidTransition(
                wo.status, WorkOrderStatus.PENDING, "cannot unassign a closed work order"
            )

        previous_technician = wo.assigned_technician_id
        wo.assigned_technician_id = None
        state_machine.apply_transition(wo, WorkOrderStatus.PENDING)
        wo = await crud.save_work_order(db, wo)
        logger.info("Unassigned work order %s (was %s)", wo.id, previous_technician)

        read = to_read(wo)
        if previous_technician:
            await self._set_technician_status(previous_technician, TechnicianStatus.AVAILABLE)
        self._publish(Topics.WORK_ORDER_UNASSIGNED, read)
        if previous_technician:
            self._publish(Topics.technician_unassigned(previous_technician), read)
        return read
