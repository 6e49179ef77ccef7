"""Work-order status state machine.

PENDING -> ASSIGNED -> IN_PROGRESS -> COMPLETED, with ON_HOLD reachable from
the active states and CANCELLED reachable from any non-terminal state.
Forward jumps (e.g. ASSIGNED -> COMPLETED) are allowed; the only hard rule is
that terminal statuses never change. Re-requesting the current status is a
no-op, which keeps retried requests idempotent.
"""

from __future__ import annotations

from datetime import datetime

from fieldservice.models.base import utcnow
from fieldservice.models.enums import WorkOrderStatus
from fieldservice.services.errors import InvalidTransition

TERMINAL_STATUSES = frozenset({WorkOrderStatus.COMPLETED, WorkOrderStatus.CANCELLED})

# The only statuses in which a work order holds a technician.
ASSIGNED_STATUSES = frozenset({WorkOrderStatus.ASSIGNED, WorkOrderStatus.IN_PROGRESS})


def is_terminal(status: WorkOrderStatus) -> bool:
    return status in TERMINAL_STATUSES


def can_transition(current: WorkOrderStatus, requested: WorkOrderStatus) -> bool:
    if current == requested:
        return True
    return not is_terminal(current)


def check_transition(current: WorkOrderStatus, requested: WorkOrderStatus) -> None:
    """Raise InvalidTransition if ``current`` may not move to ``requested``."""
    if not can_transition(current, requested):
        raise InvalidTransition(current, requested, "status is terminal")


def apply_transition(work_order, requested: WorkOrderStatus, now: datetime | None = None) -> bool:
    """Move ``work_order`` to ``requested`` and stamp lifecycle timestamps.

    Returns True if the status actually changed. ``started_at`` and
    ``completed_at`` are only ever set once.
    """
    requested = WorkOrderStatus(requested)
    current = work_order.status
    check_transition(current, requested)

    now = now or utcnow()
    if requested == WorkOrderStatus.IN_PROGRESS and work_order.started_at is None:
        work_order.started_at = now
    elif requested == WorkOrderStatus.COMPLETED and work_order.completed_at is None:
        work_order.completed_at = now

    if current == requested:
        return False
    work_order.status = requested
    return True
