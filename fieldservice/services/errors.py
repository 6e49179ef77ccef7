"""Domain error taxonomy shared by both services.

HTTP mapping lives in ``fieldservice.api.errors``; nothing here knows about
FastAPI.
"""

from __future__ import annotations

from dataclasses import dataclass, field


class FieldServiceError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(FieldServiceError):
    status_code = 404


class WorkOrderNotFound(NotFound):
    def __init__(self, work_order_id: str):
        super().__init__(f"Work order not found: {work_order_id}")
        self.work_order_id = work_order_id


class TechnicianNotFound(NotFound):
    def __init__(self, technician_id: str):
        super().__init__(f"Technician not found: {technician_id}")
        self.technician_id = technician_id


class InvalidTransition(FieldServiceError):
    status_code = 400

    def __init__(self, current, requested, reason: str = ""):
        current_name = getattr(current, "value", current)
        requested_name = getattr(requested, "value", requested)
        message = f"Cannot change status from {current_name} to {requested_name}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.current = current
        self.requested = requested


@dataclass
class FieldError:
    field: str
    message: str


class ValidationFailure(FieldServiceError):
    status_code = 400

    def __init__(self, message: str, errors: list[FieldError] | None = None):
        super().__init__(message)
        self.errors = errors or []


class ConcurrencyConflict(FieldServiceError):
    """Optimistic-concurrency loser: the row changed since it was read."""

    status_code = 409


class DuplicateTechnician(FieldServiceError):
    status_code = 409

    def __init__(self, email: str):
        super().__init__(f"Technician already exists with email: {email}")
        self.email = email


class RemoteCallFailure(Exception):
    """A technician-directory call failed.

    Never propagated to API callers; carried inside ``RemoteResult``.
    """

    def __init__(self, operation: str, detail: str):
        super().__init__(f"{operation} failed: {detail}")
        self.operation = operation
        self.detail = detail


@dataclass
class RemoteResult:
    """Outcome of a best-effort remote call."""

    value: object = None
    error: RemoteCallFailure | None = field(default=None)

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value=None) -> RemoteResult:
        return cls(value=value)

    @classmethod
    def failure(cls, operation: str, detail: str) -> RemoteResult:
        return cls(error=RemoteCallFailure(operation, detail))
