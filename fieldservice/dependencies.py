"""FastAPI dependency providers for the work-order service."""

from __future__ import annotations

from fastapi import Request

from fieldservice.services.coordinator import AssignmentCoordinator


def get_coordinator(request: Request) -> AssignmentCoordinator:
    """The coordinator built at start-up with its technician client and notifier."""
    return request.app.state.coordinator
