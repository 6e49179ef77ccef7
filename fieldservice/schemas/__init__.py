"""Pydantic request/response schemas."""

from fieldservice.schemas.work_order import (
    WorkOrderCreate, WorkOrderUpdate, WorkOrderRead,
    WorkOrderItemCreate, WorkOrderItemRead,
    AssignRequest, StatusUpdate,
)
from fieldservice.schemas.technician import (
    TechnicianCreate, TechnicianUpdate, TechnicianRead,
    TechnicianStatusUpdate, TechnicianLocationUpdate, FindBestRequest,
)
from fieldservice.schemas.events import ChangeEvent

__all__ = [
    "WorkOrderCreate", "WorkOrderUpdate", "WorkOrderRead",
    "WorkOrderItemCreate", "WorkOrderItemRead",
    "AssignRequest", "StatusUpdate",
    "TechnicianCreate", "TechnicianUpdate", "TechnicianRead",
    "TechnicianStatusUpdate", "TechnicianLocationUpdate", "FindBestRequest",
    "ChangeEvent",
]
