"""SQLAlchemy ORM models.

Work-order models (Base) live in the work-order service DB.
Technician models (TechnicianBase) live in the technician directory DB.
"""

# Work-order service DB
from fieldservice.models.base import Base
from fieldservice.models.work_order import WorkOrder, WorkOrderItem

# Technician directory DB
from fieldservice.models.base import TechnicianBase
from fieldservice.models.technician import Technician

from fieldservice.models.enums import WorkOrderStatus, WorkOrderPriority, TechnicianStatus

__all__ = [
    # Work orders
    "Base", "WorkOrder", "WorkOrderItem",
    # Technicians
    "TechnicianBase", "Technician",
    # Enums
    "WorkOrderStatus", "WorkOrderPriority", "TechnicianStatus",
]
