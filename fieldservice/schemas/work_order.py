from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from pydantic import Field, field_validator
from fieldservice.models.enums import WorkOrderPriority, WorkOrderStatus
from fieldservice.schemas.base import CamelModel


class WorkOrderItemCreate(CamelModel):
    item_type: str = Field(min_length=1, max_length=20)
    description: str = Field(min_length=1, max_length=200)
    quantity: int = Field(default=1, ge=1)
    unit_price: Decimal | None = Field(default=None, ge=0)
    notes: str = Field(default="", max_length=500)


class WorkOrderItemRead(CamelModel):
    id: str
    item_type: str
    description: str
    quantity: int
    unit_price: Decimal | None = None
    total_price: Decimal | None = None
    notes: str = ""


class WorkOrderCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(default="", max_length=2000)
    priority: WorkOrderPriority = WorkOrderPriority.NORMAL
    customer_name: str = Field(default="", max_length=200)
    customer_phone: str = Field(default="", max_length=20)
    customer_email: str = Field(default="", max_length=100)
    location: str = Field(default="", max_length=500)
    estimated_duration: int | None = Field(default=None, ge=0)
    estimated_cost: Decimal | None = Field(default=None, ge=0)
    scheduled_date: datetime | None = None
    notes: str = Field(default="", max_length=1000)
    items: list[WorkOrderItemCreate] = []

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be blank")
        return v.strip()


class WorkOrderUpdate(CamelModel):
    """Partial update; omitted fields are left alone."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    priority: WorkOrderPriority | None = None
    status: WorkOrderStatus | None = None
    customer_name: str | None = Field(default=None, max_length=200)
    customer_phone: str | None = Field(default=None, max_length=20)
    customer_email: str | None = Field(default=None, max_length=100)
    location: str | None = Field(default=None, max_length=500)
    estimated_duration: int | None = Field(default=None, ge=0)
    estimated_cost: Decimal | None = Field(default=None, ge=0)
    actual_cost: Decimal | None = Field(default=None, ge=0)
    scheduled_date: datetime | None = None
    notes: str | None = Field(default=None, max_length=1000)


class AssignRequest(CamelModel):
    # Technician ids are ULIDs; the charset keeps them safe as a URL path segment.
    technician_id: str = Field(min_length=1, max_length=26, pattern=r"^[A-Za-z0-9_-]+$")


class StatusUpdate(CamelModel):
    status: WorkOrderStatus


class WorkOrderRead(CamelModel):
    id: str
    work_order_number: str
    title: str
    description: str = ""
    priority: WorkOrderPriority
    status: WorkOrderStatus
    customer_name: str = ""
    customer_phone: str = ""
    customer_email: str = ""
    location: str = ""
    assigned_technician_id: str | None = None
    assigned_technician_name: str | None = None
    estimated_duration: int | None = None
    estimated_cost: Decimal | None = None
    actual_cost: Decimal | None = None
    notes: str = ""
    scheduled_date: datetime | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    version: int
    items: list[WorkOrderItemRead] = []
