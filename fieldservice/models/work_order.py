"""Work order model: the unit of field-service work and its line items."""

from __future__ import annotations

import secrets
from datetime import datetime
from decimal import Decimal

from sqlalchemy import String, Integer, Numeric, ForeignKey, DateTime, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fieldservice.models.base import Base, ULIDMixin, utcnow
from fieldservice.models.enums import WorkOrderPriority, WorkOrderStatus


class WorkOrder(Base, ULIDMixin):
    __tablename__ = "work_orders"

    work_order_number: Mapped[str] = mapped_column(String(50), unique=True)
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str] = mapped_column(String(2000), default="")
    priority: Mapped[WorkOrderPriority] = mapped_column(
        Enum(WorkOrderPriority, native_enum=False, length=20), default=WorkOrderPriority.NORMAL
    )
    status: Mapped[WorkOrderStatus] = mapped_column(
        Enum(WorkOrderStatus, native_enum=False, length=20), default=WorkOrderStatus.PENDING, index=True
    )
    customer_name: Mapped[str] = mapped_column(String(200), default="")
    customer_phone: Mapped[str] = mapped_column(String(20), default="")
    customer_email: Mapped[str] = mapped_column(String(100), default="")
    location: Mapped[str] = mapped_column(String(500), default="")
    # Weak reference into the technician directory; no FK across services.
    assigned_technician_id: Mapped[str | None] = mapped_column(String(26), nullable=True, default=None, index=True)
    estimated_duration: Mapped[int | None] = mapped_column(Integer, nullable=True, default=None)  # minutes
    estimated_cost: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True, default=None)
    actual_cost: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True, default=None)
    notes: Mapped[str] = mapped_column(String(1000), default="")
    scheduled_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, default=None)
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, default=None)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, default=None)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    items: Mapped[list[WorkOrderItem]] = relationship(
        back_populates="work_order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="WorkOrderItem.created_at",
    )

    __mapper_args__ = {"version_id_col": version}


class WorkOrderItem(Base, ULIDMixin):
    __tablename__ = "work_order_items"

    work_order_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("work_orders.id", ondelete="CASCADE"), index=True
    )
    item_type: Mapped[str] = mapped_column(String(20))  # PART | LABOR | MATERIAL | ...
    description: Mapped[str] = mapped_column(String(200))
    quantity: Mapped[int] = mapped_column(Integer, default=1)
    unit_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True, default=None)
    total_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True, default=None)
    notes: Mapped[str] = mapped_column(String(500), default="")

    work_order: Mapped[WorkOrder] = relationship(back_populates="items")

    def recalculate_total(self) -> None:
        if self.unit_price is None:
            self.total_price = None
        else:
            self.total_price = Decimal(self.quantity) * Decimal(self.unit_price)


def generate_work_order_number() -> str:
    """WO-<timestamp>-<4 random hex chars>; the suffix keeps same-second creates unique."""
    return f"WO-{utcnow().strftime('%Y%m%d%H%M%S')}-{secrets.token_hex(2).upper()}"
