"""Technician model: owned by the technician directory service."""

from __future__ import annotations

from sqlalchemy import String, Integer, Float, JSON, Enum
from sqlalchemy.orm import Mapped, mapped_column

from fieldservice.models.base import TechnicianBase, ULIDMixin
from fieldservice.models.enums import TechnicianStatus


class Technician(TechnicianBase, ULIDMixin):
    __tablename__ = "technicians"

    name: Mapped[str] = mapped_column(String(200))
    email: Mapped[str] = mapped_column(String(255), unique=True)
    phone_number: Mapped[str] = mapped_column(String(50), default="")
    status: Mapped[TechnicianStatus] = mapped_column(
        Enum(TechnicianStatus, native_enum=False, length=20), default=TechnicianStatus.AVAILABLE, index=True
    )
    current_location: Mapped[str] = mapped_column(String(200), default="")
    skills: Mapped[list] = mapped_column(JSON, default=list)
    experience_years: Mapped[int | None] = mapped_column(Integer, nullable=True, default=None)
    hourly_rate: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)
    max_concurrent_orders: Mapped[int] = mapped_column(Integer, default=3)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    @property
    def skill_set(self) -> frozenset[str]:
        return frozenset(self.skills or [])
