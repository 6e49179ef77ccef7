from __future__ import annotations
from datetime import datetime
from pydantic import Field, field_validator
from fieldservice.models.enums import TechnicianStatus
from fieldservice.schemas.base import CamelModel


def _dedupe_skills(skills: list[str]) -> list[str]:
    return list(dict.fromkeys(s.strip() for s in skills if s and s.strip()))


class TechnicianCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    phone_number: str = Field(default="", max_length=50)
    status: TechnicianStatus = TechnicianStatus.AVAILABLE
    current_location: str = Field(default="", max_length=200)
    skills: list[str] = []
    experience_years: int | None = Field(default=None, ge=0)
    hourly_rate: float | None = Field(default=None, ge=0)
    max_concurrent_orders: int = Field(default=3, ge=1)

    @field_validator("skills")
    @classmethod
    def _skills(cls, v: list[str]) -> list[str]:
        return _dedupe_skills(v)


class TechnicianUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    email: str | None = Field(default=None, min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    phone_number: str | None = Field(default=None, max_length=50)
    status: TechnicianStatus | None = None
    current_location: str | None = Field(default=None, max_length=200)
    skills: list[str] | None = None
    experience_years: int | None = Field(default=None, ge=0)
    hourly_rate: float | None = Field(default=None, ge=0)
    max_concurrent_orders: int | None = Field(default=None, ge=1)

    @field_validator("skills")
    @classmethod
    def _skills(cls, v: list[str] | None) -> list[str] | None:
        return None if v is None else _dedupe_skills(v)


class TechnicianStatusUpdate(CamelModel):
    status: TechnicianStatus


class TechnicianLocationUpdate(CamelModel):
    location: str = Field(min_length=1, max_length=200)


class FindBestRequest(CamelModel):
    required_skills: list[str] = Field(min_length=1)


class TechnicianRead(CamelModel):
    id: str
    name: str
    email: str
    phone_number: str = ""
    status: TechnicianStatus
    current_location: str = ""
    skills: list[str] = []
    experience_years: int | None = None
    hourly_rate: float | None = None
    max_concurrent_orders: int = 3
    created_at: datetime
    updated_at: datetime
    version: int
