from __future__ import annotations
from datetime import datetime
from typing import Any
from pydantic import Field
from fieldservice.models.base import utcnow
from fieldservice.schemas.base import CamelModel


class ChangeEvent(CamelModel):
    topic: str  # workorders.assigned | technicians.{id}.assignments | ...
    data: Any = None
    emitted_at: datetime = Field(default_factory=utcnow)
