"""Technician directory FastAPI application."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from fieldservice.api.errors import register_error_handlers
from fieldservice.api.router import technician_api_router
from fieldservice.config import get_settings
from fieldservice.db.technician_engine import create_technician_schema, technician_engine
from fieldservice.logging_config import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(get_settings().log_level)
    await create_technician_schema()
    yield
    await technician_engine.dispose()


app = FastAPI(
    title="Field Service Technicians",
    description="Technician directory: records, availability and best-match lookup.",
    version="0.1.0",
    lifespan=lifespan,
)
register_error_handlers(app)
app.include_router(technician_api_router)


@app.get("/health")
async def health():
    return {"status": "UP", "service": "technician-service"}
