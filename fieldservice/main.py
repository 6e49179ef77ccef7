"""Work-order service FastAPI application."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from fieldservice.api.errors import register_error_handlers
from fieldservice.api.router import work_order_api_router
from fieldservice.config import get_settings
from fieldservice.db.engine import create_schema, engine
from fieldservice.logging_config import configure_logging
from fieldservice.services.coordinator import AssignmentCoordinator
from fieldservice.services.notifier import ChangeNotifier, log_event
from fieldservice.services.technician_client import TechnicianClient
from fieldservice.services.ws_manager import ws_manager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level)

    await create_schema()

    notifier = ChangeNotifier(maxsize=settings.events.queue_size)
    notifier.subscribe(log_event)
    notifier.subscribe(ws_manager.broadcast)
    technician_client = TechnicianClient(settings.technician_service)

    app.state.notifier = notifier
    app.state.technician_client = technician_client
    app.state.coordinator = AssignmentCoordinator(technician_client, notifier)

    notifier.start()
    logger.info(
        "Work-order service started; technician directory at %s",
        settings.technician_service.base_url,
    )
    yield
    await notifier.stop()
    await technician_client.aclose()
    await engine.dispose()


app = FastAPI(
    title="Field Service Work Orders",
    description="Work-order lifecycle and technician assignment coordination.",
    version="0.1.0",
    lifespan=lifespan,
)
register_error_handlers(app)
app.include_router(work_order_api_router)


@app.get("/health")
async def health():
    return {"status": "UP", "service": "work-order-service"}
