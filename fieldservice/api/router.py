"""Routers for each deployable service."""

from fastapi import APIRouter

from fieldservice.api.work_orders import router as work_orders_router
from fieldservice.api.technicians import router as technicians_router
from fieldservice.api.websocket import router as websocket_router

work_order_api_router = APIRouter()
work_order_api_router.include_router(work_orders_router)
work_order_api_router.include_router(websocket_router)

technician_api_router = APIRouter()
technician_api_router.include_router(technicians_router)
