from __future__ import annotations

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Query

from fieldservice.services.ws_manager import ws_manager

router = APIRouter(tags=["websocket"])


@router.websocket("/api/ws/events")
async def websocket_endpoint(
    websocket: WebSocket,
    prefix: str = Query(default=""),
):
    # prefix scopes the stream, e.g. "workorders." or "technicians.<id>."
    await ws_manager.connect(prefix, websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        ws_manager.disconnect(prefix, websocket)
