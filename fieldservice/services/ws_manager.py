"""WebSocket connection manager that relays change events to clients."""

from __future__ import annotations

from fastapi import WebSocket

from fieldservice.schemas.events import ChangeEvent


class ConnectionManager:
    """Clients subscribe to a topic prefix (``""`` means everything)."""

    def __init__(self):
        self._connections: dict[str, list[WebSocket]] = {}

    async def connect(self, prefix: str, websocket: WebSocket):
        await websocket.accept()
        self._connections.setdefault(prefix, []).append(websocket)

    def disconnect(self, prefix: str, websocket: WebSocket):
        conns = self._connections.get(prefix, [])
        if websocket in conns:
            conns.remove(websocket)

    @property
    def connection_count(self) -> int:
        return sum(len(conns) for conns in self._connections.values())

    async def broadcast(self, event: ChangeEvent):
        """Send an event to every client whose prefix matches its topic."""
        message = event.model_dump_json(by_alias=True)
        for prefix, conns in list(self._connections.items()):
            if not event.topic.startswith(prefix):
                continue
            dead = []
            for ws in conns:
                try:
                    await ws.send_text(message)
                except Exception:
                    dead.append(ws)
            for ws in dead:
                conns.remove(ws)


ws_manager = ConnectionManager()
