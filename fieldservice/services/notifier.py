"""Fire-and-forget change notifications.

``publish`` never blocks and never raises: events go onto a bounded queue
that a background task drains, handing each event to every subscriber. A
slow or broken subscriber cannot hold up the request that published.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

from fieldservice.schemas.events import ChangeEvent

logger = logging.getLogger(__name__)

Subscriber = Callable[[ChangeEvent], Awaitable[None] | None]


class Topics:
    WORK_ORDER_CREATED = "workorders.created"
    WORK_ORDER_UPDATED = "workorders.updated"
    WORK_ORDER_ASSIGNED = "workorders.assigned"
    WORK_ORDER_UNASSIGNED = "workorders.unassigned"
    WORK_ORDER_STATUS = "workorders.status"
    WORK_ORDER_DELETED = "workorders.deleted"

    @staticmethod
    def technician_assignments(technician_id: str) -> str:
        return f"technicians.{technician_id}.assignments"

    @staticmethod
    def technician_unassigned(technician_id: str) -> str:
        return f"technicians.{technician_id}.unassigned"


class ChangeNotifier:
    def __init__(self, maxsize: int = 1000):
        self._queue: asyncio.Queue[ChangeEvent | None] = asyncio.Queue(maxsize=maxsize)
        self._subscribers: list[Subscriber] = []
        self._task: asyncio.Task | None = None

    def subscribe(self, subscriber: Subscriber) -> None:
        self._subscribers.append(subscriber)

    def unsubscribe(self, subscriber: Subscriber) -> None:
        if subscriber in self._subscribers:
            self._subscribers.remove(subscriber)

    def publish(self, topic: str, data: Any) -> bool:
        """Queue an event. Returns False if it had to be dropped."""
        try:
            event = ChangeEvent(topic=topic, data=data)
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            logger.warning("Event queue full, dropping %s", topic)
            return False
        except Exception:
            logger.exception("Failed to queue event %s", topic)
            return False
        return True

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if not self.running:
            self._task = asyncio.create_task(self._run(), name="change-notifier")

    async def stop(self) -> None:
        """Deliver whatever is already queued, then stop the publisher task."""
        if not self.running:
            return
        await self._queue.put(None)
        await self._task
        self._task = None

    async def drain(self) -> None:
        """Wait until every queued event has been handed to subscribers."""
        await self._queue.join()

    async def _run(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                if event is None:
                    return
                await self._dispatch(event)
            finally:
                self._queue.task_done()

    async def _dispatch(self, event: ChangeEvent) -> None:
        for subscriber in list(self._subscribers):
            try:
                result = subscriber(event)
                if asyncio.iscoroutine(result):
                    await result
            except Exception:
                logger.exception("Subscriber %r failed on %s", subscriber, event.topic)


async def log_event(event: ChangeEvent) -> None:
    """Subscriber that records every event at DEBUG level."""
    logger.debug("event %s: %s", event.topic, event.data)
