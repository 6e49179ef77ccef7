"""Shared fixtures: in-memory databases, a scriptable technician directory, a running notifier."""

from __future__ import annotations

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from fieldservice.models import Base, TechnicianBase, TechnicianStatus
from fieldservice.services.coordinator import AssignmentCoordinator
from fieldservice.services.errors import RemoteResult
from fieldservice.services.notifier import ChangeNotifier


class FakeTechnicianDirectory:
    """In-memory stand-in for the technician service client.

    Set ``fail_updates`` / ``fail_lookups`` to simulate the remote service
    being down; every call is recorded either way.
    """

    def __init__(self, names: dict[str, str] | None = None):
        self.names = dict(names or {})
        self.statuses: dict[str, TechnicianStatus] = {}
        self.status_calls: list[tuple[str, TechnicianStatus]] = []
        self.lookup_calls: list[str] = []
        self.fail_updates = False
        self.fail_lookups = False

    async def update_status(self, technician_id, status):
        status = TechnicianStatus(status)
        self.status_calls.append((technician_id, status))
        if self.fail_updates:
            return RemoteResult.failure("update_status", f"technician {technician_id}: ConnectError")
        self.statuses[technician_id] = status
        return RemoteResult.success()

    async def get_technician_name(self, technician_id):
        self.lookup_calls.append(technician_id)
        if self.fail_lookups:
            return RemoteResult.failure("get_technician", f"technician {technician_id}: ReadTimeout")
        name = self.names.get(technician_id)
        if name is None:
            return RemoteResult.failure("get_technician", f"technician {technician_id}: HTTP 404")
        return RemoteResult.success(name)

    async def get_technician_names(self, technician_ids):
        names = {}
        for tid in dict.fromkeys(technician_ids):
            result = await self.get_technician_name(tid)
            if result.ok:
                names[tid] = result.value
        return names


class EventRecorder:
    def __init__(self):
        self.events = []

    async def __call__(self, event):
        self.events.append(event)

    @property
    def topics(self) -> list[str]:
        return [e.topic for e in self.events]


@pytest_asyncio.fixture
async def db_factory():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield factory
    await engine.dispose()


@pytest_asyncio.fixture
async def db(db_factory):
    async with db_factory() as session:
        yield session


@pytest_asyncio.fixture
async def technician_db_factory():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(TechnicianBase.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield factory
    await engine.dispose()


@pytest.fixture
def directory():
    return FakeTechnicianDirectory(names={"tech-1": "Maria Lopez", "tech-2": "Dev Patel"})


@pytest.fixture
def recorder():
    return EventRecorder()


@pytest_asyncio.fixture
async def notifier(recorder):
    n = ChangeNotifier(maxsize=100)
    n.subscribe(recorder)
    n.start()
    yield n
    await n.stop()


@pytest.fixture
def coordinator(directory, notifier):
    return AssignmentCoordinator(directory, notifier)
