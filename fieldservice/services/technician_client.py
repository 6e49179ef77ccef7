"""HTTP client for the technician directory service.

Every call is best-effort: failures come back as a ``RemoteResult`` carrying
a ``RemoteCallFailure`` instead of raising, and nothing is retried.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Protocol
from urllib.parse import quote

import httpx

from fieldservice.config import TechnicianServiceConfig
from fieldservice.models.enums import TechnicianStatus
from fieldservice.services.errors import RemoteResult

logger = logging.getLogger(__name__)


class TechnicianDirectory(Protocol):
    """What the assignment coordinator needs from the technician service."""

    async def update_status(self, technician_id: str, status: TechnicianStatus) -> RemoteResult: ...

    async def get_technician_name(self, technician_id: str) -> RemoteResult: ...

    async def get_technician_names(self, technician_ids: Iterable[str]) -> dict[str, str]: ...


class TechnicianClient:
    """httpx-backed ``TechnicianDirectory``.

    Pass ``http_client`` to share a connection pool or to plug in a mock
    transport; otherwise one is created from ``config`` and closed by
    ``aclose``.
    """

    def __init__(
        self,
        config: TechnicianServiceConfig,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._base_url = config.base_url.rstrip("/")
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(
                config.read_timeout,
                connect=config.connect_timeout,
            ),
            headers={"Accept": "application/json"},
        )

    def _url(self, technician_id: str, suffix: str = "") -> str:
        return f"{self._base_url}/api/technicians/{quote(technician_id, safe='')}{suffix}"

    async def update_status(self, technician_id: str, status: TechnicianStatus) -> RemoteResult:
        url = self._url(technician_id, "/status")
        status_value = TechnicianStatus(status).value
        logger.debug("Updating technician %s status to %s via %s", technician_id, status_value, url)
        try:
            response = await self._http.patch(url, json={"status": status_value})
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            return RemoteResult.failure(
                "update_status", f"technician {technician_id}: HTTP {e.response.status_code}"
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return RemoteResult.failure(
                "update_status", f"technician {technician_id}: {type(e).__name__}: {e}"
            )
        return RemoteResult.success()

    async def get_technician_name(self, technician_id: str) -> RemoteResult:
        url = self._url(technician_id)
        try:
            response = await self._http.get(url)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            return RemoteResult.failure(
                "get_technician", f"technician {technician_id}: HTTP {e.response.status_code}"
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return RemoteResult.failure(
                "get_technician", f"technician {technician_id}: {type(e).__name__}: {e}"
            )
        except ValueError:
            return RemoteResult.failure("get_technician", f"technician {technician_id}: invalid JSON")

        name = body.get("name") if isinstance(body, dict) else None
        if not name:
            return RemoteResult.failure("get_technician", f"technician {technician_id}: no name in response")
        return RemoteResult.success(name)

    async def get_technician_names(self, technician_ids: Iterable[str]) -> dict[str, str]:
        """Resolve display names for many technicians concurrently.

        Each distinct id is fetched once. Ids that fail to resolve are left
        out of the result and logged.
        """
        ids = list(dict.fromkeys(tid for tid in technician_ids if tid))
        if not ids:
            return {}
        results = await asyncio.gather(*(self.get_technician_name(tid) for tid in ids))
        names: dict[str, str] = {}
        for tid, result in zip(ids, results):
            if result.ok:
                names[tid] = result.value
            else:
                logger.warning("Technician name lookup skipped: %s", result.error)
        return names

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()
