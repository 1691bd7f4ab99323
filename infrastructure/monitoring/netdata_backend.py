"""
Netdata chart API backend.

Reads the latest row of the ``system.cpu``, ``system.ram`` and disk
space charts. Netdata reports RAM in MiB and disk space in GiB.
"""

import asyncio
import logging
from typing import List, Optional

import httpx

from domain.entities.process_entry import ProcessSamples
from domain.entities.resource_snapshot import ResourceSnapshot, UsagePair
from domain.exceptions import UpstreamFetchError
from domain.services.metrics_backend import IMetricsBackend
from domain.value_objects.backend_mode import BackendMode
from domain.value_objects.units import bytes_from_size_token, clamp_percent

logger = logging.getLogger(__name__)

CPU_CHART = "system.cpu"
RAM_CHART = "system.ram"
DISK_CHART_PREFIX = "disk_space."
DISK_CHART_FALLBACK = "disk_space._"


def find_disk_chart(catalog: dict) -> str:
    """First chart key starting with ``disk_space.``, else the ``_`` chart."""
    for key in (catalog.get("charts") or {}):
        if key.startswith(DISK_CHART_PREFIX):
            return key
    return DISK_CHART_FALLBACK


class ChartRow:
    """Latest row of a ``/api/v1/data`` response, addressed by label"""

    def __init__(self, payload: dict):
        self.labels: List[str] = payload.get("labels") or []
        rows = payload.get("data") or []
        self.values: list = rows[0] if rows else []

    def get(self, label: str) -> float:
        """Value of ``label``; missing label or null value counts as 0."""
        if label not in self.labels:
            return 0.0
        index = self.labels.index(label)
        if index >= len(self.values):
            return 0.0
        return self.values[index] or 0.0

    def sum_without_time(self) -> float:
        """Sum of every dimension after the leading ``time`` column."""
        return sum((value or 0.0) for value in self.values[1:len(self.labels)])


def cpu_from_chart(row: ChartRow) -> float:
    return clamp_percent(row.sum_without_time())


def memory_from_chart(row: ChartRow) -> UsagePair:
    """Total memory is ``free + used + cached + buffers``."""
    used = row.get("used")
    total = row.get("free") + used + row.get("cached") + row.get("buffers")
    return UsagePair(
        used_bytes=bytes_from_size_token(used, "MiB"),
        total_bytes=bytes_from_size_token(total, "MiB"),
    )


def disk_from_chart(row: ChartRow) -> UsagePair:
    used = row.get("used")
    total = used + row.get("avail")
    return UsagePair(
        used_bytes=bytes_from_size_token(used, "GiB"),
        total_bytes=bytes_from_size_token(total, "GiB"),
    )


class NetdataBackend(IMetricsBackend):
    """System figures from the Netdata REST API; no process detail"""

    mode = BackendMode.NETDATA
    concurrent = True

    def __init__(self, client: httpx.AsyncClient, base_url: str):
        self._client = client
        self._base_url = base_url.rstrip("/")

    async def _get_json(self, path: str, params: Optional[dict] = None) -> dict:
        try:
            resp = await self._client.get(f"{self._base_url}{path}", params=params)
        except httpx.HTTPError as e:
            raise UpstreamFetchError(f"Netdata request {path} failed: {e}") from e
        if not resp.is_success:
            raise UpstreamFetchError(
                f"Failed to fetch from Netdata - {params.get('chart') if params else path}: "
                f"{resp.status_code}"
            )
        try:
            return resp.json()
        except ValueError as e:
            raise UpstreamFetchError(f"Netdata returned invalid JSON for {path}") from e

    async def _chart(self, chart: str) -> ChartRow:
        payload = await self._get_json(
            "/api/v1/data",
            params={"chart": chart, "after": -1, "format": "json"},
        )
        return ChartRow(payload)

    async def fetch_system_metrics(self) -> ResourceSnapshot:
        catalog = await self._get_json("/api/v1/charts")
        disk_chart = find_disk_chart(catalog)
        logger.info(f"Found disk chart: {disk_chart}")

        cpu_row, ram_row, disk_row = await asyncio.gather(
            self._chart(CPU_CHART),
            self._chart(RAM_CHART),
            self._chart(disk_chart),
        )
        return ResourceSnapshot(
            cpu_percent=cpu_from_chart(cpu_row),
            memory=memory_from_chart(ram_row),
            disk=disk_from_chart(disk_row),
        )

    async def fetch_process_rankings(self) -> Optional[ProcessSamples]:
        return None
