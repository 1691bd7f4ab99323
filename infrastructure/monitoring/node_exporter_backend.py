"""
node_exporter metrics backend.

System figures come from the Prometheus text endpoint; per-process
detail (Docker + host) still needs the SSH session.
"""

import logging
from typing import Optional

import httpx

from domain.entities.process_entry import ProcessSamples
from domain.entities.resource_snapshot import ResourceSnapshot, UsagePair
from domain.exceptions import UpstreamFetchError
from domain.services.command_execution_service import ICommandSession
from domain.services.metrics_backend import IMetricsBackend
from domain.value_objects.backend_mode import BackendMode
from infrastructure.monitoring.remote_commands import (
    DOCKER_COMMANDS,
    HOST_COMMANDS,
    run_commands,
    samples_from_outputs,
)
from infrastructure.parsers.prometheus_text import (
    MetricTable,
    cpu_usage_from_counters,
    find_series,
    parse_metric_table,
)

logger = logging.getLogger(__name__)

ROOT_MOUNTPOINT = "/"


def memory_from_table(table: MetricTable) -> Optional[UsagePair]:
    """``used = MemTotal - MemAvailable``, both already in bytes."""
    total = find_series(table, "node_memory_MemTotal_bytes")
    available = find_series(table, "node_memory_MemAvailable_bytes")
    if total is None or available is None:
        return None
    return UsagePair(used_bytes=total - available, total_bytes=total)


def disk_from_table(table: MetricTable, mountpoint: str = ROOT_MOUNTPOINT) -> Optional[UsagePair]:
    """``used = size - avail`` for the filesystem mounted at ``mountpoint``."""
    size = find_series(table, "node_filesystem_size_bytes", mountpoint=mountpoint)
    available = find_series(table, "node_filesystem_avail_bytes", mountpoint=mountpoint)
    if size is None or available is None:
        return None
    return UsagePair(used_bytes=size - available, total_bytes=size)


class NodeExporterBackend(IMetricsBackend):
    """Prometheus node_exporter text + SSH process lists"""

    mode = BackendMode.NODE_EXPORTER
    concurrent = True

    def __init__(self, client: httpx.AsyncClient, metrics_url: str, session: ICommandSession):
        self._client = client
        self._metrics_url = metrics_url
        self._session = session

    async def _fetch_table(self) -> MetricTable:
        try:
            resp = await self._client.get(self._metrics_url)
        except httpx.HTTPError as e:
            raise UpstreamFetchError(f"node_exporter request failed: {e}") from e
        if not resp.is_success:
            raise UpstreamFetchError(f"node_exporter returned HTTP {resp.status_code}")
        return parse_metric_table(resp.text)

    async def fetch_system_metrics(self) -> ResourceSnapshot:
        table = await self._fetch_table()
        logger.debug(f"Parsed {len(table)} node_exporter series")
        return ResourceSnapshot(
            cpu_percent=cpu_usage_from_counters(table),
            memory=memory_from_table(table),
            disk=disk_from_table(table),
        )

    async def fetch_process_rankings(self) -> Optional[ProcessSamples]:
        outputs = await run_commands(self._session, DOCKER_COMMANDS + HOST_COMMANDS)
        return samples_from_outputs(outputs)
