"""StatsService: builds one normalized stats report per request."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from domain.entities.resource_snapshot import ServerInfo, StatsReport
from domain.exceptions import ConfigurationError, StatsError, UpstreamFetchError
from domain.services.process_ranking import build_rankings
from domain.value_objects.backend_mode import BackendMode
from infrastructure.monitoring import prometheus_exporter
from infrastructure.monitoring.backend_factory import BackendFactory
from shared.config.settings import Settings

logger = logging.getLogger(__name__)


class StatsService:
    """Application service orchestrating fetch, parse, extract and rank."""

    def __init__(self, settings: Settings, backends: BackendFactory) -> None:
        self._server = settings.server
        self._backends = backends

    def configured_mode(self) -> Optional[BackendMode]:
        return self._backends.configured_mode()

    def resolve_mode(self, requested: Optional[BackendMode] = None) -> BackendMode:
        return self._backends.resolve_mode(requested)

    def select_mode(self, requested: Optional[BackendMode] = None) -> BackendMode:
        """Resolve the backend for a stats request, counting config errors."""
        try:
            return self.resolve_mode(requested)
        except ConfigurationError:
            prometheus_exporter.record_request(requested.value if requested else None, "config_error")
            raise

    def server_info(self, mode: BackendMode) -> ServerInfo:
        return ServerInfo(
            name=self._server.name,
            ip=self._server.ip,
            description=self._server.description or mode.description,
        )

    async def collect(self, mode: Optional[BackendMode] = None) -> StatsReport:
        """
        Fetch and normalize stats from one backend.

        Any failing fetch aborts the whole report; there is no partial
        result.

        Raises:
            ConfigurationError: no usable backend configuration.
            UpstreamFetchError: a fetch, command or parse step failed.
        """
        mode = self.select_mode(mode)

        try:
            report = await self._collect(mode)
        except ConfigurationError:
            prometheus_exporter.record_request(mode.value, "config_error")
            raise
        except StatsError:
            prometheus_exporter.record_request(mode.value, "upstream_error")
            raise
        except Exception as e:
            logger.error(f"Error fetching stats from {mode.value}: {e}", exc_info=True)
            prometheus_exporter.record_request(mode.value, "upstream_error")
            raise UpstreamFetchError(str(e)) from e

        prometheus_exporter.record_request(mode.value, "ok", report.resources.cpu_percent)
        return report

    async def _collect(self, mode: BackendMode) -> StatsReport:
        async with self._backends.open(mode) as backend:
            if backend.concurrent:
                snapshot, samples = await asyncio.gather(
                    backend.fetch_system_metrics(),
                    backend.fetch_process_rankings(),
                )
            else:
                snapshot = await backend.fetch_system_metrics()
                samples = await backend.fetch_process_rankings()

        rankings = None
        if samples is not None:
            rankings = build_rankings(samples, snapshot.memory_total)

        logger.info(
            f"Stats collected via {mode.value}: cpu={snapshot.cpu_percent} "
            f"processes={'yes' if rankings else 'no'}"
        )
        return StatsReport(
            server=self.server_info(mode),
            resources=snapshot,
            backend=mode,
            top_processes=rankings,
        )
