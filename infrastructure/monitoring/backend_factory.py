"""
Backend selection and per-request resource scope.

The mode is picked from whichever settings are present; ``open`` builds
the backend together with the HTTP client and SSH session it needs and
releases both when the request is done, whether it succeeded or not.
"""

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

from domain.exceptions import ConfigurationError
from domain.services.metrics_backend import IMetricsBackend
from domain.value_objects.backend_mode import BackendMode
from infrastructure.monitoring.netdata_backend import NetdataBackend
from infrastructure.monitoring.node_exporter_backend import NodeExporterBackend
from infrastructure.monitoring.ssh_backend import LegacySSHBackend, SSHBackend
from infrastructure.ssh.ssh_executor import SSHCommandExecutor
from shared.config.settings import Settings

logger = logging.getLogger(__name__)


class BackendFactory:
    """Creates request-scoped metrics backends from settings"""

    def __init__(
        self,
        settings: Settings,
        ssh_executor: Optional[SSHCommandExecutor] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._settings = settings
        self._ssh = ssh_executor or SSHCommandExecutor(settings.ssh)
        self._transport = transport

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport)

    def configured_mode(self) -> Optional[BackendMode]:
        """
        Backend implied by configuration, or None.

        ``STATS_BACKEND`` wins; otherwise the richest configured source:
        node_exporter + SSH, then SSH alone, then Netdata.
        """
        settings = self._settings
        if settings.backend:
            try:
                return BackendMode(settings.backend.lower())
            except ValueError:
                raise ConfigurationError(
                    f"Unknown STATS_BACKEND '{settings.backend}' "
                    f"(expected one of: {', '.join(m.value for m in BackendMode)})"
                )
        if settings.node_exporter.url and settings.ssh.is_configured:
            return BackendMode.NODE_EXPORTER
        if settings.ssh.is_configured:
            return BackendMode.SSH
        if settings.netdata.url:
            return BackendMode.NETDATA
        return None

    def resolve_mode(self, requested: Optional[BackendMode] = None) -> BackendMode:
        """Requested mode, or the configured one; raises when neither exists."""
        mode = requested or self.configured_mode()
        if mode is None:
            raise ConfigurationError(
                "No monitoring backend configured "
                "(set NETDATA_URL, NODE_EXPORTER_URL or SSH_HOST/SSH_USER/SSH_PASSWORD)"
            )
        self._check_settings(mode)
        return mode

    def _check_settings(self, mode: BackendMode) -> None:
        if mode is BackendMode.NETDATA and not self._settings.netdata.url:
            raise ConfigurationError("Netdata URL not configured (set NETDATA_URL)")
        if mode is BackendMode.NODE_EXPORTER and not self._settings.node_exporter.url:
            raise ConfigurationError("node_exporter URL not configured (set NODE_EXPORTER_URL)")
        if mode.uses_remote_exec and not self._settings.ssh.is_configured:
            missing = ", ".join(self._settings.ssh.missing_keys)
            raise ConfigurationError(f"SSH not configured (set {missing})")

    @asynccontextmanager
    async def open(self, mode: BackendMode) -> AsyncIterator[IMetricsBackend]:
        """Yield a ready backend; its HTTP client and SSH session close on exit."""
        self._check_settings(mode)
        async with AsyncExitStack() as stack:
            if mode is BackendMode.NETDATA:
                client = await stack.enter_async_context(self._http_client())
                yield NetdataBackend(client, self._settings.netdata.url)
                return

            session = await stack.enter_async_context(self._ssh.session())
            if mode is BackendMode.NODE_EXPORTER:
                client = await stack.enter_async_context(self._http_client())
                yield NodeExporterBackend(client, self._settings.node_exporter.url, session)
            elif mode is BackendMode.SSH_LEGACY:
                yield LegacySSHBackend(session)
            else:
                yield SSHBackend(session)
