"""
SSH-based metrics backends.

Every figure comes from shell commands run over the request's SSH
session: ``top``/``free``/``df`` for the system snapshot, ``docker`` and
``ps`` for the process lists.
"""

import logging
from typing import Optional

from domain.entities.process_entry import ProcessSamples
from domain.entities.resource_snapshot import ResourceSnapshot
from domain.services.command_execution_service import ICommandSession
from domain.services.metrics_backend import IMetricsBackend
from domain.value_objects.backend_mode import BackendMode
from infrastructure.monitoring.remote_commands import (
    DOCKER_COMMANDS,
    HOST_COMMANDS,
    SYSTEM_COMMANDS,
    run_commands,
    samples_from_outputs,
    snapshot_from_outputs,
)

logger = logging.getLogger(__name__)


class SSHBackend(IMetricsBackend):
    """All figures over SSH, commands issued in parallel"""

    mode = BackendMode.SSH
    concurrent = True
    include_host_processes = True

    def __init__(self, session: ICommandSession):
        self._session = session

    async def fetch_system_metrics(self) -> ResourceSnapshot:
        outputs = await run_commands(self._session, SYSTEM_COMMANDS, concurrent=self.concurrent)
        return snapshot_from_outputs(outputs)

    async def fetch_process_rankings(self) -> Optional[ProcessSamples]:
        commands = list(DOCKER_COMMANDS)
        if self.include_host_processes:
            commands.extend(HOST_COMMANDS)
        outputs = await run_commands(self._session, commands, concurrent=self.concurrent)
        samples = samples_from_outputs(outputs)
        logger.debug(
            f"Collected {len(samples.container_cpu)} container and "
            f"{len(samples.host_by_cpu)} host CPU rows"
        )
        return samples


class LegacySSHBackend(SSHBackend):
    """One command at a time, Docker containers only"""

    mode = BackendMode.SSH_LEGACY
    concurrent = False
    include_host_processes = False
