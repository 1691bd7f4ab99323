"""
Metrics Backend Interface

Defines the contract every telemetry source implements, independent of
transport (Netdata HTTP, node_exporter text, SSH shell commands).
"""

from abc import ABC, abstractmethod
from typing import Optional

from domain.entities.process_entry import ProcessSamples
from domain.entities.resource_snapshot import ResourceSnapshot
from domain.value_objects.backend_mode import BackendMode


class IMetricsBackend(ABC):
    """Interface for request-scoped telemetry backends"""

    mode: BackendMode

    # Whether the two fetches may run at the same time
    concurrent: bool = True

    @abstractmethod
    async def fetch_system_metrics(self) -> ResourceSnapshot:
        """Get CPU, memory and disk figures in canonical units"""
        pass

    @abstractmethod
    async def fetch_process_rankings(self) -> Optional[ProcessSamples]:
        """Get unranked container/host process lists, or None if unsupported"""
        pass
