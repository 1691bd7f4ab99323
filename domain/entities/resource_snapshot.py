"""
Resource snapshot entities.

Canonical, backend-independent view of a server's utilization.
Memory and disk are always bytes, CPU is a 0-100 percentage.
"""

from dataclasses import dataclass
from typing import Optional

from domain.entities.process_entry import ProcessRankings
from domain.value_objects.backend_mode import BackendMode


@dataclass(frozen=True)
class UsagePair:
    """Used/total pair in bytes.

    ``used <= total`` is not enforced: backends sample the two figures
    separately and can briefly disagree.
    """

    used_bytes: float
    total_bytes: float

    def to_dict(self) -> dict:
        return {"used": self.used_bytes, "total": self.total_bytes}


@dataclass(frozen=True)
class ResourceSnapshot:
    """System-wide figures; ``None`` when the source could not be parsed."""

    cpu_percent: Optional[float] = None
    memory: Optional[UsagePair] = None
    disk: Optional[UsagePair] = None

    @property
    def memory_total(self) -> Optional[float]:
        return self.memory.total_bytes if self.memory else None

    def to_dict(self) -> dict:
        return {
            "cpu": self.cpu_percent,
            "memory": self.memory.to_dict() if self.memory else None,
            "disk": self.disk.to_dict() if self.disk else None,
        }


@dataclass(frozen=True)
class ServerInfo:
    """Static description of the monitored server"""

    name: str
    ip: str
    description: str

    def to_dict(self) -> dict:
        return {"name": self.name, "ip": self.ip, "description": self.description}


@dataclass(frozen=True)
class StatsReport:
    """Everything returned for one stats request"""

    server: ServerInfo
    resources: ResourceSnapshot
    backend: BackendMode
    top_processes: Optional[ProcessRankings] = None

    def to_dict(self) -> dict:
        """JSON body for the dashboard; ``topProcesses`` only when ranked."""
        data = {
            "server": self.server.to_dict(),
            "resources": self.resources.to_dict(),
        }
        if self.top_processes is not None:
            data["topProcesses"] = self.top_processes.to_dict()
        return data
