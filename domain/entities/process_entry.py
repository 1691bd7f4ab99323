"""
Process entities.

One row of a "top consumers" list, plus the raw per-source rows a
backend collects before ranking.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional


class ProcessOrigin(str, Enum):
    """Where a ranked process was discovered"""
    CONTAINER = "container"
    HOST = "host"


@dataclass(frozen=True)
class ProcessEntry:
    """
    One ranked row.

    ``value`` is in the unit of the ranking it belongs to: percent for
    CPU, bytes for memory and disk IO. ``secondary`` is the cross metric
    shown next to it (memory bytes in the CPU ranking, CPU percent in the
    memory ranking).
    """

    name: str
    value: float
    origin: ProcessOrigin
    id: Optional[str] = None  # container short id or host pid
    user: Optional[str] = None
    image: Optional[str] = None
    secondary: Optional[float] = None

    @property
    def identity(self) -> str:
        """Key used to drop duplicates within one source list."""
        return f"{self.origin.value}:{self.id or self.name}"

    def with_changes(self, **changes) -> "ProcessEntry":
        return replace(self, **changes)

    def to_dict(self) -> dict:
        data = {"name": self.name, "value": self.value, "origin": self.origin.value}
        if self.id is not None:
            data["pid"] = self.id
        if self.user is not None:
            data["user"] = self.user
        if self.image is not None:
            data["image"] = self.image
        if self.secondary is not None:
            data["secondaryMetric"] = self.secondary
        return data


@dataclass(frozen=True)
class HostProcess:
    """One ``ps`` row; memory is still a percentage of total RAM."""

    pid: str
    user: str
    name: str
    cpu_percent: float
    mem_percent: float


@dataclass(frozen=True)
class ContainerInfo:
    """Identity of a running container, looked up by name"""

    id: str
    image: str


@dataclass
class ProcessSamples:
    """Unranked process lists gathered by a backend for one request"""

    container_cpu: List[ProcessEntry] = field(default_factory=list)
    container_memory: List[ProcessEntry] = field(default_factory=list)
    container_disk: List[ProcessEntry] = field(default_factory=list)
    host_by_cpu: List[HostProcess] = field(default_factory=list)
    host_by_memory: List[HostProcess] = field(default_factory=list)
    containers: Dict[str, ContainerInfo] = field(default_factory=dict)


@dataclass(frozen=True)
class ProcessRankings:
    """Ranked top consumers per resource dimension"""

    cpu: List[ProcessEntry] = field(default_factory=list)
    memory: List[ProcessEntry] = field(default_factory=list)
    disk: List[ProcessEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "cpu": [entry.to_dict() for entry in self.cpu],
            "memory": [entry.to_dict() for entry in self.memory],
            "disk": [entry.to_dict() for entry in self.disk],
        }
