"""
Process Ranking

Merges container and host process lists into one ranked list per
resource dimension. Pure functions of their inputs.
"""

import logging
from typing import Dict, Iterable, List, Optional

from domain.entities.process_entry import (
    ContainerInfo,
    HostProcess,
    ProcessEntry,
    ProcessOrigin,
    ProcessRankings,
    ProcessSamples,
)

logger = logging.getLogger(__name__)

# Commands of the collection pipeline itself; their transient CPU use
# would otherwise top every host ranking.
MONITORING_NOISE_PROCESSES = ("ps", "docker", "awk", "head", "tail", "grep", "sed", "sort")

CONTAINER_NAME_PREFIX = "🐳 "


def is_monitoring_noise(name: str) -> bool:
    """True for a denied command name, alone or followed by its arguments."""
    name = name.strip()
    for denied in MONITORING_NOISE_PROCESSES:
        if name == denied or name.startswith(denied + " "):
            return True
    return False


def rank_entries(*sources: Iterable[ProcessEntry]) -> List[ProcessEntry]:
    """
    Concatenate sources in order and sort descending by value.

    The sort is stable, so equal values keep their discovery order.
    """
    merged: List[ProcessEntry] = []
    for source in sources:
        merged.extend(source)
    return sorted(merged, key=lambda entry: entry.value, reverse=True)


def _positive_unique(entries: Iterable[ProcessEntry]) -> List[ProcessEntry]:
    seen = set()
    result = []
    for entry in entries:
        if entry.value <= 0 or entry.identity in seen:
            continue
        seen.add(entry.identity)
        result.append(entry)
    return result


def tag_containers(
    entries: Iterable[ProcessEntry],
    containers: Dict[str, ContainerInfo],
) -> List[ProcessEntry]:
    """Prefix container names and attach id/image from the ``docker ps`` table."""
    tagged = []
    for entry in entries:
        name = entry.name.strip()
        info = containers.get(name)
        tagged.append(entry.with_changes(
            name=f"{CONTAINER_NAME_PREFIX}{name}",
            id=info.id if info else entry.id,
            image=info.image if info else entry.image,
        ))
    return tagged


def _memory_bytes(percent: float, memory_total: float) -> float:
    return percent / 100 * memory_total


def host_cpu_entries(
    rows: Iterable[HostProcess],
    memory_total: Optional[float],
) -> List[ProcessEntry]:
    """CPU-ranked host entries; memory rides along as bytes when known."""
    entries = []
    for row in rows:
        if is_monitoring_noise(row.name):
            continue
        entries.append(ProcessEntry(
            name=row.name,
            value=row.cpu_percent,
            origin=ProcessOrigin.HOST,
            id=row.pid,
            user=row.user,
            secondary=_memory_bytes(row.mem_percent, memory_total) if memory_total else None,
        ))
    return entries


def host_memory_entries(
    rows: Iterable[HostProcess],
    memory_total: Optional[float],
) -> List[ProcessEntry]:
    """
    Memory-ranked host entries in bytes.

    ``ps`` only reports a percentage; without a total there is no way to
    put these on the same scale as container bytes, so none are returned.
    """
    if not memory_total:
        return []
    entries = []
    for row in rows:
        if is_monitoring_noise(row.name):
            continue
        entries.append(ProcessEntry(
            name=row.name,
            value=_memory_bytes(row.mem_percent, memory_total),
            origin=ProcessOrigin.HOST,
            id=row.pid,
            user=row.user,
            secondary=row.cpu_percent,
        ))
    return entries


def build_rankings(samples: ProcessSamples, memory_total: Optional[float]) -> ProcessRankings:
    """Merge container and host samples into ranked CPU, memory and disk lists."""
    if samples.host_by_memory and not memory_total:
        logger.warning("Total memory unknown, host processes left out of memory ranking")

    def containers(entries: List[ProcessEntry]) -> List[ProcessEntry]:
        return tag_containers(_positive_unique(entries), samples.containers)

    return ProcessRankings(
        cpu=rank_entries(
            containers(samples.container_cpu),
            _positive_unique(host_cpu_entries(samples.host_by_cpu, memory_total)),
        ),
        memory=rank_entries(
            containers(samples.container_memory),
            _positive_unique(host_memory_entries(samples.host_by_memory, memory_total)),
        ),
        disk=rank_entries(containers(samples.container_disk)),
    )
