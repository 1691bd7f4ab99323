"""
Parsers for shell command output (``free``, ``df``, ``top``, ``ps``,
``docker stats``, ``docker ps``).

Each parser targets one fixed column layout. Blank lines are dropped
first; a row that fails its column-count or numeric check is skipped
without error. Process lists only keep rows with positive activity.
"""

import re
from typing import Dict, List, Optional

from domain.entities.process_entry import (
    ContainerInfo,
    HostProcess,
    ProcessEntry,
    ProcessOrigin,
)
from domain.entities.resource_snapshot import UsagePair
from domain.services.process_ranking import is_monitoring_noise
from domain.value_objects.units import (
    bytes_from_size_token,
    clamp_percent,
    parse_percent,
    parse_size_token,
)


_TOP_IDLE_RE = re.compile(r"([\d.,]+)\s*id\b")
_BLOCK_IO_RE = re.compile(
    r"([\d.]+)\s*([A-Za-z]+)\s*/\s*([\d.]+)\s*([A-Za-z]+)"
)

# ps -eo pid,user,comm,%cpu,%mem: two leading columns, two trailing
PS_MIN_COLUMNS = 5


def _lines(stdout: str) -> List[str]:
    return [line for line in stdout.splitlines() if line.strip()]


# ============== System figures ==============


def parse_free_memory(stdout: str) -> Optional[UsagePair]:
    """Memory from ``free -m``: second line is ``Mem: total used ...`` in MiB."""
    lines = _lines(stdout)
    if len(lines) < 2:
        return None
    parts = lines[1].split()
    if len(parts) < 3:
        return None
    try:
        total = float(parts[1])
        used = float(parts[2])
    except ValueError:
        return None
    return UsagePair(
        used_bytes=bytes_from_size_token(used, "MiB"),
        total_bytes=bytes_from_size_token(total, "MiB"),
    )


def parse_df_disk(stdout: str) -> Optional[UsagePair]:
    """Disk from ``df -P -BG``: last line is ``fs total used ...`` with ``G`` suffixes."""
    lines = _lines(stdout)
    if not lines:
        return None
    parts = lines[-1].split()
    if len(parts) < 3:
        return None
    try:
        total = int(parts[1].replace("G", ""))
        used = int(parts[2].replace("G", ""))
    except ValueError:
        return None
    return UsagePair(
        used_bytes=bytes_from_size_token(used, "GiB"),
        total_bytes=bytes_from_size_token(total, "GiB"),
    )


def parse_top_cpu(stdout: str) -> Optional[float]:
    """CPU usage as ``100 - idle`` from the ``Cpu(s)`` line of ``top -bn1``."""
    for line in _lines(stdout):
        if "Cpu(s)" not in line:
            continue
        match = _TOP_IDLE_RE.search(line)
        if not match:
            return None
        try:
            idle = float(match.group(1).strip(",").replace(",", "."))
        except ValueError:
            return None
        return clamp_percent(100 - idle)
    return None


# ============== Host processes ==============


def parse_ps_processes(stdout: str) -> List[HostProcess]:
    """
    Host processes from ``ps -eo pid,user,comm,%cpu,%mem``.

    The command name is whatever sits between user and the two trailing
    percent columns. The header row and the collection pipeline's own
    commands are left out.
    """
    processes = []
    for line in _lines(stdout):
        parts = line.split()
        if len(parts) < PS_MIN_COLUMNS or not parts[0].isdigit():
            continue
        try:
            cpu = float(parts[-2])
            mem = float(parts[-1])
        except ValueError:
            continue
        name = " ".join(parts[2:-2])
        if not name or is_monitoring_noise(name):
            continue
        if cpu <= 0 and mem <= 0:
            continue
        processes.append(HostProcess(
            pid=parts[0],
            user=parts[1],
            name=name,
            cpu_percent=cpu,
            mem_percent=mem,
        ))
    return processes


# ============== Docker ==============


def _tab_rows(stdout: str, min_columns: int) -> List[List[str]]:
    rows = []
    for line in _lines(stdout):
        fields = [f.strip() for f in line.split("\t")]
        if len(fields) < min_columns or not fields[0]:
            continue
        rows.append(fields)
    return rows


def _used_part(mem_usage: str) -> float:
    """``"420.9MiB / 7.755GiB"`` -> bytes of the used side."""
    return parse_size_token(mem_usage.split("/")[0])


def parse_block_io(field: str) -> float:
    """Total bytes read + written from ``"<read><unit> / <write><unit>"``."""
    match = _BLOCK_IO_RE.search(field or "")
    if not match:
        return 0.0
    read_value, read_unit, write_value, write_unit = match.groups()
    return (
        bytes_from_size_token(float(read_value), read_unit)
        + bytes_from_size_token(float(write_value), write_unit)
    )


def parse_docker_cpu(stdout: str) -> List[ProcessEntry]:
    """Rows of ``{{.Name}}\\t{{.CPUPerc}}[\\t{{.MemUsage}}]``."""
    entries = []
    for fields in _tab_rows(stdout, 2):
        value = parse_percent(fields[1])
        if value <= 0:
            continue
        entries.append(ProcessEntry(
            name=fields[0],
            value=value,
            origin=ProcessOrigin.CONTAINER,
            secondary=_used_part(fields[2]) if len(fields) > 2 else None,
        ))
    return entries


def parse_docker_memory(stdout: str) -> List[ProcessEntry]:
    """Rows of ``{{.Name}}\\t{{.MemUsage}}[\\t{{.CPUPerc}}]``."""
    entries = []
    for fields in _tab_rows(stdout, 2):
        value = _used_part(fields[1])
        if value <= 0:
            continue
        entries.append(ProcessEntry(
            name=fields[0],
            value=value,
            origin=ProcessOrigin.CONTAINER,
            secondary=parse_percent(fields[2]) if len(fields) > 2 else None,
        ))
    return entries


def parse_docker_block_io(stdout: str) -> List[ProcessEntry]:
    """Rows of ``{{.Name}}\\t{{.BlockIO}}``."""
    entries = []
    for fields in _tab_rows(stdout, 2):
        value = parse_block_io(fields[1])
        if value <= 0:
            continue
        entries.append(ProcessEntry(
            name=fields[0],
            value=value,
            origin=ProcessOrigin.CONTAINER,
        ))
    return entries


def parse_docker_ps(stdout: str) -> Dict[str, ContainerInfo]:
    """Container name -> id/image from ``{{.Names}}\\t{{.ID}}\\t{{.Image}}``."""
    return {
        fields[0]: ContainerInfo(id=fields[1], image=fields[2])
        for fields in _tab_rows(stdout, 3)
    }
