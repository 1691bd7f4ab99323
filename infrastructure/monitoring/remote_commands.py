"""
Remote command set and collection helpers shared by the SSH-based backends.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List

from domain.entities.process_entry import ProcessSamples
from domain.entities.resource_snapshot import ResourceSnapshot
from domain.exceptions import UpstreamFetchError
from domain.services.command_execution_service import ICommandSession
from infrastructure.parsers.command_output import (
    parse_df_disk,
    parse_docker_block_io,
    parse_docker_cpu,
    parse_docker_memory,
    parse_docker_ps,
    parse_free_memory,
    parse_ps_processes,
    parse_top_cpu,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemoteCommand:
    """A shell one-liner; optional commands may fail without aborting the request."""
    name: str
    command: str
    optional: bool = False


# ============== System figures ==============

CPU_COMMAND = RemoteCommand("cpu", "top -bn1 | grep 'Cpu(s)'")
MEMORY_COMMAND = RemoteCommand("memory", "free -m")
DISK_COMMAND = RemoteCommand("disk", "df -P -BG /")

# ============== Process lists ==============

HOST_CPU_COMMAND = RemoteCommand(
    "host_cpu", "ps -eo pid,user,comm,%cpu,%mem --sort=-%cpu | head -n 30"
)
HOST_MEMORY_COMMAND = RemoteCommand(
    "host_memory", "ps -eo pid,user,comm,%cpu,%mem --sort=-%mem | head -n 30"
)
DOCKER_CPU_COMMAND = RemoteCommand(
    "docker_cpu",
    "docker stats --no-stream --format '{{.Name}}\\t{{.CPUPerc}}\\t{{.MemUsage}}'",
    optional=True,
)
DOCKER_MEMORY_COMMAND = RemoteCommand(
    "docker_memory",
    "docker stats --no-stream --format '{{.Name}}\\t{{.MemUsage}}\\t{{.CPUPerc}}'",
    optional=True,
)
DOCKER_DISK_COMMAND = RemoteCommand(
    "docker_disk",
    "docker stats --no-stream --format '{{.Name}}\\t{{.BlockIO}}'",
    optional=True,
)
DOCKER_PS_COMMAND = RemoteCommand(
    "docker_ps",
    "docker ps --format '{{.Names}}\\t{{.ID}}\\t{{.Image}}'",
    optional=True,
)

SYSTEM_COMMANDS = (CPU_COMMAND, MEMORY_COMMAND, DISK_COMMAND)
DOCKER_COMMANDS = (DOCKER_CPU_COMMAND, DOCKER_MEMORY_COMMAND, DOCKER_DISK_COMMAND, DOCKER_PS_COMMAND)
HOST_COMMANDS = (HOST_CPU_COMMAND, HOST_MEMORY_COMMAND)


async def run_command(session: ICommandSession, command: RemoteCommand) -> str:
    """
    Run one command and return its stdout.

    A failed optional command yields empty output; any other failure
    aborts the request.
    """
    result = await session.execute(command.command)
    if result.success:
        return result.stdout
    if command.optional:
        logger.warning(
            f"Optional command '{command.name}' exited with {result.exit_code}: "
            f"{result.stderr[:200]}"
        )
        return ""
    raise UpstreamFetchError(
        f"Command '{command.name}' exited with {result.exit_code}: {result.stderr[:200]}"
    )


async def run_commands(
    session: ICommandSession,
    commands: Iterable[RemoteCommand],
    concurrent: bool = True,
) -> Dict[str, str]:
    """Run commands in parallel (or one by one) and key stdout by command name."""
    commands = list(commands)
    if concurrent:
        outputs: List[str] = await asyncio.gather(
            *(run_command(session, command) for command in commands)
        )
    else:
        outputs = []
        for command in commands:
            outputs.append(await run_command(session, command))
    return {command.name: output for command, output in zip(commands, outputs)}


def snapshot_from_outputs(outputs: Dict[str, str]) -> ResourceSnapshot:
    """Canonical snapshot from ``top``/``free``/``df`` output."""
    return ResourceSnapshot(
        cpu_percent=parse_top_cpu(outputs.get(CPU_COMMAND.name, "")),
        memory=parse_free_memory(outputs.get(MEMORY_COMMAND.name, "")),
        disk=parse_df_disk(outputs.get(DISK_COMMAND.name, "")),
    )


def samples_from_outputs(outputs: Dict[str, str]) -> ProcessSamples:
    """Unranked process lists from whichever docker/ps commands were run."""
    return ProcessSamples(
        container_cpu=parse_docker_cpu(outputs.get(DOCKER_CPU_COMMAND.name, "")),
        container_memory=parse_docker_memory(outputs.get(DOCKER_MEMORY_COMMAND.name, "")),
        container_disk=parse_docker_block_io(outputs.get(DOCKER_DISK_COMMAND.name, "")),
        host_by_cpu=parse_ps_processes(outputs.get(HOST_CPU_COMMAND.name, "")),
        host_by_memory=parse_ps_processes(outputs.get(HOST_MEMORY_COMMAND.name, "")),
        containers=parse_docker_ps(outputs.get(DOCKER_PS_COMMAND.name, "")),
    )
