"""Tests for the SSH backends and remote command helpers."""

import pytest

from command_fixtures import command_outputs, failed, scripted_session
from domain.exceptions import UpstreamFetchError
from domain.value_objects.backend_mode import BackendMode
from domain.value_objects.units import GIB, MIB
from infrastructure.monitoring.remote_commands import (
    DOCKER_CPU_COMMAND,
    MEMORY_COMMAND,
    run_command,
    run_commands,
)
from infrastructure.monitoring.ssh_backend import LegacySSHBackend, SSHBackend


def executed(session) -> list:
    return [call.args[0] for call in session.execute.await_args_list]


class TestRunCommand:
    """Tests for single command execution."""

    @pytest.mark.asyncio
    async def test_returns_stdout(self, session_mock):
        stdout = await run_command(session_mock, MEMORY_COMMAND)
        assert stdout.startswith("              total")

    @pytest.mark.asyncio
    async def test_required_command_failure_raises(self):
        session = scripted_session({}, failing={"free -m": failed("free: not found")})
        with pytest.raises(UpstreamFetchError) as exc_info:
            await run_command(session, MEMORY_COMMAND)
        assert "free: not found" in exc_info.value.details

    @pytest.mark.asyncio
    async def test_optional_command_failure_is_empty(self):
        session = scripted_session({}, failing={"docker stats": failed("docker: not found")})
        assert await run_command(session, DOCKER_CPU_COMMAND) == ""

    @pytest.mark.asyncio
    async def test_outputs_keyed_by_name(self, session_mock):
        outputs = await run_commands(session_mock, [MEMORY_COMMAND, DOCKER_CPU_COMMAND])
        assert set(outputs) == {"memory", "docker_cpu"}


class TestSSHBackend:
    """Tests for the concurrent SSH backend."""

    @pytest.mark.asyncio
    async def test_system_metrics(self, session_mock):
        snapshot = await SSHBackend(session_mock).fetch_system_metrics()
        assert snapshot.cpu_percent == pytest.approx(4.7)
        assert snapshot.memory.total_bytes == 1024 * MIB
        assert snapshot.memory.used_bytes == 512 * MIB
        assert snapshot.disk.total_bytes == 40 * GIB

    @pytest.mark.asyncio
    async def test_memory_from_free_in_mib(self):
        outputs = command_outputs()
        outputs["free -m"] = (
            "              total        used        free\n"
            "Mem:           1000         400         600\n"
        )
        snapshot = await SSHBackend(scripted_session(outputs)).fetch_system_metrics()
        assert snapshot.memory.to_dict() == {"used": 400 * 1024 ** 2, "total": 1000 * 1024 ** 2}

    @pytest.mark.asyncio
    async def test_process_samples_include_host(self, session_mock):
        samples = await SSHBackend(session_mock).fetch_process_rankings()
        assert [e.name for e in samples.container_cpu] == ["web", "db"]
        assert [p.name for p in samples.host_by_cpu] == ["nginx", "postgres"]
        assert samples.containers["web"].image == "nginx:latest"

    @pytest.mark.asyncio
    async def test_unparseable_figures_become_none(self):
        outputs = command_outputs()
        outputs["free -m"] = "garbage"
        outputs["top -bn1"] = ""
        snapshot = await SSHBackend(scripted_session(outputs)).fetch_system_metrics()
        assert snapshot.memory is None
        assert snapshot.cpu_percent is None
        assert snapshot.disk is not None

    @pytest.mark.asyncio
    async def test_docker_missing_still_ranks_host(self):
        session = scripted_session(command_outputs(), failing={"docker": failed("docker: not found")})
        samples = await SSHBackend(session).fetch_process_rankings()
        assert samples.container_cpu == []
        assert samples.containers == {}
        assert len(samples.host_by_cpu) == 2

    @pytest.mark.asyncio
    async def test_ps_failure_aborts(self):
        session = scripted_session(command_outputs(), failing={"ps -eo": failed("ps: error", 1)})
        with pytest.raises(UpstreamFetchError):
            await SSHBackend(session).fetch_process_rankings()


class TestLegacySSHBackend:
    """Tests for the sequential Docker-only SSH backend."""

    def test_mode(self):
        backend = LegacySSHBackend(scripted_session({}))
        assert backend.mode is BackendMode.SSH_LEGACY
        assert backend.concurrent is False

    @pytest.mark.asyncio
    async def test_no_host_processes(self, session_mock):
        samples = await LegacySSHBackend(session_mock).fetch_process_rankings()
        assert samples.host_by_cpu == []
        assert not any("ps -eo" in command for command in executed(session_mock))

    @pytest.mark.asyncio
    async def test_commands_run_in_order(self, session_mock):
        await LegacySSHBackend(session_mock).fetch_system_metrics()
        commands = executed(session_mock)
        assert commands[0].startswith("top")
        assert commands[1] == "free -m"
        assert commands[2].startswith("df")
