import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

import paramiko

from domain.exceptions import ConfigurationError, UpstreamFetchError
from domain.services.command_execution_service import CommandExecutionResult, ICommandSession
from shared.config.settings import SSHConfig

logger = logging.getLogger(__name__)


class SSHSession(ICommandSession):
    """Commands over one connected paramiko client"""

    def __init__(self, client: paramiko.SSHClient):
        self._client = client

    def _run(self, command: str) -> CommandExecutionResult:
        start_time = time.monotonic()
        _stdin, stdout, stderr = self._client.exec_command(command)
        stdout_str = stdout.read().decode('utf-8', errors='replace').strip()
        stderr_str = stderr.read().decode('utf-8', errors='replace').strip()
        exit_code = stdout.channel.recv_exit_status()
        return CommandExecutionResult(
            stdout=stdout_str,
            stderr=stderr_str,
            exit_code=exit_code,
            execution_time=time.monotonic() - start_time,
        )

    async def execute(self, command: str) -> CommandExecutionResult:
        """Execute command via SSH"""
        logger.debug(f"Executing SSH command: {command[:100]}")
        try:
            return await asyncio.to_thread(self._run, command)
        except (paramiko.SSHException, OSError) as e:
            logger.error(f"SSH execution error: {e}")
            raise UpstreamFetchError(f"SSH command failed: {e}") from e


class SSHCommandExecutor:
    """Opens password-authenticated SSH sessions to the monitored host"""

    def __init__(self, config: SSHConfig):
        self.config = config

    def _connect(self) -> paramiko.SSHClient:
        client = paramiko.SSHClient()
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        try:
            client.connect(
                hostname=self.config.host,
                port=self.config.port,
                username=self.config.user,
                password=self.config.password,
                look_for_keys=False,
                allow_agent=False,
            )
        except BaseException:
            client.close()
            raise
        return client

    @asynccontextmanager
    async def session(self) -> AsyncIterator[SSHSession]:
        """
        Open one session, closed again on success and on failure.

        Raises:
            ConfigurationError: host, user or password not configured.
            UpstreamFetchError: the connection or authentication failed.
        """
        missing = self.config.missing_keys
        if missing:
            raise ConfigurationError(f"SSH not configured (set {', '.join(missing)})")

        try:
            client = await asyncio.to_thread(self._connect)
        except (paramiko.SSHException, OSError) as e:
            logger.error(f"SSH connection to {self.config.host}:{self.config.port} failed: {e}")
            raise UpstreamFetchError(f"SSH connection failed: {e}") from e

        logger.info(f"SSH session opened to {self.config.user}@{self.config.host}:{self.config.port}")
        try:
            yield SSHSession(client)
        finally:
            client.close()
            logger.debug("SSH session closed")
