"""
Command Execution Service

Result type and session contract for running shell commands on the
monitored host.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class CommandExecutionResult:
    """
    Result of command execution.

    Used by SSHSession and the remote-exec backends.
    """
    stdout: str
    stderr: str
    exit_code: int
    execution_time: float

    @property
    def success(self) -> bool:
        """Check if command executed successfully"""
        return self.exit_code == 0

    @property
    def full_output(self) -> str:
        """Get combined stdout and stderr"""
        result = self.stdout
        if self.stderr:
            result += f"\n[STDERR]: {self.stderr}"
        return result


class ICommandSession(ABC):
    """An open remote-exec session, valid for one request"""

    @abstractmethod
    async def execute(self, command: str) -> CommandExecutionResult:
        """Run a shell command and capture its output and exit status"""
        pass
