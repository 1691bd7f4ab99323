"""Backend mode value object.

Defines the available telemetry acquisition backends.
"""

from enum import Enum


class BackendMode(str, Enum):
    """Monitoring backend used to build a stats report.

    NETDATA       : Netdata chart API over HTTP, no process rankings.
    NODE_EXPORTER : node_exporter metrics text + SSH for process lists.
    SSH           : every figure from remote commands, run in parallel.
    SSH_LEGACY    : remote commands one at a time, Docker-only rankings.
    """

    NETDATA = "netdata"
    NODE_EXPORTER = "node-exporter"
    SSH = "ssh"
    SSH_LEGACY = "ssh-legacy"

    @property
    def uses_remote_exec(self) -> bool:
        """Whether this backend runs shell commands on the monitored host."""
        return self is not BackendMode.NETDATA

    @property
    def description(self) -> str:
        """Default server description for this backend."""
        return {
            BackendMode.NETDATA: "Monitored by Netdata",
            BackendMode.NODE_EXPORTER: "Monitored by node_exporter + SSH",
            BackendMode.SSH: "Monitored via SSH",
            BackendMode.SSH_LEGACY: "Monitored via SSH (legacy)",
        }[self]
