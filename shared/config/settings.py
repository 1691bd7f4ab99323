from dataclasses import dataclass, field
from typing import Optional
import os
from dotenv import load_dotenv

from domain.exceptions import ConfigurationError

load_dotenv()


def _env(name: str) -> Optional[str]:
    """Environment value with blank strings treated as unset."""
    value = os.getenv(name, "").strip()
    return value or None


def _env_int(name: str, default: int) -> int:
    """Integer environment value; blank falls back to the default."""
    value = _env(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"Invalid {name}: expected an integer, got {value!r}")


@dataclass
class NetdataConfig:
    """Netdata chart API configuration"""
    url: Optional[str] = None

    @classmethod
    def from_env(cls) -> "NetdataConfig":
        url = _env("NETDATA_URL")
        return cls(url=url.rstrip("/") if url else None)


@dataclass
class NodeExporterConfig:
    """node_exporter metrics-text endpoint"""
    url: Optional[str] = None

    @classmethod
    def from_env(cls) -> "NodeExporterConfig":
        return cls(url=_env("NODE_EXPORTER_URL"))


@dataclass
class SSHConfig:
    """SSH configuration for remote command execution"""
    host: Optional[str] = None
    port: int = 22
    user: Optional[str] = None
    password: Optional[str] = None

    @property
    def missing_keys(self) -> list[str]:
        """Env keys still required before a session can be opened"""
        required = {
            "SSH_HOST": self.host,
            "SSH_USER": self.user,
            "SSH_PASSWORD": self.password,
        }
        return [key for key, value in required.items() if not value]

    @property
    def is_configured(self) -> bool:
        return not self.missing_keys

    @classmethod
    def from_env(cls) -> "SSHConfig":
        return cls(
            host=_env("SSH_HOST"),
            port=_env_int("SSH_PORT", 22),
            user=_env("SSH_USER"),
            password=_env("SSH_PASSWORD"),
        )


@dataclass
class AuthConfig:
    """Session token verification and privileged identity"""
    jwt_secret: Optional[str] = None
    jwt_algorithm: str = "HS256"
    session_cookie: str = "session_token"
    allowed_email: Optional[str] = None

    @classmethod
    def from_env(cls) -> "AuthConfig":
        return cls(
            jwt_secret=_env("AUTH_JWT_SECRET"),
            jwt_algorithm=os.getenv("AUTH_JWT_ALGORITHM", "HS256"),
            session_cookie=os.getenv("AUTH_SESSION_COOKIE", "session_token"),
            allowed_email=_env("ALLOWED_EMAIL"),
        )


@dataclass
class ServerConfig:
    """Description of the monitored server shown on the dashboard"""
    name: str = "VPS Server"
    ip: str = ""
    description: Optional[str] = None

    @classmethod
    def from_env(cls) -> "ServerConfig":
        return cls(
            name=os.getenv("SERVER_NAME", "VPS Server"),
            ip=os.getenv("SERVER_IP", ""),
            description=_env("SERVER_DESCRIPTION"),
        )


@dataclass
class MonitoringConfig:
    """Self-instrumentation configuration"""
    enabled: bool = False
    metrics_port: int = 9090

    @classmethod
    def from_env(cls) -> "MonitoringConfig":
        return cls(
            enabled=os.getenv("MONITORING_ENABLED", "false").lower() == "true",
            metrics_port=_env_int("METRICS_PORT", 9090),
        )


@dataclass
class Settings:
    """Application settings"""
    netdata: NetdataConfig = field(default_factory=NetdataConfig)
    node_exporter: NodeExporterConfig = field(default_factory=NodeExporterConfig)
    ssh: SSHConfig = field(default_factory=SSHConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)
    backend: Optional[str] = None  # forced backend mode, auto-selected when unset
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"
    log_dir: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            netdata=NetdataConfig.from_env(),
            node_exporter=NodeExporterConfig.from_env(),
            ssh=SSHConfig.from_env(),
            auth=AuthConfig.from_env(),
            server=ServerConfig.from_env(),
            monitoring=MonitoringConfig.from_env(),
            backend=_env("STATS_BACKEND"),
            api_host=os.getenv("API_HOST", "0.0.0.0"),
            api_port=_env_int("API_PORT", 8000),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_dir=_env("LOG_DIR"),
        )
