"""
Pytest configuration and shared fixtures for the test suite.
"""

from unittest.mock import Mock

import pytest

from command_fixtures import command_outputs, scripted_session
from shared.config.settings import (
    AuthConfig,
    NetdataConfig,
    NodeExporterConfig,
    Settings,
    SSHConfig,
)


# ============================================================================
# Settings Fixtures
# ============================================================================

@pytest.fixture
def ssh_config() -> SSHConfig:
    return SSHConfig(host="203.0.113.10", port=22, user="monitor", password="secret")


@pytest.fixture
def settings(ssh_config: SSHConfig) -> Settings:
    """Settings with every backend configured."""
    return Settings(
        netdata=NetdataConfig(url="http://netdata.test:19999"),
        node_exporter=NodeExporterConfig(url="http://node.test:9100/metrics"),
        ssh=ssh_config,
        auth=AuthConfig(jwt_secret="test-secret-0123456789abcdef0123456789", allowed_email="admin@example.com"),
    )


@pytest.fixture
def empty_settings() -> Settings:
    """Settings with no backend configured."""
    return Settings()


# ============================================================================
# Mock Fixtures
# ============================================================================

@pytest.fixture
def session_mock() -> Mock:
    """SSH session answering every remote command with captured output."""
    return scripted_session(command_outputs())
