"""
Dependency Injection Container

Centralizes all dependency creation and wiring.
Follows Dependency Inversion Principle - high-level modules don't
depend on low-level modules, both depend on abstractions.

Usage:
    container = Container(Settings.from_env())
    app = create_app(container)
"""

import logging
from typing import Optional

from shared.config.settings import Settings

logger = logging.getLogger(__name__)


class Container:
    """
    Dependency Injection Container.

    Manages the lifecycle of all application services and their dependencies.
    Each service is created lazily and cached (singleton pattern).
    Request-scoped resources (HTTP clients, SSH sessions) are not cached
    here; the backend factory opens them per request.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings.from_env()
        self._cache = {}

    # === Infrastructure Layer ===

    def ssh_executor(self):
        """Get or create SSHCommandExecutor"""
        if "ssh_executor" not in self._cache:
            from infrastructure.ssh.ssh_executor import SSHCommandExecutor
            self._cache["ssh_executor"] = SSHCommandExecutor(self.settings.ssh)
        return self._cache["ssh_executor"]

    def backend_factory(self):
        """Get or create BackendFactory"""
        if "backend_factory" not in self._cache:
            from infrastructure.monitoring.backend_factory import BackendFactory
            self._cache["backend_factory"] = BackendFactory(
                self.settings,
                ssh_executor=self.ssh_executor(),
            )
        return self._cache["backend_factory"]

    # === Service Layer ===

    def stats_service(self):
        """Get or create StatsService"""
        if "stats_service" not in self._cache:
            from application.services.stats_service import StatsService
            self._cache["stats_service"] = StatsService(
                self.settings,
                self.backend_factory(),
            )
        return self._cache["stats_service"]

    def auth_service(self):
        """Get or create AuthService"""
        if "auth_service" not in self._cache:
            from application.services.auth_service import AuthService
            self._cache["auth_service"] = AuthService(self.settings.auth)
        return self._cache["auth_service"]
