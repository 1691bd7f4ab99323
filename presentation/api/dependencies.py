"""FastAPI dependency injection: bridges DI container to FastAPI's Depends()."""

import logging
from typing import Optional

from shared.container import Container

logger = logging.getLogger(__name__)

# Module-level container reference, set during app creation
_container: Optional[Container] = None


def set_container(container: Container) -> None:
    """Set the DI container for FastAPI dependencies."""
    global _container
    _container = container
    logger.info("REST API: DI container connected")


def get_container() -> Container:
    """Get the DI container."""
    if _container is None:
        raise RuntimeError("DI container not initialized. Call set_container() first.")
    return _container


def get_stats_service():
    """Get StatsService from container."""
    return get_container().stats_service()


def get_auth_service():
    """Get AuthService from container."""
    return get_container().auth_service()
