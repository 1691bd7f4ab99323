#!/usr/bin/env python3
"""
Server Stats API - normalized server metrics for the dashboard

Reads CPU, memory, disk and top consumers from whichever monitoring
source is configured and serves them as one JSON shape:
- Netdata chart API
- node_exporter metrics text + SSH process lists
- SSH commands only (concurrent or legacy sequential)

Architecture:
- Domain: Entities, units, ranking rules
- Application: Stats orchestration and session authorization
- Infrastructure: Backends, parsers, SSH, self-metrics
- Presentation: FastAPI routes
"""

import logging

import uvicorn

from infrastructure.monitoring.prometheus_exporter import start_metrics_server
from presentation.api.app import create_app
from shared.config.settings import Settings
from shared.container import Container
from shared.logging.config import setup_logging

logger = logging.getLogger(__name__)


def build_app(settings: Settings):
    """Wire settings, container and self-metrics into a FastAPI app."""
    container = Container(settings)
    app = create_app(container)

    if settings.monitoring.enabled:
        backend = None
        try:
            mode = container.backend_factory().configured_mode()
            backend = mode.value if mode else None
        except Exception as e:
            logger.warning(f"Backend configuration invalid at startup: {e}")
        start_metrics_server(settings.monitoring.metrics_port, backend=backend)

    return app


def main():
    """Main entry point"""
    settings = Settings.from_env()
    setup_logging(level=settings.log_level, log_dir=settings.log_dir)

    app = build_app(settings)
    logger.info(f"Starting Server Stats API on {settings.api_host}:{settings.api_port}")
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        pass
