"""
Prometheus metrics exporter.

Exposes the service's own request counters for Prometheus scraping.
Uses start_http_server() which runs in a background thread
(does not conflict with the uvicorn event loop).
"""

import logging
from typing import Optional

from prometheus_client import Counter, Gauge, Info, start_http_server

logger = logging.getLogger(__name__)

# ============== Request Counters ==============

stats_requests_total = Counter(
    'stats_requests_total',
    'Stats requests handled',
    ['backend', 'outcome']  # ok, config_error, upstream_error
)
stats_upstream_errors_total = Counter(
    'stats_upstream_errors_total',
    'Failed fetches from a monitoring backend',
    ['backend']
)

# ============== Last Observed Values ==============

last_cpu_percent = Gauge(
    'stats_last_cpu_percent',
    'CPU usage reported by the most recent successful request'
)

# ============== Service Info ==============

service_info = Info('stats_service', 'Stats service information')


def record_request(backend: Optional[str], outcome: str, cpu_percent: Optional[float] = None) -> None:
    """Count one stats request and remember its CPU figure."""
    label = backend or "none"
    stats_requests_total.labels(backend=label, outcome=outcome).inc()
    if outcome == "upstream_error":
        stats_upstream_errors_total.labels(backend=label).inc()
    if cpu_percent is not None:
        last_cpu_percent.set(cpu_percent)


def start_metrics_server(port: int = 9090, backend: Optional[str] = None) -> None:
    """
    Start Prometheus HTTP metrics server in a background thread.

    Metrics are available at http://localhost:{port}/metrics
    """
    try:
        service_info.info({"backend": backend or "none"})
        start_http_server(port)
        logger.info(f"Prometheus metrics server started on port {port}")
    except Exception as e:
        logger.error(f"Failed to start Prometheus metrics server: {e}")
