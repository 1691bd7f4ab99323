"""Tests for the service's own Prometheus counters."""

from unittest.mock import patch

from prometheus_client import REGISTRY

from infrastructure.monitoring import prometheus_exporter


def sample(name: str, **labels) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


class TestRecordRequest:
    """Tests for record_request."""

    def test_ok_sets_cpu_gauge(self):
        before = sample("stats_requests_total", backend="netdata", outcome="ok")
        prometheus_exporter.record_request("netdata", "ok", 37.5)
        assert sample("stats_requests_total", backend="netdata", outcome="ok") == before + 1
        assert sample("stats_last_cpu_percent") == 37.5

    def test_upstream_error_counted_per_backend(self):
        before = sample("stats_upstream_errors_total", backend="ssh")
        prometheus_exporter.record_request("ssh", "upstream_error")
        assert sample("stats_upstream_errors_total", backend="ssh") == before + 1

    def test_missing_backend_label(self):
        before = sample("stats_requests_total", backend="none", outcome="config_error")
        prometheus_exporter.record_request(None, "config_error")
        assert sample("stats_requests_total", backend="none", outcome="config_error") == before + 1


class TestStartMetricsServer:
    """Tests for start_metrics_server."""

    def test_starts_on_port(self):
        with patch("infrastructure.monitoring.prometheus_exporter.start_http_server") as start:
            prometheus_exporter.start_metrics_server(9191, backend="ssh")
        start.assert_called_once_with(9191)

    def test_bind_failure_logged(self):
        with patch(
            "infrastructure.monitoring.prometheus_exporter.start_http_server",
            side_effect=OSError("Address already in use"),
        ):
            prometheus_exporter.start_metrics_server(9191)
