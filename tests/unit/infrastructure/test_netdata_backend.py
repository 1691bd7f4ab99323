"""Tests for the Netdata backend."""

import httpx
import pytest

from domain.exceptions import UpstreamFetchError
from domain.value_objects.units import GIB, MIB
from infrastructure.monitoring.netdata_backend import (
    ChartRow,
    NetdataBackend,
    cpu_from_chart,
    find_disk_chart,
    memory_from_chart,
)

BASE_URL = "http://netdata.test:19999"

CHARTS = {
    "system.cpu": {
        "labels": ["time", "guest_nice", "guest", "steal", "softirq", "irq", "user", "system", "nice", "iowait"],
        "data": [[1700000000, 0, 0, 0, 0.5, 0, 10.0, 4.5, 0, 1.0]],
    },
    "system.ram": {
        "labels": ["time", "free", "used", "cached", "buffers"],
        "data": [[1700000000, 1024.0, 2048.0, 768.0, 256.0]],
    },
    "disk_space._": {
        "labels": ["time", "avail", "used", "reserved for root"],
        "data": [[1700000000, 30.0, 10.0, 2.0]],
    },
}


def netdata_handler(charts=CHARTS, catalog=None, status_code=200):
    catalog = catalog if catalog is not None else {"charts": {"system.cpu": {}, "disk_space._": {}}}

    def handler(request: httpx.Request) -> httpx.Response:
        if status_code != 200:
            return httpx.Response(status_code)
        if request.url.path == "/api/v1/charts":
            return httpx.Response(200, json=catalog)
        chart = request.url.params["chart"]
        assert request.url.params["after"] == "-1"
        assert request.url.params["format"] == "json"
        return httpx.Response(200, json=charts[chart])

    return handler


class TestChartHelpers:
    """Tests for chart selection and row arithmetic."""

    def test_first_disk_space_chart(self):
        catalog = {"charts": {"system.cpu": {}, "disk_space._data": {}, "disk_space._": {}}}
        assert find_disk_chart(catalog) == "disk_space._data"

    def test_fallback_disk_chart(self):
        assert find_disk_chart({"charts": {"system.cpu": {}}}) == "disk_space._"
        assert find_disk_chart({}) == "disk_space._"

    def test_cpu_sums_dimensions(self):
        assert cpu_from_chart(ChartRow(CHARTS["system.cpu"])) == pytest.approx(16.0)

    def test_cpu_clamped(self):
        row = ChartRow({"labels": ["time", "user", "system"], "data": [[0, 80.0, 70.0]]})
        assert cpu_from_chart(row) == 100.0

    def test_memory_total_is_sum(self):
        usage = memory_from_chart(ChartRow(CHARTS["system.ram"]))
        assert usage.used_bytes == 2048 * MIB
        assert usage.total_bytes == 4096 * MIB

    def test_missing_labels_count_as_zero(self):
        row = ChartRow({"labels": ["time"], "data": []})
        assert row.get("used") == 0.0
        assert row.sum_without_time() == 0.0


class TestNetdataBackend:
    """Tests for NetdataBackend over a mocked HTTP transport."""

    @pytest.mark.asyncio
    async def test_fetch_system_metrics(self):
        async with httpx.AsyncClient(transport=httpx.MockTransport(netdata_handler())) as client:
            snapshot = await NetdataBackend(client, BASE_URL + "/").fetch_system_metrics()
        assert snapshot.cpu_percent == pytest.approx(16.0)
        assert snapshot.memory.total_bytes == 4096 * MIB
        assert snapshot.disk.used_bytes == 10 * GIB
        assert snapshot.disk.total_bytes == 40 * GIB

    @pytest.mark.asyncio
    async def test_no_process_rankings(self):
        async with httpx.AsyncClient(transport=httpx.MockTransport(netdata_handler())) as client:
            assert await NetdataBackend(client, BASE_URL).fetch_process_rankings() is None

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        transport = httpx.MockTransport(netdata_handler(status_code=503))
        async with httpx.AsyncClient(transport=transport) as client:
            with pytest.raises(UpstreamFetchError):
                await NetdataBackend(client, BASE_URL).fetch_system_metrics()

    @pytest.mark.asyncio
    async def test_chart_failure_aborts(self):
        charts = dict(CHARTS)
        del charts["system.ram"]

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.params.get("chart") == "system.ram":
                return httpx.Response(404)
            return netdata_handler(charts)(request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(UpstreamFetchError) as exc_info:
                await NetdataBackend(client, BASE_URL).fetch_system_metrics()
        assert "system.ram" in exc_info.value.details

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(UpstreamFetchError):
                await NetdataBackend(client, BASE_URL).fetch_system_metrics()

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>proxy error</html>")

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(UpstreamFetchError):
                await NetdataBackend(client, BASE_URL).fetch_system_metrics()
