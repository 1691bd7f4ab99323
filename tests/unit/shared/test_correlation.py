"""Tests for correlation ID module."""

import asyncio

import pytest

from shared.logging.correlation import (
    get_correlation_id,
    set_correlation_id,
    generate_correlation_id,
)


class TestCorrelationId:
    """Tests for correlation_id contextvars."""

    def test_default_is_none(self):
        """correlation_id is None once reset."""
        set_correlation_id(None)
        assert get_correlation_id() is None

    def test_set_and_get(self):
        set_correlation_id("api-abc12345")
        assert get_correlation_id() == "api-abc12345"
        set_correlation_id(None)

    def test_api_prefix(self):
        """generate_correlation_id produces {prefix}{8hex}."""
        cid = generate_correlation_id("api-")
        assert cid.startswith("api-")
        assert len(cid) == 12

    def test_generate_without_prefix(self):
        cid = generate_correlation_id()
        assert len(cid) == 8
        assert all(c in "0123456789abcdef" for c in cid)

    def test_generate_unique(self):
        ids = {generate_correlation_id() for _ in range(100)}
        assert len(ids) == 100

    @pytest.mark.asyncio
    async def test_visible_in_worker_thread(self):
        """SSH calls run in to_thread; the id must follow them."""
        set_correlation_id("api-thread01")
        try:
            assert await asyncio.to_thread(get_correlation_id) == "api-thread01"
        finally:
            set_correlation_id(None)

    @pytest.mark.asyncio
    async def test_isolated_between_tasks(self):
        async def request(cid: str) -> str:
            set_correlation_id(cid)
            await asyncio.sleep(0)
            return get_correlation_id()

        results = await asyncio.gather(request("api-aaaa0001"), request("api-bbbb0002"))
        assert results == ["api-aaaa0001", "api-bbbb0002"]
