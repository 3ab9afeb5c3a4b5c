"""Tests for batched, time-bounded point fetching."""

import asyncio

import pytest

from models import TimeWindow
from services.fetcher import fetch_batched, fetch_one
from conftest import FakeFetch

POINTS = [(float(i), float(i)) for i in range(7)]
WINDOW = TimeWindow(start=0, end=24)


class TestFetchBatched:

    @pytest.mark.asyncio
    async def test_order_preserved(self):
        fetch = FakeFetch(value=lambda lat, lng, src: lat * 10)
        values = await fetch_batched(POINTS, fetch, 'temperature_2m', WINDOW, pause_s=0)
        assert values == [i * 10.0 for i in range(7)]
        assert len(fetch.calls) == 7

    @pytest.mark.asyncio
    async def test_concurrency_bounded_by_batch_size(self):
        fetch = FakeFetch(delay=0.01)
        await fetch_batched(POINTS, fetch, 'temperature_2m', WINDOW, batch_size=3, pause_s=0)
        assert fetch.max_active == 3

    @pytest.mark.asyncio
    async def test_pause_between_batches_only(self, monkeypatch):
        pauses = []
        real_sleep = asyncio.sleep

        async def recording_sleep(delay, *args, **kwargs):
            if delay == 0.05:
                pauses.append(delay)
            return await real_sleep(0)

        monkeypatch.setattr(asyncio, 'sleep', recording_sleep)
        await fetch_batched(POINTS, FakeFetch(), 'temperature_2m', WINDOW, batch_size=3, pause_s=0.05)
        assert pauses == [0.05, 0.05]

    @pytest.mark.asyncio
    async def test_failures_are_isolated(self):
        async def flaky(lat, lng, src, window):
            if lat == 2.0:
                raise ConnectionError("boom")
            if lat == 4.0:
                return None
            return lat

        values = await fetch_batched(POINTS, flaky, 'temperature_2m', WINDOW, pause_s=0)
        assert values == [0.0, 1.0, None, 3.0, None, 5.0, 6.0]

    @pytest.mark.asyncio
    async def test_empty_points(self):
        assert await fetch_batched([], FakeFetch(), 'temperature_2m', WINDOW) == []

    @pytest.mark.asyncio
    async def test_invalid_batch_size(self):
        with pytest.raises(ValueError):
            await fetch_batched(POINTS, FakeFetch(), 'temperature_2m', WINDOW, batch_size=0)


class TestFetchOne:

    @pytest.mark.asyncio
    async def test_timeout_becomes_none(self):
        fetch = FakeFetch(delay=1.0)
        assert await fetch_one(fetch, (1.0, 2.0), 'temperature_2m', WINDOW, timeout_s=0.01) is None

    @pytest.mark.asyncio
    async def test_passes_arguments_through(self):
        fetch = FakeFetch(value=3.5)
        assert await fetch_one(fetch, (1.0, 2.0), 'temperature_2m', WINDOW) == 3.5
        assert fetch.calls == [(1.0, 2.0, 'temperature_2m', WINDOW)]
