"""Shared fixtures: polygons, a fake remote fetcher and an isolated session."""

import asyncio
import random

import pytest

from services.orchestrator import RefreshOrchestrator
from services.session import MapSession


# (lat, lng) rings
SMALL_SQUARE = [(0.0, 0.0), (0.0, 0.001), (0.001, 0.001), (0.001, 0.0)]
UNIT_SQUARE = [(0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0)]
TENTH_SQUARE = [(40.0, -3.0), (40.0, -2.9), (40.1, -2.9), (40.1, -3.0)]
L_SHAPE = [(0.0, 0.0), (1.0, 0.0), (1.0, 0.1), (0.1, 0.1), (0.1, 1.0), (0.0, 1.0)]
CROSS = [
    (0.45, 0.0), (0.55, 0.0), (0.55, 0.45), (1.0, 0.45), (1.0, 0.55), (0.55, 0.55),
    (0.55, 1.0), (0.45, 1.0), (0.45, 0.55), (0.0, 0.55), (0.0, 0.45), (0.45, 0.45),
]
TRIANGLE = [(40.0, -3.0), (40.5, -2.0), (41.0, -3.0)]


class FakeFetch:
    """Awaitable stand-in for the remote point query."""

    def __init__(self, value=12.0, fail=False, delay=0.0):
        self.value = value
        self.fail = fail
        self.delay = delay
        self.calls = []
        self.active = 0
        self.max_active = 0
        self.gate = None

    async def __call__(self, lat, lng, data_source, window):
        self.calls.append((lat, lng, data_source, window))
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.gate is not None:
                await self.gate.wait()
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.fail:
                raise ConnectionError("remote unavailable")
            return self.value(lat, lng, data_source) if callable(self.value) else self.value
        finally:
            self.active -= 1


@pytest.fixture
def fake_fetch():
    return FakeFetch()


@pytest.fixture
def orchestrator(fake_fetch):
    return RefreshOrchestrator(fake_fetch, pause_s=0, timeout_s=1.0, rng=random.Random(7))


@pytest.fixture
def session(orchestrator):
    return MapSession(orchestrator)
