"""
Shared fixtures for SatRisk tests.
"""
import asyncio
import time
from datetime import date

import pytest

from satrisk.core.domain.features import Coordinates, FeatureRecord


@pytest.fixture
def neutral_record():
    """Record whose basic normalized values are all zero except the calendar."""
    return FeatureRecord(
        scene_count=200,
        expected_scenes=200,
        avg_cloud_cover=0,
        quality_score=0.5,
        kp_index=0,
        solar_flux=100,
        temperature=20,
    )


@pytest.fixture
def nyc():
    return Coordinates(lat=40.7128, lon=-74.006)


@pytest.fixture
def summer_day():
    # Wednesday
    return date(2024, 7, 17)


@pytest.fixture
def loop_stall():
    """Await a coroutine and return (result, longest gap between 10 ms ticks)."""

    async def measure(coro):
        gaps = []
        finished = asyncio.Event()

        async def heartbeat():
            last = time.monotonic()
            while not finished.is_set():
                await asyncio.sleep(0.01)
                now = time.monotonic()
                gaps.append(now - last)
                last = now

        ticker = asyncio.create_task(heartbeat())
        try:
            result = await coro
        finally:
            finished.set()
            await ticker
        return result, max(gaps, default=0.0)

    return measure
