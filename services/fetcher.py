"""Batched, time-bounded point fetching.

Points are fetched ``batch_size`` at a time; calls inside a batch run
concurrently and batches are separated by a short pause to stay polite
toward the remote service.
"""
import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple

from config import FETCH_BATCH_PAUSE_S, FETCH_BATCH_SIZE, FETCH_TIMEOUT_S
from models import TimeWindow

logger = logging.getLogger(__name__)

# (lat, lng, data_source, window) -> scalar or None
ValueFetch = Callable[[float, float, str, Optional[TimeWindow]], Awaitable[Optional[float]]]


async def fetch_one(fetch: ValueFetch, point: Tuple[float, float], data_source: str,
                    window: Optional[TimeWindow], timeout_s: float = FETCH_TIMEOUT_S) -> Optional[float]:
    lat, lng = point
    try:
        return await asyncio.wait_for(fetch(lat, lng, data_source, window), timeout=timeout_s)
    except asyncio.TimeoutError:
        logger.warning("Fetch timed out after %.1fs at (%.4f, %.4f)", timeout_s, lat, lng)
    except Exception as e:
        logger.warning("Failed to fetch %s at (%.4f, %.4f): %s", data_source, lat, lng, e)
    return None


async def fetch_batched(points: Sequence[Tuple[float, float]], fetch: ValueFetch, data_source: str,
                        window: Optional[TimeWindow], batch_size: int = FETCH_BATCH_SIZE,
                        pause_s: float = FETCH_BATCH_PAUSE_S,
                        timeout_s: float = FETCH_TIMEOUT_S) -> List[Optional[float]]:
    """Resolve every point to a scalar or None, preserving input order."""
    if batch_size < 1:
        raise ValueError("batch_size must be >= 1")
    results: List[Optional[float]] = []
    for i in range(0, len(points), batch_size):
        batch = points[i:i + batch_size]
        values = await asyncio.gather(*(fetch_one(fetch, p, data_source, window, timeout_s) for p in batch))
        results.extend(values)
        if i + batch_size < len(points) and pause_s > 0:
            await asyncio.sleep(pause_s)
    return results
