"""Sampling planner: how densely to sample a region and where.

The grid is laid over the region's bounding box and one candidate point is
taken per cell. Only candidates inside the ring are kept.
"""
import logging
import math
import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from utils_pkg import approximate_area_km2, bounding_box, point_in_polygon, polygon_centroid

logger = logging.getLogger(__name__)

MIN_RESOLUTION = 2
MAX_RESOLUTION = 8
TARGET_DENSITY = 0.3  # points per km² driving the dynamic resolution

# (max area km², grid side)
_AREA_BRACKETS = [
    (1, 2),
    (10, 3),
    (50, 4),
    (200, 5),
    (500, 6),
]
_LARGEST_BRACKET = 7

# Resolutions up to this use the cell centre; above it offsets are randomized
DETERMINISTIC_MAX_RESOLUTION = 3
OFFSET_RANGE = (0.3, 0.7)
VERTEX_NUDGE = 0.1

_rng = random.Random()


@dataclass
class SamplingPlan:
    area_km2: float
    resolution: int
    points: List[Tuple[float, float]] = field(default_factory=list)

    @property
    def candidate_count(self) -> int:
        return self.resolution * self.resolution


def choose_grid_resolution(area_km2: float) -> int:
    """Grid side length for a region of the given area.

    Larger of a bracket lookup and a density formula clamped to [2, 8].
    """
    bracket = _LARGEST_BRACKET
    for max_area, size in _AREA_BRACKETS:
        if area_km2 <= max_area:
            bracket = size
            break
    dynamic = math.ceil(math.sqrt(max(area_km2, 0.0) * TARGET_DENSITY))
    dynamic = max(MIN_RESOLUTION, min(MAX_RESOLUTION, dynamic))
    return max(bracket, dynamic)


def _fallback_point(points: Sequence[Tuple[float, float]]) -> Tuple[float, float]:
    centroid = polygon_centroid(points)
    if point_in_polygon(centroid, points):
        return centroid
    # Vertices sit on the boundary; pull each one slightly toward the centroid
    for lat, lng in points:
        candidate = (lat + (centroid[0] - lat) * VERTEX_NUDGE, lng + (centroid[1] - lng) * VERTEX_NUDGE)
        if point_in_polygon(candidate, points):
            return candidate
    return centroid


def generate_sample_points(points: Sequence[Tuple[float, float]], rng: Optional[random.Random] = None,
                           resolution: Optional[int] = None) -> List[Tuple[float, float]]:
    """Interior sample coordinates for a ring of (lat, lng) vertices.

    ``rng`` supplies the per-cell offsets used when the resolution is above 3;
    pass a seeded ``random.Random`` for reproducible output.
    """
    if not points or len(points) < 3:
        logger.warning("Invalid polygon data for grid generation (%d vertices)", len(points) if points else 0)
        return []
    rng = rng or _rng

    south, west, north, east = bounding_box(points)
    if resolution is None:
        resolution = choose_grid_resolution(approximate_area_km2(points))

    lat_step = (north - south) / resolution
    lng_step = (east - west) / resolution
    if lat_step <= 0 or lng_step <= 0:
        logger.warning("Degenerate polygon bounds, sampling the centroid only")
        return [polygon_centroid(points)]

    samples = []
    for i in range(resolution):
        for j in range(resolution):
            if resolution <= DETERMINISTIC_MAX_RESOLUTION:
                lat_offset = lng_offset = 0.5
            else:
                lat_offset = rng.uniform(*OFFSET_RANGE)
                lng_offset = rng.uniform(*OFFSET_RANGE)
            lat = south + (i + lat_offset) * lat_step
            lng = west + (j + lng_offset) * lng_step
            if point_in_polygon((lat, lng), points):
                samples.append((lat, lng))

    if not samples:
        logger.warning("No grid points found inside polygon, using fallback strategies")
        samples.append(_fallback_point(points))
    return samples


def plan_sampling(points: Sequence[Tuple[float, float]], rng: Optional[random.Random] = None) -> SamplingPlan:
    area = approximate_area_km2(points)
    resolution = choose_grid_resolution(area) if area > 0 else MIN_RESOLUTION
    return SamplingPlan(
        area_km2=area,
        resolution=resolution,
        points=generate_sample_points(points, rng=rng, resolution=resolution),
    )
