import math
from typing import Optional, Sequence, Tuple

from shapely.geometry import Polygon

# Points are (lat, lng) pairs throughout
KM_PER_DEG_LAT = 111.0
MIN_AREA_KM2 = 0.1


def bounding_box(points: Sequence[Tuple[float, float]]) -> Optional[Tuple[float, float, float, float]]:
    """Return (south, west, north, east) or None for an empty ring."""
    if not points:
        return None
    lats = [p[0] for p in points]
    lngs = [p[1] for p in points]
    return min(lats), min(lngs), max(lats), max(lngs)


def km_per_deg_lng(lat: float) -> float:
    return KM_PER_DEG_LAT * math.cos(math.radians(lat))


def approximate_area_km2(points: Sequence[Tuple[float, float]]) -> float:
    """Bounding-box area in km² using an equirectangular approximation.

    Only drives sampling density, so the planar shortcut is good enough.
    Rings with fewer than 3 vertices return 0.
    """
    if not points or len(points) < 3:
        return 0.0
    south, west, north, east = bounding_box(points)
    avg_lat = (north + south) / 2
    lat_km = (north - south) * KM_PER_DEG_LAT
    lng_km = (east - west) * km_per_deg_lng(avg_lat)
    return max(lat_km * lng_km, MIN_AREA_KM2)


def point_in_polygon(point: Tuple[float, float], points: Sequence[Tuple[float, float]]) -> bool:
    """Ray-casting parity test. Degenerate input returns False."""
    if point is None or not points or len(points) < 3:
        return False
    x, y = point
    inside = False
    j = len(points) - 1
    for i in range(len(points)):
        xi, yi = points[i]
        xj, yj = points[j]
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside


def polygon_centroid(points: Sequence[Tuple[float, float]]) -> Optional[Tuple[float, float]]:
    """Area-weighted centroid of the ring; vertex mean when it has no area."""
    if not points:
        return None
    if len(points) >= 3:
        poly = Polygon(points)
        if poly.area > 0:
            c = poly.centroid
            return c.x, c.y
    lat = sum(p[0] for p in points) / len(points)
    lng = sum(p[1] for p in points) / len(points)
    return lat, lng
