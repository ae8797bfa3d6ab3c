"""
Distance Calculations for Cross-Street Lookup

Point-to-polyline distances in metres using a local equirectangular
approximation around the query point. Accurate enough for the 40-120 m
radius the Overpass lookup works in.
"""

import math
from typing import Sequence, Tuple

METERS_PER_DEG_LON_EQUATOR = 111320.0
METERS_PER_DEG_LAT = 110540.0

LatLon = Tuple[float, float]


def _to_xy(lat: float, lon: float, ref_lat: float) -> Tuple[float, float]:
    x = lon * METERS_PER_DEG_LON_EQUATOR * math.cos(math.radians(ref_lat))
    y = lat * METERS_PER_DEG_LAT
    return x, y


def distance_to_segment_m(lat: float, lon: float,
                          lat1: float, lon1: float,
                          lat2: float, lon2: float) -> float:
    """Shortest distance from (lat, lon) to the segment (lat1, lon1)-(lat2, lon2)."""
    px, py = _to_xy(lat, lon, lat)
    x1, y1 = _to_xy(lat1, lon1, lat)
    x2, y2 = _to_xy(lat2, lon2, lat)

    dx, dy = x2 - x1, y2 - y1
    len2 = dx * dx + dy * dy
    if len2 == 0:
        return math.hypot(px - x1, py - y1)

    t = ((px - x1) * dx + (py - y1) * dy) / len2
    t = max(0.0, min(1.0, t))
    cx, cy = x1 + t * dx, y1 + t * dy
    return math.hypot(px - cx, py - cy)


def distance_to_polyline_m(lat: float, lon: float, points: Sequence[LatLon]) -> float:
    """
    Minimum distance from a point to any segment of a polyline.
    Returns inf for polylines with fewer than two points.
    """
    best = float("inf")
    for (lat1, lon1), (lat2, lon2) in zip(points, points[1:]):
        d = distance_to_segment_m(lat, lon, lat1, lon1, lat2, lon2)
        if d < best:
            best = d
    return best
