import logging
import math
from typing import Optional, Dict, Any, List

from address_mapper.geocoding.geometry import distance_to_polyline_m
from address_mapper.geocoding.upstream import post_form
from address_mapper.models.address import CrossStreetCandidate, CrossStreets

OVERPASS_URL = "https://overpass-api.de/api/interpreter"

DEFAULT_RADIUS_M = 60
MIN_RADIUS_M = 40
MAX_RADIUS_M = 120
MAX_CANDIDATES = 3

# Non-vehicular ways never name a cross street
SKIPPED_HIGHWAYS = {"footway", "path", "cycleway", "steps", "bridleway", "track"}

# Get logger
logger = logging.getLogger(__name__)


def clamp_radius(value: Any) -> float:
    """Parse a radius in metres; missing, zero or garbage means the default."""
    try:
        radius = float(value)
    except (TypeError, ValueError):
        radius = 0.0
    if not radius or math.isnan(radius):
        radius = DEFAULT_RADIUS_M
    return max(MIN_RADIUS_M, min(MAX_RADIUS_M, radius))


def build_query(latitude: float, longitude: float, radius: float) -> str:
    return (
        "[out:json][timeout:25];\n"
        "(\n"
        f"  way(around:{radius:g},{latitude},{longitude})[highway][name];\n"
        ");\n"
        "(._;>;);\n"
        "out body;"
    )


def rank_ways(latitude: float, longitude: float, elements: List[Dict[str, Any]]) -> List[CrossStreetCandidate]:
    """
    Rank named vehicular ways by distance to the point, closest first,
    keeping one entry per (case-insensitive) street name.
    """
    nodes = {el["id"]: el for el in elements if el.get("type") == "node" and "id" in el}

    ways = []
    for el in elements:
        if el.get("type") != "way":
            continue
        tags = el.get("tags") or {}
        name = tags.get("name")
        highway = tags.get("highway")
        if not name or not highway or highway in SKIPPED_HIGHWAYS:
            continue
        points = [
            (nodes[node_id]["lat"], nodes[node_id]["lon"])
            for node_id in el.get("nodes") or []
            if node_id in nodes
        ]
        if len(points) < 2:
            continue
        ways.append((distance_to_polyline_m(latitude, longitude, points), name))

    ways.sort(key=lambda w: w[0])

    unique: List[CrossStreetCandidate] = []
    seen = set()
    for distance, name in ways:
        if name.lower() in seen:
            continue
        seen.add(name.lower())
        unique.append(CrossStreetCandidate(name=name, distance=distance))
        if len(unique) >= MAX_CANDIDATES:
            break
    return unique


def cross_streets(latitude: float, longitude: float, radius: Optional[Any] = None) -> CrossStreets:
    radius_m = clamp_radius(radius)
    query = build_query(latitude, longitude, radius_m)
    data = post_form("Overpass", OVERPASS_URL, data={"data": query})

    elements = data.get("elements") if isinstance(data, dict) else None
    candidates = rank_ways(latitude, longitude, elements or [])
    logger.info(f"Found {len(candidates)} candidate streets around ({latitude}, {longitude}) within {radius_m:g}m")
    return CrossStreets(
        between=[c.name for c in candidates[:2]],
        candidates=candidates
    )
