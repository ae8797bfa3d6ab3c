"""
Provider chaining for forward geocoding.

Intersection-style queries ("Rivadavia y Lacarra", "Rivadavia & Lacarra",
"Rivadavia / Lacarra") go to the Georef intersections endpoint first. Anything
else, or an intersection Georef cannot place, goes to the selected engine.
The first non-empty result set wins; there is no ranking across providers.
"""
import logging
import re
from typing import Optional, Dict, Any, List, Tuple

from address_mapper import config
from address_mapper.geocoding import georef, mapbox, nominatim

# Get logger
logger = logging.getLogger(__name__)

ENGINES = {
    "nominatim": nominatim,
    "georef": georef,
    "mapbox": mapbox,
}
AUTO_ENGINE = "auto"
AUTO_ORDER = ("georef", "nominatim", "mapbox")

INTERSECTION_PATTERN = re.compile(r"^(.+?)(?:\s+y\s+|\s*[&/]\s*)(.+)$", re.IGNORECASE)


def parse_intersection(text: str) -> Optional[Tuple[str, str]]:
    """Split "A y B", "A & B" or "A / B" into its two street names."""
    normalized = re.sub(r"\s+", " ", text or "").strip()
    match = INTERSECTION_PATTERN.match(normalized)
    if not match:
        return None
    street_a = match.group(1).strip()
    street_b = match.group(2).strip()
    if not street_a or not street_b:
        return None
    return street_a, street_b


def resolve_engine(engine: Optional[str]) -> str:
    name = (engine or config.GEOCODER_ENGINE or "nominatim").strip().lower()
    if name != AUTO_ENGINE and name not in ENGINES:
        raise ValueError(f"Unknown geocoding engine '{name}'. Choose from: {', '.join([*ENGINES, AUTO_ENGINE])}")
    return name


def _run_engine(name: str, query: str, restrict: bool) -> List[Dict[str, Any]]:
    if name != AUTO_ENGINE:
        return ENGINES[name].geocode(query, restrict=restrict)

    for candidate in AUTO_ORDER:
        results = ENGINES[candidate].geocode(query, restrict=restrict)
        if results:
            logger.info(f"'{query}' resolved by {candidate}")
            return results
    return []


def geocode(query: str, restrict: bool = False, engine: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Geocode free text through the provider chain.

    Args:
        query: Address or intersection text
        restrict: Keep only results inside Comuna 9 (CABA)
        engine: nominatim, georef, mapbox or auto; defaults to GEOCODER_ENGINE

    Returns:
        List of Nominatim-shaped results, possibly empty

    Raises:
        ValueError: unknown engine
        UpstreamError: a provider answered with a non-2xx status
    """
    name = resolve_engine(engine)

    intersection = parse_intersection(query)
    if intersection:
        street_a, street_b = intersection
        results = georef.geocode_intersection(street_a, street_b, restrict=restrict)
        if results:
            logger.info(f"'{query}' resolved as intersection of '{street_a}' and '{street_b}'")
            return results
        logger.info(f"No intersection found for '{query}', falling back to address search")

    return _run_engine(name, query, restrict)
