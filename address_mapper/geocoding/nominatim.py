import logging
from typing import Dict, Any, List

from address_mapper.geocoding.region import caba_viewbox_param, in_comuna9_osm
from address_mapper.geocoding.upstream import get_json

# Constants
NOMINATIM_SEARCH_URL = "https://nominatim.openstreetmap.org/search"
NOMINATIM_REVERSE_URL = "https://nominatim.openstreetmap.org/reverse"
SEARCH_LIMIT = 5
COUNTRY_CODES = "ar"

# Looser bias strings tried in order when a restricted search comes back empty
RESTRICTED_BIAS_SUFFIXES = (
    ", Comuna 9, Ciudad Autónoma de Buenos Aires, Argentina",
    ", CABA, Argentina",
)

# Get logger
logger = logging.getLogger(__name__)


def search(query: str, use_caba_box: bool = False) -> List[Dict[str, Any]]:
    params = {
        "q": query,
        "format": "jsonv2",
        "addressdetails": 1,
        "limit": SEARCH_LIMIT,
        "countrycodes": COUNTRY_CODES,
    }
    if use_caba_box:
        params["viewbox"] = caba_viewbox_param()
        params["bounded"] = 1

    data = get_json("Nominatim", NOMINATIM_SEARCH_URL, params=params,
                    headers={"Accept-Language": "es"})
    return data if isinstance(data, list) else []


def reverse(latitude: float, longitude: float) -> Dict[str, Any]:
    params = {
        "lat": latitude,
        "lon": longitude,
        "format": "jsonv2",
        "addressdetails": 1,
        "zoom": 18,
        "namedetails": 1,
        "extratags": 1,
    }
    return get_json("Nominatim", NOMINATIM_REVERSE_URL, params=params)


def _comuna9_only(results: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [r for r in results if in_comuna9_osm(r.get("address"))]


def geocode(query: str, restrict: bool = False) -> List[Dict[str, Any]]:
    """
    Forward geocode through Nominatim.

    Unrestricted queries return the raw search results. Restricted queries
    search inside the CABA viewbox, keep only Comuna 9 hits and, while nothing
    survives, retry with progressively looser bias strings appended.
    """
    results = search(query, use_caba_box=restrict)
    if not restrict:
        return results

    results = _comuna9_only(results)
    for suffix in RESTRICTED_BIAS_SUFFIXES:
        if results:
            break
        biased = f"{query}{suffix}"
        logger.info(f"No Comuna 9 match for '{query}', retrying as '{biased}'")
        results = _comuna9_only(search(biased, use_caba_box=True))
    return results
