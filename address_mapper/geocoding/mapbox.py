import logging
from typing import Optional, Dict, Any, List
from urllib.parse import quote

from address_mapper import config
from address_mapper.geocoding.region import COMUNA9_SUBURBS, caba_bbox_param
from address_mapper.geocoding.upstream import get_json

MAPBOX_BASE_URL = "https://api.mapbox.com/geocoding/v5/mapbox.places"

# Get logger
logger = logging.getLogger(__name__)


def _context_text(feature: Dict[str, Any], *prefixes: str) -> str:
    for prefix in prefixes:
        for ctx in feature.get("context") or []:
            if isinstance(ctx.get("id"), str) and ctx["id"].startswith(prefix):
                text = ctx.get("text_es") or ctx.get("text")
                if text:
                    return str(text)
    return ""


def map_feature(feature: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    coords = feature.get("center") or (feature.get("geometry") or {}).get("coordinates") or []
    if len(coords) < 2 or not all(isinstance(c, (int, float)) for c in coords[:2]):
        return None
    lon, lat = coords[0], coords[1]
    props = feature.get("properties") or {}

    neighborhood = _context_text(feature, "neighbourhood", "neighborhood") or props.get("neighborhood", "")
    place = _context_text(feature, "place") or props.get("place", "")
    region = _context_text(feature, "region") or props.get("region", "")
    district = _context_text(feature, "district") or props.get("district", "")
    street = props.get("street") or feature.get("text_es") or feature.get("text") or ""
    number = str(feature.get("address") or props.get("address") or "")

    address = {
        "road": street or None,
        "house_number": number or None,
        "suburb": neighborhood or None,
        "city": place or None,
        "state": region or None,
        "city_district": district or None,
        "country": "Argentina",
        "country_code": "ar",
    }
    return {
        "lat": lat,
        "lon": lon,
        "display_name": feature.get("place_name_es") or feature.get("place_name") or "",
        "address": address,
        "geocoder": "mapbox",
        "raw": feature,
    }


def _in_comuna9(result: Dict[str, Any]) -> bool:
    address = result["address"]
    suburb = (address.get("suburb") or "").lower()
    place = (address.get("city") or "").lower()
    region = (address.get("state") or "").lower()
    in_caba = any(
        "buenos aires" in v or v == "caba" or "ciudad autonoma" in v
        for v in (place, region)
    )
    return in_caba and suburb in COMUNA9_SUBURBS


def geocode(query: str, restrict: bool = False) -> List[Dict[str, Any]]:
    token = config.MAPBOX_TOKEN.strip()
    if not token:
        logger.debug("MAPBOX_TOKEN not set, skipping Mapbox")
        return []

    params = {
        "access_token": token,
        "country": "AR",
        "language": "es",
        "limit": 10,
        "types": "address,poi",
    }
    if restrict:
        params["bbox"] = caba_bbox_param()

    url = f"{MAPBOX_BASE_URL}/{quote(query, safe='')}.json"
    data = get_json("Mapbox", url, params=params)
    features = data.get("features") if isinstance(data, dict) else None
    results = [r for r in (map_feature(f) for f in features or []) if r]
    if restrict:
        results = [r for r in results if _in_comuna9(r)]
    return results
