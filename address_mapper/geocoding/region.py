"""
Comuna 9 (Ciudad Autónoma de Buenos Aires) restriction helpers.

Providers tag administrative areas differently, so each one gets its own
predicate. All comparisons are case-insensitive.
"""
from typing import Optional, Dict, Any

RESTRICT_COMUNA9 = "comuna9"

CABA_PROVINCE = "Ciudad Autónoma de Buenos Aires"
COMUNA9_DEPARTMENT = "Comuna 9"
COMUNA9_DEPARTMENT_ID = "02009"
COMUNA9_SUBURBS = ("liniers", "mataderos", "parque avellaneda")

# CABA bounding box (west, north, east, south)
CABA_VIEWBOX = {
    "left": -58.531,
    "top": -34.526,
    "right": -58.335,
    "bottom": -34.705,
}


def caba_viewbox_param() -> str:
    """Nominatim `viewbox` value: left,top,right,bottom."""
    box = CABA_VIEWBOX
    return f"{box['left']},{box['top']},{box['right']},{box['bottom']}"


def caba_bbox_param() -> str:
    """Mapbox `bbox` value: minLon,minLat,maxLon,maxLat."""
    box = CABA_VIEWBOX
    return f"{box['left']},{box['bottom']},{box['right']},{box['top']}"


def is_restricted(restrict: Optional[str]) -> bool:
    return (restrict or "").strip().lower() == RESTRICT_COMUNA9


def _mentions_caba(value: str) -> bool:
    return (
        "buenos aires" in value
        or "autónoma" in value
        or "ciudad autonoma" in value
        or value == "caba"
    )


def in_comuna9_osm(address: Optional[Dict[str, Any]]) -> bool:
    """Check a Nominatim `address` block against Comuna 9."""
    if not address:
        return False
    suburb = (address.get("suburb") or "").lower()
    district = (address.get("city_district") or address.get("district") or "").lower()
    city = (address.get("city") or address.get("town") or "").lower()
    state = (address.get("state") or "").lower()

    matches_suburb = suburb in COMUNA9_SUBURBS
    matches_district = "comuna 9" in district
    matches_caba = _mentions_caba(city) or _mentions_caba(state)
    return (matches_suburb or matches_district) and (matches_caba or matches_suburb)


def in_comuna9_georef(raw: Dict[str, Any]) -> bool:
    """Check a raw Georef `direcciones` entry against Comuna 9 in CABA."""
    department = raw.get("departamento") or {}
    province = raw.get("provincia") or {}
    dep_name = (department.get("nombre") or "").lower()
    dep_id = department.get("id") or ""
    prov_name = (province.get("nombre") or "").lower()

    matches_department = "comuna 9" in dep_name or dep_id == COMUNA9_DEPARTMENT_ID
    matches_province = (
        "ciudad autónoma de buenos aires" in prov_name
        or "ciudad autonoma de buenos aires" in prov_name
        or prov_name == "caba"
    )
    return matches_department and matches_province


def in_caba(address: Dict[str, Any]) -> bool:
    """Looser check used for intersections, where Georef gives no comuna."""
    state = (address.get("state") or "").lower()
    city = (address.get("city") or "").lower()
    return "ciudad aut" in state or state == "caba" or "buenos aires" in city
