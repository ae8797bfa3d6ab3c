import logging
from typing import Dict, Any, List

from address_mapper.geocoding.region import (
    CABA_PROVINCE, COMUNA9_DEPARTMENT, in_caba, in_comuna9_georef
)
from address_mapper.geocoding.upstream import get_json

# Constants
GEOREF_BASE_URL = "https://apis.datos.gob.ar/georef/api"
DIRECCIONES_URL = f"{GEOREF_BASE_URL}/direcciones"
INTERSECCIONES_URL = f"{GEOREF_BASE_URL}/intersecciones"
MAX_RESULTS = 10

# Get logger
logger = logging.getLogger(__name__)


def _nombre(entry: Dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = (entry.get(key) or {}).get("nombre")
        if value:
            return value
    return ""


def _has_location(entry: Dict[str, Any]) -> bool:
    location = entry.get("ubicacion") or {}
    return isinstance(location.get("lat"), (int, float)) and isinstance(location.get("lon"), (int, float))


def _altura(entry: Dict[str, Any]) -> str:
    # Georef v2 nests the door number as {"valor": ..., "unidad": ...}
    altura = entry.get("altura") or entry.get("puerta") or ""
    if isinstance(altura, dict):
        altura = altura.get("valor") or ""
    return str(altura)


def _region_params(restrict: bool, with_department: bool) -> Dict[str, Any]:
    params = {"max": MAX_RESULTS}
    if restrict:
        params["provincia"] = CABA_PROVINCE
        if with_department:
            params["departamento"] = COMUNA9_DEPARTMENT
    return params


def map_direccion(entry: Dict[str, Any]) -> Dict[str, Any]:
    """Normalize a Georef address into the Nominatim result shape."""
    calle = _nombre(entry, "calle")
    altura = _altura(entry)
    localidad = _nombre(entry, "localidad", "localidad_censal", "municipio")
    provincia = _nombre(entry, "provincia")
    departamento = _nombre(entry, "departamento")

    street = f"{calle} {altura}".strip() if calle else ""
    display_name = ", ".join(p for p in (street, localidad, provincia, "Argentina") if p)
    address = {
        "road": calle or None,
        "house_number": altura or None,
        "city": localidad or None,
        "state": provincia or None,
        "country": "Argentina",
        "country_code": "ar",
        "city_district": departamento if "comuna" in departamento.lower() else None,
    }
    return {
        "lat": entry["ubicacion"]["lat"],
        "lon": entry["ubicacion"]["lon"],
        "display_name": display_name,
        "address": address,
        "geocoder": "georef",
        "raw": entry,
    }


def map_interseccion(entry: Dict[str, Any], street_a: str, street_b: str) -> Dict[str, Any]:
    localidad = _nombre(entry, "localidad", "localidad_censal", "municipio")
    provincia = _nombre(entry, "provincia")
    road = f"{street_a} y {street_b}"
    display_name = ", ".join(p for p in (road, localidad, provincia, "Argentina") if p)
    address = {
        "road": road,
        "city": localidad or None,
        "state": provincia or None,
        "country": "Argentina",
        "country_code": "ar",
    }
    return {
        "lat": entry["ubicacion"]["lat"],
        "lon": entry["ubicacion"]["lon"],
        "display_name": display_name,
        "address": address,
        "geocoder": "georef",
        "raw": entry,
    }


def fetch_direcciones(query: str, restrict: bool = False, with_department: bool = True) -> List[Dict[str, Any]]:
    params = {"direccion": query}
    params.update(_region_params(restrict, with_department))
    data = get_json("Georef", DIRECCIONES_URL, params=params,
                    headers={"Accept-Language": "es-AR,es;q=0.9"})
    entries = data.get("direcciones") if isinstance(data, dict) else None
    mapped = [map_direccion(e) for e in entries or [] if _has_location(e)]
    if restrict:
        mapped = [r for r in mapped if in_comuna9_georef(r["raw"])]
    return mapped


def fetch_intersecciones(street_a: str, street_b: str, restrict: bool = False,
                         with_department: bool = True) -> List[Dict[str, Any]]:
    params = {"calle_nombre": street_a, "interseccion_nombre": street_b}
    params.update(_region_params(restrict, with_department))
    data = get_json("Georef", INTERSECCIONES_URL, params=params)
    entries = data.get("intersecciones") if isinstance(data, dict) else None
    mapped = [map_interseccion(e, street_a, street_b) for e in entries or [] if _has_location(e)]
    if restrict:
        # Georef gives no comuna for intersections, CABA is the best we can check
        mapped = [r for r in mapped if in_caba(r["address"])]
    return mapped


def geocode(query: str, restrict: bool = False) -> List[Dict[str, Any]]:
    results = fetch_direcciones(query, restrict=restrict)
    if restrict and not results:
        logger.info(f"No Comuna 9 address for '{query}' in Georef, widening to CABA")
        results = fetch_direcciones(query, restrict=True, with_department=False)
    return results


def geocode_intersection(street_a: str, street_b: str, restrict: bool = False) -> List[Dict[str, Any]]:
    results = fetch_intersecciones(street_a, street_b, restrict=restrict)
    if restrict and not results:
        logger.info(f"No Comuna 9 intersection for '{street_a}' y '{street_b}', widening to CABA")
        results = fetch_intersecciones(street_a, street_b, restrict=True, with_department=False)
    return results
