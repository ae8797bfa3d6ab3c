import logging
import re
import time
from typing import Optional, Dict, Any, List, Callable

from address_mapper.geocoding import chain, nominatim, overpass
from address_mapper.models.address import AddressItem, ItemStatus

# Get logger
logger = logging.getLogger(__name__)

ROAD_KEYS = ("road", "residential", "pedestrian", "neighbourhood", "suburb")
HOUSE_NUMBER_KEYS = ("house_number", "housenumber", "addr:housenumber")
NOTE_SEPARATOR = " · "
DEFAULT_CITY = "CABA"

ItemCallback = Callable[[AddressItem], Any]


def parse_input_lines(text: str) -> List[AddressItem]:
    lines = [line.strip() for line in re.split(r"\r?\n", text or "")]
    return [AddressItem(raw=line) for line in lines if line]


def _first(address: Dict[str, Any], keys) -> str:
    for key in keys:
        value = address.get(key)
        if value:
            return str(value)
    return ""


def street_label(address: Optional[Dict[str, Any]]) -> str:
    """Road and house number from an address details block."""
    if not address:
        return ""
    road = _first(address, ROAD_KEYS)
    number = _first(address, HOUSE_NUMBER_KEYS)
    return f"{road} {number}".strip() if number else road.strip()


def reverse_note(address: Dict[str, Any]) -> str:
    road = address.get("road") or ""
    number = address.get("house_number") or ""
    barrio = address.get("suburb") or address.get("neighbourhood") or ""
    city = address.get("city") or address.get("town") or DEFAULT_CITY
    street = f"{road} {number}".strip() if road else ""
    return NOTE_SEPARATOR.join(part for part in (street, barrio, city) if part)


def _notify(on_change: Optional[ItemCallback], item: AddressItem) -> None:
    if on_change is not None:
        on_change(item)


def enrich_item(item: AddressItem, on_change: Optional[ItemCallback] = None) -> AddressItem:
    """
    Add reverse-geocoded details and cross streets to a located item.
    Failures are logged and otherwise ignored.
    """
    if not item.located:
        return item

    try:
        rev = nominatim.reverse(item.lat, item.lon)
        address = rev.get("address") if isinstance(rev, dict) else None
        if address:
            label = street_label(address)
            if label:
                item.street = label
            item.display_name = reverse_note(address) or item.display_name
            _notify(on_change, item)
    except Exception as e:
        logger.warning(f"Reverse lookup failed for {item.id} ({item.lat}, {item.lon}): {e}")

    try:
        streets = overpass.cross_streets(item.lat, item.lon)
        if streets.between:
            item.cross = streets.between
            _notify(on_change, item)
    except Exception as e:
        logger.warning(f"Cross street lookup failed for {item.id} ({item.lat}, {item.lon}): {e}")

    return item


def geocode_item(item: AddressItem, restrict: bool = False, engine: Optional[str] = None,
                 on_change: Optional[ItemCallback] = None) -> AddressItem:
    item.status = ItemStatus.PENDING
    try:
        results = chain.geocode(item.raw, restrict=restrict, engine=engine)
        if not results:
            logger.info(f"No results for '{item.raw}'")
            item.status = ItemStatus.NOT_FOUND
            return item

        best = results[0]
        # Parse everything before touching the item so a bad result leaves it intact
        latitude = float(best["lat"])
        longitude = float(best["lon"])
        display_name = best.get("display_name") or ""
        label = street_label(best.get("address"))

        item.lat = latitude
        item.lon = longitude
        item.display_name = display_name
        if label:
            item.street = label
        item.status = ItemStatus.FOUND
        _notify(on_change, item)
    except Exception as e:
        logger.error(f"Geocode error for '{item.raw}': {e}")
        item.status = ItemStatus.NOT_FOUND
        return item

    return enrich_item(item, on_change)


def geocode_all(items: List[AddressItem], restrict: bool = False, engine: Optional[str] = None,
                on_change: Optional[ItemCallback] = None) -> List[AddressItem]:
    """
    Geocode items one at a time.

    Each item finishes (lookup and enrichment) before the next request goes
    out, which keeps the load on the public Nominatim instance low.

    Args:
        items: Items to geocode, mutated in place
        restrict: Keep only Comuna 9 results
        engine: Geocoding engine name, see chain.geocode
        on_change: Called with an item whenever its location or labels change

    Returns:
        The same list of items
    """
    start_time = time.time()
    logger.info(f"Geocoding {len(items)} addresses sequentially")

    for i, item in enumerate(items):
        geocode_item(item, restrict=restrict, engine=engine, on_change=on_change)
        logger.info(f"Geocoding progress: {i+1}/{len(items)} - '{item.raw}' {item.status.value}")

    found = sum(1 for item in items if item.status == ItemStatus.FOUND)
    duration = time.time() - start_time
    logger.info(f"Geocoding completed: {found}/{len(items)} found in {duration:.1f} seconds")
    return items


def set_manual(item: AddressItem, latitude: float, longitude: float,
               on_change: Optional[ItemCallback] = None) -> AddressItem:
    item.lat = latitude
    item.lon = longitude
    item.status = ItemStatus.MANUAL
    _notify(on_change, item)
    return enrich_item(item, on_change)
