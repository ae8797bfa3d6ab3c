from fastapi import FastAPI, HTTPException, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError
from dataclasses import asdict
from typing import Optional
import logging
import math
import os

from address_mapper import config
from address_mapper.geocoding import chain, nominatim, overpass
from address_mapper.geocoding.region import is_restricted
from address_mapper.geocoding.upstream import UpstreamError
from address_mapper.labels.clustering import MapLabel, build_labels
from address_mapper.labels.map_view import MapView
from address_mapper.models.address import CrossStreets, StoreDocument
from address_mapper.models.api import BatchGeocodeRequest, LabelsRequest, ManualPlacementRequest
from address_mapper.pipeline.geocode_pipeline import geocode_all, parse_input_lines, set_manual
from address_mapper.store.json_store import JsonStore, get_store

# Configure logging
logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Address Mapper API",
    description="Geocoding proxy, cross streets and merged map labels for address lists",
    version="1.0.0"
)

if os.path.isdir(config.STATIC_DIR):
    app.mount("/static", StaticFiles(directory=config.STATIC_DIR), name="static")


def _parse_coordinate(value: Optional[str]) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _parse_point(lat: Optional[str], lon: Optional[str]):
    latitude = _parse_coordinate(lat)
    longitude = _parse_coordinate(lon)
    if latitude is None or longitude is None:
        raise HTTPException(status_code=400, detail="Missing lat/lon")
    return latitude, longitude


def _resolve_engine(engine: Optional[str]) -> str:
    try:
        return chain.resolve_engine(engine)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _label_record(label: MapLabel) -> dict:
    record = asdict(label)
    record["html"] = label.html
    return record


@app.get("/")
def read_root():
    index = os.path.join(config.STATIC_DIR, "index.html")
    if os.path.isfile(index):
        return FileResponse(index)
    return {"message": "Welcome to the Address Mapper API"}


@app.get("/api/health")
def health():
    return {"ok": True}


@app.get("/api/geocode")
def geocode(q: Optional[str] = None, restrict: Optional[str] = None, engine: Optional[str] = None):
    """
    Geocode free text.

    Intersections ("A y B", "A & B", "A / B") are tried against Georef first;
    everything else goes to the selected engine.

    Args:
        q: Address or intersection text
        restrict: "comuna9" to keep only results inside Comuna 9 (CABA)
        engine: nominatim (default), georef, mapbox or auto
    """
    query = (q or "").strip()
    if not query:
        raise HTTPException(status_code=400, detail="Missing query parameter q")
    engine_name = _resolve_engine(engine)

    try:
        return chain.geocode(query, restrict=is_restricted(restrict), engine=engine_name)
    except Exception as e:
        logger.error(f"Geocode error for '{query}': {str(e)}")
        raise HTTPException(status_code=500, detail="Geocode failed")


@app.get("/api/reverse")
def reverse(lat: Optional[str] = None, lon: Optional[str] = None):
    latitude, longitude = _parse_point(lat, lon)
    try:
        return nominatim.reverse(latitude, longitude)
    except UpstreamError as e:
        raise HTTPException(status_code=e.status_code, detail={"error": "Upstream error", "details": e.body})
    except Exception as e:
        logger.error(f"Reverse error for ({latitude}, {longitude}): {str(e)}")
        raise HTTPException(status_code=500, detail="Reverse failed")


@app.get("/api/intersections", response_model=CrossStreets)
def intersections(lat: Optional[str] = None, lon: Optional[str] = None, radius: Optional[str] = None):
    """Nearest named roads around a point, the first two being the cross streets."""
    latitude, longitude = _parse_point(lat, lon)
    try:
        return overpass.cross_streets(latitude, longitude, radius)
    except UpstreamError as e:
        raise HTTPException(status_code=e.status_code, detail={"error": "Upstream error", "details": e.body})
    except Exception as e:
        logger.error(f"Intersections error for ({latitude}, {longitude}): {str(e)}")
        raise HTTPException(status_code=500, detail="Intersections failed")


@app.post("/api/save")
async def save(request: Request, store: JsonStore = Depends(get_store)):
    try:
        payload = await request.json()
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Invalid body")

    try:
        document = StoreDocument.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Rejected save payload: {e.errors()}")
        raise HTTPException(status_code=400, detail="Invalid body")

    try:
        await run_in_threadpool(store.save, document)
    except Exception as e:
        logger.error(f"Save error: {str(e)}")
        raise HTTPException(status_code=500, detail="Save failed")
    return {"ok": True}


@app.get("/api/load")
def load(store: JsonStore = Depends(get_store)):
    try:
        document = store.load()
    except Exception as e:
        logger.error(f"Load error: {str(e)}")
        raise HTTPException(status_code=500, detail="Load failed")
    return document.to_record()


@app.post("/api/geocode-batch")
def geocode_batch(payload: BatchGeocodeRequest):
    """
    Geocode every line of `text` sequentially, then fit the view to the
    results and return the merged labels for that view.
    """
    engine_name = _resolve_engine(payload.engine)
    items = parse_input_lines(payload.text)

    view = MapView(viewport=payload.viewport, debounce_s=None)
    view.set_items(items)
    geocode_all(items, restrict=is_restricted(payload.restrict), engine=engine_name,
                on_change=view.add_or_update_marker)
    viewport = view.fit_to_markers()
    labels = view.refresh_labels()

    return {
        "items": [item.to_record() for item in items],
        "viewport": viewport.model_dump(),
        "labels": [_label_record(label) for label in labels],
    }


@app.post("/api/labels")
def labels(payload: LabelsRequest):
    merged = build_labels(payload.items, payload.viewport, payload.merge_px)
    return {"labels": [_label_record(label) for label in merged]}


@app.post("/api/manual")
def place_manually(payload: ManualPlacementRequest):
    """
    Pin an item at a user-chosen point and look up its street and cross
    streets, the same enrichment a geocoded item gets.
    """
    item = set_manual(payload.item, payload.lat, payload.lon)
    logger.info(f"Item {item.id} placed manually at ({item.lat}, {item.lon})")
    return item.to_record()
