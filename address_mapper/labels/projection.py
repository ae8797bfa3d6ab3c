"""
Web Mercator projection for a map viewport.

Pixel coordinates follow the slippy-map convention: 256 px tiles, the world is
256 * 2**zoom pixels wide, x grows east and y grows south. Container points are
relative to the top-left corner of the map element.
"""
import math
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from pydantic import BaseModel, Field

TILE_SIZE = 256
MAX_LATITUDE = 85.0511287798
MAX_ZOOM = 19

# Default view before anything is located (Madrid, country level)
DEFAULT_CENTER = (40.4168, -3.7038)
DEFAULT_ZOOM = 5


def project(lat: float, lon: float, zoom: float) -> Tuple[float, float]:
    scale = TILE_SIZE * 2 ** zoom
    lat = max(-MAX_LATITUDE, min(MAX_LATITUDE, lat))
    sin_lat = math.sin(math.radians(lat))
    x = (lon + 180.0) / 360.0 * scale
    y = (0.5 - math.log((1 + sin_lat) / (1 - sin_lat)) / (4 * math.pi)) * scale
    return x, y


def unproject(x: float, y: float, zoom: float) -> Tuple[float, float]:
    scale = TILE_SIZE * 2 ** zoom
    lon = x / scale * 360.0 - 180.0
    n = math.pi - 2 * math.pi * y / scale
    lat = math.degrees(math.atan(math.sinh(n)))
    return lat, lon


@dataclass
class LatLngBounds:
    south: float
    west: float
    north: float
    east: float

    @classmethod
    def from_points(cls, points: Iterable[Tuple[float, float]]) -> Optional["LatLngBounds"]:
        points = list(points)
        if not points:
            return None
        lats = [p[0] for p in points]
        lons = [p[1] for p in points]
        return cls(south=min(lats), west=min(lons), north=max(lats), east=max(lons))

    def pad(self, ratio: float) -> "LatLngBounds":
        """Grow every side by `ratio` times the span on that axis."""
        lat_buffer = abs(self.north - self.south) * ratio
        lon_buffer = abs(self.east - self.west) * ratio
        return LatLngBounds(
            south=self.south - lat_buffer,
            west=self.west - lon_buffer,
            north=self.north + lat_buffer,
            east=self.east + lon_buffer,
        )

    def contains(self, lat: float, lon: float) -> bool:
        return self.south <= lat <= self.north and self.west <= lon <= self.east

    @property
    def center(self) -> Tuple[float, float]:
        return (self.south + self.north) / 2, (self.west + self.east) / 2


class Viewport(BaseModel):
    center_lat: float = DEFAULT_CENTER[0]
    center_lon: float = DEFAULT_CENTER[1]
    zoom: float = Field(default=DEFAULT_ZOOM, ge=0, le=MAX_ZOOM)
    width: int = Field(default=1024, gt=0)
    height: int = Field(default=768, gt=0)

    def _origin(self) -> Tuple[float, float]:
        cx, cy = project(self.center_lat, self.center_lon, self.zoom)
        return cx - self.width / 2, cy - self.height / 2

    def to_container(self, lat: float, lon: float) -> Tuple[float, float]:
        ox, oy = self._origin()
        x, y = project(lat, lon, self.zoom)
        return x - ox, y - oy

    def from_container(self, x: float, y: float) -> Tuple[float, float]:
        ox, oy = self._origin()
        return unproject(x + ox, y + oy, self.zoom)

    def bounds(self) -> LatLngBounds:
        south, west = self.from_container(0, self.height)
        north, east = self.from_container(self.width, 0)
        return LatLngBounds(south=south, west=west, north=north, east=east)


def bounds_zoom(bounds: LatLngBounds, width: int, height: int, max_zoom: int = MAX_ZOOM) -> int:
    """Largest whole zoom level at which `bounds` fits inside width x height pixels."""
    x1, y1 = project(bounds.north, bounds.west, 0)
    x2, y2 = project(bounds.south, bounds.east, 0)
    span_x, span_y = abs(x2 - x1), abs(y2 - y1)
    if span_x == 0 and span_y == 0:
        return max_zoom

    scales = []
    if span_x > 0:
        scales.append(width / span_x)
    if span_y > 0:
        scales.append(height / span_y)
    zoom = math.floor(math.log2(min(scales)))
    return max(0, min(max_zoom, zoom))


def fit_bounds(bounds: LatLngBounds, width: int, height: int, max_zoom: int = MAX_ZOOM) -> Viewport:
    zoom = bounds_zoom(bounds, width, height, max_zoom)
    # Centre in projected space so the view is symmetric on screen
    x1, y1 = project(bounds.north, bounds.west, zoom)
    x2, y2 = project(bounds.south, bounds.east, zoom)
    center_lat, center_lon = unproject((x1 + x2) / 2, (y1 + y2) / 2, zoom)
    return Viewport(center_lat=center_lat, center_lon=center_lon, zoom=zoom, width=width, height=height)
