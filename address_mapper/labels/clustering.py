import html
import math
from dataclasses import dataclass, field
from typing import List, Sequence

from address_mapper.labels.projection import Viewport
from address_mapper.models.address import AddressItem

# Pixel distance under which labels are merged
MERGE_PX = 28
LABEL_SEPARATOR = " - "
VIEW_PADDING = 0.2


@dataclass
class ScreenPoint:
    item: AddressItem
    x: float
    y: float


@dataclass
class MapLabel:
    lat: float
    lon: float
    text: str
    item_ids: List[str] = field(default_factory=list)

    @property
    def html(self) -> str:
        return html.escape(self.text)


def short_label(item: AddressItem) -> str:
    """Street and number when known, otherwise the text as typed."""
    street = (item.street or "").strip()
    return street or item.raw or ""


def visible_points(items: Sequence[AddressItem], viewport: Viewport,
                   padding: float = VIEW_PADDING) -> List[ScreenPoint]:
    """Project located items that fall inside the padded viewport."""
    bounds = viewport.bounds().pad(padding)
    points = []
    for item in items:
        if item is None or not item.located:
            continue
        if not bounds.contains(item.lat, item.lon):
            continue
        x, y = viewport.to_container(item.lat, item.lon)
        points.append(ScreenPoint(item=item, x=x, y=y))
    return points


def group_points(points: Sequence[ScreenPoint], merge_px: float = MERGE_PX) -> List[List[ScreenPoint]]:
    """
    Greedy single-pass grouping.

    Each point not yet grouped seeds a group and pulls in every later
    ungrouped point within `merge_px` of the seed. Order-dependent: the result
    is not a minimal cover, only a cheap one.
    """
    used = set()
    groups = []
    for i, seed in enumerate(points):
        if i in used:
            continue
        used.add(i)
        group = [seed]
        for j in range(i + 1, len(points)):
            if j in used:
                continue
            other = points[j]
            if math.hypot(other.x - seed.x, other.y - seed.y) <= merge_px:
                group.append(other)
                used.add(j)
        groups.append(group)
    return groups


def label_for_group(group: Sequence[ScreenPoint], viewport: Viewport) -> MapLabel:
    cx = sum(p.x for p in group) / len(group)
    cy = sum(p.y for p in group) / len(group)
    lat, lon = viewport.from_container(cx, cy)
    return MapLabel(
        lat=lat,
        lon=lon,
        text=LABEL_SEPARATOR.join(short_label(p.item) for p in group),
        item_ids=[p.item.id for p in group],
    )


def build_labels(items: Sequence[AddressItem], viewport: Viewport,
                 merge_px: float = MERGE_PX) -> List[MapLabel]:
    points = visible_points(items, viewport)
    return [label_for_group(group, viewport) for group in group_points(points, merge_px)]
