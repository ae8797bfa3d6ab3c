import html
import logging
from dataclasses import dataclass
from threading import Lock, Timer
from typing import Callable, List, Optional

from address_mapper.labels.clustering import MERGE_PX, MapLabel, build_labels, short_label
from address_mapper.labels.projection import LatLngBounds, Viewport, fit_bounds
from address_mapper.models.address import AddressItem

# Label recomputation delay after the last view change
LABEL_DEBOUNCE_S = 0.08
FIT_PADDING = 0.2
# Close enough to read cross streets
MIN_FIT_ZOOM = 16

# Get logger
logger = logging.getLogger(__name__)


class Debouncer:
    """
    Run `fn` once, `delay` seconds after the last call.

    With `delay=None` no timer is started: calls only mark `fn` as pending
    and it runs on the caller's thread at the next `flush`.
    """

    def __init__(self, delay: Optional[float], fn: Callable[[], None]):
        self.delay = delay
        self.fn = fn
        self._timer: Optional[Timer] = None
        self._pending = False
        self._lock = Lock()

    def __call__(self) -> None:
        with self._lock:
            if self.delay is None:
                self._pending = True
                return
            if self._timer is not None:
                self._timer.cancel()
            self._timer = Timer(self.delay, self.fn)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> None:
        with self._lock:
            self._pending = False
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def flush(self) -> None:
        """Run a pending call right away."""
        with self._lock:
            pending = self._pending or self._timer is not None
            self._pending = False
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        if pending:
            self.fn()


@dataclass
class Marker:
    lat: float
    lon: float
    icon_class: str
    title: str
    popup_html: str


def marker_icon_class(item: AddressItem) -> str:
    return f"marker tipo{item.type}"


def popup_html(item: AddressItem) -> str:
    title = f"<b>{html.escape(short_label(item))}</b>"
    cross = ""
    if item.cross:
        cross = f'<br/><span class="cross">Entre: {html.escape(" y ".join(item.cross))}</span>'
    return f"{title}{cross}"


class MapView:
    """
    Server-side model of the map: markers per located item, the current
    viewport and the merged labels for it.

    Label updates are debounced by `debounce_s` seconds. Batch callers pass
    `debounce_s=None` so nothing runs off their thread and labels are
    computed once by `refresh_labels`.
    """

    def __init__(self, viewport: Optional[Viewport] = None, merge_px: float = MERGE_PX,
                 debounce_s: Optional[float] = LABEL_DEBOUNCE_S):
        self.viewport = viewport or Viewport()
        self.merge_px = merge_px
        self.items: List[AddressItem] = []
        self.labels: List[MapLabel] = []
        self.schedule_labels = Debouncer(debounce_s, self.update_labels)

    def set_items(self, items: List[AddressItem]) -> None:
        """Replace the item list, dropping every existing marker."""
        for item in self.items:
            item.marker = None
        self.items = list(items)
        for item in self.items:
            self.add_or_update_marker(item)

    def add_or_update_marker(self, item: AddressItem) -> Optional[Marker]:
        if not item.located:
            return None
        item.marker = Marker(
            lat=item.lat,
            lon=item.lon,
            icon_class=marker_icon_class(item),
            title=item.raw,
            popup_html=popup_html(item),
        )
        self.schedule_labels()
        return item.marker

    def set_viewport(self, viewport: Viewport) -> None:
        self.viewport = viewport
        self.schedule_labels()

    def refresh_labels(self) -> List[MapLabel]:
        """Apply any scheduled label update now and return the labels."""
        self.schedule_labels.flush()
        return self.labels

    def update_labels(self) -> List[MapLabel]:
        self.labels = build_labels(self.items, self.viewport, self.merge_px)
        logger.debug(f"Rendered {len(self.labels)} labels for {len(self.items)} items")
        return self.labels

    def fit_to_markers(self) -> Viewport:
        """Fit the view to every marker, never zoomed out past street level."""
        located = [(i.lat, i.lon) for i in self.items if i.marker is not None]
        bounds = LatLngBounds.from_points(located)
        if bounds is None:
            return self.viewport
        viewport = fit_bounds(bounds.pad(FIT_PADDING), self.viewport.width, self.viewport.height)
        if viewport.zoom < MIN_FIT_ZOOM:
            viewport = viewport.model_copy(update={"zoom": MIN_FIT_ZOOM})
        self.set_viewport(viewport)
        return viewport
