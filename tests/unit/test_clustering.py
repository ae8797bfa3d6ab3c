"""
Unit tests for projection and label merging
"""

import math
import random

import pytest

from address_mapper.labels.clustering import (
    MERGE_PX, ScreenPoint, build_labels, group_points, short_label, visible_points
)
from address_mapper.labels.projection import (
    MAX_ZOOM, LatLngBounds, Viewport, fit_bounds, project, unproject
)
from address_mapper.models.address import AddressItem


@pytest.fixture
def viewport():
    return Viewport(center_lat=-34.6520, center_lon=-58.5030, zoom=16, width=800, height=600)


def _item_at(viewport, x, y, **kwargs):
    lat, lon = viewport.from_container(x, y)
    return AddressItem(lat=lat, lon=lon, status="found", **kwargs)


def _point(x, y, raw="p"):
    return ScreenPoint(item=AddressItem(raw=raw), x=x, y=y)


class TestProjection:
    """Test cases for Web Mercator helpers"""

    def test_origin_at_zoom_zero(self):
        assert project(0.0, 0.0, 0) == pytest.approx((128.0, 128.0))

    def test_round_trip(self):
        x, y = project(-34.652, -58.503, 16)
        lat, lon = unproject(x, y, 16)
        assert lat == pytest.approx(-34.652, abs=1e-9)
        assert lon == pytest.approx(-58.503, abs=1e-9)

    def test_center_maps_to_middle(self, viewport):
        assert viewport.to_container(-34.6520, -58.5030) == pytest.approx((400.0, 300.0))

    def test_bounds_contain_center(self, viewport):
        bounds = viewport.bounds()
        assert bounds.contains(-34.6520, -58.5030)
        assert bounds.south < bounds.north
        assert bounds.west < bounds.east

    def test_pad(self):
        bounds = LatLngBounds(south=0.0, west=0.0, north=1.0, east=2.0).pad(0.2)
        assert (bounds.south, bounds.west, bounds.north, bounds.east) == pytest.approx((-0.2, -0.4, 1.2, 2.4))

    def test_fit_single_point_uses_max_zoom(self):
        bounds = LatLngBounds.from_points([(-34.65, -58.50)])
        assert fit_bounds(bounds, 800, 600).zoom == MAX_ZOOM

    def test_fit_contains_all_points(self):
        points = [(-34.640, -58.520), (-34.660, -58.490)]
        view = fit_bounds(LatLngBounds.from_points(points), 800, 600)
        bounds = view.bounds()
        for lat, lon in points:
            assert bounds.contains(lat, lon)

    def test_from_points_empty(self):
        assert LatLngBounds.from_points([]) is None


class TestGroupPoints:
    """Test cases for greedy label grouping"""

    def test_threshold_is_inclusive(self):
        groups = group_points([_point(0, 0), _point(MERGE_PX, 0), _point(MERGE_PX + 0.5, 0)])
        assert [len(g) for g in groups] == [2, 1]

    def test_order_dependent_seeding(self):
        """Distance is measured from the seed, not from the group"""
        groups = group_points([_point(0, 0, "a"), _point(20, 0, "b"), _point(40, 0, "c")])
        assert [[p.item.raw for p in g] for g in groups] == [["a", "b"], ["c"]]

    def test_far_points_never_merge(self):
        rng = random.Random(7)
        for _ in range(50):
            points = [_point(rng.uniform(0, 300), rng.uniform(0, 300)) for _ in range(40)]
            groups = group_points(points)

            assert sum(len(g) for g in groups) == len(points)
            for group in groups:
                seed = group[0]
                for member in group[1:]:
                    assert math.hypot(member.x - seed.x, member.y - seed.y) <= MERGE_PX

    def test_every_point_in_one_group(self):
        points = [_point(i * 5, 0) for i in range(20)]
        groups = group_points(points)
        ids = [id(p) for g in groups for p in g]
        assert len(ids) == len(set(ids)) == 20

    def test_empty(self):
        assert group_points([]) == []


class TestLabels:
    """Test cases for label text and placement"""

    def test_short_label(self):
        assert short_label(AddressItem(raw="Lacarra 200", street="Lacarra 210")) == "Lacarra 210"
        assert short_label(AddressItem(raw="Lacarra 200", street="   ")) == "Lacarra 200"
        assert short_label(AddressItem(raw="Lacarra 200")) == "Lacarra 200"

    def test_visible_points_respects_padding(self, viewport):
        inside = _item_at(viewport, 400, 300)
        in_padding = _item_at(viewport, 850, 300)
        outside = _item_at(viewport, 1400, 300)
        unlocated = AddressItem(raw="Nowhere 1", status="notfound")

        points = visible_points([inside, in_padding, outside, unlocated], viewport)
        assert [p.item for p in points] == [inside, in_padding]

    def test_merged_label(self, viewport):
        a = _item_at(viewport, 400, 300, raw="Lacarra 200")
        b = _item_at(viewport, 410, 300, raw="Lacarra 250", street="Lacarra 250")
        c = _item_at(viewport, 600, 300, raw="Bynon 10")

        labels = build_labels([a, b, c], viewport)

        assert [l.text for l in labels] == ["Lacarra 200 - Lacarra 250", "Bynon 10"]
        assert labels[0].item_ids == [a.id, b.id]
        x, y = viewport.to_container(labels[0].lat, labels[0].lon)
        assert (x, y) == pytest.approx((405.0, 300.0), abs=1e-6)

    def test_label_html_is_escaped(self, viewport):
        item = _item_at(viewport, 400, 300, raw="<b>Lacarra & Bynon</b>")
        label = build_labels([item], viewport)[0]
        assert label.html == "&lt;b&gt;Lacarra &amp; Bynon&lt;/b&gt;"

    def test_zoom_changes_grouping(self, viewport):
        a = _item_at(viewport, 400, 300, raw="a")
        b = _item_at(viewport, 420, 300, raw="b")
        closer = viewport.model_copy(update={"zoom": 18})

        assert len(build_labels([a, b], viewport)) == 1
        assert len(build_labels([a, b], closer)) == 2
