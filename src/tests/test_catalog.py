"""
Tests for the gate catalog and orientation-aware geometry.

Run: python -m pytest src/tests/test_catalog.py -v
"""

import pytest

from core.catalog import (
    Catalog,
    ComponentType,
    Orientation,
    PinKind,
    default_catalog,
)
from core.grid import GridCoordinate, Rect, to_pixel

ALL = list(Orientation)


class TestOrientation:

    @pytest.mark.parametrize("key, expected", [
        ("w", Orientation.NORTH),
        ("a", Orientation.WEST),
        ("s", Orientation.SOUTH),
        ("d", Orientation.EAST),
        ("x", None),
        ("W", None),
    ])
    def test_from_key(self, key, expected):
        assert Orientation.from_key(key) is expected

    def test_angles(self):
        assert [o.degrees for o in ALL] == [0, 90, 180, 270]
        assert Orientation.NORTH.angle == 0.0

    def test_rotate_offset(self):
        up = GridCoordinate(0, -2)
        assert Orientation.NORTH.rotate_offset(up) == GridCoordinate(0, -2)
        assert Orientation.EAST.rotate_offset(up) == GridCoordinate(2, 0)
        assert Orientation.SOUTH.rotate_offset(up) == GridCoordinate(0, 2)
        assert Orientation.WEST.rotate_offset(up) == GridCoordinate(-2, 0)


class TestCatalog:

    def test_default_entries(self, catalog):
        assert [e.name for e in catalog] == ["NOT", "AND", "OR", "NAND"]
        assert [e.index for e in catalog] == [0, 1, 2, 3]
        assert catalog[0].size == (24.0, 48.0)
        assert len(catalog[0].pins) == 2
        for entry in list(catalog)[1:]:
            assert entry.size == (48.0, 48.0)
            kinds = [p.kind for p in entry.pins]
            assert kinds == [PinKind.INPUT, PinKind.INPUT, PinKind.OUTPUT]

    @pytest.mark.parametrize("key, name", [("1", "NOT"), ("2", "AND"), ("3", "OR"), ("4", "NAND")])
    def test_from_digit(self, catalog, key, name):
        assert catalog.from_digit(key).name == name

    @pytest.mark.parametrize("key", ["0", "5", "9", "x", "12", ""])
    def test_from_digit_out_of_range(self, catalog, key):
        assert catalog.from_digit(key) is None

    def test_get_out_of_range(self, catalog):
        assert catalog.get(-1) is None
        assert catalog.get(len(catalog)) is None

    def test_index_must_match_position(self):
        entry = ComponentType(index=3, name="X", size=(16, 16), anchor_offset=(8, 8), icon="x.svg")
        with pytest.raises(ValueError):
            Catalog([entry])


class TestGeometry:

    def test_effective_anchor_offsets(self, catalog):
        not_gate = catalog[0]
        assert not_gate.effective_anchor_offset(Orientation.NORTH) == (12.0, 32.0)
        assert not_gate.effective_anchor_offset(Orientation.EAST) == (16.0, 12.0)
        assert not_gate.effective_anchor_offset(Orientation.SOUTH) == (12.0, 16.0)
        assert not_gate.effective_anchor_offset(Orientation.WEST) == (32.0, 12.0)

    def test_bounding_rect_north(self, catalog):
        rect = catalog[1].bounding_rect(GridCoordinate(0, 0), Orientation.NORTH)
        assert rect == Rect(-16.0, -24.0, 32.0, 24.0)

    def test_orientation_closure(self, catalog):
        """North/South keep the size, East/West swap it, area never changes."""
        coords = GridCoordinate(3, -4)
        for entry in catalog:
            w, h = entry.size
            rects = {o: entry.bounding_rect(coords, o) for o in ALL}
            assert rects[Orientation.NORTH].size == (w, h)
            assert rects[Orientation.SOUTH].size == (w, h)
            assert rects[Orientation.EAST].size == (h, w)
            assert rects[Orientation.WEST].size == (h, w)
            assert len({r.area for r in rects.values()}) == 1

    def test_anchor_stays_inside_rect(self, catalog):
        coords = GridCoordinate(2, 2)
        for entry in catalog:
            for o in ALL:
                assert entry.bounding_rect(coords, o).contains(to_pixel(coords))

    def test_pin_cells(self, catalog):
        and_gate = catalog[1]
        at = GridCoordinate(5, 5)
        assert [and_gate.pin_cell(at, Orientation.NORTH, i) for i in range(3)] == [
            GridCoordinate(4, 6), GridCoordinate(6, 6), GridCoordinate(5, 3),
        ]
        assert [and_gate.pin_cell(at, Orientation.EAST, i) for i in range(3)] == [
            GridCoordinate(4, 4), GridCoordinate(4, 6), GridCoordinate(7, 5),
        ]
        assert and_gate.pin_cell(at, Orientation.SOUTH, 2) == GridCoordinate(5, 7)
        assert and_gate.pin_cell(at, Orientation.WEST, 2) == GridCoordinate(3, 5)

    def test_icon_transform_matches_logical_geometry(self, catalog):
        """Drawing the icon through its transform puts the anchor and pins where hit-testing expects them."""
        coords = GridCoordinate(-1, 4)
        for entry in catalog:
            ax, ay = entry.anchor_offset
            for o in ALL:
                t = entry.icon_transform(coords, o)
                assert t.apply((ax, ay)) == pytest.approx(to_pixel(coords))
                for i, pin in enumerate(entry.pins):
                    icon_point = (ax + pin.offset.x * 16, ay + pin.offset.y * 16)
                    assert t.apply(icon_point) == pytest.approx(entry.pin_center(coords, o, i))

    def test_icon_transform_covers_bounding_rect(self, catalog):
        entry = catalog[0]
        coords = GridCoordinate(0, 0)
        w, h = entry.size
        for o in ALL:
            t = entry.icon_transform(coords, o)
            corners = [t.apply(p) for p in [(0, 0), (w, 0), (0, h), (w, h)]]
            xs = [p[0] for p in corners]
            ys = [p[1] for p in corners]
            rect = entry.bounding_rect(coords, o)
            assert (min(xs), min(ys), max(xs), max(ys)) == pytest.approx((rect.x0, rect.y0, rect.x1, rect.y1))

    def test_pin_at(self, catalog):
        and_gate = catalog[1]
        at = GridCoordinate(5, 5)
        x, y = and_gate.pin_center(at, Orientation.NORTH, 2)
        assert and_gate.pin_at(at, Orientation.NORTH, (x + 2, y - 2), 6.0) == 2
        assert and_gate.pin_at(at, Orientation.NORTH, (x + 4, y), 6.0) is None
