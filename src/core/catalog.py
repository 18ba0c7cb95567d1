"""
Component catalog: static geometry and pin metadata for each gate kind.

A ComponentType is immutable and shared by every placed instance of that
kind. Instances refer to it by its catalog index, never by holding the entry.

Geometry is defined once, for North orientation. The other three orientations
are derived by rotating the icon box 90 degrees at a time (clockwise on a
y-down screen), which swaps width and height for East/West.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from .grid import (
    Affine,
    GridCoordinate,
    Point,
    Rect,
    to_pixel,
)


class Orientation(Enum):
    NORTH = "north"
    EAST = "east"
    SOUTH = "south"
    WEST = "west"

    @property
    def degrees(self) -> int:
        return _DEGREES[self]

    @property
    def angle(self) -> float:
        """Rotation in radians, measured clockwise on screen."""
        return math.radians(self.degrees)

    @classmethod
    def from_key(cls, character: str) -> Optional[Orientation]:
        """w/a/s/d select North/West/South/East directly; anything else is None."""
        return _KEY_ORIENTATIONS.get(character)

    def rotate_offset(self, offset: GridCoordinate) -> GridCoordinate:
        """Rotate an anchor-relative grid offset into this orientation."""
        x, y = offset.x, offset.y
        if self is Orientation.EAST:
            return GridCoordinate(-y, x)
        if self is Orientation.SOUTH:
            return GridCoordinate(-x, -y)
        if self is Orientation.WEST:
            return GridCoordinate(y, -x)
        return offset


_DEGREES = {
    Orientation.NORTH: 0,
    Orientation.EAST: 90,
    Orientation.SOUTH: 180,
    Orientation.WEST: 270,
}

_KEY_ORIENTATIONS = {
    "w": Orientation.NORTH,
    "a": Orientation.WEST,
    "s": Orientation.SOUTH,
    "d": Orientation.EAST,
}


class PinKind(Enum):
    INPUT = "input"
    OUTPUT = "output"


@dataclass(frozen=True)
class Pin:
    offset: GridCoordinate   # relative to the anchor, North orientation
    kind: PinKind


@dataclass(frozen=True)
class ComponentType:
    """
    Catalog entry for one gate kind.

    size          (width, height) of the icon in pixels at North orientation
    anchor_offset pixel offset inside the North icon box that corresponds to
                  the instance's grid coordinate
    icon          opaque handle understood by the drawing surface
                  (the SVG symbol file name)
    """
    index: int
    name: str
    size: Tuple[float, float]
    anchor_offset: Tuple[float, float]
    icon: str
    pins: Tuple[Pin, ...] = field(default_factory=tuple)

    def effective_anchor_offset(self, orientation: Orientation) -> Tuple[float, float]:
        ax, ay = self.anchor_offset
        width, height = self.size
        if orientation is Orientation.EAST:
            return (height - ay, ax)
        if orientation is Orientation.SOUTH:
            return (width - ax, height - ay)
        if orientation is Orientation.WEST:
            return (ay, width - ax)
        return (ax, ay)

    def oriented_size(self, orientation: Orientation) -> Tuple[float, float]:
        width, height = self.size
        if orientation in (Orientation.EAST, Orientation.WEST):
            return (height, width)
        return (width, height)

    def bounding_rect(self, coords: GridCoordinate, orientation: Orientation) -> Rect:
        """Hit-test and paint region of an instance, in canvas pixels."""
        px, py = to_pixel(coords)
        dx, dy = self.effective_anchor_offset(orientation)
        return Rect.from_origin_size((px - dx, py - dy), self.oriented_size(orientation))

    def pin_cell(self, coords: GridCoordinate, orientation: Orientation, index: int) -> GridCoordinate:
        return coords + orientation.rotate_offset(self.pins[index].offset)

    def pin_center(self, coords: GridCoordinate, orientation: Orientation, index: int) -> Point:
        return to_pixel(self.pin_cell(coords, orientation, index))

    def pin_hit_rect(self, coords: GridCoordinate, orientation: Orientation, index: int, size: float) -> Rect:
        return Rect.from_center_size(self.pin_center(coords, orientation, index), (size, size))

    def pin_at(self, coords: GridCoordinate, orientation: Orientation, point: Point, size: float) -> Optional[int]:
        """Index of the first pin whose hit square contains `point`, if any."""
        for i in range(len(self.pins)):
            if self.pin_hit_rect(coords, orientation, i, size).contains(point):
                return i
        return None

    def icon_transform(self, coords: GridCoordinate, orientation: Orientation) -> Affine:
        """
        Maps icon space (the unrotated `size` box) onto the instance's
        bounding rect: rotate about the icon origin, shift the rotated box
        back into positive space, then move it to the rect's top-left.
        """
        width, height = self.size
        if orientation is Orientation.EAST:
            recenter = Affine.translate(height, 0.0)
        elif orientation is Orientation.SOUTH:
            recenter = Affine.translate(width, height)
        elif orientation is Orientation.WEST:
            recenter = Affine.translate(0.0, width)
        else:
            recenter = Affine.identity()
        x0, y0 = self.bounding_rect(coords, orientation).origin
        return Affine.translate(x0, y0) * recenter * Affine.rotate(orientation.angle)


class Catalog:
    """
    Arena of catalog entries, indexed by a stable small integer.
    """

    def __init__(self, entries: List[ComponentType]):
        for i, entry in enumerate(entries):
            if entry.index != i:
                raise ValueError(f"Catalog entry {entry.name} has index {entry.index}, expected {i}")
        self._entries = list(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ComponentType]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> ComponentType:
        return self._entries[index]

    def get(self, index: int) -> Optional[ComponentType]:
        if 0 <= index < len(self._entries):
            return self._entries[index]
        return None

    def from_digit(self, character: str) -> Optional[ComponentType]:
        """
        Entry selected by a 1-based digit key ("1" -> index 0).
        "0", non-digits and out-of-range digits give None.
        """
        if len(character) != 1 or character not in "0123456789":
            return None
        return self.get(int(character) - 1)


def _two_input_gate(index: int, name: str, icon: str) -> ComponentType:
    return ComponentType(
        index=index,
        name=name,
        size=(48.0, 48.0),
        anchor_offset=(24.0, 32.0),
        icon=icon,
        pins=(
            Pin(GridCoordinate(-1, 1), PinKind.INPUT),
            Pin(GridCoordinate(1, 1), PinKind.INPUT),
            Pin(GridCoordinate(0, -2), PinKind.OUTPUT),
        ),
    )


def default_catalog() -> Catalog:
    """The fixed gate set: NOT, AND, OR, NAND (digit keys 1-4)."""
    not_gate = ComponentType(
        index=0,
        name="NOT",
        size=(24.0, 48.0),
        anchor_offset=(12.0, 32.0),
        icon="not_gate.svg",
        pins=(
            Pin(GridCoordinate(0, 1), PinKind.INPUT),
            Pin(GridCoordinate(0, -2), PinKind.OUTPUT),
        ),
    )
    return Catalog([
        not_gate,
        _two_input_gate(1, "AND", "and_gate.svg"),
        _two_input_gate(2, "OR", "or_gate.svg"),
        _two_input_gate(3, "NAND", "nand_gate.svg"),
    ])
