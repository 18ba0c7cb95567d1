"""
Grid coordinates and pixel geometry.

Two pixel spaces are in use:
- canvas space: what pointer events report. Grid cell (x, y) is centred on
  pixel (x * CELL_SIZE + HALF_CELL, y * CELL_SIZE + HALF_CELL), so grid dots
  sit in the middle of cells.
- offset space: pixel deltas and anchor-relative offsets, no half-cell shift.

Everything downstream is expressed in grid coordinates and only converted to
pixels when hit-testing or painting.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

CELL_SIZE = 16
HALF_CELL = CELL_SIZE / 2

Point = Tuple[float, float]


def round_half_away(value: float) -> int:
    """Round to the nearest integer, ties away from zero (2.5 -> 3, -2.5 -> -3)."""
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


@dataclass(frozen=True)
class GridCoordinate:
    """A discrete cell on the editor's snapping lattice."""
    x: int
    y: int

    def __add__(self, other: GridCoordinate) -> GridCoordinate:
        return GridCoordinate(self.x + other.x, self.y + other.y)

    def __sub__(self, other: GridCoordinate) -> GridCoordinate:
        return GridCoordinate(self.x - other.x, self.y - other.y)


def to_pixel(coord: GridCoordinate) -> Point:
    """Canvas-space pixel at the centre of `coord`."""
    return (coord.x * CELL_SIZE + HALF_CELL, coord.y * CELL_SIZE + HALF_CELL)


def to_grid(x: float, y: float) -> GridCoordinate:
    """Snap a canvas-space pixel position to its grid cell."""
    return GridCoordinate(
        round_half_away((x - HALF_CELL) / CELL_SIZE),
        round_half_away((y - HALF_CELL) / CELL_SIZE),
    )


def offset_to_pixel(offset: GridCoordinate) -> Point:
    return (float(offset.x * CELL_SIZE), float(offset.y * CELL_SIZE))


def offset_to_grid(dx: float, dy: float) -> GridCoordinate:
    """Snap a pixel delta to a whole number of cells."""
    return GridCoordinate(round_half_away(dx / CELL_SIZE), round_half_away(dy / CELL_SIZE))


@dataclass(frozen=True)
class Rect:
    """
    Axis-aligned rectangle in pixel space, stored as (x0, y0) top-left and
    (x1, y1) bottom-right.
    """
    x0: float
    y0: float
    x1: float
    y1: float

    @classmethod
    def from_origin_size(cls, origin: Point, size: Tuple[float, float]) -> Rect:
        x, y = origin
        w, h = size
        return cls(x, y, x + w, y + h)

    @classmethod
    def from_center_size(cls, center: Point, size: Tuple[float, float]) -> Rect:
        cx, cy = center
        w, h = size
        return cls(cx - w / 2, cy - h / 2, cx + w / 2, cy + h / 2)

    @classmethod
    def from_points(cls, a: Point, b: Point) -> Rect:
        return cls(min(a[0], b[0]), min(a[1], b[1]), max(a[0], b[0]), max(a[1], b[1]))

    @property
    def origin(self) -> Point:
        return (self.x0, self.y0)

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def height(self) -> float:
        return self.y1 - self.y0

    @property
    def size(self) -> Tuple[float, float]:
        return (self.width, self.height)

    @property
    def area(self) -> float:
        return self.width * self.height

    def contains(self, point: Point) -> bool:
        # Far edges are exclusive so that adjacent rects never both claim a point
        x, y = point
        return self.x0 <= x < self.x1 and self.y0 <= y < self.y1

    def inflate(self, dx: float, dy: float) -> Rect:
        return Rect(self.x0 - dx, self.y0 - dy, self.x1 + dx, self.y1 + dy)

    def union(self, other: Rect) -> Rect:
        return Rect(
            min(self.x0, other.x0),
            min(self.y0, other.y0),
            max(self.x1, other.x1),
            max(self.y1, other.y1),
        )


@dataclass(frozen=True)
class Affine:
    """
    2D affine transform with coefficients (a, b, c, d, e, f), mapping
    (x, y) -> (a*x + c*y + e, b*x + d*y + f).

    `A * B` applies B first, then A.
    """
    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    @classmethod
    def identity(cls) -> Affine:
        return cls()

    @classmethod
    def translate(cls, dx: float, dy: float) -> Affine:
        return cls(e=dx, f=dy)

    @classmethod
    def rotate(cls, angle: float) -> Affine:
        """Rotation by `angle` radians; clockwise on a y-down screen."""
        cos, sin = math.cos(angle), math.sin(angle)
        # snap the quarter turns so pixel math stays exact
        cos, sin = round(cos, 12) + 0.0, round(sin, 12) + 0.0
        return cls(a=cos, b=sin, c=-sin, d=cos)

    def __mul__(self, other: Affine) -> Affine:
        return Affine(
            a=self.a * other.a + self.c * other.b,
            b=self.b * other.a + self.d * other.b,
            c=self.a * other.c + self.c * other.d,
            d=self.b * other.c + self.d * other.d,
            e=self.a * other.e + self.c * other.f + self.e,
            f=self.b * other.e + self.d * other.f + self.f,
        )

    def apply(self, point: Point) -> Point:
        x, y = point
        return (self.a * x + self.c * y + self.e, self.b * x + self.d * y + self.f)

    def coefficients(self) -> Tuple[float, float, float, float, float, float]:
        return (self.a, self.b, self.c, self.d, self.e, self.f)
