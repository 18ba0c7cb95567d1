"""
Wires: axis-aligned segments between grid cells, grouped under one wire id.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from .config import EditorConfig
from .events import BeginWireDraw, EventContext, FromWire, MouseButton, PointerButtonDown
from .grid import GridCoordinate, Rect, to_grid, to_pixel
from .paint import IDrawingSurface

log = logging.getLogger("logicism.wire")


@dataclass(frozen=True)
class WireSegment:
    """
    Straight run between two cells. Always horizontal or vertical; build it
    with WireSegment.new(), which refuses diagonal pairs.
    """
    start: GridCoordinate
    end: GridCoordinate

    @classmethod
    def new(cls, start: GridCoordinate, end: GridCoordinate) -> Optional[WireSegment]:
        if start.x != end.x and start.y != end.y:
            return None
        return cls(start, end)

    @property
    def is_horizontal(self) -> bool:
        return self.start.y == self.end.y

    def cells(self) -> Iterator[GridCoordinate]:
        """Every cell the segment covers, from start to end inclusive."""
        step_x = (self.end.x > self.start.x) - (self.end.x < self.start.x)
        step_y = (self.end.y > self.start.y) - (self.end.y < self.start.y)
        cell = self.start
        yield cell
        while cell != self.end:
            cell = GridCoordinate(cell.x + step_x, cell.y + step_y)
            yield cell

    def contains_cell(self, cell: GridCoordinate) -> bool:
        if self.start.x == self.end.x == cell.x:
            return min(self.start.y, self.end.y) <= cell.y <= max(self.start.y, self.end.y)
        if self.start.y == self.end.y == cell.y:
            return min(self.start.x, self.end.x) <= cell.x <= max(self.start.x, self.end.x)
        return False

    def bounding_rect(self, width: float = 2.0) -> Rect:
        half = width / 2
        return Rect.from_points(to_pixel(self.start), to_pixel(self.end)).inflate(half, half)

    def paint(self, surface: IDrawingSurface, color: str, width: float) -> None:
        surface.draw_filled_rect(self.bounding_rect(width), color)


def snap_endpoint(start: GridCoordinate, pointer: GridCoordinate) -> GridCoordinate:
    """
    Clamp a live wire endpoint so the segment from `start` stays axis-aligned:
    a strictly larger horizontal delta draws horizontally, anything else
    vertically.
    """
    if abs(pointer.x - start.x) > abs(pointer.y - start.y):
        return GridCoordinate(pointer.x, start.y)
    return GridCoordinate(start.x, pointer.y)


@dataclass
class WireItem:
    """
    A named wire. Segments are kept in insertion order; touching or colinear
    segments are not merged.
    """
    id: int
    segments: List[WireSegment] = field(default_factory=list)

    def add_segment(self, segment: WireSegment) -> None:
        self.segments.append(segment)

    def bounding_rect(self, width: float = 2.0) -> Optional[Rect]:
        rect = None
        for segment in self.segments:
            r = segment.bounding_rect(width)
            rect = r if rect is None else rect.union(r)
        return rect

    def segment_at(self, cell: GridCoordinate) -> Optional[WireSegment]:
        for segment in self.segments:
            if segment.contains_cell(cell):
                return segment
        return None

    def handle_event(self, event, ctx: EventContext, config: EditorConfig) -> None:
        # A press on the wire itself starts a branch from the pressed cell
        if not isinstance(event, PointerButtonDown) or event.button is not MouseButton.LEFT:
            return
        if ctx.handled:
            return
        cell = to_grid(*event.position)
        segment = self.segment_at(cell)
        if segment is None:
            return
        if not segment.bounding_rect(config.pin_hit_size).contains(event.position):
            return
        log.debug("Wire %d: wire draw from (%d, %d)", self.id, cell.x, cell.y)
        ctx.submit(BeginWireDraw(FromWire(self.id, cell)))
        ctx.set_handled()

    def notify(self, broadcast, ctx: EventContext) -> None:
        pass

    def paint(self, surface: IDrawingSurface, config: EditorConfig) -> None:
        for segment in self.segments:
            segment.paint(surface, config.wire_color, config.wire_width)
