"""
Placed components: selection, drag and rotation.

Each ComponentItem handles its own events. It learns about its siblings only
through broadcasts delivered by the canvas.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .catalog import ComponentType, Orientation
from .config import EditorConfig
from .events import (
    BeginWireDraw,
    DeselectAll,
    EventContext,
    FromComponent,
    KeyDown,
    MouseButton,
    PointerButtonDown,
    PointerButtonUp,
    PointerMoved,
)
from .grid import GridCoordinate, Point, Rect, offset_to_grid
from .paint import IDrawingSurface

log = logging.getLogger("logicism.component")


@dataclass(frozen=True)
class DragAnchor:
    origin_coords: GridCoordinate   # item coords when the drag started
    origin_position: Point          # pointer pixel position when the drag started


@dataclass
class ComponentItem:
    id: int
    coords: GridCoordinate
    type_index: int
    orientation: Orientation = Orientation.NORTH
    selected: bool = False
    drag: Optional[DragAnchor] = None

    def bounding_rect(self, ctype: ComponentType) -> Rect:
        return ctype.bounding_rect(self.coords, self.orientation)

    def pin_at(self, ctype: ComponentType, point: Point, pin_size: float) -> Optional[int]:
        return ctype.pin_at(self.coords, self.orientation, point, pin_size)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def handle_event(self, event, ctx: EventContext, ctype: ComponentType, config: EditorConfig) -> None:
        if isinstance(event, PointerButtonDown):
            if event.button is MouseButton.LEFT:
                self._on_pointer_down(event, ctx, ctype, config)
        elif isinstance(event, PointerButtonUp):
            if event.button is MouseButton.LEFT:
                self.drag = None
        elif isinstance(event, PointerMoved):
            self._on_pointer_moved(event, ctx)
        elif isinstance(event, KeyDown):
            self._on_key(event, ctx)

    def _on_pointer_down(self, event: PointerButtonDown, ctx: EventContext, ctype: ComponentType,
                         config: EditorConfig) -> None:
        pin = self.pin_at(ctype, event.position, config.pin_hit_size)
        if pin is not None:
            start = ctype.pin_cell(self.coords, self.orientation, pin)
            log.debug("Component %d: wire draw from pin %d at (%d, %d)", self.id, pin, start.x, start.y)
            ctx.submit(BeginWireDraw(FromComponent(self.id, pin, start)))
            ctx.set_handled()
            return

        if not self.bounding_rect(ctype).contains(event.position):
            return

        if not self.selected:
            self.selected = True
            ctx.request_paint()
        if not event.modifiers.extend_selection:
            ctx.submit(DeselectAll(self.id))

        self.drag = DragAnchor(self.coords, event.position)
        ctx.request_focus(self.id)
        ctx.set_handled()

    def _on_pointer_moved(self, event: PointerMoved, ctx: EventContext) -> None:
        if self.drag is None:
            return
        x0, y0 = self.drag.origin_position
        x, y = event.position
        # Relative to the drag start, so sub-cell jitter never accumulates
        new_coords = self.drag.origin_coords + offset_to_grid(x - x0, y - y0)
        if new_coords != self.coords:
            self.coords = new_coords
            ctx.request_paint()

    def _on_key(self, event: KeyDown, ctx: EventContext) -> None:
        orientation = Orientation.from_key(event.character)
        if orientation is not None and orientation is not self.orientation:
            self.orientation = orientation
            ctx.request_paint()

    def notify(self, broadcast, ctx: EventContext) -> None:
        if isinstance(broadcast, DeselectAll) and broadcast.origin_id != self.id:
            self.selected = False
            self.drag = None
            ctx.resign_focus(self.id)
            ctx.request_paint()

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------

    def paint(self, surface: IDrawingSurface, ctype: ComponentType, config: EditorConfig) -> None:
        paint_instance(surface, ctype, self.coords, self.orientation, config)
        if self.selected:
            inset = config.selection_inset
            surface.draw_stroked_rounded_rect(
                self.bounding_rect(ctype).inflate(inset, inset),
                config.selection_radius,
                config.selection_color,
                config.selection_width,
            )


def paint_instance(
    surface: IDrawingSurface,
    ctype: ComponentType,
    coords: GridCoordinate,
    orientation: Orientation,
    config: EditorConfig,
    opacity: float = 1.0,
) -> None:
    """Icon plus pin markers. Shared by placed items and the placement ghost."""
    surface.draw_icon(ctype.icon, ctype.icon_transform(coords, orientation), opacity)
    marker = (config.pin_marker_size, config.pin_marker_size)
    for i in range(len(ctype.pins)):
        surface.draw_filled_rect(
            Rect.from_center_size(ctype.pin_center(coords, orientation, i), marker),
            config.pin_color,
        )
