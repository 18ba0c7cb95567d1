"""
Canvas interaction controller.

The canvas owns every placed component and wire, the active tool, the last
pointer cell and any wire draw in progress. Each input event goes through
three stages, all within one dispatch:

1. children first: every item gets a chance to handle the event and may mark
   it handled, request paint/focus, or queue a broadcast;
2. tool logic: only if no child handled the event;
3. broadcasts: queued DeselectAll / BeginWireDraw messages are delivered to
   every item and to the canvas itself.

Items never hold references to each other or to the canvas.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Union

from .catalog import Catalog, ComponentType, Orientation, default_catalog
from .component import ComponentItem, paint_instance
from .config import EditorConfig
from .events import (
    BeginWireDraw,
    DeselectAll,
    EventContext,
    FocusAcquired,
    FromComponent,
    FromWire,
    KeyDown,
    MouseButton,
    PointerButtonDown,
    PointerButtonUp,
    PointerMoved,
    WindowConnected,
    WireDraw,
)
from .grid import CELL_SIZE, GridCoordinate, Point, Rect, to_grid, to_pixel
from .ids import next_item_id
from .paint import IDrawingSurface
from .wire import WireItem, WireSegment, snap_endpoint

log = logging.getLogger("logicism.canvas")


@dataclass(frozen=True)
class HandTool:
    """Select, drag and start wires."""


@dataclass(frozen=True)
class PlaceTool:
    """Stamp new components of one catalog entry."""
    type_index: int
    orientation: Orientation


Tool = Union[HandTool, PlaceTool]


@dataclass
class CanvasState:
    components: Dict[int, ComponentItem] = field(default_factory=dict)
    wires: Dict[int, WireItem] = field(default_factory=dict)
    tool: Tool = field(default_factory=HandTool)
    mouse_pos: Optional[GridCoordinate] = None
    last_orientation: Orientation = Orientation.NORTH
    drawing: Optional[WireDraw] = None
    focus: Optional[int] = None          # focused item id; None = the canvas itself
    focus_registered: bool = False


@dataclass
class DispatchResult:
    paint: bool = False
    children_changed: bool = False
    handled: bool = False


class Canvas:
    """
    Routes input events to items, runs the Hand/Place tool state machine and
    drives the paint pass.
    """

    def __init__(
        self,
        catalog: Optional[Catalog] = None,
        config: Optional[EditorConfig] = None,
        state: Optional[CanvasState] = None,
    ):
        self.catalog = catalog if catalog is not None else default_catalog()
        self.config = config if config is not None else EditorConfig()
        self.state = state if state is not None else CanvasState()

    # ------------------------------------------------------------------
    # Lookup / programmatic editing
    # ------------------------------------------------------------------

    def component_type(self, item: ComponentItem) -> ComponentType:
        return self.catalog[item.type_index]

    def components(self) -> List[ComponentItem]:
        return [self.state.components[k] for k in sorted(self.state.components)]

    def wires(self) -> List[WireItem]:
        return [self.state.wires[k] for k in sorted(self.state.wires)]

    def selected_ids(self) -> List[int]:
        return [item.id for item in self.components() if item.selected]

    def place_component(
        self,
        type_index: int,
        coords: GridCoordinate,
        orientation: Orientation = Orientation.NORTH,
    ) -> ComponentItem:
        if self.catalog.get(type_index) is None:
            raise ValueError(f"No catalog entry with index {type_index}")
        item = ComponentItem(next_item_id(), coords, type_index, orientation)
        self.state.components[item.id] = item
        log.debug("Placed %s #%d at (%d, %d) facing %s",
                  self.catalog[type_index].name, item.id, coords.x, coords.y, orientation.value)
        return item

    def add_wire(self, segments: Iterable[WireSegment]) -> WireItem:
        wire = WireItem(next_item_id(), list(segments))
        self.state.wires[wire.id] = wire
        return wire

    def remove_component(self, item_id: int) -> bool:
        item = self.state.components.pop(item_id, None)
        if item is None:
            return False
        if self.state.focus == item_id:
            self.state.focus = None
        drawing = self.state.drawing
        if isinstance(drawing, FromComponent) and drawing.component_id == item_id:
            self.state.drawing = None
        return True

    def remove_wire(self, wire_id: int) -> bool:
        if self.state.wires.pop(wire_id, None) is None:
            return False
        drawing = self.state.drawing
        if isinstance(drawing, FromWire) and drawing.wire_id == wire_id:
            self.state.drawing = None
        return True

    def preview_segment(self) -> Optional[WireSegment]:
        """The segment a release would commit right now, if a wire draw is active."""
        draw = self.state.drawing
        if draw is None or self.state.mouse_pos is None:
            return None
        segment = WireSegment.new(draw.start, snap_endpoint(draw.start, self.state.mouse_pos))
        if segment is None:
            log.error("Clamped wire preview from %s to %s is not axis-aligned", draw.start, self.state.mouse_pos)
        return segment

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(self, event) -> DispatchResult:
        ctx = EventContext(focus=self.state.focus)

        self._route_to_children(event, ctx)
        if not ctx.handled:
            self._handle_tool_event(event, ctx)
        self._deliver_broadcasts(ctx)

        self.state.focus = ctx.focus
        return DispatchResult(
            paint=ctx.paint_requested,
            children_changed=ctx.children_changed,
            handled=ctx.handled,
        )

    def _iter_children(self) -> Iterator[Union[ComponentItem, WireItem]]:
        # Components before wires so that a pin always wins over a wire end on it
        yield from self.components()
        yield from self.wires()

    def _route_to_children(self, event, ctx: EventContext) -> None:
        if isinstance(event, KeyDown):
            # Keys only reach the focused item
            item = self.state.components.get(ctx.focus) if ctx.focus is not None else None
            if item is not None:
                item.handle_event(event, ctx, self.component_type(item), self.config)
            return

        if not isinstance(event, (PointerMoved, PointerButtonDown, PointerButtonUp)):
            return

        placing = isinstance(self.state.tool, PlaceTool)
        # Ascending id, the same order items are painted in, so where two
        # components overlap the one underneath gets the press.
        for child in self._iter_children():
            # Once an item claims a press, the ones after it don't see it
            if isinstance(event, PointerButtonDown) and ctx.handled:
                break
            if isinstance(child, ComponentItem):
                child.handle_event(event, ctx, self.component_type(child), self.config)
            elif not placing:
                # Wires only start branches; in Place mode the press stamps a gate
                child.handle_event(event, ctx, self.config)

    def _handle_tool_event(self, event, ctx: EventContext) -> None:
        state = self.state
        if isinstance(event, WindowConnected):
            ctx.focus = None
        elif isinstance(event, FocusAcquired):
            if not state.focus_registered:
                state.focus_registered = True
                log.debug("Canvas registered for focus")
        elif isinstance(event, KeyDown):
            self._on_key(event.character, ctx)
        elif isinstance(event, PointerMoved):
            self._on_pointer_moved(event.position, ctx)
        elif isinstance(event, PointerButtonDown) and event.button is MouseButton.LEFT:
            if isinstance(state.tool, PlaceTool):
                self._stamp(state.tool, event.position, ctx)
            else:
                ctx.submit(DeselectAll(None))
        elif isinstance(event, PointerButtonUp) and event.button is MouseButton.LEFT:
            if state.drawing is not None:
                self._finish_wire_draw(event.position, ctx)

    def _on_key(self, character: str, ctx: EventContext) -> None:
        state = self.state
        tool = state.tool
        new_tool = tool

        if character == " ":
            new_tool = HandTool()
        else:
            entry = self.catalog.from_digit(character)
            if entry is not None:
                new_tool = PlaceTool(entry.index, state.last_orientation)
            elif isinstance(tool, PlaceTool):
                orientation = Orientation.from_key(character)
                if orientation is not None:
                    new_tool = PlaceTool(tool.type_index, orientation)
                    state.last_orientation = orientation

        if new_tool != tool:
            state.tool = new_tool
            log.debug("Tool changed to %s", new_tool)
            ctx.request_paint()

    def _on_pointer_moved(self, position: Point, ctx: EventContext) -> None:
        state = self.state
        cell = to_grid(*position)
        if isinstance(state.tool, PlaceTool):
            state.mouse_pos = cell
            ctx.request_paint()
        elif state.mouse_pos != cell:
            state.mouse_pos = cell
            if state.drawing is not None:
                ctx.request_paint()

    def _stamp(self, tool: PlaceTool, position: Point, ctx: EventContext) -> None:
        coords = to_grid(*position)
        self.place_component(tool.type_index, coords, tool.orientation)
        self.state.mouse_pos = coords
        ctx.children_changed = True
        ctx.request_paint()

    def _finish_wire_draw(self, position: Point, ctx: EventContext) -> None:
        draw = self.state.drawing
        self.state.drawing = None
        ctx.request_paint()

        end = snap_endpoint(draw.start, to_grid(*position))
        segment = WireSegment.new(draw.start, end)
        if segment is None:
            log.error("Clamped wire segment from %s to %s is not axis-aligned; discarded", draw.start, end)
            return

        if isinstance(draw, FromWire) and draw.wire_id in self.state.wires:
            self.state.wires[draw.wire_id].add_segment(segment)
            log.debug("Extended wire #%d to (%d, %d)", draw.wire_id, end.x, end.y)
        else:
            wire = self.add_wire([segment])
            log.debug("Added wire #%d from (%d, %d) to (%d, %d)",
                      wire.id, draw.start.x, draw.start.y, end.x, end.y)
        ctx.children_changed = True

    # ------------------------------------------------------------------
    # Broadcasts
    # ------------------------------------------------------------------

    def _deliver_broadcasts(self, ctx: EventContext) -> None:
        while ctx.broadcasts:
            for broadcast in ctx.take_broadcasts():
                for child in self._iter_children():
                    child.notify(broadcast, ctx)
                self._on_broadcast(broadcast, ctx)

    def _on_broadcast(self, broadcast, ctx: EventContext) -> None:
        if not isinstance(broadcast, BeginWireDraw):
            return
        draw = broadcast.draw
        if isinstance(draw, FromComponent) and draw.component_id not in self.state.components:
            log.warning("Ignoring wire draw from missing component #%d", draw.component_id)
            return
        if isinstance(draw, FromWire) and draw.wire_id not in self.state.wires:
            log.warning("Ignoring wire draw from missing wire #%d", draw.wire_id)
            return
        self.state.drawing = draw
        self.state.mouse_pos = draw.start
        ctx.request_paint()

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------

    def paint(self, surface: IDrawingSurface, width: float, height: float) -> None:
        """Back to front: grid dots, placement ghost, wire preview, wires, components."""
        config = self.config
        state = self.state

        dot = (config.grid_dot_size, config.grid_dot_size)
        for x in range(int(width) // CELL_SIZE):
            for y in range(int(height) // CELL_SIZE):
                center = to_pixel(GridCoordinate(x, y))
                surface.draw_filled_rect(Rect.from_center_size(center, dot), config.grid_color)

        if isinstance(state.tool, PlaceTool) and state.mouse_pos is not None:
            paint_instance(
                surface,
                self.catalog[state.tool.type_index],
                state.mouse_pos,
                state.tool.orientation,
                config,
                opacity=config.ghost_opacity,
            )

        preview = self.preview_segment()
        if preview is not None:
            preview.paint(surface, config.wire_preview_color, config.wire_width)

        for wire in self.wires():
            wire.paint(surface, config)

        for item in self.components():
            item.paint(surface, self.component_type(item), config)
