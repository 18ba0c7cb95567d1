"""
Normalized input events, sibling broadcasts and the per-dispatch context.

The host translates its toolkit's events into the input events below. During
one dispatch the canvas hands the same EventContext to every item it
notifies; items never reach each other or the canvas directly, they only
flag the context (handled / repaint / focus) or queue a broadcast on it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from .grid import GridCoordinate, Point


class MouseButton(Enum):
    LEFT = "left"
    RIGHT = "right"
    MIDDLE = "middle"


@dataclass(frozen=True)
class Modifiers:
    ctrl: bool = False
    shift: bool = False
    alt: bool = False

    @property
    def extend_selection(self) -> bool:
        """Ctrl-click adds to the selection instead of replacing it."""
        return self.ctrl


# ---------------------------------------------------------------------------
# Input events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PointerMoved:
    position: Point


@dataclass(frozen=True)
class PointerButtonDown:
    position: Point
    button: MouseButton = MouseButton.LEFT
    modifiers: Modifiers = field(default_factory=Modifiers)


@dataclass(frozen=True)
class PointerButtonUp:
    position: Point
    button: MouseButton = MouseButton.LEFT


@dataclass(frozen=True)
class KeyDown:
    character: str     # logical character, e.g. " ", "1", "w"


@dataclass(frozen=True)
class FocusAcquired:
    pass


@dataclass(frozen=True)
class WindowConnected:
    pass


InputEvent = Union[PointerMoved, PointerButtonDown, PointerButtonUp, KeyDown, FocusAcquired, WindowConnected]


# ---------------------------------------------------------------------------
# Wire draws and broadcasts
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FromComponent:
    component_id: int
    pin_index: int
    start: GridCoordinate


@dataclass(frozen=True)
class FromWire:
    wire_id: int
    start: GridCoordinate


WireDraw = Union[FromComponent, FromWire]


@dataclass(frozen=True)
class DeselectAll:
    origin_id: Optional[int]   # None when the canvas itself deselects


@dataclass(frozen=True)
class BeginWireDraw:
    draw: WireDraw


Broadcast = Union[DeselectAll, BeginWireDraw]


class EventContext:
    """
    Scratch state for one dispatch.

    Focus requests are recorded rather than applied so the canvas stays the
    only owner of its state; the last request in a dispatch wins.
    """

    def __init__(self, focus: Optional[int] = None):
        self.handled = False
        self.paint_requested = False
        self.children_changed = False
        self.focus = focus
        self.broadcasts: List[Broadcast] = []

    def set_handled(self) -> None:
        self.handled = True

    def request_paint(self) -> None:
        self.paint_requested = True

    def request_focus(self, item_id: int) -> None:
        self.focus = item_id

    def resign_focus(self, item_id: int) -> None:
        if self.focus == item_id:
            self.focus = None

    def submit(self, broadcast: Broadcast) -> None:
        self.broadcasts.append(broadcast)

    def take_broadcasts(self) -> List[Broadcast]:
        pending, self.broadcasts = self.broadcasts, []
        return pending
