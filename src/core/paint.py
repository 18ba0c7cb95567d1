"""
Drawing surface abstraction.

The core never touches pixels. During a paint pass it calls the three
primitives below on whatever surface the host provides (QPainter in the
app, RecordingSurface in tests).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Tuple

from .grid import Affine, Rect


class IDrawingSurface(ABC):
    """
    Common interface for anything the canvas can paint on.

    Colours are "#rrggbb" strings.
    """

    @abstractmethod
    def draw_filled_rect(self, rect: Rect, color: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def draw_stroked_rounded_rect(self, rect: Rect, radius: float, color: str, width: float) -> None:
        raise NotImplementedError

    @abstractmethod
    def draw_icon(self, handle: str, transform: Affine, opacity: float = 1.0) -> None:
        """Draw icon `handle` with its icon space mapped through `transform`."""
        raise NotImplementedError


@dataclass
class DrawCall:
    op: str                 # "rect", "rounded_rect" or "icon"
    args: Tuple[Any, ...]


@dataclass
class RecordingSurface(IDrawingSurface):
    """Keeps every draw call in order, for headless inspection."""
    calls: List[DrawCall] = field(default_factory=list)

    def draw_filled_rect(self, rect: Rect, color: str) -> None:
        self.calls.append(DrawCall("rect", (rect, color)))

    def draw_stroked_rounded_rect(self, rect: Rect, radius: float, color: str, width: float) -> None:
        self.calls.append(DrawCall("rounded_rect", (rect, radius, color, width)))

    def draw_icon(self, handle: str, transform: Affine, opacity: float = 1.0) -> None:
        self.calls.append(DrawCall("icon", (handle, transform, opacity)))

    def of_kind(self, op: str) -> List[DrawCall]:
        return [call for call in self.calls if call.op == op]

    def with_color(self, color: str) -> List[DrawCall]:
        # rect -> args[1], rounded_rect -> args[2]
        out = []
        for call in self.calls:
            if call.op == "rect" and call.args[1] == color:
                out.append(call)
            elif call.op == "rounded_rect" and call.args[2] == color:
                out.append(call)
        return out
