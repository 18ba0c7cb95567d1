# src/app/canvas_widget.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

from PySide6.QtWidgets import QWidget
from PySide6.QtGui import QPainter, QColor, QPen, QTransform
from PySide6.QtCore import Qt, QRectF, Signal
from PySide6.QtSvg import QSvgRenderer

from core.canvas import Canvas
from core.catalog import Catalog
from core.events import (
    FocusAcquired,
    KeyDown,
    Modifiers,
    MouseButton,
    PointerButtonDown,
    PointerButtonUp,
    PointerMoved,
    WindowConnected,
)
from core.grid import Affine, Rect
from core.paint import IDrawingSurface

log = logging.getLogger("logicism.app.canvas_widget")

SYMBOLS_DIR = Path(__file__).resolve().parents[1] / "resources" / "symbols"

_BUTTONS = {
    Qt.MouseButton.LeftButton: MouseButton.LEFT,
    Qt.MouseButton.RightButton: MouseButton.RIGHT,
    Qt.MouseButton.MiddleButton: MouseButton.MIDDLE,
}


def to_qrectf(rect: Rect) -> QRectF:
    return QRectF(rect.x0, rect.y0, rect.width, rect.height)


def to_qtransform(transform: Affine) -> QTransform:
    """Same coefficient order: QTransform(m11, m12, m21, m22, dx, dy)."""
    a, b, c, d, e, f = transform.coefficients()
    return QTransform(a, b, c, d, e, f)


def qt_button(button) -> Optional[MouseButton]:
    return _BUTTONS.get(button)


def qt_modifiers(mods) -> Modifiers:
    return Modifiers(
        ctrl=bool(mods & Qt.KeyboardModifier.ControlModifier),
        shift=bool(mods & Qt.KeyboardModifier.ShiftModifier),
        alt=bool(mods & Qt.KeyboardModifier.AltModifier),
    )


def qt_key_to_character(text: str) -> Optional[str]:
    """Logical character of a key press, or None for non-printing keys."""
    if len(text) != 1 or not text.isprintable():
        return None
    return text


def load_symbol_renderers(catalog: Catalog, symbols_dir: Path = SYMBOLS_DIR) -> Dict[str, QSvgRenderer]:
    """Load the SVG symbol of every catalog entry, keyed by its icon handle."""
    renderers: Dict[str, QSvgRenderer] = {}
    for entry in catalog:
        svg_path = symbols_dir / entry.icon
        if not svg_path.exists():
            log.warning("SVG symbol not found: %s", svg_path)
            continue
        renderer = QSvgRenderer(str(svg_path))
        if renderer.isValid():
            renderers[entry.icon] = renderer
        else:
            log.warning("SVG symbol could not be parsed: %s", svg_path)
    return renderers


class QtPainterSurface(IDrawingSurface):
    """Paints core draw calls with an active QPainter."""

    def __init__(self, painter: QPainter, renderers: Dict[str, QSvgRenderer]):
        self._painter = painter
        self._renderers = renderers

    def draw_filled_rect(self, rect: Rect, color: str) -> None:
        self._painter.fillRect(to_qrectf(rect), QColor(color))

    def draw_stroked_rounded_rect(self, rect: Rect, radius: float, color: str, width: float) -> None:
        painter = self._painter
        painter.save()
        pen = QPen(QColor(color))
        pen.setWidthF(width)
        painter.setPen(pen)
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawRoundedRect(to_qrectf(rect), radius, radius)
        painter.restore()

    def draw_icon(self, handle: str, transform: Affine, opacity: float = 1.0) -> None:
        renderer = self._renderers.get(handle)
        if renderer is None:
            return
        painter = self._painter
        painter.save()
        painter.setTransform(to_qtransform(transform), True)
        painter.setOpacity(opacity)
        viewbox = renderer.viewBoxF()
        renderer.render(painter, QRectF(0.0, 0.0, viewbox.width(), viewbox.height()))
        painter.restore()


class CanvasWidget(QWidget):
    """
    Qt host for a core Canvas:
      - translates mouse / key / focus events into core input events
      - schedules a repaint whenever a dispatch asks for one
      - runs the core paint pass on a QPainter
    """

    # Emitted after any dispatch that changed what is on screen
    stateChanged = Signal()

    def __init__(self, canvas: Canvas, parent=None):
        super().__init__(parent)
        self.canvas = canvas
        self._renderers = load_symbol_renderers(canvas.catalog)
        self._connected = False

        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

    def _dispatch(self, event) -> None:
        result = self.canvas.dispatch(event)
        if result.paint or result.children_changed:
            self.update()
            self.stateChanged.emit()

    def send_key(self, character: str) -> None:
        """Feed a logical key press, e.g. from a menu action."""
        self._dispatch(KeyDown(character))

    def showEvent(self, event):
        super().showEvent(event)
        if not self._connected:
            self._connected = True
            self.setFocus()
            self._dispatch(WindowConnected())

    def focusInEvent(self, event):
        super().focusInEvent(event)
        self._dispatch(FocusAcquired())

    def mouseMoveEvent(self, event):
        pos = event.position()
        self._dispatch(PointerMoved((pos.x(), pos.y())))

    def mousePressEvent(self, event):
        button = qt_button(event.button())
        if button is None:
            super().mousePressEvent(event)
            return
        pos = event.position()
        self._dispatch(PointerButtonDown((pos.x(), pos.y()), button, qt_modifiers(event.modifiers())))

    def mouseReleaseEvent(self, event):
        button = qt_button(event.button())
        if button is None:
            super().mouseReleaseEvent(event)
            return
        pos = event.position()
        self._dispatch(PointerButtonUp((pos.x(), pos.y()), button))

    def keyPressEvent(self, event):
        character = qt_key_to_character(event.text())
        if character is None:
            super().keyPressEvent(event)
            return
        self._dispatch(KeyDown(character))

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(self.rect(), QColor(self.canvas.config.background_color))
        self.canvas.paint(QtPainterSurface(painter, self._renderers), self.width(), self.height())
        painter.end()
