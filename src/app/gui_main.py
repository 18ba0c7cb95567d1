from __future__ import annotations

import logging
import os
import sys

from PySide6.QtWidgets import (
    QApplication,
    QMainWindow,
    QLabel,
    QMessageBox,
)
from PySide6.QtGui import QAction

from app.canvas_widget import CanvasWidget
from core.canvas import Canvas, PlaceTool
from core.catalog import default_catalog
from core.config import ConfigError, EditorConfig, load_config

log = logging.getLogger("logicism.app")


def describe_tool(canvas: Canvas) -> str:
    """Short status-bar text for the active tool."""
    tool = canvas.state.tool
    if isinstance(tool, PlaceTool):
        entry = canvas.catalog[tool.type_index]
        return f"Place {entry.name} ({tool.orientation.value})"
    if canvas.state.drawing is not None:
        return "Hand (drawing wire)"
    return "Hand"


class MainWindow(QMainWindow):
    def __init__(self, config: EditorConfig) -> None:
        super().__init__()
        self.canvas = Canvas(default_catalog(), config)
        self.canvas_widget = CanvasWidget(self.canvas, self)
        self.setCentralWidget(self.canvas_widget)

        self.setWindowTitle(config.window_title)
        width, height = config.window_size
        self.resize(width, height)

        self._setup_menu_bar()
        self._setup_status_bar()
        self.canvas_widget.stateChanged.connect(self._refresh_status)

    def _setup_menu_bar(self):
        """File and Tools menus. Tool entries feed the same keys the canvas listens to."""
        menubar = self.menuBar()

        file_menu = menubar.addMenu("File")
        file_menu.addAction("Exit", self.close)

        tools_menu = menubar.addMenu("Tools")
        hand = QAction("Hand\tSpace", self)
        hand.triggered.connect(lambda: self.canvas_widget.send_key(" "))
        tools_menu.addAction(hand)
        tools_menu.addSeparator()
        for i, entry in enumerate(self.canvas.catalog):
            digit = str(i + 1)
            action = QAction(f"{entry.name} gate\t{digit}", self)
            action.triggered.connect(lambda checked=False, d=digit: self.canvas_widget.send_key(d))
            tools_menu.addAction(action)

    def _setup_status_bar(self):
        self._tool_label = QLabel()
        self.statusBar().addPermanentWidget(self._tool_label)
        self.statusBar().showMessage("1-4: pick a gate, w/a/s/d: orient, Space: hand tool")
        self._refresh_status()

    def _refresh_status(self) -> None:
        self._tool_label.setText(describe_tool(self.canvas))


def main() -> None:
    logging.basicConfig(
        level=os.environ.get("LOGICISM_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = QApplication(sys.argv)
    try:
        config = load_config()
    except ConfigError as exc:
        log.error("%s", exc)
        QMessageBox.critical(None, "Configuration Error", str(exc))
        sys.exit(1)

    win = MainWindow(config)
    win.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
