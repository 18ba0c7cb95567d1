import os

import pytest

# Qt tests render without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from core.canvas import Canvas
from core.catalog import default_catalog
from core.config import EditorConfig


@pytest.fixture
def catalog():
    return default_catalog()


@pytest.fixture
def config():
    return EditorConfig()


@pytest.fixture
def canvas(catalog, config):
    return Canvas(catalog, config)
