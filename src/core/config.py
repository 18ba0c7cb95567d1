"""
Editor configuration.

Defaults live in EditorConfig. resources/config/editor.json (or a file named
by $LOGICISM_CONFIG, or an explicit path) overlays any of the fields below.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple, Union

log = logging.getLogger("logicism.config")

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[1] / "resources" / "config" / "editor.json"


class ConfigError(ValueError):
    """Raised when a configuration file cannot be read or has bad values."""


@dataclass(frozen=True)
class EditorConfig:
    # Window
    window_title: str = "Logicism"
    window_size: Tuple[int, int] = (800, 600)

    # Hit testing
    pin_hit_size: float = 6.0            # side of the square around each pin

    # Painting
    grid_dot_size: float = 2.0
    pin_marker_size: float = 2.0
    selection_inset: float = 4.0         # outline is the bounding rect grown by this
    selection_radius: float = 4.0
    selection_width: float = 1.0
    wire_width: float = 2.0
    ghost_opacity: float = 0.5

    # Colours
    background_color: str = "#ffffff"
    grid_color: str = "#808080"
    pin_color: str = "#00ff00"
    selection_color: str = "#00ffff"
    wire_color: str = "#008000"
    wire_preview_color: str = "#a0a0a0"


def _coerce_number(name: str, value, default):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"'{name}' must be a number, got {value!r}")
    if isinstance(default, int) and not float(value).is_integer():
        raise ConfigError(f"'{name}' must be a whole number, got {value!r}")
    return type(default)(value)


def _coerce(name: str, value, default):
    if isinstance(default, tuple):
        if not isinstance(value, (list, tuple)) or len(value) != len(default):
            raise ConfigError(f"'{name}' must be a list of {len(default)} numbers, got {value!r}")
        return tuple(_coerce_number(name, v, d) for d, v in zip(default, value))
    if isinstance(default, str):
        if not isinstance(value, str):
            raise ConfigError(f"'{name}' must be a string, got {value!r}")
        return value
    return _coerce_number(name, value, default)


def config_from_dict(data: dict) -> EditorConfig:
    """Overlay known keys of `data` on the defaults. Unknown keys are logged and skipped."""
    base = EditorConfig()
    known = {f.name: getattr(base, f.name) for f in fields(EditorConfig)}
    updates = {}
    for key, value in data.items():
        if key not in known:
            log.warning("Ignoring unknown config key '%s'", key)
            continue
        updates[key] = _coerce(key, value, known[key])
    return replace(base, **updates)


@lru_cache(maxsize=8)
def _load(path: Path) -> EditorConfig:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config file {path} is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")
    log.debug("Loaded editor config from %s", path)
    return config_from_dict(raw)


def load_config(path: Optional[Union[str, Path]] = None) -> EditorConfig:
    """
    Load the editor configuration.

    Resolution order: explicit `path`, then $LOGICISM_CONFIG, then the bundled
    default file. A missing bundled file just means "use the defaults"; a
    missing explicit file is an error.
    """
    if path is None:
        env_path = os.environ.get("LOGICISM_CONFIG")
        if env_path:
            path = env_path
        elif DEFAULT_CONFIG_PATH.exists():
            path = DEFAULT_CONFIG_PATH
        else:
            return EditorConfig()
    return _load(Path(path).resolve())
