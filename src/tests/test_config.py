"""
Tests for editor configuration loading.

Run: python -m pytest src/tests/test_config.py -v
"""

import json
import logging

import pytest

from core import config as config_module
from core.config import ConfigError, EditorConfig, config_from_dict, load_config


@pytest.fixture(autouse=True)
def fresh_cache(monkeypatch):
    monkeypatch.delenv("LOGICISM_CONFIG", raising=False)
    config_module._load.cache_clear()
    yield
    config_module._load.cache_clear()


def write_json(tmp_path, data, name="editor.json"):
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestConfigFromDict:

    def test_empty_dict_gives_defaults(self):
        assert config_from_dict({}) == EditorConfig()

    def test_overlay_known_keys(self):
        cfg = config_from_dict({"pin_hit_size": 8, "wire_color": "#ff0000"})
        assert cfg.pin_hit_size == 8.0
        assert isinstance(cfg.pin_hit_size, float)
        assert cfg.wire_color == "#ff0000"
        assert cfg.grid_color == EditorConfig().grid_color

    def test_window_size_becomes_tuple(self):
        cfg = config_from_dict({"window_size": [1024, 768]})
        assert cfg.window_size == (1024, 768)
        assert config_from_dict({"window_size": [1024.0, 768]}).window_size == (1024, 768)

    def test_unknown_key_is_logged_and_skipped(self, caplog):
        with caplog.at_level(logging.WARNING, logger="logicism.config"):
            cfg = config_from_dict({"wire_colour": "#123456"})
        assert cfg == EditorConfig()
        assert "wire_colour" in caplog.text

    @pytest.mark.parametrize("data", [
        {"pin_hit_size": "big"},
        {"pin_hit_size": True},
        {"wire_color": 3},
        {"window_size": [800]},
        {"window_size": "800x600"},
        {"window_size": ["wide", 600]},
        {"window_size": [None, 600]},
        {"window_size": [800.5, 600]},
    ])
    def test_wrong_types_raise(self, data):
        with pytest.raises(ConfigError):
            config_from_dict(data)


class TestLoadConfig:

    def test_bundled_default_file(self):
        cfg = load_config()
        assert cfg.window_title == "Logicism"
        assert cfg.window_size == (800, 600)

    def test_explicit_path(self, tmp_path):
        path = write_json(tmp_path, {"window_title": "Scratch", "ghost_opacity": 0.25})
        cfg = load_config(path)
        assert cfg.window_title == "Scratch"
        assert cfg.ghost_opacity == 0.25

    def test_environment_variable(self, tmp_path, monkeypatch):
        path = write_json(tmp_path, {"grid_color": "#000000"})
        monkeypatch.setenv("LOGICISM_CONFIG", str(path))
        assert load_config().grid_color == "#000000"

    def test_explicit_path_wins_over_environment(self, tmp_path, monkeypatch):
        env_path = write_json(tmp_path, {"window_title": "From env"}, "env.json")
        arg_path = write_json(tmp_path, {"window_title": "From arg"}, "arg.json")
        monkeypatch.setenv("LOGICISM_CONFIG", str(env_path))
        assert load_config(arg_path).window_title == "From arg"

    def test_missing_explicit_file_raises(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "nope.json")

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_non_object_raises(self, tmp_path):
        path = write_json(tmp_path, [1, 2, 3])
        with pytest.raises(ConfigError):
            load_config(path)

    def test_missing_bundled_file_falls_back_to_defaults(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config_module, "DEFAULT_CONFIG_PATH", tmp_path / "absent.json")
        assert load_config() == EditorConfig()
