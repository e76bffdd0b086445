from __future__ import annotations

import json
import logging

from medallion import _config
from medallion._config import DEFAULT_CONFIG, MedallionSettings, ensure_user_config, get_settings


def _write(path, payload) -> None:
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload))


def test_default_config_is_created(isolated_config):
    settings = get_settings()
    assert settings == MedallionSettings()
    stored = json.loads(_config.CONFIG_FILE.read_text())
    assert stored["sides"] == DEFAULT_CONFIG["sides"]
    assert stored["top_text"] == "Hello"


def test_existing_config_is_not_overwritten(isolated_config):
    isolated_config.mkdir(parents=True)
    _write(_config.CONFIG_FILE, {"sides": 12})
    ensure_user_config()
    assert json.loads(_config.CONFIG_FILE.read_text()) == {"sides": 12}


def test_values_override_defaults(tmp_path):
    path = tmp_path / "custom.cfg"
    _write(path, {"thickness": 1.0, "impression": 0.25, "sides": 12, "top_text": "Hi", "output": "medal.obj"})
    settings = get_settings(path)
    assert settings.thickness == 1.0
    assert settings.impression == 0.25
    assert settings.sides == 12
    assert settings.top_text == "Hi"
    assert settings.bottom_text == "World"
    assert settings.output == "medal.obj"


def test_invalid_values_fall_back_per_key(tmp_path, caplog):
    path = tmp_path / "custom.cfg"
    _write(path, {"sides": 2, "bulge_resolution": 1.5, "texture_repeat": True, "top_text": 5, "thickness": 0.8})
    with caplog.at_level(logging.WARNING, logger="medallion._config"):
        settings = get_settings(path)
    assert settings.sides == 64
    assert settings.bulge_resolution == 10
    assert settings.texture_repeat == 8
    assert settings.top_text == "Hello"
    assert settings.thickness == 0.8
    assert "sides" in caplog.text


def test_impression_must_stay_below_thickness(tmp_path):
    path = tmp_path / "custom.cfg"
    _write(path, {"thickness": 0.2, "impression": 0.3, "sides": 16})
    settings = get_settings(path)
    assert settings.thickness == DEFAULT_CONFIG["thickness"]
    assert settings.impression == DEFAULT_CONFIG["impression"]
    assert settings.sides == 16


def test_unreadable_config_uses_defaults(tmp_path):
    broken = tmp_path / "broken.cfg"
    _write(broken, "{not json")
    assert get_settings(broken) == MedallionSettings()

    listed = tmp_path / "list.cfg"
    _write(listed, [1, 2, 3])
    assert get_settings(listed) == MedallionSettings()

    assert get_settings(tmp_path / "missing.cfg") == MedallionSettings()
