from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".medallion"
CONFIG_FILE = CONFIG_DIR / "medallion.cfg"
DEFAULT_CONFIG: Dict[str, Any] = {
    "_comment": "Generation defaults for `medallion build`. CLI options override these values.",
    "thickness": 0.6,
    "impression": 0.1,
    "sides": 64,
    "bulge_resolution": 10,
    "texture_repeat": 8,
    "top_text": "Hello",
    "bottom_text": "World",
    "font_family": "DejaVu Sans",
    "output": "out.obj",
}


@dataclass(frozen=True)
class MedallionSettings:
    """Resolved generation parameters from medallion.cfg."""

    thickness: float = 0.6
    impression: float = 0.1
    sides: int = 64
    bulge_resolution: int = 10
    texture_repeat: int = 8
    top_text: str = "Hello"
    bottom_text: str = "World"
    font_family: str = "DejaVu Sans"
    output: str = "out.obj"


def ensure_user_config() -> None:
    """Ensure ~/.medallion/medallion.cfg exists with sane defaults."""

    try:
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    except OSError:
        return

    if CONFIG_FILE.exists():
        return

    try:
        CONFIG_FILE.write_text(json.dumps(DEFAULT_CONFIG, indent=2) + "\n")
    except OSError:
        return


def _load_user_config(path: Path | None = None) -> Dict[str, Any]:
    if path is None:
        ensure_user_config()
        path = CONFIG_FILE
    try:
        loaded = json.loads(Path(path).read_text())
    except (OSError, json.JSONDecodeError):
        logger.debug("Falling back to default settings; %s is missing or unreadable", path)
        return DEFAULT_CONFIG.copy()
    if not isinstance(loaded, dict):
        return DEFAULT_CONFIG.copy()
    return loaded


def _coerce(name: str, value: Any, default: Any) -> Any:
    if isinstance(default, str):
        return value if isinstance(value, str) else default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if isinstance(default, int):
        if float(value) != int(value):
            return default
        value = int(value)
        minimum = 3 if name == "sides" else 1
        return value if value >= minimum else default
    value = float(value)
    if name == "impression":
        return value if value >= 0 else default
    return value if value > 0 else default


def get_settings(path: Path | None = None) -> MedallionSettings:
    """Return generation settings, falling back per key to the defaults."""

    raw_config = _load_user_config(path)
    values: Dict[str, Any] = {}
    for item in fields(MedallionSettings):
        default = DEFAULT_CONFIG[item.name]
        value = _coerce(item.name, raw_config.get(item.name, default), default)
        if value is default and item.name in raw_config and raw_config[item.name] != default:
            logger.warning("Ignoring invalid %s=%r in settings", item.name, raw_config[item.name])
        values[item.name] = value

    settings = MedallionSettings(**values)
    if settings.impression >= settings.thickness:
        logger.warning("Ignoring impression >= thickness in settings")
        settings = MedallionSettings(
            **{**values, "thickness": DEFAULT_CONFIG["thickness"], "impression": DEFAULT_CONFIG["impression"]}
        )
    return settings
