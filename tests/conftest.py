from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import pytest

from medallion import _config
from tests.helpers import SquareGlyphs


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    config_dir = tmp_path / "config"
    monkeypatch.setattr(_config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(_config, "CONFIG_FILE", config_dir / "medallion.cfg")
    return config_dir


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger("medallion")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def glyphs() -> SquareGlyphs:
    return SquareGlyphs()
