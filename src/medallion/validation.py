from __future__ import annotations

from typing import Sequence

import numpy as np


class ValidationError(ValueError):
    """Raised when validation constraints are violated."""


class MalformedShape(ValidationError):
    """Raised when a shape cannot be triangulated or extruded."""


class MalformedFace(ValidationError):
    """Raised when a polygon is built from mismatched vertex/normal/UV data."""


class ParseFailure(ValidationError):
    """Raised when a geometry file line cannot be parsed."""

    def __init__(self, message: str, line_number: int | None = None) -> None:
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class IOFailure(OSError):
    """Raised when the output resource cannot be opened or written."""


def require_points(
    value: Sequence[Sequence[float]] | np.ndarray,
    dim: int,
    label: str,
    error: type[ValidationError] = ValidationError,
) -> np.ndarray:
    try:
        arr = np.asarray(value, dtype=float)
    except (TypeError, ValueError) as exc:
        raise error(f"{label} must be numeric.") from exc
    if arr.size == 0:
        return np.zeros((0, dim), dtype=float)
    if arr.ndim != 2 or arr.shape[1] != dim:
        raise error(f"{label} must be Nx{dim} points.")
    if np.any(~np.isfinite(arr)):
        raise error(f"{label} contain invalid values.")
    return arr


def require_resolution(resolution: int, label: str = "resolution") -> int:
    value = int(resolution)
    if value < 3:
        raise ValueError(f"{label} must be >= 3.")
    return value
