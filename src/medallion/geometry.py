"""Value types shared by the mesh pipeline: vectors, quaternions and bounds."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

import numpy as np


def _to_vec(value: Sequence[float], size: int, label: str) -> np.ndarray:
    try:
        arr = np.asarray(value, dtype=float).reshape(size)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{label} must be a {size}D coordinate.") from exc
    return arr


def _normalize(vector: Sequence[float]) -> np.ndarray:
    arr = _to_vec(vector, 3, "axis")
    norm = np.linalg.norm(arr)
    if norm == 0:
        raise ValueError("Rotation axis must be non-zero.")
    return arr / norm


@dataclass(frozen=True)
class Vector2:
    x: float = 0.0
    y: float = 0.0

    @classmethod
    def of(cls, value: Sequence[float]) -> "Vector2":
        if isinstance(value, Vector2):
            return value
        x, y = _to_vec(value, 2, "point")
        return cls(float(x), float(y))

    def __add__(self, other: Sequence[float]) -> "Vector2":
        other = Vector2.of(other)
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Sequence[float]) -> "Vector2":
        other = Vector2.of(other)
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> "Vector2":
        return Vector2(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __neg__(self) -> "Vector2":
        return Vector2(-self.x, -self.y)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __len__(self) -> int:
        return 2

    def __getitem__(self, index: int) -> float:
        return (self.x, self.y)[index]

    def __array__(self, dtype=None, copy=None) -> np.ndarray:
        return np.array([self.x, self.y], dtype=dtype or float)

    def dot(self, other: Sequence[float]) -> float:
        other = Vector2.of(other)
        return self.x * other.x + self.y * other.y

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def rotate(self, angle: float, pivot: Sequence[float] = (0.0, 0.0)) -> "Vector2":
        """Rotate counter-clockwise by ``angle`` radians around ``pivot``."""
        pivot = Vector2.of(pivot)
        dx = self.x - pivot.x
        dy = self.y - pivot.y
        c = math.cos(angle)
        s = math.sin(angle)
        return Vector2(dx * c - dy * s + pivot.x, dx * s + dy * c + pivot.y)


@dataclass(frozen=True)
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def of(cls, value: Sequence[float]) -> "Vector3":
        if isinstance(value, Vector3):
            return value
        x, y, z = _to_vec(value, 3, "point")
        return cls(float(x), float(y), float(z))

    def __add__(self, other: Sequence[float]) -> "Vector3":
        other = Vector3.of(other)
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Sequence[float]) -> "Vector3":
        other = Vector3.of(other)
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, factor: float) -> "Vector3":
        return Vector3(self.x * factor, self.y * factor, self.z * factor)

    __rmul__ = __mul__

    def __neg__(self) -> "Vector3":
        return Vector3(-self.x, -self.y, -self.z)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __len__(self) -> int:
        return 3

    def __getitem__(self, index: int) -> float:
        return (self.x, self.y, self.z)[index]

    def __array__(self, dtype=None, copy=None) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=dtype or float)

    def dot(self, other: Sequence[float]) -> float:
        other = Vector3.of(other)
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Sequence[float]) -> "Vector3":
        return Vector3.of(np.cross(np.asarray(self), _to_vec(other, 3, "vector")))

    def length(self) -> float:
        return math.sqrt(self.dot(self))

    def rotate(
        self,
        axis: Sequence[float],
        angle: float,
        pivot: Sequence[float] = (0.0, 0.0, 0.0),
    ) -> "Vector3":
        """Rotate by ``angle`` radians around ``axis`` passing through ``pivot``."""
        k = _normalize(axis)
        origin = _to_vec(pivot, 3, "pivot")
        p = np.asarray(self) - origin
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        rotated = p * cos_a + np.cross(k, p) * sin_a + k * np.dot(k, p) * (1 - cos_a)
        return Vector3.of(rotated + origin)


@dataclass(frozen=True)
class Quaternion:
    """Unit quaternion describing a 3D rotation."""

    w: float = 1.0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def identity(cls) -> "Quaternion":
        return cls(1.0, 0.0, 0.0, 0.0)

    @classmethod
    def from_axis_angle(cls, axis: Sequence[float], angle: float) -> "Quaternion":
        """Rotation of ``angle`` radians about ``axis`` (right-hand rule)."""
        k = _normalize(axis)
        half = angle / 2.0
        s = math.sin(half)
        return cls(math.cos(half), float(k[0] * s), float(k[1] * s), float(k[2] * s))

    def __mul__(self, other: "Quaternion") -> "Quaternion":
        """Hamilton product; ``(a * b).rotate(v) == a.rotate(b.rotate(v))``."""
        w1, x1, y1, z1 = self.w, self.x, self.y, self.z
        w2, x2, y2, z2 = other.w, other.x, other.y, other.z
        return Quaternion(
            w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
            w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
            w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
        )

    def conjugate(self) -> "Quaternion":
        return Quaternion(self.w, -self.x, -self.y, -self.z)

    def norm(self) -> float:
        return math.sqrt(self.w * self.w + self.x * self.x + self.y * self.y + self.z * self.z)

    def normalized(self) -> "Quaternion":
        n = self.norm()
        if n == 0:
            raise ValueError("Cannot normalize a zero quaternion.")
        return Quaternion(self.w / n, self.x / n, self.y / n, self.z / n)

    def as_matrix(self) -> np.ndarray:
        w, x, y, z = self.normalized().as_tuple()
        return np.array(
            [
                [1 - 2 * (y * y + z * z), 2 * (x * y - z * w), 2 * (x * z + y * w)],
                [2 * (x * y + z * w), 1 - 2 * (x * x + z * z), 2 * (y * z - x * w)],
                [2 * (x * z - y * w), 2 * (y * z + x * w), 1 - 2 * (x * x + y * y)],
            ],
            dtype=float,
        )

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.w, self.x, self.y, self.z)

    def rotate(self, vector: Sequence[float]) -> Vector3:
        return Vector3.of(self.as_matrix() @ _to_vec(vector, 3, "vector"))

    def rotate_points(self, points: np.ndarray) -> np.ndarray:
        pts = np.asarray(points, dtype=float).reshape(-1, 3)
        return pts @ self.as_matrix().T


@dataclass(frozen=True, eq=False)
class BoundingBox:
    minimum: np.ndarray
    maximum: np.ndarray

    def __post_init__(self) -> None:
        size = np.asarray(self.minimum).size
        object.__setattr__(self, "minimum", _to_vec(self.minimum, size, "minimum"))
        object.__setattr__(self, "maximum", _to_vec(self.maximum, size, "maximum"))
        if np.any(self.maximum < self.minimum):
            raise ValueError("Bounding box maximum must not be below its minimum.")

    @classmethod
    def from_points(cls, points: Iterable[Sequence[float]] | np.ndarray) -> "BoundingBox":
        arr = np.asarray(points if isinstance(points, np.ndarray) else list(points), dtype=float)
        if arr.size == 0:
            raise ValueError("Cannot bound an empty point set.")
        arr = arr.reshape(arr.shape[0], -1)
        return cls(arr.min(axis=0), arr.max(axis=0))

    @property
    def center(self) -> np.ndarray:
        return (self.minimum + self.maximum) / 2.0

    @property
    def size(self) -> np.ndarray:
        return self.maximum - self.minimum

    def union(self, other: "BoundingBox") -> "BoundingBox":
        return BoundingBox(np.minimum(self.minimum, other.minimum), np.maximum(self.maximum, other.maximum))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoundingBox):
            return NotImplemented
        return bool(np.array_equal(self.minimum, other.minimum) and np.array_equal(self.maximum, other.maximum))
