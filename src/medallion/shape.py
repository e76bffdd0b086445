from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

import numpy as np

from medallion.geometry import BoundingBox, Vector2
from medallion.validation import MalformedShape, require_points


def _scale_factors(factor: float | Sequence[float]) -> np.ndarray:
    arr = np.asarray(factor, dtype=float)
    if arr.ndim == 0:
        return np.full(2, float(arr))
    return arr.reshape(2)


@dataclass(frozen=True, eq=False)
class Shape:
    """A closed loop of 2D points.

    The loop is always closed implicitly: point ``N - 1`` connects back to
    point ``0``. Repeated consecutive points and a duplicated closing point in
    the raw input are dropped, so ``edges()`` never yields a zero-length
    segment. At least three
    points are needed before a shape can be triangulated (``is_polygon``);
    shorter loops are representable so raw contour data can be inspected and
    rejected with :class:`MalformedShape` where it is used.

    Every transform returns a new shape.
    """

    points: np.ndarray

    def __post_init__(self) -> None:
        pts = require_points(self.points, 2, "Shape points", error=MalformedShape)
        if pts.shape[0] > 1:
            repeated = np.all(np.isclose(pts[1:], pts[:-1]), axis=1)
            pts = pts[np.concatenate([[True], ~repeated])]
        if pts.shape[0] > 1 and np.allclose(pts[0], pts[-1]):
            pts = pts[:-1]
        pts = pts.copy()
        pts.setflags(write=False)
        object.__setattr__(self, "points", pts)

    def __len__(self) -> int:
        return int(self.points.shape[0])

    def __iter__(self) -> Iterator[Vector2]:
        for x, y in self.points:
            yield Vector2(float(x), float(y))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Shape):
            return NotImplemented
        return bool(np.array_equal(self.points, other.points))

    @property
    def is_polygon(self) -> bool:
        return len(self) >= 3

    def edges(self) -> np.ndarray:
        """Index pairs ``(i, (i + 1) % N)`` for every edge, closing edge included."""
        count = len(self)
        start = np.arange(count, dtype=np.int64)
        return np.column_stack([start, (start + 1) % max(count, 1)])

    def segments(self, offset: int = 0) -> np.ndarray:
        """``edges()`` shifted by ``offset`` into a flattened point buffer."""
        return self.edges() + int(offset)

    @property
    def bounds(self) -> BoundingBox:
        if len(self) == 0:
            raise MalformedShape("An empty shape has no bounds.")
        return BoundingBox.from_points(self.points)

    @property
    def center(self) -> Vector2:
        return Vector2.of(self.bounds.center)

    def signed_area(self) -> float:
        if len(self) < 3:
            return 0.0
        x = self.points[:, 0]
        y = self.points[:, 1]
        return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1)))

    def translate(self, offset: Sequence[float]) -> "Shape":
        return Shape(self.points + np.asarray(Vector2.of(offset)))

    def scale(self, factor: float | Sequence[float], pivot: Sequence[float] = (0.0, 0.0)) -> "Shape":
        origin = np.asarray(Vector2.of(pivot))
        return Shape((self.points - origin) * _scale_factors(factor) + origin)

    def rotate(self, angle: float, pivot: Sequence[float] = (0.0, 0.0)) -> "Shape":
        """Rotate counter-clockwise by ``angle`` radians around ``pivot``."""
        origin = np.asarray(Vector2.of(pivot))
        c = np.cos(angle)
        s = np.sin(angle)
        rot = np.array([[c, -s], [s, c]], dtype=float)
        return Shape((self.points - origin) @ rot.T + origin)

    def contains(self, point: Sequence[float]) -> bool:
        """True when ``point`` lies strictly inside the loop (even-odd rule)."""
        if len(self) < 3:
            return False
        px, py = Vector2.of(point)
        pts = self.points
        nxt = np.roll(pts, -1, axis=0)

        # points on an edge are not interior
        edge = nxt - pts
        rel = np.array([px, py]) - pts
        cross = edge[:, 0] * rel[:, 1] - edge[:, 1] * rel[:, 0]
        dot = edge[:, 0] * rel[:, 0] + edge[:, 1] * rel[:, 1]
        length_sq = np.einsum("ij,ij->i", edge, edge)
        on_edge = np.isclose(cross, 0.0, atol=1e-12) & (dot >= 0) & (dot <= length_sq)
        if np.any(on_edge):
            return False

        inside = False
        for (x0, y0), (x1, y1) in zip(pts, nxt):
            if (y0 > py) != (y1 > py):
                x_cross = x0 + (py - y0) * (x1 - x0) / (y1 - y0)
                if px < x_cross:
                    inside = not inside
        return inside

    def random_point_inside(
        self,
        rng: np.random.Generator | None = None,
        max_attempts: int = 10_000,
    ) -> Vector2:
        """Sample a point strictly inside the shape by rejection against its bounds."""
        if len(self) < 3:
            raise MalformedShape("Can't sample inside a shape with less than 3 points.")
        rng = rng or np.random.default_rng()
        box = self.bounds
        for _ in range(max_attempts):
            candidate = rng.uniform(box.minimum, box.maximum)
            if self.contains(candidate):
                return Vector2.of(candidate)
        raise MalformedShape("Unable to find a point inside the shape; is it degenerate?")


def make_circle(resolution: int, radius: float, center: Sequence[float] = (0.0, 0.0)) -> Shape:
    """Counter-clockwise ``resolution``-gon approximating a circle."""
    if resolution < 3:
        raise ValueError("resolution must be >= 3.")
    if not np.isfinite(radius) or radius <= 0:
        raise ValueError("radius must be positive.")
    angles = np.arange(resolution) * (2.0 * np.pi / resolution)
    origin = np.asarray(Vector2.of(center))
    return Shape(np.column_stack([np.cos(angles), np.sin(angles)]) * radius + origin)


def center_of_bounding_box_of_shapes(shapes: Iterable[Shape]) -> Vector2:
    boxes = [shape.bounds for shape in shapes]
    if not boxes:
        raise ValueError("center_of_bounding_box_of_shapes requires at least one shape.")
    total = boxes[0]
    for box in boxes[1:]:
        total = total.union(box)
    return Vector2.of(total.center)
