"""Constrained Delaunay triangulation of shape loops.

Shapes are flattened into one point buffer (shape order, then point order)
and each shape contributes its closed loop of edges as segment constraints.
The actual triangulation is delegated to Shewchuk's Triangle through the
``triangle`` package using the ``p`` switch without quality refinement, so
no Steiner points are added unless constraint segments cross each other.

Output triangles lie in the ``y = 0`` plane: a 2D point ``(x, y)`` becomes
the vertex ``(x, 0, y)``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Sequence, Union

import numpy as np
import triangle

from medallion.geometry import Vector2
from medallion.mesh import NormalMode, Polygon
from medallion.shape import Shape
from medallion.validation import MalformedShape

logger = logging.getLogger(__name__)

TRIANGLE_SWITCHES = "pQ"

HoleSampler = Callable[[Shape], Vector2]


@dataclass(frozen=True)
class NoHole:
    """Triangulate every region enclosed by the shape loops."""


@dataclass(frozen=True)
class HoleAt:
    """Seed a hole at ``point`` for every shape.

    ``HoleAt((0.0, 0.0))`` matches the legacy behaviour of seeding the origin,
    which removes whichever enclosed region contains the origin.
    """

    point: tuple[float, float] = (0.0, 0.0)

    def __post_init__(self) -> None:
        object.__setattr__(self, "point", tuple(Vector2.of(self.point)))


@dataclass(frozen=True)
class NestedHoles:
    """Seed a hole inside every shape nested in an odd number of the others.

    This is the even-odd reading of glyph outlines: the counter of an ``o``
    lies inside its outer contour and is cut away, while an island inside
    that counter is filled again. Seeds are drawn from ``rng`` and avoid the
    shapes nested inside the counter.
    """

    rng: np.random.Generator | None = field(default=None, compare=False)


HolePolicy = Union[NoHole, HoleAt, NestedHoles]
NO_HOLE = NoHole()


def _require_shapes(shapes: Sequence[Shape]) -> list[Shape]:
    shapes = list(shapes)
    if not shapes:
        raise MalformedShape("Can't triangulate without any shapes.")
    for index, shape in enumerate(shapes):
        if not isinstance(shape, Shape):
            shape = Shape(shape)
            shapes[index] = shape
        if not shape.is_polygon:
            raise MalformedShape(
                f"Can't make a polygon with less than 3 points (shape {index} has {len(shape)})."
            )
    return shapes


def _flatten(shapes: Sequence[Shape], prefix: np.ndarray | None = None) -> tuple[np.ndarray, np.ndarray]:
    """Stack shape points after ``prefix`` and build their loop segments."""
    loops = [] if prefix is None else [np.asarray(prefix, dtype=float).reshape(-1, 2)]
    offset = 0 if prefix is None else loops[0].shape[0]
    segments = []
    if prefix is not None:
        segments.append(Shape(loops[0]).segments())
    for shape in shapes:
        loops.append(shape.points)
        segments.append(shape.segments(offset))
        offset += len(shape)
    return np.vstack(loops), np.vstack(segments).astype(np.int32)


def nesting_depths(shapes: Sequence[Shape]) -> list[int]:
    """How many of the other shapes enclose each shape's first point."""
    depths = []
    for index, shape in enumerate(shapes):
        first = shape.points[0]
        enclosing = [other for other_index, other in enumerate(shapes) if other_index != index]
        depths.append(sum(1 for other in enclosing if other.contains(first)))
    return depths


def _nested_hole_seeds(
    shapes: Sequence[Shape],
    rng: np.random.Generator | None,
    max_attempts: int = 1_000,
) -> np.ndarray:
    generator = rng or np.random.default_rng()
    depths = nesting_depths(shapes)
    seeds = []
    for index, shape in enumerate(shapes):
        if depths[index] % 2 == 0:
            continue
        inner = [
            other
            for other_index, other in enumerate(shapes)
            if depths[other_index] > depths[index] and shape.contains(other.points[0])
        ]
        for _ in range(max_attempts):
            candidate = shape.random_point_inside(generator)
            if not any(other.contains(candidate) for other in inner):
                seeds.append(tuple(candidate))
                break
        else:
            raise MalformedShape(f"Unable to place a hole inside shape {index}; it is covered by nested shapes.")
    return np.array(seeds, dtype=float).reshape(-1, 2)


def _hole_seeds(shapes: Sequence[Shape], hole: HolePolicy) -> np.ndarray:
    if isinstance(hole, NoHole):
        return np.zeros((0, 2), dtype=float)
    if isinstance(hole, HoleAt):
        return np.tile(np.asarray(hole.point, dtype=float), (len(shapes), 1))
    if isinstance(hole, NestedHoles):
        return _nested_hole_seeds(shapes, hole.rng)
    raise TypeError(f"Unsupported hole policy {hole!r}.")


def _triangulate(points: np.ndarray, segments: np.ndarray, holes: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    data: dict[str, np.ndarray] = {"vertices": points, "segments": segments}
    if holes.size:
        data["holes"] = holes
    result = triangle.triangulate(data, TRIANGLE_SWITCHES)
    vertices = np.asarray(result.get("vertices", points), dtype=float)
    faces = np.asarray(result.get("triangles", np.zeros((0, 3))), dtype=np.int64).reshape(-1, 3)
    logger.debug("Triangulated %d points / %d segments into %d triangles", len(points), len(segments), len(faces))
    return vertices, faces


def _to_polygons(vertices: np.ndarray, faces: np.ndarray, normals: NormalMode) -> list[Polygon]:
    lifted = np.column_stack([vertices[:, 0], np.zeros(len(vertices)), vertices[:, 1]])
    return [Polygon.from_vertices(lifted[face], normals=normals) for face in faces]


def fill(
    shapes: Sequence[Shape],
    hole: HolePolicy = NO_HOLE,
    normals: NormalMode = "vertex",
) -> list[Polygon]:
    """Triangulate the regions enclosed by ``shapes``.

    Every shape boundary is both outer boundary and constraint. ``hole``
    chooses where hole seeds go; see :class:`HoleAt` and :class:`NestedHoles`.
    Raises :class:`MalformedShape` when ``shapes`` is empty or any shape has
    fewer than three points.
    """

    shapes = _require_shapes(shapes)
    points, segments = _flatten(shapes)
    vertices, faces = _triangulate(points, segments, _hole_seeds(shapes, hole))
    return _to_polygons(vertices, faces, normals)


def random_interior_point(rng: np.random.Generator | None = None) -> HoleSampler:
    """Hole sampler drawing a uniformly random point strictly inside each shape."""
    generator = rng or np.random.default_rng()

    def sample(shape: Shape) -> Vector2:
        return shape.random_point_inside(generator)

    return sample


def carve(
    width: float,
    height: float,
    shapes: Sequence[Shape],
    hole_sampler: HoleSampler | None = None,
    rng: np.random.Generator | None = None,
    normals: NormalMode = "vertex",
) -> list[Polygon]:
    """Triangulate the rectangle ``(0, 0)``-``(width, height)`` with ``shapes`` cut out.

    Each shape is seeded with one hole point from ``hole_sampler`` (by default
    a random interior point drawn from ``rng``), so shapes must not overlap.
    """

    if not (np.isfinite(width) and np.isfinite(height)) or width <= 0 or height <= 0:
        raise ValueError("width and height must be positive.")
    shapes = _require_shapes(shapes)
    sampler = hole_sampler or random_interior_point(rng)

    corners = np.array([[0.0, 0.0], [0.0, height], [width, height], [width, 0.0]], dtype=float)
    points, segments = _flatten(shapes, prefix=corners)
    holes = np.array([tuple(Vector2.of(sampler(shape))) for shape in shapes], dtype=float)
    vertices, faces = _triangulate(points, segments, holes)
    return _to_polygons(vertices, faces, normals)
