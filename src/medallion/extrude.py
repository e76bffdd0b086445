from __future__ import annotations

from typing import Sequence

import numpy as np

from medallion.mesh import Model, NormalMode, Polygon
from medallion.shape import Shape
from medallion.surfaces import make_square_with_texture
from medallion.triangulate import NO_HOLE, HolePolicy, fill

WALL_UVS = ((0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0))


def _normalize(vector: Sequence[float]) -> np.ndarray:
    arr = np.asarray(vector, dtype=float).reshape(3)
    norm = np.linalg.norm(arr)
    if norm == 0:
        raise ValueError("Direction vector must be non-zero.")
    return arr / norm


def stitch(near: Model, far: Model, normals: NormalMode = "vertex") -> list[Polygon]:
    """Wall quads joining each face edge of ``near`` to the same edge of ``far``.

    Both models must have the same face layout. Quad corners are
    ``(near[v], far[v], far[v + 1], near[v + 1])``, two triangles per edge.
    """

    if len(near) != len(far):
        raise ValueError("stitch requires models with matching faces.")
    walls: list[Polygon] = []
    for start_face, end_face in zip(near, far):
        start = start_face.vertices
        end = end_face.vertices
        count = len(start)
        for v in range(count):
            nxt = (v + 1) % count
            walls.extend(
                make_square_with_texture(start[v], end[v], end[nxt], start[nxt], *WALL_UVS, normals=normals)
            )
    return walls


def extrude_shapes(
    shapes: Sequence[Shape],
    distance: float,
    direction: Sequence[float] = (0.0, 1.0, 0.0),
    hole: HolePolicy = NO_HOLE,
    normals: NormalMode = "vertex",
) -> Model:
    """Fill ``shapes`` and sweep the cap ``distance`` along ``direction``.

    Returns the near cap, the far cap and the stitched walls, merged in that
    order. Every cap triangle contributes three wall quads.
    """

    distance = float(distance)
    if not np.isfinite(distance):
        raise ValueError("distance must be finite.")
    offset = _normalize(direction) * distance

    near = Model(tuple(fill(shapes, hole=hole, normals=normals)))
    far = near.translate(offset)
    walls = Model(tuple(stitch(near, far, normals=normals)))
    return near.merge(far, walls)
