from __future__ import annotations

from typing import Sequence

import numpy as np

from medallion.geometry import Quaternion, Vector3
from medallion.mesh import Model, NormalMode, Polygon


def rotate_model(
    model: Model,
    pivot: Sequence[float],
    rotation: Quaternion,
    normals: NormalMode = "vertex",
) -> Model:
    """Return a copy of ``model`` rigidly rotated by ``rotation`` about ``pivot``.

    Each vertex ``v`` maps to ``rotation.rotate(v - pivot) + pivot``. Faces are
    rebuilt from the rotated vertices with the requested normal mode; texture
    coordinates are kept.
    """

    origin = np.asarray(Vector3.of(pivot))
    matrix = rotation.as_matrix()
    polygons = []
    for face in model:
        rotated = (face.vertices - origin) @ matrix.T + origin
        polygons.append(Polygon.from_vertices(rotated, normals=normals, uvs=face.uvs))
    return Model(tuple(polygons))


def rotate_about_axis(
    model: Model,
    axis: Sequence[float],
    angle: float,
    pivot: Sequence[float] = (0.0, 0.0, 0.0),
    normals: NormalMode = "vertex",
) -> Model:
    """Convenience wrapper: rotate ``angle`` radians about ``axis`` through ``pivot``."""
    return rotate_model(model, pivot, Quaternion.from_axis_angle(axis, angle), normals=normals)
