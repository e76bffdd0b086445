from __future__ import annotations

from typing import Literal, Sequence

import numpy as np

from medallion.mesh import NormalMode, Polygon
from medallion.validation import require_resolution

PLATE_UVS = ((0.0, 0.0), (1.0, 0.0), (1.0, 1.0))

PlateFacing = Literal["down", "up"]


def _check_radius(radius: float, label: str, positive: bool = False) -> float:
    value = float(radius)
    if not np.isfinite(value) or value < 0:
        raise ValueError(f"{label} must be a non-negative number.")
    if positive and value == 0:
        raise ValueError(f"{label} must be positive.")
    return value


def _circle_point(angle: float, radius: float, height: float) -> np.ndarray:
    return np.array([np.cos(angle) * radius, height, np.sin(angle) * radius], dtype=float)


def wedge_angles(resolution: int) -> list[tuple[float, float]]:
    """``[i * step, (i + 1) * step)`` for each wedge, with ``step = 2π / resolution``."""
    resolution = require_resolution(resolution)
    step = 2.0 * np.pi / resolution
    return [(step * i, step * (i + 1)) for i in range(resolution)]


def make_square_with_texture(
    bottom_left: Sequence[float],
    top_left: Sequence[float],
    top_right: Sequence[float],
    bottom_right: Sequence[float],
    bottom_left_uv: Sequence[float],
    top_left_uv: Sequence[float],
    top_right_uv: Sequence[float],
    bottom_right_uv: Sequence[float],
    normals: NormalMode = "vertex",
) -> list[Polygon]:
    """Split a textured quad into ``[bl, tl, br]`` and ``[tl, tr, br]``."""
    return [
        Polygon.from_vertices(
            [bottom_left, top_left, bottom_right],
            uvs=[bottom_left_uv, top_left_uv, bottom_right_uv],
            normals=normals,
        ),
        Polygon.from_vertices(
            [top_left, top_right, bottom_right],
            uvs=[top_left_uv, top_right_uv, bottom_right_uv],
            normals=normals,
        ),
    ]


def make_bottom_plate(
    resolution: int,
    radius: float,
    height: float = 0.0,
    normals: NormalMode = "vertex",
) -> list[Polygon]:
    """Downward-facing disk at ``y = height`` made of ``resolution`` wedges around the axis."""
    radius = _check_radius(radius, "radius", positive=True)
    height = float(height)
    center = np.array([0.0, height, 0.0], dtype=float)
    polys = []
    for angle, angle_next in wedge_angles(resolution):
        points = [_circle_point(angle, radius, height), _circle_point(angle_next, radius, height), center]
        polys.append(Polygon.from_vertices(points, normals=normals, uvs=PLATE_UVS))
    return polys


def make_top_plate(
    resolution: int,
    radius: float,
    height: float,
    normals: NormalMode = "vertex",
) -> list[Polygon]:
    """Upward-facing disk at ``y = height``, wound opposite to :func:`make_bottom_plate`."""
    radius = _check_radius(radius, "radius", positive=True)
    height = float(height)
    center = np.array([0.0, height, 0.0], dtype=float)
    polys = []
    for angle, angle_next in wedge_angles(resolution):
        points = [center, _circle_point(angle_next, radius, height), _circle_point(angle, radius, height)]
        polys.append(Polygon.from_vertices(points, normals=normals, uvs=PLATE_UVS))
    return polys


def make_plate(
    resolution: int,
    radius: float,
    height: float = 0.0,
    facing: PlateFacing = "down",
    normals: NormalMode = "vertex",
) -> list[Polygon]:
    """Disk at ``y = height`` whose winding faces ``"down"`` (bottom) or ``"up"`` (top)."""
    if facing == "down":
        return make_bottom_plate(resolution, radius, height, normals=normals)
    if facing == "up":
        return make_top_plate(resolution, radius, height, normals=normals)
    raise ValueError(f"Unknown plate facing '{facing}'.")


def make_ring(
    resolution: int,
    start_height: float,
    end_height: float,
    bottom_radius: float,
    top_radius: float,
    texture_repeat: int = 8,
    normals: NormalMode = "vertex",
) -> list[Polygon]:
    """Lateral band between two circles, ``2 * resolution`` triangles.

    The texture wraps ``texture_repeat`` times around the circumference; U
    saturates at 1.0 so the last partial wedge never runs past the seam.
    """

    bottom_radius = _check_radius(bottom_radius, "bottom_radius")
    top_radius = _check_radius(top_radius, "top_radius")
    if bottom_radius == 0 and top_radius == 0:
        raise ValueError("A ring needs at least one positive radius.")
    if texture_repeat <= 0:
        raise ValueError("texture_repeat must be positive.")
    start_height = float(start_height)
    end_height = float(end_height)
    wedges = wedge_angles(resolution)
    wedges_per_repeat = len(wedges) / float(texture_repeat)

    def u(index: int) -> float:
        return min(index / wedges_per_repeat, 1.0)

    polys: list[Polygon] = []
    for side, (angle, angle_next) in enumerate(wedges):
        polys.extend(
            make_square_with_texture(
                _circle_point(angle, bottom_radius, start_height),
                _circle_point(angle, top_radius, end_height),
                _circle_point(angle_next, top_radius, end_height),
                _circle_point(angle_next, bottom_radius, start_height),
                (u(side), 0.0),
                (u(side), 1.0),
                (u(side + 1), 1.0),
                (u(side + 1), 0.0),
                normals=normals,
            )
        )
    return polys
