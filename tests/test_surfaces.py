from __future__ import annotations

import numpy as np
import pytest

from medallion.surfaces import (
    make_bottom_plate,
    make_plate,
    make_ring,
    make_square_with_texture,
    make_top_plate,
    wedge_angles,
)

from tests.helpers import total_area


def _radii(points: np.ndarray) -> np.ndarray:
    return np.linalg.norm(points[:, [0, 2]], axis=1)


def test_wedge_angles_partition_circle():
    wedges = wedge_angles(6)
    assert len(wedges) == 6
    assert wedges[0][0] == pytest.approx(0.0)
    assert wedges[-1][1] == pytest.approx(2.0 * np.pi)
    for (_, end), (start, _) in zip(wedges, wedges[1:]):
        assert end == pytest.approx(start)


def test_square_with_texture_split():
    bl, tl, tr, br = (0.0, 0.0, 0.0), (0.0, 1.0, 0.0), (1.0, 1.0, 0.0), (1.0, 0.0, 0.0)
    first, second = make_square_with_texture(bl, tl, tr, br, (0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0))
    assert np.allclose(first.vertices, [bl, tl, br])
    assert np.allclose(second.vertices, [tl, tr, br])
    assert np.allclose(first.uvs, [(0.0, 0.0), (0.0, 1.0), (1.0, 0.0)])
    assert np.allclose(second.uvs, [(0.0, 1.0), (1.0, 1.0), (1.0, 0.0)])


def test_bottom_plate_four_sides():
    polys = make_bottom_plate(4, 1.0)
    assert len(polys) == 4
    assert np.allclose(polys[0].vertices, [(1.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, 0.0, 0.0)], atol=1e-12)
    assert total_area(polys) == pytest.approx(2.0)
    for poly in polys:
        assert np.allclose(poly.uvs, [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)])
        assert poly.face_normal()[1] == pytest.approx(-1.0)


def test_top_plate_faces_up():
    polys = make_top_plate(8, 0.5, 2.0)
    assert len(polys) == 8
    for poly in polys:
        assert np.allclose(poly.vertices[0], [0.0, 2.0, 0.0])
        assert np.allclose(poly.vertices[:, 1], 2.0)
        assert poly.face_normal()[1] == pytest.approx(1.0)


def test_make_plate_facing():
    assert np.allclose(make_plate(5, 1.0)[0].vertices, make_bottom_plate(5, 1.0)[0].vertices)
    assert np.allclose(make_plate(5, 1.0, 3.0, facing="up")[0].vertices, make_top_plate(5, 1.0, 3.0)[0].vertices)
    up = make_plate(4, 1.0, 0.0, facing="up")
    down = make_plate(4, 1.0, 2.0, facing="down")
    assert all(poly.face_normal()[1] == pytest.approx(1.0) for poly in up)
    assert all(poly.face_normal()[1] == pytest.approx(-1.0) for poly in down)
    assert all(np.allclose(poly.vertices[:, 1], 2.0) for poly in down)
    with pytest.raises(ValueError):
        make_plate(4, 1.0, facing="sideways")


def test_ring_counts_and_radii():
    polys = make_ring(12, 0.0, 1.0, 2.0, 1.5)
    assert len(polys) == 24
    verts = np.vstack([poly.vertices for poly in polys])
    bottom = verts[np.isclose(verts[:, 1], 0.0)]
    top = verts[np.isclose(verts[:, 1], 1.0)]
    assert len(bottom) + len(top) == len(verts)
    assert np.allclose(_radii(bottom), 2.0)
    assert np.allclose(_radii(top), 1.5)


def test_ring_first_quad_layout():
    first, second = make_ring(4, 0.0, 1.0, 1.0, 1.0)[:2]
    assert np.allclose(first.vertices, [(1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 0.0, 1.0)], atol=1e-12)
    assert np.allclose(second.vertices, [(1.0, 1.0, 0.0), (0.0, 1.0, 1.0), (0.0, 0.0, 1.0)], atol=1e-12)


def test_ring_texture_wraps_and_saturates():
    polys = make_ring(16, 0.0, 1.0, 1.0, 1.0, texture_repeat=8)
    assert np.allclose(polys[0].uvs, [(0.0, 0.0), (0.0, 1.0), (0.5, 0.0)])
    assert np.allclose(polys[2].uvs, [(0.5, 0.0), (0.5, 1.0), (1.0, 0.0)])
    us = np.concatenate([poly.uvs[:, 0] for poly in polys])
    assert us.max() == pytest.approx(1.0)
    assert np.allclose(polys[-1].uvs[:, 0], 1.0)


def test_flat_ring_is_annulus():
    polys = make_ring(64, 1.0, 1.0, 1.0, 0.5)
    area = total_area(polys)
    assert area == pytest.approx(np.pi * (1.0 - 0.25), rel=1e-2)


def test_invalid_parameters():
    with pytest.raises(ValueError):
        make_bottom_plate(2, 1.0)
    with pytest.raises(ValueError):
        make_top_plate(8, -1.0, 0.0)
    with pytest.raises(ValueError):
        make_ring(8, 0.0, 1.0, 1.0, 1.0, texture_repeat=0)


def test_bottom_plate_wedges_share_edges():
    polys = make_bottom_plate(4, 1.0)
    for poly in polys:
        assert np.allclose(poly.vertices[2], [0.0, 0.0, 0.0])
    assert np.allclose(polys[0].vertices[1], polys[1].vertices[0])


def test_zero_radius_is_rejected():
    with pytest.raises(ValueError):
        make_bottom_plate(4, 0.0)
    with pytest.raises(ValueError):
        make_top_plate(4, 0.0, 1.0)
    with pytest.raises(ValueError):
        make_ring(4, 0.0, 1.0, 0.0, 0.0)


def test_cone_ring_is_allowed():
    polys = make_ring(6, 0.0, 1.0, 1.0, 0.0)
    assert len(polys) == 12
    apex = np.concatenate([poly.vertices for poly in polys])
    assert np.allclose(apex[np.isclose(apex[:, 1], 1.0)], [0.0, 1.0, 0.0])
