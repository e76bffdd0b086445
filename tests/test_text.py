from __future__ import annotations

import numpy as np
import pytest

from medallion.shape import Shape

from tests.helpers import total_area
from medallion.text import MatplotlibGlyphProvider, text_to_shapes
from medallion.triangulate import NestedHoles, fill


def test_matplotlib_glyph_with_counter():
    provider = MatplotlibGlyphProvider()
    shapes = provider.shapes_for("O")
    assert len(shapes) >= 2
    assert all(isinstance(shape, Shape) and shape.is_polygon for shape in shapes)
    height = max(float(shape.bounds.size[1]) for shape in shapes)
    assert 0.0 < height <= 1.0


def test_matplotlib_space_has_no_outline():
    assert MatplotlibGlyphProvider().shapes_for(" ") == []


def test_matplotlib_glyphs_are_cached():
    provider = MatplotlibGlyphProvider()
    first = provider.shapes_for("A")
    second = provider.shapes_for("A")
    assert first == second
    assert first is not second


def test_matplotlib_rejects_bad_size():
    with pytest.raises(ValueError):
        MatplotlibGlyphProvider(font_size=0.0)


def test_text_advances_by_accumulated_width(glyphs):
    letters = text_to_shapes("ab", glyphs)
    assert len(letters) == 2
    assert np.allclose(letters[0][0].bounds.minimum, [1.0, 0.0])
    assert np.allclose(letters[1][0].bounds.minimum, [2.0, 0.0])
    assert glyphs.requested == ["a", "b"]


def test_text_keeps_slot_for_blank_characters(glyphs):
    letters = text_to_shapes("a b", glyphs)
    assert [len(letter) for letter in letters] == [1, 0, 1]
    assert np.allclose(letters[2][0].bounds.minimum, [2.0, 0.0])


def test_empty_text(glyphs):
    assert text_to_shapes("", glyphs) == []


def test_matplotlib_counter_is_cut_out(rng):
    shapes = MatplotlibGlyphProvider().shapes_for("o")
    areas = sorted(abs(shape.signed_area()) for shape in shapes)
    assert len(areas) == 2
    polys = fill(shapes, hole=NestedHoles(rng))
    assert total_area(polys) == pytest.approx(areas[1] - areas[0], rel=1e-6)
