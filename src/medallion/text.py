from __future__ import annotations

import logging
from typing import Protocol

import numpy as np
from matplotlib.font_manager import FontProperties
from matplotlib.textpath import TextPath

from medallion.shape import Shape
from medallion.validation import MalformedShape

logger = logging.getLogger(__name__)


class GlyphProvider(Protocol):
    def shapes_for(self, char: str) -> list[Shape]:
        """Outline loops for ``char``; an empty list when it has no usable outline."""
        ...


class MatplotlibGlyphProvider:
    """Glyph outlines from matplotlib's font machinery.

    Curves are flattened by ``TextPath.to_polygons``; each closed contour
    becomes one :class:`Shape` in font units scaled to ``font_size``.
    """

    def __init__(self, font_size: float = 1.0, family: str = "DejaVu Sans") -> None:
        if font_size <= 0:
            raise ValueError("font_size must be positive.")
        self.font_size = float(font_size)
        self.prop = FontProperties(family=family)
        self._cache: dict[str, list[Shape]] = {}

    def shapes_for(self, char: str) -> list[Shape]:
        if char not in self._cache:
            self._cache[char] = self._load(char)
        return list(self._cache[char])

    def _load(self, char: str) -> list[Shape]:
        path = TextPath((0.0, 0.0), char, size=self.font_size, prop=self.prop)
        shapes = []
        for contour in path.to_polygons(closed_only=True):
            try:
                shape = Shape(np.asarray(contour, dtype=float))
            except MalformedShape:
                continue
            if shape.is_polygon:
                shapes.append(shape)
        return shapes


def text_to_shapes(text: str, glyphs: GlyphProvider) -> list[list[Shape]]:
    """Lay ``text`` out left to right, one list of shapes per character.

    Characters without a usable outline (spaces, missing glyphs) produce an
    empty list instead of aborting the whole string.
    """

    letters: list[list[Shape]] = []
    accumulated_width = 0.0
    for char in text:
        shapes = glyphs.shapes_for(char)
        if not shapes:
            logger.info("Skipping %r: glyph has no outline", char)
            letters.append([])
            continue
        box = shapes[0].bounds
        for shape in shapes[1:]:
            box = box.union(shape.bounds)
        accumulated_width += float(box.size[0])
        letters.append([shape.translate((accumulated_width, 0.0)) for shape in shapes])
    return letters
