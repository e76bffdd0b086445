"""The medallion itself: a bulging disc with a recessed face and raised lettering."""

from __future__ import annotations

import logging
import math
from typing import Callable, Sequence

from medallion._config import MedallionSettings
from medallion._logging import timed
from medallion.extrude import extrude_shapes
from medallion.mesh import Model, Polygon
from medallion.shape import Shape, center_of_bounding_box_of_shapes
from medallion.surfaces import make_bottom_plate, make_ring, make_top_plate
from medallion.text import GlyphProvider, MatplotlibGlyphProvider, text_to_shapes
from medallion.triangulate import NestedHoles

logger = logging.getLogger(__name__)

LetterArranger = Callable[[list[list[Shape]]], list[Shape]]

TEXT_SCALE = (-0.4, 0.4, 0.4)
TEXT_ARC_OFFSET = 1.6
TEXT_DEPTH_OFFSET = 0.5


def make_medallion(
    thickness: float,
    impression: float,
    sides: int = 64,
    bulge_resolution: int = 10,
    radius: float = 1.0,
    max_bulge: float = 0.1,
    rim_border: float = 0.05,
    texture_repeat: int = 8,
) -> Model:
    """Medal body: bulging side wall, flat bottom, rim and a face recessed by ``impression``."""

    if thickness <= 0:
        raise ValueError("thickness must be positive.")
    if impression < 0 or impression >= thickness:
        raise ValueError("impression must be in [0, thickness).")
    if bulge_resolution < 1:
        raise ValueError("bulge_resolution must be >= 1.")
    if rim_border < 0 or rim_border >= radius:
        raise ValueError("rim_border must be in [0, radius).")

    with timed("Creating medal", logger):
        polys: list[Polygon] = []
        step = 1.0 / bulge_resolution
        ring_height = thickness * step
        for b in range(bulge_resolution):
            polys.extend(
                make_ring(
                    sides,
                    ring_height * b,
                    ring_height * (b + 1),
                    radius + max_bulge * math.sin(math.pi * step * b),
                    radius + max_bulge * math.sin(math.pi * step * (b + 1)),
                    texture_repeat=texture_repeat,
                )
            )

        polys.extend(make_bottom_plate(sides, radius))

        inner_radius = radius - rim_border
        face_height = thickness - impression
        polys.extend(make_ring(sides, thickness, thickness, radius, inner_radius, texture_repeat=texture_repeat))
        polys.extend(make_ring(sides, thickness, face_height, inner_radius, inner_radius, texture_repeat=texture_repeat))
        polys.extend(make_top_plate(sides, inner_radius, face_height))
    return Model(tuple(polys))


def arrange_on_arc(letters: Sequence[Sequence[Shape]], offset: float) -> list[Shape]:
    """Fan letters across a half circle, centred ``offset`` away from the origin.

    Letter ``i`` of ``n`` is centred on the origin, pushed to ``(0, offset)``
    and rotated by ``π/2 - (i + 1/2)·π/n``. Empty letters keep their slot.
    """

    shapes: list[Shape] = []
    if not letters:
        return shapes
    increment = math.pi / len(letters)
    for index, letter in enumerate(letters):
        if not letter:
            continue
        angle = (math.pi / 2.0) - (increment * index) - (increment / 2.0)
        center = center_of_bounding_box_of_shapes(letter)
        shift = (-center.x, offset - center.y)
        for shape in letter:
            shapes.append(shape.translate(shift).rotate(angle, (0.0, 0.0)))
    return shapes


def text_to_model(
    text: str,
    extrusion: float,
    arrange: LetterArranger,
    glyphs: GlyphProvider,
) -> Model:
    """Extrude ``text`` laid out by ``arrange`` and mirror/shrink it into place.

    Contours nested inside another contour of the lettering (letter
    counters) are cut out rather than filled.
    """

    with timed(f"Generating text: {text}", logger):
        letters = text_to_shapes(text, glyphs)
        model = extrude_shapes(arrange(letters), extrusion, hole=NestedHoles())
    return model.scale(TEXT_SCALE, model.center_of_bounding_box())


def build_medallion(settings: MedallionSettings, glyphs: GlyphProvider | None = None) -> Model:
    """Assemble the medal body and its two inscriptions in a fixed order."""

    glyphs = glyphs or MatplotlibGlyphProvider(family=settings.font_family)
    medal = make_medallion(
        settings.thickness,
        settings.impression,
        sides=settings.sides,
        bulge_resolution=settings.bulge_resolution,
        texture_repeat=settings.texture_repeat,
    )
    face_height = settings.thickness - settings.impression

    parts = [medal]
    inscriptions = (
        (settings.top_text, TEXT_ARC_OFFSET, -TEXT_DEPTH_OFFSET),
        (settings.bottom_text[::-1], -TEXT_ARC_OFFSET, TEXT_DEPTH_OFFSET),
    )
    for text, arc_offset, depth in inscriptions:
        if not text:
            continue
        lettering = text_to_model(
            text,
            settings.impression,
            lambda letters, arc_offset=arc_offset: arrange_on_arc(letters, arc_offset),
            glyphs,
        )
        center = lettering.center_of_bounding_box()
        parts.append(lettering.translate((-center.x, face_height, depth)))

    return parts[0].merge(*parts[1:])
