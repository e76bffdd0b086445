from __future__ import annotations

from medallion.shape import Shape


class SquareGlyphs:
    """Glyph provider stand-in: every non-space character is a unit square."""

    def __init__(self) -> None:
        self.requested: list[str] = []

    def shapes_for(self, char: str) -> list[Shape]:
        self.requested.append(char)
        if char.isspace():
            return []
        return [square(0.0, 0.0, 1.0)]


def square(x: float, y: float, size: float) -> Shape:
    return Shape([(x, y), (x + size, y), (x + size, y + size), (x, y + size)])


def total_area(polygons) -> float:
    return sum(poly.area() for poly in polygons)


class RingGlyphs(SquareGlyphs):
    """Every non-space character is a unit square with a centred half-size counter."""

    def shapes_for(self, char: str) -> list[Shape]:
        shapes = super().shapes_for(char)
        if shapes:
            shapes.append(square(0.25, 0.25, 0.5))
        return shapes
