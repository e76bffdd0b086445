"""Medallion – procedural medallion meshes built from shapes, rings and plates."""

from __future__ import annotations

from .extrude import extrude_shapes
from .geometry import BoundingBox, Quaternion, Vector2, Vector3
from .mesh import Mesh, MeshAnalysis, Model, Polygon, analyze_mesh, merge_models
from .rotate import rotate_about_axis, rotate_model
from .shape import Shape, center_of_bounding_box_of_shapes, make_circle
from .surfaces import make_bottom_plate, make_plate, make_ring, make_square_with_texture, make_top_plate
from .triangulate import NO_HOLE, HoleAt, NestedHoles, NoHole, carve, fill
from .validation import IOFailure, MalformedFace, MalformedShape, ParseFailure, ValidationError

__all__ = [
    "__version__",
    "BoundingBox",
    "Quaternion",
    "Vector2",
    "Vector3",
    "Shape",
    "make_circle",
    "center_of_bounding_box_of_shapes",
    "Polygon",
    "Model",
    "Mesh",
    "MeshAnalysis",
    "analyze_mesh",
    "merge_models",
    "fill",
    "carve",
    "NoHole",
    "HoleAt",
    "NestedHoles",
    "NO_HOLE",
    "make_square_with_texture",
    "make_bottom_plate",
    "make_top_plate",
    "make_plate",
    "make_ring",
    "extrude_shapes",
    "rotate_model",
    "rotate_about_axis",
    "ValidationError",
    "MalformedShape",
    "MalformedFace",
    "ParseFailure",
    "IOFailure",
]

__version__ = "0.1.0"
