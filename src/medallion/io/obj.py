"""Minimal Wavefront OBJ support.

The writer emits ``v`` records for the deduplicated vertex buffer, ``vt``
records for texture coordinates and ``f`` records with 1-based indices. The
reader only understands ``v`` and ``f`` records; everything after the first
``/`` of a face token is ignored.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Iterable

import numpy as np

from medallion.mesh import Model, Polygon
from medallion.validation import IOFailure, MalformedFace, ParseFailure

logger = logging.getLogger(__name__)

PRECISION = 6


def _format(values: Iterable[float]) -> str:
    # map -0.0 to 0.0
    return " ".join(f"{float(value) + 0.0:.{PRECISION}f}" for value in values)


def write_obj(model: Model, stream: IO[str]) -> None:
    mesh = model.to_mesh(decimals=PRECISION)
    stream.write(f"# {mesh.n_vertices} vertices, {mesh.n_faces} faces\n")
    for vertex in mesh.vertices:
        stream.write(f"v {_format(vertex)}\n")

    texture_index = 1
    face_lines = []
    for poly, face in zip(model, mesh.faces):
        indices = [int(i) + 1 for i in face]
        if poly.uvs is None:
            face_lines.append("f " + " ".join(str(i) for i in indices))
            continue
        for uv in poly.uvs:
            stream.write(f"vt {_format(uv)}\n")
        tokens = [f"{vi}/{texture_index + corner}" for corner, vi in enumerate(indices)]
        texture_index += 3
        face_lines.append("f " + " ".join(tokens))

    for line in face_lines:
        stream.write(line + "\n")


def save_obj(model: Model, path: Path | str) -> Path:
    """Write ``model`` to ``path``; the file is always closed, even on failure."""
    path = Path(path)
    try:
        with path.open("w", encoding="utf-8", newline="\n") as handle:
            write_obj(model, handle)
    except OSError as exc:
        raise IOFailure(f"Unable to write {path}: {exc}") from exc
    logger.info("Wrote %d faces to %s", len(model), path)
    return path


def _parse_vertex(rest: list[str], line_number: int) -> np.ndarray:
    if len(rest) != 3:
        raise ParseFailure(f"expected 3 vertex components, got {len(rest)}", line_number)
    try:
        vertex = np.array([float(component) for component in rest], dtype=float)
    except ValueError as exc:
        raise ParseFailure(f"unable to parse vertex component in {' '.join(rest)!r}", line_number) from exc
    if np.any(~np.isfinite(vertex)):
        raise ParseFailure("vertex components must be finite", line_number)
    return vertex


def _parse_face(rest: list[str], vertex_count: int, line_number: int) -> list[int]:
    if len(rest) != 3:
        raise ParseFailure(f"expected 3 face indices, got {len(rest)}", line_number)
    indices = []
    for token in rest:
        head = token.split("/", 1)[0]
        try:
            index = int(head)
        except ValueError as exc:
            raise ParseFailure(f"unable to parse face index {token!r}", line_number) from exc
        if index < 0:
            index = vertex_count + index + 1
        if index < 1 or index > vertex_count:
            raise ParseFailure(f"face index {head} out of range (1..{vertex_count})", line_number)
        indices.append(index - 1)
    return indices


def read_obj(stream: IO[str] | Iterable[str]) -> Model:
    """Parse ``v``/``f`` records into a model whose normals are its vertices."""
    if stream is None:
        raise ParseFailure("Need a stream to read OBJ data from.")

    vertices: list[np.ndarray] = []
    polygons: list[Polygon] = []
    for line_number, line in enumerate(stream, start=1):
        parts = line.split()
        if not parts:
            continue
        keyword, rest = parts[0], parts[1:]
        if keyword == "v":
            vertices.append(_parse_vertex(rest, line_number))
        elif keyword == "f":
            indices = _parse_face(rest, len(vertices), line_number)
            try:
                polygons.append(Polygon.from_vertices([vertices[i] for i in indices]))
            except MalformedFace as exc:
                raise ParseFailure(str(exc), line_number) from exc
    return Model(tuple(polygons))


def load_obj(path: Path | str) -> Model:
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as handle:
            model = read_obj(handle)
    except OSError as exc:
        raise IOFailure(f"Unable to read {path}: {exc}") from exc
    logger.info("Loaded %d faces from %s", len(model), path)
    return model
