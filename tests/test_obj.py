from __future__ import annotations

import io

import numpy as np
import pytest

from medallion.io import load_obj, read_obj, save_obj, write_obj
from medallion.mesh import Model, Polygon
from medallion.surfaces import make_ring
from medallion.validation import IOFailure, ParseFailure


def _quad(uvs: bool = False) -> Model:
    kwargs = {"uvs": [(0.0, 0.0), (1.0, 0.0), (0.0, 1.0)]} if uvs else {}
    return Model(
        (
            Polygon.from_vertices([(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0)], **kwargs),
            Polygon.from_vertices([(1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 1.0, 0.0)], **kwargs),
        )
    )


def _lines(model: Model) -> list[str]:
    buffer = io.StringIO()
    write_obj(model, buffer)
    return buffer.getvalue().splitlines()


def test_write_dedups_vertices():
    lines = _lines(_quad())
    assert lines[0].startswith("#")
    assert sum(1 for line in lines if line.startswith("v ")) == 4
    assert [line for line in lines if line.startswith("f ")] == ["f 1 2 3", "f 2 4 3"]
    assert "v 0.000000 0.000000 0.000000" in lines


def test_write_texture_coordinates():
    lines = _lines(_quad(uvs=True))
    assert sum(1 for line in lines if line.startswith("vt ")) == 6
    faces = [line for line in lines if line.startswith("f ")]
    assert faces == ["f 1/1 2/2 3/3", "f 2/4 4/5 3/6"]


def test_write_then_read():
    model = Model(tuple(make_ring(8, 0.0, 0.5, 1.0, 0.75)))
    buffer = io.StringIO()
    write_obj(model, buffer)
    buffer.seek(0)
    loaded = read_obj(buffer)
    assert len(loaded) == len(model)
    assert np.allclose(loaded.vertices, model.vertices, atol=1e-6)
    assert np.allclose(loaded[0].normals, loaded[0].vertices)


def test_read_ignores_other_records():
    text = """# comment
o thing
v 0 0 0
v 1 0 0
vn 0 0 1
v 0 1 0

f 1/7/1 2//2 3
"""
    model = read_obj(io.StringIO(text))
    assert len(model) == 1
    assert np.allclose(model[0].vertices[2], [0.0, 1.0, 0.0])


def test_read_negative_indices():
    model = read_obj(["v 0 0 0", "v 2 0 0", "v 0 2 0", "f -3 -2 -1"])
    assert np.allclose(model[0].vertices, [(0.0, 0.0, 0.0), (2.0, 0.0, 0.0), (0.0, 2.0, 0.0)])


@pytest.mark.parametrize(
    ("lines", "line_number"),
    [
        (["v 0 0"], 1),
        (["v 0 0 zero"], 1),
        (["v 0 0 0", "v 1 0 0", "v 0 1 0", "f 1 2 4"], 4),
        (["v 0 0 0", "f 1 1"], 2),
        (["v 0 0 0", "v 1 0 0", "f 1 two 2"], 3),
    ],
)
def test_read_parse_failures(lines, line_number):
    with pytest.raises(ParseFailure) as excinfo:
        read_obj(lines)
    assert excinfo.value.line_number == line_number
    assert str(excinfo.value).startswith(f"line {line_number}:")


def test_save_and_load(tmp_path):
    path = save_obj(_quad(), tmp_path / "quad.obj")
    assert path.exists()
    loaded = load_obj(path)
    assert len(loaded) == 2


def test_save_to_missing_directory(tmp_path):
    with pytest.raises(IOFailure):
        save_obj(_quad(), tmp_path / "missing" / "quad.obj")


def test_load_missing_file(tmp_path):
    with pytest.raises(OSError):
        load_obj(tmp_path / "nothing.obj")
