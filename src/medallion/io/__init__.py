"""Geometry file I/O."""

from .obj import load_obj, read_obj, save_obj, write_obj

__all__ = ["load_obj", "read_obj", "save_obj", "write_obj"]
