from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Literal, Sequence

import numpy as np

from medallion.geometry import BoundingBox, Vector3
from medallion.validation import MalformedFace

NormalMode = Literal["vertex", "face"]


def _frozen(arr: np.ndarray) -> np.ndarray:
    arr = arr.copy()
    arr.setflags(write=False)
    return arr


def _require_corners(value, dim: int, label: str) -> np.ndarray:
    try:
        arr = np.asarray(value, dtype=float)
    except (TypeError, ValueError) as exc:
        raise MalformedFace(f"{label} must be numeric.") from exc
    if arr.ndim != 2 or arr.shape[1] != dim:
        raise MalformedFace(f"{label} must be a list of {dim}D points.")
    if arr.shape[0] != 3:
        raise MalformedFace(f"A polygon needs exactly 3 {label}, got {arr.shape[0]}.")
    if np.any(~np.isfinite(arr)):
        raise MalformedFace(f"{label} contain invalid values (NaN/inf).")
    return arr


def face_normal(vertices: np.ndarray) -> np.ndarray:
    """Unit normal from the winding of three vertices; zero for a degenerate face."""
    v0, v1, v2 = np.asarray(vertices, dtype=float).reshape(3, 3)
    normal = np.cross(v1 - v0, v2 - v0)
    length = np.linalg.norm(normal)
    if length == 0:
        return np.zeros(3, dtype=float)
    return normal / length


@dataclass(frozen=True, eq=False)
class Polygon:
    """One triangle: three vertices, three normals and optionally three UVs.

    ``normal_mode`` records how the normals were derived so transforms can
    derive them again from the moved vertices. ``None`` means the normals
    were given explicitly and are carried over unchanged.
    """

    vertices: np.ndarray
    normals: np.ndarray
    uvs: np.ndarray | None = None
    normal_mode: NormalMode | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "vertices", _frozen(_require_corners(self.vertices, 3, "vertices")))
        object.__setattr__(self, "normals", _frozen(_require_corners(self.normals, 3, "normals")))
        if self.uvs is not None:
            object.__setattr__(self, "uvs", _frozen(_require_corners(self.uvs, 2, "texture coordinates")))
        if self.normal_mode not in (None, "vertex", "face"):
            raise ValueError(f"Unknown normal mode '{self.normal_mode}'.")

    @classmethod
    def from_vertices(
        cls,
        vertices: Sequence[Sequence[float]] | np.ndarray,
        normals: NormalMode = "vertex",
        uvs: Sequence[Sequence[float]] | np.ndarray | None = None,
    ) -> "Polygon":
        """Build a triangle, deriving its normals.

        ``"vertex"`` reuses the vertex positions as normals, which is what
        downstream consumers that recompute shading expect. ``"face"`` stores
        the true unit face normal at every corner.
        """
        verts = _require_corners(vertices, 3, "vertices")
        if normals == "vertex":
            norms = verts
        elif normals == "face":
            norms = np.tile(face_normal(verts), (3, 1))
        else:
            raise ValueError(f"Unknown normal mode '{normals}'.")
        return cls(verts, norms, uvs, normals)

    def face_normal(self) -> np.ndarray:
        return face_normal(self.vertices)

    def area(self) -> float:
        v0, v1, v2 = self.vertices
        return 0.5 * float(np.linalg.norm(np.cross(v1 - v0, v2 - v0)))

    def with_vertices(self, vertices: np.ndarray) -> "Polygon":
        if self.normal_mode is None:
            return Polygon(vertices, self.normals, self.uvs)
        return Polygon.from_vertices(vertices, normals=self.normal_mode, uvs=self.uvs)


@dataclass
class MeshAnalysis:
    n_vertices: int
    n_faces: int
    degenerate_faces: int
    boundary_edges: int
    nonmanifold_edges: int
    invalid_vertices: int

    @property
    def is_manifold(self) -> bool:
        return self.nonmanifold_edges == 0

    @property
    def is_watertight(self) -> bool:
        return self.boundary_edges == 0 and self.is_manifold

    @property
    def has_degenerate_faces(self) -> bool:
        return self.degenerate_faces > 0

    @property
    def has_invalid_vertices(self) -> bool:
        return self.invalid_vertices > 0

    def issues(self) -> list[str]:
        issues: list[str] = []
        if self.has_invalid_vertices:
            issues.append(f"{self.invalid_vertices} invalid vertices (NaN/inf)")
        if self.has_degenerate_faces:
            issues.append(f"{self.degenerate_faces} degenerate faces")
        if self.boundary_edges > 0:
            issues.append(f"{self.boundary_edges} boundary edges (not watertight)")
        if self.nonmanifold_edges > 0:
            issues.append(f"{self.nonmanifold_edges} non-manifold edges")
        return issues


@dataclass
class Mesh:
    """Indexed form of a model: shared vertices plus 0-based triangle indices."""

    vertices: np.ndarray
    faces: np.ndarray

    def __post_init__(self) -> None:
        self.vertices = np.asarray(self.vertices, dtype=float).reshape(-1, 3).copy()
        self.faces = np.asarray(self.faces, dtype=int).reshape(-1, 3).copy()

    @property
    def n_vertices(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def n_faces(self) -> int:
        return int(self.faces.shape[0])


@dataclass(frozen=True, eq=False)
class Model:
    """An ordered collection of triangles.

    A model is nothing but its polygon list; every operation returns a new
    model and leaves the receiver untouched.
    """

    polygons: tuple[Polygon, ...] = ()

    def __post_init__(self) -> None:
        polygons = tuple(self.polygons)
        for poly in polygons:
            if not isinstance(poly, Polygon):
                raise TypeError(f"Model faces must be Polygon instances, got {type(poly).__name__}.")
        object.__setattr__(self, "polygons", polygons)

    def __len__(self) -> int:
        return len(self.polygons)

    def __iter__(self) -> Iterator[Polygon]:
        return iter(self.polygons)

    def __getitem__(self, index: int) -> Polygon:
        return self.polygons[index]

    @property
    def n_faces(self) -> int:
        return len(self.polygons)

    @property
    def vertices(self) -> np.ndarray:
        """Every face's vertices stacked in face order, shape ``(3F, 3)``."""
        if not self.polygons:
            return np.zeros((0, 3), dtype=float)
        return np.vstack([poly.vertices for poly in self.polygons])

    @property
    def faces(self) -> np.ndarray:
        """Triangles as indices into :attr:`vertices`, shape ``(F, 3)``."""
        return np.arange(3 * len(self.polygons), dtype=int).reshape(-1, 3)

    def merge(self, *others: "Model") -> "Model":
        polygons = list(self.polygons)
        for other in others:
            polygons.extend(other.polygons)
        return Model(tuple(polygons))

    def transform(self, matrix: np.ndarray) -> "Model":
        """Apply a 4x4 affine matrix to every vertex; normals are rederived and UVs kept."""
        mat = np.asarray(matrix, dtype=float).reshape(4, 4)
        polygons = []
        for poly in self.polygons:
            verts = np.hstack([poly.vertices, np.ones((3, 1), dtype=float)])
            polygons.append(poly.with_vertices((mat @ verts.T).T[:, :3]))
        return Model(tuple(polygons))

    def translate(self, offset: Sequence[float]) -> "Model":
        vec = np.asarray(Vector3.of(offset))
        return Model(tuple(poly.with_vertices(poly.vertices + vec) for poly in self.polygons))

    def scale(self, factors: float | Sequence[float], pivot: Sequence[float] = (0.0, 0.0, 0.0)) -> "Model":
        arr = np.asarray(factors, dtype=float)
        scale = np.full(3, float(arr)) if arr.ndim == 0 else arr.reshape(3)
        origin = np.asarray(Vector3.of(pivot))
        return Model(tuple(poly.with_vertices((poly.vertices - origin) * scale + origin) for poly in self.polygons))

    def bounds(self) -> BoundingBox:
        if not self.polygons:
            raise ValueError("An empty model has no bounds.")
        return BoundingBox.from_points(self.vertices)

    def center_of_bounding_box(self) -> Vector3:
        return Vector3.of(self.bounds().center)

    def to_mesh(self, decimals: int | None = None) -> Mesh:
        """Deduplicate shared vertices (first occurrence order) into an indexed mesh."""
        verts = self.vertices
        if verts.shape[0] == 0:
            return Mesh(np.zeros((0, 3), dtype=float), np.zeros((0, 3), dtype=int))
        key = np.round(verts, decimals) if decimals is not None else verts
        _, first, inverse = np.unique(key, axis=0, return_index=True, return_inverse=True)
        order = np.argsort(first)
        rank = np.empty_like(order)
        rank[order] = np.arange(order.shape[0])
        return Mesh(verts[first[order]], rank[np.asarray(inverse).reshape(-1)].reshape(-1, 3))

    def analyze(self, area_epsilon: float = 1e-12) -> MeshAnalysis:
        return analyze_mesh(self.to_mesh(), area_epsilon=area_epsilon)


def merge_models(models: Iterable[Model]) -> Model:
    """Concatenate models in iteration order."""
    polygons: list[Polygon] = []
    for model in models:
        polygons.extend(model.polygons)
    return Model(tuple(polygons))


def analyze_mesh(mesh: Mesh, area_epsilon: float = 1e-12) -> MeshAnalysis:
    verts = mesh.vertices
    faces = mesh.faces
    invalid_vertices = int(np.count_nonzero(~np.isfinite(verts)))

    degenerate_faces = 0
    if faces.size > 0:
        v0 = verts[faces[:, 0]]
        v1 = verts[faces[:, 1]]
        v2 = verts[faces[:, 2]]
        cross = np.cross(v1 - v0, v2 - v0)
        areas = np.linalg.norm(cross, axis=1) * 0.5
        degenerate_faces = int(np.count_nonzero(areas <= area_epsilon))

    edge_counts: dict[tuple[int, int], int] = {}
    for tri in faces:
        edges = [(tri[0], tri[1]), (tri[1], tri[2]), (tri[2], tri[0])]
        for a, b in edges:
            key = (a, b) if a < b else (b, a)
            edge_counts[key] = edge_counts.get(key, 0) + 1

    boundary_edges = sum(1 for count in edge_counts.values() if count == 1)
    nonmanifold_edges = sum(1 for count in edge_counts.values() if count > 2)

    return MeshAnalysis(
        n_vertices=mesh.n_vertices,
        n_faces=mesh.n_faces,
        degenerate_faces=degenerate_faces,
        boundary_edges=boundary_edges,
        nonmanifold_edges=nonmanifold_edges,
        invalid_vertices=invalid_vertices,
    )
