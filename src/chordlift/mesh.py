"""Indexed triangle meshes and the memoizing cache used to rebuild them.

Meshes are flat numpy buffers laid out the way a renderer wants them:
``positions`` is ``float32`` with three values per vertex and ``indices`` is
``uint32`` with three values per triangle.  A mesh is never modified after
it is built; a rebuild produces a new :class:`TriangleMesh` and leaves the
old one for the caller to drop.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Hashable, Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class TriangleMesh:
    """Flat vertex/index buffers plus per-face and per-vertex normals."""

    positions: np.ndarray
    indices: np.ndarray
    face_normals: np.ndarray
    vertex_normals: np.ndarray
    opacity: float = 1.0
    wireframe: bool = False

    @property
    def vertex_count(self) -> int:
        return len(self.positions) // 3

    @property
    def triangle_count(self) -> int:
        return len(self.indices) // 3

    @property
    def vertices(self) -> np.ndarray:
        """``(V, 3)`` view of :attr:`positions`."""
        return self.positions.reshape(-1, 3)

    @property
    def triangles(self) -> np.ndarray:
        """``(T, 3)`` view of :attr:`indices`."""
        return self.indices.reshape(-1, 3)


def grid_indices(nu: int, nv: int) -> np.ndarray:
    """Triangulate a ``(nu + 1) x (nv + 1)`` vertex grid.

    Vertex ``(i, j)`` lives at index ``j * (nu + 1) + i``.  Each cell with
    corners ``a = (i, j)``, ``b = (i, j + 1)``, ``c = (i + 1, j)`` and
    ``d = (i + 1, j + 1)`` becomes triangles ``(a, b, c)`` and
    ``(b, d, c)``.
    """

    row = nu + 1
    i = np.arange(nu, dtype=np.uint32)
    j = np.arange(nv, dtype=np.uint32)
    a = (j[:, np.newaxis] * row + i[np.newaxis, :]).ravel()
    b = a + row
    c = a + 1
    d = b + 1
    tris = np.stack([a, b, c, b, d, c], axis=1)
    return tris.reshape(-1).astype(np.uint32)


def compute_normals(vertices: np.ndarray, triangles: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Return ``(face_normals, vertex_normals)`` for an indexed mesh.

    Vertex normals are the normalized sum of the unnormalized face normals
    around each vertex, so larger faces weigh more.  Degenerate faces and
    isolated vertices get zero normals.
    """

    verts = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)
    tris = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)

    v0 = verts[tris[:, 0]]
    v1 = verts[tris[:, 1]]
    v2 = verts[tris[:, 2]]
    raw = np.cross(v1 - v0, v2 - v0)

    accum = np.zeros_like(verts)
    for k in range(3):
        np.add.at(accum, tris[:, k], raw)

    return _unit_rows(raw).astype(np.float32), _unit_rows(accum).astype(np.float32)


def _unit_rows(vectors: np.ndarray) -> np.ndarray:
    lengths = np.linalg.norm(vectors, axis=1)
    out = np.zeros_like(vectors)
    ok = lengths > 1e-12
    out[ok] = vectors[ok] / lengths[ok, np.newaxis]
    return out


def make_mesh(vertices: np.ndarray, indices: np.ndarray, *,
              opacity: float = 1.0, wireframe: bool = False) -> TriangleMesh:
    """Pack ``(V, 3)`` vertices and flat indices into a :class:`TriangleMesh`."""

    verts = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)
    idx = np.asarray(indices, dtype=np.uint32).reshape(-1)
    face_normals, vertex_normals = compute_normals(verts, idx)
    return TriangleMesh(
        positions=verts.astype(np.float32).reshape(-1),
        indices=idx,
        face_normals=face_normals,
        vertex_normals=vertex_normals,
        opacity=float(opacity),
        wireframe=bool(wireframe),
    )


class MeshCache:
    """Hold the last mesh and the inputs it was built from.

    The key is an explicit tuple.  Its first element is the source object
    and is compared by identity; the rest are compared by value.  A build
    that raises leaves the cached mesh untouched.
    """

    def __init__(self, name: str = 'mesh'):
        self.name = name
        self._source = None
        self._params: Optional[Tuple[Hashable, ...]] = None
        self._mesh: Optional[TriangleMesh] = None
        self.builds = 0

    @property
    def mesh(self) -> Optional[TriangleMesh]:
        return self._mesh

    def matches(self, source, params: Tuple[Hashable, ...]) -> bool:
        return (self._mesh is not None
                and self._source is source
                and self._params == params)

    def get(self, source, params: Tuple[Hashable, ...],
            build: Callable[[], TriangleMesh]) -> TriangleMesh:
        if self.matches(source, params):
            logger.debug("%s cache hit %s", self.name, params)
            return self._mesh
        mesh = build()
        self._source = source
        self._params = params
        self._mesh = mesh
        self.builds += 1
        logger.debug("%s rebuilt %s: %d vertices, %d triangles",
                     self.name, params, mesh.vertex_count, mesh.triangle_count)
        return mesh

    def invalidate(self) -> None:
        self._source = None
        self._params = None
        self._mesh = None


__all__ = [
    'TriangleMesh',
    'grid_indices',
    'compute_normals',
    'make_mesh',
    'MeshCache',
]
