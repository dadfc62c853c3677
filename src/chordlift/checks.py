"""Validation helpers for chordlift geometry."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from chordlift.geometry_utils import dist, epsilon, to_vec3
from chordlift.mesh import TriangleMesh

Edge = Tuple[int, int]


@dataclass
class CheckResult:
    ok: bool
    messages: List[str]


def is_closed_polyline(points: Sequence[Sequence[float]], tol: float = epsilon) -> bool:
    """Return ``True`` if a polyline ends where it starts, within ``tol``."""

    if len(points) < 2:
        return False
    return dist(to_vec3(points[0]), to_vec3(points[-1])) <= tol


def _edge_key(a: int, b: int) -> Edge:
    return (a, b) if a < b else (b, a)


def _directed_edges(mesh: TriangleMesh):
    for a, b, c in mesh.triangles:
        a, b, c = int(a), int(b), int(c)
        yield a, b
        yield b, c
        yield c, a


def boundary_edges(mesh: TriangleMesh) -> List[Edge]:
    """Undirected edges used by exactly one triangle, sorted."""

    edges = Counter(_edge_key(a, b) for a, b in _directed_edges(mesh))
    return sorted(edge for edge, count in edges.items() if count == 1)


def faces_consistently_wound(mesh: TriangleMesh) -> CheckResult:
    """Check that neighbouring triangles traverse shared edges in opposite
    directions, which is what a consistent winding order means for an
    orientable mesh.
    """

    directed = Counter(_directed_edges(mesh))
    repeated = sorted(edge for edge, count in directed.items() if count > 1)
    if repeated:
        return CheckResult(False, [f'edges traversed twice in the same direction: {repeated[:10]}'])
    return CheckResult(True, [])


__all__ = [
    'CheckResult',
    'is_closed_polyline',
    'boundary_edges',
    'faces_consistently_wound',
]
