"""STL export for chordlift triangle meshes."""

from __future__ import annotations

import struct
from typing import Iterator, Tuple

from chordlift.geometry_utils import Vec3, triangle_normal
from chordlift.mesh import TriangleMesh

_HEADER_SIZE = 80
_STRUCT_TRIANGLE = struct.Struct('<12fH')

Facet = Tuple[Vec3, Vec3, Vec3, Vec3]


def iter_facets(mesh: TriangleMesh) -> Iterator[Facet]:
    """Yield ``(normal, v0, v1, v2)`` for every non-degenerate triangle."""

    verts = mesh.vertices
    for i0, i1, i2 in mesh.triangles:
        v0 = tuple(float(c) for c in verts[i0])
        v1 = tuple(float(c) for c in verts[i1])
        v2 = tuple(float(c) for c in verts[i2])
        normal = triangle_normal(v0, v1, v2)
        if normal is None:
            continue
        yield normal, v0, v1, v2


def write_stl(mesh: TriangleMesh, path_or_file, *, binary: bool = True,
              name: str = 'chordlift') -> int:
    """Write ``mesh`` to STL and return the number of facets written.

    ``path_or_file`` can be a filesystem path or an open binary/text stream.
    Zero-area triangles are skipped.
    """

    facets = list(iter_facets(mesh))

    if binary:
        _write_binary(facets, path_or_file, name)
    else:
        _write_ascii(facets, path_or_file, name)
    return len(facets)


def _write_binary(facets, path_or_file, name: str) -> None:
    close_when_done = False
    if hasattr(path_or_file, 'write'):
        stream = path_or_file
    else:
        stream = open(path_or_file, 'wb')
        close_when_done = True

    try:
        header = (name[:_HEADER_SIZE]).encode('ascii', errors='replace')
        header = header.ljust(_HEADER_SIZE, b' ')
        stream.write(header)
        stream.write(struct.pack('<I', len(facets)))

        for normal, v0, v1, v2 in facets:
            stream.write(_STRUCT_TRIANGLE.pack(*normal, *v0, *v1, *v2, 0))
    finally:
        if close_when_done:
            stream.close()


def _write_ascii(facets, path_or_file, name: str) -> None:
    close_when_done = False
    if hasattr(path_or_file, 'write'):
        stream = path_or_file
    else:
        stream = open(path_or_file, 'w', encoding='ascii')
        close_when_done = True

    try:
        print(f"solid {name}", file=stream)
        for normal, v0, v1, v2 in facets:
            print(f"  facet normal {normal[0]:.6e} {normal[1]:.6e} {normal[2]:.6e}", file=stream)
            print("    outer loop", file=stream)
            for v in (v0, v1, v2):
                print(f"      vertex {v[0]:.6e} {v[1]:.6e} {v[2]:.6e}", file=stream)
            print("    endloop", file=stream)
            print("  endfacet", file=stream)
        print(f"endsolid {name}", file=stream)
    finally:
        if close_when_done:
            stream.close()


__all__ = ['iter_facets', 'write_stl']
