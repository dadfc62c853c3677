import numpy as np
import pytest

from chordlift.mesh import MeshCache, compute_normals, grid_indices, make_mesh


def _flat_grid(nu, nv):
    verts = [(float(i), 0.0, float(j)) for j in range(nv + 1) for i in range(nu + 1)]
    return make_mesh(verts, grid_indices(nu, nv))


def test_grid_indices_single_cell():
    assert grid_indices(1, 1).tolist() == [0, 2, 1, 2, 3, 1]
    assert grid_indices(1, 1).dtype == np.uint32


def test_grid_indices_counts_and_range():
    idx = grid_indices(5, 3)
    assert len(idx) == 5 * 3 * 6
    assert idx.min() == 0
    assert idx.max() == (5 + 1) * (3 + 1) - 1


def test_flat_grid_normals_point_up():
    mesh = _flat_grid(4, 3)
    assert mesh.vertex_count == 20
    assert mesh.triangle_count == 24
    assert np.allclose(mesh.face_normals, [0.0, 1.0, 0.0])
    assert np.allclose(mesh.vertex_normals, [0.0, 1.0, 0.0])


def test_mesh_buffers_are_flat_and_typed():
    mesh = _flat_grid(2, 2)
    assert mesh.positions.dtype == np.float32
    assert mesh.positions.ndim == 1
    assert mesh.indices.dtype == np.uint32
    assert mesh.vertices.shape == (9, 3)
    assert mesh.triangles.shape == (8, 3)


def test_degenerate_faces_get_zero_normals():
    verts = np.array([[0, 0, 0], [1, 1, 1], [2, 2, 2], [3, 0, 0]], dtype=float)
    tris = np.array([[0, 1, 2]])
    face, vertex = compute_normals(verts, tris)
    assert not np.isnan(face).any()
    assert np.allclose(face, 0.0)
    # vertex 3 is not used by any face
    assert np.allclose(vertex[3], 0.0)


def test_mesh_cache_memoizes_on_source_identity_and_params():
    cache = MeshCache('test')
    src = object()
    calls = []

    def build():
        calls.append(1)
        return _flat_grid(1, 1)

    first = cache.get(src, (1, 2), build)
    assert cache.get(src, (1, 2), build) is first
    assert cache.builds == 1

    second = cache.get(src, (1, 3), build)
    assert second is not first
    third = cache.get(object(), (1, 3), build)
    assert third is not second
    assert cache.builds == 3
    assert len(calls) == 3


def test_mesh_cache_keeps_old_mesh_when_build_fails():
    cache = MeshCache('test')
    src = object()
    good = cache.get(src, (1,), lambda: _flat_grid(1, 1))

    def broken():
        raise ValueError('nope')

    with pytest.raises(ValueError):
        cache.get(src, (2,), broken)
    assert cache.mesh is good
    assert cache.get(src, (1,), broken) is good
    assert cache.builds == 1


def test_mesh_cache_invalidate():
    cache = MeshCache()
    src = object()
    cache.get(src, (), lambda: _flat_grid(1, 1))
    cache.invalidate()
    assert cache.mesh is None
    cache.get(src, (), lambda: _flat_grid(1, 1))
    assert cache.builds == 2
