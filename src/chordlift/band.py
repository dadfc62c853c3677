"""Half-twist band swept along a closed loop.

A straight segment of fixed width is carried around the loop.  At loop
parameter ``m`` the segment points along ``cos(pi m) n + sin(pi m) Y``
where ``n`` is the in-plane normal, so it turns through half a revolution
on the way round and the band closes up as a Mobius strip.
"""

from __future__ import annotations

import numpy as np

from chordlift.curve import ClosedCurve
from chordlift.errors import InvalidResolutionError
from chordlift.mesh import MeshCache, TriangleMesh, grid_indices, make_mesh

BAND_OPACITY = 0.30


def tessellate_band(curve: ClosedCurve, width: float = 0.8,
                    segments: int = 400, strips: int = 48) -> TriangleMesh:
    """Return the band as a ``(segments + 1) x (strips + 1)`` vertex grid."""

    if width <= 0:
        raise ValueError('band width must be positive')
    if int(segments) != segments or segments < 2:
        raise InvalidResolutionError(
            segments, strips, minimum=2,
            message=f"band segments must be an integer >= 2, got {segments}")
    if int(strips) != strips or strips < 1:
        raise InvalidResolutionError(
            segments, strips, minimum=1,
            message=f"band strips must be an integer >= 1, got {strips}")
    segments = int(segments)
    strips = int(strips)

    ms = np.arange(segments + 1) / segments
    base = curve.evaluate_many(ms)
    base[:, 1] = 0.0

    tangents = np.asarray([curve.tangent(m) for m in ms])
    normals = np.stack([-tangents[:, 2], np.zeros(len(ms)), tangents[:, 0]], axis=1)

    turn = np.pi * ms
    frame = normals * np.cos(turn)[:, np.newaxis]
    frame[:, 1] += np.sin(turn)
    lengths = np.linalg.norm(frame, axis=1)
    frame /= np.where(lengths > 1e-12, lengths, 1.0)[:, np.newaxis]

    across = (2.0 * np.arange(strips + 1) / strips - 1.0) * (width / 2.0)
    verts = base[:, np.newaxis, :] + frame[:, np.newaxis, :] * across[np.newaxis, :, np.newaxis]

    return make_mesh(verts.reshape(-1, 3), grid_indices(strips, segments),
                     opacity=BAND_OPACITY)


class BandTessellator:
    """Memoizes :func:`tessellate_band` on ``(curve, width, segments, strips)``."""

    def __init__(self):
        self._cache = MeshCache('band')

    @property
    def mesh(self):
        return self._cache.mesh

    @property
    def builds(self) -> int:
        return self._cache.builds

    def build(self, curve: ClosedCurve, width: float = 0.8,
              segments: int = 400, strips: int = 48) -> TriangleMesh:
        return self._cache.get(
            curve, (float(width), segments, strips),
            lambda: tessellate_band(curve, width, segments, strips))

    def clear(self) -> None:
        self._cache.invalidate()


__all__ = ['tessellate_band', 'BandTessellator']
