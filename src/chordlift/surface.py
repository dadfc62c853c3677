"""Tessellation of the chord-lift surface.

The chord-lift map is sampled on a regular grid over the parameter square
``[0, 1] x [0, 1]``.  The last row and column repeat the first in value
(the domain wraps) but are emitted as separate vertices so the grid stays
rectangular.
"""

from __future__ import annotations

import logging
import math
import numbers

import numpy as np

from chordlift.curve import ClosedCurve
from chordlift.errors import InvalidResolutionError
from chordlift.lift import chord_lift_grid
from chordlift.mesh import MeshCache, TriangleMesh, grid_indices, make_mesh

logger = logging.getLogger(__name__)

MIN_RESOLUTION = 2
DEFAULT_OPACITY = 0.35


def check_resolution(res_a, res_b, minimum: int = MIN_RESOLUTION):
    """Return ``(res_a, res_b)`` as ints or raise :class:`InvalidResolutionError`."""

    out = []
    for res in (res_a, res_b):
        if isinstance(res, bool) or not isinstance(res, numbers.Real):
            raise InvalidResolutionError(res_a, res_b, minimum)
        if not math.isfinite(res) or res != int(res) or res < minimum:
            raise InvalidResolutionError(res_a, res_b, minimum)
        out.append(int(res))
    return out[0], out[1]


def tessellate_surface(curve: ClosedCurve, res_a: int, res_b: int, *,
                       opacity: float = DEFAULT_OPACITY,
                       wireframe: bool = False) -> TriangleMesh:
    """Sample the lift of ``(i / res_a, j / res_b)`` into a triangle mesh.

    The mesh has ``(res_a + 1) * (res_b + 1)`` vertices, vertex ``(i, j)``
    at index ``j * (res_a + 1) + i``, and ``2 * res_a * res_b`` triangles.
    """

    res_a, res_b = check_resolution(res_a, res_b)
    logger.debug("tessellating %dx%d lift grid", res_a, res_b)

    params_a = np.arange(res_a + 1) / res_a
    params_b = np.arange(res_b + 1) / res_b
    lifted = chord_lift_grid(curve, params_a, params_b)

    return make_mesh(lifted.reshape(-1, 3), grid_indices(res_a, res_b),
                     opacity=opacity, wireframe=wireframe)


class SurfaceTessellator:
    """Memoized front end to :func:`tessellate_surface`.

    ``build`` returns the previous mesh instance unchanged when the curve
    (by identity), both resolutions, the opacity and the wireframe flag are
    all the same as last time.
    """

    def __init__(self):
        self._cache = MeshCache('surface')

    @property
    def mesh(self):
        return self._cache.mesh

    @property
    def builds(self) -> int:
        return self._cache.builds

    def build(self, curve: ClosedCurve, res_a: int, res_b: int,
              opacity: float = DEFAULT_OPACITY, wireframe: bool = False) -> TriangleMesh:
        params = (res_a, res_b, float(opacity), bool(wireframe))
        return self._cache.get(
            curve, params,
            lambda: tessellate_surface(curve, res_a, res_b,
                                       opacity=opacity, wireframe=wireframe))

    def clear(self) -> None:
        self._cache.invalidate()


__all__ = [
    'MIN_RESOLUTION',
    'check_resolution',
    'tessellate_surface',
    'SurfaceTessellator',
]
