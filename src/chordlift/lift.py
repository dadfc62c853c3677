"""The chord-lift map.

For a closed curve ``C`` and two parameters ``a`` and ``b`` the chord from
``C(a)`` to ``C(b)`` is lifted off the ground plane: its midpoint is raised
along ``+Y`` by the chord length.  The result is symmetric in ``a`` and
``b`` and has zero height exactly on the diagonal ``a == b``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from chordlift.curve import ClosedCurve, wrap01
from chordlift.geometry_utils import HEIGHT_AXIS, Vec3, add, dist, flatten, mid, scale


@dataclass(frozen=True)
class ChordLiftSample:
    """Chord endpoints, midpoint, length and lifted point for one ``(a, b)``."""

    point_a: Vec3
    point_b: Vec3
    midpoint: Vec3
    chord_length: float
    lifted_point: Vec3


def chord_lift(curve: ClosedCurve, a: float, b: float) -> ChordLiftSample:
    """Evaluate the chord-lift map at ``(a, b)``; both wrap modulo 1."""

    pa = flatten(curve.evaluate(a))
    pb = flatten(curve.evaluate(b))
    midpoint = mid(pa, pb)
    length = dist(pa, pb)
    lifted = add(midpoint, scale(HEIGHT_AXIS, length))
    return ChordLiftSample(pa, pb, midpoint, length, lifted)


def lifted_point(curve: ClosedCurve, a: float, b: float) -> Vec3:
    return chord_lift(curve, a, b).lifted_point


def chord_lift_grid(curve: ClosedCurve, params_a: Sequence[float],
                    params_b: Sequence[float]) -> np.ndarray:
    """Lifted points for every ``(a, b)`` pair, shaped ``(len(b), len(a), 3)``.

    Row ``j``, column ``i`` holds the lift of ``(params_a[i], params_b[j])``.
    Each curve point is evaluated once per axis.
    """

    pa = curve.evaluate_many(params_a)
    pb = curve.evaluate_many(params_b)
    pa[:, 1] = 0.0
    pb[:, 1] = 0.0

    left = pa[np.newaxis, :, :]
    right = pb[:, np.newaxis, :]
    lifted = (left + right) * 0.5
    lifted += np.asarray(HEIGHT_AXIS)[np.newaxis, np.newaxis, :] \
        * np.linalg.norm(right - left, axis=-1)[:, :, np.newaxis]
    return lifted


def parameter_separation(a: float, b: float) -> Tuple[float, float]:
    """Return ``(m, s)``: the parameter midway along the shorter arc from
    ``a`` to ``b`` and the length ``s`` of that arc, ``0 <= s <= 0.5``.
    """

    a = wrap01(a)
    forward = wrap01(b - a)
    if forward <= 0.5:
        return wrap01(a + forward * 0.5), forward
    backward = 1.0 - forward
    return wrap01(a - backward * 0.5), backward


__all__ = [
    'ChordLiftSample',
    'chord_lift',
    'lifted_point',
    'chord_lift_grid',
    'parameter_separation',
    'wrap01',
]
