"""Small vector helpers shared across the curve, lift and mesh modules.

Points are plain ``(x, y, z)`` float tuples.  The sketch lives in the
ground plane ``y == 0`` and ``+Y`` is the height axis along which chords
are lifted.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

Vec3 = Tuple[float, float, float]

epsilon = 0.000005

ORIGIN: Vec3 = (0.0, 0.0, 0.0)
HEIGHT_AXIS: Vec3 = (0.0, 1.0, 0.0)


def to_vec3(point_like: Sequence[float]) -> Vec3:
    """Return a point as an ``(x, y, z)`` tuple.

    Two-component input is read as ground-plane ``(x, z)`` and placed at
    ``y = 0``.
    """

    if len(point_like) < 2:
        raise ValueError("value must have at least two components")
    if len(point_like) == 2:
        return float(point_like[0]), 0.0, float(point_like[1])
    return float(point_like[0]), float(point_like[1]), float(point_like[2])


def flatten(p: Sequence[float]) -> Vec3:
    """Project ``p`` onto the ground plane."""

    x, _, z = to_vec3(p)
    return x, 0.0, z


def add(a: Vec3, b: Vec3) -> Vec3:
    return a[0] + b[0], a[1] + b[1], a[2] + b[2]


def sub(a: Vec3, b: Vec3) -> Vec3:
    return a[0] - b[0], a[1] - b[1], a[2] - b[2]


def scale(a: Vec3, s: float) -> Vec3:
    return a[0] * s, a[1] * s, a[2] * s


def mid(a: Vec3, b: Vec3) -> Vec3:
    """Midpoint of ``a`` and ``b``; symmetric in its arguments."""

    return (a[0] + b[0]) * 0.5, (a[1] + b[1]) * 0.5, (a[2] + b[2]) * 0.5


def dot(a: Vec3, b: Vec3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def cross(a: Vec3, b: Vec3) -> Vec3:
    return (a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0])


def mag(a: Vec3) -> float:
    return math.sqrt(a[0] * a[0] + a[1] * a[1] + a[2] * a[2])


def dist(a: Vec3, b: Vec3) -> float:
    """Euclidean distance; ``dist(a, b) == dist(b, a)`` exactly."""

    dx = b[0] - a[0]
    dy = b[1] - a[1]
    dz = b[2] - a[2]
    return math.sqrt(dx * dx + dy * dy + dz * dz)


def normalize(a: Vec3) -> Vec3:
    """Return ``a`` scaled to unit length, or the zero vector if degenerate."""

    length = mag(a)
    if length <= epsilon:
        return ORIGIN
    return a[0] / length, a[1] / length, a[2] / length


def triangle_normal(v0: Vec3, v1: Vec3, v2: Vec3) -> Optional[Vec3]:
    """Return the unit normal of a triangle or ``None`` if degenerate."""

    n = cross(sub(v1, v0), sub(v2, v0))
    length = mag(n)
    if length <= epsilon * epsilon:
        return None
    return (n[0] / length, n[1] / length, n[2] / length)


__all__ = [
    "Vec3",
    "epsilon",
    "ORIGIN",
    "HEIGHT_AXIS",
    "to_vec3",
    "flatten",
    "add",
    "sub",
    "scale",
    "mid",
    "dot",
    "cross",
    "mag",
    "dist",
    "normalize",
    "triangle_normal",
]
