"""Closed Catmull-Rom curves through user control points.

A :class:`ClosedCurve` is an immutable, periodic interpolating spline.  Its
parameter domain wraps: ``evaluate(t)`` and ``evaluate(t + 1)`` are the same
point for every real ``t``.  The segment after the last control point runs
back to the first one, and tangent estimation at every joint uses the
neighbouring control points cyclically.

Three knot-spacing variants are supported, selected through
:class:`CurveOptions`:

``centripetal``
    Barry-Goldman evaluation with knot spacing ``|P(i+1) - P(i)| ** 0.5``.
    Avoids cusps and self loops on unevenly spaced points.  This is the
    default.
``chordal``
    The same with exponent ``1.0``.
``catmullrom``
    Uniform Catmull-Rom in cubic Hermite form with an explicit ``tension``.

Each segment covers a share of the raw parameter range proportional to its
knot interval, so the raw parameter is a constant multiple of the knot
parameter and the curve is C1 at every joint, the seam included.  By
default ``evaluate`` goes one step further and takes ``t`` as a fraction of
arc length, read from a cumulative length table; pass
``CurveOptions(arc_length=False)`` to get the raw parameter instead.

Curves are rebuilt from scratch whenever the control points change; nothing
in this module mutates a curve after construction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

import numpy as np

from chordlift.errors import ConfigError, InsufficientPointsError
from chordlift.geometry_utils import Vec3, dist, flatten, normalize, sub, to_vec3

logger = logging.getLogger(__name__)

MIN_CONTROL_POINTS = 3

CURVE_TYPES = {
    'centripetal': 0.5,
    'chordal': 1.0,
    'catmullrom': None,
}

_TANGENT_STEP = 1e-4
_SPEED_STEP = 1e-6
_MIN_SPEED = 1e-12


@dataclass(frozen=True)
class CurveOptions:
    """Recognized options for closed-curve construction."""

    curve_type: str = 'centripetal'
    tension: float = 0.5
    arc_length: bool = True
    arc_length_divisions: int = 200

    def __post_init__(self):
        if self.curve_type not in CURVE_TYPES:
            raise ConfigError(
                f"unknown curve_type {self.curve_type!r}, "
                f"expected one of {sorted(CURVE_TYPES)}")
        if int(self.arc_length_divisions) < 1:
            raise ConfigError('arc_length_divisions must be >= 1')

    @property
    def alpha(self):
        """Knot exponent for the Barry-Goldman variants, ``None`` if uniform."""

        return CURVE_TYPES[self.curve_type]


def wrap01(t: float) -> float:
    """Reduce ``t`` into ``[0, 1)``."""

    u = float(t) % 1.0
    # -1e-20 % 1.0 rounds up to 1.0
    if u >= 1.0:
        return 0.0
    return u


class ClosedCurve:
    """Periodic Catmull-Rom curve through an ordered set of control points."""

    def __init__(self, points: Iterable[Sequence[float]], options: CurveOptions = None):
        ctrl = tuple(to_vec3(p) for p in points)
        if len(ctrl) < MIN_CONTROL_POINTS:
            raise InsufficientPointsError(len(ctrl), MIN_CONTROL_POINTS)
        self._ctrl: Tuple[Vec3, ...] = ctrl
        self._options = options if options is not None else CurveOptions()
        self._knots = self._knot_table()
        self._lengths, self._speeds = self._arc_length_table(int(self._options.arc_length_divisions))

    def __repr__(self) -> str:
        return (f"ClosedCurve({len(self._ctrl)} points, "
                f"type={self._options.curve_type!r}, arc_length={self._options.arc_length})")

    @property
    def control_points(self) -> Tuple[Vec3, ...]:
        return self._ctrl

    @property
    def options(self) -> CurveOptions:
        return self._options

    @property
    def segment_count(self) -> int:
        return len(self._ctrl)

    @property
    def knots(self) -> Tuple[float, ...]:
        """Segment boundaries in ``[0, 1]`` before arc-length reparametrization.

        Control point ``i`` sits at ``knots[i]``.  The last entry is ``1.0``
        and closes the loop back onto control point ``0``.
        """

        return tuple(float(k) for k in self._knots)

    @property
    def length(self) -> float:
        """Approximate total arc length of the loop."""

        return float(self._lengths[-1])

    def evaluate(self, t: float) -> Vec3:
        """Return the curve point at parameter ``t`` (taken modulo 1)."""

        u = wrap01(t)
        if self._options.arc_length:
            u = self._u_to_t(u)
        return self._evaluate_raw(u)

    def evaluate_many(self, ts: Iterable[float]) -> np.ndarray:
        """Evaluate a sequence of parameters into an ``(N, 3)`` array."""

        pts = [self.evaluate(t) for t in ts]
        return np.asarray(pts, dtype=float).reshape(-1, 3)

    def tangent(self, t: float) -> Vec3:
        """Unit tangent in the ground plane at ``t``, by central difference."""

        before = self.evaluate(t - _TANGENT_STEP)
        after = self.evaluate(t + _TANGENT_STEP)
        return normalize(flatten(sub(after, before)))

    def sample_polyline(self, count: int = 600) -> np.ndarray:
        """Return ``count + 1`` points along the loop, last equal to first."""

        if count < 1:
            raise ValueError('count must be >= 1')
        return self.evaluate_many(i / count for i in range(count + 1))

    def _knot_table(self) -> np.ndarray:
        ctrl = self._ctrl
        count = len(ctrl)
        alpha = self._options.alpha
        if alpha is None:
            widths = np.ones(count)
        else:
            widths = np.array([dist(ctrl[i], ctrl[(i + 1) % count]) ** alpha
                               for i in range(count)])
        total = float(widths.sum())
        if total <= 0.0:
            # every control point coincides
            widths = np.ones(count)
            total = float(count)
        knots = np.concatenate(([0.0], np.cumsum(widths) / total))
        knots[-1] = 1.0
        return knots

    def _evaluate_raw(self, u: float) -> Vec3:
        ctrl = self._ctrl
        count = len(ctrl)
        knots = self._knots

        idx = int(np.searchsorted(knots, u, side='right')) - 1
        idx = min(max(idx, 0), count - 1)
        width = knots[idx + 1] - knots[idx]
        tau = (u - knots[idx]) / width if width > 0.0 else 0.0
        tau = min(max(float(tau), 0.0), 1.0)

        p0 = ctrl[(idx - 1) % count]
        p1 = ctrl[idx]
        p2 = ctrl[(idx + 1) % count]
        p3 = ctrl[(idx + 2) % count]

        alpha = self._options.alpha
        if alpha is None:
            return _hermite_point(p0, p1, p2, p3, float(self._options.tension), tau)
        return _barry_goldman_point(p0, p1, p2, p3, alpha, tau)

    def _raw_speed(self, u: float) -> float:
        after = self._evaluate_raw(wrap01(u + _SPEED_STEP))
        before = self._evaluate_raw(wrap01(u - _SPEED_STEP))
        return dist(before, after) / (2.0 * _SPEED_STEP)

    def _arc_length_table(self, divisions: int):
        pts = np.asarray([self._evaluate_raw(k / divisions) for k in range(divisions)]
                         + [self._ctrl[0]], dtype=float)
        steps = np.linalg.norm(np.diff(pts, axis=0), axis=1)
        lengths = np.concatenate(([0.0], np.cumsum(steps)))
        speeds = [self._raw_speed(k / divisions) for k in range(divisions)]
        # u = 1 is u = 0
        speeds.append(speeds[0])
        return lengths, np.asarray(speeds)

    def _u_to_t(self, u: float) -> float:
        """Invert the length table with cubic Hermite steps.

        The slope at each table entry is the exact ``du / ds`` there, so the
        arc-length parameter has a continuous derivative across entries and
        across the seam.
        """

        lengths = self._lengths
        total = lengths[-1]
        if total <= 0.0:
            return u
        divisions = len(lengths) - 1
        target = u * total
        i = int(np.searchsorted(lengths, target, side='right')) - 1
        i = min(max(i, 0), divisions - 1)
        u0 = i / divisions
        u1 = (i + 1) / divisions
        seg = lengths[i + 1] - lengths[i]
        if seg <= 0.0:
            return u0

        x = (target - lengths[i]) / seg
        m0 = self._hermite_slope(i, seg, u1 - u0)
        m1 = self._hermite_slope(i + 1, seg, u1 - u0)
        x2 = x * x
        x3 = x2 * x
        t = ((2.0 * x3 - 3.0 * x2 + 1.0) * u0 + (x3 - 2.0 * x2 + x) * m0
             + (3.0 * x2 - 2.0 * x3) * u1 + (x3 - x2) * m1)
        return float(min(max(t, u0), u1))

    def _hermite_slope(self, i: int, seg: float, secant: float) -> float:
        speed = self._speeds[i]
        if speed <= _MIN_SPEED:
            return secant
        return seg / speed


def build_closed_curve(points: Iterable[Sequence[float]], options: CurveOptions = None) -> ClosedCurve:
    """Fit a closed curve through ``points``.

    Raises :class:`InsufficientPointsError` when fewer than three points
    are given.  Duplicate or collinear points are not rejected.
    """

    curve = ClosedCurve(points, options)
    logger.info("built closed %s curve through %d points (length %.4g)",
                curve.options.curve_type, curve.segment_count, curve.length)
    return curve


def _barry_goldman_point(p0: Vec3, p1: Vec3, p2: Vec3, p3: Vec3, alpha: float, tau: float) -> Vec3:

    def tj(ti: float, pa: Vec3, pb: Vec3) -> float:
        delta = ((pb[0] - pa[0]) ** 2 + (pb[1] - pa[1]) ** 2 + (pb[2] - pa[2]) ** 2) ** 0.5
        return ti + pow(delta, alpha)

    t0 = 0.0
    t1 = tj(t0, p0, p1)
    t2 = tj(t1, p1, p2)
    t3 = tj(t2, p2, p3)

    if t2 - t1 < 1e-12:
        return p1

    t = t1 + (t2 - t1) * tau

    A1 = _blend(p0, p1, t0, t1, t)
    A2 = _blend(p1, p2, t1, t2, t)
    A3 = _blend(p2, p3, t2, t3, t)

    B1 = _blend(A1, A2, t0, t2, t)
    B2 = _blend(A2, A3, t1, t3, t)

    return _blend(B1, B2, t1, t2, t)


def _blend(a: Vec3, b: Vec3, t0: float, t1: float, t: float) -> Vec3:
    denom = t1 - t0
    if abs(denom) < 1e-12:
        return b
    w0 = (t1 - t) / denom
    w1 = (t - t0) / denom
    return (
        a[0] * w0 + b[0] * w1,
        a[1] * w0 + b[1] * w1,
        a[2] * w0 + b[2] * w1,
    )


def _hermite_point(p0: Vec3, p1: Vec3, p2: Vec3, p3: Vec3, tension: float, tau: float) -> Vec3:
    tau2 = tau * tau
    tau3 = tau2 * tau
    out = []
    for k in range(3):
        m1 = tension * (p2[k] - p0[k])
        m2 = tension * (p3[k] - p1[k])
        c2 = -3.0 * p1[k] + 3.0 * p2[k] - 2.0 * m1 - m2
        c3 = 2.0 * p1[k] - 2.0 * p2[k] + m1 + m2
        out.append(p1[k] + m1 * tau + c2 * tau2 + c3 * tau3)
    return out[0], out[1], out[2]


__all__ = [
    'MIN_CONTROL_POINTS',
    'CURVE_TYPES',
    'CurveOptions',
    'ClosedCurve',
    'build_closed_curve',
    'wrap01',
]
