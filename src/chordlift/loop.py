"""Control-point sketches for closed loops.

The picking collaborator hands us world-space points one user action at a
time; :class:`LoopSketch` keeps them in order on the ground plane and turns
them into a :class:`~chordlift.curve.ClosedCurve` on request.
"""

from __future__ import annotations

import logging
import math
import random
from typing import Iterable, List, Optional, Sequence, Tuple

from chordlift.curve import MIN_CONTROL_POINTS, ClosedCurve, CurveOptions, build_closed_curve
from chordlift.errors import InsufficientPointsError
from chordlift.geometry_utils import Vec3, flatten

logger = logging.getLogger(__name__)


class LoopSketch:
    """Ordered list of ground-plane control points."""

    def __init__(self, points: Iterable[Sequence[float]] = ()):
        self._points: List[Vec3] = [flatten(p) for p in points]

    def __len__(self) -> int:
        return len(self._points)

    @property
    def points(self) -> Tuple[Vec3, ...]:
        return tuple(self._points)

    def add_point(self, p: Sequence[float]) -> Vec3:
        """Append ``p``, snapped to ``y = 0``, and return the stored point."""

        pt = flatten(p)
        self._points.append(pt)
        logger.debug("control point %d at (%.4g, %.4g)", len(self._points), pt[0], pt[2])
        return pt

    def clear(self) -> None:
        self._points = []

    def replace(self, points: Iterable[Sequence[float]]) -> None:
        self._points = [flatten(p) for p in points]

    def build(self, options: Optional[CurveOptions] = None) -> ClosedCurve:
        """Fit a new closed curve through the current points."""

        return build_closed_curve(self._points, options)


def random_loop_points(count: int = 10, radius: float = 4.0,
                       rng: Optional[random.Random] = None) -> List[Vec3]:
    """Return ``count`` points of a jittered, roughly circular loop.

    Points are placed at evenly spaced angles with up to a quarter radian of
    angular jitter and radii drawn from ``[0.75, 1.10) * radius``.  Pass a
    seeded ``random.Random`` for reproducible loops.
    """

    if count < MIN_CONTROL_POINTS:
        raise InsufficientPointsError(count, MIN_CONTROL_POINTS)
    if rng is None:
        rng = random.Random()

    points = []
    for i in range(count):
        t = i / count
        ang = 2.0 * math.pi * t + (rng.random() * 0.5 - 0.25)
        r = radius * (0.75 + rng.random() * 0.35)
        points.append((r * math.cos(ang), 0.0, r * math.sin(ang)))
    return points


__all__ = ['LoopSketch', 'random_loop_points']
