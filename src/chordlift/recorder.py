"""Animation of the parameter pair and recording of the lifted trajectory.

:class:`TrajectoryRecorder` is a two-state machine:

``IDLE``
    No curve bound, or a curve bound with playback stopped.  ``tick`` does
    nothing and the parameters only change through ``set_parameters``.
``PLAYING``
    A curve is bound and every ``tick(dt)`` advances ``a`` by
    ``speed_a * dt`` and ``b`` by ``speed_b * dt``, both modulo 1, then
    records the new lifted point in the trail.

A point is only recorded when it lies strictly farther than ``min_step``
from the last recorded point, so slow motion does not flood the trail with
near duplicates.

The phases are computed as ``anchor + speed * elapsed`` rather than by
summing ``speed * dt`` every frame, so ten ticks of ``0.1`` land exactly on
``1.0``.  The anchor is reset whenever the speeds or parameters change.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from chordlift.curve import ClosedCurve, wrap01
from chordlift.geometry_utils import dist
from chordlift.lift import ChordLiftSample, chord_lift
from chordlift.trail import DEFAULT_CAPACITY, DEFAULT_HARD_CAP, TrailBuffer

logger = logging.getLogger(__name__)


class PlayState(Enum):
    IDLE = 'idle'
    PLAYING = 'playing'


class TrajectoryRecorder:
    """Advance ``(a, b)`` over time and keep a bounded trail of lifted points."""

    def __init__(self, speed_a: float = 0.18, speed_b: float = 0.23,
                 min_step: float = 0.01,
                 trail_capacity: int = DEFAULT_CAPACITY,
                 trail_hard_cap: int = DEFAULT_HARD_CAP,
                 a: float = 0.15, b: float = 0.65):
        self._curve: Optional[ClosedCurve] = None
        self._state = PlayState.IDLE
        self._speed_a = float(speed_a)
        self._speed_b = float(speed_b)
        self.min_step = min_step
        self._trail = TrailBuffer(trail_capacity, trail_hard_cap)

        self._a = wrap01(a)
        self._b = wrap01(b)
        self._rebase()

    @property
    def state(self) -> PlayState:
        return self._state

    @property
    def playing(self) -> bool:
        return self._state is PlayState.PLAYING

    @property
    def curve(self) -> Optional[ClosedCurve]:
        return self._curve

    @property
    def trail(self) -> TrailBuffer:
        return self._trail

    @property
    def a(self) -> float:
        return self._a

    @property
    def b(self) -> float:
        return self._b

    @property
    def speed_a(self) -> float:
        return self._speed_a

    @property
    def speed_b(self) -> float:
        return self._speed_b

    @property
    def min_step(self) -> float:
        return self._min_step

    @min_step.setter
    def min_step(self, value: float) -> None:
        value = float(value)
        if value < 0:
            raise ValueError('min_step must be >= 0')
        self._min_step = value

    def bind_curve(self, curve: Optional[ClosedCurve]) -> None:
        """Use ``curve`` from now on; clears the trail and stops playback."""

        self._curve = curve
        self._trail.clear()
        self._state = PlayState.IDLE
        self._rebase()
        logger.debug("recorder bound to %r", curve)

    def set_playing(self, playing: bool) -> PlayState:
        """Start or stop playback and return the resulting state.

        Playback only starts when a curve is bound.  Stopping freezes the
        parameters where they are and keeps the trail.
        """

        if playing and self._curve is not None:
            new_state = PlayState.PLAYING
        else:
            new_state = PlayState.IDLE
        if new_state is not self._state:
            self._rebase()
            self._state = new_state
            logger.debug("recorder %s at a=%.4f b=%.4f", new_state.value, self._a, self._b)
        return self._state

    def set_speeds(self, speed_a: float, speed_b: float) -> None:
        """Change the parameter speeds (cycles per unit time); keeps the trail."""

        self._rebase()
        self._speed_a = float(speed_a)
        self._speed_b = float(speed_b)

    def set_parameters(self, a: float, b: float) -> None:
        self._a = wrap01(a)
        self._b = wrap01(b)
        self._rebase()

    def clear_trail(self) -> None:
        self._trail.clear()

    clear_loop = clear_trail

    def sample(self) -> Optional[ChordLiftSample]:
        """Chord-lift sample at the current parameters, ``None`` without a curve."""

        if self._curve is None:
            return None
        return chord_lift(self._curve, self._a, self._b)

    def tick(self, dt: float) -> Optional[ChordLiftSample]:
        """Advance one frame; returns the new sample, or ``None`` when idle."""

        if self._state is not PlayState.PLAYING or self._curve is None:
            return None

        self._elapsed += dt
        self._a = wrap01(self._anchor_a + self._speed_a * self._elapsed)
        self._b = wrap01(self._anchor_b + self._speed_b * self._elapsed)

        sample = chord_lift(self._curve, self._a, self._b)
        last = self._trail.last
        if last is None or dist(last, sample.lifted_point) > self._min_step:
            self._trail.append(sample.lifted_point)
        return sample

    def _rebase(self) -> None:
        self._anchor_a = self._a
        self._anchor_b = self._b
        self._elapsed = 0.0


__all__ = ['PlayState', 'TrajectoryRecorder']
