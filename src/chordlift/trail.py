"""Bounded, growable buffer of trail points.

Storage is a fixed-stride ``(capacity, 3)`` float array.  Capacity starts
at a configured value and doubles whenever an append would overflow it, up
to a hard cap.  Once the hard cap is full the buffer turns into a ring: each
new point overwrites the oldest one, so the trail keeps the most recent
``hard_cap`` points in FIFO order.
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional, Sequence

import numpy as np

from chordlift.geometry_utils import Vec3, to_vec3

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 4000
DEFAULT_HARD_CAP = 60000


class TrailBuffer:
    """Ordered trail of 3D points, oldest first."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY, hard_cap: int = DEFAULT_HARD_CAP):
        if int(hard_cap) < 1:
            raise ValueError('hard_cap must be >= 1')
        self._hard_cap = int(hard_cap)
        start = min(max(1, int(capacity)), self._hard_cap)
        self._data = np.zeros((start, 3), dtype=np.float64)
        self._count = 0
        # index of the oldest point; nonzero only after wrapping at the hard cap
        self._head = 0

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[Vec3]:
        for row in self.to_array():
            yield float(row[0]), float(row[1]), float(row[2])

    def __repr__(self) -> str:
        return f"TrailBuffer({self._count}/{self.capacity}, hard_cap={self._hard_cap})"

    @property
    def capacity(self) -> int:
        return len(self._data)

    @property
    def hard_cap(self) -> int:
        return self._hard_cap

    @property
    def last(self) -> Optional[Vec3]:
        """Most recently appended point, or ``None`` when empty."""

        if self._count == 0:
            return None
        row = self._data[(self._head + self._count - 1) % self.capacity]
        return float(row[0]), float(row[1]), float(row[2])

    def append(self, p: Sequence[float]) -> None:
        pt = to_vec3(p)
        cap = self.capacity
        if self._count == cap and cap < self._hard_cap:
            self._grow(min(cap * 2, self._hard_cap))
            cap = self.capacity

        if self._count < cap:
            self._data[(self._head + self._count) % cap] = pt
            self._count += 1
        else:
            self._data[self._head] = pt
            self._head = (self._head + 1) % cap

    def clear(self) -> None:
        """Drop all points; the current capacity is kept."""

        self._count = 0
        self._head = 0

    def to_array(self) -> np.ndarray:
        """Return the points as a new ``(len, 3)`` array, oldest first."""

        if self._head == 0:
            return self._data[:self._count].copy()
        return np.concatenate((self._data[self._head:], self._data[:self._head]))

    def _grow(self, new_cap: int) -> None:
        data = np.zeros((new_cap, 3), dtype=np.float64)
        data[:self._count] = self.to_array()
        self._data = data
        self._head = 0
        logger.debug("trail capacity grown to %d", new_cap)


__all__ = ['DEFAULT_CAPACITY', 'DEFAULT_HARD_CAP', 'TrailBuffer']
