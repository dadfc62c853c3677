"""Exception types raised by chordlift.

Only construction-time failures are errors.  Evaluating a curve, lifting a
chord or ticking the recorder is total for every finite input.
"""

from __future__ import annotations


class ChordLiftError(Exception):
    """Base exception for chordlift errors."""
    pass


class InsufficientPointsError(ChordLiftError, ValueError):
    """A closed curve needs at least three control points."""

    def __init__(self, count: int, minimum: int = 3):
        self.count = count
        self.minimum = minimum
        super().__init__(
            f"closed curve needs at least {minimum} control points, got {count}")


class InvalidResolutionError(ChordLiftError, ValueError):
    """Grid resolution too small (or not integral) to triangulate."""

    def __init__(self, res_a, res_b, minimum: int = 2, message: str = None):
        self.res_a = res_a
        self.res_b = res_b
        self.minimum = minimum
        if message is None:
            message = (f"grid resolution must be an integer >= {minimum} on both axes, "
                       f"got ({res_a}, {res_b})")
        super().__init__(message)


class ConfigError(ChordLiftError, ValueError):
    """Unknown configuration option or bad option value."""
    pass


__all__ = [
    'ChordLiftError',
    'InsufficientPointsError',
    'InvalidResolutionError',
    'ConfigError',
]
