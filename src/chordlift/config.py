"""Session configuration.

:class:`SessionConfig` is the complete set of named parameters the control
panel may read and write.  It is a plain value: the session hands the
relevant fields to the components it owns, and the recorder alone advances
``a`` and ``b`` while playing.

Control panels tend to speak camelCase (``speedA``, ``resA``); both that
spelling and the snake_case field names are accepted by
:meth:`SessionConfig.from_mapping` and :meth:`SessionConfig.update`.
"""

from __future__ import annotations

import logging
import math
import numbers
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Mapping

from chordlift.curve import wrap01
from chordlift.errors import ConfigError
from chordlift.surface import MIN_RESOLUTION

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionConfig:
    """Every named option of a sketch session, with its default."""

    drawing_enabled: bool = True
    a: float = 0.15
    b: float = 0.65
    playing: bool = False
    speed_a: float = 0.18         # cycles per second
    speed_b: float = 0.23         # cycles per second
    trail_capacity: int = 4000    # starting capacity, grows by doubling
    trail_min_step: float = 0.01  # min world distance between trail samples
    show_surface: bool = False
    res_a: int = 400
    res_b: int = 400
    surface_opacity: float = 0.35
    wireframe: bool = False

    @classmethod
    def option_names(cls):
        return tuple(f.name for f in fields(cls))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "SessionConfig":
        """Build a config from ``mapping``; unknown keys raise :class:`ConfigError`."""

        return cls().update(**dict(mapping))

    def update(self, **changes) -> "SessionConfig":
        """Return a copy with ``changes`` applied."""

        resolved: Dict[str, Any] = {}
        for key, value in changes.items():
            name = _canonical_name(key)
            resolved[name] = _coerce(name, value)
        return replace(self, **resolved)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def clamped(self) -> "SessionConfig":
        """Return a copy with every value pulled into its valid range.

        Resolutions below the smallest triangulable grid are raised to
        ``MIN_RESOLUTION`` here so they never reach the tessellator.
        """

        fixed = {
            'res_a': max(MIN_RESOLUTION, int(math.floor(self.res_a))),
            'res_b': max(MIN_RESOLUTION, int(math.floor(self.res_b))),
            'trail_capacity': max(1, int(self.trail_capacity)),
            'trail_min_step': max(0.0, float(self.trail_min_step)),
            'surface_opacity': min(1.0, max(0.0, float(self.surface_opacity))),
            'a': wrap01(self.a),
            'b': wrap01(self.b),
        }
        for name, value in fixed.items():
            if value != getattr(self, name):
                logger.warning("clamped %s from %r to %r", name, getattr(self, name), value)
        return replace(self, **fixed)


_BOOL_FIELDS = {'drawing_enabled', 'playing', 'show_surface', 'wireframe'}
_INT_FIELDS = {'trail_capacity', 'res_a', 'res_b'}

_ALIASES = {
    'drawingEnabled': 'drawing_enabled',
    'drawingMode': 'drawing_enabled',
    'speedA': 'speed_a',
    'speedB': 'speed_b',
    'trailCapacity': 'trail_capacity',
    'trailMax': 'trail_capacity',
    'trailMinStep': 'trail_min_step',
    'showSurface': 'show_surface',
    'resA': 'res_a',
    'resB': 'res_b',
    'surfaceOpacity': 'surface_opacity',
}


def _canonical_name(key: str) -> str:
    name = _ALIASES.get(key, key)
    if name not in SessionConfig.option_names():
        raise ConfigError(f"unknown configuration option {key!r}")
    return name


def _coerce(name: str, value: Any) -> Any:
    if name in _BOOL_FIELDS:
        if not isinstance(value, bool):
            raise ConfigError(f"{name} must be a bool, got {value!r}")
        return value
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ConfigError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ConfigError(f"{name} must be finite, got {value!r}")
    if name in _INT_FIELDS:
        return int(math.floor(value))
    return float(value)


__all__ = ['SessionConfig']
