"""The sketch session: one loop, its curve, the animator and the surface.

:class:`Session` is the composition root an interactive front end talks to.
It owns exactly one of each core component and keeps :class:`SessionConfig`
in step with them.  Once per frame the render loop calls :meth:`Session.update`
and draws the returned :class:`FrameView`; nothing in the view is written
back.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from typing import Optional, Sequence

import numpy as np

from chordlift.config import SessionConfig
from chordlift.curve import ClosedCurve, CurveOptions
from chordlift.lift import ChordLiftSample
from chordlift.loop import LoopSketch, random_loop_points
from chordlift.mesh import TriangleMesh
from chordlift.recorder import PlayState, TrajectoryRecorder
from chordlift.surface import SurfaceTessellator
from chordlift.trail import DEFAULT_HARD_CAP

logger = logging.getLogger(__name__)

POLYLINE_SAMPLES = 600


@dataclass(frozen=True, eq=False)
class FrameView:
    """Read-only geometry for one rendered frame."""

    curve_polyline: Optional[np.ndarray]
    sample: Optional[ChordLiftSample]
    trail: np.ndarray
    surface: Optional[TriangleMesh]
    playing: bool
    drawing_enabled: bool


class Session:
    """A single sketch with its closed curve, trajectory recorder and surface."""

    def __init__(self, config: Optional[SessionConfig] = None,
                 curve_options: Optional[CurveOptions] = None,
                 trail_hard_cap: int = DEFAULT_HARD_CAP):
        cfg = (config if config is not None else SessionConfig()).clamped()
        self.curve_options = curve_options
        self.sketch = LoopSketch()
        self.recorder = TrajectoryRecorder(
            speed_a=cfg.speed_a, speed_b=cfg.speed_b,
            min_step=cfg.trail_min_step,
            trail_capacity=cfg.trail_capacity, trail_hard_cap=trail_hard_cap,
            a=cfg.a, b=cfg.b)
        self.surface = SurfaceTessellator()
        self._curve: Optional[ClosedCurve] = None
        self._polyline: Optional[np.ndarray] = None
        # no curve yet, so playback cannot be on
        self._config = replace(cfg, playing=False)

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def curve(self) -> Optional[ClosedCurve]:
        return self._curve

    # ---------- loop ----------

    def add_point(self, p: Sequence[float]) -> bool:
        """Record a picked point; ignored unless drawing is enabled."""

        if not self._config.drawing_enabled:
            return False
        self.sketch.add_point(p)
        return True

    def close_and_smooth(self) -> ClosedCurve:
        """Fit the closed curve through the sketch and leave drawing mode.

        Raises :class:`~chordlift.errors.InsufficientPointsError` with fewer
        than three points, in which case the previous curve stays bound.
        """

        curve = self.sketch.build(self.curve_options)
        self._bind(curve)
        self.set_drawing_enabled(False)
        return curve

    def generate_random_loop(self, count: int = 10, radius: float = 4.0,
                             rng: Optional[random.Random] = None) -> ClosedCurve:
        points = random_loop_points(count, radius, rng)
        self.set_drawing_enabled(False)
        self.sketch.replace(points)
        curve = self.sketch.build(self.curve_options)
        self._bind(curve)
        return curve

    def clear_loop(self) -> None:
        """Forget the sketch, curve, trail and surface; re-enter drawing mode."""

        self.sketch.clear()
        self._bind(None)
        self.set_drawing_enabled(True)
        logger.info("loop cleared")

    def set_drawing_enabled(self, enabled: bool) -> None:
        enabled = bool(enabled)
        if enabled and not self._config.drawing_enabled:
            self.recorder.clear_trail()
        self._config = replace(self._config, drawing_enabled=enabled)

    # ---------- animation ----------

    def set_playing(self, playing: bool) -> bool:
        state = self.recorder.set_playing(playing)
        self._config = replace(self._config, playing=state is PlayState.PLAYING,
                               a=self.recorder.a, b=self.recorder.b)
        return self._config.playing

    def set_speeds(self, speed_a: float, speed_b: float) -> None:
        self.recorder.set_speeds(speed_a, speed_b)
        self._config = replace(self._config, speed_a=self.recorder.speed_a,
                               speed_b=self.recorder.speed_b)

    def set_parameters(self, a: float, b: float) -> None:
        self.recorder.set_parameters(a, b)
        self._config = replace(self._config, a=self.recorder.a, b=self.recorder.b)

    def clear_trail(self) -> None:
        self.recorder.clear_trail()

    def configure(self, **changes) -> SessionConfig:
        """Apply named option changes (snake_case or camelCase).

        ``trail_capacity`` is only read when the session is created; the
        live trail keeps growing by doubling from whatever it holds now.
        """

        old = self._config
        new = old.update(**changes).clamped()
        self._config = replace(new, a=old.a, b=old.b, playing=old.playing,
                               drawing_enabled=old.drawing_enabled)

        if (new.speed_a, new.speed_b) != (self.recorder.speed_a, self.recorder.speed_b):
            self.set_speeds(new.speed_a, new.speed_b)
        self.recorder.min_step = new.trail_min_step
        if (new.a, new.b) != (old.a, old.b):
            self.set_parameters(new.a, new.b)
        if new.drawing_enabled != old.drawing_enabled:
            self.set_drawing_enabled(new.drawing_enabled)
        if new.playing != old.playing:
            self.set_playing(new.playing)
        return self._config

    # ---------- per frame ----------

    def update(self, dt: float) -> FrameView:
        """Advance the animation by ``dt`` and collect what to draw."""

        sample = self.recorder.tick(dt)
        if sample is not None:
            self._config = replace(self._config, a=self.recorder.a, b=self.recorder.b)
        else:
            sample = self.recorder.sample()

        cfg = self._config
        surface = None
        if cfg.show_surface and self._curve is not None:
            surface = self.surface.build(self._curve, cfg.res_a, cfg.res_b,
                                         cfg.surface_opacity, cfg.wireframe)

        return FrameView(
            curve_polyline=self._polyline,
            sample=sample,
            trail=self.recorder.trail.to_array(),
            surface=surface,
            playing=self.recorder.playing,
            drawing_enabled=cfg.drawing_enabled,
        )

    def _bind(self, curve: Optional[ClosedCurve]) -> None:
        self._curve = curve
        self._polyline = curve.sample_polyline(POLYLINE_SAMPLES) if curve is not None else None
        self.recorder.bind_curve(curve)
        self.surface.clear()
        self._config = replace(self._config, playing=False)
        if curve is not None:
            logger.info("session bound to %r", curve)


__all__ = ['FrameView', 'Session', 'POLYLINE_SAMPLES']
