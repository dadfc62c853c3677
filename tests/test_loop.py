import math
import random

import pytest

from chordlift.errors import InsufficientPointsError
from chordlift.loop import LoopSketch, random_loop_points


def test_sketch_flattens_and_orders_points():
    sketch = LoopSketch()
    sketch.add_point((1.0, 0.5, 2.0))
    sketch.add_point((3.0, -0.2, 4.0))
    sketch.add_point((5.0, 6.0))
    assert len(sketch) == 3
    assert sketch.points == ((1.0, 0.0, 2.0), (3.0, 0.0, 4.0), (5.0, 0.0, 6.0))


def test_sketch_build_needs_three_points():
    sketch = LoopSketch([(0, 0, 0), (1, 0, 0)])
    with pytest.raises(InsufficientPointsError):
        sketch.build()
    sketch.add_point((0, 0, 1))
    curve = sketch.build()
    assert curve.control_points == sketch.points


def test_sketch_build_is_fresh_each_time():
    sketch = LoopSketch([(0, 0, 0), (1, 0, 0), (0, 0, 1)])
    first = sketch.build()
    sketch.add_point((-1, 0, 0))
    second = sketch.build()
    assert first is not second
    assert len(first.control_points) == 3
    assert len(second.control_points) == 4


def test_sketch_clear():
    sketch = LoopSketch([(0, 0, 0), (1, 0, 0), (0, 0, 1)])
    sketch.clear()
    assert len(sketch) == 0
    assert sketch.points == ()


def test_random_loop_is_reproducible_and_planar():
    first = random_loop_points(10, 4.0, random.Random(11))
    second = random_loop_points(10, 4.0, random.Random(11))
    assert first == second
    assert len(first) == 10
    for x, y, z in first:
        assert y == 0.0
        assert 0.75 * 4.0 - 1e-9 <= math.hypot(x, z) <= 1.10 * 4.0 + 1e-9


def test_random_loop_angles_increase():
    pts = random_loop_points(12, 2.0, random.Random(3))
    angles = [math.atan2(z, x) % (2 * math.pi) for x, _, z in pts]
    # jitter is at most a quarter radian, well under half the 30 degree spacing
    unwrapped = [(a - 2 * math.pi * i / 12 + math.pi) % (2 * math.pi) - math.pi
                 for i, a in enumerate(angles)]
    assert all(abs(d) <= 0.25 + 1e-9 for d in unwrapped)


def test_random_loop_rejects_tiny_counts():
    with pytest.raises(InsufficientPointsError):
        random_loop_points(2)
