import numpy as np
import pytest

from chordlift.curve import CurveOptions, build_closed_curve
from chordlift.geometry_utils import dist
from chordlift.lift import chord_lift, chord_lift_grid, lifted_point, parameter_separation

DIAMOND = [(0, 0, 2), (2, 0, 0), (0, 0, -2), (-2, 0, 0)]
UNEVEN = [(0, 0, 0), (0.2, 0, 0.1), (3, 0, 0.5), (3.5, 0, 4), (-1, 0, 3)]

PAIRS = [(0.0, 0.5), (0.1, 0.6), (0.37, 0.91), (0.99, 0.01), (-0.3, 1.7), (0.25, 0.25)]


def _circ_dist(x, y):
    d = abs(x - y) % 1.0
    return min(d, 1.0 - d)


def test_diamond_opposite_corners():
    curve = build_closed_curve(DIAMOND, CurveOptions(arc_length=False))
    sample = chord_lift(curve, 0.0, 0.5)
    assert sample.chord_length == pytest.approx(4.0, abs=1e-9)
    assert sample.midpoint == pytest.approx((0.0, 0.0, 0.0), abs=1e-9)
    assert sample.lifted_point == pytest.approx((0.0, 4.0, 0.0), abs=1e-9)
    assert sample.point_a == pytest.approx((0.0, 0.0, 2.0), abs=1e-9)
    assert sample.point_b == pytest.approx((0.0, 0.0, -2.0), abs=1e-9)


def test_diamond_opposite_corners_arc_length():
    curve = build_closed_curve(DIAMOND, CurveOptions(arc_length=True))
    sample = chord_lift(curve, 0.0, 0.5)
    assert sample.chord_length == pytest.approx(4.0, abs=1e-3)
    assert sample.lifted_point == pytest.approx((0.0, 4.0, 0.0), abs=1e-3)


@pytest.mark.parametrize('a, b', PAIRS)
def test_symmetry(a, b):
    curve = build_closed_curve(UNEVEN)
    assert chord_lift(curve, a, b).lifted_point == chord_lift(curve, b, a).lifted_point
    assert chord_lift(curve, a, b).chord_length == chord_lift(curve, b, a).chord_length
    assert chord_lift(curve, a, b).midpoint == chord_lift(curve, b, a).midpoint


@pytest.mark.parametrize('a', [0.0, 0.2, 0.5, 0.731, 1.0, -0.4])
def test_diagonal_has_no_height(a):
    curve = build_closed_curve(UNEVEN)
    sample = chord_lift(curve, a, a)
    assert sample.chord_length == 0.0
    assert sample.lifted_point == sample.midpoint
    assert sample.midpoint == pytest.approx(curve.evaluate(a), abs=1e-12)


def test_parameters_wrap():
    curve = build_closed_curve(UNEVEN)
    ref = chord_lift(curve, 0.3, 0.8)
    moved = chord_lift(curve, 1.3, -0.2)
    assert moved.lifted_point == pytest.approx(ref.lifted_point, abs=1e-9)


def test_lift_height_is_chord_length():
    curve = build_closed_curve(UNEVEN)
    for a, b in PAIRS:
        s = chord_lift(curve, a, b)
        assert s.lifted_point[1] == s.chord_length
        assert s.chord_length == pytest.approx(dist(s.point_a, s.point_b))
        assert s.point_a[1] == 0.0 and s.point_b[1] == 0.0
        assert lifted_point(curve, a, b) == s.lifted_point


def test_lift_flattens_raised_curves():
    curve = build_closed_curve([(0, 1, 0), (2, 1, 0), (1, 1, 2)])
    s = chord_lift(curve, 0.0, 1.0 / 3.0)
    assert s.point_a == pytest.approx((0.0, 0.0, 0.0))
    assert s.lifted_point == pytest.approx((1.0, 2.0, 0.0))


def test_grid_matches_scalar_map():
    curve = build_closed_curve(UNEVEN)
    params_a = np.linspace(0.0, 1.0, 7)
    params_b = np.linspace(0.0, 1.0, 5)
    grid = chord_lift_grid(curve, params_a, params_b)
    assert grid.shape == (5, 7, 3)
    for j, b in enumerate(params_b):
        for i, a in enumerate(params_a):
            assert tuple(grid[j, i]) == pytest.approx(lifted_point(curve, a, b), abs=1e-12)


@pytest.mark.parametrize('a, b, m, s', [
    (0.1, 0.3, 0.2, 0.2),
    (0.3, 0.1, 0.2, 0.2),
    (0.9, 0.1, 0.0, 0.2),
    (0.1, 0.9, 0.0, 0.2),
    (0.4, 0.4, 0.4, 0.0),
    (0.0, 0.5, 0.25, 0.5),
    (1.25, -0.25, 0.5, 0.5),
])
def test_parameter_separation(a, b, m, s):
    got_m, got_s = parameter_separation(a, b)
    assert got_s == pytest.approx(s, abs=1e-12)
    assert 0.0 <= got_s <= 0.5
    assert 0.0 <= got_m < 1.0
    assert _circ_dist(got_m, m) < 1e-12
