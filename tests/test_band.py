import numpy as np
import pytest

from chordlift.band import BandTessellator, tessellate_band
from chordlift.curve import build_closed_curve
from chordlift.errors import InvalidResolutionError

DIAMOND = [(0, 0, 2), (2, 0, 0), (0, 0, -2), (-2, 0, 0)]


def test_band_grid_size():
    curve = build_closed_curve(DIAMOND)
    band = tessellate_band(curve, width=0.8, segments=40, strips=6)
    assert band.vertex_count == 41 * 7
    assert band.triangle_count == 40 * 6 * 2


def test_band_width_and_centerline():
    curve = build_closed_curve(DIAMOND)
    segments, strips = 40, 4
    grid = tessellate_band(curve, width=0.8, segments=segments, strips=strips).vertices
    grid = grid.reshape(segments + 1, strips + 1, 3)
    widths = np.linalg.norm(grid[:, -1] - grid[:, 0], axis=1)
    assert np.allclose(widths, 0.8, atol=1e-5)
    centre = curve.evaluate_many(np.arange(segments + 1) / segments)
    assert np.allclose(grid[:, strips // 2], centre, atol=1e-5)


def test_band_closes_with_a_half_twist():
    curve = build_closed_curve(DIAMOND)
    segments, strips = 40, 4
    grid = tessellate_band(curve, segments=segments, strips=strips).vertices
    grid = grid.reshape(segments + 1, strips + 1, 3)
    # the last cross-section is the first one reversed
    assert np.allclose(grid[-1], grid[0][::-1], atol=1e-5)
    # half way round the band stands upright
    mid = grid[segments // 2]
    assert abs(mid[-1][1] - mid[0][1]) == pytest.approx(0.8, abs=1e-4)


def test_band_rejects_bad_input():
    curve = build_closed_curve(DIAMOND)
    with pytest.raises(ValueError):
        tessellate_band(curve, width=0.0)
    with pytest.raises(InvalidResolutionError):
        tessellate_band(curve, segments=1)
    with pytest.raises(InvalidResolutionError, match='strips must be an integer >= 1') as info:
        tessellate_band(curve, strips=0)
    assert info.value.minimum == 1
    with pytest.raises(InvalidResolutionError, match='segments must be an integer >= 2'):
        tessellate_band(curve, segments=2.5)


def test_band_with_a_single_strip():
    curve = build_closed_curve(DIAMOND)
    band = tessellate_band(curve, segments=10, strips=1)
    assert band.vertex_count == 11 * 2
    assert band.triangle_count == 10 * 2


def test_band_tessellator_memoizes():
    curve = build_closed_curve(DIAMOND)
    tess = BandTessellator()
    first = tess.build(curve, 0.8, 20, 4)
    assert tess.build(curve, 0.8, 20, 4) is first
    assert tess.build(curve, 1.0, 20, 4) is not first
    assert tess.builds == 2
    tess.clear()
    assert tess.mesh is None
