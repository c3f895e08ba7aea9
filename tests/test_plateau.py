import math

import numpy as np
import pytest

from epr.earthing.plateau import PlateauStatus, classify_plateau

DISTANCES = np.array([100.0, 200.0, 300.0, 400.0, 500.0])


def test_constant_tail_is_likely_plateau():
    res = classify_plateau(DISTANCES, np.full(5, 2.0), window=5)
    assert res.status is PlateauStatus.LIKELY
    assert res.range_pct == 0.0
    assert res.slope_pct_per_100m == 0.0
    assert res.n_points == 5
    assert res.status.severity == "good"


def test_wide_range_with_small_slope_is_unstable():
    r = np.array([9.0, 11.0, 9.0, 11.0, 10.0])
    res = classify_plateau(DISTANCES, r, window=5)
    assert res.range_pct == pytest.approx(20.0)
    assert abs(res.slope_pct_per_100m) == pytest.approx(2.0)
    assert res.status is PlateauStatus.UNSTABLE
    assert res.status.value == "Unstable / not far enough"


def test_moderate_range_is_borderline():
    r = np.array([9.5, 10.5, 9.5, 10.5, 10.0])
    res = classify_plateau(DISTANCES, r, window=5)
    assert res.range_pct == pytest.approx(10.0)
    assert res.status is PlateauStatus.BORDERLINE


def test_steep_slope_is_unstable_even_with_small_range():
    d = np.array([10.0, 20.0, 30.0])
    r = np.array([1.00, 1.03, 1.06])
    res = classify_plateau(d, r, window=3)
    assert res.range_pct < 8.0
    assert res.slope_pct_per_100m > 10.0
    assert res.status is PlateauStatus.UNSTABLE


def test_window_uses_trailing_points_only():
    d = np.array([1.0, 2.0, 100.0, 200.0, 300.0])
    r = np.array([0.1, 0.5, 2.0, 2.0, 2.0])
    res = classify_plateau(d, r, window=3)
    assert res.n_points == 3
    assert res.status is PlateauStatus.LIKELY
    assert res.detail.startswith("Last 3:")


def test_fewer_than_three_points_is_insufficient():
    res = classify_plateau([10.0, 20.0], [1.0, 1.0], window=5)
    assert res.status is PlateauStatus.INSUFFICIENT
    assert math.isnan(res.range_pct)
    small_window = classify_plateau(DISTANCES, np.full(5, 2.0), window=2)
    assert small_window.status is PlateauStatus.INSUFFICIENT


def test_zero_mean_gives_infinite_percentages():
    res = classify_plateau([1.0, 2.0, 3.0], [-1.0, 0.0, 1.0], window=3)
    assert res.range_pct == math.inf
    assert res.slope_pct_per_100m == math.inf
    assert res.status is PlateauStatus.UNSTABLE
