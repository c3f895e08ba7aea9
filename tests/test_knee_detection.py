"""Unit tests for the two-segment knee search."""

import numpy as np
import pytest

from epr.earthing.knee import detect_knee


@pytest.fixture()
def synthetic_step_series():
    """Two exact straight lines with a jump between index 4 and 5."""
    d = np.arange(1.0, 11.0)
    r = np.where(np.arange(10) < 5, d, 20.0 + 0.1 * d)
    return d, r, 5


def test_zero_noise_two_segment_series_finds_breakpoint(synthetic_step_series):
    d, r, expected = synthetic_step_series
    knee = detect_knee(d, r)
    assert knee.found
    assert knee.index == expected
    assert knee.distance == d[expected]
    assert knee.sse == pytest.approx(0.0, abs=1e-18)
    assert knee.r2_pre == pytest.approx(1.0)
    assert knee.r2_post == pytest.approx(1.0)
    assert "R²(pre)=1.00" in knee.detail


def test_fewer_than_six_points_is_insufficient():
    knee = detect_knee([1.0, 2.0, 3.0, 4.0, 5.0], [1.0, 2.0, 3.0, 3.1, 3.2])
    assert knee.index is None
    assert not knee.found
    assert "insufficient" in knee.detail.lower()


def test_split_respects_two_point_minimum_each_side():
    d = np.arange(1.0, 7.0)
    r = np.array([0.0, 10.0, 10.0, 10.0, 10.0, 10.0])
    knee = detect_knee(d, r)
    assert 2 <= knee.index <= len(d) - 3


def test_equal_sse_keeps_lowest_split():
    d = np.arange(1.0, 9.0)
    r = np.full(8, 3.0)
    knee = detect_knee(d, r)
    assert knee.index == 2
    assert knee.sse == 0.0


def test_stacked_distances_report_too_noisy():
    d = np.full(7, 25.0)
    r = np.array([1.0, 1.1, 1.2, 1.0, 1.1, 1.2, 1.3])
    knee = detect_knee(d, r)
    assert knee.index is None
    assert "too noisy" in knee.detail


def test_field_survey_knee(field_samples):
    d = np.array([s.distance for s in field_samples])
    r = np.array([s.voltage_v for s in field_samples])
    knee = detect_knee(d, r)
    assert knee.index == 9
    assert knee.distance == 61.0
