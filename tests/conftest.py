"""Pytest configuration for repository-relative imports and shared surveys."""

import os
import sys

import matplotlib

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

matplotlib.use("Agg")

import pytest  # noqa: E402

from epr.data_processing import Sample  # noqa: E402

FIELD_SURVEY = [
    (0.1, 141),
    (1, 151),
    (2, 155),
    (3, 155),
    (4, 156),
    (6, 144),
    (11, 171),
    (17, 181),
    (28, 196),
    (61, 197),
    (147, 218),
    (408, 220),
]


@pytest.fixture()
def field_samples():
    """Twelve-point fall-of-potential survey with a knee near 61 m."""
    return [Sample(distance=float(d), voltage_mv=float(mv)) for d, mv in FIELD_SURVEY]
