"""
Statistical utilities for fall-of-potential analysis.

This subpackage provides the numerical routines used by the earthing checks:
straight-line regression with its degenerate-variance conventions, and the
monotone cubic sampler used for display curves. All functions operate on
arrays and primitive types; no earthing-specific logic is included.

Modules:
    regression:
        Ordinary least squares with R², residual sum of squares, and
        intercept confidence bounds.

    interpolation:
        Fritsch-Carlson monotone cubic Hermite sampling.

Design Principle:
    This subpackage has no dependencies on earthing/ or plotting modules.
    It provides pure numerical utilities that can be independently tested.
"""

from .interpolation import monotone_cubic_sample, monotone_tangents
from .regression import RegressionFit, intercept_uncertainty, linear_regression

__all__ = [
    "RegressionFit",
    "linear_regression",
    "intercept_uncertainty",
    "monotone_cubic_sample",
    "monotone_tangents",
]
