"""Provide the least-squares fits used by knee, plateau and remote-earth checks.

This module supports:
- straight-line fits of resistance against distance (knee and plateau),
- straight-line fits of voltage against reciprocal distance (remote-earth
  extrapolation), and
- intercept confidence bounds reported with the extrapolated voltage.

The degenerate-variance conventions are part of the contract: a fit never
raises because the data are flat or stacked at one distance.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np
from scipy.stats import t as student_t


@dataclass(frozen=True)
class RegressionFit:
    """Result of an ordinary least-squares line ``y = intercept + slope * x``."""

    intercept: float
    slope: float
    r2: float
    sse: float
    n: int

    def predict(self, x) -> np.ndarray:
        return self.intercept + self.slope * np.asarray(x, dtype=float)


def linear_regression(x, y) -> RegressionFit:
    """Fit an ordinary least-squares straight line.

    Args:
        x (array-like): Independent variable (for example, distance in m or
            reciprocal distance in 1/m).
        y (array-like): Dependent variable, same length as ``x``.

    Returns:
        RegressionFit: Intercept, slope, coefficient of determination, sum of
        squared residuals, and point count.

    Raises:
        ValueError: If ``x`` and ``y`` differ in length or are empty.

    Note:
        ``slope = Sxy / Sxx`` is ``nan`` when ``Sxx == 0`` (all x equal); the
        intercept ``ȳ - slope * x̄`` is then ``nan`` as well. ``r2`` is exactly
        ``1.0`` when ``Syy == 0`` (all y equal), whatever the slope. Non-finite
        inputs are not filtered; they propagate into the fit.
    """
    x_arr = np.asarray(x, dtype=float)
    y_arr = np.asarray(y, dtype=float)
    if x_arr.shape != y_arr.shape:
        raise ValueError("x and y must have the same length for regression.")
    n = int(x_arr.size)
    if n < 1:
        raise ValueError("Insufficient data for regression.")

    xbar = float(np.mean(x_arr))
    ybar = float(np.mean(y_arr))
    dx = x_arr - xbar
    dy = y_arr - ybar
    sxx = float(np.sum(dx * dx))
    sxy = float(np.sum(dx * dy))
    syy = float(np.sum(dy * dy))

    slope = math.nan if sxx == 0 else sxy / sxx
    intercept = ybar - slope * xbar

    resid = y_arr - (intercept + slope * x_arr)
    sse = float(np.sum(resid**2))
    r2 = 1.0 if syy == 0 else 1.0 - sse / syy

    return RegressionFit(
        intercept=float(intercept),
        slope=float(slope),
        r2=float(r2),
        sse=sse,
        n=n,
    )


def intercept_uncertainty(x, y, fit: RegressionFit) -> Tuple[float, float]:
    """Return the standard error and 95% half-width of a fitted intercept.

    Args:
        x (array-like): Independent variable used for ``fit``.
        y (array-like): Dependent variable used for ``fit``.
        fit (RegressionFit): Result of ``linear_regression(x, y)``.

    Returns:
        tuple[float, float]: ``(se_intercept, ci95_intercept)``. Both are
        ``nan`` when fewer than three points were fitted or x has no spread.

    Note:
        These describe statistical scatter only. For the extrapolated remote
        voltage the intercept is the limit as distance goes to infinity, so the
        interval says how well the tail pins that limit down.
    """
    x_arr = np.asarray(x, dtype=float)
    n = int(x_arr.size)
    dof = n - 2
    if dof <= 0 or not math.isfinite(fit.sse):
        return math.nan, math.nan

    xbar = float(np.mean(x_arr))
    ssxx = float(np.sum((x_arr - xbar) ** 2))
    if ssxx <= 0:
        return math.nan, math.nan

    mse = fit.sse / dof
    se_b = float(np.sqrt(mse * (1.0 / n + (xbar**2) / ssxx)))
    t_crit = float(student_t.ppf(0.975, dof))
    return se_b, t_crit * se_b
