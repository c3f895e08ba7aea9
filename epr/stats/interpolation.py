"""Shape-preserving display curves through survey readings.

The curve drawn through voltage-vs-distance readings must not invent bumps
between probes: an overshoot would look like a local potential peak that was
never measured. A Fritsch-Carlson monotone cubic Hermite spline passes through
every reading and only turns where the data turn.

Algorithm summary: secant slopes per segment, weighted-harmonic interior
tangents (zero at a change of direction), endpoint tangents copied from the
adjacent secant, then the Fritsch-Carlson limiter that pulls each tangent pair
back inside the monotonicity circle of radius 3.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np


def _initial_tangents(h: np.ndarray, d: np.ndarray) -> np.ndarray:
    n = len(d) + 1
    m = np.empty(n, dtype=float)
    m[0] = d[0]
    m[-1] = d[-1]
    for i in range(1, n - 1):
        if d[i - 1] * d[i] <= 0:
            m[i] = 0.0
        else:
            w1 = 2 * h[i] + h[i - 1]
            w2 = h[i] + 2 * h[i - 1]
            m[i] = (w1 + w2) / (w1 / d[i - 1] + w2 / d[i])
    return m


def _limit_tangents(m: np.ndarray, d: np.ndarray) -> np.ndarray:
    # Sequential: the limiter on segment i may shrink m[i + 1] before
    # segment i + 1 is examined.
    m = m.copy()
    for i in range(len(d)):
        if d[i] == 0:
            m[i] = 0.0
            m[i + 1] = 0.0
            continue
        alpha = m[i] / d[i]
        beta = m[i + 1] / d[i]
        s = alpha * alpha + beta * beta
        if s > 9:
            tau = 3.0 / np.sqrt(s)
            m[i] = tau * alpha * d[i]
            m[i + 1] = tau * beta * d[i]
    return m


def monotone_tangents(x, y) -> np.ndarray:
    """Return Fritsch-Carlson limited tangents at each knot.

    Args:
        x (array-like): Strictly increasing knot positions (at least 2).
        y (array-like): Knot values.

    Returns:
        numpy.ndarray: One tangent per knot.
    """
    x_arr = np.asarray(x, dtype=float)
    y_arr = np.asarray(y, dtype=float)
    h = np.diff(x_arr)
    d = np.diff(y_arr) / h
    return _limit_tangents(_initial_tangents(h, d), d)


def monotone_cubic_sample(
    x, y, samples_per_segment: int = 25
) -> Tuple[np.ndarray, np.ndarray]:
    """Sample a monotone cubic through ``(x, y)`` as a dense polyline.

    Args:
        x (array-like): Strictly increasing positions (distance in m).
        y (array-like): Values at each position (voltage).
        samples_per_segment (int, optional): Number of sub-intervals per
            segment. Each segment contributes ``samples_per_segment + 1``
            points, so interior knots appear twice. Defaults to ``25``.

    Returns:
        tuple[numpy.ndarray, numpy.ndarray]: Sampled ``(x, y)``. Empty arrays
        for fewer than two knots; a straight line for exactly two.

    Raises:
        ValueError: If lengths differ, ``x`` is not strictly increasing, or
            ``samples_per_segment < 1``.

    Note:
        Every knot is reproduced exactly (``t = 0`` and ``t = 1`` evaluate to
        the knot values with no rounding), and no local extremum appears that
        is not already in ``y``.

    References:
        Fritsch, F. N. and Carlson, R. E. (1980), Monotone piecewise cubic
        interpolation, SIAM J. Numer. Anal. 17(2).
    """
    x_arr = np.asarray(x, dtype=float)
    y_arr = np.asarray(y, dtype=float)
    if x_arr.shape != y_arr.shape:
        raise ValueError("x and y must have the same length for interpolation.")
    if samples_per_segment < 1:
        raise ValueError("samples_per_segment must be >= 1")

    n = int(x_arr.size)
    if n < 2:
        return np.empty(0, dtype=float), np.empty(0, dtype=float)
    if np.any(np.diff(x_arr) <= 0):
        raise ValueError("x must be strictly increasing for monotone interpolation.")

    t = np.linspace(0.0, 1.0, int(samples_per_segment) + 1)

    if n == 2:
        xs = (1 - t) * x_arr[0] + t * x_arr[1]
        ys = (1 - t) * y_arr[0] + t * y_arr[1]
        return xs, ys

    h = np.diff(x_arr)
    m = monotone_tangents(x_arr, y_arr)

    t2 = t * t
    t3 = t2 * t
    h00 = 2 * t3 - 3 * t2 + 1
    h10 = t3 - 2 * t2 + t
    h01 = -2 * t3 + 3 * t2
    h11 = t3 - t2

    xs_parts = []
    ys_parts = []
    for i in range(n - 1):
        xs_parts.append((1 - t) * x_arr[i] + t * x_arr[i + 1])
        ys_parts.append(
            h00 * y_arr[i]
            + h10 * h[i] * m[i]
            + h01 * y_arr[i + 1]
            + h11 * h[i] * m[i + 1]
        )
    return np.concatenate(xs_parts), np.concatenate(ys_parts)
