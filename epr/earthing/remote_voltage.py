"""Estimate the remote-earth voltage V_inf from the far end of a survey.

Three strategies are offered because field data rarely settle cleanly:

- ``EXTRAPOLATE`` fits ``V = a + b / d`` over the tail and takes ``a``, the
  limit as distance goes to infinity.
- ``AVERAGE_LAST_N`` averages the last N readings of the full series.
- ``LAST_POINT`` takes the farthest reading as-is.

Tail selection: if a knee was found and at least ``tail_min`` points sit at or
beyond it, the tail is that suffix; otherwise it is the last ``tail_min``
points. ``AVERAGE_LAST_N`` does not use the tail.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from epr.stats.regression import intercept_uncertainty, linear_regression

logger = logging.getLogger(__name__)


class RemoteStrategy(Enum):
    EXTRAPOLATE = "extrapolate"
    AVERAGE_LAST_N = "average_last_n"
    LAST_POINT = "last_point"


@dataclass(frozen=True)
class RemoteVoltageEstimate:
    v_inf: float
    strategy: RemoteStrategy
    n_points: int
    detail: str
    r2: float = math.nan
    ci95: float = math.nan


def select_tail(n_points: int, knee_index: Optional[int], tail_min: int) -> slice:
    """Return the slice of ordered samples forming the tail.

    Args:
        n_points (int): Length of the ordered series.
        knee_index (int | None): Split index from knee detection, if any.
        tail_min (int): Minimum tail length.

    Returns:
        slice: ``[knee_index:]`` when that suffix holds at least ``tail_min``
        points, else the last ``tail_min`` points (or all of them when the
        series is shorter).
    """
    if knee_index is not None and n_points - knee_index >= tail_min:
        return slice(knee_index, n_points)
    return slice(max(0, n_points - tail_min), n_points)


def _extrapolate(distance: np.ndarray, voltage: np.ndarray, tail: slice, from_knee: bool):
    d = distance[tail]
    v = voltage[tail]
    usable = np.isfinite(d) & (d > 0)
    d = d[usable]
    v = v[usable]
    n = int(len(d))
    source = "knee tail" if from_knee else "last points"

    if n == 0:
        return RemoteVoltageEstimate(
            v_inf=math.nan,
            strategy=RemoteStrategy.EXTRAPOLATE,
            n_points=0,
            detail="Extrapolation needs tail points at positive distance.",
        )

    inv_d = 1.0 / d
    fit = linear_regression(inv_d, v)
    _, ci95 = intercept_uncertainty(inv_d, v, fit)
    detail = f"Extrapolated V vs 1/d over {n} points ({source}), R²={fit.r2:.2f}"
    if math.isfinite(ci95):
        detail += f", 95% CI ±{ci95:.3g} V"
    return RemoteVoltageEstimate(
        v_inf=float(fit.intercept),
        strategy=RemoteStrategy.EXTRAPOLATE,
        n_points=n,
        detail=detail + ".",
        r2=float(fit.r2),
        ci95=float(ci95),
    )


def estimate_remote_voltage(
    distance,
    voltage,
    strategy: RemoteStrategy,
    knee_index: Optional[int] = None,
    tail_min: int = 4,
    n_last: int = 5,
) -> RemoteVoltageEstimate:
    """Estimate V_inf with the selected strategy.

    Args:
        distance (array-like): Ascending probe distances in m.
        voltage (array-like): Probe voltages in V, aligned with ``distance``.
        strategy (RemoteStrategy): Estimation strategy.
        knee_index (int | None, optional): Knee split index, if found.
        tail_min (int, optional): Minimum tail length for extrapolation.
        n_last (int, optional): Number of trailing readings to average.

    Returns:
        RemoteVoltageEstimate: V_inf in V with a human-readable justification
        including point counts (and R² for extrapolation).

    Raises:
        ValueError: If ``strategy`` is not a ``RemoteStrategy`` member.
    """
    d = np.asarray(distance, dtype=float)
    v = np.asarray(voltage, dtype=float)
    n = int(len(v))

    if strategy is RemoteStrategy.EXTRAPOLATE:
        tail = select_tail(n, knee_index, tail_min)
        from_knee = knee_index is not None and tail.start == knee_index
        logger.debug("Extrapolation tail %d:%d of %d", tail.start, tail.stop, n)
        return _extrapolate(d, v, tail, from_knee)

    if strategy is RemoteStrategy.AVERAGE_LAST_N:
        k = min(int(n_last), n)
        if k == 0:
            return RemoteVoltageEstimate(
                v_inf=math.nan,
                strategy=strategy,
                n_points=0,
                detail="No included points to average.",
            )
        return RemoteVoltageEstimate(
            v_inf=float(np.mean(v[-k:])),
            strategy=strategy,
            n_points=k,
            detail=f"Mean of last {k} of {n} points.",
        )

    if strategy is RemoteStrategy.LAST_POINT:
        if n == 0:
            return RemoteVoltageEstimate(
                v_inf=math.nan,
                strategy=strategy,
                n_points=0,
                detail="No included points.",
            )
        return RemoteVoltageEstimate(
            v_inf=float(v[-1]),
            strategy=strategy,
            n_points=1,
            detail=f"Last point at {d[-1]:.1f} m (1 of {n} points).",
        )

    raise ValueError(f"Unknown remote-voltage strategy: {strategy!r}")
