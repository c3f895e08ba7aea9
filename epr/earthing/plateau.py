"""Classify whether the far end of a survey has reached a resistance plateau.

A flat stretch of ``R`` versus distance indicates the current probe is far
enough that the potential probe sees remote earth. Two measures decide it:
the spread of the window relative to its mean, and the fitted slope expressed
as percent of the mean per 100 m.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

import numpy as np

from epr.stats.regression import linear_regression

MIN_PLATEAU_POINTS = 3

LIKELY_RANGE_PCT = 8.0
LIKELY_SLOPE_PCT = 5.0
BORDERLINE_RANGE_PCT = 15.0
BORDERLINE_SLOPE_PCT = 10.0


class PlateauStatus(Enum):
    INSUFFICIENT = "Insufficient"
    LIKELY = "Likely plateau"
    BORDERLINE = "Borderline"
    UNSTABLE = "Unstable / not far enough"

    @property
    def severity(self) -> str:
        return {
            PlateauStatus.INSUFFICIENT: "warn",
            PlateauStatus.LIKELY: "good",
            PlateauStatus.BORDERLINE: "warn",
            PlateauStatus.UNSTABLE: "bad",
        }[self]


@dataclass(frozen=True)
class PlateauResult:
    status: PlateauStatus
    range_pct: float
    slope_pct_per_100m: float
    n_points: int
    detail: str


def classify_plateau(distance, resistance, window: int) -> PlateauResult:
    """Classify the last ``window`` points of a resistance series.

    Args:
        distance (array-like): Ascending probe distances in m.
        resistance (array-like): Apparent resistance in ohm.
        window (int): Requested number of trailing points; fewer are used when
            the series is shorter.

    Returns:
        PlateauResult: Status plus ``range_pct = (max - min) / mean * 100`` and
        ``slope_pct_per_100m = slope / mean * 100 * 100``.

    Note:
        Thresholds are checked in order: under three points is
        ``Insufficient``; range ≤ 8 % and |slope| ≤ 5 %/100 m is
        ``Likely plateau``; range ≤ 15 % and |slope| ≤ 10 %/100 m is
        ``Borderline``; anything else is unstable. A zero mean gives infinite
        percentages, and a window stacked at one distance gives a ``nan``
        slope; both fail every threshold and land on the unstable status.
    """
    d = np.asarray(distance, dtype=float)
    r = np.asarray(resistance, dtype=float)
    n = min(int(window), int(len(r)))

    if n < MIN_PLATEAU_POINTS:
        return PlateauResult(
            status=PlateauStatus.INSUFFICIENT,
            range_pct=math.nan,
            slope_pct_per_100m=math.nan,
            n_points=max(n, 0),
            detail=f"Insufficient points: need ≥{MIN_PLATEAU_POINTS}.",
        )

    rs = r[-n:]
    ds = d[-n:]
    r_mean = float(np.mean(rs))
    fit = linear_regression(ds, rs)

    if r_mean == 0:
        range_pct = math.inf
        slope_pct = math.inf
    else:
        range_pct = (float(np.max(rs)) - float(np.min(rs))) / r_mean * 100.0
        slope_pct = fit.slope / r_mean * 100.0 * 100.0

    if range_pct <= LIKELY_RANGE_PCT and abs(slope_pct) <= LIKELY_SLOPE_PCT:
        status = PlateauStatus.LIKELY
    elif range_pct <= BORDERLINE_RANGE_PCT and abs(slope_pct) <= BORDERLINE_SLOPE_PCT:
        status = PlateauStatus.BORDERLINE
    else:
        status = PlateauStatus.UNSTABLE

    return PlateauResult(
        status=status,
        range_pct=float(range_pct),
        slope_pct_per_100m=float(slope_pct),
        n_points=n,
        detail=f"Last {n}: range {range_pct:.1f}%, slope {slope_pct:.1f}%/100m.",
    )
