"""Locate the near-field / remote transition in a resistance-vs-distance series.

Close to the electrode under test the apparent resistance ``R = V / I`` climbs
steeply with probe distance; far away it flattens towards the true ground
resistance. The knee is the split index at which two independent straight
lines describe the series best.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from epr.stats.regression import linear_regression

logger = logging.getLogger(__name__)

MIN_KNEE_POINTS = 6
MIN_SEGMENT_POINTS = 2


@dataclass(frozen=True)
class KneeResult:
    """Outcome of the two-segment breakpoint search.

    ``index`` partitions the ordered samples into ``[0, index)`` and
    ``[index, n)``; it is ``None`` on a soft failure, with the reason in
    ``detail``.
    """

    index: Optional[int]
    detail: str
    distance: float = math.nan
    sse: float = math.nan
    r2_pre: float = math.nan
    r2_post: float = math.nan

    @property
    def found(self) -> bool:
        return self.index is not None


def detect_knee(distance, resistance) -> KneeResult:
    """Find the split minimizing the combined SSE of two line fits.

    Args:
        distance (array-like): Ascending probe distances in m.
        resistance (array-like): Apparent resistance in ohm at each distance.

    Returns:
        KneeResult: Best split index, the distance at that index, the combined
        SSE, and per-side R² (diagnostic only).

    Note:
        Candidates ``k = 2 .. n-3`` are scanned in increasing order so each
        side keeps at least two points. A candidate is skipped when either
        fit has a non-finite intercept (stacked distances). Only a strictly
        smaller SSE replaces the current best, so on ties the lowest ``k``
        wins. Fewer than six points, or no finite candidate, is reported as a
        soft failure rather than raised.
    """
    x = np.asarray(distance, dtype=float)
    y = np.asarray(resistance, dtype=float)
    n = int(len(x))

    if n < MIN_KNEE_POINTS:
        logger.debug("Knee search skipped: %d points", n)
        return KneeResult(
            index=None,
            detail=(
                f"Insufficient points: need ≥{MIN_KNEE_POINTS} included points "
                "for knee detection."
            ),
        )

    best_sse = math.inf
    best = None
    for k in range(MIN_SEGMENT_POINTS, n - MIN_SEGMENT_POINTS):
        pre = linear_regression(x[:k], y[:k])
        post = linear_regression(x[k:], y[k:])
        if not (math.isfinite(pre.intercept) and math.isfinite(post.intercept)):
            continue
        sse = pre.sse + post.sse
        if sse < best_sse:
            best_sse = sse
            best = (k, pre, post)

    if best is None:
        logger.warning("Knee search found no finite split over %d points", n)
        return KneeResult(index=None, detail="Knee detection failed (too noisy).")

    k, pre, post = best
    logger.debug("Knee at index %d (d=%.3g m, SSE=%.3g)", k, x[k], best_sse)
    return KneeResult(
        index=k,
        detail=f"Split fit (R vs d): R²(pre)={pre.r2:.2f}, R²(post)={post.r2:.2f}",
        distance=float(x[k]),
        sse=float(best_sse),
        r2_pre=float(pre.r2),
        r2_post=float(post.r2),
    )
