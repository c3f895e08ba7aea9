"""Great-circle distances for GPS-positioned probe readings."""

from __future__ import annotations

import numpy as np

EARTH_RADIUS_M: float = 6_371_000.0


def haversine_m(lat1, lon1, lat2, lon2):
    """Return the spherical-earth distance between two points in metres.

    Args:
        lat1, lon1: First point in decimal degrees (scalars or arrays).
        lat2, lon2: Second point in decimal degrees (scalars or arrays).

    Returns:
        float | numpy.ndarray: Haversine distance using the mean earth radius
        ``EARTH_RADIUS_M``. Scalar inputs give a ``float``.

    Note:
        Non-finite coordinates propagate to a non-finite distance; callers
        decide whether such a sample is usable.
    """
    lat1, lon1, lat2, lon2 = map(
        lambda v: np.asarray(v, dtype=float), (lat1, lon1, lat2, lon2)
    )
    phi1 = np.radians(lat1)
    phi2 = np.radians(lat2)
    dphi = np.radians(lat2 - lat1)
    dlam = np.radians(lon2 - lon1)
    a = np.sin(dphi / 2) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(dlam / 2) ** 2
    dist = 2 * EARTH_RADIUS_M * np.arcsin(np.sqrt(np.clip(a, 0.0, 1.0)))
    return float(dist) if np.ndim(dist) == 0 else dist
