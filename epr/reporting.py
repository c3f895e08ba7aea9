"""Format analysis results for the console and for exported tables.

Non-finite values are shown as a dash rather than ``nan``/``inf`` so that a
missing estimate is obvious on a field printout, while the numeric result
objects keep the raw sentinel values.
"""

from __future__ import annotations

import math
from typing import List

from .analysis import EPRResult, InstrumentSettings

MISSING = "—"


def format_quantity(value: float, dp: int = 3, unit: str = "") -> str:
    """Format a value to fixed decimals, or a dash when non-finite.

    Args:
        value (float): Number to format.
        dp (int, optional): Decimal places. Defaults to ``3``.
        unit (str, optional): Unit appended after a space when the value is
            finite.

    Returns:
        str: Formatted value.
    """
    try:
        v = float(value)
    except (TypeError, ValueError):
        return MISSING
    if not math.isfinite(v):
        return MISSING
    return f"{v:.{dp}f} {unit}".strip()


def result_summary_lines(result: EPRResult, settings: InstrumentSettings) -> List[str]:
    """Return the human-readable summary of one evaluation."""
    knee_d = result.knee_distance
    lines = [
        f"Included points: {result.n_points}",
        f"Knee: {format_quantity(knee_d, 1, 'm') if knee_d is not None else 'none'}"
        f" ({result.knee.detail})",
        f"V_inf [{result.remote.strategy.value}]: "
        f"{format_quantity(result.v_inf, 4, 'V')} ({result.remote.detail})",
        f"Rg: {format_quantity(result.rg, 4, 'ohm')}",
        f"Scale: {format_quantity(result.scale, 3)}"
        f" (I_fault={format_quantity(settings.i_fault, 1, 'A')},"
        f" I_test={format_quantity(settings.i_test, 3, 'A')},"
        f" sf={format_quantity(settings.safety_factor, 2)})",
        f"EPR scaled: {format_quantity(result.epr_scaled, 1, 'V')}",
        f"Plateau: {result.plateau.status.value} ({result.plateau.detail})",
    ]
    return lines


def print_result(result: EPRResult, settings: InstrumentSettings) -> None:
    print("\nEarth potential rise summary:")
    for line in result_summary_lines(result, settings):
        print(f" - {line}")
