"""Centralized unit conversion utilities."""

from __future__ import annotations

MV_PER_V: float = 1000.0


def mv_to_v(voltage_mv: float) -> float:
    """Convert a probe reading from millivolts to volts.

    Args:
        voltage_mv (float): Potential-probe reading in mV.

    Returns:
        float: The same reading in V.

    Note:
        Resistance, remote-earth voltage and scaled EPR are all computed in
        volts; the millivolt unit is only used for entry and display.
    """
    return float(voltage_mv) / MV_PER_V
