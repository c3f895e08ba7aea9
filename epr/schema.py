"""Define standardized column names for survey and result DataFrames."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SampleColumns:
    """Container for survey table column labels.

    These labels are used when reading field sheets, exporting the sample
    table, and building display curves, so a CSV written by the tool can be
    read straight back in.

    Attributes:
        distance: Probe distance from the electrode under test in metres.
            Position-derived rows have this overwritten from the reference
            point when one is set.

        voltage: Potential-probe reading in millivolts.

        excluded: Truthy flag removing the row from every calculation while
            keeping it in the exported table.

        lat / lon: Optional probe coordinates in decimal degrees.

        mode: ``"manual"`` or ``"gps"``. GPS rows are position-derived.

        reference: Truthy flag marking the row whose coordinates are the
            reference point for distance correction.
    """

    distance: str = "Distance (m)"
    voltage: str = "Voltage (mV)"
    excluded: str = "Excluded"
    lat: str = "Latitude"
    lon: str = "Longitude"
    mode: str = "Mode"
    reference: str = "Reference"


@dataclass(frozen=True)
class ResultColumns:
    """Container for result table column labels."""

    knee_distance: str = "Knee distance (m)"
    knee_detail: str = "Knee detail"
    strategy: str = "Remote strategy"
    v_inf: str = "V_inf (V)"
    v_inf_detail: str = "V_inf detail"
    rg: str = "Rg (ohm)"
    scale: str = "Scale"
    epr_scaled: str = "EPR scaled (V)"
    plateau: str = "Plateau status"
    plateau_detail: str = "Plateau detail"
    n_points: str = "Included points"


SAMPLE_COLUMNS = SampleColumns()
RESULT_COLUMNS = ResultColumns()
