"""
Handles survey CSV parsing, GPS distance correction, and snapshot preparation.
"""

# Algorithm summary: read the field sheet into Sample records, overwrite the
# distance of GPS rows from the reference point, drop rows without a usable
# distance or voltage and rows the engineer excluded, then stable-sort the
# rest by distance. The resulting tuple is the single snapshot every
# downstream calculation in one evaluation reads from.

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Tuple

import numpy as np
import pandas as pd

from .geodesy import haversine_m
from .schema import SAMPLE_COLUMNS
from .units import mv_to_v

logger = logging.getLogger(__name__)

_TRUE_STRINGS = {"1", "true", "yes", "y", "x"}
_POSITION_MODES = {"gps"}


@dataclass(frozen=True)
class Sample:
    """One potential-probe reading.

    Attributes:
        distance: Probe distance in m, ``nan`` when not entered.
        voltage_mv: Probe voltage in mV, ``nan`` when not entered.
        excluded: Engineer's exclusion flag.
        lat / lon: Optional probe position in decimal degrees.
        position_derived: ``True`` when the distance should follow the
            probe position rather than a tape measurement.
    """

    distance: float
    voltage_mv: float
    excluded: bool = False
    lat: float = math.nan
    lon: float = math.nan
    position_derived: bool = False

    @property
    def voltage_v(self) -> float:
        return mv_to_v(self.voltage_mv)

    @property
    def has_position(self) -> bool:
        return math.isfinite(self.lat) and math.isfinite(self.lon)

    @property
    def is_usable(self) -> bool:
        return math.isfinite(self.distance) and math.isfinite(self.voltage_mv)


@dataclass(frozen=True)
class ReferencePoint:
    """Anchor for GPS distances, normally the electrode under test."""

    lat: float
    lon: float

    @property
    def is_valid(self) -> bool:
        return math.isfinite(self.lat) and math.isfinite(self.lon)


def _coerce_flag(series: pd.Series) -> pd.Series:
    def to_bool(value) -> bool:
        if isinstance(value, (bool, np.bool_)):
            return bool(value)
        if value is None:
            return False
        if isinstance(value, (int, float, np.integer, np.floating)):
            return bool(np.isfinite(value) and value != 0)
        return str(value).strip().lower() in _TRUE_STRINGS

    return series.map(to_bool).astype(bool)


def load_survey_data(filepath):
    """
    Load a survey field sheet from a CSV file.

    Args:
        filepath (str): Path to the CSV file.

    Returns:
        pd.DataFrame: Loaded DataFrame.
    """
    return pd.read_csv(filepath)


def samples_from_dataframe(df: pd.DataFrame) -> Tuple[Sample, ...]:
    """Convert a survey table into ``Sample`` records in row order.

    Args:
        df (pandas.DataFrame): Table with ``Distance (m)`` and
            ``Voltage (mV)`` columns, plus optional ``Excluded``,
            ``Latitude``, ``Longitude`` and ``Mode`` columns.

    Returns:
        tuple[Sample, ...]: One record per row. Blank or non-numeric cells
        become ``nan``.

    Raises:
        KeyError: If the distance or voltage column is missing.
    """
    cols = SAMPLE_COLUMNS
    for required in (cols.distance, cols.voltage):
        if required not in df.columns:
            raise KeyError(f"Survey table missing required column '{required}'.")

    n = len(df)
    nan_col = pd.Series(np.full(n, np.nan), index=df.index)
    false_col = pd.Series(np.zeros(n, dtype=bool), index=df.index)

    distance = pd.to_numeric(df[cols.distance], errors="coerce")
    voltage = pd.to_numeric(df[cols.voltage], errors="coerce")
    lat = pd.to_numeric(df[cols.lat], errors="coerce") if cols.lat in df else nan_col
    lon = pd.to_numeric(df[cols.lon], errors="coerce") if cols.lon in df else nan_col
    excluded = _coerce_flag(df[cols.excluded]) if cols.excluded in df else false_col
    if cols.mode in df.columns:
        position = (
            df[cols.mode].astype(str).str.strip().str.lower().isin(_POSITION_MODES)
        )
    else:
        position = false_col

    return tuple(
        Sample(
            distance=float(distance.iloc[i]),
            voltage_mv=float(voltage.iloc[i]),
            excluded=bool(excluded.iloc[i]),
            lat=float(lat.iloc[i]),
            lon=float(lon.iloc[i]),
            position_derived=bool(position.iloc[i]),
        )
        for i in range(n)
    )


def find_reference_point(df: pd.DataFrame) -> Optional[ReferencePoint]:
    """Return the reference point flagged in a survey table, if any.

    The first row with a truthy ``Reference`` cell and finite coordinates is
    used. Returns ``None`` when the column is absent or no row qualifies.
    """
    cols = SAMPLE_COLUMNS
    if cols.reference not in df.columns or cols.lat not in df or cols.lon not in df:
        return None
    flags = _coerce_flag(df[cols.reference])
    lat = pd.to_numeric(df[cols.lat], errors="coerce")
    lon = pd.to_numeric(df[cols.lon], errors="coerce")
    for i in np.flatnonzero(flags.to_numpy()):
        ref = ReferencePoint(lat=float(lat.iloc[i]), lon=float(lon.iloc[i]))
        if ref.is_valid:
            return ref
    logger.warning("Reference row flagged but has no valid coordinates")
    return None


def apply_reference_point(
    samples: Iterable[Sample], reference: Optional[ReferencePoint]
) -> Tuple[Sample, ...]:
    """Overwrite distances of position-derived samples from the reference.

    Args:
        samples (Iterable[Sample]): Raw samples.
        reference (ReferencePoint | None): Anchor point; ignored unless both
            coordinates are finite.

    Returns:
        tuple[Sample, ...]: New records in the same order. Only samples with
        ``position_derived`` set and finite coordinates change; manually
        entered distances are never touched.
    """
    samples = tuple(samples)
    if reference is None or not reference.is_valid:
        return samples

    out = []
    for s in samples:
        if s.position_derived and s.has_position:
            d = haversine_m(reference.lat, reference.lon, s.lat, s.lon)
            out.append(replace(s, distance=float(d)))
        else:
            out.append(s)
    return tuple(out)


def set_excluded(
    samples: Iterable[Sample], index: int, excluded: bool = True
) -> Tuple[Sample, ...]:
    """Return a copy of ``samples`` with the exclusion flag of one row set.

    Raises:
        IndexError: If ``index`` is out of range.
    """
    samples = tuple(samples)
    i = range(len(samples))[index]
    flagged = replace(samples[i], excluded=bool(excluded))
    return samples[:i] + (flagged,) + samples[i + 1 :]


def prepare_samples(
    samples: Iterable[Sample], reference: Optional[ReferencePoint] = None
) -> Tuple[Sample, ...]:
    """Build the ordered, filtered snapshot used for one evaluation.

    Args:
        samples (Iterable[Sample]): Raw samples in entry order.
        reference (ReferencePoint | None, optional): Anchor for GPS rows.

    Returns:
        tuple[Sample, ...]: Included samples with finite distance and voltage,
        sorted by ascending distance. The sort is stable, so readings at the
        same distance keep their entry order.
    """
    corrected = apply_reference_point(samples, reference)
    usable = [s for s in corrected if s.is_usable]
    dropped = len(corrected) - len(usable)
    if dropped:
        logger.warning("Dropped %d sample(s) without distance or voltage", dropped)
    included = [s for s in usable if not s.excluded]
    logger.debug(
        "Snapshot: %d included, %d excluded", len(included), len(usable) - len(included)
    )
    return tuple(sorted(included, key=lambda s: s.distance))


def samples_to_dataframe(samples: Iterable[Sample]) -> pd.DataFrame:
    """Tabulate samples with the standard column labels (inverse of ingestion)."""
    cols = SAMPLE_COLUMNS
    records = [
        {
            cols.distance: s.distance,
            cols.voltage: s.voltage_mv,
            cols.excluded: s.excluded,
            cols.lat: s.lat,
            cols.lon: s.lon,
            cols.mode: "gps" if s.position_derived else "manual",
        }
        for s in samples
    ]
    return pd.DataFrame.from_records(
        records,
        columns=[cols.distance, cols.voltage, cols.excluded, cols.lat, cols.lon, cols.mode],
    )
