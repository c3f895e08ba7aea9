"""
Fall-of-potential earth potential rise (EPR) analysis.

This module turns one snapshot of probe readings into:
- apparent resistance ``R = V / I_test`` at every distance,
- the knee between near-field rise and remote behaviour (two-line split),
- the remote-earth voltage V_inf from the selected strategy,
- ground resistance ``Rg = V_inf / I_test``,
- fault scaling ``scale = (I_fault / I_test) * safety_factor`` and
  ``EPR_scaled = V_inf * scale``, and
- a plateau classification of the far end of the resistance series.

A monotone cubic through the readings is provided separately for display.

Every call is a pure recomputation over the samples it is given; nothing is
cached between calls.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from .data_processing import ReferencePoint, Sample, prepare_samples
from .earthing.knee import KneeResult, detect_knee
from .earthing.plateau import PlateauResult, classify_plateau
from .earthing.remote_voltage import (
    RemoteStrategy,
    RemoteVoltageEstimate,
    estimate_remote_voltage,
    select_tail,
)
from .schema import RESULT_COLUMNS, SAMPLE_COLUMNS
from .stats.interpolation import monotone_cubic_sample

logger = logging.getLogger(__name__)

MIN_WINDOW = 3
DEFAULT_TAIL_MIN = 4
DEFAULT_N_LAST = 5
DEFAULT_SAFETY_FACTOR = 1.0
DEFAULT_SAMPLES_PER_SEGMENT = 25


class InvalidInstrumentParameter(ValueError):
    """Raised when the test current cannot support a resistance calculation."""


def clamp_window(n: int) -> int:
    """Clamp a window size to the minimum usable length of three points."""
    return max(MIN_WINDOW, int(n))


@dataclass(frozen=True)
class InstrumentSettings:
    """Instrument constants and analysis options for one evaluation.

    Attributes:
        i_test: Injected test current in A. Must be finite and > 0.
        i_fault: Prospective earth-fault current in A.
        safety_factor: Dimensionless multiplier applied on top of the
            current ratio.
        strategy: Remote-voltage estimation strategy.
        n_last: Plateau window and AVERAGE_LAST_N count (clamped ≥ 3).
        tail_min: Minimum tail length for extrapolation (clamped ≥ 3).
    """

    i_test: float
    i_fault: float = math.nan
    safety_factor: float = DEFAULT_SAFETY_FACTOR
    strategy: RemoteStrategy = RemoteStrategy.EXTRAPOLATE
    n_last: int = DEFAULT_N_LAST
    tail_min: int = DEFAULT_TAIL_MIN

    @property
    def n_last_window(self) -> int:
        return clamp_window(self.n_last)

    @property
    def tail_min_window(self) -> int:
        return clamp_window(self.tail_min)

    @property
    def scale(self) -> float:
        return (float(self.i_fault) / float(self.i_test)) * float(self.safety_factor)

    def validate(self) -> None:
        i_test = float(self.i_test)
        if not math.isfinite(i_test) or i_test <= 0:
            raise InvalidInstrumentParameter(
                f"invalid test current: I_test={self.i_test!r} A (must be finite and > 0)"
            )


@dataclass(frozen=True)
class EPRResult:
    """All derived metrics of one evaluation over one snapshot."""

    n_points: int
    knee: KneeResult
    tail_start: int
    remote: RemoteVoltageEstimate
    rg: float
    scale: float
    epr_scaled: float
    plateau: PlateauResult

    @property
    def knee_distance(self) -> Optional[float]:
        return self.knee.distance if self.knee.found else None

    @property
    def v_inf(self) -> float:
        return self.remote.v_inf


def survey_arrays(snapshot: Sequence[Sample], i_test: float):
    """Return distance (m), voltage (V) and resistance (ohm) arrays."""
    distance = np.array([s.distance for s in snapshot], dtype=float)
    voltage = np.array([s.voltage_v for s in snapshot], dtype=float)
    return distance, voltage, voltage / float(i_test)


def evaluate_snapshot(
    snapshot: Sequence[Sample], settings: InstrumentSettings
) -> EPRResult:
    """Run the full analysis on an already filtered and ordered snapshot.

    Args:
        snapshot (Sequence[Sample]): Included samples in ascending distance
            (see ``prepare_samples``).
        settings (InstrumentSettings): Instrument constants and options.

    Returns:
        EPRResult: Knee, V_inf with justification, Rg, scale, EPR_scaled, and
        plateau classification.

    Raises:
        InvalidInstrumentParameter: If ``settings.i_test`` is non-finite or
            not positive.

    Note:
        The plateau window is the last ``n_last`` points of the same tail
        used for extrapolation, so it never reaches back across a detected
        knee that leaves a long enough suffix. Non-finite intermediate values
        are passed through verbatim.
    """
    settings.validate()
    distance, voltage, resistance = survey_arrays(snapshot, settings.i_test)
    n = int(len(distance))

    knee = detect_knee(distance, resistance)
    tail = select_tail(n, knee.index, settings.tail_min_window)

    remote = estimate_remote_voltage(
        distance,
        voltage,
        settings.strategy,
        knee_index=knee.index,
        tail_min=settings.tail_min_window,
        n_last=settings.n_last_window,
    )

    plateau = classify_plateau(
        distance[tail], resistance[tail], settings.n_last_window
    )

    i_test = float(settings.i_test)
    scale = settings.scale
    v_inf = remote.v_inf
    result = EPRResult(
        n_points=n,
        knee=knee,
        tail_start=int(tail.start),
        remote=remote,
        rg=v_inf / i_test,
        scale=scale,
        epr_scaled=v_inf * scale,
        plateau=plateau,
    )
    logger.info(
        "Evaluated %d points: knee=%s, V_inf=%.4g V, plateau=%s",
        n,
        knee.index,
        v_inf,
        plateau.status.value,
    )
    return result


def analyze_survey(
    samples: Iterable[Sample],
    settings: InstrumentSettings,
    reference: Optional[ReferencePoint] = None,
) -> EPRResult:
    """Prepare the snapshot from raw samples and evaluate it.

    Args:
        samples (Iterable[Sample]): Raw samples in entry order.
        settings (InstrumentSettings): Instrument constants and options.
        reference (ReferencePoint | None, optional): Anchor for GPS distances.

    Returns:
        EPRResult: See ``evaluate_snapshot``.

    Raises:
        InvalidInstrumentParameter: If the test current is invalid.
    """
    settings.validate()
    snapshot = prepare_samples(samples, reference)
    return evaluate_snapshot(snapshot, settings)


def _prepare_xy(x: np.ndarray, y: np.ndarray):
    mask = np.isfinite(x) & np.isfinite(y)
    x = x[mask]
    y = y[mask]
    if len(x) == 0:
        return x, y
    order = np.argsort(x, kind="stable")
    x = x[order]
    y = y[order]
    if len(np.unique(x)) < len(x):
        df = pd.DataFrame({"x": x, "y": y}).groupby("x", as_index=False).mean()
        x = df["x"].to_numpy(dtype=float)
        y = df["y"].to_numpy(dtype=float)
    return x, y


def generate_dense_curve(
    snapshot: Sequence[Sample],
    samples_per_segment: int = DEFAULT_SAMPLES_PER_SEGMENT,
) -> pd.DataFrame:
    """Return a smooth voltage-vs-distance polyline for display.

    Readings at the same distance are averaged first so the monotone cubic
    sees strictly increasing distances.
    """
    cols = SAMPLE_COLUMNS
    x = np.array([s.distance for s in snapshot], dtype=float)
    y = np.array([s.voltage_mv for s in snapshot], dtype=float)
    x, y = _prepare_xy(x, y)
    xs, ys = monotone_cubic_sample(x, y, samples_per_segment=samples_per_segment)
    return pd.DataFrame({cols.distance: xs, cols.voltage: ys})


def create_results_dataframe(results: List[EPRResult]) -> pd.DataFrame:
    cols = RESULT_COLUMNS
    rows = []
    for res in results:
        rows.append(
            {
                cols.n_points: res.n_points,
                cols.knee_distance: (
                    res.knee_distance if res.knee_distance is not None else np.nan
                ),
                cols.knee_detail: res.knee.detail,
                cols.strategy: res.remote.strategy.value,
                cols.v_inf: res.v_inf,
                cols.v_inf_detail: res.remote.detail,
                cols.rg: res.rg,
                cols.scale: res.scale,
                cols.epr_scaled: res.epr_scaled,
                cols.plateau: res.plateau.status.value,
                cols.plateau_detail: res.plateau.detail,
            }
        )
    return pd.DataFrame(rows)
