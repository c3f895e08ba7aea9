"""Render the fall-of-potential survey figure for a test report.

The figure receives precomputed results and performs no earthing
calculations: panel (a) shows probe voltage with the monotone display curve
and the V_inf level, panel (b) shows apparent resistance with the knee and
the tail used for the remote estimate.
"""

from __future__ import annotations

import os
from typing import Sequence

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from .analysis import EPRResult
from .data_processing import Sample
from .schema import SAMPLE_COLUMNS
from .units import MV_PER_V

FIGURE_DPI = 300
FIGSIZE_WIDE = (11.0, 4.4)
_STYLE_STATE = {"initialized": False}


def setup_plot_style() -> None:
    """Apply the project plotting style once per process."""
    if _STYLE_STATE["initialized"]:
        return
    plt.rcParams.update(
        {
            "font.family": "STIXGeneral",
            "mathtext.fontset": "stix",
            "font.size": 11,
            "axes.titlesize": 12,
            "axes.labelsize": 11,
            "axes.spines.top": False,
            "axes.spines.right": False,
            "grid.alpha": 0.2,
            "grid.linestyle": ":",
            "legend.frameon": False,
            "savefig.dpi": FIGURE_DPI,
            "savefig.bbox": "tight",
        }
    )
    _STYLE_STATE["initialized"] = True


def plot_survey(
    snapshot: Sequence[Sample],
    result: EPRResult,
    dense_curve: pd.DataFrame,
    i_test: float,
    output_dir: str = "output",
    filename: str = "epr_survey.png",
) -> str:
    """Render the two-panel survey figure and save it as PNG.

    Args:
        snapshot (Sequence[Sample]): Included samples in ascending distance,
            the same snapshot ``result`` was computed from.
        result (EPRResult): Evaluation output.
        dense_curve (pandas.DataFrame): Output of ``generate_dense_curve``.
        i_test (float): Test current in A used to convert voltage to R.
        output_dir (str, optional): Directory for the PNG.
        filename (str, optional): PNG file name.

    Returns:
        str: Path to the saved PNG.
    """
    cols = SAMPLE_COLUMNS
    setup_plot_style()
    os.makedirs(output_dir, exist_ok=True)

    d = np.array([s.distance for s in snapshot], dtype=float)
    mv = np.array([s.voltage_mv for s in snapshot], dtype=float)
    r = mv / MV_PER_V / float(i_test)

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=FIGSIZE_WIDE, constrained_layout=True)

    if not dense_curve.empty and {cols.distance, cols.voltage}.issubset(dense_curve.columns):
        ax1.plot(
            dense_curve[cols.distance].to_numpy(dtype=float),
            dense_curve[cols.voltage].to_numpy(dtype=float),
            color="black",
            linewidth=1.8,
            label="Monotone fit",
            zorder=2,
        )
    ax1.plot(
        d,
        mv,
        linestyle="none",
        marker="o",
        markerfacecolor="white",
        markeredgecolor="black",
        label="Readings",
        zorder=3,
    )
    if np.isfinite(result.v_inf):
        ax1.axhline(
            result.v_inf * MV_PER_V,
            color="black",
            linestyle="--",
            linewidth=1.2,
            label=rf"$V_\infty$ = {result.v_inf:.4g} V",
        )
    ax1.set_title("(a) Probe voltage", fontweight="bold")
    ax1.set_xlabel("Distance / m")
    ax1.set_ylabel("Voltage / mV")
    ax1.grid(True)
    ax1.legend(loc="lower right")

    tail = slice(result.tail_start, len(d))
    ax2.plot(d, r, marker="o", color="black", linewidth=1.0, label="R = V / I")
    if len(d[tail]):
        ax2.plot(
            d[tail],
            r[tail],
            linestyle="none",
            marker="s",
            markersize=8,
            markerfacecolor="none",
            markeredgecolor="tab:blue",
            label="Tail",
        )
    if result.knee_distance is not None:
        ax2.axvline(
            result.knee_distance,
            color="black",
            linestyle=":",
            linewidth=1.4,
            label=f"Knee {result.knee_distance:.1f} m",
        )
    ax2.set_title(
        f"(b) Apparent resistance: {result.plateau.status.value}", fontweight="bold"
    )
    ax2.set_xlabel("Distance / m")
    ax2.set_ylabel(r"$R$ / $\Omega$")
    ax2.grid(True)
    ax2.legend(loc="lower right")

    out_path = os.path.join(output_dir, filename)
    fig.savefig(out_path, dpi=FIGURE_DPI)
    plt.close(fig)
    return out_path
