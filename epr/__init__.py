"""
A Python package for fall-of-potential earth potential rise (EPR) surveys.

Turns (distance, probe-voltage) readings into ground resistance, a remote-earth
voltage estimate, the near-field/remote knee, and a plateau verdict.

Modules:
    - data_processing: Loads survey sheets, corrects GPS distances, and builds
      the ordered snapshot.
    - analysis: Runs the EPR pipeline and builds display curves and tables.
    - earthing: Knee detection, plateau classification, remote-voltage
      strategies.
    - stats: Regression and monotone cubic interpolation.
    - reporting / output / plotting: Console summary, CSV export, report figure.
"""

__version__ = "1.0.0"

from .analysis import (
    EPRResult,
    InstrumentSettings,
    InvalidInstrumentParameter,
    analyze_survey,
    create_results_dataframe,
    evaluate_snapshot,
    generate_dense_curve,
)
from .data_processing import (
    ReferencePoint,
    Sample,
    apply_reference_point,
    find_reference_point,
    load_survey_data,
    prepare_samples,
    samples_from_dataframe,
    set_excluded,
)
from .earthing import PlateauStatus, RemoteStrategy
from .geodesy import haversine_m

__all__ = [
    # Data processing
    "Sample",
    "ReferencePoint",
    "load_survey_data",
    "samples_from_dataframe",
    "find_reference_point",
    "apply_reference_point",
    "prepare_samples",
    "set_excluded",
    "haversine_m",
    # Analysis
    "InstrumentSettings",
    "InvalidInstrumentParameter",
    "EPRResult",
    "analyze_survey",
    "evaluate_snapshot",
    "generate_dense_curve",
    "create_results_dataframe",
    "PlateauStatus",
    "RemoteStrategy",
]
