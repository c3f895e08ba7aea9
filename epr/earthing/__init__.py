"""
Earthing-specific checks for fall-of-potential surveys.

This subpackage turns an ordered resistance-vs-distance series into the
engineering judgements a field engineer makes by eye: where the near-field
rise ends, whether the far end has flattened, and what voltage remote earth
sits at.

Modules:
    knee:
        Exhaustive two-segment breakpoint search on R(d).

    plateau:
        Range and slope classification of the trailing window.

    remote_voltage:
        Tail selection and the three V_inf strategies.

Interpretation Guardrails:
    A "Likely plateau" status does not prove the current probe is far
    enough; it only says the last readings stopped moving. Surveys close to
    buried metalwork can plateau early at the wrong level.

Design Principle:
    This subpackage has no dependencies on plotting or I/O. It provides pure
    functions of arrays that can be independently tested.
"""

from .knee import KneeResult, detect_knee
from .plateau import PlateauResult, PlateauStatus, classify_plateau
from .remote_voltage import (
    RemoteStrategy,
    RemoteVoltageEstimate,
    estimate_remote_voltage,
    select_tail,
)

__all__ = [
    "KneeResult",
    "detect_knee",
    "PlateauResult",
    "PlateauStatus",
    "classify_plateau",
    "RemoteStrategy",
    "RemoteVoltageEstimate",
    "estimate_remote_voltage",
    "select_tail",
]
