"""
Core Package

Value objects and transport-layer rules shared by every stage of the engine.
"""

from .models import (
    Objective,
    FailureKind,
    NodeRecord,
    EdgeRecord,
    ODPair,
    TimeOfDayCoefficients,
    STANDARD_COEFFICIENTS,
    RouteContext,
)
from .layers import (
    METRO,
    MMTS,
    BUS,
    AUTO,
    WALKING,
    DEDICATED_TRACK_MODES,
    metro_fare,
    is_dedicated_track,
)

__all__ = [
    "Objective",
    "FailureKind",
    "NodeRecord",
    "EdgeRecord",
    "ODPair",
    "TimeOfDayCoefficients",
    "STANDARD_COEFFICIENTS",
    "RouteContext",
    "METRO",
    "MMTS",
    "BUS",
    "AUTO",
    "WALKING",
    "DEDICATED_TRACK_MODES",
    "metro_fare",
    "is_dedicated_track",
]
