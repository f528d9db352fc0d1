"""
Transport Layers

Mode names used across the network and the rules attached to them:
which modes run on dedicated track, which charge a distance-banded fare,
and which layers take part in each candidate-generation strategy.
"""
from __future__ import annotations
from typing import FrozenSet, List, Tuple

METRO = "metro"
MMTS = "mmts"
BUS = "bus"
AUTO = "auto"
WALKING = "walking"

#: Modes on dedicated track. Time-of-day multipliers do not apply.
DEDICATED_TRACK_MODES: FrozenSet[str] = frozenset({METRO, MMTS})

#: Mode charged by the distance-banded fare table instead of the edge cost.
FIXED_FARE_MODE: str = METRO

#: Mode favoured when a single route runs between two of its stations.
PREFERRED_RAIL_MODE: str = METRO

#: Cost inflation applied to competing service edges under the preference.
SAME_MODE_PENALTY: float = 1.4

#: Added to the transfers-objective weight of inter-modal edges.
TRANSFER_PENALTY: float = 10000.0

#: Scale applied to base time in the transfers-objective weight.
TRANSFER_TIME_SCALE: float = 0.01

# (upper bound in km, fare) pairs, checked in order; beyond the last band
# the fare is METRO_MAX_FARE.
METRO_FARE_BANDS: List[Tuple[float, float]] = [
    (2, 10),
    (4, 20),
    (6, 30),
    (9, 40),
    (12, 50),
    (15, 60),
    (18, 70),
    (21, 80),
    (24, 90),
]
METRO_MAX_FARE: float = 100.0

# Layers paired by the cross-rail candidate strategy
CROSS_RAIL_LAYERS: Tuple[str, str] = (METRO, MMTS)

# Layers whose hubs/stations count as major for express-hub candidates
EXPRESS_HUB_LAYERS: FrozenSet[str] = frozenset({BUS, METRO})


def metro_fare(distance_km: float) -> float:
    """Token fare for a metro ride of the given length."""
    for upper, fare in METRO_FARE_BANDS:
        if distance_km <= upper:
            return float(fare)
    return METRO_MAX_FARE


def is_dedicated_track(mode: str) -> bool:
    return mode in DEDICATED_TRACK_MODES
