"""
Core Value Objects

Records consumed by the engine (nodes, edges, OD pairs) and the small enums
and coefficient sets that parameterise a single analysis run.
"""
from __future__ import annotations
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Dict, Any, Optional


# =============================================================================
# Enums
# =============================================================================

class Objective(Enum):
    """Quantity minimised by path search."""
    TIME = "time"
    COST = "cost"
    TRANSFERS = "transfers"

    @classmethod
    def from_string(cls, value: "str | Objective") -> "Objective":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(o.value for o in cls)
            raise ValueError(f"Unknown objective '{value}'. Valid: {valid}")


class FailureKind(Enum):
    """What a failure scenario removes from the network."""
    NONE = "none"
    NODE = "node"
    EDGE = "edge"
    LAYER = "layer"

    @classmethod
    def from_string(cls, value: "str | FailureKind") -> "FailureKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(k.value for k in cls)
            raise ValueError(f"Unknown failure kind '{value}'. Valid: {valid}")


# =============================================================================
# Dataset Records
# =============================================================================

@dataclass(frozen=True)
class NodeRecord:
    """A station or stop as delivered by the dataset loader."""
    node_id: str
    lat: float
    lon: float
    layer: str
    name: str = ""
    region: str = ""
    type: str = ""

    @property
    def display_name(self) -> str:
        return self.name or self.node_id

    @property
    def is_major(self) -> bool:
        """Stations and hubs, plus any named metro stop."""
        return self.type in ("station", "hub") or (self.layer == "metro" and bool(self.name))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class EdgeRecord:
    """A service link between two node ids."""
    from_id: str
    to_id: str
    layer: str = ""
    mode: str = ""
    edge_type: str = ""
    distance_km: float = 0.0
    time_min: float = 0.0
    cost_rs: float = 0.0
    intra_or_inter: str = ""

    @property
    def transport_mode(self) -> str:
        return self.mode or self.edge_type or "unknown"

    @property
    def is_transfer(self) -> bool:
        """Transfer links join two different modes."""
        return self.intra_or_inter == "inter"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ODPair:
    """Origin-destination pair evaluated by the metrics aggregator."""
    source: str
    target: str
    source_name: str = ""
    target_name: str = ""

    def __post_init__(self):
        # Display names fall back to the ids
        if not self.source_name:
            object.__setattr__(self, "source_name", self.source)
        if not self.target_name:
            object.__setattr__(self, "target_name", self.target)


# =============================================================================
# Run Parameters
# =============================================================================

@dataclass(frozen=True)
class TimeOfDayCoefficients:
    """
    Congestion and surge adjustments for road-based modes.

    Rail modes running on dedicated track ignore both multipliers.
    ``capacity_factor`` is informational and only stored on edges.
    """
    time_multiplier: float = 1.0
    cost_multiplier: float = 1.0
    capacity_factor: float = 1.0
    label: str = "Standard"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


STANDARD_COEFFICIENTS = TimeOfDayCoefficients()


@dataclass(frozen=True)
class RouteContext:
    """The user-chosen source/target of a single-route analysis."""
    source: Optional[str] = None
    target: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.source) and bool(self.target)
