from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from transit_resilience.analysis.metrics import MetricsBundle
from transit_resilience.simulation.graph import TransportGraph


class CandidateStrategy(Enum):
    """How a candidate link was proposed."""
    HUB_NEIGHBOR = "hub_neighbor"
    CROSS_RAIL = "cross_rail"
    OD_DRIVEN = "od_driven"
    EXPRESS_HUB = "express_hub"

    @property
    def priority(self) -> int:
        return STRATEGY_PRIORITY[self]


STRATEGY_PRIORITY: Dict[CandidateStrategy, int] = {
    CandidateStrategy.HUB_NEIGHBOR: 10,
    CandidateStrategy.CROSS_RAIL: 8,
    CandidateStrategy.OD_DRIVEN: 7,
    CandidateStrategy.EXPRESS_HUB: 6,
}


@dataclass(frozen=True)
class CandidateLink:
    """A proposed new link between two unconnected stations."""
    from_id: str
    to_id: str
    strategy: CandidateStrategy
    distance: float
    priority: int
    from_name: str = ""
    to_name: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": self.from_id,
            "to": self.to_id,
            "from_name": self.from_name,
            "to_name": self.to_name,
            "type": self.strategy.value,
            "distance": self.distance,
            "priority": self.priority,
        }


@dataclass(frozen=True)
class LinkProfile:
    """Mode, travel time and fare assigned to an inserted link."""
    mode: str
    time: float
    cost: float
    base_time: float


@dataclass
class Recommendation:
    """A candidate selected by the greedy recommender."""
    candidate: CandidateLink
    mode: str
    time: float
    cost: float
    improvement: float
    metrics: MetricsBundle

    @property
    def from_id(self) -> str:
        return self.candidate.from_id

    @property
    def to_id(self) -> str:
        return self.candidate.to_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.candidate.to_dict(),
            "mode": self.mode,
            "time": self.time,
            "cost": self.cost,
            "improvement": self.improvement,
            "metrics": self.metrics.to_dict(include_results=False),
        }


@dataclass
class ProgressUpdate:
    """Reported once per candidate evaluated."""
    iteration: int
    candidate_index: int
    total_candidates: int
    budget: int


@dataclass
class RecommendationResult:
    """Selected links in order, plus the repaired network and its metrics."""
    recommendations: List[Recommendation] = field(default_factory=list)
    final_graph: Optional[TransportGraph] = None
    final_metrics: Optional[MetricsBundle] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recommendations": [r.to_dict() for r in self.recommendations],
            "final_metrics": self.final_metrics.to_dict(include_results=False) if self.final_metrics else None,
        }
