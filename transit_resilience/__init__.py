"""
Transit Resilience

Multi-modal transport network resilience analysis: build an
objective-weighted graph, apply failures, measure OD-pair impact, and
recommend new links under a budget.
"""

from .core.models import Objective, FailureKind, NodeRecord, EdgeRecord, ODPair, TimeOfDayCoefficients
from .simulation.graph import TransportGraph
from .simulation.graph_builder import build_graph
from .simulation.failure_simulator import apply_failure
from .analysis.shortest_path import PathResult, compute_shortest_path
from .analysis.metrics import MetricsBundle, compute_metrics, generate_od_sample
from .recommendation.candidates import generate_candidates
from .recommendation.greedy import greedy_recommendation
from .config.settings import Settings

__version__ = "0.1.0"

__all__ = [
    "Objective",
    "FailureKind",
    "NodeRecord",
    "EdgeRecord",
    "ODPair",
    "TimeOfDayCoefficients",
    "TransportGraph",
    "build_graph",
    "apply_failure",
    "PathResult",
    "compute_shortest_path",
    "MetricsBundle",
    "compute_metrics",
    "generate_od_sample",
    "generate_candidates",
    "greedy_recommendation",
    "Settings",
]
