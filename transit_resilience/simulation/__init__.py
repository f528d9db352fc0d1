"""
Simulation Package

Network construction and failure application.
"""

from .graph import TransportGraph, edge_key
from .graph_builder import GraphBuilder, BuildStats, build_graph, edge_weight
from .models import FailureScenario, FailureResult
from .failure_simulator import FailureSimulator, apply_failure, resolve_link_target

__all__ = [
    "TransportGraph",
    "edge_key",
    "GraphBuilder",
    "BuildStats",
    "build_graph",
    "edge_weight",
    "FailureScenario",
    "FailureResult",
    "FailureSimulator",
    "apply_failure",
    "resolve_link_target",
]
