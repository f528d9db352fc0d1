"""
Analysis Package

Route search, OD-pair metrics and before/after impact reporting.
"""

from .shortest_path import (
    PathResult,
    PathSegment,
    UNREACHABLE,
    compute_shortest_path,
    describe_path,
    min_transfer_path,
    weighted_path,
)
from .metrics import MetricsBundle, ODResult, compute_metrics, generate_od_sample
from .impact import AffectedPair, calculate_delta, top_affected_pairs, summarize_scenario

__all__ = [
    "PathResult",
    "PathSegment",
    "UNREACHABLE",
    "compute_shortest_path",
    "describe_path",
    "min_transfer_path",
    "weighted_path",
    "MetricsBundle",
    "ODResult",
    "compute_metrics",
    "generate_od_sample",
    "AffectedPair",
    "calculate_delta",
    "top_affected_pairs",
    "summarize_scenario",
]
