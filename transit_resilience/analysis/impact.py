"""
Impact Reporting

Before/after comparisons of metric bundles: percentage deltas, the OD
pairs hit hardest by a failure, and a one-paragraph textual summary.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from transit_resilience.core.models import FailureKind
from .metrics import MetricsBundle


def calculate_delta(before: Optional[float], after: Optional[float]) -> float:
    """Percent change from ``before`` to ``after``; 0 when undefined."""
    if not before or after is None:
        return 0.0
    return (after - before) / before * 100.0


@dataclass
class AffectedPair:
    """An OD pair still reachable after a failure, but slower."""
    source: str
    target: str
    source_name: str
    target_name: str
    time_before: float
    time_after: float
    delta: float
    path_before: str
    path_after: str

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.__dict__)


def _path_label(path: Optional[List[str]]) -> str:
    return " → ".join(path) if path else "N/A"


def top_affected_pairs(baseline: MetricsBundle, scenario: MetricsBundle, limit: int = 10) -> List[AffectedPair]:
    """
    OD pairs with the largest relative travel-time increase.

    Bundles are aligned by index; pairs unreachable on either side are left
    out (they show up in the disconnected count instead).
    """
    affected = []
    for before, after in zip(baseline.results, scenario.results):
        if not (before.reachable and after.reachable) or before.time <= 0:
            continue
        delta = calculate_delta(before.time, after.time)
        if delta <= 0:
            continue
        affected.append(AffectedPair(
            source=before.source,
            target=before.target,
            source_name=before.od.source_name,
            target_name=before.od.target_name,
            time_before=before.time,
            time_after=after.time,
            delta=delta,
            path_before=_path_label(before.path),
            path_after=_path_label(after.path),
        ))
    affected.sort(key=lambda a: a.delta, reverse=True)
    return affected[:limit]


def summarize_scenario(
    baseline: MetricsBundle,
    scenario: MetricsBundle,
    failure_kind: FailureKind = FailureKind.NONE,
    failure_targets: Sequence[Any] = (),
    time_of_day_label: str = "Standard",
    final: Optional[MetricsBundle] = None,
    links_added: int = 0,
) -> str:
    """Human-readable summary of one analysis run."""
    if failure_kind is FailureKind.NONE or not failure_targets:
        summary = (
            f"[{time_of_day_label}] Network analysis with no failures. "
            f"Average travel time: {baseline.avg_time:.1f} minutes, "
            f"{baseline.disconnected} disconnected OD pairs"
        )
    else:
        time_delta = calculate_delta(baseline.avg_time, scenario.avg_time)
        summary = f"[{time_of_day_label}] Failure scenario "
        if failure_kind is FailureKind.NODE:
            summary += f"removing {len(failure_targets)} node(s) "
        elif failure_kind is FailureKind.EDGE:
            summary += f"removing {len(failure_targets)} edge(s) "
        elif failure_kind is FailureKind.LAYER:
            summary += f"removing {', '.join(str(t) for t in failure_targets)} layer(s) "
        direction = "increase" if time_delta > 0 else "decrease"
        summary += f"resulted in {time_delta:.1f}% {direction} in average travel time"

        extra = scenario.disconnected - baseline.disconnected
        if extra > 0:
            summary += f" and {extra} additional disconnected OD pairs"

    if final is not None:
        fix_delta = calculate_delta(scenario.avg_time, final.avg_time)
        summary += (
            f". Greedy recommender added {links_added} link(s), "
            f"improving average time by {abs(fix_delta):.1f}%"
        )

    return summary + "."
