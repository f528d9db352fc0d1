"""
Metrics Aggregator

Runs the shortest-path engine over a batch of OD pairs and reduces the
routes to averages. Unreachable pairs are counted, not averaged: every
average divides by the number of reachable pairs only, and is 0 when no
pair is reachable.

Results keep the order of the input pairs so that baseline, post-failure
and post-recommendation bundles can be compared index by index.
"""

from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional, Sequence

import pandas as pd

from transit_resilience.core.models import Objective, NodeRecord, ODPair
from transit_resilience.simulation.graph import TransportGraph, edge_key
from .shortest_path import PathResult, compute_shortest_path

logger = logging.getLogger(__name__)


@dataclass
class ODResult:
    """Route found for one OD pair."""
    od: ODPair
    route: PathResult

    @property
    def source(self) -> str:
        return self.od.source

    @property
    def target(self) -> str:
        return self.od.target

    @property
    def reachable(self) -> bool:
        return self.route.reachable

    @property
    def time(self) -> float:
        return self.route.time

    @property
    def cost(self) -> float:
        return self.route.cost

    @property
    def transfers(self) -> float:
        return self.route.transfers

    @property
    def path(self) -> Optional[List[str]]:
        return self.route.path

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.od.source,
            "target": self.od.target,
            "source_name": self.od.source_name,
            "target_name": self.od.target_name,
            **self.route.to_dict(),
        }


@dataclass
class MetricsBundle:
    """Aggregate route quality over a set of OD pairs."""
    avg_time: float = 0.0
    avg_cost: float = 0.0
    avg_transfers: float = 0.0
    disconnected: int = 0
    total_pairs: int = 0
    valid_pairs: int = 0
    results: List[ODResult] = field(default_factory=list)

    def value(self, objective: "Objective | str") -> float:
        """The average minimised by ``objective``."""
        objective = Objective.from_string(objective)
        if objective is Objective.TIME:
            return self.avg_time
        if objective is Objective.COST:
            return self.avg_cost
        return self.avg_transfers

    def to_dataframe(self) -> pd.DataFrame:
        """One row per OD pair, in input order."""
        rows = []
        for r in self.results:
            rows.append({
                "source": r.od.source,
                "target": r.od.target,
                "source_name": r.od.source_name,
                "target_name": r.od.target_name,
                "reachable": r.reachable,
                "time": r.time,
                "cost": r.cost,
                "transfers": r.transfers,
                "distance": r.route.distance,
                "stops": len(r.path) if r.path else 0,
            })
        columns = ["source", "target", "source_name", "target_name", "reachable",
                   "time", "cost", "transfers", "distance", "stops"]
        return pd.DataFrame(rows, columns=columns)

    def to_dict(self, include_results: bool = True) -> Dict[str, Any]:
        data = {
            "avg_time": self.avg_time,
            "avg_cost": self.avg_cost,
            "avg_transfers": self.avg_transfers,
            "disconnected": self.disconnected,
            "total_pairs": self.total_pairs,
            "valid_pairs": self.valid_pairs,
        }
        if include_results:
            data["results"] = [r.to_dict() for r in self.results]
        return data


def compute_metrics(
    graph: TransportGraph,
    od_pairs: Sequence[ODPair],
    objective: "Objective | str" = Objective.TIME,
) -> MetricsBundle:
    """Route every OD pair on ``graph`` and average over the reachable ones."""
    objective = Objective.from_string(objective)
    bundle = MetricsBundle(total_pairs=len(od_pairs))

    total_time = 0.0
    total_cost = 0.0
    total_transfers = 0.0

    for od in od_pairs:
        route = compute_shortest_path(graph, od.source, od.target, objective)
        bundle.results.append(ODResult(od=od, route=route))
        if not route.reachable:
            bundle.disconnected += 1
            continue
        total_time += route.time
        total_cost += route.cost
        total_transfers += route.transfers
        bundle.valid_pairs += 1

    if bundle.valid_pairs:
        bundle.avg_time = total_time / bundle.valid_pairs
        bundle.avg_cost = total_cost / bundle.valid_pairs
        bundle.avg_transfers = total_transfers / bundle.valid_pairs

    logger.debug(
        f"Metrics ({objective.value}): {bundle.valid_pairs}/{bundle.total_pairs} reachable, "
        f"avg_time={bundle.avg_time:.2f}, avg_cost={bundle.avg_cost:.2f}, "
        f"avg_transfers={bundle.avg_transfers:.2f}"
    )
    return bundle


def generate_od_sample(
    nodes: Sequence[NodeRecord],
    sample_size: int = 40,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> List[ODPair]:
    """
    Uniformly sample distinct OD pairs among major stations.

    Major stations are stations and hubs, plus named metro stops. No
    unordered pair is drawn twice; the sample stops early when every
    possible pair has been drawn.
    """
    if sample_size < 0:
        raise ValueError(f"sample_size must be >= 0, got {sample_size}")

    rng = rng or random.Random(seed)
    majors = [n for n in nodes if n.is_major]
    distinct = {n.node_id for n in majors}
    max_pairs = len(distinct) * (len(distinct) - 1) // 2
    wanted = min(sample_size, max_pairs)

    pairs: List[ODPair] = []
    used = set()
    while len(pairs) < wanted:
        a = majors[rng.randrange(len(majors))]
        b = majors[rng.randrange(len(majors))]
        if a.node_id == b.node_id:
            continue
        key = edge_key(a.node_id, b.node_id)
        if key in used:
            continue
        used.add(key)
        pairs.append(ODPair(a.node_id, b.node_id, a.display_name, b.display_name))

    logger.info(f"Sampled {len(pairs)} OD pairs from {len(distinct)} major stations")
    return pairs
