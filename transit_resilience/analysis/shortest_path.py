"""
Shortest-Path Engine

Finds the best route between two stations under an objective:

    - time / cost: bidirectional Dijkstra over the ``weight`` link attribute
    - transfers:   labelled search over (station, mode of incoming link)
                   states ordered by (transfers, travel time)

Route totals (distance, time, cost, transfers) and the per-segment
breakdown are always derived afterwards by walking the returned path, so
they are computed identically whichever search produced it.
"""

from __future__ import annotations
import heapq
import itertools
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Any

import networkx as nx

from transit_resilience.core.models import Objective
from transit_resilience.simulation.graph import TransportGraph

logger = logging.getLogger(__name__)

UNREACHABLE = math.inf


@dataclass
class PathSegment:
    """One link of a route."""
    from_id: str
    to_id: str
    from_name: str
    to_name: str
    mode: str
    time: float
    cost: float
    distance: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": self.from_name,
            "to": self.to_name,
            "from_id": self.from_id,
            "to_id": self.to_id,
            "mode": self.mode,
            "time": self.time,
            "cost": self.cost,
            "distance": self.distance,
        }


@dataclass
class PathResult:
    """Best route for one OD pair; ``path`` is None when unreachable."""
    path: Optional[List[str]]
    distance: float = 0.0
    time: float = 0.0
    cost: float = 0.0
    transfers: float = 0
    segments: List[PathSegment] = field(default_factory=list)

    @classmethod
    def unreachable(cls) -> "PathResult":
        return cls(
            path=None,
            distance=UNREACHABLE,
            time=UNREACHABLE,
            cost=UNREACHABLE,
            transfers=UNREACHABLE,
        )

    @classmethod
    def trivial(cls, node_id: str) -> "PathResult":
        return cls(path=[node_id])

    @property
    def reachable(self) -> bool:
        return self.path is not None and not math.isinf(self.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": list(self.path) if self.path is not None else None,
            "distance": self.distance,
            "time": self.time,
            "cost": self.cost,
            "transfers": self.transfers,
            "segments": [s.to_dict() for s in self.segments],
            "reachable": self.reachable,
        }


# =============================================================================
# Searches
# =============================================================================

def min_transfer_path(graph: TransportGraph, source: str, target: str) -> Optional[List[str]]:
    """
    Route with the fewest mode changes, ties broken by travel time.

    The number of transfers accrued depends on the mode used to arrive at a
    station, so labels are kept per (station, incoming mode) state. The
    first link of a route never counts as a transfer.

    Returns:
        Station ids from source to target, or None if unreachable.
    """
    if not graph.has_node(source) or not graph.has_node(target):
        return None
    if source == target:
        return [source]

    counter = itertools.count()
    start = (source, None)
    best: Dict[Tuple[str, Optional[str]], Tuple[float, float]] = {start: (0, 0.0)}
    previous: Dict[Tuple[str, Optional[str]], Optional[Tuple[str, Optional[str]]]] = {start: None}
    settled = set()
    queue = [(0, 0.0, next(counter), source, None)]

    while queue:
        transfers, time, _, node, mode = heapq.heappop(queue)
        state = (node, mode)
        if state in settled:
            continue
        settled.add(state)

        if node == target:
            return _rebuild(previous, state)

        for neighbor in graph.neighbors(node):
            link = graph.link(node, neighbor)
            link_mode = link.get("mode", "unknown")
            new_transfers = transfers + (1 if mode is not None and mode != link_mode else 0)
            new_time = time + float(link.get("time", 0.0) or 0.0)
            next_state = (neighbor, link_mode)
            if next_state in settled:
                continue
            known = best.get(next_state)
            if known is None or (new_transfers, new_time) < known:
                best[next_state] = (new_transfers, new_time)
                previous[next_state] = state
                heapq.heappush(queue, (new_transfers, new_time, next(counter), neighbor, link_mode))

    return None


def _rebuild(previous, state) -> List[str]:
    path = []
    while state is not None:
        path.append(state[0])
        state = previous[state]
    path.reverse()
    return path


def weighted_path(graph: TransportGraph, source: str, target: str) -> Optional[List[str]]:
    """Minimum-weight route, searching from both ends."""
    try:
        _, path = nx.bidirectional_dijkstra(graph.graph, source, target, weight="weight")
    except (nx.NetworkXNoPath, nx.NodeNotFound):
        return None
    return path


# =============================================================================
# Entry Point
# =============================================================================

def compute_shortest_path(
    graph: TransportGraph,
    source: str,
    target: str,
    objective: "Objective | str" = Objective.TIME,
) -> PathResult:
    """Best route between two stations with its totals and segments."""
    objective = Objective.from_string(objective)

    if not graph.has_node(source) or not graph.has_node(target):
        return PathResult.unreachable()
    if source == target:
        return PathResult.trivial(source)

    if objective is Objective.TRANSFERS:
        path = min_transfer_path(graph, source, target)
    else:
        path = weighted_path(graph, source, target)

    if not path:
        return PathResult.unreachable()
    return describe_path(graph, path)


def describe_path(graph: TransportGraph, path: List[str]) -> PathResult:
    """Totals and per-link breakdown of an existing route."""
    result = PathResult(path=list(path))
    transfers = 0
    prev_mode = None

    for u, v in zip(path, path[1:]):
        link = graph.link(u, v)
        mode = link.get("mode", "unknown")
        time = float(link.get("time", 0.0) or 0.0)
        cost = float(link.get("cost", 0.0) or 0.0)
        distance = float(link.get("distance", 0.0) or 0.0)

        result.time += time
        result.cost += cost
        result.distance += distance
        result.segments.append(PathSegment(
            from_id=u,
            to_id=v,
            from_name=graph.node_name(u),
            to_name=graph.node_name(v),
            mode=mode,
            time=time,
            cost=cost,
            distance=distance,
        ))

        if prev_mode is not None and prev_mode != mode:
            transfers += 1
        prev_mode = mode

    result.transfers = transfers
    logger.debug(
        f"Route {path[0]} -> {path[-1]}: {len(path)} stops, time={result.time:.2f}, "
        f"cost={result.cost:.2f}, transfers={transfers}"
    )
    return result
