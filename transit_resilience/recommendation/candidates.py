"""
Candidate Generator

Proposes plausible new links for the recommender. Four strategies run in
order, each filtered against links present in the original or the failed
network and deduplicated by unordered station pair:

    1. hub_neighbor: bus hubs 2-6 km apart                      (priority 10)
    2. cross_rail:   metro/MMTS station pairs 0.5-4 km apart    (priority 8)
    3. od_driven:    origin to path midpoint of the 5 slowest
                     reachable post-failure routes              (priority 7)
    4. express_hub:  major hubs/stations in different regions
                     3-15 km apart, generation stops at 40
                     candidates overall                         (priority 6)

The union is sorted by descending priority (stable) and cut to 30.
"""

from __future__ import annotations
import logging
import math
from typing import Dict, List, Optional, Sequence, Set

from transit_resilience.core.models import NodeRecord
from transit_resilience.core.layers import BUS, CROSS_RAIL_LAYERS, EXPRESS_HUB_LAYERS
from transit_resilience.analysis.metrics import ODResult
from transit_resilience.simulation.graph import TransportGraph, EdgeKey, edge_key
from .models import CandidateLink, CandidateStrategy

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0

MAX_CANDIDATES = 30
EXPRESS_HUB_CAP = 40
OD_DRIVEN_TOP = 5

HUB_NEIGHBOR_RANGE = (2.0, 6.0)
CROSS_RAIL_RANGE = (0.5, 4.0)
EXPRESS_HUB_RANGE = (3.0, 15.0)


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometres."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (math.sin(d_lat / 2) ** 2
         + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2)
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def node_distance(a: NodeRecord, b: NodeRecord) -> float:
    return haversine_km(a.lat, a.lon, b.lat, b.lon)


def _in_range(value: float, bounds) -> bool:
    low, high = bounds
    return low <= value <= high


class CandidateGenerator:
    """
    Collects candidate links for one analysis run.

    Example:
        >>> gen = CandidateGenerator(nodes, original_graph, failed_graph)
        >>> candidates = gen.generate(post_failure.results)
        >>> len(candidates) <= 30
        True
    """

    def __init__(
        self,
        nodes: Sequence[NodeRecord],
        original_graph: TransportGraph,
        failed_graph: TransportGraph,
        max_candidates: int = MAX_CANDIDATES,
        express_hub_cap: int = EXPRESS_HUB_CAP,
    ):
        self.nodes = list(nodes)
        self.original_graph = original_graph
        self.failed_graph = failed_graph
        self.max_candidates = max_candidates
        self.express_hub_cap = express_hub_cap

        self._by_id: Dict[str, NodeRecord] = {}
        for n in self.nodes:
            self._by_id.setdefault(n.node_id, n)

        self.candidates: List[CandidateLink] = []
        self._seen: Set[EdgeKey] = set()

    def generate(self, post_failure_results: Sequence[ODResult] = ()) -> List[CandidateLink]:
        self.candidates = []
        self._seen = set()

        self._hub_neighbors()
        self._cross_rail()
        self._od_driven(post_failure_results)
        self._express_hubs()

        counts: Dict[str, int] = {}
        for c in self.candidates:
            counts[c.strategy.value] = counts.get(c.strategy.value, 0) + 1
        ranked = sorted(self.candidates, key=lambda c: c.priority, reverse=True)
        selected = ranked[:self.max_candidates]

        logger.info(f"Generated {len(self.candidates)} candidate links {counts}, kept {len(selected)}")
        return selected

    # =========================================================================
    # Strategies
    # =========================================================================

    def _hub_neighbors(self) -> None:
        hubs = [n for n in self.nodes if n.type == "hub" and n.layer == BUS]
        for i in range(len(hubs)):
            for j in range(i + 1, len(hubs)):
                dist = node_distance(hubs[i], hubs[j])
                if _in_range(dist, HUB_NEIGHBOR_RANGE):
                    self._add(hubs[i].node_id, hubs[j].node_id, CandidateStrategy.HUB_NEIGHBOR)

    def _cross_rail(self) -> None:
        first_layer, second_layer = CROSS_RAIL_LAYERS
        firsts = [n for n in self.nodes if n.layer == first_layer]
        seconds = [n for n in self.nodes if n.layer == second_layer]
        for a in firsts:
            for b in seconds:
                dist = node_distance(a, b)
                if _in_range(dist, CROSS_RAIL_RANGE):
                    self._add(a.node_id, b.node_id, CandidateStrategy.CROSS_RAIL)

    def _od_driven(self, results: Sequence[ODResult]) -> None:
        reachable = [r for r in results if r.reachable]
        slowest = sorted(reachable, key=lambda r: r.time, reverse=True)[:OD_DRIVEN_TOP]
        for r in slowest:
            path = r.path
            if not path or len(path) <= 2:
                continue
            self._add(path[0], path[len(path) // 2], CandidateStrategy.OD_DRIVEN)

    def _express_hubs(self) -> None:
        majors = [
            n for n in self.nodes
            if n.type in ("hub", "station") and n.layer in EXPRESS_HUB_LAYERS
        ]
        for i in range(len(majors)):
            if len(self.candidates) >= self.express_hub_cap:
                break
            for j in range(i + 1, len(majors)):
                if len(self.candidates) >= self.express_hub_cap:
                    break
                if majors[i].region == majors[j].region:
                    continue
                dist = node_distance(majors[i], majors[j])
                if _in_range(dist, EXPRESS_HUB_RANGE):
                    self._add(majors[i].node_id, majors[j].node_id, CandidateStrategy.EXPRESS_HUB)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _add(self, u: str, v: str, strategy: CandidateStrategy) -> Optional[CandidateLink]:
        if u == v:
            return None
        key = edge_key(u, v)
        if key in self._seen:
            return None
        if self.failed_graph.has_link(u, v) or self.original_graph.has_link(u, v):
            return None
        a = self._by_id.get(u)
        b = self._by_id.get(v)
        if a is None or b is None:
            return None

        candidate = CandidateLink(
            from_id=u,
            to_id=v,
            strategy=strategy,
            distance=node_distance(a, b),
            priority=strategy.priority,
            from_name=a.display_name,
            to_name=b.display_name,
        )
        self.candidates.append(candidate)
        self._seen.add(key)
        return candidate


def generate_candidates(
    nodes: Sequence[NodeRecord],
    original_graph: TransportGraph,
    failed_graph: TransportGraph,
    post_failure_results: Sequence[ODResult] = (),
) -> List[CandidateLink]:
    """Deduplicated, priority-sorted candidate links (at most 30)."""
    return CandidateGenerator(nodes, original_graph, failed_graph).generate(post_failure_results)
