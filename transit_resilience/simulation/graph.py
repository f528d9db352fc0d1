"""
Transport Graph

Simple undirected graph of stations and service links.

At most one link exists per unordered node pair: a second attempt to
connect an already-connected pair is ignored. Transformations (failures,
speculative link insertion) work on ``copy()`` so a graph held elsewhere
is never changed underneath its owner.
"""

from __future__ import annotations
import logging
from collections import defaultdict
from typing import Dict, List, Tuple, Any, Iterator, Set

import networkx as nx

from transit_resilience.core.models import NodeRecord

EdgeKey = Tuple[str, str]


def edge_key(u: str, v: str) -> EdgeKey:
    """Canonical key of the unordered pair (u, v)."""
    return (u, v) if u <= v else (v, u)


class TransportGraph:
    """
    Multi-modal transport network.

    Nodes carry their dataset attributes (layer, name, region, type, lat,
    lon). Links carry the attributes computed by the graph builder: ``mode``,
    ``distance``, ``time``, ``cost``, ``weight``, ``inter_modal`` and the
    base values they were derived from.

    Example:
        >>> g = TransportGraph()
        >>> g.add_node(NodeRecord("A", 17.4, 78.4, "metro"))
        >>> g.add_node(NodeRecord("B", 17.5, 78.4, "metro"))
        >>> g.add_link("A", "B", mode="metro", time=3.0)
        True
        >>> g.add_link("B", "A", mode="bus", time=1.0)
        False
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

        # NetworkX graph for path queries; nx.Graph is already simple and
        # undirected, the guards in add_link keep existing links untouched.
        self.graph = nx.Graph()

    # =========================================================================
    # Construction
    # =========================================================================

    def add_node(self, node: NodeRecord) -> None:
        """Add a station; re-adding an existing id keeps the first record."""
        if node.node_id in self.graph:
            return
        self.graph.add_node(
            node.node_id,
            layer=node.layer,
            name=node.name,
            region=node.region,
            type=node.type,
            lat=node.lat,
            lon=node.lon,
        )

    def add_link(self, u: str, v: str, **attrs: Any) -> bool:
        """
        Connect two existing stations.

        Returns:
            True if the link was added, False if an endpoint is missing or
            the pair is already connected.
        """
        if u not in self.graph or v not in self.graph:
            return False
        if self.graph.has_edge(u, v):
            return False
        self.graph.add_edge(u, v, **attrs)
        return True

    # =========================================================================
    # Mutation (only on graphs the caller owns, i.e. fresh copies)
    # =========================================================================

    def remove_node(self, node_id: str) -> bool:
        """Drop a station with all its links."""
        if node_id not in self.graph:
            return False
        self.graph.remove_node(node_id)
        return True

    def remove_link(self, u: str, v: str) -> bool:
        if not self.graph.has_edge(u, v):
            return False
        self.graph.remove_edge(u, v)
        return True

    def copy(self) -> "TransportGraph":
        """Independent copy; node and link attribute dicts are not shared."""
        clone = TransportGraph.__new__(TransportGraph)
        clone.logger = self.logger
        clone.graph = self.graph.copy()
        return clone

    # =========================================================================
    # Queries
    # =========================================================================

    def has_node(self, node_id: str) -> bool:
        return node_id in self.graph

    def has_link(self, u: str, v: str) -> bool:
        return self.graph.has_edge(u, v)

    def node(self, node_id: str) -> Dict[str, Any]:
        return self.graph.nodes[node_id]

    def link(self, u: str, v: str) -> Dict[str, Any]:
        return self.graph.edges[u, v]

    def nodes(self) -> List[str]:
        return list(self.graph.nodes)

    def neighbors(self, node_id: str) -> Iterator[str]:
        return self.graph.neighbors(node_id)

    def links(self) -> Iterator[Tuple[str, str, Dict[str, Any]]]:
        return self.graph.edges(data=True)

    def link_keys(self) -> Set[EdgeKey]:
        return {edge_key(u, v) for u, v in self.graph.edges}

    def nodes_in_layers(self, layers) -> List[str]:
        wanted = set(layers)
        return [n for n, d in self.graph.nodes(data=True) if d.get("layer") in wanted]

    def node_name(self, node_id: str) -> str:
        if node_id not in self.graph:
            return node_id
        return self.graph.nodes[node_id].get("name") or node_id

    def number_of_nodes(self) -> int:
        return self.graph.number_of_nodes()

    def number_of_links(self) -> int:
        return self.graph.number_of_edges()

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.graph

    def __len__(self) -> int:
        return self.graph.number_of_nodes()

    # =========================================================================
    # Summary Statistics
    # =========================================================================

    def get_summary(self) -> Dict[str, Any]:
        """Node and link counts per layer/mode."""
        layer_counts: Dict[str, int] = defaultdict(int)
        for _, data in self.graph.nodes(data=True):
            layer_counts[data.get("layer", "unknown")] += 1

        mode_counts: Dict[str, int] = defaultdict(int)
        inter_modal = 0
        for _, _, data in self.graph.edges(data=True):
            mode_counts[data.get("mode", "unknown")] += 1
            if data.get("inter_modal"):
                inter_modal += 1

        return {
            "total_nodes": self.graph.number_of_nodes(),
            "total_links": self.graph.number_of_edges(),
            "layers": dict(layer_counts),
            "modes": dict(mode_counts),
            "inter_modal_links": inter_modal,
            "connected_components": nx.number_connected_components(self.graph) if len(self.graph) else 0,
        }
