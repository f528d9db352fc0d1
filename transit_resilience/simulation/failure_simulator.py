"""
Failure Simulator

Removes stations, links or whole transport layers from a network.

Failure Kinds:
    - node:  each listed station is dropped with its links
    - edge:  each listed station pair loses its link
    - layer: every station of a listed layer is dropped with its links

The input graph is never modified; every call works on a fresh copy, even
when nothing matches.
"""

from __future__ import annotations
import logging
from typing import List, Optional, Sequence, Tuple

from transit_resilience.core.models import FailureKind

from .graph import TransportGraph
from .models import FailureScenario, FailureResult, FailureTarget


class FailureSimulator:
    """
    Applies failure scenarios to a transport graph.

    Example:
        >>> sim = FailureSimulator(graph)
        >>> result = sim.simulate(FailureScenario(FailureKind.NODE, ["Ameerpet_Metro"]))
        >>> result.graph.has_node("Ameerpet_Metro")
        False
        >>> graph.has_node("Ameerpet_Metro")
        True
    """

    def __init__(self, graph: TransportGraph):
        self.graph = graph
        self.logger = logging.getLogger(__name__)

    def simulate(self, scenario: FailureScenario) -> FailureResult:
        failed = self.graph.copy()
        result = FailureResult(scenario=scenario, graph=failed)

        if scenario.kind is FailureKind.NONE or not scenario.targets:
            return result

        if scenario.kind is FailureKind.NODE:
            self._fail_nodes(failed, scenario.targets, result)
        elif scenario.kind is FailureKind.EDGE:
            self._fail_links(failed, scenario.targets, result)
        elif scenario.kind is FailureKind.LAYER:
            self._fail_layers(failed, scenario.targets, result)

        for target in result.ignored_targets:
            self.logger.warning(f"Failure target '{target}' not found, skipping.")

        self.logger.info(
            f"Applied {scenario.description}: removed {len(result.removed_nodes)} nodes, "
            f"{len(result.removed_links)} links"
        )
        return result

    # =========================================================================
    # Failure Kinds
    # =========================================================================

    def _fail_nodes(self, graph: TransportGraph, targets: Sequence[FailureTarget], result: FailureResult) -> None:
        for node_id in targets:
            if graph.remove_node(str(node_id)):
                result.removed_nodes.append(str(node_id))
            else:
                result.ignored_targets.append(node_id)

    def _fail_links(self, graph: TransportGraph, targets: Sequence[FailureTarget], result: FailureResult) -> None:
        for target in targets:
            pair = resolve_link_target(graph, target)
            if pair is not None and graph.remove_link(*pair):
                result.removed_links.append(pair)
            else:
                result.ignored_targets.append(target)

    def _fail_layers(self, graph: TransportGraph, targets: Sequence[FailureTarget], result: FailureResult) -> None:
        layers = {str(t) for t in targets}
        doomed = graph.nodes_in_layers(layers)
        if not doomed:
            result.ignored_targets.extend(sorted(layers))
            return
        present = {graph.node(n).get("layer") for n in doomed}
        result.ignored_targets.extend(sorted(layers - present))
        for node_id in doomed:
            graph.remove_node(node_id)
            result.removed_nodes.append(node_id)


def resolve_link_target(graph: TransportGraph, target: FailureTarget) -> Optional[Tuple[str, str]]:
    """
    Turn an edge target into a station pair.

    Tuples are taken as-is. A "from_to" key is split at the first underscore
    whose two halves are both stations of the graph, so ids that themselves
    contain underscores still resolve; otherwise the last underscore is used.
    """
    if isinstance(target, (tuple, list)):
        if len(target) != 2:
            return None
        return str(target[0]), str(target[1])

    key = str(target)
    positions = [i for i, ch in enumerate(key) if ch == "_"]
    if not positions:
        return None
    for pos in positions:
        u, v = key[:pos], key[pos + 1:]
        if graph.has_node(u) and graph.has_node(v):
            return u, v
    pos = positions[-1]
    return key[:pos], key[pos + 1:]


def apply_failure(
    graph: TransportGraph,
    kind: "FailureKind | str",
    targets: Optional[Sequence[FailureTarget]] = None,
) -> TransportGraph:
    """Copy of ``graph`` with the failure applied; ``graph`` is untouched."""
    scenario = FailureScenario(kind=kind, targets=list(targets or []))
    return FailureSimulator(graph).simulate(scenario).graph
