import pytest

from conftest import metro, link

from transit_resilience.core.models import FailureKind
from transit_resilience.simulation.graph_builder import build_graph
from transit_resilience.simulation.models import FailureScenario
from transit_resilience.simulation.failure_simulator import (
    FailureSimulator, apply_failure, resolve_link_target,
)


def snapshot(graph):
    return (
        sorted(graph.nodes()),
        sorted((min(u, v), max(u, v), tuple(sorted(d.items()))) for u, v, d in graph.links()),
    )


# =============================================================================
# Immutability
# =============================================================================

@pytest.mark.parametrize("kind,targets", [
    (FailureKind.NONE, []),
    (FailureKind.NODE, ["M2"]),
    (FailureKind.EDGE, ["M1_M2"]),
    (FailureKind.LAYER, ["metro"]),
    (FailureKind.NODE, ["UNKNOWN"]),
])
def test_input_graph_is_never_mutated(city_graph, kind, targets):
    before = snapshot(city_graph)
    failed = apply_failure(city_graph, kind, targets)
    assert snapshot(city_graph) == before
    assert failed is not city_graph
    assert failed.graph is not city_graph.graph


def test_none_returns_unchanged_copy(city_graph):
    failed = apply_failure(city_graph, "none", ["M1"])
    assert snapshot(failed) == snapshot(city_graph)


# =============================================================================
# Failure Kinds
# =============================================================================

class TestNodeFailure:

    def test_node_and_its_links_removed(self, city_graph):
        failed = apply_failure(city_graph, FailureKind.NODE, ["M2"])
        assert not failed.has_node("M2")
        assert not failed.has_link("M1", "M2")
        assert failed.number_of_links() == city_graph.number_of_links() - 3

    def test_unknown_targets_are_reported(self, city_graph):
        result = FailureSimulator(city_graph).simulate(
            FailureScenario(FailureKind.NODE, ["M2", "GHOST"])
        )
        assert result.removed_nodes == ["M2"]
        assert result.ignored_targets == ["GHOST"]


class TestEdgeFailure:

    def test_key_string(self, city_graph):
        failed = apply_failure(city_graph, FailureKind.EDGE, ["M1_M2"])
        assert not failed.has_link("M1", "M2")
        assert failed.has_node("M1") and failed.has_node("M2")

    def test_reversed_key_and_tuple(self, city_graph):
        failed = apply_failure(city_graph, FailureKind.EDGE, ["M2_M1", ("M3", "B2")])
        assert not failed.has_link("M1", "M2")
        assert not failed.has_link("M3", "B2")

    def test_ids_with_underscores(self):
        nodes = [metro("Ameerpet_Metro", 0.0), metro("Kukatpally_Metro", 0.01)]
        graph = build_graph(nodes, [link("Ameerpet_Metro", "Kukatpally_Metro", "metro", 3.0)])

        assert resolve_link_target(graph, "Ameerpet_Metro_Kukatpally_Metro") == (
            "Ameerpet_Metro", "Kukatpally_Metro"
        )
        failed = apply_failure(graph, FailureKind.EDGE, ["Ameerpet_Metro_Kukatpally_Metro"])
        assert failed.number_of_links() == 0

    def test_unresolvable_key_falls_back_to_last_underscore(self, city_graph):
        assert resolve_link_target(city_graph, "X_Y_Z") == ("X_Y", "Z")
        assert resolve_link_target(city_graph, "nounderscore") is None

    def test_missing_link_ignored(self, city_graph):
        result = FailureSimulator(city_graph).simulate(FailureScenario("edge", ["M1_M3"]))
        assert result.is_noop
        assert result.ignored_targets == ["M1_M3"]


class TestLayerFailure:

    def test_whole_layer_removed(self, city_graph):
        failed = apply_failure(city_graph, FailureKind.LAYER, ["metro"])
        assert failed.nodes_in_layers(["metro"]) == []
        assert sorted(failed.nodes()) == ["B1", "B2", "R1"]
        assert failed.has_link("B1", "B2")

    def test_multiple_layers(self, city_graph):
        failed = apply_failure(city_graph, "layer", ["metro", "mmts", "auto"])
        assert sorted(failed.nodes()) == ["B1", "B2"]

    def test_description(self):
        scenario = FailureScenario("layer", ["metro"])
        assert scenario.kind is FailureKind.LAYER
        assert scenario.description == "layer failure: metro"
        assert FailureScenario().description == "No failure"


def test_unknown_failure_kind_rejected(city_graph):
    with pytest.raises(ValueError):
        apply_failure(city_graph, "flood", ["M1"])
