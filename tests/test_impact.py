import pytest

from transit_resilience.core.models import FailureKind
from transit_resilience.simulation.failure_simulator import apply_failure
from transit_resilience.analysis.metrics import compute_metrics, MetricsBundle
from transit_resilience.analysis.impact import calculate_delta, top_affected_pairs, summarize_scenario


@pytest.mark.parametrize("before,after,expected", [
    (10.0, 15.0, 50.0),
    (20.0, 10.0, -50.0),
    (0.0, 5.0, 0.0),
    (None, 5.0, 0.0),
    (5.0, None, 0.0),
])
def test_calculate_delta(before, after, expected):
    assert calculate_delta(before, after) == pytest.approx(expected)


@pytest.fixture
def node_failure(city_graph, city_od_pairs):
    baseline = compute_metrics(city_graph, city_od_pairs, "time")
    failed = apply_failure(city_graph, FailureKind.NODE, ["M2"])
    return baseline, compute_metrics(failed, city_od_pairs, "time")


def test_top_affected_pairs(node_failure):
    baseline, scenario = node_failure
    affected = top_affected_pairs(baseline, scenario)

    # B1->B2 is unchanged and M1->R1 is disconnected: only M1->M3 qualifies
    assert len(affected) == 1
    pair = affected[0]
    assert (pair.source, pair.target) == ("M1", "M3")
    assert pair.time_before == pytest.approx(4.0)
    assert pair.time_after == pytest.approx(20.0)
    assert pair.delta == pytest.approx(400.0)
    assert pair.path_before == "M1 → M2 → M3"
    assert pair.source_name == "Metro One"


def test_top_affected_pairs_limit(node_failure):
    baseline, scenario = node_failure
    assert top_affected_pairs(baseline, scenario, limit=0) == []


def test_summary_without_failure(city_graph, city_od_pairs):
    baseline = compute_metrics(city_graph, city_od_pairs, "time")
    text = summarize_scenario(baseline, baseline, time_of_day_label="Standard")
    assert text.startswith("[Standard] Network analysis with no failures.")
    assert "0 disconnected OD pairs" in text


def test_summary_with_failure_and_fix(node_failure):
    baseline, scenario = node_failure
    final = MetricsBundle(avg_time=scenario.avg_time / 2)
    text = summarize_scenario(
        baseline, scenario,
        failure_kind=FailureKind.NODE,
        failure_targets=["M2"],
        time_of_day_label="Evening Peak (5-9 PM)",
        final=final,
        links_added=1,
    )
    assert "removing 1 node(s)" in text
    assert "increase in average travel time" in text
    assert "1 additional disconnected OD pairs" in text
    assert "added 1 link(s), improving average time by 50.0%" in text
    assert text.endswith(".")


def test_summary_layer_failure(node_failure):
    baseline, scenario = node_failure
    text = summarize_scenario(baseline, scenario, FailureKind.LAYER, ["metro", "mmts"])
    assert "removing metro, mmts layer(s)" in text
