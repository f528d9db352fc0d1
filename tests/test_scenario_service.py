"""
End-to-end runs of the scenario service on the shared city network.
"""

import io
import json

import pytest

from transit_resilience.config.settings import Settings
from transit_resilience.core.models import FailureKind, ODPair
from transit_resilience.application.services.scenario_service import ScenarioService, ScenarioRequest
from transit_resilience.adapters.outbound.file_store import LocalFileStore
from transit_resilience.adapters.outbound.console_reporter import ConsoleReporter


@pytest.fixture
def service(city_nodes, city_edges):
    return ScenarioService(city_nodes, city_edges, Settings(budget=2, seed=11, od_sample_size=10))


def test_full_run_with_recommendations(service):
    progress = []
    report = service.run(
        ScenarioRequest(failure_kind=FailureKind.NODE, failure_targets=["M2"]),
        progress_callback=progress.append,
    )

    # six major stations, ten of their fifteen pairs sampled
    assert report.baseline.total_pairs == 10
    assert report.scenario.valid_pairs + report.scenario.disconnected == 10
    assert report.original_graph.has_node("M2")
    assert not report.failed_graph.has_node("M2")
    assert report.candidates
    assert len(report.recommendations) <= 2
    assert report.final_metrics is not None
    assert "removing 1 node(s)" in report.summary

    percents = [p.percent for p in progress]
    assert percents[:5] == [10, 20, 35, 50, 60]
    assert percents[-1] == 100
    assert percents == sorted(percents)
    assert all(70 <= p <= 90 for p in percents[5:-1])


def test_zero_budget_skips_recommendation(service):
    progress = []
    report = service.run(
        ScenarioRequest(failure_kind="layer", failure_targets=["metro"], budget=0),
        progress_callback=progress.append,
    )
    assert report.candidates == []
    assert report.recommendations == []
    assert report.final_metrics is None
    assert [p.percent for p in progress] == [10, 20, 35, 50, 100]


def test_single_route_request(service):
    report = service.run(ScenarioRequest(source="M1", target="M3", objective="cost", budget=0))
    assert report.od_pairs == [ODPair("M1", "M3", "Metro One", "Metro Three")]
    # metro-to-metro route context inflates the bus corridor
    assert report.original_graph.link("B1", "B2")["cost"] == pytest.approx(15 * 1.4)
    assert report.baseline.avg_cost == 20
    assert "no failures" in report.summary


def test_explicit_od_pairs_and_time_of_day(service):
    report = service.run(ScenarioRequest(
        od_pairs=[ODPair("B1", "B2")],
        time_of_day="evening",
        budget=0,
    ))
    assert report.coefficients.label.startswith("Evening")
    assert report.baseline.avg_time == pytest.approx(16.5)
    assert report.summary.startswith("[Evening Peak")


def test_invalid_request_values(service):
    with pytest.raises(ValueError):
        service.run(ScenarioRequest(objective="speed"))
    with pytest.raises(ValueError):
        service.run(ScenarioRequest(budget=-1))


def test_report_export_and_render(service, tmp_path):
    report = service.run(ScenarioRequest(failure_kind=FailureKind.NODE, failure_targets=["M2"]))

    path = LocalFileStore().write_json(str(tmp_path / "out" / "report.json"), report.to_dict())
    data = json.loads((tmp_path / "out" / "report.json").read_text(encoding="utf-8"))
    assert path.endswith("report.json")
    assert data["failure"] == {"kind": "node", "targets": ["M2"], "description": "node failure: M2"}
    assert data["baseline"]["total_pairs"] == 10
    # unreachable routes are written as null rather than Infinity
    unreachable = [r for r in data["scenario"]["results"] if not r["reachable"]]
    assert unreachable and all(r["time"] is None for r in unreachable)

    out = io.StringIO()
    ConsoleReporter(use_color=False, stream=out).render(report)
    text = out.getvalue()
    assert "Transport Network Resilience" in text
    assert "Avg time (min)" in text
    assert report.summary in text
    assert "\033[" not in text
