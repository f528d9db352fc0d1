"""
Tests for the greedy recommender.

Two slow bus corridors H1-X-H2 and H3-Y-H4 (60 min each end to end); a
direct hub link on either corridor cuts that pair to a few minutes.
"""

import pytest

from conftest import bus, link

from transit_resilience.core.models import Objective, ODPair
from transit_resilience.config.settings import TIME_OF_DAY_PRESETS
from transit_resilience.simulation.graph_builder import build_graph
from transit_resilience.analysis.metrics import compute_metrics
from transit_resilience.recommendation.models import CandidateLink, CandidateStrategy
from transit_resilience.recommendation.greedy import (
    GreedyRecommender, greedy_recommendation, link_profile, insert_link,
)


def candidate(u, v, strategy=CandidateStrategy.HUB_NEIGHBOR, distance=2.2):
    return CandidateLink(u, v, strategy, distance, strategy.priority, u, v)


@pytest.fixture
def corridor_records():
    nodes = [
        bus("H1", 0.00, type="hub"), bus("X", 0.01), bus("H2", 0.02, type="hub"),
        bus("H3", 0.00, type="hub", lat=0.5), bus("Y", 0.01, lat=0.5), bus("H4", 0.02, type="hub", lat=0.5),
        bus("Z", 0.00, lat=-0.5),
    ]
    edges = [
        link("H1", "X", "bus", 30.0, cost=10.0),
        link("X", "H2", "bus", 30.0, cost=10.0),
        link("H3", "Y", "bus", 30.0, cost=10.0),
        link("Y", "H4", "bus", 30.0, cost=10.0),
    ]
    return nodes, edges


@pytest.fixture
def corridors(corridor_records):
    return build_graph(*corridor_records, Objective.TIME)


@pytest.fixture
def od_pairs():
    return [ODPair("H1", "H2"), ODPair("H3", "H4")]


HUB_TIME = 2.2 / 35 * 60


class TestLinkProfile:

    def test_hub_links_run_express_buses(self):
        profile = link_profile(candidate("A", "B"))
        assert profile.mode == "bus"
        assert profile.time == pytest.approx(HUB_TIME)
        assert profile.cost == pytest.approx(2.2 * 3)

    def test_cross_rail_links_are_walks(self):
        profile = link_profile(candidate("A", "B", CandidateStrategy.CROSS_RAIL, distance=1.0))
        assert profile.mode == "walking"
        assert profile.time == pytest.approx(12.0)
        assert profile.cost == 0

    def test_od_links_run_regular_buses(self):
        profile = link_profile(candidate("A", "B", CandidateStrategy.OD_DRIVEN, distance=5.0))
        assert profile.time == pytest.approx(12.0)
        assert profile.cost == pytest.approx(12.5)

    def test_time_of_day_scales_time_and_bus_fares(self):
        evening = TIME_OF_DAY_PRESETS["evening"]
        bus_link = link_profile(candidate("A", "B", CandidateStrategy.EXPRESS_HUB, distance=7.0), evening)
        assert bus_link.time == pytest.approx(12.0 * 1.65)
        assert bus_link.cost == pytest.approx(21.0 * 1.35)
        assert bus_link.base_time == pytest.approx(12.0)

        walk = link_profile(candidate("A", "B", CandidateStrategy.CROSS_RAIL, distance=1.0), evening)
        assert walk.time == pytest.approx(12.0 * 1.65)
        assert walk.cost == 0

    def test_insert_link_attributes(self, corridors):
        c = candidate("H1", "H2")
        assert insert_link(corridors, c, link_profile(c), Objective.TRANSFERS, reason="recommended")
        data = corridors.link("H1", "H2")
        assert data["inter_modal"] is True
        assert data["reason"] == "recommended_hub_neighbor"
        assert data["weight"] == pytest.approx(HUB_TIME * 0.01 + 10000)
        assert not insert_link(corridors, c, link_profile(c), Objective.TIME)


class TestGreedySelection:

    def test_picks_improving_links_in_order(self, corridors, od_pairs):
        candidates = [candidate("Z", "X"), candidate("H3", "H4"), candidate("H1", "H2")]
        result = greedy_recommendation(corridors, candidates, od_pairs, budget=2, objective="time")

        chosen = [(r.from_id, r.to_id) for r in result.recommendations]
        # equal improvements: the first candidate in list order wins the round
        assert chosen == [("H3", "H4"), ("H1", "H2")]
        assert result.final_metrics.avg_time == pytest.approx(HUB_TIME)
        assert result.final_graph.has_link("H1", "H2")

    def test_never_exceeds_budget(self, corridors, od_pairs):
        candidates = [candidate("H1", "H2"), candidate("H3", "H4")]
        result = greedy_recommendation(corridors, candidates, od_pairs, budget=1)
        assert len(result.recommendations) == 1

    def test_stops_early_without_improvement(self, corridors, od_pairs):
        candidates = [candidate("H1", "H2"), candidate("Z", "X"), candidate("Z", "Y")]
        result = greedy_recommendation(corridors, candidates, od_pairs, budget=3)
        assert [(r.from_id, r.to_id) for r in result.recommendations] == [("H1", "H2")]

    def test_already_linked_candidate_skipped(self, corridors, od_pairs):
        result = greedy_recommendation(corridors, [candidate("H1", "X")], od_pairs, budget=2)
        assert result.recommendations == []

    def test_failed_graph_untouched(self, corridors, od_pairs):
        links = corridors.number_of_links()
        greedy_recommendation(corridors, [candidate("H1", "H2")], od_pairs, budget=1)
        assert corridors.number_of_links() == links
        assert not corridors.has_link("H1", "H2")

    def test_zero_budget_and_no_candidates(self, corridors, od_pairs):
        before = compute_metrics(corridors, od_pairs, "time")
        for budget, candidates in ((0, [candidate("H1", "H2")]), (3, [])):
            result = greedy_recommendation(corridors, candidates, od_pairs, budget)
            assert result.recommendations == []
            assert result.final_metrics.to_dict() == before.to_dict()

    def test_negative_budget_rejected(self, corridors, od_pairs):
        with pytest.raises(ValueError):
            greedy_recommendation(corridors, [], od_pairs, budget=-1)

    def test_recommendation_records_metrics(self, corridors, od_pairs):
        result = greedy_recommendation(corridors, [candidate("H1", "H2")], od_pairs, budget=1)
        rec = result.recommendations[0]
        assert rec.mode == "bus"
        assert rec.metrics.avg_time == pytest.approx((HUB_TIME + 60) / 2)
        assert rec.improvement == pytest.approx(60 - (HUB_TIME + 60) / 2)
        assert rec.to_dict()["type"] == "hub_neighbor"


class TestReferenceValue:

    def test_marginal_improvements_by_default(self, corridors, od_pairs):
        candidates = [candidate("H1", "H2"), candidate("H3", "H4")]
        result = greedy_recommendation(corridors, candidates, od_pairs, budget=2)
        first, second = result.recommendations
        assert first.improvement == pytest.approx(60 - (HUB_TIME + 60) / 2)
        assert second.improvement == pytest.approx((HUB_TIME + 60) / 2 - HUB_TIME)

    def test_cumulative_reference(self, corridors, od_pairs):
        candidates = [candidate("H1", "H2"), candidate("H3", "H4")]
        result = greedy_recommendation(
            corridors, candidates, od_pairs, budget=2, cumulative_reference=True
        )
        second = result.recommendations[1]
        assert second.improvement == pytest.approx(60 - HUB_TIME)

    def test_cost_objective(self, corridor_records, od_pairs):
        by_cost = build_graph(*corridor_records, Objective.COST)
        result = greedy_recommendation(
            by_cost, [candidate("H1", "H2")], od_pairs, budget=1, objective=Objective.COST
        )
        assert result.recommendations[0].improvement == pytest.approx(20 - (2.2 * 3 + 20) / 2)


class TestProgress:

    def test_one_update_per_candidate_evaluated(self, corridors, od_pairs):
        updates = []
        candidates = [candidate("H1", "H2"), candidate("Z", "X")]
        GreedyRecommender(od_pairs, progress_callback=updates.append).recommend(corridors, candidates, budget=3)

        # round 1 sees both candidates, round 2 the remaining one and stops
        assert [(u.iteration, u.candidate_index, u.total_candidates) for u in updates] == [
            (0, 0, 2), (0, 1, 2), (1, 0, 1),
        ]
        assert all(u.budget == 3 for u in updates)
