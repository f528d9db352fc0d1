"""
Greedy Recommender

Selects, one round at a time, the candidate link whose insertion gives the
lowest objective value over all OD pairs, until the budget is spent or no
remaining candidate improves on the reference value.

Each candidate is evaluated on a scratch copy of the working graph; only
the winner of a round is committed to the working graph.

Reference Value:
    By default the reference is the working graph's value at the start of
    each round, so every recorded improvement is marginal and a link that
    would make the working graph worse is never accepted. With
    ``cumulative_reference=True`` the reference stays at the failed
    network's value for the whole run and improvements are cumulative.
"""

from __future__ import annotations
import logging
from typing import Callable, List, Optional, Sequence

from transit_resilience.core.models import Objective, ODPair, TimeOfDayCoefficients, STANDARD_COEFFICIENTS
from transit_resilience.core.layers import BUS, WALKING
from transit_resilience.analysis.metrics import MetricsBundle, compute_metrics
from transit_resilience.simulation.graph import TransportGraph
from transit_resilience.simulation.graph_builder import edge_weight
from .models import (
    CandidateLink, CandidateStrategy, LinkProfile, ProgressUpdate,
    Recommendation, RecommendationResult,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressUpdate], None]

EXPRESS_BUS_SPEED_KMH = 35.0
EXPRESS_BUS_FARE_PER_KM = 3.0
WALK_SPEED_KMH = 5.0
DEFAULT_BUS_SPEED_KMH = 25.0
DEFAULT_BUS_FARE_PER_KM = 2.5


def link_profile(candidate: CandidateLink, coefficients: Optional[TimeOfDayCoefficients] = None) -> LinkProfile:
    """Mode, time (minutes) and fare a candidate link would run with."""
    coeff = coefficients or STANDARD_COEFFICIENTS
    dist = candidate.distance

    if candidate.strategy in (CandidateStrategy.HUB_NEIGHBOR, CandidateStrategy.EXPRESS_HUB):
        base_time = dist / EXPRESS_BUS_SPEED_KMH * 60
        return LinkProfile(
            mode=BUS,
            time=base_time * coeff.time_multiplier,
            cost=dist * EXPRESS_BUS_FARE_PER_KM * coeff.cost_multiplier,
            base_time=base_time,
        )
    if candidate.strategy is CandidateStrategy.CROSS_RAIL:
        base_time = dist / WALK_SPEED_KMH * 60
        return LinkProfile(
            mode=WALKING,
            time=base_time * coeff.time_multiplier,
            cost=0.0,
            base_time=base_time,
        )
    base_time = dist / DEFAULT_BUS_SPEED_KMH * 60
    return LinkProfile(
        mode=BUS,
        time=base_time * coeff.time_multiplier,
        cost=dist * DEFAULT_BUS_FARE_PER_KM * coeff.cost_multiplier,
        base_time=base_time,
    )


def insert_link(
    graph: TransportGraph,
    candidate: CandidateLink,
    profile: LinkProfile,
    objective: Objective,
    reason: str = "candidate",
) -> bool:
    """Add a candidate link to ``graph``; False if the pair is already linked."""
    return graph.add_link(
        candidate.from_id,
        candidate.to_id,
        mode=profile.mode,
        layer=profile.mode,
        distance=candidate.distance,
        time=profile.time,
        cost=profile.cost,
        base_time=profile.base_time,
        base_cost=profile.cost,
        original_cost=profile.cost,
        inter_modal=True,
        intra_or_inter="inter",
        weight=edge_weight(objective, profile.time, profile.cost, profile.base_time, True),
        reason=f"{reason}_{candidate.strategy.value}",
    )


class GreedyRecommender:
    """
    Budget-constrained greedy link selection.

    Example:
        >>> rec = GreedyRecommender(od_pairs, Objective.TIME, coefficients=evening)
        >>> result = rec.recommend(failed_graph, candidates, budget=2)
        >>> [(r.from_id, r.to_id) for r in result.recommendations]
        [('Hub_A', 'Hub_B')]
    """

    def __init__(
        self,
        od_pairs: Sequence[ODPair],
        objective: "Objective | str" = Objective.TIME,
        coefficients: Optional[TimeOfDayCoefficients] = None,
        progress_callback: Optional[ProgressCallback] = None,
        cumulative_reference: bool = False,
    ):
        self.od_pairs = list(od_pairs)
        self.objective = Objective.from_string(objective)
        self.coefficients = coefficients or STANDARD_COEFFICIENTS
        self.progress_callback = progress_callback
        self.cumulative_reference = cumulative_reference

    def recommend(
        self,
        failed_graph: TransportGraph,
        candidates: Sequence[CandidateLink],
        budget: int,
    ) -> RecommendationResult:
        if budget < 0:
            raise ValueError(f"budget must be >= 0, got {budget}")

        working = failed_graph.copy()
        reference = compute_metrics(working, self.od_pairs, self.objective).value(self.objective)
        remaining: List[CandidateLink] = list(candidates)
        selected: List[Recommendation] = []

        for iteration in range(budget):
            if not remaining:
                break

            choice = self._best_candidate(working, remaining, reference, iteration, budget)
            if choice is None:
                logger.info(f"Round {iteration + 1}: no candidate improves {reference:.4f}, stopping")
                break

            candidate, profile, improvement, metrics = choice
            insert_link(working, candidate, profile, self.objective, reason="recommended")
            selected.append(Recommendation(
                candidate=candidate,
                mode=profile.mode,
                time=profile.time,
                cost=profile.cost,
                improvement=improvement,
                metrics=metrics,
            ))
            remaining = [c for c in remaining if c is not candidate]
            logger.info(
                f"Round {iteration + 1}: selected {candidate.from_id} - {candidate.to_id} "
                f"({candidate.strategy.value}, {profile.mode}), improvement {improvement:.4f}"
            )

            if not self.cumulative_reference:
                reference = metrics.value(self.objective)

        final_metrics = compute_metrics(working, self.od_pairs, self.objective)
        return RecommendationResult(
            recommendations=selected,
            final_graph=working,
            final_metrics=final_metrics,
        )

    def _best_candidate(self, working, remaining, reference, iteration, budget):
        best = None
        best_improvement = 0.0

        for index, candidate in enumerate(remaining):
            if self.progress_callback is not None:
                self.progress_callback(ProgressUpdate(
                    iteration=iteration,
                    candidate_index=index,
                    total_candidates=len(remaining),
                    budget=budget,
                ))

            profile = link_profile(candidate, self.coefficients)
            scratch = working.copy()
            if not insert_link(scratch, candidate, profile, self.objective):
                logger.debug(f"Candidate {candidate.from_id} - {candidate.to_id} not insertable, skipped")
                continue

            metrics = compute_metrics(scratch, self.od_pairs, self.objective)
            improvement = reference - metrics.value(self.objective)
            logger.debug(
                f"Candidate {candidate.from_id} - {candidate.to_id}: "
                f"value {metrics.value(self.objective):.4f}, improvement {improvement:.4f}"
            )
            if improvement > best_improvement:
                best_improvement = improvement
                best = (candidate, profile, improvement, metrics)

        return best


def greedy_recommendation(
    failed_graph: TransportGraph,
    candidates: Sequence[CandidateLink],
    od_pairs: Sequence[ODPair],
    budget: int,
    objective: "Objective | str" = Objective.TIME,
    progress_callback: Optional[ProgressCallback] = None,
    coefficients: Optional[TimeOfDayCoefficients] = None,
    cumulative_reference: bool = False,
) -> RecommendationResult:
    """Greedy budget-constrained link selection; see GreedyRecommender."""
    recommender = GreedyRecommender(
        od_pairs,
        objective=objective,
        coefficients=coefficients,
        progress_callback=progress_callback,
        cumulative_reference=cumulative_reference,
    )
    return recommender.recommend(failed_graph, candidates, budget)
