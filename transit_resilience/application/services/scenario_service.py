"""
Scenario Service

Runs one complete resilience analysis over a loaded dataset:

    build graph -> baseline metrics -> apply failure -> post-failure
    metrics -> top affected pairs -> candidates -> greedy recommendation

Progress is reported between phases so a host UI can repaint; the run is
synchronous and always completes (or raises) once started.
"""

from typing import Any, Callable, Dict, List, Optional, Sequence
from dataclasses import dataclass, field
import logging

from transit_resilience.config.settings import Settings
from transit_resilience.core.models import (
    Objective, FailureKind, NodeRecord, EdgeRecord, ODPair, RouteContext,
    TimeOfDayCoefficients,
)
from transit_resilience.simulation.graph import TransportGraph
from transit_resilience.simulation.graph_builder import build_graph
from transit_resilience.simulation.failure_simulator import FailureSimulator
from transit_resilience.simulation.models import FailureScenario
from transit_resilience.analysis.metrics import MetricsBundle, compute_metrics, generate_od_sample
from transit_resilience.analysis.impact import AffectedPair, top_affected_pairs, summarize_scenario
from transit_resilience.recommendation.models import CandidateLink, ProgressUpdate, Recommendation
from transit_resilience.recommendation.candidates import generate_candidates
from transit_resilience.recommendation.greedy import greedy_recommendation

logger = logging.getLogger(__name__)


@dataclass
class ScenarioProgress:
    message: str
    percent: int


ScenarioProgressCallback = Callable[[ScenarioProgress], None]


@dataclass
class ScenarioRequest:
    """User choices for one run; unset fields fall back to Settings."""
    source: Optional[str] = None
    target: Optional[str] = None
    failure_kind: FailureKind = FailureKind.NONE
    failure_targets: Sequence[Any] = field(default_factory=list)
    objective: Optional[str] = None
    time_of_day: Optional[str] = None
    budget: Optional[int] = None
    od_pairs: Optional[List[ODPair]] = None

    @property
    def single_route(self) -> bool:
        return bool(self.source) and bool(self.target)


@dataclass
class ScenarioReport:
    """Everything one run produced, for rendering."""
    objective: Objective
    coefficients: TimeOfDayCoefficients
    od_pairs: List[ODPair]
    original_graph: TransportGraph
    failed_graph: TransportGraph
    baseline: MetricsBundle
    scenario: MetricsBundle
    failure: FailureScenario
    affected: List[AffectedPair] = field(default_factory=list)
    candidates: List[CandidateLink] = field(default_factory=list)
    recommendations: List[Recommendation] = field(default_factory=list)
    final_graph: Optional[TransportGraph] = None
    final_metrics: Optional[MetricsBundle] = None
    summary: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "objective": self.objective.value,
            "time_of_day": self.coefficients.to_dict(),
            "failure": {
                "kind": self.failure.kind.value,
                "targets": [t if isinstance(t, str) else list(t) for t in self.failure.targets],
                "description": self.failure.description,
            },
            "graphs": {
                "original": self.original_graph.get_summary(),
                "failed": self.failed_graph.get_summary(),
                "final": self.final_graph.get_summary() if self.final_graph else None,
            },
            "baseline": self.baseline.to_dict(),
            "scenario": self.scenario.to_dict(),
            "final": self.final_metrics.to_dict() if self.final_metrics else None,
            "top_affected": [a.to_dict() for a in self.affected],
            "candidates": [c.to_dict() for c in self.candidates],
            "recommendations": [r.to_dict() for r in self.recommendations],
            "summary": self.summary,
        }


class ScenarioService:
    """
    Orchestrates builder, failure simulator, metrics and recommender.

    Example:
        >>> service = ScenarioService(nodes, edges, Settings(budget=2))
        >>> report = service.run(ScenarioRequest(failure_kind=FailureKind.LAYER,
        ...                                      failure_targets=["metro"]))
        >>> report.scenario.disconnected >= report.baseline.disconnected
        True
    """

    def __init__(self, nodes: Sequence[NodeRecord], edges: Sequence[EdgeRecord], settings: Optional[Settings] = None):
        self.nodes = list(nodes)
        self.edges = list(edges)
        self.settings = settings or Settings()
        self._names = {}
        for n in self.nodes:
            self._names.setdefault(n.node_id, n.display_name)

    def run(self, request: ScenarioRequest, progress_callback: Optional[ScenarioProgressCallback] = None) -> ScenarioReport:
        def report(message: str, percent: int) -> None:
            logger.info(f"[{percent:3d}%] {message}")
            if progress_callback is not None:
                progress_callback(ScenarioProgress(message, percent))

        objective = Objective.from_string(request.objective or self.settings.objective)
        coefficients = self.settings.coefficients(request.time_of_day)
        budget = self.settings.budget if request.budget is None else request.budget
        if budget < 0:
            raise ValueError(f"budget must be >= 0, got {budget}")

        report("Building network graph...", 10)
        context = RouteContext(request.source, request.target) if request.single_route else None
        graph = build_graph(self.nodes, self.edges, objective, coefficients, context)
        od_pairs = self._od_pairs(request)

        report("Computing baseline metrics...", 20)
        baseline = compute_metrics(graph, od_pairs, objective)

        report("Applying failure scenario...", 35)
        failure = FailureScenario(kind=request.failure_kind, targets=request.failure_targets)
        failed = FailureSimulator(graph).simulate(failure).graph

        report("Computing scenario metrics...", 50)
        scenario = compute_metrics(failed, od_pairs, objective)
        affected = top_affected_pairs(baseline, scenario)

        result = ScenarioReport(
            objective=objective,
            coefficients=coefficients,
            od_pairs=od_pairs,
            original_graph=graph,
            failed_graph=failed,
            baseline=baseline,
            scenario=scenario,
            failure=failure,
            affected=affected,
        )

        if budget > 0:
            report("Generating candidate links...", 60)
            result.candidates = generate_candidates(self.nodes, graph, failed, scenario.results)

            report("Evaluating candidates (greedy selection)...", 70)

            def on_candidate(update: ProgressUpdate) -> None:
                if progress_callback is None:
                    return
                # 70-90 spread over all rounds so the bar never moves backwards
                done = update.iteration + update.candidate_index / max(update.total_candidates, 1)
                percent = 70 + int(20 * done / max(update.budget, 1))
                progress_callback(ScenarioProgress(
                    f"Evaluating candidate {update.candidate_index + 1}/{update.total_candidates} "
                    f"(iteration {update.iteration + 1}/{update.budget})",
                    percent,
                ))

            recommended = greedy_recommendation(
                failed,
                result.candidates,
                od_pairs,
                budget,
                objective,
                progress_callback=on_candidate,
                coefficients=coefficients,
                cumulative_reference=self.settings.cumulative_reference,
            )
            result.recommendations = recommended.recommendations
            result.final_graph = recommended.final_graph
            result.final_metrics = recommended.final_metrics
            report("Complete!", 100)
        else:
            report("Complete (no recommendations requested)", 100)

        result.summary = summarize_scenario(
            baseline,
            scenario,
            failure_kind=failure.kind,
            failure_targets=failure.targets,
            time_of_day_label=coefficients.label,
            final=result.final_metrics,
            links_added=len(result.recommendations),
        )
        return result

    def _od_pairs(self, request: ScenarioRequest) -> List[ODPair]:
        if request.od_pairs is not None:
            return list(request.od_pairs)
        if request.single_route:
            return [ODPair(
                request.source,
                request.target,
                self._names.get(request.source, request.source),
                self._names.get(request.target, request.target),
            )]
        return generate_od_sample(self.nodes, self.settings.od_sample_size, seed=self.settings.seed)
