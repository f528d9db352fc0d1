"""
Console Reporter Adapter

Terminal rendering of scenario reports, with optional ANSI colors.
"""

import math
import sys
from typing import List, Any, Optional

from transit_resilience.analysis.impact import calculate_delta
from transit_resilience.analysis.metrics import MetricsBundle


class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    HEADER = "\033[95m"


def _fmt(value: float, digits: int = 2) -> str:
    if value is None or (isinstance(value, float) and math.isinf(value)):
        return "∞"
    return f"{value:.{digits}f}"


class ConsoleReporter:
    """Formatted terminal output with colors and tables."""

    def __init__(self, use_color: bool = True, stream=None):
        self.use_color = use_color
        self.stream = stream or sys.stdout

    def _color(self, text: str, color: str) -> str:
        if self.use_color:
            return f"{color}{text}{Colors.RESET}"
        return text

    def _print(self, text: str = "") -> None:
        print(text, file=self.stream)

    def info(self, message: str) -> None:
        self._print(f"ℹ️  {message}")

    def success(self, message: str) -> None:
        self._print(self._color(f"✅ {message}", Colors.GREEN))

    def warning(self, message: str) -> None:
        self._print(self._color(f"⚠️  {message}", Colors.YELLOW))

    def error(self, message: str) -> None:
        print(self._color(f"❌ {message}", Colors.RED), file=sys.stderr)

    def table(self, headers: List[str], rows: List[List[Any]]) -> None:
        """Display tabular data."""
        if not headers or not rows:
            return

        widths = [len(h) for h in headers]
        for row in rows:
            for i, cell in enumerate(row):
                if i < len(widths):
                    widths[i] = max(widths[i], len(str(cell)))

        header_line = " | ".join(str(h).ljust(widths[i]) for i, h in enumerate(headers))
        self._print(self._color(header_line, Colors.BOLD))
        self._print("-" * len(header_line))
        for row in rows:
            self._print(" | ".join(
                str(cell).ljust(widths[i]) if i < len(widths) else str(cell)
                for i, cell in enumerate(row)
            ))

    def section(self, title: str) -> None:
        line = "=" * (len(title) + 4)
        self._print()
        self._print(self._color(line, Colors.HEADER))
        self._print(self._color(f"  {title}  ", Colors.HEADER + Colors.BOLD))
        self._print(self._color(line, Colors.HEADER))
        self._print()

    # =========================================================================
    # Scenario Report
    # =========================================================================

    def metrics_table(self, baseline: MetricsBundle, scenario: MetricsBundle, final: Optional[MetricsBundle] = None) -> None:
        headers = ["Metric", "Baseline", "After Failure", "Δ %"]
        if final is not None:
            headers += ["After Fix", "Δ % (fix)"]

        def row(label, attr, digits=2):
            b, s = getattr(baseline, attr), getattr(scenario, attr)
            cells = [label, _fmt(b, digits), _fmt(s, digits), _fmt(calculate_delta(b, s), 1)]
            if final is not None:
                f = getattr(final, attr)
                cells += [_fmt(f, digits), _fmt(calculate_delta(s, f), 1)]
            return cells

        rows = [
            row("Avg time (min)", "avg_time"),
            row("Avg cost", "avg_cost"),
            row("Avg transfers", "avg_transfers"),
        ]
        disconnected = ["Disconnected", baseline.disconnected, scenario.disconnected, ""]
        if final is not None:
            disconnected += [final.disconnected, ""]
        rows.append(disconnected)
        self.table(headers, rows)

    def render(self, report) -> None:
        """Print a ScenarioReport."""
        self.section("Transport Network Resilience")
        self.info(f"Objective: {report.objective.value} | {report.coefficients.label} | "
                  f"{len(report.od_pairs)} OD pair(s)")
        self.info(f"Failure: {report.failure.description}")

        self.section("Metrics")
        self.metrics_table(report.baseline, report.scenario, report.final_metrics)

        if report.affected:
            self.section("Most Affected OD Pairs")
            self.table(
                ["From", "To", "Before", "After", "Δ %"],
                [[a.source_name, a.target_name, _fmt(a.time_before), _fmt(a.time_after), _fmt(a.delta, 1)]
                 for a in report.affected],
            )

        if report.recommendations:
            self.section("Recommended Links")
            self.table(
                ["#", "From", "To", "Type", "Mode", "Dist (km)", "Time", "Cost", "Improvement"],
                [[i + 1, r.candidate.from_name, r.candidate.to_name, r.candidate.strategy.value,
                  r.mode, _fmt(r.candidate.distance), _fmt(r.time), _fmt(r.cost), _fmt(r.improvement, 4)]
                 for i, r in enumerate(report.recommendations)],
            )
        elif report.candidates:
            self.warning(f"No improving link among {len(report.candidates)} candidate(s)")

        self._print()
        self.success(report.summary)
