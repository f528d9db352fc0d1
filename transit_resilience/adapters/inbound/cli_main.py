#!/usr/bin/env python3
"""
Transit Resilience CLI

Loads a node/edge dataset, applies a failure scenario, and recommends
links that recover the lost performance.

Usage:
    transit-resilience --nodes nodes.csv --edges edges.csv \\
        --failure layer --targets metro --budget 2 --time-of-day morning

    transit-resilience --nodes nodes.csv --edges edges.csv \\
        --source M1 --target M9 --failure node --targets M4,M5 \\
        --objective transfers --output report.json

Edge targets use the "from_to" key form, e.g. --failure edge --targets M1_M2.
"""

import argparse
import logging
import sys
from typing import List, Optional

from transit_resilience.config.settings import Settings
from transit_resilience.core.models import FailureKind
from transit_resilience.application.services.scenario_service import (
    ScenarioService, ScenarioRequest, ScenarioProgress,
)
from transit_resilience.adapters.outbound.csv_dataset import load_dataset
from transit_resilience.adapters.outbound.file_store import LocalFileStore
from transit_resilience.adapters.outbound.console_reporter import ConsoleReporter


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="transit-resilience",
        description="Multi-modal transport resilience analysis and link recommendation.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    data = parser.add_argument_group("Dataset")
    data.add_argument("--nodes", required=True, metavar="CSV", help="Node table")
    data.add_argument("--edges", required=True, metavar="CSV", help="Edge table")

    route = parser.add_argument_group("Route")
    route.add_argument("--source", "-s", metavar="NODE_ID", help="Single-route origin")
    route.add_argument("--target", "-t", metavar="NODE_ID", help="Single-route destination")
    route.add_argument("--sample-size", type=int, help="OD pairs sampled when no route is given")
    route.add_argument("--seed", type=int, help="Seed for OD sampling")

    scenario = parser.add_argument_group("Scenario")
    scenario.add_argument(
        "--failure", "-f",
        choices=[k.value for k in FailureKind],
        default=FailureKind.NONE.value,
        help="Failure kind",
    )
    scenario.add_argument("--targets", default="", help="Comma-separated failure targets")
    scenario.add_argument("--objective", choices=["time", "cost", "transfers"], help="Optimisation objective")
    scenario.add_argument("--time-of-day", help="Time-of-day preset (morning, afternoon, evening, night, standard)")
    scenario.add_argument("--budget", "-k", type=int, help="Number of links to recommend")
    scenario.add_argument("--config", "-c", metavar="YAML", help="Settings file")

    output = parser.add_argument_group("Output")
    output.add_argument("--output", "-o", metavar="FILE", help="Export report to JSON")
    output.add_argument("--quiet", "-q", action="store_true", help="Minimal output")
    output.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    output.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    return parser


def _load_settings(args) -> Settings:
    settings = Settings.from_env()
    if args.config:
        settings = Settings.from_yaml(args.config, base=settings)
    overrides = {}
    if args.sample_size is not None:
        overrides["od_sample_size"] = args.sample_size
    if args.seed is not None:
        overrides["seed"] = args.seed
    if overrides:
        settings = Settings.from_dict(overrides, base=settings)
    return settings


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    reporter = ConsoleReporter(use_color=not args.no_color)

    try:
        settings = _load_settings(args)

        log_level = (
            logging.WARNING if args.quiet
            else logging.DEBUG if args.verbose
            else getattr(logging, str(settings.log_level).upper(), logging.INFO)
        )
        logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s")

        nodes, edges = load_dataset(args.nodes, args.edges)
        request = ScenarioRequest(
            source=args.source,
            target=args.target,
            failure_kind=FailureKind.from_string(args.failure),
            failure_targets=[t.strip() for t in args.targets.split(",") if t.strip()],
            objective=args.objective,
            time_of_day=args.time_of_day,
            budget=args.budget,
        )

        def on_progress(update: ScenarioProgress) -> None:
            if args.verbose:
                reporter.info(f"[{update.percent:3d}%] {update.message}")

        report = ScenarioService(nodes, edges, settings).run(request, progress_callback=on_progress)

        if args.quiet:
            print(report.summary)
        else:
            reporter.render(report)

        if args.output:
            LocalFileStore().write_json(args.output, report.to_dict())
            if not args.quiet:
                reporter.success(f"Report saved to: {args.output}")
        return 0

    except KeyboardInterrupt:
        print("\nAnalysis interrupted.")
        return 130
    except (FileNotFoundError, ValueError) as e:
        reporter.error(f"Error: {e}")
        if args.verbose:
            logging.exception("Analysis failed")
        return 1


if __name__ == "__main__":
    sys.exit(main())
