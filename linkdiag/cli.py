"""Command line interface for link fault diagnosis."""

from __future__ import annotations

import argparse
import logging
from typing import Any, Optional, Tuple

from .faults import FaultConfigError, FaultConfiguration
from .monitor import DEFAULT_AGREEMENT_SPAN, LinkMonitor, MonitorError
from .rng import RandomSource
from .scenarios import SCENARIOS, get_scenario
from .simulator import LinkSimulator
from .utils import RunSummary
from .window import DEFAULT_WINDOW_SIZE


def _resolve_config(args: argparse.Namespace) -> Tuple[FaultConfiguration, Optional[str]]:
    if args.scenario:
        scenario = get_scenario(args.scenario)
        return scenario["config"], scenario["expected_cause"].value
    return FaultConfiguration.parse(args.config or ""), None


def _build_monitor(args: argparse.Namespace) -> Tuple[LinkMonitor, Optional[str]]:
    config, expected = _resolve_config(args)
    simulator = LinkSimulator(config=config, rng=RandomSource(seed=args.seed))
    monitor = LinkMonitor(simulator=simulator, window_size=args.window)
    monitor.run(args.steps)
    return monitor, expected


def _run_command(args: argparse.Namespace) -> int:
    try:
        monitor, expected = _build_monitor(args)
    except (FaultConfigError, MonitorError, KeyError, ValueError) as exc:
        print(f"Error: {exc}")
        return 2

    summary = RunSummary.from_monitor(monitor, scenario=args.scenario, seed=args.seed, expected_cause=expected)
    if args.json:
        print(summary.to_json())
        return 0

    print(f"Faults: {summary.config.describe()}")
    latest = monitor.latest
    if latest is None:
        print("No diagnosis yet.")
        return 0

    diag = latest.diagnosis
    print(f"Diagnosis at t={latest.t}: {diag.explanation}")
    print("Ranked causes:")
    for cause, prob in diag.ranked_causes:
        print(f"  {cause.label()}: {prob * 100:.1f}%")
    print("Evidence:")
    for ev in diag.contributing_rules:
        print(f"  {ev.root_cause.label()} (score {ev.score:.2f}): {ev.explanation}")
    print("Suggested actions:")
    for action in diag.suggested_actions:
        print(f"  - {action}")
    span = min(len(monitor.records), DEFAULT_AGREEMENT_SPAN)
    print(f"Agreement (last {span} samples): {summary.agreement * 100:.1f}%")
    return 0


def _trace_command(args: argparse.Namespace) -> int:
    try:
        monitor, _ = _build_monitor(args)
    except (FaultConfigError, MonitorError, KeyError, ValueError) as exc:
        print(f"Error: {exc}")
        return 2

    print(f"{'t':>5}  {'diagnosis':<16} {'conf':>6}  true faults")
    for record in monitor.records:
        diag = record.diagnosis
        print(
            f"{record.t:>5}  {diag.primary_cause.label():<16} {diag.confidence * 100:>5.1f}%  "
            f"{record.true_faults_label()}"
        )
    return 0


def _scenarios_command(args: argparse.Namespace) -> int:
    for name, scenario in SCENARIOS.items():
        print(f"{name}: {scenario['description']} [{scenario['config'].describe()}]")
    return 0


def _add_run_arguments(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--config", default=None, help="Fault knobs, e.g. 'jammer=2.0,sync=0.1'")
    source.add_argument("--scenario", default=None, help="Name of a preset scenario")
    parser.add_argument("--steps", type=int, default=60, help="Number of simulation ticks")
    parser.add_argument("--window", type=int, default=DEFAULT_WINDOW_SIZE, help="Diagnosis window size")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Simulate a degrading link and diagnose its root cause")
    sub = parser.add_subparsers(dest="command", required=True)

    run_parser = sub.add_parser("run", help="Run the simulator and report the final diagnosis")
    _add_run_arguments(run_parser)
    run_parser.add_argument("--json", action="store_true", help="Output JSON")
    run_parser.set_defaults(func=_run_command)

    trace_parser = sub.add_parser("trace", help="Print the diagnosis for every tick")
    _add_run_arguments(trace_parser)
    trace_parser.set_defaults(func=_trace_command)

    scenarios_parser = sub.add_parser("scenarios", help="List preset scenarios")
    scenarios_parser.set_defaults(func=_scenarios_command, verbose=False)

    return parser


def main(argv: Any = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
