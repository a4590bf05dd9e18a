"""Run preset fault scenarios and write one JSON summary per scenario."""

from __future__ import annotations

import argparse
from pathlib import Path

from linkdiag.monitor import LinkMonitor
from linkdiag.rng import RandomSource
from linkdiag.scenarios import SCENARIOS, get_scenario
from linkdiag.simulator import LinkSimulator
from linkdiag.utils import RunSummary


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--scenarios", nargs="+", default=list(SCENARIOS), help="Scenario names (default: all)")
    ap.add_argument("--outdir", default="artifacts", help="Output directory")
    ap.add_argument("--steps", type=int, default=200)
    ap.add_argument("--window", type=int, default=20)
    ap.add_argument("--seed", type=int, default=0)
    args = ap.parse_args()

    outdir = Path(args.outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    for name in args.scenarios:
        scenario = get_scenario(name)
        simulator = LinkSimulator(config=scenario["config"], rng=RandomSource(seed=args.seed))
        monitor = LinkMonitor(simulator=simulator, window_size=args.window)
        monitor.run(args.steps)
        summary = RunSummary.from_monitor(
            monitor, scenario=name, seed=args.seed, expected_cause=scenario["expected_cause"].value
        )
        (outdir / f"{name}.json").write_text(summary.to_json())
        print(f"{name}: agreement {summary.agreement * 100:.1f}%")


if __name__ == "__main__":
    main()
