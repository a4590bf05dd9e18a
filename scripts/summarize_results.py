"""Summarize scenario JSON outputs into JSON, CSV, and summary stats."""

from __future__ import annotations

import argparse
import csv
import json
from pathlib import Path

FIELDS = ["file", "scenario", "steps", "agreement", "primary_cause", "confidence", "expected_cause", "hit"]


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--outdir", default="artifacts", help="Directory holding run_scenarios.py output")
    args = ap.parse_args()

    outdir = Path(args.outdir)
    rows = []

    for path in sorted(outdir.glob("*.json")):
        if path.name in {"results.json", "summary.json"}:
            continue
        data = json.loads(path.read_text())
        if not isinstance(data, dict):
            continue

        final = data.get("final") or {}
        primary = final.get("primary_cause", "unknown")
        expected = data.get("expected_cause")
        rows.append(
            {
                "file": path.name,
                "scenario": data.get("scenario") or path.stem,
                "steps": data.get("steps"),
                "agreement": data.get("agreement", 0.0),
                "primary_cause": primary,
                "confidence": final.get("confidence"),
                "expected_cause": expected,
                "hit": expected is not None and primary == expected,
            }
        )

    (outdir / "results.json").write_text(json.dumps(rows, indent=2))

    with (outdir / "results.csv").open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=FIELDS)
        w.writeheader()
        w.writerows(rows)

    counts: dict[str, int] = {}
    for r in rows:
        counts[r["primary_cause"]] = counts.get(r["primary_cause"], 0) + 1

    scored = [r for r in rows if r["expected_cause"] is not None]
    summary = {
        "total_runs": len(rows),
        "primary_cause_counts": counts,
        "mean_agreement": sum(r["agreement"] for r in rows) / len(rows) if rows else 0.0,
        "expected_hit_rate": sum(1 for r in scored if r["hit"]) / len(scored) if scored else 0.0,
    }
    (outdir / "summary.json").write_text(json.dumps(summary, indent=2))


if __name__ == "__main__":
    main()
