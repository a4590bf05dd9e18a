"""Result records for monitor runs."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .faults import FaultConfiguration
from .monitor import LinkMonitor


@dataclass
class RunSummary:
    scenario: Optional[str]
    config: FaultConfiguration
    steps: int
    window_size: int
    seed: Optional[int]
    agreement: float
    cause_counts: Dict[str, int] = field(default_factory=dict)
    final: Optional[Dict[str, Any]] = None
    expected_cause: Optional[str] = None

    @classmethod
    def from_monitor(
        cls,
        monitor: LinkMonitor,
        scenario: Optional[str] = None,
        seed: Optional[int] = None,
        expected_cause: Optional[str] = None,
    ) -> "RunSummary":
        latest = monitor.latest
        return cls(
            scenario=scenario,
            config=monitor.simulator.fault_configuration,
            steps=len(monitor.records),
            window_size=monitor.window_size,
            seed=seed,
            agreement=monitor.agreement(),
            cause_counts=monitor.cause_counts(),
            final=latest.diagnosis.to_dict() if latest else None,
            expected_cause=expected_cause,
        )

    def to_json(self) -> str:
        payload = {
            "scenario": self.scenario,
            "config": self.config.to_dict(),
            "steps": self.steps,
            "window_size": self.window_size,
            "seed": self.seed,
            "agreement": self.agreement,
            "cause_counts": self.cause_counts,
            "final": self.final,
            "expected_cause": self.expected_cause,
        }
        return json.dumps(payload, indent=2, sort_keys=True)
