"""Headless driver: step the link, diagnose each window, score against ground truth."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .diagnostics import DiagnosticEngine, Diagnosis, RootCause
from .faults import FaultConfiguration, FaultType
from .simulator import LinkSimulator, Sample
from .window import DEFAULT_WINDOW_SIZE, window_from

logger = logging.getLogger(__name__)

DEFAULT_AGREEMENT_SPAN = 40


class MonitorError(Exception):
    pass


@dataclass(frozen=True)
class DiagnosisRecord:
    t: int
    diagnosis: Diagnosis
    active_faults: Tuple[FaultType, ...]

    def true_faults_label(self) -> str:
        return ", ".join(fault.label() for fault in self.active_faults) if self.active_faults else "none"


def agrees_with_ground_truth(record: DiagnosisRecord) -> bool:
    primary = record.diagnosis.primary_cause
    if not record.active_faults:
        return primary in (RootCause.HEALTHY, RootCause.UNKNOWN)
    return primary.value in {fault.value for fault in record.active_faults}


class LinkMonitor:
    def __init__(
        self,
        simulator: Optional[LinkSimulator] = None,
        engine: Optional[DiagnosticEngine] = None,
        window_size: int = DEFAULT_WINDOW_SIZE,
    ):
        if window_size <= 0:
            raise MonitorError(f"window_size must be positive, got {window_size}")
        self.simulator = simulator or LinkSimulator()
        self.engine = engine or DiagnosticEngine()
        self.window_size = window_size
        self.history: List[Sample] = []
        self.records: List[DiagnosisRecord] = []

    def set_fault_configuration(self, config: FaultConfiguration) -> None:
        self.simulator.set_fault_configuration(config)

    def step(self) -> DiagnosisRecord:
        sample = self.simulator.step()
        self.history.append(sample)
        diagnosis = self.engine.diagnose(window_from(self.history, self.window_size))
        record = DiagnosisRecord(t=sample.t, diagnosis=diagnosis, active_faults=sample.active_faults)
        self.records.append(record)
        logger.debug(
            "t=%d primary=%s truth=%s", sample.t, diagnosis.primary_cause.value, record.true_faults_label()
        )
        return record

    def run(self, steps: int) -> List[DiagnosisRecord]:
        if steps < 0:
            raise MonitorError(f"steps must be non-negative, got {steps}")
        return [self.step() for _ in range(steps)]

    def reset(self) -> None:
        """Drop history and records. Simulator time keeps counting."""
        self.history = []
        self.records = []

    @property
    def latest(self) -> Optional[DiagnosisRecord]:
        return self.records[-1] if self.records else None

    def agreement(self, last_n: int = DEFAULT_AGREEMENT_SPAN) -> float:
        """Fraction of the last ``last_n`` diagnoses consistent with the injected faults."""
        if last_n <= 0:
            raise MonitorError(f"last_n must be positive, got {last_n}")
        recent = self.records[-last_n:]
        if not recent:
            return 0.0
        return sum(1 for r in recent if agrees_with_ground_truth(r)) / len(recent)

    def cause_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for record in self.records:
            key = record.diagnosis.primary_cause.value
            counts[key] = counts.get(key, 0) + 1
        return counts
