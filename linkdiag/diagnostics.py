"""Rule-based root-cause diagnosis over window statistics."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Tuple

from .window import WindowStats

logger = logging.getLogger(__name__)


class RootCause(Enum):
    HEALTHY = "healthy"
    NOISE_SPIKE = "noise_spike"
    WIDEBAND_JAMMER = "wideband_jammer"
    SYNC_LOSS = "sync_loss"
    CONGESTION = "congestion"
    FADING = "fading"
    UNKNOWN = "unknown"

    def label(self) -> str:
        return self.value.replace("_", " ")


@dataclass(frozen=True)
class Thresholds:
    good_snr_db: float = 20.0
    moderate_snr_db: float = 12.0
    bad_snr_db: float = 8.0

    good_ber: float = 1e-5
    moderate_ber: float = 1e-3
    bad_ber: float = 1e-2

    latency_warn_ms: float = 80.0
    latency_bad_ms: float = 160.0

    retries_warn: float = 1.0
    retries_bad: float = 3.0


@dataclass(frozen=True)
class Evidence:
    root_cause: RootCause
    score: float
    explanation: str

    def to_dict(self) -> Dict[str, Any]:
        return {"root_cause": self.root_cause.value, "score": self.score, "explanation": self.explanation}


@dataclass(frozen=True)
class Rule:
    """One symptom signature: fires when ``predicate`` holds, votes ``scorer``."""

    cause: RootCause
    predicate: Callable[[WindowStats], bool]
    scorer: Callable[[WindowStats], float]
    explanation: str

    def evaluate(self, window: WindowStats) -> List[Evidence]:
        if not self.predicate(window):
            return []
        return [Evidence(self.cause, self.scorer(window), self.explanation)]


@dataclass(frozen=True)
class Diagnosis:
    primary_cause: RootCause
    confidence: float
    ranked_causes: Tuple[Tuple[RootCause, float], ...]
    explanation: str
    contributing_rules: Tuple[Evidence, ...]
    suggested_actions: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "primary_cause": self.primary_cause.value,
            "confidence": self.confidence,
            "ranked_causes": [[cause.value, prob] for cause, prob in self.ranked_causes],
            "explanation": self.explanation,
            "contributing_rules": [ev.to_dict() for ev in self.contributing_rules],
            "suggested_actions": list(self.suggested_actions),
        }


SUGGESTED_ACTIONS: Dict[RootCause, Tuple[str, ...]] = {
    RootCause.HEALTHY: ("No immediate action required. Continue monitoring for emerging anomalies.",),
    RootCause.NOISE_SPIKE: (
        "Check grounding/shielding to reduce impulsive noise coupling.",
        "Inspect nearby equipment for intermittent high-power emissions.",
        "Increase error-correction strength or interleaving depth if possible.",
    ),
    RootCause.WIDEBAND_JAMMER: (
        "Evaluate spectral environment and locate strong interferers.",
        "Switch to an alternate channel or band if available.",
        "Apply filtering/notching around the interferer.",
    ),
    RootCause.SYNC_LOSS: (
        "Verify clock stability and alignment between TX/RX.",
        "Increase preamble length or improve sync acquisition.",
        "Check for framing/configuration mismatches.",
    ),
    RootCause.CONGESTION: (
        "Reduce offered load or apply traffic shaping.",
        "Increase buffers or enable congestion control mechanisms.",
        "Distribute traffic across additional links if possible.",
    ),
    RootCause.FADING: (
        "Increase transmit power within limits.",
        "Enable diversity (spatial/frequency/time).",
        "Use more robust modulation/coding during deep fades.",
    ),
}

DEFAULT_ACTIONS: Tuple[str, ...] = (
    "Capture additional diagnostics to refine the hypothesis.",
    "Consider extending the rule base for newly observed patterns.",
)

QUIET_HEALTHY_SCORE = 0.8


def _exponential(value: float, digits: int = 2) -> str:
    """Scientific notation without exponent padding: ``2.00e-6``."""
    text = f"{value:.{digits}e}"
    if "e" not in text:
        return text
    mantissa, exponent = text.split("e")
    return f"{mantissa}e{int(exponent):+d}"


def _unit(x: float) -> float:
    return min(1.0, max(0.0, x))


def build_rules(th: Thresholds) -> Tuple[Rule, ...]:
    """Rule set in evaluation order; the order also breaks ranking ties."""
    return (
        Rule(
            RootCause.HEALTHY,
            lambda w: (
                w.snr_mean > th.good_snr_db
                and w.ber_max < th.good_ber
                and w.latency_mean < th.latency_warn_ms
                and w.retries_mean <= th.retries_warn
            ),
            lambda w: 1.0,
            "SNR, BER, latency, and retries are nominal.",
        ),
        Rule(
            RootCause.NOISE_SPIKE,
            lambda w: (
                w.snr_mean < th.good_snr_db
                and w.snr_std > 1.5
                and w.ber_max > th.moderate_ber
                and w.latency_mean < th.latency_bad_ms
            ),
            lambda w: 0.4 + 0.6 * _unit((th.good_snr_db - w.snr_mean) / 10.0),
            "Volatile SNR dips with BER bursts and modest latency suggest impulsive noise.",
        ),
        Rule(
            RootCause.WIDEBAND_JAMMER,
            lambda w: (
                w.snr_mean < th.moderate_snr_db
                and w.ber_mean > th.moderate_ber
                and w.retries_mean >= th.retries_warn
            ),
            lambda w: 0.5 + 0.5 * _unit((th.moderate_snr_db - w.snr_mean) / 8.0),
            "Persistently poor SNR with high BER and retries indicates strong interference/jamming.",
        ),
        Rule(
            RootCause.SYNC_LOSS,
            lambda w: w.ber_max > 0.05 and w.snr_mean >= th.moderate_snr_db,
            lambda w: 0.6 + 0.4 * _unit((w.ber_max - 0.05) / 0.25),
            "Very high BER while RF SNR is acceptable points to framing/sync loss.",
        ),
        Rule(
            RootCause.CONGESTION,
            lambda w: (
                w.latency_mean > th.latency_warn_ms
                and w.retries_mean > th.retries_warn
                and w.snr_mean > th.bad_snr_db
            ),
            lambda w: 0.4 + 0.6 * _unit((w.latency_mean - th.latency_warn_ms) / 120.0),
            "High latency and retries with tolerable RF conditions suggest congestion.",
        ),
        Rule(
            RootCause.FADING,
            lambda w: (
                w.snr_mean < th.good_snr_db
                and w.snr_std > 2.0
                and w.ber_mean > th.good_ber
                and w.latency_mean < th.latency_bad_ms
            ),
            lambda w: 0.3 + 0.7 * _unit(w.snr_std / 5.0),
            "Significant SNR fluctuations with elevated BER and modest latency hint at fading.",
        ),
    )


class DiagnosticEngine:
    """Scores every rule against a window and ranks the candidate causes.

    ``diagnose`` is a pure function of its argument; the engine only holds
    its thresholds and the rules derived from them.
    """

    def __init__(self, thresholds: Thresholds = Thresholds()):
        self.thresholds = thresholds
        self.rules = build_rules(thresholds)

    def evidence_for(self, window: WindowStats) -> List[Evidence]:
        evidences: List[Evidence] = []
        for rule in self.rules:
            evidences.extend(rule.evaluate(window))

        th = self.thresholds
        if not evidences and window.ber_max < th.moderate_ber and window.snr_mean > th.good_snr_db:
            evidences.append(
                Evidence(RootCause.HEALTHY, QUIET_HEALTHY_SCORE, "No anomaly signatures; link appears healthy.")
            )
        if not evidences:
            evidences.append(Evidence(RootCause.UNKNOWN, 1.0, "Patterns do not clearly match any known rule set."))
        return evidences

    def diagnose(self, window: WindowStats) -> Diagnosis:
        evidences = self.evidence_for(window)

        # Corroborating rules for the same cause add up.
        scores: Dict[RootCause, float] = {}
        for ev in evidences:
            scores[ev.root_cause] = scores.get(ev.root_cause, 0.0) + ev.score

        total = sum(scores.values())
        ranked = tuple(
            sorted(((cause, score / total) for cause, score in scores.items()), key=lambda item: -item[1])
        )
        primary, confidence = ranked[0]

        logger.debug("diagnosis %s (%.2f) from %d evidence(s)", primary.value, confidence, len(evidences))
        return Diagnosis(
            primary_cause=primary,
            confidence=confidence,
            ranked_causes=ranked,
            explanation=self._build_explanation(primary, confidence, window, evidences),
            contributing_rules=tuple(evidences),
            suggested_actions=SUGGESTED_ACTIONS.get(primary, DEFAULT_ACTIONS),
        )

    def _build_explanation(
        self, cause: RootCause, confidence: float, window: WindowStats, evidences: List[Evidence]
    ) -> str:
        pct = math.floor(confidence * 100 + 0.5)
        if cause is RootCause.HEALTHY:
            return (
                f"Link appears healthy (SNR ≈ {window.snr_mean:.1f} dB, BER max ≈ {_exponential(window.ber_max)}, "
                f"latency ≈ {window.latency_mean:.0f} ms, retries ≈ {window.retries_mean:.1f}). "
                f"Confidence {pct}%."
            )
        lead = f"Most likely root cause: {cause.label()} (confidence {pct}%). "
        reasons = " ".join(ev.explanation for ev in evidences if ev.root_cause is cause)
        return lead + (reasons or "Metric patterns weakly indicate this condition.")
