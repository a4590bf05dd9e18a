"""Preset fault scenarios.

Each scenario carries a human-readable description, the fault configuration
to inject and the root cause a correct diagnosis should settle on.
"""

from __future__ import annotations

from typing import Any, Dict

from .diagnostics import RootCause
from .faults import FaultConfiguration

SCENARIOS: Dict[str, Dict[str, Any]] = {
    "nominal": {
        "description": "No faults injected; only baseline jitter.",
        "config": FaultConfiguration(),
        "expected_cause": RootCause.HEALTHY,
    },
    "noise_spike": {
        "description": "Impulsive noise coupling into the receiver front end.",
        "config": FaultConfiguration(noise_spike_level=1.0),
        "expected_cause": RootCause.NOISE_SPIKE,
    },
    "jammer": {
        "description": "Strong wideband interferer across the channel.",
        "config": FaultConfiguration(jammer_level=2.0),
        "expected_cause": RootCause.WIDEBAND_JAMMER,
    },
    "sync_loss": {
        "description": "Intermittent loss of frame synchronization on a clean RF path.",
        "config": FaultConfiguration(sync_loss_prob=0.5),
        "expected_cause": RootCause.SYNC_LOSS,
    },
    "congestion": {
        "description": "Offered load exceeds link capacity; queues build up.",
        "config": FaultConfiguration(congestion_level=2.0),
        "expected_cause": RootCause.CONGESTION,
    },
    "fading": {
        "description": "Multipath fading with deep, irregular troughs.",
        "config": FaultConfiguration(fading_severity=1.0),
        "expected_cause": RootCause.FADING,
    },
    "congested_fade": {
        "description": "Moderate fading on a link that is also congested.",
        "config": FaultConfiguration(congestion_level=1.5, fading_severity=0.5),
        "expected_cause": RootCause.CONGESTION,
    },
}


def get_scenario(name: str) -> Dict[str, Any]:
    try:
        return SCENARIOS[name]
    except KeyError:
        raise KeyError(f"Unknown scenario: {name} (choose from {', '.join(SCENARIOS)})") from None
