"""Stochastic communication link simulator."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .faults import FaultConfiguration, FaultType
from .rng import RandomSource

logger = logging.getLogger(__name__)

SNR_RANGE_DB = (-5.0, 40.0)
BER_RANGE = (1e-9, 0.5)
MIN_LATENCY_MS = 1.0


@dataclass(frozen=True)
class LinkBaseline:
    snr_db: float = 25.0
    ber: float = 1e-6
    latency_ms: float = 20.0
    retries: int = 0


@dataclass(frozen=True)
class Sample:
    t: int
    snr_db: float
    ber: float
    latency_ms: float
    retries: int
    active_faults: Tuple[FaultType, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "t": self.t,
            "snr_db": self.snr_db,
            "ber": self.ber,
            "latency_ms": self.latency_ms,
            "retries": self.retries,
            "active_faults": [fault.value for fault in self.active_faults],
        }


def _clip(value: float, lo: float, hi: float) -> float:
    return min(max(value, lo), hi)


def _round_half_up(value: float) -> int:
    # Halves round up (2.5 -> 3), unlike the builtin round().
    return math.floor(value + 0.5)


class LinkSimulator:
    def __init__(
        self,
        config: Optional[FaultConfiguration] = None,
        rng: Optional[RandomSource] = None,
        baseline: Optional[LinkBaseline] = None,
    ):
        self.t = 0
        self.baseline = baseline or LinkBaseline()
        self.rng = rng or RandomSource()
        self.fault_configuration = config or FaultConfiguration()

    def set_fault_configuration(self, config: FaultConfiguration) -> None:
        """Install ``config``; it applies from the next ``step()``."""
        self.fault_configuration = config
        logger.info("fault configuration set at t=%d: %s", self.t, config.describe())

    def step(self) -> Sample:
        self.t += 1
        cfg = self.fault_configuration
        base = self.baseline
        randn = self.rng.normal
        active = []

        snr = base.snr_db + randn() * 0.3
        ber = max(base.ber * 10 ** (randn() * 0.2), 1e-9)
        latency = base.latency_ms + randn() * 1.0
        retries: float = base.retries

        if cfg.noise_spike_level > 0:
            level = cfg.noise_spike_level
            snr -= 8.0 * level + randn() * (1.0 * level)
            ber *= 10 ** (2.0 * level + randn() * (0.5 * level))
            active.append(FaultType.NOISE_SPIKE)

        if cfg.jammer_level > 0:
            level = cfg.jammer_level
            snr -= 15.0 * level + randn() * (2.0 * level)
            ber *= 10 ** (3.0 * level + randn() * (0.5 * level))
            retries += max(0, _round_half_up(5 * level + self.rng.poisson(2 * level)))
            latency += 5 * level + randn() * (2 * level)
            active.append(FaultType.WIDEBAND_JAMMER)

        # An outage replaces BER/SNR outright and masks congestion and fading.
        outage = cfg.sync_loss_prob > 0 and self.rng.uniform() < cfg.sync_loss_prob
        if outage:
            ber = 0.1 + 0.8 * self.rng.uniform()
            snr = base.snr_db + randn()
            latency += 200 + randn() * 20
            retries += 5 + self.rng.poisson(3)
            active.append(FaultType.SYNC_LOSS)
            logger.debug("sync outage at t=%d (ber=%.3f)", self.t, ber)

        if cfg.congestion_level > 0 and not outage:
            level = cfg.congestion_level
            latency += 40 * level + randn() * (10 * level)
            retries += max(0, _round_half_up(3 * level + self.rng.poisson(3 * level)))
            ber *= 10 ** (0.3 * level + randn() * (0.1 * level))
            active.append(FaultType.CONGESTION)

        if cfg.fading_severity > 0 and not outage:
            level = cfg.fading_severity
            snr -= 5.0 * level + abs(randn()) * (3.0 * level)
            ber *= 10 ** (1.5 * level + randn() * (0.3 * level))
            active.append(FaultType.FADING)

        return Sample(
            t=self.t,
            snr_db=_clip(snr, *SNR_RANGE_DB),
            ber=_clip(ber, *BER_RANGE),
            latency_ms=max(MIN_LATENCY_MS, latency),
            retries=max(0, _round_half_up(retries)),
            active_faults=tuple(active),
        )
