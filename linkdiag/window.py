"""Trailing-window statistics over simulator samples."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence

from .simulator import Sample

DEFAULT_WINDOW_SIZE = 20


@dataclass(frozen=True)
class WindowStats:
    snr_mean: float
    snr_std: float
    ber_mean: float
    ber_max: float
    latency_mean: float
    retries_mean: float


def _mean(values: List[float]) -> float:
    if not values:
        return math.nan
    return sum(values) / len(values)


def _pstd(values: List[float]) -> float:
    if not values:
        return math.nan
    m = _mean(values)
    return math.sqrt(sum((x - m) ** 2 for x in values) / len(values))


def _max(values: List[float]) -> float:
    if not values:
        return math.nan
    return max(values)


def window_from(history: Sequence[Sample], window_size: int = DEFAULT_WINDOW_SIZE) -> WindowStats:
    """Summarize the last ``window_size`` samples of ``history``.

    An empty window gives NaN for every statistic.
    """
    recent = list(history[-window_size:]) if window_size > 0 else []
    snr = [s.snr_db for s in recent]
    ber = [s.ber for s in recent]
    return WindowStats(
        snr_mean=_mean(snr),
        snr_std=_pstd(snr),
        ber_mean=_mean(ber),
        ber_max=_max(ber),
        latency_mean=_mean([s.latency_ms for s in recent]),
        retries_mean=_mean([float(s.retries) for s in recent]),
    )
