"""Fault model definitions."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Dict, Mapping, Tuple


class FaultType(Enum):
    NOISE_SPIKE = "noise_spike"
    WIDEBAND_JAMMER = "wideband_jammer"
    SYNC_LOSS = "sync_loss"
    CONGESTION = "congestion"
    FADING = "fading"

    def label(self) -> str:
        return self.value.replace("_", " ")


class FaultConfigError(Exception):
    pass


# Slider bounds of the control surface; the simulator itself never clamps.
UI_RANGES: Dict[str, Tuple[float, float]] = {
    "noise_spike_level": (0.0, 3.0),
    "jammer_level": (0.0, 3.0),
    "sync_loss_prob": (0.0, 1.0),
    "congestion_level": (0.0, 3.0),
    "fading_severity": (0.0, 3.0),
}

ALIASES: Dict[str, str] = {
    "noise": "noise_spike_level",
    "jammer": "jammer_level",
    "sync": "sync_loss_prob",
    "congestion": "congestion_level",
    "fading": "fading_severity",
}


@dataclass(frozen=True)
class FaultConfiguration:
    noise_spike_level: float = 0.0
    jammer_level: float = 0.0
    sync_loss_prob: float = 0.0
    congestion_level: float = 0.0
    fading_severity: float = 0.0

    @classmethod
    def parse(cls, text: str) -> "FaultConfiguration":
        """Parse ``"jammer=2.0,sync=0.1"`` style text.

        Keys may be field names or the short aliases in ``ALIASES``. An empty
        string gives the nominal (fault-free) configuration.
        """
        values: Dict[str, str] = {}
        for item in text.split(","):
            item = item.strip()
            if not item:
                continue
            try:
                key, raw = item.split("=")
            except ValueError as exc:
                raise FaultConfigError(f"Expected <knob>=<value>, got '{item}'") from exc
            values[key.strip()] = raw.strip()
        return cls.from_dict(values)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "FaultConfiguration":
        kwargs: Dict[str, float] = {}
        for key, raw in data.items():
            name = ALIASES.get(key, key)
            if name not in UI_RANGES:
                raise FaultConfigError(f"Unknown fault knob: {key}")
            try:
                value = float(raw)  # type: ignore[arg-type]
            except (TypeError, ValueError) as exc:
                raise FaultConfigError(f"Fault knob {key} must be numeric, got {raw!r}") from exc
            lo, hi = UI_RANGES[name]
            if not math.isfinite(value) or not lo <= value <= hi:
                raise FaultConfigError(f"Fault knob {key}={value} outside [{lo:g}, {hi:g}]")
            kwargs[name] = value
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    def active_types(self) -> Tuple[FaultType, ...]:
        """Fault types whose knob is switched on, in injection order."""
        knobs = (
            (self.noise_spike_level, FaultType.NOISE_SPIKE),
            (self.jammer_level, FaultType.WIDEBAND_JAMMER),
            (self.sync_loss_prob, FaultType.SYNC_LOSS),
            (self.congestion_level, FaultType.CONGESTION),
            (self.fading_severity, FaultType.FADING),
        )
        return tuple(fault for level, fault in knobs if level > 0)

    def is_nominal(self) -> bool:
        return not self.active_types()

    def describe(self) -> str:
        parts = [f"{f.name}={getattr(self, f.name):g}" for f in fields(self) if getattr(self, f.name)]
        return ", ".join(parts) if parts else "nominal"
