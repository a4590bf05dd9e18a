"""Random draws used to inject variance into the link simulator."""

from __future__ import annotations

import math
import random
from typing import Optional


class RandomSource:
    """Normal and Poisson samplers over a single ``random.Random`` stream.

    Pass ``seed`` or an existing ``rng`` to make runs reproducible.
    """

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random(seed)

    def uniform(self) -> float:
        return self.rng.random()

    def normal(self) -> float:
        """Standard-normal deviate via the Box-Muller transform."""
        u = 0.0
        v = 0.0
        while u == 0.0:
            u = self.uniform()
        while v == 0.0:
            v = self.uniform()
        return math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)

    def poisson(self, lam: float) -> int:
        """Poisson draw with mean ``lam`` (Knuth). Non-positive means give 0."""
        if lam <= 0:
            return 0
        threshold = math.exp(-lam)
        k = 0
        p = 1.0
        while True:
            k += 1
            p *= self.uniform()
            if p <= threshold:
                break
        return k - 1
