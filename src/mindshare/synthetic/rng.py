"""Seeded deterministic random stream.

Every draw in the synthetic pipeline goes through one SeededRng so that an
identical seed reproduces an identical dataset. NO randomness outside the
seeded stream.
"""

from __future__ import annotations

import math
import random
from collections.abc import Sequence
from typing import TypeVar

from mindshare.errors import MindshareValidationError

T = TypeVar("T")


class SeededRng:
    """Seeded deterministic value generator.

    Seeds are stringified so that 7 and "7" yield the same stream. Integer
    draws, picks and coin flips are all derived from the float stream.
    """

    def __init__(self, seed: str | int | float) -> None:
        self.seed = str(seed)
        self._rng = random.Random(self.seed)

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        return self._rng.random()

    def randint(self, lo: int, hi: int) -> int:
        """Uniform integer in [lo, hi] inclusive."""
        if lo > hi:
            raise MindshareValidationError(
                "randint lower bound exceeds upper bound", details={"lo": lo, "hi": hi}
            )
        return int(math.floor(self.random() * (hi - lo + 1))) + lo

    def pick_one(self, items: Sequence[T]) -> T:
        if not items:
            raise MindshareValidationError("Cannot pick from an empty sequence")
        return items[int(math.floor(self.random() * len(items)))]

    def pick_many(self, items: Sequence[T], k: int) -> list[T]:
        """Pick k distinct positions without replacement."""
        if k < 0 or k > len(items):
            raise MindshareValidationError(
                "Sample size out of range", details={"k": k, "available": len(items)}
            )
        pool = list(items)
        picked: list[T] = []
        for _ in range(k):
            idx = int(math.floor(self.random() * len(pool)))
            picked.append(pool.pop(idx))
        return picked

    def chance(self, probability: float) -> bool:
        """True with the given probability; always consumes one draw."""
        if not 0.0 <= probability <= 1.0:
            raise MindshareValidationError(
                "Probability must be within [0, 1]", details={"probability": probability}
            )
        return self.random() < probability
