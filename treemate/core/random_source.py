"""Random sources for the search.

The engine draws every random decision (node ids, the child picked after an
expansion, playout moves) from one RandomSource, so swapping in the
deterministic LcgRandomSource makes a whole search reproducible.
"""
from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")

LCG_MULTIPLIER = 1103515245
LCG_INCREMENT = 12345
LCG_MODULUS = 2147483647  # 2^31 - 1
LCG_DEFAULT_SEED = 3819201

INT32_MAX = 2147483647


class RandomSource(ABC):
    @abstractmethod
    def next(self) -> int:
        """Return the next raw integer."""

    @abstractmethod
    def next_range(self, low: int, high: int) -> int:
        """Return an integer uniformly drawn from [low, high)."""

    def choose(self, items: Sequence[T]) -> T:
        return items[self.next_range(0, len(items))]


class StandardRandomSource(RandomSource):
    """Non-deterministic source backed by ``random.Random``."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def next(self) -> int:
        return self._rng.randint(-INT32_MAX - 1, INT32_MAX)

    def next_range(self, low: int, high: int) -> int:
        return self._rng.randrange(low, high)


class LcgRandomSource(RandomSource):
    """Linear congruential generator with a fixed, reproducible sequence.

    seed = (seed * 1103515245 + 12345) mod (2^31 - 1)
    """

    def __init__(self, seed: int = LCG_DEFAULT_SEED):
        self.seed = seed

    def next(self) -> int:
        self.seed = (self.seed * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self.seed

    def next_range(self, low: int, high: int) -> int:
        return abs(self.next() % (high - low)) + low


def make_random_source(seed: Optional[int] = None) -> RandomSource:
    """LCG for a fixed seed, standard source otherwise."""
    if seed is None:
        return StandardRandomSource()
    return LcgRandomSource(seed)
