from __future__ import annotations

import hashlib
import random
from abc import ABC, abstractmethod
from typing import Optional


class RandomSource(ABC):
    """Injected source of every random draw the engine makes."""

    @abstractmethod
    def next_int(self, minimum: int, maximum: int) -> int:
        """Uniform integer in ``[minimum, maximum)``."""
        raise NotImplementedError

    @abstractmethod
    def next_double(self) -> float:
        raise NotImplementedError

    def next_below(self, maximum: int) -> int:
        return self.next_int(0, maximum)

    def chance(self, percent: int) -> bool:
        """Roll in [1, 100] and succeed when the roll is at most ``percent``."""
        return self.next_int(1, 101) <= int(percent)


class SeededRandomSource(RandomSource):
    def __init__(self, seed: Optional[int] = None) -> None:
        self.seed = seed
        self._rng = random.Random(seed)

    def next_int(self, minimum: int, maximum: int) -> int:
        low = int(minimum)
        high = int(maximum)
        if high <= low:
            raise ValueError(f"Empty range [{low}, {high}).")
        return self._rng.randrange(low, high)

    def next_double(self) -> float:
        return self._rng.random()


def parse_seed(raw: object) -> Optional[int]:
    """Accept an integer seed, or hash any other non-empty text into one."""
    text = str(raw or "").strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return int(hashlib.sha256(text.encode("utf-8")).hexdigest(), 16) % (2**32)
