"""Random helpers built on a single injected RandomSource."""

import math
from typing import TypeVar

from vaultmarket import RandomSource

T = TypeVar("T")


def random_int(rng: RandomSource, low: int, high: int) -> int:
    """Uniform integer in [low, high], inclusive."""
    return low + math.floor(rng.random() * (high - low + 1))


def uniform(rng: RandomSource, low: float, high: float) -> float:
    """Uniform float in [low, high)."""
    return low + (high - low) * rng.random()


def chance(rng: RandomSource, probability: float) -> bool:
    """True with the given probability (0..1)."""
    return rng.random() < probability


def choice(rng: RandomSource, items: list[T]) -> T:
    """Pick one element uniformly."""
    return items[math.floor(rng.random() * len(items))]


def shuffled(rng: RandomSource, items: list[T]) -> list[T]:
    """Fisher–Yates shuffle into a new list."""
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = math.floor(rng.random() * (i + 1))
        result[i], result[j] = result[j], result[i]
    return result


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (2.5 → 3)."""
    return math.floor(value + 0.5)
