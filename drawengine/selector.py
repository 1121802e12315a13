"""Uniform winner selection without replacement."""

from __future__ import annotations

import random
from typing import AbstractSet, List, MutableSequence, Optional, Protocol, Sequence

from .types import Entrant


class RandomSource(Protocol):
    def random(self) -> float:
        ...

    def shuffle(self, x: MutableSequence) -> None:
        ...


def build_random_source(seed: Optional[int] = None) -> RandomSource:
    """Seeded generator for reproducible runs, OS entropy otherwise."""
    if seed is None:
        return random.SystemRandom()
    return random.Random(seed)


def select_winners(
    pool: Sequence[Entrant],
    already_chosen: AbstractSet[int],
    count: int,
    rng: RandomSource,
) -> List[Entrant]:
    """Pick up to ``count`` distinct entrants from ``pool``.

    Entrants whose id is in ``already_chosen`` are skipped. When fewer
    entrants remain than requested, all of them are returned (possibly none).
    """
    if count < 0:
        raise ValueError("count must not be negative")

    available = [entrant for entrant in pool if entrant.id not in already_chosen]
    rng.shuffle(available)
    return available[: min(count, len(available))]


def roll_spin_duration(rng: RandomSource, min_ms: int, max_ms: int) -> float:
    """Spin length in milliseconds, uniform over ``[min_ms, max_ms)``."""
    if min_ms < 0 or max_ms < min_ms:
        raise ValueError(f"Invalid spin window [{min_ms}, {max_ms})")
    return min_ms + rng.random() * (max_ms - min_ms)
