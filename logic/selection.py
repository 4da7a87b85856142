"""Random selection of recommendation candidates."""

from __future__ import annotations

import random
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")


def shuffle_outfits(candidates: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """Return a uniformly shuffled copy using the Fisher-Yates algorithm.

    ``rng`` makes the permutation reproducible; the module-level generator is
    used when omitted.
    """

    source = rng or random
    shuffled = list(candidates)
    for i in range(len(shuffled) - 1, 0, -1):
        j = source.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def select_outfits(candidates: Sequence[T], count: int, rng: Optional[random.Random] = None) -> List[T]:
    """Shuffle ``candidates`` and keep the first ``count``."""

    if count <= 0:
        return []
    return shuffle_outfits(candidates, rng)[:count]


__all__ = ["shuffle_outfits", "select_outfits"]
