"""Seeded randomness helpers for round dealing."""

import random
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")


def build_rng(*, seed: int | None = None) -> random.Random:
    """Return a deterministic random generator."""
    return random.Random(seed)


def pick_uniform(rng: random.Random, candidates: Sequence[T]) -> T:
    """Return one candidate with equal probability.

    Args:
        rng: Random number generator
        candidates: Non-empty sequence to choose from

    Returns:
        The chosen element
    """
    return candidates[int(rng.random() * len(candidates))]


def weighted_index(rng: random.Random, weights: Sequence[float]) -> Optional[int]:
    """Draw an index by walking the cumulative weights (inverse CDF).

    Args:
        rng: Random number generator
        weights: Non-negative weights, one per index

    Returns:
        The selected index, or None when every weight is zero
    """
    total = sum(weights)
    if total <= 0:
        return None

    r = rng.random() * total
    for index, weight in enumerate(weights):
        r -= weight
        if weight > 0 and r <= 0:
            return index

    # Rounding can leave r marginally above zero after the last subtraction
    for index, weight in enumerate(weights):
        if weight > 0:
            return index
    return None
