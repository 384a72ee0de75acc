"""Weighted random choice."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

from terraweave.util.rng import RNG

T = TypeVar("T")


class WeightedSampler:
    """Cumulative-weight draw over ``(item, weight)`` pairs."""

    def sample(self, pairs: Sequence[tuple[T, float]], rng: RNG) -> T | None:
        """Return one item with probability proportional to its weight.

        Returns None for empty input. A non-positive total returns the first
        item without consuming randomness.
        """
        if not pairs:
            return None

        total = sum(weight for _, weight in pairs)
        if total <= 0:
            return pairs[0][0]

        draw = rng.random() * total
        cumulative = 0.0
        for item, weight in pairs:
            cumulative += weight
            if draw < cumulative:
                return item
        # Float round-off can leave draw a hair above the final sum
        return pairs[-1][0]
