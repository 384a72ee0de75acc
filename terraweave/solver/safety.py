"""One-hop lookahead scoring.

Before a tile is sampled, each candidate is checked against the cell's open
neighbours: how much of each neighbour's candidate set would survive next to
it? The product of those fractions is the candidate's safety. It is a
heuristic, not a guarantee; propagation still decides what is legal.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np

from terraweave.types import GridPos

from .context import SolverSettings
from .grid import Grid


@dataclass(frozen=True)
class ScoredCandidate:
    """A candidate tile with its raw weight, safety and final score."""

    tile: int
    weight: float
    safety: float
    score: float


class SafetyScorer:
    def __init__(self, settings: SolverSettings) -> None:
        self.settings = settings

    def safety(self, grid: Grid, pos: GridPos, tile: int) -> float:
        """Return the safety of placing ``tile`` at ``pos``, in [0, 1].

        0.0 means some open neighbour would be left without any candidate.
        """
        x, y = pos
        safety = 1.0
        for direction, nx, ny in grid.neighbors(x, y):
            if grid.is_resolved(nx, ny):
                continue
            neighbor = grid.candidates[nx, ny]
            total = np.count_nonzero(neighbor)
            if total == 0:
                return 0.0
            allowed = grid.catalog.allowed_next_to(tile, direction)
            kept = np.count_nonzero(neighbor & allowed)
            if kept == 0:
                return 0.0
            safety *= kept / total
        return safety

    def score(self, weight: float, safety: float) -> float:
        """Blend weight and safety; safety can halve a weight, never zero it."""
        return max(self.settings.min_weight, weight * (0.5 + 0.5 * safety))

    def rank(
        self, grid: Grid, pos: GridPos, weighted: Iterable[tuple[int, float]]
    ) -> list[ScoredCandidate]:
        """Score every ``(tile, weight)`` pair, keeping the input order."""
        ranked = []
        for tile, weight in weighted:
            safety = self.safety(grid, pos, tile)
            ranked.append(
                ScoredCandidate(
                    tile=tile,
                    weight=weight,
                    safety=safety,
                    score=self.score(weight, safety),
                )
            )
        return ranked

    def restrict(
        self, scored: list[ScoredCandidate], backtrack_depth: int
    ) -> list[ScoredCandidate]:
        """Keep only the safer half of the candidates when deep in backtracking.

        Below the depth threshold the list is returned unchanged. Above it,
        candidates are ordered by safety (descending, ties keep their input
        order) and the top half, at least one, is kept.
        """
        if backtrack_depth <= self.settings.safety_depth_threshold or not scored:
            return scored
        by_safety = sorted(scored, key=lambda c: c.safety, reverse=True)
        keep = max(1, len(by_safety) // 2)
        return by_safety[:keep]
