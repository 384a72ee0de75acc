"""External weight adjustment.

The engine asks an adjustment hook for one scalar before every step and adds
it to each candidate's raw weight. The hook only ever sees a GridStateSummary,
so whatever produces the number (a fixed heuristic, a trained policy, a test
double) never touches solver internals and the solver never imports it.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from terraweave.catalog import Biome, LayoutMode
from terraweave.util.rng import RNG

from .context import GenerationContext
from .grid import UNRESOLVED, Grid

ADJUSTMENT_RNG_DOMAIN = "wfc.adjustment"


@dataclass(frozen=True)
class GridStateSummary:
    """What an adjustment hook is allowed to see about the current grid.

    Attributes:
        width: Grid width.
        height: Grid height.
        tile_count: Size of the catalog.
        resolved: Boolean mask of resolved cells, shape (width, height).
        entropy: Candidate counts, shape (width, height).
        biome: Biome being generated.
        layout: Layout mode.
        backtrack_depth: Backtracks so far in this attempt.
        attempt: Current attempt number.
    """

    width: int
    height: int
    tile_count: int
    resolved: np.ndarray
    entropy: np.ndarray
    biome: Biome
    layout: LayoutMode
    backtrack_depth: int
    attempt: int

    @classmethod
    def capture(cls, grid: Grid, context: GenerationContext) -> GridStateSummary:
        return cls(
            width=grid.width,
            height=grid.height,
            tile_count=grid.tile_count,
            resolved=grid.resolved != UNRESOLVED,
            entropy=grid.entropy_map(),
            biome=context.biome,
            layout=context.layout,
            backtrack_depth=context.backtrack_depth,
            attempt=context.attempt,
        )

    @property
    def completion(self) -> float:
        """Fraction of resolved cells."""
        return float(self.resolved.mean())

    @property
    def mean_entropy(self) -> float:
        """Mean candidate count of unresolved cells, normalised by catalog size."""
        open_cells = self.entropy[~self.resolved]
        if open_cells.size == 0:
            return 0.0
        return float(open_cells.mean()) / self.tile_count

    def state_vector(self) -> np.ndarray:
        """Flat float32 feature vector.

        Per cell (x-major): ``[resolved, entropy / tile_count]``, followed by
        the biome's ordinal divided by 3 and 1.0 for continuous layouts.
        """
        per_cell = np.stack(
            [
                self.resolved.astype(np.float32),
                self.entropy.astype(np.float32) / self.tile_count,
            ],
            axis=-1,
        ).reshape(-1)
        biome_feature = list(Biome).index(self.biome) / 3.0
        layout_feature = 1.0 if self.layout is LayoutMode.CONTINUOUS else 0.0
        tail = np.array([biome_feature, layout_feature], dtype=np.float32)
        return np.concatenate([per_cell, tail])


def no_adjustment(summary: GridStateSummary) -> float:
    return 0.0


class HeuristicAdjustment:
    """Hand-tuned adjustment source with a little noise.

    - City, continuous: favour early placements, fading as the grid fills
    - Forest, sparse: flat bonus
    - Desert: grows with completion
    Every biome also gets uniform noise in ``[-noise/2, noise/2)``.
    """

    def __init__(self, rng: RNG, noise: float = 0.15) -> None:
        self.rng = rng
        self.noise = noise

    def __call__(self, summary: GridStateSummary) -> float:
        completion = summary.completion
        adjustment = 0.0

        match summary.biome:
            case Biome.CITY if summary.layout is LayoutMode.CONTINUOUS:
                adjustment += 0.3 * (1.0 - completion)
            case Biome.FOREST if summary.layout is LayoutMode.SPARSE:
                adjustment += 0.2
            case Biome.DESERT:
                adjustment += 0.1 * completion

        adjustment += (self.rng.random() - 0.5) * self.noise
        return adjustment
