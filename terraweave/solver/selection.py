"""Minimum-entropy cell selection."""

from __future__ import annotations

import numpy as np

from terraweave.types import GridPos
from terraweave.util.rng import RNG

from .grid import UNRESOLVED, Grid


class CellSelector:
    """Picks the next cell to collapse.

    Only unresolved cells with at least one candidate are eligible. Among
    them the ones with the fewest candidates win, and ties are broken
    uniformly at random so the choice depends only on the RNG stream.
    """

    def select(self, grid: Grid, rng: RNG) -> GridPos | None:
        """Return the chosen position, or None when no cell is selectable.

        None means every unresolved cell has zero candidates (or there are no
        unresolved cells at all). The engine treats the former as a
        contradiction.
        """
        entropy = grid.entropy_map()
        eligible = (grid.resolved == UNRESOLVED) & (entropy > 0)
        if not eligible.any():
            return None

        lowest = entropy[eligible].min()
        # argwhere scans x-major, which fixes the tie order for a given grid
        tied = np.argwhere(eligible & (entropy == lowest))
        x, y = tied[rng.randrange(len(tied))]
        return (int(x), int(y))
