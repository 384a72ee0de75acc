"""Entropy pass: prune unresolved cells against their resolved neighbours.

Runs once at the start of every step, before a cell is selected. The pass is
vectorised over the whole grid: for each direction, the resolved tile of the
neighbour on that side is shifted onto every cell, and the candidate mask is
ANDed with the set of tiles that tile accepts on the facing side.
"""

from __future__ import annotations

import logging

import numpy as np

from terraweave.catalog import DIRECTION_INDEX, DIRECTIONS
from terraweave.types import GridPos

from .grid import UNRESOLVED, Grid, shift_to_neighbor

logger = logging.getLogger(__name__)


class EntropyEvaluator:
    """Recomputes candidate sets from resolved neighbours."""

    def refresh(self, grid: Grid) -> list[GridPos]:
        """Prune every unresolved cell in place.

        Returns:
            Positions whose candidate set was non-empty before the pass and is
            empty after it. These are structural anomalies: they are logged but
            never abort the pass. The selector skips them, so a grid that has
            nothing else to select is treated as a dead end by the engine.
        """
        catalog = grid.catalog
        unresolved = grid.resolved == UNRESOLVED
        before = grid.candidates.any(axis=2)

        for direction in DIRECTIONS:
            neighbor_tile = shift_to_neighbor(grid.resolved, direction, UNRESOLVED)
            has_neighbor = unresolved & (neighbor_tile != UNRESOLVED)
            if not has_neighbor.any():
                continue
            # Row t: tiles that may sit on the opposite side of t, i.e. the
            # tiles a cell may hold when t is its ``direction`` neighbour.
            accepted = catalog.compat[DIRECTION_INDEX[direction.opposite]]
            xs, ys = np.nonzero(has_neighbor)
            grid.candidates[xs, ys] &= accepted[neighbor_tile[xs, ys]]

        after = grid.candidates.any(axis=2)
        emptied = np.argwhere(unresolved & before & ~after)
        anomalies = [(int(x), int(y)) for x, y in emptied]
        for x, y in anomalies:
            neighbors = ", ".join(
                f"{direction.name.lower()}={grid.catalog.name_of(tile)}"
                for direction, nx, ny in grid.neighbors(x, y)
                if (tile := grid.tile_at(nx, ny)) is not None
            )
            logger.warning(
                "Cell (%d, %d) lost every candidate to its resolved neighbours (%s)",
                x,
                y,
                neighbors or "none",
            )
        return anomalies
