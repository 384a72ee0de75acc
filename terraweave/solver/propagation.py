"""Breadth-first constraint propagation.

After a collapse, the consequence ripples outward: every unresolved neighbour
keeps only the tiles that at least one of the source cell's candidates
accepts on that side. Neighbours that shrink are queued in turn, so the pass
keeps going until no cell changes (arc consistency over the grid).
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass

import numpy as np

from terraweave.errors import WFCContradiction
from terraweave.types import GridPos

from .context import SolverSettings
from .grid import Grid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PropagationResult:
    """Outcome of a propagation pass that did not hit a contradiction.

    Attributes:
        steps: Cells dequeued and processed.
        changed: Distinct cells whose candidate set shrank.
        capped: True if the step cap stopped the pass before the queue
            drained. The grid is still consistent, just not fully pruned.
    """

    steps: int
    changed: int
    capped: bool = False


class ConstraintPropagator:
    def __init__(self, settings: SolverSettings) -> None:
        self.settings = settings

    def max_steps(self, grid: Grid) -> int:
        return grid.cell_count * self.settings.propagation_step_factor

    def propagate(self, grid: Grid, start: GridPos) -> PropagationResult:
        """Propagate from ``start`` until nothing changes.

        Raises:
            WFCContradiction: An unresolved neighbour lost its last candidate.
                The grid is left partially pruned; the caller restores it.
        """
        catalog = grid.catalog
        queue: deque[GridPos] = deque([start])
        queued = {start}
        changed: set[GridPos] = set()
        max_steps = self.max_steps(grid)
        steps = 0

        while queue:
            if steps >= max_steps:
                logger.warning(
                    "Propagation from %s stopped after %d steps with %d cells "
                    "still queued",
                    start,
                    steps,
                    len(queue),
                )
                return PropagationResult(steps=steps, changed=len(changed), capped=True)

            x, y = queue.popleft()
            queued.discard((x, y))
            steps += 1
            source = grid.candidates[x, y]

            for direction, nx, ny in grid.neighbors(x, y):
                if grid.is_resolved(nx, ny):
                    continue
                current = grid.candidates[nx, ny]
                pruned = current & catalog.support(direction, source)
                if np.array_equal(pruned, current):
                    continue

                if not pruned.any():
                    removed = [catalog.name_of(int(i)) for i in np.flatnonzero(current)]
                    raise WFCContradiction(
                        f"Propagation from ({x}, {y}) holding "
                        f"{self._describe(grid, x, y)} emptied ({nx}, {ny}); "
                        f"removed {removed}",
                        position=(nx, ny),
                    )

                grid.candidates[nx, ny] = pruned
                changed.add((nx, ny))
                if (nx, ny) not in queued:
                    queue.append((nx, ny))
                    queued.add((nx, ny))

        return PropagationResult(steps=steps, changed=len(changed))

    @staticmethod
    def _describe(grid: Grid, x: int, y: int) -> str:
        tile = grid.tile_at(x, y)
        if tile is not None:
            return f"'{grid.catalog.name_of(tile)}'"
        names = [grid.catalog.name_of(t) for t in grid.candidate_tiles(x, y)]
        return f"{{{', '.join(names)}}}"
