"""Raw candidate weighting.

For a candidate tile on a chosen cell the weight is built up in this order:

    1. the tile's base weight
    2. + neighbour bonus for every resolved neighbour
    3. * the tile's biome weight
    4. * layout multiplier (continuous favours paths, sparse favours
       impassable tiles)
    5. + path connectivity term (path tiles only)
    6. + the external adjustment for this step

and finally floored so that every surviving candidate keeps a non-zero
chance of being sampled.

The entropy pass has already removed every candidate that a resolved
neighbour rejects, so each resolved neighbour is compatible by the time a
weight is computed and always earns the full bonus.
"""

from __future__ import annotations

from terraweave.catalog import LayoutMode, TileCategory
from terraweave.types import GridPos

from .context import GenerationContext, SolverSettings
from .grid import Grid


class WeightCalculator:
    """Scores one candidate tile for one cell."""

    def __init__(self, settings: SolverSettings) -> None:
        self.settings = settings

    def weight(
        self,
        grid: Grid,
        pos: GridPos,
        tile: int,
        context: GenerationContext,
        adjustment: float = 0.0,
    ) -> float:
        """Return the floored weight of placing ``tile`` at ``pos``."""
        settings = self.settings
        catalog = grid.catalog
        rule = catalog[tile]
        x, y = pos

        resolved_neighbors = 0
        path_neighbors = 0
        for _direction, nx, ny in grid.neighbors(x, y):
            neighbor = grid.tile_at(nx, ny)
            if neighbor is None:
                continue
            resolved_neighbors += 1
            if catalog.is_path[neighbor]:
                path_neighbors += 1

        weight = rule.base_weight
        weight += settings.neighbor_bonus * resolved_neighbors
        weight *= rule.biome_weight
        weight *= self.layout_multiplier(rule.category, context.layout)

        if rule.category is TileCategory.PATH:
            weight += self.path_connectivity(path_neighbors, context.layout)

        weight += adjustment
        return max(settings.min_weight, weight)

    def layout_multiplier(self, category: TileCategory, layout: LayoutMode) -> float:
        if layout is LayoutMode.CONTINUOUS and category is TileCategory.PATH:
            return self.settings.continuous_path_multiplier
        if layout is LayoutMode.SPARSE and category is TileCategory.IMPASSABLE:
            return self.settings.sparse_impassable_multiplier
        return 1.0

    def path_connectivity(self, path_neighbors: int, layout: LayoutMode) -> float:
        """Additive term for a path tile with ``path_neighbors`` path neighbours.

        Continuous layouts reward joining existing paths. Sparse layouts
        give a small bonus for short runs and a penalty once a path tile
        would touch more than the run threshold of other paths.
        """
        settings = self.settings
        if layout is LayoutMode.CONTINUOUS:
            return settings.continuous_path_bonus * path_neighbors
        if path_neighbors > settings.sparse_path_run_threshold:
            return settings.sparse_path_penalty
        return settings.sparse_path_bonus * path_neighbors
