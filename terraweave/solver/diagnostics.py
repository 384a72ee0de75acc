"""Failure analysis for tuning catalogs that do not solve."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from terraweave import config
from terraweave.types import GridPos

from .grid import Grid

SUGGESTIONS = (
    "Try increasing tile variety for this biome",
    "Check adjacency rules for conflicts",
    "Consider using '*' wildcard in compatibility lists",
    "Try a smaller grid size first",
)


@dataclass(frozen=True)
class FailureDiagnostics:
    """Snapshot of what the grid looked like when an attempt gave up.

    Attributes:
        tile_usage: How often each tile name was placed.
        zero_entropy: Unresolved cells left with no candidates.
        low_entropy: Unresolved ``(position, entropy)`` pairs with between one
            and ``LOW_ENTROPY_THRESHOLD`` candidates, fewest first.
        restrictive_tiles: Names of the tiles with the fewest allowed
            neighbour pairs.
        resolved: Cells resolved at the time of failure.
        cell_count: Total cells in the grid.
        suggestions: Generic tuning advice.
    """

    tile_usage: Counter[str]
    zero_entropy: list[GridPos]
    low_entropy: list[tuple[GridPos, int]]
    restrictive_tiles: list[str]
    resolved: int
    cell_count: int
    suggestions: tuple[str, ...] = field(default=SUGGESTIONS)

    @classmethod
    def collect(cls, grid: Grid) -> FailureDiagnostics:
        catalog = grid.catalog
        usage: Counter[str] = Counter()
        zero: list[GridPos] = []
        low: list[tuple[GridPos, int]] = []

        entropy = grid.entropy_map()
        for x in range(grid.width):
            for y in range(grid.height):
                tile = grid.tile_at(x, y)
                if tile is not None:
                    usage[catalog.name_of(tile)] += 1
                    continue
                count = int(entropy[x, y])
                if count == 0:
                    zero.append((x, y))
                elif count <= config.LOW_ENTROPY_THRESHOLD:
                    low.append(((x, y), count))

        low.sort(key=lambda item: item[1])
        restrictive = catalog.most_restrictive(config.RESTRICTIVE_TILE_REPORT_LIMIT)
        return cls(
            tile_usage=usage,
            zero_entropy=zero,
            low_entropy=low[: config.LOW_ENTROPY_REPORT_LIMIT],
            restrictive_tiles=[rule.name for rule in restrictive],
            resolved=grid.resolved_count(),
            cell_count=grid.cell_count,
        )

    def lines(self) -> list[str]:
        """Human readable report, one status line per entry."""
        usage = ", ".join(f"{name}:{n}" for name, n in self.tile_usage.most_common())
        lines = [
            "=== FAILURE ANALYSIS ===",
            f"Resolved {self.resolved}/{self.cell_count} cells",
            f"Tile usage: {usage or 'none'}",
        ]
        if self.zero_entropy:
            lines.append(f"Cells with no candidates: {self.zero_entropy}")
        if self.low_entropy:
            cells = ", ".join(f"{pos}={n}" for pos, n in self.low_entropy)
            lines.append(f"Lowest entropy cells: {cells}")
        if self.restrictive_tiles:
            lines.append(f"Most restrictive tiles: {', '.join(self.restrictive_tiles)}")
        lines.append("=== SUGGESTIONS ===")
        lines.extend(f"- {s}" for s in self.suggestions)
        return lines
