"""Shared builders for solver tests."""

from __future__ import annotations

from collections.abc import Iterable

from terraweave.catalog import DIRECTIONS, TileCatalog, TileCategory, TileRule
from terraweave.solver import GenerationParams, Grid, SolverSettings, WFCEngine


def uniform_rule(
    name: str,
    neighbors: Iterable[str],
    *,
    category: TileCategory = TileCategory.CUSTOM,
    base_weight: float = 1.0,
    biome_weight: float = 1.0,
) -> TileRule:
    """A rule with the same compatibility list on all four sides."""
    names = frozenset(neighbors)
    return TileRule(
        name=name,
        category=category,
        up=names,
        down=names,
        left=names,
        right=names,
        base_weight=base_weight,
        biome_weight=biome_weight,
    )


def permissive_rules() -> list[TileRule]:
    """Tiles A and B, each compatible with both on every side."""
    return [uniform_rule("A", {"A", "B"}), uniform_rule("B", {"A", "B"})]


def gradient_rules() -> list[TileRule]:
    """A <-> B <-> C: A and C may never touch."""
    return [
        uniform_rule("A", {"A", "B"}, base_weight=3.0),
        uniform_rule("B", {"A", "B", "C"}, base_weight=2.0),
        uniform_rule("C", {"B", "C"}),
    ]


def forced_contradiction_rules() -> list[TileRule]:
    """X and Y only accept themselves on their right; Z accepts nothing.

    Every other side of X and Y is unconstrained.
    """
    return [
        TileRule(name="X", right=frozenset({"X"})),
        TileRule(name="Y", right=frozenset({"Y"})),
        TileRule(name="Z", allow_all_by_default=False),
    ]


def make_grid(rules: list[TileRule], width: int, height: int) -> Grid:
    return Grid(width, height, TileCatalog(rules))


def make_engine(
    rules: list[TileRule],
    width: int,
    height: int,
    seed: int = 42,
    **kwargs,
) -> WFCEngine:
    return WFCEngine(
        rules, GenerationParams(width=width, height=height, seed=seed), **kwargs
    )


def fast_settings(**overrides) -> SolverSettings:
    """Settings with small limits so failure paths finish quickly."""
    values = {"max_backtrack_depth": 2, "max_attempts": 2}
    values.update(overrides)
    return SolverSettings(**values)


def assert_adjacency_valid(grid: Grid) -> None:
    """Every pair of orthogonally adjacent resolved cells is compatible."""
    catalog = grid.catalog
    for x in range(grid.width):
        for y in range(grid.height):
            tile = grid.tile_at(x, y)
            if tile is None:
                continue
            for direction in DIRECTIONS:
                dx, dy = direction.offset
                nx, ny = x + dx, y + dy
                if not grid.in_bounds(nx, ny):
                    continue
                neighbor = grid.tile_at(nx, ny)
                if neighbor is None:
                    continue
                assert catalog.compatible(tile, neighbor, direction), (
                    f"{catalog.name_of(tile)} at ({x}, {y}) cannot have "
                    f"{catalog.name_of(neighbor)} to its {direction.name.lower()}"
                )
