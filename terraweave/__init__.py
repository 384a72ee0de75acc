"""Tile-constraint map generation.

Usage:
    from terraweave import GenerationParams, WFCEngine, grassland_rules
    from terraweave.catalog import Biome

    engine = WFCEngine(
        grassland_rules(),
        GenerationParams(width=20, height=12, biome=Biome.GRASSLAND, seed=42),
    )
    result = engine.run()
    result.raise_for_failure()
    print(result.grid.render())
"""

from .catalog import (
    Biome,
    Direction,
    LayoutMode,
    TileCatalog,
    TileCategory,
    TileRule,
    city_rules,
    forest_rules,
    grassland_rules,
    load_rules,
    preset_rules,
)
from .errors import (
    BacktrackExhausted,
    CatalogEmptyError,
    FailureKind,
    GenerationFailedError,
    InvalidRuleError,
    WFCContradiction,
    WFCError,
)
from .solver import (
    EngineState,
    GenerationParams,
    GenerationResult,
    HeuristicAdjustment,
    SolverSettings,
    WFCEngine,
)

__all__ = [
    "BacktrackExhausted",
    "Biome",
    "CatalogEmptyError",
    "Direction",
    "EngineState",
    "FailureKind",
    "GenerationFailedError",
    "GenerationParams",
    "GenerationResult",
    "HeuristicAdjustment",
    "InvalidRuleError",
    "LayoutMode",
    "SolverSettings",
    "TileCatalog",
    "TileCategory",
    "TileRule",
    "WFCContradiction",
    "WFCEngine",
    "WFCError",
    "city_rules",
    "forest_rules",
    "grassland_rules",
    "load_rules",
    "preset_rules",
]
