"""Tile rules and the catalogs built from them.

- TileRule: one tile kind with per-direction adjacency lists and weights
- TileCatalog: validated, biome-filtered rules with a precomputed
  compatibility table
- load_rules / rules_from_records: read rules from JSON or plain mappings
- preset_rules: small built-in catalogs for grassland, city and forest
"""

from .catalog import DIRECTION_INDEX, TileCatalog
from .loader import load_rules, rule_from_record, rules_from_records
from .presets import (
    PRESETS,
    PRESETS_BY_NAME,
    city_rules,
    forest_rules,
    grassland_rules,
    preset_rules,
)
from .tile_rule import (
    DIRECTIONS,
    Biome,
    Direction,
    LayoutMode,
    TileCategory,
    TileRule,
    can_neighbor,
)

__all__ = [
    "DIRECTIONS",
    "DIRECTION_INDEX",
    "PRESETS",
    "PRESETS_BY_NAME",
    "Biome",
    "Direction",
    "LayoutMode",
    "TileCatalog",
    "TileCategory",
    "TileRule",
    "can_neighbor",
    "city_rules",
    "forest_rules",
    "grassland_rules",
    "load_rules",
    "preset_rules",
    "rule_from_record",
    "rules_from_records",
]
