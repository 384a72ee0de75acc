"""Built-in example catalogs.

These give the command line, the benchmark script and the tests something
realistic to solve without a catalog file. Each biome is self-contained:
every name a rule mentions belongs to the same biome.

Adjacency philosophy:
- Grassland: grass is the common ground, dirt bridges grass and rock,
  paths run over grass and dirt, water only touches grass.
- City: roads are lined with pavement, buildings and parks never touch a
  road directly.
- Forest: the forest floor accepts anything (wildcard), trees, trails and
  streams only touch the floor and themselves.
"""

from __future__ import annotations

from collections.abc import Iterable

from .tile_rule import Biome, TileCategory, TileRule


def _same_all_sides(
    name: str,
    category: TileCategory,
    biome: Biome,
    neighbors: Iterable[str],
    base_weight: float = 1.0,
    biome_weight: float = 1.0,
) -> TileRule:
    names = frozenset(neighbors)
    return TileRule(
        name=name,
        category=category,
        biome=biome,
        up=names,
        down=names,
        left=names,
        right=names,
        base_weight=base_weight,
        biome_weight=biome_weight,
    )


def grassland_rules() -> list[TileRule]:
    """Open countryside: grass, dirt, paths, ponds and rock outcrops."""
    biome = Biome.GRASSLAND
    return [
        _same_all_sides(
            "grass",
            TileCategory.GRASS,
            biome,
            {"grass", "dirt", "path", "water"},
            base_weight=4.0,
        ),
        _same_all_sides(
            "dirt",
            TileCategory.DIRT,
            biome,
            {"grass", "dirt", "path", "rock"},
            base_weight=2.0,
        ),
        _same_all_sides(
            "path", TileCategory.PATH, biome, {"grass", "dirt", "path"}, 1.5
        ),
        _same_all_sides(
            "water",
            TileCategory.WATER,
            biome,
            {"grass", "water"},
            base_weight=1.0,
            biome_weight=1.2,
        ),
        _same_all_sides(
            "rock", TileCategory.IMPASSABLE, biome, {"dirt", "rock"}, 0.8
        ),
    ]


def city_rules() -> list[TileRule]:
    """Street blocks: roads, pavement, buildings and small parks."""
    biome = Biome.CITY
    return [
        _same_all_sides("road", TileCategory.PATH, biome, {"road", "pavement"}, 2.0),
        _same_all_sides(
            "pavement",
            TileCategory.STONE,
            biome,
            {"road", "pavement", "building", "park"},
            base_weight=2.5,
        ),
        _same_all_sides(
            "building",
            TileCategory.IMPASSABLE,
            biome,
            {"pavement", "building"},
            base_weight=3.0,
        ),
        _same_all_sides(
            "park", TileCategory.GRASS, biome, {"pavement", "park"}, 1.0
        ),
    ]


def forest_rules() -> list[TileRule]:
    """Woodland: a permissive floor with trees, trails and streams."""
    biome = Biome.FOREST
    return [
        _same_all_sides(
            "forest_floor", TileCategory.GRASS, biome, {"*"}, base_weight=3.0
        ),
        _same_all_sides(
            "tree",
            TileCategory.IMPASSABLE,
            biome,
            {"forest_floor", "tree"},
            base_weight=2.0,
            biome_weight=1.5,
        ),
        _same_all_sides(
            "trail", TileCategory.PATH, biome, {"forest_floor", "trail"}, 1.0
        ),
        _same_all_sides(
            "stream", TileCategory.WATER, biome, {"forest_floor", "stream"}, 0.7
        ),
    ]


PRESETS = {
    Biome.GRASSLAND: grassland_rules,
    Biome.CITY: city_rules,
    Biome.FOREST: forest_rules,
}

# Lower-case biome name -> (biome, factory), for command line choices
PRESETS_BY_NAME = {
    biome.name.lower(): (biome, factory) for biome, factory in PRESETS.items()
}


def preset_rules() -> list[TileRule]:
    """Every built-in rule across all preset biomes."""
    rules: list[TileRule] = []
    for factory in PRESETS.values():
        rules.extend(factory())
    return rules
