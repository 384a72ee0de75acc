"""The built-in catalogs must be valid and solvable."""

from __future__ import annotations

import pytest

from terraweave.catalog import (
    PRESETS,
    PRESETS_BY_NAME,
    Biome,
    TileCatalog,
    TileCategory,
    preset_rules,
)
from terraweave.solver import GenerationParams, SolverSettings, WFCEngine
from tests.helpers import assert_adjacency_valid


@pytest.mark.parametrize("biome", list(PRESETS))
class TestPresetCatalogs:
    def test_preset_builds_catalog(self, biome: Biome) -> None:
        catalog = TileCatalog(PRESETS[biome]())
        assert catalog.biome is biome
        assert all(rule.biome is biome for rule in catalog)

    def test_preset_has_a_path_tile(self, biome: Biome) -> None:
        """Every preset exercises the path connectivity heuristics."""
        categories = {rule.category for rule in PRESETS[biome]()}
        assert TileCategory.PATH in categories

    def test_preset_solves(self, biome: Biome) -> None:
        engine = WFCEngine(
            preset_rules(),
            GenerationParams(width=6, height=5, biome=biome, seed=7),
            settings=SolverSettings(max_attempts=10),
        )
        result = engine.run()
        assert result.success
        assert_adjacency_valid(result.grid)


def test_presets_by_name_covers_every_preset() -> None:
    assert set(PRESETS_BY_NAME) == {biome.name.lower() for biome in PRESETS}
    for name, (biome, factory) in PRESETS_BY_NAME.items():
        assert biome.name.lower() == name
        assert factory is PRESETS[biome]


def test_preset_names_are_unique_per_biome() -> None:
    for factory in PRESETS.values():
        names = [rule.name for rule in factory()]
        assert len(names) == len(set(names))
