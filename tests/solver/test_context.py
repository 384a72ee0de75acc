"""Tests for generation parameters, settings and per-generation context."""

from __future__ import annotations

import dataclasses

import pytest

from terraweave import config
from terraweave.catalog import Biome, LayoutMode
from terraweave.solver import GenerationContext, GenerationParams, SolverSettings
from terraweave.solver.context import SOLVER_RNG_DOMAIN


class TestGenerationParams:
    def test_defaults(self) -> None:
        params = GenerationParams(width=4, height=3)
        assert params.biome is Biome.CUSTOM
        assert params.layout is LayoutMode.CONTINUOUS
        assert params.seed == config.DEFAULT_SEED

    def test_rejects_bool_dimensions(self) -> None:
        with pytest.raises(ValueError):
            GenerationParams(width=True, height=3)


class TestSolverSettings:
    def test_from_config_matches_defaults(self) -> None:
        assert SolverSettings.from_config() == SolverSettings()

    def test_from_config_reads_current_values(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(config, "MAX_GENERATION_ATTEMPTS", 7)
        assert SolverSettings.from_config().max_attempts == 7

    def test_replace(self) -> None:
        settings = dataclasses.replace(SolverSettings(), stall_limit=2)
        assert settings.stall_limit == 2

    @pytest.mark.parametrize(
        "overrides",
        [{"min_weight": 0.0}, {"max_attempts": 0}, {"max_backtrack_depth": -1}],
    )
    def test_rejects_invalid_values(self, overrides: dict[str, float]) -> None:
        with pytest.raises(ValueError):
            SolverSettings(**overrides)


class TestGenerationContext:
    def test_create(self) -> None:
        params = GenerationParams(
            width=2, height=2, biome=Biome.FOREST, layout=LayoutMode.SPARSE, seed=5
        )
        context = GenerationContext.create(params)
        assert context.biome is Biome.FOREST
        assert context.layout is LayoutMode.SPARSE
        assert context.provider.master_seed == 5
        assert context.rng.domain == SOLVER_RNG_DOMAIN
        assert context.attempt == 0

    def test_seed_zero_is_non_deterministic(self) -> None:
        context = GenerationContext.create(GenerationParams(width=1, height=1, seed=0))
        assert context.provider.master_seed is None

    def test_first_attempt_keeps_seed(self) -> None:
        context = GenerationContext.create(GenerationParams(width=1, height=1, seed=5))
        context.begin_attempt()
        assert context.attempt == 1
        assert context.provider.master_seed == 5

    def test_retry_resets_counters_and_reseeds(self) -> None:
        context = GenerationContext.create(GenerationParams(width=1, height=1, seed=5))
        context.begin_attempt()
        first_draw = context.rng.random()
        context.backtrack_depth = 9
        context.stall_count = 4
        context.step_count = 30
        context.total_backtracks = 9

        context.begin_attempt()

        assert context.attempt == 2
        assert context.backtrack_depth == 0
        assert context.stall_count == 0
        assert context.step_count == 0
        assert context.total_backtracks == 9
        assert context.provider.master_seed != 5
        assert context.rng.random() != first_draw

    def test_retries_are_reproducible(self) -> None:
        def draws() -> list[float]:
            context = GenerationContext.create(
                GenerationParams(width=1, height=1, seed=21)
            )
            values = []
            for _ in range(3):
                context.begin_attempt()
                values.append(context.rng.random())
            return values

        assert draws() == draws()
