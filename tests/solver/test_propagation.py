"""Tests for breadth-first constraint propagation."""

from __future__ import annotations

import logging

import pytest

from terraweave.errors import FailureKind, WFCContradiction
from terraweave.solver import ConstraintPropagator, SolverSettings
from tests.helpers import forced_contradiction_rules, gradient_rules, make_grid

A, B, C = 0, 1, 2
X, Y, Z = 0, 1, 2


class TestPropagation:
    def test_prunes_direct_neighbor(self) -> None:
        grid = make_grid(gradient_rules(), 3, 1)
        grid.collapse(0, 0, A)

        result = ConstraintPropagator(SolverSettings()).propagate(grid, (0, 0))

        assert grid.candidate_tiles(1, 0) == [A, B]
        # B in the middle still allows anything further right
        assert grid.candidate_tiles(2, 0) == [A, B, C]
        assert result.steps == 2
        assert result.changed == 1
        assert not result.capped

    def test_cascades_through_unresolved_cells(self) -> None:
        grid = make_grid(forced_contradiction_rules(), 4, 1)
        grid.collapse(0, 0, X)

        result = ConstraintPropagator(SolverSettings()).propagate(grid, (0, 0))

        for x in (1, 2, 3):
            assert grid.candidate_tiles(x, 0) == [X]
            # Propagation narrows but never resolves
            assert not grid.is_resolved(x, 0)
        assert result.changed == 3

    def test_cascades_vertically(self) -> None:
        grid = make_grid(gradient_rules(), 1, 3)
        grid.constrain(0, 1, ["A", "B"])
        grid.collapse(0, 0, C)

        ConstraintPropagator(SolverSettings()).propagate(grid, (0, 0))

        assert grid.candidate_tiles(0, 1) == [B]
        assert grid.candidate_tiles(0, 2) == [A, B, C]

    def test_resolved_neighbors_untouched(self) -> None:
        grid = make_grid(gradient_rules(), 2, 1)
        grid.collapse(1, 0, C)
        grid.collapse(0, 0, A)  # Incompatible, but already resolved
        ConstraintPropagator(SolverSettings()).propagate(grid, (0, 0))
        assert grid.tile_at(1, 0) == C

    def test_contradiction_raises_with_position(self) -> None:
        grid = make_grid(forced_contradiction_rules(), 2, 1)
        grid.constrain(1, 0, ["Y", "Z"])
        grid.collapse(0, 0, X)

        with pytest.raises(WFCContradiction) as exc_info:
            ConstraintPropagator(SolverSettings()).propagate(grid, (0, 0))

        error = exc_info.value
        assert error.position == (1, 0)
        assert error.kind is FailureKind.CONTRADICTION
        assert "'X'" in str(error)
        assert "['Y', 'Z']" in str(error)

    def test_step_cap_is_a_soft_success(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        grid = make_grid(forced_contradiction_rules(), 3, 1)
        grid.collapse(0, 0, X)
        propagator = ConstraintPropagator(SolverSettings(propagation_step_factor=0))

        with caplog.at_level(logging.WARNING, logger="terraweave"):
            result = propagator.propagate(grid, (0, 0))

        assert result.capped
        assert result.steps == 0
        assert "stopped after 0 steps" in caplog.text
        # Nothing was pruned before the cap
        assert grid.candidate_tiles(1, 0) == [X, Y, Z]

    def test_max_steps_scales_with_grid(self) -> None:
        grid = make_grid(gradient_rules(), 4, 5)
        propagator = ConstraintPropagator(SolverSettings(propagation_step_factor=10))
        assert propagator.max_steps(grid) == 200
