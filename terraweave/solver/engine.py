"""The step loop and the multi-attempt retry policy.

One step is:

    1. ask the adjustment hook for this step's scalar
    2. entropy pass (prune against resolved neighbours)
    3. select the minimum-entropy cell and snapshot the grid
    4. weight, safety-score and sample a tile for it
    5. collapse and propagate
    6. on any contradiction, restore the latest snapshot

Steps can be driven one at a time (``step``), as a generator (``steps``) or
to completion (``run``). All three produce the same grid for the same seed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

from terraweave.catalog import TileCatalog, TileRule
from terraweave.errors import (
    BacktrackExhausted,
    BacktrackFailure,
    FailureKind,
    GenerationFailedError,
    WFCContradiction,
)
from terraweave.events import EventBus, ProgressEvent, StatusEvent
from terraweave.types import AdjustmentHook
from terraweave.util.rng import RNGStream

from .adjustment import GridStateSummary
from .backtrack import BacktrackManager, EngineState
from .context import GenerationContext, GenerationParams, SolverSettings
from .diagnostics import FailureDiagnostics
from .entropy import EntropyEvaluator
from .grid import Grid
from .propagation import ConstraintPropagator
from .safety import SafetyScorer
from .sampling import WeightedSampler
from .selection import CellSelector
from .weights import WeightCalculator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlacedTile:
    x: int
    y: int
    tile: int
    name: str


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of a generation.

    Attributes:
        success: Every cell was resolved.
        grid: The final grid (complete on success, as left by the last
            attempt on failure).
        placements: Every resolved cell with its tile.
        names: Resolved tile names indexed ``[x][y]``, None where unresolved.
        total_backtracks: Backtracks across all attempts.
        attempts: Attempts used.
        failure: GENERATION_FAILED when every attempt failed, else None.
        reason: Why the last failed attempt gave up.
        diagnostics: Failure analysis of the last attempt, on failure.
    """

    success: bool
    grid: Grid
    placements: list[PlacedTile]
    names: list[list[str | None]]
    total_backtracks: int
    attempts: int
    failure: FailureKind | None = None
    reason: BacktrackFailure | None = None
    diagnostics: FailureDiagnostics | None = None

    def raise_for_failure(self) -> None:
        """Raise GenerationFailedError if the generation failed."""
        if self.failure is None:
            return
        assert self.diagnostics is not None
        reason = self.reason.name if self.reason is not None else "unknown"
        raise GenerationFailedError(
            f"Generation failed after {self.attempts} attempts (last: {reason})",
            self.diagnostics,
        )


class WFCEngine:
    """Fills a grid with tiles from one catalog.

    Args:
        rules: A ready TileCatalog, or any iterable of TileRules, which is
            filtered down to ``params.biome``.
        params: Grid size, biome, layout and seed.
        adjustment: Optional hook called once per step with a
            GridStateSummary; its result is added to every candidate weight.
        settings: Limits and weighting constants. Defaults to the values in
            ``terraweave.config``.
        on_progress: Shortcut for subscribing to ProgressEvent; receives the
            resolved fraction.
        on_status: Shortcut for subscribing to StatusEvent; receives the
            message.

    Raises:
        CatalogEmptyError: No rule belongs to ``params.biome``.
        InvalidRuleError: The rules reference unknown tiles or repeat names.
    """

    def __init__(
        self,
        rules: TileCatalog | Iterable[TileRule],
        params: GenerationParams,
        *,
        adjustment: AdjustmentHook | None = None,
        settings: SolverSettings | None = None,
        on_progress: Callable[[float], None] | None = None,
        on_status: Callable[[str], None] | None = None,
    ) -> None:
        self.params = params
        if settings is None:
            settings = SolverSettings.from_config()
        self.settings = settings
        self.adjustment = adjustment

        self.events = EventBus()
        if on_progress is not None:
            self.events.subscribe(ProgressEvent, lambda e: on_progress(e.progress))
        if on_status is not None:
            self.events.subscribe(StatusEvent, lambda e: on_status(e.message))

        if isinstance(rules, TileCatalog):
            self.catalog = rules
        else:
            self.catalog = TileCatalog.for_biome(rules, params.biome)

        self.context = GenerationContext.create(params)
        self.entropy = EntropyEvaluator()
        self.selector = CellSelector()
        self.weights = WeightCalculator(self.settings)
        self.safety = SafetyScorer(self.settings)
        self.sampler = WeightedSampler()
        self.propagator = ConstraintPropagator(self.settings)
        self.backtrack = BacktrackManager(self.settings)

        self.grid = Grid(params.width, params.height, self.catalog)
        self.state = EngineState.RUNNING
        self.failure_reason: BacktrackFailure | None = None
        self.diagnostics: FailureDiagnostics | None = None
        self._seeds: list[tuple[int, int, tuple[str, ...]]] = []

        self._status(
            f"Catalog for biome {self.catalog.biome.name}: "
            f"{len(self.catalog)} tiles, grid {params.width}x{params.height}"
        )
        self._status("Tile compatibility overview:", logging.DEBUG)
        for line in self.catalog.describe():
            self._status(f"  {line}", logging.DEBUG)

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    def constrain(self, x: int, y: int, names: Iterable[str]) -> None:
        """Restrict a cell to the named tiles before solving starts.

        The restriction is re-applied to the fresh grid of every attempt.
        Propagation does not run here; the first steps discover any conflict.
        """
        if self.context.attempt > 0:
            raise RuntimeError("Cells can only be constrained before the first step")
        if not self.grid.in_bounds(x, y):
            raise ValueError(f"Cell ({x}, {y}) is outside the grid")
        allowed = tuple(names)
        self.grid.constrain(x, y, allowed)
        self._seeds.append((x, y, allowed))

    def stream(self, domain: str) -> RNGStream:
        """Return an RNG stream that is reseeded together with the solver's."""
        return self.context.provider.get(domain)

    # -------------------------------------------------------------------------
    # Driving
    # -------------------------------------------------------------------------

    @property
    def progress(self) -> float:
        return self.grid.progress()

    def step(self, adjustment: float | None = None) -> EngineState:
        """Perform exactly one step and return the resulting state.

        Args:
            adjustment: Use this value instead of asking the hook.
        """
        if self.state.is_terminal:
            return self.state
        if self.context.attempt == 0 or self.state is EngineState.ATTEMPT_FAILED:
            self._begin_attempt()

        self.context.step_count += 1
        try:
            self._advance(adjustment)
        except BacktrackExhausted as exc:
            self._attempt_failed(exc.reason)

        self.events.publish(
            ProgressEvent(
                progress=self.grid.progress(),
                attempt=self.context.attempt,
                step=self.context.step_count,
            )
        )
        return self.state

    def steps(self) -> Iterator[EngineState]:
        """Yield the state after every step until a terminal state."""
        while not self.state.is_terminal:
            yield self.step()

    def run(self) -> GenerationResult:
        """Run to completion or final failure."""
        for _state in self.steps():
            pass
        return self.result()

    def result(self) -> GenerationResult:
        grid = self.grid
        placements = [
            PlacedTile(x, y, tile, self.catalog.name_of(tile))
            for x in range(grid.width)
            for y in range(grid.height)
            if (tile := grid.tile_at(x, y)) is not None
        ]
        failed = self.state is EngineState.GENERATION_FAILED
        return GenerationResult(
            success=self.state is EngineState.COMPLETE,
            grid=grid,
            placements=placements,
            names=grid.tile_names(),
            total_backtracks=self.context.total_backtracks,
            attempts=self.context.attempt,
            failure=FailureKind.GENERATION_FAILED if failed else None,
            reason=self.failure_reason,
            diagnostics=self.diagnostics if failed else None,
        )

    # -------------------------------------------------------------------------
    # Step internals
    # -------------------------------------------------------------------------

    def _begin_attempt(self) -> None:
        self.context.begin_attempt()
        self.grid = Grid(self.params.width, self.params.height, self.catalog)
        for x, y, names in self._seeds:
            self.grid.constrain(x, y, names)
        self.backtrack.begin_attempt()
        self.state = EngineState.RUNNING
        self._status(
            f"Starting attempt {self.context.attempt}/{self.settings.max_attempts}"
        )

    def _advance(self, override: float | None) -> None:
        grid = self.grid
        context = self.context
        adjustment = self._adjustment_for_step(override)

        self.entropy.refresh(grid)
        pos = self.selector.select(grid, context.rng)
        if pos is None:
            self._contradiction("No selectable cell: every open cell has no candidates")
            return
        self.backtrack.save(grid)

        weighted = [
            (tile, self.weights.weight(grid, pos, tile, context, adjustment))
            for tile in grid.candidate_tiles(*pos)
        ]
        scored = self.safety.restrict(
            self.safety.rank(grid, pos, weighted), context.backtrack_depth
        )
        tile = self.sampler.sample([(c.tile, c.score) for c in scored], context.rng)
        if tile is None:
            self._contradiction(f"No valid tile for cell {pos}")
            return

        grid.collapse(*pos, tile)
        try:
            self.propagator.propagate(grid, pos)
        except WFCContradiction as exc:
            self._contradiction(str(exc))
            return

        self.state = self.backtrack.record_success(grid)
        if self.state is EngineState.COMPLETE:
            self._status(
                f"Generation complete on attempt {context.attempt} "
                f"with {context.total_backtracks} backtracks"
            )
            return
        self.backtrack.check_stall(grid, context)

    def _adjustment_for_step(self, override: float | None) -> float:
        if override is not None:
            return override
        if self.adjustment is None:
            return 0.0
        return float(self.adjustment(GridStateSummary.capture(self.grid, self.context)))

    def _contradiction(self, reason: str) -> None:
        """Roll back one snapshot; raises BacktrackExhausted when impossible."""
        self.backtrack.handle_contradiction(self.grid, self.context, reason)
        self._status(
            f"Contradiction, backtracked to depth {self.context.backtrack_depth}: "
            f"{reason}",
            logging.DEBUG,
        )
        self.backtrack.check_stall(self.grid, self.context)

    def _attempt_failed(self, reason: BacktrackFailure) -> None:
        context = self.context
        self.failure_reason = reason
        diagnostics = FailureDiagnostics.collect(self.grid)

        self._status(
            f"Generation attempt {context.attempt} failed due to: {reason.name}",
            logging.WARNING,
        )
        self._status(f"Possible causes: {reason.hint}", logging.WARNING)
        for line in diagnostics.lines():
            self._status(line)

        if context.attempt >= self.settings.max_attempts:
            self.state = EngineState.GENERATION_FAILED
            self.diagnostics = diagnostics
            self._status(
                f"Generation failed after {context.attempt} attempts",
                logging.WARNING,
            )
        else:
            self.state = EngineState.ATTEMPT_FAILED

    def _status(self, message: str, level: int = logging.INFO) -> None:
        logger.log(level, message)
        self.events.publish(StatusEvent(message))
