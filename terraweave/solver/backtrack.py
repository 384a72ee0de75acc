"""Snapshot stack and the per-attempt state machine.

    RUNNING --cell selected----------> snapshot pushed (pre-collapse state)
    RUNNING --collapse+propagate ok--> RUNNING (snapshot kept)
    RUNNING --every cell resolved----> COMPLETE
    RUNNING --contradiction----------> RUNNING (latest snapshot popped and
                                       restored) or ATTEMPT_FAILED
    ATTEMPT_FAILED --engine----------> RUNNING (new attempt) or
                                       GENERATION_FAILED

Every step saves the grid right before its collapse, so a contradiction
restores that step's own pre-collapse state and the same step can be retried
with a fresh draw. Only a step that finds nothing to collapse pops an older
snapshot. Backtrack depth only grows within an attempt and each backtrack
pops at most one older snapshot, so the stack is bounded at
``max_backtrack_depth + 1`` snapshots.
"""

from __future__ import annotations

import logging
from collections import deque
from enum import Enum, auto

from terraweave.errors import BacktrackExhausted, BacktrackFailure

from .context import GenerationContext, SolverSettings
from .grid import Grid, GridSnapshot

logger = logging.getLogger(__name__)


class EngineState(Enum):
    RUNNING = auto()
    ATTEMPT_FAILED = auto()
    COMPLETE = auto()
    GENERATION_FAILED = auto()

    @property
    def is_terminal(self) -> bool:
        return self in (EngineState.COMPLETE, EngineState.GENERATION_FAILED)


class BacktrackManager:
    """Owns the snapshot stack for the current attempt."""

    def __init__(self, settings: SolverSettings) -> None:
        self.settings = settings
        self.stack: deque[GridSnapshot] = deque(
            maxlen=settings.max_backtrack_depth + 1
        )
        self.state = EngineState.RUNNING
        self.failure: BacktrackFailure | None = None

    def __len__(self) -> int:
        return len(self.stack)

    def begin_attempt(self) -> None:
        """Drop every snapshot left over from the previous attempt."""
        self.stack.clear()
        self.state = EngineState.RUNNING
        self.failure = None

    def save(self, grid: Grid) -> None:
        """Push the grid as it stands before this step's collapse."""
        self.stack.append(grid.snapshot())

    def record_success(self, grid: Grid) -> EngineState:
        """Mark the step done; the state becomes COMPLETE once every cell is."""
        if grid.is_complete():
            self.state = EngineState.COMPLETE
        return self.state

    def handle_contradiction(
        self, grid: Grid, context: GenerationContext, reason: str
    ) -> None:
        """Roll the grid back one snapshot.

        Raises:
            BacktrackExhausted: Depth passed the maximum, or there is no
                snapshot left to restore. The state is ATTEMPT_FAILED.
        """
        context.backtrack_depth += 1
        context.total_backtracks += 1

        if context.backtrack_depth > self.settings.max_backtrack_depth:
            self._fail(BacktrackFailure.TOO_MANY_BACKTRACKS)
        if not self.stack:
            self._fail(BacktrackFailure.NO_PREVIOUS_STATES)

        grid.restore(self.stack.pop())
        logger.debug(
            "Backtracked to depth %d (%d snapshots left): %s",
            context.backtrack_depth,
            len(self.stack),
            reason,
        )

    def check_stall(self, grid: Grid, context: GenerationContext) -> None:
        """Fail the attempt when backtracking keeps outpacing progress.

        A step counts as stalled when at least one cell is resolved and the
        backtrack depth exceeds twice the number of resolved cells. More than
        ``stall_limit`` stalled steps in a row ends the attempt.

        Raises:
            BacktrackExhausted: With reason STALLED.
        """
        resolved = grid.resolved_count()
        if resolved > 0 and context.backtrack_depth > resolved * 2:
            context.stall_count += 1
            if context.stall_count > self.settings.stall_limit:
                self._fail(BacktrackFailure.STALLED)
        else:
            context.stall_count = 0

    def _fail(self, reason: BacktrackFailure) -> None:
        self.state = EngineState.ATTEMPT_FAILED
        self.failure = reason
        raise BacktrackExhausted(reason)
