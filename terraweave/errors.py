"""Exceptions raised by the catalog and the solver.

Only CatalogEmptyError, InvalidRuleError and GenerationFailedError ever reach
callers. WFCContradiction and BacktrackExhausted describe internal events that
the engine recovers from (by backtracking and by restarting, respectively).
"""

from __future__ import annotations

from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from terraweave.solver.diagnostics import FailureDiagnostics
    from terraweave.types import GridPos


class FailureKind(Enum):
    """Every way a generation can go wrong."""

    CATALOG_EMPTY = auto()
    INVALID_RULE = auto()
    CONTRADICTION = auto()
    BACKTRACK_EXHAUSTED = auto()
    GENERATION_FAILED = auto()


class BacktrackFailure(Enum):
    """Why an attempt could not be rolled back any further."""

    TOO_MANY_BACKTRACKS = "too many backtracks"
    NO_PREVIOUS_STATES = "no previous states"
    STALLED = "stalled"

    @property
    def hint(self) -> str:
        """Likely cause, shown in status output."""
        return _BACKTRACK_HINTS[self]


_BACKTRACK_HINTS = {
    BacktrackFailure.TOO_MANY_BACKTRACKS: (
        "Too restrictive adjacency rules, insufficient tile variety"
    ),
    BacktrackFailure.NO_PREVIOUS_STATES: (
        "Invalid initial constraints, contradictory tile rules"
    ),
    BacktrackFailure.STALLED: "Backtracking is undoing more than it resolves",
}


class WFCError(Exception):
    """Base class for every error in this package."""

    kind: FailureKind


class CatalogEmptyError(WFCError):
    """Raised when no tile belongs to the requested biome."""

    kind = FailureKind.CATALOG_EMPTY


class InvalidRuleError(WFCError):
    """Raised when a tile rule is malformed or references an unknown tile."""

    kind = FailureKind.INVALID_RULE


class WFCContradiction(WFCError):
    """Raised when an unresolved cell is left with zero candidates.

    The engine catches this and backtracks; it only describes the event.
    """

    kind = FailureKind.CONTRADICTION

    def __init__(self, message: str, position: GridPos | None = None) -> None:
        super().__init__(message)
        self.position = position


class BacktrackExhausted(WFCError):
    """Raised when the current attempt cannot be rolled back any further."""

    kind = FailureKind.BACKTRACK_EXHAUSTED

    def __init__(self, reason: BacktrackFailure) -> None:
        super().__init__(f"Generation attempt failed due to: {reason.name}")
        self.reason = reason


class GenerationFailedError(WFCError):
    """Raised (on request) when every generation attempt failed.

    Attributes:
        diagnostics: Tile usage, low-entropy cells and restrictive tiles
            collected from the final grid.
    """

    kind = FailureKind.GENERATION_FAILED

    def __init__(self, message: str, diagnostics: FailureDiagnostics) -> None:
        super().__init__(message)
        self.diagnostics = diagnostics
