"""Constraint solver: grid arena, step components and the engine."""

from .adjustment import (
    ADJUSTMENT_RNG_DOMAIN,
    GridStateSummary,
    HeuristicAdjustment,
    no_adjustment,
)
from .backtrack import BacktrackManager, EngineState
from .context import GenerationContext, GenerationParams, SolverSettings
from .diagnostics import FailureDiagnostics
from .engine import GenerationResult, PlacedTile, WFCEngine
from .entropy import EntropyEvaluator
from .grid import UNRESOLVED, Cell, Grid, GridSnapshot
from .propagation import ConstraintPropagator, PropagationResult
from .safety import SafetyScorer, ScoredCandidate
from .sampling import WeightedSampler
from .selection import CellSelector
from .weights import WeightCalculator

__all__ = [
    "ADJUSTMENT_RNG_DOMAIN",
    "UNRESOLVED",
    "BacktrackManager",
    "Cell",
    "CellSelector",
    "ConstraintPropagator",
    "EngineState",
    "EntropyEvaluator",
    "FailureDiagnostics",
    "GenerationContext",
    "GenerationParams",
    "GenerationResult",
    "Grid",
    "GridSnapshot",
    "GridStateSummary",
    "HeuristicAdjustment",
    "PlacedTile",
    "PropagationResult",
    "SafetyScorer",
    "ScoredCandidate",
    "SolverSettings",
    "WFCEngine",
    "WeightCalculator",
    "WeightedSampler",
    "no_adjustment",
]
