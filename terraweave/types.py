from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, NewType, TypeAlias

if TYPE_CHECKING:
    from terraweave.solver.adjustment import GridStateSummary

# =============================================================================
# SPATIAL TYPES
# =============================================================================

GridCoord: TypeAlias = int  # Always integer cell position

# Grid coordinates - (x, y) with y growing downward
GridPos: TypeAlias = tuple[GridCoord, GridCoord]  # Example: (2, 0) = third cell, top row

# Unit step between orthogonal neighbours
Offset: TypeAlias = tuple[int, int]  # Example: (1, 0) = one cell to the right

# =============================================================================
# CATALOG TYPES
# =============================================================================

# Interned position of a tile in its catalog. Stable for the catalog's lifetime
# and used everywhere in the hot path instead of tile names.
TileIndex = NewType("TileIndex", int)

# =============================================================================
# SCORING TYPES
# =============================================================================

# Additive term supplied by an external scoring source before each step.
Adjustment = NewType("Adjustment", float)

# Fraction of resolved cells, always in [0, 1].
Progress = NewType("Progress", float)

AdjustmentHook: TypeAlias = "Callable[[GridStateSummary], float]"

# =============================================================================
# MISC TYPES
# =============================================================================

RandomSeed: TypeAlias = int | str | None
