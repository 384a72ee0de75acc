"""Grid state for the solver.

The grid keeps every cell's state in two flat numpy arrays (the arena):

    candidates: bool[width, height, tile_count]  - which tiles are still legal
    resolved:   int32[width, height]             - chosen tile, or -1

Keeping state in arrays rather than per-cell objects means a snapshot is two
``np.copy`` calls and a restore is two ``np.copyto`` calls, and the entropy
and selection passes can run vectorised over the whole grid.

Cell objects are read-only views produced on demand for callers that want to
inspect one position.
"""

from __future__ import annotations

import string
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import numpy as np

from terraweave.catalog import DIRECTIONS, Direction, TileCatalog
from terraweave.types import GridPos

UNRESOLVED = -1


@dataclass(frozen=True)
class Cell:
    """Read-only view of one grid position.

    Attributes:
        x: Column.
        y: Row, growing downward.
        candidates: Tile indices still possible here.
        tile: The resolved tile index, or None while unresolved.
    """

    x: int
    y: int
    candidates: frozenset[int]
    tile: int | None = None

    @property
    def position(self) -> GridPos:
        return (self.x, self.y)

    @property
    def is_resolved(self) -> bool:
        return self.tile is not None

    @property
    def entropy(self) -> int:
        """Number of remaining legal candidates."""
        return len(self.candidates)


@dataclass(frozen=True, eq=False)
class GridSnapshot:
    """Independent copy of the whole arena at one point in time."""

    candidates: np.ndarray
    resolved: np.ndarray

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GridSnapshot):
            return NotImplemented
        return np.array_equal(self.candidates, other.candidates) and np.array_equal(
            self.resolved, other.resolved
        )

    @property
    def nbytes(self) -> int:
        return self.candidates.nbytes + self.resolved.nbytes


def shift_to_neighbor(array: np.ndarray, direction: Direction, fill: int) -> np.ndarray:
    """Return ``out`` where ``out[x, y] == array[x + dx, y + dy]``.

    Positions whose neighbour falls outside the grid get ``fill``.
    """
    dx, dy = direction.offset
    width, height = array.shape[:2]
    out = np.full_like(array, fill)
    dst_x = slice(max(0, -dx), width - max(0, dx))
    src_x = slice(max(0, dx), width - max(0, -dx))
    dst_y = slice(max(0, -dy), height - max(0, dy))
    src_y = slice(max(0, dy), height - max(0, -dy))
    out[dst_x, dst_y] = array[src_x, src_y]
    return out


class Grid:
    """A fixed-size 2D grid of cells over one tile catalog.

    Every cell starts with the full catalog as candidates. The grid is
    mutated in place by the entropy pass, collapses and propagation, and is
    only ever rolled back wholesale through ``restore``.
    """

    def __init__(self, width: int, height: int, catalog: TileCatalog) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.catalog = catalog
        self.tile_count = len(catalog)
        self.candidates = np.ones((width, height, self.tile_count), dtype=np.bool_)
        self.resolved = np.full((width, height), UNRESOLVED, dtype=np.int32)

    @property
    def cell_count(self) -> int:
        return self.width * self.height

    # -------------------------------------------------------------------------
    # Geometry
    # -------------------------------------------------------------------------

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def neighbors(self, x: int, y: int) -> Iterator[tuple[Direction, int, int]]:
        """Yield ``(direction, nx, ny)`` for every in-bounds neighbour."""
        for direction in DIRECTIONS:
            dx, dy = direction.offset
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.width and 0 <= ny < self.height:
                yield direction, nx, ny

    # -------------------------------------------------------------------------
    # Cell state
    # -------------------------------------------------------------------------

    def is_resolved(self, x: int, y: int) -> bool:
        return bool(self.resolved[x, y] != UNRESOLVED)

    def tile_at(self, x: int, y: int) -> int | None:
        tile = int(self.resolved[x, y])
        return None if tile == UNRESOLVED else tile

    def entropy(self, x: int, y: int) -> int:
        return int(np.count_nonzero(self.candidates[x, y]))

    def entropy_map(self) -> np.ndarray:
        """Candidate count for every cell, shape (width, height)."""
        return np.count_nonzero(self.candidates, axis=2)

    def candidate_tiles(self, x: int, y: int) -> list[int]:
        """Indices of the tiles still possible at (x, y), ascending."""
        return [int(i) for i in np.flatnonzero(self.candidates[x, y])]

    def cell(self, x: int, y: int) -> Cell:
        return Cell(
            x=x,
            y=y,
            candidates=frozenset(self.candidate_tiles(x, y)),
            tile=self.tile_at(x, y),
        )

    def cells(self) -> Iterator[Cell]:
        """Every cell, column by column."""
        for x in range(self.width):
            for y in range(self.height):
                yield self.cell(x, y)

    def resolved_count(self) -> int:
        return int(np.count_nonzero(self.resolved != UNRESOLVED))

    def progress(self) -> float:
        """Fraction of cells resolved, in [0, 1]."""
        return self.resolved_count() / self.cell_count

    def is_complete(self) -> bool:
        return bool(np.all(self.resolved != UNRESOLVED))

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def collapse(self, x: int, y: int, tile: int) -> None:
        """Commit (x, y) to exactly ``tile``."""
        if self.is_resolved(x, y):
            raise ValueError(f"Cell ({x}, {y}) is already resolved")
        self.candidates[x, y] = False
        self.candidates[x, y, tile] = True
        self.resolved[x, y] = tile

    def constrain(self, x: int, y: int, names: Iterable[str]) -> None:
        """Restrict (x, y) to the named tiles without propagating.

        Used to pre-seed a grid before solving; the entropy pass and
        propagation take the restriction into account from the next step on.
        """
        if self.is_resolved(x, y):
            raise ValueError(f"Cell ({x}, {y}) is already resolved")
        self.candidates[x, y] &= self.catalog.mask_for(names)

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    def snapshot(self) -> GridSnapshot:
        return GridSnapshot(
            candidates=self.candidates.copy(),
            resolved=self.resolved.copy(),
        )

    def restore(self, snapshot: GridSnapshot) -> None:
        """Overwrite the whole arena from ``snapshot``.

        The snapshot's arrays are copied, never adopted, so later mutation of
        the grid cannot leak into it.
        """
        np.copyto(self.candidates, snapshot.candidates)
        np.copyto(self.resolved, snapshot.resolved)

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def tile_names(self) -> list[list[str | None]]:
        """Resolved tile names indexed ``[x][y]``; None where unresolved."""
        return [
            [
                None if tile == UNRESOLVED else self.catalog.name_of(tile)
                for tile in column
            ]
            for column in self.resolved.tolist()
        ]

    def render(self, unresolved: str = "?") -> str:
        """One line per row, one character per cell.

        Each tile is drawn with the first character of its name that no
        earlier tile in the catalog has claimed.
        """
        glyphs = _glyphs([rule.name for rule in self.catalog])
        rows = []
        for y in range(self.height):
            chars = []
            for x in range(self.width):
                tile = self.tile_at(x, y)
                chars.append(unresolved if tile is None else glyphs[tile])
            rows.append("".join(chars))
        return "\n".join(rows)


def _glyphs(names: list[str]) -> list[str]:
    taken: set[str] = set()
    glyphs = []
    for name in names:
        pool = name + string.ascii_letters + string.digits
        glyph = next((c for c in pool if c not in taken), "#")
        taken.add(glyph)
        glyphs.append(glyph)
    return glyphs
