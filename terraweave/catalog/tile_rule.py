"""Tile rule definitions.

A TileRule is one catalog entry: what a tile is called, which biome and
category it belongs to, which tiles may sit next to it on each side, and how
strongly the sampler should favour it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from terraweave import config
from terraweave.errors import InvalidRuleError
from terraweave.types import Offset


class Direction(Enum):
    """Orthogonal neighbour directions. Grids grow downward in y."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def offset(self) -> Offset:
        return self.value

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]


_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

# Fixed iteration order, also the axis order of the catalog's compat table.
DIRECTIONS: tuple[Direction, ...] = (
    Direction.UP,
    Direction.DOWN,
    Direction.LEFT,
    Direction.RIGHT,
)


class TileCategory(Enum):
    """Broad tile type, used by the layout and connectivity heuristics."""

    GRASS = auto()
    WATER = auto()
    STONE = auto()
    SAND = auto()
    DIRT = auto()
    SNOW = auto()
    LAVA = auto()
    ICE = auto()
    WOOD = auto()
    PATH = auto()
    CUSTOM = auto()
    IMPASSABLE = auto()


class Biome(Enum):
    """Biome a tile belongs to. A catalog only ever holds one biome."""

    GRASSLAND = auto()
    DESERT = auto()
    FOREST = auto()
    TUNDRA = auto()
    SWAMP = auto()
    MOUNTAIN = auto()
    OCEAN = auto()
    CUSTOM = auto()
    CITY = auto()


class LayoutMode(Enum):
    """Whether paths should form long connected runs or scattered patches."""

    CONTINUOUS = auto()
    SPARSE = auto()


@dataclass(frozen=True)
class TileRule:
    """A single tile kind with its adjacency rules.

    Attributes:
        name: Unique identifier within a catalog.
        category: Tile type, consulted by the layout heuristics.
        biome: Biome the tile belongs to.
        up: Names allowed directly above this tile.
        down: Names allowed directly below this tile.
        left: Names allowed directly left of this tile.
        right: Names allowed directly right of this tile.
        allow_all_by_default: What an empty list means - every tile (True)
            or no tile at all (False). The wildcard "*" always means every tile.
        base_weight: Relative sampling weight, higher is more common.
        biome_weight: Multiplier applied after the neighbour bonus.
    """

    name: str
    category: TileCategory = TileCategory.CUSTOM
    biome: Biome = Biome.CUSTOM
    up: frozenset[str] = frozenset()
    down: frozenset[str] = frozenset()
    left: frozenset[str] = frozenset()
    right: frozenset[str] = frozenset()
    allow_all_by_default: bool = True
    base_weight: float = 1.0
    biome_weight: float = 1.0

    def __post_init__(self) -> None:
        if not self.name:
            raise InvalidRuleError("Tile rule needs a non-empty name")
        if self.base_weight <= 0:
            raise InvalidRuleError(
                f"Tile '{self.name}' has non-positive base weight {self.base_weight}"
            )
        if self.biome_weight <= 0:
            raise InvalidRuleError(
                f"Tile '{self.name}' has non-positive biome weight {self.biome_weight}"
            )
        # Accept any iterable of names for the four lists
        for field_name in ("up", "down", "left", "right"):
            value = getattr(self, field_name)
            if isinstance(value, str):
                raise InvalidRuleError(
                    f"Tile '{self.name}': '{field_name}' must be a collection of "
                    f"names, got the string {value!r}"
                )
            if not isinstance(value, frozenset):
                object.__setattr__(self, field_name, frozenset(value))

    def compatible(self, direction: Direction) -> frozenset[str]:
        """Return the raw compatibility list for one side."""
        match direction:
            case Direction.UP:
                return self.up
            case Direction.DOWN:
                return self.down
            case Direction.LEFT:
                return self.left
            case Direction.RIGHT:
                return self.right

    def allows(self, direction: Direction, other: TileRule) -> bool:
        """Return True if ``other`` may sit on this tile's ``direction`` side."""
        names = self.compatible(direction)
        if not names:
            return self.allow_all_by_default
        if config.WILDCARD in names:
            return True
        return other.name in names

    def referenced_names(self) -> set[str]:
        """Every concrete tile name mentioned by the four lists."""
        names: set[str] = set()
        for direction in DIRECTIONS:
            names.update(self.compatible(direction))
        names.discard(config.WILDCARD)
        return names


def can_neighbor(a: TileRule, b: TileRule, direction: Direction) -> bool:
    """Return True if ``b`` may sit on the ``direction`` side of ``a``.

    Both rules have a say: ``a`` must allow ``b`` on that side and ``b`` must
    allow ``a`` on the opposite one.
    """
    return a.allows(direction, b) and b.allows(direction.opposite, a)
