"""Validated, biome-filtered tile catalog.

The catalog is built once per engine and is immutable afterwards. Tile names
are interned to integer indices in catalog order, and every pairwise
adjacency decision is precomputed into a boolean table so the solver never
compares names in its hot path:

    compat[d, a, b] is True  <=>  tile b may sit on the d side of tile a

where d is the position of the direction in DIRECTIONS. Candidate sets are
boolean masks over tile indices, so "which tiles may a neighbour hold, given
this cell's candidates" is one ``np.any`` over rows of the table.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence

import numpy as np

from terraweave import config
from terraweave.errors import CatalogEmptyError, InvalidRuleError
from terraweave.types import TileIndex

from .tile_rule import (
    DIRECTIONS,
    Biome,
    Direction,
    TileCategory,
    TileRule,
    can_neighbor,
)

logger = logging.getLogger(__name__)

# Axis index of each direction in the compat table
DIRECTION_INDEX: dict[Direction, int] = {d: i for i, d in enumerate(DIRECTIONS)}


class TileCatalog:
    """The set of tiles one engine may place, with precomputed adjacency.

    Construct with ``TileCatalog.for_biome`` to filter a mixed rule list, or
    directly with rules that already share a biome.

    Raises:
        CatalogEmptyError: No rules were given.
        InvalidRuleError: Duplicate names, or a compatibility list names a
            tile that is not in this catalog.
    """

    def __init__(self, rules: Sequence[TileRule], biome: Biome | None = None) -> None:
        if not rules:
            label = biome.name if biome is not None else "catalog"
            raise CatalogEmptyError(f"No tiles found for biome {label}")

        self.biome = biome if biome is not None else rules[0].biome
        self.rules: tuple[TileRule, ...] = tuple(rules)
        self.index: dict[str, TileIndex] = {}
        for i, rule in enumerate(self.rules):
            if rule.name in self.index:
                raise InvalidRuleError(f"Duplicate tile name '{rule.name}'")
            self.index[rule.name] = TileIndex(i)

        self._validate_references()

        n = len(self.rules)
        self.compat = np.zeros((len(DIRECTIONS), n, n), dtype=np.bool_)
        for d, direction in enumerate(DIRECTIONS):
            for a, rule_a in enumerate(self.rules):
                for b, rule_b in enumerate(self.rules):
                    self.compat[d, a, b] = can_neighbor(rule_a, rule_b, direction)
        self.compat.setflags(write=False)

        self.base_weights = np.array(
            [r.base_weight for r in self.rules], dtype=np.float64
        )
        self.biome_weights = np.array(
            [r.biome_weight for r in self.rules], dtype=np.float64
        )
        self.categories: tuple[TileCategory, ...] = tuple(
            r.category for r in self.rules
        )
        self.is_path = np.array(
            [c is TileCategory.PATH for c in self.categories], dtype=np.bool_
        )

    @classmethod
    def for_biome(cls, rules: Iterable[TileRule], biome: Biome) -> TileCatalog:
        """Build a catalog from the rules that belong to ``biome``."""
        selected = [rule for rule in rules if rule.biome == biome]
        logger.debug("Selected %d tiles for biome %s", len(selected), biome.name)
        return cls(selected, biome)

    def _validate_references(self) -> None:
        for rule in self.rules:
            for direction in DIRECTIONS:
                names = rule.compatible(direction)
                if not names:
                    logger.debug(
                        "Tile '%s' has no compatible tiles listed for %s "
                        "(allow_all_by_default=%s)",
                        rule.name,
                        direction.name.lower(),
                        rule.allow_all_by_default,
                    )
                    continue
                for name in names:
                    if name != config.WILDCARD and name not in self.index:
                        raise InvalidRuleError(
                            f"Tile '{rule.name}' lists unknown tile '{name}' as "
                            f"compatible {direction.name.lower()} "
                            f"(biome {self.biome.name})"
                        )

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self) -> Iterator[TileRule]:
        return iter(self.rules)

    def __getitem__(self, tile: int) -> TileRule:
        return self.rules[tile]

    def __contains__(self, name: object) -> bool:
        return name in self.index

    def index_of(self, name: str) -> TileIndex:
        """Return the interned index for a tile name."""
        try:
            return self.index[name]
        except KeyError:
            raise KeyError(f"Unknown tile '{name}'") from None

    def name_of(self, tile: int) -> str:
        return self.rules[tile].name

    def mask_for(self, names: Iterable[str]) -> np.ndarray:
        """Return a candidate mask holding exactly the named tiles."""
        mask = np.zeros(len(self.rules), dtype=np.bool_)
        for name in names:
            mask[self.index_of(name)] = True
        return mask

    def full_mask(self) -> np.ndarray:
        return np.ones(len(self.rules), dtype=np.bool_)

    # -------------------------------------------------------------------------
    # Adjacency
    # -------------------------------------------------------------------------

    def compatible(self, a: int, b: int, direction: Direction) -> bool:
        """Return True if tile ``b`` may sit on the ``direction`` side of ``a``."""
        return bool(self.compat[DIRECTION_INDEX[direction], a, b])

    def allowed_next_to(self, tile: int, direction: Direction) -> np.ndarray:
        """Mask of tiles that may sit on the ``direction`` side of ``tile``."""
        return self.compat[DIRECTION_INDEX[direction], tile]

    def support(self, direction: Direction, mask: np.ndarray) -> np.ndarray:
        """Mask of tiles a ``direction`` neighbour may hold given ``mask`` here.

        A neighbour tile survives if at least one tile in ``mask`` accepts it.
        """
        rows = self.compat[DIRECTION_INDEX[direction]][mask]
        if rows.shape[0] == 0:
            return np.zeros(len(self.rules), dtype=np.bool_)
        return rows.any(axis=0)

    def compatibility_count(self, tile: int) -> int:
        """Number of (direction, neighbour) pairs ``tile`` can take part in."""
        return int(self.compat[:, tile, :].sum())

    def most_restrictive(self, limit: int | None = None) -> list[TileRule]:
        """Tiles with the fewest allowed neighbour pairs, most restrictive first.

        Only tiles that reject at least one pairing are listed.
        """
        full = len(DIRECTIONS) * len(self.rules)
        counts = [(self.compatibility_count(i), i) for i in range(len(self.rules))]
        ranked = sorted((c, i) for c, i in counts if c < full)
        if limit is not None:
            ranked = ranked[:limit]
        return [self.rules[i] for _, i in ranked]

    def describe(self, limit: int = config.COMPATIBILITY_OVERVIEW_LIMIT) -> list[str]:
        """Short human readable summary of the first ``limit`` tiles' rules."""
        lines = []
        for rule in self.rules[:limit]:
            parts = []
            for direction in DIRECTIONS:
                names = sorted(rule.compatible(direction))
                if names:
                    shown = ",".join(names[:3])
                    parts.append(f"{direction.name.capitalize()}=[{shown}]")
            if rule.allow_all_by_default:
                parts.insert(0, "AllowAll=true")
            summary = ", ".join(parts) if parts else "AllowAll=false"
            lines.append(f"{rule.name}: {summary}")
        if len(self.rules) > limit:
            lines.append(f"... and {len(self.rules) - limit} more tiles")
        return lines
