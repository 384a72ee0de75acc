"""Tests for TileRule construction and the adjacency predicates."""

from __future__ import annotations

import pytest

from terraweave.catalog import Direction, TileRule, can_neighbor
from terraweave.errors import InvalidRuleError


class TestDirection:
    @pytest.mark.parametrize(
        ("direction", "opposite"),
        [
            (Direction.UP, Direction.DOWN),
            (Direction.DOWN, Direction.UP),
            (Direction.LEFT, Direction.RIGHT),
            (Direction.RIGHT, Direction.LEFT),
        ],
    )
    def test_opposites(self, direction: Direction, opposite: Direction) -> None:
        assert direction.opposite is opposite
        dx, dy = direction.offset
        ox, oy = opposite.offset
        assert (dx + ox, dy + oy) == (0, 0)

    def test_y_grows_downward(self) -> None:
        assert Direction.UP.offset == (0, -1)
        assert Direction.DOWN.offset == (0, 1)


class TestTileRuleValidation:
    def test_lists_are_coerced_to_frozensets(self) -> None:
        rule = TileRule(name="a", up=["a", "b"])  # type: ignore[arg-type]
        assert rule.up == frozenset({"a", "b"})

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(InvalidRuleError):
            TileRule(name="")

    @pytest.mark.parametrize("field", ["base_weight", "biome_weight"])
    @pytest.mark.parametrize("value", [0.0, -1.0])
    def test_non_positive_weights_rejected(self, field: str, value: float) -> None:
        with pytest.raises(InvalidRuleError, match="non-positive"):
            TileRule(name="a", **{field: value})

    def test_string_instead_of_list_rejected(self) -> None:
        """A bare string would silently become a set of characters."""
        with pytest.raises(InvalidRuleError, match="collection"):
            TileRule(name="a", left="grass")  # type: ignore[arg-type]

    def test_rules_are_immutable(self) -> None:
        rule = TileRule(name="a")
        with pytest.raises(AttributeError):
            rule.name = "b"  # type: ignore[misc]


class TestAllows:
    def test_listed_name_is_allowed(self) -> None:
        a = TileRule(name="a", right=frozenset({"b"}))
        b = TileRule(name="b")
        c = TileRule(name="c")
        assert a.allows(Direction.RIGHT, b)
        assert not a.allows(Direction.RIGHT, c)

    def test_wildcard_allows_everything(self) -> None:
        a = TileRule(name="a", up=frozenset({"*"}), allow_all_by_default=False)
        assert a.allows(Direction.UP, TileRule(name="anything"))

    def test_empty_list_follows_default(self) -> None:
        other = TileRule(name="b")
        assert TileRule(name="a").allows(Direction.DOWN, other)
        closed = TileRule(name="a", allow_all_by_default=False)
        assert not closed.allows(Direction.DOWN, other)

    def test_referenced_names_excludes_wildcard(self) -> None:
        rule = TileRule(name="a", up=frozenset({"b", "*"}), left=frozenset({"c"}))
        assert rule.referenced_names() == {"b", "c"}


class TestCanNeighbor:
    def test_both_sides_must_agree(self) -> None:
        """b on a's right needs a to accept b and b to accept a on its left."""
        a = TileRule(name="a", right=frozenset({"b"}))
        b = TileRule(name="b", left=frozenset({"c"}))
        assert a.allows(Direction.RIGHT, b)
        assert not can_neighbor(a, b, Direction.RIGHT)

    def test_symmetric_under_direction_reversal(self) -> None:
        a = TileRule(name="a", right=frozenset({"b"}))
        b = TileRule(name="b", left=frozenset({"a"}))
        assert can_neighbor(a, b, Direction.RIGHT)
        assert can_neighbor(b, a, Direction.LEFT)
