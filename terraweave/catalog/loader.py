"""Load tile rules from plain records or JSON files.

A catalog file is a JSON list (or an object with a "tiles" list) of records:

    {
        "name": "road",
        "category": "path",
        "biome": "city",
        "up": ["road", "pavement"],
        "down": ["*"],
        "left": [],
        "right": [],
        "allow_all_by_default": true,
        "base_weight": 1.5,
        "biome_weight": 1.0
    }

Only "name" is required. Enum fields are matched case-insensitively by name.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar

from terraweave.errors import InvalidRuleError

from .tile_rule import Biome, TileCategory, TileRule

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

_KNOWN_KEYS = frozenset(
    {
        "name",
        "category",
        "biome",
        "up",
        "down",
        "left",
        "right",
        "allow_all_by_default",
        "base_weight",
        "biome_weight",
    }
)


def _parse_enum(enum_type: type[E], value: Any, tile_name: str) -> E:
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type[str(value).strip().upper()]
    except KeyError:
        valid = ", ".join(member.name.lower() for member in enum_type)
        raise InvalidRuleError(
            f"Tile '{tile_name}': unknown {enum_type.__name__} {value!r} "
            f"(expected one of {valid})"
        ) from None


def _parse_names(value: Any, tile_name: str, key: str) -> frozenset[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str) or not isinstance(value, Iterable):
        raise InvalidRuleError(f"Tile '{tile_name}': '{key}' must be a list of names")
    return frozenset(str(name) for name in value)


def rule_from_record(record: Mapping[str, Any]) -> TileRule:
    """Build one TileRule from a mapping."""
    name = record.get("name")
    if not isinstance(name, str) or not name:
        raise InvalidRuleError(f"Tile record without a usable name: {dict(record)!r}")

    unknown = set(record) - _KNOWN_KEYS
    if unknown:
        logger.warning("Tile '%s': ignoring unknown keys %s", name, sorted(unknown))

    try:
        base_weight = float(record.get("base_weight", 1.0))
        biome_weight = float(record.get("biome_weight", 1.0))
    except (TypeError, ValueError) as exc:
        raise InvalidRuleError(f"Tile '{name}': weights must be numbers") from exc

    return TileRule(
        name=name,
        category=_parse_enum(TileCategory, record.get("category", "custom"), name),
        biome=_parse_enum(Biome, record.get("biome", "custom"), name),
        up=_parse_names(record.get("up"), name, "up"),
        down=_parse_names(record.get("down"), name, "down"),
        left=_parse_names(record.get("left"), name, "left"),
        right=_parse_names(record.get("right"), name, "right"),
        allow_all_by_default=bool(record.get("allow_all_by_default", True)),
        base_weight=base_weight,
        biome_weight=biome_weight,
    )


def rules_from_records(records: Iterable[Mapping[str, Any]]) -> list[TileRule]:
    """Build TileRules from an iterable of mappings."""
    return [rule_from_record(record) for record in records]


def load_rules(path: str | Path) -> list[TileRule]:
    """Read a JSON catalog file.

    Raises:
        InvalidRuleError: The file is not valid JSON or a record is malformed.
        FileNotFoundError: The file does not exist.
    """
    path = Path(path)
    with path.open(encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise InvalidRuleError(f"{path}: invalid JSON ({exc})") from exc

    if isinstance(data, Mapping):
        data = data.get("tiles", [])
    if not isinstance(data, list):
        raise InvalidRuleError(f"{path}: expected a list of tile records")

    rules = rules_from_records(data)
    logger.info("Loaded %d tile rules from %s", len(rules), path)
    return rules
