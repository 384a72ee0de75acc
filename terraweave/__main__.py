"""Command line entry point: solve one grid and print it.

    python -m terraweave --biome grassland --width 20 --height 10 --seed 7
    python -m terraweave --catalog tiles.json --biome custom --layout sparse
"""

from __future__ import annotations

import argparse
import logging
import sys

from terraweave import config
from terraweave.catalog import Biome, LayoutMode, load_rules, preset_rules
from terraweave.errors import WFCError
from terraweave.solver import (
    ADJUSTMENT_RNG_DOMAIN,
    GenerationParams,
    HeuristicAdjustment,
    WFCEngine,
)

logger = logging.getLogger(__name__)


def _enum_choices(enum_type: type[Biome] | type[LayoutMode]) -> list[str]:
    return [member.name.lower() for member in enum_type]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="terraweave",
        description="Fill a tile grid under adjacency constraints",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=config.CLI_DEFAULT_WIDTH,
        help=f"Grid width in cells (default: {config.CLI_DEFAULT_WIDTH})",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=config.CLI_DEFAULT_HEIGHT,
        help=f"Grid height in cells (default: {config.CLI_DEFAULT_HEIGHT})",
    )
    parser.add_argument(
        "--biome",
        choices=_enum_choices(Biome),
        default="grassland",
        help="Biome whose tiles are used (default: grassland)",
    )
    parser.add_argument(
        "--layout",
        choices=_enum_choices(LayoutMode),
        default="continuous",
        help="Path layout preference (default: continuous)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=config.DEFAULT_SEED,
        help="RNG seed, 0 for a random one (default: 0)",
    )
    parser.add_argument(
        "--catalog",
        type=str,
        help="JSON catalog file (default: built-in presets)",
    )
    parser.add_argument(
        "--heuristic",
        action="store_true",
        help="Bias weights with the built-in heuristic adjustment",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        rules = load_rules(args.catalog) if args.catalog else preset_rules()
        params = GenerationParams(
            width=args.width,
            height=args.height,
            biome=Biome[args.biome.upper()],
            layout=LayoutMode[args.layout.upper()],
            seed=args.seed,
        )
        engine = WFCEngine(rules, params)
    except (WFCError, ValueError, OSError) as exc:
        logger.error("%s", exc)
        return 2

    if args.heuristic:
        engine.adjustment = HeuristicAdjustment(engine.stream(ADJUSTMENT_RNG_DOMAIN))

    result = engine.run()
    if not result.success:
        logger.error(
            "No solution after %d attempts (%d backtracks)",
            result.attempts,
            result.total_backtracks,
        )
        return 1

    print(result.grid.render())
    logger.info(
        "Solved %dx%d in %d attempt(s) with %d backtracks",
        params.width,
        params.height,
        result.attempts,
        result.total_backtracks,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
