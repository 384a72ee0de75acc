#!/usr/bin/env python3
"""Benchmark WFC engine performance on the preset catalogs."""

from __future__ import annotations

import argparse
import json
import time
from pathlib import Path

from terraweave.catalog import PRESETS_BY_NAME
from terraweave.solver import GenerationParams, WFCEngine

GRID_SIZES: tuple[tuple[int, int], ...] = (
    (10, 10),
    (20, 20),
    (40, 30),
    (60, 60),
)


class WFCBenchmark:
    """Benchmark runner for the preset catalogs."""

    def __init__(self, iterations: int, presets: list[str]) -> None:
        self.iterations = iterations
        self.presets = presets
        self.results: dict[str, dict[str, float]] = {}

    def _run_case(self, preset: str, width: int, height: int) -> tuple[float, float]:
        """Return (average solve time in ms, average backtracks) for one case."""
        biome, factory = PRESETS_BY_NAME[preset]
        rules = factory()
        elapsed_total = 0.0
        backtracks = 0

        for i in range(self.iterations):
            params = GenerationParams(
                width=width,
                height=height,
                biome=biome,
                seed=(width * 1_000_000) + (height * 1_000) + i + 1,
            )
            engine = WFCEngine(rules, params)

            start = time.perf_counter()
            result = engine.run()
            elapsed_total += time.perf_counter() - start
            backtracks += result.total_backtracks

        return (
            (elapsed_total / self.iterations) * 1000.0,
            backtracks / self.iterations,
        )

    def run(self) -> None:
        """Run every preset at every configured grid size."""
        print("WFC Benchmark")
        print("=" * 48)
        print(f"Iterations per size: {self.iterations}")
        print()
        print(f"{'Case':>20} {'Time (ms)':>12} {'Backtracks':>12}")
        print("-" * 48)

        for preset in self.presets:
            for width, height in GRID_SIZES:
                elapsed_ms, backtracks = self._run_case(preset, width, height)

                case_key = f"{preset}/{width}x{height}"
                self.results[case_key] = {
                    "elapsed_ms": elapsed_ms,
                    "backtracks": backtracks,
                }

                print(f"{case_key:>20} {elapsed_ms:12.2f} {backtracks:12.1f}")

    def save_results(self, filename: str) -> None:
        """Save benchmark output to a JSON file."""
        with Path(filename).open("w") as f:
            json.dump(self.results, f, indent=2)
        print(f"\nSaved benchmark results to {filename}")

    def compare_with_baseline(self, baseline_file: str) -> None:
        """Compare current run with a saved baseline JSON file."""
        try:
            with Path(baseline_file).open() as f:
                baseline: dict[str, dict[str, float]] = json.load(f)
        except FileNotFoundError:
            print(f"\nBaseline file not found: {baseline_file}")
            return

        print(f"\nComparison vs baseline: {baseline_file}")
        print("=" * 72)

        for case_key, current in self.results.items():
            if case_key not in baseline:
                continue

            old_ms = baseline[case_key].get("elapsed_ms", 0.0)
            new_ms = current["elapsed_ms"]
            if old_ms <= 0:
                continue

            delta_pct = ((new_ms - old_ms) / old_ms) * 100.0
            speed_ratio = old_ms / new_ms if new_ms > 0 else 0.0
            trend = "faster" if speed_ratio > 1.0 else "slower"

            print(
                f"{case_key:>20}: {new_ms:8.2f}ms "
                f"vs {old_ms:8.2f}ms | {speed_ratio:5.2f}x {trend} "
                f"({delta_pct:+6.1f}%)"
            )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Benchmark the WFC engine")
    parser.add_argument(
        "--iterations",
        type=int,
        default=3,
        help="Number of runs per grid size (default: 3)",
    )
    parser.add_argument(
        "--preset",
        action="append",
        choices=sorted(PRESETS_BY_NAME),
        help="Preset catalog to benchmark; repeatable (default: all)",
    )
    parser.add_argument("--save", type=str, help="Save current results to JSON")
    parser.add_argument(
        "--compare",
        type=str,
        help="Compare current results against baseline JSON",
    )
    args = parser.parse_args(argv)

    presets = args.preset or sorted(PRESETS_BY_NAME)
    benchmark = WFCBenchmark(iterations=args.iterations, presets=presets)
    benchmark.run()

    if args.save:
        benchmark.save_results(args.save)

    if args.compare:
        benchmark.compare_with_baseline(args.compare)


if __name__ == "__main__":
    main()
