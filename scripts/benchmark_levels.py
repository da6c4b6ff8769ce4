#!/usr/bin/env python3
"""Benchmark level generation time per dungeon depth."""

from __future__ import annotations

import argparse
import json
import statistics
import time
from pathlib import Path

from delve import config
from delve.environment.generators import generate_level

DEPTHS: tuple[int, ...] = (1, 2, 3, 4, 5, 6, 7, 8, 9, 10)


class LevelBenchmark:
    """Times generate_level() for each depth over several seeds."""

    def __init__(self, iterations: int, width: int, height: int) -> None:
        self.iterations = iterations
        self.width = width
        self.height = height
        self.results: dict[str, dict[str, float]] = {}

    def _run_depth(self, depth: int) -> list[float]:
        """Generate one depth repeatedly and return each run in milliseconds."""
        timings: list[float] = []
        for i in range(self.iterations):
            start = time.perf_counter()
            generate_level(depth, self.width, self.height, seed=f"bench-{i}")
            timings.append((time.perf_counter() - start) * 1000.0)
        return timings

    def run(self) -> None:
        print("Level Generation Benchmark")
        print("=" * 48)
        print(f"Map size: {self.width}x{self.height}")
        print(f"Iterations per depth: {self.iterations}")
        print()
        print(f"{'Depth':>6} {'Mean (ms)':>12} {'Min (ms)':>12} {'Max (ms)':>12}")
        print("-" * 48)

        for depth in DEPTHS:
            timings = self._run_depth(depth)
            mean_ms = statistics.fmean(timings)
            self.results[str(depth)] = {
                "mean_ms": mean_ms,
                "min_ms": min(timings),
                "max_ms": max(timings),
            }
            print(
                f"{depth:>6} {mean_ms:12.2f} "
                f"{min(timings):12.2f} {max(timings):12.2f}"
            )

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
        print("=" * 64)

        for depth, current in self.results.items():
            old_mean = baseline.get(depth, {}).get("mean_ms", 0.0)
            if old_mean <= 0:
                continue

            new_mean = current["mean_ms"]
            delta_pct = ((new_mean - old_mean) / old_mean) * 100.0
            trend = "faster" if new_mean < old_mean else "slower"
            print(
                f"depth {depth:>3}: {new_mean:8.2f}ms vs {old_mean:8.2f}ms "
                f"| {trend} ({delta_pct:+6.1f}%)"
            )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Benchmark level generation")
    parser.add_argument(
        "--iterations",
        type=int,
        default=5,
        help="Number of seeds per depth (default: 5)",
    )
    parser.add_argument("--width", type=int, default=config.MAP_WIDTH)
    parser.add_argument("--height", type=int, default=config.MAP_HEIGHT)
    parser.add_argument("--save", type=str, help="Save current results to JSON")
    parser.add_argument(
        "--compare",
        type=str,
        help="Compare current results against baseline JSON",
    )
    args = parser.parse_args(argv)

    benchmark = LevelBenchmark(args.iterations, args.width, args.height)
    benchmark.run()

    if args.save:
        benchmark.save_results(args.save)

    if args.compare:
        benchmark.compare_with_baseline(args.compare)


if __name__ == "__main__":
    main()
