#!/usr/bin/env python3
"""
benchmark_execution.py - Time sequential vs parallel Monte Carlo paths.

Usage:
    python scripts/benchmark_execution.py [--workers N] [--repeats R]

For each trial count, prices the ATM call/put pair on both execution
paths with the same seed, checks that the estimates are identical, and
reports the best wall-clock time of R repeats.

Exit codes:
    0 = Paths agree at every size
    1 = Estimates differ between paths
"""

import argparse
import sys
import time
from typing import NamedTuple, Optional

# Add src to path if running as script
sys.path.insert(0, "src")

from ito_pricing import ExecutionPolicy, MonteCarloEngine, SimulationConfig

TRIAL_COUNTS = (1_000, 10_000, 100_000, 1_000_000, 4_000_000)
ATM = (100.0, 100.0, 0.05, 0.20, 1.0)


class BenchmarkRow(NamedTuple):
    """Timing for one trial count."""
    n_trials: int
    sequential_s: float
    parallel_s: float
    identical: bool

    @property
    def speedup(self) -> float:
        return self.sequential_s / self.parallel_s if self.parallel_s > 0 else float("inf")


def time_policy(
    n_trials: int,
    policy: ExecutionPolicy,
    repeats: int,
    max_workers: Optional[int],
):
    """Best-of-R wall time and the (seeded) result."""
    best = float("inf")
    result = None
    for _ in range(repeats):
        engine = MonteCarloEngine(
            SimulationConfig(n_trials=n_trials, seed=42, policy=policy, max_workers=max_workers)
        )
        start = time.perf_counter()
        result = engine.price_european_call_and_put(*ATM)
        best = min(best, time.perf_counter() - start)
    return best, result


def run_benchmark(repeats: int, max_workers: Optional[int]) -> list[BenchmarkRow]:
    rows = []
    for n in TRIAL_COUNTS:
        seq_time, seq_result = time_policy(n, ExecutionPolicy.SEQUENTIAL, repeats, max_workers)
        par_time, par_result = time_policy(n, ExecutionPolicy.PARALLEL, repeats, max_workers)
        rows.append(BenchmarkRow(n, seq_time, par_time, seq_result == par_result))
    return rows


def main() -> int:
    parser = argparse.ArgumentParser(description="Sequential vs parallel MC timing")
    parser.add_argument("--workers", type=int, default=None, help="Thread-pool size")
    parser.add_argument("--repeats", type=int, default=3, help="Repeats per size (best is kept)")
    args = parser.parse_args()

    rows = run_benchmark(args.repeats, args.workers)

    print("\n  {:>10} {:>12} {:>12} {:>8} {:>10}".format(
        "N", "seq (ms)", "par (ms)", "speedup", "identical"
    ))
    print("  " + "-" * 56)
    for row in rows:
        print("  {:>10,} {:>12.2f} {:>12.2f} {:>8.2f} {:>10}".format(
            row.n_trials,
            row.sequential_s * 1e3,
            row.parallel_s * 1e3,
            row.speedup,
            "yes" if row.identical else "NO",
        ))

    if not all(row.identical for row in rows):
        print("\n✗ Sequential and parallel estimates differ")
        return 1
    print("\n✓ Sequential and parallel estimates identical at every size")
    return 0


if __name__ == "__main__":
    sys.exit(main())
