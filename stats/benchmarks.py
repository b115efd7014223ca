#!/usr/bin/env python3
"""
Benchmarks for the balanced tree engines.

This script measures, for each tree kind:
 1. Full build times (random_engine_of_size)
 2. Structural statistics and the number of rebalancing operations
 3. Per-insert, per-delete and per-search cost into trees of various sizes
 4. A method-level breakdown from the PerformanceTracker

Usage:
    python benchmarks.py [--kinds avl sbt 2-3-4] [--sizes 100 1000 10000] [--trials T] [--seed S]
"""
import argparse
import math
import time
import gc
from collections import Counter
from pprint import pprint
from dataclasses import asdict
from statistics import mean, variance

import numpy as np

from balanced_trees import TreeEngine, TreeKind, create_engine
from balanced_trees.profiling import PerformanceTracker

KEY_SPACE = 1 << 24


def random_engine_of_size(kind: TreeKind, n: int, rng: np.random.Generator) -> TreeEngine:
    """Build an engine of `kind` holding `n` distinct random keys."""
    if KEY_SPACE <= n:
        raise ValueError(f"Key-space too small! Required: {n + 1}, Available: {KEY_SPACE}")
    engine = create_engine(kind)
    engine_insert = engine.insert
    for key in rng.choice(KEY_SPACE, size=n, replace=False):
        engine_insert(int(key))
    return engine


def bench_build(kinds: list[TreeKind], sizes: list[int], rng: np.random.Generator) -> None:
    """Measure random_engine_of_size for various sizes."""
    for kind in kinds:
        for n in sizes:
            t0 = time.perf_counter()
            _ = random_engine_of_size(kind, n, rng)
            elapsed = time.perf_counter() - t0
            print(f"[bench] build {kind.value:<6} n={n:<7}: {elapsed:.4f}s")


def bench_tree_stats(kinds: list[TreeKind], n: int, rng: np.random.Generator) -> None:
    """Build one tree per kind and print its stats and log composition."""
    for kind in kinds:
        engine = random_engine_of_size(kind, n, rng)
        stats = engine.validate()
        ops = Counter(op.kind.value for op in engine.log if op.kind.is_structural)
        print(f"[bench] {kind.value} n={n} stats (log2(n+1)={math.log2(n + 1):.2f}):")
        pprint(asdict(stats))
        print(f"[bench] {kind.value} structural operations: {dict(ops)}")


def measure_single_ops(kind: TreeKind, n: int, rng: np.random.Generator,
                       trials: int = 200) -> dict[str, tuple[float, float]]:
    """
    Measure the cost of a single insert, delete and search on trees of
    exactly `n` keys, averaged over `trials` independent trees.
    Returns {operation: (mean_time_s, variance_time_s)}.
    """
    engines = [random_engine_of_size(kind, n, rng) for _ in range(trials)]
    # Keys beyond the key space are never present yet
    fresh = [KEY_SPACE + int(k) for k in rng.integers(KEY_SPACE, size=trials)]
    present = [engine.min_key() for engine in engines]

    results = {}
    for name, keys in (("search", present), ("insert", fresh), ("delete", present)):
        gc.collect()
        gc.disable()
        try:
            times = []
            for engine, key in zip(engines, keys):
                method = getattr(engine, name)
                t0 = time.perf_counter()
                method(key)
                times.append(time.perf_counter() - t0)
        finally:
            gc.enable()
        results[name] = (mean(times), variance(times) if len(times) > 1 else 0.0)
    return results


def bench_single_ops(kinds: list[TreeKind], sizes: list[int], rng: np.random.Generator,
                     trials: int) -> None:
    """Run measure_single_ops for each kind and size and print results."""
    for kind in kinds:
        for n in sizes:
            for name, (avg, var) in measure_single_ops(kind, n, rng, trials).items():
                print(
                    f"[bench] {kind.value:<6} {name:<6} size {n:<7} → avg {avg*1e6:8.2f} µs   "
                    f"σ²={var*1e12:8.2f} µs²"
                )


def main():
    parser = argparse.ArgumentParser(description="Balanced tree benchmarks")
    parser.add_argument("--kinds", nargs='+', type=TreeKind.parse, default=list(TreeKind),
                        help="Tree kinds to benchmark (avl, sbt, 2-3-4)")
    parser.add_argument("--sizes", nargs='+', type=int, default=[100, 1000, 10_000],
                        help="Tree sizes for build and single-operation benchmarks")
    parser.add_argument("--trials", type=int, default=100,
                        help="Number of trials for single-operation benchmarks")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for the key generator")
    args = parser.parse_args()
    rng = np.random.default_rng(args.seed)

    print("\n=== Full Build ===")
    bench_build(args.kinds, args.sizes, rng)

    print("\n=== Tree Stats ===")
    bench_tree_stats(args.kinds, max(args.sizes), rng)

    print("\n=== Single-Operation Benchmarks ===")
    bench_single_ops(args.kinds, args.sizes, rng, args.trials)

    print("\n=== Method-Level Performance Breakdown ===")
    tracker = PerformanceTracker.get_instance()
    tracker.enable()
    for kind in args.kinds:
        random_engine_of_size(kind, max(args.sizes), rng)
    print(tracker.report())
    tracker.disable()
    tracker.reset()


if __name__ == "__main__":
    main()
