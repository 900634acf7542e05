#!/usr/bin/env python3
"""
Script to measure insert and lookup time of B-trees for different minimum degrees.
"""
import argparse
import time
from statistics import mean
from typing import List

from tqdm import tqdm

from btree_index.factory import create_btree
from btree_index.tree_stats import btree_stats_
from benchmarks.benchmark_utils import BenchmarkUtils


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def time_build_and_lookup(keys: List[int], min_degree: int, repetitions: int):
    """Return (avg insert seconds, avg lookup seconds, height, fill factor)."""
    if repetitions < 1:
        raise ValueError(f"repetitions must be at least 1, got {repetitions}")
    insert_times = []
    lookup_times = []
    for _ in range(repetitions):
        tree = create_btree(min_degree)
        t0 = time.perf_counter()
        for key in keys:
            tree.insert(key, key)
        insert_times.append(time.perf_counter() - t0)

        t0 = time.perf_counter()
        for key in keys:
            tree.lookup(key)
        lookup_times.append(time.perf_counter() - t0)

    stats = btree_stats_(tree)
    return mean(insert_times), mean(lookup_times), stats.height, stats.fill_factor


def main():
    parser = argparse.ArgumentParser(description="Sweep B-tree minimum degrees")
    parser.add_argument("--degrees", type=positive_int, nargs="+", default=[2, 3, 4, 8, 16, 32, 64, 128])
    parser.add_argument("--counts", type=positive_int, nargs="+", default=[1000, 10000, 100000])
    parser.add_argument("--distribution", choices=["uniform", "sequential", "clustered"], default="uniform")
    parser.add_argument("--repetitions", type=positive_int, default=3)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    rows = []
    for count in tqdm(args.counts, desc="Counts"):
        keys = BenchmarkUtils.generate_deterministic_keys(
            size=count,
            seed=args.seed,
            key_range=(1, max(1000000, count * 10)),
            distribution=args.distribution,
        )
        for t in tqdm(args.degrees, desc=f"Degrees for n={count}", leave=False):
            insert_s, lookup_s, height, fill = time_build_and_lookup(keys, t, args.repetitions)
            rows.append((count, t, insert_s, lookup_s, height, fill))

    header = f"{'n':>8}{'t':>6}{'Insert(s)':>13}{'Lookup(s)':>13}{'Height':>8}{'Fill':>8}"
    print(header)
    print("-" * len(header))
    for count, t, insert_s, lookup_s, height, fill in rows:
        print(f"{count:>8}{t:>6}{insert_s:13.6f}{lookup_s:13.6f}{height:>8}{fill:8.2f}")


if __name__ == '__main__':
    main()
