"""Statistics for B-trees."""

import argparse
import logging
import math
import os
import random
import time
from datetime import datetime
from statistics import mean

import numpy as np

from btree_index.btree_base import BTreeBase
from btree_index.factory import create_btree
from btree_index.invariants import assert_tree_invariants_raise
from btree_index.tree_stats import btree_stats_

logger = logging.getLogger(__name__)


def positive_int(value: str) -> int:
    """argparse type for sizes and counts that must be at least 1."""
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def create_tree(keys, min_degree=2):
    """Build a tree by inserting each key with a constant value."""
    tree = create_btree(min_degree)
    tree_insert = tree.insert
    for key in keys:
        tree_insert(key, "val")
    return tree


# Create a random BTree with n distinct keys sampled without replacement.
def random_btree_of_size(n: int, min_degree: int) -> BTreeBase:
    # we need at least n unique values; 2^24 = 16 777 216 > 1 000 000
    space = 1 << 24
    if space <= n:
        raise ValueError(f"Key-space too small! Required: {n}, Available: {space}")

    keys = np.random.choice(space, size=n, replace=False)
    return create_tree((int(k) for k in keys), min_degree=min_degree)


def repeated_experiment(
    size: int,
    repetitions: int,
    min_degree: int,
) -> None:
    """
    Repeatedly builds random BTrees with ``size`` keys and the given minimum
    degree. Aggregates statistics and timings over all trees.
    """
    if repetitions < 1:
        raise ValueError(f"repetitions must be at least 1, got {repetitions}")

    t_all_0 = time.perf_counter()

    results = []
    times_build = []
    times_stats = []
    times_lookup = []

    for _ in range(repetitions):
        t0 = time.perf_counter()
        tree = random_btree_of_size(size, min_degree)
        times_build.append(time.perf_counter() - t0)

        t0 = time.perf_counter()
        stats = btree_stats_(tree)
        times_stats.append(time.perf_counter() - t0)

        t0 = time.perf_counter()
        for entry in tree:
            tree.lookup(entry.key)
        times_lookup.append(time.perf_counter() - t0)

        results.append(stats)

        assert_tree_invariants_raise(tree, stats)

    # Height bounds for a B-tree of minimum degree t holding n keys
    max_degree = 2 * min_degree
    best_height = math.ceil(math.log(size + 1, max_degree)) if size > 0 else 1
    worst_height = math.floor(math.log((size + 1) / 2, min_degree)) + 1 if size > 0 else 1

    avg_height = mean(s.height for s in results)
    avg_node_count = mean(s.node_count for s in results)
    avg_leaf_count = mean(s.leaf_count for s in results)
    avg_item_count = mean(s.item_count for s in results)
    avg_slot_count = mean(s.key_slot_count for s in results)
    avg_fill = mean(s.fill_factor for s in results)
    avg_node_size = mean((s.item_count / s.node_count) for s in results)

    avg_build_time = mean(times_build)
    avg_stats_time = mean(times_stats)
    avg_lookup_time = mean(times_lookup)

    var_height = mean((s.height - avg_height) ** 2 for s in results)
    var_node_count = mean((s.node_count - avg_node_count) ** 2 for s in results)
    var_leaf_count = mean((s.leaf_count - avg_leaf_count) ** 2 for s in results)
    var_item_count = mean((s.item_count - avg_item_count) ** 2 for s in results)
    var_slot_count = mean((s.key_slot_count - avg_slot_count) ** 2 for s in results)
    var_fill = mean((s.fill_factor - avg_fill) ** 2 for s in results)
    var_node_size = mean(((s.item_count / s.node_count) - avg_node_size) ** 2 for s in results)

    var_build_time = mean((t - avg_build_time) ** 2 for t in times_build)
    var_stats_time = mean((t - avg_stats_time) ** 2 for t in times_stats)
    var_lookup_time = mean((t - avg_lookup_time) ** 2 for t in times_lookup)

    rows = [
        ("Item count", avg_item_count, var_item_count),
        ("Key slot count", avg_slot_count, var_slot_count),
        ("Fill factor", avg_fill, var_fill),
        ("Node count", avg_node_count, var_node_count),
        ("Leaf count", avg_leaf_count, var_leaf_count),
        ("Avg node size", avg_node_size, var_node_size),
        ("Height", avg_height, var_height),
        ("Best-case height", best_height, None),
        ("Worst-case height", worst_height, None),
    ]

    header = f"{'Metric':<20} {'Avg':>15} {'(Var)':>15}"
    sep_line = "-" * len(header)

    logger.info(header)
    logger.info(sep_line)
    for name, avg, var in rows:
        if var is None:
            logger.info(f"{name:<20} {avg:>15}")
        else:
            var_str = f"({var:.2f})"
            avg_fmt = f"{avg:15.2f}"
            logger.info(f"{name:<20} {avg_fmt} {var_str:>15}")

    sum_build = sum(times_build)
    sum_stats = sum(times_stats)
    sum_lookup = sum(times_lookup)
    total_sum = sum_build + sum_stats + sum_lookup

    pct_build = (sum_build / total_sum * 100) if total_sum else 0
    pct_stats = (sum_stats / total_sum * 100) if total_sum else 0
    pct_lookup = (sum_lookup / total_sum * 100) if total_sum else 0

    perf_rows = [
        ("Build time (s)", avg_build_time, var_build_time, sum_build, pct_build),
        ("Stats time (s)", avg_stats_time, var_stats_time, sum_stats, pct_stats),
        ("Lookup time (s)", avg_lookup_time, var_lookup_time, sum_lookup, pct_lookup),
    ]

    header = f"{'Metric':<20}{'Avg(s)':>13}{'Var(s)':>13}{'Total(s)':>13}{'%Total':>10}"
    sep = "-" * len(header)

    logger.info("")
    logger.info("Performance summary:")
    logger.info(header)
    logger.info(sep)
    for name, avg, var, total, pct in perf_rows:
        logger.info(f"{name:<20}{avg:13.6f}{var:13.6f}{total:13.6f}{pct:10.2f}%")

    logger.info(sep)
    t_all_1 = time.perf_counter() - t_all_0
    logger.info("Execution time: %.3f seconds", t_all_1)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run statistics experiments for B-trees.")
    parser.add_argument(
        "--sizes", type=positive_int, nargs="+", default=[10, 100, 1000, 10_000, 100_000], help="List of tree sizes to test."
    )
    parser.add_argument(
        "--degrees", type=positive_int, nargs="+", default=[2, 4, 16, 64], help="List of minimum degrees (t) to test."
    )
    parser.add_argument("--repetitions", type=positive_int, default=1, help="Number of repetitions for each experiment.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility.")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Set the logging level (default: INFO)",
    )

    args = parser.parse_args()

    if args.seed is not None:
        random.seed(args.seed)
        np.random.seed(args.seed)

    log_dir = os.path.join(os.getcwd(), "stats/logs/btree_logs")
    os.makedirs(log_dir, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_path = os.path.join(log_dir, f"run_{ts}.log")

    log_level = getattr(logging, args.log_level)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.FileHandler(log_path, mode="w"),
            logging.StreamHandler(),
        ],
        force=True,
    )

    # Also apply the chosen level to the library logger so that
    # log records from btree_index.* are emitted at the requested level.
    logging.getLogger("btree_index").setLevel(log_level)

    for n in args.sizes:
        for t in args.degrees:
            logger.info("")
            logger.info("")
            logger.info(
                f"---------------- NOW RUNNING EXPERIMENT: n = {n}, t = {t}, repetitions = {args.repetitions} ----------------"
            )
            t0 = time.perf_counter()
            repeated_experiment(size=n, repetitions=args.repetitions, min_degree=t)
            elapsed = time.perf_counter() - t0
            logger.info(f"Total experiment time: {elapsed:.3f} seconds")
