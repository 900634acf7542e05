"""
ASV benchmarks for BTreeBase operations.

Covers tree construction via sequential inserts and lookup() with various
hit ratios, across minimum degrees and data distributions.
"""

import gc

from btree_index.factory import make_btree_classes
from benchmarks.benchmark_utils import BaseBenchmark, BenchmarkUtils


class BTreeInsertBenchmarks(BaseBenchmark):
    """Benchmarks for B-tree construction via sequential inserts."""

    params = [
        [2, 4, 16, 64],                          # minimum degree (t)
        [1000, 10000],                           # number of keys
        ['uniform', 'sequential', 'clustered'],  # data distributions
    ]
    param_names = ['min_degree', 'size', 'distribution']

    min_run_count = 5

    def setup(self, min_degree, size, distribution):
        super().setup(min_degree, size, distribution)
        self.TreeClass, _, _ = make_btree_classes(min_degree)
        self.keys = BenchmarkUtils.generate_deterministic_keys(
            size=size,
            seed=42 + hash((min_degree, size, distribution)) % 1000,
            distribution=distribution,
        )
        gc.collect()
        gc.disable()

    def time_insert_batch_construction(self, min_degree, size, distribution):
        tree = self.TreeClass()
        for key in self.keys:
            tree.insert(key, key)


class BTreeLookupBenchmarks(BaseBenchmark):
    """Benchmarks for BTreeBase.lookup()."""

    params = [
        [2, 4, 16, 64],   # minimum degree (t)
        [1000, 10000],    # number of keys
        [0.0, 1.0],       # hit ratios
    ]
    param_names = ['min_degree', 'size', 'hit_ratio']

    min_run_count = 5

    # Class-level cache of built trees keyed by (min_degree, size)
    _tree_cache = {}
    _data_cache = {}

    def setup(self, min_degree, size, hit_ratio):
        super().setup(min_degree, size, hit_ratio)

        cache_key = (min_degree, size)
        base_seed = 42 + hash(cache_key) % 1000
        if cache_key not in self._tree_cache:
            TreeClass, _, _ = make_btree_classes(min_degree)
            insert_keys = BenchmarkUtils.generate_deterministic_keys(
                size=size,
                seed=base_seed,
                distribution='uniform',
            )
            tree = TreeClass()
            for key in insert_keys:
                tree.insert(key, key)
            self._tree_cache[cache_key] = tree
            self._data_cache[cache_key] = insert_keys

        self.tree = self._tree_cache[cache_key]
        self.lookup_keys = BenchmarkUtils.create_lookup_keys(
            insert_keys=self._data_cache[cache_key],
            hit_ratio=hit_ratio,
            seed=base_seed + 1000,
        )
        gc.collect()
        gc.disable()

    def time_lookup_sequential(self, min_degree, size, hit_ratio):
        lookup = self.tree.lookup
        for key in self.lookup_keys:
            lookup(key)
