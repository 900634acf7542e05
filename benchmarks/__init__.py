"""
Benchmarks package for B-trees.

This package contains ASV benchmarks for performance testing of:
- BTreeBase.insert (tree construction)
- BTreeBase.lookup with varying hit ratios
"""

from .benchmark_utils import BaseBenchmark, BenchmarkUtils

__all__ = ["BaseBenchmark", "BenchmarkUtils"]
