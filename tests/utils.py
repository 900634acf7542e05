"""Utility functions for testing B-tree invariants."""

from typing import Optional

from btree_index.btree_base import BTreeBase
from btree_index.invariants import TREE_FLAGS
from btree_index.tree_stats import Stats


def assert_tree_invariants_tc(tc, t: BTreeBase, stats: Stats, err_msg: Optional[str] = "") -> None:
    """TestCase version: use inside unittest.TestCase methods."""
    for flag in TREE_FLAGS:
        tc.assertTrue(
            getattr(stats, flag),
            f"Invariant failed: {flag} is False \n\n{err_msg}"
        )

    tc.assertEqual(
        stats.item_count, t.count(),
        f"Invariant failed: item_count={stats.item_count} ≠ count()={t.count()}\n\n{err_msg}"
    )
    tc.assertEqual(
        stats.height, t.physical_height(),
        f"Invariant failed: height={stats.height} ≠ physical_height()={t.physical_height()}\n\n{err_msg}"
    )

    if stats.item_count > 0:
        tc.assertGreater(
            stats.leaf_count, 0,
            f"Invariant failed: leaf_count={stats.leaf_count} ≤ 0 for non-empty tree\n\n{err_msg}"
        )
        entries = list(t)
        tc.assertEqual(
            stats.least_key, entries[0].key,
            f"Invariant failed: least_key={stats.least_key!r} is not the first key\n\n{err_msg}"
        )
        tc.assertEqual(
            stats.greatest_key, entries[-1].key,
            f"Invariant failed: greatest_key={stats.greatest_key!r} is not the last key\n\n{err_msg}"
        )
