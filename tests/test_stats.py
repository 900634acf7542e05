"""Tests for btree_stats_, the Stats dataclass and the invariant helpers."""

import random
import unittest

from btree_index.factory import create_btree, make_btree_classes
from btree_index.invariants import (
    InvariantError,
    assert_tree_invariants_raise,
    check_keys_and_values,
)
from btree_index.tree_stats import Stats, btree_stats_

# Default minimum degree for tests
T_VALUE = 2


def _build_tree(keys, t=T_VALUE):
    tree = create_btree(t)
    for k in keys:
        tree.insert(k, f"val_{k}")
    return tree


class TestStatsEmptyTree(unittest.TestCase):

    def test_counts(self):
        stats = btree_stats_(create_btree(T_VALUE))
        self.assertEqual(stats.height, 1)
        self.assertEqual(stats.node_count, 1)
        self.assertEqual(stats.leaf_count, 1)
        self.assertEqual(stats.internal_count, 0)
        self.assertEqual(stats.item_count, 0)
        self.assertEqual(stats.key_slot_count, 3)
        self.assertIsNone(stats.least_key)
        self.assertIsNone(stats.greatest_key)
        self.assertEqual(stats.fill_factor, 0.0)

    def test_flags_and_assertion(self):
        tree = create_btree(T_VALUE)
        stats = btree_stats_(tree)
        self._assert_all_flags(stats)
        assert_tree_invariants_raise(tree, stats)

    def _assert_all_flags(self, stats: Stats):
        self.assertTrue(stats.keys_sorted)
        self.assertTrue(stats.values_aligned)
        self.assertTrue(stats.is_search_tree)
        self.assertTrue(stats.occupancy_ok)
        self.assertTrue(stats.children_count_ok)
        self.assertTrue(stats.is_balanced)
        self.assertTrue(stats.count_consistent)
        self.assertTrue(stats.traversal_in_order)


class TestStatsNoneKey(unittest.TestCase):
    """A single ``None`` key is a valid tree, not an empty one."""

    def test_single_none_key(self):
        tree = create_btree(T_VALUE)
        tree.insert(None, "nothing")
        stats = btree_stats_(tree)
        self.assertEqual(stats.item_count, 1)
        self.assertIsNone(stats.least_key)
        self.assertIsNone(stats.greatest_key)
        assert_tree_invariants_raise(tree, stats)

    def test_wrong_least_key_rejected(self):
        tree = _build_tree([1, 2, 3, 4])
        stats = btree_stats_(tree)
        stats.least_key = None
        with self.assertRaises(InvariantError):
            assert_tree_invariants_raise(tree, stats)


class TestStatsScenario(unittest.TestCase):
    """10, 20, 30, 40 with t=2 gives root [20] over leaves [10] and [30, 40]."""

    def setUp(self):
        self.tree = _build_tree([10, 20, 30, 40])

    def test_counts(self):
        stats = btree_stats_(self.tree)
        self.assertEqual(stats.height, 2)
        self.assertEqual(stats.node_count, 3)
        self.assertEqual(stats.leaf_count, 2)
        self.assertEqual(stats.internal_count, 1)
        self.assertEqual(stats.item_count, 4)
        self.assertEqual(stats.key_slot_count, 9)
        self.assertAlmostEqual(stats.fill_factor, 4 / 9)

    def test_least_and_greatest(self):
        stats = btree_stats_(self.tree)
        self.assertEqual(stats.least_key, 10)
        self.assertEqual(stats.greatest_key, 40)

    def test_invariants_hold(self):
        assert_tree_invariants_raise(self.tree, btree_stats_(self.tree))


class TestStatsRandomTrees(unittest.TestCase):

    def test_invariants_for_many_degrees(self):
        rng = random.Random(2024)
        for t in (2, 3, 5, 8):
            for n in (1, 7, 64, 513):
                keys = rng.sample(range(10 * n), n)
                tree = _build_tree(keys, t)
                stats = btree_stats_(tree)
                assert_tree_invariants_raise(tree, stats)
                self.assertEqual(stats.item_count, n)
                self.assertEqual(stats.least_key, min(keys))
                self.assertEqual(stats.greatest_key, max(keys))
                self.assertEqual(stats.node_count, stats.leaf_count + stats.internal_count)
                self.assertEqual(stats.key_slot_count, stats.node_count * (2 * t - 1))
                # Non-root nodes are at least half full
                if stats.node_count > 1:
                    self.assertGreaterEqual(
                        stats.item_count - len(tree.root.keys),
                        (stats.node_count - 1) * (t - 1),
                    )


class TestStatsDetectsCorruption(unittest.TestCase):
    """Hand-corrupted trees must be flagged and rejected."""

    def setUp(self):
        self.tree = _build_tree([10, 20, 30, 40, 50, 60])
        _, self.LeafClass, self.InternalClass = make_btree_classes(T_VALUE)

    def _assert_rejected(self, flag):
        stats = btree_stats_(self.tree)
        self.assertFalse(getattr(stats, flag), f"{flag} should be False")
        with self.assertRaises(InvariantError):
            assert_tree_invariants_raise(self.tree, stats)

    def test_unsorted_node(self):
        leaf = self.tree.root.children[2]
        leaf.keys.reverse()
        self._assert_rejected("keys_sorted")

    def test_misaligned_values(self):
        self.tree.root.children[0].values.append("extra")
        self._assert_rejected("values_aligned")

    def test_separator_violation(self):
        self.tree.root.keys[0] = 5
        self._assert_rejected("is_search_tree")

    def test_underfull_node(self):
        leaf = self.tree.root.children[1]
        del leaf.keys[0]
        del leaf.values[0]
        self._assert_rejected("occupancy_ok")

    def test_children_count(self):
        self.tree.root.children.append(self.LeafClass([70], ["val_70"]))
        self._assert_rejected("children_count_ok")

    def test_unbalanced(self):
        self.tree.root.children[0] = self.InternalClass(
            [10], ["val_10"],
            [self.LeafClass([5], ["val_5"]), self.LeafClass([15], ["val_15"])],
        )
        self._assert_rejected("is_balanced")

    def test_count_mismatch(self):
        self.tree._count += 1
        self._assert_rejected("count_consistent")


class TestCheckKeysAndValues(unittest.TestCase):

    def test_presence_and_order(self):
        tree = _build_tree([5, 1, 3])
        keys, presence_ok, order_ok = check_keys_and_values(tree, [1, 3, 5])
        self.assertEqual(keys, [1, 3, 5])
        self.assertTrue(presence_ok)
        self.assertTrue(order_ok)

    def test_missing_expected_key(self):
        tree = _build_tree([5, 1, 3])
        _, presence_ok, _ = check_keys_and_values(tree, [1, 3, 5, 7])
        self.assertFalse(presence_ok)

    def test_out_of_order(self):
        tree = _build_tree([1, 2, 3])
        tree.root.keys[:] = [3, 1, 2]
        _, _, order_ok = check_keys_and_values(tree)
        self.assertFalse(order_ok)


if __name__ == "__main__":
    unittest.main()
