"""Shared invariant-checking utilities.

This module provides tree invariant validation that can be used by both
the stats scripts and the test suite.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from btree_index.logging_config import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from btree_index.btree_base import BTreeBase
    from btree_index.tree_stats import Stats

TREE_FLAGS = (
    "keys_sorted",
    "values_aligned",
    "is_search_tree",
    "occupancy_ok",
    "children_count_ok",
    "is_balanced",
    "count_consistent",
    "traversal_in_order",
)


class InvariantError(Exception):
    """Raised when a B-tree invariant is violated."""


def assert_tree_invariants_raise(
    t: BTreeBase,
    stats: Stats,
) -> None:
    """Check all invariants, raising :class:`InvariantError` on the first failure."""
    for flag in TREE_FLAGS:
        if not getattr(stats, flag):
            raise InvariantError(f"Invariant failed: {flag} is False")

    if stats.item_count != t.count():
        raise InvariantError(
            f"Invariant failed: item_count={stats.item_count} ≠ t.count()={t.count()}"
        )
    if stats.height != t.physical_height():
        raise InvariantError(
            f"Invariant failed: height={stats.height} ≠ t.physical_height()={t.physical_height()}"
        )

    if stats.item_count > 0:
        # least and greatest keys sit at the outermost leaves
        leftmost = rightmost = t.root
        while not leftmost.is_leaf:
            leftmost = leftmost.children[0]
        while not rightmost.is_leaf:
            rightmost = rightmost.children[-1]
        if not leftmost.keys or stats.least_key != leftmost.keys[0]:
            raise InvariantError(f"Invariant failed: least_key={stats.least_key!r} is not the leftmost key")
        if not rightmost.keys or stats.greatest_key != rightmost.keys[-1]:
            raise InvariantError(f"Invariant failed: greatest_key={stats.greatest_key!r} is not the rightmost key")
        if stats.leaf_count <= 0:
            raise InvariantError(f"Invariant failed: leaf_count={stats.leaf_count} ≤ 0 for non-empty tree")


def check_keys_and_values(
    tree: BTreeBase,
    expected_keys: list[Any] | None = None,
) -> tuple[list[Any], bool, bool]:
    """Traverse the tree in order and validate its keys.

    Returns
    -------
    (keys, presence_ok, order_ok)
    """
    keys: list[Any] = []
    order_ok = True

    prev_key = None
    for entry in tree:
        key = entry.key
        if keys and not prev_key < key:
            order_ok = False
        keys.append(key)
        prev_key = key

    presence_ok = True
    if expected_keys is not None:
        if len(keys) != len(expected_keys):
            presence_ok = False
        else:
            presence_ok = set(keys) == set(expected_keys)

    return keys, presence_ok, order_ok
