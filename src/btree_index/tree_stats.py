"""Statistics and invariant checking for B-tree structures."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from btree_index.logging_config import get_logger

if TYPE_CHECKING:
    from btree_index.btree_base import BTreeBase, BTreeNodeBase

logger = get_logger(__name__)


@dataclass
class Stats:
    """Aggregated statistics for a B-tree (or one of its subtrees)."""

    height: int
    node_count: int
    leaf_count: int
    internal_count: int
    item_count: int
    key_slot_count: int
    least_key: Any | None
    greatest_key: Any | None
    keys_sorted: bool
    values_aligned: bool
    is_search_tree: bool
    occupancy_ok: bool
    children_count_ok: bool
    is_balanced: bool
    count_consistent: bool = True
    traversal_in_order: bool = True

    @property
    def fill_factor(self) -> float:
        """Fraction of key slots in use across all nodes."""
        return self.item_count / self.key_slot_count if self.key_slot_count else 0.0


def btree_stats_(t: BTreeBase) -> Stats:
    """
    Returns aggregated statistics for a B-tree in **O(n)** time.

    Structural flags are computed bottom-up per subtree; the root call
    additionally checks the stored count and the order of an in-order
    traversal.
    """
    stats = _node_stats(t.root, max_keys=t.MAX_DEGREE - 1, min_keys=t.MIN_DEGREE - 1, is_root=True)

    # ---------- root-level validation ------------------------------
    stats.count_consistent = stats.item_count == t.count()

    prev_key = None
    seen = 0
    for entry in t:
        if seen and not prev_key < entry.key:
            stats.traversal_in_order = False
        prev_key = entry.key
        seen += 1
    if seen != stats.item_count:
        stats.count_consistent = False

    if not stats.count_consistent:
        logger.warning(
            f"Count mismatch: walked {stats.item_count} keys, traversed {seen}, count()={t.count()}"
        )
    return stats


def _node_stats(
    node: BTreeNodeBase,
    max_keys: int,
    min_keys: int,
    is_root: bool = False,
) -> Stats:
    keys = node.keys
    n_keys = len(keys)
    floor = 0 if is_root else min_keys

    stats = Stats(
        height=1,
        node_count=1,
        leaf_count=1 if node.is_leaf else 0,
        internal_count=0 if node.is_leaf else 1,
        item_count=n_keys,
        key_slot_count=max_keys,
        least_key=keys[0] if keys else None,
        greatest_key=keys[-1] if keys else None,
        keys_sorted=all(keys[i] < keys[i + 1] for i in range(n_keys - 1)),
        values_aligned=len(node.values) == n_keys,
        is_search_tree=True,
        occupancy_ok=floor <= n_keys <= max_keys,
        children_count_ok=True,
        is_balanced=True,
    )

    if node.is_leaf:
        return stats

    children = node.children
    stats.children_count_ok = len(children) == n_keys + 1
    if not children:
        return stats

    child_stats = [_node_stats(child, max_keys, min_keys) for child in children]

    heights = {cs.height for cs in child_stats}
    stats.is_balanced = len(heights) == 1
    stats.height = 1 + max(heights)

    for i, cs in enumerate(child_stats):
        stats.node_count += cs.node_count
        stats.leaf_count += cs.leaf_count
        stats.internal_count += cs.internal_count
        stats.item_count += cs.item_count
        stats.key_slot_count += cs.key_slot_count

        stats.keys_sorted &= cs.keys_sorted
        stats.values_aligned &= cs.values_aligned
        stats.is_search_tree &= cs.is_search_tree
        stats.occupancy_ok &= cs.occupancy_ok
        stats.children_count_ok &= cs.children_count_ok
        stats.is_balanced &= cs.is_balanced

        # children[i] must lie strictly between keys[i-1] and keys[i]
        if cs.item_count:
            if i > 0 and i - 1 < n_keys and not keys[i - 1] < cs.least_key:
                stats.is_search_tree = False
            if i < n_keys and not cs.greatest_key < keys[i]:
                stats.is_search_tree = False

    # ----- LEAST / GREATEST -----
    if child_stats[0].item_count:
        stats.least_key = child_stats[0].least_key
    if child_stats[-1].item_count:
        stats.greatest_key = child_stats[-1].greatest_key

    return stats
