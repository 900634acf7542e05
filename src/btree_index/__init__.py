"""
btree_index — An in-memory ordered key/value index built on a B-tree.

Quick-start imports::

    from btree_index import create_btree, ABSENT
"""

# Shared primitives
from btree_index.base import ABSENT, AbstractOrderedIndex, Entry

# B-tree
from btree_index.btree_base import BTreeBase, BTreeNodeBase, InternalNodeBase, LeafNodeBase
from btree_index.factory import DEFAULT_MIN_DEGREE, create_btree, make_btree_classes

# Stats & invariants
from btree_index.invariants import (
    InvariantError,
    assert_tree_invariants_raise,
    check_keys_and_values,
)
from btree_index.tree_stats import Stats, btree_stats_

__all__ = [
    # Primitives
    "ABSENT",
    "AbstractOrderedIndex",
    "Entry",
    # B-tree
    "BTreeBase",
    "BTreeNodeBase",
    "DEFAULT_MIN_DEGREE",
    "InternalNodeBase",
    "LeafNodeBase",
    "create_btree",
    "make_btree_classes",
    # Stats & invariants
    "InvariantError",
    "Stats",
    "assert_tree_invariants_raise",
    "btree_stats_",
    "check_keys_and_values",
]
