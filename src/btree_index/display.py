"""Pretty-printing and display utilities for B-tree structures."""

from __future__ import annotations

import collections
from typing import TYPE_CHECKING, Optional

from btree_index.base import Entry

if TYPE_CHECKING:
    from btree_index.btree_base import BTreeBase, BTreeNodeBase


# ANSI colour codes
PRIMARY = '\033[32m'    # green
SECONDARY = '\033[33m'  # yellow
RESET = '\033[0m'


def _node_text(node: BTreeNodeBase, sep: str) -> str:
    return "[" + sep.join(Entry(k, None).short_key() for k in node.keys) + "]"


def print_pretty(tree: Optional[BTreeBase]) -> str:
    """
    Renders a B-tree so:
      • Lines go from the root (level 0) down to the leaves.
      • Within a line, nodes appear left→right in traversal order.
      • All columns have the same width, so nodes line up per level.
    """
    from btree_index.btree_base import BTreeBase

    if tree is None:
        return f"{type(tree).__name__}: None"

    if not isinstance(tree, BTreeBase):
        raise TypeError(f"print_pretty() expects BTreeBase, got {type(tree).__name__}")

    tree_type = type(tree).__name__
    if tree.is_empty():
        return f"{tree_type}: Empty"

    SEP = " | "

    # 1) First pass: collect each node's text per level and track max length
    layers = collections.defaultdict(list)  # depth -> list of node-strings
    max_len = 0
    for depth, node in tree.iter_nodes():
        text = _node_text(node, SEP)
        layers[depth].append(text)
        max_len = max(max_len, len(text))

    # 2) Centre every node text in a fixed-width column
    column_width = max_len + 1
    out_lines = []
    for depth in sorted(layers):
        line = " ".join(txt.center(column_width) for txt in layers[depth])
        out_lines.append(f"{PRIMARY}Level {depth}{RESET}: {line.rstrip()}")

    return tree_type + "\n" + "\n".join(out_lines) + "\n"


def print_structure(
    tree: BTreeBase,
    indent: int = 0,
    max_depth: Optional[int] = None,
) -> str:
    """Return a debugging-oriented structural dump of a B-tree.

    Prints each node's kind, keys and child count, indenting one step per
    level. Subtrees below ``max_depth`` are elided.
    """
    prefix = ' ' * indent
    if tree is None:
        return f"{prefix}None"
    if tree.is_empty():
        return f"{prefix}Empty {tree.__class__.__name__}"

    result = [
        f"{prefix}{tree.__class__.__name__}(min_degree={tree.min_degree}, "
        f"count={tree.count()}, height={tree.physical_height()})"
    ]

    def dump(node: BTreeNodeBase, depth: int) -> None:
        pad = ' ' * (indent + 4 * (depth + 1))
        if max_depth is not None and depth > max_depth:
            result.append(f"{pad}... (max depth reached)")
            return
        if node.is_leaf:
            result.append(f"{pad}{SECONDARY}{node.__class__.__name__}{RESET}(keys={node.keys!r})")
            return
        result.append(
            f"{pad}{node.__class__.__name__}(keys={node.keys!r}, children={len(node.children)})"
        )
        for child in node.children:
            dump(child, depth + 1)

    dump(tree.root, 0)
    return "\n".join(result)
