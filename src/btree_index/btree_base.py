"""B-tree base implementation"""

from __future__ import annotations
from typing import Any, Callable, Iterator, List, Optional, Tuple, Type
import logging

from btree_index.base import (
    ABSENT,
    AbstractOrderedIndex,
    Entry,
)
from btree_index.invariants import InvariantError
from btree_index.logging_config import get_logger

logger = get_logger(__name__)


class BTreeNodeBase:
    """
    Base class for B-tree nodes. Factory will set:
      - MAX_KEYS : 2t - 1, the most keys a node may hold
      - MIN_KEYS : t - 1, the fewest keys a non-root node may hold
    """
    __slots__ = ("keys", "values")

    is_leaf: bool

    # set by factory
    MAX_KEYS: int
    MIN_KEYS: int

    def __init__(
        self,
        keys: Optional[List[Any]] = None,
        values: Optional[List[Any]] = None,
    ) -> None:
        self.keys: List[Any] = keys if keys is not None else []
        self.values: List[Any] = values if values is not None else []

    def is_full(self) -> bool:
        return len(self.keys) >= self.MAX_KEYS

    def item_count(self) -> int:
        return len(self.keys)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(keys={self.keys!r})"


class LeafNodeBase(BTreeNodeBase):
    """A node without children."""
    __slots__ = ()

    is_leaf = True


class InternalNodeBase(BTreeNodeBase):
    """A node owning ``len(keys) + 1`` children."""
    __slots__ = ("children",)

    is_leaf = False

    def __init__(
        self,
        keys: Optional[List[Any]] = None,
        values: Optional[List[Any]] = None,
        children: Optional[List[BTreeNodeBase]] = None,
    ) -> None:
        super().__init__(keys, values)
        self.children: List[BTreeNodeBase] = children if children is not None else []


class BTreeBase(AbstractOrderedIndex):
    """
    A B-tree of minimum degree t owns a single root node. Every non-root node
    holds between t-1 and 2t-1 keys and all leaves sit at the same depth.

    Attributes:
        root (BTreeNodeBase): The root node. Starts as an empty leaf.
    """
    __slots__ = ("root", "_count")

    # set by factory
    MIN_DEGREE: int
    MAX_DEGREE: int
    LeafClass: Type[LeafNodeBase]
    InternalClass: Type[InternalNodeBase]

    def __init__(self) -> None:
        self.root: BTreeNodeBase = self.LeafClass()
        self._count = 0

    @property
    def min_degree(self) -> int:
        return self.MIN_DEGREE

    @property
    def max_degree(self) -> int:
        return self.MAX_DEGREE

    def __str__(self):
        cls = self.__class__.__name__
        return f"{cls}(count={self._count}, height={self.physical_height()})"

    __repr__ = __str__

    # Public API
    def insert(self, key: Any, value: Any = True) -> bool:
        """
        Public method (O(t log_t n)): Insert a key/value pair into the B-tree.
        If the key already exists, its value is overwritten in place.

        Full nodes are split on the way down, so a single descent suffices.

        Args:
            key: A totally orderable key.
            value: The payload to associate with ``key`` (default: True).

        Returns:
            bool: True if a new key was added, False if an existing key was updated.
        """
        if self.root.is_full():
            self._split_root()

        node = self.root
        while True:
            i = self._find_index(node, key)
            keys = node.keys

            # Existing keys may sit in internal nodes as well as in leaves
            if i < len(keys) and keys[i] == key:
                node.values[i] = value
                if logger.isEnabledFor(logging.DEBUG):
                    logger.debug(f"Overwrote value for existing key {key!r}")
                return False

            if node.is_leaf:
                keys.insert(i, key)
                node.values.insert(i, value)
                self._count += 1
                return True

            child = node.children[i]
            if child.is_full():
                self._split_child(node, i)
                promoted = keys[i]
                if key == promoted:
                    node.values[i] = value
                    if logger.isEnabledFor(logging.DEBUG):
                        logger.debug(f"Overwrote value for promoted key {key!r}")
                    return False
                if key > promoted:
                    child = node.children[i + 1]
            node = child

    def lookup(self, key: Any) -> Any:
        """
        Searches for the value stored under ``key``.

        Iteratively descends from the root, performing a binary search in
        every visited node.

        Args:
            key: The key to search for.

        Returns:
            The stored value, or ``ABSENT`` if the key is not in the tree.
        """
        node = self.root
        while True:
            i = self._find_index(node, key)
            if i < len(node.keys) and node.keys[i] == key:
                return node.values[i]
            if node.is_leaf:
                return ABSENT
            node = node.children[i]

    def count(self) -> int:
        return self._count

    def for_each(self, callback: Callable[[Entry, int, BTreeBase], Any]) -> None:
        """
        Visit every entry in ascending key order.

        Args:
            callback: Called as ``callback(entry, rank, tree)`` where ``rank``
                is the zero-based in-order position of ``entry``.
        """
        def visit(node: BTreeNodeBase, rank: int) -> int:
            children = None if node.is_leaf else node.children
            for j, key in enumerate(node.keys):
                if children is not None:
                    rank = visit(children[j], rank)
                callback(Entry(key, node.values[j]), rank, self)
                rank += 1
            if children is not None:
                rank = visit(children[len(node.keys)], rank)
            return rank

        visit(self.root, 0)

    def __iter__(self) -> Iterator[Entry]:
        """Yield entries in ascending key order using an explicit stack."""
        # Each frame is [node, index of the next key to emit]
        stack: List[list] = []
        self._push_leftmost(stack, self.root)
        while stack:
            frame = stack[-1]
            node, j = frame
            if j >= len(node.keys):
                stack.pop()
                continue
            frame[1] = j + 1
            yield Entry(node.keys[j], node.values[j])
            if not node.is_leaf:
                self._push_leftmost(stack, node.children[j + 1])

    def iter_ranked(self) -> Iterator[Tuple[int, Entry]]:
        """Yield ``(rank, entry)`` pairs in ascending key order."""
        return enumerate(self)

    def physical_height(self) -> int:
        """Return the number of node levels, 1 for a tree that is a single leaf."""
        height = 1
        node = self.root
        while not node.is_leaf:
            node = node.children[0]
            height += 1
        return height

    def iter_nodes(self) -> Iterator[Tuple[int, BTreeNodeBase]]:
        """Yield ``(depth, node)`` pairs in pre-order, the root at depth 0."""
        stack = [(0, self.root)]
        while stack:
            depth, node = stack.pop()
            yield depth, node
            if not node.is_leaf:
                for child in reversed(node.children):
                    stack.append((depth + 1, child))

    def iter_leaf_nodes(self) -> Iterator[LeafNodeBase]:
        """Yield leaf nodes from left to right."""
        for _, node in self.iter_nodes():
            if node.is_leaf:
                yield node

    def print_structure(self, max_depth: Optional[int] = None) -> str:
        from btree_index.display import print_structure
        return print_structure(self, max_depth=max_depth)

    # Private Methods
    @staticmethod
    def _find_index(node: BTreeNodeBase, key: Any) -> int:
        """
        Binary search for ``key`` among ``node.keys``.

        Returns the index of ``key`` if present. Otherwise returns the index
        of the first key greater than ``key``, which is both the leaf
        insertion point and the child to descend into.
        """
        keys = node.keys
        left = 0
        right = len(keys) - 1
        while left <= right:
            mid = (left + right) // 2
            mid_key = keys[mid]
            if key == mid_key:
                return mid
            if key < mid_key:
                right = mid - 1
            else:
                left = mid + 1
        return left

    @staticmethod
    def _push_leftmost(stack: List[list], node: BTreeNodeBase) -> None:
        while True:
            stack.append([node, 0])
            if node.is_leaf:
                return
            node = node.children[0]

    def _split_root(self) -> None:
        """Grow the tree by one level: the old root becomes the sole child of a new root and is split."""
        old_root = self.root
        new_root = self.InternalClass(children=[old_root])
        self._split_child(new_root, 0)
        self.root = new_root
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Split root, promoted {new_root.keys[0]!r}, height is now {self.physical_height()}")

    def _split_child(self, parent: InternalNodeBase, child_index: int) -> BTreeNodeBase:
        """
        Split the full child at ``parent.children[child_index]`` around its
        median. The median moves into ``parent`` at ``child_index``; the
        upper half becomes a new sibling at ``child_index + 1``.

        Args:
            parent: A non-full internal node.
            child_index: Index of a full child of ``parent``.

        Returns:
            The newly created right sibling.

        Raises:
            InvariantError: If ``parent`` is full or a leaf, the child does
                not exist, or the child is not full.
        """
        max_keys = self.MAX_DEGREE - 1
        if len(parent.keys) >= max_keys:
            raise InvariantError("Attempting to split child of a full parent")
        if parent.is_leaf:
            raise InvariantError("Parent is a leaf")
        if not 0 <= child_index < len(parent.children):
            raise InvariantError(f"Child {child_index} does not exist")

        child = parent.children[child_index]
        if len(child.keys) != max_keys:
            raise InvariantError(
                f"Attempting to split a child that isn't full "
                f"({len(child.keys)} keys, expected {max_keys})"
            )

        mid = self.MAX_DEGREE // 2 - 1
        parent.keys.insert(child_index, child.keys[mid])
        parent.values.insert(child_index, child.values[mid])

        if child.is_leaf:
            sibling = self.LeafClass(child.keys[mid + 1:], child.values[mid + 1:])
        else:
            sibling = self.InternalClass(
                child.keys[mid + 1:],
                child.values[mid + 1:],
                child.children[mid + 1:],
            )
            del child.children[mid + 1:]

        # The median now lives only in the parent
        del child.keys[mid:]
        del child.values[mid:]

        parent.children.insert(child_index + 1, sibling)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"Split child {child_index}: promoted {parent.keys[child_index]!r}, "
                f"left={child.keys!r}, right={sibling.keys!r}"
            )
        return sibling
