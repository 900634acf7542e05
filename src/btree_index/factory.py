"""BTree factory module."""

from typing import Dict, Tuple, Type

from btree_index.btree_base import BTreeBase, InternalNodeBase, LeafNodeBase

DEFAULT_MIN_DEGREE = 2

# Cache for degree-specific class triples
_CLASS_CACHE: Dict[int, Tuple[Type[BTreeBase], Type[LeafNodeBase], Type[InternalNodeBase]]] = {}


def _validate_min_degree(min_degree: int) -> None:
    if isinstance(min_degree, bool) or not isinstance(min_degree, int):
        raise TypeError(f"min_degree must be an int, got {type(min_degree).__name__}")
    if min_degree < 2:
        raise ValueError(f"min_degree must be >= 2, got {min_degree}")


def make_btree_classes(
    min_degree: int,
) -> Tuple[Type[BTreeBase], Type[LeafNodeBase], Type[InternalNodeBase]]:
    """
    Factory function to generate B-tree and node classes specialized
    for a given minimum degree t.

    Args:
        min_degree: The minimum degree t (>= 2). Nodes hold at most 2t-1 keys.

    Returns:
        BTreeT: Subclass of BTreeBase with LeafClass=LeafNodeT and InternalClass=InternalNodeT
        LeafNodeT: Subclass of LeafNodeBase with MAX_KEYS=2t-1, MIN_KEYS=t-1
        InternalNodeT: Subclass of InternalNodeBase with MAX_KEYS=2t-1, MIN_KEYS=t-1

    Raises:
        TypeError: If min_degree is not an int.
        ValueError: If min_degree < 2.
    """
    _validate_min_degree(min_degree)

    if min_degree in _CLASS_CACHE:
        return _CLASS_CACHE[min_degree]

    max_keys = 2 * min_degree - 1
    min_keys = min_degree - 1

    # 1) Create the node classes with the degree-specific capacity
    LeafNodeT = type(
        f"BTreeLeafNode_T{min_degree}",
        (LeafNodeBase,),
        {
            "MAX_KEYS": max_keys,
            "MIN_KEYS": min_keys,
            "__slots__": (),
        },
    )
    InternalNodeT = type(
        f"BTreeInternalNode_T{min_degree}",
        (InternalNodeBase,),
        {
            "MAX_KEYS": max_keys,
            "MIN_KEYS": min_keys,
            "__slots__": (),
        },
    )

    # 2) Create the tree class wired to those node classes
    BTreeT = type(
        f"BTree_T{min_degree}",
        (BTreeBase,),
        {
            "MIN_DEGREE": min_degree,
            "MAX_DEGREE": 2 * min_degree,
            "LeafClass": LeafNodeT,
            "InternalClass": InternalNodeT,
            "__slots__": (),
        },
    )

    _CLASS_CACHE[min_degree] = (BTreeT, LeafNodeT, InternalNodeT)
    return BTreeT, LeafNodeT, InternalNodeT


def create_btree(min_degree: int = DEFAULT_MIN_DEGREE) -> BTreeBase:
    """
    Create a new, empty B-tree with the specified minimum degree.

    Args:
        min_degree: The minimum degree t (>= 2), so max_degree is 2t

    Returns:
        A new empty BTree with a single leaf root and count 0
    """
    BTreeT, _, _ = make_btree_classes(min_degree)
    return BTreeT()
