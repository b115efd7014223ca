"""Factory for the creation of balanced tree classes"""

from typing import Any, Dict, Optional, Tuple, Type
import logging

from balanced_trees.base import OrderedTreeBase, TreeKind
from balanced_trees.oplog import OperationLog
from balanced_trees.avl_tree_base import AVLTreeBase, AVLNodeBase
from balanced_trees.sbt_tree_base import SBTTreeBase, SBTNodeBase
from balanced_trees.multiway_tree_base import TwoThreeFourTreeBase, MultiwayNodeBase

# Configure logging
logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)

_BASE_CLASSES: Dict[TreeKind, Tuple[Type[OrderedTreeBase], type]] = {
    TreeKind.AVL: (AVLTreeBase, AVLNodeBase),
    TreeKind.SIZE_BALANCED: (SBTTreeBase, SBTNodeBase),
    TreeKind.TWO_THREE_FOUR: (TwoThreeFourTreeBase, MultiwayNodeBase),
}

# Cache for previously created classes to avoid recreating them
_class_cache: Dict[TreeKind, Tuple[Type[OrderedTreeBase], type]] = {}


def make_tree_classes(kind: Any) -> Tuple[Type[OrderedTreeBase], type]:
    """
    Factory function to generate the tree and node classes for a tree kind.

    Parameters:
        kind: A TreeKind or one of its string aliases ("avl", "sbt", "2-3-4").

    Returns:
        TreeClass – subclass of the kind's tree base with NodeClass and KIND set.
        NodeClass – subclass of the kind's node base.

    Raises:
        ValueError: If `kind` names no known tree kind.
    """
    kind = TreeKind.parse(kind)
    if kind in _class_cache:
        logger.debug(f"Using cached classes for kind={kind.value}")
        return _class_cache[kind]

    logger.debug(f"Creating new classes for kind={kind.value}")
    tree_base, node_base = _BASE_CLASSES[kind]
    prefix = kind.class_prefix

    # 1) Node class
    NodeClass = type(
        f"{prefix}Node",
        (node_base,),
        {"__slots__": ()}
    )
    logger.debug(f"Created {NodeClass.__name__} from {node_base.__name__}")

    # 2) Tree class points at the node class
    TreeClass = type(
        f"{prefix}Tree",
        (tree_base,),
        {
            "NodeClass": NodeClass,
            "KIND": kind,
            "__slots__": ()
        }
    )
    logger.debug(f"Created {TreeClass.__name__} with NodeClass={NodeClass.__name__}")

    _class_cache[kind] = (TreeClass, NodeClass)
    return TreeClass, NodeClass


def create_tree(kind: Any, log: Optional[OperationLog] = None) -> OrderedTreeBase:
    """
    Create a new empty tree of the given kind.

    Args:
        kind: A TreeKind or one of its string aliases.
        log: The OperationLog the tree appends to; a fresh one if omitted.
    """
    TreeClass, _ = make_tree_classes(kind)
    tree = TreeClass(log)
    logger.debug(f"Created tree instance of type {type(tree).__name__}")
    return tree
