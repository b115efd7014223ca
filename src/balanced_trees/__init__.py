"""
Balanced ordered-key trees.

This package provides AVL, size-balanced and 2-3-4 trees behind one engine
facade. Every top-level call and every structural change (rotation, split,
merge, borrow) is recorded in a replayable operation log.
"""

from balanced_trees.base import TreeKind, InvariantError, OrderedTreeBase
from balanced_trees.oplog import OpKind, Operation, OperationLog, LogCursor
from balanced_trees.factory import make_tree_classes, create_tree
from balanced_trees.engine import TreeEngine, create_engine
from balanced_trees.stats import Stats, tree_stats_, check_invariants, collect_keys

__all__ = [
    'TreeKind',
    'InvariantError',
    'OrderedTreeBase',
    'OpKind',
    'Operation',
    'OperationLog',
    'LogCursor',
    'make_tree_classes',
    'create_tree',
    'TreeEngine',
    'create_engine',
    'Stats',
    'tree_stats_',
    'check_invariants',
    'collect_keys',
]
