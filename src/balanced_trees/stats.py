# -*- coding: utf-8 -*-
# ------------------------------------------------------------------------------
#
#   Copyright 2025 Jannik Hehemann
#
#   Licensed under the Apache License, Version 2.0 (the "License");
#   you may not use this file except in compliance with the License.
#   You may obtain a copy of the License at
#
#       http://www.apache.org/licenses/LICENSE-2.0
#
#   Unless required by applicable law or agreed to in writing, software
#   distributed under the License is distributed on an "AS IS" BASIS,
#   WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#   See the License for the specific language governing permissions and
#   limitations under the License.
#
# ------------------------------------------------------------------------------

"""Structural statistics and invariant checks for balanced trees"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from balanced_trees.base import InvariantError, OrderedTreeBase
from balanced_trees.binary_tree_base import BinaryTreeBase, OrderedNode
from balanced_trees.avl_tree_base import AVLTreeBase
from balanced_trees.sbt_tree_base import SBTTreeBase
from balanced_trees.multiway_tree_base import MultiwayNodeBase, TwoThreeFourTreeBase

logger = logging.getLogger(__name__)

TREE_FLAGS = (
    "is_search_tree",
    "parent_links_ok",
    "metadata_ok",
    "is_height_balanced",
    "is_size_balanced",
    "leaves_same_depth",
    "node_key_counts_ok",
)


@dataclass
class Stats:
    height: int
    node_count: int
    key_count: int
    leaf_count: int
    least_key: Optional[Any]
    greatest_key: Optional[Any]
    is_search_tree: bool
    parent_links_ok: bool
    metadata_ok: bool
    is_height_balanced: bool
    is_size_balanced: bool
    leaves_same_depth: bool
    node_key_counts_ok: bool

    def failed_flags(self) -> List[str]:
        return [flag for flag in TREE_FLAGS if not getattr(self, flag)]


def _empty_stats() -> Stats:
    return Stats(height             = 0,
                 node_count         = 0,
                 key_count          = 0,
                 leaf_count         = 0,
                 least_key          = None,
                 greatest_key       = None,
                 is_search_tree     = True,
                 parent_links_ok    = True,
                 metadata_ok        = True,
                 is_height_balanced = True,
                 is_size_balanced   = True,
                 leaves_same_depth  = True,
                 node_key_counts_ok = True)


def tree_stats_(tree: OrderedTreeBase) -> Stats:
    """
    Returns aggregated statistics for a balanced tree in **O(n)** time.

    All values are recomputed from the node graph; stored node metadata
    (AVL heights, SBT sizes) is only compared against the recomputed values.
    Flags that do not apply to the tree's kind stay True.
    """
    stats = _empty_stats()
    if tree is None or tree.is_empty():
        return stats

    if tree.root.parent is not None:
        stats.parent_links_ok = False

    if isinstance(tree, BinaryTreeBase):
        _binary_stats(tree, tree.root, None, None, stats)
    elif isinstance(tree, TwoThreeFourTreeBase):
        leaf_depths = set()
        _multiway_stats(tree.root, None, None, 1, stats, leaf_depths)
        stats.leaves_same_depth = len(leaf_depths) <= 1
        stats.height = max(leaf_depths) if leaf_depths else 0
    else:
        raise TypeError(f"tree_stats_(): unsupported tree type {type(tree).__name__}")

    keys = tree.keys()
    if keys:
        stats.least_key = keys[0]
        stats.greatest_key = keys[-1]
    if any(a >= b for a, b in zip(keys, keys[1:])):
        stats.is_search_tree = False
    return stats


def _binary_stats(
    tree: BinaryTreeBase,
    node: Optional[OrderedNode],
    low: Optional[Any],
    high: Optional[Any],
    stats: Stats,
) -> Tuple[int, int, int, int]:
    """Returns (height, size, size(node.left), size(node.right)) of the subtree."""
    if node is None:
        return 0, 0, 0, 0

    if (low is not None and not low < node.key) or (high is not None and not node.key < high):
        stats.is_search_tree = False

    for child in (node.left, node.right):
        if child is not None and child.parent is not node:
            stats.parent_links_ok = False

    lh, ls, lls, lrs = _binary_stats(tree, node.left, low, node.key, stats)
    rh, rs, rls, rrs = _binary_stats(tree, node.right, node.key, high, stats)
    height = 1 + max(lh, rh)
    size = 1 + ls + rs

    stats.node_count += 1
    stats.key_count += 1
    if node.is_leaf():
        stats.leaf_count += 1

    if isinstance(tree, AVLTreeBase):
        if node.height != height:
            stats.metadata_ok = False
        if abs(lh - rh) > 1:
            stats.is_height_balanced = False
    elif isinstance(tree, SBTTreeBase):
        if node.size != size:
            stats.metadata_ok = False
        if lls > rs or lrs > rs or rls > ls or rrs > ls:
            stats.is_size_balanced = False

    if node is tree.root:
        stats.height = height
    return height, size, ls, rs


def _multiway_stats(
    node: MultiwayNodeBase,
    low: Optional[Any],
    high: Optional[Any],
    depth: int,
    stats: Stats,
    leaf_depths: set,
) -> None:
    keys = node.keys
    stats.node_count += 1
    stats.key_count += len(keys)

    if not 1 <= len(keys) <= node.MAX_KEYS:
        stats.node_key_counts_ok = False
    if node.children and len(node.children) != len(keys) + 1:
        stats.node_key_counts_ok = False

    for a, b in zip(keys, keys[1:]):
        if not a < b:
            stats.is_search_tree = False
    if keys:
        if low is not None and not low < keys[0]:
            stats.is_search_tree = False
        if high is not None and not keys[-1] < high:
            stats.is_search_tree = False

    if node.is_leaf():
        stats.leaf_count += 1
        leaf_depths.add(depth)
        return

    bounds = [low] + list(keys) + [high]
    for i, child in enumerate(node.children):
        if child.parent is not node:
            stats.parent_links_ok = False
        _multiway_stats(child, bounds[i], bounds[i + 1], depth + 1, stats, leaf_depths)


def check_invariants(tree: OrderedTreeBase) -> Stats:
    """
    Check all structural invariants of `tree`.

    Returns:
        Stats: The collected statistics if every invariant holds.

    Raises:
        InvariantError: Naming the first failed invariant.
    """
    stats = tree_stats_(tree)
    failed = stats.failed_flags()
    if failed:
        logger.error(f"Invariant failed: {failed[0]} is False\n{tree.print_structure()}")
        raise InvariantError(f"Invariant failed: {failed[0]} is False")
    if stats.key_count != tree.count():
        raise InvariantError(
            f"Invariant failed: count()={tree.count()} ≠ key_count={stats.key_count}"
        )
    return stats


def collect_keys(tree: OrderedTreeBase) -> List[Any]:
    return [] if tree is None else tree.keys()
