"""Tests for tree statistics and invariant detection"""
# pylint: skip-file

import unittest
import logging

from balanced_trees import InvariantError, create_engine
from balanced_trees.factory import create_tree
from balanced_trees.stats import TREE_FLAGS, check_invariants, collect_keys, tree_stats_

# Configure logging for test
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _binary_chain(tree, keys):
    """Link `keys` as a right-leaning chain, bypassing the balancing logic."""
    nodes = [tree.NodeClass(k) for k in keys]
    for parent, child in zip(nodes, nodes[1:]):
        tree._set_right(parent, child)
    for node in reversed(nodes):
        tree._update(node)
    tree._set_root(nodes[0])
    return nodes[0]


def _multiway(tree, keys, children=()):
    node = tree.NodeClass(keys)
    if children:
        tree._set_children(node, list(children))
    return node


class TestStatsOfValidTrees(unittest.TestCase):

    def test_empty_tree(self):
        for kind in ("avl", "sbt", "2-3-4"):
            with self.subTest(kind=kind):
                stats = tree_stats_(create_tree(kind))
                self.assertEqual(stats.height, 0)
                self.assertEqual(stats.node_count, 0)
                self.assertIsNone(stats.least_key)
                self.assertEqual(stats.failed_flags(), [])

    def test_binary_counts(self):
        engine = create_engine("avl")
        for key in range(1, 8):
            engine.insert(key)
        stats = engine.stats()
        self.assertEqual(stats.height, 3)
        self.assertEqual(stats.node_count, 7)
        self.assertEqual(stats.key_count, 7)
        self.assertEqual(stats.leaf_count, 4)
        self.assertEqual((stats.least_key, stats.greatest_key), (1, 7))
        self.assertEqual(stats.failed_flags(), [])

    def test_multiway_counts(self):
        engine = create_engine("2-3-4")
        for key in range(1, 11):
            engine.insert(key)
        stats = engine.validate()
        self.assertEqual(stats.height, 3)
        self.assertEqual(stats.node_count, 8)
        self.assertEqual(stats.key_count, 10)
        self.assertEqual(stats.leaf_count, 5)
        self.assertEqual((stats.least_key, stats.greatest_key), (1, 10))

    def test_collect_keys(self):
        engine = create_engine("sbt")
        for key in (5, 1, 3):
            engine.insert(key)
        self.assertEqual(collect_keys(engine.tree), [1, 3, 5])
        self.assertEqual(collect_keys(None), [])


class TestViolationDetection(unittest.TestCase):

    def _assert_only_failure(self, tree, flag):
        stats = tree_stats_(tree)
        self.assertIn(flag, TREE_FLAGS)
        self.assertEqual(stats.failed_flags(), [flag], tree.print_structure())
        with self.assertRaises(InvariantError) as ctx:
            check_invariants(tree)
        self.assertIn(flag, str(ctx.exception))

    def test_key_order(self):
        engine = create_engine("avl")
        for key in (2, 1, 3):
            engine.insert(key)
        engine.root.left.key = 5
        self._assert_only_failure(engine.tree, "is_search_tree")

    def test_parent_link(self):
        engine = create_engine("sbt")
        for key in (2, 1, 3):
            engine.insert(key)
        engine.root.right.parent = None
        self._assert_only_failure(engine.tree, "parent_links_ok")

    def test_root_with_parent(self):
        engine = create_engine("2-3-4")
        engine.insert(1)
        engine.root.parent = engine.tree.NodeClass([0])
        self._assert_only_failure(engine.tree, "parent_links_ok")

    def test_stale_avl_height(self):
        engine = create_engine("avl")
        for key in (2, 1, 3):
            engine.insert(key)
        engine.root.height = 7
        self._assert_only_failure(engine.tree, "metadata_ok")

    def test_stale_sbt_size(self):
        engine = create_engine("sbt")
        for key in (2, 1, 3):
            engine.insert(key)
        engine.root.left.size = 2
        self._assert_only_failure(engine.tree, "metadata_ok")

    def test_height_imbalance(self):
        tree = create_tree("avl")
        _binary_chain(tree, [1, 2, 3])
        self._assert_only_failure(tree, "is_height_balanced")

    def test_size_imbalance(self):
        tree = create_tree("sbt")
        _binary_chain(tree, [1, 2, 3])
        self._assert_only_failure(tree, "is_size_balanced")

    def test_uneven_leaf_depths(self):
        tree = create_tree("2-3-4")
        inner = _multiway(tree, [2], [_multiway(tree, [1]), _multiway(tree, [3])])
        tree.root = _multiway(tree, [4], [inner, _multiway(tree, [5])])
        self._assert_only_failure(tree, "leaves_same_depth")
        self.assertEqual(tree_stats_(tree).height, 3)

    def test_overfull_node(self):
        tree = create_tree("2-3-4")
        tree.root = _multiway(tree, [1, 2, 3, 4])
        self._assert_only_failure(tree, "node_key_counts_ok")

    def test_keys_outside_separator_range(self):
        tree = create_tree("2-3-4")
        tree.root = _multiway(tree, [4], [_multiway(tree, [1, 6]), _multiway(tree, [5])])
        self._assert_only_failure(tree, "is_search_tree")


if __name__ == "__main__":
    unittest.main()
