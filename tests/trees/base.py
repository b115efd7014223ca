"""Base test case for balanced tree engine tests"""
# pylint: skip-file

from typing import Any, List, Optional
import unittest
import logging

from balanced_trees.base import TreeKind
from balanced_trees.engine import TreeEngine, create_engine
from balanced_trees.oplog import OpKind
from balanced_trees.stats import tree_stats_
from tests.utils import assert_tree_invariants_tc

# Configure logging for test
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class TreeTestCase(unittest.TestCase):
    """
    Base class for all engine tests.

    Subclasses set KIND. After each test the engine's invariants are checked,
    plus `expected_keys` and `expected_height` when a test sets them.
    """
    KIND: TreeKind = TreeKind.AVL

    def setUp(self):
        self.engine: TreeEngine = create_engine(self.KIND)
        self.tree = self.engine.tree
        logger.debug(f"Created engine test with kind={self.KIND.value}, tree class {type(self.tree).__name__}")

    def tearDown(self):
        if not getattr(self, 'engine', None):
            return

        stats = tree_stats_(self.tree)
        assert_tree_invariants_tc(self, self.tree, stats)

        expected_keys = getattr(self, 'expected_keys', None)
        if expected_keys is not None:
            self.assertEqual(
                self.engine.keys(), sorted(expected_keys),
                f"Keys {self.engine.keys()} do not match expected {sorted(expected_keys)}\n"
                f"Tree structure:\n{self.engine.print_structure()}"
            )

        expected_height = getattr(self, 'expected_height', None)
        if expected_height is not None:
            self.assertEqual(
                self.engine.height(), expected_height,
                f"Height {self.engine.height()} does not match expected {expected_height}"
            )

    def _insert_all(self, keys: List[Any]) -> None:
        for key in keys:
            self.engine.insert(key)

    def _delete_all(self, keys: List[Any]) -> None:
        for key in keys:
            self.engine.delete(key)

    def _structural_ops(self, start: int = 0) -> List[OpKind]:
        """Kinds of the structural entries appended at or after `start`."""
        return [op.kind for op in self.engine.log.since(start) if op.kind.is_structural]

    def _assert_binary_node(self, node, key: Any, left: Optional[Any], right: Optional[Any]) -> None:
        """Verify a binary node's key, its children's keys and their parent links."""
        self.assertIsNotNone(node, "Node should not be None")
        self.assertEqual(node.key, key)
        for child, expected in ((node.left, left), (node.right, right)):
            if expected is None:
                self.assertIsNone(child, f"Expected no child under {key}")
            else:
                self.assertIsNotNone(child, f"Expected child {expected} under {key}")
                self.assertEqual(child.key, expected)
                self.assertIs(child.parent, node, f"Stale parent link on {expected}")
