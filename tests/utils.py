"""Utility functions for testing balanced tree invariants."""

from balanced_trees.base import OrderedTreeBase
from balanced_trees.stats import Stats, TREE_FLAGS, collect_keys


def assert_tree_invariants_tc(tc, t: OrderedTreeBase, stats: Stats) -> None:
    """TestCase version: use inside unittest.TestCase methods."""
    for flag in TREE_FLAGS:
        tc.assertTrue(
            getattr(stats, flag),
            f"Invariant failed: {flag} is False\n{t.print_structure()}"
        )

    tc.assertEqual(
        stats.key_count, t.count(),
        f"Invariant failed: count()={t.count()} ≠ key_count={stats.key_count}"
    )
    tc.assertEqual(
        stats.height, t.height(),
        f"Invariant failed: height()={t.height()} ≠ stats.height={stats.height}"
    )

    keys = collect_keys(t)
    tc.assertEqual(
        len(keys), stats.key_count,
        f"Invariant failed: {len(keys)} keys in order ≠ key_count={stats.key_count}"
    )
    tc.assertEqual(keys, sorted(set(keys)), "Invariant failed: in-order keys not strictly ascending")

    if not t.is_empty():
        tc.assertGreater(
            stats.node_count, 0,
            f"Invariant failed: node_count={stats.node_count} ≤ 0 for non-empty tree"
        )
        tc.assertGreater(
            stats.leaf_count, 0,
            f"Invariant failed: leaf_count={stats.leaf_count} ≤ 0 for non-empty tree"
        )
        tc.assertIsNotNone(
            stats.least_key,
            "Invariant failed: least_key is None for non-empty tree"
        )
        tc.assertIsNotNone(
            stats.greatest_key,
            "Invariant failed: greatest_key is None for non-empty tree"
        )
        tc.assertEqual((stats.least_key, stats.greatest_key), (keys[0], keys[-1]))
    else:
        tc.assertEqual(stats.node_count, 0)
        tc.assertEqual(stats.height, 0)

