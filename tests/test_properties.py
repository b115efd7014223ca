"""Randomised property tests: every kind against a reference set"""
# pylint: skip-file

import math
import unittest
import logging

import numpy as np

from balanced_trees import TreeKind, create_engine
from balanced_trees.oplog import OpKind

# Configure logging for test
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Upper bound on height for n keys
HEIGHT_BOUNDS = {
    TreeKind.AVL: lambda n: 1.44 * math.log2(n + 2),
    TreeKind.SIZE_BALANCED: lambda n: 2 * math.log2(n + 1) + 1,
    TreeKind.TWO_THREE_FOUR: lambda n: math.log2(n + 1),
}


class TestRandomOperations(unittest.TestCase):

    def _run_sequence(self, kind, seed, steps=400, key_range=120):
        rng = np.random.default_rng(seed)
        engine = create_engine(kind, check_invariants=True)
        reference = set()

        for _ in range(steps):
            key = int(rng.integers(key_range))
            op = str(rng.choice(["insert", "delete", "search"], p=[0.5, 0.35, 0.15]))
            log_len = len(engine.log)

            if op == "insert":
                changed = engine.insert(key)
                self.assertEqual(changed, key not in reference)
                reference.add(key)
            elif op == "delete":
                changed = engine.delete(key)
                self.assertEqual(changed, key in reference)
                reference.discard(key)
            else:
                node = engine.search(key)
                self.assertEqual(node is not None, key in reference)
                changed = True

            new_entries = engine.log.since(log_len)
            if changed:
                self.assertEqual(new_entries[0].kind, OpKind(op))
                self.assertEqual(new_entries[0].key, key)
                self.assertTrue(all(e.kind.is_structural for e in new_entries[1:]))
            else:
                self.assertEqual(new_entries, ())

            self.assertEqual(engine.keys(), sorted(reference))

        return engine, reference

    def test_random_sequences(self):
        for kind in TreeKind:
            for seed in (0, 1, 2):
                with self.subTest(kind=kind.value, seed=seed):
                    engine, reference = self._run_sequence(kind, seed)
                    self.assertEqual(engine.count(), len(reference))
                    if reference:
                        self.assertLessEqual(engine.height(), HEIGHT_BOUNDS[kind](len(reference)))

    def test_log_replays_to_same_key_set(self):
        for kind in TreeKind:
            with self.subTest(kind=kind.value):
                engine, reference = self._run_sequence(kind, seed=7, steps=200)
                replayed = set()
                for op in engine.log:
                    if op.kind is OpKind.INSERT:
                        replayed.add(op.key)
                    elif op.kind is OpKind.DELETE:
                        replayed.remove(op.key)
                self.assertEqual(replayed, reference)


class TestInsertDeleteRoundTrip(unittest.TestCase):

    def test_insert_then_delete_restores_key_set(self):
        for kind in TreeKind:
            with self.subTest(kind=kind.value):
                rng = np.random.default_rng(21)
                engine = create_engine(kind, check_invariants=True)
                for key in rng.permutation(200)[:80]:
                    engine.insert(int(key) * 2)

                # Odd keys are never present
                for key in (int(k) * 2 + 1 for k in rng.permutation(200)[:40]):
                    before = engine.keys()
                    self.assertTrue(engine.insert(key))
                    self.assertIn(key, engine)
                    self.assertTrue(engine.delete(key))
                    self.assertEqual(engine.keys(), before)
                    self.assertNotIn(key, engine)

    def test_round_trip_from_empty(self):
        for kind in TreeKind:
            with self.subTest(kind=kind.value):
                engine = create_engine(kind)
                self.assertTrue(engine.insert(42))
                self.assertTrue(engine.delete(42))
                self.assertEqual(engine.keys(), [])
                self.assertIsNone(engine.root)
                self.assertEqual(engine.height(), 0)


class TestHeightBounds(unittest.TestCase):

    def test_permutations(self):
        for kind in TreeKind:
            for n in (1, 10, 100, 1000):
                with self.subTest(kind=kind.value, n=n):
                    keys = np.random.default_rng(n).permutation(n)
                    engine = create_engine(kind)
                    for key in keys:
                        engine.insert(int(key))
                    engine.validate()
                    self.assertEqual(engine.count(), n)
                    self.assertLessEqual(engine.height(), HEIGHT_BOUNDS[kind](n))

    def test_sorted_input(self):
        n = 512
        for kind in TreeKind:
            with self.subTest(kind=kind.value):
                engine = create_engine(kind)
                for key in range(n):
                    engine.insert(key)
                self.assertLessEqual(engine.height(), HEIGHT_BOUNDS[kind](n))
                for key in range(0, n, 2):
                    engine.delete(key)
                engine.validate()
                self.assertEqual(engine.keys(), list(range(1, n, 2)))


if __name__ == "__main__":
    unittest.main()
