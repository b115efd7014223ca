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

"""Tree engine: the public facade over the three balanced tree kinds"""

from __future__ import annotations
import logging
from typing import Any, Iterator, List, Optional

from balanced_trees.base import OrderedTreeBase, TreeKind
from balanced_trees.factory import create_tree
from balanced_trees.oplog import OperationLog
from balanced_trees.profiling import track_performance
from balanced_trees.stats import Stats, check_invariants, tree_stats_

logger = logging.getLogger(__name__)

# Check every engine's invariants after each mutation
DEBUG = False


class TreeEngine:
    """
    Owns one balanced tree of a fixed kind together with its operation log.

    Attributes:
        kind (TreeKind): The balancing discipline, fixed at construction.
        check_invariants (bool): Verify all structural invariants after each
            insert and delete, raising InvariantError on a violation.
    """
    __slots__ = ("kind", "check_invariants", "_tree", "_log")

    def __init__(self, kind: Any, check_invariants: bool = False):
        self.kind: TreeKind = TreeKind.parse(kind)
        self.check_invariants = check_invariants
        self._log = OperationLog()
        self._tree: OrderedTreeBase = create_tree(self.kind, self._log)

    def __str__(self):
        return f"TreeEngine(kind={self.kind.value}, count={self.count()}, height={self.height()})"

    __repr__ = __str__

    @property
    def tree(self) -> OrderedTreeBase:
        return self._tree

    @property
    def root(self):
        return self._tree.root

    @property
    def log(self) -> OperationLog:
        return self._log

    # Public API
    @track_performance
    def insert(self, key: Any) -> bool:
        """
        Insert `key`.

        Returns:
            bool: True if inserted; False if the key was already present, in
                which case neither the tree nor the log changed.

        Raises:
            TypeError: If key is None.
        """
        inserted = self._tree.insert(key)
        logger.debug(f"[{self.kind.value}] insert({key!r}) -> {inserted}")
        if inserted:
            self._after_mutation()
        return inserted

    @track_performance
    def delete(self, key: Any) -> bool:
        """
        Delete `key`.

        Returns:
            bool: True if removed; False if the key was absent, in which case
                neither the tree nor the log changed.
        """
        deleted = self._tree.delete(key)
        logger.debug(f"[{self.kind.value}] delete({key!r}) -> {deleted}")
        if deleted:
            self._after_mutation()
        return deleted

    @track_performance
    def search(self, key: Any):
        """Return the node holding `key`, or None. Always logged."""
        return self._tree.search(key)

    def height(self) -> int:
        return self._tree.height()

    def count(self) -> int:
        return self._tree.count()

    def clear(self) -> None:
        """Reset to an empty tree and empty the operation log."""
        self._tree.clear()
        logger.debug(f"[{self.kind.value}] cleared")

    def keys(self) -> List[Any]:
        return self._tree.keys()

    def min_key(self) -> Optional[Any]:
        return self._tree.min_key()

    def max_key(self) -> Optional[Any]:
        return self._tree.max_key()

    def stats(self) -> Stats:
        return tree_stats_(self._tree)

    def validate(self) -> Stats:
        return check_invariants(self._tree)

    def print_structure(self) -> str:
        return self._tree.print_structure()

    def __contains__(self, key: Any) -> bool:
        return key is not None and self._tree.find(key) is not None

    def __len__(self) -> int:
        return self._tree.count()

    def __iter__(self) -> Iterator[Any]:
        return self._tree.iter_keys()

    def _after_mutation(self) -> None:
        if self.check_invariants or DEBUG:
            check_invariants(self._tree)


def create_engine(kind: Any, check_invariants: bool = False) -> TreeEngine:
    """
    Create a new engine with an empty tree of the given kind.

    Args:
        kind: A TreeKind or one of its string aliases ("avl", "sbt", "2-3-4").
        check_invariants: Verify invariants after every mutation.
    """
    return TreeEngine(kind, check_invariants=check_invariants)
