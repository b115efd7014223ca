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

"""Shared abstractions for the balanced ordered-key trees"""

from __future__ import annotations
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Iterator, List, Optional, TypeVar, Generic

from balanced_trees.oplog import OpKind, Operation, OperationLog


class TreeKind(str, Enum):
    """The three balancing disciplines an engine can be built with."""
    AVL = "avl"
    SIZE_BALANCED = "sbt"
    TWO_THREE_FOUR = "2-3-4"

    @property
    def class_prefix(self) -> str:
        return _CLASS_PREFIXES[self]

    @classmethod
    def parse(cls, value: Any) -> "TreeKind":
        """
        Resolve a TreeKind from a member or one of its string aliases.

        Raises:
            ValueError: If `value` names no known tree kind.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            kind = _ALIASES.get(value.strip().lower().replace("_", "-"))
            if kind is not None:
                return kind
        raise ValueError(f"unknown tree kind: {value!r}")


_CLASS_PREFIXES = {
    TreeKind.AVL: "AVL",
    TreeKind.SIZE_BALANCED: "SizeBalanced",
    TreeKind.TWO_THREE_FOUR: "TwoThreeFour",
}

_ALIASES = {
    "avl": TreeKind.AVL,
    "sbt": TreeKind.SIZE_BALANCED,
    "size-balanced": TreeKind.SIZE_BALANCED,
    "sizebalanced": TreeKind.SIZE_BALANCED,
    "2-3-4": TreeKind.TWO_THREE_FOUR,
    "234": TreeKind.TWO_THREE_FOUR,
    "two-three-four": TreeKind.TWO_THREE_FOUR,
    "twothreefour": TreeKind.TWO_THREE_FOUR,
}


class InvariantError(AssertionError):
    """Raised when a structural tree invariant is violated."""
    pass


def _validate_key(key: Any, method: str) -> None:
    if key is None:
        raise TypeError(f"{method}(): key must be orderable, got None")


N = TypeVar("N")


class OrderedTreeBase(ABC, Generic[N]):
    """
    Abstract base class for a balanced ordered-key tree.

    Each concrete tree owns its root node and appends every top-level call
    and structural primitive it performs to an OperationLog.
    Factory will set:
      - NodeClass : which node type the tree builds
      - KIND      : the TreeKind the tree implements
    """
    __slots__ = ("root", "log")

    NodeClass: type
    KIND: TreeKind

    def __init__(self, log: Optional[OperationLog] = None):
        self.root: Optional[N] = None
        self.log: OperationLog = log if log is not None else OperationLog()

    def is_empty(self) -> bool:
        return self.root is None

    def __str__(self):
        if self.is_empty():
            return f"Empty {self.__class__.__name__}"
        return f"{self.__class__.__name__}(count={self.count()}, height={self.height()})"

    __repr__ = __str__

    def _record(
        self,
        kind: OpKind,
        key: Any = None,
        index: Optional[int] = None,
        note: Optional[str] = None,
        nested: bool = False,
    ) -> Operation:
        return self.log.append(
            Operation(kind, self.KIND, key=key, index=index, note=note, nested=nested)
        )

    @abstractmethod
    def insert(self, key: Any) -> bool:
        """
        Insert a key into the tree.

        Parameters:
            key: The key to insert; must be comparable with the stored keys.

        Returns:
            bool: True if the key was inserted, False if it was already present.
        """
        pass

    @abstractmethod
    def delete(self, key: Any) -> bool:
        """
        Delete a key from the tree.

        Parameters:
            key: The key to delete.

        Returns:
            bool: True if the key was removed, False if it was absent.
        """
        pass

    @abstractmethod
    def search(self, key: Any) -> Optional[N]:
        """
        Look up the node holding `key` and record the lookup in the log.

        Returns:
            The node containing the key, or None if the key is absent.
        """
        pass

    @abstractmethod
    def find(self, key: Any) -> Optional[N]:
        """Like `search`, but leaves the log untouched."""
        pass

    @abstractmethod
    def height(self) -> int:
        pass

    @abstractmethod
    def count(self) -> int:
        pass

    @abstractmethod
    def iter_keys(self) -> Iterator[Any]:
        """Yield all keys in ascending order."""
        pass

    @abstractmethod
    def print_structure(self, indent: int = 0) -> str:
        pass

    def keys(self) -> List[Any]:
        return list(self.iter_keys())

    def min_key(self) -> Optional[Any]:
        return next(self.iter_keys(), None)

    def max_key(self) -> Optional[Any]:
        last = None
        for key in self.iter_keys():
            last = key
        return last

    def clear(self) -> None:
        """Drop all nodes and empty the log."""
        self.root = None
        self.log.clear()
