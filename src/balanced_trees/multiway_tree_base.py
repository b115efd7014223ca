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

"""2-3-4 tree base implementation"""

from __future__ import annotations
import bisect
import logging
from typing import Any, Iterable, Iterator, List, Optional

from balanced_trees.base import OrderedTreeBase, _validate_key
from balanced_trees.oplog import OpKind

logger = logging.getLogger(__name__)


class MultiwayNodeBase:
    """
    A node of a 2-3-4 tree.

    Holds 1 to MAX_KEYS sorted keys and, if internal, len(keys) + 1 owned
    children. `parent` is a back-reference maintained by the tree's split,
    merge and borrow primitives.
    """
    __slots__ = ("keys", "children", "parent")

    MAX_KEYS: int = 3

    def __init__(self, keys: Optional[Iterable[Any]] = None):
        self.keys: List[Any] = list(keys) if keys is not None else []
        self.children: List[MultiwayNodeBase] = []
        self.parent: Optional[MultiwayNodeBase] = None

    def is_leaf(self) -> bool:
        return not self.children

    def is_full(self) -> bool:
        return len(self.keys) >= self.MAX_KEYS

    def key_index(self, key: Any) -> int:
        """Index of `key` in this node if present, else of the child to descend into."""
        return bisect.bisect_left(self.keys, key)

    def has_key(self, key: Any) -> bool:
        i = bisect.bisect_left(self.keys, key)
        return i < len(self.keys) and self.keys[i] == key

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(keys={self.keys!r})"


class TwoThreeFourTreeBase(OrderedTreeBase[MultiwayNodeBase]):
    """
    B-tree of order 4 with top-down pre-emptive splitting and fixing.

    Insertion splits every full node before entering it, so no split ever
    propagates upwards. Deletion makes sure every node it descends into holds
    at least two keys (borrowing from or merging with a sibling), so removing
    a key from a leaf never underflows.
    """
    __slots__ = ()

    # Public API
    def insert(self, key: Any) -> bool:
        _validate_key(key, "insert")
        if self.find(key) is not None:
            logger.debug(f"insert({key!r}): already present")
            return False
        self._record(OpKind.INSERT, key)

        if self.root is None:
            self.root = self.NodeClass([key])
            return True

        if self.root.is_full():
            old_root = self.root
            self.root = self.NodeClass()
            self._set_children(self.root, [old_root])
            self._split_child(self.root, 0, "root split")

        node = self.root
        while not node.is_leaf():
            i = node.key_index(key)
            if node.children[i].is_full():
                self._split_child(node, i, "child split")
                if key > node.keys[i]:
                    i += 1
            node = node.children[i]
        bisect.insort(node.keys, key)
        return True

    def delete(self, key: Any) -> bool:
        _validate_key(key, "delete")
        if self.find(key) is None:
            logger.debug(f"delete({key!r}): not present")
            return False
        self._record(OpKind.DELETE, key)

        self._delete(self.root, key)

        root = self.root
        if not root.keys:
            if root.is_leaf():
                self.root = None
            else:
                self.root = root.children[0]
                self.root.parent = None
                logger.debug("root collapsed into its only child")
        return True

    def search(self, key: Any) -> Optional[MultiwayNodeBase]:
        _validate_key(key, "search")
        self._record(OpKind.SEARCH, key)
        return self.find(key)

    def find(self, key: Any) -> Optional[MultiwayNodeBase]:
        node = self.root
        while node is not None:
            i = node.key_index(key)
            if i < len(node.keys) and node.keys[i] == key:
                return node
            if node.is_leaf():
                return None
            node = node.children[i]
        return None

    def height(self) -> int:
        height = 0
        node = self.root
        while node is not None:
            height += 1
            node = node.children[0] if node.children else None
        return height

    def count(self) -> int:
        return _count_keys(self.root)

    def node_count(self) -> int:
        return _count_nodes(self.root)

    def iter_keys(self) -> Iterator[Any]:
        if self.root is not None:
            yield from _iter_keys(self.root)

    # Private Methods
    def _delete(self, node: MultiwayNodeBase, key: Any) -> None:
        """
        Delete `key` from the subtree rooted at `node`.

        `node` is the root or holds at least two keys. Whenever a child with a
        single key is about to be entered it is fixed first; the fix may move
        separator keys, so the current node is re-examined afterwards.
        """
        while True:
            i = node.key_index(key)
            found = i < len(node.keys) and node.keys[i] == key

            if node.is_leaf():
                if found:
                    del node.keys[i]
                return

            child = node.children[i]
            if len(child.keys) == 1:
                self._fix_child(node, i)
                continue

            if found:
                # Replace by the in-order predecessor, then delete that below
                predecessor = _max_key(child)
                node.keys[i] = predecessor
                key = predecessor
            node = child

    def _set_children(self, node: MultiwayNodeBase, children: List[MultiwayNodeBase]) -> None:
        node.children = list(children)
        for child in node.children:
            child.parent = node

    def _split_child(self, parent: MultiwayNodeBase, index: int, note: str) -> None:
        """
        Split the full child at `index`: its middle key moves up into the
        parent, its last key (and last two children) into a new right sibling.
        """
        child = parent.children[index]
        first, middle, last = child.keys
        sibling = self.NodeClass([last])
        child.keys = [first]
        if not child.is_leaf():
            moved = child.children[2:]
            self._set_children(child, child.children[:2])
            self._set_children(sibling, moved)

        parent.keys.insert(index, middle)
        parent.children.insert(index + 1, sibling)
        sibling.parent = parent
        child.parent = parent

        self._record(OpKind.SPLIT, middle, index=index, note=note)
        logger.debug(f"split {note} at index {index}, promoted {middle!r}")

    def _fix_child(self, parent: MultiwayNodeBase, index: int) -> None:
        children = parent.children
        if index > 0 and len(children[index - 1].keys) > 1:
            self._borrow_from_left(parent, index)
        elif index < len(children) - 1 and len(children[index + 1].keys) > 1:
            self._borrow_from_right(parent, index)
        elif index > 0:
            self._merge(parent, index - 1, "with left sibling")
        else:
            self._merge(parent, index, "with right sibling")

    def _borrow_from_left(self, parent: MultiwayNodeBase, index: int) -> None:
        child = parent.children[index]
        left = parent.children[index - 1]
        separator = parent.keys[index - 1]

        child.keys.insert(0, separator)
        parent.keys[index - 1] = left.keys.pop()
        if not left.is_leaf():
            moved = left.children.pop()
            child.children.insert(0, moved)
            moved.parent = child

        self._record(OpKind.BORROW_LEFT, separator, index=index)
        logger.debug(f"borrow-left into child {index}, separator {separator!r}")

    def _borrow_from_right(self, parent: MultiwayNodeBase, index: int) -> None:
        child = parent.children[index]
        right = parent.children[index + 1]
        separator = parent.keys[index]

        child.keys.append(separator)
        parent.keys[index] = right.keys.pop(0)
        if not right.is_leaf():
            moved = right.children.pop(0)
            child.children.append(moved)
            moved.parent = child

        self._record(OpKind.BORROW_RIGHT, separator, index=index)
        logger.debug(f"borrow-right into child {index}, separator {separator!r}")

    def _merge(self, parent: MultiwayNodeBase, left_index: int, note: str) -> None:
        """Fold children[left_index + 1] and their separator into children[left_index]."""
        left = parent.children[left_index]
        right = parent.children.pop(left_index + 1)
        separator = parent.keys.pop(left_index)

        left.keys = left.keys + [separator] + right.keys
        if not left.is_leaf():
            self._set_children(left, left.children + right.children)
        right.parent = None

        self._record(OpKind.MERGE, separator, index=left_index, note=note)
        logger.debug(f"merge {note} at index {left_index}, separator {separator!r}")

    def print_structure(self, indent: int = 0) -> str:
        prefix = ' ' * indent
        if self.is_empty():
            return f"{prefix}Empty {self.__class__.__name__}"

        result = [f"{prefix}{self.__class__.__name__}(count={self.count()}, height={self.height()})"]

        def _walk(node: MultiwayNodeBase, depth: int) -> None:
            pad = ' ' * (indent + 4 * depth)
            keys_line = " | ".join(str(k) for k in node.keys)
            result.append(f"{pad}[{keys_line}]")
            for child in node.children:
                _walk(child, depth + 1)

        _walk(self.root, 1)
        return "\n".join(result)


def _max_key(node: MultiwayNodeBase) -> Any:
    while not node.is_leaf():
        node = node.children[-1]
    return node.keys[-1]


def _count_keys(node: Optional[MultiwayNodeBase]) -> int:
    if node is None:
        return 0
    return len(node.keys) + sum(_count_keys(child) for child in node.children)


def _count_nodes(node: Optional[MultiwayNodeBase]) -> int:
    if node is None:
        return 0
    return 1 + sum(_count_nodes(child) for child in node.children)


def _iter_keys(node: MultiwayNodeBase) -> Iterator[Any]:
    if node.is_leaf():
        yield from node.keys
        return
    for i, key in enumerate(node.keys):
        yield from _iter_keys(node.children[i])
        yield key
    yield from _iter_keys(node.children[-1])
