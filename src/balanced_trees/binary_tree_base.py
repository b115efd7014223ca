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

"""Binary search tree base shared by the AVL and size-balanced trees"""

from __future__ import annotations
import logging
from abc import abstractmethod
from typing import Any, Iterator, List, Optional

from balanced_trees.base import OrderedTreeBase, _validate_key
from balanced_trees.oplog import OpKind

logger = logging.getLogger(__name__)


class OrderedNode:
    """
    Node of a binary balanced tree.

    `left` and `right` are owned by this node; `parent` is a back-reference
    that is only ever rewritten by the tree's linking and rotation primitives.
    """
    __slots__ = ("key", "left", "right", "parent")

    def __init__(self, key: Any):
        self.key = key
        self.left: Optional[OrderedNode] = None
        self.right: Optional[OrderedNode] = None
        self.parent: Optional[OrderedNode] = None

    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(key={self.key!r})"


class BinaryTreeBase(OrderedTreeBase[OrderedNode]):
    """
    Recursive BST insert/delete with a per-ancestor fix-up hook.

    Subclasses keep their node metadata current in `_update` and restore
    their balance invariant in `_fix_after_insert` / `_fix_after_delete`,
    both of which return the (possibly new) root of the subtree.
    """
    __slots__ = ()

    # Public API
    def insert(self, key: Any) -> bool:
        _validate_key(key, "insert")
        if self.find(key) is not None:
            logger.debug(f"insert({key!r}): already present")
            return False
        self._record(OpKind.INSERT, key)
        self._set_root(self._insert(self.root, key))
        return True

    def delete(self, key: Any) -> bool:
        _validate_key(key, "delete")
        if self.find(key) is None:
            logger.debug(f"delete({key!r}): not present")
            return False
        self._record(OpKind.DELETE, key)
        self._set_root(self._delete(self.root, key))
        return True

    def search(self, key: Any) -> Optional[OrderedNode]:
        _validate_key(key, "search")
        self._record(OpKind.SEARCH, key)
        return self.find(key)

    def find(self, key: Any) -> Optional[OrderedNode]:
        cur = self.root
        while cur is not None:
            if key < cur.key:
                cur = cur.left
            elif key > cur.key:
                cur = cur.right
            else:
                return cur
        return None

    def height(self) -> int:
        return _subtree_height(self.root)

    def count(self) -> int:
        return _subtree_count(self.root)

    def iter_keys(self) -> Iterator[Any]:
        stack: List[OrderedNode] = []
        cur = self.root
        while stack or cur is not None:
            while cur is not None:
                stack.append(cur)
                cur = cur.left
            cur = stack.pop()
            yield cur.key
            cur = cur.right

    def min_key(self) -> Optional[Any]:
        if self.root is None:
            return None
        return _min_node(self.root).key

    def max_key(self) -> Optional[Any]:
        cur = self.root
        if cur is None:
            return None
        while cur.right is not None:
            cur = cur.right
        return cur.key

    # Hooks
    @abstractmethod
    def _update(self, node: OrderedNode) -> None:
        """Recompute the node's metadata from its children."""
        pass

    @abstractmethod
    def _fix_after_insert(self, node: OrderedNode, key: Any) -> OrderedNode:
        pass

    @abstractmethod
    def _fix_after_delete(self, node: OrderedNode) -> OrderedNode:
        pass

    def _describe(self, node: OrderedNode) -> str:
        return f"{node.key!r}"

    # Private Methods
    def _insert(self, node: Optional[OrderedNode], key: Any) -> OrderedNode:
        if node is None:
            return self.NodeClass(key)
        if key < node.key:
            self._set_left(node, self._insert(node.left, key))
        else:
            self._set_right(node, self._insert(node.right, key))
        return self._fix_after_insert(node, key)

    def _delete(self, node: Optional[OrderedNode], key: Any) -> Optional[OrderedNode]:
        if node is None:
            return None
        if key < node.key:
            self._set_left(node, self._delete(node.left, key))
        elif key > node.key:
            self._set_right(node, self._delete(node.right, key))
        else:
            if node.left is None:
                return node.right
            if node.right is None:
                return node.left
            # Two children: take over the in-order successor's key
            successor = _min_node(node.right)
            node.key = successor.key
            self._set_right(node, self._delete(node.right, successor.key))
        return self._fix_after_delete(node)

    def _set_root(self, node: Optional[OrderedNode]) -> None:
        self.root = node
        if node is not None:
            node.parent = None

    def _set_left(self, node: OrderedNode, child: Optional[OrderedNode]) -> None:
        node.left = child
        if child is not None:
            child.parent = node

    def _set_right(self, node: OrderedNode, child: Optional[OrderedNode]) -> None:
        node.right = child
        if child is not None:
            child.parent = node

    def _rotate_left(self, node: OrderedNode, nested: bool = False) -> OrderedNode:
        """
        Rotate `node` down to the left and return the subtree's new root.

        The new root inherits `node`'s parent link; the caller re-attaches it
        through `_set_left`, `_set_right` or `_set_root`.
        """
        self._record(OpKind.ROTATE_LEFT, node.key, nested=nested)
        logger.debug(f"rotate-left at {node.key!r}")
        pivot = node.right
        parent = node.parent
        self._set_right(node, pivot.left)
        self._set_left(pivot, node)
        pivot.parent = parent
        self._update(node)
        self._update(pivot)
        return pivot

    def _rotate_right(self, node: OrderedNode, nested: bool = False) -> OrderedNode:
        """Mirror image of `_rotate_left`."""
        self._record(OpKind.ROTATE_RIGHT, node.key, nested=nested)
        logger.debug(f"rotate-right at {node.key!r}")
        pivot = node.left
        parent = node.parent
        self._set_left(node, pivot.right)
        self._set_right(pivot, node)
        pivot.parent = parent
        self._update(node)
        self._update(pivot)
        return pivot

    def print_structure(self, indent: int = 0) -> str:
        prefix = ' ' * indent
        if self.is_empty():
            return f"{prefix}Empty {self.__class__.__name__}"

        result = [f"{prefix}{self.__class__.__name__}(count={self.count()})"]

        def _walk(node: Optional[OrderedNode], depth: int, label: str) -> None:
            pad = ' ' * (indent + 4 * depth)
            if node is None:
                result.append(f"{pad}{label}: Empty")
                return
            result.append(f"{pad}{label}: {self._describe(node)}")
            if not node.is_leaf():
                _walk(node.left, depth + 1, "L")
                _walk(node.right, depth + 1, "R")

        _walk(self.root, 1, "Root")
        return "\n".join(result)


def _min_node(node: OrderedNode) -> OrderedNode:
    while node.left is not None:
        node = node.left
    return node


def _subtree_height(node: Optional[OrderedNode]) -> int:
    if node is None:
        return 0
    return 1 + max(_subtree_height(node.left), _subtree_height(node.right))


def _subtree_count(node: Optional[OrderedNode]) -> int:
    if node is None:
        return 0
    return 1 + _subtree_count(node.left) + _subtree_count(node.right)
