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

"""Size-balanced tree (SBT) base implementation"""

from __future__ import annotations
from typing import Any, Optional

from balanced_trees.binary_tree_base import BinaryTreeBase, OrderedNode


class SBTNodeBase(OrderedNode):
    """Binary node carrying the number of nodes in its subtree."""
    __slots__ = ("size",)

    def __init__(self, key: Any):
        super().__init__(key)
        self.size = 1


def _size(node: Optional[SBTNodeBase]) -> int:
    return node.size if node is not None else 0


class SBTTreeBase(BinaryTreeBase):
    """
    Weight-balanced binary search tree.

    Every node satisfies
        size(L.left), size(L.right) <= size(R)
        size(R.left), size(R.right) <= size(L)
    where L and R are its children. `maintain` restores the condition at each
    ancestor after an insert or delete.
    """
    __slots__ = ()

    def count(self) -> int:
        return _size(self.root)

    def rank(self, key: Any) -> Optional[int]:
        """Zero-based position of `key` in sorted order, or None if absent."""
        cur = self.root
        rank = 0
        while cur is not None:
            if key < cur.key:
                cur = cur.left
            elif key > cur.key:
                rank += _size(cur.left) + 1
                cur = cur.right
            else:
                return rank + _size(cur.left)
        return None

    def select(self, index: int) -> Any:
        """
        Return the key at zero-based position `index` in sorted order.

        Raises:
            IndexError: If `index` is outside [0, count()).
        """
        if not 0 <= index < self.count():
            raise IndexError(f"select(): index {index} out of range")
        cur = self.root
        while True:
            left_size = _size(cur.left)
            if index < left_size:
                cur = cur.left
            elif index > left_size:
                index -= left_size + 1
                cur = cur.right
            else:
                return cur.key

    def _update(self, node: SBTNodeBase) -> None:
        node.size = 1 + _size(node.left) + _size(node.right)

    def _describe(self, node: SBTNodeBase) -> str:
        return f"{node.key!r} (size={node.size})"

    def _fix_after_insert(self, node: SBTNodeBase, key: Any) -> SBTNodeBase:
        self._update(node)
        return self._maintain(node)

    def _fix_after_delete(self, node: SBTNodeBase) -> SBTNodeBase:
        self._update(node)
        return self._maintain(node)

    def _maintain(self, node: Optional[SBTNodeBase], nested: bool = False) -> Optional[SBTNodeBase]:
        """
        Restore the size balance at `node` and return the subtree's root.

        Rotations re-maintain the subtrees they changed and then the new root;
        those recursive calls run with nested=True so their rotations are
        logged as part of this fix-up.
        """
        if node is None:
            return None

        left, right = node.left, node.right
        left_size, right_size = _size(left), _size(right)

        if left is not None and _size(left.left) > right_size:
            node = self._rotate_right(node, nested)
            self._set_right(node, self._maintain(node.right, True))
            node = self._maintain(node, True)
        elif left is not None and _size(left.right) > right_size:
            self._set_left(node, self._rotate_left(left, nested))
            node = self._rotate_right(node, nested)
            self._set_left(node, self._maintain(node.left, True))
            self._set_right(node, self._maintain(node.right, True))
            node = self._maintain(node, True)
        elif right is not None and _size(right.right) > left_size:
            node = self._rotate_left(node, nested)
            self._set_left(node, self._maintain(node.left, True))
            node = self._maintain(node, True)
        elif right is not None and _size(right.left) > left_size:
            self._set_right(node, self._rotate_right(right, nested))
            node = self._rotate_left(node, nested)
            self._set_left(node, self._maintain(node.left, True))
            self._set_right(node, self._maintain(node.right, True))
            node = self._maintain(node, True)

        return node
