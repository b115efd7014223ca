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

"""AVL tree base implementation"""

from __future__ import annotations
from typing import Any, Optional

from balanced_trees.binary_tree_base import BinaryTreeBase, OrderedNode


class AVLNodeBase(OrderedNode):
    """Binary node carrying its subtree height (1 for a leaf)."""
    __slots__ = ("height",)

    def __init__(self, key: Any):
        super().__init__(key)
        self.height = 1


def _height(node: Optional[AVLNodeBase]) -> int:
    return node.height if node is not None else 0


def _balance(node: Optional[AVLNodeBase]) -> int:
    if node is None:
        return 0
    return _height(node.left) - _height(node.right)


class AVLTreeBase(BinaryTreeBase):
    """
    Height-balanced binary search tree.

    For every node the heights of its two subtrees differ by at most one.
    Insert and delete rebalance bottom-up on the return path of the
    recursion; at most one single or double rotation fires per ancestor.
    """
    __slots__ = ()

    def height(self) -> int:
        return _height(self.root)

    def _update(self, node: AVLNodeBase) -> None:
        node.height = 1 + max(_height(node.left), _height(node.right))

    def _describe(self, node: AVLNodeBase) -> str:
        return f"{node.key!r} (h={node.height}, b={_balance(node)})"

    def _fix_after_insert(self, node: AVLNodeBase, key: Any) -> AVLNodeBase:
        self._update(node)
        balance = _balance(node)

        # The inserted key tells which grandchild grew
        if balance > 1:
            if key > node.left.key:
                self._set_left(node, self._rotate_left(node.left))
            return self._rotate_right(node)

        if balance < -1:
            if key < node.right.key:
                self._set_right(node, self._rotate_right(node.right))
            return self._rotate_left(node)

        return node

    def _fix_after_delete(self, node: AVLNodeBase) -> AVLNodeBase:
        self._update(node)
        balance = _balance(node)

        # After a deletion the heavy child's own balance picks the case
        if balance > 1:
            if _balance(node.left) < 0:
                self._set_left(node, self._rotate_left(node.left))
            return self._rotate_right(node)

        if balance < -1:
            if _balance(node.right) > 0:
                self._set_right(node, self._rotate_right(node.right))
            return self._rotate_left(node)

        return node
