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

"""Operation log: the replayable trace of structural tree changes"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterator, List, Optional, Tuple, Union

if TYPE_CHECKING:
    from balanced_trees.base import TreeKind


class OpKind(str, Enum):
    INSERT = "insert"
    DELETE = "delete"
    SEARCH = "search"
    ROTATE_LEFT = "rotate-left"
    ROTATE_RIGHT = "rotate-right"
    SPLIT = "split"
    MERGE = "merge"
    BORROW_LEFT = "borrow-left"
    BORROW_RIGHT = "borrow-right"

    @property
    def is_structural(self) -> bool:
        return self not in (OpKind.INSERT, OpKind.DELETE, OpKind.SEARCH)


@dataclass(frozen=True)
class Operation:
    """
    A single entry of the operation log.

    Attributes:
        kind (OpKind): What happened.
        tree (TreeKind): The tree kind that produced the entry.
        key: The key the entry concerns. For rotations this is the key of the
            subtree root that is rotated down, for splits the promoted middle
            key, for merges the separator pulled down, for borrows the parent
            key moved into the fixed child.
        index (Optional[int]): Child index for split, merge and borrow entries.
        note (Optional[str]): Human readable detail, e.g. "root split".
        nested (bool): True for rotations performed by a recursive
            re-maintenance rather than the top-level fix-up.
    """
    kind: OpKind
    tree: "TreeKind"
    key: Any = None
    index: Optional[int] = None
    note: Optional[str] = None
    nested: bool = False

    def __str__(self):
        parts = [f"{self.kind.value}"]
        if self.key is not None:
            parts.append(f"key={self.key}")
        if self.index is not None:
            parts.append(f"index={self.index}")
        if self.note:
            parts.append(self.note)
        if self.nested:
            parts.append("nested")
        return f"[{self.tree.value}] " + " ".join(parts)


class OperationLog:
    """
    Append-only, ordered sequence of Operation entries.

    Consumers read entries by iteration, indexing or through a LogCursor.
    Only the owning tree appends; `clear` is reserved for the engine's reset.
    """
    __slots__ = ("_entries", "_generation")

    def __init__(self):
        self._entries: List[Operation] = []
        self._generation = 0

    def append(self, op: Operation) -> Operation:
        self._entries.append(op)
        return op

    def clear(self) -> None:
        self._entries.clear()
        self._generation += 1

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Operation]:
        return iter(tuple(self._entries))

    def __getitem__(self, index: Union[int, slice]) -> Union[Operation, Tuple[Operation, ...]]:
        if isinstance(index, slice):
            return tuple(self._entries[index])
        return self._entries[index]

    @property
    def generation(self) -> int:
        """Number of times the log has been cleared."""
        return self._generation

    @property
    def entries(self) -> Tuple[Operation, ...]:
        return tuple(self._entries)

    def since(self, position: int) -> Tuple[Operation, ...]:
        """Return all entries appended at or after `position`."""
        if position < 0:
            raise ValueError(f"since(): position must be >= 0, got {position}")
        return tuple(self._entries[position:])

    def kinds(self) -> List[OpKind]:
        return [op.kind for op in self._entries]

    def cursor(self) -> "LogCursor":
        return LogCursor(self)

    def __str__(self):
        return "\n".join(str(op) for op in self._entries)

    def __repr__(self):
        return f"OperationLog(entries={len(self._entries)})"


class LogCursor:
    """
    Incremental reader over an OperationLog.

    Each `read` returns the entries appended since the previous read. If the
    log was cleared in between, reading restarts from the beginning of the
    new log.
    """
    __slots__ = ("_log", "_generation", "position")

    def __init__(self, log: OperationLog, position: int = 0):
        self._log = log
        self._generation = log.generation
        self.position = position

    def _sync(self) -> None:
        # A clear since the last read invalidates the position
        if self._generation != self._log.generation:
            self._generation = self._log.generation
            self.position = 0

    def read(self) -> Tuple[Operation, ...]:
        self._sync()
        new = self._log.since(self.position)
        self.position += len(new)
        return new

    def pending(self) -> int:
        if self._generation != self._log.generation:
            return len(self._log)
        return max(len(self._log) - self.position, 0)
