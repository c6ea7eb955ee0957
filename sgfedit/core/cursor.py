"""Zipper-style cursor over an immutable game tree."""

from __future__ import annotations

from collections.abc import Callable
from functools import cached_property

from sgfedit.core.board import BoardState, GameInfo
from sgfedit.core.game_node import Node
from sgfedit.core.properties import Property


class Cursor:
    """A position in a game tree.

    A cursor holds the current node plus the cursor of its parent as it was
    when this cursor was created. After :meth:`modify_node` the stored parent
    still references the old version of this node; :attr:`parent` splices the
    current node back in, so moving up always sees every edit made below.

    Cursors are immutable. Board state and game info are folded from the root
    on first access and cached on the instance.
    """

    def __init__(self, node: Node, parent: Cursor | None = None, child_index: int = -1) -> None:
        self._node = node
        self._parent = parent
        self._child_index = child_index

    @classmethod
    def root(cls, node: Node) -> "Cursor":
        return cls(node)

    def __repr__(self) -> str:
        return f"Cursor(depth={self.depth}, child_index={self._child_index}, node={self._node!r})"

    @property
    def node(self) -> Node:
        return self._node

    @property
    def properties(self) -> tuple[Property, ...]:
        return self._node.properties

    @property
    def child_index(self) -> int:
        """Index of this node among its parent's children, -1 at the root."""
        return self._child_index

    @property
    def child_count(self) -> int:
        return len(self._node.children)

    @property
    def is_root(self) -> bool:
        return self._parent is None

    @property
    def depth(self) -> int:
        depth = 0
        cursor = self._parent
        while cursor is not None:
            depth += 1
            cursor = cursor._parent
        return depth

    @property
    def parent(self) -> Cursor | None:
        """The parent cursor, with this cursor's node spliced into it."""
        if self._parent is None:
            return None
        stored = self._parent
        if stored._node.children[self._child_index] is self._node:
            return stored
        return Cursor(stored._node.replace_child(self._child_index, self._node), stored._parent, stored._child_index)

    def child(self, index: int) -> "Cursor":
        """Raises IndexError if there is no child ``index``."""
        if index < 0 or index >= len(self._node.children):
            raise IndexError(f"Node has {len(self._node.children)} children, no child {index}")
        return Cursor(self._node.children[index], self, index)

    def children(self) -> list["Cursor"]:
        return [Cursor(child, self, index) for index, child in enumerate(self._node.children)]

    def modify_node(self, fn: Callable[[Node], Node]) -> "Cursor":
        return Cursor(fn(self._node), self._parent, self._child_index)

    def to_root(self) -> "Cursor":
        cursor = self
        while (parent := cursor.parent) is not None:
            cursor = parent
        return cursor

    def root_node(self) -> Node:
        """The root of the tree, including any edits made through this cursor."""
        return self.to_root().node

    @cached_property
    def board(self) -> BoardState:
        # Fold down from the nearest ancestor with a cached board, without recursion
        pending: list[Cursor] = []
        cursor: Cursor | None = self
        while cursor is not None and "board" not in cursor.__dict__:
            pending.append(cursor)
            cursor = cursor._parent
        board = cursor.__dict__["board"] if cursor is not None else None
        for step in reversed(pending):
            board = BoardState.for_root(step._node) if board is None else board.after(step._node)
        return board

    @property
    def game_info(self) -> GameInfo:
        return self.board.game_info
