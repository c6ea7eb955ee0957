"""Tree-edit engine: navigation, bookmarks, property edits and events over a cursor.

:class:`GoEditor` threads one piece of state through every operation: the
current :class:`~sgfedit.core.cursor.Cursor`, the bookmark (path) stack and an
ordered handler list per editor event. Everything runs synchronously; handlers
are called inline, in registration order, by the operation that triggers them
and their exceptions propagate to the caller.

Usage:
    editor = GoEditor(Cursor.root(collection[0]))
    editor.on(EventType.NAVIGATION, lambda step: print("moved", step))
    editor.go_down(0)
    editor.modify_comment(lambda old: old + " good move")
    root = editor.cursor.root_node()
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable, Iterable, Iterator
from typing import Any, TypeVar

from sgfedit.common.lists import while_some, while_true
from sgfedit.core.board import GameInfo, game_info_to_properties
from sgfedit.core.cursor import Cursor
from sgfedit.core.errors import InvariantFailure, PreconditionViolation
from sgfedit.core.game_node import Node
from sgfedit.core.path_stack import (
    PathStack,
    Step,
    copy_path_stack,
    merge_top,
    record_step,
    renumber_for_insert,
)
from sgfedit.core.properties import Property, comment
from sgfedit.core.state.events import EDITOR_EVENTS, EventType

logger = logging.getLogger(__name__)

T = TypeVar("T")
Handler = Callable[..., Any]


def _game_info_subset(properties: Iterable[Property]) -> list[Property]:
    return list(dict.fromkeys(p for p in properties if p.is_game_info))


class GoEditor:
    """Mutable editing session over one game tree.

    Failed operations raise :class:`PreconditionViolation` and leave the
    cursor and path stack as they were. Events fired before a failure inside
    a composite operation are not taken back.
    """

    def __init__(self, cursor: Cursor) -> None:
        self._cursor = cursor
        self._path_stack: PathStack = []
        self._handlers: dict[EventType, list[Handler]] = {event: [] for event in EDITOR_EVENTS}

    @property
    def cursor(self) -> Cursor:
        return self._cursor

    @property
    def path_stack(self) -> PathStack:
        """A copy of the bookmark stack, most recent bookmark last."""
        return copy_path_stack(self._path_stack)

    # =========================================================================
    # Events
    # =========================================================================

    def on(self, event: EventType, handler: Handler) -> None:
        """Registers ``handler`` for ``event``; handlers run in registration order.

        Handler arguments: CHILD_ADDED ``(index, child_cursor)``,
        GAME_INFO_CHANGED ``(old_info, new_info)``, NAVIGATION ``(step)``,
        PROPERTIES_CHANGED ``(old_properties, new_properties)``.
        """
        if event not in self._handlers:
            raise ValueError(f"{event} is not an editor event")
        self._handlers[event].append(handler)

    def fire(self, event: EventType, *args: Any) -> None:
        for handler in list(self._handlers[event]):
            handler(*args)

    # =========================================================================
    # Transactions
    # =========================================================================

    @contextlib.contextmanager
    def transaction(self) -> Iterator["GoEditor"]:
        """Restores cursor and path stack if the block raises.

        Handler registrations made inside the block are kept.
        """
        saved_cursor = self._cursor
        saved_stack = copy_path_stack(self._path_stack)
        try:
            yield self
        except Exception:
            self._cursor = saved_cursor
            self._path_stack = saved_stack
            raise

    # =========================================================================
    # Navigation
    # =========================================================================

    def _take_step(self, target: Cursor, step: Step, record: bool = True) -> None:
        previous = self._cursor
        self._cursor = target
        if record:
            record_step(self._path_stack, step)
        self.fire(EventType.NAVIGATION, step)
        # Game info changes when leaving or entering a node that declares it
        info_node = previous.node if step.is_up else target.node
        if info_node.has_game_info:
            self.fire(EventType.GAME_INFO_CHANGED, previous.game_info, target.game_info)

    def _go_up(self, record: bool = True) -> None:
        parent = self._cursor.parent
        if parent is None:
            raise PreconditionViolation(
                "Can't go up from a root cursor.", user_message="Already at the start of the game."
            )
        self._take_step(parent, Step.up(self._cursor.child_index), record)

    def _go_down(self, index: int, record: bool = True) -> None:
        count = self._cursor.child_count
        if index < 0 or index >= count:
            raise PreconditionViolation(
                f"Cursor does not have a child #{index} (it has {count}).",
                user_message="There is no such variation.",
                context={"index": index, "child_count": count},
            )
        self._take_step(self._cursor.child(index), Step.down(index), record)

    def go_up(self) -> None:
        """Moves to the parent. Raises PreconditionViolation at the root."""
        self._go_up()

    def go_down(self, index: int) -> None:
        """Moves to child ``index``. Raises PreconditionViolation if it does not exist."""
        self._go_down(index)

    def go_to_root(self) -> None:
        """Moves up to the root, one NAVIGATION event per step."""
        while_true(lambda: not self._cursor.is_root, self.go_up)

    def go_to_game_info_node(self, go_to_root_if_not_found: bool) -> bool:
        """Moves up to the nearest node (this one included) that has game-info properties.

        If none is found, stays at the root when ``go_to_root_if_not_found`` is
        set and otherwise returns to the starting node. Returns whether a node
        was found.
        """
        self.push_position()
        while True:
            if self._cursor.node.has_game_info:
                self.drop_position()
                return True
            if self._cursor.is_root:
                if go_to_root_if_not_found:
                    self.drop_position()
                else:
                    self.pop_position()
                return False
            self.go_up()

    # =========================================================================
    # Bookmarks
    # =========================================================================

    def push_position(self) -> None:
        self._path_stack.append([])

    def pop_position(self) -> None:
        """Returns to the most recently pushed position and discards that bookmark.

        Raises:
            PreconditionViolation: If no bookmark exists, or a recorded step no
                longer exists in the tree. The state is left unchanged.
        """
        if not self._path_stack:
            raise PreconditionViolation("No position to pop from the stack.")
        with self.transaction():
            depth = len(self._path_stack)
            top = self._path_stack[-1]

            def replay(step: Step) -> None:
                del top[0]
                if step.is_up:
                    self._go_up(record=False)
                else:
                    self._go_down(step.index, record=False)

            while_some(lambda: top[0] if top else None, replay)
            if len(self._path_stack) != depth or self._path_stack[-1] is not top or top:
                raise InvariantFailure("Top of path stack is not empty after replaying it.")
            self._path_stack.pop()
        logger.debug("Popped position, %d bookmarks left", len(self._path_stack))

    def drop_position(self) -> None:
        """Discards the most recent bookmark without moving.

        Its steps are kept in front of the next-older bookmark so that popping
        that one still leads back to its own position.
        """
        if not self._path_stack:
            raise PreconditionViolation("No position to drop from the stack.")
        merge_top(self._path_stack)
        logger.debug("Dropped position, %d bookmarks left", len(self._path_stack))

    # =========================================================================
    # Properties
    # =========================================================================

    def get_properties(self) -> tuple[Property, ...]:
        return self._cursor.properties

    def modify_properties(self, fn: Callable[[tuple[Property, ...]], Iterable[Property]]) -> None:
        """Replaces the current node's properties with ``fn(old_properties)``.

        ``fn`` may use the editor but must end on the node it started on.
        Fires PROPERTIES_CHANGED, then GAME_INFO_CHANGED if the game-info
        properties differ.
        """
        with self.transaction():
            old_cursor = self._cursor
            old_properties = old_cursor.properties
            new_properties = tuple(fn(old_properties))
            self._cursor = old_cursor.modify_node(lambda node: node.with_properties(new_properties))
            self.fire(EventType.PROPERTIES_CHANGED, old_properties, new_properties)
            if _game_info_subset(old_properties) != _game_info_subset(new_properties):
                self.fire(EventType.GAME_INFO_CHANGED, old_cursor.game_info, self._cursor.game_info)

    def delete_properties(self, pred: Callable[[Property], bool]) -> None:
        self.modify_properties(lambda properties: [p for p in properties if not pred(p)])

    def modify_game_info(self, fn: Callable[[GameInfo], GameInfo]) -> GameInfo:
        """Rewrites the game info in effect at the cursor and returns the new info.

        The nearest node with game-info properties is edited, or the root if
        there is none. The cursor ends where it started.

        Raises:
            PreconditionViolation: If ``fn`` changes ``root_info``.
        """
        info = self._cursor.game_info
        new_info = fn(info)
        if new_info.root_info != info.root_info:
            raise PreconditionViolation(
                "Illegal modification of root info in modify_game_info.",
                user_message="Board size and variation display can't be changed here.",
            )
        with self.transaction():
            self.push_position()
            self.go_to_game_info_node(True)
            self.modify_properties(
                lambda properties: [*game_info_to_properties(new_info), *(p for p in properties if not p.is_game_info)]
            )
            self.pop_position()
        return new_info

    def modify_comment(self, fn: Callable[[str], str]) -> None:
        """Maps the comment (``""`` if none) through ``fn``; an empty result removes it."""
        old_comment = self._cursor.node.get_value("C")
        old_text = old_comment if old_comment is not None else ""
        new_text = fn(old_text)
        has_old = old_comment is not None
        has_new = new_text != ""
        if has_old and not has_new:
            self.delete_properties(lambda p: p.name == "C")
        elif has_new and not has_old:
            self.modify_properties(lambda properties: [*properties, comment(new_text)])
        elif has_old and has_new and new_text != old_text:
            self.modify_properties(
                lambda properties: [comment(new_text) if p.name == "C" else p for p in properties]
            )

    # =========================================================================
    # Structure
    # =========================================================================

    def add_child(self, index: int, node: Node) -> None:
        """Inserts ``node`` as child ``index`` of the current node (0 <= index <= child count).

        Later siblings shift right; bookmarks are renumbered to match. Fires
        CHILD_ADDED with the index and a cursor at the new child.
        """
        count = self._cursor.child_count
        if index < 0 or index > count:
            raise PreconditionViolation(
                f"Index {index} is not in [0, {count}].",
                context={"index": index, "child_count": count},
            )
        self._cursor = self._cursor.modify_node(lambda current: current.add_child_at(index, node))
        self._path_stack = renumber_for_insert(self._path_stack, index)
        logger.debug("Added child %d of %d", index, count + 1)
        self.fire(EventType.CHILD_ADDED, index, self._cursor.child(index))


def run_go(action: Callable[[GoEditor], T], cursor: Cursor) -> tuple[T, Cursor]:
    """Runs ``action`` against a fresh editor; returns its value and the final cursor."""
    editor = GoEditor(cursor)
    value = action(editor)
    return value, editor.cursor


def eval_go(action: Callable[[GoEditor], T], cursor: Cursor) -> T:
    return run_go(action, cursor)[0]


def exec_go(action: Callable[[GoEditor], Any], cursor: Cursor) -> Cursor:
    return run_go(action, cursor)[1]
