"""Headless board controller: the surface a GUI drives.

:class:`BoardController` owns one :class:`GoEditor`. Navigation calls return
False instead of raising when the move is impossible, playing on a point
either follows an existing variation or adds a new one, and every change of
the cursor is announced as a VIEW_CHANGED event through a
:class:`StateNotifier`, whose callbacks cannot break the controller.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from typing import Any

from sgfedit.common.config_store import load_config
from sgfedit.common.typed_config import TypedConfigReader
from sgfedit.core.cursor import Cursor
from sgfedit.core.editor import GoEditor, Handler
from sgfedit.core.errors import PreconditionViolation
from sgfedit.core.game_node import Node
from sgfedit.core.properties import move
from sgfedit.core.sgf_parser import parse_file
from sgfedit.core.sgf_renderer import render_node_tree
from sgfedit.core.sgf_types import Coord
from sgfedit.core.state import EDITOR_EVENTS, Event, EventType, StateNotifier

logger = logging.getLogger(__name__)

ConfigSource = TypedConfigReader | str | None


def _reader(config: ConfigSource) -> TypedConfigReader:
    """A reader for ``config``, which may be a reader, a JSON config path or None."""
    if isinstance(config, str):
        return load_config(config)
    return config or TypedConfigReader()


class BoardController:
    def __init__(
        self,
        root_node: Node,
        config: ConfigSource = None,
        notifier_logger: Callable[[str], None] | None = None,
    ) -> None:
        """
        Args:
            root_node: The game tree to edit.
            config: Config reader or path of a JSON config file; defaults apply when absent.
            notifier_logger: Receives errors raised by view-change callbacks.
        """
        self._config = _reader(config)
        self._editor = GoEditor(Cursor.root(root_node))
        self._notifier = StateNotifier(logger=notifier_logger or logger.error)
        self._registrations: dict[int, tuple[EventType, Handler]] = {}
        self._ids = itertools.count(1)
        for event in EDITOR_EVENTS:
            self._editor.on(event, self._relay(event))

    @classmethod
    def new_board(
        cls, width: int | None = None, height: int | None = None, config: ConfigSource = None
    ) -> "BoardController":
        """A controller on an empty game; the size defaults to ``board.default_size``."""
        config = _reader(config)
        width = width or config.get_board().default_size
        return cls(Node.new_root(width, height), config)

    @classmethod
    def from_file(
        cls, path: str, game_index: int = 0, config: ConfigSource = None
    ) -> "BoardController":
        """Opens game ``game_index`` of an SGF file. Raises SgfParseError."""
        config = _reader(config)
        collection = parse_file(path, config=config)
        logger.info("Opened %s (%d game trees), editing tree %d", path, len(collection), game_index)
        return cls(collection[game_index], config)

    @property
    def editor(self) -> GoEditor:
        return self._editor

    @property
    def cursor(self) -> Cursor:
        return self._editor.cursor

    # =========================================================================
    # Handlers
    # =========================================================================

    def _relay(self, event: EventType) -> Handler:
        def relay(*args: Any) -> None:
            for registered_event, handler in list(self._registrations.values()):
                if registered_event is event:
                    handler(*args)

        return relay

    def register(self, event: EventType, handler: Handler) -> int:
        """Registers an editor event handler; returns an id for :meth:`unregister`."""
        if event not in EDITOR_EVENTS:
            raise ValueError(f"{event} is not an editor event")
        registration = next(self._ids)
        self._registrations[registration] = (event, handler)
        return registration

    def unregister(self, registration: int) -> bool:
        return self._registrations.pop(registration, None) is not None

    def subscribe_view_changed(self, callback: Callable[[Event], None]) -> None:
        """``callback(event)`` runs after every cursor change; ``event.payload["cursor"]`` is the new cursor."""
        self._notifier.subscribe(EventType.VIEW_CHANGED, callback)

    def unsubscribe_view_changed(self, callback: Callable[[Event], None]) -> bool:
        return self._notifier.unsubscribe(EventType.VIEW_CHANGED, callback)

    def _view_changed(self) -> None:
        self._notifier.notify(Event.create(EventType.VIEW_CHANGED, {"cursor": self.cursor}))

    # =========================================================================
    # Navigation
    # =========================================================================

    def go_up(self) -> bool:
        if self.cursor.is_root:
            return False
        self._editor.go_up()
        self._view_changed()
        return True

    def go_down(self, index: int) -> bool:
        if index < 0 or index >= self.cursor.child_count:
            return False
        self._editor.go_down(index)
        self._view_changed()
        return True

    def go_left(self) -> bool:
        """Moves to the previous sibling."""
        index = self.cursor.child_index
        if self.cursor.is_root or index == 0:
            return False
        with self._editor.transaction():
            self._editor.go_up()
            self._editor.go_down(index - 1)
        self._view_changed()
        return True

    def go_right(self) -> bool:
        """Moves to the next sibling."""
        parent = self.cursor.parent
        index = self.cursor.child_index
        if parent is None or index == parent.child_count - 1:
            return False
        with self._editor.transaction():
            self._editor.go_up()
            self._editor.go_down(index + 1)
        self._view_changed()
        return True

    # =========================================================================
    # Moves
    # =========================================================================

    def is_valid_move(self, coord: Coord) -> bool:
        return self.cursor.board.is_valid_move(coord)

    def play_at(self, coord: Coord) -> None:
        """Plays the player to move at ``coord``.

        Follows an existing child that plays the same move, otherwise adds a
        new last child and moves to it.

        Raises:
            PreconditionViolation: If the point is off the board or occupied.
        """
        if not self.is_valid_move(coord):
            logger.warning("Illegal move at %s", coord)
            raise PreconditionViolation(
                f"Illegal move at {coord}.", user_message="Illegal move.", context={"coord": coord}
            )
        played = move(self.cursor.board.player_to_move, coord)
        for index, child in enumerate(self.cursor.node.children):
            if played in child.properties:
                self.go_down(index)
                return
        index = self.cursor.child_count
        self._editor.add_child(index, Node((played,)))
        self.go_down(index)

    # =========================================================================
    # Output
    # =========================================================================

    def sgf(self) -> str:
        """The whole current tree as SGF text."""
        return render_node_tree(self.cursor.root_node())

    def save(self, path: str) -> None:
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.sgf())
        logger.info("Saved %s", path)
