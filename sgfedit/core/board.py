"""Board position and game information derived from a root-to-node path.

:class:`BoardState` replays the properties of each node along the path; a
cursor computes it by applying its node to its parent's state, so it is
derived data and never stored in the tree.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from sgfedit.core.bigfloat import Bigfloat
from sgfedit.core.constants import DEFAULT_BOARD_SIZE
from sgfedit.core.game_node import Node
from sgfedit.core.properties import GAME_INFO_NAMES, Property
from sgfedit.core.sgf_types import DEFAULT_VARIATION_MODE, Color, Coord, CoordList, GameResult, Ruleset, VariationMode


@dataclass(frozen=True)
class RootInfo:
    """Tree-wide facts taken from the root node."""

    width: int = DEFAULT_BOARD_SIZE
    height: int = DEFAULT_BOARD_SIZE
    variation_mode: VariationMode = DEFAULT_VARIATION_MODE

    @classmethod
    def from_root(cls, root: Node) -> "RootInfo":
        width, height = root.get_value("SZ", (DEFAULT_BOARD_SIZE, DEFAULT_BOARD_SIZE))
        return cls(width, height, root.get_value("ST", DEFAULT_VARIATION_MODE))


# game-info property name -> GameInfo field
_GAME_INFO_FIELDS: dict[str, str] = {
    "AN": "annotator",
    "BR": "black_rank",
    "BT": "black_team",
    "CP": "copyright",
    "DT": "dates",
    "EV": "event",
    "GN": "game_name",
    "ON": "opening",
    "OT": "overtime",
    "PB": "black_name",
    "PC": "place",
    "PW": "white_name",
    "RO": "round",
    "SO": "source",
    "US": "user",
    "WR": "white_rank",
    "WT": "white_team",
    "GC": "game_comment",
    "RE": "result",
    "RU": "ruleset",
    "TM": "time_limit",
    "HA": "handicap",
    "KM": "komi",
}


@dataclass(frozen=True)
class GameInfo:
    """Game-level metadata in effect at a node.

    Fields are filled from game-info properties on the root-to-node path; a
    property on a node closer to the cursor overrides one further up.
    """

    root_info: RootInfo = RootInfo()
    annotator: str | None = None
    black_rank: str | None = None
    black_team: str | None = None
    copyright: str | None = None
    dates: str | None = None
    event: str | None = None
    game_name: str | None = None
    opening: str | None = None
    overtime: str | None = None
    black_name: str | None = None
    place: str | None = None
    white_name: str | None = None
    round: str | None = None
    source: str | None = None
    user: str | None = None
    white_rank: str | None = None
    white_team: str | None = None
    game_comment: str | None = None
    result: GameResult | None = None
    ruleset: Ruleset | None = None
    time_limit: Bigfloat | None = None
    handicap: int | None = None
    komi: Bigfloat | None = None

    def with_properties(self, properties: Iterable[Property]) -> "GameInfo":
        updates = {_GAME_INFO_FIELDS[p.name]: p.value for p in properties if p.name in _GAME_INFO_FIELDS}
        return dataclasses.replace(self, **updates) if updates else self

    def replace(self, **changes: Any) -> "GameInfo":
        return dataclasses.replace(self, **changes)


def game_info_to_properties(info: GameInfo) -> list[Property]:
    """The non-empty game-info fields of ``info`` as properties, in registry order."""
    properties = []
    for name in GAME_INFO_NAMES:
        value = getattr(info, _GAME_INFO_FIELDS[name])
        if value is not None:
            properties.append(Property(name, value))
    return properties


class BoardState:
    """Stones, captures and turn after replaying a path of nodes."""

    def __init__(self, root_info: RootInfo) -> None:
        self.width = root_info.width
        self.height = root_info.height
        self.stones: dict[Coord, Color] = {}
        self.black_captures = 0
        self.white_captures = 0
        self.player_to_move = Color.BLACK
        self.move_number = 0
        self.game_info = GameInfo(root_info=root_info)

    @classmethod
    def for_root(cls, root: Node) -> "BoardState":
        return cls(RootInfo.from_root(root)).after(root)

    def copy(self) -> "BoardState":
        board = BoardState.__new__(BoardState)
        board.__dict__.update(self.__dict__)
        board.stones = dict(self.stones)
        return board

    def __repr__(self) -> str:
        return f"BoardState({self.width}x{self.height}, stones={len(self.stones)}, to_move={self.player_to_move.value})"

    def on_board(self, coord: Coord) -> bool:
        x, y = coord
        return 0 <= x < self.width and 0 <= y < self.height

    def stone_at(self, coord: Coord) -> Color | None:
        return self.stones.get(coord)

    def is_valid_move(self, coord: Coord) -> bool:
        """On the board and empty. Ko and suicide are not checked."""
        return self.on_board(coord) and coord not in self.stones

    def after(self, node: Node) -> "BoardState":
        """The state after applying ``node``'s properties to this one."""
        board = self.copy()
        board.game_info = self.game_info.with_properties(node.properties)
        for prop in node.properties:
            if prop.name in ("AB", "AW", "AE"):
                board._setup(prop.name, prop.value)
            elif prop.name == "PL":
                board.player_to_move = prop.value
        for color in (Color.BLACK, Color.WHITE):
            prop = node.find_property(color.value)
            if prop is not None:
                board._play(color, prop.value)
        move_number = node.get_value("MN")
        if move_number is not None:
            board.move_number = move_number
        return board

    def _setup(self, name: str, coords: CoordList) -> None:
        for coord in coords.expand():
            if not self.on_board(coord):
                continue
            if name == "AE":
                self.stones.pop(coord, None)
            else:
                self.stones[coord] = Color.BLACK if name == "AB" else Color.WHITE

    def _play(self, color: Color, coord: Coord | None) -> None:
        if coord is not None and self.on_board(coord):
            self.stones[coord] = color
            captured = 0
            for neighbour in self._neighbours(coord):
                if self.stones.get(neighbour) is color.opponent:
                    captured += self._remove_if_dead(neighbour)
            suicided = self._remove_if_dead(coord)
            if color is Color.BLACK:
                self.black_captures += captured
                self.white_captures += suicided
            else:
                self.white_captures += captured
                self.black_captures += suicided
        self.player_to_move = color.opponent
        self.move_number += 1

    def _neighbours(self, coord: Coord) -> list[Coord]:
        x, y = coord
        return [c for c in ((x - 1, y), (x + 1, y), (x, y - 1), (x, y + 1)) if self.on_board(c)]

    def _group(self, coord: Coord) -> tuple[set[Coord], bool]:
        """The chain containing ``coord`` and whether it has a liberty."""
        color = self.stones[coord]
        group = {coord}
        stack = [coord]
        has_liberty = False
        while stack:
            for neighbour in self._neighbours(stack.pop()):
                occupant = self.stones.get(neighbour)
                if occupant is None:
                    has_liberty = True
                elif occupant is color and neighbour not in group:
                    group.add(neighbour)
                    stack.append(neighbour)
        return group, has_liberty

    def _remove_if_dead(self, coord: Coord) -> int:
        if coord not in self.stones:
            return 0
        group, has_liberty = self._group(coord)
        if has_liberty:
            return 0
        for stone in group:
            del self.stones[stone]
        return len(group)
