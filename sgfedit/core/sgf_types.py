"""Typed values carried by SGF properties.

Coordinates are plain ``(x, y)`` tuples, zero-based from the top-left corner.
Everything here is immutable and hashable so that nodes can be compared and
hashed structurally.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Union

from sgfedit.core.bigfloat import Bigfloat

Coord = tuple[int, int]


class Color(Enum):
    BLACK = "B"
    WHITE = "W"

    @property
    def opponent(self) -> "Color":
        return Color.WHITE if self is Color.BLACK else Color.BLACK

    @classmethod
    def from_letter(cls, letter: str) -> "Color":
        return cls(letter)


class DoubleValue(Enum):
    """SGF "double": 1 is normal, 2 is emphasized."""

    NORMAL = "1"
    EMPHASIZED = "2"


@dataclass(frozen=True)
class CoordList:
    """A list of points as written in SGF: single points plus rectangles.

    Entries are kept exactly as parsed, duplicates included. Use :meth:`expand`
    for the set of points actually covered.
    """

    singles: tuple[Coord, ...] = ()
    rects: tuple[tuple[Coord, Coord], ...] = ()

    @classmethod
    def of(cls, *coords: Coord) -> "CoordList":
        return cls(singles=tuple(coords))

    def __add__(self, other: "CoordList") -> "CoordList":
        return CoordList(self.singles + other.singles, self.rects + other.rects)

    def __bool__(self) -> bool:
        return bool(self.singles or self.rects)

    def expand(self) -> list[Coord]:
        """All covered points, de-duplicated, in first-seen order."""
        seen: dict[Coord, None] = {}
        for coord in self.singles:
            seen.setdefault(coord, None)
        for (x0, y0), (x1, y1) in self.rects:
            for y in range(min(y0, y1), max(y0, y1) + 1):
                for x in range(min(x0, x1), max(x0, x1) + 1):
                    seen.setdefault((x, y), None)
        return list(seen)


# Game results


class SpecialResult(Enum):
    DRAW = "0"
    VOID = "Void"
    UNKNOWN = "?"


class WinReason(Enum):
    RESIGNATION = "R"
    TIME = "T"
    FORFEIT = "F"


@dataclass(frozen=True)
class ByScore:
    score: Bigfloat


@dataclass(frozen=True)
class Win:
    color: Color
    reason: Union[WinReason, ByScore]


@dataclass(frozen=True)
class OtherResult:
    """A result text that is not in a recognized form, kept verbatim."""

    text: str


GameResult = Union[SpecialResult, Win, OtherResult]

_WIN_RE = re.compile(r"([BW])\+(.*)\Z")
_REASON_SPELLINGS = {
    "R": WinReason.RESIGNATION,
    "Resign": WinReason.RESIGNATION,
    "T": WinReason.TIME,
    "Time": WinReason.TIME,
    "F": WinReason.FORFEIT,
    "Forfeit": WinReason.FORFEIT,
}


def parse_game_result(text: str) -> GameResult:
    """Reads an RE value. Unrecognized text becomes :class:`OtherResult`."""
    if text in ("0", "Draw"):
        return SpecialResult.DRAW
    if text == "Void":
        return SpecialResult.VOID
    if text == "?":
        return SpecialResult.UNKNOWN
    match = _WIN_RE.match(text)
    if match:
        color = Color(match[1])
        reason_text = match[2]
        if reason_text in _REASON_SPELLINGS:
            return Win(color, _REASON_SPELLINGS[reason_text])
        try:
            return Win(color, ByScore(Bigfloat.from_string(reason_text)))
        except ValueError:
            pass
    return OtherResult(text)


def game_result_text(result: GameResult) -> str:
    """Canonical text: ``0``, ``Void``, ``?``, ``B+R``, ``W+T``, ``B+F``, ``W+6.5``."""
    if isinstance(result, SpecialResult):
        return result.value
    if isinstance(result, Win):
        if isinstance(result.reason, ByScore):
            return f"{result.color.value}+{result.reason.score}"
        return f"{result.color.value}+{result.reason.value}"
    return result.text


# Rulesets


class KnownRuleset(Enum):
    AGA = "AGA"
    GOE = "GOE"
    JAPANESE = "Japanese"
    NZ = "NZ"


@dataclass(frozen=True)
class Ruleset:
    """An RU value. ``known`` is set when the name is one of the FF[4] rulesets."""

    name: str

    @classmethod
    def of(cls, known: KnownRuleset) -> "Ruleset":
        return cls(known.value)

    @property
    def known(self) -> KnownRuleset | None:
        try:
            return KnownRuleset(self.name)
        except ValueError:
            return None


# Variation display (ST)


class VariationModeSource(Enum):
    CHILDREN = 0  # variations are the children of the current node
    SIBLINGS = 1  # variations are the siblings of the current node


@dataclass(frozen=True)
class VariationMode:
    source: VariationModeSource = VariationModeSource.CHILDREN
    board_markup: bool = True

    @classmethod
    def from_number(cls, value: int) -> "VariationMode | None":
        """Decodes ST 0..3; returns None for any other number."""
        if value < 0 or value > 3:
            return None
        return cls(VariationModeSource(value & 1), board_markup=not value & 2)

    def to_number(self) -> int:
        return self.source.value | (0 if self.board_markup else 2)


DEFAULT_VARIATION_MODE = VariationMode()
