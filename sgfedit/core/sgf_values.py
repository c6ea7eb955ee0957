"""Property value grammars: reading ``[..]`` values and writing them back.

The parser hands a :class:`Scanner` positioned just after a property name to
:func:`read_values`, which dispatches on the property's :class:`ValueType`.
:func:`render_values` is the inverse used by the renderer.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, NoReturn

from sgfedit.core.bigfloat import Bigfloat
from sgfedit.core.constants import BOARD_SIZE_MAX, BOARD_SIZE_MIN, SGF_LINE_CHARS
from sgfedit.core.errors import SgfParseError
from sgfedit.core.properties import ValueType
from sgfedit.core.sgf_types import (
    Color,
    Coord,
    CoordList,
    DoubleValue,
    Ruleset,
    VariationMode,
    game_result_text,
    parse_game_result,
)

_LINE_BREAKS = ("\r\n", "\n\r", "\n", "\r")


class Scanner:
    """Character cursor over SGF text with line/column reporting."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        """The next character, or ``""`` at the end of input."""
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def startswith(self, prefix: str) -> bool:
        return self.text.startswith(prefix, self.pos)

    def advance(self, count: int = 1) -> str:
        chunk = self.text[self.pos : self.pos + count]
        self.pos += len(chunk)
        return chunk

    def skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def expect(self, char: str, expectation: str) -> None:
        if self.peek() != char:
            self.fail(expectation)
        self.pos += 1

    def location(self, pos: int | None = None) -> tuple[int, int]:
        """1-based (line, column) of ``pos`` (default: the current position)."""
        pos = self.pos if pos is None else pos
        line = self.text.count("\n", 0, pos) + 1
        column = pos - (self.text.rfind("\n", 0, pos) + 1) + 1
        return line, column

    def fail(self, expectation: str, problem: str | None = None, pos: int | None = None) -> NoReturn:
        """Raises SgfParseError naming the location, the problem and what was expected."""
        pos = self.pos if pos is None else pos
        if problem is None:
            found = self.text[pos : pos + 1]
            problem = f"unexpected {found!r}" if found else "unexpected end of input"
        line, column = self.location(pos)
        raise SgfParseError(
            [f"line {line}, column {column}: {problem}; expected {expectation}"],
            context={"line": line, "column": column, "expected": expectation},
        )


# =============================================================================
# Primitive readers
# =============================================================================


def _read_line(s: Scanner, expectation: str) -> int:
    char = s.peek()
    if char and char in SGF_LINE_CHARS:
        s.advance()
        return SGF_LINE_CHARS.index(char)
    s.fail(expectation)


def _read_coord(s: Scanner, expectation: str) -> Coord:
    return _read_line(s, expectation), _read_line(s, expectation)


def _read_number_text(s: Scanner, expectation: str) -> str:
    sign = ""
    if s.peek() in ("+", "-"):
        sign = "-" if s.advance() == "-" else ""
    start = s.pos
    while s.peek().isdigit() and s.peek().isascii():
        s.advance()
    if s.pos == start:
        s.fail(expectation)
    return sign + s.text[start : s.pos]


def _read_text(s: Scanner, composed: bool, expectation: str) -> str:
    """Text up to an unescaped ``]`` (or ``:`` when ``composed``); does not consume the terminator.

    Line breaks come out as ``\\n``, other whitespace as a space; an escaped
    line break is removed.
    """
    stops = ":]" if composed else "]"
    chars: list[str] = []
    while True:
        char = s.peek()
        if not char:
            s.fail(expectation)
        if char in stops:
            return "".join(chars)
        if char == "\\":
            s.advance()
            if s.at_end:
                s.fail(expectation)
            line_break = next((lb for lb in _LINE_BREAKS if s.startswith(lb)), None)
            if line_break is not None:
                s.advance(len(line_break))
            else:
                chars.append(s.advance())
            continue
        line_break = next((lb for lb in _LINE_BREAKS if s.startswith(lb)), None)
        if line_break is not None:
            s.advance(len(line_break))
            chars.append("\n")
        elif char.isspace():
            s.advance()
            chars.append(" ")
        else:
            chars.append(s.advance())


def _to_simple(text: str) -> str:
    return text.replace("\n", " ")


def _single(s: Scanner, read: Callable[[Scanner], Any], expectation: str) -> Any:
    s.expect("[", expectation)
    value = read(s)
    s.expect("]", expectation)
    return value


def _many(s: Scanner, read: Callable[[Scanner], Any], expectation: str) -> list[Any]:
    values = [_single(s, read, expectation)]
    s.skip_whitespace()
    while s.peek() == "[":
        values.append(_single(s, read, expectation))
        s.skip_whitespace()
    return values


# =============================================================================
# Value grammars
# =============================================================================


def _none(s: Scanner) -> None:
    _single(s, lambda _: None, "none")


def _color(s: Scanner) -> Color:
    def read(s: Scanner) -> Color:
        if s.peek() in ("B", "W"):
            return Color(s.advance())
        s.fail("color")

    return _single(s, read, "color")


def _double(s: Scanner) -> DoubleValue:
    def read(s: Scanner) -> DoubleValue:
        if s.peek() in ("1", "2"):
            return DoubleValue(s.advance())
        s.fail("double")

    return _single(s, read, "double")


def _number(s: Scanner) -> int:
    return _single(s, lambda s: int(_read_number_text(s, "integer")), "integer")


def _real(s: Scanner) -> Bigfloat:
    def read(s: Scanner) -> Bigfloat:
        whole = _read_number_text(s, "real")
        fraction = ""
        if s.peek() == ".":
            s.advance()
            start = s.pos
            while s.peek().isdigit() and s.peek().isascii():
                s.advance()
            if s.pos == start:
                s.fail("real")
            fraction = s.text[start : s.pos]
        return Bigfloat.encode(int(whole + fraction), -len(fraction))

    return _single(s, read, "real")


def _simple_text(s: Scanner) -> str:
    return _single(s, lambda s: _to_simple(_read_text(s, False, "simple text")), "simple text")


def _text(s: Scanner) -> str:
    return _single(s, lambda s: _read_text(s, False, "text"), "text")


def _move(s: Scanner) -> Coord | None:
    expectation = "move (point or pass)"
    s.expect("[", expectation)
    if s.peek() == "]":
        s.advance()
        return None
    coord = _read_coord(s, expectation)
    s.expect("]", expectation)
    return coord


def _point_list(s: Scanner) -> CoordList:
    expectation = "list of points"

    def entry(s: Scanner) -> CoordList:
        first = _read_coord(s, expectation)
        if s.peek() == ":":
            s.advance()
            return CoordList(rects=((first, _read_coord(s, expectation)),))
        return CoordList(singles=(first,))

    result = CoordList()
    for item in _many(s, entry, expectation):
        result = result + item
    return result


def _point_elist(s: Scanner) -> CoordList:
    if s.startswith("[]"):
        s.advance(2)
        return CoordList()
    return _point_list(s)


def _point_pairs(s: Scanner) -> tuple[tuple[Coord, Coord], ...]:
    expectation = "list of point pairs"

    def pair(s: Scanner) -> tuple[Coord, Coord]:
        first = _read_coord(s, expectation)
        s.expect(":", expectation)
        return first, _read_coord(s, expectation)

    return tuple(_many(s, pair, expectation))


def _labels(s: Scanner) -> tuple[tuple[Coord, str], ...]:
    expectation = "list of points and labels"

    def label(s: Scanner) -> tuple[Coord, str]:
        coord = _read_coord(s, expectation)
        s.expect(":", expectation)
        return coord, _to_simple(_read_text(s, True, expectation))

    return tuple(_many(s, label, expectation))


def _text_pair(s: Scanner) -> tuple[str, str]:
    expectation = "pair of simple texts"

    def pair(s: Scanner) -> tuple[str, str]:
        first = _to_simple(_read_text(s, True, expectation))
        s.expect(":", expectation)
        return first, _to_simple(_read_text(s, True, expectation))

    return _single(s, pair, expectation)


def _size(s: Scanner) -> tuple[int, int]:
    expectation = "board size (width or width:height)"
    start = s.pos
    s.expect("[", expectation)
    width = int(_read_number_text(s, expectation))
    height = width
    if s.peek() == ":":
        s.advance()
        height = int(_read_number_text(s, expectation))
        if width == height:
            s.fail(
                expectation,
                f"{width}x{height} square board dimensions should be specified with a single number",
                pos=start,
            )
    s.expect("]", expectation)
    if not (BOARD_SIZE_MIN <= width <= BOARD_SIZE_MAX and BOARD_SIZE_MIN <= height <= BOARD_SIZE_MAX):
        s.fail(
            expectation,
            f"{width}x{height} board dimensions are invalid; "
            f"each dimension must be between {BOARD_SIZE_MIN} and {BOARD_SIZE_MAX} inclusive",
            pos=start,
        )
    return width, height


def _game_result(s: Scanner):
    return _single(s, lambda s: parse_game_result(_to_simple(_read_text(s, False, "game result"))), "game result")


def _ruleset(s: Scanner) -> Ruleset:
    return _single(s, lambda s: Ruleset(_to_simple(_read_text(s, False, "ruleset"))), "ruleset")


def _variation_mode(s: Scanner) -> VariationMode:
    expectation = "variation mode"

    def read(s: Scanner) -> VariationMode:
        start = s.pos
        value = int(_read_number_text(s, expectation))
        mode = VariationMode.from_number(value)
        if mode is None:
            s.fail(expectation, f"unexpected variation mode {value}", pos=start)
        return mode

    return _single(s, read, expectation)


def _unknown(s: Scanner) -> tuple[str, ...]:
    expectation = "unknown property value"
    return tuple(_many(s, lambda s: _read_text(s, False, expectation), expectation))


_READERS: dict[ValueType, Callable[[Scanner], Any]] = {
    ValueType.NONE: _none,
    ValueType.COLOR: _color,
    ValueType.DOUBLE: _double,
    ValueType.NUMBER: _number,
    ValueType.REAL: _real,
    ValueType.SIMPLE_TEXT: _simple_text,
    ValueType.TEXT: _text,
    ValueType.MOVE: _move,
    ValueType.POINT_LIST: _point_list,
    ValueType.POINT_ELIST: _point_elist,
    ValueType.POINT_PAIRS: _point_pairs,
    ValueType.LABELS: _labels,
    ValueType.TEXT_PAIR: _text_pair,
    ValueType.SIZE: _size,
    ValueType.GAME_RESULT: _game_result,
    ValueType.RULESET: _ruleset,
    ValueType.VARIATION_MODE: _variation_mode,
    ValueType.UNKNOWN: _unknown,
}


def read_values(scanner: Scanner, value_type: ValueType) -> Any:
    """Reads the bracketed value(s) of one property."""
    return _READERS[value_type](scanner)


def parse_value(text: str, value_type: ValueType) -> Any:
    """Parses a complete value string such as ``"[ab:cd]"``. Raises SgfParseError."""
    scanner = Scanner(text)
    value = read_values(scanner, value_type)
    scanner.skip_whitespace()
    if not scanner.at_end:
        scanner.fail("end of value")
    return value


# =============================================================================
# Rendering
# =============================================================================


def line_letter(index: int) -> str:
    return SGF_LINE_CHARS[index]


def coord_text(coord: Coord) -> str:
    return line_letter(coord[0]) + line_letter(coord[1])


def escape_text(text: str, composed: bool = False) -> str:
    """Escapes ``\\`` and ``]``, and ``:`` inside composed values."""
    text = text.replace("\\", "\\\\").replace("]", "\\]")
    if composed:
        text = text.replace(":", "\\:")
    return text


def _bracket(items: list[str]) -> str:
    return "".join(f"[{item}]" for item in items) or "[]"


def _coord_list_items(coords: CoordList) -> list[str]:
    return [coord_text(c) for c in coords.singles] + [f"{coord_text(a)}:{coord_text(b)}" for a, b in coords.rects]


_RENDERERS: dict[ValueType, Callable[[Any], str]] = {
    ValueType.NONE: lambda _: "[]",
    ValueType.COLOR: lambda v: f"[{v.value}]",
    ValueType.DOUBLE: lambda v: f"[{v.value}]",
    ValueType.NUMBER: lambda v: f"[{v}]",
    ValueType.REAL: lambda v: f"[{v}]",
    ValueType.SIMPLE_TEXT: lambda v: f"[{escape_text(v)}]",
    ValueType.TEXT: lambda v: f"[{escape_text(v)}]",
    ValueType.MOVE: lambda v: "[]" if v is None else f"[{coord_text(v)}]",
    ValueType.POINT_LIST: lambda v: _bracket(_coord_list_items(v)),
    ValueType.POINT_ELIST: lambda v: _bracket(_coord_list_items(v)),
    ValueType.POINT_PAIRS: lambda v: _bracket([f"{coord_text(a)}:{coord_text(b)}" for a, b in v]),
    ValueType.LABELS: lambda v: _bracket([f"{coord_text(c)}:{escape_text(t, composed=True)}" for c, t in v]),
    ValueType.TEXT_PAIR: lambda v: f"[{escape_text(v[0], composed=True)}:{escape_text(v[1], composed=True)}]",
    ValueType.SIZE: lambda v: f"[{v[0]}]" if v[0] == v[1] else f"[{v[0]}:{v[1]}]",
    ValueType.GAME_RESULT: lambda v: f"[{escape_text(game_result_text(v))}]",
    ValueType.RULESET: lambda v: f"[{escape_text(v.name)}]",
    ValueType.VARIATION_MODE: lambda v: f"[{v.to_number()}]",
    ValueType.UNKNOWN: lambda v: _bracket([escape_text(item) for item in v]),
}


def render_values(value_type: ValueType, value: Any) -> str:
    """The ``[..]`` part of a property, e.g. ``[ab][cd]``."""
    return _RENDERERS[value_type](value)
