"""SGF properties and the closed registry of known property names.

A :class:`Property` is a ``(name, value)`` pair. What kind of value it holds,
which category it belongs to and whether it is inherited by descendants is
looked up in :data:`REGISTRY`; names not in the registry are "unknown" and hold
a tuple of raw (unescaped) value texts.

Value representation per :class:`ValueType`:

============== ==============================================
NONE           ``None``
COLOR          :class:`Color`
DOUBLE         :class:`DoubleValue`
NUMBER         ``int``
REAL           :class:`Bigfloat`
SIMPLE_TEXT    ``str`` (no line breaks)
TEXT           ``str``
MOVE           ``(x, y)`` or ``None`` for a pass
POINT_LIST     :class:`CoordList`
POINT_ELIST    :class:`CoordList` (may be empty)
POINT_PAIRS    ``tuple[(coord, coord), ...]``
LABELS         ``tuple[(coord, str), ...]``
TEXT_PAIR      ``(str, str)``
SIZE           ``(width, height)``
GAME_RESULT    :data:`GameResult`
RULESET        :class:`Ruleset`
VARIATION_MODE :class:`VariationMode`
UNKNOWN        ``tuple[str, ...]``
============== ==============================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from sgfedit.core.sgf_types import Color, Coord


class PropertyType(Enum):
    MOVE = "move"
    SETUP = "setup"
    ROOT = "root"
    GAME_INFO = "game-info"
    MARKUP = "markup"
    GENERAL = "general"
    UNKNOWN = "unknown"


class ValueType(Enum):
    NONE = "none"
    COLOR = "color"
    DOUBLE = "double"
    NUMBER = "number"
    REAL = "real"
    SIMPLE_TEXT = "simpletext"
    TEXT = "text"
    MOVE = "move"
    POINT_LIST = "list of point"
    POINT_ELIST = "elist of point"
    POINT_PAIRS = "list of point:point"
    LABELS = "list of point:simpletext"
    TEXT_PAIR = "simpletext:simpletext"
    SIZE = "size"
    GAME_RESULT = "game result"
    RULESET = "ruleset"
    VARIATION_MODE = "variation mode"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class PropertyInfo:
    name: str
    property_type: PropertyType
    value_type: ValueType
    inherited: bool = False


def _infos(property_type: PropertyType, value_type: ValueType, *names: str) -> list[PropertyInfo]:
    return [PropertyInfo(name, property_type, value_type) for name in names]


_M, _S, _R, _G, _K, _N = (
    PropertyType.MOVE,
    PropertyType.SETUP,
    PropertyType.ROOT,
    PropertyType.GAME_INFO,
    PropertyType.MARKUP,
    PropertyType.GENERAL,
)

REGISTRY: dict[str, PropertyInfo] = {
    info.name: info
    for info in [
        *_infos(_M, ValueType.MOVE, "B", "W"),
        *_infos(_M, ValueType.NONE, "KO"),
        *_infos(_M, ValueType.NUMBER, "MN"),
        *_infos(_M, ValueType.REAL, "BL", "WL"),
        *_infos(_M, ValueType.NUMBER, "OB", "OW"),
        *_infos(_M, ValueType.DOUBLE, "BM", "TE"),
        *_infos(_M, ValueType.NONE, "DO", "IT"),
        *_infos(_S, ValueType.POINT_LIST, "AB", "AW", "AE"),
        *_infos(_S, ValueType.COLOR, "PL"),
        *_infos(_R, ValueType.TEXT_PAIR, "AP"),
        *_infos(_R, ValueType.SIMPLE_TEXT, "CA"),
        *_infos(_R, ValueType.NUMBER, "FF", "GM"),
        *_infos(_R, ValueType.VARIATION_MODE, "ST"),
        *_infos(_R, ValueType.SIZE, "SZ"),
        *_infos(
            _G,
            ValueType.SIMPLE_TEXT,
            "AN", "BR", "BT", "CP", "DT", "EV", "GN", "ON", "OT", "PB", "PC", "PW", "RO", "SO", "US", "WR", "WT",
        ),
        *_infos(_G, ValueType.TEXT, "GC"),
        *_infos(_G, ValueType.GAME_RESULT, "RE"),
        *_infos(_G, ValueType.RULESET, "RU"),
        *_infos(_G, ValueType.REAL, "TM"),
        *_infos(_G, ValueType.NUMBER, "HA"),
        *_infos(_G, ValueType.REAL, "KM"),
        *_infos(_K, ValueType.POINT_PAIRS, "AR", "LN"),
        *_infos(_K, ValueType.POINT_LIST, "CR", "MA", "SL", "SQ", "TR"),
        *_infos(_K, ValueType.POINT_ELIST, "DD"),
        *_infos(_K, ValueType.LABELS, "LB"),
        *_infos(_K, ValueType.POINT_ELIST, "TB", "TW"),
        *_infos(_N, ValueType.TEXT, "C"),
        *_infos(_N, ValueType.SIMPLE_TEXT, "N"),
        *_infos(_N, ValueType.DOUBLE, "DM", "GB", "GW", "UC", "HO"),
        *_infos(_N, ValueType.REAL, "V"),
        PropertyInfo("VW", _N, ValueType.POINT_ELIST, inherited=True),
        PropertyInfo("PM", _N, ValueType.NUMBER, inherited=True),
    ]
}

GAME_INFO_NAMES: tuple[str, ...] = tuple(
    name for name, info in REGISTRY.items() if info.property_type is PropertyType.GAME_INFO
)


def property_info(name: str) -> PropertyInfo:
    """Registry entry for ``name``; unregistered names get an UNKNOWN entry."""
    info = REGISTRY.get(name)
    if info is None:
        return PropertyInfo(name, PropertyType.UNKNOWN, ValueType.UNKNOWN)
    return info


@dataclass(frozen=True)
class Property:
    name: str
    value: Any = None

    @property
    def info(self) -> PropertyInfo:
        return property_info(self.name)

    @property
    def property_type(self) -> PropertyType:
        return self.info.property_type

    @property
    def is_game_info(self) -> bool:
        return self.property_type is PropertyType.GAME_INFO

    def __repr__(self) -> str:
        return f"{self.name}[{self.value!r}]"


def move(color: Color, coord: Coord | None) -> Property:
    """``B[..]`` or ``W[..]``; ``coord=None`` is a pass."""
    return Property(color.value, coord)


def comment(text: str) -> Property:
    return Property("C", text)


def board_size(width: int, height: int | None = None) -> Property:
    return Property("SZ", (width, height if height is not None else width))
