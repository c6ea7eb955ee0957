# sgfedit/common/typed_config/models.py
#
# Frozen dataclass config sections and tolerant conversion helpers.

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sgfedit.core.constants import BOARD_SIZE_MAX, DEFAULT_BOARD_SIZE, DEFAULT_ENCODING, PASS_AS_TT_MAX_SIZE

_TRUE_STRINGS = frozenset({"true", "1", "yes"})
_FALSE_STRINGS = frozenset({"false", "0", "no"})


# =============================================================================
# Helper Functions
# =============================================================================


def safe_int(value: Any, default: int) -> int:
    """int conversion. None, bool, float or unconvertible values give ``default``.

    Note:
        bool is a subclass of int but is rejected: ``true`` in a JSON file
        never becomes 1. Floats are not truncated.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def safe_bool(value: Any, default: bool = False) -> bool:
    """bool conversion. Unrecognized strings give ``default`` (typo protection)."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        if not value:
            return default
        lower = value.lower()
        if lower in _TRUE_STRINGS:
            return True
        if lower in _FALSE_STRINGS:
            return False
        return default
    return default


def safe_str(value: Any, default: str) -> str:
    """str conversion. None, empty strings and non-strings give ``default``."""
    if value is None:
        return default
    if not isinstance(value, str):
        return default
    if not value:
        return default
    return value


def safe_board_size(value: Any, default: int) -> int:
    """Board dimension in 1..52, else ``default``."""
    size = safe_int(value, default)
    if size < 1 or size > BOARD_SIZE_MAX:
        return default
    return size


# =============================================================================
# Dataclasses
# =============================================================================


@dataclass(frozen=True)
class BoardConfig:
    """Board defaults (``board`` section).

    Attributes:
        default_size: Size of boards created without an explicit size.
        pass_normalization_max: Largest board dimension on which ``tt`` is read as a pass.
    """

    default_size: int = DEFAULT_BOARD_SIZE
    pass_normalization_max: int = PASS_AS_TT_MAX_SIZE

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "BoardConfig":
        return cls(
            default_size=safe_board_size(d.get("default_size"), DEFAULT_BOARD_SIZE),
            pass_normalization_max=safe_board_size(d.get("pass_normalization_max"), PASS_AS_TT_MAX_SIZE),
        )


@dataclass(frozen=True)
class FileConfig:
    """SGF file handling (``files`` section).

    Attributes:
        default_encoding: Encoding used when a file declares none and detection fails.
        detect_encoding: Whether to run chardet on files without a CA property.
    """

    default_encoding: str = DEFAULT_ENCODING
    detect_encoding: bool = True

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "FileConfig":
        return cls(
            default_encoding=safe_str(d.get("default_encoding"), DEFAULT_ENCODING),
            detect_encoding=safe_bool(d.get("detect_encoding"), default=True),
        )
