"""Exact decimal numbers for SGF Real values.

A :class:`Bigfloat` is ``mantissa * 10 ** exponent`` with integer mantissa and
exponent. Values are kept normalized so that equal numbers have equal fields,
and no binary floating point is involved when reading or writing SGF text, so
``KM[6.5]`` or ``BL[1.001]`` survive a round trip unchanged.
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass

_NUMBER_RE = re.compile(r"([+-]?)(\d+)(?:\.(\d+))?\Z")


@functools.total_ordering
@dataclass(frozen=True, init=False)
class Bigfloat:
    mantissa: int
    exponent: int

    def __init__(self, mantissa: int, exponent: int = 0) -> None:
        if mantissa == 0:
            exponent = 0
        else:
            while mantissa % 10 == 0:
                mantissa //= 10
                exponent += 1
        object.__setattr__(self, "mantissa", mantissa)
        object.__setattr__(self, "exponent", exponent)

    @classmethod
    def encode(cls, mantissa: int, exponent: int) -> "Bigfloat":
        """Builds ``mantissa * 10 ** exponent``, e.g. ``encode(1001, -3)`` is 1.001."""
        return cls(mantissa, exponent)

    @classmethod
    def from_int(cls, value: int) -> "Bigfloat":
        return cls(value, 0)

    @classmethod
    def from_string(cls, text: str) -> "Bigfloat":
        """Parses ``[+-]digits[.digits]``.

        Raises:
            ValueError: If ``text`` is not in that form.
        """
        match = _NUMBER_RE.match(text)
        if not match:
            raise ValueError(f"Not a decimal number: {text!r}")
        sign, whole, fraction = match.groups()
        fraction = fraction or ""
        mantissa = int(whole + fraction)
        if sign == "-":
            mantissa = -mantissa
        return cls(mantissa, -len(fraction))

    def _aligned(self, other: "Bigfloat") -> tuple[int, int, int]:
        exponent = min(self.exponent, other.exponent)
        return (
            self.mantissa * 10 ** (self.exponent - exponent),
            other.mantissa * 10 ** (other.exponent - exponent),
            exponent,
        )

    def __eq__(self, other: object) -> bool:
        if isinstance(other, int):
            other = Bigfloat.from_int(other)
        if not isinstance(other, Bigfloat):
            return NotImplemented
        return self.mantissa == other.mantissa and self.exponent == other.exponent

    def __hash__(self) -> int:
        # Whole numbers hash like the equal int
        if self.exponent >= 0:
            return hash(self.mantissa * 10**self.exponent)
        return hash((self.mantissa, self.exponent))

    def __lt__(self, other: object) -> bool:
        if isinstance(other, int):
            other = Bigfloat.from_int(other)
        if not isinstance(other, Bigfloat):
            return NotImplemented
        mine, theirs, _ = self._aligned(other)
        return mine < theirs

    def __neg__(self) -> "Bigfloat":
        return Bigfloat(-self.mantissa, self.exponent)

    def __add__(self, other: "Bigfloat") -> "Bigfloat":
        if isinstance(other, int):
            other = Bigfloat.from_int(other)
        if not isinstance(other, Bigfloat):
            return NotImplemented
        mine, theirs, exponent = self._aligned(other)
        return Bigfloat(mine + theirs, exponent)

    __radd__ = __add__

    def __sub__(self, other: "Bigfloat") -> "Bigfloat":
        if isinstance(other, int):
            other = Bigfloat.from_int(other)
        if not isinstance(other, Bigfloat):
            return NotImplemented
        return self + (-other)

    def __mul__(self, other: "Bigfloat") -> "Bigfloat":
        if isinstance(other, int):
            other = Bigfloat.from_int(other)
        if not isinstance(other, Bigfloat):
            return NotImplemented
        return Bigfloat(self.mantissa * other.mantissa, self.exponent + other.exponent)

    __rmul__ = __mul__

    def __float__(self) -> float:
        return float(self.to_text())

    def to_text(self) -> str:
        """Plain decimal text without exponent notation: ``1.001``, ``-0.5``, ``100``."""
        if self.exponent >= 0:
            return str(self.mantissa * 10**self.exponent)
        sign = "-" if self.mantissa < 0 else ""
        digits = str(abs(self.mantissa)).rjust(-self.exponent + 1, "0")
        return f"{sign}{digits[: self.exponent]}.{digits[self.exponent :]}"

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        return f"Bigfloat({self.to_text()})"
