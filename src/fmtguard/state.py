"""Formatting configuration of a stream.

FormatState is the snapshot type a FormatGuard carries: one immutable value
holding every formatting parameter of a stream. Copying the value is the
whole capture; assigning it back is the whole restore.

Python 3.13+.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Flag, auto
from typing import TYPE_CHECKING

from fmtguard.constants import DEFAULT_FILL, DEFAULT_PRECISION, DEFAULT_WIDTH
from fmtguard.diagnostics import ErrorTemplate, StreamFormatError

if TYPE_CHECKING:
    from babel import Locale

__all__ = ["FmtFlags", "FormatState"]


class FmtFlags(Flag):
    """Format flags of a stream.

    Three groups are mutually exclusive by convention and are replaced as a
    unit through their masks: BASEFIELD (DEC, OCT, HEX), FLOATFIELD (FIXED,
    SCIENTIFIC; both set means hexfloat) and ADJUSTFIELD (LEFT, RIGHT,
    INTERNAL).
    """

    NONE = 0
    BOOLALPHA = auto()
    SHOWBASE = auto()
    SHOWPOINT = auto()
    SHOWPOS = auto()
    SKIPWS = auto()
    UNITBUF = auto()
    UPPERCASE = auto()
    DEC = auto()
    OCT = auto()
    HEX = auto()
    FIXED = auto()
    SCIENTIFIC = auto()
    LEFT = auto()
    RIGHT = auto()
    INTERNAL = auto()

    BASEFIELD = DEC | OCT | HEX
    FLOATFIELD = FIXED | SCIENTIFIC
    ADJUSTFIELD = LEFT | RIGHT | INTERNAL


@dataclass(frozen=True, slots=True)
class FormatState:
    """Immutable formatting configuration of a stream.

    Attributes:
        flags: Format flags
        width: Minimum field width of the next formatted operation (0 = none)
        precision: Floating-point precision
        fill: Padding character
        locale: Imbued Babel locale, or None for the classic "C" locale
    """

    flags: FmtFlags = FmtFlags.SKIPWS | FmtFlags.DEC
    width: int = DEFAULT_WIDTH
    precision: int = DEFAULT_PRECISION
    fill: str = DEFAULT_FILL
    locale: Locale | None = None

    def __post_init__(self) -> None:
        """Validate field ranges.

        Raises:
            StreamFormatError: If width or precision is negative, or fill is
                not exactly one character.
        """
        if self.width < 0:
            raise StreamFormatError(ErrorTemplate.invalid_width(self.width))
        if self.precision < 0:
            raise StreamFormatError(ErrorTemplate.invalid_precision(self.precision))
        if len(self.fill) != 1:
            raise StreamFormatError(ErrorTemplate.invalid_fill(self.fill))

    def with_flags(self, flags: FmtFlags, mask: FmtFlags | None = None) -> FormatState:
        """Return a copy with flags set.

        Without a mask, ``flags`` are OR-ed in. With a mask, the bits under
        the mask are cleared first and replaced by ``flags & mask``.
        """
        if mask is None:
            return replace(self, flags=self.flags | flags)
        return replace(self, flags=(self.flags & ~mask) | (flags & mask))

    def without_flags(self, flags: FmtFlags) -> FormatState:
        """Return a copy with ``flags`` cleared."""
        return replace(self, flags=self.flags & ~flags)

    def evolve(self, **changes: object) -> FormatState:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)  # type: ignore[arg-type]

    @property
    def base(self) -> int:
        """Radix selected by the basefield (10 when none is set)."""
        if self.flags & FmtFlags.HEX:
            return 16
        if self.flags & FmtFlags.OCT:
            return 8
        return 10
