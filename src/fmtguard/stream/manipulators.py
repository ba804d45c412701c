"""Stream manipulators.

A manipulator is an object inserted into (``<<``) or extracted from (``>>``)
a stream purely for its effect on the stream: changing the formatting
configuration, emitting a line end, flushing, or skipping whitespace.

Usage:
    from fmtguard.stream import manipulators as manip

    out << manip.hex << manip.uppercase << manip.setw(4) << manip.setfill("0") << 200

The basefield names shadow builtins inside this module only; import the
module rather than its names.

Python 3.13+.
"""

# pylint: disable=redefined-builtin
# Reason: hex/oct mirror the conventional manipulator names

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from fmtguard.constants import SUPPORTED_BASES
from fmtguard.diagnostics import ErrorTemplate, StreamFormatError, StreamTypeError
from fmtguard.state import FmtFlags

if TYPE_CHECKING:
    from babel import Locale

    from .base import FormatStream

__all__ = [
    "Manipulator",
    "boolalpha",
    "dec",
    "defaultfloat",
    "endl",
    "ends",
    "fixed",
    "flush",
    "hex",
    "hexfloat",
    "imbue",
    "internal",
    "left",
    "noboolalpha",
    "noshowbase",
    "noshowpoint",
    "noshowpos",
    "noskipws",
    "nounitbuf",
    "nouppercase",
    "oct",
    "resetiosflags",
    "right",
    "scientific",
    "setbase",
    "setfill",
    "setiosflags",
    "setprecision",
    "setw",
    "showbase",
    "showpoint",
    "showpos",
    "skipws",
    "unitbuf",
    "uppercase",
    "ws",
]

type Direction = Literal["any", "out", "in"]

_BASE_FLAGS = dict(
    zip(SUPPORTED_BASES, (FmtFlags.OCT, FmtFlags.DEC, FmtFlags.HEX), strict=True)
)


@dataclass(frozen=True, slots=True)
class Manipulator:
    """Named stream operation.

    Attributes:
        name: Display name, e.g. "hex" or "setw(4)"
        action: Callable applied to the stream
        direction: Streams the manipulator is valid for
    """

    name: str
    action: Callable[[Any], object]
    direction: Direction = "any"

    def apply(self, stream: FormatStream[Any]) -> None:
        """Apply to ``stream``.

        Raises:
            StreamTypeError: If the stream's direction does not match
        """
        if self.direction not in ("any", stream.direction):
            raise StreamTypeError(
                ErrorTemplate.wrong_direction(self.name, type(stream).__name__)
            )
        self.action(stream)

    def __repr__(self) -> str:
        return f"<manipulator {self.name}>"


def _setter(name: str, flags: FmtFlags, mask: FmtFlags | None = None) -> Manipulator:
    return Manipulator(name, lambda s: s.setf(flags, mask))


def _clearer(name: str, flags: FmtFlags) -> Manipulator:
    return Manipulator(name, lambda s: s.unsetf(flags))


# Independent flags
boolalpha = _setter("boolalpha", FmtFlags.BOOLALPHA)
noboolalpha = _clearer("noboolalpha", FmtFlags.BOOLALPHA)
showbase = _setter("showbase", FmtFlags.SHOWBASE)
noshowbase = _clearer("noshowbase", FmtFlags.SHOWBASE)
showpoint = _setter("showpoint", FmtFlags.SHOWPOINT)
noshowpoint = _clearer("noshowpoint", FmtFlags.SHOWPOINT)
showpos = _setter("showpos", FmtFlags.SHOWPOS)
noshowpos = _clearer("noshowpos", FmtFlags.SHOWPOS)
skipws = _setter("skipws", FmtFlags.SKIPWS)
noskipws = _clearer("noskipws", FmtFlags.SKIPWS)
uppercase = _setter("uppercase", FmtFlags.UPPERCASE)
nouppercase = _clearer("nouppercase", FmtFlags.UPPERCASE)
unitbuf = _setter("unitbuf", FmtFlags.UNITBUF)
nounitbuf = _clearer("nounitbuf", FmtFlags.UNITBUF)

# Basefield
dec = _setter("dec", FmtFlags.DEC, FmtFlags.BASEFIELD)
hex = _setter("hex", FmtFlags.HEX, FmtFlags.BASEFIELD)
oct = _setter("oct", FmtFlags.OCT, FmtFlags.BASEFIELD)

# Floatfield
fixed = _setter("fixed", FmtFlags.FIXED, FmtFlags.FLOATFIELD)
scientific = _setter("scientific", FmtFlags.SCIENTIFIC, FmtFlags.FLOATFIELD)
hexfloat = _setter("hexfloat", FmtFlags.FLOATFIELD, FmtFlags.FLOATFIELD)
defaultfloat = _clearer("defaultfloat", FmtFlags.FLOATFIELD)

# Adjustfield
left = _setter("left", FmtFlags.LEFT, FmtFlags.ADJUSTFIELD)
right = _setter("right", FmtFlags.RIGHT, FmtFlags.ADJUSTFIELD)
internal = _setter("internal", FmtFlags.INTERNAL, FmtFlags.ADJUSTFIELD)

# Output-only
endl = Manipulator("endl", lambda s: s.put("\n").flush(), "out")
ends = Manipulator("ends", lambda s: s.put("\0"), "out")
flush = Manipulator("flush", lambda s: s.flush(), "out")

# Input-only
ws = Manipulator("ws", lambda s: s.skip_whitespace(), "in")


def setw(width: int) -> Manipulator:
    """Set the field width of the next formatted operation."""
    return Manipulator(f"setw({width})", lambda s: s.width(width))


def setfill(fill: str) -> Manipulator:
    """Set the padding character."""
    return Manipulator(f"setfill({fill!r})", lambda s: s.fill(fill))


def setprecision(precision: int) -> Manipulator:
    """Set the floating-point precision."""
    return Manipulator(f"setprecision({precision})", lambda s: s.precision(precision))


def setbase(base: int) -> Manipulator:
    """Select radix 8, 10 or 16; 0 clears the basefield.

    Raises:
        StreamFormatError: For any other base
    """
    if base == 0:
        flags = FmtFlags.NONE
    elif base in _BASE_FLAGS:
        flags = _BASE_FLAGS[base]
    else:
        raise StreamFormatError(ErrorTemplate.unsupported_base(base))
    return _setter(f"setbase({base})", flags, FmtFlags.BASEFIELD)


def setiosflags(flags: FmtFlags) -> Manipulator:
    """Set the given flags."""
    return _setter(f"setiosflags({flags!r})", flags)


def resetiosflags(flags: FmtFlags) -> Manipulator:
    """Clear the given flags."""
    return _clearer(f"resetiosflags({flags!r})", flags)


def imbue(locale: Locale | str | None) -> Manipulator:
    """Imbue a locale (Babel Locale, locale code, or None for "C")."""
    return Manipulator(f"imbue({locale!s})", lambda s: s.imbue(locale))
