"""Stream base carrying a formatting configuration.

FormatStream is the host primitive the guard is built on. It owns exactly one
FormatState and offers the two operations a guard needs:

- format_state(): extract a snapshot of the current configuration
- copyfmt(): apply a snapshot (or another stream's configuration) wholesale

The remaining accessors (flags, width, precision, fill, imbue) are the
conventional way callers change the configuration between those two points.
Each setter returns the previous value.

Python 3.13+.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, ClassVar, Self

from fmtguard.locale_utils import resolve_locale
from fmtguard.state import FmtFlags, FormatState

if TYPE_CHECKING:
    from babel import Locale

__all__ = ["FormatStream"]

logger = logging.getLogger(__name__)


class FormatStream[UnitT: (str, bytes)]:
    """Base class of formatting streams over text (str) or byte units.

    Attributes:
        unit_type: ``str`` for text streams, ``bytes`` for byte streams
        direction: "out" or "in"; manipulators check it before applying
    """

    unit_type: ClassVar[type]
    direction: ClassVar[str] = "any"

    def __init__(self) -> None:
        self._state = FormatState()
        self._failed = False
        self._at_eof = False

    # ------------------------------------------------------------------
    # Snapshot primitive
    # ------------------------------------------------------------------

    def format_state(self) -> FormatState:
        """Return the current formatting configuration (no side effects)."""
        return self._state

    def copyfmt(self, source: FormatState | FormatStream[UnitT]) -> Self:
        """Replace the whole formatting configuration.

        Args:
            source: A snapshot, or a stream whose configuration is copied

        Returns:
            This stream, for chaining
        """
        state = source.format_state() if isinstance(source, FormatStream) else source
        logger.debug("copyfmt on %s: %r", type(self).__name__, state)
        self._state = state
        return self

    # ------------------------------------------------------------------
    # Individual parameters
    # ------------------------------------------------------------------

    def flags(self, new: FmtFlags | None = None) -> FmtFlags:
        """Return the flags; replace them all when ``new`` is given."""
        previous = self._state.flags
        if new is not None:
            self._state = self._state.evolve(flags=new)
        return previous

    def setf(self, flags: FmtFlags, mask: FmtFlags | None = None) -> FmtFlags:
        """Set flags (under ``mask`` when given); return the previous flags."""
        previous = self._state.flags
        self._state = self._state.with_flags(flags, mask)
        return previous

    def unsetf(self, flags: FmtFlags) -> FmtFlags:
        """Clear flags; return the previous flags."""
        previous = self._state.flags
        self._state = self._state.without_flags(flags)
        return previous

    def width(self, new: int | None = None) -> int:
        """Return the field width; set it when ``new`` is given."""
        previous = self._state.width
        if new is not None:
            self._state = self._state.evolve(width=new)
        return previous

    def precision(self, new: int | None = None) -> int:
        """Return the float precision; set it when ``new`` is given."""
        previous = self._state.precision
        if new is not None:
            self._state = self._state.evolve(precision=new)
        return previous

    def fill(self, new: str | None = None) -> str:
        """Return the fill character; set it when ``new`` is given."""
        previous = self._state.fill
        if new is not None:
            self._state = self._state.evolve(fill=new)
        return previous

    def imbue(self, locale: Locale | str | None) -> Locale | None:
        """Imbue a locale (code, Babel Locale, or None for "C").

        Returns:
            The previously imbued locale

        Raises:
            StreamFormatError: If a locale code is unknown to Babel
        """
        previous = self._state.locale
        self._state = self._state.evolve(locale=resolve_locale(locale))
        return previous

    def getloc(self) -> Locale | None:
        """Return the imbued locale (None for "C")."""
        return self._state.locale

    def _consume_width(self) -> None:
        if self._state.width:
            self._state = self._state.evolve(width=0)

    # ------------------------------------------------------------------
    # Stream condition
    # ------------------------------------------------------------------

    def good(self) -> bool:
        """True when no failure and no end-of-input has been recorded."""
        return not (self._failed or self._at_eof)

    def fail(self) -> bool:
        """True after a failed operation."""
        return self._failed

    def eof(self) -> bool:
        """True once input has been exhausted."""
        return self._at_eof

    def clear(self) -> None:
        """Reset the fail and end-of-input conditions."""
        self._failed = False
        self._at_eof = False
