"""Input streams with formatted extraction.

``stream >> item`` dispatches on the right-hand operand:

- Manipulator: applied to the stream
- FormatGuard: captures the stream and returns a GuardedChain
- Slot: the next token is converted to the slot's type and stored

Conversion follows the stream's FormatState: integers are read in the radix
selected by the basefield, booleans by name when boolalpha is set (otherwise
as 0/1), localized numbers are converted with Babel's parse_decimal() once
their extent is found, and string extraction is limited to ``width``
characters when a width is set.

A token that does not convert sets the fail flag and raises ExtractionError.
The offending input is left unconsumed.

Python 3.13+.
"""

from __future__ import annotations

import functools
import re
from abc import ABC
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any, BinaryIO, NoReturn, Self, TextIO

from babel.numbers import NumberFormatError

from fmtguard.constants import BOOL_NAMES, DEFAULT_ENCODING
from fmtguard.diagnostics import ErrorTemplate, ExtractionError, StreamTypeError
from fmtguard.guard import FormatGuard, GuardedChain
from fmtguard.locale_utils import number_symbols, parse_localized
from fmtguard.state import FmtFlags

from .base import FormatStream
from .manipulators import Manipulator

if TYPE_CHECKING:
    from babel import Locale

__all__ = ["ByteInputStream", "InputStream", "Slot", "TextInputStream"]

_TOKEN = re.compile(r"\S+")
_DIGITS = {8: "[0-7]", 10: "[0-9]", 16: "[0-9a-fA-F]"}


@dataclass(slots=True)
class Slot[T]:
    """Target of a formatted extraction.

    Example:
        n = Slot(int)
        stream >> manip.hex >> n
        n.value  # 255 for input "ff"

    Attributes:
        target_type: int, float, Decimal, bool, str or bytes
        value: The extracted value (None until filled)
    """

    target_type: type[T]
    value: T | None = None


@functools.lru_cache(maxsize=32)
def _int_pattern(base: int, group: str | None) -> re.Pattern[str]:
    digit = _DIGITS[base]
    prefix = "(?:0[xX])?" if base == 16 else ""
    body = f"{digit}+"
    if group is not None:
        body = f"{digit}+(?:{re.escape(group)}{digit}+)*"
    return re.compile(f"[+-]?{prefix}{body}")


@functools.lru_cache(maxsize=32)
def _float_pattern(decimal: str) -> re.Pattern[str]:
    point = re.escape(decimal)
    return re.compile(
        rf"[+-]?(?:(?:[0-9]+(?:{point}[0-9]*)?|{point}[0-9]+)(?:[eE][+-]?[0-9]+)?"
        r"|inf(?:inity)?|nan)",
        re.IGNORECASE,
    )


class InputStream[UnitT: (str, bytes)](FormatStream[UnitT], ABC):
    """Formatting input stream over fully buffered text."""

    direction = "in"

    def __init__(self, text: str) -> None:
        super().__init__()
        self._buffer = text
        self._pos = 0

    def __rshift__(self, item: object) -> Any:
        if isinstance(item, Manipulator):
            item.apply(self)
            return self
        if isinstance(item, FormatGuard):
            return GuardedChain(self, item)
        if isinstance(item, Slot):
            item.value = self.extract(item.target_type)
            return self
        raise StreamTypeError(ErrorTemplate.unsupported_operand(item, type(self).__name__))

    def remaining(self) -> str:
        """Unconsumed input."""
        return self._buffer[self._pos :]

    def skip_whitespace(self) -> Self:
        """Consume leading whitespace."""
        end = len(self._buffer)
        while self._pos < end and self._buffer[self._pos].isspace():
            self._pos += 1
        if self._pos == end:
            self._at_eof = True
        return self

    def extract(self, target_type: type) -> Any:
        """Read one value of ``target_type`` under the current configuration.

        Raises:
            ExtractionError: At end of input or when the token does not convert
            StreamTypeError: For unsupported target types
        """
        if self._state.flags & FmtFlags.SKIPWS:
            self.skip_whitespace()
        if self._pos >= len(self._buffer):
            self._at_eof = True
            self._failed = True
            raise ExtractionError(
                ErrorTemplate.extraction_eof(target_type.__name__), "", target_type
            )

        if target_type is bool:
            return self._extract_bool()
        if target_type is int:
            return self._extract_int(int)
        if target_type in (float, Decimal):
            return self._extract_float(target_type)
        if target_type is str:
            return self._extract_str()
        if target_type is bytes:
            return self._extract_str().encode(self._encoding)
        raise StreamTypeError(
            ErrorTemplate.unsupported_operand(target_type, type(self).__name__)
        )

    @property
    def _encoding(self) -> str:
        return DEFAULT_ENCODING

    def _take(self, pattern: re.Pattern[str]) -> str | None:
        match = pattern.match(self._buffer, self._pos)
        if match is None or not match.group():
            return None
        self._pos = match.end()
        if self._pos == len(self._buffer):
            self._at_eof = True
        return match.group()

    def _reject(self, target_type: type) -> NoReturn:
        self._failed = True
        match = _TOKEN.match(self._buffer, self._pos)
        token = match.group() if match else self._buffer[self._pos :]
        raise ExtractionError(
            ErrorTemplate.extraction_invalid(token, target_type.__name__),
            token,
            target_type,
        )

    def _localized(
        self, token: str, locale: Locale, start: int, target_type: type
    ) -> Decimal:
        try:
            return parse_localized(token, locale)
        except NumberFormatError:
            self._pos = start
            self._reject(target_type)

    def _extract_int(self, target_type: type) -> int:
        state = self._state
        symbols = number_symbols(state.locale)
        group = symbols.group if state.base == 10 and symbols.grouping[0] else None
        start = self._pos
        token = self._take(_int_pattern(state.base, group))
        if token is None:
            self._reject(target_type)
        if group is not None and state.locale is not None:
            return int(self._localized(token, state.locale, start, target_type))
        return int(token, state.base)

    def _extract_float(self, target_type: type) -> float | Decimal:
        locale = self._state.locale
        start = self._pos
        token = self._take(_float_pattern(number_symbols(locale).decimal))
        if token is None:
            self._reject(target_type)
        if locale is None:
            return target_type(token)
        value = self._localized(token, locale, start, target_type)
        return value if target_type is Decimal else float(value)

    def _extract_bool(self) -> bool:
        if self._state.flags & FmtFlags.BOOLALPHA:
            for value, name in ((False, BOOL_NAMES[0]), (True, BOOL_NAMES[1])):
                if self._buffer.startswith(name, self._pos):
                    self._pos += len(name)
                    return value
            self._reject(bool)
        start = self._pos
        number = self._extract_int(bool)
        if number not in (0, 1):
            self._pos = start
            self._reject(bool)
        return bool(number)

    def _extract_str(self) -> str:
        limit = self._state.width
        self._consume_width()
        match = _TOKEN.match(self._buffer, self._pos)
        if match is None:
            self._reject(str)
        token = match.group()
        if limit:
            token = token[:limit]
        self._pos += len(token)
        if self._pos == len(self._buffer):
            self._at_eof = True
        return token


class TextInputStream(InputStream[str]):
    """Input stream reading from a str or a text file object."""

    unit_type = str

    def __init__(self, source: str | TextIO) -> None:
        super().__init__(source if isinstance(source, str) else source.read())


class ByteInputStream(InputStream[bytes]):
    """Input stream reading from bytes or a binary file object."""

    unit_type = bytes

    def __init__(
        self, source: bytes | BinaryIO, encoding: str = DEFAULT_ENCODING
    ) -> None:
        data = bytes(source) if isinstance(source, (bytes, bytearray)) else source.read()
        self.encoding = encoding
        super().__init__(data.decode(encoding))

    @property
    def _encoding(self) -> str:
        return self.encoding

