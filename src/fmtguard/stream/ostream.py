"""Output streams with formatted insertion.

``stream << item`` dispatches on the right-hand operand:

- Manipulator: applied to the stream
- FormatGuard: captures the stream and returns a GuardedChain
- anything else: rendered under the current FormatState and written;
  the field width is consumed

TextOutputStream writes str to a text sink; ByteOutputStream encodes to a
binary sink. Both default to in-memory sinks whose contents getvalue()
returns.

Python 3.13+.
"""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Self, TextIO

from fmtguard.constants import DEFAULT_ENCODING
from fmtguard.diagnostics import ErrorTemplate, StreamTypeError
from fmtguard.guard import FormatGuard, GuardedChain
from fmtguard.state import FmtFlags

from .base import FormatStream
from .manipulators import Manipulator
from .numeric import render

__all__ = ["ByteOutputStream", "OutputStream", "TextOutputStream"]


class OutputStream[UnitT: (str, bytes)](FormatStream[UnitT], ABC):
    """Formatting output stream over some sink."""

    direction = "out"

    def __lshift__(self, item: object) -> Any:
        if isinstance(item, Manipulator):
            item.apply(self)
            return self
        if isinstance(item, FormatGuard):
            return GuardedChain(self, item)
        return self.insert(item)

    def insert(self, value: object) -> Self:
        """Render ``value`` under the current configuration and write it."""
        text = render(self._decode_operand(value), self._state)
        self._consume_width()
        self.put(text)
        if self._state.flags & FmtFlags.UNITBUF:
            self.flush()
        return self

    def put(self, text: str) -> Self:
        """Write ``text`` without formatting."""
        self._write_text(text)
        return self

    def _decode_operand(self, value: object) -> object:
        return value

    @abstractmethod
    def _write_text(self, text: str) -> None: ...

    @abstractmethod
    def write(self, data: UnitT) -> Self:
        """Write raw units without formatting."""

    @abstractmethod
    def flush(self) -> Self:
        """Flush the sink."""


class TextOutputStream(OutputStream[str]):
    """Output stream writing str to a text sink.

    Example:
        out = TextOutputStream()
        out << manip.setw(4) << 200
        out.getvalue()  # ' 200'
    """

    unit_type = str

    def __init__(self, target: TextIO | None = None) -> None:
        super().__init__()
        self.target: TextIO = target if target is not None else io.StringIO()

    def _write_text(self, text: str) -> None:
        self.target.write(text)

    def write(self, data: str) -> Self:
        self.target.write(data)
        return self

    def flush(self) -> Self:
        self.target.flush()
        return self

    def getvalue(self) -> str:
        """Contents of an in-memory sink."""
        return self.target.getvalue()  # type: ignore[attr-defined]


class ByteOutputStream(OutputStream[bytes]):
    """Output stream encoding text to a binary sink.

    bytes operands are decoded with the stream's encoding before padding so
    that width counts characters, not bytes.
    """

    unit_type = bytes

    def __init__(
        self, target: BinaryIO | None = None, encoding: str = DEFAULT_ENCODING
    ) -> None:
        super().__init__()
        self.target: BinaryIO = target if target is not None else io.BytesIO()
        self.encoding = encoding

    def _decode_operand(self, value: object) -> object:
        if isinstance(value, (bytes, bytearray)):
            return bytes(value).decode(self.encoding)
        return value

    def _write_text(self, text: str) -> None:
        try:
            data = text.encode(self.encoding)
        except UnicodeEncodeError as e:
            self._failed = True
            raise StreamTypeError(
                ErrorTemplate.unit_encoding_failed(text, self.encoding)
            ) from e
        self.target.write(data)

    def write(self, data: bytes) -> Self:
        self.target.write(data)
        return self

    def flush(self) -> Self:
        self.target.flush()
        return self

    def getvalue(self) -> bytes:
        """Contents of an in-memory sink."""
        return self.target.getvalue()  # type: ignore[attr-defined]
