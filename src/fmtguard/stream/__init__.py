"""Formatting streams: the host I/O layer a FormatGuard works on.

Each stream owns one FormatState (flags, width, precision, fill, locale) and
offers format_state() / copyfmt() to extract and apply it wholesale.

Submodules:
    fmtguard.stream.base - FormatStream base class
    fmtguard.stream.ostream - Text and byte output streams (``<<``)
    fmtguard.stream.istream - Text and byte input streams (``>>``), Slot
    fmtguard.stream.manipulators - hex, setw(), setfill(), endl, ...
    fmtguard.stream.numeric - Value rendering under a FormatState

Python 3.13+.
"""

from fmtguard.state import FmtFlags, FormatState

from . import manipulators
from .base import FormatStream
from .istream import ByteInputStream, InputStream, Slot, TextInputStream
from .manipulators import Manipulator
from .ostream import ByteOutputStream, OutputStream, TextOutputStream

__all__ = [
    "ByteInputStream",
    "ByteOutputStream",
    "FmtFlags",
    "FormatState",
    "FormatStream",
    "InputStream",
    "Manipulator",
    "OutputStream",
    "Slot",
    "TextInputStream",
    "TextOutputStream",
    "manipulators",
]
