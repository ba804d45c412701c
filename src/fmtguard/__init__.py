"""fmtguard - save and restore a stream's formatting configuration.

A FormatGuard captures everything that controls how values are written to or
read from a formatting stream (radix, case, width, fill, precision, float
notation, locale) and puts it back when asked, when its ``with`` block ends,
or when the guard goes away. Functions that tweak a shared stream's
formatting can no longer forget to undo it.

Public API:
    FormatGuard - Move-only capture/restore guard (scope- or expression-bound)
    GuardedChain - Stream proxy returned by ``stream << guard``
    preserved_format - Context manager shorthand for ``with FormatGuard(s)``
    FormatState - Immutable formatting configuration snapshot
    FmtFlags - Format flags
    TextOutputStream, ByteOutputStream - Formatting output streams
    TextInputStream, ByteInputStream, Slot - Formatting input streams
    manip - Stream manipulators (hex, setw, setfill, endl, ...)

Exceptions:
    FmtGuardError - Base exception class
    StreamFormatError - Invalid formatting parameter
    StreamTypeError - Operand unusable with the stream
    ExtractionError - Input token does not convert
"""

from .diagnostics import (
    ExtractionError,
    FmtGuardError,
    StreamFormatError,
    StreamTypeError,
)
from .guard import (
    ByteFormatGuard,
    FormatGuard,
    GuardedChain,
    TextFormatGuard,
    preserved_format,
)
from .state import FmtFlags, FormatState
from .stream import (
    ByteInputStream,
    ByteOutputStream,
    Slot,
    TextInputStream,
    TextOutputStream,
)
from .stream import manipulators as manip

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("fmtguard")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "ByteFormatGuard",
    "ByteInputStream",
    "ByteOutputStream",
    "ExtractionError",
    "FmtFlags",
    "FmtGuardError",
    "FormatGuard",
    "FormatState",
    "GuardedChain",
    "Slot",
    "StreamFormatError",
    "StreamTypeError",
    "TextFormatGuard",
    "TextInputStream",
    "TextOutputStream",
    "__version__",
    "manip",
    "preserved_format",
]
