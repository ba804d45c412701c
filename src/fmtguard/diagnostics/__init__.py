"""Diagnostic system for fmtguard errors.

Provides structured error diagnostics with codes and hints.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode
from .errors import ExtractionError, FmtGuardError, StreamFormatError, StreamTypeError
from .templates import ErrorTemplate

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "ErrorTemplate",
    "ExtractionError",
    "FmtGuardError",
    "StreamFormatError",
    "StreamTypeError",
]
