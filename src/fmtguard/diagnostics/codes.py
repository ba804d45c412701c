"""Diagnostic codes and structured diagnostic messages.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = ["Diagnostic", "DiagnosticCode"]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Stream parameter errors (width, precision, fill, base, locale)
        2000-2999: Stream usage errors (wrong direction, unit mismatch, guard unit)
        3000-3999: Extraction errors (input tokens that do not convert)
    """

    # Stream parameter errors (1000-1999)
    INVALID_WIDTH = 1001
    INVALID_PRECISION = 1002
    INVALID_FILL = 1003
    UNSUPPORTED_BASE = 1004
    UNKNOWN_LOCALE = 1005

    # Stream usage errors (2000-2999)
    WRONG_STREAM_DIRECTION = 2001
    UNIT_ENCODING_FAILED = 2002
    UNSUPPORTED_OPERAND = 2003
    GUARD_UNIT_MISMATCH = 2004

    # Extraction errors (3000-3999)
    EXTRACTION_EOF = 3001
    EXTRACTION_INVALID_TOKEN = 3002


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        hint: Suggestion for fixing the error
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    hint: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic in compiler style.

        Example output:
            error[INVALID_FILL]: Fill must be a single character, got 'ab'
              = help: Pass exactly one character to setfill()

        Returns:
            Formatted error message
        """
        lines = [f"{self.severity}[{self.code.name}]: {self.message}"]
        if self.hint:
            lines.append(f"  = help: {self.hint}")
        return "\n".join(lines)
