"""fmtguard exception hierarchy with structured diagnostics.

All exceptions optionally carry a Diagnostic object for rich error information.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic

__all__ = [
    "ExtractionError",
    "FmtGuardError",
    "StreamFormatError",
    "StreamTypeError",
]


class FmtGuardError(Exception):
    """Base exception for all fmtguard errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize FmtGuardError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class StreamFormatError(FmtGuardError, ValueError):
    """Invalid formatting parameter.

    Examples:
    - Negative width or precision
    - Fill that is not a single character
    - Base other than 8, 10 or 16
    - Locale code Babel does not know
    """


class StreamTypeError(FmtGuardError, TypeError):
    """Stream used with an operand it cannot handle.

    Raised for output-only manipulators on input streams (and vice versa),
    text that cannot be encoded for a byte stream, and unsupported
    extraction targets.
    """


class ExtractionError(FmtGuardError):
    """Input token could not be converted to the requested type.

    The stream's fail flag is set before this is raised.

    Attributes:
        token: The offending token ("" at end of input)
        target_type: The requested type
    """

    def __init__(
        self, message: str | Diagnostic, token: str, target_type: type
    ) -> None:
        """Initialize ExtractionError.

        Args:
            message: Error message string OR Diagnostic object
            token: The offending token
            target_type: The requested type
        """
        super().__init__(message)
        self.token = token
        self.target_type = target_type
