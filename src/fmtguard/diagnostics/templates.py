"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode

__all__ = ["ErrorTemplate"]


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    """

    @staticmethod
    def invalid_width(width: int) -> Diagnostic:
        """Field width is negative."""
        return Diagnostic(
            code=DiagnosticCode.INVALID_WIDTH,
            message=f"Field width must be >= 0, got {width}",
            hint="Use setw(0) to disable padding",
        )

    @staticmethod
    def invalid_precision(precision: int) -> Diagnostic:
        """Float precision is negative."""
        return Diagnostic(
            code=DiagnosticCode.INVALID_PRECISION,
            message=f"Precision must be >= 0, got {precision}",
        )

    @staticmethod
    def invalid_fill(fill: str) -> Diagnostic:
        """Fill is not exactly one character."""
        return Diagnostic(
            code=DiagnosticCode.INVALID_FILL,
            message=f"Fill must be a single character, got {fill!r}",
            hint="Pass exactly one character to setfill()",
        )

    @staticmethod
    def unsupported_base(base: int) -> Diagnostic:
        """Radix outside the basefield choices.

        Args:
            base: The requested radix
        """
        return Diagnostic(
            code=DiagnosticCode.UNSUPPORTED_BASE,
            message=f"Unsupported base {base}",
            hint="setbase() accepts 8, 10 or 16 (0 clears the basefield)",
        )

    @staticmethod
    def unknown_locale(locale_code: str, reason: str) -> Diagnostic:
        """Locale code rejected by Babel.

        Args:
            locale_code: The code as supplied by the caller
            reason: Babel's explanation
        """
        return Diagnostic(
            code=DiagnosticCode.UNKNOWN_LOCALE,
            message=f"Unknown locale '{locale_code}': {reason}",
            hint="Use a BCP-47 or POSIX code such as 'en-US' or 'de_DE'",
        )

    @staticmethod
    def wrong_direction(manipulator: str, stream_kind: str) -> Diagnostic:
        """Manipulator applied to a stream of the wrong direction.

        Args:
            manipulator: Manipulator name (e.g. "endl")
            stream_kind: Class name of the receiving stream
        """
        return Diagnostic(
            code=DiagnosticCode.WRONG_STREAM_DIRECTION,
            message=f"Manipulator '{manipulator}' cannot be used with {stream_kind}",
        )

    @staticmethod
    def unit_encoding_failed(text: str, encoding: str) -> Diagnostic:
        """Text cannot be represented in a byte stream's encoding."""
        return Diagnostic(
            code=DiagnosticCode.UNIT_ENCODING_FAILED,
            message=f"Cannot encode {text!r} as {encoding}",
        )

    @staticmethod
    def unsupported_operand(operand: object, stream_kind: str) -> Diagnostic:
        """Right-hand operand of >> is not an extraction target."""
        name = operand.__name__ if isinstance(operand, type) else type(operand).__name__
        return Diagnostic(
            code=DiagnosticCode.UNSUPPORTED_OPERAND,
            message=(
                f"Cannot extract into {name} from {stream_kind}"
            ),
            hint="Extract into a Slot, e.g. stream >> (n := Slot(int))",
        )

    @staticmethod
    def guard_unit_mismatch(guard_kind: str, stream_kind: str) -> Diagnostic:
        """Unit-specific guard bound to a stream of the other unit."""
        return Diagnostic(
            code=DiagnosticCode.GUARD_UNIT_MISMATCH,
            message=f"{guard_kind} cannot be bound to {stream_kind}",
            hint="Use FormatGuard for streams of either unit",
        )

    @staticmethod
    def extraction_eof(target_type: str) -> Diagnostic:
        """Input exhausted before a token was found.

        Args:
            target_type: Name of the requested value type
        """
        return Diagnostic(
            code=DiagnosticCode.EXTRACTION_EOF,
            message=f"End of input while extracting {target_type}",
        )

    @staticmethod
    def extraction_invalid(token: str, target_type: str) -> Diagnostic:
        """Token does not convert to the requested type.

        Args:
            token: The offending input token
            target_type: Name of the requested value type
        """
        return Diagnostic(
            code=DiagnosticCode.EXTRACTION_INVALID_TOKEN,
            message=f"Cannot extract {target_type} from {token!r}",
            hint="Check the stream's basefield and boolalpha flags",
        )
