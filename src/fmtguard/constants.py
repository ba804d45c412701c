"""Shared constants for fmtguard.

Single source of truth for the default formatting configuration of a fresh
stream and for the limits used by the locale and stream layers. Placing
constants here avoids circular imports between ``fmtguard.stream`` and
``fmtguard.guard``.

Constants are grouped by domain:
- Stream defaults: Values a newly constructed stream starts with
- Number rendering: Radix and boolean vocabulary
- Cache limits: Memory bounds for locale symbol caching

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Stream defaults
    "DEFAULT_PRECISION",
    "DEFAULT_FILL",
    "DEFAULT_WIDTH",
    "DEFAULT_ENCODING",
    # Number rendering
    "SUPPORTED_BASES",
    "BOOL_NAMES",
    # Cache limits
    "MAX_LOCALE_CACHE_SIZE",
]

# ============================================================================
# STREAM DEFAULTS
# ============================================================================

# Floating-point precision of a fresh stream (matches printf "%g").
DEFAULT_PRECISION: int = 6

# Fill character used for padding up to the field width.
DEFAULT_FILL: str = " "

# Zero width means "no padding". Width is consumed by each formatted operation.
DEFAULT_WIDTH: int = 0

# Encoding used by byte streams unless the caller provides one.
DEFAULT_ENCODING: str = "utf-8"

# ============================================================================
# NUMBER RENDERING
# ============================================================================

# Radixes selectable through the basefield flags (oct, dec, hex).
SUPPORTED_BASES: tuple[int, ...] = (8, 10, 16)

# Rendering of False/True when the boolalpha flag is set.
BOOL_NAMES: tuple[str, str] = ("false", "true")

# ============================================================================
# CACHE LIMITS
# ============================================================================

# Maximum number of Babel locales whose number symbols are cached.
MAX_LOCALE_CACHE_SIZE: int = 128
