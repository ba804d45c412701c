"""Locale utilities for imbuing streams with Babel locales.

Centralizes locale code normalization, Babel Locale parsing, the cached
lookup of the number symbols (decimal separator, group separator, grouping
sizes) that rendering and extraction need, and the Babel calls that group
and ungroup localized numbers.

A stream with no imbued locale uses the classic "C" conventions: ``.`` as
decimal separator and no digit grouping.

Python 3.13+. Uses Babel for CLDR data.
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from decimal import Decimal

from babel import Locale, UnknownLocaleError
from babel import numbers as babel_numbers

from fmtguard.constants import MAX_LOCALE_CACHE_SIZE
from fmtguard.diagnostics import ErrorTemplate, StreamFormatError

__all__ = [
    "CLASSIC_SYMBOLS",
    "NumberSymbols",
    "format_grouped",
    "get_babel_locale",
    "normalize_locale",
    "number_symbols",
    "parse_localized",
    "resolve_locale",
]

logger = logging.getLogger(__name__)

# Babel reports a pattern without grouping separators as this group size.
_NO_GROUPING = 1000


@dataclass(frozen=True, slots=True)
class NumberSymbols:
    """Number punctuation of a locale.

    Attributes:
        decimal: Decimal separator
        group: Digit group separator
        grouping: (primary, secondary) group sizes; (0, 0) disables grouping
    """

    decimal: str = "."
    group: str = ","
    grouping: tuple[int, int] = (0, 0)


CLASSIC_SYMBOLS = NumberSymbols()


def normalize_locale(locale_code: str) -> str:
    """Convert BCP-47 locale code to POSIX format for Babel.

    Example:
        >>> normalize_locale("en-US")
        'en_US'
    """
    return locale_code.replace("-", "_")


@functools.lru_cache(maxsize=MAX_LOCALE_CACHE_SIZE)
def get_babel_locale(locale_code: str) -> Locale:
    """Parse a locale code into a Babel Locale, with caching.

    Args:
        locale_code: Locale code (BCP-47 or POSIX format accepted)

    Returns:
        Babel Locale object

    Raises:
        StreamFormatError: If Babel does not recognize the code
    """
    try:
        return Locale.parse(normalize_locale(locale_code))
    except (UnknownLocaleError, ValueError) as e:
        raise StreamFormatError(ErrorTemplate.unknown_locale(locale_code, str(e))) from e


def resolve_locale(locale: Locale | str | None) -> Locale | None:
    """Accept a Locale, a locale code or None ("C" locale)."""
    if locale is None or isinstance(locale, Locale):
        return locale
    return get_babel_locale(locale)


@functools.lru_cache(maxsize=MAX_LOCALE_CACHE_SIZE)
def number_symbols(locale: Locale | None) -> NumberSymbols:
    """Look up the number punctuation for a locale.

    Args:
        locale: Babel Locale, or None for the classic "C" conventions

    Returns:
        NumberSymbols for the locale
    """
    if locale is None:
        return CLASSIC_SYMBOLS

    pattern = locale.decimal_formats.get(None)
    primary, secondary = pattern.grouping if pattern is not None else (3, 3)
    if primary >= _NO_GROUPING:
        primary = secondary = 0

    symbols = NumberSymbols(
        decimal=babel_numbers.get_decimal_symbol(locale),
        group=babel_numbers.get_group_symbol(locale),
        grouping=(primary, secondary),
    )
    logger.debug("Loaded number symbols for %s: %r", locale, symbols)
    return symbols


def format_grouped(value: int, locale: Locale) -> str:
    """Format a non-negative integer with the locale's digit grouping.

    Uses Babel's format_decimal(), so primary and secondary group sizes
    follow CLDR.

    Example:
        >>> format_grouped(1234567, get_babel_locale("en_US"))
        '1,234,567'
        >>> format_grouped(12345678, get_babel_locale("hi_IN"))
        '1,23,45,678'
    """
    return str(babel_numbers.format_decimal(value, locale=locale))


def parse_localized(token: str, locale: Locale) -> Decimal:
    """Convert a number token written with the locale's symbols to Decimal.

    Group separators are dropped and the decimal symbol is read as the
    point, through Babel's parse_decimal().

    Raises:
        babel.numbers.NumberFormatError: If Babel cannot parse the token
    """
    return babel_numbers.parse_decimal(token, locale=locale)
