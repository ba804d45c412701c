"""Rendering of values under a stream's formatting configuration.

All decisions about how a value looks on an output stream are made here:
radix, prefixes, sign, case, float notation, locale punctuation and padding.
Streams call render() once per formatted insertion and then reset the width.

Python 3.13+. Uses Babel (through fmtguard.locale_utils) for locale symbols
and digit grouping.
"""

from __future__ import annotations

from decimal import Decimal

from fmtguard.constants import BOOL_NAMES
from fmtguard.locale_utils import format_grouped, number_symbols
from fmtguard.state import FmtFlags, FormatState

__all__ = ["pad", "render", "render_bool", "render_float", "render_int"]


def pad(head: str, body: str, state: FormatState) -> str:
    """Pad ``head + body`` to the state's width with its fill character.

    ``head`` is the sign and base prefix; INTERNAL adjustment places the
    padding between head and body.
    """
    shortfall = state.width - len(head) - len(body)
    if shortfall <= 0:
        return head + body

    padding = state.fill * shortfall
    adjust = state.flags & FmtFlags.ADJUSTFIELD
    if adjust == FmtFlags.LEFT:
        return head + body + padding
    if adjust == FmtFlags.INTERNAL:
        return head + padding + body
    return padding + head + body


def render_int(value: int, state: FormatState) -> tuple[str, str]:
    """Render an integer as (head, body).

    Negative values render as '-' followed by the magnitude in the selected
    base; there is no fixed-width two's complement form for Python ints.
    """
    flags = state.flags
    upper = bool(flags & FmtFlags.UPPERCASE)
    base = state.base
    magnitude = abs(value)

    if base == 16:
        body = format(magnitude, "X" if upper else "x")
    elif base == 8:
        body = format(magnitude, "o")
    else:
        body = (
            str(magnitude)
            if state.locale is None
            else format_grouped(magnitude, state.locale)
        )

    if value < 0:
        head = "-"
    elif base == 10 and flags & FmtFlags.SHOWPOS:
        head = "+"
    else:
        head = ""

    if flags & FmtFlags.SHOWBASE and magnitude != 0:
        if base == 16:
            head += "0X" if upper else "0x"
        elif base == 8:
            head += "0"
    return head, body


def render_float(value: float | Decimal, state: FormatState) -> tuple[str, str]:
    """Render a float or Decimal as (head, body)."""
    flags = state.flags
    upper = bool(flags & FmtFlags.UPPERCASE)
    floatfield = flags & FmtFlags.FLOATFIELD

    if floatfield == FmtFlags.FLOATFIELD:
        text = float(value).hex()
        if upper:
            text = text.upper()
    else:
        if floatfield == FmtFlags.FIXED:
            spec = f".{state.precision}f"
        elif floatfield == FmtFlags.SCIENTIFIC:
            spec = f".{state.precision}e"
        else:
            spec = f".{state.precision or 1}g"
            # Decimal.__format__ has no alternate form.
            if flags & FmtFlags.SHOWPOINT and not isinstance(value, Decimal):
                spec = "#" + spec
        if upper:
            spec = spec.upper()
        text = format(value, spec)
        symbols = number_symbols(state.locale)
        if symbols.decimal != ".":
            text = text.replace(".", symbols.decimal, 1)

    if text[:1] == "-":
        return "-", text[1:]
    if flags & FmtFlags.SHOWPOS:
        return "+", text
    return "", text


def render_bool(value: bool, state: FormatState) -> tuple[str, str]:
    """Render a bool by name (boolalpha) or as 1/0."""
    if state.flags & FmtFlags.BOOLALPHA:
        return "", BOOL_NAMES[value]
    return render_int(int(value), state)


def render(value: object, state: FormatState) -> str:
    """Render any value for insertion into a stream, padded to width.

    Args:
        value: The value to insert
        state: The stream's current formatting configuration

    Returns:
        The text to write
    """
    match value:
        case bool():
            head, body = render_bool(value, state)
        case int():
            head, body = render_int(value, state)
        case float() | Decimal():
            head, body = render_float(value, state)
        case _:
            head, body = "", str(value)
    return pad(head, body, state)
