"""Quickstart example for fmtguard.

Shows the three ways to use a FormatGuard:

1. Scope-bound: ``with FormatGuard(out): ...`` restores on block exit
2. Expression-bound: ``out << FormatGuard() << manip.hex << 42`` restores
   when the statement finishes
3. Standalone: capture(), restore() and release() called explicitly

Run with: python examples/quickstart.py
"""

import sys

from fmtguard import (
    ByteOutputStream,
    FmtGuardError,
    FormatGuard,
    TextOutputStream,
    manip,
)
from fmtguard.stream import OutputStream

out = TextOutputStream(sys.stdout)


def report(label: str, guard: FormatGuard) -> None:
    """Print which stream (if any) a guard is bound to."""
    bound = "None" if guard.stream is None else type(guard.stream).__name__
    out << label << ".stream: " << bound << manip.endl


def construction_and_moves() -> None:
    """Example 1: construction, move-construction and move-assignment."""
    out << "default-construct g1" << manip.endl
    g1 = FormatGuard()
    report("g1", g1)
    out << manip.endl

    out << "construct g2 bound to out" << manip.endl
    g2 = FormatGuard(out)
    report("g2", g2)
    out << manip.endl

    out << "move-construct g3 from g2" << manip.endl
    g3 = FormatGuard.moved_from(g2)
    report("g2", g2)
    report("g3", g3)
    out << manip.endl

    out << "move-assign g3 to g2" << manip.endl
    g2.assign(g3)
    report("g2", g2)
    report("g3", g3)
    out << manip.endl


def write200() -> None:
    out << "write200(): " << manip.setw(4) << 200 << manip.endl


def write200hex() -> None:
    # Formatting changes inside the block are undone when it exits.
    with FormatGuard(out):
        out << manip.hex << manip.uppercase << manip.setfill("0")
        write200()


def scoped() -> None:
    """Example 2: scope-bound guard."""
    write200()  # " 200"
    write200hex()  # "00C8"
    write200()  # " 200" again


def guard_on(stream: OutputStream) -> None:
    """Example 3: inline and standalone guards on any output stream."""
    kind = "TEXT" if stream.unit_type is str else "BYTE"

    stream << manip.endl
    stream << "TESTING INSERT OPERATOR FOR " << kind << " STREAM" << manip.endl
    stream << "default: " << 42 << manip.endl
    stream << "(temporary) hex: " << FormatGuard() << manip.hex << manip.uppercase \
        << 42 << manip.endl
    stream << "restored: " << 42 << manip.endl

    stream << manip.endl
    stream << "TESTING STANDALONE GUARD FOR " << kind << " STREAM" << manip.endl
    saver = FormatGuard()

    stream << "default: " << 42 << manip.endl
    saver.capture(stream)
    stream << "captured: " << 42 << manip.endl
    stream << manip.hex << manip.uppercase
    stream << "hex: " << 42 << manip.endl
    stream << "again: " << 42 << manip.endl
    saver.restore()
    stream << "restored: " << 42 << manip.endl
    stream << manip.hex << manip.uppercase
    stream << "hex: " << 42 << manip.endl
    saver.release()
    stream << "released: " << 42 << manip.endl


def main() -> int:
    try:
        construction_and_moves()
        scoped()
        guard_on(out)
        guard_on(ByteOutputStream(sys.stdout.buffer))
    except FmtGuardError as e:
        print(f"exception: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
