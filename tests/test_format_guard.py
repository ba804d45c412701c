"""Tests for fmtguard.guard: FormatGuard, GuardedChain and preserved_format.

Covers the UNBOUND/BOUND state machine, capture/restore/release, move-only
ownership, scope-bound and expression-bound restoration, and the
round-trip/idempotence properties with Hypothesis.

Python 3.13+.
"""

from __future__ import annotations

import copy
import logging
import pickle

import pytest
from hypothesis import event, given, settings
from hypothesis import strategies as st

from fmtguard import (
    ByteFormatGuard,
    ByteOutputStream,
    FmtFlags,
    FormatGuard,
    FormatState,
    GuardedChain,
    Slot,
    TextFormatGuard,
    TextInputStream,
    TextOutputStream,
    manip,
    preserved_format,
)
from fmtguard.diagnostics import (
    DiagnosticCode,
    ExtractionError,
    StreamFormatError,
    StreamTypeError,
)
from fmtguard.stream.numeric import render
from tests.strategies import format_states, manipulator_sequences, printable_values


def write200(out: TextOutputStream | ByteOutputStream) -> None:
    """Write 200 in a 4-wide field followed by a newline."""
    out << manip.setw(4) << 200 << manip.endl


def write200hex(out: TextOutputStream | ByteOutputStream) -> None:
    """Write 200 in upper-case, zero-filled hex inside a guarded scope."""
    with FormatGuard(out):
        out << manip.hex << manip.uppercase << manip.setfill("0")
        write200(out)


def write200hex_named_local(out: TextOutputStream) -> None:
    """Same as write200hex, relying on the local guard going away."""
    saver = FormatGuard(out)  # noqa: F841 - restores when the function returns
    out << manip.hex << manip.uppercase << manip.setfill("0")
    write200(out)


class _BrokenStream(TextOutputStream):
    """Stream whose configuration cannot be applied."""

    def copyfmt(self, source: object) -> _BrokenStream:
        msg = "copyfmt unavailable"
        raise RuntimeError(msg)


# ============================================================================
# Construction
# ============================================================================


class TestConstruction:
    """Default and capturing construction."""

    def test_default_guard_is_unbound(self) -> None:
        """A default-constructed guard reports no stream."""
        assert FormatGuard().stream is None

    def test_capturing_guard_reports_stream(self, out: TextOutputStream) -> None:
        """Capturing construction binds to the given stream."""
        guard = FormatGuard(out)

        assert guard.stream is out

    def test_capturing_construction_does_not_mutate(self) -> None:
        """Capturing only reads the stream's configuration."""
        out = TextOutputStream()
        out << manip.hex << manip.setw(7)
        before = out.format_state()

        guard = FormatGuard(out)

        assert out.format_state() == before
        assert guard.saved_state == before

    def test_default_guard_holds_default_state(self) -> None:
        """The snapshot holder exists even while unbound."""
        assert FormatGuard().saved_state == FormatState()

    def test_unit_aliases(self) -> None:
        """Text and byte aliases construct ordinary guards."""
        text_guard = TextFormatGuard(TextOutputStream())
        byte_guard = ByteFormatGuard(ByteOutputStream())

        assert isinstance(text_guard, FormatGuard)
        assert isinstance(byte_guard, FormatGuard)
        assert text_guard.stream is not None
        assert byte_guard.stream is not None

    def test_unit_guards_refuse_other_unit(self) -> None:
        """Text and byte guards check the stream unit when binding."""
        with pytest.raises(StreamTypeError) as exc_info:
            TextFormatGuard(ByteOutputStream())

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code == DiagnosticCode.GUARD_UNIT_MISMATCH
        with pytest.raises(StreamTypeError):
            ByteFormatGuard().capture(TextOutputStream())

    def test_refused_capture_keeps_binding(self, out: TextOutputStream) -> None:
        """A refused rebind neither restores nor unbinds the current stream."""
        guard = TextFormatGuard(out)
        out << manip.hex

        with pytest.raises(StreamTypeError):
            guard.capture(ByteOutputStream())

        assert guard.stream is out
        assert out.format_state().base == 16

    def test_refused_move_leaves_source_bound(self) -> None:
        """assign() checks the unit before taking the binding."""
        source = FormatGuard(ByteOutputStream())

        with pytest.raises(StreamTypeError):
            TextFormatGuard().assign(source)

        assert source.stream is not None

    def test_plain_guard_binds_either_unit(self) -> None:
        """FormatGuard itself does not restrict the unit."""
        assert FormatGuard(ByteOutputStream()).stream is not None
        assert FormatGuard(TextOutputStream()).stream is not None

    def test_repr_reflects_binding(self, out: TextOutputStream) -> None:
        """repr() shows whether the guard is bound."""
        guard = FormatGuard()
        assert "unbound" in repr(guard)

        guard.capture(out)
        assert "TextOutputStream" in repr(guard)


# ============================================================================
# Capture / restore / release
# ============================================================================


class TestCaptureRestoreRelease:
    """Explicit state transitions."""

    def test_restore_reapplies_snapshot(self, out: TextOutputStream) -> None:
        """restore() puts the captured configuration back."""
        guard = FormatGuard(out)
        out << manip.hex << manip.uppercase

        guard.restore()

        assert out.format_state() == FormatState()
        assert guard.stream is out

    def test_restore_with_release_unbinds(self, out: TextOutputStream) -> None:
        """restore(release=True) restores and then unbinds."""
        guard = FormatGuard(out)
        out << manip.oct

        guard.restore(release=True)

        assert out.format_state().base == 10
        assert guard.stream is None

    def test_restore_unbound_is_noop(self, out: TextOutputStream) -> None:
        """restore() on an unbound guard touches nothing."""
        out << manip.hex
        state = out.format_state()

        FormatGuard().restore()
        FormatGuard().restore(release=True)

        assert out.format_state() == state

    def test_release_disarms(self, out: TextOutputStream) -> None:
        """After release() the guard never restores."""
        guard = FormatGuard(out)
        out << manip.hex
        guard.release()
        guard.restore()
        del guard

        assert out.format_state().base == 16

    def test_release_is_idempotent(self, out: TextOutputStream) -> None:
        """Releasing twice or releasing an unbound guard is harmless."""
        guard = FormatGuard(out)
        guard.release()
        guard.release()
        FormatGuard().release()

        assert guard.stream is None

    def test_capture_binds_unbound_guard(self, out: TextOutputStream) -> None:
        """capture() on an unbound guard binds and snapshots."""
        out << manip.showpos
        guard = FormatGuard()

        result = guard.capture(out)

        assert result is guard
        assert guard.stream is out
        assert guard.saved_state.flags & FmtFlags.SHOWPOS

    def test_capture_while_bound_restores_previous_stream(self) -> None:
        """Rebinding restores the stream the guard was bound to."""
        first = TextOutputStream()
        second = TextOutputStream()
        second << manip.oct
        guard = FormatGuard(first)
        first << manip.hex << manip.setfill("*")

        guard.capture(second)

        assert first.format_state() == FormatState()
        assert guard.stream is second
        assert guard.saved_state == second.format_state()

    def test_capture_same_stream_resnapshots(self, out: TextOutputStream) -> None:
        """Rebinding to the same stream restores, then snapshots afresh."""
        guard = FormatGuard(out)
        out << manip.hex

        guard.capture(out)
        out << manip.oct
        guard.restore()

        assert out.format_state().base == 10

    def test_snapshot_follows_latest_bind(self) -> None:
        """The snapshot is never stale after a rebind."""
        first = TextOutputStream()
        second = TextOutputStream()
        second << manip.scientific << manip.setprecision(3)
        guard = FormatGuard(first)

        guard.capture(second)
        second << manip.fixed << manip.setprecision(9)
        guard.restore()

        assert second.format_state().precision == 3
        assert second.format_state().flags & FmtFlags.FLOATFIELD == FmtFlags.SCIENTIFIC

    def test_close_restores_and_unbinds(self, out: TextOutputStream) -> None:
        """close() is restore(release=True)."""
        guard = FormatGuard(out)
        out << manip.left

        guard.close()

        assert out.format_state() == FormatState()
        assert guard.stream is None


# ============================================================================
# Move-only ownership
# ============================================================================


class TestOwnership:
    """Guards move, never copy."""

    def test_move_construct_from_bound(self, out: TextOutputStream) -> None:
        """moved_from() transfers the binding and leaves the source inert."""
        src = FormatGuard(out)
        dst = FormatGuard.moved_from(src)

        assert src.stream is None
        assert dst.stream is out

    def test_move_construct_from_unbound(self) -> None:
        """Moving an unbound guard yields two unbound guards."""
        src = FormatGuard()
        dst = FormatGuard.moved_from(src)

        assert src.stream is None
        assert dst.stream is None

    def test_move_copies_snapshot(self, out: TextOutputStream) -> None:
        """The destination restores the source's snapshot."""
        src = FormatGuard(out)
        out << manip.hex
        dst = FormatGuard.moved_from(src)

        dst.restore()

        assert out.format_state().base == 10

    def test_move_does_not_restore(self, out: TextOutputStream) -> None:
        """Moving is not a restore on either side."""
        src = FormatGuard(out)
        out << manip.hex

        dst = FormatGuard.moved_from(src)
        del src

        assert out.format_state().base == 16
        assert dst.stream is out

    def test_move_assign_from_bound(self, out: TextOutputStream) -> None:
        """assign() transfers binding and snapshot."""
        dst = FormatGuard()
        src = FormatGuard(out)

        result = dst.assign(src)

        assert result is dst
        assert src.stream is None
        assert dst.stream is out

    def test_move_assign_from_unbound(self) -> None:
        """Assigning from an unbound guard leaves both unbound."""
        dst = FormatGuard()
        src = FormatGuard()
        dst.assign(src)

        assert src.stream is None
        assert dst.stream is None

    def test_move_assign_to_self_is_noop(self, out: TextOutputStream) -> None:
        """Self-assignment keeps the binding."""
        guard = FormatGuard(out)

        guard.assign(guard)

        assert guard.stream is out

    def test_move_assign_drops_previous_binding(self) -> None:
        """The destination's old stream is left as it is."""
        first = TextOutputStream()
        second = TextOutputStream()
        dst = FormatGuard(first)
        first << manip.hex
        src = FormatGuard(second)

        dst.assign(src)

        assert first.format_state().base == 16
        assert dst.stream is second

    def test_copy_is_rejected(self, out: TextOutputStream) -> None:
        """Shallow copies would duplicate responsibility."""
        guard = FormatGuard(out)

        with pytest.raises(TypeError):
            copy.copy(guard)

    def test_deepcopy_is_rejected(self, out: TextOutputStream) -> None:
        """Deep copies are rejected as well."""
        with pytest.raises(TypeError):
            copy.deepcopy(FormatGuard(out))

    def test_pickle_is_rejected(self) -> None:
        """Pickling would resurrect a second owner."""
        with pytest.raises(TypeError):
            pickle.dumps(FormatGuard())


# ============================================================================
# Scope-bound idiom
# ============================================================================


class TestScopeBound:
    """Restoration at the end of a scope."""

    def test_write200_scenario(self, out: TextOutputStream) -> None:
        """Guarded hex output between two plain writes."""
        write200(out)
        write200hex(out)
        write200(out)

        assert out.getvalue() == " 200\n00C8\n 200\n"

    def test_write200_scenario_named_local(self, out: TextOutputStream) -> None:
        """A named local guard restores when its function returns."""
        write200(out)
        write200hex_named_local(out)
        write200(out)

        assert out.getvalue() == " 200\n00C8\n 200\n"

    def test_write200_scenario_bytes(self) -> None:
        """Byte streams behave identically."""
        out = ByteOutputStream()

        write200(out)
        write200hex(out)
        write200(out)

        assert out.getvalue() == b" 200\n00C8\n 200\n"

    def test_with_block_unbinds(self, out: TextOutputStream) -> None:
        """Leaving the block restores and releases."""
        with FormatGuard(out) as guard:
            assert guard.stream is out
            out << manip.hex

        assert guard.stream is None
        assert out.format_state().base == 10

    def test_with_block_restores_on_exception(self, out: TextOutputStream) -> None:
        """Exceptions propagate and the format is still restored."""
        error_msg = "boom"

        with pytest.raises(ValueError, match=error_msg), FormatGuard(out):
            out << manip.hex << manip.showbase
            raise ValueError(error_msg)

        assert out.format_state() == FormatState()

    def test_early_return_restores(self, out: TextOutputStream) -> None:
        """Every exit path restores."""

        def report(value: int) -> str:
            with FormatGuard(out):
                out << manip.hex
                if value > 100:
                    return "big"
                out << manip.oct
            return "small"

        assert report(255) == "big"
        assert out.format_state().base == 10
        assert report(5) == "small"
        assert out.format_state().base == 10

    def test_preserved_format_yields_stream(self, out: TextOutputStream) -> None:
        """preserved_format() is a with-block over a fresh guard."""
        with preserved_format(out) as stream:
            assert stream is out
            stream << manip.hex << manip.uppercase << 255

        out << 255
        assert out.getvalue() == "FF255"

    def test_nested_guards_unwind(self, out: TextOutputStream) -> None:
        """Inner guards restore to the outer guarded configuration."""
        with FormatGuard(out):
            out << manip.hex
            with FormatGuard(out):
                out << manip.uppercase << manip.showbase
            assert out.format_state().flags & FmtFlags.HEX
            assert not out.format_state().flags & FmtFlags.UPPERCASE

        assert out.format_state() == FormatState()


# ============================================================================
# Finalization
# ============================================================================


class TestFinalization:
    """Restore when the guard object goes away."""

    def test_finalizer_restores_bound_guard(self, out: TextOutputStream) -> None:
        """Dropping the last reference restores."""
        guard = FormatGuard(out)
        out << manip.hex
        del guard

        assert out.format_state().base == 10

    def test_finalizer_ignores_unbound_guard(self, out: TextOutputStream) -> None:
        """An unbound guard's finalizer does nothing."""
        guard = FormatGuard(out)
        guard.release()
        out << manip.oct
        del guard

        assert out.format_state().base == 8

    def test_finalizer_logs_and_swallows_errors(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A failing restore during finalization is logged, not raised."""
        guard = FormatGuard(_BrokenStream())

        with caplog.at_level(logging.ERROR, logger="fmtguard.guard"):
            del guard

        assert "Format restore failed while finalizing guard" in caplog.text

    def test_explicit_restore_propagates_errors(self) -> None:
        """Direct restore() calls let errors through."""
        guard = FormatGuard(_BrokenStream())

        with pytest.raises(RuntimeError, match="copyfmt unavailable"):
            guard.restore()
        guard.release()


# ============================================================================
# Expression-bound idiom
# ============================================================================


class TestExpressionBound:
    """Guards inserted into << and >> chains."""

    def test_inline_temporary(self, out: TextOutputStream) -> None:
        """The guard restores at the end of the statement it appears in."""
        out << manip.setw(4) << 200 << manip.endl
        out << FormatGuard() << manip.hex << manip.uppercase << manip.setfill("0") \
            << manip.setw(4) << 200 << manip.endl
        out << manip.setw(4) << 200 << manip.endl

        assert out.getvalue() == " 200\n00C8\n 200\n"

    def test_inline_temporary_on_byte_stream(self) -> None:
        """Byte streams support the inline form."""
        out = ByteOutputStream()
        out << "default: " << 42 << manip.endl
        out << "(temporary) hex: " << FormatGuard() << manip.hex << manip.uppercase \
            << 42 << manip.endl
        out << "restored: " << 42 << manip.endl

        assert out.getvalue() == b"default: 42\n(temporary) hex: 2A\nrestored: 42\n"

    def test_operator_returns_chain(self, out: TextOutputStream) -> None:
        """stream << guard captures and returns a GuardedChain."""
        guard = FormatGuard()

        chain = out << guard

        assert isinstance(chain, GuardedChain)
        assert chain.stream is out
        assert chain.guards == (guard,)
        assert guard.stream is out

    def test_named_guard_outlives_statement(self, out: TextOutputStream) -> None:
        """A named guard in a chain restores when the name goes away."""
        guard = FormatGuard()
        out << guard << manip.hex << 255 << manip.endl
        out << 255 << manip.endl

        assert guard.stream is out
        del guard
        out << 255 << manip.endl

        assert out.getvalue() == "ff\nff\n255\n"

    def test_several_guards_in_one_chain(self, out: TextOutputStream) -> None:
        """Nested guards in one expression unwind to the original state."""
        out << FormatGuard() << manip.hex << FormatGuard() << manip.uppercase \
            << 255 << manip.endl
        out << 255

        assert out.getvalue() == "FF\n255"

    def test_chain_as_context_manager(self, out: TextOutputStream) -> None:
        """A chain can scope its guards explicitly."""
        with out << FormatGuard() as chain:
            chain << manip.hex << manip.showbase << 255
            guard = chain.guards[0]

        assert guard.stream is None
        assert out.format_state() == FormatState()
        assert out.getvalue() == "0xff"

    def test_raising_operand_restores_before_handler(self, out: TextOutputStream) -> None:
        """A chain that raises unwinds its guards before the error reaches the caller."""
        with pytest.raises(StreamFormatError) as exc_info:
            out << FormatGuard() << manip.hex << FormatGuard() << manip.uppercase \
                << manip.setfill("ab") << 200

        # exc_info still holds the traceback, and with it the chain frame.
        assert exc_info.type is StreamFormatError
        out << 200

        assert out.getvalue() == "200"
        assert out.format_state() == FormatState()

    def test_raising_guards_are_released(self, out: TextOutputStream) -> None:
        """Unwound guards end up unbound."""
        guard = FormatGuard()

        with pytest.raises(StreamTypeError):
            out << guard << manip.oct << manip.ws

        assert guard.stream is None
        assert out.format_state().base == 10

    def test_failed_extraction_restores_input_format(self) -> None:
        """>> chains unwind on extraction errors as well."""
        source = TextInputStream("zz 10")

        with pytest.raises(ExtractionError):
            source >> FormatGuard() >> manip.hex >> manip.noskipws >> Slot(int)

        assert source.format_state() == FormatState()
        assert source.fail()

    def test_chain_restores_imbued_locale(self, out: TextOutputStream) -> None:
        """The locale is part of what an inline guard puts back."""
        out << FormatGuard() << manip.imbue("de_DE") << manip.fixed \
            << manip.setprecision(2) << 3.5 << " " << 1234567
        out << " " << 1234567

        assert out.getvalue() == "3,50 1.234.567 1234567"
        assert out.getloc() is None

    def test_extraction_chain(self) -> None:
        """stream >> guard restores the input stream's base afterwards."""
        source = TextInputStream("ff 255")
        first = Slot(int)
        second = Slot(int)

        source >> FormatGuard() >> manip.hex >> first
        source >> second

        assert first.value == 255
        assert second.value == 255
        assert source.format_state().base == 10


# ============================================================================
# Properties
# ============================================================================


def _formatted(state: FormatState, value: object) -> str:
    return render(value, state)


class TestGuardProperties:
    """Round-trip, idempotence, exclusivity."""

    @given(initial=format_states, changes=manipulator_sequences, value=printable_values)
    def test_round_trip(
        self, initial: FormatState, changes: list[manip.Manipulator], value: object
    ) -> None:
        """Mutate, restore: the stream formats exactly as before.

        Events emitted:
        - changes={n}: Number of manipulators applied
        """
        event(f"changes={len(changes)}")
        out = TextOutputStream().copyfmt(initial)
        expected = _formatted(initial, value)
        guard = FormatGuard(out)

        for change in changes:
            out << change
        guard.restore()

        assert out.format_state() == initial
        assert _formatted(out.format_state(), value) == expected

    @given(initial=format_states, changes=manipulator_sequences)
    def test_restore_is_idempotent(
        self, initial: FormatState, changes: list[manip.Manipulator]
    ) -> None:
        """Restoring twice equals restoring once."""
        out = TextOutputStream().copyfmt(initial)
        guard = FormatGuard(out)
        for change in changes:
            out << change

        guard.restore()
        once = out.format_state()
        guard.restore()

        assert out.format_state() == once == initial

    @given(initial=format_states, changes=manipulator_sequences)
    def test_move_transfers_exclusively(
        self, initial: FormatState, changes: list[manip.Manipulator]
    ) -> None:
        """After a move only the destination restores."""
        out = TextOutputStream().copyfmt(initial)
        src = FormatGuard(out)
        for change in changes:
            out << change
        mutated = out.format_state()

        dst = FormatGuard.moved_from(src)
        src.restore()

        assert out.format_state() == mutated
        dst.restore()
        assert out.format_state() == initial

    @given(changes=manipulator_sequences, explicit=st.booleans())
    def test_unbound_policy_consistent(
        self, changes: list[manip.Manipulator], explicit: bool
    ) -> None:
        """Unbound guards never act, whether called or finalized."""
        out = TextOutputStream()
        guard = FormatGuard(out)
        guard.release()
        for change in changes:
            out << change
        mutated = out.format_state()

        if explicit:
            guard.restore()
        del guard

        assert out.format_state() == mutated

    @pytest.mark.fuzz
    @settings(max_examples=5000, deadline=None)
    @given(initial=format_states, changes=manipulator_sequences, value=printable_values)
    def test_chain_round_trip_intensive(
        self, initial: FormatState, changes: list[manip.Manipulator], value: object
    ) -> None:
        """Inline guards leave the stream exactly as they found it."""
        out = TextOutputStream().copyfmt(initial)
        chain = out << FormatGuard()
        for change in changes:
            chain << change
        chain << value
        del chain

        assert out.format_state() == initial
