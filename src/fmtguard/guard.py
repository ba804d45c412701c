"""Format guard: capture a stream's formatting configuration and restore it.

A FormatGuard binds to a FormatStream, snapshots its FormatState, and puts
that snapshot back on request or when the guard's lifetime ends. Exactly one
guard is responsible for a given capture: guards cannot be copied, only moved.

Scope-bound use:
    def report_hex(out, n):
        with FormatGuard(out):
            out << manip.hex << manip.uppercase << n << manip.endl
        # out's formatting is back to what it was

Expression-bound use:
    out << FormatGuard() << manip.hex << manip.uppercase << 200 << manip.endl
    out << 200 << manip.endl  # decimal again

In the expression form the stream operator captures into the guard and hands
back a GuardedChain that owns it. When the statement finishes, the chain and
its guard are finalized and the guard restores the stream.

Policy decisions:
    - restore() on an unbound guard is a silent no-op.
    - "Is active" is expressed only through the ``stream`` property (None when
      unbound); guards have no boolean conversion.
    - capture() while bound and finalization both go through restore(), so an
      unbound guard never touches any stream.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, ClassVar, NoReturn, Self

from fmtguard.diagnostics import ErrorTemplate, StreamTypeError
from fmtguard.state import FormatState

if TYPE_CHECKING:
    from types import TracebackType

    from fmtguard.stream.base import FormatStream

__all__ = [
    "ByteFormatGuard",
    "FormatGuard",
    "GuardedChain",
    "TextFormatGuard",
    "preserved_format",
]

logger = logging.getLogger(__name__)


class FormatGuard[UnitT: (str, bytes)]:
    """Move-only holder of one stream's formatting snapshot.

    States:
        UNBOUND: ``stream`` is None; restore() and finalization do nothing.
        BOUND: ``stream`` is the captured stream; ``saved_state`` holds its
            configuration as of the last bind.

    Thread Safety:
        None. A guard and the stream it is bound to belong to one thread.

    Lifetime:
        The guard keeps a plain reference to the stream but never closes it.
        A bound guard restores when a ``with`` block over it exits, when
        close() is called, or when the guard object is finalized.

    Unit checking:
        A plain FormatGuard binds to any stream. TextFormatGuard and
        ByteFormatGuard set ``unit_type`` and refuse streams of the other
        unit with StreamTypeError.
    """

    __slots__ = ("__weakref__", "_bound_stream", "_saved_state")

    unit_type: ClassVar[type | None] = None

    def __init__(self, stream: FormatStream[UnitT] | None = None) -> None:
        """Create an unbound guard, or bind to ``stream`` and snapshot it."""
        self._bound_stream: FormatStream[UnitT] | None = None
        self._saved_state = FormatState()
        if stream is not None:
            self._bind(stream)

    def _check_unit(self, stream: FormatStream[UnitT]) -> None:
        if self.unit_type is not None and stream.unit_type is not self.unit_type:
            raise StreamTypeError(
                ErrorTemplate.guard_unit_mismatch(
                    type(self).__name__, type(stream).__name__
                )
            )

    def _bind(self, stream: FormatStream[UnitT]) -> None:
        self._check_unit(stream)
        self._saved_state = stream.format_state()
        self._bound_stream = stream
        logger.debug("Captured format of %s", type(stream).__name__)

    # ------------------------------------------------------------------
    # Ownership transfer
    # ------------------------------------------------------------------

    @classmethod
    def moved_from(cls, other: FormatGuard[UnitT]) -> FormatGuard[UnitT]:
        """Move-construct: take ``other``'s binding and copy its snapshot.

        ``other`` is left unbound. Neither guard restores anything.
        """
        guard: FormatGuard[UnitT] = cls()
        return guard.assign(other)

    def assign(self, other: FormatGuard[UnitT]) -> Self:
        """Move-assign: take ``other``'s binding and copy its snapshot.

        Any binding this guard held is dropped without a restore. Assigning
        a guard to itself changes nothing.
        """
        if other is not self:
            if other._bound_stream is not None:
                self._check_unit(other._bound_stream)
            self._bound_stream, other._bound_stream = other._bound_stream, None
            self._saved_state = other._saved_state
            logger.debug("Moved format guard binding")
        return self

    def __copy__(self) -> NoReturn:
        msg = "FormatGuard cannot be copied; use FormatGuard.moved_from()"
        raise TypeError(msg)

    def __deepcopy__(self, memo: dict[int, Any]) -> NoReturn:
        self.__copy__()

    def __reduce_ex__(self, protocol: Any) -> NoReturn:
        msg = "FormatGuard cannot be pickled"
        raise TypeError(msg)

    # ------------------------------------------------------------------
    # Capture / restore / release
    # ------------------------------------------------------------------

    def capture(self, stream: FormatStream[UnitT]) -> Self:
        """Restore the currently bound stream (if any), then bind to ``stream``.

        Postcondition: bound to ``stream`` with its current configuration saved.
        """
        self._check_unit(stream)
        self.restore()
        self._bind(stream)
        return self

    def restore(self, release: bool = False) -> None:
        """Put the saved configuration back on the bound stream.

        Does nothing when unbound. Repeated calls re-apply the same snapshot.

        Args:
            release: Also unbind after restoring
        """
        stream = self._bound_stream
        if stream is None:
            return
        stream.copyfmt(self._saved_state)
        logger.debug("Restored format of %s", type(stream).__name__)
        if release:
            self._bound_stream = None

    def release(self) -> None:
        """Unbind without touching the stream."""
        if self._bound_stream is not None:
            logger.debug("Released format guard")
        self._bound_stream = None

    def close(self) -> None:
        """Restore and unbind."""
        self.restore(release=True)

    @property
    def stream(self) -> FormatStream[UnitT] | None:
        """The bound stream, or None when the guard is inactive."""
        return self._bound_stream

    @property
    def saved_state(self) -> FormatState:
        """The snapshot taken at the last bind."""
        return self._saved_state

    # ------------------------------------------------------------------
    # Scope end
    # ------------------------------------------------------------------

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.restore(release=True)

    def __del__(self) -> None:
        # Errors must not escape finalization.
        try:
            self.restore()
        except Exception:  # pylint: disable=broad-exception-caught
            logger.exception("Format restore failed while finalizing guard")

    def __repr__(self) -> str:
        if self._bound_stream is None:
            return f"<{type(self).__name__} unbound>"
        return f"<{type(self).__name__} bound to {type(self._bound_stream).__name__}>"


class GuardedChain[UnitT: (str, bytes)]:
    """Stream proxy returned by ``stream << guard`` and ``stream >> guard``.

    Forwards every further ``<<`` / ``>>`` to the stream and keeps the guards
    it was handed alive for as long as the chain itself lives, which for an
    unnamed chain is the end of the statement. Guards are released in reverse
    order of capture, so nested guards unwind innermost first.

    As a context manager the chain restores and releases its guards on exit:

        with out << FormatGuard() as chain:
            chain << manip.hex << 255
    """

    __slots__ = ("_guards", "_stream")

    def __init__(self, stream: FormatStream[UnitT], guard: FormatGuard[UnitT]) -> None:
        self._stream = stream
        self._guards: list[FormatGuard[UnitT]] = []
        self._guards.append(guard.capture(stream))

    def _forward(self, item: object, op: str) -> Self:
        # A raising operand keeps this frame (and the chain) alive in the
        # traceback, so the guards are unwound here rather than at finalization.
        try:
            if isinstance(item, FormatGuard):
                self._guards.append(item.capture(self._stream))
            elif op == "<<":
                self._stream << item  # type: ignore[operator]
            else:
                self._stream >> item  # type: ignore[operator]
        except BaseException:
            self._unwind()
            raise
        return self

    def _unwind(self) -> None:
        for guard in reversed(self._guards):
            guard.restore(release=True)

    def __lshift__(self, item: object) -> Self:
        return self._forward(item, "<<")

    def __rshift__(self, item: object) -> Self:
        return self._forward(item, ">>")

    @property
    def stream(self) -> FormatStream[UnitT]:
        """The underlying stream."""
        return self._stream

    @property
    def guards(self) -> tuple[FormatGuard[UnitT], ...]:
        """Guards owned by this chain, in capture order."""
        return tuple(self._guards)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self._unwind()

    def __del__(self) -> None:
        # Drop guards innermost first; unshared ones restore as they go.
        while self._guards:
            self._guards.pop()


class TextFormatGuard(FormatGuard[str]):
    """FormatGuard that only binds to text (str) streams."""

    __slots__ = ()
    unit_type = str


class ByteFormatGuard(FormatGuard[bytes]):
    """FormatGuard that only binds to byte streams."""

    __slots__ = ()
    unit_type = bytes


@contextmanager
def preserved_format[StreamT: FormatStream[Any]](stream: StreamT) -> Iterator[StreamT]:
    """Run a block with ``stream``'s formatting restored afterwards.

    Example:
        >>> with preserved_format(out):
        ...     out << manip.hex << 255
    """
    with FormatGuard(stream):
        yield stream
