"""
FaultSink - Exception adapter.

Converts raw Python exceptions into ErrorValues. This is the only place
where Python exception types are inspected; the rest of the pipeline
compares kind tags.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import queue
from dataclasses import dataclass
from typing import Callable, Optional

from .core import CompositeError, ErrorKind, ErrorValue
from .exceptions import ErrorHandlerNotImplemented, MissingBackpressureError


def _raised_on_none(exc: BaseException) -> bool:
    return "'NoneType' object" in str(exc)


@dataclass(frozen=True, slots=True)
class ExceptionMapping:
    """Maps an exception type to an error kind."""
    exception_type: type[BaseException]
    kind: ErrorKind
    predicate: Optional[Callable[[BaseException], bool]] = None
    exact: bool = False

    def matches(self, exc: BaseException) -> bool:
        if self.exact:
            if type(exc) is not self.exception_type:
                return False
        elif not isinstance(exc, self.exception_type):
            return False
        return self.predicate is None or self.predicate(exc)


DEFAULT_MAPPINGS: tuple[ExceptionMapping, ...] = (
    # Network api cancellation
    ExceptionMapping(ConnectionResetError, ErrorKind.CONNECTION_RESET),
    ExceptionMapping(ConnectionAbortedError, ErrorKind.CONNECTION_RESET),
    ExceptionMapping(BrokenPipeError, ErrorKind.CONNECTION_RESET),

    # Blocking code disposed
    ExceptionMapping(InterruptedError, ErrorKind.INTERRUPTED),
    ExceptionMapping(asyncio.CancelledError, ErrorKind.INTERRUPTED),
    ExceptionMapping(concurrent.futures.CancelledError, ErrorKind.INTERRUPTED),
    ExceptionMapping(TimeoutError, ErrorKind.INTERRUPTED_IO),
    ExceptionMapping(EOFError, ErrorKind.IO),
    ExceptionMapping(OSError, ErrorKind.IO),

    # Bugs in application code
    ExceptionMapping(AttributeError, ErrorKind.NULL_REFERENCE, predicate=_raised_on_none),
    ExceptionMapping(TypeError, ErrorKind.NULL_REFERENCE, predicate=_raised_on_none),
    ExceptionMapping(TypeError, ErrorKind.INVALID_ARGUMENT),
    ExceptionMapping(ValueError, ErrorKind.INVALID_ARGUMENT),

    # Bugs in pipeline operators
    ExceptionMapping(ErrorHandlerNotImplemented, ErrorKind.HANDLER_NOT_IMPLEMENTED),
    ExceptionMapping(MissingBackpressureError, ErrorKind.MISSING_BACKPRESSURE),
    ExceptionMapping(asyncio.QueueFull, ErrorKind.MISSING_BACKPRESSURE),
    ExceptionMapping(queue.Full, ErrorKind.MISSING_BACKPRESSURE),
    ExceptionMapping(asyncio.InvalidStateError, ErrorKind.INVALID_STATE),
    ExceptionMapping(RuntimeError, ErrorKind.INVALID_STATE, exact=True),
)


class ExceptionAdapter:
    """
    Convert raw Python exceptions to ErrorValues.

    Mappings are tried in order and the first match decides the kind.
    Custom mappings are tried before the defaults. Exceptions matching no
    mapping get a custom kind named after their class, so rule sets can
    still name them.

    Exception groups become CompositeErrors with their members in order.
    The cause chain follows ``__cause__``, then ``__context__`` unless the
    context was suppressed.

    Usage:
        ```python
        adapter = ExceptionAdapter([
            ExceptionMapping(sqlite3.OperationalError, ErrorKind.IO),
        ])
        error = adapter.adapt(exc)
        ```
    """

    def __init__(self, custom_mappings: Optional[list[ExceptionMapping]] = None):
        """
        Initialize exception adapter.

        Args:
            custom_mappings: Additional exception mappings (checked first)
        """
        self.mappings: list[ExceptionMapping] = list(custom_mappings or [])
        self.mappings.extend(DEFAULT_MAPPINGS)

    def kind_of(self, exc: BaseException) -> ErrorKind:
        """Return the kind tag for a single exception (ignoring its cause)."""
        for mapping in self.mappings:
            if mapping.matches(exc):
                return mapping.kind
        return ErrorKind.get(type(exc).__name__)

    def adapt(self, exc: BaseException | ErrorValue) -> ErrorValue:
        """
        Convert an exception and its cause chain to an ErrorValue.

        Args:
            exc: Exception to convert (ErrorValues are returned as-is)

        Returns:
            ErrorValue (CompositeError for exception groups)
        """
        if isinstance(exc, ErrorValue):
            return exc
        return self._adapt(exc, set())

    def _adapt(self, exc: BaseException, seen: set[int]) -> ErrorValue:
        seen.add(id(exc))

        if isinstance(exc, BaseExceptionGroup):
            return CompositeError(
                [self._adapt(member, set(seen)) for member in exc.exceptions],
                exc.message,
                origin=exc,
            )

        cause = None
        underlying = _underlying(exc)
        # A chain that loops back onto itself is cut at the repeated link
        if underlying is not None and id(underlying) not in seen:
            cause = self._adapt(underlying, seen)

        return ErrorValue(
            self.kind_of(exc),
            str(exc) or None,
            cause=cause,
            origin=exc,
        )


def _underlying(exc: BaseException) -> Optional[BaseException]:
    if exc.__cause__ is not None:
        return exc.__cause__
    if exc.__suppress_context__:
        return None
    return exc.__context__
