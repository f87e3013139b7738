"""
FaultSink - Core error values and kind taxonomy.

Defines:
- ErrorKind (explicit, extensible kind tags)
- ErrorValue (an error with an optional wrapped cause)
- CompositeError (ordered sibling errors)
- UndeliverableError (one-layer delivery wrapper)
- chain_contains_any_of (cause-chain matching)
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Optional


# ============================================================================
# ErrorKind - Kind taxonomy
# ============================================================================

class ErrorKind:
    """
    Error kind tag.

    Every ErrorValue carries exactly one kind, attached at construction.
    Matching is plain tag comparison: two kinds are equal when their names
    are equal. The standard kinds below cover the default rule set; custom
    kinds can be created freely (the exception adapter names unmapped
    exceptions after their class).
    """

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.value = name  # For compatibility with Enum consumers
        self.description = description

    @classmethod
    def get(cls, name: str) -> ErrorKind:
        """Resolve a kind name to a standard kind, or create a custom one."""
        return _STANDARD_KINDS.get(name) or cls(name)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"ErrorKind(name='{self.name}')"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, ErrorKind):
            return self.name == other.name
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(self.name)


# Standard Kinds
ErrorKind.IO = ErrorKind("io", "Input/output failure")
ErrorKind.CONNECTION_RESET = ErrorKind("connection_reset", "Connection reset or aborted")
ErrorKind.INTERRUPTED = ErrorKind("interrupted", "Blocked operation interrupted or cancelled")
ErrorKind.INTERRUPTED_IO = ErrorKind("interrupted_io", "Blocked I/O operation interrupted")
ErrorKind.NULL_REFERENCE = ErrorKind("null_reference", "Operation on a missing (None) value")
ErrorKind.INVALID_ARGUMENT = ErrorKind("invalid_argument", "Invalid argument")
ErrorKind.HANDLER_NOT_IMPLEMENTED = ErrorKind(
    "handler_not_implemented", "Pipeline error without an error callback"
)
ErrorKind.MISSING_BACKPRESSURE = ErrorKind(
    "missing_backpressure", "Producer outran consumer capacity"
)
ErrorKind.INVALID_STATE = ErrorKind("invalid_state", "Operation in an invalid state")
ErrorKind.COMPOSITE = ErrorKind("composite", "Several errors reported together")
ErrorKind.UNDELIVERABLE = ErrorKind("undeliverable", "Error with no listener left")
ErrorKind.UNKNOWN = ErrorKind("unknown", "Unrecognized error")

_STANDARD_KINDS = {
    kind.name: kind
    for kind in (
        ErrorKind.IO,
        ErrorKind.CONNECTION_RESET,
        ErrorKind.INTERRUPTED,
        ErrorKind.INTERRUPTED_IO,
        ErrorKind.NULL_REFERENCE,
        ErrorKind.INVALID_ARGUMENT,
        ErrorKind.HANDLER_NOT_IMPLEMENTED,
        ErrorKind.MISSING_BACKPRESSURE,
        ErrorKind.INVALID_STATE,
        ErrorKind.COMPOSITE,
        ErrorKind.UNDELIVERABLE,
        ErrorKind.UNKNOWN,
    )
}


# ============================================================================
# ErrorValue - Base error value
# ============================================================================

class ErrorValue:
    """
    An error as seen by the triage pipeline.

    Attributes:
        kind: Kind tag used for classification
        message: Human-readable summary (optional)
        cause: Wrapped underlying error (optional, owned)
        origin: Python exception this value was adapted from (optional).
            Only used as payload when logging or reporting.

    Cause chains are finite: a value can only wrap a value that already
    exists, so a chain built through this constructor cannot loop.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: Optional[str] = None,
        *,
        cause: Optional[ErrorValue] = None,
        origin: Optional[BaseException] = None,
    ):
        if cause is self:
            raise ValueError("An error cannot be its own cause")
        self.kind = kind
        self.message = message
        self._cause = cause
        self.origin = origin

    @property
    def cause(self) -> Optional[ErrorValue]:
        """Wrapped underlying error. Fixed at construction."""
        return self._cause

    def chain(self) -> Iterator[ErrorValue]:
        """Iterate this error followed by each wrapped cause."""
        current: Optional[ErrorValue] = self
        seen: set[int] = set()
        while current is not None and id(current) not in seen:
            seen.add(id(current))
            yield current
            current = current.cause

    def root_cause(self) -> ErrorValue:
        """Return the innermost error of the cause chain."""
        for link in self.chain():
            last = link
        return last

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize error to dictionary.

        Returns:
            Dictionary representation suitable for logging/serialization
        """
        return {
            "kind": self.kind.value,
            "message": self.message,
            "origin": type(self.origin).__name__ if self.origin is not None else None,
            "cause": self.cause.to_dict() if self.cause is not None else None,
        }

    def __str__(self) -> str:
        if self.message:
            return f"[{self.kind}] {self.message}"
        return f"[{self.kind}]"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r})"


class CompositeError(ErrorValue):
    """
    Several independent errors reported together.

    Sibling order is preserved from construction and is significant:
    the triage sink evaluates siblings first to last.
    """

    def __init__(
        self,
        errors: Iterable[ErrorValue],
        message: Optional[str] = None,
        *,
        origin: Optional[BaseException] = None,
    ):
        errors = tuple(errors)
        if not errors:
            raise ValueError("A composite error needs at least one sibling")
        super().__init__(
            ErrorKind.COMPOSITE,
            message or f"{len(errors)} errors occurred",
            origin=origin,
        )
        self.errors = errors

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["errors"] = [error.to_dict() for error in self.errors]
        return data


class UndeliverableError(ErrorValue):
    """
    Delivery wrapper: the inner error could not reach any listener.

    Carries no classification meaning of its own. The inner error doubles
    as the wrapper's cause, so cause-chain matching sees through it.
    """

    def __init__(
        self,
        inner: ErrorValue,
        message: Optional[str] = None,
        *,
        origin: Optional[BaseException] = None,
    ):
        super().__init__(
            ErrorKind.UNDELIVERABLE,
            message or "The error could not be delivered",
            cause=inner,
            origin=origin,
        )
        self.inner = inner


# ============================================================================
# Chain matching
# ============================================================================

def chain_contains_any_of(error: ErrorValue, kinds: Iterable[ErrorKind]) -> bool:
    """
    Check whether any link of the cause chain has one of ``kinds``.

    Only wrapped causes are followed; the siblings of a composite error are
    not inspected here.

    Args:
        error: First link of the chain
        kinds: Kinds to look for

    Returns:
        True on the first matching link, False if none matches
    """
    kinds = kinds if isinstance(kinds, (set, frozenset)) else frozenset(kinds)
    if not kinds:
        return False
    return any(link.kind in kinds for link in error.chain())
