"""
FaultSink - Unwrapper.

Strips the delivery wrapper and expands composite errors into the ordered
sibling sequence the sink triages.
"""

from __future__ import annotations

from .core import CompositeError, ErrorValue, UndeliverableError


def unwrap_delivery(raw: ErrorValue) -> ErrorValue:
    """
    Remove one layer of delivery wrapper, if present.

    A wrapper nested inside the inner error is left alone.
    """
    if isinstance(raw, UndeliverableError):
        return raw.inner
    return raw


def flatten(raw: ErrorValue) -> tuple[ErrorValue, ...]:
    """
    Turn an incoming error into the ordered siblings to classify.

    1. Unwrap exactly one delivery wrapper
    2. Expand a composite into its siblings (order preserved)
    3. Otherwise yield the error alone

    Composite expansion only happens at this top level; composites found
    deeper (as a sibling or as a cause) are not expanded.

    Args:
        raw: Error received from the runtime

    Returns:
        Non-empty tuple of errors
    """
    actual = unwrap_delivery(raw)
    if isinstance(actual, CompositeError):
        return actual.errors
    return (actual,)
