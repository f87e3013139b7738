"""
Test 1: Error model (faultsink/core.py)

Tests ErrorKind, ErrorValue, CompositeError, UndeliverableError,
chain_contains_any_of.
"""

import pytest

from faultsink.core import (
    CompositeError,
    ErrorKind,
    ErrorValue,
    UndeliverableError,
    chain_contains_any_of,
)


# ============================================================================
# ErrorKind
# ============================================================================

class TestErrorKind:

    def test_standard_kinds(self):
        assert ErrorKind.IO.name == "io"
        assert ErrorKind.CONNECTION_RESET.name == "connection_reset"
        assert ErrorKind.INTERRUPTED.name == "interrupted"
        assert ErrorKind.INTERRUPTED_IO.name == "interrupted_io"
        assert ErrorKind.NULL_REFERENCE.name == "null_reference"
        assert ErrorKind.INVALID_ARGUMENT.name == "invalid_argument"
        assert ErrorKind.HANDLER_NOT_IMPLEMENTED.name == "handler_not_implemented"
        assert ErrorKind.MISSING_BACKPRESSURE.name == "missing_backpressure"
        assert ErrorKind.INVALID_STATE.name == "invalid_state"

    def test_custom_kind(self):
        custom = ErrorKind("payments", "Payment errors")
        assert custom.name == "payments"
        assert custom.description == "Payment errors"

    def test_kind_equality(self):
        assert ErrorKind("io") == ErrorKind.IO
        assert ErrorKind("io") != ErrorKind.INVALID_STATE

    def test_kind_hashable(self):
        assert ErrorKind("io") in {ErrorKind.IO}

    def test_get_returns_standard_instance(self):
        assert ErrorKind.get("invalid_state") is ErrorKind.INVALID_STATE

    def test_get_creates_custom(self):
        kind = ErrorKind.get("KeyError")
        assert kind.name == "KeyError"
        assert kind == ErrorKind("KeyError")


# ============================================================================
# ErrorValue
# ============================================================================

class TestErrorValue:

    def test_basic(self):
        error = ErrorValue(ErrorKind.IO, "socket closed")
        assert error.kind == ErrorKind.IO
        assert error.message == "socket closed"
        assert error.cause is None
        assert error.origin is None

    def test_str(self):
        assert str(ErrorValue(ErrorKind.IO, "socket closed")) == "[io] socket closed"
        assert str(ErrorValue(ErrorKind.IO)) == "[io]"

    def test_chain(self):
        root = ErrorValue(ErrorKind.IO, "root")
        middle = ErrorValue(ErrorKind.INVALID_STATE, "middle", cause=root)
        top = ErrorValue(ErrorKind.UNKNOWN, "top", cause=middle)
        assert list(top.chain()) == [top, middle, root]
        assert top.root_cause() is root

    def test_self_cause_rejected(self):
        error = ErrorValue(ErrorKind.IO)
        with pytest.raises(ValueError):
            ErrorValue.__init__(error, ErrorKind.IO, cause=error)

    def test_cause_is_read_only(self):
        error = ErrorValue(ErrorKind.IO)
        with pytest.raises(AttributeError):
            error.cause = ErrorValue(ErrorKind.IO)

    def test_chain_stops_at_revisited_link(self):
        first = ErrorValue(ErrorKind.IO, "first")
        second = ErrorValue(ErrorKind.UNKNOWN, "second", cause=first)
        # Re-running __init__ is the only way left to rewire a cause
        ErrorValue.__init__(first, ErrorKind.IO, "first", cause=second)
        assert list(second.chain()) == [second, first]
        assert chain_contains_any_of(second, [ErrorKind.INVALID_STATE]) is False

    def test_to_dict(self):
        error = ErrorValue(
            ErrorKind.INVALID_STATE,
            "outer",
            cause=ErrorValue(ErrorKind.IO, "inner"),
            origin=RuntimeError("outer"),
        )
        data = error.to_dict()
        assert data["kind"] == "invalid_state"
        assert data["origin"] == "RuntimeError"
        assert data["cause"]["kind"] == "io"
        assert data["cause"]["cause"] is None


# ============================================================================
# CompositeError / UndeliverableError
# ============================================================================

class TestCompositeError:

    def test_order_preserved(self):
        a = ErrorValue(ErrorKind.IO, "a")
        b = ErrorValue(ErrorKind.INVALID_STATE, "b")
        composite = CompositeError([a, b])
        assert composite.errors == (a, b)
        assert composite.kind == ErrorKind.COMPOSITE
        assert composite.message == "2 errors occurred"

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            CompositeError([])

    def test_to_dict_lists_siblings(self):
        composite = CompositeError([ErrorValue(ErrorKind.IO)])
        assert [e["kind"] for e in composite.to_dict()["errors"]] == ["io"]


class TestUndeliverableError:

    def test_inner_is_cause(self):
        inner = ErrorValue(ErrorKind.IO, "inner")
        wrapper = UndeliverableError(inner)
        assert wrapper.kind == ErrorKind.UNDELIVERABLE
        assert wrapper.inner is inner
        assert wrapper.cause is inner

    def test_custom_message(self):
        wrapper = UndeliverableError(ErrorValue(ErrorKind.IO), "Task exception was never retrieved")
        assert wrapper.message == "Task exception was never retrieved"


# ============================================================================
# chain_contains_any_of
# ============================================================================

class TestChainContainsAnyOf:

    def test_own_kind_matches(self):
        assert chain_contains_any_of(ErrorValue(ErrorKind.IO), {ErrorKind.IO})

    def test_nested_cause_matches(self):
        error = ErrorValue(
            ErrorKind.UNKNOWN,
            cause=ErrorValue(ErrorKind.UNKNOWN, cause=ErrorValue(ErrorKind.IO)),
        )
        assert chain_contains_any_of(error, {ErrorKind.IO})

    def test_no_match(self):
        error = ErrorValue(ErrorKind.UNKNOWN, cause=ErrorValue(ErrorKind.INVALID_STATE))
        assert not chain_contains_any_of(error, {ErrorKind.IO})

    def test_empty_kinds(self):
        assert not chain_contains_any_of(ErrorValue(ErrorKind.IO), [])

    def test_accepts_any_iterable(self):
        assert chain_contains_any_of(ErrorValue(ErrorKind.IO), [ErrorKind.INVALID_STATE, ErrorKind.IO])

    def test_sees_through_delivery_wrapper(self):
        wrapper = UndeliverableError(ErrorValue(ErrorKind.IO))
        assert chain_contains_any_of(wrapper, {ErrorKind.IO})

    def test_does_not_descend_into_composite_siblings(self):
        composite = CompositeError([ErrorValue(ErrorKind.IO)])
        assert not chain_contains_any_of(composite, {ErrorKind.IO})
