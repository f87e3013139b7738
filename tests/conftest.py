"""
Shared test fixtures and helpers for the FaultSink test suite.
"""

import pytest

from faultsink import (
    Classifier,
    DebugReportingToggle,
    ErrorKind,
    ErrorValue,
    GlobalErrorSink,
)
from faultsink.testing import RecordingCrashReporter, RecordingLogSink


# ============================================================================
# Error Helpers
# ============================================================================


def make_error(kind: ErrorKind, message: str = "", *, cause: ErrorValue = None) -> ErrorValue:
    """Build an ErrorValue with an optional cause."""
    return ErrorValue(kind, message or None, cause=cause)


def ignorable(message: str = "connection dropped") -> ErrorValue:
    return make_error(ErrorKind.IO, message)


def critical(message: str = "bad state") -> ErrorValue:
    return make_error(ErrorKind.INVALID_STATE, message)


def unclassified(message: str = "something odd") -> ErrorValue:
    return make_error(ErrorKind.get("LookupError"), message)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def crash_reporter():
    reporter = RecordingCrashReporter()
    yield reporter
    reporter.reset()


@pytest.fixture
def log_sink():
    sink = RecordingLogSink()
    yield sink
    sink.reset()


@pytest.fixture
def toggle():
    return DebugReportingToggle(False)


@pytest.fixture
def sink(crash_reporter, log_sink, toggle):
    """A GlobalErrorSink wired to recording collaborators."""
    return GlobalErrorSink(
        classifier=Classifier(),
        crash_reporter=crash_reporter,
        log_sink=log_sink,
        config=toggle,
    )
