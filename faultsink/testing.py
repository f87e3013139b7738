"""
FaultSink Testing - Recording collaborators.

Provides :class:`RecordingCrashReporter` and :class:`RecordingLogSink`,
drop-in collaborators that capture calls for assertion.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import List, Optional

from .collaborators import CrashReporter, LogSink
from .core import ErrorKind, ErrorValue


@dataclass
class CapturedError:
    """An error captured by a recording collaborator."""
    error: ErrorValue
    tag: Optional[str] = None
    message: Optional[str] = None
    timestamp: float = 0.0

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind

    def __repr__(self) -> str:
        return f"<CapturedError kind={self.kind.value!r} tag={self.tag!r}>"


class _Recorder:
    def __init__(self):
        self.captured: List[CapturedError] = []

    def _capture(self, error: ErrorValue, **kw):
        self.captured.append(CapturedError(error=error, timestamp=time.monotonic(), **kw))

    @property
    def count(self) -> int:
        return len(self.captured)

    @property
    def errors(self) -> List[ErrorValue]:
        return [c.error for c in self.captured]

    def has_kind(self, kind: ErrorKind) -> bool:
        return any(c.kind == kind for c in self.captured)

    def reset(self):
        self.captured.clear()


class RecordingCrashReporter(_Recorder, CrashReporter):
    """
    Crash reporter that captures reports instead of sending them.

    Usage::

        reporter = RecordingCrashReporter()
        sink = GlobalErrorSink(..., crash_reporter=reporter, ...)
        sink.handle(error)

        assert reporter.count == 1
        assert reporter.has_kind(ErrorKind.INVALID_STATE)
    """

    def report(self, error: ErrorValue) -> None:
        self._capture(error)


class RecordingLogSink(_Recorder, LogSink):
    """Log sink that captures records instead of writing them."""

    def error(self, tag: str, message: str, error: ErrorValue) -> None:
        self._capture(error, tag=tag, message=message)

