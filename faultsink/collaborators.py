"""
FaultSink - Collaborator interfaces.

The sink talks to three collaborators, wired by explicit reference:
- CrashReporter: receives escalated errors
- LogSink: receives log-only errors
- DebugConfig: answers whether unclassified errors are escalated

Default implementations are backed by the stdlib logging module.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

from .core import ErrorValue


def _exc_info(error: ErrorValue):
    origin = error.origin
    if origin is None:
        return None
    return (type(origin), origin, origin.__traceback__)


class CrashReporter(ABC):
    """
    Crash-report channel.

    The single reporting path for both uncaught synchronous faults and
    escalated undeliverable errors. Must be safe to call from any thread.
    Implementations may define ``start()``, called once by the application
    before the first report.
    """

    @abstractmethod
    def report(self, error: ErrorValue) -> None:
        """
        Report an error.

        Args:
            error: Error to report
        """
        pass


class LogSink(ABC):
    """Diagnostic log channel for errors that are not reported."""

    @abstractmethod
    def error(self, tag: str, message: str, error: ErrorValue) -> None:
        """
        Write a diagnostic record.

        Args:
            tag: Source tag
            message: Human-readable message
            error: Error being logged
        """
        pass


class DebugConfig(ABC):
    """Runtime debug-reporting toggle, read at triage time."""

    @abstractmethod
    def is_debug_reporting_enabled(self) -> bool:
        pass


# ============================================================================
# Default implementations
# ============================================================================

class LoggingCrashReporter(CrashReporter):
    """
    Report crashes as CRITICAL log records.

    Used when no real crash-report transport is configured, or when the
    configured one fails to start.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("faultsink.crash")

    def report(self, error: ErrorValue) -> None:
        self.logger.critical(
            f"Crash report: {error}",
            exc_info=_exc_info(error),
            extra={"error": error.to_dict()},
        )


class CallbackCrashReporter(CrashReporter):
    """Forward reports to a plain callable."""

    def __init__(self, callback: Callable[[ErrorValue], None]):
        self.callback = callback

    def report(self, error: ErrorValue) -> None:
        self.callback(error)


class StdlibLogSink(LogSink):
    """Write records through ``logging.getLogger(tag)``."""

    def error(self, tag: str, message: str, error: ErrorValue) -> None:
        logging.getLogger(tag).error(
            f"{message}{error}",
            exc_info=_exc_info(error),
            extra={"error": error.to_dict()},
        )
