"""
Application - Composition root for the triage pipeline.

Builds the sink once, wires its collaborators by explicit reference and
registers it with the runtime during startup:

    attach()        start the crash reporter
    on_create()     build config, rules, sink; install hooks
    on_terminate()  unregister and restore previous hooks
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .collaborators import CrashReporter, DebugConfig, LogSink, LoggingCrashReporter, StdlibLogSink
from .config import ConfigLoader, DebugReportingToggle, TriageConfig
from .exceptions import CrashReporterError
from .rules import Classifier
from .runtime import (
    UncaughtFaultHook,
    error_sink_loop_factory,
    install_error_sink,
    uninstall_error_sink,
)
from .sink import GlobalErrorSink


logger = logging.getLogger("faultsink.app")


class Application(DebugConfig):
    """
    Process-level owner of the error sink.

    Subclasses may override ``is_debug_reporting_enabled`` (e.g. a debug
    build that always reports); the default answers from the toggle seeded
    by configuration.
    """

    def __init__(
        self,
        config: Optional[ConfigLoader] = None,
        *,
        crash_reporter: Optional[CrashReporter] = None,
        log_sink: Optional[LogSink] = None,
    ):
        self.config = config or ConfigLoader.load()
        self.crash_reporter = crash_reporter or LoggingCrashReporter()
        self.log_sink = log_sink or StdlibLogSink()
        self.triage_config: Optional[TriageConfig] = None
        self.toggle: Optional[DebugReportingToggle] = None
        self.sink: Optional[GlobalErrorSink] = None
        self._hook: Optional[UncaughtFaultHook] = None
        self._attached = False

    def attach(self):
        """
        Start the crash reporter.

        Called before anything else can fail. A reporter that cannot start
        is replaced by LoggingCrashReporter so a reporter always exists.
        """
        if self._attached:
            return
        self._attached = True

        start = getattr(self.crash_reporter, "start", None)
        if start is None:
            return
        try:
            start()
        except CrashReporterError as e:
            logger.error(f"Could not initialize crash reporter: {e}", exc_info=True)
            self.crash_reporter = LoggingCrashReporter()

    def on_create(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> GlobalErrorSink:
        """
        Build the sink and register it.

        Args:
            loop: Event loop to register with (running loop if None)

        Returns:
            The registered sink
        """
        self.attach()

        if self.sink is None:
            # Config first, everything else reads from it
            self.triage_config = self.config.get_triage_config()
            self.toggle = DebugReportingToggle(self.triage_config.debug_reporting)
            self.sink = GlobalErrorSink(
                classifier=Classifier(self.triage_config.rule_set()),
                crash_reporter=self.crash_reporter,
                log_sink=self.log_sink,
                config=self,
                tag=self.triage_config.log_tag,
            )
            self._hook = UncaughtFaultHook(self.crash_reporter, self.sink.adapter)

        self._hook.install()
        install_error_sink(self.sink, loop)
        logger.info(
            "Undeliverable error sink registered",
            extra={"rules": self.sink.classifier.rules.to_dict()},
        )
        return self.sink

    def on_terminate(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        """Unregister the sink and restore the previous hooks."""
        if self.sink is None:
            return
        uninstall_error_sink(loop)
        if self._hook is not None:
            self._hook.uninstall()

    def new_event_loop(self) -> asyncio.AbstractEventLoop:
        """
        Create an event loop that reports to the sink.

        For loops run outside the one passed to on_create, e.g. in worker
        threads: ``asyncio.Runner(loop_factory=app.new_event_loop)``.
        """
        if self.sink is None:
            raise RuntimeError("on_create() must run before new_event_loop()")
        return error_sink_loop_factory(self.sink)()

    def is_debug_reporting_enabled(self) -> bool:
        return self.toggle is not None and self.toggle.is_debug_reporting_enabled()
