"""
FaultSink - Runtime registration.

Connects a GlobalErrorSink to the places Python reports failures nobody
caught:
- asyncio loop exception handler (undeliverable errors from tasks,
  futures and callbacks)
- sys.excepthook / threading.excepthook (uncaught synchronous faults)

Both paths end in the same CrashReporter.report, so one reporting
mechanism serves the whole process.
"""

from __future__ import annotations

import asyncio
import logging
import sys
import threading
from typing import Any, Callable, Optional

from .adapters import ExceptionAdapter
from .collaborators import CrashReporter
from .core import UndeliverableError
from .sink import GlobalErrorSink


logger = logging.getLogger("faultsink.runtime")


def _loop_handler(sink: GlobalErrorSink, adapter: ExceptionAdapter):
    def handler(loop: asyncio.AbstractEventLoop, context: dict[str, Any]):
        exception = context.get("exception")
        if exception is None:
            # Nothing to triage (e.g. unclosed transport warnings)
            loop.default_exception_handler(context)
            return

        logger.debug(
            f"Loop exception handler called with -> exception = [{type(exception).__name__}]"
        )
        try:
            wrapped = UndeliverableError(
                adapter.adapt(exception),
                context.get("message"),
                origin=exception,
            )
        except Exception as e:
            logger.error(f"Could not adapt undeliverable exception: {e}", exc_info=True)
            return
        sink.handle(wrapped)

    return handler


def install_error_sink(
    sink: GlobalErrorSink,
    loop: Optional[asyncio.AbstractEventLoop] = None,
):
    """
    Register the sink as the loop's exception handler.

    Registering again replaces the previous handler; handlers do not stack.
    Only this loop is covered. Loops created later (e.g. ``asyncio.run`` in
    a worker thread) keep the default handler unless they come from
    ``error_sink_loop_factory``.

    Args:
        sink: Sink receiving undeliverable errors
        loop: Event loop (running loop if None)
    """
    loop = loop or asyncio.get_running_loop()
    loop.set_exception_handler(_loop_handler(sink, sink.adapter))
    logger.debug(f"Installed error sink on loop {loop!r}")


def error_sink_loop_factory(sink: GlobalErrorSink) -> Callable[[], asyncio.AbstractEventLoop]:
    """
    Build a loop factory whose loops report to the sink.

    Usage:
        ```python
        with asyncio.Runner(loop_factory=error_sink_loop_factory(sink)) as runner:
            runner.run(main())
        ```
    """
    def factory() -> asyncio.AbstractEventLoop:
        loop = asyncio.new_event_loop()
        install_error_sink(sink, loop)
        return loop

    return factory


def uninstall_error_sink(loop: Optional[asyncio.AbstractEventLoop] = None):
    """Restore the loop's default exception handler."""
    loop = loop or asyncio.get_running_loop()
    loop.set_exception_handler(None)


class UncaughtFaultHook:
    """
    Route uncaught synchronous faults to the crash reporter.

    Installs ``sys.excepthook`` and ``threading.excepthook``. Interpreter
    exits (KeyboardInterrupt, SystemExit) go to the hooks that were in
    place before.

    Usage:
        ```python
        hook = UncaughtFaultHook(reporter)
        hook.install()
        ...
        hook.uninstall()
        ```
    """

    def __init__(
        self,
        reporter: CrashReporter,
        adapter: Optional[ExceptionAdapter] = None,
    ):
        self.reporter = reporter
        self.adapter = adapter or ExceptionAdapter()
        self._previous_excepthook = None
        self._previous_threading_hook = None

    @property
    def installed(self) -> bool:
        return self._previous_excepthook is not None

    def install(self):
        if self.installed:
            return
        self._previous_excepthook = sys.excepthook
        self._previous_threading_hook = threading.excepthook
        sys.excepthook = self._excepthook
        threading.excepthook = self._threading_hook

    def uninstall(self):
        if not self.installed:
            return
        sys.excepthook = self._previous_excepthook
        threading.excepthook = self._previous_threading_hook
        self._previous_excepthook = None
        self._previous_threading_hook = None

    def report(self, exc: BaseException):
        """Send one uncaught exception to the crash reporter."""
        self.reporter.report(self.adapter.adapt(exc))

    def _excepthook(self, exc_type, exc_value, exc_traceback):
        if not isinstance(exc_value, Exception):
            (self._previous_excepthook or sys.__excepthook__)(exc_type, exc_value, exc_traceback)
            return
        self.report(exc_value)

    def _threading_hook(self, args: threading.ExceptHookArgs):
        if not isinstance(args.exc_value, Exception):
            (self._previous_threading_hook or threading.__excepthook__)(args)
            return
        self.report(args.exc_value)
