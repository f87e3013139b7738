"""
FaultSink - Global error sink.

The GlobalErrorSink is the terminal handler for undeliverable errors:
1. Adapts raw exceptions into ErrorValues
2. Flattens the delivery wrapper and composite siblings
3. Classifies siblings in order, stopping at the first decisive one
4. Falls back to the escalation policy and the debug toggle
5. Escalates, logs, or drops

The sink holds no mutable state and is safe to call from many threads or
tasks at once.
"""

from __future__ import annotations

import logging
from typing import Optional

from .adapters import ExceptionAdapter
from .collaborators import CrashReporter, DebugConfig, LogSink
from .core import ErrorValue
from .policy import Action, EscalationPolicy, Verdict
from .rules import Classification, Classifier
from .unwrap import flatten, unwrap_delivery


TAG = "faultsink.sink"


class GlobalErrorSink:
    """
    Triage processor for errors nobody is left to observe.

    Siblings are evaluated first to last and the first decisive one wins:
    an ignorable sibling drops the whole error even when a later sibling
    is critical, and a critical sibling is escalated without looking at
    the rest. Only when every sibling is unclassified does the debug
    toggle decide, and then for the unwrapped original error.

    Usage:
        ```python
        sink = GlobalErrorSink(
            classifier=Classifier(),
            crash_reporter=LoggingCrashReporter(),
            log_sink=StdlibLogSink(),
            config=DebugReportingToggle(),
        )
        install_error_sink(sink, loop)
        ```
    """

    def __init__(
        self,
        *,
        classifier: Classifier,
        crash_reporter: CrashReporter,
        log_sink: LogSink,
        config: DebugConfig,
        policy: Optional[EscalationPolicy] = None,
        adapter: Optional[ExceptionAdapter] = None,
        tag: str = TAG,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the sink.

        Args:
            classifier: Classifier holding the rule set
            crash_reporter: Receives escalated errors
            log_sink: Receives log-only errors
            config: Debug-reporting toggle
            policy: Escalation policy (default policy if None)
            adapter: Converts raw exceptions (default adapter if None)
            tag: Tag passed to the log sink
            logger: Logger for the sink's own diagnostics
        """
        self.classifier = classifier
        self.crash_reporter = crash_reporter
        self.log_sink = log_sink
        self.config = config
        self.policy = policy or EscalationPolicy()
        self.adapter = adapter or ExceptionAdapter()
        self.tag = tag
        self.logger = logger or logging.getLogger(TAG)

    # ========================================================================
    # Triage (decision only)
    # ========================================================================

    def triage(self, raw: ErrorValue) -> Verdict:
        """
        Decide what to do with an incoming error.

        Args:
            raw: Error received from the runtime

        Returns:
            Verdict naming the action and the error it applies to
        """
        for sibling in flatten(raw):
            classification = self.classifier.classify(sibling)
            if classification is Classification.IGNORABLE:
                return Verdict(Action.DROP, sibling)
            if classification is Classification.CRITICAL:
                return Verdict(Action.ESCALATE, sibling)

        # Out-of-lifecycle errors are only reported if a debug user wishes so
        actual = unwrap_delivery(raw)
        action = self.policy.decide(
            Classification.UNCLASSIFIED,
            self.config.is_debug_reporting_enabled(),
        )
        return Verdict(action, actual)

    # ========================================================================
    # Handling (decision + action)
    # ========================================================================

    def handle(self, raw: BaseException | ErrorValue) -> None:
        """
        Triage an undeliverable error and act on the verdict.

        Never raises, except when the crash reporter itself raises while
        an error is being escalated.

        Args:
            raw: Error (or raw exception) received from the runtime
        """
        try:
            error = self.adapter.adapt(raw)
            self.logger.debug(
                f"Error sink called with -> error = [{error.kind}]",
                extra={"error_kind": error.kind.value},
            )
            verdict = self.triage(error)
        except Exception as e:
            self.logger.error(f"Undeliverable error triage failed: {e}", exc_info=True)
            return

        if verdict.action is Action.ESCALATE:
            self.crash_reporter.report(verdict.error)
        elif verdict.action is Action.LOG_ONLY:
            self._log(verdict.error)

    def __call__(self, raw: BaseException | ErrorValue) -> None:
        self.handle(raw)

    def _log(self, error: ErrorValue):
        try:
            self.log_sink.error(self.tag, "Undeliverable error received: ", error)
        except Exception as e:
            self.logger.error(f"Log sink raised exception: {e}", exc_info=True)
