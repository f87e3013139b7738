"""
FaultSink - Triage for undeliverable errors.

Errors raised by background work after its caller is gone cannot be
delivered anywhere. FaultSink decides, for each of them, whether to:
- drop it (transient: I/O cancellation, disposed waits)
- escalate it to the crash reporter (defects: None access, bad arguments,
  invalid state, unhandled pipeline errors, missing backpressure)
- log it, or escalate it when debug reporting is enabled (everything else)

Core exports:
- ErrorKind, ErrorValue, CompositeError, UndeliverableError: error model
- ExceptionAdapter: raw exception → ErrorValue
- Classifier, RuleSet, Classification: rule matching
- EscalationPolicy, Action, Verdict: decision
- GlobalErrorSink: the registered triage handler
- Application: composition root
"""

from .core import (
    ErrorKind,
    ErrorValue,
    CompositeError,
    UndeliverableError,
    chain_contains_any_of,
)

from .adapters import ExceptionAdapter, ExceptionMapping

from .unwrap import flatten, unwrap_delivery

from .rules import (
    Classification,
    Classifier,
    RuleSet,
    DEFAULT_IGNORABLE_KINDS,
    DEFAULT_CRITICAL_KINDS,
)

from .policy import Action, EscalationPolicy, Verdict

from .collaborators import (
    CrashReporter,
    LogSink,
    DebugConfig,
    LoggingCrashReporter,
    CallbackCrashReporter,
    StdlibLogSink,
)

from .config import ConfigLoader, TriageConfig, DebugReportingToggle

from .sink import GlobalErrorSink

from .runtime import error_sink_loop_factory, install_error_sink, uninstall_error_sink, UncaughtFaultHook

from .app import Application

from .exceptions import (
    FaultSinkError,
    ConfigError,
    CrashReporterError,
    ErrorHandlerNotImplemented,
    MissingBackpressureError,
)

__version__ = "0.1.0"

__all__ = [
    # Error model
    "ErrorKind",
    "ErrorValue",
    "CompositeError",
    "UndeliverableError",
    "chain_contains_any_of",
    "ExceptionAdapter",
    "ExceptionMapping",
    "flatten",
    "unwrap_delivery",

    # Classification
    "Classification",
    "Classifier",
    "RuleSet",
    "DEFAULT_IGNORABLE_KINDS",
    "DEFAULT_CRITICAL_KINDS",
    "Action",
    "EscalationPolicy",
    "Verdict",

    # Collaborators
    "CrashReporter",
    "LogSink",
    "DebugConfig",
    "LoggingCrashReporter",
    "CallbackCrashReporter",
    "StdlibLogSink",

    # Config
    "ConfigLoader",
    "TriageConfig",
    "DebugReportingToggle",

    # Runtime
    "GlobalErrorSink",
    "install_error_sink",
    "error_sink_loop_factory",
    "uninstall_error_sink",
    "UncaughtFaultHook",
    "Application",

    # Exceptions
    "FaultSinkError",
    "ConfigError",
    "CrashReporterError",
    "ErrorHandlerNotImplemented",
    "MissingBackpressureError",
]
