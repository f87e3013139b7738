"""
FaultSink - Exception types.

Defines:
- FaultSinkError hierarchy (configuration and reporter failures)
- Runtime defect signatures raised by background pipelines
"""


class FaultSinkError(Exception):
    """Base class for errors raised by faultsink itself."""
    pass


class ConfigError(FaultSinkError):
    """Raised when triage configuration validation fails."""
    pass


class CrashReporterError(FaultSinkError):
    """Raised when a crash reporter cannot be started."""
    pass


class ErrorHandlerNotImplemented(RuntimeError):
    """
    A background pipeline failed and nobody supplied an error callback.

    Always a bug in the code that started the pipeline.
    """

    def __init__(self, error: BaseException | None = None):
        message = "The error was not handled by the pipeline's error callback"
        if error is not None:
            message = f"{message}: {type(error).__name__}: {error}"
        super().__init__(message)
        if error is not None:
            self.__cause__ = error


class MissingBackpressureError(RuntimeError):
    """A producer emitted more items than its consumer had capacity for."""

    def __init__(self, message: str = "Could not emit value due to lack of requests"):
        super().__init__(message)
