"""
FaultSink - Escalation policy.

Maps a classification and the debug toggle to the action the sink takes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .core import ErrorValue
from .rules import Classification


class Action(str, Enum):
    """What the sink does with an error."""
    DROP = "drop"           # No log, no report
    ESCALATE = "escalate"   # Hand to the crash reporter
    LOG_ONLY = "log_only"   # Diagnostic record only


@dataclass(frozen=True)
class Verdict:
    """
    Outcome of triaging one incoming error.

    Attributes:
        action: Action to take
        error: Error the action applies to (a sibling, or the unwrapped
            original when no sibling was decisive)
    """
    action: Action
    error: ErrorValue


class EscalationPolicy:
    """
    Decide the action for a classification.

    - IGNORABLE → DROP
    - CRITICAL → ESCALATE, whatever the toggle says
    - UNCLASSIFIED → ESCALATE with debug reporting on, LOG_ONLY otherwise
    """

    def decide(self, classification: Classification, debug_enabled: bool) -> Action:
        if classification is Classification.IGNORABLE:
            return Action.DROP
        if classification is Classification.CRITICAL:
            return Action.ESCALATE
        return Action.ESCALATE if debug_enabled else Action.LOG_ONLY
