"""
FaultSink - Rule sets and classifier.

Defines:
- Classification (ignorable / critical / unclassified)
- RuleSet (ignorable and critical kinds, immutable after startup)
- Classifier (cause-chain matching against a RuleSet)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from .core import ErrorKind, ErrorValue, chain_contains_any_of


class Classification(str, Enum):
    """Outcome of classifying a single error."""
    IGNORABLE = "ignorable"         # Transient or expected, drop silently
    CRITICAL = "critical"           # Defect signature, always escalate
    UNCLASSIFIED = "unclassified"   # Decided by the debug toggle


# Don't crash the application over a simple network problem
DEFAULT_IGNORABLE_KINDS = frozenset({
    # network api cancellation
    ErrorKind.IO,
    ErrorKind.CONNECTION_RESET,
    # blocking code disposed
    ErrorKind.INTERRUPTED,
    ErrorKind.INTERRUPTED_IO,
})

# Though these cannot be ignored
DEFAULT_CRITICAL_KINDS = frozenset({
    # bug in app
    ErrorKind.NULL_REFERENCE,
    ErrorKind.INVALID_ARGUMENT,
    # bug in operator
    ErrorKind.HANDLER_NOT_IMPLEMENTED,
    ErrorKind.MISSING_BACKPRESSURE,
    ErrorKind.INVALID_STATE,
})


@dataclass(frozen=True)
class RuleSet:
    """
    Kinds recognized by the classifier.

    Matching within a set is "any"; there is no priority inside a set.
    A kind listed in both sets classifies as ignorable.
    """
    ignorable: frozenset[ErrorKind] = field(default=DEFAULT_IGNORABLE_KINDS)
    critical: frozenset[ErrorKind] = field(default=DEFAULT_CRITICAL_KINDS)

    def __post_init__(self):
        # Accept any iterable, store frozensets
        object.__setattr__(self, "ignorable", frozenset(self.ignorable))
        object.__setattr__(self, "critical", frozenset(self.critical))

    @classmethod
    def default(cls) -> RuleSet:
        return cls()

    @classmethod
    def from_names(
        cls,
        *,
        ignorable: Optional[Iterable[str]] = None,
        critical: Optional[Iterable[str]] = None,
    ) -> RuleSet:
        """
        Build a rule set from kind names.

        Args:
            ignorable: Ignorable kind names (default set if None)
            critical: Critical kind names (default set if None)
        """
        return cls(
            ignorable=(
                DEFAULT_IGNORABLE_KINDS if ignorable is None
                else frozenset(ErrorKind.get(name) for name in ignorable)
            ),
            critical=(
                DEFAULT_CRITICAL_KINDS if critical is None
                else frozenset(ErrorKind.get(name) for name in critical)
            ),
        )

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "ignorable": sorted(kind.name for kind in self.ignorable),
            "critical": sorted(kind.name for kind in self.critical),
        }


class Classifier:
    """
    Classify one error against a RuleSet.

    Ignorable kinds are checked before critical ones, each across the whole
    cause chain. Holds no mutable state.
    """

    def __init__(self, rules: Optional[RuleSet] = None):
        self.rules = rules or RuleSet.default()

    def classify(self, error: ErrorValue) -> Classification:
        if chain_contains_any_of(error, self.rules.ignorable):
            return Classification.IGNORABLE
        if chain_contains_any_of(error, self.rules.critical):
            return Classification.CRITICAL
        return Classification.UNCLASSIFIED
