"""
Test 4: Rule sets and classifier (faultsink/rules.py)

Tests RuleSet defaults and construction, Classifier ordering and
idempotence.
"""

import pytest

from faultsink import ErrorKind, ErrorValue, UndeliverableError
from faultsink.rules import (
    DEFAULT_CRITICAL_KINDS,
    DEFAULT_IGNORABLE_KINDS,
    Classification,
    Classifier,
    RuleSet,
)


# ============================================================================
# RuleSet
# ============================================================================

class TestRuleSet:

    def test_default_ignorable(self):
        assert DEFAULT_IGNORABLE_KINDS == {
            ErrorKind.IO,
            ErrorKind.CONNECTION_RESET,
            ErrorKind.INTERRUPTED,
            ErrorKind.INTERRUPTED_IO,
        }

    def test_default_critical(self):
        assert DEFAULT_CRITICAL_KINDS == {
            ErrorKind.NULL_REFERENCE,
            ErrorKind.INVALID_ARGUMENT,
            ErrorKind.HANDLER_NOT_IMPLEMENTED,
            ErrorKind.MISSING_BACKPRESSURE,
            ErrorKind.INVALID_STATE,
        }

    def test_default(self):
        rules = RuleSet.default()
        assert rules.ignorable == DEFAULT_IGNORABLE_KINDS
        assert rules.critical == DEFAULT_CRITICAL_KINDS

    def test_frozen(self):
        rules = RuleSet()
        with pytest.raises(AttributeError):
            rules.ignorable = frozenset()

    def test_iterables_become_frozensets(self):
        rules = RuleSet(ignorable=[ErrorKind.IO], critical=(ErrorKind.INVALID_STATE,))
        assert rules.ignorable == frozenset({ErrorKind.IO})
        assert isinstance(rules.critical, frozenset)

    def test_from_names(self):
        rules = RuleSet.from_names(ignorable=["io", "KeyError"], critical=["invalid_state"])
        assert rules.ignorable == {ErrorKind.IO, ErrorKind("KeyError")}
        assert rules.critical == {ErrorKind.INVALID_STATE}

    def test_from_names_defaults(self):
        rules = RuleSet.from_names(critical=[])
        assert rules.ignorable == DEFAULT_IGNORABLE_KINDS
        assert rules.critical == frozenset()

    def test_to_dict(self):
        rules = RuleSet.from_names(ignorable=["io"], critical=["invalid_state", "null_reference"])
        assert rules.to_dict() == {
            "ignorable": ["io"],
            "critical": ["invalid_state", "null_reference"],
        }


# ============================================================================
# Classifier
# ============================================================================

class TestClassifier:

    def test_ignorable(self):
        assert Classifier().classify(ErrorValue(ErrorKind.IO)) is Classification.IGNORABLE

    def test_critical(self):
        assert Classifier().classify(ErrorValue(ErrorKind.INVALID_STATE)) is Classification.CRITICAL

    def test_unclassified(self):
        assert Classifier().classify(ErrorValue(ErrorKind("KeyError"))) is Classification.UNCLASSIFIED

    def test_cause_chain_searched(self):
        error = ErrorValue(ErrorKind("KeyError"), cause=ErrorValue(ErrorKind.NULL_REFERENCE))
        assert Classifier().classify(error) is Classification.CRITICAL

    def test_ignorable_beats_critical_in_same_chain(self):
        error = ErrorValue(ErrorKind.INVALID_STATE, cause=ErrorValue(ErrorKind.IO))
        assert Classifier().classify(error) is Classification.IGNORABLE

    def test_kind_in_both_sets_is_ignorable(self):
        rules = RuleSet(ignorable={ErrorKind.IO}, critical={ErrorKind.IO})
        assert Classifier(rules).classify(ErrorValue(ErrorKind.IO)) is Classification.IGNORABLE

    def test_wrapper_is_transparent_for_chain(self):
        error = UndeliverableError(ErrorValue(ErrorKind.INVALID_ARGUMENT))
        assert Classifier().classify(error) is Classification.CRITICAL

    def test_custom_rules(self):
        rules = RuleSet.from_names(ignorable=[], critical=["KeyError"])
        classifier = Classifier(rules)
        assert classifier.classify(ErrorValue(ErrorKind("KeyError"))) is Classification.CRITICAL
        assert classifier.classify(ErrorValue(ErrorKind.IO)) is Classification.UNCLASSIFIED

    def test_idempotent(self):
        classifier = Classifier()
        error = ErrorValue(ErrorKind("KeyError"), cause=ErrorValue(ErrorKind.MISSING_BACKPRESSURE))
        assert classifier.classify(error) is classifier.classify(error)
        assert classifier.classify(error) is Classification.CRITICAL
