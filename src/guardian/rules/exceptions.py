"""Exceptions for rule checking.

All three abort the whole check run: one malformed rule fails the engine
invocation instead of being skipped.
"""


class RuleEngineError(Exception):
    """Base exception for all rule engine operations."""


class ConfigError(RuleEngineError):
    """Raised when a rule config is missing a key or has a value of the wrong shape."""


class PatternError(RuleEngineError):
    """Raised when a configured regular expression does not compile."""


class UnknownRuleType(RuleEngineError):
    """Raised when a rule references a type with no registered checker."""
