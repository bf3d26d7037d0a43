"""Rule checkers and the check engine."""

from guardian.rules.checkers import (
    CheckContext,
    DiffPatternForbiddenChecker,
    DiffPatternRequiresChecker,
    ImportsForbiddenChecker,
    RuleChecker,
    default_registry,
)
from guardian.rules.engine import CheckEngine
from guardian.rules.exceptions import (
    ConfigError,
    PatternError,
    RuleEngineError,
    UnknownRuleType,
)
from guardian.rules.meta_check import MetaChecker

__all__ = [
    "CheckContext",
    "CheckEngine",
    "ConfigError",
    "DiffPatternForbiddenChecker",
    "DiffPatternRequiresChecker",
    "ImportsForbiddenChecker",
    "MetaChecker",
    "PatternError",
    "RuleChecker",
    "RuleEngineError",
    "UnknownRuleType",
    "default_registry",
]
