"""Check engine: runs every configured rule and applies exceptions."""

from datetime import datetime, timezone

from guardian.models.agreement_models import Rule, RuleException
from guardian.models.report_models import EngineResult, Severity, Violation
from guardian.rules.checkers import CheckContext, RuleChecker, default_registry
from guardian.rules.exceptions import RuleEngineError, UnknownRuleType
from guardian.rules.meta_check import MetaChecker
from guardian.utils.path_matcher import match_segment_glob


def active_exceptions(exceptions: list[RuleException], now: datetime) -> list[RuleException]:
    """Return the exceptions still in force at ``now``."""
    return [exception for exception in exceptions if exception.is_active(now)]


def is_excepted(violation: Violation, exceptions: list[RuleException]) -> bool:
    """True if an exception for the violation's rule covers its file.

    Exception paths use plain segment globs; ``**`` is not expanded here.
    """
    for exception in exceptions:
        if exception.rule_id != violation.rule_id:
            continue
        if any(match_segment_glob(violation.file_path, pattern) for pattern in exception.paths):
            return True
    return False


class CheckEngine:
    """Evaluates rules against a diff using an explicitly owned checker registry."""

    def __init__(
        self,
        rules: list[Rule],
        exceptions: list[RuleException] | None = None,
        registry: dict[str, RuleChecker] | None = None,
        meta_checker: MetaChecker | None = None,
    ) -> None:
        """Initialize with rules, exceptions and an optional registry override.

        Args:
            rules: Rules in declaration order.
            exceptions: Waivers applied to rule violations after checking.
            registry: Mapping of rule type to checker (defaults to the built-ins).
            meta_checker: Optional governance-file guard; its violations are
                appended after exception filtering and cannot be waived.
        """
        self.rules = list(rules)
        self.exceptions = list(exceptions or [])
        self.registry = dict(registry) if registry is not None else default_registry()
        self.meta_checker = meta_checker

    def _checker_for(self, rule: Rule) -> RuleChecker:
        checker = self.registry.get(rule.type)
        if checker is None:
            raise UnknownRuleType(f"unknown rule type {rule.type!r} for rule {rule.id!r}")
        return checker

    def validate_rules(self) -> None:
        """Check every rule's type and config without looking at a diff.

        Raises:
            UnknownRuleType: If a rule type has no checker.
            ConfigError: If a rule config is malformed.
        """
        for rule in self.rules:
            checker = self._checker_for(rule)
            try:
                checker.parse_config(rule.config)
            except RuleEngineError as exc:
                raise type(exc)(f"checking rule {rule.id!r}: {exc}") from exc

    def run(
        self,
        changed_files: list[str],
        diff_content: str,
        now: datetime | None = None,
    ) -> EngineResult:
        """Run all rules, drop excepted violations and count severities.

        Args:
            changed_files: Paths touched by the diff.
            diff_content: Unified diff text.
            now: Evaluation time for exception expiry (defaults to current UTC).

        Returns:
            EngineResult with surviving violations in rule-declaration order.

        Raises:
            UnknownRuleType, ConfigError, PatternError: On the first bad rule;
                the whole run is aborted.
        """
        if now is None:
            now = datetime.now(timezone.utc)

        all_violations: list[Violation] = []
        for rule in self.rules:
            checker = self._checker_for(rule)
            ctx = CheckContext(
                changed_files=list(changed_files),
                diff_content=diff_content,
                rule_config=rule.config,
                severity=rule.severity,
                rule_id=rule.id,
                rule_description=rule.description,
            )
            try:
                violations = checker.check(ctx)
            except RuleEngineError as exc:
                raise type(exc)(f"checking rule {rule.id!r}: {exc}") from exc
            all_violations.extend(violations)

        in_force = active_exceptions(self.exceptions, now)
        if in_force:
            all_violations = [v for v in all_violations if not is_excepted(v, in_force)]

        if self.meta_checker is not None:
            all_violations.extend(self.meta_checker.check(list(changed_files)))

        error_count = sum(1 for v in all_violations if v.severity == Severity.ERROR.value)
        warning_count = sum(1 for v in all_violations if v.severity == Severity.WARNING.value)

        return EngineResult(
            violations=all_violations,
            error_count=error_count,
            warning_count=warning_count,
        )
