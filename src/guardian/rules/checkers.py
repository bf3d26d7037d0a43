"""Rule checkers: one per rule type supported in rules.yml."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, TypeVar, Union, runtime_checkable

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from guardian.models.report_models import Violation
from guardian.rules.exceptions import ConfigError, PatternError
from guardian.utils.diff_parser import parse_diff
from guardian.utils.path_matcher import filter_by_globs, matches_any

IMPORTS_FORBIDDEN = "imports_forbidden"
DIFF_PATTERN_FORBIDDEN = "diff_pattern_forbidden"
DIFF_PATTERN_REQUIRES = "diff_pattern_requires"

ConfigT = TypeVar("ConfigT", bound=BaseModel)


@dataclass(frozen=True)
class CheckContext:
    """Everything a checker needs to evaluate one rule against one diff."""

    changed_files: list[str] = field(default_factory=list)
    diff_content: str = ""
    rule_config: Mapping[str, Any] = field(default_factory=dict)
    severity: str = "error"
    rule_id: str = ""
    rule_description: str = ""

    def violation(self, file_path: str, diff_snippet: str = "") -> Violation:
        return Violation(
            rule_id=self.rule_id,
            severity=self.severity,
            description=self.rule_description,
            file_path=file_path,
            diff_snippet=diff_snippet,
        )


# ---------------------------------------------------------------------------
# Typed configs
# ---------------------------------------------------------------------------


class ImportsForbiddenConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    from_globs: list[str]
    forbid_globs: list[str]


class DiffPatternForbiddenConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    forbidden_regexes: list[str]
    only_in_paths: list[str] = []  # Empty means every changed file

    @field_validator("only_in_paths", mode="before")
    @classmethod
    def _ignore_malformed_paths(cls, value: Any) -> Any:
        # Optional key: anything but a list of strings falls back to every file
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            return []
        return value


class DiffPatternRequiresConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    required_regexes: list[str]
    only_in_paths: list[str]


def _describe_validation_error(exc: ValidationError) -> str:
    error = exc.errors()[0]
    key = str(error["loc"][0]) if error["loc"] else ""
    if error["type"] == "missing":
        return f"missing config key {key!r}"
    return f"config key {key!r}: {error['msg']}"


def _parse_config(model: type[ConfigT], rule_type: str, config: Mapping[str, Any]) -> ConfigT:
    try:
        return model.model_validate(dict(config))
    except ValidationError as exc:
        raise ConfigError(f"{rule_type}: {_describe_validation_error(exc)}") from exc


def _compile_patterns(rule_type: str, patterns: list[str]) -> list[re.Pattern[str]]:
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as exc:
            raise PatternError(f"{rule_type}: invalid regex {pattern!r}: {exc}") from exc
    return compiled


def _first_match(line: str, compiled: list[re.Pattern[str]]) -> bool:
    return any(regex.search(line) for regex in compiled)


# ---------------------------------------------------------------------------
# Checkers
# ---------------------------------------------------------------------------


@runtime_checkable
class RuleChecker(Protocol):
    """Evaluates one rule type."""

    rule_type: str

    def parse_config(self, config: Mapping[str, Any]) -> BaseModel:
        """Validate a raw rule config, raising ConfigError when malformed."""

    def check(self, ctx: CheckContext) -> list[Violation]:
        """Return the violations of the rule described by ``ctx``."""


def extract_path_segments(globs: list[str]) -> list[str]:
    """Turn forbid globs into search terms: "infra/**" -> "infra"."""
    segments = []
    for glob in globs:
        segment = glob.rstrip("*").rstrip("/")
        if segment:
            segments.append(segment)
    return segments


def contains_segment(line: str, segment: str) -> bool:
    """Loose import-path heuristic: the segment followed by "/" or "."."""
    return f"{segment}/" in line or f"{segment}." in line


class ImportsForbiddenChecker:
    """Files matching from_globs must not reference paths under forbid_globs.

    This is a substring heuristic over added lines, not an import parser: a
    line mentioning ``infra.`` in a comment is flagged, and a bare ``infra``
    with no trailing separator is not.
    """

    rule_type = IMPORTS_FORBIDDEN

    def parse_config(self, config: Mapping[str, Any]) -> ImportsForbiddenConfig:
        return _parse_config(ImportsForbiddenConfig, self.rule_type, config)

    def check(self, ctx: CheckContext) -> list[Violation]:
        config = self.parse_config(ctx.rule_config)

        diff_map = {file_diff.path: file_diff for file_diff in parse_diff(ctx.diff_content)}
        segments = extract_path_segments(config.forbid_globs)

        violations: list[Violation] = []
        for file_path in ctx.changed_files:
            if not matches_any(file_path, config.from_globs):
                continue
            file_diff = diff_map.get(file_path)
            if file_diff is None:
                continue
            for added_line in file_diff.added_lines:
                # One violation per line, whichever segment hits first
                if any(contains_segment(added_line, segment) for segment in segments):
                    violations.append(ctx.violation(file_path, "+" + added_line))

        return violations


class DiffPatternForbiddenChecker:
    """Added lines must not match any of forbidden_regexes."""

    rule_type = DIFF_PATTERN_FORBIDDEN

    def parse_config(self, config: Mapping[str, Any]) -> DiffPatternForbiddenConfig:
        return _parse_config(DiffPatternForbiddenConfig, self.rule_type, config)

    def check(self, ctx: CheckContext) -> list[Violation]:
        config = self.parse_config(ctx.rule_config)
        compiled = _compile_patterns(self.rule_type, config.forbidden_regexes)

        files_to_check = ctx.changed_files
        if config.only_in_paths:
            files_to_check = filter_by_globs(ctx.changed_files, config.only_in_paths)
            if not files_to_check:
                return []
        file_set = set(files_to_check)

        violations: list[Violation] = []
        for file_diff in parse_diff(ctx.diff_content):
            if file_diff.path not in file_set:
                continue
            for added_line in file_diff.added_lines:
                if _first_match(added_line, compiled):
                    violations.append(ctx.violation(file_diff.path, "+" + added_line))

        return violations


class DiffPatternRequiresChecker:
    """Touching only_in_paths requires one of required_regexes somewhere in the diff.

    The search covers the added lines of every file in the diff, so a test
    added in an unrelated directory still satisfies the requirement.
    """

    rule_type = DIFF_PATTERN_REQUIRES

    def parse_config(self, config: Mapping[str, Any]) -> DiffPatternRequiresConfig:
        return _parse_config(DiffPatternRequiresConfig, self.rule_type, config)

    def check(self, ctx: CheckContext) -> list[Violation]:
        config = self.parse_config(ctx.rule_config)

        matched_files = filter_by_globs(ctx.changed_files, config.only_in_paths)
        if not matched_files:
            return []

        compiled = _compile_patterns(self.rule_type, config.required_regexes)
        for file_diff in parse_diff(ctx.diff_content):
            for added_line in file_diff.added_lines:
                if _first_match(added_line, compiled):
                    return []

        return [ctx.violation(matched_files[0])]


BuiltinChecker = Union[
    ImportsForbiddenChecker,
    DiffPatternForbiddenChecker,
    DiffPatternRequiresChecker,
]


def default_registry() -> dict[str, RuleChecker]:
    """Build a fresh type -> checker mapping for the built-in rule types."""
    checkers: list[BuiltinChecker] = [
        ImportsForbiddenChecker(),
        DiffPatternForbiddenChecker(),
        DiffPatternRequiresChecker(),
    ]
    return {checker.rule_type: checker for checker in checkers}
