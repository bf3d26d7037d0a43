"""Tests for the built-in rule checkers."""

import pytest

from guardian.rules.checkers import (
    DIFF_PATTERN_FORBIDDEN,
    DIFF_PATTERN_REQUIRES,
    IMPORTS_FORBIDDEN,
    CheckContext,
    DiffPatternForbiddenChecker,
    DiffPatternRequiresChecker,
    ImportsForbiddenChecker,
    RuleChecker,
    contains_segment,
    default_registry,
    extract_path_segments,
)
from guardian.rules.exceptions import ConfigError, PatternError


def _ctx(changed_files, diff_content, config, severity="error", rule_id="r1", description="Rule one"):
    return CheckContext(
        changed_files=changed_files,
        diff_content=diff_content,
        rule_config=config,
        severity=severity,
        rule_id=rule_id,
        rule_description=description,
    )


# ---------------------------------------------------------------------------
# imports_forbidden
# ---------------------------------------------------------------------------


class TestImportsForbiddenChecker:
    """Tests for ImportsForbiddenChecker."""

    CONFIG = {"from_globs": ["domain/**"], "forbid_globs": ["infra/**"]}

    def test_flags_dotted_import_of_forbidden_package(self, diff_builder):
        """Test that a dotted import reaching into infra is flagged."""
        path = "domain/service/UserService.kt"
        diff = diff_builder({path: ["import com.myapp.infra.database.UserRepository"]})

        violations = ImportsForbiddenChecker().check(
            _ctx([path], diff, self.CONFIG, rule_id="domain_no_infra", description="No infra")
        )

        assert len(violations) == 1
        violation = violations[0]
        assert violation.rule_id == "domain_no_infra"
        assert violation.severity == "error"
        assert violation.description == "No infra"
        assert violation.file_path == path
        assert violation.diff_snippet == "+import com.myapp.infra.database.UserRepository"

    def test_flags_slash_import(self, diff_builder):
        """Test that a path-style import is flagged."""
        path = "domain/a.ts"
        diff = diff_builder({path: ["import x from '../infra/db'"]})
        assert len(ImportsForbiddenChecker().check(_ctx([path], diff, self.CONFIG))) == 1

    def test_one_violation_per_line(self, diff_builder):
        """Test that a line hitting several segments is reported once."""
        config = {"from_globs": ["domain/**"], "forbid_globs": ["infra/**", "data/**"]}
        path = "domain/a.kt"
        diff = diff_builder({path: ["import infra.data.X", "val ok = 1", "import data.Y"]})

        violations = ImportsForbiddenChecker().check(_ctx([path], diff, config))

        assert [v.diff_snippet for v in violations] == ["+import infra.data.X", "+import data.Y"]

    def test_files_outside_from_globs_are_ignored(self, diff_builder):
        """Test that only files matching from_globs are inspected."""
        path = "app/Main.kt"
        diff = diff_builder({path: ["import com.myapp.infra.database.UserRepository"]})
        assert ImportsForbiddenChecker().check(_ctx([path], diff, self.CONFIG)) == []

    def test_changed_file_missing_from_diff_is_skipped(self, diff_builder):
        """Test that a changed file with no diff section yields nothing."""
        diff = diff_builder({"other/file.kt": ["import infra.X"]})
        assert ImportsForbiddenChecker().check(_ctx(["domain/a.kt"], diff, self.CONFIG)) == []

    def test_bare_segment_without_separator_is_not_flagged(self, diff_builder):
        """Test that "infra" with no trailing separator is not a hit."""
        path = "domain/a.kt"
        diff = diff_builder({path: ["// talk to infra team"]})
        assert ImportsForbiddenChecker().check(_ctx([path], diff, self.CONFIG)) == []

    def test_missing_config_key_raises(self):
        """Test that a missing forbid_globs key is a ConfigError."""
        with pytest.raises(ConfigError, match="missing config key 'forbid_globs'"):
            ImportsForbiddenChecker().check(_ctx([], "", {"from_globs": ["a/**"]}))

    def test_wrong_type_raises(self):
        """Test that a non-list glob setting is a ConfigError."""
        with pytest.raises(ConfigError, match="from_globs"):
            ImportsForbiddenChecker().check(
                _ctx([], "", {"from_globs": 5, "forbid_globs": ["infra/**"]})
            )


class TestSegmentHelpers:
    """Tests for extract_path_segments and contains_segment."""

    def test_extract_strips_trailing_stars_and_slashes(self):
        """Test that globs reduce to their leading path."""
        assert extract_path_segments(["infra/**", "data/*", "net", "**"]) == ["infra", "data", "net"]

    def test_contains_segment(self):
        """Test segment detection with both separators."""
        assert contains_segment("import a.infra.b", "infra")
        assert contains_segment("from '../infra/db'", "infra")
        assert not contains_segment("infrastructure", "infra")


# ---------------------------------------------------------------------------
# diff_pattern_forbidden
# ---------------------------------------------------------------------------


class TestDiffPatternForbiddenChecker:
    """Tests for DiffPatternForbiddenChecker."""

    def test_flags_matching_added_lines(self, diff_builder):
        """Test that every matching added line is a violation."""
        diff = diff_builder({
            "domain/model/Price.kt": ["val amount: Double", "val cents: Long"],
            "app/Ui.kt": ["val ratio: Double"],
        })
        config = {"forbidden_regexes": [r"\bDouble\b"]}

        violations = DiffPatternForbiddenChecker().check(
            _ctx(["domain/model/Price.kt", "app/Ui.kt"], diff, config, severity="warning")
        )

        assert [(v.file_path, v.diff_snippet) for v in violations] == [
            ("domain/model/Price.kt", "+val amount: Double"),
            ("app/Ui.kt", "+val ratio: Double"),
        ]
        assert all(v.severity == "warning" for v in violations)

    def test_only_in_paths_restricts_files(self, diff_builder):
        """Test that only_in_paths limits which files are inspected."""
        diff = diff_builder({
            "domain/model/Price.kt": ["val amount: Double"],
            "app/Ui.kt": ["val ratio: Double"],
        })
        config = {"forbidden_regexes": ["Double"], "only_in_paths": ["domain/**"]}

        violations = DiffPatternForbiddenChecker().check(
            _ctx(["domain/model/Price.kt", "app/Ui.kt"], diff, config)
        )

        assert [v.file_path for v in violations] == ["domain/model/Price.kt"]

    def test_only_in_paths_with_no_match_returns_empty(self, diff_builder):
        """Test that no violations are produced when no file is in scope."""
        diff = diff_builder({"app/Ui.kt": ["val ratio: Double"]})
        config = {"forbidden_regexes": ["Double"], "only_in_paths": ["domain/**"]}
        assert DiffPatternForbiddenChecker().check(_ctx(["app/Ui.kt"], diff, config)) == []

    @pytest.mark.parametrize("only_in_paths", ["src/**", ["src/**", 3], None])
    def test_malformed_only_in_paths_checks_every_file(self, diff_builder, only_in_paths):
        """Test that a malformed only_in_paths is ignored rather than rejected."""
        diff = diff_builder({"app/Ui.kt": ["val ratio: Double"]})
        config = {"forbidden_regexes": ["Double"], "only_in_paths": only_in_paths}

        violations = DiffPatternForbiddenChecker().check(_ctx(["app/Ui.kt"], diff, config))

        assert [v.file_path for v in violations] == ["app/Ui.kt"]

    def test_files_not_in_changed_list_are_ignored(self, diff_builder):
        """Test that diff sections for unlisted files are skipped."""
        diff = diff_builder({"a.kt": ["println()"]})
        config = {"forbidden_regexes": ["println"]}
        assert DiffPatternForbiddenChecker().check(_ctx(["b.kt"], diff, config)) == []

    def test_invalid_regex_raises(self, diff_builder):
        """Test that an uncompilable regex is a PatternError."""
        diff = diff_builder({"a.kt": ["x"]})
        with pytest.raises(PatternError, match="invalid regex"):
            DiffPatternForbiddenChecker().check(
                _ctx(["a.kt"], diff, {"forbidden_regexes": ["(unclosed"]})
            )

    def test_missing_regexes_raises(self):
        """Test that forbidden_regexes is required."""
        with pytest.raises(ConfigError, match="forbidden_regexes"):
            DiffPatternForbiddenChecker().check(_ctx([], "", {}))


# ---------------------------------------------------------------------------
# diff_pattern_requires
# ---------------------------------------------------------------------------


class TestDiffPatternRequiresChecker:
    """Tests for DiffPatternRequiresChecker."""

    CONFIG = {"required_regexes": [r"@Test"], "only_in_paths": ["domain/**"]}

    def test_missing_required_pattern_reports_first_matched_file(self, diff_builder):
        """Test that one violation is reported against the first file in scope."""
        diff = diff_builder({
            "domain/a/Service.kt": ["fun run() = 1"],
            "domain/b/Other.kt": ["fun other() = 2"],
        })

        violations = DiffPatternRequiresChecker().check(
            _ctx(["app/Main.kt", "domain/a/Service.kt", "domain/b/Other.kt"], diff, self.CONFIG)
        )

        assert len(violations) == 1
        assert violations[0].file_path == "domain/a/Service.kt"
        assert violations[0].diff_snippet == ""

    def test_required_pattern_found_in_any_file_satisfies(self, diff_builder):
        """Test that a match outside only_in_paths still satisfies the rule."""
        diff = diff_builder({
            "domain/a/Service.kt": ["fun run() = 1"],
            "tests/ServiceTest.kt": ["@Test fun runs() {}"],
        })

        violations = DiffPatternRequiresChecker().check(
            _ctx(["domain/a/Service.kt", "tests/ServiceTest.kt"], diff, self.CONFIG)
        )

        assert violations == []

    def test_untouched_scope_needs_nothing(self, diff_builder):
        """Test that nothing is required when no file is in scope."""
        diff = diff_builder({"app/Main.kt": ["x"]})
        assert DiffPatternRequiresChecker().check(_ctx(["app/Main.kt"], diff, self.CONFIG)) == []

    def test_only_in_paths_is_required(self):
        """Test that only_in_paths must be configured."""
        with pytest.raises(ConfigError, match="missing config key 'only_in_paths'"):
            DiffPatternRequiresChecker().check(_ctx([], "", {"required_regexes": ["x"]}))

    def test_invalid_regex_raises(self, diff_builder):
        """Test that an uncompilable regex is a PatternError."""
        diff = diff_builder({"domain/a.kt": ["x"]})
        config = {"required_regexes": ["[bad"], "only_in_paths": ["domain/**"]}
        with pytest.raises(PatternError):
            DiffPatternRequiresChecker().check(_ctx(["domain/a.kt"], diff, config))


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestDefaultRegistry:
    """Tests for default_registry."""

    def test_contains_builtin_types(self):
        """Test that all three built-in types are registered."""
        registry = default_registry()
        assert set(registry) == {IMPORTS_FORBIDDEN, DIFF_PATTERN_FORBIDDEN, DIFF_PATTERN_REQUIRES}
        assert isinstance(registry[IMPORTS_FORBIDDEN], ImportsForbiddenChecker)

    def test_checkers_satisfy_protocol(self):
        """Test that every built-in checker is a RuleChecker."""
        for checker in default_registry().values():
            assert isinstance(checker, RuleChecker)

    def test_returns_fresh_mapping(self):
        """Test that mutating one registry does not affect the next."""
        first = default_registry()
        first.pop(IMPORTS_FORBIDDEN)
        assert IMPORTS_FORBIDDEN in default_registry()
