"""Tests for glob path matching."""

import pytest

from guardian.utils.path_matcher import (
    filter_by_globs,
    match_segment_glob,
    matches,
    matches_any,
)


class TestMatchSegmentGlob:
    """Tests for single-segment glob matching."""

    @pytest.mark.parametrize(
        "path, pattern, expected",
        [
            ("src/a.kt", "src/*.kt", True),
            ("src/a/b.kt", "src/*.kt", False),
            ("abc", "a?c", True),
            ("a/c", "a?c", False),
            ("b", "[a-c]", True),
            ("d", "[a-c]", False),
            ("d", "[^a-c]", True),
            ("b", "[^a-c]", False),
            ("a*", "a\\*", True),
            ("ab", "a\\*", False),
            ("domain/legacy/Old.kt", "domain/legacy/*.kt", True),
        ],
    )
    def test_glob_semantics(self, path, pattern, expected):
        """Test wildcard, class and escape handling."""
        assert match_segment_glob(path, pattern) is expected

    @pytest.mark.parametrize("pattern", ["[", "[a-", "a\\", "[]", "[a-]"])
    def test_malformed_pattern_never_matches(self, pattern):
        """Test that malformed globs return False instead of raising."""
        assert match_segment_glob("a", pattern) is False

    def test_reversed_range_matches_nothing(self):
        """Test that a range with lo > hi is empty."""
        assert match_segment_glob("b", "[c-a]") is False

    def test_double_star_is_not_expanded(self):
        """Test that ** behaves like two single-segment stars."""
        assert match_segment_glob("domain/a/b.kt", "domain/**") is False
        assert match_segment_glob("domain/b.kt", "domain/**") is True


class TestMatches:
    """Tests for ** aware matching."""

    def test_prefix_only_pattern_matches_everything_below(self):
        """Test that "domain/**" matches any depth under domain."""
        assert matches("domain/service/User.kt", "domain/**")
        assert matches("domain/User.kt", "domain/**")

    def test_prefix_is_a_raw_string_prefix(self):
        """Test that the prefix check does not respect segment boundaries."""
        assert matches("domainx/User.kt", "domain/**")

    def test_prefix_mismatch(self):
        """Test that paths outside the prefix do not match."""
        assert not matches("infra/db/Repo.kt", "domain/**")

    def test_leading_double_star_tries_every_tail(self):
        """Test that "**/*.kt" matches at any depth."""
        assert matches("model.kt", "**/*.kt")
        assert matches("src/model.kt", "**/*.kt")
        assert matches("a/b/c/model.kt", "**/*.kt")
        assert not matches("src/model.java", "**/*.kt")

    def test_prefix_and_suffix(self):
        """Test a pattern with both a prefix and a suffix."""
        assert matches("domain/a/b/UserTest.kt", "domain/**/*Test.kt")
        assert matches("domain/UserTest.kt", "domain/**/*Test.kt")
        assert not matches("domain/a/User.kt", "domain/**/*Test.kt")
        assert not matches("app/UserTest.kt", "domain/**/*Test.kt")

    def test_bare_double_star_matches_anything(self):
        """Test that "**" alone matches every path."""
        assert matches("anything/at/all.txt", "**")

    def test_without_double_star_falls_back_to_segment_glob(self):
        """Test that plain globs keep single-segment semantics."""
        assert matches("src/a.kt", "src/*.kt")
        assert not matches("src/a/b.kt", "src/*.kt")


class TestMatchesAnyAndFilter:
    """Tests for matches_any and filter_by_globs."""

    def test_matches_any(self):
        """Test that one matching pattern is enough."""
        assert matches_any("infra/db.kt", ["domain/**", "infra/**"])
        assert not matches_any("app/main.kt", ["domain/**", "infra/**"])
        assert not matches_any("app/main.kt", [])

    def test_filter_preserves_order(self):
        """Test that filtered files keep their input order."""
        files = ["infra/b.kt", "app/x.kt", "domain/a.kt", "infra/a.kt"]
        assert filter_by_globs(files, ["infra/**", "domain/**"]) == [
            "infra/b.kt",
            "domain/a.kt",
            "infra/a.kt",
        ]

    def test_filter_with_no_globs_returns_nothing(self):
        """Test that an empty glob list selects no files."""
        assert filter_by_globs(["a.kt"], []) == []
