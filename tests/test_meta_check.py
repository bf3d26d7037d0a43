"""Tests for the governance-file meta check."""

from pathlib import Path
from unittest.mock import MagicMock

from guardian.config.loader import has_accepted_proposal
from guardian.rules.meta_check import META_RULE_ID, MetaChecker, is_protected_file


class TestIsProtectedFile:
    """Tests for is_protected_file."""

    def test_protected_paths(self):
        """Test that constitution and rules are protected."""
        assert is_protected_file(".agreements/constitution.yml")
        assert is_protected_file(".agreements/rules.yml")

    def test_backslash_separators_are_normalized(self):
        """Test that Windows separators are treated like forward slashes."""
        assert is_protected_file(".agreements\\rules.yml")

    def test_other_agreements_files_are_not_protected(self):
        """Test that proposals and votes may change freely."""
        assert not is_protected_file(".agreements/proposals/p1.yml")
        assert not is_protected_file("src/.agreements/rules.yml")


class TestMetaChecker:
    """Tests for MetaChecker."""

    def test_flags_protected_change_without_accepted_proposal(self):
        """Test that a rules.yml edit without an accepted proposal is an error."""
        predicate = MagicMock(return_value=False)
        checker = MetaChecker("/repo/.agreements/proposals", predicate)

        violations = checker.check(["src/a.kt", ".agreements/rules.yml"])

        assert len(violations) == 1
        violation = violations[0]
        assert violation.rule_id == META_RULE_ID
        assert violation.severity == "error"
        assert violation.description == "Changes to .agreements/rules.yml require an accepted proposal"
        assert violation.file_path == ".agreements/rules.yml"
        assert violation.diff_snippet == ""
        predicate.assert_called_once_with(Path("/repo/.agreements/proposals"))

    def test_accepted_proposal_allows_changes(self):
        """Test that any accepted proposal clears every protected file."""
        checker = MetaChecker("proposals", MagicMock(return_value=True))
        assert checker.check([".agreements/rules.yml", ".agreements/constitution.yml"]) == []

    def test_predicate_not_called_without_protected_files(self):
        """Test that the proposal store is only consulted when needed."""
        predicate = MagicMock(return_value=False)
        assert MetaChecker("proposals", predicate).check(["src/a.kt"]) == []
        predicate.assert_not_called()

    def test_predicate_called_once_for_several_files(self):
        """Test that the proposal lookup happens once per check."""
        predicate = MagicMock(return_value=False)
        violations = MetaChecker("proposals", predicate).check(
            [".agreements/rules.yml", ".agreements/constitution.yml"]
        )
        assert len(violations) == 2
        assert predicate.call_count == 1

    def test_with_filesystem_predicate(self, tmp_path):
        """Test the checker wired to the on-disk proposal scan."""
        proposals = tmp_path / "proposals"
        checker = MetaChecker(proposals, has_accepted_proposal)
        assert len(checker.check([".agreements/rules.yml"])) == 1

        proposals.mkdir()
        (proposals / "p1.yml").write_text("id: p1\nstatus: accepted\n", encoding="utf-8")
        assert checker.check([".agreements/rules.yml"]) == []
