"""Built-in check guarding the governance files themselves."""

from collections.abc import Callable
from pathlib import Path

from guardian.models.report_models import Severity, Violation

META_RULE_ID = "meta_check"

PROTECTED_FILES = (
    ".agreements/constitution.yml",
    ".agreements/rules.yml",
)

AcceptedProposalPredicate = Callable[[Path], bool]


def is_protected_file(file_path: str) -> bool:
    normalized = file_path.replace("\\", "/")
    return normalized in PROTECTED_FILES


class MetaChecker:
    """Flags edits to protected governance files made without an accepted proposal.

    The proposal store is consulted through ``has_accepted_proposal``, which
    receives ``proposals_dir`` and answers whether any proposal there has been
    accepted. It is only called when a protected file was actually touched.
    """

    def __init__(
        self,
        proposals_dir: str | Path,
        has_accepted_proposal: AcceptedProposalPredicate,
    ) -> None:
        self.proposals_dir = Path(proposals_dir)
        self._has_accepted_proposal = has_accepted_proposal

    def check(self, changed_files: list[str]) -> list[Violation]:
        violations: list[Violation] = []
        accepted: bool | None = None

        for file_path in changed_files:
            if not is_protected_file(file_path):
                continue
            if accepted is None:
                accepted = self._has_accepted_proposal(self.proposals_dir)
            if accepted:
                continue
            violations.append(Violation(
                rule_id=META_RULE_ID,
                severity=Severity.ERROR.value,
                description=f"Changes to {file_path} require an accepted proposal",
                file_path=file_path,
                diff_snippet="",
            ))

        return violations
