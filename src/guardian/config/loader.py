"""Read the .agreements/ YAML store into models.

Layout::

    .agreements/
        constitution.yml
        rules.yml
        exceptions/<id>.yml
        proposals/<id>.yml
        votes/<proposal_id>/<voter>.yml
"""

from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from guardian.config.exceptions import (
    AgreementsLoadError,
    AgreementsNotFoundError,
    ProposalNotFoundError,
)
from guardian.models.agreement_models import (
    Constitution,
    Proposal,
    RuleException,
    RulesFile,
    Vote,
)

AGREEMENTS_DIR_NAME = ".agreements"
CONSTITUTION_FILE = "constitution.yml"
RULES_FILE = "rules.yml"
EXCEPTIONS_DIR = "exceptions"
PROPOSALS_DIR = "proposals"
VOTES_DIR = "votes"
YAML_SUFFIXES = frozenset({".yml", ".yaml"})
ACCEPTED_STATUS_MARKER = "status: accepted"

ModelT = TypeVar("ModelT", bound=BaseModel)


def find_agreements_dir(start: str | Path | None = None) -> Path:
    """Walk upward from ``start`` (default: cwd) to find .agreements/.

    Raises:
        AgreementsNotFoundError: If the filesystem root is reached first.
    """
    origin = Path(start).resolve() if start is not None else Path.cwd().resolve()
    for directory in (origin, *origin.parents):
        candidate = directory / AGREEMENTS_DIR_NAME
        if candidate.is_dir():
            return candidate
    raise AgreementsNotFoundError(
        f"{AGREEMENTS_DIR_NAME} directory not found (searched from {origin} to filesystem root)"
    )


def _yaml_files(directory: Path) -> list[Path]:
    """YAML files directly inside ``directory`` sorted by name; [] if missing."""
    if not directory.is_dir():
        return []
    return sorted(
        entry for entry in directory.iterdir()
        if entry.is_file() and entry.suffix.lower() in YAML_SUFFIXES
    )


def _read_yaml(path: Path) -> Any:
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise AgreementsLoadError(f"reading {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise AgreementsLoadError(f"parsing {path}: {exc}") from exc


def _load_model(path: Path, model: type[ModelT]) -> ModelT:
    raw = _read_yaml(path)
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise AgreementsLoadError(f"parsing {path}: expected mapping at top level")
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        raise AgreementsLoadError(f"parsing {path}: {exc}") from exc


def load_constitution(agreements_dir: Path) -> Constitution:
    return _load_model(agreements_dir / CONSTITUTION_FILE, Constitution)


def load_rules(agreements_dir: Path) -> RulesFile:
    return _load_model(agreements_dir / RULES_FILE, RulesFile)


def load_exception(path: Path) -> RuleException:
    return _load_model(path, RuleException)


def load_all_exceptions(agreements_dir: Path) -> list[RuleException]:
    return [load_exception(path) for path in _yaml_files(agreements_dir / EXCEPTIONS_DIR)]


def load_proposal(path: Path) -> Proposal:
    return _load_model(path, Proposal)


def load_all_proposals(agreements_dir: Path) -> list[Proposal]:
    return [load_proposal(path) for path in _yaml_files(agreements_dir / PROPOSALS_DIR)]


def load_votes_for_proposal(agreements_dir: Path, proposal_id: str) -> list[Vote]:
    directory = agreements_dir / VOTES_DIR / proposal_id
    return [_load_model(path, Vote) for path in _yaml_files(directory)]


def find_proposal(agreements_dir: Path, proposal_id: str) -> tuple[Proposal, Path]:
    """Return the proposal with ``proposal_id`` and the file it came from.

    Unparsable proposal files are skipped while searching.

    Raises:
        ProposalNotFoundError: If no proposal carries that id.
    """
    for path in _yaml_files(agreements_dir / PROPOSALS_DIR):
        try:
            proposal = load_proposal(path)
        except AgreementsLoadError:
            continue
        if proposal.id == proposal_id:
            return proposal, path
    raise ProposalNotFoundError(f"proposal {proposal_id!r} not found")


def has_accepted_proposal(proposals_dir: Path) -> bool:
    """True if any proposal file in ``proposals_dir`` contains "status: accepted".

    A plain substring scan: files are not parsed, unreadable ones are skipped,
    and a missing directory counts as no accepted proposal.
    """
    for path in _yaml_files(Path(proposals_dir)):
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            continue
        if ACCEPTED_STATUS_MARKER in content:
            return True
    return False
