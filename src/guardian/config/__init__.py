"""Loading and validation of the .agreements/ store."""

from guardian.config.exceptions import (
    AgreementsError,
    AgreementsLoadError,
    AgreementsNotFoundError,
    AgreementsValidationError,
    ProposalNotFoundError,
)
from guardian.config.loader import (
    find_agreements_dir,
    find_proposal,
    has_accepted_proposal,
    load_all_exceptions,
    load_all_proposals,
    load_constitution,
    load_rules,
    load_votes_for_proposal,
)
from guardian.config.validation import (
    validate_constitution,
    validate_exception,
    validate_proposal,
    validate_rules,
    validate_vote,
)

__all__ = [
    "AgreementsError",
    "AgreementsLoadError",
    "AgreementsNotFoundError",
    "AgreementsValidationError",
    "ProposalNotFoundError",
    "find_agreements_dir",
    "find_proposal",
    "has_accepted_proposal",
    "load_all_exceptions",
    "load_all_proposals",
    "load_constitution",
    "load_rules",
    "load_votes_for_proposal",
    "validate_constitution",
    "validate_exception",
    "validate_proposal",
    "validate_rules",
    "validate_vote",
]
