"""Quorum arithmetic."""

import math

from guardian.models.agreement_models import QuorumConfig, QuorumType
from guardian.models.governance_models import QuorumOutcome, QuorumResult


def calculate_required(config: QuorumConfig, total_eligible: int) -> int:
    """Number of yes votes needed to accept.

    Quorum types:
        majority:   total_eligible // 2 + 1
        two_thirds: ceil(total_eligible * 2/3)
        unanimous:  total_eligible
        custom:     ceil(total_eligible * threshold)

    Any other type falls back to majority.
    """
    if config.type == QuorumType.TWO_THIRDS.value:
        return math.ceil(total_eligible * 2.0 / 3.0)
    if config.type == QuorumType.UNANIMOUS.value:
        return total_eligible
    if config.type == QuorumType.CUSTOM.value:
        return math.ceil(total_eligible * config.threshold)
    return total_eligible // 2 + 1


def calculate_quorum(
    config: QuorumConfig,
    total_eligible: int,
    yes_votes: int,
    no_votes: int,
) -> QuorumResult:
    """Decide a proposal from its vote counts.

    ACCEPTED once yes votes reach the requirement; REJECTED once the no votes
    leave too few undecided voters for yes to ever get there; PENDING otherwise.
    With zero eligible voters a majority needs 1 vote, so the result is REJECTED.
    """
    required = calculate_required(config, total_eligible)

    if yes_votes >= required:
        result = QuorumOutcome.ACCEPTED
    elif no_votes > total_eligible - required:
        result = QuorumOutcome.REJECTED
    else:
        result = QuorumOutcome.PENDING

    return QuorumResult(
        required=required,
        yes_votes=yes_votes,
        no_votes=no_votes,
        total_eligible=total_eligible,
        result=result,
    )
