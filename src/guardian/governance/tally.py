"""Full proposal tally: eligibility, overrides, counting and expiry."""

from datetime import datetime, timedelta, timezone

from guardian.governance.quorum import calculate_quorum
from guardian.governance.roles import RoleResolver
from guardian.models.agreement_models import (
    Constitution,
    Governance,
    Proposal,
    QuorumConfig,
    Vote,
    VoteDecision,
    as_utc,
)
from guardian.models.governance_models import QuorumOutcome, TallyResult


def resolve_quorum_config(governance: Governance, rule_id: str) -> QuorumConfig:
    """Per-rule override if one exists for ``rule_id``, else the default quorum."""
    override = governance.per_rule_overrides.get(rule_id)
    if override is not None:
        return override.quorum
    return governance.quorum


def count_votes(votes: list[Vote], eligible: set[str]) -> tuple[int, int]:
    """Count yes/no votes cast by eligible voters; others are ignored."""
    yes_votes = 0
    no_votes = 0
    for vote in votes:
        if vote.voter_email not in eligible:
            continue
        if vote.decision == VoteDecision.YES.value:
            yes_votes += 1
        elif vote.decision == VoteDecision.NO.value:
            no_votes += 1
    return yes_votes, no_votes


def is_proposal_expired(proposal: Proposal, ttl_days: int, now: datetime) -> bool:
    if ttl_days <= 0 or proposal.created_at is None:
        return False
    expiry = as_utc(proposal.created_at) + timedelta(days=ttl_days)
    return as_utc(now) > expiry


def compute_tally(
    proposal: Proposal,
    votes: list[Vote],
    constitution: Constitution,
    now: datetime | None = None,
) -> TallyResult:
    """Tally a proposal against the constitution.

    Expiry wins over every other outcome: an expired proposal reports EXPIRED
    even when it has enough yes votes.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    governance = constitution.governance
    quorum_config = resolve_quorum_config(governance, proposal.rule_id)

    eligible_voters = RoleResolver.from_constitution(constitution).eligible_voters()
    yes_votes, no_votes = count_votes(votes, set(eligible_voters))

    is_expired = is_proposal_expired(proposal, governance.proposal_ttl_days, now)

    quorum_result = calculate_quorum(quorum_config, len(eligible_voters), yes_votes, no_votes)
    if is_expired:
        quorum_result.result = QuorumOutcome.EXPIRED

    return TallyResult(
        proposal_id=proposal.id,
        rule_id=proposal.rule_id,
        eligible_voters=eligible_voters,
        votes=list(votes),
        quorum_result=quorum_result,
        quorum_config=quorum_config,
        is_expired=is_expired,
    )
