"""Semantic validation of loaded agreements documents.

Each validator collects every problem before raising, so a user fixing a file
sees the full list at once.
"""

from guardian.config.exceptions import AgreementsValidationError
from guardian.models.agreement_models import (
    Constitution,
    Proposal,
    ProposalStatus,
    ProposalType,
    QuorumConfig,
    QuorumType,
    RuleException,
    RulesFile,
    Vote,
    VoteDecision,
    as_utc,
)
from guardian.models.report_models import Severity

VALID_QUORUM_TYPES = frozenset(item.value for item in QuorumType)
VALID_SEVERITIES = frozenset(item.value for item in Severity)
VALID_PROPOSAL_TYPES = frozenset(item.value for item in ProposalType)
VALID_PROPOSAL_STATUSES = frozenset(item.value for item in ProposalStatus)
VALID_DECISIONS = frozenset(item.value for item in VoteDecision)
VALID_LLM_PROVIDERS = ("deepseek", "openai", "claude", "custom")


def _quorum_problems(quorum: QuorumConfig, where: str) -> list[str]:
    problems = []
    if not quorum.type:
        problems.append(f"{where}.type must not be empty")
    elif quorum.type not in VALID_QUORUM_TYPES:
        problems.append(
            f"{where}.type {quorum.type!r} is invalid; "
            "must be one of: majority, two_thirds, unanimous, custom"
        )
    if quorum.type == QuorumType.CUSTOM.value and not 0 < quorum.threshold <= 1:
        problems.append(
            f"{where}.threshold must be between 0 (exclusive) and 1 (inclusive) "
            "for custom quorum type"
        )
    return problems


def validate_constitution(constitution: Constitution) -> None:
    problems: list[str] = []
    governance = constitution.governance

    if not governance.voters:
        problems.append("governance.voters must not be empty")
    for index, voter in enumerate(governance.voters):
        if not voter.role:
            problems.append(f"governance.voters[{index}].role must not be empty")

    problems.extend(_quorum_problems(governance.quorum, "governance.quorum"))

    if governance.proposal_ttl_days < 0:
        problems.append("governance.proposal_ttl_days must not be negative")

    for rule_id, override in governance.per_rule_overrides.items():
        problems.extend(
            _quorum_problems(override.quorum, f"governance.per_rule_overrides[{rule_id}].quorum")
        )

    if not constitution.roles:
        problems.append("roles must not be empty")
    for name, role in constitution.roles.items():
        if not role.members:
            problems.append(f"roles[{name}].members must not be empty")
        for index, member in enumerate(role.members):
            if not member.email:
                problems.append(f"roles[{name}].members[{index}].email must not be empty")

    for voter in governance.voters:
        if voter.role and voter.role not in constitution.roles:
            problems.append(
                f"governance.voters references role {voter.role!r} which is not defined in roles"
            )

    llm = constitution.llm
    if llm.provider and llm.provider not in VALID_LLM_PROVIDERS:
        problems.append(
            f"llm.provider {llm.provider!r} is invalid; "
            f"must be one of: {', '.join(VALID_LLM_PROVIDERS)}"
        )
    if llm.provider == "custom" and not llm.endpoint:
        problems.append("llm.endpoint is required when provider is custom")

    if problems:
        raise AgreementsValidationError("constitution", problems)


def validate_rules(rules_file: RulesFile) -> None:
    problems: list[str] = []
    seen_ids: set[str] = set()

    for index, rule in enumerate(rules_file.rules):
        if not rule.id:
            problems.append(f"rules[{index}].id must not be empty")
        elif rule.id in seen_ids:
            problems.append(f"rules[{index}].id {rule.id!r} is duplicated")
        else:
            seen_ids.add(rule.id)

        if not rule.description:
            problems.append(f"rules[{index}].description must not be empty")
        if not rule.type:
            problems.append(f"rules[{index}].type must not be empty")

        if not rule.severity:
            problems.append(f"rules[{index}].severity must not be empty")
        elif rule.severity not in VALID_SEVERITIES:
            problems.append(
                f"rules[{index}].severity {rule.severity!r} is invalid; must be one of: error, warning"
            )

    if problems:
        raise AgreementsValidationError("rules", problems)


def validate_proposal(proposal: Proposal) -> None:
    problems: list[str] = []

    if not proposal.id:
        problems.append("id must not be empty")
    if not proposal.rule_id:
        problems.append("rule_id must not be empty")
    if not proposal.proposal_type:
        problems.append("proposal_type must not be empty")
    elif proposal.proposal_type not in VALID_PROPOSAL_TYPES:
        problems.append(
            f"proposal_type {proposal.proposal_type!r} is invalid; must be one of: modify, add, remove"
        )
    if not proposal.change.description:
        problems.append("change.description must not be empty")
    if not proposal.reason:
        problems.append("reason must not be empty")
    if not proposal.created_by:
        problems.append("created_by must not be empty")
    if proposal.created_at is None:
        problems.append("created_at must be set")
    if not proposal.status:
        problems.append("status must not be empty")
    elif proposal.status not in VALID_PROPOSAL_STATUSES:
        problems.append(
            f"status {proposal.status!r} is invalid; "
            "must be one of: proposed, accepted, rejected, withdrawn, expired"
        )

    if problems:
        raise AgreementsValidationError("proposal", problems)


def validate_vote(vote: Vote) -> None:
    problems: list[str] = []

    if not vote.proposal_id:
        problems.append("proposal_id must not be empty")
    if not vote.voter_email:
        problems.append("voter_email must not be empty")
    if not vote.decision:
        problems.append("decision must not be empty")
    elif vote.decision not in VALID_DECISIONS:
        problems.append(f"decision {vote.decision!r} is invalid; must be one of: yes, no")
    if vote.voted_at is None:
        problems.append("voted_at must be set")

    if problems:
        raise AgreementsValidationError("vote", problems)


def validate_exception(exception: RuleException) -> None:
    problems: list[str] = []

    if not exception.id:
        problems.append("id must not be empty")
    if not exception.rule_id:
        problems.append("rule_id must not be empty")
    if not exception.paths:
        problems.append("paths must not be empty")
    if not exception.reason:
        problems.append("reason must not be empty")
    if not exception.created_by:
        problems.append("created_by must not be empty")
    if exception.created_at is None:
        problems.append("created_at must be set")
    elif exception.expires_at is not None and as_utc(exception.expires_at) < as_utc(exception.created_at):
        problems.append("expires_at must not be before created_at")

    if problems:
        raise AgreementsValidationError("exception", problems)
