"""Data models for guardian."""

from guardian.models.agreement_models import (
    Constitution,
    ExceptionPolicy,
    Governance,
    Identity,
    LLMConfig,
    LLMPrompts,
    Proposal,
    ProposalChange,
    ProposalStatus,
    ProposalType,
    QuorumConfig,
    QuorumType,
    Role,
    RoleMember,
    Rule,
    RuleException,
    RuleOverride,
    RulesFile,
    Vote,
    VoteDecision,
    VoterRef,
)
from guardian.models.diff_models import FileDiff
from guardian.models.governance_models import QuorumOutcome, QuorumResult, TallyResult
from guardian.models.report_models import EngineResult, Severity, Violation

__all__ = [
    "Constitution",
    "EngineResult",
    "ExceptionPolicy",
    "FileDiff",
    "Governance",
    "Identity",
    "LLMConfig",
    "LLMPrompts",
    "Proposal",
    "ProposalChange",
    "ProposalStatus",
    "ProposalType",
    "QuorumConfig",
    "QuorumOutcome",
    "QuorumResult",
    "QuorumType",
    "Role",
    "RoleMember",
    "Rule",
    "RuleException",
    "RuleOverride",
    "RulesFile",
    "Severity",
    "TallyResult",
    "Violation",
    "Vote",
    "VoteDecision",
    "VoterRef",
]
