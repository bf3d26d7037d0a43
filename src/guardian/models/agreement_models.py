"""Pydantic models for the .agreements/ store.

Every field has a permissive default so that a half-filled YAML document still
loads; ``guardian.config.validation`` reports the missing pieces in one pass.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _date_to_datetime(value: Any) -> Any:
    # YAML loads a bare "2025-01-31" as a date; read it as midnight UTC
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    return value


Timestamp = Annotated[datetime, BeforeValidator(_date_to_datetime)]


def _bool_to_decision(value: Any) -> Any:
    # YAML 1.1 loads an unquoted yes/no as a bool
    if isinstance(value, bool):
        return "yes" if value else "no"
    return value


Decision = Annotated[str, BeforeValidator(_bool_to_decision)]


class QuorumType(str, Enum):
    MAJORITY = "majority"
    TWO_THIRDS = "two_thirds"
    UNANIMOUS = "unanimous"
    CUSTOM = "custom"


class ProposalType(str, Enum):
    MODIFY = "modify"
    ADD = "add"
    REMOVE = "remove"


class ProposalStatus(str, Enum):
    PROPOSED = "proposed"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"
    EXPIRED = "expired"


class VoteDecision(str, Enum):
    YES = "yes"
    NO = "no"


class Rule(BaseModel):
    """A single entry of rules.yml."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    description: str = ""
    type: str = ""  # Dispatch key into the checker registry
    config: dict[str, Any] = Field(default_factory=dict)
    severity: str = ""  # "error" | "warning"


class RulesFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    rules: list[Rule] = Field(default_factory=list)


class RuleException(BaseModel):
    """Time-bounded waiver of a rule for a set of paths."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    rule_id: str = ""
    paths: list[str] = Field(default_factory=list)
    reason: str = ""
    created_by: str = ""
    created_at: Timestamp | None = None
    expires_at: Timestamp | None = None

    def is_active(self, now: datetime) -> bool:
        """Active iff it never expires or expires strictly after ``now``."""
        if self.expires_at is None:
            return True
        return as_utc(self.expires_at) > as_utc(now)


class QuorumConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str = ""  # Unknown values fall back to majority
    threshold: float = 0.0  # Only used by the custom type


class RuleOverride(BaseModel):
    model_config = ConfigDict(frozen=True)

    quorum: QuorumConfig = Field(default_factory=QuorumConfig)


class VoterRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: str = ""


class ExceptionPolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    require_approval: bool = False


class Governance(BaseModel):
    model_config = ConfigDict(frozen=True)

    voters: list[VoterRef] = Field(default_factory=list)
    quorum: QuorumConfig = Field(default_factory=QuorumConfig)
    forbid_self_approval: bool = False
    allow_vote_change: bool = False
    proposal_ttl_days: int = 0
    per_rule_overrides: dict[str, RuleOverride] = Field(default_factory=dict)
    exceptions: ExceptionPolicy = Field(default_factory=ExceptionPolicy)


class Identity(BaseModel):
    model_config = ConfigDict(frozen=True)

    allowed_domains: list[str] = Field(default_factory=list)
    require_signed_commits: bool = False


class RoleMember(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: str = ""


class Role(BaseModel):
    model_config = ConfigDict(frozen=True)

    members: list[RoleMember] = Field(default_factory=list)


class LLMPrompts(BaseModel):
    model_config = ConfigDict(frozen=True)

    check_system: str = ""


class LLMConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    provider: str = ""  # "deepseek" | "openai" | "claude" | "custom"; empty disables
    endpoint: str = ""
    model: str = ""
    prompts: LLMPrompts = Field(default_factory=LLMPrompts)


class Constitution(BaseModel):
    """Top-level constitution.yml document."""

    model_config = ConfigDict(frozen=True)

    governance: Governance = Field(default_factory=Governance)
    identity: Identity = Field(default_factory=Identity)
    roles: dict[str, Role] = Field(default_factory=dict)
    llm: LLMConfig = Field(default_factory=LLMConfig)


class ProposalChange(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: str = ""
    details: str = ""


class Proposal(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = ""
    rule_id: str = ""
    proposal_type: str = ""
    change: ProposalChange = Field(default_factory=ProposalChange)
    reason: str = ""
    impact: str = ""
    created_by: str = ""
    created_at: Timestamp | None = None
    status: str = ""


class Vote(BaseModel):
    model_config = ConfigDict(frozen=True)

    proposal_id: str = ""
    voter_email: str = ""
    decision: Decision = ""  # "yes" | "no"
    comment: str = ""
    voted_at: Timestamp | None = None


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
