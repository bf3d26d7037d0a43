"""Result models for proposal tallies."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from guardian.models.agreement_models import QuorumConfig, Vote


class QuorumOutcome(str, Enum):
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    PENDING = "PENDING"
    EXPIRED = "EXPIRED"


class QuorumResult(BaseModel):
    model_config = ConfigDict(frozen=False)

    required: int
    yes_votes: int
    no_votes: int
    total_eligible: int
    result: QuorumOutcome


class TallyResult(BaseModel):
    model_config = ConfigDict(frozen=False)

    proposal_id: str
    rule_id: str
    eligible_voters: list[str] = Field(default_factory=list)
    votes: list[Vote] = Field(default_factory=list)
    quorum_result: QuorumResult
    quorum_config: QuorumConfig
    is_expired: bool = False
