from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Pinned documents use the camelCase keys other dashboard clients read
PINNED_RECORD_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ActionSummary(BaseModel):
    model_config = PINNED_RECORD_CONFIG

    description: str
    target: str
    value: str  # wei, decimal text
    calldata: str


class DaoInfo(BaseModel):
    model_config = PINNED_RECORD_CONFIG

    id: str
    name: str
    governor: str
    chain_id: int


class ProposalMetadata(BaseModel):
    """Off-chain record pinned to IPFS alongside a new proposal."""

    model_config = PINNED_RECORD_CONFIG

    title: str
    description: str
    actions: List[ActionSummary] = Field(default_factory=list)
    created_at: str
    created_by: str
    dao: DaoInfo


class VoteReasonMetadata(BaseModel):
    """Off-chain record of a vote's free-text reason."""

    model_config = PINNED_RECORD_CONFIG

    voter: str
    proposal_id: str  # chainId_governor_proposalId
    dao_id: str  # chainId_governor
    support: str  # FOR, AGAINST or ABSTAIN
    reason: str
    created_at: str
