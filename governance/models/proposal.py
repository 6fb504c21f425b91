from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from governance.enums.proposal_state import ProposalState
from governance.models._validators import normalize_address, normalize_hex


class Proposal(BaseModel):
    """
    A governor proposal as reported by the indexer. Read-only to the core:
    derived values (effective state, call arguments) are computed from it, never written back.
    """

    model_config = ConfigDict(frozen=True)

    # Identity
    chain_id: int = Field(gt=0)
    governor: str
    proposal_id: int = Field(ge=0)
    dao_id: Optional[str] = None

    proposer: str
    description: str

    # Index-aligned actions
    targets: List[str] = Field(default_factory=list)
    values: List[int] = Field(default_factory=list)
    calldatas: List[str] = Field(default_factory=list)

    # Vote tallies (18-decimal token units)
    for_votes: int = Field(default=0, ge=0)
    against_votes: int = Field(default=0, ge=0)
    abstain_votes: int = Field(default=0, ge=0)

    # Unix seconds (the governor clock is timestamp based)
    vote_start: int = Field(ge=0)
    vote_end: int = Field(ge=0)
    eta: Optional[int] = Field(default=None, ge=0)
    created_at: Optional[int] = None

    state: ProposalState = ProposalState.PENDING

    @field_validator("governor", "proposer")
    @classmethod
    def _check_address(cls, value: str) -> str:
        return normalize_address(value)

    @field_validator("targets")
    @classmethod
    def _check_targets(cls, value: List[str]) -> List[str]:
        return [normalize_address(target) for target in value]

    @field_validator("values")
    @classmethod
    def _check_values(cls, value: List[int]) -> List[int]:
        if any(v < 0 for v in value):
            raise ValueError("values must be non-negative")
        return value

    @field_validator("calldatas")
    @classmethod
    def _check_calldatas(cls, value: List[str]) -> List[str]:
        return [normalize_hex(calldata) for calldata in value]

    @model_validator(mode="after")
    def _check_actions_aligned(self) -> "Proposal":
        if not (len(self.targets) == len(self.values) == len(self.calldatas)):
            raise ValueError(
                f"targets/values/calldatas length mismatch "
                f"({len(self.targets)}/{len(self.values)}/{len(self.calldatas)})"
            )
        return self

    @property
    def key(self) -> str:
        """Indexer id: chainId_governor_proposalId."""
        return f"{self.chain_id}_{self.governor}_{self.proposal_id}"

    @property
    def title(self) -> str:
        first_line = self.description.strip().split("\n", 1)[0] if self.description else ""
        return first_line.lstrip("#").strip()

    @property
    def total_votes(self) -> int:
        return self.for_votes + self.against_votes + self.abstain_votes
