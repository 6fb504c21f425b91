from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from governance.models._validators import normalize_address


class DAO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    chain_id: int = Field(gt=0)
    name: Optional[str] = None

    governor: str
    token: Optional[str] = None
    timelock: Optional[str] = None
    manager: Optional[str] = None

    total_supply: int = Field(default=0, ge=0)
    # Percentage over a denominator of 100 (GovernorVotesQuorumFraction)
    quorum_numerator: Optional[int] = Field(default=None, ge=0, le=100)

    voting_delay: Optional[int] = Field(default=None, ge=0)
    voting_period: Optional[int] = Field(default=None, ge=0)
    proposal_threshold: Optional[int] = Field(default=None, ge=0)

    token_symbol: Optional[str] = None
    token_decimals: Optional[int] = Field(default=None, ge=0, le=255)

    @field_validator("governor")
    @classmethod
    def _check_governor(cls, value: str) -> str:
        return normalize_address(value)

    @field_validator("token", "timelock", "manager")
    @classmethod
    def _check_optional_address(cls, value: Optional[str]) -> Optional[str]:
        return normalize_address(value) if value else None
