from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from governance.models._validators import normalize_address, normalize_hex


class ProposalAction(BaseModel):
    """One call the timelock performs when the proposal executes."""

    model_config = ConfigDict(frozen=True)

    target: str
    value: int = Field(default=0, ge=0)  # wei
    calldata: str = "0x"
    description: str

    @field_validator("target")
    @classmethod
    def _check_target(cls, value: str) -> str:
        return normalize_address(value)

    @field_validator("calldata")
    @classmethod
    def _check_calldata(cls, value: str) -> str:
        return normalize_hex(value)


class EncodedActions(BaseModel):
    """Output of an action template: the actions plus batch totals for display."""

    actions: List[ProposalAction]
    # Sum of per-recipient amounts in base units (batch templates only)
    total: Optional[int] = None
    total_display: Optional[str] = None
