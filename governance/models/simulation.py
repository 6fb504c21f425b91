from typing import List, Optional

from pydantic import BaseModel, Field

from governance.enums.state_change_type import StateChangeType


class StateChange(BaseModel):
    type: StateChangeType
    description: str
    from_address: Optional[str] = None
    to_address: Optional[str] = None
    value: Optional[str] = None
    token: Optional[str] = None


class SimulationResult(BaseModel):
    success: bool
    gas_used: int = 0
    error: Optional[str] = None
    state_changes: List[StateChange] = Field(default_factory=list)


class SimulationSummary(BaseModel):
    all_successful: bool
    total_gas: int
    failed_count: int
