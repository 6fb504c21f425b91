from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from governance.enums.execution_action import ExecutionAction
from governance.enums.transaction_status import TransactionStatus


class ContractCall(BaseModel):
    """
    A write call handed to the wallet/transaction boundary:
    {address, abi, functionName, args, chainId} plus the native value sent along.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    address: str
    abi: List[Dict[str, Any]]
    function_name: str
    args: Tuple[Any, ...]
    chain_id: int
    value: int = 0


class ExecutionAvailability(BaseModel):
    model_config = ConfigDict(frozen=True)

    can_queue: bool = False
    can_execute: bool = False
    can_cancel: bool = False
    # Seconds until eta while QUEUED, otherwise 0
    time_until_executable: int = 0


class TransactionState(BaseModel):
    """Lifecycle of one queue/execute/cancel/vote/propose attempt."""

    status: TransactionStatus = TransactionStatus.NOT_SUBMITTED
    action: Optional[str] = None
    tx_hash: Optional[str] = None
    error: Optional[str] = None


class ExecutionPlan(BaseModel):
    """Availability of each lifecycle operation together with the shared call arguments."""

    proposal_key: str
    state: str
    availability: ExecutionAvailability
    targets: List[str] = Field(default_factory=list)
    values: List[int] = Field(default_factory=list)
    calldatas: List[str] = Field(default_factory=list)
    description_hash: str
    available_actions: List[ExecutionAction] = Field(default_factory=list)


class SubmissionResult(BaseModel):
    """Outcome of submitting a new proposal."""

    description: str
    transaction: TransactionState
    metadata_cid: Optional[str] = None
