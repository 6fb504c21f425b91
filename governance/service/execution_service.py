from typing import List, Optional

from hexbytes import HexBytes

from abi.dao_governance_abi import GOVERNOR_ABI
from governance.enums.execution_action import ExecutionAction
from governance.enums.proposal_state import CANCELABLE_STATES, ProposalState
from governance.models.execution import ContractCall, ExecutionAvailability, ExecutionPlan, TransactionState
from governance.models.proposal import Proposal
from governance.providers.transaction_sender import TransactionSender
from governance.service.transaction_tracker import TransactionTracker
from utils.clock_utils import Clock, current_unix_time
from utils.exceptions import PreconditionError
from utils.logger_utils import get_logger
from utils.web3_utils import description_hash

logger = get_logger("Execution Service")


class ExecutionService(object):
    """
    Gates and sequences queue, execute and cancel against a proposal's effective state.

    All three calls share the argument tuple (targets, values, calldatas, descriptionHash). The hash is
    keccak256 of the verbatim description the proposal was created with; any reformatting makes the
    governor reject the call.
    """

    def __init__(
        self,
        sender: Optional[TransactionSender] = None,
        clock: Clock = current_unix_time,
        receipt_timeout: Optional[float] = None,
    ):
        self._clock = clock
        self._tracker = TransactionTracker(sender, receipt_timeout)

    def get_availability(
        self,
        proposal: Proposal,
        state: ProposalState,
        caller: Optional[str] = None,
        now: Optional[int] = None,
    ) -> ExecutionAvailability:
        now = self._clock() if now is None else now

        can_execute = False
        time_until_executable = 0
        if state == ProposalState.QUEUED and proposal.eta is not None:
            time_left = proposal.eta - now
            can_execute = time_left <= 0
            time_until_executable = max(0, time_left)

        is_proposer = bool(caller) and caller.strip().lower() == proposal.proposer.lower()

        return ExecutionAvailability(
            can_queue=state == ProposalState.SUCCEEDED,
            can_execute=can_execute,
            can_cancel=is_proposer and state in CANCELABLE_STATES,
            time_until_executable=time_until_executable,
        )

    @staticmethod
    def description_hash(description: str) -> bytes:
        return description_hash(description)

    def build_call(self, action: ExecutionAction, proposal: Proposal) -> ContractCall:
        action = ExecutionAction(action)
        return ContractCall(
            address=proposal.governor,
            abi=GOVERNOR_ABI,
            function_name=action.value,
            args=(
                list(proposal.targets),
                list(proposal.values),
                [HexBytes(calldata) for calldata in proposal.calldatas],
                self.description_hash(proposal.description),
            ),
            chain_id=proposal.chain_id,
        )

    def plan(
        self,
        proposal: Proposal,
        state: ProposalState,
        caller: Optional[str] = None,
        now: Optional[int] = None,
    ) -> ExecutionPlan:
        availability = self.get_availability(proposal, state, caller, now)
        return ExecutionPlan(
            proposal_key=proposal.key,
            state=state.value,
            availability=availability,
            targets=list(proposal.targets),
            values=list(proposal.values),
            calldatas=list(proposal.calldatas),
            description_hash="0x" + self.description_hash(proposal.description).hex(),
            available_actions=self._available_actions(availability),
        )

    async def submit(
        self,
        action: ExecutionAction,
        proposal: Proposal,
        state: ProposalState,
        caller: str,
    ) -> TransactionState:
        """
        Sends queue/execute/cancel for `proposal` from `caller` and waits for confirmation.

        Raises:
            PreconditionError: The action is not available for the proposal's state, eta or caller.
            TransactionInFlightError: Another attempt for the same proposal has not settled.
            ExternalDependencyError: The wallet or node failed (retryable).
            ChainError: The transaction reverted or was not confirmed in time (retryable).
        """
        action = ExecutionAction(action)
        availability = self.get_availability(proposal, state, caller)
        if action not in self._available_actions(availability):
            raise PreconditionError(self._unavailable_reason(action, proposal, state, availability))

        call = self.build_call(action, proposal)
        logger.info(f"Submitting {action.value} for proposal {proposal.key}")
        return await self._tracker.submit(proposal.key, action.value, call, caller)

    def get_transaction_state(self, proposal: Proposal) -> TransactionState:
        return self._tracker.get_state(proposal.key)

    def reset(self, proposal: Proposal) -> None:
        self._tracker.reset(proposal.key)

    @staticmethod
    def _available_actions(availability: ExecutionAvailability) -> List[ExecutionAction]:
        actions = []
        if availability.can_queue:
            actions.append(ExecutionAction.QUEUE)
        if availability.can_execute:
            actions.append(ExecutionAction.EXECUTE)
        if availability.can_cancel:
            actions.append(ExecutionAction.CANCEL)
        return actions

    @staticmethod
    def _unavailable_reason(
        action: ExecutionAction,
        proposal: Proposal,
        state: ProposalState,
        availability: ExecutionAvailability,
    ) -> str:
        if action == ExecutionAction.QUEUE:
            return f"Proposal {proposal.key} is {state.value}; only SUCCEEDED proposals can be queued"
        if action == ExecutionAction.EXECUTE:
            if state != ProposalState.QUEUED:
                return f"Proposal {proposal.key} is {state.value}; only QUEUED proposals can be executed"
            if proposal.eta is None:
                return f"Proposal {proposal.key} has no timelock eta yet"
            return f"Proposal {proposal.key} is executable in {availability.time_until_executable}s"
        if state not in CANCELABLE_STATES:
            return f"Proposal {proposal.key} is {state.value} and can no longer be canceled"
        return f"Only the proposer of {proposal.key} can cancel it"
