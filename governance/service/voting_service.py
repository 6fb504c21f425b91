from typing import Any, Dict, Iterable, Optional

from abi.dao_governance_abi import GOVERNOR_ABI
from constants.constants import IPFS_URI_PREFIX
from governance.clients.pinata_client import PinataClient
from governance.enums.proposal_state import ProposalState
from governance.enums.vote_support import VoteSupport
from governance.models.execution import ContractCall, TransactionState
from governance.models.metadata import VoteReasonMetadata
from governance.models.proposal import Proposal
from governance.models.vote import ExistingVote
from governance.providers.transaction_sender import TransactionSender
from governance.service.transaction_tracker import TransactionTracker
from utils.clock_utils import Clock, current_unix_time, to_iso_timestamp
from utils.exceptions import ExternalDependencyError, PreconditionError, TransactionInFlightError
from utils.logger_utils import get_logger

logger = get_logger("Voting Service")


class VotingService(object):
    def __init__(
        self,
        sender: TransactionSender,
        pinata_client: Optional[PinataClient] = None,
        clock: Clock = current_unix_time,
        receipt_timeout: Optional[float] = None,
    ):
        self._pinata_client = pinata_client
        self._clock = clock
        self._tracker = TransactionTracker(sender, receipt_timeout)
        # Proposal keys whose vote is being prepared or submitted
        self._reserved: set = set()

    @staticmethod
    def can_vote(
        voter: Optional[str],
        voting_power: int,
        existing_vote: Optional[ExistingVote],
        state: ProposalState,
    ) -> bool:
        return bool(voter) and voting_power > 0 and existing_vote is None and state == ProposalState.ACTIVE

    @staticmethod
    def resolve_voting_power(holders: Iterable[Dict[str, Any]], voter: Optional[str]) -> int:
        """Votes of the voter's token holder record; 0 when the voter holds nothing."""
        if not voter:
            return 0
        for holder in holders:
            if str(holder.get("holder", "")).lower() == voter.lower():
                return int(holder.get("votes") or 0)
        return 0

    @staticmethod
    def find_existing_vote(votes: Iterable[Dict[str, Any]], voter: Optional[str]) -> Optional[ExistingVote]:
        if not voter:
            return None
        for vote in votes:
            if str(vote.get("voter", "")).lower() == voter.lower():
                return ExistingVote(
                    support=str(vote.get("support")),
                    weight=int(vote.get("weight") or 0),
                    reason=vote.get("reason"),
                )
        return None

    async def prepare_reason(
        self, proposal: Proposal, voter: str, support: VoteSupport, reason: Optional[str]
    ) -> Optional[str]:
        """
        Returns the reason string to put on chain: an ipfs:// URI of the pinned reason record,
        the trimmed raw text when pinning is unavailable or fails, or None for a blank reason.
        """
        if not reason or not reason.strip():
            return None
        reason = reason.strip()

        if self._pinata_client is None:
            return reason

        metadata = VoteReasonMetadata(
            voter=voter,
            proposal_id=proposal.key,
            dao_id=proposal.dao_id or f"{proposal.chain_id}_{proposal.governor}",
            support=VoteSupport(support).name,
            reason=reason,
            created_at=to_iso_timestamp(self._clock()),
        )
        try:
            cid = await self._pinata_client.upload_vote_reason(metadata)
        except ExternalDependencyError as e:
            logger.error(f"Failed to upload vote reason to IPFS, using the reason inline: {e}")
            return reason
        return f"{IPFS_URI_PREFIX}{cid}"

    async def load_reason(self, reason: Optional[str]) -> Optional[str]:
        """Text of a recorded vote reason; ipfs:// references are read back from the pinned record."""
        if not reason or not reason.startswith(IPFS_URI_PREFIX) or self._pinata_client is None:
            return reason
        cid = reason[len(IPFS_URI_PREFIX):]
        try:
            record = await self._pinata_client.fetch_json(cid)
        except ExternalDependencyError as e:
            logger.warning(f"Could not load vote reason {cid}: {e}")
            return reason
        return record.get("reason") or reason

    @staticmethod
    def build_vote_call(proposal: Proposal, support: VoteSupport, reason: Optional[str] = None) -> ContractCall:
        support = VoteSupport(support)
        if reason:
            function_name, args = "castVoteWithReason", (proposal.proposal_id, int(support), reason)
        else:
            function_name, args = "castVote", (proposal.proposal_id, int(support))
        return ContractCall(
            address=proposal.governor,
            abi=GOVERNOR_ABI,
            function_name=function_name,
            args=args,
            chain_id=proposal.chain_id,
        )

    async def cast_vote(
        self,
        proposal: Proposal,
        voter: str,
        support: VoteSupport,
        state: ProposalState,
        voting_power: int,
        existing_vote: Optional[ExistingVote] = None,
        reason: Optional[str] = None,
    ) -> TransactionState:
        """
        Raises:
            PreconditionError: The voter cannot vote (no power, already voted, or proposal not ACTIVE).
            TransactionInFlightError: A vote for this proposal is still pending.
            ExternalDependencyError, ChainError: The transaction failed (retryable).
        """
        if not self.can_vote(voter, voting_power, existing_vote, state):
            raise PreconditionError(
                f"{voter} cannot vote on {proposal.key} "
                f"(state {state.value}, voting power {voting_power}, already voted: {existing_vote is not None})"
            )

        if proposal.key in self._reserved or self._tracker.is_in_flight(proposal.key):
            raise TransactionInFlightError(f"A vote on {proposal.key} is still pending")

        self._reserved.add(proposal.key)
        try:
            reason_string = await self.prepare_reason(proposal, voter, support, reason)
            call = self.build_vote_call(proposal, support, reason_string)
            logger.info(f"Casting {VoteSupport(support).name} vote on {proposal.key} from {voter}")
            return await self._tracker.submit(proposal.key, call.function_name, call, voter)
        finally:
            self._reserved.discard(proposal.key)

    def get_transaction_state(self, proposal: Proposal) -> TransactionState:
        return self._tracker.get_state(proposal.key)

    def reset(self, proposal: Proposal) -> None:
        self._tracker.reset(proposal.key)
