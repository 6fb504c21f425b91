from typing import Optional

from hexbytes import HexBytes

from abi.dao_governance_abi import GOVERNOR_ABI
from governance.clients.pinata_client import PinataClient
from governance.models.dao import DAO
from governance.models.execution import ContractCall, SubmissionResult, TransactionState
from governance.models.metadata import ActionSummary, DaoInfo, ProposalMetadata
from governance.providers.transaction_sender import TransactionSender
from governance.service.proposal_draft import ProposalDraft
from governance.service.transaction_tracker import TransactionTracker
from utils.clock_utils import Clock, current_unix_time, to_iso_timestamp
from utils.exceptions import ExternalDependencyError, InputValidationError, TransactionInFlightError
from utils.logger_utils import get_logger

logger = get_logger("Proposal Submission Service")


class ProposalSubmissionService(object):
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
        self._reserved: set = set()

    @staticmethod
    def build_description(title: str, body: str = "") -> str:
        """
        On-chain description: a markdown heading followed by the body.
        The exact string is what queue/execute/cancel must hash later.
        """
        title = (title or "").strip()
        if not title:
            raise InputValidationError("title", "Proposal title is required")
        return f"# {title}\n\n{(body or '').strip()}"

    def build_propose_call(self, governor: str, chain_id: int, draft: ProposalDraft) -> ContractCall:
        if len(draft) == 0:
            raise InputValidationError("actions", "At least one action is required")

        targets, values, calldatas = draft.flatten()
        return ContractCall(
            address=governor,
            abi=GOVERNOR_ABI,
            function_name="propose",
            args=(targets, values, [HexBytes(calldata) for calldata in calldatas],
                  self.build_description(draft.title, draft.body)),
            chain_id=chain_id,
        )

    def build_metadata(self, draft: ProposalDraft, dao: DAO, created_by: str) -> ProposalMetadata:
        return ProposalMetadata(
            title=draft.title.strip(),
            description=self.build_description(draft.title, draft.body),
            actions=[
                ActionSummary(
                    description=action.description,
                    target=action.target,
                    value=str(action.value),
                    calldata=action.calldata,
                )
                for action in draft.actions
            ],
            created_at=to_iso_timestamp(self._clock()),
            created_by=created_by,
            dao=DaoInfo(id=dao.id, name=dao.name or dao.id, governor=dao.governor, chain_id=dao.chain_id),
        )

    async def submit(self, draft: ProposalDraft, dao: DAO, sender: str, pin: bool = False) -> SubmissionResult:
        """
        Submits propose() for the draft from `sender`. With `pin`, the proposal metadata is pinned first;
        a pinning failure is logged and does not block the proposal.
        """
        call = self.build_propose_call(dao.governor, dao.chain_id, draft)
        key = self._key(dao)
        if key in self._reserved or self._tracker.is_in_flight(key):
            raise TransactionInFlightError(f"A proposal on {dao.governor} is still pending")

        self._reserved.add(key)
        try:
            metadata_cid = None
            if pin and self._pinata_client is not None:
                try:
                    metadata_cid = await self._pinata_client.upload_proposal_metadata(
                        self.build_metadata(draft, dao, sender)
                    )
                except ExternalDependencyError as e:
                    logger.warning(f"Proposal metadata was not pinned: {e}")

            transaction = await self._tracker.submit(key, "propose", call, sender)
        finally:
            self._reserved.discard(key)
        return SubmissionResult(description=call.args[3], transaction=transaction, metadata_cid=metadata_cid)

    def get_transaction_state(self, dao: DAO) -> TransactionState:
        return self._tracker.get_state(self._key(dao))

    @staticmethod
    def _key(dao: DAO) -> str:
        return f"{dao.chain_id}_{dao.governor}_propose"
