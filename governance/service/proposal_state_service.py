from typing import Optional

from pydantic import BaseModel

from config.settings import settings
from constants.constants import QUORUM_DENOMINATOR
from governance.enums.proposal_state import INDEXER_AUTHORITATIVE_STATES, ProposalState
from governance.models.dao import DAO
from governance.models.proposal import Proposal
from utils.clock_utils import Clock, current_unix_time
from utils.logger_utils import get_logger

logger = get_logger("Proposal State Service")


class QuorumProgress(BaseModel):
    total_votes: int
    quorum_required: int
    quorum_reached: bool
    # Display only
    percent: float


class VotePercentages(BaseModel):
    for_percent: float = 0.0
    against_percent: float = 0.0
    abstain_percent: float = 0.0


class ProposalStateService(object):
    """
    Derives the effective lifecycle state of a proposal.

    States produced by explicit on-chain actions (CANCELED, EXECUTED, QUEUED, EXPIRED) are taken
    from the indexer as-is. Everything else is a function of the clock and the vote tallies:
    PENDING before voteStart, ACTIVE up to and including voteEnd, then SUCCEEDED or DEFEATED
    depending on quorum (for + against + abstain) and a strict for > against majority.
    """

    def __init__(
        self,
        clock: Clock = current_unix_time,
        degraded_quorum_fallback: Optional[bool] = None,
        default_quorum_numerator: Optional[int] = None,
    ):
        self._clock = clock
        self._degraded_quorum_fallback = (
            settings.governance.degraded_quorum_fallback
            if degraded_quorum_fallback is None else degraded_quorum_fallback
        )
        self._default_quorum_numerator = (
            settings.governance.default_quorum_numerator
            if default_quorum_numerator is None else default_quorum_numerator
        )

    def calculate_proposal_state(
        self, proposal: Proposal, dao: Optional[DAO] = None, now: Optional[int] = None
    ) -> ProposalState:
        if proposal.state in INDEXER_AUTHORITATIVE_STATES:
            return proposal.state

        now = self._clock() if now is None else now
        if now < proposal.vote_start:
            return ProposalState.PENDING
        if now <= proposal.vote_end:
            return ProposalState.ACTIVE

        vote_succeeded = proposal.for_votes > proposal.against_votes

        if dao is None:
            return self._resolve_without_dao(proposal, vote_succeeded)

        quorum_reached = proposal.total_votes >= self.quorum_required(dao)
        if quorum_reached and vote_succeeded:
            return ProposalState.SUCCEEDED
        return ProposalState.DEFEATED

    def _resolve_without_dao(self, proposal: Proposal, vote_succeeded: bool) -> ProposalState:
        if self._degraded_quorum_fallback:
            logger.warning(
                f"DAO data unavailable for proposal {proposal.key}; approximating quorum as any vote cast"
            )
            if proposal.total_votes > 0 and vote_succeeded:
                return ProposalState.SUCCEEDED
            return ProposalState.DEFEATED

        if proposal.state in (ProposalState.SUCCEEDED, ProposalState.DEFEATED):
            logger.warning(
                f"DAO data unavailable for proposal {proposal.key}; keeping indexed outcome {proposal.state.value}"
            )
            return proposal.state

        logger.warning(f"DAO data unavailable for proposal {proposal.key}; outcome pending quorum data")
        return ProposalState.ACTIVE

    def quorum_required(self, dao: DAO) -> int:
        numerator = self._default_quorum_numerator if dao.quorum_numerator is None else dao.quorum_numerator
        return dao.total_supply * numerator // QUORUM_DENOMINATOR

    def quorum_progress(self, proposal: Proposal, dao: DAO) -> QuorumProgress:
        required = self.quorum_required(dao)
        total = proposal.total_votes
        if required == 0:
            percent = 100.0
        else:
            percent = min(100.0, total * 10000 // required / 100)
        return QuorumProgress(
            total_votes=total,
            quorum_required=required,
            quorum_reached=total >= required,
            percent=percent,
        )

    @staticmethod
    def vote_percentages(proposal: Proposal) -> VotePercentages:
        total = proposal.total_votes
        if total == 0:
            return VotePercentages()
        return VotePercentages(
            for_percent=proposal.for_votes * 10000 // total / 100,
            against_percent=proposal.against_votes * 10000 // total / 100,
            abstain_percent=proposal.abstain_votes * 10000 // total / 100,
        )
