import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from governance.enums.proposal_state import ProposalState
from governance.enums.transaction_status import TransactionStatus
from governance.enums.vote_support import VoteSupport
from governance.models.vote import ExistingVote
from governance.clients.pinata_client import PinataClient
from governance.service.voting_service import VotingService
from tests.unit.factories import GOVERNOR, ONE_TOKEN, RECIPIENT_A, RECIPIENT_B, FakeResponse, make_proposal
from utils.exceptions import ExternalDependencyError, PinningError, PreconditionError, TransactionInFlightError

TX_HASH = "0x" + "cd" * 32


@pytest.fixture
def sender():
    mock_sender = MagicMock()
    mock_sender.write_contract = AsyncMock(return_value=TX_HASH)
    mock_sender.wait_for_receipt = AsyncMock(return_value=True)
    return mock_sender


@pytest.fixture
def pinata_client():
    client = MagicMock()
    client.upload_vote_reason = AsyncMock(return_value="bafyreason")
    return client


@pytest.mark.parametrize("voter,power,existing,state,expected", [
    (RECIPIENT_A, ONE_TOKEN, None, ProposalState.ACTIVE, True),
    (None, ONE_TOKEN, None, ProposalState.ACTIVE, False),
    (RECIPIENT_A, 0, None, ProposalState.ACTIVE, False),
    (RECIPIENT_A, ONE_TOKEN, ExistingVote(support="FOR", weight=1), ProposalState.ACTIVE, False),
    (RECIPIENT_A, ONE_TOKEN, None, ProposalState.PENDING, False),
    (RECIPIENT_A, ONE_TOKEN, None, ProposalState.SUCCEEDED, False),
])
def test_can_vote(voter, power, existing, state, expected):
    assert VotingService.can_vote(voter, power, existing, state) is expected


def test_resolve_voting_power_matches_case_insensitively():
    holders = [
        {"holder": RECIPIENT_B, "votes": "5"},
        {"holder": RECIPIENT_A.upper().replace("0X", "0x"), "votes": str(3 * ONE_TOKEN)},
    ]

    assert VotingService.resolve_voting_power(holders, RECIPIENT_A) == 3 * ONE_TOKEN
    assert VotingService.resolve_voting_power(holders, GOVERNOR) == 0
    assert VotingService.resolve_voting_power(holders, None) == 0


def test_find_existing_vote():
    votes = [{"voter": RECIPIENT_A, "support": "AGAINST", "weight": "7", "reason": "too expensive"}]

    existing = VotingService.find_existing_vote(votes, RECIPIENT_A)

    assert existing == ExistingVote(support="AGAINST", weight=7, reason="too expensive")
    assert VotingService.find_existing_vote(votes, RECIPIENT_B) is None


def test_build_vote_call_without_reason():
    proposal = make_proposal()

    call = VotingService.build_vote_call(proposal, VoteSupport.FOR)

    assert call.function_name == "castVote"
    assert call.args == (42, 1)
    assert call.address == GOVERNOR


def test_build_vote_call_with_reason():
    call = VotingService.build_vote_call(make_proposal(), VoteSupport.ABSTAIN, "ipfs://bafy")

    assert call.function_name == "castVoteWithReason"
    assert call.args == (42, 2, "ipfs://bafy")


@pytest.mark.asyncio
async def test_prepare_reason_pins_and_returns_ipfs_uri(sender, pinata_client, clock):
    service = VotingService(sender, pinata_client, clock=clock)

    reason = await service.prepare_reason(make_proposal(), RECIPIENT_A, VoteSupport.FOR, "  Good idea  ")

    assert reason == "ipfs://bafyreason"
    metadata = pinata_client.upload_vote_reason.await_args.args[0]
    assert metadata.reason == "Good idea"
    assert metadata.support == "FOR"
    assert metadata.proposal_id == make_proposal().key
    assert metadata.created_at == "2023-11-14T22:13:20.000Z"


@pytest.mark.asyncio
async def test_prepare_reason_falls_back_to_inline_text(sender, pinata_client):
    pinata_client.upload_vote_reason.side_effect = PinningError("Pinata is down")
    service = VotingService(sender, pinata_client)

    assert await service.prepare_reason(make_proposal(), RECIPIENT_A, VoteSupport.AGAINST, "No ") == "No"


@pytest.mark.asyncio
async def test_prepare_reason_uses_inline_text_when_pinata_answers_html(sender):
    client = PinataClient(jwt="secret-jwt", api_url="https://api.pinata.test")
    client.session = MagicMock()
    client.session.post = MagicMock(return_value=FakeResponse(payload=b"<html>bad gateway</html>"))
    service = VotingService(sender, client)

    assert await service.prepare_reason(make_proposal(), RECIPIENT_A, VoteSupport.FOR, "because") == "because"


@pytest.mark.asyncio
async def test_prepare_reason_blank_and_unconfigured(sender):
    service = VotingService(sender)

    assert await service.prepare_reason(make_proposal(), RECIPIENT_A, VoteSupport.FOR, "   ") is None
    assert await service.prepare_reason(make_proposal(), RECIPIENT_A, VoteSupport.FOR, "inline") == "inline"


@pytest.mark.asyncio
async def test_cast_vote_submits_vote_with_reason(sender, pinata_client):
    service = VotingService(sender, pinata_client, receipt_timeout=5)
    proposal = make_proposal()

    state = await service.cast_vote(
        proposal, RECIPIENT_A, VoteSupport.FOR, ProposalState.ACTIVE, ONE_TOKEN, reason="Ship it"
    )

    assert state.status == TransactionStatus.CONFIRMED
    assert state.action == "castVoteWithReason"
    call, from_address = sender.write_contract.await_args.args
    assert call.args == (42, 1, "ipfs://bafyreason")
    assert from_address == RECIPIENT_A
    assert service.get_transaction_state(proposal).tx_hash == TX_HASH


@pytest.mark.asyncio
async def test_cast_vote_refuses_double_vote(sender, pinata_client):
    service = VotingService(sender, pinata_client)

    with pytest.raises(PreconditionError, match="already voted: True"):
        await service.cast_vote(
            make_proposal(),
            RECIPIENT_A,
            VoteSupport.FOR,
            ProposalState.ACTIVE,
            ONE_TOKEN,
            existing_vote=ExistingVote(support="FOR", weight=ONE_TOKEN),
        )

    pinata_client.upload_vote_reason.assert_not_awaited()
    sender.write_contract.assert_not_awaited()


@pytest.mark.asyncio
async def test_load_reason_reads_pinned_record(sender, pinata_client):
    pinata_client.fetch_json = AsyncMock(return_value={"reason": "Good idea", "support": "FOR"})
    service = VotingService(sender, pinata_client)

    assert await service.load_reason("ipfs://bafyreason") == "Good idea"
    pinata_client.fetch_json.assert_awaited_once_with("bafyreason")
    assert await service.load_reason("plain text") == "plain text"
    assert await service.load_reason(None) is None


@pytest.mark.asyncio
async def test_load_reason_keeps_reference_when_gateway_fails(sender, pinata_client):
    pinata_client.fetch_json = AsyncMock(side_effect=PinningError("gateway timeout"))
    service = VotingService(sender, pinata_client)

    assert await service.load_reason("ipfs://bafyreason") == "ipfs://bafyreason"


@pytest.mark.asyncio
async def test_concurrent_votes_pin_the_reason_once(sender, pinata_client):
    release = asyncio.Event()

    async def slow_upload(metadata):
        await release.wait()
        return "bafyreason"

    pinata_client.upload_vote_reason = AsyncMock(side_effect=slow_upload)
    service = VotingService(sender, pinata_client)
    proposal = make_proposal()

    first = asyncio.create_task(service.cast_vote(
        proposal, RECIPIENT_A, VoteSupport.FOR, ProposalState.ACTIVE, ONE_TOKEN, reason="Ship it"
    ))
    await asyncio.sleep(0)

    with pytest.raises(TransactionInFlightError):
        await service.cast_vote(
            proposal, RECIPIENT_A, VoteSupport.FOR, ProposalState.ACTIVE, ONE_TOKEN, reason="Ship it"
        )

    release.set()
    state = await first

    assert state.status == TransactionStatus.CONFIRMED
    pinata_client.upload_vote_reason.assert_awaited_once()
    sender.write_contract.assert_awaited_once()


@pytest.mark.asyncio
async def test_failed_vote_can_be_retried(sender, pinata_client):
    sender.write_contract.side_effect = [ExternalDependencyError("User rejected the request"), TX_HASH]
    service = VotingService(sender, pinata_client)
    proposal = make_proposal()

    with pytest.raises(ExternalDependencyError):
        await service.cast_vote(proposal, RECIPIENT_A, VoteSupport.AGAINST, ProposalState.ACTIVE, ONE_TOKEN)

    state = await service.cast_vote(proposal, RECIPIENT_A, VoteSupport.AGAINST, ProposalState.ACTIVE, ONE_TOKEN)

    assert state.status == TransactionStatus.CONFIRMED
    assert sender.write_contract.await_count == 2
