import pytest

from governance.enums.proposal_state import ProposalState
from governance.service.proposal_state_service import ProposalStateService
from tests.unit.factories import NOW, ONE_TOKEN, make_dao, make_proposal


@pytest.fixture
def service(clock):
    return ProposalStateService(clock=clock, degraded_quorum_fallback=False, default_quorum_numerator=4)


def test_time_overrides_indexed_active_before_vote_start(service):
    proposal = make_proposal(vote_start=NOW + 3600, vote_end=NOW + 7200, state=ProposalState.ACTIVE)

    assert service.calculate_proposal_state(proposal, make_dao()) == ProposalState.PENDING


def test_succeeded_when_quorum_and_majority_reached(service):
    proposal = make_proposal(
        for_votes=100 * ONE_TOKEN, against_votes=50 * ONE_TOKEN, abstain_votes=10 * ONE_TOKEN
    )
    dao = make_dao(total_supply=1000 * ONE_TOKEN, quorum_numerator=4)

    assert service.quorum_required(dao) == 40 * ONE_TOKEN
    assert service.calculate_proposal_state(proposal, dao) == ProposalState.SUCCEEDED


def test_defeated_when_majority_fails_despite_quorum(service):
    proposal = make_proposal(
        for_votes=40 * ONE_TOKEN, against_votes=60 * ONE_TOKEN, abstain_votes=10 * ONE_TOKEN
    )

    assert service.calculate_proposal_state(proposal, make_dao()) == ProposalState.DEFEATED


@pytest.mark.parametrize("indexed_state", [
    ProposalState.CANCELED,
    ProposalState.EXECUTED,
    ProposalState.QUEUED,
    ProposalState.EXPIRED,
])
@pytest.mark.parametrize("vote_start,vote_end", [
    (NOW + 100, NOW + 200),  # would be PENDING
    (NOW - 100, NOW + 100),  # would be ACTIVE
    (NOW - 200, NOW - 100),  # would be DEFEATED (no votes)
])
def test_authoritative_indexed_states_are_returned_verbatim(service, indexed_state, vote_start, vote_end):
    proposal = make_proposal(state=indexed_state, vote_start=vote_start, vote_end=vote_end)

    assert service.calculate_proposal_state(proposal, make_dao()) == indexed_state
    assert service.calculate_proposal_state(proposal, None) == indexed_state


@pytest.mark.parametrize("now_offset", [0, 1, 3600])
def test_active_from_vote_start_through_vote_end_inclusive(service, now_offset):
    proposal = make_proposal(vote_start=NOW, vote_end=NOW + 3600, state=ProposalState.PENDING)

    assert service.calculate_proposal_state(proposal, make_dao(), now=NOW + now_offset) == ProposalState.ACTIVE


def test_one_second_past_vote_end_is_decided(service):
    proposal = make_proposal(vote_start=NOW - 10, vote_end=NOW, for_votes=100 * ONE_TOKEN)

    assert service.calculate_proposal_state(proposal, make_dao(), now=NOW) == ProposalState.ACTIVE
    assert service.calculate_proposal_state(proposal, make_dao(), now=NOW + 1) == ProposalState.SUCCEEDED


def test_tie_does_not_succeed(service):
    proposal = make_proposal(for_votes=50 * ONE_TOKEN, against_votes=50 * ONE_TOKEN)

    assert service.calculate_proposal_state(proposal, make_dao()) == ProposalState.DEFEATED


def test_quorum_is_inclusive_and_counts_abstain(service):
    # 4% of 1000 = 40 tokens; 1 for + 39 abstain meets it exactly
    proposal = make_proposal(for_votes=1 * ONE_TOKEN, abstain_votes=39 * ONE_TOKEN)
    assert service.calculate_proposal_state(proposal, make_dao()) == ProposalState.SUCCEEDED

    short = make_proposal(for_votes=1 * ONE_TOKEN, abstain_votes=39 * ONE_TOKEN - 1)
    assert service.calculate_proposal_state(short, make_dao()) == ProposalState.DEFEATED


def test_quorum_required_floors_the_product():
    service = ProposalStateService(default_quorum_numerator=4)

    assert service.quorum_required(make_dao(total_supply=99, quorum_numerator=3)) == 2


def test_missing_quorum_numerator_uses_default(service):
    dao = make_dao(quorum_numerator=None)

    assert service.quorum_required(dao) == 40 * ONE_TOKEN


def test_without_dao_outcome_is_deferred(service):
    proposal = make_proposal(for_votes=100 * ONE_TOKEN, state=ProposalState.ACTIVE)

    assert service.calculate_proposal_state(proposal, None) == ProposalState.ACTIVE


@pytest.mark.parametrize("indexed_state", [ProposalState.SUCCEEDED, ProposalState.DEFEATED])
def test_without_dao_indexed_outcome_is_kept(service, indexed_state):
    proposal = make_proposal(for_votes=100 * ONE_TOKEN, state=indexed_state)

    assert service.calculate_proposal_state(proposal, None) == indexed_state


def test_without_dao_before_vote_end_uses_time(service):
    proposal = make_proposal(vote_start=NOW + 10, vote_end=NOW + 20, state=ProposalState.SUCCEEDED)

    assert service.calculate_proposal_state(proposal, None) == ProposalState.PENDING


@pytest.mark.parametrize("for_votes,against_votes,expected", [
    (1, 0, ProposalState.SUCCEEDED),
    (0, 0, ProposalState.DEFEATED),
    (0, 1, ProposalState.DEFEATED),
])
def test_degraded_fallback_approximates_quorum_as_any_vote(clock, for_votes, against_votes, expected):
    service = ProposalStateService(clock=clock, degraded_quorum_fallback=True)
    proposal = make_proposal(for_votes=for_votes, against_votes=against_votes)

    assert service.calculate_proposal_state(proposal, None) == expected


def test_uses_injected_clock_when_now_is_omitted(service, clock):
    proposal = make_proposal(vote_start=NOW + 10, vote_end=NOW + 20, state=ProposalState.PENDING)

    assert service.calculate_proposal_state(proposal) == ProposalState.PENDING
    clock.advance(10)
    assert service.calculate_proposal_state(proposal) == ProposalState.ACTIVE
    clock.advance(11)
    assert service.calculate_proposal_state(proposal, make_dao()) == ProposalState.DEFEATED


def test_repeated_calls_are_stable(service):
    proposal = make_proposal(for_votes=100 * ONE_TOKEN, against_votes=50 * ONE_TOKEN)
    dao = make_dao()

    results = {service.calculate_proposal_state(proposal, dao, now=NOW) for _ in range(5)}

    assert results == {ProposalState.SUCCEEDED}
    assert proposal.state == ProposalState.ACTIVE


def test_quorum_progress(service):
    proposal = make_proposal(for_votes=10 * ONE_TOKEN, abstain_votes=10 * ONE_TOKEN)

    progress = service.quorum_progress(proposal, make_dao())

    assert progress.total_votes == 20 * ONE_TOKEN
    assert progress.quorum_required == 40 * ONE_TOKEN
    assert progress.quorum_reached is False
    assert progress.percent == 50.0


def test_quorum_progress_caps_at_hundred_percent(service):
    proposal = make_proposal(for_votes=400 * ONE_TOKEN)

    assert service.quorum_progress(proposal, make_dao()).percent == 100.0


def test_vote_percentages():
    proposal = make_proposal(for_votes=3, against_votes=1, abstain_votes=0)

    percentages = ProposalStateService.vote_percentages(proposal)

    assert percentages.for_percent == 75.0
    assert percentages.against_percent == 25.0
    assert percentages.abstain_percent == 0.0


def test_vote_percentages_without_votes():
    percentages = ProposalStateService.vote_percentages(make_proposal())

    assert (percentages.for_percent, percentages.against_percent, percentages.abstain_percent) == (0.0, 0.0, 0.0)
