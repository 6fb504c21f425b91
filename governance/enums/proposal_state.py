from enum import Enum


class ProposalState(str, Enum):
    """OpenZeppelin Governor proposal states, spelled the way the indexer reports them."""

    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    CANCELED = "CANCELED"
    DEFEATED = "DEFEATED"
    SUCCEEDED = "SUCCEEDED"
    QUEUED = "QUEUED"
    EXPIRED = "EXPIRED"
    EXECUTED = "EXECUTED"


# Set by explicit on-chain actions the indexer observes; never recomputed locally
INDEXER_AUTHORITATIVE_STATES = frozenset({
    ProposalState.CANCELED,
    ProposalState.EXECUTED,
    ProposalState.QUEUED,
    ProposalState.EXPIRED,
})

# The proposer may still cancel from these states
CANCELABLE_STATES = frozenset({
    ProposalState.PENDING,
    ProposalState.ACTIVE,
    ProposalState.SUCCEEDED,
    ProposalState.QUEUED,
})
