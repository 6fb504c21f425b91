from enum import IntEnum


class VoteSupport(IntEnum):
    """Support values of GovernorCountingSimple."""

    AGAINST = 0
    FOR = 1
    ABSTAIN = 2
