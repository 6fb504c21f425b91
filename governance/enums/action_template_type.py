from enum import Enum


class ActionTemplateType(str, Enum):
    TRANSFER_ETH = "transfer-eth"
    TRANSFER_ERC20 = "transfer-erc20"
    BATCH_TRANSFER_ETH = "batch-transfer-eth"
    BATCH_TRANSFER_ERC20 = "batch-transfer-erc20"
    SET_MANAGER = "set-manager"
    UPDATE_QUORUM = "update-quorum"
    UPDATE_VOTING_DELAY = "update-voting-delay"
    UPDATE_VOTING_PERIOD = "update-voting-period"
    UPDATE_PROPOSAL_THRESHOLD = "update-proposal-threshold"
    CUSTOM = "custom"
