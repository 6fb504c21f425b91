from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field

# Tags match ActionTemplateType values. Inputs are kept as the raw text the user
# typed; the encoders validate and scale them.


class Recipient(BaseModel):
    address: str = ""
    amount: str = ""


class TransferEthTemplate(BaseModel):
    type: Literal["transfer-eth"] = "transfer-eth"
    recipient: str = ""
    amount: str = ""


class TransferErc20Template(BaseModel):
    type: Literal["transfer-erc20"] = "transfer-erc20"
    token_address: str = ""
    recipient: str = ""
    amount: str = ""
    # Fetched from the token contract by the caller
    token_decimals: Optional[int] = None
    token_symbol: Optional[str] = None


class BatchTransferEthTemplate(BaseModel):
    type: Literal["batch-transfer-eth"] = "batch-transfer-eth"
    recipients: List[Recipient] = Field(default_factory=list)


class BatchTransferErc20Template(BaseModel):
    type: Literal["batch-transfer-erc20"] = "batch-transfer-erc20"
    token_address: str = ""
    recipients: List[Recipient] = Field(default_factory=list)
    token_decimals: Optional[int] = None
    token_symbol: Optional[str] = None


class SetManagerTemplate(BaseModel):
    type: Literal["set-manager"] = "set-manager"
    governor_address: str
    new_manager: str = ""
    current_manager: Optional[str] = None


class UpdateQuorumTemplate(BaseModel):
    type: Literal["update-quorum"] = "update-quorum"
    governor_address: str
    quorum_percent: str = ""


class UpdateVotingDelayTemplate(BaseModel):
    type: Literal["update-voting-delay"] = "update-voting-delay"
    governor_address: str
    voting_delay: str = ""


class UpdateVotingPeriodTemplate(BaseModel):
    type: Literal["update-voting-period"] = "update-voting-period"
    governor_address: str
    voting_period: str = ""


class UpdateProposalThresholdTemplate(BaseModel):
    type: Literal["update-proposal-threshold"] = "update-proposal-threshold"
    governor_address: str
    threshold: str = ""
    token_decimals: int = 18
    token_symbol: str = ""


class CustomActionTemplate(BaseModel):
    type: Literal["custom"] = "custom"
    target: str = ""
    value: str = ""  # ether, optional
    calldata: str = ""
    description: str = ""


ActionTemplate = Annotated[
    Union[
        TransferEthTemplate,
        TransferErc20Template,
        BatchTransferEthTemplate,
        BatchTransferErc20Template,
        SetManagerTemplate,
        UpdateQuorumTemplate,
        UpdateVotingDelayTemplate,
        UpdateVotingPeriodTemplate,
        UpdateProposalThresholdTemplate,
        CustomActionTemplate,
    ],
    Field(discriminator="type"),
]


class ActionTemplateEnvelope(BaseModel):
    """Wrapper used to parse a template of any kind from JSON (CLI input, saved drafts)."""

    template: ActionTemplate
