from typing import Callable, Dict, List

from abi.dao_governance_abi import GOVERNOR_SETTINGS_ABI, MANAGER_ABI
from abi.erc20_abi import ERC20_ABI
from constants.constants import EMPTY_CALLDATA, ETHER_DECIMALS, MAX_UINT32, MAX_UINT48
from governance.enums.action_template_type import ActionTemplateType
from governance.models.action_template import (
    ActionTemplate,
    BatchTransferErc20Template,
    BatchTransferEthTemplate,
    CustomActionTemplate,
    Recipient,
    SetManagerTemplate,
    TransferErc20Template,
    TransferEthTemplate,
    UpdateProposalThresholdTemplate,
    UpdateQuorumTemplate,
    UpdateVotingDelayTemplate,
    UpdateVotingPeriodTemplate,
)
from governance.models.proposal_action import EncodedActions, ProposalAction
from utils.exceptions import InputValidationError
from utils.formatter_utils import format_duration, format_units
from utils.logger_utils import get_logger
from utils.validation_utils import (
    validate_address,
    validate_amount,
    validate_calldata,
    validate_integer_parameter,
)
from utils.web3_utils import encode_function_call

logger = get_logger("Action Encoder Service")


class ActionEncoderService(object):
    """
    Turns action templates (user intents, raw text inputs) into proposal actions with exact calldata.
    Every input is validated before anything is encoded; a failure raises InputValidationError naming
    the offending field and produces no action.
    """

    def encode(self, template: ActionTemplate) -> EncodedActions:
        encoder = ENCODERS[ActionTemplateType(template.type)]
        encoded = encoder(self, template)
        logger.debug(f"Encoded {template.type} template into {len(encoded.actions)} action(s)")
        return encoded

    def encode_transfer_eth(self, template: TransferEthTemplate) -> EncodedActions:
        recipient = validate_address(template.recipient, "recipient", "Invalid recipient address")
        value = validate_amount(template.amount, "amount", ETHER_DECIMALS)
        amount = template.amount.strip()
        return EncodedActions(actions=[
            ProposalAction(
                target=recipient,
                value=value,
                calldata=EMPTY_CALLDATA,
                description=f"Transfer {amount} ETH to {recipient}",
            )
        ])

    def encode_transfer_erc20(self, template: TransferErc20Template) -> EncodedActions:
        token = validate_address(template.token_address, "token_address", "Invalid token address")
        recipient = validate_address(template.recipient, "recipient", "Invalid recipient address")
        if template.token_decimals is None:
            raise InputValidationError("token_decimals", "Could not fetch token decimals")
        amount_units = validate_amount(template.amount, "amount", template.token_decimals)

        amount = template.amount.strip()
        symbol = template.token_symbol or "tokens"
        return EncodedActions(actions=[
            ProposalAction(
                target=token,
                value=0,
                calldata=encode_function_call(ERC20_ABI, "transfer", [recipient, amount_units]),
                description=f"Transfer {amount} {symbol} to {recipient}",
            )
        ])

    def encode_batch_transfer_eth(self, template: BatchTransferEthTemplate) -> EncodedActions:
        recipients = self._validate_recipients(template.recipients, ETHER_DECIMALS)

        actions = [
            ProposalAction(
                target=address,
                value=value,
                calldata=EMPTY_CALLDATA,
                description=f"Transfer {amount} ETH to {address}",
            )
            for address, amount, value in recipients
        ]
        total = sum(value for _, _, value in recipients)
        total_display = format_units(total, ETHER_DECIMALS)
        if len(actions) > 1:
            actions[0] = actions[0].model_copy(update={
                "description": f"Batch transfer ETH ({len(actions)} recipients, {total_display} ETH total)"
            })
        return EncodedActions(actions=actions, total=total, total_display=total_display)

    def encode_batch_transfer_erc20(self, template: BatchTransferErc20Template) -> EncodedActions:
        token = validate_address(template.token_address, "token_address", "Invalid token address")
        if template.token_decimals is None:
            raise InputValidationError("token_decimals", "Unable to fetch token decimals")
        decimals = template.token_decimals
        recipients = self._validate_recipients(template.recipients, decimals)

        symbol = template.token_symbol or "tokens"
        actions = [
            ProposalAction(
                target=token,
                value=0,
                calldata=encode_function_call(ERC20_ABI, "transfer", [address, units]),
                description=f"Transfer {amount} {symbol} to {address}",
            )
            for address, amount, units in recipients
        ]
        total = sum(units for _, _, units in recipients)
        total_display = format_units(total, decimals)
        if len(actions) > 1:
            actions[0] = actions[0].model_copy(update={
                "description": f"Batch transfer {symbol} ({len(actions)} recipients, {total_display} total)"
            })
        return EncodedActions(actions=actions, total=total, total_display=total_display)

    def encode_set_manager(self, template: SetManagerTemplate) -> EncodedActions:
        governor = validate_address(template.governor_address, "governor_address", "Invalid governor address")
        new_manager = validate_address(template.new_manager, "new_manager", "Invalid manager address")
        if template.current_manager and new_manager.lower() == template.current_manager.strip().lower():
            raise InputValidationError("new_manager", "New manager is the same as current manager")

        return EncodedActions(actions=[
            ProposalAction(
                target=governor,
                value=0,
                calldata=encode_function_call(MANAGER_ABI, "setManager", [new_manager]),
                description=f"Set manager to {new_manager}",
            )
        ])

    def encode_update_quorum(self, template: UpdateQuorumTemplate) -> EncodedActions:
        governor = validate_address(template.governor_address, "governor_address", "Invalid governor address")
        percent = validate_integer_parameter(
            template.quorum_percent, "quorum_percent", 0, 100, "Invalid quorum. Must be between 0 and 100."
        )
        return self._governor_setting_action(
            governor, "updateQuorumNumerator", percent, f"Update quorum to {percent}% of total supply"
        )

    def encode_update_voting_delay(self, template: UpdateVotingDelayTemplate) -> EncodedActions:
        governor = validate_address(template.governor_address, "governor_address", "Invalid governor address")
        delay = validate_integer_parameter(
            template.voting_delay,
            "voting_delay",
            0,
            MAX_UINT48,
            "Invalid voting delay. Must be a non-negative number.",
            "Voting delay too large",
        )
        return self._governor_setting_action(
            governor, "setVotingDelay", delay, f"Update voting delay to {format_duration(delay)} ({delay}s)"
        )

    def encode_update_voting_period(self, template: UpdateVotingPeriodTemplate) -> EncodedActions:
        governor = validate_address(template.governor_address, "governor_address", "Invalid governor address")
        period = validate_integer_parameter(
            template.voting_period,
            "voting_period",
            1,
            MAX_UINT32,
            "Invalid voting period. Must be a positive number.",
            "Voting period too large",
        )
        return self._governor_setting_action(
            governor, "setVotingPeriod", period, f"Update voting period to {format_duration(period)} ({period}s)"
        )

    def encode_update_proposal_threshold(self, template: UpdateProposalThresholdTemplate) -> EncodedActions:
        governor = validate_address(template.governor_address, "governor_address", "Invalid governor address")
        threshold = validate_amount(
            template.threshold,
            "threshold",
            template.token_decimals,
            allow_zero=True,
            message="Invalid threshold. Must be a non-negative number.",
        )
        description = f"Update proposal threshold to {template.threshold.strip()} {template.token_symbol}".rstrip()
        return self._governor_setting_action(governor, "setProposalThreshold", threshold, description)

    def encode_custom(self, template: CustomActionTemplate) -> EncodedActions:
        target = validate_address(template.target, "target", "Invalid target address")
        value = 0
        if template.value and template.value.strip():
            value = validate_amount(
                template.value, "value", ETHER_DECIMALS, allow_zero=True, message="Invalid value (must be >= 0)"
            )
        calldata = validate_calldata(template.calldata)
        description = (template.description or "").strip()
        if not description:
            raise InputValidationError("description", "Please provide a description for this action")

        return EncodedActions(actions=[
            ProposalAction(target=target, value=value, calldata=calldata, description=description)
        ])

    @staticmethod
    def _validate_recipients(recipients: List[Recipient], decimals: int) -> List[tuple]:
        if not recipients:
            raise InputValidationError("recipients", "At least one recipient is required")

        validated = []
        for i, recipient in enumerate(recipients):
            field = f"recipients[{i}]"
            if not recipient.address or not recipient.address.strip():
                raise InputValidationError(f"{field}.address", f"Recipient #{i + 1}: Address is required")
            address = validate_address(recipient.address, f"{field}.address", f"Recipient #{i + 1}: Invalid address")
            units = validate_amount(
                recipient.amount, f"{field}.amount", decimals, message=f"Recipient #{i + 1}: Invalid amount"
            )
            validated.append((address, recipient.amount.strip(), units))
        return validated

    @staticmethod
    def _governor_setting_action(governor: str, fn_name: str, argument: int, description: str) -> EncodedActions:
        return EncodedActions(actions=[
            ProposalAction(
                target=governor,
                value=0,
                calldata=encode_function_call(GOVERNOR_SETTINGS_ABI, fn_name, [argument]),
                description=description,
            )
        ])


ENCODERS: Dict[ActionTemplateType, Callable[[ActionEncoderService, ActionTemplate], EncodedActions]] = {
    ActionTemplateType.TRANSFER_ETH: ActionEncoderService.encode_transfer_eth,
    ActionTemplateType.TRANSFER_ERC20: ActionEncoderService.encode_transfer_erc20,
    ActionTemplateType.BATCH_TRANSFER_ETH: ActionEncoderService.encode_batch_transfer_eth,
    ActionTemplateType.BATCH_TRANSFER_ERC20: ActionEncoderService.encode_batch_transfer_erc20,
    ActionTemplateType.SET_MANAGER: ActionEncoderService.encode_set_manager,
    ActionTemplateType.UPDATE_QUORUM: ActionEncoderService.encode_update_quorum,
    ActionTemplateType.UPDATE_VOTING_DELAY: ActionEncoderService.encode_update_voting_delay,
    ActionTemplateType.UPDATE_VOTING_PERIOD: ActionEncoderService.encode_update_voting_period,
    ActionTemplateType.UPDATE_PROPOSAL_THRESHOLD: ActionEncoderService.encode_update_proposal_threshold,
    ActionTemplateType.CUSTOM: ActionEncoderService.encode_custom,
}

_missing_encoders = set(ActionTemplateType) - set(ENCODERS)
if _missing_encoders:
    raise RuntimeError(f"No encoder registered for template types: {sorted(t.value for t in _missing_encoders)}")
