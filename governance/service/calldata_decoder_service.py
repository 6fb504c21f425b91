from typing import Any, Dict, List, Optional

from eth_abi import decode
from eth_abi.exceptions import DecodingError
from eth_utils import to_checksum_address

from abi.dao_governance_abi import GOVERNOR_SETTINGS_ABI, MANAGER_ABI
from abi.erc20_abi import ERC20_ABI
from constants.constants import EMPTY_CALLDATA, ETHER_DECIMALS
from governance.models.decoded_call import DecodedArgument, DecodedCall
from utils.formatter_utils import format_duration, format_units, to_normalized_address
from utils.logger_utils import get_logger
from utils.web3_utils import function_selector, function_signature

logger = get_logger("Calldata Decoder Service")

# Function name -> display category
FUNCTION_CATEGORIES = {
    "transfer": "Transfer",
    "transferFrom": "Transfer",
    "approve": "Approval",
    "setManager": "Admin",
    "setVotingDelay": "Governance",
    "setVotingPeriod": "Governance",
    "setProposalThreshold": "Governance",
    "updateQuorumNumerator": "Governance",
}

UNKNOWN_SELECTOR_HINT = "Look the selector up in a public signature database (e.g. 4byte.directory)"


def _build_known_functions(*abis: List[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    known = {}
    for abi in abis:
        for entry in abi:
            if entry.get("type") == "function" and entry.get("inputs"):
                known[function_selector(function_signature(entry))] = entry
    return known


# Selector -> function ABI of every call the action templates can produce
KNOWN_FUNCTIONS = _build_known_functions(ERC20_ABI, GOVERNOR_SETTINGS_ABI, MANAGER_ABI)


def get_function_category(function_name: str) -> str:
    if function_name in FUNCTION_CATEGORIES:
        return FUNCTION_CATEGORIES[function_name]

    lower_name = function_name.lower()
    if "transfer" in lower_name:
        return "Transfer"
    if "approve" in lower_name:
        return "Approval"
    if "set" in lower_name or "update" in lower_name:
        return "Settings"
    return "Contract Call"


class CalldataDecoderService(object):
    """Decodes proposal action calldata for display. Never raises on malformed input."""

    def __init__(self, known_functions: Optional[Dict[str, Dict[str, Any]]] = None):
        self._known_functions = KNOWN_FUNCTIONS if known_functions is None else known_functions

    def decode(self, target: str, value: int, calldata: str) -> DecodedCall:
        target = to_normalized_address(target)
        calldata = (calldata or EMPTY_CALLDATA).lower()

        if calldata == EMPTY_CALLDATA:
            return DecodedCall(
                status="success",
                target=target,
                value=value,
                category="Transfer",
                summary=f"Send {format_units(value, ETHER_DECIMALS)} ETH to {target}",
            )

        try:
            payload = bytes.fromhex(calldata[2:] if calldata.startswith("0x") else calldata)
        except ValueError:
            return self._error(target, value, None, "Calldata is not valid hex", None)

        if len(payload) < 4:
            return self._error(target, value, None, "Calldata is shorter than a function selector", None)

        selector = "0x" + payload[:4].hex()
        fn_abi = self._known_functions.get(selector)
        if fn_abi is None:
            return self._error(target, value, selector, "Unknown function selector", UNKNOWN_SELECTOR_HINT)

        input_types = [i["type"] for i in fn_abi["inputs"]]
        try:
            decoded_values = decode(input_types, payload[4:])
        except (DecodingError, ValueError, OverflowError) as e:
            logger.debug(f"Failed to decode calldata for selector {selector}: {e}")
            return self._error(target, value, selector, f"Malformed arguments for {fn_abi['name']}: {e}", None)

        args = [
            DecodedArgument(name=i["name"] or f"arg{index}", type=i["type"], value=self._stringify(i["type"], v))
            for index, (i, v) in enumerate(zip(fn_abi["inputs"], decoded_values))
        ]
        return DecodedCall(
            status="success",
            target=target,
            value=value,
            selector=selector,
            function_name=fn_abi["name"],
            signature=function_signature(fn_abi),
            args=args,
            category=get_function_category(fn_abi["name"]),
            summary=self._summarize(fn_abi["name"], decoded_values),
        )

    @staticmethod
    def _stringify(abi_type: str, value: Any) -> str:
        if abi_type == "address":
            return to_normalized_address(value)
        if isinstance(value, bytes):
            return "0x" + value.hex()
        return str(value)

    @staticmethod
    def _summarize(function_name: str, values: tuple) -> str:
        if function_name == "transfer":
            return f"Transfer {values[1]} base units to {to_normalized_address(values[0])}"
        if function_name == "transferFrom":
            return (
                f"Transfer {values[2]} base units from {to_normalized_address(values[0])} "
                f"to {to_normalized_address(values[1])}"
            )
        if function_name == "approve":
            return f"Approve {to_normalized_address(values[0])} to spend {values[1]} base units"
        if function_name == "setManager":
            return f"Set manager to {to_checksum_address(values[0])}"
        if function_name == "updateQuorumNumerator":
            return f"Update quorum to {values[0]}% of total supply"
        if function_name == "setVotingDelay":
            return f"Update voting delay to {format_duration(values[0])} ({values[0]}s)"
        if function_name == "setVotingPeriod":
            return f"Update voting period to {format_duration(values[0])} ({values[0]}s)"
        if function_name == "setProposalThreshold":
            return f"Update proposal threshold to {values[0]} base units"
        return f"Call {function_name}"

    @staticmethod
    def _error(target: str, value: int, selector: Optional[str], error: str, hint: Optional[str]) -> DecodedCall:
        return DecodedCall(status="error", target=target, value=value, selector=selector, error=error, hint=hint)
