import re

from eth_utils import is_address, is_checksum_address, is_checksum_formatted_address

from constants.constants import MAX_UINT256
from utils.exceptions import InputValidationError
from utils.formatter_utils import parse_units

HEX_CALLDATA_PATTERN = re.compile(r"^0x([0-9a-fA-F]{2})*$")
INTEGER_PATTERN = re.compile(r"^\d+$")


def is_valid_address(value) -> bool:
    """
    True for 20-byte hex addresses that are all-lowercase, all-uppercase or correctly EIP-55 checksummed.
    """
    if not isinstance(value, str) or not is_address(value):
        return False
    # Mixed case is a checksum claim and must verify.
    return not is_checksum_formatted_address(value) or is_checksum_address(value)


def validate_address(value: str | None, field: str, message: str = "Invalid address") -> str:
    """
    Validate a user-supplied address (all-lowercase, all-uppercase or valid EIP-55 checksum).

    Returns:
        The address, stripped of surrounding whitespace.

    Raises:
        InputValidationError: If the address is malformed.
    """
    candidate = value.strip() if isinstance(value, str) else ""
    if not candidate or not is_valid_address(candidate):
        raise InputValidationError(field, message)
    return candidate


def validate_amount(
    value: str | None,
    field: str,
    decimals: int,
    allow_zero: bool = False,
    message: str = "Invalid amount",
) -> int:
    """
    Validate a decimal amount typed by the user and scale it to base units.

    Args:
        value: The text as typed ("1.5").
        field: Name of the field reported on failure.
        decimals: Token decimals used to scale the amount.
        allow_zero: Whether 0 is meaningful for this field.

    Raises:
        InputValidationError: If the amount is not a finite non-negative number,
                              is zero where zero is meaningless, has too many decimals
                              or does not fit in a uint256.
    """
    try:
        base_units = parse_units(value or "", decimals)
    except ValueError:
        raise InputValidationError(field, message)
    if base_units == 0 and not allow_zero:
        raise InputValidationError(field, message)
    if base_units > MAX_UINT256:
        raise InputValidationError(field, message)
    return base_units


def validate_integer_parameter(
    value: str | int | None,
    field: str,
    minimum: int,
    maximum: int,
    message: str,
    too_large_message: str | None = None,
) -> int:
    """
    Validate a raw integer governance parameter against the bit width of its on-chain field.
    """
    text = str(value).strip() if value is not None else ""
    if not INTEGER_PATTERN.match(text):
        raise InputValidationError(field, message)
    try:
        number = int(text)
    except ValueError:
        # Beyond the interpreter's integer string conversion limit.
        raise InputValidationError(field, too_large_message or message)
    if number < minimum:
        raise InputValidationError(field, message)
    if number > maximum:
        raise InputValidationError(field, too_large_message or message)
    return number


def validate_calldata(value: str | None, field: str = "calldata") -> str:
    """
    Validate raw calldata for a custom call. Blank input means the empty call ("0x").
    """
    candidate = (value or "").strip() or "0x"
    if not HEX_CALLDATA_PATTERN.match(candidate):
        raise InputValidationError(field, "Invalid calldata (must be hex starting with 0x)")
    return candidate.lower()
