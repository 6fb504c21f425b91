from utils.formatter_utils import to_normalized_address
from utils.validation_utils import is_valid_address


def normalize_address(value: str) -> str:
    if not is_valid_address(value):
        raise ValueError(f"not a valid address: {value!r}")
    return to_normalized_address(value)


def normalize_hex(value: str) -> str:
    if not isinstance(value, str) or not value.startswith("0x"):
        raise ValueError(f"not 0x-prefixed hex: {value!r}")
    try:
        bytes.fromhex(value[2:])
    except ValueError:
        raise ValueError(f"not valid hex bytes: {value!r}")
    return value.lower()
