import re
from typing import Any, Optional

from pydantic import ValidationError

from utils.exceptions import InvalidRecordError
from utils.formatter_utils import hex_to_dec

DECIMAL_INTEGER_PATTERN = re.compile(r"^\d+$")


def parse_uint(record_type: str, field: str, value: Any, required: bool = True) -> Optional[int]:
    """
    Parses an indexer integer: a Python int, decimal text ("1000000000000000000") or 0x-hex text.
    Large integers arrive as text so they never pass through floating point.
    """
    if value is None or value == "":
        if required:
            raise InvalidRecordError(record_type, f"missing '{field}'")
        return None
    if isinstance(value, bool):
        raise InvalidRecordError(record_type, f"'{field}' must be an integer, got {value!r}")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str) and DECIMAL_INTEGER_PATTERN.match(value.strip()):
        parsed = int(value.strip())
    elif isinstance(value, str) and value.startswith("0x"):
        parsed = hex_to_dec(value)
        if parsed is None:
            raise InvalidRecordError(record_type, f"'{field}' is not valid hex: {value!r}")
    else:
        raise InvalidRecordError(record_type, f"'{field}' must be a non-negative integer, got {value!r}")
    if parsed < 0:
        raise InvalidRecordError(record_type, f"'{field}' must be non-negative, got {value!r}")
    return parsed


def first_present(json_dict: dict, *keys: str) -> Any:
    for key in keys:
        if json_dict.get(key) is not None:
            return json_dict[key]
    return None


def describe_validation_error(error: ValidationError) -> str:
    """First pydantic error as 'field: message'."""
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
