from typing import Any, Dict, List, Sequence

from eth_abi import encode
from eth_utils import function_signature_to_4byte_selector, keccak, to_checksum_address


def find_function_abi(abi: List[Dict[str, Any]], fn_name: str) -> Dict[str, Any]:
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == fn_name:
            return entry
    raise KeyError(f"Function '{fn_name}' not found in ABI")


def function_signature(fn_abi: Dict[str, Any]) -> str:
    """Canonical signature, e.g. 'transfer(address,uint256)'."""
    input_types = ",".join(i["type"] for i in fn_abi.get("inputs", []))
    return f"{fn_abi['name']}({input_types})"


def function_selector(signature: str) -> str:
    return "0x" + function_signature_to_4byte_selector(signature).hex()


def encode_function_call(abi: List[Dict[str, Any]], fn_name: str, args: Sequence[Any]) -> str:
    """
    ABI-encodes a call: 4-byte selector followed by the encoded arguments, as 0x-prefixed hex.
    Addresses may be given in any case.
    """
    fn_abi = find_function_abi(abi, fn_name)
    input_types = [i["type"] for i in fn_abi.get("inputs", [])]
    if len(input_types) != len(args):
        raise ValueError(f"{fn_name} expects {len(input_types)} arguments, got {len(args)}")

    normalized_args = [
        to_checksum_address(arg) if abi_type == "address" else arg
        for abi_type, arg in zip(input_types, args)
    ]
    selector = function_signature_to_4byte_selector(function_signature(fn_abi))
    return "0x" + (selector + encode(input_types, normalized_args)).hex()


def description_hash(description: str) -> bytes:
    """
    keccak256 of the UTF-8 bytes of a proposal description, as computed by Governor.propose.
    """
    return keccak(text=description)
