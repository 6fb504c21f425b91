# Governance numeric conventions (OpenZeppelin Governor)
ETHER_DECIMALS = 18
QUORUM_DENOMINATOR = 100
DEFAULT_QUORUM_NUMERATOR = 4

# Bit widths of the governor settings parameters
MAX_UINT32 = 2 ** 32 - 1
MAX_UINT48 = 2 ** 48 - 1
MAX_UINT256 = 2 ** 256 - 1

# Calldata of a plain value transfer (no function call)
EMPTY_CALLDATA = "0x"

IPFS_URI_PREFIX = "ipfs://"

# Chains the dashboard is deployed against
CHAIN_CONFIG = {
    1: {"name": "Ethereum", "explorer": "https://etherscan.io"},
    8453: {"name": "Base", "explorer": "https://basescan.org"},
    11155111: {"name": "Sepolia", "explorer": "https://sepolia.etherscan.io"},
}


def get_chain_name(chain_id: int) -> str:
    chain = CHAIN_CONFIG.get(chain_id)
    return chain["name"] if chain else f"Chain {chain_id}"


def get_explorer_url(chain_id: int, kind: str, value: str) -> str | None:
    """
    Builds a block explorer link for an address or a transaction hash.
    `kind` is "address" or "tx". Returns None for unknown chains.
    """
    chain = CHAIN_CONFIG.get(chain_id)
    if not chain:
        return None
    return f"{chain['explorer']}/{kind}/{value}"
