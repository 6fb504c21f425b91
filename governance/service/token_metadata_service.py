from async_lru import alru_cache
from eth_utils import to_checksum_address
from web3 import AsyncWeb3
from web3.exceptions import BadFunctionCallOutput, ContractLogicError, Web3Exception

from abi.erc20_abi import ERC20_ABI
from governance.models.token import TokenMetadata
from utils.logger_utils import get_logger

logger = get_logger("Token Metadata Service")


class TokenMetadataService(object):
    """
    Reads ERC-20 symbol, name and decimals for the token templates.
    Missing or reverting getters leave the field as None; the encoders then refuse to scale amounts.
    """

    def __init__(self, web3: AsyncWeb3):
        self._web3 = web3

    @alru_cache(maxsize=1024, ttl=3600)
    async def get_token(self, token_address: str) -> TokenMetadata:
        contract = self._web3.eth.contract(address=to_checksum_address(token_address), abi=ERC20_ABI)

        symbol = await self._call(contract.functions.symbol(), token_address)
        name = await self._call(contract.functions.name(), token_address)
        decimals = await self._call(contract.functions.decimals(), token_address)

        return TokenMetadata(
            address=token_address.lower(),
            symbol=self._to_text(symbol),
            name=self._to_text(name),
            decimals=decimals,
        )

    @staticmethod
    async def _call(function, token_address: str):
        try:
            return await function.call()
        except (BadFunctionCallOutput, ContractLogicError, Web3Exception, ValueError, OverflowError) as e:
            logger.debug(f"{function.fn_name} call failed for token {token_address}: {e}")
            return None

    @staticmethod
    def _to_text(value):
        if isinstance(value, bytes):
            return value.rstrip(b"\x00").decode("utf-8", errors="ignore")
        return value
