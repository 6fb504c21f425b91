from abc import ABC, abstractmethod

from eth_utils import to_checksum_address
from hexbytes import HexBytes
from web3 import AsyncWeb3
from web3.exceptions import ContractLogicError, TimeExhausted, Web3Exception

from governance.models.execution import ContractCall
from utils.exceptions import ChainError, ExternalDependencyError
from utils.logger_utils import get_logger

logger = get_logger("Transaction Sender")


class TransactionSender(ABC):
    """
    Wallet/transaction boundary. Implementations sign and broadcast a contract write
    and report whether it was mined successfully.
    """

    @abstractmethod
    async def write_contract(self, call: ContractCall, sender: str) -> str:
        """
        Requests a signature for `call` from `sender` and broadcasts it.

        Returns:
            The transaction hash (0x-prefixed hex).

        Raises:
            ExternalDependencyError: The wallet rejected the request or the node is unreachable.
        """

    @abstractmethod
    async def wait_for_receipt(self, tx_hash: str, timeout: float) -> bool:
        """
        Waits until the transaction is mined.

        Returns:
            True when the transaction succeeded, False when it reverted.

        Raises:
            ChainError: No receipt within `timeout` seconds.
        """


class Web3TransactionSender(TransactionSender):
    """Sends through a node-managed (unlocked or dev) account using eth_sendTransaction."""

    def __init__(self, web3: AsyncWeb3):
        self._web3 = web3

    async def write_contract(self, call: ContractCall, sender: str) -> str:
        contract = self._web3.eth.contract(address=to_checksum_address(call.address), abi=call.abi)
        function = contract.get_function_by_name(call.function_name)(*call.args)
        tx_params = {
            "from": to_checksum_address(sender),
            "chainId": call.chain_id,
            "value": call.value,
        }
        try:
            tx_hash = await function.transact(tx_params)
        except ContractLogicError as e:
            raise ChainError(f"{call.function_name} would revert: {e}") from e
        except (Web3Exception, ValueError, OSError) as e:
            raise ExternalDependencyError(f"{call.function_name} was not sent: {e}") from e

        tx_hash_hex = HexBytes(tx_hash).to_0x_hex()
        logger.info(f"Sent {call.function_name} to {call.address} (tx {tx_hash_hex})")
        return tx_hash_hex

    async def wait_for_receipt(self, tx_hash: str, timeout: float) -> bool:
        try:
            receipt = await self._web3.eth.wait_for_transaction_receipt(tx_hash, timeout=timeout)
        except TimeExhausted as e:
            raise ChainError(f"Transaction not confirmed after {timeout}s", tx_hash=tx_hash) from e
        except (Web3Exception, OSError) as e:
            raise ExternalDependencyError(f"Failed to fetch receipt for {tx_hash}: {e}") from e
        return receipt["status"] == 1
