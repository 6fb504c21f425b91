from unittest.mock import AsyncMock, MagicMock

import pytest
from web3.exceptions import ContractLogicError, TimeExhausted

from abi.dao_governance_abi import GOVERNOR_ABI
from governance.models.execution import ContractCall
from governance.providers.provider_factory import get_async_provider_from_uri
from governance.providers.transaction_sender import Web3TransactionSender
from tests.unit.factories import GOVERNOR, PROPOSER
from utils.exceptions import ChainError, ExternalDependencyError

TX_HASH = "0x" + "12" * 32


def make_web3(transact: AsyncMock) -> MagicMock:
    web3 = MagicMock()
    contract_function = MagicMock()
    contract_function.transact = transact
    contract = MagicMock()
    contract.get_function_by_name.return_value = MagicMock(return_value=contract_function)
    web3.eth.contract.return_value = contract
    return web3


@pytest.fixture
def call():
    return ContractCall(address=GOVERNOR, abi=GOVERNOR_ABI, function_name="castVote", args=(42, 1), chain_id=1)


@pytest.mark.asyncio
async def test_write_contract_returns_hex_hash(call):
    transact = AsyncMock(return_value=bytes.fromhex(TX_HASH[2:]))
    web3 = make_web3(transact)

    tx_hash = await Web3TransactionSender(web3).write_contract(call, PROPOSER)

    assert tx_hash == TX_HASH
    contract = web3.eth.contract.return_value
    contract.get_function_by_name.assert_called_once_with("castVote")
    contract.get_function_by_name.return_value.assert_called_once_with(42, 1)
    tx_params = transact.await_args.args[0]
    assert tx_params["chainId"] == 1
    assert tx_params["value"] == 0
    assert tx_params["from"].lower() == PROPOSER


@pytest.mark.asyncio
async def test_write_contract_maps_revert_to_chain_error(call):
    web3 = make_web3(AsyncMock(side_effect=ContractLogicError("execution reverted: Governor: vote not currently active")))

    with pytest.raises(ChainError, match="vote not currently active"):
        await Web3TransactionSender(web3).write_contract(call, PROPOSER)


@pytest.mark.asyncio
async def test_write_contract_maps_node_failure(call):
    web3 = make_web3(AsyncMock(side_effect=ConnectionRefusedError("connection refused")))

    with pytest.raises(ExternalDependencyError, match="connection refused"):
        await Web3TransactionSender(web3).write_contract(call, PROPOSER)


@pytest.mark.asyncio
async def test_wait_for_receipt_reports_status():
    web3 = MagicMock()
    web3.eth.wait_for_transaction_receipt = AsyncMock(side_effect=[{"status": 1}, {"status": 0}])
    sender = Web3TransactionSender(web3)

    assert await sender.wait_for_receipt(TX_HASH, 5) is True
    assert await sender.wait_for_receipt(TX_HASH, 5) is False


@pytest.mark.asyncio
async def test_wait_for_receipt_timeout():
    web3 = MagicMock()
    web3.eth.wait_for_transaction_receipt = AsyncMock(side_effect=TimeExhausted("timed out"))

    with pytest.raises(ChainError) as exc_info:
        await Web3TransactionSender(web3).wait_for_receipt(TX_HASH, 5)

    assert exc_info.value.tx_hash == TX_HASH


def test_provider_factory_rejects_unknown_scheme():
    with pytest.raises(ValueError, match="Unknown uri scheme"):
        get_async_provider_from_uri("ws://localhost:8546")
