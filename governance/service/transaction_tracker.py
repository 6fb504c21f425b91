from typing import Dict, Optional

from config.settings import settings
from governance.enums.transaction_status import IN_FLIGHT_STATUSES, TransactionStatus
from governance.models.execution import ContractCall, TransactionState
from governance.providers.transaction_sender import TransactionSender
from utils.exceptions import ChainError, ExternalDependencyError, GovernanceError, TransactionInFlightError
from utils.logger_utils import get_logger

logger = get_logger("Transaction Tracker")


class TransactionTracker(object):
    """
    Drives one write call at a time per key (usually a proposal key) through
    NOT_SUBMITTED -> AWAITING_SIGNATURE -> SUBMITTED -> CONFIRMED | FAILED.

    Only the tracker writes the lifecycle state; callers get copies.
    """

    def __init__(self, sender: Optional[TransactionSender], receipt_timeout: Optional[float] = None):
        self._sender = sender
        self._receipt_timeout = (
            settings.governance.receipt_timeout_seconds if receipt_timeout is None else receipt_timeout
        )
        self._states: Dict[str, TransactionState] = {}

    def get_state(self, key: str) -> TransactionState:
        state = self._states.get(key)
        return state.model_copy() if state else TransactionState()

    def is_in_flight(self, key: str) -> bool:
        state = self._states.get(key)
        return state is not None and state.status in IN_FLIGHT_STATUSES

    def reset(self, key: str) -> None:
        if self.is_in_flight(key):
            raise TransactionInFlightError(f"Cannot reset {key} while a transaction is in flight")
        self._states.pop(key, None)

    async def submit(self, key: str, action: str, call: ContractCall, from_address: str) -> TransactionState:
        """
        Raises:
            TransactionInFlightError: Another attempt for `key` has not settled.
            ExternalDependencyError: Wallet rejection or node failure (state becomes FAILED).
            ChainError: Reverted or unconfirmed transaction (state becomes FAILED).
        """
        if self.is_in_flight(key):
            raise TransactionInFlightError(
                f"A {self._states[key].action} transaction for {key} is still pending"
            )
        if self._sender is None:
            raise ExternalDependencyError("No wallet connected")

        # Set before the first await so a concurrent submit sees the attempt
        state = TransactionState(status=TransactionStatus.AWAITING_SIGNATURE, action=action)
        self._states[key] = state

        try:
            tx_hash = await self._sender.write_contract(call, from_address)
        except Exception as e:
            raise self._fail(key, e)

        state.status = TransactionStatus.SUBMITTED
        state.tx_hash = tx_hash
        logger.info(f"{action} for {key} submitted in {tx_hash}")

        try:
            confirmed = await self._sender.wait_for_receipt(tx_hash, self._receipt_timeout)
        except Exception as e:
            raise self._fail(key, e)

        if not confirmed:
            raise self._fail(key, ChainError(f"Transaction {tx_hash} reverted", tx_hash=tx_hash))

        state.status = TransactionStatus.CONFIRMED
        logger.info(f"{action} for {key} confirmed in {tx_hash}")
        return state.model_copy()

    def _fail(self, key: str, error: Exception) -> GovernanceError:
        state = self._states[key]
        state.status = TransactionStatus.FAILED
        state.error = str(error)
        logger.error(f"{state.action} for {key} failed: {error}")

        if isinstance(error, GovernanceError):
            return error
        wrapped = ExternalDependencyError(str(error))
        wrapped.__cause__ = error
        return wrapped
