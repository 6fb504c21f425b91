from typing import Any, Dict, List, Optional

from constants.constants import ETHER_DECIMALS
from constants.event_signatures import MANAGER_CHANGED_EVENT_SIGNATURE
from governance.clients.tenderly_client import TenderlyClient
from governance.enums.state_change_type import StateChangeType
from governance.models.proposal_action import ProposalAction
from governance.models.simulation import SimulationResult, SimulationSummary, StateChange
from utils.exceptions import SimulationError
from utils.formatter_utils import format_units, shorten_address
from utils.logger_utils import get_logger

logger = get_logger("Simulation Service")

NOT_CONFIGURED_ERROR = (
    "Tenderly simulation is not configured. Set TENDERLY_API_URL and TENDERLY_API_KEY environment variables."
)


class SimulationService(object):
    def __init__(self, client: TenderlyClient):
        self._client = client

    async def simulate_transaction(
        self,
        chain_id: int,
        from_address: str,
        to_address: str,
        value: int,
        calldata: str,
        state_objects: Optional[Dict[str, Any]] = None,
    ) -> SimulationResult:
        """Never raises: provider failures come back as an unsuccessful result carrying the message."""
        if not self._client.is_configured:
            return SimulationResult(success=False, error=NOT_CONFIGURED_ERROR)

        try:
            response = await self._client.simulate(
                str(chain_id), from_address, to_address, calldata, value, state_objects
            )
        except SimulationError as e:
            logger.warning(f"Simulation of call to {to_address} failed: {e}")
            return SimulationResult(success=False, error=str(e))

        transaction = response.get("transaction") or {}
        return SimulationResult(
            success=bool(transaction.get("status")),
            gas_used=int(transaction.get("gas_used") or 0),
            error=transaction.get("error_message"),
            state_changes=parse_state_changes(response),
        )

    async def simulate_proposal_actions(
        self, chain_id: int, timelock_address: str, actions: List[ProposalAction]
    ) -> List[SimulationResult]:
        """Simulates each action in order as if executed by the timelock."""
        results = []
        for action in actions:
            results.append(
                await self.simulate_transaction(chain_id, timelock_address, action.target, action.value, action.calldata)
            )
        return results

    @staticmethod
    def get_overall_status(results: List[SimulationResult]) -> SimulationSummary:
        failed_count = sum(1 for result in results if not result.success)
        return SimulationSummary(
            all_successful=failed_count == 0,
            total_gas=sum(result.gas_used for result in results),
            failed_count=failed_count,
        )


def parse_state_changes(response: Dict[str, Any]) -> List[StateChange]:
    tx_info = (response.get("transaction") or {}).get("transaction_info")
    if not tx_info:
        return []

    changes = []
    for change in tx_info.get("asset_changes") or []:
        if change.get("type") != "Transfer":
            continue
        token_info = change.get("token_info") or {}
        symbol = token_info.get("symbol") or "ETH"
        decimals = token_info.get("decimals") or ETHER_DECIMALS
        raw_amount = str(change.get("amount") or "0")
        # Already-scaled decimal text is kept as reported
        amount = format_units(int(raw_amount), decimals) if raw_amount.isdigit() else raw_amount
        changes.append(StateChange(
            type=StateChangeType.TRANSFER,
            description=(
                f"Transferred {amount} {symbol} from {shorten_address(change.get('from'))} "
                f"to {shorten_address(change.get('to'))}"
            ),
            from_address=change.get("from"),
            to_address=change.get("to"),
            value=amount,
            token=symbol,
        ))

    for log in tx_info.get("logs") or []:
        raw = log.get("raw")
        if not raw:
            continue
        topics = raw.get("topics") or []
        # Unverified contracts come back without a decoded name
        is_manager_change = log.get("name") == "ManagerChanged" or (
            topics and str(topics[0]).lower() == MANAGER_CHANGED_EVENT_SIGNATURE
        )
        if not is_manager_change or len(topics) < 3:
            continue
        previous_manager = "0x" + topics[1][-40:]
        new_manager = "0x" + topics[2][-40:]
        changes.append(StateChange(
            type=StateChangeType.MANAGER,
            description=f"Manager changed from {shorten_address(previous_manager)} to {shorten_address(new_manager)}",
            from_address=previous_manager,
            to_address=new_manager,
        ))

    return changes
