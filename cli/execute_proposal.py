import asyncio
from typing import Optional

import click

from cli.cli_utils import echo_json, load_dao, load_proposal, to_jsonable
from config.settings import settings
from constants.constants import get_explorer_url
from governance.enums.execution_action import ExecutionAction
from governance.models.dao import DAO
from governance.models.proposal import Proposal
from governance.providers.provider_factory import get_async_web3
from governance.providers.transaction_sender import Web3TransactionSender
from governance.service.execution_service import ExecutionService
from governance.service.proposal_state_service import ProposalStateService
from utils.exceptions import GovernanceError
from utils.logger_utils import configure_logging, get_logger

logger = get_logger("Execute Proposal CLI")


@click.command()
@click.option("--action", required=True, type=click.Choice([a.value for a in ExecutionAction]),
              help="Lifecycle operation to send.")
@click.option("--proposal-file", required=True, type=click.Path(exists=True, dir_okay=False),
              help="Indexer proposal record (JSON).")
@click.option("--dao-file", default=None, type=click.Path(exists=True, dir_okay=False),
              help="Indexer DAO record (JSON).")
@click.option("--caller", required=True, type=str, help="Node-managed account that sends the transaction.")
@click.option("--provider-uri", default=settings.ethereum.provider_uri, type=str,
              help="The URI of the node, e.g. http://localhost:8545")
@click.option("--log-file", default=None, show_default=True, type=str, help="Path to the log file.")
def execute_proposal(action: str, proposal_file: str, dao_file: str, caller: str, provider_uri: str, log_file: str):
    """
    Sends queue, execute or cancel for a proposal once its preconditions hold.
    """
    configure_logging(log_file, settings.app.log_level)

    if not provider_uri:
        raise click.ClickException("A node is required: pass --provider-uri or set PROVIDER_URI")

    try:
        proposal = load_proposal(proposal_file)
        dao = load_dao(dao_file)
        transaction = asyncio.run(_submit(ExecutionAction(action), proposal, dao, caller, provider_uri))
    except (GovernanceError, ValueError) as e:
        logger.error(f"{action} failed: {e}")
        raise click.ClickException(str(e))
    output = to_jsonable(transaction)
    if transaction.tx_hash:
        output["explorer_url"] = get_explorer_url(proposal.chain_id, "tx", transaction.tx_hash)
    echo_json(output)


async def _submit(action: ExecutionAction, proposal: Proposal, dao: Optional[DAO], caller: str, provider_uri: str):
    web3 = get_async_web3(provider_uri, settings.ethereum.rpc_timeout)
    service = ExecutionService(Web3TransactionSender(web3))
    state = ProposalStateService().calculate_proposal_state(proposal, dao)
    return await service.submit(action, proposal, state, caller)
