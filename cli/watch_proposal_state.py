import asyncio
from typing import Optional

import click

from cli.cli_utils import echo_json, load_dao, load_proposal
from config.settings import settings
from governance.enums.proposal_state import ProposalState
from governance.models.dao import DAO
from governance.models.proposal import Proposal
from governance.watcher.proposal_state_watcher import ProposalStateWatcher
from utils.clock_utils import current_unix_time
from utils.exceptions import GovernanceError
from utils.logger_utils import configure_logging, get_logger

logger = get_logger("Watch Proposal State CLI")


@click.command()
@click.option("--proposal-file", required=True, type=click.Path(exists=True, dir_okay=False),
              help="Indexer proposal record (JSON).")
@click.option("--dao-file", default=None, type=click.Path(exists=True, dir_okay=False),
              help="Indexer DAO record (JSON).")
@click.option("--duration", default=60.0, show_default=True, type=float, help="Seconds to watch before exiting.")
@click.option("--interval", default=settings.governance.state_refresh_seconds, show_default=True, type=float,
              help="Re-evaluation interval in seconds.")
@click.option("--log-file", default=None, show_default=True, type=str, help="Path to the log file.")
def watch_proposal_state(proposal_file: str, dao_file: str, duration: float, interval: float, log_file: str):
    """
    Prints the proposal's effective state each time it changes (PENDING -> ACTIVE -> outcome).
    """
    configure_logging(log_file, settings.app.log_level)

    try:
        proposal = load_proposal(proposal_file)
        dao = load_dao(dao_file)
    except GovernanceError as e:
        raise click.ClickException(str(e))

    try:
        asyncio.run(_watch(proposal, dao, duration, interval))
    except KeyboardInterrupt:
        logger.info("Watch interrupted by user.")


async def _watch(proposal: Proposal, dao: Optional[DAO], duration: float, interval: float) -> None:
    def on_change(state: ProposalState) -> None:
        echo_json({"proposal": proposal.key, "state": state, "at": current_unix_time()})

    async with ProposalStateWatcher(proposal, dao, on_change, interval_seconds=interval):
        await asyncio.sleep(duration)
