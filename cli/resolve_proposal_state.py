import click

from cli.cli_utils import echo_json, load_dao, load_proposal
from config.settings import settings
from constants.constants import ETHER_DECIMALS, get_chain_name
from governance.service.proposal_state_service import ProposalStateService
from utils.exceptions import GovernanceError
from utils.formatter_utils import format_token_amount
from utils.logger_utils import configure_logging, get_logger

logger = get_logger("Resolve Proposal State CLI")


@click.command()
@click.option("--proposal-file", required=True, type=click.Path(exists=True, dir_okay=False),
              help="Indexer proposal record (JSON).")
@click.option("--dao-file", default=None, type=click.Path(exists=True, dir_okay=False),
              help="Indexer DAO record (JSON). Without it quorum cannot be checked.")
@click.option("--now", default=None, type=int, help="Evaluation time in unix seconds. Defaults to the current time.")
@click.option("--degraded-quorum-fallback/--no-degraded-quorum-fallback", default=None,
              help="Approximate quorum as 'any vote cast' when no DAO record is given.")
@click.option("--log-file", default=None, show_default=True, type=str, help="Path to the log file.")
def resolve_proposal_state(proposal_file: str, dao_file: str, now: int, degraded_quorum_fallback: bool, log_file: str):
    """
    Computes the effective lifecycle state of a proposal.
    """
    configure_logging(log_file, settings.app.log_level)

    try:
        proposal = load_proposal(proposal_file)
        dao = load_dao(dao_file)
    except GovernanceError as e:
        raise click.ClickException(str(e))

    service = ProposalStateService(degraded_quorum_fallback=degraded_quorum_fallback)
    state = service.calculate_proposal_state(proposal, dao, now)

    output = {
        "proposal": proposal.key,
        "chain": get_chain_name(proposal.chain_id),
        "title": proposal.title,
        "indexed_state": proposal.state,
        "state": state,
        "votes": service.vote_percentages(proposal),
    }
    if dao is not None:
        progress = service.quorum_progress(proposal, dao)
        decimals = dao.token_decimals if dao.token_decimals is not None else ETHER_DECIMALS
        output["quorum"] = progress
        output["quorum_display"] = (
            f"{format_token_amount(progress.total_votes, decimals)} / "
            f"{format_token_amount(progress.quorum_required, decimals)} {dao.token_symbol or 'votes'}"
        )
    echo_json(output)
