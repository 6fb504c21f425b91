import click

from cli.cli_utils import echo_json, load_dao, load_proposal, to_jsonable
from config.settings import settings
from governance.service.execution_service import ExecutionService
from governance.service.proposal_state_service import ProposalStateService
from utils.exceptions import GovernanceError
from utils.formatter_utils import format_seconds
from utils.logger_utils import configure_logging


@click.command()
@click.option("--proposal-file", required=True, type=click.Path(exists=True, dir_okay=False),
              help="Indexer proposal record (JSON).")
@click.option("--dao-file", default=None, type=click.Path(exists=True, dir_okay=False),
              help="Indexer DAO record (JSON).")
@click.option("--caller", default=None, type=str, help="Address that would send the transaction.")
@click.option("--now", default=None, type=int, help="Evaluation time in unix seconds. Defaults to the current time.")
@click.option("--log-file", default=None, show_default=True, type=str, help="Path to the log file.")
def plan_execution(proposal_file: str, dao_file: str, caller: str, now: int, log_file: str):
    """
    Shows which of queue/execute/cancel are available and the shared call arguments.
    """
    configure_logging(log_file, settings.app.log_level)

    try:
        proposal = load_proposal(proposal_file)
        dao = load_dao(dao_file)
    except GovernanceError as e:
        raise click.ClickException(str(e))

    state = ProposalStateService().calculate_proposal_state(proposal, dao, now)
    plan = ExecutionService().plan(proposal, state, caller, now)
    output = to_jsonable(plan)
    if plan.availability.time_until_executable:
        output["executable_in"] = format_seconds(plan.availability.time_until_executable)
    echo_json(output)
