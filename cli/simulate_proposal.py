import asyncio

import click
from pydantic import ValidationError

from cli.cli_utils import echo_json, load_dao, read_json_file
from config.settings import settings
from governance.clients.tenderly_client import TenderlyClient
from governance.models.action_template import ActionTemplateEnvelope
from governance.models.dao import DAO
from governance.models.proposal_action import ProposalAction
from governance.service.action_encoder_service import ActionEncoderService
from governance.service.proposal_draft import ProposalDraft
from governance.service.simulation_service import SimulationService
from utils.exceptions import GovernanceError, InputValidationError
from utils.logger_utils import configure_logging, get_logger

logger = get_logger("Simulate Proposal CLI")


@click.command()
@click.option("--draft-file", required=True, type=click.Path(exists=True, dir_okay=False),
              help="Draft JSON: {title, body, actions: [action template or {target, value, calldata, description}]}.")
@click.option("--dao-file", required=True, type=click.Path(exists=True, dir_okay=False),
              help="Indexer DAO record (JSON); its timelock executes the actions.")
@click.option("--log-file", default=None, show_default=True, type=str, help="Path to the log file.")
def simulate_proposal(draft_file: str, dao_file: str, log_file: str):
    """
    Simulates every action of a draft proposal, in order, as if executed by the timelock.
    """
    configure_logging(log_file, settings.app.log_level)

    try:
        dao = load_dao(dao_file)
        draft = load_draft(read_json_file(draft_file))
    except InputValidationError as e:
        raise click.ClickException(f"{e.field}: {e.message}")
    except GovernanceError as e:
        raise click.ClickException(str(e))

    if not dao.timelock:
        raise click.ClickException(f"DAO {dao.id} has no timelock address")

    try:
        results = asyncio.run(_simulate(dao, draft))
    except KeyboardInterrupt:
        logger.info("Simulation interrupted by user.")
        return

    echo_json({
        "actions": [
            {"description": action.description, "result": result}
            for action, result in zip(draft.actions, results)
        ],
        "summary": SimulationService.get_overall_status(results),
    })


def load_draft(raw: dict) -> ProposalDraft:
    draft = ProposalDraft(title=raw.get("title", ""), body=raw.get("body", ""))
    encoder = ActionEncoderService()
    for i, item in enumerate(raw.get("actions") or []):
        try:
            if "type" in item:
                draft.add(encoder.encode(ActionTemplateEnvelope(template=item).template))
            else:
                draft.add(ProposalAction(**item))
        except ValidationError as e:
            raise click.ClickException(f"actions[{i}]: {e}")
    return draft


async def _simulate(dao: DAO, draft: ProposalDraft):
    async with TenderlyClient() as client:
        return await SimulationService(client).simulate_proposal_actions(dao.chain_id, dao.timelock, draft.actions)
