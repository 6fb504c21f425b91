import asyncio
from typing import Optional

import click
from pydantic import ValidationError

from cli.cli_utils import echo_json, read_json_file
from config.settings import settings
from governance.models.action_template import ActionTemplateEnvelope
from governance.providers.provider_factory import get_async_web3
from governance.service.action_encoder_service import ActionEncoderService
from governance.service.token_metadata_service import TokenMetadataService
from utils.exceptions import GovernanceError, InputValidationError
from utils.logger_utils import configure_logging, get_logger
from utils.validation_utils import is_valid_address

logger = get_logger("Encode Action CLI")

TOKEN_TEMPLATE_TYPES = ("transfer-erc20", "batch-transfer-erc20")


@click.command()
@click.option("--template-file", required=True, type=click.Path(exists=True, dir_okay=False),
              help="Action template (JSON object with a 'type' field).")
@click.option("--provider-uri", default=settings.ethereum.provider_uri, type=str,
              help="Node used to read token symbol/decimals when the template does not carry them.")
@click.option("--log-file", default=None, show_default=True, type=str, help="Path to the log file.")
def encode_action(template_file: str, provider_uri: Optional[str], log_file: str):
    """
    Validates an action template and prints the encoded proposal actions.
    """
    configure_logging(log_file, settings.app.log_level)

    try:
        template = ActionTemplateEnvelope(template=read_json_file(template_file)).template
    except ValidationError as e:
        raise click.ClickException(f"Invalid template: {e}")

    if (
        template.type in TOKEN_TEMPLATE_TYPES
        and template.token_decimals is None
        and provider_uri
        and is_valid_address(template.token_address.strip())
    ):
        template = asyncio.run(_with_token_metadata(template, provider_uri))

    try:
        encoded = ActionEncoderService().encode(template)
    except InputValidationError as e:
        raise click.ClickException(f"{e.field}: {e.message}")
    except GovernanceError as e:
        raise click.ClickException(str(e))
    echo_json(encoded)


async def _with_token_metadata(template, provider_uri: str):
    web3 = get_async_web3(provider_uri, settings.ethereum.rpc_timeout)
    token = await TokenMetadataService(web3).get_token(template.token_address.strip())
    logger.info(f"Token {token.address}: symbol={token.symbol} decimals={token.decimals}")
    return template.model_copy(update={
        "token_decimals": token.decimals,
        "token_symbol": template.token_symbol or token.symbol,
    })
