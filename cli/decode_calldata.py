import click

from cli.cli_utils import echo_json
from config.settings import settings
from governance.service.calldata_decoder_service import CalldataDecoderService
from utils.logger_utils import configure_logging


@click.command()
@click.option("--target", required=True, type=str, help="Target contract address of the action.")
@click.option("--calldata", default="0x", show_default=True, type=str, help="Action calldata (0x-prefixed hex).")
@click.option("--value", default=0, show_default=True, type=int, help="Value sent with the action, in wei.")
@click.option("--log-file", default=None, show_default=True, type=str, help="Path to the log file.")
def decode_calldata(target: str, calldata: str, value: int, log_file: str):
    """
    Decodes one proposal action for review.
    """
    configure_logging(log_file, settings.app.log_level)
    echo_json(CalldataDecoderService().decode(target, value, calldata))
