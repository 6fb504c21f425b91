import click

from cli.decode_calldata import decode_calldata
from cli.encode_action import encode_action
from cli.execute_proposal import execute_proposal
from cli.plan_execution import plan_execution
from cli.resolve_proposal_state import resolve_proposal_state
from cli.simulate_proposal import simulate_proposal
from cli.watch_proposal_state import watch_proposal_state


@click.group()
@click.version_option(version="0.1.0")
@click.pass_context
def cli(ctx):
    pass


# Proposal state
cli.add_command(resolve_proposal_state, "resolve_proposal_state")
cli.add_command(watch_proposal_state, "watch_proposal_state")

# Proposal authoring
cli.add_command(encode_action, "encode_action")
cli.add_command(decode_calldata, "decode_calldata")
cli.add_command(simulate_proposal, "simulate_proposal")

# Queue / execute / cancel
cli.add_command(plan_execution, "plan_execution")
cli.add_command(execute_proposal, "execute_proposal")
