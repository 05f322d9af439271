"""
ethdo chain commands
"""

import click

from .root import CommandContext, cli, output_if, pass_command_context
from ..beacon import connect, fetch_chain_config, fetch_genesis_time, fetch_genesis_validators_root
from ..logger import get_logger

logger = get_logger(__name__)


def _format_config_value(value) -> str:
    if isinstance(value, bytes):
        return f"0x{value.hex()}"
    return str(value)


@cli.group("chain")
def chain():
    """Obtain information about an Ethereum 2 chain."""
    pass


@chain.command("info")
@pass_command_context
def info_cmd(obj: CommandContext):
    """Genesis and configuration of the chain."""
    with connect(obj.config) as conn:
        config = fetch_chain_config(conn)
        genesis_time = fetch_genesis_time(conn)
        genesis_validators_root = fetch_genesis_validators_root(conn)

    if obj.config.quiet:
        return

    click.echo(f"Genesis time: {genesis_time.strftime('%a %b %d %H:%M:%S UTC %Y')}")
    output_if(obj.config.verbose, f"Genesis timestamp: {int(genesis_time.timestamp())}")
    click.echo(f"Genesis validators root: 0x{genesis_validators_root.hex()}")
    for key, label in (
        ("GENESIS_FORK_VERSION", "Genesis fork version"),
        ("SECONDS_PER_SLOT", "Seconds per slot"),
        ("SLOTS_PER_EPOCH", "Slots per epoch"),
        ("DEPOSIT_CONTRACT_ADDRESS", "Deposit contract address"),
    ):
        if key in config:
            click.echo(f"{label}: {_format_config_value(config[key])}")

    if obj.config.verbose:
        for key in sorted(config):
            click.echo(f"{key}: {_format_config_value(config[key])}")
