"""
ethdo node commands
"""

import click

from .root import CommandContext, cli, pass_command_context
from ..beacon import connect, fetch_genesis_time, fetch_syncing, fetch_version
from ..constants import EXIT_FAILURE


@cli.group("node")
def node():
    """Obtain information about an Ethereum 2 node."""
    pass


@node.command("info")
@pass_command_context
def info_cmd(obj: CommandContext):
    """Version and sync state of the beacon node.

    In quiet mode this returns 0 if the node is synced, otherwise 1.
    """
    with connect(obj.config) as conn:
        version, metadata = fetch_version(conn)
        syncing = fetch_syncing(conn)
        genesis_time = fetch_genesis_time(conn) if obj.config.verbose else None

    if obj.config.quiet:
        if syncing:
            click.get_current_context().exit(EXIT_FAILURE)
        return

    click.echo(f"Version: {version}")
    if obj.config.verbose:
        if metadata:
            click.echo(f"Metadata: {metadata}")
        click.echo(f"Genesis time: {genesis_time.strftime('%a %b %d %H:%M:%S UTC %Y')}")
    click.echo(f"Syncing: {str(syncing).lower()}")
