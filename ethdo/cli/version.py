import click

from .root import cli
from ..constants import VERSION


@cli.command("version")
def version_cmd():
    """Version of ethdo."""
    click.echo(VERSION)
