"""
ethdo Command Line Interface

Manage common Ethereum 2 tasks from the command line.
"""

from .root import CommandContext, CommandError, cli
from . import account, chain, node, signature, validator, version, wallet  # noqa: F401  (register commands)
from ..constants import PROGRAM_NAME


def main() -> None:
    cli(prog_name=PROGRAM_NAME)


__all__ = ['CommandContext', 'CommandError', 'cli', 'main']
