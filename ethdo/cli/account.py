"""
ethdo account commands

Usage:
    ethdo account create --account WALLET/ACCOUNT --passphrase PASS [--walletpassphrase PASS]
    ethdo account import --account WALLET/ACCOUNT --key HEX --passphrase PASS
    ethdo account info --account WALLET/ACCOUNT
    ethdo account key --account WALLET/ACCOUNT --passphrase PASS
"""

import click

from .paths import account_from_path, wallet_and_account_names_from_path, wallet_from_path
from .root import CommandContext, account_options, cli, die, output_if, pass_command_context
from ..crypto import parse_hex
from ..logger import get_logger
from ..wallet import NonDeterministicWallet, WalletType

logger = get_logger(__name__)


def _account_path(obj: CommandContext) -> str:
    if not obj.config.account:
        die("--account is required")
    return obj.config.account


@cli.group("account")
def account():
    """Manage accounts."""
    pass


@account.command("create")
@account_options
@pass_command_context
def create_cmd(obj: CommandContext):
    """Create an account.

    Accounts in hierarchical deterministic wallets are derived at the next
    free index and need --walletpassphrase to unlock the wallet.

    Examples:

        ethdo account create --account="Primary wallet/Validator 1" --passphrase="secret"
    """
    path = _account_path(obj)
    if not obj.config.passphrase:
        die("--passphrase is required")
    w = wallet_from_path(obj.store, path)
    _, account_name = wallet_and_account_names_from_path(path)
    if not account_name:
        die("account name is missing")
    if account_name.startswith('m/'):
        die("account name cannot be a path")

    if w.wallet_type == WalletType.HIERARCHICAL_DETERMINISTIC:
        if not obj.config.wallet_passphrase:
            die("--walletpassphrase is required for hierarchical deterministic wallets")
        with w.unlocked(obj.config.wallet_passphrase):
            new_account = w.create_account(account_name, obj.config.passphrase)
    else:
        new_account = w.create_account(account_name, obj.config.passphrase)

    logger.info("Created account %s in wallet %s", account_name, w.name)
    output_if(obj.config.verbose, f"0x{new_account.public_key.hex()}")


@account.command("import")
@click.option("--key", default="", help="Secret key of the account (hex)")
@account_options
@pass_command_context
def import_cmd(obj: CommandContext, key: str):
    """Import an existing secret key into a non-deterministic wallet."""
    path = _account_path(obj)
    if not obj.config.passphrase:
        die("--passphrase is required")
    if not key:
        die("--key is required")
    try:
        secret = parse_hex(key, "key")
    except ValueError as e:
        die(str(e))

    w = wallet_from_path(obj.store, path)
    if not isinstance(w, NonDeterministicWallet):
        die("accounts can only be imported into non-deterministic wallets")
    _, account_name = wallet_and_account_names_from_path(path)
    if not account_name:
        die("account name is missing")

    try:
        imported = w.import_account(account_name, secret, obj.config.passphrase)
    except ValueError as e:
        die(f"invalid key: {e}")
    output_if(obj.config.verbose, f"0x{imported.public_key.hex()}")


@account.command("info")
@account_options
@pass_command_context
def info_cmd(obj: CommandContext):
    """Information about an account.

    In quiet mode this returns 0 if the account exists, otherwise 1.
    """
    found = account_from_path(obj.store, _account_path(obj), obj.config.wallet_passphrase)
    if obj.config.quiet:
        return

    click.echo(f"Public key: 0x{found.public_key.hex()}")
    if obj.config.verbose:
        click.echo(f"UUID: {found.id}")
        if found.path:
            click.echo(f"Path: {found.path}")


@account.command("key")
@account_options
@pass_command_context
def key_cmd(obj: CommandContext):
    """Obtain the secret key of an account."""
    found = account_from_path(obj.store, _account_path(obj), obj.config.wallet_passphrase)
    if not found.is_unlocked:
        if not obj.config.passphrase:
            die("--passphrase is required")
        found.unlock(obj.config.passphrase)

    output_if(not obj.config.quiet, f"0x{found.secret_key.to_bytes().hex()}")
