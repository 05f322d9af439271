"""
ethdo wallet commands

Usage:
    ethdo wallet create --wallet NAME [--type nd|hd] [--mnemonic WORDS]
    ethdo wallet list
    ethdo wallet info --wallet NAME
    ethdo wallet accounts --wallet NAME
"""

from typing import Optional

import click

from .paths import accounts_from_path
from .root import CommandContext, cli, die, output_if, pass_command_context
from ..crypto import generate_mnemonic
from ..logger import get_logger
from ..wallet import WalletType

logger = get_logger(__name__)

WALLET_TYPES = {
    "nd": WalletType.NON_DETERMINISTIC,
    "non-deterministic": WalletType.NON_DETERMINISTIC,
    "hd": WalletType.HIERARCHICAL_DETERMINISTIC,
    "hierarchical deterministic": WalletType.HIERARCHICAL_DETERMINISTIC,
}


@cli.group("wallet")
def wallet():
    """Manage wallets."""
    pass


@wallet.command("create")
@click.option("--wallet", "wallet_name", default="", help="Name of the wallet to create")
@click.option(
    "--type", "wallet_type",
    type=click.Choice(sorted(WALLET_TYPES)),
    default="nd",
    show_default=True,
    help="Type of wallet: nd (non-deterministic) or hd (hierarchical deterministic)",
)
@click.option("--mnemonic", default=None, help="Mnemonic for the seed of a hierarchical deterministic wallet")
@pass_command_context
def create_cmd(obj: CommandContext, wallet_name: str, wallet_type: str, mnemonic: Optional[str]):
    """Create a wallet.

    Hierarchical deterministic wallets need --walletpassphrase. Without
    --mnemonic a new one is generated and printed; write it down.

    Examples:

        ethdo wallet create --wallet="Primary wallet" --type=hd --walletpassphrase="secret"
    """
    if not wallet_name:
        die("--wallet is required")
    wtype = WALLET_TYPES[wallet_type]

    if wtype == WalletType.HIERARCHICAL_DETERMINISTIC:
        if not obj.config.wallet_passphrase:
            die("--walletpassphrase is required for hierarchical deterministic wallets")
        generated = mnemonic is None
        if generated:
            mnemonic = generate_mnemonic()
        obj.store.create_wallet(wallet_name, wtype, obj.config.wallet_passphrase, mnemonic)
        if generated:
            click.echo(click.style("Mnemonic (store safely, it is the only backup of this wallet):", fg="yellow"))
            click.echo(mnemonic)
    else:
        if mnemonic is not None:
            die("--mnemonic only applies to hierarchical deterministic wallets")
        obj.store.create_wallet(wallet_name, wtype)

    logger.info("Created wallet %s", wallet_name)
    output_if(obj.config.verbose, f"Created {wtype.value} wallet {wallet_name}")


@wallet.command("list")
@pass_command_context
def list_cmd(obj: CommandContext):
    """List wallets."""
    for w in sorted(obj.store.wallets(), key=lambda w: w.name):
        if obj.config.verbose:
            output_if(not obj.config.quiet, f"{w.name}\t{w.id}")
        else:
            output_if(not obj.config.quiet, w.name)


@wallet.command("info")
@click.option("--wallet", "wallet_name", default="", help="Name of the wallet")
@pass_command_context
def info_cmd(obj: CommandContext, wallet_name: str):
    """Information about a wallet.

    In quiet mode this returns 0 if the wallet exists, otherwise 1.
    """
    if not wallet_name:
        die("--wallet is required")
    w = obj.store.open_wallet(wallet_name)
    if obj.config.quiet:
        return

    click.echo(f"Type: {w.type}")
    if obj.config.verbose:
        click.echo(f"UUID: {w.id}")
        if w.wallet_type == WalletType.HIERARCHICAL_DETERMINISTIC:
            click.echo(f"Next account index: {w.next_account}")
    click.echo(f"Accounts: {len(list(w.accounts()))}")


@wallet.command("accounts")
@click.option("--wallet", "wallet_name", default="", help="Name of the wallet")
@pass_command_context
def accounts_cmd(obj: CommandContext, wallet_name: str):
    """List accounts in a wallet, sorted by name."""
    if not wallet_name:
        die("--wallet is required")

    for account in accounts_from_path(obj.store, f"{wallet_name}/"):
        if obj.config.verbose:
            output_if(not obj.config.quiet, account.name)
            output_if(not obj.config.quiet, f"\tPublic key: 0x{account.public_key.hex()}")
        else:
            output_if(not obj.config.quiet, account.name)
