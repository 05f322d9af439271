"""
ethdo validator commands

Usage:
    ethdo validator info --account WALLET/ACCOUNT
    ethdo validator exit --account WALLET/ACCOUNT --passphrase PASS [--epoch N] [--generate | --wait]
"""

import json
import time
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

import click

from .paths import account_from_path
from .root import CommandContext, account_options, cli, die, output_if, pass_command_context, sign, transaction_options
from ..beacon import (
    FAR_FUTURE_EPOCH,
    connect,
    fetch_chain_config,
    fetch_fork,
    fetch_genesis_time,
    fetch_genesis_validators_root,
    fetch_validator,
    fetch_validator_info,
    submit_voluntary_exit,
)
from ..constants import DOMAIN_VOLUNTARY_EXIT
from ..crypto import VoluntaryExit, compute_domain, generate_signing_root
from ..logger import get_logger

logger = get_logger(__name__)

GWEI_PER_ETHER = Decimal(10 ** 9)

# Seconds between status checks when waiting for an exit
EXIT_POLL_INTERVAL = 12
# Seconds to wait for an exit to be picked up before giving up
EXIT_WAIT_LIMIT = 30 * 60

EXITING_STATUSES = (
    "active_exiting",
    "active_slashed",
    "exited_unslashed",
    "exited_slashed",
    "withdrawal_possible",
    "withdrawal_done",
)


def format_ether(gwei: int) -> str:
    return f"{Decimal(gwei) / GWEI_PER_ETHER:f} Ether"


def current_epoch(genesis_time: datetime, seconds_per_slot: int, slots_per_epoch: int) -> int:
    """Epoch at the current wall-clock time (0 before genesis)."""
    elapsed = (datetime.now(timezone.utc) - genesis_time).total_seconds()
    if elapsed < 0:
        return 0
    return int(elapsed // (seconds_per_slot * slots_per_epoch))


@cli.group("validator")
def validator():
    """Manage Ethereum 2 validators."""
    pass


@validator.command("info")
@account_options
@pass_command_context
def info_cmd(obj: CommandContext):
    """Status and balances of the account's validator."""
    if not obj.config.account:
        die("--account is required")
    account = account_from_path(obj.store, obj.config.account, obj.config.wallet_passphrase)

    with connect(obj.config) as conn:
        info = fetch_validator_info(conn, account)
        if info.status == "unknown":
            die("Not known as a validator")
        state = fetch_validator(conn, account) if obj.config.verbose else None
    if obj.config.quiet:
        return

    click.echo(f"Status: {info.status}")
    output_if(obj.config.verbose, f"Index: {info.index}")
    click.echo(f"Balance: {format_ether(info.balance)}")
    output_if(obj.config.verbose, f"Effective balance: {format_ether(info.effective_balance)}")
    if state is not None:
        click.echo(f"Withdrawal credentials: 0x{state.withdrawal_credentials.hex()}")
        if state.exit_epoch != FAR_FUTURE_EPOCH:
            click.echo(f"Exit epoch: {state.exit_epoch}")


@validator.command("exit")
@click.option("--epoch", type=int, default=None, help="Epoch at which to exit (defaults to the current epoch)")
@transaction_options
@account_options
@pass_command_context
def exit_cmd(obj: CommandContext, epoch: Optional[int], generate: bool, wait: bool):
    """Send a voluntary exit for the account's validator.

    With --generate the signed exit is printed instead of sent; with --wait
    the command returns once the beacon node reports the validator exiting,
    giving up after half an hour.
    """
    if not obj.config.account:
        die("--account is required")
    account = account_from_path(obj.store, obj.config.account, obj.config.wallet_passphrase)
    if not account.is_unlocked:
        if not obj.config.passphrase:
            die("--passphrase is required")
        account.unlock(obj.config.passphrase)

    with connect(obj.config) as conn:
        info = fetch_validator_info(conn, account)
        if info.status == "unknown" or info.index < 0:
            die("Validator not known by beacon node")
        if info.status != "active_ongoing":
            die(f"Validator is {info.status}; cannot exit")

        if epoch is None:
            chain_config = fetch_chain_config(conn)
            try:
                seconds_per_slot = int(chain_config['SECONDS_PER_SLOT'])
                slots_per_epoch = int(chain_config['SLOTS_PER_EPOCH'])
            except (KeyError, TypeError, ValueError):
                die("Chain configuration lacks slot timing; supply --epoch")
            epoch = current_epoch(fetch_genesis_time(conn), seconds_per_slot, slots_per_epoch)
        fork = fetch_fork(conn)
        domain = compute_domain(DOMAIN_VOLUNTARY_EXIT, fork.current_version, fetch_genesis_validators_root(conn))

        voluntary_exit = VoluntaryExit(epoch=epoch, validator_index=info.index)
        try:
            signature_bytes = sign(account, generate_signing_root(voluntary_exit, domain))
        finally:
            account.lock()
        signed_exit = {
            'message': {'epoch': str(epoch), 'validator_index': str(info.index)},
            'signature': f"0x{signature_bytes.hex()}",
        }

        if generate:
            click.echo(json.dumps(signed_exit))
            return

        submit_voluntary_exit(conn, signed_exit)
        logger.info("Voluntary exit for validator %d at epoch %d submitted", info.index, epoch)

        if wait:
            for _ in range(max(1, EXIT_WAIT_LIMIT // EXIT_POLL_INTERVAL)):
                if fetch_validator_info(conn, account).status in EXITING_STATUSES:
                    output_if(not obj.config.quiet, "Validator exiting")
                    return
                time.sleep(EXIT_POLL_INTERVAL)
            die(f"Exit submitted but validator not exiting after {EXIT_WAIT_LIMIT}s")

    output_if(obj.config.verbose, "Voluntary exit submitted")
