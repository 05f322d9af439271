"""
ethdo Root Command

Global flags, layered configuration, logging and wallet store set-up shared
by every command, plus the small helpers commands build on.

Flags may also be supplied as ETHDO_<FLAG> environment variables or as keys
in the YAML config file ($HOME/.ethdo.yaml unless --config is given).
"""

import functools
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional

import click

from ..config import EthdoConfig, check_transaction_flags, load_config_file, parse_duration
from ..constants import (
    DEFAULT_CONNECTION,
    DEFAULT_STORE,
    DEFAULT_TIMEOUT,
    ENV_PREFIX,
    EXIT_FAILURE,
    PROGRAM_NAME,
)
from ..exceptions import ConfigurationError, EthdoException
from ..logger import configure_logging, get_logger
from ..wallet import Account, AccountLockedError, BaseStore, set_store

logger = get_logger(__name__)

# Commands that skip the flag checks and wallet store set-up
PLAIN_COMMANDS = ("help", "version")


class CommandError(click.ClickException):
    """Fatal command error; the message goes to standard output, exit code 1."""

    exit_code = EXIT_FAILURE

    def show(self, file=None) -> None:
        click.echo(self.format_message())


def die(message: str) -> None:
    raise CommandError(message)


def output_if(condition: bool, message: str) -> None:
    """Print message to standard output when condition holds."""
    if condition:
        click.echo(message)


@dataclass(frozen=True)
class CommandContext:
    """Per-invocation state handed to every command."""
    config: EthdoConfig
    store: Optional[BaseStore] = None

    def with_config(self, **changes: Any) -> 'CommandContext':
        return replace(self, config=replace(self.config, **changes))


pass_command_context = click.make_pass_decorator(CommandContext)


class DurationParamType(click.ParamType):
    """Duration in seconds; accepts "10s", "500ms", "1m30s" or plain numbers."""

    name = "duration"

    def convert(self, value, param, ctx):
        if isinstance(value, float):
            return value
        try:
            return parse_duration(value)
        except ConfigurationError as e:
            self.fail(str(e), param, ctx)


DURATION = DurationParamType()


class EthdoGroup(click.Group):
    """Root group; turns ethdo errors raised by any command into CommandError."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except EthdoException as e:
            raise CommandError(str(e)) from e


CONFIG_FILE_VALUES = "ethdo.config_file_values"


class ConfigFileOption(click.Option):
    """
    Global option whose default may come from the config file.

    Command line and environment still take precedence. The values are kept in
    ctx.meta rather than ctx.default_map, which click would hand down to any
    subcommand sharing a key's name (e.g. "account").
    """

    def get_default(self, ctx: click.Context, call: bool = True):
        values = ctx.meta.get(CONFIG_FILE_VALUES, {})
        if self.name in values:
            return values[self.name]
        return super().get_default(ctx, call=call)


def _load_config(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> Optional[str]:
    try:
        values = load_config_file(value)
    except ConfigurationError as e:
        raise CommandError(str(e)) from e

    known = {p.name for p in ctx.command.params if isinstance(p, ConfigFileOption)}
    for key in sorted(set(values) - known):
        logger.debug("Ignoring unknown config key %s", key)
    ctx.meta[CONFIG_FILE_VALUES] = {key: setting for key, setting in values.items() if key in known}
    return value


def account_options(f):
    """
    Accept --account, --passphrase and --walletpassphrase after a subcommand.

    Values given here override the global flags of the same name.
    """
    @click.option("--account", "account_override", default=None, help='Account name (in format "wallet/account")')
    @click.option("--passphrase", "passphrase_override", default=None, help="Passphrase for account (if applicable)")
    @click.option("--walletpassphrase", "walletpassphrase_override", default=None,
                  help="Passphrase for wallet (if applicable)")
    @functools.wraps(f)
    def wrapper(*args, account_override=None, passphrase_override=None, walletpassphrase_override=None, **kwargs):
        overrides = {}
        if account_override is not None:
            overrides['account'] = account_override
        if passphrase_override is not None:
            overrides['passphrase'] = passphrase_override
        if walletpassphrase_override is not None:
            overrides['wallet_passphrase'] = walletpassphrase_override
        if overrides:
            ctx = click.get_current_context()
            ctx.obj = ctx.find_object(CommandContext).with_config(**overrides)
        return f(*args, **kwargs)

    return wrapper


def transaction_options(f):
    """Add --generate and --wait; supplying both is fatal before the command runs."""
    @click.option("--generate", is_flag=True, envvar=f"{ENV_PREFIX}_GENERATE",
                  help="Do not send the transaction; generate and output as a hex string only")
    @click.option("--wait", is_flag=True, envvar=f"{ENV_PREFIX}_WAIT",
                  help="Wait for the transaction to be accepted before returning")
    @functools.wraps(f)
    def wrapper(*args, generate=False, wait=False, **kwargs):
        try:
            check_transaction_flags(generate, wait)
        except ConfigurationError as e:
            raise CommandError(str(e)) from e
        return f(*args, generate=generate, wait=wait, **kwargs)

    return wrapper


def sign(account: Account, data: bytes) -> bytes:
    """
    Sign data with an account.

    The data should (but does not have to) be a signing root.
    """
    if not account.is_unlocked:
        raise AccountLockedError("account must be unlocked to sign")
    return account.sign(data)


@click.group(
    cls=EthdoGroup,
    name=PROGRAM_NAME,
    context_settings={"auto_envvar_prefix": ENV_PREFIX, "help_option_names": ["-h", "--help"]},
)
@click.option("--config", "config", is_eager=True, callback=_load_config,
              help="Config file (default is $HOME/.ethdo.yaml)")
@click.option("--log", cls=ConfigFileOption, default=None, help="Log activity to the named file")
@click.option("--store", cls=ConfigFileOption, default=DEFAULT_STORE, show_default=True, help="Store for accounts")
@click.option("--basedir", cls=ConfigFileOption, default=None, help="Base directory for the filesystem store")
@click.option("--account", cls=ConfigFileOption, default="", help='Account name (in format "wallet/account")')
@click.option("--storepassphrase", cls=ConfigFileOption, default="", help="Passphrase for store (if applicable)")
@click.option("--walletpassphrase", cls=ConfigFileOption, default="", help="Passphrase for wallet (if applicable)")
@click.option("--passphrase", cls=ConfigFileOption, default="", help="Passphrase for account (if applicable)")
@click.option("--quiet", cls=ConfigFileOption, is_flag=True, help="Do not generate any output")
@click.option("--verbose", cls=ConfigFileOption, is_flag=True, help="Generate additional output where appropriate")
@click.option("--debug", cls=ConfigFileOption, is_flag=True, help="Generate debug output")
@click.option("--connection", cls=ConfigFileOption, default=DEFAULT_CONNECTION, show_default=True,
              help="Connection to the beacon node REST API")
@click.option("--timeout", cls=ConfigFileOption, type=DURATION, default=f"{int(DEFAULT_TIMEOUT)}s", show_default=True,
              help="The time after which a network request will be considered failed")
@click.pass_context
def cli(ctx, config, log, store, basedir, account, storepassphrase, walletpassphrase, passphrase,
        quiet, verbose, debug, connection, timeout):
    """Manage common Ethereum 2 tasks from the command line."""
    if ctx.invoked_subcommand in PLAIN_COMMANDS:
        ctx.obj = CommandContext(config=EthdoConfig(config_file=config, log=log))
        return

    try:
        settings = EthdoConfig(
            config_file=config,
            log=log,
            store=store,
            base_dir=basedir,
            account=account,
            store_passphrase=storepassphrase,
            wallet_passphrase=walletpassphrase,
            passphrase=passphrase,
            quiet=quiet,
            verbose=verbose,
            debug=debug,
            connection=connection,
            timeout=timeout,
        )
    except ConfigurationError as e:
        raise CommandError(str(e)) from e

    configure_logging(quiet=quiet, verbose=verbose, debug=debug, log_file=Path(log).expanduser() if log else None)

    try:
        wallet_store = set_store(store, storepassphrase, Path(basedir) if basedir else None)
    except EthdoException as e:
        raise CommandError(f"Failed to set up wallet store: {e}") from e

    ctx.obj = CommandContext(config=settings, store=wallet_store)
