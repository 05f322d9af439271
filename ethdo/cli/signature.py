"""
ethdo signature commands

Usage:
    ethdo signature sign --account WALLET/ACCOUNT --passphrase PASS --data HEX [--domain HEX]
    ethdo signature verify --data HEX --signature HEX [--account WALLET/ACCOUNT | --signer HEX] [--domain HEX]
"""

from typing import Optional

import click

from .paths import account_from_path
from .root import CommandContext, account_options, cli, die, output_if, pass_command_context, sign
from ..constants import EXIT_FAILURE, PUBLIC_KEY_SIZE, ROOT_SIZE
from ..crypto import compute_domain, generate_signing_root_from_root, parse_hex, verify
from ..logger import get_logger

logger = get_logger(__name__)


def _parse_root(value: str, name: str) -> bytes:
    try:
        data = parse_hex(value, name)
    except ValueError as e:
        die(str(e))
    if len(data) != ROOT_SIZE:
        die(f"{name} must be {ROOT_SIZE} bytes")
    return data


def _domain(value: Optional[str]) -> bytes:
    if value is None:
        # Zero domain type, fork version and genesis validators root
        return compute_domain(bytes(4))
    return _parse_root(value, "domain")


@cli.group("signature")
def signature():
    """Sign data and verify signatures."""
    pass


@signature.command("sign")
@click.option("--data", default="", help="Data to sign (32-byte hex root)")
@click.option("--domain", default=None, help="Domain for the signature (32-byte hex)")
@account_options
@pass_command_context
def sign_cmd(obj: CommandContext, data: str, domain: Optional[str]):
    """Sign data.

    Examples:

        ethdo signature sign --account="Wallet/Account" --passphrase="secret" --data=0x0102...
    """
    if not data:
        die("--data is required")
    if not obj.config.account:
        die("--account is required")
    root = _parse_root(data, "data")
    signing_domain = _domain(domain)

    account = account_from_path(obj.store, obj.config.account, obj.config.wallet_passphrase)
    if not account.is_unlocked:
        account.unlock(obj.config.passphrase)
    try:
        signature_bytes = sign(account, generate_signing_root_from_root(root, signing_domain))
    finally:
        account.lock()

    output_if(not obj.config.quiet, f"0x{signature_bytes.hex()}")


@signature.command("verify")
@click.option("--data", default="", help="Data that was signed (32-byte hex root)")
@click.option("--signature", "signature_hex", default="", help="Signature to verify (hex)")
@click.option("--signer", default=None, help="Public key of the signer, instead of --account (hex)")
@click.option("--domain", default=None, help="Domain of the signature (32-byte hex)")
@account_options
@click.pass_context
@pass_command_context
def verify_cmd(obj: CommandContext, ctx: click.Context, data: str, signature_hex: str,
               signer: Optional[str], domain: Optional[str]):
    """Verify a signature.

    Exits 0 if the signature is valid, otherwise 1.
    """
    if not data:
        die("--data is required")
    if not signature_hex:
        die("--signature is required")
    root = _parse_root(data, "data")
    signing_domain = _domain(domain)
    try:
        signature_bytes = parse_hex(signature_hex, "signature")
    except ValueError as e:
        die(str(e))

    if signer is not None:
        try:
            public_key = parse_hex(signer, "signer")
        except ValueError as e:
            die(str(e))
        if len(public_key) != PUBLIC_KEY_SIZE:
            die(f"signer must be {PUBLIC_KEY_SIZE} bytes")
    elif obj.config.account:
        public_key = account_from_path(obj.store, obj.config.account, obj.config.wallet_passphrase).public_key
    else:
        die("--account or --signer is required")

    signing_root = generate_signing_root_from_root(root, signing_domain)
    if not verify(public_key, signing_root, signature_bytes):
        output_if(not obj.config.quiet, "Not verified")
        ctx.exit(EXIT_FAILURE)

    logger.debug("Signature verified for 0x%s", public_key.hex())
    output_if(not obj.config.quiet, "Verified")
