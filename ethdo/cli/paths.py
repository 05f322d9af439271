"""
Wallet and account lookup from "wallet/account" path specifiers.
"""

import re
from typing import List, Tuple

from ..exceptions import EthdoException, InvalidPathError
from ..logger import get_logger
from ..wallet import (
    Account,
    AccountNotFoundError,
    BaseStore,
    BaseWallet,
    WalletDecryptionError,
    WalletType,
)

logger = get_logger(__name__)


def wallet_and_account_names_from_path(path: str) -> Tuple[str, str]:
    """
    Break a path into wallet and account names.

    "wallet" and "wallet/" both give an empty account name. Only the first
    separator splits, so account names may be derivation paths such as
    "m/12381/3600/0/0/0".

    Raises:
        InvalidPathError: If the path is empty.
    """
    if not path:
        raise InvalidPathError("invalid account format")
    wallet_name, _, account_name = path.partition('/')
    return wallet_name, account_name


def wallet_from_path(store: BaseStore, path: str) -> BaseWallet:
    """Open the wallet named by a path."""
    wallet_name, _ = wallet_and_account_names_from_path(path)
    try:
        return store.open_wallet(wallet_name)
    except WalletDecryptionError as e:
        if "failed to decrypt wallet" in str(e):
            raise WalletDecryptionError("Incorrect store passphrase") from e
        raise


def account_from_path(store: BaseStore, path: str, wallet_passphrase: str = "") -> Account:
    """
    Obtain a single account from a path.

    For hierarchical deterministic wallets an account name starting with "m/"
    is a derivation path; if a wallet passphrase is given the wallet is
    unlocked for the lookup and locked again afterwards.

    Raises:
        AccountNotFoundError: If the path has no account name or the account does not exist.
        WalletDecryptionError: If the wallet passphrase is wrong.
    """
    wallet = wallet_from_path(store, path)
    _, account_name = wallet_and_account_names_from_path(path)
    if not account_name:
        raise AccountNotFoundError("no account name")

    if (wallet.wallet_type == WalletType.HIERARCHICAL_DETERMINISTIC
            and account_name.startswith('m/') and wallet_passphrase):
        try:
            wallet.unlock(wallet_passphrase)
        except WalletDecryptionError:
            raise WalletDecryptionError("invalid wallet passphrase") from None
        try:
            return wallet.account_by_name(account_name)
        finally:
            wallet.lock()
    return wallet.account_by_name(account_name)


def accounts_from_path(store: BaseStore, path: str, wallet_passphrase: str = "") -> List[Account]:
    """
    Obtain zero or more accounts from a path.

    The account part is tried as a single account name first. Failing that it
    is used as a regular expression anchored at both ends; an empty account
    part matches every account. Results are sorted by name.
    """
    try:
        return [account_from_path(store, path, wallet_passphrase)]
    except EthdoException as e:
        logger.debug("No single account for %s (%s); matching by pattern", path, e)

    wallet = wallet_from_path(store, path)
    _, account_pattern = wallet_and_account_names_from_path(path)
    pattern = f"^{account_pattern}$" if account_pattern else "^.*$"
    try:
        matcher = re.compile(pattern)
    except re.error as e:
        raise InvalidPathError(f"invalid account pattern {account_pattern!r}: {e}") from e

    accounts = [account for account in wallet.accounts() if matcher.search(account.name)]
    return sorted(accounts, key=lambda account: account.name)
