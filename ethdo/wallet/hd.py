"""
ethdo Hierarchical Deterministic Wallet

Accounts are derived from a single seed along EIP-2334 validator paths
(m/12381/3600/<index>/0/0). The seed is stored encrypted with the wallet
passphrase; the wallet must be unlocked to create or derive accounts.
"""

import logging
from typing import Any, Dict, Optional

from .base import (
    Account,
    AccountNotFoundError,
    BaseWallet,
    WalletDecryptionError,
    WalletLockedError,
    WalletType,
    decrypt_key,
    encrypt_key,
)
from ..constants import VALIDATOR_KEY_PATH
from ..crypto import derive_secret_key, path_to_indices

logger = logging.getLogger(__name__)


class HierarchicalDeterministicWallet(BaseWallet):
    """
    Seed-based wallet.

    Example:
        wallet = HierarchicalDeterministicWallet.create("hd", "wallet secret", seed)
        with wallet.unlocked("wallet secret"):
            wallet.create_account("validator 1", "account secret")
    """

    def __init__(
        self,
        name: str,
        crypto: Dict[str, Any],
        next_account: int = 0,
        wallet_id: Optional[str] = None,
        store=None,
    ):
        super().__init__(name, wallet_id, store)
        self._crypto = crypto
        self._next_account = next_account
        self._seed: Optional[bytes] = None

    @classmethod
    def create(cls, name: str, passphrase: str, seed: bytes, store=None) -> 'HierarchicalDeterministicWallet':
        """
        Create a new wallet from a seed.

        Args:
            name: Wallet name
            passphrase: Wallet passphrase used to encrypt the seed
            seed: BIP-39 seed (at least 32 bytes)
            store: Store to persist the wallet in
        """
        if len(seed) < 32:
            raise ValueError("seed must be at least 32 bytes")
        return cls(name, encrypt_key(seed, passphrase), store=store)

    @property
    def wallet_type(self) -> WalletType:
        return WalletType.HIERARCHICAL_DETERMINISTIC

    @property
    def next_account(self) -> int:
        """Index the next created account will be derived at."""
        return self._next_account

    @property
    def is_unlocked(self) -> bool:
        return self._seed is not None

    def unlock(self, passphrase: str) -> None:
        try:
            self._seed = decrypt_key(self._crypto, passphrase)
        except WalletDecryptionError:
            raise WalletDecryptionError("incorrect wallet passphrase") from None

    def lock(self) -> None:
        self._seed = None

    def create_account(self, name: str, passphrase: str) -> Account:
        if self._seed is None:
            raise WalletLockedError("wallet must be unlocked to create accounts")
        path = VALIDATOR_KEY_PATH.format(index=self._next_account)
        secret_key = derive_secret_key(self._seed, path)
        account = Account.create(name, secret_key, passphrase, path=path)
        self._next_account += 1
        logger.debug("Derived account %s at %s", name, path)
        return self._add_account(account)

    def account_by_name(self, name: str) -> Account:
        """
        Find an account by name or derive one by path.

        A name starting with ``m/`` is treated as a derivation path. A stored
        account with that path is returned if there is one; otherwise the key
        is derived from the seed and returned as an unlocked, unstored account.

        Raises:
            WalletLockedError: If a path must be derived while the wallet is locked.
            AccountNotFoundError: If a plain name does not match any account.
        """
        if not name.startswith('m/'):
            return super().account_by_name(name)

        try:
            path_to_indices(name)
        except ValueError as e:
            raise AccountNotFoundError(str(e)) from e
        for account in self._accounts:
            if account.path == name:
                return account
        if self._seed is None:
            raise WalletLockedError("wallet must be unlocked to derive accounts by path")
        secret_key = derive_secret_key(self._seed, name)
        return Account(
            name=name,
            public_key=secret_key.public_key(),
            path=name,
            secret_key=secret_key,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['crypto'] = self._crypto
        data['nextaccount'] = self._next_account
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], store=None) -> 'HierarchicalDeterministicWallet':
        wallet = cls(
            data['name'],
            data['crypto'],
            next_account=data.get('nextaccount', 0),
            wallet_id=data.get('uuid'),
            store=store,
        )
        wallet._accounts = [Account.from_dict(a) for a in data.get('accounts', [])]
        return wallet
