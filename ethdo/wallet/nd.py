"""
ethdo Non-Deterministic Wallet

Each account holds an independently generated (or imported) secret key.
"""

from typing import Any, Dict, Optional

from .base import Account, BaseWallet, WalletType
from ..crypto import SecretKey


class NonDeterministicWallet(BaseWallet):
    """
    Wallet of unrelated keys.

    There is no wallet-level secret, so unlocking only flips the lock state.

    Example:
        wallet = NonDeterministicWallet("primary")
        account = wallet.create_account("validator 1", "secret")
        account.unlock("secret")
        signature = account.sign(signing_root)
    """

    def __init__(self, name: str, wallet_id: Optional[str] = None, store=None):
        super().__init__(name, wallet_id, store)
        self._unlocked = False

    @property
    def wallet_type(self) -> WalletType:
        return WalletType.NON_DETERMINISTIC

    @property
    def is_unlocked(self) -> bool:
        return self._unlocked

    def unlock(self, passphrase: str) -> None:
        self._unlocked = True

    def lock(self) -> None:
        self._unlocked = False

    def create_account(self, name: str, passphrase: str) -> Account:
        return self._add_account(Account.create(name, SecretKey.generate(), passphrase))

    def import_account(self, name: str, secret_key: bytes, passphrase: str) -> Account:
        """
        Add an account for an existing secret key.

        Args:
            name: Account name
            secret_key: 32-byte BLS secret key
            passphrase: Passphrase protecting the key

        Returns:
            The new (locked) account
        """
        return self._add_account(Account.create(name, SecretKey.from_bytes(secret_key), passphrase))

    @classmethod
    def from_dict(cls, data: Dict[str, Any], store=None) -> 'NonDeterministicWallet':
        wallet = cls(data['name'], data.get('uuid'), store)
        wallet._accounts = [Account.from_dict(a) for a in data.get('accounts', [])]
        return wallet
