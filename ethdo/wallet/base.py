"""
ethdo Base Wallet Classes

Defines the account type, the abstract wallet interface, the wallet errors and
the keystore encryption shared by every wallet and store.
"""

import base64
import os
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..crypto import SecretKey
from ..exceptions import EthdoException

KDF_ITERATIONS = 100000


class WalletType(Enum):
    """Wallet type enumeration."""
    NON_DETERMINISTIC = "non-deterministic"
    HIERARCHICAL_DETERMINISTIC = "hierarchical deterministic"


class WalletError(EthdoException):
    """Base wallet error."""
    pass


class WalletNotFoundError(WalletError):
    """Wallet not present in the store."""
    pass


class WalletDecryptionError(WalletError):
    """Failed to decrypt wallet or key material."""
    pass


class WalletLockedError(WalletError):
    """Operation needs the wallet to be unlocked."""
    pass


class AccountNotFoundError(WalletError):
    """Account not present in the wallet."""
    pass


class AccountLockedError(WalletError):
    """Operation needs the account to be unlocked."""
    pass


def _derive_fernet_key(passphrase: str, salt: bytes, iterations: int) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=iterations,
    )
    return base64.urlsafe_b64encode(kdf.derive(passphrase.encode()))


def encrypt_key(key_bytes: bytes, passphrase: str) -> Dict[str, Any]:
    """
    Encrypt key bytes with a passphrase.

    Uses PBKDF2-SHA256 to stretch the passphrase into a Fernet key.

    Args:
        key_bytes: Key (or any secret) to encrypt
        passphrase: Encryption passphrase

    Returns:
        Dictionary with encrypted data and parameters
    """
    salt = os.urandom(16)
    f = Fernet(_derive_fernet_key(passphrase, salt, KDF_ITERATIONS))
    encrypted = f.encrypt(key_bytes)

    return {
        'ciphertext': base64.b64encode(encrypted).decode('ascii'),
        'salt': salt.hex(),
        'iterations': KDF_ITERATIONS,
        'kdf': 'pbkdf2-sha256',
        'cipher': 'fernet',
    }


def decrypt_key(encrypted: Dict[str, Any], passphrase: str) -> bytes:
    """
    Decrypt key bytes with a passphrase.

    Args:
        encrypted: Dictionary from encrypt_key()
        passphrase: Decryption passphrase

    Returns:
        Decrypted key bytes

    Raises:
        WalletDecryptionError: If decryption fails
    """
    try:
        cipher = encrypted['cipher']
        salt = bytes.fromhex(encrypted['salt'])
        iterations = int(encrypted['iterations'])
        ciphertext = base64.b64decode(encrypted['ciphertext'])
    except (KeyError, TypeError, ValueError) as e:
        raise WalletDecryptionError(f"invalid keystore: {e}") from e

    if cipher != 'fernet':
        raise WalletDecryptionError(f"Unknown cipher: {cipher}")

    f = Fernet(_derive_fernet_key(passphrase, salt, iterations))
    try:
        return f.decrypt(ciphertext)
    except InvalidToken:
        raise WalletDecryptionError("incorrect passphrase") from None


class Account:
    """
    A single signing identity within a wallet.

    The secret key is held encrypted with the account passphrase and is only
    available while the account is unlocked.
    """

    def __init__(
        self,
        name: str,
        public_key: bytes,
        crypto: Optional[Dict[str, Any]] = None,
        account_id: Optional[str] = None,
        path: str = "",
        secret_key: Optional[SecretKey] = None,
    ):
        self._id = account_id or str(uuid.uuid4())
        self._name = name
        self._public_key = public_key
        self._crypto = crypto
        self._path = path
        self._secret_key = secret_key

    @classmethod
    def create(cls, name: str, secret_key: SecretKey, passphrase: str, path: str = "") -> 'Account':
        """Create a locked account holding secret_key encrypted with passphrase."""
        return cls(
            name=name,
            public_key=secret_key.public_key(),
            crypto=encrypt_key(secret_key.to_bytes(), passphrase),
            path=path,
        )

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def public_key(self) -> bytes:
        return self._public_key

    @property
    def path(self) -> str:
        """Derivation path, empty for non-deterministic accounts."""
        return self._path

    @property
    def is_unlocked(self) -> bool:
        return self._secret_key is not None

    @property
    def secret_key(self) -> SecretKey:
        if self._secret_key is None:
            raise AccountLockedError("account is locked")
        return self._secret_key

    def unlock(self, passphrase: str) -> None:
        """
        Decrypt the secret key.

        Raises:
            WalletDecryptionError: If the passphrase is wrong.
            AccountLockedError: If the account has no stored key to unlock.
        """
        if self._crypto is None:
            raise AccountLockedError("account has no stored key")
        secret_key = SecretKey.from_bytes(decrypt_key(self._crypto, passphrase))
        if secret_key.public_key() != self._public_key:
            raise WalletDecryptionError("stored key does not match public key")
        self._secret_key = secret_key

    def lock(self) -> None:
        self._secret_key = None

    def sign(self, data: bytes) -> bytes:
        """Sign data with the account's secret key."""
        if self._secret_key is None:
            raise AccountLockedError("account must be unlocked to sign")
        return self._secret_key.sign(data)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'uuid': self._id,
            'name': self._name,
            'pubkey': self._public_key.hex(),
            'crypto': self._crypto,
        }
        if self._path:
            data['path'] = self._path
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Account':
        return cls(
            name=data['name'],
            public_key=bytes.fromhex(data['pubkey']),
            crypto=data.get('crypto'),
            account_id=data.get('uuid'),
            path=data.get('path', ''),
        )

    def __repr__(self) -> str:
        return f"Account(name={self._name!r}, pubkey=0x{self._public_key.hex()[:16]}...)"


class BaseWallet(ABC):
    """
    Abstract base class for all wallet types.

    A wallet owns its accounts and writes itself back to its store whenever
    they change.
    """

    version = 1

    def __init__(self, name: str, wallet_id: Optional[str] = None, store=None):
        self._id = wallet_id or str(uuid.uuid4())
        self._name = name
        self._store = store
        self._accounts: List[Account] = []

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    @abstractmethod
    def wallet_type(self) -> WalletType:
        """Get wallet type."""
        pass

    @property
    def type(self) -> str:
        """Human-readable wallet type, e.g. "hierarchical deterministic"."""
        return self.wallet_type.value

    @property
    @abstractmethod
    def is_unlocked(self) -> bool:
        pass

    @abstractmethod
    def unlock(self, passphrase: str) -> None:
        """
        Unlock the wallet.

        Raises:
            WalletDecryptionError: If the passphrase is wrong.
        """
        pass

    @abstractmethod
    def lock(self) -> None:
        pass

    @contextmanager
    def unlocked(self, passphrase: str) -> Iterator['BaseWallet']:
        """Unlock for the duration of a with-block; always re-locks."""
        self.unlock(passphrase)
        try:
            yield self
        finally:
            self.lock()

    def accounts(self) -> Iterator[Account]:
        """Iterate over the wallet's stored accounts."""
        return iter(list(self._accounts))

    def account_by_name(self, name: str) -> Account:
        """
        Find an account by name.

        Raises:
            AccountNotFoundError: If there is no such account.
        """
        for account in self._accounts:
            if account.name == name:
                return account
        raise AccountNotFoundError(f"no account with name {name!r}")

    @abstractmethod
    def create_account(self, name: str, passphrase: str) -> Account:
        """
        Create and store a new account.

        Args:
            name: Account name, unique within the wallet
            passphrase: Passphrase protecting the account's secret key

        Returns:
            The new (locked) account
        """
        pass

    def _add_account(self, account: Account) -> Account:
        validate_name(account.name, "account")
        if any(a.name == account.name for a in self._accounts):
            raise WalletError(f"account with name {account.name!r} already exists")
        self._accounts.append(account)
        self._save()
        return account

    def _save(self) -> None:
        if self._store is not None:
            self._store.store_wallet(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'uuid': self._id,
            'name': self._name,
            'type': self.type,
            'version': self.version,
            'accounts': [a.to_dict() for a in self._accounts],
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self._name!r})"


def validate_name(name: str, kind: str = "wallet") -> None:
    """Wallet and account names must be non-empty, without '/' and not hidden."""
    if not name:
        raise WalletError(f"{kind} name cannot be empty")
    if '/' in name:
        raise WalletError(f"{kind} name cannot contain '/'")
    if name.startswith('.'):
        raise WalletError(f"{kind} name cannot start with '.'")
