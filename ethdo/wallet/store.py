"""
ethdo Wallet Stores

A store holds wallets by UUID. Two stores are available:

- filesystem: one JSON file per wallet under a base directory
- scratch: in memory, gone when the process exits (useful for testing)

When the store has a passphrase every wallet is encrypted as a whole, so
opening a wallet with the wrong store passphrase fails with
"failed to decrypt wallet".
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Union

from .base import (
    BaseWallet,
    WalletDecryptionError,
    WalletError,
    WalletNotFoundError,
    WalletType,
    decrypt_key,
    encrypt_key,
    validate_name,
)
from .hd import HierarchicalDeterministicWallet
from .nd import NonDeterministicWallet
from ..constants import DEFAULT_WALLET_DIR
from ..crypto import seed_from_mnemonic_phrase

logger = logging.getLogger(__name__)


class BaseStore(ABC):
    """Common wallet (de)serialization and lookup on top of raw storage."""

    def __init__(self, passphrase: str = ""):
        self._passphrase = passphrase

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def _read(self, wallet_id: str) -> bytes:
        pass

    @abstractmethod
    def _write(self, wallet_id: str, data: bytes) -> None:
        pass

    @abstractmethod
    def _wallet_ids(self) -> Iterator[str]:
        pass

    def _encode(self, wallet: BaseWallet) -> bytes:
        data = json.dumps(wallet.to_dict(), indent=2).encode('utf-8')
        if self._passphrase:
            data = json.dumps({'encrypted': encrypt_key(data, self._passphrase)}).encode('utf-8')
        return data

    def _decode(self, raw: bytes) -> Dict[str, Any]:
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise WalletError(f"invalid wallet data: {e}") from e
        if 'encrypted' in data:
            if not self._passphrase:
                raise WalletDecryptionError("failed to decrypt wallet")
            try:
                data = json.loads(decrypt_key(data['encrypted'], self._passphrase))
            except WalletDecryptionError:
                raise WalletDecryptionError("failed to decrypt wallet") from None
        return data

    def _wallet_from_dict(self, data: Dict[str, Any]) -> BaseWallet:
        wallet_type = data.get('type')
        if wallet_type == WalletType.NON_DETERMINISTIC.value:
            return NonDeterministicWallet.from_dict(data, store=self)
        if wallet_type == WalletType.HIERARCHICAL_DETERMINISTIC.value:
            return HierarchicalDeterministicWallet.from_dict(data, store=self)
        raise WalletError(f"unsupported wallet type {wallet_type!r}")

    def wallets(self) -> Iterator[BaseWallet]:
        """Iterate over all wallets in the store."""
        for wallet_id in self._wallet_ids():
            yield self._wallet_from_dict(self._decode(self._read(wallet_id)))

    def open_wallet(self, name: str) -> BaseWallet:
        """
        Open a wallet by name.

        Raises:
            WalletDecryptionError: If the store passphrase is wrong.
            WalletNotFoundError: If no wallet has the name.
        """
        for wallet in self.wallets():
            if wallet.name == name:
                return wallet
        raise WalletNotFoundError(f"wallet {name!r} not found")

    def store_wallet(self, wallet: BaseWallet) -> None:
        self._write(wallet.id, self._encode(wallet))

    def create_wallet(
        self,
        name: str,
        wallet_type: Union[WalletType, str] = WalletType.NON_DETERMINISTIC,
        passphrase: str = "",
        mnemonic: Optional[str] = None,
    ) -> BaseWallet:
        """
        Create a wallet and persist it.

        Args:
            name: Unique wallet name
            wallet_type: Non-deterministic or hierarchical deterministic
            passphrase: Wallet passphrase (HD wallets only)
            mnemonic: BIP-39 mnemonic for the seed of an HD wallet

        Returns:
            The new wallet
        """
        validate_name(name)
        wallet_type = WalletType(wallet_type)
        if any(w.name == name for w in self.wallets()):
            raise WalletError(f"wallet {name!r} already exists")

        if wallet_type == WalletType.HIERARCHICAL_DETERMINISTIC:
            if not passphrase:
                raise WalletError("hierarchical deterministic wallets require a passphrase")
            if not mnemonic:
                raise WalletError("hierarchical deterministic wallets require a mnemonic")
            try:
                seed = seed_from_mnemonic_phrase(mnemonic)
            except ValueError as e:
                raise WalletError(str(e)) from e
            wallet = HierarchicalDeterministicWallet.create(name, passphrase, seed, store=self)
        else:
            wallet = NonDeterministicWallet(name, store=self)

        self.store_wallet(wallet)
        logger.info("Created %s wallet %s", wallet.type, name)
        return wallet


class FilesystemStore(BaseStore):
    """Wallets as <uuid>.json files in a base directory."""

    def __init__(self, base_dir: Optional[Path] = None, passphrase: str = ""):
        super().__init__(passphrase)
        self._base_dir = Path(base_dir).expanduser() if base_dir else DEFAULT_WALLET_DIR

    @property
    def name(self) -> str:
        return "filesystem"

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def _path(self, wallet_id: str) -> Path:
        return self._base_dir / f"{wallet_id}.json"

    def _read(self, wallet_id: str) -> bytes:
        return self._path(wallet_id).read_bytes()

    def _write(self, wallet_id: str, data: bytes) -> None:
        self._base_dir.mkdir(parents=True, exist_ok=True)
        path = self._path(wallet_id)
        tmp_path = path.with_suffix('.tmp')
        tmp_path.write_bytes(data)
        os.chmod(tmp_path, 0o600)
        tmp_path.replace(path)

    def _wallet_ids(self) -> Iterator[str]:
        if not self._base_dir.is_dir():
            return iter(())
        return iter(sorted(p.stem for p in self._base_dir.glob("*.json")))


class ScratchStore(BaseStore):
    """In-memory store."""

    def __init__(self, passphrase: str = ""):
        super().__init__(passphrase)
        self._data: Dict[str, bytes] = {}

    @property
    def name(self) -> str:
        return "scratch"

    def _read(self, wallet_id: str) -> bytes:
        return self._data[wallet_id]

    def _write(self, wallet_id: str, data: bytes) -> None:
        self._data[wallet_id] = data

    def _wallet_ids(self) -> Iterator[str]:
        return iter(list(self._data))


def set_store(name: str, passphrase: str = "", base_dir: Optional[Path] = None) -> BaseStore:
    """
    Set up the named wallet store.

    Args:
        name: "filesystem" or "scratch"
        passphrase: Store passphrase (optional)
        base_dir: Base directory for the filesystem store

    Raises:
        WalletError: If the store name is unknown.
    """
    if name == "filesystem":
        store = FilesystemStore(base_dir, passphrase)
        logger.debug("Using filesystem store at %s", store.base_dir)
        return store
    if name == "scratch":
        return ScratchStore(passphrase)
    raise WalletError(f"unknown wallet store {name!r}")
