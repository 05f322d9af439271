"""
ethdo Wallet Module

Wallets and accounts for Ethereum 2 validator keys:
- Non-deterministic wallets (independent keys)
- Hierarchical deterministic wallets (EIP-2333 keys from one seed)
- Filesystem and scratch (in-memory) stores
"""

from .base import (
    Account,
    AccountLockedError,
    AccountNotFoundError,
    BaseWallet,
    WalletDecryptionError,
    WalletError,
    WalletLockedError,
    WalletNotFoundError,
    WalletType,
)
from .hd import HierarchicalDeterministicWallet
from .nd import NonDeterministicWallet
from .store import BaseStore, FilesystemStore, ScratchStore, set_store

__all__ = [
    'Account',
    'AccountLockedError',
    'AccountNotFoundError',
    'BaseWallet',
    'WalletDecryptionError',
    'WalletError',
    'WalletLockedError',
    'WalletNotFoundError',
    'WalletType',
    'HierarchicalDeterministicWallet',
    'NonDeterministicWallet',
    'BaseStore',
    'FilesystemStore',
    'ScratchStore',
    'set_store',
]
