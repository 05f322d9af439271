"""
Tests for wallets, accounts and stores.

Covers:
  - Keystore encryption
  - Non-deterministic wallets (create, import, lookup)
  - Hierarchical deterministic wallets (lock state, derivation, persistence)
  - Filesystem and scratch stores, store passphrases
"""

import os
import stat

import pytest

from ethdo.constants import VALIDATOR_KEY_PATH
from ethdo.crypto import SecretKey, derive_secret_key, seed_from_mnemonic_phrase
from ethdo.wallet import (
    AccountLockedError,
    AccountNotFoundError,
    FilesystemStore,
    HierarchicalDeterministicWallet,
    NonDeterministicWallet,
    ScratchStore,
    WalletDecryptionError,
    WalletError,
    WalletLockedError,
    WalletNotFoundError,
    WalletType,
    set_store,
)
from ethdo.wallet.base import decrypt_key, encrypt_key

from conftest import TEST_MNEMONIC, TEST_SECRET_KEY


@pytest.fixture
def hd_wallet(store):
    return store.create_wallet("hd", WalletType.HIERARCHICAL_DETERMINISTIC, "wallet secret", TEST_MNEMONIC)


# ============================================================================
# Keystore encryption
# ============================================================================


class TestKeystore:

    def test_round_trip(self):
        encrypted = encrypt_key(b"secret bytes", "pass")
        assert encrypted["cipher"] == "fernet"
        assert decrypt_key(encrypted, "pass") == b"secret bytes"

    def test_wrong_passphrase(self):
        encrypted = encrypt_key(b"secret bytes", "pass")
        with pytest.raises(WalletDecryptionError, match="incorrect passphrase"):
            decrypt_key(encrypted, "wrong")

    def test_malformed_keystore(self):
        with pytest.raises(WalletDecryptionError, match="invalid keystore"):
            decrypt_key({"cipher": "fernet"}, "pass")


# ============================================================================
# Non-deterministic wallets
# ============================================================================


class TestNonDeterministicWallet:

    def test_create_account(self, store):
        wallet = store.create_wallet("nd")
        assert wallet.type == "non-deterministic"
        account = wallet.create_account("validator", "secret")
        assert len(account.public_key) == 48
        assert account.path == ""
        assert not account.is_unlocked

    def test_account_unlock_and_sign(self, store):
        wallet = store.create_wallet("nd")
        account = wallet.create_account("validator", "secret")

        with pytest.raises(AccountLockedError, match="account must be unlocked to sign"):
            account.sign(b"\x00" * 32)
        with pytest.raises(AccountLockedError):
            account.secret_key

        account.unlock("secret")
        assert account.is_unlocked
        assert account.secret_key.public_key() == account.public_key
        account.lock()
        assert not account.is_unlocked

    def test_account_wrong_passphrase(self, store):
        account = store.create_wallet("nd").create_account("validator", "secret")
        with pytest.raises(WalletDecryptionError):
            account.unlock("wrong")
        assert not account.is_unlocked

    def test_import_account(self, store):
        wallet = store.create_wallet("nd")
        secret = bytes.fromhex(TEST_SECRET_KEY)
        account = wallet.import_account("imported", secret, "secret")
        assert account.public_key == SecretKey.from_bytes(secret).public_key()

        reopened = store.open_wallet("nd")
        found = reopened.account_by_name("imported")
        found.unlock("secret")
        assert found.secret_key.to_bytes() == secret

    def test_duplicate_account_name(self, store):
        wallet = store.create_wallet("nd")
        wallet.create_account("validator", "secret")
        with pytest.raises(WalletError, match="already exists"):
            wallet.create_account("validator", "secret")

    @pytest.mark.parametrize("name", ["", "a/b", ".hidden"])
    def test_invalid_account_names(self, store, name):
        with pytest.raises(WalletError):
            store.create_wallet("nd").create_account(name, "secret")

    def test_unknown_account(self, store):
        with pytest.raises(AccountNotFoundError):
            store.create_wallet("nd").account_by_name("missing")

    def test_unlocked_context_relocks(self):
        wallet = NonDeterministicWallet("nd")
        with wallet.unlocked("anything"):
            assert wallet.is_unlocked
        assert not wallet.is_unlocked


# ============================================================================
# Hierarchical deterministic wallets
# ============================================================================


class TestHierarchicalDeterministicWallet:

    def test_starts_locked(self, hd_wallet):
        assert hd_wallet.type == "hierarchical deterministic"
        assert not hd_wallet.is_unlocked
        with pytest.raises(WalletLockedError):
            hd_wallet.create_account("validator", "secret")

    def test_wrong_wallet_passphrase(self, hd_wallet):
        with pytest.raises(WalletDecryptionError, match="incorrect wallet passphrase"):
            hd_wallet.unlock("wrong")

    def test_accounts_follow_validator_paths(self, hd_wallet):
        seed = seed_from_mnemonic_phrase(TEST_MNEMONIC)
        with hd_wallet.unlocked("wallet secret"):
            first = hd_wallet.create_account("first", "secret")
            second = hd_wallet.create_account("second", "secret")
        assert not hd_wallet.is_unlocked

        assert first.path == VALIDATOR_KEY_PATH.format(index=0)
        assert second.path == "m/12381/3600/1/0/0"
        assert first.public_key == derive_secret_key(seed, first.path).public_key()
        assert hd_wallet.next_account == 2

    def test_persisted(self, store, hd_wallet):
        with hd_wallet.unlocked("wallet secret"):
            created = hd_wallet.create_account("first", "secret")

        reopened = store.open_wallet("hd")
        assert isinstance(reopened, HierarchicalDeterministicWallet)
        assert reopened.next_account == 1
        assert reopened.account_by_name("first").public_key == created.public_key

    def test_path_lookup_returns_stored_account(self, hd_wallet):
        with hd_wallet.unlocked("wallet secret"):
            created = hd_wallet.create_account("first", "secret")
        # No unlock needed for a path that maps to a stored account
        assert hd_wallet.account_by_name("m/12381/3600/0/0/0").id == created.id

    def test_path_lookup_derives_when_unlocked(self, hd_wallet):
        seed = seed_from_mnemonic_phrase(TEST_MNEMONIC)
        with hd_wallet.unlocked("wallet secret"):
            derived = hd_wallet.account_by_name("m/12381/3600/5/0/0")
        assert derived.is_unlocked
        assert derived.public_key == derive_secret_key(seed, "m/12381/3600/5/0/0").public_key()
        assert list(hd_wallet.accounts()) == []

    def test_path_lookup_needs_unlock(self, hd_wallet):
        with pytest.raises(WalletLockedError):
            hd_wallet.account_by_name("m/12381/3600/5/0/0")

    def test_invalid_path_lookup(self, hd_wallet):
        with hd_wallet.unlocked("wallet secret"):
            with pytest.raises(AccountNotFoundError):
                hd_wallet.account_by_name("m/12381/bad")

    def test_needs_passphrase_and_mnemonic(self, store):
        with pytest.raises(WalletError, match="passphrase"):
            store.create_wallet("hd", WalletType.HIERARCHICAL_DETERMINISTIC, "", TEST_MNEMONIC)
        with pytest.raises(WalletError, match="mnemonic"):
            store.create_wallet("hd", WalletType.HIERARCHICAL_DETERMINISTIC, "secret")
        with pytest.raises(WalletError, match="invalid mnemonic"):
            store.create_wallet("hd", WalletType.HIERARCHICAL_DETERMINISTIC, "secret", "not a mnemonic")


# ============================================================================
# Stores
# ============================================================================


class TestStores:

    def test_set_store(self, tmp_path):
        assert isinstance(set_store("scratch"), ScratchStore)
        filesystem = set_store("filesystem", base_dir=tmp_path)
        assert isinstance(filesystem, FilesystemStore)
        assert filesystem.base_dir == tmp_path
        with pytest.raises(WalletError, match="unknown wallet store"):
            set_store("s3")

    def test_list_and_open(self, store):
        store.create_wallet("one")
        store.create_wallet("two", "non-deterministic")
        assert sorted(w.name for w in store.wallets()) == ["one", "two"]
        assert store.open_wallet("two").name == "two"
        with pytest.raises(WalletNotFoundError):
            store.open_wallet("three")

    def test_duplicate_wallet(self, store):
        store.create_wallet("one")
        with pytest.raises(WalletError, match="already exists"):
            store.create_wallet("one")

    def test_filesystem_layout(self, tmp_path):
        store = FilesystemStore(tmp_path)
        wallet = store.create_wallet("primary")
        path = tmp_path / f"{wallet.id}.json"
        assert path.is_file()
        assert stat.S_IMODE(os.stat(path).st_mode) == 0o600
        assert FilesystemStore(tmp_path).open_wallet("primary").id == wallet.id

    def test_empty_filesystem_store(self, tmp_path):
        assert list(FilesystemStore(tmp_path / "missing").wallets()) == []

    def test_store_passphrase(self, tmp_path):
        FilesystemStore(tmp_path, "store secret").create_wallet("primary")

        assert FilesystemStore(tmp_path, "store secret").open_wallet("primary").name == "primary"
        with pytest.raises(WalletDecryptionError, match="failed to decrypt wallet"):
            FilesystemStore(tmp_path, "wrong").open_wallet("primary")
        with pytest.raises(WalletDecryptionError, match="failed to decrypt wallet"):
            FilesystemStore(tmp_path).open_wallet("primary")
