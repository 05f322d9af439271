"""
Tests for wallet/account path resolution.
"""

import pytest

from ethdo.cli.paths import (
    account_from_path,
    accounts_from_path,
    wallet_and_account_names_from_path,
    wallet_from_path,
)
from ethdo.exceptions import InvalidPathError
from ethdo.wallet import (
    AccountNotFoundError,
    FilesystemStore,
    HierarchicalDeterministicWallet,
    WalletDecryptionError,
    WalletNotFoundError,
    WalletType,
)

from conftest import TEST_MNEMONIC


@pytest.fixture
def nd_store(store):
    wallet = store.create_wallet("Test wallet")
    for name in ("b", "a", "c", "validator 10"):
        wallet.create_account(name, "secret")
    return store


@pytest.fixture
def hd_store(store):
    wallet = store.create_wallet("hd", WalletType.HIERARCHICAL_DETERMINISTIC, "wallet secret", TEST_MNEMONIC)
    with wallet.unlocked("wallet secret"):
        wallet.create_account("first", "secret")
    return store


@pytest.fixture
def lock_calls(monkeypatch):
    calls = []
    original = HierarchicalDeterministicWallet.lock

    def lock(self):
        calls.append(self.name)
        original(self)

    monkeypatch.setattr(HierarchicalDeterministicWallet, "lock", lock)
    return calls


# ============================================================================
# Splitting
# ============================================================================


class TestWalletAndAccountNames:

    def test_wallet_only(self):
        assert wallet_and_account_names_from_path("Test wallet") == ("Test wallet", "")

    def test_trailing_separator(self):
        assert wallet_and_account_names_from_path("Test wallet/") == ("Test wallet", "")

    def test_wallet_and_account(self):
        assert wallet_and_account_names_from_path("Test wallet/Account") == ("Test wallet", "Account")

    def test_account_may_contain_separator(self):
        assert wallet_and_account_names_from_path("hd/m/12381/3600/0/0/0") == ("hd", "m/12381/3600/0/0/0")

    def test_empty(self):
        with pytest.raises(InvalidPathError, match="invalid account format"):
            wallet_and_account_names_from_path("")


# ============================================================================
# Lookup
# ============================================================================


class TestWalletFromPath:

    def test_found(self, nd_store):
        assert wallet_from_path(nd_store, "Test wallet/a").name == "Test wallet"

    def test_missing(self, nd_store):
        with pytest.raises(WalletNotFoundError):
            wallet_from_path(nd_store, "Other wallet/a")

    def test_incorrect_store_passphrase(self, tmp_path):
        FilesystemStore(tmp_path, "store secret").create_wallet("primary")
        with pytest.raises(WalletDecryptionError, match="Incorrect store passphrase"):
            wallet_from_path(FilesystemStore(tmp_path, "wrong"), "primary/a")


class TestAccountFromPath:

    def test_found(self, nd_store):
        assert account_from_path(nd_store, "Test wallet/b").name == "b"

    @pytest.mark.parametrize("path", ["Test wallet", "Test wallet/"])
    def test_no_account_name(self, nd_store, path):
        with pytest.raises(AccountNotFoundError, match="no account name"):
            account_from_path(nd_store, path)

    def test_missing_account(self, nd_store):
        with pytest.raises(AccountNotFoundError):
            account_from_path(nd_store, "Test wallet/z")

    def test_hd_path_with_passphrase(self, hd_store, lock_calls):
        account = account_from_path(hd_store, "hd/m/12381/3600/3/0/0", "wallet secret")
        assert account.path == "m/12381/3600/3/0/0"
        assert account.is_unlocked
        assert lock_calls == ["hd"]

    def test_hd_path_relocks_on_failure(self, hd_store, lock_calls):
        with pytest.raises(AccountNotFoundError):
            account_from_path(hd_store, "hd/m/12381/bad", "wallet secret")
        assert lock_calls == ["hd"]

    def test_hd_invalid_wallet_passphrase(self, hd_store, lock_calls):
        with pytest.raises(WalletDecryptionError, match="invalid wallet passphrase"):
            account_from_path(hd_store, "hd/m/12381/3600/3/0/0", "wrong")
        assert lock_calls == []

    def test_hd_path_of_stored_account_without_passphrase(self, hd_store, lock_calls):
        account = account_from_path(hd_store, "hd/m/12381/3600/0/0/0")
        assert account.name == "first"
        assert lock_calls == []

    def test_hd_plain_name_not_unlocked(self, hd_store, lock_calls):
        assert account_from_path(hd_store, "hd/first", "wallet secret").name == "first"
        assert lock_calls == []


class TestAccountsFromPath:

    def test_single_account(self, nd_store):
        assert [a.name for a in accounts_from_path(nd_store, "Test wallet/c")] == ["c"]

    @pytest.mark.parametrize("path", ["Test wallet", "Test wallet/"])
    def test_all_accounts_sorted(self, nd_store, path):
        assert [a.name for a in accounts_from_path(nd_store, path)] == ["a", "b", "c", "validator 10"]

    def test_match_all_pattern(self, nd_store):
        assert [a.name for a in accounts_from_path(nd_store, "Test wallet/.*")] == ["a", "b", "c", "validator 10"]

    def test_pattern_is_anchored(self, nd_store):
        assert [a.name for a in accounts_from_path(nd_store, "Test wallet/[ab]")] == ["a", "b"]
        assert [a.name for a in accounts_from_path(nd_store, "Test wallet/validator")] == []
        assert [a.name for a in accounts_from_path(nd_store, "Test wallet/validator.*")] == ["validator 10"]

    def test_invalid_pattern(self, nd_store):
        with pytest.raises(InvalidPathError):
            accounts_from_path(nd_store, "Test wallet/[")

    def test_missing_wallet(self, nd_store):
        with pytest.raises(WalletNotFoundError):
            accounts_from_path(nd_store, "Other wallet/")

    def test_empty_path(self, nd_store):
        with pytest.raises(InvalidPathError):
            accounts_from_path(nd_store, "")
