"""
ethdo Cryptography Test Suite

Tests for:
- EIP-2333 key derivation (published test vector)
- EIP-2334 path parsing
- BLS secret keys, signing and verification
- SSZ domains and signing roots
- BIP-39 mnemonics

Run with:
    pytest tests/test_crypto.py -v
"""

import hashlib

import pytest

from ethdo.crypto import (
    CURVE_ORDER,
    SecretKey,
    VoluntaryExit,
    compute_domain,
    derive_child_sk,
    derive_master_sk,
    derive_secret_key,
    generate_mnemonic,
    generate_signing_root,
    generate_signing_root_from_root,
    hash_tree_root,
    parse_hex,
    path_to_indices,
    seed_from_mnemonic_phrase,
    verify,
)
from ethdo.constants import DOMAIN_VOLUNTARY_EXIT
from ethdo.exceptions import InvalidSignatureError

from conftest import TEST_MNEMONIC

# EIP-2333 test case 0
EIP2333_SEED = bytes.fromhex(
    "c55257c360c07c72029aebc1b53c05ed0362ada38ead3e3e9efa3708e53495531f09a6987599d18264c1e1c92f2cf141630c7a3c4ab7c81b2f001698e7463b04"
)
EIP2333_MASTER_SK = 6083874454709270928345386274498605044986640685124978867557563392430687146096
EIP2333_CHILD_SK = 20397789859736650942317412262472558107875392172444076792671091975210932703118


# ============================================================================
# Key derivation
# ============================================================================


class TestDerivation:

    def test_master_key_vector(self):
        assert derive_master_sk(EIP2333_SEED) == EIP2333_MASTER_SK

    def test_child_key_vector(self):
        assert derive_child_sk(EIP2333_MASTER_SK, 0) == EIP2333_CHILD_SK

    def test_derive_secret_key_follows_path(self):
        assert derive_secret_key(EIP2333_SEED, "m/0").value == EIP2333_CHILD_SK
        assert derive_secret_key(EIP2333_SEED, "m").value == EIP2333_MASTER_SK

    def test_short_seed_rejected(self):
        with pytest.raises(ValueError):
            derive_master_sk(b"\x01" * 31)

    def test_index_out_of_range(self):
        with pytest.raises(ValueError):
            derive_child_sk(EIP2333_MASTER_SK, 2 ** 32)

    def test_path_to_indices(self):
        assert path_to_indices("m/12381/3600/0/0/0") == [12381, 3600, 0, 0, 0]
        assert path_to_indices("m") == []

    @pytest.mark.parametrize("path", ["12381/3600", "m/12381/x", "m/", "m//1", "n/1"])
    def test_bad_paths(self, path):
        with pytest.raises(ValueError):
            path_to_indices(path)


# ============================================================================
# BLS keys and signatures
# ============================================================================


class TestBLS:

    def test_secret_key_round_trip(self):
        key = SecretKey(EIP2333_CHILD_SK)
        assert SecretKey.from_bytes(key.to_bytes()).value == EIP2333_CHILD_SK
        assert len(key.to_bytes()) == 32

    @pytest.mark.parametrize("value", [0, CURVE_ORDER])
    def test_secret_key_range(self, value):
        with pytest.raises(ValueError):
            SecretKey(value)

    def test_secret_key_wrong_length(self):
        with pytest.raises(ValueError):
            SecretKey.from_bytes(b"\x01" * 31)

    def test_public_key_size(self):
        assert len(SecretKey(EIP2333_MASTER_SK).public_key()) == 48

    def test_repr_hides_key(self):
        assert str(EIP2333_CHILD_SK) not in repr(SecretKey(EIP2333_CHILD_SK))

    def test_sign_and_verify(self):
        key = SecretKey(EIP2333_CHILD_SK)
        message = b"\x42" * 32
        signature = key.sign(message)
        assert len(signature) == 96
        assert verify(key.public_key(), message, signature) is True
        assert verify(key.public_key(), b"\x43" * 32, signature) is False

    def test_verify_rejects_bad_lengths(self):
        with pytest.raises(InvalidSignatureError):
            verify(b"\x00" * 47, b"\x00" * 32, b"\x00" * 96)
        with pytest.raises(InvalidSignatureError):
            verify(b"\x00" * 48, b"\x00" * 32, b"\x00" * 95)

    def test_parse_hex(self):
        assert parse_hex("0x0102") == b"\x01\x02"
        assert parse_hex("0102") == b"\x01\x02"
        with pytest.raises(ValueError, match="data"):
            parse_hex("0xzz", "data")


# ============================================================================
# Domains and signing roots
# ============================================================================


class TestSigningRoots:

    def test_zero_domain(self):
        # Fork data root of all zeroes is the hash of two zero chunks
        expected = bytes(4) + hashlib.sha256(bytes(64)).digest()[:28]
        assert compute_domain(bytes(4)) == expected

    def test_domain_includes_type_and_fork(self):
        domain = compute_domain(DOMAIN_VOLUNTARY_EXIT, bytes.fromhex("01000000"), b"\x11" * 32)
        assert len(domain) == 32
        assert domain[:4] == DOMAIN_VOLUNTARY_EXIT
        assert domain != compute_domain(DOMAIN_VOLUNTARY_EXIT)

    def test_domain_argument_sizes(self):
        with pytest.raises(ValueError):
            compute_domain(b"\x00" * 3)
        with pytest.raises(ValueError):
            compute_domain(bytes(4), fork_version=b"\x00" * 5)

    def test_signing_root_from_root(self):
        root = b"\x01" * 32
        domain = b"\x02" * 32
        assert generate_signing_root_from_root(root, domain) == hashlib.sha256(root + domain).digest()

    def test_signing_root_size_checks(self):
        with pytest.raises(ValueError):
            generate_signing_root_from_root(b"\x01" * 31, b"\x02" * 32)
        with pytest.raises(ValueError):
            generate_signing_root_from_root(b"\x01" * 32, b"\x02" * 31)

    def test_voluntary_exit_root(self):
        exit_message = VoluntaryExit(epoch=5, validator_index=7)
        expected = hashlib.sha256(
            (5).to_bytes(8, "little") + bytes(24) + (7).to_bytes(8, "little") + bytes(24)
        ).digest()
        assert hash_tree_root(exit_message) == expected

    def test_signing_root_of_object(self):
        exit_message = VoluntaryExit(epoch=5, validator_index=7)
        domain = compute_domain(DOMAIN_VOLUNTARY_EXIT)
        assert generate_signing_root(exit_message, domain) == \
            generate_signing_root_from_root(hash_tree_root(exit_message), domain)


# ============================================================================
# Mnemonics
# ============================================================================


class TestMnemonic:

    def test_generate(self):
        mnemonic = generate_mnemonic()
        assert len(mnemonic.split()) == 24
        assert len(seed_from_mnemonic_phrase(mnemonic)) == 64

    def test_seed_is_deterministic(self):
        seed = seed_from_mnemonic_phrase(TEST_MNEMONIC)
        assert seed == seed_from_mnemonic_phrase("  " + TEST_MNEMONIC.replace(" ", "   ") + " ")
        assert seed != seed_from_mnemonic_phrase(TEST_MNEMONIC, "extra")

    def test_invalid_mnemonic(self):
        with pytest.raises(ValueError, match="invalid mnemonic"):
            seed_from_mnemonic_phrase("abandon abandon abandon")
