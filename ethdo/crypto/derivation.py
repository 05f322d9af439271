"""
ethdo Key Derivation

EIP-2333 hierarchical key derivation for BLS12-381 and EIP-2334 paths.
BIP-39 mnemonics provide the seed.
"""

import hashlib
from typing import List

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from eth_account import Account
from eth_account.hdaccount import seed_from_mnemonic
from eth_utils import ValidationError

from .bls import CURVE_ORDER, SecretKey

# EIP-2333 parameters
_KEYGEN_SALT = b"BLS-SIG-KEYGEN-SALT-"
_LAMPORT_CHUNKS = 255
_HKDF_MOD_R_LENGTH = 48
_MIN_SEED_LENGTH = 32


def _sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def _hkdf(salt: bytes, ikm: bytes, info: bytes, length: int) -> bytes:
    return HKDF(algorithm=hashes.SHA256(), length=length, salt=salt, info=info).derive(ikm)


def _ikm_to_lamport_sk(ikm: bytes, salt: bytes) -> List[bytes]:
    okm = _hkdf(salt, ikm, b"", 32 * _LAMPORT_CHUNKS)
    return [okm[i * 32:(i + 1) * 32] for i in range(_LAMPORT_CHUNKS)]


def _parent_sk_to_lamport_pk(parent_sk: int, index: int) -> bytes:
    salt = index.to_bytes(4, 'big')
    ikm = parent_sk.to_bytes(32, 'big')
    lamport_0 = _ikm_to_lamport_sk(ikm, salt)
    not_ikm = (parent_sk ^ (2 ** 256 - 1)).to_bytes(32, 'big')
    lamport_1 = _ikm_to_lamport_sk(not_ikm, salt)
    lamport_pk = b"".join(_sha256(chunk) for chunk in lamport_0 + lamport_1)
    return _sha256(lamport_pk)


def _hkdf_mod_r(ikm: bytes, key_info: bytes = b"") -> int:
    salt = _KEYGEN_SALT
    sk = 0
    while sk == 0:
        salt = _sha256(salt)
        okm = _hkdf(salt, ikm + b"\x00", key_info + _HKDF_MOD_R_LENGTH.to_bytes(2, 'big'), _HKDF_MOD_R_LENGTH)
        sk = int.from_bytes(okm, 'big') % CURVE_ORDER
    return sk


def derive_master_sk(seed: bytes) -> int:
    """
    Derive the EIP-2333 master secret key from a seed.

    Args:
        seed: At least 32 bytes of seed material

    Returns:
        Master secret key as an integer
    """
    if len(seed) < _MIN_SEED_LENGTH:
        raise ValueError(f"seed must be at least {_MIN_SEED_LENGTH} bytes")
    return _hkdf_mod_r(seed)


def derive_child_sk(parent_sk: int, index: int) -> int:
    """Derive the EIP-2333 child of parent_sk at index."""
    if not 0 <= index < 2 ** 32:
        raise ValueError(f"index {index} out of range")
    return _hkdf_mod_r(_parent_sk_to_lamport_pk(parent_sk, index))


def path_to_indices(path: str) -> List[int]:
    """
    Parse an EIP-2334 path such as ``m/12381/3600/0/0/0``.

    Raises:
        ValueError: If the path does not start with ``m`` or has a bad component.
    """
    parts = path.split('/')
    if parts[0] != 'm':
        raise ValueError(f"path {path!r} must start with m")
    indices = []
    for part in parts[1:]:
        if not part.isdigit():
            raise ValueError(f"invalid path component {part!r} in {path!r}")
        indices.append(int(part))
    return indices


def derive_secret_key(seed: bytes, path: str) -> SecretKey:
    """Derive the secret key at path from seed."""
    sk = derive_master_sk(seed)
    for index in path_to_indices(path):
        sk = derive_child_sk(sk, index)
    return SecretKey(sk)


def generate_mnemonic(num_words: int = 24) -> str:
    """
    Generate a new BIP-39 mnemonic phrase.

    Args:
        num_words: 12, 15, 18, 21 or 24

    Returns:
        Mnemonic phrase
    """
    Account.enable_unaudited_hdwallet_features()
    _, mnemonic = Account.create_with_mnemonic(num_words=num_words)
    return mnemonic


def seed_from_mnemonic_phrase(mnemonic: str, passphrase: str = "") -> bytes:
    """
    Turn a BIP-39 mnemonic into a 64-byte seed.

    Raises:
        ValueError: If the mnemonic is not valid.
    """
    try:
        return seed_from_mnemonic(" ".join(mnemonic.split()), passphrase)
    except (ValidationError, ValueError) as e:
        raise ValueError(f"invalid mnemonic: {e}") from e
