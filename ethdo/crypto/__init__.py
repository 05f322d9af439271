"""
ethdo Crypto Module

Cryptographic primitives for Ethereum 2 validator keys:
- BLS12-381 keys and signatures
- EIP-2333/EIP-2334 hierarchical key derivation
- SSZ signing roots and domains
"""

from .bls import SecretKey, verify, parse_hex, CURVE_ORDER
from .derivation import (
    derive_master_sk,
    derive_child_sk,
    derive_secret_key,
    path_to_indices,
    generate_mnemonic,
    seed_from_mnemonic_phrase,
)
from .signing import (
    SigningData,
    ForkData,
    VoluntaryExit,
    hash_tree_root,
    compute_domain,
    generate_signing_root,
    generate_signing_root_from_root,
)

__all__ = [
    # BLS
    "SecretKey",
    "verify",
    "parse_hex",
    "CURVE_ORDER",
    # Derivation
    "derive_master_sk",
    "derive_child_sk",
    "derive_secret_key",
    "path_to_indices",
    "generate_mnemonic",
    "seed_from_mnemonic_phrase",
    # SSZ
    "SigningData",
    "ForkData",
    "VoluntaryExit",
    "hash_tree_root",
    "compute_domain",
    "generate_signing_root",
    "generate_signing_root_from_root",
]
