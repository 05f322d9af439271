"""
ethdo Signing Roots

SSZ containers and helpers to build the signing root a validator signs:
the hash tree root of the object combined with a 32-byte domain.
"""

import logging

import ssz
from ssz.sedes import Serializable, bytes4, bytes32, uint64

from ..constants import ROOT_SIZE, ZERO_FORK_VERSION, ZERO_GENESIS_VALIDATORS_ROOT

logger = logging.getLogger(__name__)


class SigningData(Serializable):
    fields = [
        ("object_root", bytes32),
        ("domain", bytes32),
    ]


class ForkData(Serializable):
    fields = [
        ("current_version", bytes4),
        ("genesis_validators_root", bytes32),
    ]


class VoluntaryExit(Serializable):
    fields = [
        ("epoch", uint64),
        ("validator_index", uint64),
    ]


def hash_tree_root(value: Serializable) -> bytes:
    """SSZ hash tree root of a container."""
    return ssz.get_hash_tree_root(value, sedes=type(value))


def compute_domain(
    domain_type: bytes,
    fork_version: bytes = ZERO_FORK_VERSION,
    genesis_validators_root: bytes = ZERO_GENESIS_VALIDATORS_ROOT,
) -> bytes:
    """
    Compute a signature domain.

    Args:
        domain_type: 4-byte domain type (e.g. DOMAIN_VOLUNTARY_EXIT)
        fork_version: 4-byte fork version
        genesis_validators_root: 32-byte genesis validators root

    Returns:
        32-byte domain
    """
    if len(domain_type) != 4:
        raise ValueError(f"domain type must be 4 bytes, got {len(domain_type)}")
    if len(fork_version) != 4:
        raise ValueError(f"fork version must be 4 bytes, got {len(fork_version)}")
    if len(genesis_validators_root) != ROOT_SIZE:
        raise ValueError(f"genesis validators root must be {ROOT_SIZE} bytes")
    fork_data_root = hash_tree_root(ForkData(
        current_version=fork_version,
        genesis_validators_root=genesis_validators_root,
    ))
    return domain_type + fork_data_root[:28]


def generate_signing_root_from_root(object_root: bytes, domain: bytes) -> bytes:
    """Signing root for an object whose hash tree root is already known."""
    if len(object_root) != ROOT_SIZE:
        raise ValueError(f"object root must be {ROOT_SIZE} bytes, got {len(object_root)}")
    if len(domain) != ROOT_SIZE:
        raise ValueError(f"domain must be {ROOT_SIZE} bytes, got {len(domain)}")
    signing_root = hash_tree_root(SigningData(object_root=object_root, domain=domain))
    logger.debug("Signing root is %s", signing_root.hex())
    return signing_root


def generate_signing_root(data: Serializable, domain: bytes) -> bytes:
    """
    Signing root for an SSZ object.

    The data should (but does not have to) be one of the consensus containers.
    """
    return generate_signing_root_from_root(hash_tree_root(data), domain)
