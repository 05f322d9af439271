"""
ethdo BLS Keys

BLS12-381 keys and signatures as used by Ethereum 2 validators
(proof-of-possession scheme, public keys in G1, signatures in G2).
"""

import os
from typing import Union

from py_ecc.bls import G2ProofOfPossession as bls
from py_ecc.optimized_bls12_381 import curve_order

from ..constants import PUBLIC_KEY_SIZE, SIGNATURE_SIZE
from ..exceptions import InvalidSignatureError

CURVE_ORDER = curve_order
SECRET_KEY_SIZE = 32


class SecretKey:
    """
    BLS secret key.

    Example:
        key = SecretKey.generate()
        signature = key.sign(b"\\x00" * 32)
        assert verify(key.public_key(), b"\\x00" * 32, signature)
    """

    def __init__(self, value: int):
        if not 0 < value < CURVE_ORDER:
            raise ValueError("secret key out of range")
        self._value = value

    @classmethod
    def generate(cls) -> 'SecretKey':
        """Generate a new random secret key."""
        return cls(bls.KeyGen(os.urandom(32)))

    @classmethod
    def from_bytes(cls, data: bytes) -> 'SecretKey':
        """Create from 32 big-endian bytes."""
        if len(data) != SECRET_KEY_SIZE:
            raise ValueError(f"secret key must be {SECRET_KEY_SIZE} bytes, got {len(data)}")
        return cls(int.from_bytes(data, 'big'))

    @property
    def value(self) -> int:
        return self._value

    def to_bytes(self) -> bytes:
        return self._value.to_bytes(SECRET_KEY_SIZE, 'big')

    def public_key(self) -> bytes:
        """48-byte compressed public key."""
        return bls.SkToPk(self._value)

    def sign(self, message: bytes) -> bytes:
        """96-byte compressed signature over message."""
        return bls.Sign(self._value, message)

    def __repr__(self) -> str:
        return "SecretKey(***)"


def verify(public_key: bytes, message: bytes, signature: bytes) -> bool:
    """
    Verify a BLS signature.

    Args:
        public_key: 48-byte public key
        message: Signed message (usually a signing root)
        signature: 96-byte signature

    Returns:
        True if the signature is valid for the key and message.

    Raises:
        InvalidSignatureError: If key or signature have the wrong length.
    """
    if len(public_key) != PUBLIC_KEY_SIZE:
        raise InvalidSignatureError(f"public key must be {PUBLIC_KEY_SIZE} bytes, got {len(public_key)}")
    if len(signature) != SIGNATURE_SIZE:
        raise InvalidSignatureError(f"signature must be {SIGNATURE_SIZE} bytes, got {len(signature)}")
    return bls.Verify(public_key, message, signature)


def parse_hex(value: Union[str, bytes], name: str = "value") -> bytes:
    """Decode a hex string with optional 0x prefix."""
    if isinstance(value, bytes):
        return value
    text = value.strip()
    if text.startswith(('0x', '0X')):
        text = text[2:]
    try:
        return bytes.fromhex(text)
    except ValueError:
        raise ValueError(f"invalid hex {name}: {value!r}") from None
