"""
ethdo Beacon Node Types

Typed views of the beacon node responses used by the commands.
"""

from dataclasses import dataclass
from typing import Any, Dict

FAR_FUTURE_EPOCH = 2 ** 64 - 1


def _hex_bytes(value: str) -> bytes:
    if value.startswith(('0x', '0X')):
        value = value[2:]
    return bytes.fromhex(value)


@dataclass(frozen=True)
class Validator:
    """Validator record as held in the beacon state."""
    public_key: bytes
    withdrawal_credentials: bytes
    effective_balance: int
    slashed: bool
    activation_eligibility_epoch: int
    activation_epoch: int
    exit_epoch: int
    withdrawable_epoch: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Validator':
        return cls(
            public_key=_hex_bytes(data['pubkey']),
            withdrawal_credentials=_hex_bytes(data['withdrawal_credentials']),
            effective_balance=int(data['effective_balance']),
            slashed=bool(data['slashed']),
            activation_eligibility_epoch=int(data['activation_eligibility_epoch']),
            activation_epoch=int(data['activation_epoch']),
            exit_epoch=int(data['exit_epoch']),
            withdrawable_epoch=int(data['withdrawable_epoch']),
        )


@dataclass(frozen=True)
class ValidatorInfo:
    """Current status and balances of a validator."""
    public_key: bytes
    index: int
    status: str
    balance: int
    effective_balance: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ValidatorInfo':
        validator = data['validator']
        return cls(
            public_key=_hex_bytes(validator['pubkey']),
            index=int(data['index']),
            status=data['status'],
            balance=int(data['balance']),
            effective_balance=int(validator['effective_balance']),
        )

    @classmethod
    def unknown(cls, public_key: bytes) -> 'ValidatorInfo':
        """Info for a key the beacon node has never seen."""
        return cls(public_key=public_key, index=-1, status="unknown", balance=0, effective_balance=0)


@dataclass(frozen=True)
class Fork:
    previous_version: bytes
    current_version: bytes
    epoch: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Fork':
        return cls(
            previous_version=_hex_bytes(data['previous_version']),
            current_version=_hex_bytes(data['current_version']),
            epoch=int(data['epoch']),
        )
