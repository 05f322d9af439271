"""
Beacon chain queries.

Chain configuration, validator state and fork data, plus submission of
signed voluntary exits.
"""

import logging
import re
from typing import Any, Dict, Mapping, Optional, Union

from .connection import BeaconConnection, parsing_response
from .types import Fork, Validator, ValidatorInfo
from ..exceptions import ChainConfigError, NetworkError

logger = logging.getLogger(__name__)

CONFIG_PATH = "/eth/v1/config/spec"
VALIDATOR_PATH = "/eth/v1/beacon/states/head/validators/{pubkey}"
VALIDATORS_PATH = "/eth/v1/beacon/states/head/validators"
FORK_PATH = "/eth/v1/beacon/states/head/fork"
VOLUNTARY_EXITS_PATH = "/eth/v1/beacon/pool/voluntary_exits"

_UNSIGNED = re.compile(r"[0-9]+")
_SIGNED = re.compile(r"[+-]?[0-9]+")
_MAX_UINT64 = 2 ** 64 - 1

ConfigValue = Union[int, bytes, str]


def _require(conn: Optional[BeaconConnection]) -> BeaconConnection:
    if conn is None:
        raise NetworkError("no connection to beacon node")
    return conn


def _pubkey(account) -> str:
    public_key = account if isinstance(account, bytes) else account.public_key
    return '0x' + public_key.hex()


def _coerce_config_value(key: str, value: Any) -> ConfigValue:
    if not isinstance(value, str):
        return value
    if value == "0":
        return 0
    if _UNSIGNED.fullmatch(value):
        number = int(value)
        if 0 < number <= _MAX_UINT64:
            return number
    if value.startswith('['):
        result = bytearray()
        for entry in value[1:-1].split(' '):
            if not _SIGNED.fullmatch(entry):
                raise ChainConfigError(key, value)
            result.append(int(entry) & 0xff)
        return bytes(result)
    return value


def parse_chain_config(raw: Mapping[str, Any]) -> Dict[str, ConfigValue]:
    """
    Coerce raw chain configuration values.

    "0" becomes 0, non-zero 64-bit decimal strings become ints, "[a b c]"
    becomes bytes (each entry truncated to a byte) and anything else is left
    as it is.

    Raises:
        ChainConfigError: If a bracketed entry is not an integer.
    """
    return {key: _coerce_config_value(key, value) for key, value in raw.items()}


def fetch_chain_config(conn: Optional[BeaconConnection]) -> Dict[str, ConfigValue]:
    """Fetch and coerce the beacon chain configuration."""
    body = _require(conn).get(CONFIG_PATH)
    with parsing_response(CONFIG_PATH):
        config = parse_chain_config(body['data'])
    logger.debug("Fetched %d chain config entries", len(config))
    return config


def fetch_validator(conn: Optional[BeaconConnection], account) -> Validator:
    """
    Fetch the state record for the account's validator.

    Args:
        conn: Beacon node connection
        account: Account (or raw 48-byte public key)
    """
    path = VALIDATOR_PATH.format(pubkey=_pubkey(account))
    body = _require(conn).get(path)
    with parsing_response(path):
        return Validator.from_dict(body['data']['validator'])


def fetch_validator_info(conn: Optional[BeaconConnection], account) -> ValidatorInfo:
    """
    Fetch status and balance for the account's validator.

    Sends a single change-set naming the account's public key on a streaming
    request and reads one response from it.
    """
    public_key = account if isinstance(account, bytes) else account.public_key
    body = _require(conn).exchange(VALIDATORS_PATH, {'ids': [_pubkey(public_key)]})
    with parsing_response(VALIDATORS_PATH):
        results = body['data']
        if not results:
            return ValidatorInfo.unknown(public_key)
        return ValidatorInfo.from_dict(results[0])


def fetch_fork(conn: Optional[BeaconConnection]) -> Fork:
    body = _require(conn).get(FORK_PATH)
    with parsing_response(FORK_PATH):
        return Fork.from_dict(body['data'])


def submit_voluntary_exit(conn: Optional[BeaconConnection], signed_exit: Dict[str, Any]) -> None:
    """
    Submit a signed voluntary exit to the beacon node's operation pool.

    Args:
        signed_exit: {"message": {"epoch", "validator_index"}, "signature"}
    """
    _require(conn).post(VOLUNTARY_EXITS_PATH, signed_exit)
    logger.info("Submitted voluntary exit for validator %s", signed_exit['message']['validator_index'])
