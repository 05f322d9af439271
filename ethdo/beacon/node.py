"""
Beacon node status queries.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Tuple

from .connection import BeaconConnection, parsing_response
from .types import _hex_bytes
from ..exceptions import NetworkError

logger = logging.getLogger(__name__)

GENESIS_PATH = "/eth/v1/beacon/genesis"
VERSION_PATH = "/eth/v1/node/version"
SYNCING_PATH = "/eth/v1/node/syncing"


def _data(conn: Optional[BeaconConnection], path: str):
    if conn is None:
        raise NetworkError("no connection to beacon node")
    body = conn.get(path)
    with parsing_response(path):
        return body['data']


def fetch_genesis_time(conn: Optional[BeaconConnection]) -> datetime:
    """Genesis time of the chain, in UTC."""
    data = _data(conn, GENESIS_PATH)
    with parsing_response(GENESIS_PATH):
        return datetime.fromtimestamp(int(data['genesis_time']), tz=timezone.utc)


def fetch_genesis_validators_root(conn: Optional[BeaconConnection]) -> bytes:
    data = _data(conn, GENESIS_PATH)
    with parsing_response(GENESIS_PATH):
        return _hex_bytes(data['genesis_validators_root'])


def fetch_version(conn: Optional[BeaconConnection]) -> Tuple[str, str]:
    """
    Version of the beacon node software.

    Returns:
        (version, metadata); the version string is split at its first space
        and metadata is whatever follows it (possibly empty).
    """
    data = _data(conn, VERSION_PATH)
    with parsing_response(VERSION_PATH):
        version, _, metadata = data['version'].partition(' ')
    return version, metadata


def fetch_syncing(conn: Optional[BeaconConnection]) -> bool:
    data = _data(conn, SYNCING_PATH)
    with parsing_response(SYNCING_PATH):
        syncing = data['is_syncing']
    if isinstance(syncing, str):
        return syncing.lower() == 'true'
    return bool(syncing)
