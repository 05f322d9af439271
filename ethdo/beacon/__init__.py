"""
ethdo Beacon Node Module

Connection to a beacon node's REST API and the queries built on it.
"""

from .beaconchain import (
    fetch_chain_config,
    fetch_fork,
    fetch_validator,
    fetch_validator_info,
    parse_chain_config,
    submit_voluntary_exit,
)
from .connection import BeaconConnection, connect
from .node import fetch_genesis_time, fetch_genesis_validators_root, fetch_syncing, fetch_version
from .types import FAR_FUTURE_EPOCH, Fork, Validator, ValidatorInfo

__all__ = [
    'BeaconConnection',
    'connect',
    'fetch_chain_config',
    'fetch_fork',
    'fetch_validator',
    'fetch_validator_info',
    'parse_chain_config',
    'submit_voluntary_exit',
    'fetch_genesis_time',
    'fetch_genesis_validators_root',
    'fetch_syncing',
    'fetch_version',
    'FAR_FUTURE_EPOCH',
    'Fork',
    'Validator',
    'ValidatorInfo',
]
