"""
ethdo Constants

This module consolidates global constants and environment configuration
used throughout the codebase.
"""
import ast
from pathlib import Path

from dotenv import dotenv_values

# =============================================================================
# ENVIRONMENT CONFIGURATION
# =============================================================================
# Logging defaults may be overridden from a .env file in the working directory
_config = dotenv_values(".env")

LOGGER_DEFAULTS = {
    'LOG_FORMAT':                      '%(asctime)s - %(levelname)s - %(name)s - %(message)s',
    'LOG_DATE_FORMAT':                 '%Y-%m-%dT%H:%M:%S',
    'LOG_CONSOLE_HIGHLIGHTING':        'True',
}

LOG_MAX_FILE_SIZE = 10 * 1024 * 1024 # 10MB
LOG_BACKUP_COUNT = 5


# ==================================================================================
# COMMAND LINE DEFAULTS
# ==================================================================================
VERSION = '1.4.0'
PROGRAM_NAME = 'ethdo'
ENV_PREFIX = 'ETHDO'
CONFIG_FILE_NAME = '.ethdo.yaml'

DEFAULT_STORE = 'filesystem'
DEFAULT_CONNECTION = 'http://localhost:5052'
DEFAULT_TIMEOUT = 10.0  # seconds

# Matches the location used by other Ethereum 2 wallet tooling
DEFAULT_WALLET_DIR = Path.home() / ".config" / "ethereum2" / "wallets"

EXIT_FAILURE = 1


# ==================================================================================
# ETHEREUM 2 CONSTANTS
# ==================================================================================
# EIP-2334 derivation path for validator signing keys
VALIDATOR_KEY_PATH = "m/12381/3600/{index}/0/0"

DOMAIN_BEACON_PROPOSER = bytes.fromhex('00000000')
DOMAIN_BEACON_ATTESTER = bytes.fromhex('01000000')
DOMAIN_VOLUNTARY_EXIT = bytes.fromhex('04000000')

ZERO_FORK_VERSION = bytes(4)
ZERO_GENESIS_VALIDATORS_ROOT = bytes(32)

PUBLIC_KEY_SIZE = 48
SIGNATURE_SIZE = 96
ROOT_SIZE = 32


# ==================================================================================
# CONFIGURATION WRAPPERS
# ==================================================================================
class ConfigString(str):
    """
    String subclass that stores a default value.
    """
    def __new__(cls, value, default):
        obj = str.__new__(cls, value)
        obj._default = default
        return obj

    def default(self):
        return self._default

class ConfigBool(int):
    """
    Int subclass acting as a boolean that stores a default value.
    """
    def __new__(cls, value, default):
        obj = int.__new__(cls, bool(value))
        obj._default = default
        return obj

    def default(self):
        return self._default

    def __repr__(self):
        return str(bool(self))

    def __str__(self):
        return str(bool(self))

    def __eq__(self, other):
        return bool(self) == other

    __hash__ = int.__hash__


# ==================================================================================
# DYNAMIC CONFIGURATION LOADING
# ==================================================================================
namespace = globals()

def parse_bool(v):
    """
    Convert "True"/"False" (any casing, with surrounding whitespace) into bool.
    Avoids exceptions by only calling ast.literal_eval for known literals.
    """
    if not isinstance(v, str):
        return v
    s = v.strip()
    if not s:
        return v
    if s.casefold() in {"true", "false"}:
        # ast.literal_eval expects "True"/"False"
        return ast.literal_eval(s.title())
    return v

for key, default_raw in LOGGER_DEFAULTS.items():
    # dotenv_values returns strings or None. None is treated as missing.
    raw = _config.get(key)
    value_raw = default_raw if raw is None else raw

    value = parse_bool(value_raw)
    default_val = parse_bool(default_raw)

    if isinstance(value, bool):
        namespace[key] = ConfigBool(value, default_val)
    else:
        namespace[key] = ConfigString(value_raw, default_val)
