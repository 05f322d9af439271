"""
ethdo Configuration Loader

Reads the optional YAML configuration file and defines the immutable
configuration handed to every command.

Precedence, highest first:
    flag on the command line
    ETHDO_<FLAG> environment variable
    config file (--config, otherwise $HOME/.ethdo.yaml)
    flag default

The command line layer (click) resolves the first two and the defaults; this
module supplies the config file values and the resulting dataclass.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..constants import (
    CONFIG_FILE_NAME,
    DEFAULT_CONNECTION,
    DEFAULT_STORE,
    DEFAULT_TIMEOUT,
)
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_duration(value: Any) -> float:
    """
    Parse a duration into seconds.

    Accepts numbers (seconds) and Go-style duration strings such as
    ``"10s"``, ``"500ms"`` or ``"1m30s"``.

    Raises:
        ConfigurationError: If the value is not a valid positive duration.
    """
    if isinstance(value, bool):
        raise ConfigurationError(f"invalid duration {value!r}")
    if isinstance(value, (int, float)):
        seconds = float(value)
    else:
        text = str(value).strip()
        try:
            seconds = float(text)
        except ValueError:
            pos = 0
            seconds = 0.0
            for match in _DURATION_PART.finditer(text):
                if match.start() != pos:
                    break
                seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
                pos = match.end()
            if pos == 0 or pos != len(text):
                raise ConfigurationError(f"invalid duration {value!r}")
    if seconds <= 0:
        raise ConfigurationError(f"duration must be positive, got {value!r}")
    return seconds


def default_config_path() -> Path:
    """Location of the per-user config file."""
    return Path.home() / CONFIG_FILE_NAME


def load_config_file(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration values from a YAML file.

    Args:
        path: Explicit config file. When omitted ``$HOME/.ethdo.yaml`` is used
            if it exists.

    Returns:
        Mapping of flag name to value. Empty if there is no default config file.

    Raises:
        ConfigurationError: If an explicit file is missing, or a file cannot be
            parsed into a mapping.
    """
    if path:
        config_path = Path(path).expanduser()
        if not config_path.is_file():
            raise ConfigurationError(f"open {config_path}: no such file or directory")
    else:
        config_path = default_config_path()
        if not config_path.is_file():
            # Lack of a default config file is not an error
            logger.debug("No config file at %s", config_path)
            return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"failed to parse config file {config_path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"failed to read config file {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"config file {config_path} must contain a mapping")

    logger.debug("Loaded config file %s", config_path)
    return {str(k).lower(): v for k, v in data.items()}


@dataclass(frozen=True)
class EthdoConfig:
    """
    Global settings for one invocation.

    Built once after flags, environment and config file have been merged, then
    passed to each command handler. Never mutated.
    """
    config_file: Optional[str] = None
    log: Optional[str] = None
    store: str = DEFAULT_STORE
    base_dir: Optional[str] = None
    account: str = ""
    store_passphrase: str = ""
    wallet_passphrase: str = ""
    passphrase: str = ""
    quiet: bool = False
    verbose: bool = False
    debug: bool = False
    connection: str = DEFAULT_CONNECTION
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self):
        if self.quiet and self.verbose:
            raise ConfigurationError("Cannot supply both quiet and verbose flags")
        if self.quiet and self.debug:
            raise ConfigurationError("Cannot supply both quiet and debug flags")


def check_transaction_flags(generate: bool, wait: bool) -> None:
    """Reject the generate/wait combination used by transaction commands."""
    if generate and wait:
        raise ConfigurationError("Cannot supply both generate and wait flags")
