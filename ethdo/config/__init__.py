"""
ethdo Configuration

Layered configuration: command line, ETHDO_* environment variables, YAML
config file, defaults.
"""

from .loader import (
    EthdoConfig,
    check_transaction_flags,
    default_config_path,
    load_config_file,
    parse_duration,
)

__all__ = [
    "EthdoConfig",
    "check_transaction_flags",
    "default_config_path",
    "load_config_file",
    "parse_duration",
]
