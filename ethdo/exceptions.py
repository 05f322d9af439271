"""
ethdo Exceptions

Custom exception classes for ethdo.
"""


class EthdoException(Exception):
    """Base exception for ethdo."""
    pass


class ConfigurationError(EthdoException):
    """Configuration error (conflicting flags, malformed config file)."""
    pass


class InvalidPathError(EthdoException):
    """Wallet/account path specifier could not be parsed."""
    pass


class InvalidSignatureError(EthdoException):
    """Invalid cryptographic signature."""
    pass


class NetworkError(EthdoException):
    """Network communication error."""
    pass


class BeaconConnectionError(NetworkError):
    """Could not open a connection to the beacon node."""
    pass


class ChainConfigError(EthdoException):
    """Chain configuration entry has an unexpected shape."""

    def __init__(self, key: str, value: str, reason: str = ""):
        self.key = key
        self.value = value
        message = f"failed to convert value {value!r} for {key}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
