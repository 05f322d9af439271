"""
ethdo Package

Command line tool for Ethereum 2 wallets, accounts and beacon nodes.
For direct module access, import from submodules:

    from ethdo.wallet import set_store
    from ethdo.beacon import connect, fetch_syncing
    from ethdo.crypto import SecretKey, verify
"""

from .constants import VERSION

__version__ = VERSION


# Lazy import so that library use does not pull in the command line stack
def __getattr__(name):
    if name == 'main':
        from .cli import main
        return main
    raise AttributeError(f"module 'ethdo' has no attribute {name!r}")


__all__ = ['main', '__version__']
