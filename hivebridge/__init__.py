"""
HiveBridge Package

Governance and validation core of the HIVE <-> ERC-20 bridge.

Core imports are lazily loaded so that importing a submodule does not pull
in the whole package. For direct module access, import from submodules:

    from hivebridge.bridge import WrappedHive
    from hivebridge.crypto import PrivateKey, sign_digest
    from hivebridge.exceptions import AlreadyMinted
"""

__version__ = "1.0.0"


def __getattr__(name):
    """Lazy module loading."""
    if name == 'WrappedHive':
        from .bridge import WrappedHive
        return WrappedHive
    elif name == 'load_config':
        from .config import load_config
        return load_config
    elif name == 'HiveBridgeException':
        from .exceptions import HiveBridgeException
        return HiveBridgeException
    raise AttributeError(f"module 'hivebridge' has no attribute {name!r}")

__all__ = ['WrappedHive', 'load_config', 'HiveBridgeException']
