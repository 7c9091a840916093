"""
HiveBridge Configuration

Loads bridge.toml; environment variables override TOML values.
"""

from .loader import (
    BridgeConfig,
    TokenConfig,
    CommitteeConfig,
    LoggingConfig,
    load_config,
)

__all__ = [
    "BridgeConfig",
    "TokenConfig",
    "CommitteeConfig",
    "LoggingConfig",
    "load_config",
]
