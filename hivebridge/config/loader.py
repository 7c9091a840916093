"""
HiveBridge TOML Configuration Loader

Loads bridge.toml with environment variable overrides.

Environment variable mapping:
    [token] name                  → HIVEBRIDGE_TOKEN_NAME
    [token] symbol                → HIVEBRIDGE_TOKEN_SYMBOL
    [committee] contract_address  → HIVEBRIDGE_CONTRACT_ADDRESS
    [committee] chain_id          → HIVEBRIDGE_CHAIN_ID
    [committee] initial_signer    → HIVEBRIDGE_INITIAL_SIGNER
    [committee] initial_username  → HIVEBRIDGE_INITIAL_USERNAME
    [logging] level               → HIVEBRIDGE_LOG_LEVEL
    [logging] file                → HIVEBRIDGE_LOG_FILE

Operator private keys never go in TOML; the CLI reads them from
HIVEBRIDGE_OPERATOR_KEY.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from ..constants import (
    MAX_USERNAME_LENGTH,
    MIN_USERNAME_LENGTH,
    TOKEN_DECIMALS,
    TOKEN_NAME,
    TOKEN_SYMBOL,
)
from ..crypto.address import is_valid_address, is_zero_address
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class TokenConfig:
    """[token] section."""
    name: str = TOKEN_NAME
    symbol: str = TOKEN_SYMBOL
    decimals: int = TOKEN_DECIMALS

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenConfig":
        return cls(
            name=data.get("name", TOKEN_NAME),
            symbol=data.get("symbol", TOKEN_SYMBOL),
            decimals=data.get("decimals", TOKEN_DECIMALS),
        )

    def apply_env(self) -> None:
        if v := os.environ.get("HIVEBRIDGE_TOKEN_NAME"):
            self.name = v
        if v := os.environ.get("HIVEBRIDGE_TOKEN_SYMBOL"):
            self.symbol = v


@dataclass
class CommitteeConfig:
    """[committee] section."""
    contract_address: str = ""
    chain_id: Optional[int] = None
    initial_signer: str = ""
    initial_username: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CommitteeConfig":
        return cls(
            contract_address=data.get("contract_address", ""),
            chain_id=data.get("chain_id"),
            initial_signer=data.get("initial_signer", ""),
            initial_username=data.get("initial_username", ""),
        )

    def apply_env(self) -> None:
        if v := os.environ.get("HIVEBRIDGE_CONTRACT_ADDRESS"):
            self.contract_address = v
        if v := os.environ.get("HIVEBRIDGE_CHAIN_ID"):
            try:
                self.chain_id = int(v)
            except ValueError as e:
                raise ConfigurationError(f"HIVEBRIDGE_CHAIN_ID is not an integer: {v!r}") from e
        if v := os.environ.get("HIVEBRIDGE_INITIAL_SIGNER"):
            self.initial_signer = v
        if v := os.environ.get("HIVEBRIDGE_INITIAL_USERNAME"):
            self.initial_username = v

    def validate(self) -> None:
        for key in ("contract_address", "initial_signer"):
            value = getattr(self, key)
            if not value:
                raise ConfigurationError(f"committee.{key} is required")
            if not is_valid_address(value):
                raise ConfigurationError(f"committee.{key} is not a valid address: {value}")
        if is_zero_address(self.initial_signer):
            raise ConfigurationError("committee.initial_signer cannot be the zero address")
        if not MIN_USERNAME_LENGTH <= len(self.initial_username) <= MAX_USERNAME_LENGTH:
            raise ConfigurationError(
                f"committee.initial_username must be "
                f"{MIN_USERNAME_LENGTH}-{MAX_USERNAME_LENGTH} characters"
            )
        if self.chain_id is not None and self.chain_id < 1:
            raise ConfigurationError("committee.chain_id must be >= 1")


@dataclass
class LoggingConfig:
    """[logging] section."""
    level: str = "INFO"
    file: str = ""
    console: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoggingConfig":
        return cls(
            level=data.get("level", "INFO"),
            file=data.get("file", ""),
            console=data.get("console", True),
        )

    def apply_env(self) -> None:
        if v := os.environ.get("HIVEBRIDGE_LOG_LEVEL"):
            self.level = v
        if v := os.environ.get("HIVEBRIDGE_LOG_FILE"):
            self.file = v


@dataclass
class BridgeConfig:
    """Top-level bridge configuration."""
    token: TokenConfig = field(default_factory=TokenConfig)
    committee: CommitteeConfig = field(default_factory=CommitteeConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BridgeConfig":
        return cls(
            token=TokenConfig.from_dict(data.get("token", {})),
            committee=CommitteeConfig.from_dict(data.get("committee", {})),
            logging=LoggingConfig.from_dict(data.get("logging", {})),
        )

    @classmethod
    def from_file(cls, config_path: str) -> "BridgeConfig":
        """
        Load configuration from a TOML file.

        A missing file yields defaults with environment overrides applied.
        """
        path = Path(config_path)
        if not path.exists():
            logger.warning("Config file not found: %s, using defaults", config_path)
            cfg = cls()
            cfg.apply_env()
            return cfg

        try:
            with open(path, "rb") as f:
                raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Cannot parse {config_path}: {e}") from e

        cfg = cls.from_dict(raw)
        cfg.apply_env()
        return cfg

    # --- env overrides ----------------------------------------------------

    def apply_env(self) -> None:
        """Apply environment variable overrides to all sections."""
        self.token.apply_env()
        self.committee.apply_env()
        self.logging.apply_env()

    # --- validation -------------------------------------------------------

    def validate(self) -> bool:
        """
        Validate all configuration sections.

        Raises:
            ConfigurationError: on invalid config
        """
        if not self.token.name or not self.token.symbol:
            raise ConfigurationError("token.name and token.symbol are required")
        if not 0 <= self.token.decimals <= 18:
            raise ConfigurationError(f"token.decimals must be 0-18, got {self.token.decimals}")
        if self.logging.level.upper() not in LOG_LEVELS:
            raise ConfigurationError(f"Invalid logging.level: {self.logging.level}")
        self.committee.validate()
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict (for diagnostics, NOT for re-creating TOML)."""
        return {
            "token": {
                "name": self.token.name,
                "symbol": self.token.symbol,
                "decimals": self.token.decimals,
            },
            "committee": {
                "contract_address": self.committee.contract_address,
                "chain_id": self.committee.chain_id,
                "initial_signer": self.committee.initial_signer,
                "initial_username": self.committee.initial_username,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
                "console": self.logging.console,
            },
        }


def load_config(path: Optional[str] = None) -> BridgeConfig:
    """
    Load bridge configuration.

    Resolution order:
        1. Explicit *path* argument
        2. HIVEBRIDGE_CONFIG env var
        3. ./bridge.toml in current directory
        4. Defaults (with env overrides)
    """
    if path is None:
        path = os.environ.get("HIVEBRIDGE_CONFIG", "bridge.toml")

    return BridgeConfig.from_file(path)
