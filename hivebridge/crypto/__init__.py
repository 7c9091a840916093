"""
HiveBridge Crypto Module

This module provides the cryptographic primitives of the bridge core:
- secp256k1 keys and recoverable 65-byte signatures
- Keccak-256 hashing
- Address derivation and normalization
"""

from .keys import PrivateKey, PublicKey, Signature
from .signing import (
    sign_digest,
    recover_public_key,
    recover_signer,
)
from .hashing import keccak256
from .address import (
    public_key_to_address,
    to_checksum_address,
    is_valid_address,
    is_zero_address,
)

__all__ = [
    # Keys (secp256k1)
    "PrivateKey",
    "PublicKey",
    "Signature",
    # Signing
    "sign_digest",
    "recover_public_key",
    "recover_signer",
    # Hashing
    "keccak256",
    # Address
    "public_key_to_address",
    "to_checksum_address",
    "is_valid_address",
    "is_zero_address",
]
