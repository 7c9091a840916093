"""
HiveBridge Crypto Address Module

Signer identities are Ethereum-style 20-byte addresses with an EIP-55
checksum. Every address entering the core is normalized here so that
registry lookups, message packing, and event payloads agree on one form.
"""

from typing import Union

from eth_utils import (
    is_address,
    to_checksum_address as _to_checksum_address,
)

from ..constants import ZERO_ADDRESS
from ..exceptions import InvalidAddressError
from .hashing import keccak256


def public_key_to_address(public_key) -> str:
    """
    Derive address from a secp256k1 public key.

    Last 20 bytes of keccak256 over the 64-byte uncompressed key.

    Args:
        public_key: PublicKey instance or raw bytes

    Returns:
        Checksum address with 0x prefix
    """
    if hasattr(public_key, 'to_bytes'):
        pub_bytes = public_key.to_bytes()
    else:
        pub_bytes = public_key

    # Remove 04 prefix if present (uncompressed secp256k1)
    if len(pub_bytes) == 65 and pub_bytes[0] == 0x04:
        pub_bytes = pub_bytes[1:]

    if len(pub_bytes) != 64:
        raise InvalidAddressError(f"secp256k1 public key must be 64 bytes, got {len(pub_bytes)}")
    return _to_checksum_address(keccak256(pub_bytes)[-20:])


def to_checksum_address(address: Union[str, bytes]) -> str:
    """
    Normalize an address to EIP-55 checksum form.

    Mixed-case input must carry a valid checksum; all-lowercase or
    all-uppercase input is accepted as-is.

    Raises:
        InvalidAddressError: If the value is not a 20-byte address
    """
    if isinstance(address, bytes):
        if len(address) != 20:
            raise InvalidAddressError(f"Address must be 20 bytes, got {len(address)}")
        return _to_checksum_address(address)
    if not isinstance(address, str) or not is_address(address):
        raise InvalidAddressError(f"Invalid address: {address!r}")
    return _to_checksum_address(address)


def is_valid_address(address: str) -> bool:
    """Check whether *address* is a well-formed 20-byte hex address."""
    return isinstance(address, str) and is_address(address)


def is_zero_address(address: str) -> bool:
    """Check whether *address* is the null placeholder identity."""
    return to_checksum_address(address) == ZERO_ADDRESS


__all__ = [
    "public_key_to_address",
    "to_checksum_address",
    "is_valid_address",
    "is_zero_address",
]
