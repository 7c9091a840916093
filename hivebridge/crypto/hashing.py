"""
HiveBridge Crypto Hashing Module

Keccak-256 is the digest every committee signature is produced over.
"""

from typing import Union

from eth_utils import keccak


def keccak256(data: Union[bytes, str]) -> bytes:
    """
    Compute Keccak-256 hash (Ethereum standard).

    Args:
        data: Input bytes or 0x-prefixed hex string

    Returns:
        32-byte hash
    """
    if isinstance(data, str):
        return keccak(hexstr=data)
    return keccak(data)

