"""
HiveBridge Crypto Keys Module

secp256k1 key management for bridge operators. Wraps eth-keys so the rest of
the core only deals with checksummed addresses and 65-byte signatures.
"""

from typing import Tuple, Union

from eth_keys.datatypes import (
    PrivateKey as EthPrivateKey,
    PublicKey as EthPublicKey,
    Signature as EthSignature,
)
from eth_keys.exceptions import BadSignature, ValidationError
from eth_utils import decode_hex

from ..constants import DIGEST_LENGTH, SIGNATURE_LENGTH
from ..exceptions import InvalidKeyError, MalformedSignature

# secp256k1 group order
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
SECP256K1_HALF_N = SECP256K1_N // 2


class PrivateKey:
    """
    secp256k1 private key held by a bridge operator.

    Wraps eth-keys PrivateKey.
    """

    def __init__(self, key_bytes: bytes):
        """
        Initialize from raw 32-byte private key.

        Raises:
            InvalidKeyError: If key bytes are invalid
        """
        if len(key_bytes) != 32:
            raise InvalidKeyError(f"Private key must be 32 bytes, got {len(key_bytes)}")

        try:
            self._key = EthPrivateKey(key_bytes)
        except ValidationError as e:
            raise InvalidKeyError(f"Invalid private key: {e}") from e

    @classmethod
    def from_hex(cls, hex_str: str) -> "PrivateKey":
        """Create from hex string (with or without 0x prefix)."""
        try:
            key_bytes = decode_hex(hex_str)
        except ValueError as e:
            raise InvalidKeyError(f"Private key is not valid hex: {e}") from e
        return cls(key_bytes)

    @property
    def public_key(self) -> "PublicKey":
        return PublicKey(self._key.public_key)

    @property
    def address(self) -> str:
        """Checksum address of the corresponding public key."""
        return self.public_key.to_address()

    def to_bytes(self) -> bytes:
        return self._key.to_bytes()

    def to_hex(self, with_prefix: bool = True) -> str:
        hex_str = self._key.to_bytes().hex()
        return f"0x{hex_str}" if with_prefix else hex_str

    def sign_msg_hash(self, msg_hash: bytes) -> "Signature":
        """
        Sign a 32-byte message hash.

        The hash is signed raw, without the personal_sign prefix.
        """
        if len(msg_hash) != DIGEST_LENGTH:
            raise ValueError(f"Message hash must be {DIGEST_LENGTH} bytes, got {len(msg_hash)}")
        return Signature(self._key.sign_msg_hash(msg_hash))

    def __repr__(self) -> str:
        return f"PrivateKey({self.address})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, PrivateKey):
            return False
        return self._key == other._key

    def __hash__(self) -> int:
        return hash(self._key.to_bytes())


class PublicKey:
    """
    secp256k1 public key.
    """

    def __init__(self, key: Union[EthPublicKey, bytes]):
        """
        Args:
            key: eth-keys PublicKey or 64/65-byte uncompressed public key
        """
        if isinstance(key, EthPublicKey):
            self._key = key
        elif isinstance(key, bytes):
            if len(key) == 65 and key[0] == 0x04:
                key = key[1:]
            if len(key) != 64:
                raise InvalidKeyError(f"Invalid public key length: {len(key)}")
            try:
                self._key = EthPublicKey(key)
            except ValidationError as e:
                raise InvalidKeyError(f"Invalid public key: {e}") from e
        else:
            raise InvalidKeyError(f"Invalid public key type: {type(key)}")

    @classmethod
    def recover_from_msg_hash(cls, msg_hash: bytes, signature: "Signature") -> "PublicKey":
        """
        Recover public key from signature.

        Raises:
            MalformedSignature: If no public key can be recovered
        """
        try:
            recovered = signature._signature.recover_public_key_from_msg_hash(msg_hash)
        except (BadSignature, ValidationError) as e:
            raise MalformedSignature(f"Cannot recover public key: {e}") from e
        return cls(recovered)

    def to_bytes(self) -> bytes:
        return self._key.to_bytes()

    def to_hex(self, with_prefix: bool = True) -> str:
        hex_str = self.to_bytes().hex()
        return f"0x{hex_str}" if with_prefix else hex_str

    def to_address(self) -> str:
        """Derive the checksum address of this key."""
        from .address import public_key_to_address
        return public_key_to_address(self)

    def __repr__(self) -> str:
        return f"PublicKey({self.to_hex()[:18]}...)"

    def __eq__(self, other) -> bool:
        if not isinstance(other, PublicKey):
            return False
        return self._key == other._key

    def __hash__(self) -> int:
        return hash(self._key.to_bytes())


class Signature:
    """
    Recoverable ECDSA signature (v, r, s).

    The wire form is 65 bytes, ``r[32] || s[32] || v[1]`` with ``v`` in
    {27, 28}, which is what Solidity's ``ECDSA.recover`` consumes.
    """

    def __init__(self, signature: EthSignature):
        self._signature = signature

    @classmethod
    def from_vrs(cls, v: int, r: int, s: int) -> "Signature":
        """
        Create from v, r, s components.

        Raises:
            MalformedSignature: On an unknown recovery id, an out-of-range
                component, or a high-s (malleable) value
        """
        if v in (27, 28):
            v -= 27
        if v not in (0, 1):
            raise MalformedSignature(f"Invalid recovery id: {v}")
        if r >= SECP256K1_N:
            raise MalformedSignature("Signature r value is out of range")
        if s > SECP256K1_HALF_N:
            raise MalformedSignature("Signature s value is not in the lower half order")
        try:
            eth_sig = EthSignature(vrs=(v, r, s))
        except (BadSignature, ValidationError) as e:
            raise MalformedSignature(f"Invalid signature components: {e}") from e
        return cls(eth_sig)

    @classmethod
    def from_bytes(cls, sig_bytes: bytes) -> "Signature":
        """
        Create from a 65-byte signature (r[32] + s[32] + v[1]).

        Raises:
            MalformedSignature: If the input is not exactly 65 bytes
        """
        if not isinstance(sig_bytes, (bytes, bytearray)):
            raise MalformedSignature(f"Signature must be bytes, got {type(sig_bytes).__name__}")
        if len(sig_bytes) != SIGNATURE_LENGTH:
            raise MalformedSignature(
                f"Signature must be {SIGNATURE_LENGTH} bytes, got {len(sig_bytes)}"
            )

        r = int.from_bytes(sig_bytes[0:32], byteorder='big')
        s = int.from_bytes(sig_bytes[32:64], byteorder='big')
        v = sig_bytes[64]

        return cls.from_vrs(v, r, s)

    @classmethod
    def from_hex(cls, hex_str: str) -> "Signature":
        try:
            sig_bytes = decode_hex(hex_str)
        except ValueError as e:
            raise MalformedSignature(f"Signature is not valid hex: {e}") from e
        return cls.from_bytes(sig_bytes)

    @property
    def v(self) -> int:
        """Recovery parameter (0 or 1)."""
        return self._signature.v

    @property
    def r(self) -> int:
        return self._signature.r

    @property
    def s(self) -> int:
        return self._signature.s

    @property
    def vrs(self) -> Tuple[int, int, int]:
        return (self.v, self.r, self.s)

    def to_bytes(self) -> bytes:
        """Get 65-byte signature (r + s + v) with v in {27, 28}."""
        r_bytes = self.r.to_bytes(32, byteorder='big')
        s_bytes = self.s.to_bytes(32, byteorder='big')
        return r_bytes + s_bytes + bytes([self.v + 27])

    def to_hex(self, with_prefix: bool = True) -> str:
        hex_str = self.to_bytes().hex()
        return f"0x{hex_str}" if with_prefix else hex_str

    def __eq__(self, other) -> bool:
        if not isinstance(other, Signature):
            return False
        return self.vrs == other.vrs

    def __hash__(self) -> int:
        return hash(self.vrs)

    def __repr__(self) -> str:
        return f"Signature(v={self.v}, r={hex(self.r)[:10]}..., s={hex(self.s)[:10]}...)"

