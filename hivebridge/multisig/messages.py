"""
Canonical governed-operation messages.

Every governed operation is authorized by signatures over the Keccak-256
digest of a message packed exactly like Solidity's ``abi.encodePacked``:

    "wrap";caller;amount;trx_id;op_in_trx;contract[;chain_id]
    "addSigner";addr;username;nonce;contract[;chain_id]
    "removeSigner";addr;nonce;contract[;chain_id]
    "updateMultisigThreshold";new_threshold;nonce;contract[;chain_id]
    "pause";nonce;contract[;chain_id]
    "unpause";nonce;contract[;chain_id]

Strings are packed as raw UTF-8, addresses as 20 raw bytes, ``uint256`` as
32 big-endian bytes, ``uint32`` as 4 and ``uint8`` as 1. The ``;`` delimiter
sits between every pair of fields. The trailing chain id is present only
when the domain carries one.
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from eth_abi.packed import encode_packed

from ..constants import (
    FIELD_DELIMITER,
    OP_ADD_SIGNER,
    OP_PAUSE,
    OP_REMOVE_SIGNER,
    OP_UNPAUSE,
    OP_UPDATE_THRESHOLD,
    OP_WRAP,
    UINT8_MAX,
    UINT32_MAX,
    UINT256_MAX,
)
from ..crypto.address import to_checksum_address
from ..crypto.hashing import keccak256

Field = Tuple[str, Any]


def _require_uint(name: str, value: int, maximum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    if value < 0 or value > maximum:
        raise ValueError(f"{name} out of range [0, {maximum}]: {value}")
    return value


def _require_str(name: str, value: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string, got {type(value).__name__}")
    return value


def pack_message(tag: str, fields: Sequence[Field]) -> bytes:
    """
    Pack ``tag`` and typed ``fields`` with the delimiter between each pair.

    Args:
        tag: Operation name, packed as a string
        fields: ``(abi_type, value)`` pairs in declared order
    """
    types: List[str] = ["string"]
    values: List[Any] = [tag]
    for abi_type, value in fields:
        types.extend(["string", abi_type])
        values.extend([FIELD_DELIMITER, value])
    return encode_packed(types, values)


@dataclass(frozen=True)
class MessageDomain:
    """
    The identity a signed message is bound to.

    Attributes:
        contract: Address of the bridge instance the signatures are for
        chain_id: Optional EVM chain id appended after the contract address
    """
    contract: str
    chain_id: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "contract", to_checksum_address(self.contract))
        if self.chain_id is not None:
            _require_uint("chain_id", self.chain_id, UINT256_MAX)

    def _trailer(self) -> List[Field]:
        trailer: List[Field] = [("address", self.contract)]
        if self.chain_id is not None:
            trailer.append(("uint256", self.chain_id))
        return trailer

    # ── Messages ──────────────────────────────────────────────────────

    def wrap_message(self, caller: str, amount: int, trx_id: str, op_in_trx: int) -> bytes:
        return pack_message(OP_WRAP, [
            ("address", to_checksum_address(caller)),
            ("uint256", _require_uint("amount", amount, UINT256_MAX)),
            ("string", _require_str("trx_id", trx_id)),
            ("uint32", _require_uint("op_in_trx", op_in_trx, UINT32_MAX)),
        ] + self._trailer())

    def add_signer_message(self, address: str, username: str, nonce: int) -> bytes:
        return pack_message(OP_ADD_SIGNER, [
            ("address", to_checksum_address(address)),
            ("string", _require_str("username", username)),
            ("uint256", _require_uint("nonce", nonce, UINT256_MAX)),
        ] + self._trailer())

    def remove_signer_message(self, address: str, nonce: int) -> bytes:
        return pack_message(OP_REMOVE_SIGNER, [
            ("address", to_checksum_address(address)),
            ("uint256", _require_uint("nonce", nonce, UINT256_MAX)),
        ] + self._trailer())

    def update_threshold_message(self, new_threshold: int, nonce: int) -> bytes:
        return pack_message(OP_UPDATE_THRESHOLD, [
            ("uint8", _require_uint("new_threshold", new_threshold, UINT8_MAX)),
            ("uint256", _require_uint("nonce", nonce, UINT256_MAX)),
        ] + self._trailer())

    def pause_message(self, nonce: int) -> bytes:
        return pack_message(OP_PAUSE, [
            ("uint256", _require_uint("nonce", nonce, UINT256_MAX)),
        ] + self._trailer())

    def unpause_message(self, nonce: int) -> bytes:
        return pack_message(OP_UNPAUSE, [
            ("uint256", _require_uint("nonce", nonce, UINT256_MAX)),
        ] + self._trailer())

    # ── Digests ───────────────────────────────────────────────────────

    def wrap_digest(self, caller: str, amount: int, trx_id: str, op_in_trx: int) -> bytes:
        return keccak256(self.wrap_message(caller, amount, trx_id, op_in_trx))

    def add_signer_digest(self, address: str, username: str, nonce: int) -> bytes:
        return keccak256(self.add_signer_message(address, username, nonce))

    def remove_signer_digest(self, address: str, nonce: int) -> bytes:
        return keccak256(self.remove_signer_message(address, nonce))

    def update_threshold_digest(self, new_threshold: int, nonce: int) -> bytes:
        return keccak256(self.update_threshold_message(new_threshold, nonce))

    def pause_digest(self, nonce: int) -> bytes:
        return keccak256(self.pause_message(nonce))

    def unpause_digest(self, nonce: int) -> bytes:
        return keccak256(self.unpause_message(nonce))
