"""
Signer registry.

The authoritative set of committee addresses and their Hive usernames.
A username is present exactly when its address is registered, so the label
map doubles as the membership predicate; the backing list only exists to
enumerate signers and is compacted with swap-and-pop on removal.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..constants import MAX_USERNAME_LENGTH, MIN_USERNAME_LENGTH
from ..crypto.address import is_zero_address, to_checksum_address
from ..exceptions import (
    InvalidThreshold,
    InvalidUsername,
    SignerAlreadyExists,
    SignerDoesNotExist,
    ZeroIdentity,
)


def validate_username(username: str) -> str:
    """
    Check a Hive username is 3 to 16 characters.

    Raises:
        InvalidUsername: On a non-string or out-of-range length
    """
    if not isinstance(username, str):
        raise InvalidUsername(f"Username must be a string, got {type(username).__name__}")
    if not MIN_USERNAME_LENGTH <= len(username) <= MAX_USERNAME_LENGTH:
        raise InvalidUsername(
            f"Username length must be {MIN_USERNAME_LENGTH}-{MAX_USERNAME_LENGTH}, "
            f"got {len(username)}"
        )
    return username


@dataclass(frozen=True)
class SignerInfo:
    """A registered committee member."""
    address: str
    username: str

    def to_dict(self) -> Dict[str, Any]:
        return {"addr": self.address, "username": self.username}


class SignerRegistry:
    """
    Unique, never-empty set of authorized signer addresses.

    Invariant: ``address in self._usernames`` iff ``address in self._signers``.
    """

    def __init__(self):
        self._signers: List[str] = []
        self._usernames: Dict[str, str] = {}

    # ── Queries ───────────────────────────────────────────────────────

    def is_signer(self, address: str) -> bool:
        return bool(self._usernames.get(to_checksum_address(address)))

    def username_of(self, address: str) -> Optional[str]:
        return self._usernames.get(to_checksum_address(address))

    def all(self) -> List[SignerInfo]:
        """Snapshot of registered signers; order is not stable across removals."""
        return [SignerInfo(addr, self._usernames[addr]) for addr in self._signers]

    def __len__(self) -> int:
        return len(self._signers)

    def __contains__(self, address: str) -> bool:
        return self.is_signer(address)

    # ── Mutation ──────────────────────────────────────────────────────

    def add(self, address: str, username: str) -> SignerInfo:
        """
        Register a new signer.

        Raises:
            ZeroIdentity: If *address* is the zero address
            InvalidUsername: If *username* is not 3-16 characters
            SignerAlreadyExists: If *address* is already registered
        """
        address = to_checksum_address(address)
        if is_zero_address(address):
            raise ZeroIdentity("Signer cannot be the zero address")
        validate_username(username)
        if self.is_signer(address):
            raise SignerAlreadyExists(f"{address} is already a signer")

        self._signers.append(address)
        self._usernames[address] = username
        return SignerInfo(address, username)

    def remove(self, address: str, threshold: int) -> SignerInfo:
        """
        Unregister a signer.

        Raises:
            SignerDoesNotExist: If *address* is not registered
            InvalidThreshold: If the remaining signers would be fewer than
                *threshold*
        """
        address = to_checksum_address(address)
        if not self.is_signer(address):
            raise SignerDoesNotExist(f"{address} is not a signer")
        if len(self._signers) - 1 < threshold:
            raise InvalidThreshold(
                f"Removing {address} leaves {len(self._signers) - 1} signers, "
                f"below threshold {threshold}"
            )

        username = self._usernames.pop(address)
        index = self._signers.index(address)
        self._signers[index] = self._signers[-1]
        self._signers.pop()
        return SignerInfo(address, username)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": len(self._signers),
            "signers": [s.to_dict() for s in self.all()],
        }

    def __repr__(self) -> str:
        return f"<SignerRegistry signers={len(self._signers)}>"
