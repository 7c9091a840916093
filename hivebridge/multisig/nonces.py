"""
Per-operation replay-defense counters.

Each governed operation kind owns one counter. The counter's current value is
embedded in the message the committee signs, so a signature set is usable
for exactly one successful call of that kind.
"""

from enum import Enum
from typing import Dict

from ..constants import (
    OP_ADD_SIGNER,
    OP_PAUSE,
    OP_REMOVE_SIGNER,
    OP_UNPAUSE,
    OP_UPDATE_THRESHOLD,
)


class OperationKind(str, Enum):
    """Governed operations that carry a nonce."""
    ADD_SIGNER       = OP_ADD_SIGNER
    REMOVE_SIGNER    = OP_REMOVE_SIGNER
    UPDATE_THRESHOLD = OP_UPDATE_THRESHOLD
    PAUSE            = OP_PAUSE
    UNPAUSE          = OP_UNPAUSE


class NonceLedger:
    """
    Five independent, monotonically increasing counters.

    Counters start at zero and only move forward, by one, through
    :meth:`advance`.
    """

    def __init__(self):
        self._nonces: Dict[OperationKind, int] = {kind: 0 for kind in OperationKind}

    def current(self, kind: OperationKind) -> int:
        return self._nonces[OperationKind(kind)]

    def advance(self, kind: OperationKind) -> int:
        """Increment the counter for *kind* and return the new value."""
        kind = OperationKind(kind)
        self._nonces[kind] += 1
        return self._nonces[kind]

    def snapshot(self) -> Dict[str, int]:
        return {kind.value: value for kind, value in self._nonces.items()}

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}={v}" for k, v in self.snapshot().items())
        return f"<NonceLedger {inner}>"
