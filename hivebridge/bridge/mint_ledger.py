"""
Mint-uniqueness ledger.

A Hive operation is identified by its transaction id and its index inside
that transaction. Each pair may produce at most one mint, ever.
"""

from typing import Set, Tuple

from ..constants import UINT32_MAX
from ..exceptions import AlreadyMinted

MintKey = Tuple[str, int]


class MintLedger:
    """Write-once set of consumed ``(trx_id, op_in_trx)`` pairs."""

    def __init__(self):
        self._minted: Set[MintKey] = set()

    def is_minted(self, trx_id: str, op_in_trx: int) -> bool:
        return (trx_id, op_in_trx) in self._minted

    def check(self, trx_id: str, op_in_trx: int) -> None:
        """
        Raises:
            AlreadyMinted: If the pair has already been consumed
        """
        if self.is_minted(trx_id, op_in_trx):
            raise AlreadyMinted(f"Already minted for {trx_id}:{op_in_trx}")

    def record(self, trx_id: str, op_in_trx: int) -> None:
        """Consume the pair. Call only after :meth:`check` under the same lock."""
        if not 0 <= op_in_trx <= UINT32_MAX:
            raise ValueError(f"op_in_trx out of range: {op_in_trx}")
        self.check(trx_id, op_in_trx)
        self._minted.add((trx_id, op_in_trx))

    def __len__(self) -> int:
        return len(self._minted)

    def __repr__(self) -> str:
        return f"<MintLedger records={len(self._minted)}>"
