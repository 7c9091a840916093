"""
Reference fungible-balance ledger.

The bridge core only consumes ``credit`` and ``debit``; this in-memory
implementation provides them, together with plain transfers and supply
tracking, so the core runs end to end. Amounts are integers in the token's
smallest unit (HIVE has 3 decimals, so 1.000 HIVE is ``1000``).
"""

from typing import Any, Callable, Dict, Optional

from ..constants import TOKEN_DECIMALS, TOKEN_NAME, TOKEN_SYMBOL, UINT256_MAX, ZERO_ADDRESS
from ..crypto.address import to_checksum_address
from ..exceptions import HiveBridgeException, InsufficientBalance, MustBeNonZero
from ..logger import get_logger
from .events import EventSink, TransferEvent

logger = get_logger(__name__)


class BalanceLedger:
    """
    ERC-20 style balance store.

    Args:
        name: Token name
        symbol: Token ticker
        decimals: Fractional digits
        sink: Optional sink receiving ``Transfer`` events
        guard: Optional callable run before every transfer; raising from it
            blocks the transfer (used by the pause gate)
    """

    def __init__(
        self,
        name: str = TOKEN_NAME,
        symbol: str = TOKEN_SYMBOL,
        decimals: int = TOKEN_DECIMALS,
        sink: Optional[EventSink] = None,
        guard: Optional[Callable[[], None]] = None,
    ):
        if not name:
            raise HiveBridgeException("Token name cannot be empty")
        if not symbol:
            raise HiveBridgeException("Token symbol cannot be empty")
        if decimals < 0 or decimals > 18:
            raise HiveBridgeException(f"Decimals must be 0-18, got {decimals}")

        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self._total_supply = 0
        self._balances: Dict[str, int] = {}
        self._sink = sink
        self._guard = guard

    # ── Read-only views ───────────────────────────────────────────────

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, address: str) -> int:
        return self._balances.get(to_checksum_address(address), 0)

    # ── Collaborator interface ────────────────────────────────────────

    def credit(self, address: str, amount: int) -> None:
        """Mint *amount* to *address*."""
        address = to_checksum_address(address)
        self._require_amount(amount)
        if self._total_supply + amount > UINT256_MAX:
            raise HiveBridgeException("Mint would overflow total supply")

        self._total_supply += amount
        self._balances[address] = self._balances.get(address, 0) + amount
        self._emit(TransferEvent(ZERO_ADDRESS, address, amount))

    def debit(self, address: str, amount: int) -> None:
        """
        Burn *amount* from *address*.

        Raises:
            InsufficientBalance: If the balance is lower than *amount*
        """
        address = to_checksum_address(address)
        self._require_amount(amount)
        bal = self._balances.get(address, 0)
        if bal < amount:
            raise InsufficientBalance(f"{address} balance {bal} < burn amount {amount}")

        self._balances[address] = bal - amount
        self._total_supply -= amount
        self._emit(TransferEvent(address, ZERO_ADDRESS, amount))

    # ── Transfers ─────────────────────────────────────────────────────

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        """
        Move *amount* from *sender* to *recipient*.

        Raises:
            InsufficientBalance: If the sender balance is too low
        """
        if self._guard is not None:
            self._guard()

        sender = to_checksum_address(sender)
        recipient = to_checksum_address(recipient)
        if recipient == ZERO_ADDRESS:
            raise HiveBridgeException("Cannot transfer to the zero address")
        self._require_amount(amount, allow_zero=True)

        bal = self._balances.get(sender, 0)
        if bal < amount:
            raise InsufficientBalance(f"{sender} balance {bal} < transfer amount {amount}")

        self._balances[sender] = bal - amount
        self._balances[recipient] = self._balances.get(recipient, 0) + amount
        self._emit(TransferEvent(sender, recipient, amount))
        logger.debug(f"Transfer: {sender} -> {recipient} {amount} {self.symbol}")

    def set_guard(self, guard: Optional[Callable[[], None]]) -> None:
        """Install the check run before every transfer."""
        self._guard = guard

    # ── Helpers ───────────────────────────────────────────────────────

    @staticmethod
    def _require_amount(amount: int, allow_zero: bool = False) -> None:
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise TypeError(f"Amount must be an integer, got {type(amount).__name__}")
        if amount < 0 or amount > UINT256_MAX:
            raise ValueError(f"Amount out of range: {amount}")
        if amount == 0 and not allow_zero:
            raise MustBeNonZero("Amount must be non-zero")

    def _emit(self, event: TransferEvent) -> None:
        if self._sink is not None:
            self._sink.emit(event)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "symbol": self.symbol,
            "decimals": self.decimals,
            "totalSupply": str(self._total_supply),
            "holders": len([b for b in self._balances.values() if b > 0]),
        }

    def __repr__(self) -> str:
        return f"<BalanceLedger {self.symbol} supply={self._total_supply}>"
