"""
Bridge notification events and sinks.

Events are the only hand-off to off-chain observers (bridge-node indexers).
In particular ``Unwrap`` carries the Hive username that the return leg pays
out to, so downstream consumers treat each emitted event as authoritative.
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..logger import get_logger

logger = get_logger(__name__)


# ══════════════════════════════════════════════════════════════════════
#  EVENTS
# ══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class BridgeEvent:
    """Base class for every notification emitted by the bridge core."""

    @property
    def kind(self) -> str:
        return type(self).__name__.replace("Event", "")

    def fields(self) -> Dict[str, Any]:
        raise NotImplementedError

    def to_dict(self) -> Dict[str, Any]:
        return {"event": self.kind, **self.fields()}


@dataclass(frozen=True)
class TransferEvent(BridgeEvent):
    """Balance moved; ``sender`` is the zero address on mint, ``recipient`` on burn."""
    sender: str
    recipient: str
    amount: int
    timestamp: float = field(default_factory=time.time, compare=False)

    def fields(self) -> Dict[str, Any]:
        return {"from": self.sender, "to": self.recipient, "value": str(self.amount)}


@dataclass(frozen=True)
class WrapEvent(BridgeEvent):
    """HIVE locked on the source chain was minted as wrapped tokens."""
    recipient: str
    amount: int
    trx_id: str
    op_in_trx: int
    timestamp: float = field(default_factory=time.time, compare=False)

    def fields(self) -> Dict[str, Any]:
        return {
            "to": self.recipient,
            "amount": str(self.amount),
            "trxId": self.trx_id,
            "opInTrx": self.op_in_trx,
        }


@dataclass(frozen=True)
class UnwrapEvent(BridgeEvent):
    """Wrapped tokens burnt; the bridge pays ``username`` on Hive."""
    sender: str
    amount: int
    username: str
    timestamp: float = field(default_factory=time.time, compare=False)

    def fields(self) -> Dict[str, Any]:
        return {"from": self.sender, "amount": str(self.amount), "username": self.username}


@dataclass(frozen=True)
class SignerAddedEvent(BridgeEvent):
    address: str
    username: str
    timestamp: float = field(default_factory=time.time, compare=False)

    def fields(self) -> Dict[str, Any]:
        return {"addr": self.address, "username": self.username}


@dataclass(frozen=True)
class SignerRemovedEvent(BridgeEvent):
    address: str
    username: str
    timestamp: float = field(default_factory=time.time, compare=False)

    def fields(self) -> Dict[str, Any]:
        return {"addr": self.address, "username": self.username}


@dataclass(frozen=True)
class MultisigThresholdUpdatedEvent(BridgeEvent):
    old_threshold: int
    new_threshold: int
    timestamp: float = field(default_factory=time.time, compare=False)

    def fields(self) -> Dict[str, Any]:
        return {"oldThreshold": self.old_threshold, "newThreshold": self.new_threshold}


@dataclass(frozen=True)
class PausedEvent(BridgeEvent):
    timestamp: float = field(default_factory=time.time, compare=False)

    def fields(self) -> Dict[str, Any]:
        return {}


@dataclass(frozen=True)
class UnpausedEvent(BridgeEvent):
    timestamp: float = field(default_factory=time.time, compare=False)

    def fields(self) -> Dict[str, Any]:
        return {}


# ══════════════════════════════════════════════════════════════════════
#  SINKS
# ══════════════════════════════════════════════════════════════════════

class EventSink:
    """Interface for event transports."""

    def emit(self, event: BridgeEvent) -> None:
        raise NotImplementedError


class EventLog(EventSink):
    """
    In-memory append-only event sink.

    Safe to share between threads; events are kept in emission order.
    """

    def __init__(self):
        self._events: List[BridgeEvent] = []
        self._lock = threading.Lock()

    def emit(self, event: BridgeEvent) -> None:
        with self._lock:
            self._events.append(event)
        logger.debug(f"Event {event.kind}: {event.fields()}")

    @property
    def events(self) -> List[BridgeEvent]:
        with self._lock:
            return list(self._events)

    def of_kind(self, kind: str) -> List[BridgeEvent]:
        return [e for e in self.events if e.kind == kind]

    def last(self, kind: Optional[str] = None) -> Optional[BridgeEvent]:
        events = self.events if kind is None else self.of_kind(kind)
        return events[-1] if events else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
