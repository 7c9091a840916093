"""
HiveBridge bridge module: the governed Wrapped HIVE state machine, its
mint-uniqueness ledger, pause gate, reference balance ledger, and events.
"""

from .events import (
    BridgeEvent,
    EventLog,
    EventSink,
    MultisigThresholdUpdatedEvent,
    PausedEvent,
    SignerAddedEvent,
    SignerRemovedEvent,
    TransferEvent,
    UnpausedEvent,
    UnwrapEvent,
    WrapEvent,
)
from .ledger import BalanceLedger
from .mint_ledger import MintLedger
from .pause import PauseGate
from .wrapped import WrappedHive

__all__ = [
    "BridgeEvent",
    "EventLog",
    "EventSink",
    "MultisigThresholdUpdatedEvent",
    "PausedEvent",
    "SignerAddedEvent",
    "SignerRemovedEvent",
    "TransferEvent",
    "UnpausedEvent",
    "UnwrapEvent",
    "WrapEvent",
    "BalanceLedger",
    "MintLedger",
    "PauseGate",
    "WrappedHive",
]
