"""
HiveBridge committee multisig: signer registry, threshold policy, nonces,
canonical messages, and the threshold-signature validator.
"""

from .messages import MessageDomain, pack_message
from .nonces import NonceLedger, OperationKind
from .registry import SignerInfo, SignerRegistry, validate_username
from .threshold import ThresholdPolicy
from .validator import MultisigValidator

__all__ = [
    "MessageDomain",
    "pack_message",
    "NonceLedger",
    "OperationKind",
    "SignerInfo",
    "SignerRegistry",
    "validate_username",
    "ThresholdPolicy",
    "MultisigValidator",
]
