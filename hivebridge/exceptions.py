"""
HiveBridge Exceptions

Custom exception classes for the wrapped-HIVE bridge core.

Every governed operation either commits entirely or raises one of these;
none of them are retried internally.
"""


class HiveBridgeException(Exception):
    """Base exception for HiveBridge."""
    pass


# ── Cryptography ──────────────────────────────────────────────────────

class InvalidKeyError(HiveBridgeException):
    """Invalid cryptographic key."""
    pass


class InvalidAddressError(HiveBridgeException):
    """Invalid address format."""
    pass


class MalformedSignature(HiveBridgeException):
    """Signature is not a recoverable 65-byte ECDSA signature."""
    pass


# ── Multisig validation ───────────────────────────────────────────────

class MultisigError(HiveBridgeException):
    """Base class for threshold-signature rejections."""
    pass


class NotEnoughSignatures(MultisigError):
    """Fewer signatures supplied than the current threshold."""
    pass


class TooManySignatures(MultisigError):
    """More signatures supplied than there are registered signers."""
    pass


class InvalidSignatures(MultisigError):
    """Signatures did not yield enough distinct registered signers."""
    pass


# ── Signer registry / threshold ───────────────────────────────────────

class RegistryError(HiveBridgeException):
    """Signer registry mutation conflict."""
    pass


class SignerAlreadyExists(RegistryError):
    """Address is already a registered signer."""
    pass


class SignerDoesNotExist(RegistryError):
    """Address is not a registered signer."""
    pass


class ZeroIdentity(RegistryError):
    """The zero address cannot be a signer."""
    pass


class InvalidThreshold(HiveBridgeException):
    """Threshold is zero, unchanged, or exceeds the signer count."""
    pass


class InvalidUsername(HiveBridgeException):
    """Username length is outside the allowed range."""
    pass


# ── Bridge ────────────────────────────────────────────────────────────

class AlreadyMinted(HiveBridgeException):
    """The (trx_id, op_in_trx) pair has already produced a mint."""
    pass


class MustBeNonZero(HiveBridgeException):
    """Amount must be greater than zero."""
    pass


class InsufficientBalance(HiveBridgeException):
    """Account balance is lower than the requested debit."""
    pass


class PauseError(HiveBridgeException):
    """Operation is not allowed in the current pause state."""
    pass


class EnforcedPause(PauseError):
    """Operation attempted while the bridge is paused."""
    pass


class ExpectedPause(PauseError):
    """Unpause attempted while the bridge is not paused."""
    pass


class ConfigurationError(HiveBridgeException):
    """Configuration error."""
    pass
