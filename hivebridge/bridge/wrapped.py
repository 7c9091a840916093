"""
Wrapped HIVE governed bridge state machine.

Owns the committee (signer registry + threshold), the per-operation nonces,
the mint-uniqueness ledger and the pause gate, and drives the reference
balance ledger through ``credit`` / ``debit``.

Every governed operation follows the same template:

  1. pause precondition
  2. canonical message -> Keccak-256 digest (nonce and contract bound in)
  3. multisig validation of the caller-supplied signatures
  4. argument validation
  5. state effect, then the matching nonce advances exactly once
  6. notification event

All entry points run under one lock, so the read-nonce / validate / mutate /
advance sequence is atomic and concurrent ``wrap`` calls for the same Hive
operation produce exactly one mint.

Known risk: raising the threshold above the number of signers that are still
operated leaves the committee unable to authorize anything, including a
threshold decrease. Nothing here recovers from that.
"""

import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence

from ..constants import INITIAL_THRESHOLD, TOKEN_DECIMALS, TOKEN_NAME, TOKEN_SYMBOL
from ..crypto.address import to_checksum_address
from ..crypto.signing import recover_signer
from ..exceptions import ConfigurationError, HiveBridgeException, InvalidUsername, MustBeNonZero
from ..logger import get_logger
from ..multisig.messages import MessageDomain
from ..multisig.nonces import NonceLedger, OperationKind
from ..multisig.registry import SignerInfo, SignerRegistry, validate_username
from ..multisig.threshold import ThresholdPolicy
from ..multisig.validator import MultisigValidator, RecoverFn
from .events import (
    BridgeEvent,
    EventLog,
    EventSink,
    MultisigThresholdUpdatedEvent,
    PausedEvent,
    SignerAddedEvent,
    SignerRemovedEvent,
    UnpausedEvent,
    UnwrapEvent,
    WrapEvent,
)
from .ledger import BalanceLedger
from .mint_ledger import MintLedger
from .pause import PauseGate

logger = get_logger(__name__)


class WrappedHive:
    """
    Governance and validation core of the HIVE <-> ERC-20 bridge.

    Args:
        initial_signer: Address of the first committee member
        initial_username: Hive username of the first committee member
        contract_address: Persistent identity bound into every signed message
        name: Token name
        symbol: Token ticker
        decimals: Token decimals
        chain_id: Optional chain id appended to every signed message
        sink: Event sink (defaults to an in-memory :class:`EventLog`)
        ledger: Balance ledger (defaults to an in-memory :class:`BalanceLedger`)
        recover: Signature recovery function, mostly for tests
    """

    def __init__(
        self,
        initial_signer: str,
        initial_username: str,
        contract_address: str,
        name: str = TOKEN_NAME,
        symbol: str = TOKEN_SYMBOL,
        decimals: int = TOKEN_DECIMALS,
        *,
        chain_id: Optional[int] = None,
        sink: Optional[EventSink] = None,
        ledger: Optional[BalanceLedger] = None,
        recover: RecoverFn = recover_signer,
    ):
        self._lock = threading.Lock()
        self._domain = MessageDomain(contract_address, chain_id)
        self._sink = sink if sink is not None else EventLog()

        self._registry = SignerRegistry()
        self._threshold = ThresholdPolicy(INITIAL_THRESHOLD)
        self._nonces = NonceLedger()
        self._minted = MintLedger()
        self._pause = PauseGate()
        self._validator = MultisigValidator(self._registry, self._threshold, recover)

        if ledger is None:
            ledger = BalanceLedger(name, symbol, decimals, sink=self._sink)
        self._ledger = ledger
        self._ledger.set_guard(self._pause.require_not_paused)

        info = self._registry.add(initial_signer, initial_username)
        self._emit(SignerAddedEvent(info.address, info.username))
        logger.info(
            f"{self._ledger.symbol} bridge initialized at {self._domain.contract} "
            f"with signer {info.address} ({info.username})"
        )

    @classmethod
    def from_config(cls, config, **kwargs) -> "WrappedHive":
        """
        Build an instance from a loaded :class:`~hivebridge.config.BridgeConfig`.

        Raises:
            ConfigurationError: If the committee section is incomplete
        """
        committee = config.committee
        if not committee.contract_address:
            raise ConfigurationError("committee.contract_address is required")
        if not committee.initial_signer:
            raise ConfigurationError("committee.initial_signer is required")
        return cls(
            committee.initial_signer,
            committee.initial_username,
            committee.contract_address,
            name=config.token.name,
            symbol=config.token.symbol,
            decimals=config.token.decimals,
            chain_id=committee.chain_id,
            **kwargs,
        )

    # ── Read-only views ───────────────────────────────────────────────

    @property
    def contract_address(self) -> str:
        return self._domain.contract

    @property
    def chain_id(self) -> Optional[int]:
        return self._domain.chain_id

    @property
    def domain(self) -> MessageDomain:
        return self._domain

    @property
    def name(self) -> str:
        return self._ledger.name

    @property
    def symbol(self) -> str:
        return self._ledger.symbol

    @property
    def decimals(self) -> int:
        return self._ledger.decimals

    @property
    def total_supply(self) -> int:
        return self._ledger.total_supply

    def balance_of(self, address: str) -> int:
        return self._ledger.balance_of(address)

    @property
    def multisig_threshold(self) -> int:
        return self._threshold.get()

    @property
    def paused(self) -> bool:
        return self._pause.paused

    @property
    def nonce_add_signer(self) -> int:
        return self._nonces.current(OperationKind.ADD_SIGNER)

    @property
    def nonce_remove_signer(self) -> int:
        return self._nonces.current(OperationKind.REMOVE_SIGNER)

    @property
    def nonce_update_threshold(self) -> int:
        return self._nonces.current(OperationKind.UPDATE_THRESHOLD)

    @property
    def nonce_pause(self) -> int:
        return self._nonces.current(OperationKind.PAUSE)

    @property
    def nonce_unpause(self) -> int:
        return self._nonces.current(OperationKind.UNPAUSE)

    def nonces(self) -> Dict[str, int]:
        return self._nonces.snapshot()

    def get_all_signers(self) -> List[SignerInfo]:
        return self._registry.all()

    def is_signer(self, address: str) -> bool:
        return self._registry.is_signer(address)

    def is_minted(self, trx_id: str, op_in_trx: int) -> bool:
        return self._minted.is_minted(trx_id, op_in_trx)

    @property
    def sink(self) -> EventSink:
        return self._sink

    # ── Governed operations ───────────────────────────────────────────

    def wrap(
        self,
        caller: str,
        amount: int,
        trx_id: str,
        op_in_trx: int,
        signatures: Sequence[bytes],
    ) -> WrapEvent:
        """
        Mint *amount* to *caller* for the Hive operation ``(trx_id, op_in_trx)``.

        Raises:
            EnforcedPause, MultisigError, MalformedSignature, MustBeNonZero,
            AlreadyMinted
        """
        with self._governed("wrap"):
            self._pause.require_not_paused()
            caller = to_checksum_address(caller)
            digest = self._domain.wrap_digest(caller, amount, trx_id, op_in_trx)
            self._validator.validate(digest, signatures)

            if amount == 0:
                raise MustBeNonZero("Wrap amount must be non-zero")
            self._minted.check(trx_id, op_in_trx)

            self._ledger.credit(caller, amount)
            self._minted.record(trx_id, op_in_trx)

            event = WrapEvent(caller, amount, trx_id, op_in_trx)
            self._emit(event)
            logger.info(f"wrap: {amount} {self.symbol} -> {caller} (trx={trx_id}, op={op_in_trx})")
            return event

    def unwrap(self, caller: str, amount: int, username: str) -> UnwrapEvent:
        """
        Burn *amount* from *caller* and request payout to Hive *username*.

        Needs no committee signatures and carries no replay guard: a repeated
        call burns again, bounded only by the caller's balance.

        Raises:
            EnforcedPause, InvalidUsername, MustBeNonZero, InsufficientBalance
        """
        with self._governed("unwrap"):
            self._pause.require_not_paused()
            caller = to_checksum_address(caller)
            validate_username(username)
            if amount == 0:
                raise MustBeNonZero("Unwrap amount must be non-zero")

            self._ledger.debit(caller, amount)

            event = UnwrapEvent(caller, amount, username)
            self._emit(event)
            logger.info(f"unwrap: {caller} burned {amount} {self.symbol} -> @{username}")
            return event

    def add_signer(self, address: str, username: str, signatures: Sequence[bytes]) -> SignerInfo:
        """
        Register *address* as a committee member.

        Raises:
            EnforcedPause, MultisigError, MalformedSignature, ZeroIdentity,
            InvalidUsername, SignerAlreadyExists
        """
        with self._governed("addSigner"):
            self._pause.require_not_paused()
            if not isinstance(username, str):
                raise InvalidUsername(f"Username must be a string, got {type(username).__name__}")
            nonce = self._nonces.current(OperationKind.ADD_SIGNER)
            digest = self._domain.add_signer_digest(address, username, nonce)
            self._validator.validate(digest, signatures)

            info = self._registry.add(address, username)
            self._nonces.advance(OperationKind.ADD_SIGNER)

            self._emit(SignerAddedEvent(info.address, info.username))
            logger.info(f"addSigner: {info.address} ({info.username}), signers={len(self._registry)}")
            return info

    def remove_signer(self, address: str, signatures: Sequence[bytes]) -> SignerInfo:
        """
        Unregister *address*.

        Raises:
            EnforcedPause, MultisigError, MalformedSignature,
            SignerDoesNotExist, InvalidThreshold
        """
        with self._governed("removeSigner"):
            self._pause.require_not_paused()
            nonce = self._nonces.current(OperationKind.REMOVE_SIGNER)
            digest = self._domain.remove_signer_digest(address, nonce)
            self._validator.validate(digest, signatures)

            info = self._registry.remove(address, self._threshold.get())
            self._nonces.advance(OperationKind.REMOVE_SIGNER)

            self._emit(SignerRemovedEvent(info.address, info.username))
            logger.info(f"removeSigner: {info.address} ({info.username}), signers={len(self._registry)}")
            return info

    def update_multisig_threshold(self, new_threshold: int, signatures: Sequence[bytes]) -> int:
        """
        Replace the threshold. Signatures are checked against the old one.

        Returns:
            The previous threshold

        Raises:
            EnforcedPause, MultisigError, MalformedSignature, InvalidThreshold
        """
        with self._governed("updateMultisigThreshold"):
            self._pause.require_not_paused()
            nonce = self._nonces.current(OperationKind.UPDATE_THRESHOLD)
            digest = self._domain.update_threshold_digest(new_threshold, nonce)
            self._validator.validate(digest, signatures)

            signer_count = len(self._registry)
            old = self._threshold.set(new_threshold, signer_count)
            self._nonces.advance(OperationKind.UPDATE_THRESHOLD)

            self._emit(MultisigThresholdUpdatedEvent(old, new_threshold))
            logger.info(f"updateMultisigThreshold: {old} -> {new_threshold}")
            if new_threshold == signer_count:
                logger.warning(
                    f"Threshold now equals signer count ({signer_count}); "
                    f"losing any signer key locks the committee"
                )
            return old

    def pause(self, signatures: Sequence[bytes]) -> None:
        """
        Raises:
            EnforcedPause, MultisigError, MalformedSignature
        """
        with self._governed("pause"):
            self._pause.require_not_paused()
            nonce = self._nonces.current(OperationKind.PAUSE)
            digest = self._domain.pause_digest(nonce)
            self._validator.validate(digest, signatures)

            self._pause.engage()
            self._nonces.advance(OperationKind.PAUSE)

            self._emit(PausedEvent())
            logger.warning(f"pause: {self.symbol} bridge PAUSED")

    def unpause(self, signatures: Sequence[bytes]) -> None:
        """
        Raises:
            ExpectedPause, MultisigError, MalformedSignature
        """
        with self._governed("unpause"):
            self._pause.require_paused()
            nonce = self._nonces.current(OperationKind.UNPAUSE)
            digest = self._domain.unpause_digest(nonce)
            self._validator.validate(digest, signatures)

            self._pause.release()
            self._nonces.advance(OperationKind.UNPAUSE)

            self._emit(UnpausedEvent())
            logger.info(f"unpause: {self.symbol} bridge resumed")

    # ── Token surface ─────────────────────────────────────────────────

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        """Plain balance transfer, blocked while paused."""
        with self._governed("transfer"):
            self._ledger.transfer(sender, recipient, amount)

    # ── Internals ─────────────────────────────────────────────────────

    @contextmanager
    def _governed(self, operation: str) -> Iterator[None]:
        with self._lock:
            try:
                yield
            except (HiveBridgeException, ValueError, TypeError) as e:
                logger.warning(f"{operation} rejected: {type(e).__name__}: {e}")
                raise

    def _emit(self, event: BridgeEvent) -> None:
        self._sink.emit(event)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "contract": self._domain.contract,
            "chainId": self._domain.chain_id,
            "token": self._ledger.to_dict(),
            "threshold": self._threshold.get(),
            "signers": [s.to_dict() for s in self._registry.all()],
            "nonces": self._nonces.snapshot(),
            "paused": self._pause.paused,
            "mintRecords": len(self._minted),
        }

    def __repr__(self) -> str:
        return (
            f"<WrappedHive {self.symbol} signers={len(self._registry)} "
            f"threshold={self._threshold.get()} paused={self._pause.paused}>"
        )
