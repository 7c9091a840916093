"""
HiveBridge Component Tests

Balance ledger, mint ledger, pause gate, event sink and the logging
formatter, exercised on their own.
"""

import logging
import os
import sys

import pytest

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from hivebridge.bridge import (
    BalanceLedger,
    EventLog,
    MintLedger,
    PauseGate,
    PausedEvent,
    TransferEvent,
    WrapEvent,
)
from hivebridge import constants
from hivebridge.constants import ZERO_ADDRESS, ConfigBool, ConfigString, parse_bool
from hivebridge.exceptions import (
    AlreadyMinted,
    EnforcedPause,
    ExpectedPause,
    HiveBridgeException,
    InsufficientBalance,
    MustBeNonZero,
    PauseError,
)
from hivebridge.logger import TerminalSafeFormatter, get_logger


ALICE = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
BOB = "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC"


# ══════════════════════════════════════════════════════════════════════
#  BALANCE LEDGER
# ══════════════════════════════════════════════════════════════════════

class TestBalanceLedger:

    def test_credit_and_debit(self):
        sink = EventLog()
        ledger = BalanceLedger(sink=sink)
        ledger.credit(ALICE.lower(), 500)
        ledger.debit(ALICE, 200)
        assert ledger.balance_of(ALICE) == 300
        assert ledger.total_supply == 300
        assert [e.to_dict()["to"] for e in sink.of_kind("Transfer")] == [ALICE, ZERO_ADDRESS]

    def test_debit_more_than_balance(self):
        ledger = BalanceLedger()
        ledger.credit(ALICE, 10)
        with pytest.raises(InsufficientBalance):
            ledger.debit(ALICE, 11)
        assert ledger.total_supply == 10

    def test_zero_amounts(self):
        ledger = BalanceLedger()
        with pytest.raises(MustBeNonZero):
            ledger.credit(ALICE, 0)
        ledger.transfer(ALICE, BOB, 0)

    @pytest.mark.parametrize("amount,exc", [(-1, ValueError), (1.5, TypeError), (True, TypeError)])
    def test_bad_amounts(self, amount, exc):
        with pytest.raises(exc):
            BalanceLedger().credit(ALICE, amount)

    def test_transfer_to_zero_address(self):
        ledger = BalanceLedger()
        ledger.credit(ALICE, 10)
        with pytest.raises(HiveBridgeException):
            ledger.transfer(ALICE, ZERO_ADDRESS, 1)

    def test_guard_blocks_transfer(self):
        gate = PauseGate(paused=True)
        ledger = BalanceLedger(guard=gate.require_not_paused)
        ledger.credit(ALICE, 10)
        with pytest.raises(EnforcedPause):
            ledger.transfer(ALICE, BOB, 1)
        ledger.set_guard(None)
        ledger.transfer(ALICE, BOB, 1)
        assert ledger.balance_of(BOB) == 1

    def test_bad_metadata(self):
        with pytest.raises(HiveBridgeException):
            BalanceLedger(decimals=19)

    def test_to_dict(self):
        ledger = BalanceLedger()
        ledger.credit(ALICE, 1000)
        data = ledger.to_dict()
        assert data["symbol"] == "WHIVE"
        assert data["totalSupply"] == "1000"
        assert data["holders"] == 1


# ══════════════════════════════════════════════════════════════════════
#  MINT LEDGER & PAUSE GATE
# ══════════════════════════════════════════════════════════════════════

class TestMintLedger:

    def test_record_once(self):
        minted = MintLedger()
        minted.record("tx", 0)
        assert minted.is_minted("tx", 0)
        assert not minted.is_minted("tx", 1)
        assert not minted.is_minted("TX", 0)
        with pytest.raises(AlreadyMinted):
            minted.record("tx", 0)
        assert len(minted) == 1

    def test_op_index_range(self):
        with pytest.raises(ValueError):
            MintLedger().record("tx", 2**32)


class TestPauseGate:

    def test_transitions(self):
        gate = PauseGate()
        gate.require_not_paused()
        with pytest.raises(ExpectedPause):
            gate.release()
        gate.engage()
        assert gate.paused
        with pytest.raises(EnforcedPause):
            gate.engage()
        gate.release()
        assert not gate.paused

    def test_errors_share_base(self):
        assert issubclass(EnforcedPause, PauseError)
        assert issubclass(ExpectedPause, PauseError)


# ══════════════════════════════════════════════════════════════════════
#  EVENTS & LOGGING
# ══════════════════════════════════════════════════════════════════════

class TestEvents:

    def test_kind_and_dict(self):
        event = WrapEvent(ALICE, 5, "tx", 1)
        assert event.kind == "Wrap"
        assert event.to_dict() == {
            "event": "Wrap", "to": ALICE, "amount": "5", "trxId": "tx", "opInTrx": 1,
        }

    def test_equality_ignores_timestamp(self):
        assert TransferEvent(ALICE, BOB, 1) == TransferEvent(ALICE, BOB, 1, timestamp=0.0)

    def test_event_log_order(self):
        sink = EventLog()
        sink.emit(PausedEvent())
        sink.emit(TransferEvent(ALICE, BOB, 1))
        assert [e.kind for e in sink.events] == ["Paused", "Transfer"]
        assert sink.last().kind == "Transfer"
        assert sink.last("Unwrap") is None


class TestLogging:

    def test_sanitize_strips_escapes(self):
        dirty = "user\x1b[31mred\x1b[0m\r\x07name"
        assert TerminalSafeFormatter.sanitize(dirty) == "userredname"

    def test_formatter_keeps_newlines(self):
        formatter = TerminalSafeFormatter(fmt="%(message)s")
        record = logging.LogRecord("t", logging.INFO, "", 0, "a\nb\x1b[2J", (), None)
        assert formatter.format(record) == "a\nb"

    def test_parse_bool(self):
        assert parse_bool(" true ") is True
        assert parse_bool("False") is False
        assert parse_bool("INFO") == "INFO"

    def test_env_settings_keep_defaults(self):
        assert isinstance(constants.LOG_FILE_OUTPUT, ConfigBool)
        assert constants.LOG_FILE_OUTPUT.default() is False
        assert isinstance(constants.LOG_LEVEL, ConfigString)
        assert constants.LOG_LEVEL.default() == "INFO"

    def test_loggers_live_under_package(self):
        logger = get_logger("hivebridge.bridge.wrapped")
        assert logger.name.startswith("hivebridge")
        assert logging.getLogger("hivebridge").handlers
