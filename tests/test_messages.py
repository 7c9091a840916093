"""
HiveBridge Message Packing Tests

Checks the byte layout of every governed-operation message against a
hand-built concatenation, so digests stay compatible with signatures
produced by other tooling.
"""

import os
import sys

import pytest

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from eth_utils import keccak

from hivebridge.exceptions import InvalidAddressError
from hivebridge.multisig.messages import MessageDomain, pack_message


CONTRACT = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
ALICE = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
SEP = b";"


def raw(address: str) -> bytes:
    return bytes.fromhex(address[2:])


def u256(value: int) -> bytes:
    return value.to_bytes(32, "big")


@pytest.fixture(scope="module")
def domain():
    return MessageDomain(CONTRACT)


@pytest.fixture(scope="module")
def chain_domain():
    return MessageDomain(CONTRACT, chain_id=31337)


# ══════════════════════════════════════════════════════════════════════
#  LAYOUT
# ══════════════════════════════════════════════════════════════════════

class TestMessageLayout:

    def test_pack_message_delimits_fields(self):
        packed = pack_message("tag", [("uint8", 7), ("string", "x")])
        assert packed == b"tag;\x07;x"

    def test_wrap_layout(self, domain):
        expected = (
            b"wrap" + SEP + raw(ALICE) + SEP + u256(5000) + SEP + b"abc123"
            + SEP + (2).to_bytes(4, "big") + SEP + raw(CONTRACT)
        )
        assert domain.wrap_message(ALICE, 5000, "abc123", 2) == expected

    def test_add_signer_layout(self, domain):
        expected = (
            b"addSigner" + SEP + raw(ALICE) + SEP + b"alice" + SEP + u256(0)
            + SEP + raw(CONTRACT)
        )
        assert domain.add_signer_message(ALICE, "alice", 0) == expected

    def test_remove_signer_layout(self, domain):
        expected = b"removeSigner" + SEP + raw(ALICE) + SEP + u256(3) + SEP + raw(CONTRACT)
        assert domain.remove_signer_message(ALICE, 3) == expected

    def test_update_threshold_layout(self, domain):
        expected = (
            b"updateMultisigThreshold" + SEP + bytes([2]) + SEP + u256(1)
            + SEP + raw(CONTRACT)
        )
        assert domain.update_threshold_message(2, 1) == expected

    def test_pause_layouts(self, domain):
        assert domain.pause_message(4) == b"pause" + SEP + u256(4) + SEP + raw(CONTRACT)
        assert domain.unpause_message(4) == b"unpause" + SEP + u256(4) + SEP + raw(CONTRACT)

    def test_chain_id_is_appended(self, chain_domain):
        expected = b"pause" + SEP + u256(0) + SEP + raw(CONTRACT) + SEP + u256(31337)
        assert chain_domain.pause_message(0) == expected

    def test_lowercase_address_packs_identically(self, domain):
        assert domain.remove_signer_message(ALICE.lower(), 0) == \
            domain.remove_signer_message(ALICE, 0)


# ══════════════════════════════════════════════════════════════════════
#  DIGESTS
# ══════════════════════════════════════════════════════════════════════

class TestDigests:

    def test_digest_is_keccak_of_message(self, domain):
        message = domain.wrap_message(ALICE, 1, "t", 0)
        assert domain.wrap_digest(ALICE, 1, "t", 0) == keccak(message)

    def test_nonce_changes_digest(self, domain):
        assert domain.pause_digest(0) != domain.pause_digest(1)

    def test_operations_are_domain_separated(self, domain):
        assert domain.pause_digest(0) != domain.unpause_digest(0)

    def test_contract_changes_digest(self, domain):
        other = MessageDomain(ALICE)
        assert domain.pause_digest(0) != other.pause_digest(0)

    def test_chain_id_changes_digest(self, domain, chain_domain):
        assert domain.pause_digest(0) != chain_domain.pause_digest(0)
        assert chain_domain.pause_digest(0) != MessageDomain(CONTRACT, 1).pause_digest(0)

    def test_every_digest_is_32_bytes(self, domain):
        digests = [
            domain.wrap_digest(ALICE, 1, "t", 0),
            domain.add_signer_digest(ALICE, "alice", 0),
            domain.remove_signer_digest(ALICE, 0),
            domain.update_threshold_digest(1, 0),
            domain.pause_digest(0),
            domain.unpause_digest(0),
        ]
        assert all(len(d) == 32 for d in digests)
        assert len(set(digests)) == len(digests)


# ══════════════════════════════════════════════════════════════════════
#  ARGUMENT CHECKS
# ══════════════════════════════════════════════════════════════════════

class TestArgumentChecks:

    def test_contract_is_checksummed(self):
        assert MessageDomain(CONTRACT.lower()).contract == CONTRACT

    def test_bad_contract(self):
        with pytest.raises(InvalidAddressError):
            MessageDomain("0xdeadbeef")

    def test_negative_chain_id(self):
        with pytest.raises(ValueError):
            MessageDomain(CONTRACT, chain_id=-1)

    def test_op_in_trx_is_uint32(self, domain):
        domain.wrap_message(ALICE, 1, "t", 2**32 - 1)
        with pytest.raises(ValueError, match="op_in_trx"):
            domain.wrap_message(ALICE, 1, "t", 2**32)

    def test_threshold_is_uint8(self, domain):
        with pytest.raises(ValueError, match="new_threshold"):
            domain.update_threshold_message(256, 0)

    def test_negative_amount(self, domain):
        with pytest.raises(ValueError, match="amount"):
            domain.wrap_message(ALICE, -1, "t", 0)

    def test_bool_is_not_an_integer(self, domain):
        with pytest.raises(TypeError):
            domain.pause_message(True)

    def test_bad_caller(self, domain):
        with pytest.raises(InvalidAddressError):
            domain.wrap_message("alice", 1, "t", 0)

    def test_string_fields_must_be_strings(self, domain):
        with pytest.raises(TypeError, match="trx_id"):
            domain.wrap_message(ALICE, 1, None, 0)
        with pytest.raises(TypeError, match="username"):
            domain.add_signer_message(ALICE, 42, 0)
