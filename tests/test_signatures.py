"""
HiveBridge Cryptography Test Suite

Coverage:
- secp256k1 keys and address derivation
- 65-byte recoverable signatures (wire form, v normalization, malleability)
- Signature recovery used by the committee validator

Run with:
    pytest tests/test_signatures.py -v
"""

import os
import sys

import pytest

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from eth_utils import keccak

from hivebridge.crypto import (
    PrivateKey,
    PublicKey,
    Signature,
    is_valid_address,
    is_zero_address,
    keccak256,
    public_key_to_address,
    recover_public_key,
    recover_signer,
    sign_digest,
    to_checksum_address,
)
from hivebridge.crypto.keys import SECP256K1_N
from hivebridge.constants import ZERO_ADDRESS
from hivebridge.exceptions import InvalidAddressError, InvalidKeyError, MalformedSignature


# ══════════════════════════════════════════════════════════════════════
#  HELPERS
# ══════════════════════════════════════════════════════════════════════

# Hardhat's well-known development accounts
HARDHAT_KEYS = [
    ("0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80",
     "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"),
    ("0x59c6995e998f97a5a0044966f0945389dc9e86dae88c7a8412f4603b6b78690d",
     "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"),
    ("0x5de4111afa1a4b94908f83103eb1f1706367c2e68ca870fc3fb9a804cdab365a",
     "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC"),
    ("0x7c852118294e51e653712a81e05800f419141751be58f605c371e15141b007a6",
     "0x90F79bf6EB2c4f870365E785982E1f101E93b906"),
]

DIGEST = keccak(b"hivebridge test digest")


@pytest.fixture(scope="module")
def operator_key():
    return PrivateKey.from_hex(HARDHAT_KEYS[0][0])


# ══════════════════════════════════════════════════════════════════════
#  KEYS & ADDRESSES
# ══════════════════════════════════════════════════════════════════════

class TestKeys:

    @pytest.mark.parametrize("key_hex,address", HARDHAT_KEYS)
    def test_hardhat_address_derivation(self, key_hex, address):
        assert PrivateKey.from_hex(key_hex).address == address

    def test_from_hex_without_prefix(self):
        key_hex, address = HARDHAT_KEYS[1]
        assert PrivateKey.from_hex(key_hex[2:]).address == address

    def test_reject_short_key(self):
        with pytest.raises(InvalidKeyError, match="32 bytes"):
            PrivateKey(b"\x01" * 31)

    def test_reject_non_hex_key(self):
        with pytest.raises(InvalidKeyError):
            PrivateKey.from_hex("0xnothex")

    def test_public_key_from_bytes(self, operator_key):
        raw = operator_key.public_key.to_bytes()
        assert len(raw) == 64
        assert PublicKey(raw) == operator_key.public_key
        assert PublicKey(b"\x04" + raw) == operator_key.public_key

    def test_public_key_bad_length(self):
        with pytest.raises(InvalidKeyError):
            PublicKey(b"\x01" * 33)

    def test_repr_hides_private_key(self, operator_key):
        assert HARDHAT_KEYS[0][0][2:] not in repr(operator_key)


class TestAddresses:

    def test_checksum_lowercase_input(self):
        addr = HARDHAT_KEYS[0][1]
        assert to_checksum_address(addr.lower()) == addr

    def test_checksum_from_bytes(self):
        addr = HARDHAT_KEYS[0][1]
        assert to_checksum_address(bytes.fromhex(addr[2:])) == addr

    def test_reject_bad_checksum(self):
        addr = HARDHAT_KEYS[0][1]
        broken = addr[:2] + addr[2:].swapcase()
        with pytest.raises(InvalidAddressError):
            to_checksum_address(broken)

    def test_reject_wrong_length(self):
        with pytest.raises(InvalidAddressError):
            to_checksum_address("0x1234")

    def test_reject_non_string(self):
        with pytest.raises(InvalidAddressError):
            to_checksum_address(12345)

    def test_zero_address(self):
        assert is_zero_address(ZERO_ADDRESS)
        assert not is_zero_address(HARDHAT_KEYS[0][1])

    def test_public_key_to_address(self, operator_key):
        assert public_key_to_address(operator_key.public_key) == HARDHAT_KEYS[0][1]
        with pytest.raises(InvalidAddressError):
            public_key_to_address(b"\x01" * 33)

    def test_is_valid_address(self):
        assert is_valid_address(HARDHAT_KEYS[2][1])
        assert not is_valid_address("bob")
        assert not is_valid_address(None)


class TestHashing:

    def test_keccak_empty(self):
        assert keccak256(b"").hex() == (
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )

    def test_keccak_hex_input(self):
        assert keccak256("0x") == keccak256(b"")


# ══════════════════════════════════════════════════════════════════════
#  SIGNATURES
# ══════════════════════════════════════════════════════════════════════

class TestSignatureEncoding:

    def test_wire_form_is_65_bytes(self, operator_key):
        sig = sign_digest(operator_key, DIGEST)
        assert len(sig) == 65
        assert sig[64] in (27, 28)

    def test_signing_is_deterministic(self, operator_key):
        assert sign_digest(operator_key, DIGEST) == sign_digest(operator_key, DIGEST)

    def test_low_s(self, operator_key):
        sig = Signature.from_bytes(sign_digest(operator_key, DIGEST))
        assert sig.s <= SECP256K1_N // 2

    def test_from_bytes_accepts_v_0_and_1(self, operator_key):
        wire = sign_digest(operator_key, DIGEST)
        raw_v = bytes(wire[:64]) + bytes([wire[64] - 27])
        assert Signature.from_bytes(raw_v) == Signature.from_bytes(wire)

    def test_hex_roundtrip_preserves_v(self, operator_key):
        sig = operator_key.sign_msg_hash(DIGEST)
        assert Signature.from_hex(sig.to_hex()) == sig

    @pytest.mark.parametrize("length", [0, 64, 66, 130])
    def test_wrong_length_is_malformed(self, length):
        with pytest.raises(MalformedSignature, match="65 bytes"):
            Signature.from_bytes(b"\x01" * length)

    def test_non_bytes_is_malformed(self):
        with pytest.raises(MalformedSignature):
            Signature.from_bytes("0x" + "00" * 65)

    @pytest.mark.parametrize("v", [2, 26, 29, 255])
    def test_bad_recovery_id(self, operator_key, v):
        wire = sign_digest(operator_key, DIGEST)
        with pytest.raises(MalformedSignature, match="recovery id"):
            Signature.from_bytes(bytes(wire[:64]) + bytes([v]))

    def test_high_s_rejected(self, operator_key):
        sig = Signature.from_bytes(sign_digest(operator_key, DIGEST))
        high_s = SECP256K1_N - sig.s
        flipped_v = 28 if sig.v == 0 else 27
        wire = sig.r.to_bytes(32, "big") + high_s.to_bytes(32, "big") + bytes([flipped_v])
        with pytest.raises(MalformedSignature, match="lower half"):
            Signature.from_bytes(wire)

    @pytest.mark.parametrize("r", [SECP256K1_N, 2**256 - 1])
    def test_r_out_of_range_is_malformed(self, r):
        wire = r.to_bytes(32, "big") + (1).to_bytes(32, "big") + bytes([27])
        with pytest.raises(MalformedSignature, match="r value"):
            Signature.from_bytes(wire)
        with pytest.raises(MalformedSignature):
            recover_signer(DIGEST, wire)

    def test_sign_requires_32_byte_digest(self, operator_key):
        with pytest.raises(ValueError):
            operator_key.sign_msg_hash(b"short")


class TestRecovery:

    @pytest.mark.parametrize("key_hex,address", HARDHAT_KEYS)
    def test_recover_signer(self, key_hex, address):
        sig = sign_digest(PrivateKey.from_hex(key_hex), DIGEST)
        assert recover_signer(DIGEST, sig) == address

    def test_recover_from_signature_object(self, operator_key):
        sig = operator_key.sign_msg_hash(DIGEST)
        assert recover_signer(DIGEST, sig) == operator_key.address

    def test_recover_public_key(self, operator_key):
        sig = sign_digest(operator_key, DIGEST)
        assert recover_public_key(DIGEST, sig) == operator_key.public_key

    def test_other_digest_recovers_other_address(self, operator_key):
        sig = sign_digest(operator_key, DIGEST)
        other = keccak(b"another message")
        assert recover_signer(other, sig) != operator_key.address

    def test_recover_rejects_short_digest(self, operator_key):
        sig = sign_digest(operator_key, DIGEST)
        with pytest.raises(ValueError):
            recover_signer(b"\x00" * 31, sig)

