"""
HiveBridge Crypto Signing Module

Signature recovery for committee approvals. Stateless: a 65-byte
recoverable signature plus a 32-byte digest yields the signer's address.
Whether that address belongs to the committee is decided by the multisig
validator, not here.
"""

from typing import Union

from ..constants import DIGEST_LENGTH
from .keys import PrivateKey, PublicKey, Signature


def sign_digest(private_key: PrivateKey, digest: bytes) -> bytes:
    """
    Sign a 32-byte digest and return the 65-byte wire signature.

    Args:
        private_key: Operator key
        digest: Keccak-256 digest of a canonical message

    Returns:
        r || s || v with v in {27, 28}
    """
    return private_key.sign_msg_hash(digest).to_bytes()


def recover_public_key(digest: bytes, signature: Union[bytes, Signature]) -> PublicKey:
    """
    Recover the public key that produced *signature* over *digest*.

    Raises:
        MalformedSignature: On a wrong-length or unrecoverable signature
    """
    if len(digest) != DIGEST_LENGTH:
        raise ValueError(f"Digest must be {DIGEST_LENGTH} bytes, got {len(digest)}")
    if not isinstance(signature, Signature):
        signature = Signature.from_bytes(signature)
    return PublicKey.recover_from_msg_hash(digest, signature)


def recover_signer(digest: bytes, signature: Union[bytes, Signature]) -> str:
    """
    Recover the checksum address of the signer.

    The result may be any address; unregistered signers are filtered by
    the caller.
    """
    return recover_public_key(digest, signature).to_address()

