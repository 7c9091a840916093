"""
Threshold-signature validation.

Given a digest and caller-supplied signatures, accept once ``threshold``
distinct registered signers have been recovered. Signatures are processed in
input order; recovery stops as soon as the threshold is reached. A signer
counted once is never counted again in the same call, so resubmitting one
signature ``threshold`` times does not authorize anything.

The validator never mutates the registry, threshold, or nonces.
"""

from typing import Callable, List, Sequence, Set

from ..crypto.signing import recover_signer
from ..exceptions import InvalidSignatures, NotEnoughSignatures, TooManySignatures
from ..logger import get_logger
from .registry import SignerRegistry
from .threshold import ThresholdPolicy

logger = get_logger(__name__)

RecoverFn = Callable[[bytes, bytes], str]


class MultisigValidator:
    """
    Checks committee approval of a message digest.

    Args:
        registry: Current signer set
        threshold: Current threshold policy
        recover: Signature recovery function, ``(digest, signature) -> address``
    """

    def __init__(
        self,
        registry: SignerRegistry,
        threshold: ThresholdPolicy,
        recover: RecoverFn = recover_signer,
    ):
        self._registry = registry
        self._threshold = threshold
        self._recover = recover

    def validate(self, digest: bytes, signatures: Sequence[bytes]) -> List[str]:
        """
        Validate *signatures* over *digest*.

        Returns:
            The distinct signer addresses that satisfied the threshold, in
            the order they were counted

        Raises:
            NotEnoughSignatures: Fewer signatures than the threshold
            TooManySignatures: More signatures than registered signers
            MalformedSignature: A signature is not 65 recoverable bytes
            InvalidSignatures: Threshold not met by distinct registered signers
        """
        n = len(signatures)
        t = self._threshold.get()
        s = len(self._registry)

        if n < t:
            raise NotEnoughSignatures(f"Got {n} signatures, threshold is {t}")
        if n > s:
            raise TooManySignatures(f"Got {n} signatures, only {s} signers registered")

        seen: Set[str] = set()
        accepted: List[str] = []
        for signature in signatures:
            signer = self._recover(digest, signature)
            if not self._registry.is_signer(signer):
                logger.debug(f"Ignoring signature from non-signer {signer}")
                continue
            if signer in seen:
                logger.debug(f"Ignoring duplicate signature from {signer}")
                continue
            seen.add(signer)
            accepted.append(signer)
            if len(accepted) >= t:
                return accepted

        raise InvalidSignatures(
            f"Only {len(accepted)} distinct valid signatures, threshold is {t}"
        )
