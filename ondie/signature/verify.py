"""ECDSA (SHA-384) verification of a reconstructed OnDie signature."""

import logging

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec

from ..errors import SignatureVerificationError

logger = logging.getLogger(__name__)


def verify_signature(der_signature: bytes, data: bytes, public_key) -> None:
    """Verify ``der_signature`` over ``data`` with SHA384withECDSA.

    Raises:
        InvalidSignature: signature does not match the data and key
        SignatureVerificationError: key is not an EC key or the backend
            cannot perform the algorithm
    """
    if not isinstance(public_key, ec.EllipticCurvePublicKey):
        raise SignatureVerificationError(
            f"leaf public key is not an EC key: {type(public_key).__name__}"
        )
    try:
        public_key.verify(der_signature, data, ec.ECDSA(hashes.SHA384()))
    except InvalidSignature:
        raise
    except UnsupportedAlgorithm as e:
        raise SignatureVerificationError(f"algorithm unavailable: {e}") from e
    logger.debug("ECDSA signature verified on curve %s", public_key.curve.name)


def is_valid_signature(der_signature: bytes, data: bytes, public_key) -> bool:
    """Boolean form of verify_signature; any failure yields False."""
    try:
        verify_signature(der_signature, data, public_key)
    except (InvalidSignature, SignatureVerificationError):
        return False
    return True


__all__ = ["verify_signature", "is_valid_signature"]
